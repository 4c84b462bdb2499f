from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    STORAGE = "storage"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


_DEFAULT_MESSAGES = {
    ErrorKind.STORAGE: "Database error",
    ErrorKind.INTERNAL: "Internal error",
    ErrorKind.UNKNOWN: "Unknown error",
}


class StoreError(RuntimeError):
    """
    Raised while a storage backend is being initialized (schema setup, statement
    checks). Steady-state reads/writes never raise this; they degrade to "no effect".
    """
    def __init__(self, kind: ErrorKind = ErrorKind.UNKNOWN, message: Optional[str] = None) -> None:
        self.kind = kind
        self.message = message or _DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"
