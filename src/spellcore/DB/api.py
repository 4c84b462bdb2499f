# spellcore/DB/api.py
from __future__ import annotations
import os
from typing import Protocol, List, Optional


class TermStore(Protocol):
    # Deletes (inverted index: delete-hash -> terms)
    def add_delete(self, delete_hash: int, term: str) -> None: ...
    def get_terms(self, delete_hash: int) -> List[str]: ...
    # Terms (term -> frequency)
    def set_frequency(self, term: str, frequency: int) -> None: ...
    def get_frequency(self, term: str) -> Optional[int]: ...
    def term_exists(self, term: str) -> bool: ...
    # Introspection
    def count(self) -> int: ...
    def max_term_length(self) -> int: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(dsn: str) -> TermStore:
    """
    Factory:
      - sqlite:///path      -> SQLiteStore (schema is created if missing)
      - sqlite:///:memory:  -> SQLiteStore on a private in-memory database
      - memory://           -> MemoryStore
    """
    if dsn.startswith("sqlite:///"):
        path = dsn.removeprefix("sqlite:///")
        if not path:
            raise ValueError(f"Missing database path in DSN: {dsn}")
        if path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

        from .sqlite_store import SQLiteStore
        return SQLiteStore.open(path)

    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore()

    raise ValueError(f"Unsupported store DSN: {dsn}")
