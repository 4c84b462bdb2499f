"""Symmetric-delete spelling correction: public API."""
from __future__ import annotations
from .engine import Engine
from .models import Suggestion, Verbosity
from .errors import ErrorKind, StoreError
from .distance import damerau_osa
from .search import lookup
from .DB.api import TermStore, make_store
from .DB.index import DeleteIndex
from .DB.memory_store import MemoryStore
from .DB.sqlite_store import SQLiteStore

__all__ = [
    "Engine",
    "Suggestion",
    "Verbosity",
    "ErrorKind",
    "StoreError",
    "damerau_osa",
    "lookup",
    "TermStore",
    "make_store",
    "DeleteIndex",
    "MemoryStore",
    "SQLiteStore",
]
