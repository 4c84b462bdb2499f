# spellcore/DB/memory_store.py
from __future__ import annotations
from typing import Dict, List, Optional
from .api import TermStore


class MemoryStore(TermStore):
    """
    Map-backed reference store.
    set_frequency() overwrites; the index does its own accumulation before calling it.
    Readers never mutate the maps, so concurrent lookups are safe; writers must be serialized
    by the caller.
    """
    def __init__(self) -> None:
        self._deletes: Dict[int, List[str]] = {}
        self._words: Dict[str, int] = {}

    # ---- Deletes ----
    def add_delete(self, delete_hash: int, term: str) -> None:
        self._deletes.setdefault(int(delete_hash), []).append(term)

    def get_terms(self, delete_hash: int) -> List[str]:
        return list(self._deletes.get(int(delete_hash), ()))

    # ---- Terms ----
    def set_frequency(self, term: str, frequency: int) -> None:
        self._words[term] = int(frequency)

    def get_frequency(self, term: str) -> Optional[int]:
        return self._words.get(term)

    def term_exists(self, term: str) -> bool:
        return term in self._words

    def count(self) -> int:
        return len(self._words)

    def max_term_length(self) -> int:
        return max(map(len, self._words), default=0)

    # ---- lifecycle ----
    def close(self) -> None:
        self._deletes.clear()
        self._words.clear()
