from __future__ import annotations
import logging
from typing import Dict, List, Optional
from .api import TermStore
from ..deletes import edits_prefix, string_hash
from .. import config as CFG

log = logging.getLogger(__name__)


def _saturating_add(a: int, b: int) -> int:
    return min(CFG.INT64_MAX, a + b)


class DeleteIndex:
    """
    Symmetric-delete dictionary over a TermStore.

    Every admitted term is registered under the hash of each of its prefix deletion
    variants, so a lookup only has to hash the query's own deletions and probe.

    Terms whose accumulated count is still below `count_threshold` are kept in a
    per-instance side table and are invisible to lookups until promoted.
    """
    def __init__(
        self,
        store: TermStore,
        *,
        max_edit_distance: int = CFG.MAX_EDIT_DISTANCE,
        prefix_length: int = CFG.PREFIX_LENGTH,
        count_threshold: int = CFG.COUNT_THRESHOLD,
    ) -> None:
        if max_edit_distance < 0:
            raise ValueError("max_edit_distance cannot be negative")
        if prefix_length < 1:
            raise ValueError("prefix_length must be at least 1")
        if prefix_length <= max_edit_distance:
            raise ValueError("prefix_length must be greater than max_edit_distance")
        if count_threshold < 0:
            raise ValueError("count_threshold cannot be negative")

        self.store = store
        self.max_edit_distance = int(max_edit_distance)
        self.prefix_length = int(prefix_length)
        self.count_threshold = int(count_threshold)
        self.max_word_length: int = 0   # 0 = unknown (nothing admitted / not seeded)
        self._below_threshold: Dict[str, int] = {}

    # ---- Build ----
    def create_dictionary_entry(self, term: str, count: int = 1) -> bool:
        """
        Add `count` occurrences of `term`.
        Returns True only when this call admits the term into the index.
        """
        if count <= 0:
            return False

        pending = self._below_threshold.get(term)
        if pending is not None:
            count = _saturating_add(pending, count)
            if count < self.count_threshold:
                self._below_threshold[term] = count
                return False
            del self._below_threshold[term]
        else:
            stored = self.store.get_frequency(term)
            if stored is not None:
                # already indexed: frequency update only
                self.store.set_frequency(term, _saturating_add(stored, count))
                return False
            if count < self.count_threshold:
                self._below_threshold[term] = min(CFG.INT64_MAX, count)
                return False

        self._admit(term, min(CFG.INT64_MAX, count))
        return True

    def _admit(self, term: str, frequency: int) -> None:
        self.store.set_frequency(term, frequency)
        if len(term) > self.max_word_length:
            self.max_word_length = len(term)
        for variant in self.edits_prefix(term):
            self.store.add_delete(string_hash(variant), term)

    def edits_prefix(self, term: str) -> List[str]:
        return edits_prefix(term, self.max_edit_distance, self.prefix_length)

    # ---- Introspection ----
    def pending_count(self, term: str) -> Optional[int]:
        """Accumulated count of a below-threshold term, None if it is not pending."""
        return self._below_threshold.get(term)

    @property
    def pending_terms(self) -> int:
        return len(self._below_threshold)

    def seed_max_word_length(self) -> None:
        """Pick up the longest stored term (for stores that were filled elsewhere)."""
        longest = self.store.max_term_length()
        if longest > self.max_word_length:
            self.max_word_length = longest
            log.info("Longest stored term: %d characters", longest)
