# spellcore/engine.py
from __future__ import annotations

import os
import logging
from contextlib import nullcontext
from typing import Iterable, List, Optional, Tuple

from . import config as CFG
from .models import Suggestion, Verbosity
from .loader import load_dictionaries
from .search import lookup
from .DB.api import TermStore, make_store
from .DB.index import DeleteIndex

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - term storage via a TermStore (SQLite or in-memory),
      - the symmetric-delete index (DeleteIndex),
      - the lookup pipeline (search.lookup).

    Public API (used by the CLI and the GUI):
      * build(paths, ...): load frequency dictionaries -> ingest -> attach store
      * load(db_dsn=...):  attach an already-filled (or empty) store
      * ingest(term, count) / ingest_many(pairs)
      * lookup(query, verbosity, max_edit_distance): ranked suggestions
      * shutdown():        close underlying resources

    Storage DSNs (via spellcore.DB.api.make_store):
      - "sqlite:///path/to/dictionary.sqlite"
      - "memory://"
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        *,
        max_edit_distance: Optional[int] = None,
        prefix_length: Optional[int] = None,
        count_threshold: Optional[int] = None,
    ) -> None:
        self.max_edit_distance = CFG.MAX_EDIT_DISTANCE if max_edit_distance is None else int(max_edit_distance)
        self.prefix_length = CFG.PREFIX_LENGTH if prefix_length is None else int(prefix_length)
        self.count_threshold = CFG.COUNT_THRESHOLD if count_threshold is None else int(count_threshold)
        self.index: Optional[DeleteIndex] = None
        self._store: Optional[TermStore] = None

    # /* ~~~ Build a dictionary from frequency files and wire up storage ~~~ */
    def build(
        self,
        paths: Iterable[str],
        *,
        db_dsn: Optional[str] = None,          # e.g., "sqlite:///./dict.sqlite" or "memory://"
        term_index: int = 0,
        count_index: int = 1,
        separator: Optional[str] = None,
        verbose: bool = False,
    ) -> int:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["SPELLCORE_VERBOSE"] = "1"

        paths = list(paths)
        if not paths:
            raise ValueError("build(): at least one dictionary file or folder is required")

        self._open(db_dsn or CFG.DEFAULT_DSN)

        log.info("Loading dictionaries from %s", paths)
        pairs = load_dictionaries(
            paths, term_index=term_index, count_index=count_index, separator=separator
        )
        admitted = self.ingest_many(pairs)
        log.info(
            "Engine build() complete: admitted=%d terms=%d pending=%d",
            admitted, self._store.count(), self.index.pending_terms,
        )
        return admitted

    # /* ~~~ Attach an existing store (no files read) ~~~ */
    def load(self, *, db_dsn: Optional[str] = None, verbose: bool = False) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["SPELLCORE_VERBOSE"] = "1"

        self._open(db_dsn or CFG.DEFAULT_DSN)
        # a reopened database knows its terms but not the longest one
        self.index.seed_max_word_length()
        log.info("Engine load() complete: terms=%d", self._store.count())

    # ------------- ingest -------------

    def ingest(self, term: str, count: int = 1) -> bool:
        return self._require_index().create_dictionary_entry(term, count)

    def ingest_many(self, pairs: Iterable[Tuple[str, int]]) -> int:
        """Ingest pairs inside one store transaction when the backend supports it."""
        index = self._require_index()
        transaction = getattr(self._store, "transaction", None)
        admitted = 0
        with (transaction() if callable(transaction) else nullcontext()):
            for term, count in pairs:
                if index.create_dictionary_entry(term, count):
                    admitted += 1
        return admitted

    # ------------- query -------------

    # /* ~~~ Spelling suggestions for a single term ~~~ */
    def lookup(
        self,
        query: str,
        verbosity: Verbosity | str = CFG.DEFAULT_VERBOSITY,
        max_edit_distance: Optional[int] = None,
    ) -> List[Suggestion]:
        return lookup(query, self._require_index(), verbosity, max_edit_distance)

    # ------------- teardown -------------

    # /* ~~~ Close underlying resources (DB handles, etc.) ~~~ */
    def shutdown(self) -> None:
        try:
            if self._store:
                self._store.close()
        finally:
            self._store = None
            self.index = None
            log.info("Engine shutdown complete")

    # ------------- internals -------------

    def _open(self, dsn: str) -> None:
        if self._store is not None:
            self.shutdown()
        log.info("Initializing term store: %s", dsn)
        store = make_store(dsn)
        try:
            index = DeleteIndex(
                store,
                max_edit_distance=self.max_edit_distance,
                prefix_length=self.prefix_length,
                count_threshold=self.count_threshold,
            )
        except ValueError:
            store.close()
            raise
        self._store = store
        self.index = index

    def _require_index(self) -> DeleteIndex:
        if self.index is None:
            raise RuntimeError("Engine not initialized. Call build() or load() first.")
        return self.index
