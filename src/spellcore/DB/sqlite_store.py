# spellcore/DB/sqlite_store.py
from __future__ import annotations
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Optional
from .api import TermStore
from .. import config as CFG
from ..errors import ErrorKind, StoreError

log = logging.getLogger(__name__)

# Table/column names are shared with existing symspell databases; keep them stable.
_CREATE_TERMS = """
CREATE TABLE IF NOT EXISTS symspell_terms (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  term TEXT UNIQUE NOT NULL,
  frequency INTEGER DEFAULT 1
)
"""

_CREATE_DELETES = """
CREATE TABLE IF NOT EXISTS symspell_deletes (
  delete_hash INTEGER NOT NULL,
  term_id INTEGER NOT NULL,
  FOREIGN KEY (term_id) REFERENCES symspell_terms(id) ON DELETE CASCADE,
  PRIMARY KEY (delete_hash, term_id)
) WITHOUT ROWID
"""

_CREATE_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_symspell_terms_term ON symspell_terms(term)",
    "CREATE INDEX IF NOT EXISTS idx_symspell_deletes_hash ON symspell_deletes(delete_hash)",
)

# The fixed statement set; sqlite3's statement cache keeps them prepared.
_SET_FREQUENCY = (
    "INSERT INTO symspell_terms (term, frequency) VALUES (?, ?) "
    "ON CONFLICT(term) DO UPDATE SET frequency = frequency + excluded.frequency"
)
_ADD_DELETE = (
    "INSERT OR IGNORE INTO symspell_deletes (delete_hash, term_id) "
    "VALUES (?, (SELECT id FROM symspell_terms WHERE term = ?))"
)
_GET_TERMS = (
    "SELECT t.term FROM symspell_terms t "
    "INNER JOIN symspell_deletes d ON t.id = d.term_id "
    "WHERE d.delete_hash = ?"
)
_GET_FREQUENCY = "SELECT frequency FROM symspell_terms WHERE term = ?"
_TERM_EXISTS = "SELECT 1 FROM symspell_terms WHERE term = ? LIMIT 1"
_COUNT = "SELECT COUNT(*) FROM symspell_terms"
_MAX_LENGTH = "SELECT MAX(LENGTH(term)) FROM symspell_terms"

_STATEMENTS = {
    "set_frequency": (_SET_FREQUENCY, ("", 0)),
    "add_delete": (_ADD_DELETE, (0, "")),
    "get_terms": (_GET_TERMS, (0,)),
    "get_frequency": (_GET_FREQUENCY, ("",)),
    "term_exists": (_TERM_EXISTS, ("",)),
}


def _error_kind(exc: sqlite3.Error) -> ErrorKind:
    if isinstance(exc, sqlite3.ProgrammingError):
        return ErrorKind.INTERNAL
    return ErrorKind.STORAGE


class SQLiteStore(TermStore):
    """
    Relational store on a single sqlite3 connection.

    Unlike MemoryStore, set_frequency() ADDS to an existing row (upsert with
    frequency = frequency + excluded.frequency). The index already accumulates
    before calling it, so updates of an indexed term are counted twice here.

    Not safe for use from several threads on the same connection.
    """
    def __init__(self, conn: sqlite3.Connection, *, owns_connection: bool = False) -> None:
        self.conn = conn
        self._owns_connection = owns_connection
        self._in_transaction = False
        self._prepare_statements()

    @classmethod
    def open(cls, path: str) -> "SQLiteStore":
        """Connect to `path`, create the schema if needed and wrap the connection."""
        conn = sqlite3.connect(path, isolation_level=None)
        try:
            cls.initialize_database(conn)
            return cls(conn, owns_connection=True)
        except Exception:
            conn.close()
            raise

    # ---- Schema ----
    @staticmethod
    def initialize_database(conn: sqlite3.Connection) -> None:
        """Create tables (fatal on failure) and lookup indexes (logged on failure)."""
        for name, sql in (("terms table", _CREATE_TERMS), ("deletes table", _CREATE_DELETES)):
            try:
                conn.execute(sql)
            except sqlite3.Error as exc:
                raise StoreError(_error_kind(exc), f"Failed to create {name}: {exc}") from exc
        for sql in _CREATE_INDEXES:
            try:
                conn.execute(sql)
            except sqlite3.Error as exc:
                log.warning("Failed to create index (%s): %s", sql, exc)
        if conn.in_transaction:
            conn.commit()

    def _prepare_statements(self) -> None:
        # EXPLAIN compiles a statement without running it
        for name, (sql, params) in _STATEMENTS.items():
            try:
                self.conn.execute(f"EXPLAIN {sql}", params).fetchall()
            except sqlite3.Error as exc:
                raise StoreError(
                    _error_kind(exc), f"Failed to prepare {name} statement: {exc}"
                ) from exc

    # ---- Deletes ----
    def add_delete(self, delete_hash: int, term: str) -> None:
        try:
            self.conn.execute(_ADD_DELETE, (int(delete_hash), term))
            self._autocommit()
        except sqlite3.Error as exc:
            log.warning("add_delete(%d, %r) failed: %s", delete_hash, term, exc)

    def get_terms(self, delete_hash: int) -> List[str]:
        try:
            rows = self.conn.execute(_GET_TERMS, (int(delete_hash),)).fetchall()
        except sqlite3.Error as exc:
            log.warning("get_terms(%d) failed: %s", delete_hash, exc)
            return []
        return [r[0] for r in rows if r[0] is not None]

    # ---- Terms ----
    def set_frequency(self, term: str, frequency: int) -> None:
        try:
            self.conn.execute(_SET_FREQUENCY, (term, int(frequency)))
            self._autocommit()
        except sqlite3.Error as exc:
            log.warning("set_frequency(%r) failed: %s", term, exc)

    def get_frequency(self, term: str) -> Optional[int]:
        try:
            row = self.conn.execute(_GET_FREQUENCY, (term,)).fetchone()
        except sqlite3.Error as exc:
            log.warning("get_frequency(%r) failed: %s", term, exc)
            return None
        if row is None:
            return None
        # an upsert past INT64_MAX leaves a REAL in the column
        return min(CFG.INT64_MAX, int(row[0]))

    def term_exists(self, term: str) -> bool:
        try:
            return self.conn.execute(_TERM_EXISTS, (term,)).fetchone() is not None
        except sqlite3.Error as exc:
            log.warning("term_exists(%r) failed: %s", term, exc)
            return False

    def count(self) -> int:
        try:
            return int(self.conn.execute(_COUNT).fetchone()[0])
        except sqlite3.Error as exc:
            log.warning("count() failed: %s", exc)
            return 0

    def max_term_length(self) -> int:
        try:
            value = self.conn.execute(_MAX_LENGTH).fetchone()[0]
        except sqlite3.Error as exc:
            log.warning("max_term_length() failed: %s", exc)
            return 0
        return int(value or 0)

    # ---- Transactions (backend-specific, not part of TermStore) ----
    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def begin(self) -> None:
        if self._in_transaction:
            log.debug("begin() ignored: transaction already open")
            return
        try:
            if self.conn.in_transaction:
                self.conn.commit()
            self.conn.execute("BEGIN")
        except sqlite3.Error as exc:
            log.warning("Failed to begin transaction: %s", exc)
        else:
            self._in_transaction = True

    def commit(self) -> None:
        if not self._in_transaction:
            return
        try:
            self.conn.commit()
        except sqlite3.Error as exc:
            log.warning("Failed to commit transaction, rolling back: %s", exc)
            self.conn.rollback()
        finally:
            self._in_transaction = False

    def rollback(self) -> None:
        if not self._in_transaction:
            return
        try:
            self.conn.rollback()
        finally:
            self._in_transaction = False

    @contextmanager
    def transaction(self) -> Iterator["SQLiteStore"]:
        """begin() ... commit(); rollback() on error. Nested use joins the open transaction."""
        started = not self._in_transaction
        if started:
            self.begin()
        try:
            yield self
        except BaseException:
            if started:
                self.rollback()
            raise
        else:
            if started:
                self.commit()

    def _autocommit(self) -> None:
        # connections opened outside open() may use implicit transactions
        if not self._in_transaction and self.conn.in_transaction:
            self.conn.commit()

    # ---- lifecycle ----
    def close(self) -> None:
        if self._in_transaction:
            log.warning("Closing store with an open transaction; rolling back")
            self.rollback()
        if self._owns_connection:
            self.conn.close()
