# src/e2e/test_sqlite_store.py

import logging
import sqlite3
import pytest

from spellcore import config as CFG
from spellcore.DB.api import make_store
from spellcore.DB.index import DeleteIndex
from spellcore.DB.memory_store import MemoryStore
from spellcore.DB.sqlite_store import SQLiteStore
from spellcore.deletes import string_hash
from spellcore.errors import ErrorKind, StoreError
from spellcore.models import Verbosity
from spellcore.search import lookup


@pytest.fixture
def store():
    s = SQLiteStore.open(":memory:")
    yield s
    s.close()


def test_schema_tables_exist(store):
    names = {r[0] for r in store.conn.execute("SELECT name FROM sqlite_master")}
    assert {"symspell_terms", "symspell_deletes",
            "idx_symspell_terms_term", "idx_symspell_deletes_hash"} <= names


def test_basic_lookup_on_sqlite(store):
    idx = DeleteIndex(store)
    idx.create_dictionary_entry("hello", 1000)
    idx.create_dictionary_entry("world", 500)
    out = lookup("hellp", idx, Verbosity.CLOSEST)
    assert out and out[0].term == "hello" and out[0].distance == 1


def test_set_frequency_accumulates_in_storage(store):
    store.set_frequency("term", 10)
    store.set_frequency("term", 5)
    assert store.get_frequency("term") == 15
    assert store.term_exists("term")
    assert not store.term_exists("other")
    assert store.get_frequency("other") is None


def test_frequency_updates_double_count_on_sqlite(store):
    # index accumulates (100 + 50) and the upsert adds that to the stored 100
    idx = DeleteIndex(store)
    idx.create_dictionary_entry("test", 100)
    idx.create_dictionary_entry("test", 50)
    assert store.get_frequency("test") == 250

    mem = DeleteIndex(MemoryStore())
    mem.create_dictionary_entry("test", 100)
    mem.create_dictionary_entry("test", 50)
    assert mem.store.get_frequency("test") == 150


def test_frequency_saturates_past_int64(store):
    idx = DeleteIndex(store)
    idx.create_dictionary_entry("x", CFG.INT64_MAX)
    idx.create_dictionary_entry("x", 5)
    f = store.get_frequency("x")
    assert f == CFG.INT64_MAX
    assert isinstance(f, int)
    out = lookup("x", idx, Verbosity.TOP)
    assert out[0].frequency == CFG.INT64_MAX


def test_add_delete_deduplicates_and_needs_a_term(store):
    store.add_delete(42, "ghost")
    assert store.get_terms(42) == []

    store.set_frequency("t", 1)
    store.add_delete(42, "t")
    store.add_delete(42, "t")
    assert store.get_terms(42) == ["t"]

    mem = MemoryStore()
    mem.add_delete(42, "t")
    mem.add_delete(42, "t")
    assert mem.get_terms(42) == ["t", "t"]


def test_count_and_max_term_length(store):
    assert store.count() == 0
    assert store.max_term_length() == 0
    store.set_frequency("abc", 1)
    store.set_frequency("abcdef", 1)
    assert store.count() == 2
    assert store.max_term_length() == 6


def test_rollback_discards_writes(store):
    idx = DeleteIndex(store)
    with pytest.raises(RuntimeError):
        with store.transaction():
            idx.create_dictionary_entry("hello", 10)
            assert store.in_transaction
            raise RuntimeError("abort load")
    assert not store.in_transaction
    assert not store.term_exists("hello")
    assert store.get_terms(string_hash("hello")) == []


def test_commit_keeps_writes(tmp_path):
    path = tmp_path / "dict.sqlite"
    s1 = SQLiteStore.open(str(path))
    s1.begin()
    s1.begin()   # already open: ignored
    s1.set_frequency("kept", 3)
    s1.commit()
    s1.close()

    s2 = SQLiteStore.open(str(path))
    try:
        assert s2.get_frequency("kept") == 3
    finally:
        s2.close()


def test_nested_transaction_joins_outer(store):
    with store.transaction():
        with store.transaction():
            store.set_frequency("inner", 1)
        assert store.in_transaction
    assert not store.in_transaction
    assert store.term_exists("inner")


def test_initialize_closed_connection_is_internal_error():
    conn = sqlite3.connect(":memory:")
    conn.close()
    with pytest.raises(StoreError) as ei:
        SQLiteStore.initialize_database(conn)
    assert ei.value.kind is ErrorKind.INTERNAL


def test_missing_schema_fails_construction():
    conn = sqlite3.connect(":memory:")
    try:
        with pytest.raises(StoreError) as ei:
            SQLiteStore(conn)
        assert ei.value.kind is ErrorKind.STORAGE
        assert "prepare" in str(ei.value)
    finally:
        conn.close()


def test_steady_state_failures_degrade_and_log(caplog):
    s = SQLiteStore.open(":memory:")
    s.set_frequency("hello", 1)
    s.conn.close()
    with caplog.at_level(logging.WARNING, logger="spellcore.DB.sqlite_store"):
        assert s.get_terms(1) == []
        assert s.get_frequency("hello") is None
        assert s.term_exists("hello") is False
        s.set_frequency("other", 1)
        s.add_delete(1, "other")
    assert any("get_terms" in r.getMessage() for r in caplog.records)
    s.close()


def test_make_store_dsns(tmp_path):
    assert isinstance(make_store("memory://"), MemoryStore)
    s = make_store(f"sqlite:///{tmp_path / 'nested' / 'd.sqlite'}")
    try:
        assert isinstance(s, SQLiteStore)
        assert (tmp_path / "nested" / "d.sqlite").exists()
    finally:
        s.close()
    with pytest.raises(ValueError):
        make_store("postgres://nowhere")


def test_backends_agree_on_suggestions():
    words = {"hello": 1000, "hallo": 500, "help": 300, "world": 200, "word": 150,
             "sword": 100, "spelling": 90, "spewing": 80, "peeling": 70}
    mem = DeleteIndex(MemoryStore())
    sql_store = SQLiteStore.open(":memory:")
    sql = DeleteIndex(sql_store)
    try:
        for term, count in words.items():
            mem.create_dictionary_entry(term, count)
            sql.create_dictionary_entry(term, count)

        for query in ["hellp", "wrld", "speling", "helo", "xyz", "", "sword"]:
            for verbosity in Verbosity:
                a = {(s.term, s.distance) for s in lookup(query, mem, verbosity)}
                b = {(s.term, s.distance) for s in lookup(query, sql, verbosity)}
                assert a == b, (query, verbosity)
    finally:
        sql_store.close()
