# src/e2e/test_index_ingest.py

import pytest

from spellcore import config as CFG
from spellcore.DB.index import DeleteIndex
from spellcore.DB.memory_store import MemoryStore
from spellcore.deletes import string_hash
from spellcore.search import lookup


def _index(**kw) -> DeleteIndex:
    return DeleteIndex(MemoryStore(), **kw)


def test_below_threshold_terms_are_promoted_once():
    idx = _index(count_threshold=10)
    assert idx.create_dictionary_entry("word", 4) is False
    assert idx.pending_count("word") == 4
    assert not idx.store.term_exists("word")

    assert idx.create_dictionary_entry("word", 5) is False
    assert idx.pending_count("word") == 9

    assert idx.create_dictionary_entry("word", 3) is True
    assert idx.pending_count("word") is None
    assert idx.pending_terms == 0
    assert idx.store.get_frequency("word") == 12

    # later sightings only update the frequency
    assert idx.create_dictionary_entry("word", 1) is False
    assert idx.store.get_frequency("word") == 13
    assert lookup("word", idx)[0].frequency == 13


def test_first_sighting_at_threshold_is_admitted():
    idx = _index(count_threshold=10)
    assert idx.create_dictionary_entry("big", 10) is True
    assert idx.pending_count("big") is None


def test_pending_terms_are_invisible_to_lookup():
    idx = _index(count_threshold=5)
    idx.create_dictionary_entry("hello", 2)
    assert lookup("hello", idx) == []
    assert lookup("hellp", idx) == []


@pytest.mark.parametrize("count", [0, -3])
def test_non_positive_counts_are_ignored(count):
    idx = _index()
    assert idx.create_dictionary_entry("word", count) is False
    assert idx.pending_count("word") is None
    assert not idx.store.term_exists("word")


def test_repeated_ingestion_accumulates():
    idx = _index()
    idx.create_dictionary_entry("test", 100)
    idx.create_dictionary_entry("test", 50)
    assert idx.store.get_frequency("test") == 150


def test_frequency_saturates():
    idx = _index()
    idx.create_dictionary_entry("x", CFG.INT64_MAX)
    idx.create_dictionary_entry("x", 5)
    assert idx.store.get_frequency("x") == CFG.INT64_MAX


def test_pending_total_saturates_and_promotes():
    idx = _index(count_threshold=CFG.INT64_MAX)
    assert idx.create_dictionary_entry("p", CFG.INT64_MAX - 1) is False
    assert idx.create_dictionary_entry("p", 10) is True
    assert idx.store.get_frequency("p") == CFG.INT64_MAX


def test_longest_term_is_tracked():
    idx = _index()
    assert idx.max_word_length == 0
    idx.create_dictionary_entry("abc")
    idx.create_dictionary_entry("abcdefghij")
    idx.create_dictionary_entry("ab")
    assert idx.max_word_length == 10


def test_every_variant_is_registered():
    idx = _index()
    idx.create_dictionary_entry("spelling", 3)
    for variant in idx.edits_prefix("spelling"):
        assert "spelling" in idx.store.get_terms(string_hash(variant))


def test_seed_max_word_length_from_store():
    store = MemoryStore()
    store.set_frequency("lengthy", 1)
    idx = DeleteIndex(store)
    idx.seed_max_word_length()
    assert idx.max_word_length == 7


@pytest.mark.parametrize("kw", [
    {"max_edit_distance": -1},
    {"prefix_length": 0},
    {"max_edit_distance": 3, "prefix_length": 3},
    {"count_threshold": -1},
])
def test_invalid_configuration(kw):
    with pytest.raises(ValueError):
        _index(**kw)
