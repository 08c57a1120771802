"""Tests for the vocabulary store, tokenizer, sparse encoder and registry."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from config import VocabularySettings
from vocabulary import (
    RegexTokenizer,
    SparseEncoder,
    SparseVector,
    VocabularyRegistry,
    VocabularyStore,
    derive_vocabulary_path,
)


class RecordingTokenizer:
    def __init__(self):
        self.calls = []

    def tokenize(self, text):
        self.calls.append(text)
        return text.split()


# ============================================================================
# VocabularyStore
# ============================================================================


def test_indices_assigned_in_first_occurrence_order():
    store = VocabularyStore()

    assert store.index_of("alpha") == 0
    assert store.index_of("beta") == 1
    assert store.index_of("alpha") == 0
    assert store.next_index == 2
    assert len(store) == 2
    assert "beta" in store
    assert store.get("gamma") is None


def test_save_and_reload_preserves_indices(tmp_path):
    path = tmp_path / "nested" / "vocabulary-abc.json"
    store = VocabularyStore(path)
    for term in ["parse", "config", "file"]:
        store.index_of(term)

    assert store.save() == path

    snapshot = json.loads(path.read_text())
    assert snapshot["vocabulary"] == {"parse": 0, "config": 1, "file": 2}
    assert snapshot["nextIndex"] == 3
    assert "timestamp" in snapshot

    reloaded = VocabularyStore(path)
    assert reloaded.get("config") == 1
    assert reloaded.index_of("new") == 3


def test_missing_file_gives_empty_store(tmp_path):
    store = VocabularyStore(tmp_path / "absent.json")

    assert len(store) == 0
    assert store.next_index == 0


def test_corrupt_file_gives_empty_store(tmp_path, caplog):
    path = tmp_path / "vocabulary-bad.json"
    path.write_text("{not json")

    store = VocabularyStore(path)

    assert len(store) == 0
    assert store.next_index == 0
    assert "Failed to load vocabulary" in caplog.text


def test_stale_next_index_is_repaired(tmp_path):
    path = tmp_path / "vocabulary-stale.json"
    path.write_text(json.dumps({"vocabulary": {"a": 0, "b": 5}, "nextIndex": 2}))

    store = VocabularyStore(path)

    assert store.next_index == 6
    assert store.index_of("c") == 6


def test_missing_next_index_falls_back_to_max_plus_one(tmp_path):
    path = tmp_path / "vocabulary-legacy.json"
    path.write_text(json.dumps({"vocabulary": {"a": 0, "b": 1}}))

    assert VocabularyStore(path).next_index == 2


def test_save_without_path_is_noop():
    store = VocabularyStore()
    store.index_of("term")

    assert store.save() is None


def test_save_error_is_raised(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    store = VocabularyStore(blocker / "vocabulary.json", autoload=False)

    with pytest.raises(OSError):
        store.save()


# ============================================================================
# Tokenizer and SparseEncoder
# ============================================================================


def test_regex_tokenizer_folds_case_and_drops_short_tokens():
    tokenizer = RegexTokenizer()

    assert tokenizer.tokenize("Parse the CONFIG_file, a x2 value!") == [
        "parse", "the", "config", "file", "value"
    ]


def test_encode_counts_term_frequency_in_first_occurrence_order():
    encoder = SparseEncoder(VocabularyStore(), RecordingTokenizer())

    vector = encoder.encode("b a b c b")

    assert vector.indices == [0, 1, 2]
    assert vector.values == [3.0, 1.0, 1.0]


def test_encode_reuses_indices_across_calls():
    encoder = SparseEncoder(VocabularyStore(), RecordingTokenizer())
    encoder.encode("x y")

    vector = encoder.encode("y z")

    assert vector.indices == [1, 2]


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_text_skips_tokenizer(text):
    tokenizer = RecordingTokenizer()
    encoder = SparseEncoder(VocabularyStore(), tokenizer)

    vector = encoder.encode(text)

    assert vector.is_empty
    assert tokenizer.calls == []


def test_sparse_vector_rejects_mismatched_lengths():
    with pytest.raises(ValidationError):
        SparseVector(indices=[0, 1], values=[1.0])
    with pytest.raises(ValidationError):
        SparseVector(indices=[1, 1], values=[1.0, 2.0])


def test_sparse_vector_wire_model():
    wire = SparseVector(indices=[3, 7], values=[1.0, 2.0]).to_qdrant()

    assert wire.indices == [3, 7]
    assert wire.values == [1.0, 2.0]


# ============================================================================
# VocabularyRegistry
# ============================================================================


def test_derive_vocabulary_path_uses_last_segment(tmp_path):
    path = derive_vocabulary_path("hybrid_code_chunks_1a2b3c4d", str(tmp_path))

    assert path == tmp_path / "vocabulary-1a2b3c4d.json"
    assert derive_vocabulary_path("plain", str(tmp_path)).name == "vocabulary-plain.json"


def test_registry_creates_one_encoder_per_collection(vocabulary_settings):
    registry = VocabularyRegistry(vocabulary_settings)

    first = registry.encoder_for("hybrid_a_111")
    assert registry.encoder_for("hybrid_a_111") is first
    assert registry.encoder_for("hybrid_b_222") is not first
    assert sorted(registry.collections) == ["hybrid_a_111", "hybrid_b_222"]


def test_explicit_path_is_shared(tmp_path):
    shared = tmp_path / "shared.json"
    registry = VocabularyRegistry(VocabularySettings(path=str(shared)))

    assert registry.vocabulary_path("hybrid_a_1") == shared
    assert registry.vocabulary_path("hybrid_b_2") == shared


def test_evict_keeps_snapshot_and_reload_restores_indices(vocabulary_settings):
    registry = VocabularyRegistry(vocabulary_settings)
    encoder = registry.encoder_for("hybrid_docs_abc")
    encoder.encode("alpha beta")
    registry.save("hybrid_docs_abc")

    assert registry.evict("hybrid_docs_abc") is True
    assert "hybrid_docs_abc" not in registry
    assert registry.evict("hybrid_docs_abc") is False
    assert Path(registry.vocabulary_path("hybrid_docs_abc")).exists()

    reloaded = registry.encoder_for("hybrid_docs_abc")
    assert reloaded is not encoder
    assert reloaded.encode("beta").indices == [1]
