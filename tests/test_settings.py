"""Tests for settings loading from defaults, environment and YAML."""

import yaml

from config import QdrantSettings, QuantizationMode, load_settings


def test_defaults():
    settings = QdrantSettings()

    assert settings.connection.url == "http://localhost:6333"
    assert settings.connection.retry_count == 3
    assert settings.connection.retry_initial_delay == 1.0
    assert settings.index.hnsw.m == 16
    assert settings.index.hnsw.ef_construct == 100
    assert settings.index.hnsw.full_scan_threshold == 10000
    assert settings.index.hnsw.on_disk is False
    assert settings.index.quantization.mode is None
    assert settings.index.sparse.on_disk is True
    assert settings.vocabulary.directory == "~/.context/vocabulary"
    assert settings.search.default_limit == 10
    assert settings.search.rrf_k == 60
    assert settings.search.local_fusion is False
    assert settings.search.dense_fields == ["vector", "dense"]


def test_environment_override(monkeypatch):
    monkeypatch.setenv("QDRANT_URL", "http://qdrant.internal:6333")
    monkeypatch.setenv("QDRANT_HNSW_M", "32")

    settings = QdrantSettings()

    assert settings.connection.url == "http://qdrant.internal:6333"
    assert settings.index.hnsw.m == 32


def test_yaml_loading(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({
        "connection": {"url": "http://remote:6333", "retry_count": 5},
        "index": {"quantization": {"mode": "scalar", "always_ram": True}},
        "search": {"local_fusion": True},
    }))

    settings = load_settings(str(config_file))

    assert settings.connection.url == "http://remote:6333"
    assert settings.connection.retry_count == 5
    assert settings.index.quantization.mode == QuantizationMode.SCALAR
    assert settings.index.quantization.always_ram is True
    assert settings.search.local_fusion is True


def test_missing_yaml_falls_back_to_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "absent.yaml"))

    assert settings.connection.url == "http://localhost:6333"


def test_yaml_round_trip(tmp_path):
    config_file = tmp_path / "out.yaml"
    settings = QdrantSettings()
    settings.search.rrf_k = 30

    settings.to_yaml(config_file)

    assert QdrantSettings.from_yaml(config_file).search.rrf_k == 30
