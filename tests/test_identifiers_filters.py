"""Tests for stable point IDs and filter builders."""

import hashlib
import re

from qdrant_client import models

from search_operations import FilterBuilder
from utils import IdentifierMapper, to_stable_id

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def test_stable_id_is_formatted_md5():
    key = IdentifierMapper.compose_key("src/app.py", 1, 20, "def main(): pass")
    digest = hashlib.md5(key.encode("utf-8")).hexdigest()

    stable_id = to_stable_id(key)

    assert key == "src/app.py:1:20:def main(): pass"
    assert UUID_PATTERN.match(stable_id)
    assert stable_id.replace("-", "") == digest


def test_stable_id_is_deterministic():
    assert IdentifierMapper.to_stable_id("a") == IdentifierMapper.to_stable_id("a")
    assert IdentifierMapper.to_stable_id("a") != IdentifierMapper.to_stable_id("b")


def test_extension_filter():
    assert FilterBuilder.by_extensions([".py", ".ts"]) == {
        "must": [{"key": "fileExtension", "match": {"any": [".py", ".ts"]}}]
    }


def test_path_filter():
    assert FilterBuilder.by_exact_path("src/app.py") == {
        "must": [{"key": "relativePath", "match": {"value": "src/app.py"}}]
    }


def test_empty_inputs_give_empty_predicates():
    assert FilterBuilder.by_extensions([]) == {}
    assert FilterBuilder.by_exact_path("") == {}


def test_to_qdrant_filter():
    assert FilterBuilder.to_qdrant_filter({}) is None
    assert FilterBuilder.to_qdrant_filter(None) is None

    converted = FilterBuilder.to_qdrant_filter(FilterBuilder.by_extensions([".py"]))

    assert isinstance(converted, models.Filter)
    assert converted.must[0].key == "fileExtension"
    assert converted.must[0].match.any == [".py"]
