"""Tests for the pre-computed adjacency extractor."""

import json

import pytest

from modularity_insight.exceptions import ExtractionError, InvalidPathError
from modularity_insight.extraction import ExtractionResult, StaticExtractor


@pytest.fixture
def madge_json(tmp_path):
    path = tmp_path / "deps.json"
    path.write_text(
        json.dumps({"src/a.js": ["src/b.js"], "src/b.js": ["src/a.js"], "src/c.js": []}),
        encoding="utf-8",
    )
    return path


class TestStaticExtractor:
    def test_from_json_file(self, madge_json):
        result = StaticExtractor.from_json_file(madge_json).extract(include_diagram=False)
        assert result.adjacency == {
            "src/a.js": ["src/b.js"],
            "src/b.js": ["src/a.js"],
            "src/c.js": [],
        }
        assert result.circular_groups == [["src/a.js", "src/b.js"]]
        assert result.orphan_modules == ["src/c.js"]
        assert result.leaf_modules == ["src/c.js"]

    def test_renders_diagram_when_none_given(self, madge_json):
        result = StaticExtractor.from_json_file(madge_json).extract()
        assert result.diagram.startswith(b"<?xml")

    def test_explicit_diagram_kept(self, madge_json, tmp_path):
        svg = tmp_path / "graph.svg"
        svg.write_bytes(b"<svg/>")
        extractor = StaticExtractor.from_json_file(madge_json, diagram_path=svg)
        assert extractor.extract().diagram == b"<svg/>"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidPathError):
            StaticExtractor.from_json_file(tmp_path / "missing.json")

    def test_missing_diagram(self, madge_json, tmp_path):
        with pytest.raises(InvalidPathError):
            StaticExtractor.from_json_file(madge_json, diagram_path=tmp_path / "nope.svg")

    @pytest.mark.parametrize(
        "content",
        ["{not json", "[1, 2]", '{"a": "b"}', '{"a": [1]}'],
    )
    def test_malformed_content(self, tmp_path, content):
        path = tmp_path / "bad.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ExtractionError):
            StaticExtractor.from_json_file(path)

    def test_null_dependencies_are_empty(self):
        result = StaticExtractor({"a": None}).extract(include_diagram=False)
        assert result.adjacency == {"a": []}

    def test_empty_mapping_has_no_diagram(self):
        result = StaticExtractor({}).extract()
        assert result.is_empty
        assert result.diagram is None


class TestExtractionResult:
    def test_default_is_empty(self):
        assert ExtractionResult().is_empty
