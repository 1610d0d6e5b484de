"""Tests for the ast-based Python import extractor."""

import ast
import textwrap

import pytest

from modularity_insight.config import ModularityConfig
from modularity_insight.exceptions import InvalidPathError
from modularity_insight.extraction.python_imports import (
    PythonImportExtractor,
    build_path_index,
    collect_imports,
    is_excluded,
)


def write_tree(root, files):
    for rel_path, source in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
    return root


@pytest.fixture
def project(tmp_path):
    return write_tree(
        tmp_path / "project",
        {
            "app/__init__.py": "",
            "app/main.py": """
                import os
                from app import models
                from app.services.billing import charge
                from .util import helper
            """,
            "app/models.py": "from . import util\n",
            "app/util.py": "import json\n",
            "app/services/__init__.py": "",
            "app/services/billing.py": """
                from ..models import Invoice
                from .. import util as u
            """,
        },
    )


class TestCollectImports:
    def test_statement_shapes(self):
        tree = ast.parse("import a.b, c\nfrom ..m import x, y\nfrom . import *\n")
        assert collect_imports(tree) == [
            (0, "a.b", []),
            (0, "c", []),
            (2, "m", ["x", "y"]),
            (1, "", []),
        ]

    def test_nested_imports_in_source_order(self):
        source = "def f():\n    import late\nimport early\n"
        assert [m for _, m, _ in collect_imports(ast.parse(source))] == ["late", "early"]


class TestHelpers:
    def test_path_index_strips_src_prefix(self):
        index = build_path_index(["src/pkg/__init__.py", "src/pkg/core.py", "setup.py"])
        assert index["pkg"] == "src/pkg/__init__.py"
        assert index["pkg.core"] == "src/pkg/core.py"
        assert index["src.pkg.core"] == "src/pkg/core.py"
        assert index["setup"] == "setup.py"

    @pytest.mark.parametrize(
        "path,excluded",
        [
            ("venv/lib/site.py", True),
            ("pkg/venv/lib/site.py", True),
            ("pkg/__pycache__/x.py", True),
            ("pkg/core.py", False),
        ],
    )
    def test_is_excluded(self, path, excluded):
        patterns = ["venv/*", "__pycache__/*"]
        assert is_excluded(path, patterns) is excluded


class TestPythonImportExtractor:
    def test_resolves_project_imports(self, project):
        result = PythonImportExtractor(project).extract(include_diagram=False)
        adjacency = result.adjacency
        assert adjacency["app/main.py"] == [
            "app/models.py",
            "app/services/billing.py",
            "app/util.py",
        ]
        assert adjacency["app/models.py"] == ["app/util.py"]
        assert adjacency["app/services/billing.py"] == ["app/models.py", "app/util.py"]
        assert adjacency["app/util.py"] == []
        assert result.diagram is None

    def test_module_keys_are_sorted_posix_paths(self, project):
        adjacency = PythonImportExtractor(project).extract(include_diagram=False).adjacency
        assert list(adjacency) == sorted(adjacency)
        assert all("\\" not in key for key in adjacency)

    def test_derived_pass_through_data(self, project):
        result = PythonImportExtractor(project).extract(include_diagram=False)
        assert "app/main.py" in result.orphan_modules
        assert "app/util.py" in result.leaf_modules
        assert result.circular_groups == []

    def test_cycle_detected(self, tmp_path):
        root = write_tree(tmp_path / "cyc", {"a.py": "import b\n", "b.py": "import a\n"})
        result = PythonImportExtractor(root).extract(include_diagram=False)
        assert result.circular_groups == [["a.py", "b.py"]]

    def test_syntax_error_becomes_warning(self, tmp_path):
        root = write_tree(
            tmp_path / "broken", {"ok.py": "import bad\n", "bad.py": "def broken(:\n"}
        )
        result = PythonImportExtractor(root).extract(include_diagram=False)
        assert list(result.adjacency) == ["ok.py"]
        assert result.adjacency["ok.py"] == []
        assert any("bad.py" in w for w in result.warnings)

    def test_unresolved_relative_import_warns(self, tmp_path):
        root = write_tree(tmp_path / "rel", {"pkg/a.py": "from .missing import thing\n"})
        result = PythonImportExtractor(root).extract(include_diagram=False)
        assert result.adjacency == {"pkg/a.py": []}
        assert any("unresolved relative import" in w for w in result.warnings)

    def test_self_import_skipped(self, tmp_path):
        root = write_tree(tmp_path / "self", {"solo.py": "import solo\n"})
        assert PythonImportExtractor(root).extract(include_diagram=False).adjacency == {
            "solo.py": []
        }

    def test_exclude_patterns_and_extensions(self, tmp_path):
        root = write_tree(
            tmp_path / "ex",
            {
                "keep.py": "import skip\n",
                "venv/skip.py": "",
                "notes.txt": "import keep",
            },
        )
        result = PythonImportExtractor(root).extract(include_diagram=False)
        assert list(result.adjacency) == ["keep.py"]

    def test_max_files_cap(self, tmp_path):
        root = write_tree(tmp_path / "cap", {f"m{i}.py": "" for i in range(5)})
        config = ModularityConfig(max_files=3)
        result = PythonImportExtractor(root, config).extract(include_diagram=False)
        assert len(result.adjacency) == 3
        assert any("max files" in w for w in result.warnings)

    def test_diagram_rendered_on_request(self, project):
        result = PythonImportExtractor(project).extract(include_diagram=True)
        assert result.diagram is not None
        assert b"app/main.py" in result.diagram

    def test_empty_directory(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = PythonImportExtractor(empty).extract()
        assert result.is_empty
        assert result.diagram is None

    def test_missing_root(self, tmp_path):
        with pytest.raises(InvalidPathError):
            PythonImportExtractor(tmp_path / "nope").extract()
