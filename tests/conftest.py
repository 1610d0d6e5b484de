"""Shared test fixtures for Modularity Insight tests."""

import os

import pytest

from modularity_insight.graph.builder import build_dependency_graph
from modularity_insight.graph.normalizer import normalize_tree


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/project TOML files and MODULARITY_* env vars out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr("pathlib.Path.home", lambda: home)
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("MODULARITY_"):
            monkeypatch.delenv(key)


@pytest.fixture
def build_graph():
    """Build a frozen graph straight from an adjacency mapping."""

    def _build(adjacency, positions=None):
        return build_dependency_graph(normalize_tree(adjacency), positions)

    return _build


@pytest.fixture
def hub_adjacency():
    """H is imported by X, Y and Z and imports nothing."""
    return {"H": [], "X": ["H"], "Y": ["H"], "Z": ["H"]}


@pytest.fixture
def cycle_adjacency():
    """A -> B -> C -> A."""
    return {"A": ["B"], "B": ["C"], "C": ["A"]}


@pytest.fixture
def two_pairs_adjacency():
    """Two disconnected pairs A -> B and C -> D."""
    return {"A": ["B"], "B": [], "C": ["D"], "D": []}


@pytest.fixture
def complete_adjacency():
    """Every ordered pair of three modules, no self-loops."""
    return {"a": ["b", "c"], "b": ["a", "c"], "c": ["a", "b"]}


@pytest.fixture
def two_cliques_adjacency():
    """Two dense 4-module clusters joined by one bridge edge."""
    return {
        "a1": ["a2", "a3", "a4"],
        "a2": ["a3", "a4"],
        "a3": ["a4"],
        "a4": ["b1"],
        "b1": ["b2", "b3", "b4"],
        "b2": ["b3", "b4"],
        "b3": ["b4"],
        "b4": [],
    }
