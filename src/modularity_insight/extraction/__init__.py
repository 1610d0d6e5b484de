"""Dependency extractors: where the module adjacency mapping comes from."""

from .base import DependencyExtractor, ExtractionResult
from .diagram import render_dependency_svg
from .python_imports import PythonImportExtractor
from .static import StaticExtractor

__all__ = [
    "DependencyExtractor",
    "ExtractionResult",
    "PythonImportExtractor",
    "StaticExtractor",
    "render_dependency_svg",
]
