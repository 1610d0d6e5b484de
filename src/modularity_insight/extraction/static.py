"""Extractor over an adjacency mapping that was computed elsewhere."""

import json
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from ..exceptions import ExtractionError, InvalidPathError
from ..logging_config import get_logger
from .base import DependencyExtractor, ExtractionResult
from .diagram import render_dependency_svg

logger = get_logger(__name__)


class StaticExtractor(DependencyExtractor):
    """Serve a fixed adjacency mapping, e.g. the output of ``madge --json``."""

    def __init__(
        self,
        adjacency: Mapping[str, Optional[Sequence[str]]],
        diagram: Optional[bytes] = None,
        warnings: Optional[list[str]] = None,
    ):
        self.adjacency = adjacency
        self.diagram = diagram
        self.warnings = list(warnings or [])

    @classmethod
    def from_json_file(
        cls, path: Union[str, Path], diagram_path: Optional[Union[str, Path]] = None
    ) -> "StaticExtractor":
        """Load ``{module: [dependency, ...]}`` from a JSON file.

        Raises:
            InvalidPathError: If a file does not exist
            ExtractionError: If the JSON is malformed or not an adjacency mapping
        """
        path = Path(path)
        if not path.is_file():
            raise InvalidPathError(path, "adjacency file does not exist")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ExtractionError(str(path), f"cannot read adjacency JSON: {e}")

        if not isinstance(data, dict):
            raise ExtractionError(str(path), "top-level JSON value must be an object")
        for module, deps in data.items():
            if deps is not None and not (
                isinstance(deps, list) and all(isinstance(d, str) for d in deps)
            ):
                raise ExtractionError(str(path), f"dependencies of {module!r} must be a list of strings")

        diagram = None
        if diagram_path is not None:
            diagram_path = Path(diagram_path)
            if not diagram_path.is_file():
                raise InvalidPathError(diagram_path, "diagram file does not exist")
            diagram = diagram_path.read_bytes()

        logger.debug(f"Loaded {len(data)} modules from {path}")
        return cls(data, diagram=diagram)

    def extract(self, include_diagram: bool = True) -> ExtractionResult:
        diagram = None
        if include_diagram and self.adjacency:
            diagram = self.diagram or render_dependency_svg(self.adjacency)
        return ExtractionResult.from_adjacency(
            self.adjacency, diagram=diagram, warnings=self.warnings
        )
