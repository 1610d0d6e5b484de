"""Dependency extractor interface and its output."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from ..graph.algorithms import compute_leaves, compute_orphans, find_circular_groups


@dataclass
class ExtractionResult:
    """Raw dependency data for one run.

    ``adjacency`` maps each module to the modules it directly imports.
    ``circular_groups``, ``orphan_modules``, ``leaf_modules`` and
    ``warnings`` are passed through to the report untouched.
    """

    adjacency: dict[str, list[str]] = field(default_factory=dict)
    diagram: Optional[bytes] = None
    warnings: list[str] = field(default_factory=list)
    circular_groups: list[list[str]] = field(default_factory=list)
    orphan_modules: list[str] = field(default_factory=list)
    leaf_modules: list[str] = field(default_factory=list)

    @classmethod
    def from_adjacency(
        cls,
        adjacency: Mapping[str, Optional[Sequence[str]]],
        diagram: Optional[bytes] = None,
        warnings: Optional[list[str]] = None,
    ) -> "ExtractionResult":
        """Build a result, deriving cycles, orphans and leaves from ``adjacency``."""
        normalized = {module: list(deps or ()) for module, deps in adjacency.items()}
        return cls(
            adjacency=normalized,
            diagram=diagram,
            warnings=list(warnings or []),
            circular_groups=find_circular_groups(normalized),
            orphan_modules=compute_orphans(normalized),
            leaf_modules=compute_leaves(normalized),
        )

    @property
    def is_empty(self) -> bool:
        return not self.adjacency


class DependencyExtractor(ABC):
    """Produces the module adjacency mapping the audit runs on."""

    @abstractmethod
    def extract(self, include_diagram: bool = True) -> ExtractionResult:
        """
        Extract module dependencies.

        Args:
            include_diagram: Also render the SVG diagram used for layout

        Returns:
            Extraction result (empty adjacency when no modules were found)

        Raises:
            ExtractionError: If the source cannot be read at all
        """
        pass
