"""Modularity audit engine: sequences extraction, graph construction and metrics.

Run stages:

    START -> TREE_BUILT -> GRAPH_BUILT -> METRICS_COMPUTED -> DONE
    (any stage) -> EMPTY

EMPTY is reached when upstream data is missing (no modules, or a required
layout could not be recovered) or when any stage raises. An empty run
returns ``{}`` from :meth:`ModularityAuditor.run`; nothing is raised to
the caller.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from ..config import DEFAULT_CONFIG, ModularityConfig
from ..exceptions import MetricComputationError
from ..extraction.base import DependencyExtractor, ExtractionResult
from ..logging_config import get_logger
from .algorithms import compute_degree_centrality, compute_density, louvain
from .builder import build_dependency_graph
from .coupling import compute_coupling
from .layout import LayoutResolver, resolve_layout
from .models import (
    CentralityMaps,
    CommunityPartition,
    DependencyGraph,
    ModularityReport,
    NodePosition,
)
from .normalizer import normalize_tree

logger = get_logger(__name__)


class AuditStage(Enum):
    START = "start"
    TREE_BUILT = "tree_built"
    GRAPH_BUILT = "graph_built"
    METRICS_COMPUTED = "metrics_computed"
    DONE = "done"
    EMPTY = "empty"


# ── Observers ──────────────────────────────────────────────────────


class AuditObserver:
    """Receives diagnostics from an audit run. All hooks default to no-ops."""

    def on_stage(self, stage: AuditStage, detail: str = "") -> None:
        pass

    def on_warning(self, message: str) -> None:
        pass

    def on_error(self, stage: AuditStage, error: BaseException) -> None:
        pass


class LoggingAuditObserver(AuditObserver):
    """Forward audit diagnostics to the package logger."""

    def __init__(self, name: str = __name__):
        self._logger = get_logger(name)

    def on_stage(self, stage: AuditStage, detail: str = "") -> None:
        suffix = f": {detail}" if detail else ""
        self._logger.debug(f"[modularity] stage {stage.value}{suffix}")

    def on_warning(self, message: str) -> None:
        self._logger.warning(f"[modularity] {message}")

    def on_error(self, stage: AuditStage, error: BaseException) -> None:
        self._logger.error(
            f"[modularity] {stage.value} failed: {type(error).__name__}: {error}",
            exc_info=error,
        )


@dataclass
class RecordingAuditObserver(AuditObserver):
    """Keep every diagnostic in memory (for tests and embedding callers)."""

    stages: list[AuditStage] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[tuple[AuditStage, BaseException]] = field(default_factory=list)

    def on_stage(self, stage: AuditStage, detail: str = "") -> None:
        self.stages.append(stage)

    def on_warning(self, message: str) -> None:
        self.warnings.append(message)

    def on_error(self, stage: AuditStage, error: BaseException) -> None:
        self.errors.append((stage, error))


# ── Engine ─────────────────────────────────────────────────────────


@dataclass
class _Metrics:
    communities: Optional[CommunityPartition] = None
    centrality: Optional[CentralityMaps] = None
    density: Optional[float] = None


class ModularityAuditor:
    """Run one modularity audit over the output of a dependency extractor."""

    def __init__(
        self,
        extractor: DependencyExtractor,
        config: Optional[ModularityConfig] = None,
        observer: Optional[AuditObserver] = None,
        layout_resolver: LayoutResolver = resolve_layout,
    ):
        """Initialize the auditor.

        Args:
            extractor: Source of the module adjacency mapping
            config: Algorithm and execution settings
            observer: Diagnostics sink (defaults to logging)
            layout_resolver: Diagram bytes -> node positions, or None
        """
        self.extractor = extractor
        self.config = config or DEFAULT_CONFIG
        self.observer = observer or LoggingAuditObserver()
        self.layout_resolver = layout_resolver
        self.stage = AuditStage.START

    def run(self) -> dict[str, Any]:
        """Run the audit and return the result bundle, or ``{}``."""
        report = self.audit()
        if report is None:
            return {}
        return report.as_bundle()

    def audit(self) -> Optional[ModularityReport]:
        """Run the audit and return the report, or None for an empty run."""
        self.stage = AuditStage.START
        self.observer.on_stage(AuditStage.START)

        executor: Optional[ThreadPoolExecutor] = None
        if self.config.parallel_metrics:
            executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers, thread_name_prefix="modularity"
            )
        try:
            return self._audit(executor)
        except Exception as e:
            self.observer.on_error(self.stage, e)
            return self._empty(f"{self.stage.value} raised {type(e).__name__}")
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

    def _audit(self, executor: Optional[ThreadPoolExecutor]) -> Optional[ModularityReport]:
        # ── START: acquire upstream data ──
        extraction = self.extractor.extract(include_diagram=self.config.include_layout)
        if extraction is None or extraction.is_empty:
            return self._empty("extractor found no modules")
        adjacency = extraction.adjacency

        # Coupling needs only the adjacency; start it before the graph exists
        coupling_future: Optional[Future] = None
        if executor is not None:
            coupling_future = executor.submit(compute_coupling, adjacency)

        # ── TREE_BUILT ──
        tree = normalize_tree(adjacency)
        if not tree.nodes:
            return self._empty("dependency tree has no modules")
        self._advance(AuditStage.TREE_BUILT, f"{len(tree.nodes)} modules, {len(tree.edges)} edges")

        # ── GRAPH_BUILT ──
        positions = self._resolve_positions(extraction)
        if positions is None and self.config.require_layout:
            return self._empty("layout diagram required but unavailable")

        graph = build_dependency_graph(tree, positions)
        if graph.node_count() == 0:
            return self._empty("dependency graph has no nodes")
        dropped = len(tree.edges) - graph.edge_count()
        if dropped:
            self.observer.on_warning(
                f"{dropped} edge(s) dropped (unknown endpoint or duplicate)"
            )
        self._advance(
            AuditStage.GRAPH_BUILT, f"{graph.node_count()} nodes, {graph.edge_count()} edges"
        )

        # ── METRICS_COMPUTED ──
        metrics, failures = self._compute_metrics(graph, executor)
        if coupling_future is not None:
            coupling = self._collect("coupling", coupling_future.result, failures)
        else:
            coupling = self._collect("coupling", lambda: compute_coupling(adjacency), failures)

        if failures:
            for failure in failures:
                self.observer.on_error(self.stage, failure)
            return self._empty(f"{len(failures)} metric(s) failed")
        self._advance(AuditStage.METRICS_COMPUTED)

        report = ModularityReport(
            tree=adjacency,
            graph=graph,
            communities=metrics.communities,
            density=metrics.density,
            centrality=metrics.centrality,
            coupling=coupling,
            circular_groups=list(extraction.circular_groups),
            warnings=list(extraction.warnings),
            orphan_modules=list(extraction.orphan_modules),
            leaf_modules=list(extraction.leaf_modules),
            diagram=extraction.diagram,
        )
        self._advance(
            AuditStage.DONE,
            f"modularity={report.modularity:.4f}, density={report.density:.4f}, "
            f"{report.communities.community_count} communities",
        )
        return report

    def _resolve_positions(self, extraction: ExtractionResult) -> Optional[list[NodePosition]]:
        if not self.config.include_layout:
            return None
        if not extraction.diagram:
            self.observer.on_warning("no dependency diagram; nodes have no coordinates")
            return None
        positions = self.layout_resolver(extraction.diagram)
        if positions is None:
            self.observer.on_warning("dependency diagram unreadable; nodes have no coordinates")
        return positions

    def _compute_metrics(
        self, graph: DependencyGraph, executor: Optional[ThreadPoolExecutor]
    ) -> tuple[_Metrics, list[MetricComputationError]]:
        """Run community detection, centrality and density over the frozen graph.

        Every metric runs to completion even when another one fails.
        """
        tasks: dict[str, Callable[[], Any]] = {
            "communities": lambda: louvain(
                graph,
                resolution=self.config.resolution,
                max_passes=self.config.louvain_max_passes,
                max_levels=self.config.louvain_max_levels,
            ),
            "centrality": lambda: compute_degree_centrality(graph),
            "density": lambda: compute_density(graph),
        }

        failures: list[MetricComputationError] = []
        metrics = _Metrics()

        if executor is not None:
            futures = {name: executor.submit(task) for name, task in tasks.items()}
            for name, future in futures.items():
                setattr(metrics, name, self._collect(name, future.result, failures))
        else:
            for name, task in tasks.items():
                setattr(metrics, name, self._collect(name, task, failures))

        return metrics, failures

    @staticmethod
    def _collect(
        name: str, compute: Callable[[], Any], failures: list[MetricComputationError]
    ) -> Any:
        try:
            return compute()
        except Exception as e:
            error = MetricComputationError(name, f"{type(e).__name__}: {e}")
            error.__cause__ = e
            failures.append(error)
            return None

    def _advance(self, stage: AuditStage, detail: str = "") -> None:
        self.stage = stage
        self.observer.on_stage(stage, detail)

    def _empty(self, reason: str) -> None:
        self.stage = AuditStage.EMPTY
        self.observer.on_stage(AuditStage.EMPTY, reason)
        logger.info(f"Modularity audit produced no result: {reason}")
        return None


def audit_dependencies(
    extractor: DependencyExtractor,
    config: Optional[ModularityConfig] = None,
    observer: Optional[AuditObserver] = None,
) -> dict[str, Any]:
    """Convenience wrapper: run a ModularityAuditor once and return its bundle."""
    return ModularityAuditor(extractor, config=config, observer=observer).run()
