"""Afferent/efferent coupling and instability per module.

Computed straight from the adjacency mapping; no graph is needed, so this
can run while the graph is still being built.

    Ce (efferent)  = number of distinct modules m depends on
    Ca (afferent)  = number of distinct modules that depend on m
    I  (instability) = Ce / (Ce + Ca), 0 when Ce + Ca == 0

A module importing itself counts once on each side.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional, Sequence

from .models import CouplingRecord

_TWO_PLACES = Decimal("0.01")


def round_instability(value: float) -> float:
    """Round half-up to two decimals on the exact binary value of ``value``.

    0.125 -> 0.13 (exactly representable), 0.145 -> 0.14 (stored as
    0.14499...). Built-in round() would give 0.12 for the first.
    """
    return float(Decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def instability_index(efferent: int, afferent: int) -> float:
    total = efferent + afferent
    if total == 0:
        return 0.0
    return round_instability(efferent / total)


def compute_coupling(
    adjacency: Mapping[str, Optional[Sequence[str]]],
) -> dict[str, CouplingRecord]:
    """Compute a CouplingRecord for every key of ``adjacency``.

    Dependents are indexed in a single pass, O(V + E). Dependencies on
    modules outside the mapping still count toward the importer's Ce.
    """
    dependencies: dict[str, set[str]] = {
        module: set(deps or ()) for module, deps in adjacency.items()
    }

    dependents: dict[str, set[str]] = {module: set() for module in adjacency}
    for module, deps in dependencies.items():
        for dep in deps:
            if dep in dependents:
                dependents[dep].add(module)

    records: dict[str, CouplingRecord] = {}
    for module in adjacency:
        efferent = len(dependencies[module])
        afferent = len(dependents[module])
        records[module] = CouplingRecord(
            efferent_coupling=efferent,
            afferent_coupling=afferent,
            instability_index=instability_index(efferent, afferent),
        )

    return records
