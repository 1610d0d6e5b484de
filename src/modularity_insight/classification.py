"""Map numeric scores onto named categories for display.

Each classifier is an ordered list of (upper bound, category) checks;
the first bound the value falls under wins.
"""

from enum import Enum

# Upper bounds of the stable and balanced zones
STABLE_INSTABILITY_LIMIT = 0.3
UNSTABLE_INSTABILITY_LIMIT = 0.7

# Degree centrality band the modularity report considers healthy
ISOLATED_CENTRALITY_LIMIT = 0.05
HUB_CENTRALITY_LIMIT = 0.2


class StabilityZone(Enum):
    """Where a module sits on the instability axis."""

    STABLE = "stable"  # mostly depended upon, hard to change
    BALANCED = "balanced"
    UNSTABLE = "unstable"  # mostly depends on others, easy to change

    @property
    def style(self) -> str:
        return _ZONE_STYLES[self]


class CentralityBand(Enum):
    """How connected a module is relative to the rest of the graph."""

    ISOLATED = "isolated"
    HEALTHY = "healthy"
    HUB = "hub"

    @property
    def flagged(self) -> bool:
        return self is not CentralityBand.HEALTHY


_ZONE_STYLES = {
    StabilityZone.STABLE: "green",
    StabilityZone.BALANCED: "yellow",
    StabilityZone.UNSTABLE: "red",
}


def classify_instability(value: float) -> StabilityZone:
    """0.00-0.29 stable, 0.30-0.70 balanced, above 0.70 unstable."""
    if value < STABLE_INSTABILITY_LIMIT:
        return StabilityZone.STABLE
    if value <= UNSTABLE_INSTABILITY_LIMIT:
        return StabilityZone.BALANCED
    return StabilityZone.UNSTABLE


def classify_centrality(value: float) -> CentralityBand:
    """Below 0.05 isolated, 0.05-0.2 healthy, above 0.2 hub."""
    if value < ISOLATED_CENTRALITY_LIMIT:
        return CentralityBand.ISOLATED
    if value <= HUB_CENTRALITY_LIMIT:
        return CentralityBand.HEALTHY
    return CentralityBand.HUB
