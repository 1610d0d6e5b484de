"""Tests for score classification."""

import pytest

from modularity_insight.classification import (
    CentralityBand,
    StabilityZone,
    classify_centrality,
    classify_instability,
)


class TestClassifyInstability:
    @pytest.mark.parametrize(
        "value,zone",
        [
            (0.0, StabilityZone.STABLE),
            (0.29, StabilityZone.STABLE),
            (0.3, StabilityZone.BALANCED),
            (0.5, StabilityZone.BALANCED),
            (0.7, StabilityZone.BALANCED),
            (0.71, StabilityZone.UNSTABLE),
            (1.0, StabilityZone.UNSTABLE),
        ],
    )
    def test_zones(self, value, zone):
        assert classify_instability(value) is zone

    def test_styles(self):
        assert StabilityZone.STABLE.style == "green"
        assert StabilityZone.UNSTABLE.style == "red"


class TestClassifyCentrality:
    @pytest.mark.parametrize(
        "value,band",
        [
            (0.0, CentralityBand.ISOLATED),
            (0.049, CentralityBand.ISOLATED),
            (0.05, CentralityBand.HEALTHY),
            (0.2, CentralityBand.HEALTHY),
            (0.21, CentralityBand.HUB),
            (1.5, CentralityBand.HUB),
        ],
    )
    def test_bands(self, value, band):
        assert classify_centrality(value) is band

    def test_only_healthy_is_unflagged(self):
        assert not CentralityBand.HEALTHY.flagged
        assert CentralityBand.ISOLATED.flagged
        assert CentralityBand.HUB.flagged
