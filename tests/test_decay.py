"""Tests for ongoing revenue decay."""

import pytest

from label_sim.config import ConfigurationService
from label_sim.engine import decay_revenue, decay_streams, in_decay_window


class TestDecay:
    """Tests for the decay model."""

    def test_first_month(self, config: ConfigurationService) -> None:
        """Month one applies decay, access and ongoing factors."""
        # 100000 * 0.8 * 1.0 reputation * (1 + (0.1 - 1) * 0.25) access * 0.5
        streams = decay_streams(config, 100_000, 1, 50, "none")

        assert streams == pytest.approx(31_000)
        assert decay_revenue(config, 100_000, 1, 50, "none") == 1550

    def test_exponential_decline(self, config: ConfigurationService) -> None:
        """Each month earns the decay rate times the previous month."""
        first = decay_streams(config, 100_000, 1, 50, "niche")
        second = decay_streams(config, 100_000, 2, 50, "niche")

        assert second == pytest.approx(first * 0.8)

    @pytest.mark.parametrize("tier", ["none", "niche", "flagship"])
    @pytest.mark.parametrize("initial_streams", [5_000, 100_000, 2_000_000])
    def test_revenue_never_increases(
        self, config: ConfigurationService, initial_streams: int, tier: str
    ) -> None:
        """Across the whole window revenue only falls, ending at zero."""
        max_months = config.streaming.ongoing.max_decay_months
        revenues = [
            decay_revenue(config, initial_streams, month, 70, tier)
            for month in range(1, max_months + 2)
        ]

        for previous, current in zip(revenues, revenues[1:]):
            assert current <= previous
        assert revenues[-1] == 0
        assert all(revenue >= 0 for revenue in revenues)

    def test_reputation_bonus(self, config: ConfigurationService) -> None:
        """Reputation above the baseline raises ongoing streams."""
        baseline = decay_streams(config, 100_000, 3, 50, "mid")
        famous = decay_streams(config, 100_000, 3, 90, "mid")

        assert famous > baseline

    def test_outside_window(self, config: ConfigurationService) -> None:
        """Release month and months past the window earn nothing."""
        assert decay_revenue(config, 100_000, 0, 50, "none") == 0
        assert decay_revenue(config, 100_000, 25, 50, "none") == 0
        assert not in_decay_window(config, 0)
        assert in_decay_window(config, 24)
        assert not in_decay_window(config, 25)

    def test_below_threshold_is_zero(self, config: ConfigurationService) -> None:
        """Revenue under the minimum threshold is dropped."""
        assert decay_revenue(config, 500, 1, 50, "none") == 0

    def test_never_negative(self, config: ConfigurationService) -> None:
        """Zero reputation or zero streams never yields negative revenue."""
        assert decay_streams(config, 100_000, 1, 0, "none") >= 0
        assert decay_revenue(config, 0, 1, 50, "none") == 0
