"""Decay model for ongoing revenue from previously released songs."""

from label_sim.config import ConfigurationService


def decay_streams(
    config: ConfigurationService,
    initial_streams: int,
    months_since_release: int,
    reputation: float,
    access_tier: str,
) -> float:
    """Streams a released song earns this month, before the revenue threshold.

    Returns 0 outside the decay window (``months <= 0`` or beyond the
    configured maximum) and for songs that never streamed.
    """
    ongoing = config.streaming.ongoing
    if months_since_release <= 0 or initial_streams <= 0:
        return 0.0
    if months_since_release > ongoing.max_decay_months:
        return 0.0

    tier_multiplier = config.access_tier_multiplier("playlist", access_tier)
    base_decay = ongoing.monthly_decay_rate**months_since_release
    reputation_bonus = 1 + (reputation - ongoing.reputation_baseline) * ongoing.reputation_bonus_factor
    access_bonus = 1 + (tier_multiplier - 1) * ongoing.access_tier_bonus_factor

    streams = (
        initial_streams
        * base_decay
        * max(0.0, reputation_bonus)
        * max(0.0, access_bonus)
        * ongoing.ongoing_factor
    )
    return max(0.0, streams)


def decay_revenue(
    config: ConfigurationService,
    initial_streams: int,
    months_since_release: int,
    reputation: float,
    access_tier: str,
) -> int:
    """Ongoing monthly revenue for a previously released song.

    Args:
        config: Configuration service.
        initial_streams: Streams in the song's release month.
        months_since_release: Whole turns since the song was released.
        reputation: Current label reputation.
        access_tier: Current playlist access tier.

    Returns:
        Revenue in whole dollars; 0 outside the decay window and whenever the
        amount falls below the configured minimum threshold.
    """
    ongoing = config.streaming.ongoing
    streams = decay_streams(
        config, initial_streams, months_since_release, reputation, access_tier
    )
    revenue = max(0, round(streams * ongoing.revenue_per_stream))
    if revenue < ongoing.minimum_revenue_threshold:
        return 0
    return revenue


def in_decay_window(config: ConfigurationService, months_since_release: int) -> bool:
    """Whether a song released that many months ago still earns revenue."""
    return 0 < months_since_release <= config.streaming.ongoing.max_decay_months
