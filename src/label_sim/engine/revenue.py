"""Revenue calculator: streaming, tours, press and release outcomes.

Every function that samples randomness takes the turn's seeded
``random.Random`` explicitly.
"""

import logging
import math
import random

from label_sim.config import ConfigurationService
from label_sim.config.models import SEASONS
from label_sim.engine.bounds import clamp
from label_sim.engine.exceptions import InvalidTourParametersError
from label_sim.models import (
    ClampRecord,
    MarketingMixResult,
    PressOutcome,
    Release,
    ReleaseMarketingPreview,
    ReleaseSongOutcome,
    ReleaseType,
    SellThroughBreakdown,
    Song,
    TourCostBreakdown,
    TourRevenueResult,
)

logger = logging.getLogger(__name__)


def _streaming_base(
    config: ConfigurationService,
    quality: float,
    access_tier: str,
    reputation: float,
    ad_spend: float,
    popularity: float,
) -> float:
    s = config.streaming
    tier_multiplier = config.access_tier_multiplier("playlist", access_tier)
    marketing = math.sqrt(max(0.0, ad_spend) / s.marketing_scale_divisor)
    base = (
        quality * s.quality_weight
        + tier_multiplier * s.playlist_weight * s.playlist_component_scale
        + reputation * s.reputation_weight
        + marketing * s.marketing_weight * s.marketing_scale_multiplier
        + popularity * s.popularity_weight
    )
    star_power = s.star_power_amplification
    if star_power.enabled:
        base *= 1 + popularity / 100 * star_power.max_multiplier
    return base


def streaming_outcome(
    config: ConfigurationService,
    rng: random.Random,
    quality: float,
    access_tier: str,
    reputation: float,
    ad_spend: float,
    popularity: float = 0,
) -> int:
    """First-period streams for a released song.

    Popular artists amplify the base when star power is enabled.

    Args:
        config: Configuration service.
        rng: Seeded random source.
        quality: Song quality (0-100).
        access_tier: Playlist access tier name.
        reputation: Label reputation.
        ad_spend: Marketing spend attributed to the song.
        popularity: Artist popularity (0-100).

    Returns:
        Stream count, rounded to an integer.
    """
    s = config.streaming
    base = _streaming_base(config, quality, access_tier, reputation, ad_spend, popularity)
    variance = rng.uniform(s.variance.min, s.variance.max)
    return round(base * variance * s.first_release_multiplier * s.base_streams_per_point)


def streaming_outcome_bounds(
    config: ConfigurationService,
    quality: float,
    access_tier: str,
    reputation: float,
    ad_spend: float,
    popularity: float = 0,
) -> tuple[int, int]:
    """Lowest and highest stream counts ``streaming_outcome`` can return."""
    s = config.streaming
    base = _streaming_base(config, quality, access_tier, reputation, ad_spend, popularity)
    scale = s.first_release_multiplier * s.base_streams_per_point
    return round(base * s.variance.min * scale), round(base * s.variance.max * scale)


def _validate_tour(
    config: ConfigurationService,
    artist_popularity: float,
    local_reputation: float,
    cities: int,
) -> None:
    errors: list[str] = []
    max_cities = config.tour.max_cities
    if not 1 <= cities <= max_cities:
        errors.append(f"cities must be between 1 and {max_cities}, got {cities}")
    if not 0 <= artist_popularity <= 100:
        errors.append(f"popularity must be between 0 and 100, got {artist_popularity}")
    if local_reputation < 0:
        errors.append(f"reputation must be non-negative, got {local_reputation}")
    if errors:
        raise InvalidTourParametersError(errors)


def tour_revenue_breakdown(
    config: ConfigurationService,
    rng: random.Random,
    venue_tier: str,
    artist_popularity: float,
    local_reputation: float,
    cities: int,
    marketing_budget: float = 0,
    clamps: list[ClampRecord] | None = None,
) -> TourRevenueResult:
    """Compute tour revenue with every intermediate value.

    Venue capacity is sampled from the tier's range. Sell-through combines a
    base rate with reputation, popularity and marketing bonuses and never
    exceeds 1.0. Ticket price grows linearly with capacity; merchandise adds a
    share of ticket revenue.

    Raises:
        InvalidTourParametersError: If cities, popularity or reputation are
            out of range.
        ConfigurationError: If the venue tier is unknown.
    """
    _validate_tour(config, artist_popularity, local_reputation, cities)
    t = config.tour
    tier = config.access_tier("venue", venue_tier)
    assert tier.capacity is not None

    capacity_range = tier.capacity
    capacity = round(
        capacity_range.min + rng.random() * (capacity_range.max - capacity_range.min)
    )

    reputation_bonus = local_reputation / 100 * t.reputation_modifier
    popularity_bonus = artist_popularity / 100 * t.local_popularity_weight
    marketing_bonus = 0.0
    if marketing_budget > 0 and capacity > 0:
        marketing_bonus = marketing_budget / cities / capacity * t.marketing_sell_through_factor

    raw_rate = t.sell_through_base + reputation_bonus + popularity_bonus + marketing_bonus
    rate = clamp("tour_sell_through", raw_rate, 0.0, 1.0, clamps)

    ticket_price = t.ticket_price_base + capacity * t.ticket_price_per_capacity
    ticket_revenue = capacity * rate * ticket_price
    merch_revenue = ticket_revenue * t.merch_percentage
    total = round((ticket_revenue + merch_revenue) * cities)

    return TourRevenueResult(
        venue_tier=venue_tier,
        capacity=capacity,
        sell_through=SellThroughBreakdown(
            base=t.sell_through_base,
            reputation_bonus=reputation_bonus,
            popularity_bonus=popularity_bonus,
            marketing_bonus=marketing_bonus,
            rate=rate,
        ),
        ticket_price=ticket_price,
        ticket_revenue=ticket_revenue,
        merch_revenue=merch_revenue,
        cities=cities,
        total_revenue=total,
    )


def tour_revenue(
    config: ConfigurationService,
    rng: random.Random,
    venue_tier: str,
    artist_popularity: float,
    local_reputation: float,
    cities: int,
    clamps: list[ClampRecord] | None = None,
) -> int:
    """Total tour revenue across all cities."""
    return tour_revenue_breakdown(
        config,
        rng,
        venue_tier,
        artist_popularity,
        local_reputation,
        cities,
        clamps=clamps,
    ).total_revenue


def calculate_tour_costs(
    config: ConfigurationService,
    venue_tier: str,
    cities: int,
    marketing_budget: int = 0,
) -> TourCostBreakdown:
    """Venue, production and marketing costs of a tour.

    Fees scale with the average capacity of the venue tier.
    """
    t = config.tour
    tier = config.access_tier("venue", venue_tier)
    assert tier.capacity is not None

    capacity = round(tier.capacity.midpoint)
    venue_fee = round(capacity * t.venue_fee_per_capacity)
    production_fee = round(capacity * t.production_fee_per_capacity)
    return TourCostBreakdown(
        venue_tier=venue_tier,
        cities=cities,
        capacity=capacity,
        venue_fee_per_city=venue_fee,
        production_fee_per_city=production_fee,
        marketing_cost=marketing_budget,
        total_costs=(venue_fee + production_fee) * cities + marketing_budget,
    )


def press_pickup_chance(
    config: ConfigurationService,
    access_tier: str,
    spend: float,
    reputation: float,
    has_story_bonus: bool = False,
    clamps: list[ClampRecord] | None = None,
) -> float:
    """Probability of one press pickup trial succeeding, within [0, 1]."""
    p = config.press
    chance = (
        p.base_chance
        + config.access_tier("press", access_tier).pickup_chance
        + spend * p.pr_spend_modifier
        + reputation * p.reputation_modifier
    )
    if has_story_bonus:
        chance += p.story_flag_bonus
    return clamp("press_pickup_chance", chance, 0.0, 1.0, clamps)


def _run_trials(rng: random.Random, chance: float, trials: int) -> int:
    return sum(1 for _ in range(trials) if rng.random() < chance)


def press_pickups(
    config: ConfigurationService,
    rng: random.Random,
    access_tier: str,
    spend: float,
    reputation: float,
    has_story_bonus: bool = False,
    clamps: list[ClampRecord] | None = None,
) -> int:
    """Number of successful press pickups for one release."""
    chance = press_pickup_chance(config, access_tier, spend, reputation, has_story_bonus, clamps)
    return _run_trials(rng, chance, config.press.max_pickups_per_release)


def press_outcome(
    config: ConfigurationService,
    rng: random.Random,
    access_tier: str,
    spend: float,
    reputation: float,
    quality: float,
    has_story_bonus: bool = False,
    clamps: list[ClampRecord] | None = None,
) -> PressOutcome:
    """Press pickups and the reputation they earn.

    Reputation gain is ``floor(pickups * quality / 100 * multiplier)``.
    """
    chance = press_pickup_chance(config, access_tier, spend, reputation, has_story_bonus, clamps)
    pickups = _run_trials(rng, chance, config.press.max_pickups_per_release)
    gain = 0
    if pickups > 0:
        gain = math.floor(pickups * quality / 100 * config.press.reputation_gain_multiplier)
    return PressOutcome(pickups=pickups, chance=chance, reputation_gain=gain)


def season_for_turn(turn: int) -> str:
    """Calendar quarter of a turn, with turn 1 as January."""
    month = (max(turn, 1) - 1) % 12
    return SEASONS[month // 3]


def marketing_cost(config: ConfigurationService, budget: int, turn: int) -> int:
    """Cash cost of a marketing budget spent on ``turn`` at seasonal prices."""
    return round(budget * config.seasonal_cost_multiplier(season_for_turn(turn)))


def marketing_mix(config: ConfigurationService, channels: dict[str, int]) -> MarketingMixResult:
    """Stream multiplier for a marketing budget split across channels.

    Spend is weighted by each channel's effectiveness and dampened by a
    square root of the total. More active channels earn a capped diversity
    bonus, and configured channel pairs (or every channel at once) add
    synergy bonuses. A budget with no channel split has a multiplier of 1.0.

    Raises:
        ConfigurationError: If a funded channel is not configured.
    """
    active = {channel: budget for channel, budget in channels.items() if budget > 0}
    if not active:
        return MarketingMixResult()

    r = config.releases
    total = sum(active.values())
    weighted = sum(
        budget / total * config.marketing_channel_effectiveness(channel)
        for channel, budget in active.items()
    )
    base = 1 + math.sqrt(total / r.channel_budget_scale) * r.channel_marketing_weight * weighted

    d = r.diversity_bonus
    diversity = min(d.maximum, d.base + (len(active) - 1) * d.per_additional_channel)

    synergy = 1.0
    synergies: list[str] = []
    for pair in r.channel_synergies:
        if all(channel in active for channel in pair.channels):
            synergy += pair.bonus
            synergies.append("+".join(pair.channels))
    if len(active) > 1 and set(r.marketing_channels) <= set(active):
        synergy += r.full_spectrum_bonus
        synergies.append("full spectrum")

    return MarketingMixResult(
        channels=active,
        weighted_effectiveness=weighted,
        base_multiplier=base,
        diversity_bonus=diversity,
        synergy_bonus=synergy,
        synergies=synergies,
        multiplier=base * diversity * synergy,
    )


def preview_release_marketing(
    config: ConfigurationService, channels: dict[str, int], release_turn: int
) -> ReleaseMarketingPreview:
    """Seasonal cost and channel multiplier of a release's marketing plan."""
    season = season_for_turn(release_turn)
    budget = sum(channels.values())
    return ReleaseMarketingPreview(
        release_turn=release_turn,
        season=season,
        budget=budget,
        seasonal_cost_multiplier=config.seasonal_cost_multiplier(season),
        marketing_cost=marketing_cost(config, budget, release_turn),
        seasonal_revenue_multiplier=config.seasonal_revenue_multiplier(season),
        mix=marketing_mix(config, channels),
    )


def lead_single_boost(config: ConfigurationService, release: Release) -> float:
    """Main-release multiplier earned by a lead single.

    Combines a timing bonus (gap between lead-single and main release) with
    a square-root-dampened bonus for the lead single's marketing budget.
    Returns 1.0 for releases without a lead single and for singles.
    """
    lead = release.lead_single
    if lead is None or release.type == ReleaseType.SINGLE:
        return 1.0

    cfg = config.releases.lead_single
    gap = release.release_turn - lead.release_turn
    if gap in cfg.optimal_timing_turns_before:
        timing_bonus = cfg.optimal_timing_bonus
    elif gap in cfg.good_timing_turns_before:
        timing_bonus = cfg.good_timing_bonus
    else:
        timing_bonus = cfg.default_bonus

    marketing_bonus = 1 + math.sqrt(
        lead.total_budget / cfg.budget_scaling_factor
    ) * cfg.marketing_effectiveness_factor
    return timing_bonus * marketing_bonus


def release_song_outcome(
    config: ConfigurationService,
    rng: random.Random,
    song: Song,
    reputation: float,
    playlist_tier: str,
    popularity: float = 0,
    release_type: str | None = None,
    boost: float = 1.0,
    seasonal_multiplier: float = 1.0,
    marketing_multiplier: float = 1.0,
) -> ReleaseSongOutcome:
    """Streams and initial revenue for one song going live.

    The song's marketing allocation is its ad spend. A release type applies
    its configured revenue multiplier; ``boost`` carries the lead-single
    boost for main releases. ``seasonal_multiplier`` and
    ``marketing_multiplier`` scale streams for the release quarter and the
    channel mix.
    """
    streams = streaming_outcome(
        config,
        rng,
        song.quality,
        playlist_tier,
        reputation,
        song.marketing_allocation,
        popularity,
    )
    type_multiplier = config.release_type_multiplier(release_type) if release_type else 1.0
    streams = round(
        streams * type_multiplier * boost * seasonal_multiplier * marketing_multiplier
    )
    revenue = round(streams * config.streaming.revenue_per_stream)
    return ReleaseSongOutcome(song_id=song.id, streams=streams, revenue=revenue)
