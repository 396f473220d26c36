"""Pydantic models for the balance configuration.

Every table is validated once at load time. Cross-field rules (ordered
breakpoints, min <= max ranges, decay rate bounds) are enforced here so that
calculators never see a malformed value.
"""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StrictModel(BaseModel):
    """Base model that rejects unknown keys."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class IntRange(StrictModel):
    """Inclusive integer range."""

    min: int = Field(ge=0)
    max: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.min > self.max:
            raise ValueError(f"range min {self.min} exceeds max {self.max}")
        return self

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


class FloatRange(StrictModel):
    """Inclusive float range."""

    min: float
    max: float

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.min > self.max:
            raise ValueError(f"range min {self.min} exceeds max {self.max}")
        return self


# Economy


class ProjectCostRange(StrictModel):
    """Cost range for one project type."""

    min: int = Field(ge=0)
    max: int = Field(ge=0)
    default_song_count: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.min > self.max:
            raise ValueError(f"project cost min {self.min} exceeds max {self.max}")
        return self


class ScaleThresholds(StrictModel):
    """Song counts at which a project counts as small, medium or large."""

    small_project: int = Field(ge=1)
    medium_project: int = Field(ge=1)
    large_project: int = Field(ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if not self.small_project < self.medium_project < self.large_project:
            raise ValueError("economies of scale thresholds must be increasing")
        return self


class ScaleBreakpoints(StrictModel):
    """Per-song cost factor for each project size."""

    single_song: float = Field(gt=0)
    small: float = Field(gt=0)
    medium: float = Field(gt=0)
    large: float = Field(gt=0)


class EconomiesOfScale(StrictModel):
    enabled: bool = True
    thresholds: ScaleThresholds
    breakpoints: ScaleBreakpoints


class SongCountCostSystem(StrictModel):
    """Per-song base costs used for multi-song projects."""

    enabled: bool = True
    base_per_song_cost: dict[str, int]
    default_per_song_cost: int = Field(default=3500, gt=0)
    economies_of_scale: EconomiesOfScale


class EconomyConfig(StrictModel):
    starting_money: int = Field(ge=0)
    starting_reputation: int = Field(ge=0, le=100)
    starting_creative_capital: int = Field(ge=0)
    monthly_burn: IntRange
    default_artist_fee: int = Field(ge=0)
    project_costs: dict[str, ProjectCostRange]
    song_count_cost_system: SongCountCostSystem
    recording_baseline_factor: float = Field(default=1.5, gt=0)


# Production tiers


class ProducerTier(StrictModel):
    cost_multiplier: float = Field(gt=0)
    skill: int = Field(ge=0, le=100)
    unlock_reputation: int = Field(default=0, ge=0)


class TimeInvestmentTier(StrictModel):
    cost_multiplier: float = Field(gt=0)
    quality_multiplier: float = Field(gt=0)


# Streaming


class OngoingStreamsConfig(StrictModel):
    """Decay parameters for revenue from previously released songs."""

    monthly_decay_rate: float = Field(gt=0, le=1)
    max_decay_months: int = Field(ge=1)
    revenue_per_stream: float = Field(gt=0)
    ongoing_factor: float = Field(ge=0)
    reputation_bonus_factor: float = Field(ge=0)
    access_tier_bonus_factor: float = Field(ge=0)
    minimum_revenue_threshold: float = Field(ge=0)
    reputation_baseline: int = 50


class StarPowerConfig(StrictModel):
    """Stream amplification by artist popularity: ``1 + popularity / 100 * max``."""

    enabled: bool = False
    max_multiplier: float = Field(default=0.0, ge=0)


class StreamingConfig(StrictModel):
    quality_weight: float = Field(ge=0)
    playlist_weight: float = Field(ge=0)
    reputation_weight: float = Field(ge=0)
    marketing_weight: float = Field(ge=0)
    popularity_weight: float = Field(default=0.0, ge=0)
    playlist_component_scale: float = Field(default=100, gt=0)
    marketing_scale_divisor: float = Field(default=1000, gt=0)
    marketing_scale_multiplier: float = Field(default=50, ge=0)
    variance: FloatRange
    first_release_multiplier: float = Field(gt=0)
    base_streams_per_point: float = Field(gt=0)
    revenue_per_stream: float = Field(gt=0)
    ongoing: OngoingStreamsConfig
    star_power_amplification: StarPowerConfig = Field(default_factory=StarPowerConfig)

    @model_validator(mode="after")
    def _check_variance(self) -> Self:
        if self.variance.min <= 0:
            raise ValueError("streaming variance must be positive")
        return self


# Tours and press


class TourConfig(StrictModel):
    sell_through_base: float = Field(ge=0, le=1)
    reputation_modifier: float = Field(ge=0)
    local_popularity_weight: float = Field(ge=0)
    marketing_sell_through_factor: float = Field(default=0.0, ge=0)
    merch_percentage: float = Field(ge=0)
    ticket_price_base: float = Field(ge=0)
    ticket_price_per_capacity: float = Field(ge=0)
    venue_fee_per_capacity: float = Field(ge=0)
    production_fee_per_capacity: float = Field(ge=0)
    max_cities: int = Field(default=10, ge=1)


class PressConfig(StrictModel):
    base_chance: float = Field(ge=0, le=1)
    pr_spend_modifier: float = Field(ge=0)
    reputation_modifier: float = Field(ge=0)
    story_flag_bonus: float = Field(ge=0)
    max_pickups_per_release: int = Field(ge=0)
    reputation_gain_multiplier: float = Field(ge=0)


# Access tiers


class AccessTier(StrictModel):
    """One reputation-gated tier of playlist, press or venue access."""

    threshold: int = Field(ge=0)
    multiplier: float = Field(default=1.0, ge=0)
    pickup_chance: float = Field(default=0.0, ge=0, le=1)
    capacity: IntRange | None = None


def _check_tier_table(kind: str, tiers: dict[str, AccessTier]) -> None:
    if "none" not in tiers:
        raise ValueError(f"{kind} access tiers must define a 'none' tier")
    if tiers["none"].threshold != 0:
        raise ValueError(f"{kind} access tier 'none' must have threshold 0")
    thresholds = [tier.threshold for tier in tiers.values()]
    if len(set(thresholds)) != len(thresholds):
        raise ValueError(f"{kind} access tier thresholds must be unique")


class AccessTierSystem(StrictModel):
    playlist: dict[str, AccessTier]
    press: dict[str, AccessTier]
    venue: dict[str, AccessTier]

    @model_validator(mode="after")
    def _check_tables(self) -> Self:
        _check_tier_table("playlist", self.playlist)
        _check_tier_table("press", self.press)
        _check_tier_table("venue", self.venue)
        for name, tier in self.venue.items():
            if tier.capacity is None:
                raise ValueError(f"venue tier '{name}' needs a capacity range")
        return self


# Quality


class EfficiencyBreakpoints(StrictModel):
    """Efficiency ratios that separate the budget curve segments."""

    penalty_threshold: float = Field(gt=0)
    minimum_viable: float = Field(gt=0)
    optimal_efficiency: float = Field(gt=0)
    luxury_threshold: float = Field(gt=0)
    diminishing_threshold: float = Field(gt=0)

    def ordered(self) -> list[float]:
        return [
            self.penalty_threshold,
            self.minimum_viable,
            self.optimal_efficiency,
            self.luxury_threshold,
            self.diminishing_threshold,
        ]


class SegmentMultipliers(StrictModel):
    """Multiplier reached at each breakpoint of the budget curve."""

    penalty_threshold: float = Field(gt=0)
    minimum_viable: float = Field(gt=0)
    optimal_efficiency: float = Field(gt=0)
    luxury_threshold: float = Field(gt=0)
    diminishing_threshold: float = Field(gt=0)

    def ordered(self) -> list[float]:
        return [
            self.penalty_threshold,
            self.minimum_viable,
            self.optimal_efficiency,
            self.luxury_threshold,
            self.diminishing_threshold,
        ]


class BudgetQualityConfig(StrictModel):
    enabled: bool = True
    neutral_multiplier: float = 1.0
    min_multiplier: float = Field(gt=0)
    max_multiplier: float = Field(gt=0)
    breakpoints: EfficiencyBreakpoints
    segment_multipliers: SegmentMultipliers
    diminishing_factor: float = Field(ge=0)
    dampening_factor: float | None = Field(default=None, gt=0, le=1)

    @model_validator(mode="after")
    def _check_curve(self) -> Self:
        points = self.breakpoints.ordered()
        if any(a >= b for a, b in zip(points, points[1:])):
            raise ValueError("budget efficiency breakpoints must be strictly increasing")
        values = self.segment_multipliers.ordered()
        if any(a > b for a, b in zip(values, values[1:])):
            raise ValueError("budget segment multipliers must be non-decreasing")
        if self.min_multiplier > self.max_multiplier:
            raise ValueError("budget min_multiplier exceeds max_multiplier")
        if self.min_multiplier > values[0]:
            raise ValueError("budget min_multiplier exceeds the penalty segment multiplier")
        if not self.min_multiplier <= self.neutral_multiplier <= self.max_multiplier:
            raise ValueError("budget neutral_multiplier must lie within [min, max]")
        return self


class SongCountImpactConfig(StrictModel):
    enabled: bool = True
    base_quality_per_song: float = Field(gt=0, le=1)
    min_quality_multiplier: float = Field(gt=0, le=1)


class OutlierConfig(StrictModel):
    """A rare quality outcome: ``base + skill_span * f(skill)``."""

    chance: float = Field(ge=0, le=1)
    base: float = Field(gt=0)
    skill_span: float = Field(ge=0)


class SongGenerationConfig(StrictModel):
    talent_weight: float = Field(ge=0)
    skill_weight: float = Field(ge=0)
    work_ethic_bonus: float = Field(ge=0)
    popularity_base: float = Field(gt=0)
    popularity_span: float = Field(ge=0)
    mood_base: float = Field(gt=0)
    mood_span: float = Field(ge=0)
    variance_max_percent: float = Field(ge=0)
    variance_skill_reduction: float = Field(ge=0)
    breakout: OutlierConfig
    failure: OutlierConfig
    quality_floor: int = Field(ge=20, le=100)
    quality_ceiling: int = Field(ge=20, le=100)
    songs_per_turn: dict[str, int]
    title_pool: list[str] = Field(min_length=1)
    moods: list[str] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.quality_floor > self.quality_ceiling:
            raise ValueError("quality_floor exceeds quality_ceiling")
        if self.variance_skill_reduction > self.variance_max_percent:
            raise ValueError("variance_skill_reduction exceeds variance_max_percent")
        return self


class QualitySystemConfig(StrictModel):
    budget: BudgetQualityConfig
    song_count: SongCountImpactConfig
    generation: SongGenerationConfig


# Releases, progression, executives


class LeadSingleConfig(StrictModel):
    optimal_timing_turns_before: list[int]
    good_timing_turns_before: list[int] = Field(default_factory=list)
    optimal_timing_bonus: float = Field(gt=0)
    good_timing_bonus: float = Field(gt=0)
    default_bonus: float = Field(gt=0)
    budget_scaling_factor: float = Field(gt=0)
    marketing_effectiveness_factor: float = Field(ge=0)


SEASONS = ("q1", "q2", "q3", "q4")


class MarketingChannel(StrictModel):
    effectiveness: float = Field(gt=0, le=1)
    description: str | None = None


class DiversityBonusConfig(StrictModel):
    """Multiplier ``base + (channels - 1) * per_additional_channel``, capped."""

    base: float = Field(gt=0)
    per_additional_channel: float = Field(ge=0)
    maximum: float = Field(gt=0)

    @model_validator(mode="after")
    def _check_cap(self) -> Self:
        if self.maximum < self.base:
            raise ValueError("diversity maximum is below its base")
        return self


class ChannelSynergy(StrictModel):
    channels: list[str] = Field(min_length=2)
    bonus: float = Field(ge=0)


class ReleaseConfig(StrictModel):
    type_multipliers: dict[str, float]
    lead_single: LeadSingleConfig
    marketing_channels: dict[str, MarketingChannel] = Field(min_length=1)
    channel_budget_scale: float = Field(gt=0)
    channel_marketing_weight: float = Field(ge=0)
    diversity_bonus: DiversityBonusConfig
    channel_synergies: list[ChannelSynergy] = Field(default_factory=list)
    full_spectrum_bonus: float = Field(default=0.0, ge=0)
    seasonal_revenue_multipliers: dict[str, float]
    seasonal_cost_multipliers: dict[str, float]

    @model_validator(mode="after")
    def _check_channels_and_seasons(self) -> Self:
        for synergy in self.channel_synergies:
            unknown = [c for c in synergy.channels if c not in self.marketing_channels]
            if unknown:
                raise ValueError(f"channel synergy references unknown channels: {unknown}")
        for name in ("seasonal_revenue_multipliers", "seasonal_cost_multipliers"):
            table = getattr(self, name)
            if sorted(table) != list(SEASONS):
                raise ValueError(f"{name} must define exactly {', '.join(SEASONS)}")
            if any(value <= 0 for value in table.values()):
                raise ValueError(f"{name} values must be positive")
        return self



class ProgressionConfig(StrictModel):
    campaign_length_turns: int = Field(ge=1)
    min_production_turns: int = Field(ge=0)
    max_production_turns: int = Field(ge=1)
    base_focus_slots: int = Field(ge=1)
    max_focus_slots: int = Field(ge=1)
    focus_slot_unlock_reputation: int = Field(ge=0)
    payroll_interval_turns: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.min_production_turns > self.max_production_turns:
            raise ValueError("min_production_turns exceeds max_production_turns")
        if self.base_focus_slots > self.max_focus_slots:
            raise ValueError("base_focus_slots exceeds max_focus_slots")
        return self


class RoleConfig(StrictModel):
    base_salary: int = Field(ge=0)
    title: str | None = None


class ExecutiveConfig(StrictModel):
    roles: dict[str, RoleConfig]


class BalanceConfig(StrictModel):
    """Complete, validated balance table."""

    version: str
    economy: EconomyConfig
    producer_tiers: dict[str, ProducerTier]
    time_investment: dict[str, TimeInvestmentTier]
    streaming: StreamingConfig
    tour: TourConfig
    press: PressConfig
    access_tiers: AccessTierSystem
    quality: QualitySystemConfig
    releases: ReleaseConfig
    progression: ProgressionConfig
    executives: ExecutiveConfig

    @model_validator(mode="after")
    def _check_references(self) -> Self:
        if not self.producer_tiers:
            raise ValueError("at least one producer tier is required")
        if not self.time_investment:
            raise ValueError("at least one time investment tier is required")
        return self
