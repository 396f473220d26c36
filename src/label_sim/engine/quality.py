"""Quality and cost model.

Pure functions turning budgets, producer/time tiers and artist attributes
into quality multipliers, song quality scores and project costs.
"""

import logging
import math
import random

from label_sim.config import ConfigurationService
from label_sim.config.models import BudgetQualityConfig
from label_sim.engine.bounds import clamp
from label_sim.models import (
    Artist,
    BudgetQualityResult,
    ClampRecord,
    Project,
    ProjectCostResult,
    ProjectType,
    SongQualityResult,
)

logger = logging.getLogger(__name__)

RECORDING_TYPES = {ProjectType.SINGLE.value, ProjectType.EP.value}

EFFICIENCY_RATINGS = [
    "Insufficient",
    "Below Standard",
    "Efficient",
    "Premium",
    "Luxury",
    "Excessive",
]


def economies_of_scale_factor(config: ConfigurationService, unit_count: int) -> float:
    """Per-song cost factor for a project of ``unit_count`` songs.

    Args:
        config: Configuration service.
        unit_count: Number of songs in the project.

    Returns:
        Cost factor; 1.0 when economies of scale are disabled.
    """
    scale = config.economy.song_count_cost_system.economies_of_scale
    if not scale.enabled:
        return 1.0

    thresholds = scale.thresholds
    breakpoints = scale.breakpoints
    if unit_count >= thresholds.large_project:
        return breakpoints.large
    if unit_count >= thresholds.medium_project:
        return breakpoints.medium
    if unit_count >= thresholds.small_project:
        return breakpoints.small
    return breakpoints.single_song


def minimum_viable_cost(
    config: ConfigurationService,
    project_type: str,
    unit_count: int = 1,
) -> int:
    """Per-song budget at which quality is neither boosted nor penalised.

    Multi-song projects use the per-song cost system with economies of scale.
    Single songs (or a disabled per-song system) derive the cost from the
    project cost range. Producer and time tiers are excluded because they are
    already reflected in what the player pays.

    Args:
        config: Configuration service.
        project_type: Project type ("single", "ep", ...).
        unit_count: Number of songs.

    Returns:
        Minimum viable cost per song, rounded to whole dollars.
    """
    system = config.economy.song_count_cost_system
    if system.enabled and unit_count > 1:
        per_song = config.base_per_song_cost(project_type) * economies_of_scale_factor(
            config, unit_count
        )
    else:
        cost_range = config.project_cost_range(project_type)
        default_count = cost_range.default_song_count
        if unit_count == 1:
            per_song = cost_range.min / default_count
        else:
            per_song = (cost_range.min + cost_range.max) / 2 / default_count

    if project_type in RECORDING_TYPES:
        per_song *= config.economy.recording_baseline_factor

    return round(per_song)


def piecewise_budget_multiplier(budget: BudgetQualityConfig, ratio: float) -> float:
    """Map an efficiency ratio through the six-segment budget curve.

    Segments: flat penalty, four linear ramps between the configured
    breakpoints, then a logarithmic tail. The result is not clamped.
    """
    points = budget.breakpoints.ordered()
    values = budget.segment_multipliers.ordered()

    if ratio < points[0]:
        return budget.min_multiplier

    for i in range(len(points) - 1):
        if ratio < points[i + 1]:
            span = points[i + 1] - points[i]
            progress = (ratio - points[i]) / span
            return values[i] + (values[i + 1] - values[i]) * progress

    excess = ratio - points[-1]
    return values[-1] + math.log1p(excess) * budget.diminishing_factor * 0.1


def budget_efficiency_rating(budget: BudgetQualityConfig, ratio: float) -> str:
    """Label an efficiency ratio (Insufficient ... Excessive)."""
    for label, point in zip(EFFICIENCY_RATINGS, budget.breakpoints.ordered()):
        if ratio < point:
            return label
    return EFFICIENCY_RATINGS[-1]


def budget_quality_breakdown(
    config: ConfigurationService,
    budget_per_unit: float,
    project_type: str,
    producer_tier: str,
    time_tier: str,
    unit_count: int = 1,
    clamps: list[ClampRecord] | None = None,
) -> BudgetQualityResult:
    """Compute the budget quality multiplier with its intermediate values.

    Args:
        config: Configuration service.
        budget_per_unit: Budget per song.
        project_type: Project type.
        producer_tier: Producer tier (must exist).
        time_tier: Time investment tier (must exist).
        unit_count: Number of songs.
        clamps: Optional list receiving clamp records.

    Returns:
        BudgetQualityResult; the multiplier is rounded to 3 decimals.

    Raises:
        ConfigurationError: If a tier or the project type is unknown.
    """
    budget = config.quality.budget
    config.producer_tier(producer_tier)
    config.time_investment(time_tier)

    if not budget.enabled or budget_per_unit < 0 or unit_count <= 0:
        neutral = 1.0 if not budget.enabled else budget.neutral_multiplier
        return BudgetQualityResult(
            budget_per_song=max(budget_per_unit, 0),
            minimum_viable_cost=0,
            raw_ratio=1.0,
            efficiency_ratio=1.0,
            multiplier=neutral,
            rating="Efficient",
        )

    min_viable = minimum_viable_cost(config, project_type, unit_count)
    raw_ratio = budget_per_unit / min_viable if min_viable > 0 else 1.0

    ratio = raw_ratio
    if budget.dampening_factor is not None:
        ratio = 1 + budget.dampening_factor * (raw_ratio - 1)

    multiplier = piecewise_budget_multiplier(budget, ratio)
    multiplier = clamp(
        "budget_quality_multiplier",
        multiplier,
        budget.min_multiplier,
        budget.max_multiplier,
        clamps,
    )
    multiplier = round(multiplier, 3)

    logger.debug(
        "Budget quality: budget=%.0f min_viable=%d ratio=%.3f multiplier=%.3f",
        budget_per_unit,
        min_viable,
        ratio,
        multiplier,
    )

    return BudgetQualityResult(
        budget_per_song=budget_per_unit,
        minimum_viable_cost=min_viable,
        raw_ratio=raw_ratio,
        efficiency_ratio=ratio,
        multiplier=multiplier,
        rating=budget_efficiency_rating(budget, ratio),
    )


def budget_quality_multiplier(
    config: ConfigurationService,
    budget_per_unit: float,
    project_type: str,
    producer_tier: str,
    time_tier: str,
    unit_count: int = 1,
    clamps: list[ClampRecord] | None = None,
) -> float:
    """Budget quality multiplier within the configured [min, max]."""
    return budget_quality_breakdown(
        config,
        budget_per_unit,
        project_type,
        producer_tier,
        time_tier,
        unit_count,
        clamps,
    ).multiplier


def song_count_quality_impact(config: ConfigurationService, unit_count: int) -> float:
    """Quality multiplier for recording several songs in one project.

    Returns ``base^(n-1)`` floored at the configured minimum, or 1.0 for a
    single song or when the system is disabled.
    """
    impact = config.quality.song_count
    if not impact.enabled or unit_count <= 1:
        return 1.0
    return max(
        impact.min_quality_multiplier,
        impact.base_quality_per_song ** (unit_count - 1),
    )


def calculate_song_quality(
    config: ConfigurationService,
    rng: random.Random,
    artist: Artist,
    producer_tier: str,
    time_tier: str,
    song_count: int,
    budget_per_song: float,
    project_type: str,
    clamps: list[ClampRecord] | None = None,
) -> SongQualityResult:
    """Compute the quality of one newly recorded song.

    The base combines artist talent and producer skill, then multiplicative
    factors apply for time investment (amplified by work ethic), popularity,
    song count, budget and mood. Variance narrows as skill rises, with rare
    breakout and failure outliers. All randomness comes from ``rng``.

    Args:
        config: Configuration service.
        rng: Seeded random source for this turn.
        artist: Recording artist.
        producer_tier: Producer tier name.
        time_tier: Time investment tier name.
        song_count: Songs in the project.
        budget_per_song: Production budget per song.
        project_type: Project type.
        clamps: Optional list receiving clamp records.

    Returns:
        SongQualityResult with the final quality and every factor.
    """
    gen = config.quality.generation
    producer = config.producer_tier(producer_tier)
    time = config.time_investment(time_tier)

    base = artist.talent * gen.talent_weight + producer.skill * gen.skill_weight
    factors = {
        "time": time.quality_multiplier * (1 + artist.work_ethic / 100 * gen.work_ethic_bonus),
        "popularity": gen.popularity_base
        + gen.popularity_span * math.sqrt(artist.popularity / 100),
        "song_count": song_count_quality_impact(config, song_count),
        "budget": budget_quality_multiplier(
            config,
            budget_per_song,
            project_type,
            producer_tier,
            time_tier,
            song_count,
            clamps,
        ),
        "mood": gen.mood_base + gen.mood_span * artist.mood / 100,
    }

    quality = base
    for factor in factors.values():
        quality *= factor

    combined_skill = (artist.talent + producer.skill) / 2
    variance_range = gen.variance_max_percent - gen.variance_skill_reduction * (
        combined_skill / 100
    )

    outlier: str | None = None
    roll = rng.random()
    if roll < gen.breakout.chance:
        variance = gen.breakout.base + gen.breakout.skill_span * (1 - combined_skill / 100)
        outlier = "breakout"
    elif roll < gen.breakout.chance + gen.failure.chance:
        variance = gen.failure.base + gen.failure.skill_span * (combined_skill / 100)
        outlier = "failure"
    else:
        variance = 1 + rng.uniform(-variance_range, variance_range) / 100
    factors["variance"] = variance

    raw_quality = quality * variance
    final = clamp(
        "song_quality",
        raw_quality,
        gen.quality_floor,
        gen.quality_ceiling,
        clamps,
    )

    logger.debug(
        "Song quality: base=%.1f raw=%.1f final=%d outlier=%s",
        base,
        raw_quality,
        round(final),
        outlier or "none",
    )

    return SongQualityResult(
        quality=round(final),
        raw_quality=raw_quality,
        factors=factors,
        outlier=outlier,
    )


def calculate_project_cost(
    config: ConfigurationService,
    project_type: str,
    producer_tier: str = "local",
    time_tier: str = "standard",
    song_count: int = 1,
    quality: int = 50,
) -> ProjectCostResult:
    """Estimate the cost of a project.

    Recording projects use the per-song cost system when it is enabled;
    otherwise the cost is interpolated within the project cost range by the
    target quality (0-100). Producer and time multipliers apply on top.

    Raises:
        ConfigurationError: If a tier or project type is unknown.
    """
    producer = config.producer_tier(producer_tier)
    time = config.time_investment(time_tier)
    system = config.economy.song_count_cost_system

    if project_type in RECORDING_TYPES and system.enabled and song_count > 0:
        per_song = config.base_per_song_cost(project_type) * economies_of_scale_factor(
            config, song_count
        )
        base_cost = per_song * song_count
    else:
        cost_range = config.project_cost_range(project_type)
        base_cost = cost_range.min + (cost_range.max - cost_range.min) * quality / 100

    total = math.floor(base_cost * producer.cost_multiplier * time.cost_multiplier)
    return ProjectCostResult(
        base_cost=base_cost,
        producer_multiplier=producer.cost_multiplier,
        time_multiplier=time.cost_multiplier,
        total_cost=total,
        per_song_cost=total // max(1, song_count),
    )


def calculate_per_song_project_cost(
    config: ConfigurationService,
    budget_per_song: int,
    song_count: int,
    producer_tier: str,
    time_tier: str,
) -> int:
    """Total cost of a project from a chosen per-song budget."""
    producer = config.producer_tier(producer_tier)
    time = config.time_investment(time_tier)
    return round(
        budget_per_song * song_count * producer.cost_multiplier * time.cost_multiplier
    )


def validate_project_plan(
    config: ConfigurationService,
    project: Project,
    reputation: int,
) -> tuple[list[str], list[str]]:
    """Check that a project's tiers are known and unlocked.

    Args:
        config: Configuration service.
        project: Project about to start production.
        reputation: Label reputation.

    Returns:
        Tuple of (errors, warnings). Errors block production.
    """
    errors: list[str] = []
    warnings: list[str] = []

    producer = config.config.producer_tiers.get(project.producer_tier)
    if producer is None:
        errors.append(f"Unknown producer tier: {project.producer_tier}")
    elif reputation < producer.unlock_reputation:
        errors.append(
            f"Producer tier '{project.producer_tier}' requires "
            f"{producer.unlock_reputation} reputation (current: {reputation})"
        )

    if project.time_investment not in config.config.time_investment:
        errors.append(f"Unknown time investment: {project.time_investment}")

    if project.producer_tier == "legendary" and project.time_investment == "rushed":
        errors.append("Legendary producers refuse rushed timeline projects")

    if not project.is_recording:
        venue = config.config.access_tiers.venue.get(project.venue_tier)
        if venue is None:
            errors.append(f"Unknown venue tier: {project.venue_tier}")
        elif reputation < venue.threshold:
            errors.append(
                f"Venue tier '{project.venue_tier}' requires "
                f"{venue.threshold} reputation (current: {reputation})"
            )
        max_cities = config.tour.max_cities
        if not 1 <= project.cities <= max_cities:
            errors.append(f"Tours play between 1 and {max_cities} cities, got {project.cities}")

    if not errors and project.is_recording and project.song_count > 0:
        per_song = project.total_cost / project.song_count
        min_viable = minimum_viable_cost(config, project.type.value, project.song_count)
        penalty = config.quality.budget.breakpoints.penalty_threshold
        if per_song < min_viable * penalty:
            warnings.append(
                f"Budget of ${per_song:,.0f} per song is far below the "
                f"${min_viable:,} minimum viable cost"
            )

    return errors, warnings
