"""Planning calculator MCP tools (no game state is changed)."""

import logging
import random
from typing import Any

from mcp.types import TextContent
from toon_format import encode as toon_encode

from label_sim.app import mcp
from label_sim.config import ConfigurationError, get_configuration_service
from label_sim.engine import (
    InvalidTourParametersError,
    budget_quality_breakdown,
    calculate_per_song_project_cost,
    calculate_tour_costs,
    preview_release_marketing,
    song_count_quality_impact,
    tour_revenue_breakdown,
)
from label_sim.models import ClampRecord

logger = logging.getLogger(__name__)


@mcp.tool()
async def preview_budget_quality(
    project_type: str,
    budget_per_song: int,
    producer_tier: str = "local",
    time_investment: str = "standard",
    song_count: int = 1,
) -> str | list[TextContent]:
    """Preview how a production budget affects song quality.

    Args:
        project_type: "single" or "ep".
        budget_per_song: Production budget per song.
        producer_tier: Producer tier (local, regional, national, legendary).
        time_investment: Time tier (rushed, standard, extended, perfectionist).
        song_count: Songs in the project (default: 1).

    Returns:
        TOON-encoded minimum viable cost, efficiency ratio, rating, budget
        quality multiplier, song count impact and total project cost.
    """
    config = get_configuration_service()
    try:
        breakdown = budget_quality_breakdown(
            config,
            budget_per_song,
            project_type,
            producer_tier,
            time_investment,
            song_count,
        )
        total_cost = calculate_per_song_project_cost(
            config, budget_per_song, song_count, producer_tier, time_investment
        )
    except ConfigurationError as e:
        return [TextContent(type="text", text=str(e))]

    result: dict[str, Any] = breakdown.to_output_dict()
    result["song_count"] = song_count
    result["song_count_impact"] = round(song_count_quality_impact(config, song_count), 3)
    result["total_project_cost"] = total_cost
    return toon_encode(result)


@mcp.tool()
async def preview_tour(
    venue_tier: str,
    cities: int,
    artist_popularity: int,
    reputation: int,
    marketing_budget: int = 0,
    seed: str | None = None,
) -> str | list[TextContent]:
    """Estimate tour revenue, costs and profit.

    Args:
        venue_tier: Venue access tier (none, clubs, theaters, arenas).
        cities: Number of cities.
        artist_popularity: Artist popularity 0-100.
        reputation: Label reputation.
        marketing_budget: Tour marketing budget (default: 0).
        seed: Random seed for the venue capacity roll (optional).

    Returns:
        TOON-encoded revenue breakdown, cost breakdown and estimated profit.
    """
    config = get_configuration_service()
    clamps: list[ClampRecord] = []
    try:
        revenue = tour_revenue_breakdown(
            config,
            random.Random(seed),
            venue_tier,
            artist_popularity,
            reputation,
            cities,
            marketing_budget,
            clamps,
        )
        costs = calculate_tour_costs(config, venue_tier, cities, marketing_budget)
    except InvalidTourParametersError as e:
        return [TextContent(type="text", text=str(e))]
    except ConfigurationError as e:
        return [TextContent(type="text", text=str(e))]

    result: dict[str, Any] = {
        "revenue": revenue.to_output_dict(),
        "costs": costs.model_dump(),
        "estimated_profit": revenue.total_revenue - costs.total_costs,
    }
    if clamps:
        result["clamped"] = [c.name for c in clamps]
    return toon_encode(result)


@mcp.tool()
async def preview_release_plan(
    marketing_budget: dict[str, int],
    release_turn: int,
) -> str | list[TextContent]:
    """Preview the seasonal cost and channel mix of a release marketing plan.

    Args:
        marketing_budget: Spend by channel, e.g. {"radio": 2000, "digital": 3000}.
        release_turn: Turn the release goes live (turn 1 is January).

    Returns:
        TOON-encoded season, seasonal cost and revenue multipliers, cash
        marketing cost and the channel mix multiplier with its synergies.
    """
    if release_turn < 1 or any(amount < 0 for amount in marketing_budget.values()):
        return [
            TextContent(
                type="text",
                text="release_turn must be at least 1 and channel budgets non-negative",
            )
        ]
    try:
        preview = preview_release_marketing(
            get_configuration_service(), marketing_budget, release_turn
        )
    except ConfigurationError as e:
        return [TextContent(type="text", text=str(e))]

    return toon_encode(preview.to_output_dict())
