"""Planning MCP tools: sign artists, plan projects and releases."""

import logging
from typing import Any

from mcp.types import TextContent
from toon_format import encode as toon_encode

from label_sim.app import mcp
from label_sim.config import ConfigurationError, get_configuration_service
from label_sim.engine import (
    calculate_per_song_project_cost,
    calculate_project_cost,
    calculate_tour_costs,
    validate_project_plan,
)
from label_sim.models import (
    Artist,
    LeadSingleStrategy,
    Project,
    ProjectType,
    Release,
    ReleaseTrack,
    ReleaseType,
)
from label_sim.storage import EntityNotFoundError, StorageError, get_storage
from label_sim.utils import new_id

logger = logging.getLogger(__name__)


@mcp.tool()
async def sign_artist(
    game_id: str,
    name: str,
    talent: int = 50,
    work_ethic: int = 50,
    popularity: int = 0,
    mood: int = 50,
    monthly_fee: int | None = None,
) -> str | list[TextContent]:
    """Sign an artist to the label.

    Args:
        game_id: Game identifier.
        name: Artist name.
        talent: Talent 0-100. Drives song quality.
        work_ethic: Work ethic 0-100. Amplifies time investment.
        popularity: Popularity 0-100. Helps streams and tour attendance.
        mood: Mood 0-100. Scales song quality.
        monthly_fee: Monthly fee (optional). Defaults to the balance table.

    Returns:
        TOON-encoded signed artist.
    """
    storage = get_storage()
    try:
        storage.get_game(game_id)
        artist = Artist(
            id=new_id("artist"),
            game_id=game_id,
            name=name,
            talent=talent,
            work_ethic=work_ethic,
            popularity=popularity,
            mood=mood,
            monthly_fee=monthly_fee,
        )
        storage.save_artist(artist)
    except EntityNotFoundError as e:
        return [TextContent(type="text", text=str(e))]
    except ValueError as e:
        return [TextContent(type="text", text=f"Invalid artist: {e}")]
    except StorageError as e:
        logger.exception("Failed to save artist")
        return [TextContent(type="text", text=f"Storage error: {e}")]

    return toon_encode({"artist": artist.model_dump(mode="json")})


@mcp.tool()
async def plan_project(
    game_id: str,
    artist_id: str,
    title: str,
    project_type: str,
    producer_tier: str = "local",
    time_investment: str = "standard",
    song_count: int | None = None,
    budget_per_song: int | None = None,
    venue_tier: str = "none",
    cities: int = 0,
    tour_marketing_budget: int = 0,
) -> str | list[TextContent]:
    """Plan a recording project or a tour.

    The project starts production on the next turn and its cost is charged
    then.

    Args:
        game_id: Game identifier.
        artist_id: Artist who records or tours.
        title: Project title.
        project_type: "single", "ep" or "tour".
        producer_tier: Producer tier (local, regional, national, legendary).
        time_investment: Time tier (rushed, standard, extended, perfectionist).
        song_count: Songs to record (optional). Defaults per project type.
        budget_per_song: Production budget per song (optional). Defaults to
                         the estimated cost for the chosen tiers.
        venue_tier: Venue access tier for tours.
        cities: Number of tour cities.
        tour_marketing_budget: Tour marketing budget.

    Returns:
        TOON-encoded project with its cost, planned song ids and any warnings.
    """
    config = get_configuration_service()
    storage = get_storage()

    try:
        game = storage.get_game(game_id)
        storage.get_artist(artist_id)
        kind = ProjectType(project_type)

        if kind == ProjectType.TOUR:
            song_count = 0
            total_cost = calculate_tour_costs(
                config, venue_tier, cities, tour_marketing_budget
            ).total_costs
        else:
            if song_count is None:
                song_count = config.project_cost_range(kind.value).default_song_count
            if budget_per_song is None:
                total_cost = calculate_project_cost(
                    config, kind.value, producer_tier, time_investment, song_count
                ).total_cost
            else:
                total_cost = calculate_per_song_project_cost(
                    config, budget_per_song, song_count, producer_tier, time_investment
                )

        project = Project(
            id=new_id("project"),
            game_id=game_id,
            artist_id=artist_id,
            title=title,
            type=kind,
            producer_tier=producer_tier,
            time_investment=time_investment,
            song_count=song_count,
            total_cost=total_cost,
            created_turn=game.current_turn,
            venue_tier=venue_tier,
            cities=cities,
            tour_marketing_budget=tour_marketing_budget,
        )
        errors, plan_warnings = validate_project_plan(config, project, game.reputation)
        if errors:
            return [
                TextContent(type="text", text=f"Validation errors: {'; '.join(errors)}")
            ]
        warnings = storage.save_project(project) + plan_warnings
    except EntityNotFoundError as e:
        return [TextContent(type="text", text=str(e))]
    except ConfigurationError as e:
        return [TextContent(type="text", text=str(e))]
    except ValueError as e:
        return [TextContent(type="text", text=f"Invalid project: {e}")]
    except StorageError as e:
        logger.exception("Failed to save project")
        return [TextContent(type="text", text=f"Storage error: {e}")]

    result: dict[str, Any] = {"project": project.model_dump(mode="json")}
    if project.is_recording:
        result["planned_song_ids"] = [
            f"{project.id}-song-{n}" for n in range(1, project.song_count + 1)
        ]
    if warnings:
        result["warnings"] = warnings
    return toon_encode(result)


@mcp.tool()
async def plan_release(
    game_id: str,
    artist_id: str,
    title: str,
    release_type: str,
    release_turn: int,
    song_ids: list[str],
    marketing_budget: dict[str, int] | None = None,
    lead_song_id: str | None = None,
    lead_release_turn: int | None = None,
    lead_budget: dict[str, int] | None = None,
    has_story_bonus: bool = False,
) -> str | list[TextContent]:
    """Plan a release of recorded (or soon to be recorded) songs.

    Args:
        game_id: Game identifier.
        artist_id: Releasing artist.
        title: Release title.
        release_type: "single", "ep" or "album".
        release_turn: Turn on which the release goes live.
        song_ids: Songs in track order.
        marketing_budget: Marketing spend by channel (optional),
                          e.g. {"radio": 2000, "digital": 3000}.
        lead_song_id: Song released early as a lead single (optional).
        lead_release_turn: Turn of the lead single release.
        lead_budget: Lead single marketing spend by channel.
        has_story_bonus: Whether the release has a press story angle.

    Returns:
        TOON-encoded release with any validation warnings.
    """
    storage = get_storage()
    channels = get_configuration_service().releases.marketing_channels
    unknown = sorted(
        set(marketing_budget or {}).union(lead_budget or {}).difference(channels)
    )
    if unknown:
        return [
            TextContent(
                type="text",
                text=f"Unknown marketing channels: {', '.join(unknown)}. "
                f"Valid channels: {', '.join(channels)}",
            )
        ]

    try:
        game = storage.get_game(game_id)
        storage.get_artist(artist_id)
        if release_turn <= game.current_turn:
            return [
                TextContent(
                    type="text",
                    text=f"Release turn must be after the current turn ({game.current_turn})",
                )
            ]

        lead = None
        if lead_song_id is not None:
            if lead_release_turn is None or lead_release_turn <= game.current_turn:
                return [
                    TextContent(
                        type="text",
                        text="Lead single needs a release turn after the current turn",
                    )
                ]
            lead = LeadSingleStrategy(
                song_id=lead_song_id,
                release_turn=lead_release_turn,
                budget=lead_budget or {},
            )

        release = Release(
            id=new_id("release"),
            game_id=game_id,
            artist_id=artist_id,
            title=title,
            type=ReleaseType(release_type),
            release_turn=release_turn,
            marketing_breakdown=marketing_budget or {},
            tracks=[
                ReleaseTrack(song_id=song_id, track_number=n)
                for n, song_id in enumerate(song_ids, start=1)
            ],
            lead_single=lead,
            has_story_bonus=has_story_bonus,
        )
        warnings = storage.save_release(release)
    except EntityNotFoundError as e:
        return [TextContent(type="text", text=str(e))]
    except ValueError as e:
        return [TextContent(type="text", text=f"Invalid release: {e}")]
    except StorageError as e:
        logger.exception("Failed to save release")
        return [TextContent(type="text", text=f"Storage error: {e}")]

    result: dict[str, Any] = {"release": release.model_dump(mode="json")}
    if warnings:
        result["warnings"] = warnings
    return toon_encode(result)
