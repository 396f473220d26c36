"""Game lifecycle MCP tools."""

import logging
from typing import Any

from mcp.types import TextContent
from toon_format import encode as toon_encode

from label_sim.app import mcp
from label_sim.config import ConfigurationError, get_configuration_service
from label_sim.engine import (
    CampaignCompletedError,
    TurnController,
    format_financial_breakdown,
    new_game_state,
    starting_executives,
)
from label_sim.storage import EntityNotFoundError, StorageError, get_storage

logger = logging.getLogger(__name__)


def _game_overview(game_id: str) -> dict[str, Any]:
    """Build the state dictionary returned by the game tools."""
    storage = get_storage()
    game = storage.get_game(game_id)
    projects = storage.list_projects(game_id)
    releases = storage.list_releases(game_id)
    songs = storage.list_songs(game_id)

    result: dict[str, Any] = {
        "game": game.model_dump(mode="json", exclude={"rng_seed"}),
        "artists": [
            {"id": a.id, "name": a.name, "popularity": a.popularity, "mood": a.mood}
            for a in storage.list_artists(game_id)
        ],
        "projects": [
            {"id": p.id, "title": p.title, "type": p.type.value, "stage": p.stage.value}
            for p in projects
        ],
        "releases": [
            {
                "id": r.id,
                "title": r.title,
                "type": r.type.value,
                "status": r.status.value,
                "release_turn": r.release_turn,
            }
            for r in releases
        ],
        "song_count": len(songs),
        "released_song_count": sum(1 for s in songs if s.is_released),
    }
    return result


@mcp.tool()
async def start_game(seed: str | None = None) -> str | list[TextContent]:
    """Start a new label simulation game.

    Args:
        seed: Fixed random seed (optional). Two games started with the same
              seed and given the same plans play out identically.

    Returns:
        TOON-encoded starting state: money, reputation, focus slots, access
        tiers and the executive team.
    """
    try:
        config = get_configuration_service()
        storage = get_storage()
        game = new_game_state(config, seed=seed)
        executives = starting_executives(config, game.id)
        with storage.transaction():
            storage.save_game(game)
            for executive in executives:
                storage.save_executive(executive)
    except ConfigurationError as e:
        logger.exception("Invalid balance configuration")
        return [TextContent(type="text", text=f"Configuration error: {e}")]
    except StorageError as e:
        logger.exception("Failed to save new game")
        return [TextContent(type="text", text=f"Storage error: {e}")]

    logger.info("Started game %s (balance %s)", game.id, config.version)
    return toon_encode(
        {
            "game": game.model_dump(mode="json", exclude={"rng_seed"}),
            "executives": [e.role for e in executives],
            "balance_version": config.version,
        }
    )


@mcp.tool()
async def get_game_state(game_id: str) -> str | list[TextContent]:
    """Get the current state of a game.

    Args:
        game_id: Game identifier returned by start_game.

    Returns:
        TOON-encoded game state with artists, projects, releases and song counts.
    """
    try:
        return toon_encode(_game_overview(game_id))
    except EntityNotFoundError:
        return [TextContent(type="text", text=f"Game not found: {game_id}")]
    except StorageError as e:
        logger.exception("Failed to load game %s", game_id)
        return [TextContent(type="text", text=f"Storage error: {e}")]


@mcp.tool()
async def advance_turn(game_id: str) -> str | list[TextContent]:
    """Advance a game by one month.

    Runs production, releases, ongoing revenue, operating costs, press
    coverage and access tier upgrades as one atomic step. If anything fails,
    the game is left exactly as it was.

    Args:
        game_id: Game identifier.

    Returns:
        TOON-encoded turn summary with revenue/expense breakdowns, the change
        log and a one-line financial breakdown.
    """
    try:
        controller = TurnController(get_storage(), get_configuration_service())
        summary = controller.advance_turn(game_id)
    except CampaignCompletedError as e:
        return [TextContent(type="text", text=str(e))]
    except EntityNotFoundError as e:
        return [TextContent(type="text", text=str(e))]
    except ConfigurationError as e:
        logger.exception("Configuration error while advancing game %s", game_id)
        return [TextContent(type="text", text=f"Configuration error: {e}")]
    except StorageError as e:
        logger.exception("Storage error while advancing game %s", game_id)
        return [TextContent(type="text", text=f"Storage error: {e}")]
    except ValueError as e:
        logger.exception("Invalid game data while advancing game %s", game_id)
        return [TextContent(type="text", text=f"Turn failed: {e}")]

    result = summary.to_output_dict()
    result["financial_breakdown"] = format_financial_breakdown(summary)
    return toon_encode(result)
