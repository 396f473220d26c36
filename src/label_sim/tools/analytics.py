"""ROI analytics MCP tools."""

import logging

from mcp.types import TextContent
from toon_format import encode as toon_encode

from label_sim.app import mcp
from label_sim.cache import RoiCache, UnknownEntityTypeError
from label_sim.engine import InvestmentLedger
from label_sim.storage import EntityNotFoundError, StorageError, get_storage

logger = logging.getLogger(__name__)

# Shared ROI cache instance
_roi_cache: RoiCache | None = None


def get_roi_cache() -> RoiCache:
    """Get or create the shared ROI cache."""
    global _roi_cache
    if _roi_cache is None:
        _roi_cache = RoiCache(InvestmentLedger(get_storage()))
    return _roi_cache


@mcp.tool()
async def get_roi(
    entity_type: str,
    entity_id: str,
    game_id: str,
    refresh: bool = False,
) -> str | list[TextContent]:
    """Get investment and return-on-investment metrics for an entity.

    Results are cached for about a minute.

    Args:
        entity_type: "artist", "project" or "release".
        entity_id: Identifier of the artist, project or release.
        game_id: Game identifier.
        refresh: Bypass the cache and recompute (default: false).

    Returns:
        TOON-encoded metrics: production and marketing investment, revenue,
        ROI (null when nothing was invested) and per-song performance.
    """
    try:
        metrics = get_roi_cache().get(entity_type, entity_id, game_id, refresh=refresh)
    except UnknownEntityTypeError as e:
        return [TextContent(type="text", text=str(e))]
    except EntityNotFoundError as e:
        return [TextContent(type="text", text=str(e))]
    except StorageError as e:
        logger.exception("Storage error while computing ROI")
        return [TextContent(type="text", text=f"Storage error: {e}")]

    return toon_encode({"entity_type": entity_type, "metrics": metrics})


@mcp.tool()
async def get_portfolio_roi(game_id: str, refresh: bool = False) -> str | list[TextContent]:
    """Get label-wide ROI across every song of a game.

    Args:
        game_id: Game identifier.
        refresh: Bypass the cache and recompute (default: false).

    Returns:
        TOON-encoded portfolio metrics: totals, overall and average ROI,
        success rate and best/worst song ROI.
    """
    try:
        get_storage().get_game(game_id)
        metrics = get_roi_cache().get("portfolio", game_id, game_id, refresh=refresh)
    except EntityNotFoundError:
        return [TextContent(type="text", text=f"Game not found: {game_id}")]
    except StorageError as e:
        logger.exception("Storage error while computing portfolio ROI")
        return [TextContent(type="text", text=f"Storage error: {e}")]

    return toon_encode({"portfolio": metrics})
