"""In-memory TTL cache for ROI metrics."""

import copy
import logging
import time
from collections.abc import Callable
from typing import Any

from label_sim.engine import InvestmentLedger

logger = logging.getLogger(__name__)

ENTITY_TYPES = ("artist", "project", "release", "portfolio")


class UnknownEntityTypeError(ValueError):
    """ROI requested for an entity type the ledger cannot aggregate."""

    def __init__(self, entity_type: str) -> None:
        self.entity_type = entity_type
        super().__init__(
            f"Unknown entity type: {entity_type}. Valid types: {', '.join(ENTITY_TYPES)}"
        )


class RoiCache:
    """Cache of ledger ROI rollups, keyed by entity and game."""

    def __init__(
        self,
        ledger: InvestmentLedger,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the ROI cache.

        Args:
            ledger: Ledger computing the metrics on a miss.
            ttl_seconds: How long a cached entry stays valid. Defaults to 60.
            clock: Monotonic time source, replaceable in tests.
        """
        self.ledger = ledger
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[str, str, str], tuple[float, dict[str, Any]]] = {}

    def _compute(self, entity_type: str, entity_id: str, game_id: str) -> dict[str, Any]:
        match entity_type:
            case "artist":
                return self.ledger.get_artist_investment_metrics(
                    entity_id, game_id
                ).to_output_dict()
            case "project":
                return self.ledger.get_project_investment_metrics(
                    entity_id, game_id
                ).to_output_dict()
            case "release":
                return self.ledger.get_release_investment_metrics(
                    entity_id, game_id
                ).to_output_dict()
            case "portfolio":
                return self.ledger.get_portfolio_metrics(game_id).to_output_dict()
            case _:
                raise UnknownEntityTypeError(entity_type)

    def get(
        self,
        entity_type: str,
        entity_id: str,
        game_id: str,
        refresh: bool = False,
    ) -> dict[str, Any]:
        """Get ROI metrics for an entity, computing them on a miss.

        Args:
            entity_type: "artist", "project", "release" or "portfolio".
            entity_id: Entity identifier (the game id for "portfolio").
            game_id: Game the entity belongs to.
            refresh: Ignore any cached value and recompute.

        Returns:
            Output dictionary of the matching metrics model.

        Raises:
            UnknownEntityTypeError: If the entity type is not supported.
            EntityNotFoundError: If the entity does not exist.
        """
        if entity_type not in ENTITY_TYPES:
            raise UnknownEntityTypeError(entity_type)

        key = (entity_type, entity_id, game_id)
        now = self._clock()
        cached = self._entries.get(key)
        if cached is not None and not refresh and now - cached[0] < self.ttl_seconds:
            logger.debug("ROI cache hit for %s %s", entity_type, entity_id)
            return copy.deepcopy(cached[1])

        metrics = self._compute(entity_type, entity_id, game_id)
        self._entries[key] = (now, metrics)
        return copy.deepcopy(metrics)

    def invalidate(self, game_id: str) -> None:
        """Drop every cached entry of one game."""
        stale = [key for key in self._entries if key[2] == game_id]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.info("Invalidated %d ROI cache entries for game %s", len(stale), game_id)

    def clear(self) -> None:
        self._entries.clear()

    def entry_count(self) -> int:
        return len(self._entries)
