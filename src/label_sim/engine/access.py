"""Reputation-gated access tiers (playlist, press, venue)."""

import logging

from label_sim.config import ACCESS_KINDS, ConfigurationService
from label_sim.models import ChangeEvent, GameState

logger = logging.getLogger(__name__)


def resolve_access_tier(config: ConfigurationService, kind: str, reputation: int) -> str:
    """Highest tier of ``kind`` whose threshold the reputation reaches."""
    reached = "none"
    for name, tier in config.access_tiers(kind):
        if reputation >= tier.threshold:
            reached = name
    return reached


def update_access_tiers(
    config: ConfigurationService,
    game: GameState,
    turn: int,
) -> list[ChangeEvent]:
    """Upgrade the game's access tiers to match its reputation.

    Tiers only move up: a reputation drop never removes access already
    earned. Each upgrade is written to the tier unlock history.

    Args:
        config: Configuration service.
        game: Game state, updated in place.
        turn: Turn on which the upgrade happens.

    Returns:
        One "unlock" change event per upgraded tier.
    """
    events: list[ChangeEvent] = []
    for kind in ACCESS_KINDS:
        current = game.access_tier(kind)
        candidate = resolve_access_tier(config, kind, game.reputation)
        if candidate == current:
            continue

        current_threshold = config.access_tier(kind, current).threshold
        candidate_threshold = config.access_tier(kind, candidate).threshold
        if candidate_threshold <= current_threshold:
            continue

        game.set_access_tier(kind, candidate)
        history = game.tier_unlock_history.setdefault(kind, {})
        history.setdefault(candidate, turn)
        logger.info("Game %s unlocked %s access tier '%s'", game.id, kind, candidate)
        events.append(
            ChangeEvent(
                type="unlock",
                description=f"{kind.capitalize()} access upgraded to {candidate.replace('_', ' ')}",
            )
        )
    return events
