"""Construction of a fresh game from the balance configuration."""

from label_sim.config import ConfigurationService
from label_sim.engine.access import update_access_tiers
from label_sim.models import Executive, GameState
from label_sim.utils import new_id


def new_game_state(
    config: ConfigurationService,
    game_id: str | None = None,
    seed: str | None = None,
) -> GameState:
    """Create the starting state of a game.

    Args:
        config: Configuration service providing starting values.
        game_id: Identifier; generated when omitted.
        seed: Fixed RNG seed; defaults to the game id.

    Returns:
        GameState at turn 0 with starting money, reputation and the access
        tiers that reputation already unlocks.
    """
    game_id = game_id or new_id("game")
    economy = config.economy
    game = GameState(
        id=game_id,
        current_turn=0,
        money=economy.starting_money,
        reputation=economy.starting_reputation,
        creative_capital=economy.starting_creative_capital,
        focus_slots=config.progression.base_focus_slots,
        rng_seed=seed or game_id,
    )

    update_access_tiers(config, game, turn=0)
    return game


def starting_executives(config: ConfigurationService, game_id: str) -> list[Executive]:
    """One executive per configured role, hired when the game starts."""
    return [
        Executive(id=f"{game_id}-{role}", game_id=game_id, role=role, name=role_config.title)
        for role, role_config in config.config.executives.roles.items()
    ]
