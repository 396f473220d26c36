"""Exception classes shared across engine modules.

Module-specific exceptions should still be defined in their respective modules.
"""


class CampaignCompletedError(Exception):
    """Raised when advancing a game whose campaign has already ended."""

    def __init__(self, game_id: str, turn: int) -> None:
        self.game_id = game_id
        self.turn = turn
        super().__init__(f"Campaign for game {game_id} already completed at turn {turn}")


class InvalidTourParametersError(ValueError):
    """Tour inputs outside their valid ranges."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Invalid tour parameters: {'; '.join(errors)}")
