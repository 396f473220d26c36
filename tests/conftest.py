"""Shared test fixtures."""

import copy
from typing import Any

import httpx
import pytest

from label_sim.config import (
    DEFAULT_BALANCE,
    ConfigurationService,
    default_balance_config,
    parse_balance_config,
)
from label_sim.engine import new_game_state, starting_executives
from label_sim.models import (
    Artist,
    GameState,
    Project,
    ProjectType,
    Release,
    ReleaseTrack,
    ReleaseType,
    Song,
)
from label_sim.storage import InMemoryStorage

GAME_ID = "game-test"
ARTIST_ID = "artist-nova"


class MockTransport(httpx.MockTransport):
    """Custom mock transport for testing."""

    pass


def create_mock_transport(responses: dict[str, httpx.Response]) -> MockTransport:
    """Create a mock transport with predefined responses.

    Args:
        responses: Dict mapping URL paths to Response objects

    Returns:
        MockTransport configured with the responses
    """

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path in responses:
            return responses[path]
        return httpx.Response(404, text="Not found")

    return MockTransport(handler)


def balance_with(**overrides: Any) -> dict[str, Any]:
    """Copy of the default balance table with dotted-path overrides.

    Example: ``balance_with(**{"progression.payroll_interval_turns": 2})``.
    """
    data = copy.deepcopy(DEFAULT_BALANCE)
    for path, value in overrides.items():
        *parents, leaf = path.split(".")
        node = data
        for key in parents:
            node = node[key]
        node[leaf] = value
    return data


def config_with(**overrides: Any) -> ConfigurationService:
    return ConfigurationService(parse_balance_config(balance_with(**overrides)))


def make_artist(**kwargs: Any) -> Artist:
    fields: dict[str, Any] = {
        "id": ARTIST_ID,
        "game_id": GAME_ID,
        "name": "Nova Reyes",
        "talent": 70,
        "work_ethic": 60,
        "popularity": 30,
        "mood": 60,
    }
    fields.update(kwargs)
    return Artist(**fields)


def make_song(song_id: str, **kwargs: Any) -> Song:
    fields: dict[str, Any] = {
        "id": song_id,
        "game_id": GAME_ID,
        "artist_id": ARTIST_ID,
        "title": f"Song {song_id}",
        "quality": 60,
    }
    fields.update(kwargs)
    return Song(**fields)


def make_project(**kwargs: Any) -> Project:
    fields: dict[str, Any] = {
        "id": "project-1",
        "game_id": GAME_ID,
        "artist_id": ARTIST_ID,
        "title": "Debut Single",
        "type": ProjectType.SINGLE,
        "song_count": 1,
        "total_cost": 3500,
    }
    fields.update(kwargs)
    return Project(**fields)


def make_release(song_ids: list[str], **kwargs: Any) -> Release:
    fields: dict[str, Any] = {
        "id": "release-1",
        "game_id": GAME_ID,
        "artist_id": ARTIST_ID,
        "title": "First Release",
        "type": ReleaseType.EP if len(song_ids) > 1 else ReleaseType.SINGLE,
        "release_turn": 1,
        "tracks": [
            ReleaseTrack(song_id=song_id, track_number=n)
            for n, song_id in enumerate(song_ids, start=1)
        ],
    }
    fields.update(kwargs)
    return Release(**fields)


@pytest.fixture
def config() -> ConfigurationService:
    """Configuration service over the default balance table."""
    return ConfigurationService(default_balance_config())


@pytest.fixture
def storage() -> InMemoryStorage:
    """Empty in-memory storage."""
    return InMemoryStorage()


@pytest.fixture
def game(config: ConfigurationService, storage: InMemoryStorage) -> GameState:
    """A saved game at turn 0 with one signed artist and no executives."""
    state = new_game_state(config, game_id=GAME_ID, seed="seed-1")
    storage.save_game(state)
    storage.save_artist(make_artist())
    return state


@pytest.fixture
def staffed_game(
    config: ConfigurationService, storage: InMemoryStorage, game: GameState
) -> GameState:
    """The saved game with the starting executive team hired."""
    for executive in starting_executives(config, game.id):
        storage.save_executive(executive)
    return game
