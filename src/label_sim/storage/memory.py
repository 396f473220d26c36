"""In-memory storage with snapshot/rollback transactions."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel

from label_sim.models import Artist, Executive, GameState, Project, Release, Song
from label_sim.storage.exceptions import EntityNotFoundError
from label_sim.storage.validation import validate_project, validate_release

logger = logging.getLogger(__name__)

TABLES: dict[str, type[BaseModel]] = {
    "games": GameState,
    "artists": Artist,
    "projects": Project,
    "songs": Song,
    "releases": Release,
    "executives": Executive,
}


class InMemoryStorage:
    """Storage backed by dictionaries of pydantic models.

    Reads return deep copies, so nothing changes until an entity is saved.
    ``transaction()`` snapshots every table on entry and restores the snapshot
    if the block raises. Nested transactions join the outermost one.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Any]] = {name: {} for name in TABLES}
        self._depth = 0

    # Persistence hooks

    def _ensure_loaded(self) -> None:
        """Ensure tables are loaded into memory."""

    def _commit(self) -> None:
        """Persist committed state. No-op for pure in-memory storage."""

    def _write(self) -> None:
        """Commit immediately unless a transaction is open."""
        if self._depth == 0:
            self._commit()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run a block atomically.

        All writes inside the block are committed together when it exits
        normally and discarded when it raises.
        """
        self._ensure_loaded()
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshot = {
            name: {key: model.model_copy(deep=True) for key, model in table.items()}
            for name, table in self._tables.items()
        }
        self._depth = 1
        try:
            yield
            self._depth = 0
            self._commit()
        except BaseException:
            self._tables = snapshot
            logger.warning("Storage transaction rolled back")
            raise
        finally:
            self._depth = 0

    # Generic helpers

    def _get(self, table: str, entity_type: str, entity_id: str) -> Any:
        self._ensure_loaded()
        model = self._tables[table].get(entity_id)
        if model is None:
            raise EntityNotFoundError(entity_type, entity_id)
        return model.model_copy(deep=True)

    def _list(self, table: str, game_id: str) -> list[Any]:
        self._ensure_loaded()
        return [
            model.model_copy(deep=True)
            for model in self._tables[table].values()
            if model.game_id == game_id
        ]

    def _put(self, table: str, model: BaseModel, entity_id: str) -> None:
        self._ensure_loaded()
        self._tables[table][entity_id] = model.model_copy(deep=True)
        self._write()

    # Games

    def get_game(self, game_id: str) -> GameState:
        self._ensure_loaded()
        game = self._tables["games"].get(game_id)
        if game is None:
            raise EntityNotFoundError("Game", game_id)
        return game.model_copy(deep=True)

    def save_game(self, game: GameState) -> None:
        self._put("games", game, game.id)

    def list_game_ids(self) -> list[str]:
        self._ensure_loaded()
        return list(self._tables["games"])

    # Artists

    def get_artist(self, artist_id: str) -> Artist:
        return self._get("artists", "Artist", artist_id)

    def list_artists(self, game_id: str) -> list[Artist]:
        return self._list("artists", game_id)

    def save_artist(self, artist: Artist) -> None:
        self._put("artists", artist, artist.id)

    # Projects

    def get_project(self, project_id: str) -> Project:
        return self._get("projects", "Project", project_id)

    def list_projects(self, game_id: str) -> list[Project]:
        return self._list("projects", game_id)

    def save_project(self, project: Project) -> list[str]:
        """Save a project.

        Returns:
            Validation warnings.

        Raises:
            ValueError: If the project fails validation.
        """
        errors, warnings = validate_project(project)
        if errors:
            raise ValueError(f"Validation errors: {'; '.join(errors)}")
        self._put("projects", project, project.id)
        return warnings

    # Songs

    def get_song(self, song_id: str) -> Song:
        return self._get("songs", "Song", song_id)

    def list_songs(
        self,
        game_id: str,
        artist_id: str | None = None,
        project_id: str | None = None,
        released: bool | None = None,
    ) -> list[Song]:
        """List songs of a game, optionally filtered."""
        songs: list[Song] = self._list("songs", game_id)
        if artist_id is not None:
            songs = [s for s in songs if s.artist_id == artist_id]
        if project_id is not None:
            songs = [s for s in songs if s.project_id == project_id]
        if released is not None:
            songs = [s for s in songs if s.is_released == released]
        return songs

    def save_song(self, song: Song) -> None:
        self._put("songs", song, song.id)

    # Releases

    def get_release(self, release_id: str) -> Release:
        return self._get("releases", "Release", release_id)

    def list_releases(self, game_id: str) -> list[Release]:
        return self._list("releases", game_id)

    def save_release(self, release: Release) -> list[str]:
        """Save a release.

        Returns:
            Validation warnings.

        Raises:
            ValueError: If the release fails validation.
        """
        errors, warnings = validate_release(release)
        if errors:
            raise ValueError(f"Validation errors: {'; '.join(errors)}")
        self._put("releases", release, release.id)
        return warnings

    def get_release_songs(self, release_id: str) -> list[Song]:
        """Get the songs of a release ordered by track number.

        Raises:
            EntityNotFoundError: If the release or one of its songs is missing.
        """
        release = self.get_release(release_id)
        tracks = sorted(release.tracks, key=lambda t: t.track_number)
        return [self.get_song(track.song_id) for track in tracks]

    # Executives

    def list_executives(self, game_id: str) -> list[Executive]:
        return self._list("executives", game_id)

    def save_executive(self, executive: Executive) -> None:
        self._put("executives", executive, executive.id)

    def entity_count(self, table: str) -> int:
        self._ensure_loaded()
        return len(self._tables[table])
