"""Storage contract consumed by the engine."""

from contextlib import AbstractContextManager
from typing import Protocol

from label_sim.models import Artist, Executive, GameState, Project, Release, Song


class Storage(Protocol):
    """Game-scoped reads and writes plus an atomic transaction wrapper.

    Reads return detached copies: a change is only persisted by saving the
    entity again.
    """

    def transaction(self) -> AbstractContextManager[None]: ...

    def get_game(self, game_id: str) -> GameState: ...

    def save_game(self, game: GameState) -> None: ...

    def get_artist(self, artist_id: str) -> Artist: ...

    def list_artists(self, game_id: str) -> list[Artist]: ...

    def save_artist(self, artist: Artist) -> None: ...

    def get_project(self, project_id: str) -> Project: ...

    def list_projects(self, game_id: str) -> list[Project]: ...

    def save_project(self, project: Project) -> list[str]: ...

    def get_song(self, song_id: str) -> Song: ...

    def list_songs(
        self,
        game_id: str,
        artist_id: str | None = None,
        project_id: str | None = None,
        released: bool | None = None,
    ) -> list[Song]: ...

    def save_song(self, song: Song) -> None: ...

    def get_release(self, release_id: str) -> Release: ...

    def list_releases(self, game_id: str) -> list[Release]: ...

    def save_release(self, release: Release) -> list[str]: ...

    def get_release_songs(self, release_id: str) -> list[Song]: ...

    def list_executives(self, game_id: str) -> list[Executive]: ...

    def save_executive(self, executive: Executive) -> None: ...
