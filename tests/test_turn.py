"""Tests for the turn controller."""

from typing import Any
from unittest.mock import patch

import pytest

from label_sim.config import ConfigurationService
from label_sim.engine import CampaignCompletedError, TurnController, new_game_state, turn_rng
from label_sim.models import (
    GameState,
    LeadSingleStrategy,
    ProjectStage,
    ProjectType,
    ReleaseStatus,
    TurnSummary,
)
from label_sim.storage import EntityNotFoundError, InMemoryStorage
from tests.conftest import (
    GAME_ID,
    config_with,
    make_artist,
    make_project,
    make_release,
    make_song,
)


@pytest.fixture
def controller(storage: InMemoryStorage, config: ConfigurationService) -> TurnController:
    return TurnController(storage, config)


def _descriptions(summary: TurnSummary) -> list[str]:
    return [change.description for change in summary.changes]


def _first_release_streams(config: ConfigurationService, **release_fields: Any) -> int:
    """First-month streams of a one-song release in a fresh game with a fixed seed."""
    storage = InMemoryStorage()
    storage.save_game(new_game_state(config, game_id=GAME_ID, seed="seed-1"))
    storage.save_artist(make_artist())
    storage.save_song(make_song("s1"))
    storage.save_release(make_release(["s1"], **release_fields))
    TurnController(storage, config).advance_turn(GAME_ID)
    return storage.get_song("s1").initial_streams


class TestTurnRng:
    """Tests for per-turn random sources."""

    def test_same_seed_same_sequence(self) -> None:
        """A game's turn always draws the same numbers."""
        assert turn_rng("abc", 3).random() == turn_rng("abc", 3).random()

    def test_turns_differ(self) -> None:
        """Different turns draw different numbers."""
        assert turn_rng("abc", 3).random() != turn_rng("abc", 4).random()


class TestAdvanceTurn:
    """Tests for the turn sequence and its bookkeeping."""

    def test_empty_turn(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """A turn with nothing planned still charges operations and artist fees."""
        summary = controller.advance_turn(GAME_ID)

        assert summary.turn == 1
        assert summary.revenue == 0
        assert 3000 <= summary.expense_breakdown.operations <= 6000
        assert summary.expense_breakdown.artist_salaries == 1200
        assert summary.expense_breakdown.executive_salaries == 0
        assert "Monthly operations" in _descriptions(summary)

        saved = storage.get_game(GAME_ID)
        assert saved.current_turn == 1
        assert saved.money == 75000 - summary.expenses

    def test_money_invariant(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """Ending money equals starting money plus revenue minus expenses."""
        storage.save_project(make_project())
        storage.save_release(
            make_release(["project-1-song-1"], release_turn=2, marketing_budget=2000)
        )

        for _ in range(4):
            summary = controller.advance_turn(GAME_ID)
            assert summary.ending_money == (
                summary.starting_money + summary.revenue - summary.expenses
            )
            assert summary.revenue == summary.revenue_breakdown.total
            assert summary.expenses == summary.expense_breakdown.total
            assert storage.get_game(GAME_ID).money == summary.ending_money

    def test_unknown_game(self, controller: TurnController) -> None:
        """Advancing a missing game raises EntityNotFoundError."""
        with pytest.raises(EntityNotFoundError):
            controller.advance_turn("missing")

    def test_deterministic(self, config: ConfigurationService) -> None:
        """Two games with the same seed and plans produce identical turns."""

        def play() -> list[dict]:
            storage = InMemoryStorage()
            storage.save_game(new_game_state(config, game_id=GAME_ID, seed="fixed"))
            storage.save_artist(make_artist())
            storage.save_project(make_project(type=ProjectType.EP, song_count=4, total_cost=16000))
            controller = TurnController(storage, config)
            summaries = [controller.advance_turn(GAME_ID).to_output_dict() for _ in range(3)]
            songs = [s.model_dump() for s in storage.list_songs(GAME_ID)]
            return summaries + songs

        assert play() == play()

    def test_failed_turn_rolls_back(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """A failure in any step leaves no partial writes."""
        storage.save_project(make_project())

        with patch(
            "label_sim.engine.turn.calculate_operating_burn",
            side_effect=RuntimeError("boom"),
        ):
            with pytest.raises(RuntimeError):
                controller.advance_turn(GAME_ID)

        saved = storage.get_game(GAME_ID)
        assert saved.current_turn == 0
        assert saved.money == 75000
        assert storage.get_project("project-1").stage == ProjectStage.PLANNING
        assert storage.list_songs(GAME_ID) == []

        assert controller.advance_turn(GAME_ID).turn == 1


class TestProjectLifecycle:
    """Tests for project stage advancement and production."""

    def test_single_lifecycle(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """A single moves planning -> production -> marketing -> recorded."""
        storage.save_project(make_project())

        first = controller.advance_turn(GAME_ID)
        project = storage.get_project("project-1")
        assert project.stage == ProjectStage.PRODUCTION
        assert project.production_start_turn == 1
        assert project.songs_created == 1
        assert first.expense_breakdown.project_costs == 3500
        assert "Debut Single moved from planning to production" in _descriptions(first)

        song = storage.get_song("project-1-song-1")
        assert song.production_budget == 3500
        assert song.project_id == "project-1"
        assert 25 <= song.quality <= 98

        controller.advance_turn(GAME_ID)
        assert storage.get_project("project-1").stage == ProjectStage.PRODUCTION

        third = controller.advance_turn(GAME_ID)
        assert storage.get_project("project-1").stage == ProjectStage.MARKETING
        assert "Debut Single moved from production to marketing" in _descriptions(third)

        controller.advance_turn(GAME_ID)
        assert storage.get_project("project-1").stage == ProjectStage.RECORDED

    def test_ep_records_over_several_turns(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """EPs record a limited number of songs each turn."""
        storage.save_project(make_project(type=ProjectType.EP, song_count=4, total_cost=16000))

        controller.advance_turn(GAME_ID)
        assert storage.get_project("project-1").songs_created == 3

        controller.advance_turn(GAME_ID)
        songs = storage.list_songs(GAME_ID, project_id="project-1")
        assert [s.id for s in songs] == [f"project-1-song-{n}" for n in range(1, 5)]
        assert all(s.production_budget == 4000 for s in songs)

    def test_locked_producer_blocks_production(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """A project using a locked producer tier stays in planning."""
        storage.save_project(make_project(producer_tier="national"))

        summary = controller.advance_turn(GAME_ID)

        assert storage.get_project("project-1").stage == ProjectStage.PLANNING
        assert summary.expense_breakdown.project_costs == 0
        assert any("cannot start production" in d for d in _descriptions(summary))

    def test_tour(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """Tours play one city per turn and complete after the last city."""
        storage.save_project(
            make_project(
                type=ProjectType.TOUR,
                title="Club Run",
                song_count=0,
                venue_tier="clubs",
                cities=2,
                total_cost=5000,
            )
        )

        first = controller.advance_turn(GAME_ID)
        second = controller.advance_turn(GAME_ID)
        third = controller.advance_turn(GAME_ID)

        project = storage.get_project("project-1")
        assert project.cities_played == 2
        assert project.stage == ProjectStage.RECORDED
        assert first.expense_breakdown.project_costs == 5000
        assert first.revenue_breakdown.tour > 0
        assert project.tour_revenue == first.revenue_breakdown.tour + second.revenue_breakdown.tour
        assert third.revenue_breakdown.tour == 0
        assert any("tour completed" in d for d in _descriptions(third))


class TestReleases:
    """Tests for releases, lead singles and decay."""

    def test_release_goes_live(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """A planned release charges seasonal marketing and earns first-month streams."""
        storage.save_song(make_song("s1", production_budget=3500))
        storage.save_release(make_release(["s1"], marketing_budget=2000))

        summary = controller.advance_turn(GAME_ID)

        song = storage.get_song("s1")
        assert song.is_released
        assert song.release_turn == 1
        # January prices marketing at 85%
        assert song.marketing_allocation == 1700
        assert song.initial_streams > 0
        assert song.total_revenue == summary.revenue_breakdown.streaming
        assert summary.expense_breakdown.marketing_costs == 1700
        assert storage.get_release("release-1").status == ReleaseStatus.RELEASED

    def test_decay_next_turn(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """Released songs keep earning decaying revenue."""
        storage.save_song(make_song("s1"))
        storage.save_release(make_release(["s1"]))
        controller.advance_turn(GAME_ID)
        released = storage.get_song("s1")

        summary = controller.advance_turn(GAME_ID)

        song = storage.get_song("s1")
        assert summary.revenue_breakdown.streaming == 0
        assert summary.revenue_breakdown.ongoing > 0
        assert song.last_month_revenue == summary.revenue_breakdown.ongoing
        assert song.total_revenue == released.total_revenue + summary.revenue_breakdown.ongoing
        assert any(d.startswith("Ongoing streams from 1 songs") for d in _descriptions(summary))

    def test_marketing_not_charged_twice(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """Later turns never re-allocate a release's marketing."""
        storage.save_song(make_song("s1"))
        storage.save_release(make_release(["s1"], marketing_budget=2000))
        controller.advance_turn(GAME_ID)

        summary = controller.advance_turn(GAME_ID)

        assert summary.expense_breakdown.marketing_costs == 0
        assert storage.get_song("s1").marketing_allocation == 1700

    def test_lead_single(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """A lead single goes live early and boosts the main release."""
        storage.save_song(make_song("s1"))
        storage.save_song(make_song("s2"))
        storage.save_release(
            make_release(
                ["s1", "s2"],
                release_turn=2,
                marketing_budget=3000,
                lead_single=LeadSingleStrategy(
                    song_id="s1", release_turn=1, budget={"digital": 1000}
                ),
            )
        )

        first = controller.advance_turn(GAME_ID)
        assert first.expense_breakdown.marketing_costs == 850
        assert storage.get_song("s1").is_released
        assert not storage.get_song("s2").is_released

        second = controller.advance_turn(GAME_ID)
        s1 = storage.get_song("s1")
        s2 = storage.get_song("s2")
        assert second.expense_breakdown.marketing_costs == 2550
        assert s1.marketing_allocation == 850 + 1275
        assert s2.marketing_allocation == 1275
        assert s1.release_turn == 1
        assert s2.release_turn == 2
        assert any("lead single boost x1.31" in d for d in _descriptions(second))

    def test_summer_marketing_costs_more(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """Marketing spent in July is charged at the third-quarter price."""
        game.current_turn = 6
        storage.save_game(game)
        storage.save_song(make_song("s1"))
        storage.save_release(make_release(["s1"], release_turn=7, marketing_budget=2000))

        summary = controller.advance_turn(GAME_ID)

        assert summary.expense_breakdown.marketing_costs == 2200
        assert storage.get_song("s1").marketing_allocation == 2200

    def test_channel_mix_boosts_streams(self, config: ConfigurationService) -> None:
        """Spreading the same budget over synergistic channels earns more streams."""
        plain = _first_release_streams(config, marketing_budget=2000)
        mixed = _first_release_streams(
            config, marketing_breakdown={"radio": 1000, "digital": 1000}
        )

        # diversity 1.08 x radio+digital synergy 1.15 x effectiveness-weighted spend
        assert mixed > plain * 1.6

    def test_seasonal_revenue_multiplier(self) -> None:
        """The release quarter scales first-month streams."""
        low = _first_release_streams(config_with(), marketing_budget=2000)
        high = _first_release_streams(
            config_with(
                **{
                    "releases.seasonal_revenue_multipliers": {
                        "q1": 1.7,
                        "q2": 0.95,
                        "q3": 1.1,
                        "q4": 1.4,
                    }
                }
            ),
            marketing_budget=2000,
        )

        assert abs(high - 2 * low) <= 2

    def test_missing_songs_delay_release(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """A release whose songs are not recorded slips to the next turn."""
        storage.save_release(make_release(["project-1-song-1"], marketing_budget=2000))

        summary = controller.advance_turn(GAME_ID)

        release = storage.get_release("release-1")
        assert release.status == ReleaseStatus.PLANNED
        assert release.release_turn == 2
        assert summary.expense_breakdown.marketing_costs == 0
        assert any("delayed to turn 2" in d for d in _descriptions(summary))

    def test_recorded_then_released(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """A release planned for a song still in production waits for it."""
        storage.save_project(make_project())
        storage.save_release(make_release(["project-1-song-1"], release_turn=2))

        controller.advance_turn(GAME_ID)
        controller.advance_turn(GAME_ID)

        assert storage.get_song("project-1-song-1").is_released

    def test_old_release_moves_to_catalog(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """Releases past the decay window move to the catalog."""
        game.current_turn = 25
        storage.save_game(game)
        storage.save_song(
            make_song(
                "s1",
                is_released=True,
                release_id="release-1",
                release_turn=0,
                initial_streams=50000,
            )
        )
        storage.save_release(make_release(["s1"], release_turn=0, status=ReleaseStatus.RELEASED))

        summary = controller.advance_turn(GAME_ID)

        assert storage.get_release("release-1").status == ReleaseStatus.CATALOG
        assert summary.revenue_breakdown.ongoing == 0


class TestProgression:
    """Tests for payroll, reputation unlocks and campaign completion."""

    def test_payroll_charged(
        self, controller: TurnController, storage: InMemoryStorage, staffed_game: GameState
    ) -> None:
        """Executive salaries are charged each pay period."""
        summary = controller.advance_turn(GAME_ID)

        assert summary.expense_breakdown.executive_salaries == 21000
        assert any(d.startswith("Executive salaries") for d in _descriptions(summary))

    def test_payroll_interval(self, storage: InMemoryStorage, staffed_game: GameState) -> None:
        """With a longer pay period salaries are only charged on pay turns."""
        controller = TurnController(
            storage, config_with(**{"progression.payroll_interval_turns": 3})
        )

        charged = [
            controller.advance_turn(GAME_ID).expense_breakdown.executive_salaries
            for _ in range(3)
        ]

        assert charged == [0, 0, 21000]

    def test_reputation_unlocks(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """Reaching the focus threshold unlocks tiers and a focus slot."""
        game.reputation = 50
        storage.save_game(game)

        summary = controller.advance_turn(GAME_ID)

        saved = storage.get_game(GAME_ID)
        assert saved.focus_slots == 4
        assert saved.playlist_access == "mid"
        assert saved.press_access == "national"
        assert saved.venue_access == "arenas"
        assert saved.tier_unlock_history["venue"]["arenas"] == 1
        assert any(d.startswith("Focus slot unlocked") for d in _descriptions(summary))

    def test_press_reputation_capped(self, storage: InMemoryStorage, game: GameState) -> None:
        """Press gains never lift reputation past 100, and the cap is recorded."""
        controller = TurnController(storage, config_with(**{"press.base_chance": 1.0}))
        game.reputation = 99
        storage.save_game(game)
        storage.save_song(make_song("s1", quality=100))
        storage.save_release(
            make_release(["s1"], marketing_budget=2000, has_story_bonus=True)
        )

        summary = controller.advance_turn(GAME_ID)

        assert storage.get_game(GAME_ID).reputation == 100
        assert summary.reputation_change == 1
        assert any(c.name == "reputation" and c.clamped == 100 for c in summary.clamps)
        assert any("(+1 reputation)" in d for d in _descriptions(summary))

    def test_campaign_completion(
        self, controller: TurnController, storage: InMemoryStorage, game: GameState
    ) -> None:
        """The campaign ends on its final turn and cannot be advanced further."""
        game.current_turn = 35
        storage.save_game(game)

        summary = controller.advance_turn(GAME_ID)

        assert summary.turn == 36
        assert summary.campaign_completed
        assert storage.get_game(GAME_ID).campaign_completed

        with pytest.raises(CampaignCompletedError):
            controller.advance_turn(GAME_ID)
        assert storage.get_game(GAME_ID).current_turn == 36
