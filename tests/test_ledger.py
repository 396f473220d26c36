"""Tests for the investment ledger."""

import pytest

from label_sim.engine import InvestmentLedger, compute_roi, split_evenly
from label_sim.models import AllocationState, GameState, LeadSingleStrategy
from label_sim.storage import EntityNotFoundError, InMemoryStorage
from tests.conftest import ARTIST_ID, GAME_ID, make_project, make_release, make_song


@pytest.fixture
def ledger(storage: InMemoryStorage, game: GameState) -> InvestmentLedger:
    """Ledger over a game with three recorded songs on one release."""
    for song_id in ("s1", "s2", "s3"):
        storage.save_song(make_song(song_id, project_id="project-1"))
    storage.save_project(make_project(song_count=3, type="ep"))
    storage.save_release(make_release(["s1", "s2", "s3"]))
    return InvestmentLedger(storage)


class TestHelpers:
    """Tests for ledger helper functions."""

    def test_split_evenly_remainder_first(self) -> None:
        """The remainder goes to the first songs."""
        assert split_evenly(10000, 3) == [3334, 3333, 3333]
        assert split_evenly(10001, 3) == [3334, 3334, 3333]
        assert split_evenly(9, 3) == [3, 3, 3]

    def test_split_evenly_empty(self) -> None:
        """Nothing to split across no songs."""
        assert split_evenly(100, 0) == []

    def test_compute_roi(self) -> None:
        """ROI is percent return; zero investment has no ROI."""
        assert compute_roi(150, 100) == 50.0
        assert compute_roi(50, 100) == -50.0
        assert compute_roi(500, 0) is None


class TestMarketingAllocation:
    """Tests for exactly-once marketing allocation."""

    def test_allocates_in_track_order(
        self, ledger: InvestmentLedger, storage: InMemoryStorage
    ) -> None:
        """The budget is split across tracks with the remainder first."""
        result = ledger.allocate_marketing_investment("release-1", 10000)

        assert not result.skipped
        assert [a.amount for a in result.allocations] == [3334, 3333, 3333]
        assert [a.track_number for a in result.allocations] == [1, 2, 3]
        assert storage.get_song("s1").marketing_allocation == 3334
        assert storage.get_release("release-1").base_allocation == AllocationState.ALLOCATED

    def test_second_allocation_is_noop(
        self, ledger: InvestmentLedger, storage: InMemoryStorage
    ) -> None:
        """Retrying an allocation does not double-charge songs."""
        ledger.allocate_marketing_investment("release-1", 10000)

        retry = ledger.allocate_marketing_investment("release-1", 10000)

        assert retry.skipped
        assert retry.total_allocated == 0
        total = sum(s.marketing_allocation for s in storage.list_songs(GAME_ID))
        assert total == 10000

    def test_zero_budget_marks_allocated(
        self, ledger: InvestmentLedger, storage: InMemoryStorage
    ) -> None:
        """A zero budget still closes the allocation phase."""
        result = ledger.allocate_marketing_investment("release-1", 0)

        assert result.skipped
        assert storage.get_release("release-1").base_allocation == AllocationState.ALLOCATED

    def test_failed_allocation_rolls_back(
        self, ledger: InvestmentLedger, storage: InMemoryStorage
    ) -> None:
        """A missing track leaves every song and the tag untouched."""
        storage.save_release(make_release(["s1", "missing"], id="release-2"))

        with pytest.raises(EntityNotFoundError):
            ledger.allocate_marketing_investment("release-2", 5000)

        assert storage.get_song("s1").marketing_allocation == 0
        assert storage.get_release("release-2").base_allocation == AllocationState.UNALLOCATED

    def test_lead_single_allocation(
        self, ledger: InvestmentLedger, storage: InMemoryStorage
    ) -> None:
        """Lead-single marketing goes to one song, exactly once."""
        first = ledger.allocate_marketing_to_song("release-1", "s2", 1500)
        second = ledger.allocate_marketing_to_song("release-1", "s2", 1500)

        assert first.total_allocated == 1500
        assert second.skipped
        assert storage.get_song("s2").marketing_allocation == 1500

    def test_lead_and_base_phases_independent(
        self, ledger: InvestmentLedger, storage: InMemoryStorage
    ) -> None:
        """The lead phase does not block the base phase."""
        ledger.allocate_marketing_to_song("release-1", "s1", 1000)
        ledger.allocate_marketing_investment("release-1", 3000)

        assert storage.get_song("s1").marketing_allocation == 2000
        assert storage.get_song("s2").marketing_allocation == 1000

    def test_lead_song_not_in_release(self, ledger: InvestmentLedger) -> None:
        """A song outside the release is skipped."""
        result = ledger.allocate_marketing_to_song("release-1", "other", 1000)

        assert result.skipped
        assert result.reason == "song not in release"

    def test_production_investment(
        self, ledger: InvestmentLedger, storage: InMemoryStorage
    ) -> None:
        """Production budget is recorded on the song."""
        ledger.record_production_investment("s1", "project-1", 4500)

        assert storage.get_song("s1").production_budget == 4500

        with pytest.raises(ValueError):
            ledger.record_production_investment("s1", "project-1", -1)


class TestInvestmentMetrics:
    """Tests for ROI rollups."""

    def _earn(self, storage: InMemoryStorage, song_id: str, production: int, revenue: int) -> None:
        song = storage.get_song(song_id)
        song.production_budget = production
        song.total_revenue = revenue
        song.is_released = True
        storage.save_song(song)

    def test_artist_metrics(self, ledger: InvestmentLedger, storage: InMemoryStorage) -> None:
        """Artist metrics aggregate every song of the artist."""
        self._earn(storage, "s1", 1000, 3000)
        self._earn(storage, "s2", 1000, 500)

        metrics = ledger.get_artist_investment_metrics(ARTIST_ID, GAME_ID)

        assert metrics.artist_name == "Nova Reyes"
        assert metrics.total_investment == 2000
        assert metrics.total_revenue == 3500
        assert metrics.overall_roi == 75.0
        assert metrics.released_song_count == 2
        assert metrics.best_performing_song is not None
        assert metrics.best_performing_song.song_id == "s1"

    def test_zero_investment_roi_is_none(self, ledger: InvestmentLedger) -> None:
        """Songs with no investment have no ROI rather than zero."""
        metrics = ledger.get_artist_investment_metrics(ARTIST_ID, GAME_ID)

        assert metrics.total_investment == 0
        assert metrics.overall_roi is None
        assert metrics.to_output_dict()["overall_roi"] is None

    def test_unknown_artist_name(self, ledger: InvestmentLedger) -> None:
        """Metrics for an unknown artist use a placeholder name."""
        metrics = ledger.get_artist_investment_metrics("artist-ghost", GAME_ID)

        assert metrics.artist_name == "Unknown"
        assert metrics.song_count == 0

    def test_project_metrics(self, ledger: InvestmentLedger, storage: InMemoryStorage) -> None:
        """Project metrics cover the project's songs."""
        self._earn(storage, "s1", 2000, 1000)
        self._earn(storage, "s2", 2000, 5000)

        metrics = ledger.get_project_investment_metrics("project-1", GAME_ID)

        assert metrics.song_count == 3
        assert metrics.roi == 50.0
        assert metrics.average_song_roi == 50.0

    def test_release_metrics(self, ledger: InvestmentLedger, storage: InMemoryStorage) -> None:
        """Release metrics include marketing effectiveness and lead flags."""
        release = storage.get_release("release-1")
        release.lead_single = LeadSingleStrategy(song_id="s1", release_turn=0)
        storage.save_release(release)
        ledger.allocate_marketing_investment("release-1", 3000)
        self._earn(storage, "s1", 0, 10000)

        metrics = ledger.get_release_investment_metrics("release-1", GAME_ID)

        assert metrics.total_marketing_investment == 3000
        assert metrics.marketing_effectiveness is not None
        assert metrics.marketing_effectiveness.rating == "excellent"
        assert metrics.songs[0].is_lead_single

    def test_release_from_other_game(self, ledger: InvestmentLedger) -> None:
        """A release is not visible from another game."""
        with pytest.raises(EntityNotFoundError):
            ledger.get_release_investment_metrics("release-1", "game-other")

    def test_project_from_other_game(self, ledger: InvestmentLedger) -> None:
        """A project is not visible from another game."""
        with pytest.raises(EntityNotFoundError):
            ledger.get_project_investment_metrics("project-1", "game-other")

    def test_portfolio_metrics(
        self, ledger: InvestmentLedger, storage: InMemoryStorage
    ) -> None:
        """Portfolio metrics span every song of the game."""
        self._earn(storage, "s1", 1000, 2000)
        self._earn(storage, "s2", 1000, 500)

        metrics = ledger.get_portfolio_metrics(GAME_ID)

        assert metrics.total_songs == 3
        assert metrics.profitable_songs == 1
        assert metrics.best_roi == 100.0
        assert metrics.worst_roi == -50.0
        assert metrics.success_rate == pytest.approx(100 / 3)
