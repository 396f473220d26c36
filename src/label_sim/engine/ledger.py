"""Investment ledger: production/marketing investment and ROI rollups.

Marketing allocations are guarded by per-release allocation tags. Checking
the tag, writing the allocations and flipping the tag happen inside one
storage transaction, so a retried allocation is a no-op rather than a double
charge.
"""

import logging

from label_sim.models import (
    AllocationPhase,
    AllocationResult,
    AllocationState,
    ArtistInvestmentMetrics,
    MarketingEffectiveness,
    PortfolioMetrics,
    ProjectInvestmentMetrics,
    ReleaseInvestmentMetrics,
    Song,
    SongAllocation,
    SongPerformance,
)
from label_sim.storage import EntityNotFoundError, Storage

logger = logging.getLogger(__name__)


def compute_roi(revenue: float, investment: float) -> float | None:
    """ROI in percent, or None when nothing was invested."""
    if investment == 0:
        return None
    return (revenue - investment) / investment * 100


def split_evenly(total: int, count: int) -> list[int]:
    """Split ``total`` into ``count`` whole amounts.

    The remainder goes one unit at a time to the first entries, so
    ``split_evenly(10000, 3) == [3334, 3333, 3333]``.
    """
    if count <= 0:
        return []
    base, remainder = divmod(total, count)
    return [base + (1 if i < remainder else 0) for i in range(count)]


def marketing_effectiveness_rating(revenue: int, marketing: int) -> str:
    if revenue > marketing * 3:
        return "excellent"
    if revenue > marketing * 2:
        return "good"
    if revenue > marketing:
        return "fair"
    return "poor"


def _performance(song: Song, lead_song_id: str | None = None) -> SongPerformance:
    return SongPerformance(
        song_id=song.id,
        title=song.title,
        investment=song.total_investment,
        revenue=song.total_revenue,
        roi=song.roi_percentage,
        is_lead_single=song.id == lead_song_id,
    )


class InvestmentLedger:
    """Records investment on songs and aggregates it for ROI reporting."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def record_production_investment(
        self, song_id: str, project_id: str | None, budget: int
    ) -> Song:
        """Attach a production budget and project link to a song.

        Raises:
            ValueError: If the budget is negative.
            EntityNotFoundError: If the song does not exist.
        """
        if budget < 0:
            raise ValueError(f"Production budget must be non-negative, got {budget}")
        song = self.storage.get_song(song_id)
        song.production_budget = budget
        song.project_id = project_id
        self.storage.save_song(song)
        logger.debug("Recorded production investment of %d on song %s", budget, song_id)
        return song

    def allocate_marketing_investment(
        self, release_id: str, total_budget: int
    ) -> AllocationResult:
        """Split a release's marketing budget across its songs, exactly once.

        Songs are taken in track order; the remainder of the even split goes
        one dollar at a time to the first songs. A release whose base
        allocation is already recorded is skipped without changes.

        Args:
            release_id: Release to allocate for.
            total_budget: Marketing budget in whole dollars.

        Returns:
            AllocationResult; ``skipped`` is True when nothing was allocated.

        Raises:
            EntityNotFoundError: If the release or one of its songs is missing.
        """
        with self.storage.transaction():
            release = self.storage.get_release(release_id)
            if release.base_allocation == AllocationState.ALLOCATED:
                logger.info("Base marketing for release %s already allocated", release_id)
                return AllocationResult(
                    release_id=release_id,
                    phase=AllocationPhase.BASE,
                    skipped=True,
                    reason="already allocated",
                )

            songs = self.storage.get_release_songs(release_id)
            if not songs or total_budget <= 0:
                release.mark_allocated(AllocationPhase.BASE)
                self.storage.save_release(release)
                return AllocationResult(
                    release_id=release_id,
                    phase=AllocationPhase.BASE,
                    skipped=True,
                    reason="no songs or budget to allocate",
                )

            track_numbers = {t.song_id: t.track_number for t in release.tracks}
            allocations: list[SongAllocation] = []
            for song, amount in zip(songs, split_evenly(total_budget, len(songs))):
                song.marketing_allocation += amount
                self.storage.save_song(song)
                allocations.append(
                    SongAllocation(
                        song_id=song.id,
                        track_number=track_numbers.get(song.id),
                        amount=amount,
                        marketing_allocation=song.marketing_allocation,
                    )
                )

            release.mark_allocated(AllocationPhase.BASE)
            self.storage.save_release(release)

        logger.info(
            "Allocated %d marketing across %d songs of release %s",
            total_budget,
            len(allocations),
            release_id,
        )
        return AllocationResult(
            release_id=release_id,
            phase=AllocationPhase.BASE,
            allocations=allocations,
        )

    def allocate_marketing_to_song(
        self, release_id: str, song_id: str, amount: int
    ) -> AllocationResult:
        """Allocate the lead-single marketing budget to one song, exactly once.

        Args:
            release_id: Release the lead single belongs to.
            song_id: Lead single song.
            amount: Lead-single marketing budget.

        Returns:
            AllocationResult; ``skipped`` is True when nothing was allocated.

        Raises:
            EntityNotFoundError: If the release does not exist.
        """
        with self.storage.transaction():
            release = self.storage.get_release(release_id)
            if release.lead_allocation == AllocationState.ALLOCATED:
                logger.info("Lead marketing for release %s already allocated", release_id)
                return AllocationResult(
                    release_id=release_id,
                    phase=AllocationPhase.LEAD,
                    skipped=True,
                    reason="already allocated",
                )

            if amount <= 0:
                release.mark_allocated(AllocationPhase.LEAD)
                self.storage.save_release(release)
                return AllocationResult(
                    release_id=release_id,
                    phase=AllocationPhase.LEAD,
                    skipped=True,
                    reason="no budget to allocate",
                )

            track_numbers = {t.song_id: t.track_number for t in release.tracks}
            if song_id not in track_numbers:
                logger.warning("Song %s is not part of release %s", song_id, release_id)
                return AllocationResult(
                    release_id=release_id,
                    phase=AllocationPhase.LEAD,
                    skipped=True,
                    reason="song not in release",
                )

            song = self.storage.get_song(song_id)
            song.marketing_allocation += amount
            self.storage.save_song(song)
            release.mark_allocated(AllocationPhase.LEAD)
            self.storage.save_release(release)

        logger.info("Allocated %d lead-single marketing to song %s", amount, song_id)
        return AllocationResult(
            release_id=release_id,
            phase=AllocationPhase.LEAD,
            allocations=[
                SongAllocation(
                    song_id=song_id,
                    track_number=track_numbers[song_id],
                    amount=amount,
                    marketing_allocation=song.marketing_allocation,
                )
            ],
        )

    def get_artist_investment_metrics(
        self, artist_id: str, game_id: str
    ) -> ArtistInvestmentMetrics:
        """Aggregate investment, revenue and ROI across an artist's songs."""
        songs = self.storage.list_songs(game_id, artist_id=artist_id)
        try:
            artist_name = self.storage.get_artist(artist_id).name
        except EntityNotFoundError:
            artist_name = "Unknown"

        production = sum(s.production_budget for s in songs)
        marketing = sum(s.marketing_allocation for s in songs)
        revenue = sum(s.total_revenue for s in songs)

        with_roi = [s for s in songs if s.roi_percentage is not None]
        best = max(with_roi, key=lambda s: s.roi_percentage or 0.0, default=None)

        return ArtistInvestmentMetrics(
            artist_id=artist_id,
            artist_name=artist_name,
            total_production_investment=production,
            total_marketing_investment=marketing,
            total_investment=production + marketing,
            total_revenue=revenue,
            total_streams=sum(s.total_streams for s in songs),
            overall_roi=compute_roi(revenue, production + marketing),
            song_count=len(songs),
            released_song_count=sum(1 for s in songs if s.is_released),
            average_quality=sum(s.quality for s in songs) / len(songs) if songs else 0.0,
            best_performing_song=_performance(best) if best else None,
        )

    def get_project_investment_metrics(
        self, project_id: str, game_id: str
    ) -> ProjectInvestmentMetrics:
        """Aggregate investment and ROI across the songs of a project.

        Raises:
            EntityNotFoundError: If the project does not exist in the game.
        """
        project = self.storage.get_project(project_id)
        if project.game_id != game_id:
            raise EntityNotFoundError("Project", project_id)
        songs = self.storage.list_songs(game_id, project_id=project_id)

        investment = sum(s.total_investment for s in songs)
        revenue = sum(s.total_revenue for s in songs)
        song_rois = [s.roi_percentage for s in songs if s.roi_percentage is not None]

        return ProjectInvestmentMetrics(
            project_id=project_id,
            project_title=project.title,
            project_type=project.type.value,
            project_stage=project.stage.value,
            total_investment=investment,
            total_revenue=revenue,
            roi=compute_roi(revenue, investment),
            average_song_roi=sum(song_rois) / len(song_rois) if song_rois else None,
            song_count=len(songs),
            songs=[_performance(s) for s in songs],
        )

    def get_release_investment_metrics(
        self, release_id: str, game_id: str
    ) -> ReleaseInvestmentMetrics:
        """Aggregate investment, ROI and marketing effectiveness of a release.

        Raises:
            EntityNotFoundError: If the release does not exist.
        """
        release = self.storage.get_release(release_id)
        if release.game_id != game_id:
            raise EntityNotFoundError("Release", release_id)
        songs = self.storage.get_release_songs(release_id)

        production = sum(s.production_budget for s in songs)
        marketing = sum(s.marketing_allocation for s in songs)
        revenue = sum(s.total_revenue for s in songs)

        effectiveness = None
        if marketing > 0:
            effectiveness = MarketingEffectiveness(
                revenue_per_marketing_dollar=revenue / marketing,
                rating=marketing_effectiveness_rating(revenue, marketing),
            )

        lead_id = release.lead_single.song_id if release.lead_single else None
        return ReleaseInvestmentMetrics(
            release_id=release_id,
            release_title=release.title,
            release_type=release.type.value,
            release_status=release.status.value,
            total_production_investment=production,
            total_marketing_investment=marketing,
            total_investment=production + marketing,
            total_revenue=revenue,
            roi=compute_roi(revenue, production + marketing),
            marketing_effectiveness=effectiveness,
            songs=[_performance(s, lead_id) for s in songs],
        )

    def get_portfolio_metrics(self, game_id: str) -> PortfolioMetrics:
        """Aggregate investment and ROI across every song of a game."""
        songs = self.storage.list_songs(game_id)
        investment = sum(s.total_investment for s in songs)
        revenue = sum(s.total_revenue for s in songs)
        rois = [s.roi_percentage for s in songs if s.roi_percentage is not None]
        profitable = sum(1 for roi in rois if roi > 0)

        return PortfolioMetrics(
            game_id=game_id,
            total_songs=len(songs),
            released_songs=sum(1 for s in songs if s.is_released),
            total_investment=investment,
            total_revenue=revenue,
            overall_roi=compute_roi(revenue, investment),
            average_roi=sum(rois) / len(rois) if rois else None,
            profitable_songs=profitable,
            success_rate=profitable / len(songs) * 100 if songs else 0.0,
            best_roi=max(rois) if rois else None,
            worst_roi=min(rois) if rois else None,
        )
