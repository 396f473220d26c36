"""Turn controller: advances a game by one turn.

One turn runs these steps in order, inside a single storage transaction:

1. project stage advancement
2. production (song recording, tour dates)
3. lead-single releases
4. main releases
5. decay revenue for previously released songs
6. operating burn (operations, artist fees, executive payroll)
7. press coverage for this turn's releases
8. access tier upgrades
9. money commit and summary

If any step raises, the transaction rolls back and nothing from the turn is
persisted. All randomness comes from one ``random.Random`` seeded from the
game's fixed seed and the turn number.
"""

import logging
import random
from collections import defaultdict
from dataclasses import dataclass, field

from label_sim.config import ConfigurationService
from label_sim.engine.access import update_access_tiers
from label_sim.engine.bounds import clamp
from label_sim.engine.decay import decay_revenue, decay_streams
from label_sim.engine.exceptions import CampaignCompletedError
from label_sim.engine.finance import calculate_operating_burn
from label_sim.engine.ledger import InvestmentLedger
from label_sim.engine.payroll import calculate_executive_salaries
from label_sim.engine.quality import calculate_song_quality, validate_project_plan
from label_sim.engine.revenue import (
    lead_single_boost,
    marketing_cost,
    marketing_mix,
    press_outcome,
    release_song_outcome,
    season_for_turn,
    tour_revenue_breakdown,
)
from label_sim.models import (
    Artist,
    GameState,
    Project,
    ProjectStage,
    Release,
    ReleaseStatus,
    Song,
    TurnSummary,
)
from label_sim.storage import EntityNotFoundError, Storage
from label_sim.utils import format_currency

logger = logging.getLogger(__name__)


def turn_rng(seed: str, turn: int) -> random.Random:
    """Random source for one turn of a game."""
    return random.Random(f"{seed}-{turn}")


@dataclass
class TurnContext:
    """Mutable state threaded through the steps of one turn."""

    game: GameState
    turn: int
    rng: random.Random
    summary: TurnSummary
    artists: dict[str, Artist]
    released: list[tuple[Release, list[Song]]] = field(default_factory=list)


class TurnController:
    """Advances games one turn at a time."""

    def __init__(
        self,
        storage: Storage,
        config: ConfigurationService,
        ledger: InvestmentLedger | None = None,
    ) -> None:
        self.storage = storage
        self.config = config
        self.ledger = ledger or InvestmentLedger(storage)

    def advance_turn(self, game_id: str) -> TurnSummary:
        """Advance a game by one turn.

        Args:
            game_id: Game to advance.

        Returns:
            TurnSummary of everything that happened during the turn.

        Raises:
            CampaignCompletedError: If the game's campaign has ended.
            EntityNotFoundError: If the game or a referenced entity is missing.
            ConfigurationError: If a balance lookup fails.
            TransientStorageError: If storage is unavailable.
        """
        with self.storage.transaction():
            game = self.storage.get_game(game_id)
            if game.campaign_completed:
                raise CampaignCompletedError(game_id, game.current_turn)

            turn = game.current_turn + 1
            ctx = TurnContext(
                game=game,
                turn=turn,
                rng=turn_rng(game.rng_seed, turn),
                summary=TurnSummary(game_id=game_id, turn=turn, starting_money=game.money),
                artists={a.id: a for a in self.storage.list_artists(game_id)},
            )

            self._advance_project_stages(ctx)
            self._run_production(ctx)
            self._release_lead_singles(ctx)
            self._release_planned(ctx)
            self._apply_decay(ctx)
            self._charge_operating_burn(ctx)
            self._apply_press(ctx)
            ctx.summary.changes.extend(update_access_tiers(self.config, ctx.game, turn))
            self._commit(ctx)

        logger.info(
            "Game %s advanced to turn %d: revenue=%d expenses=%d",
            game_id,
            turn,
            ctx.summary.revenue,
            ctx.summary.expenses,
        )
        return ctx.summary

    def _artist(self, ctx: TurnContext, artist_id: str) -> Artist:
        artist = ctx.artists.get(artist_id)
        if artist is None:
            artist = self.storage.get_artist(artist_id)
            ctx.artists[artist_id] = artist
        return artist

    # Step 1

    def _advance_project_stages(self, ctx: TurnContext) -> None:
        progression = self.config.progression
        for project in self.storage.list_projects(ctx.game.id):
            previous = project.stage
            match project.stage:
                case ProjectStage.PLANNING:
                    self._start_production(ctx, project)
                case ProjectStage.PRODUCTION if project.is_recording:
                    elapsed = project.turns_in_production(ctx.turn)
                    finished = project.songs_created >= project.song_count
                    if (
                        finished and elapsed >= progression.min_production_turns
                    ) or elapsed >= progression.max_production_turns:
                        project.stage = ProjectStage.MARKETING
                case ProjectStage.PRODUCTION:
                    if project.cities_played >= project.cities:
                        project.stage = ProjectStage.RECORDED
                        ctx.summary.record(
                            "project",
                            f"{project.title} tour completed: "
                            f"{format_currency(project.tour_revenue)} total revenue",
                            project_id=project.id,
                        )
                case ProjectStage.MARKETING:
                    if project.stage_entered_turn is None or ctx.turn > project.stage_entered_turn:
                        project.stage = ProjectStage.RECORDED

            if project.stage != previous:
                project.stage_entered_turn = ctx.turn
                ctx.summary.record(
                    "project",
                    f"{project.title} moved from {previous} to {project.stage}",
                    project_id=project.id,
                )
                self.storage.save_project(project)

    def _start_production(self, ctx: TurnContext, project: Project) -> None:
        errors, warnings = validate_project_plan(self.config, project, ctx.game.reputation)
        if errors:
            ctx.summary.record(
                "warning",
                f"{project.title} cannot start production: {'; '.join(errors)}",
                project_id=project.id,
            )
            return
        for warning in warnings:
            ctx.summary.record("warning", f"{project.title}: {warning}", project_id=project.id)

        project.stage = ProjectStage.PRODUCTION
        project.production_start_turn = ctx.turn
        if project.total_cost > 0:
            ctx.summary.add_expense("project_costs", project.total_cost)
            ctx.summary.record(
                "expense",
                f"{project.title} production budget",
                amount=-project.total_cost,
                project_id=project.id,
            )

    # Step 2

    def _run_production(self, ctx: TurnContext) -> None:
        for project in self.storage.list_projects(ctx.game.id):
            if project.stage != ProjectStage.PRODUCTION:
                continue
            if project.is_recording and project.songs_created < project.song_count:
                self._record_songs(ctx, project)
            elif not project.is_recording and project.cities_played < project.cities:
                self._play_tour_city(ctx, project)

    def _record_songs(self, ctx: TurnContext, project: Project) -> None:
        generation = self.config.quality.generation
        artist = self._artist(ctx, project.artist_id)
        remaining = project.song_count - project.songs_created
        count = min(self.config.songs_per_turn(project.type), remaining)
        budget_per_song = round(project.total_cost / project.song_count)

        for _ in range(count):
            result = calculate_song_quality(
                self.config,
                ctx.rng,
                artist,
                project.producer_tier,
                project.time_investment,
                project.song_count,
                budget_per_song,
                project.type,
                ctx.summary.clamps,
            )
            project.songs_created += 1
            song = Song(
                id=f"{project.id}-song-{project.songs_created}",
                game_id=ctx.game.id,
                artist_id=artist.id,
                project_id=project.id,
                title=ctx.rng.choice(generation.title_pool),
                mood=ctx.rng.choice(generation.moods),
                quality=result.quality,
                producer_tier=project.producer_tier,
                time_investment=project.time_investment,
                created_turn=ctx.turn,
            )
            self.storage.save_song(song)
            self.ledger.record_production_investment(song.id, project.id, budget_per_song)

            outlier = f" ({result.outlier})" if result.outlier else ""
            ctx.summary.record(
                "song",
                f'{artist.name} recorded "{song.title}" - quality {song.quality}{outlier}',
                project_id=project.id,
                song_id=song.id,
            )

        self.storage.save_project(project)

    def _play_tour_city(self, ctx: TurnContext, project: Project) -> None:
        artist = self._artist(ctx, project.artist_id)
        result = tour_revenue_breakdown(
            self.config,
            ctx.rng,
            project.venue_tier,
            artist.popularity,
            ctx.game.reputation,
            cities=1,
            marketing_budget=project.tour_marketing_budget / max(1, project.cities),
            clamps=ctx.summary.clamps,
        )
        project.cities_played += 1
        project.tour_revenue += result.total_revenue
        self.storage.save_project(project)

        ctx.summary.add_revenue("tour", result.total_revenue)
        ctx.summary.record(
            "revenue",
            f"{project.title} - City {project.cities_played}: "
            f"{format_currency(result.total_revenue)} "
            f"({round(result.sell_through.rate * 100)}% attendance)",
            amount=result.total_revenue,
            project_id=project.id,
        )

    # Steps 3 and 4

    def _go_live(
        self, ctx: TurnContext, song: Song, release: Release, streams: int, revenue: int
    ) -> None:
        song.is_released = True
        song.release_id = release.id
        song.release_turn = ctx.turn
        song.initial_streams = streams
        song.total_streams += streams
        song.total_revenue += revenue
        song.last_month_revenue = revenue
        self.storage.save_song(song)
        ctx.summary.add_revenue("streaming", revenue)

    def _unrecorded(self, song_ids: list[str]) -> list[str]:
        missing = []
        for song_id in song_ids:
            try:
                self.storage.get_song(song_id)
            except EntityNotFoundError:
                missing.append(song_id)
        return missing

    def _seasonal_multiplier(self, ctx: TurnContext) -> float:
        return self.config.seasonal_revenue_multiplier(season_for_turn(ctx.turn))

    def _release_lead_singles(self, ctx: TurnContext) -> None:
        for release in self.storage.list_releases(ctx.game.id):
            lead = release.lead_single
            if release.status != ReleaseStatus.PLANNED or lead is None:
                continue
            if lead.release_turn != ctx.turn:
                continue
            if self._unrecorded([lead.song_id]):
                logger.warning(
                    "Lead single %s of release %s is not recorded; skipping",
                    lead.song_id,
                    release.id,
                )
                ctx.summary.record(
                    "warning",
                    f"Lead single for {release.title} skipped: song not recorded yet",
                    release_id=release.id,
                )
                continue

            allocation = self.ledger.allocate_marketing_to_song(
                release.id,
                lead.song_id,
                marketing_cost(self.config, lead.total_budget, ctx.turn),
            )
            if not allocation.skipped:
                ctx.summary.add_expense("marketing_costs", allocation.total_allocated)

            song = self.storage.get_song(lead.song_id)
            if song.is_released:
                continue

            artist = self._artist(ctx, release.artist_id)
            outcome = release_song_outcome(
                self.config,
                ctx.rng,
                song,
                ctx.game.reputation,
                ctx.game.playlist_access,
                artist.popularity,
                seasonal_multiplier=self._seasonal_multiplier(ctx),
                marketing_multiplier=marketing_mix(self.config, lead.budget).multiplier,
            )
            self._go_live(ctx, song, release, outcome.streams, outcome.revenue)
            ctx.summary.record(
                "release",
                f'Lead single "{song.title}" from {release.title}: '
                f"{outcome.streams:,} streams, {format_currency(outcome.revenue)}",
                amount=outcome.revenue,
                release_id=release.id,
                song_id=song.id,
            )

    def _release_planned(self, ctx: TurnContext) -> None:
        for release in self.storage.list_releases(ctx.game.id):
            if release.status != ReleaseStatus.PLANNED or release.release_turn != ctx.turn:
                continue

            missing = self._unrecorded([t.song_id for t in release.tracks])
            if missing:
                release.release_turn += 1
                self.storage.save_release(release)
                logger.warning(
                    "Release %s delayed: %d songs not recorded", release.id, len(missing)
                )
                ctx.summary.record(
                    "warning",
                    f"{release.title} delayed to turn {release.release_turn}: "
                    f"{len(missing)} songs not recorded yet",
                    release_id=release.id,
                )
                continue

            allocation = self.ledger.allocate_marketing_investment(
                release.id,
                marketing_cost(self.config, release.total_marketing_budget, ctx.turn),
            )
            if not allocation.skipped:
                ctx.summary.add_expense("marketing_costs", allocation.total_allocated)

            songs = self.storage.get_release_songs(release.id)
            boost = 1.0
            lead = release.lead_single
            if lead is not None and any(s.id == lead.song_id and s.is_released for s in songs):
                boost = lead_single_boost(self.config, release)

            artist = self._artist(ctx, release.artist_id)
            seasonal = self._seasonal_multiplier(ctx)
            mix = marketing_mix(self.config, release.marketing_breakdown)
            streams_total = 0
            revenue_total = 0
            for song in songs:
                if song.is_released:
                    continue
                outcome = release_song_outcome(
                    self.config,
                    ctx.rng,
                    song,
                    ctx.game.reputation,
                    ctx.game.playlist_access,
                    artist.popularity,
                    release_type=release.type,
                    boost=boost,
                    seasonal_multiplier=seasonal,
                    marketing_multiplier=mix.multiplier,
                )
                self._go_live(ctx, song, release, outcome.streams, outcome.revenue)
                streams_total += outcome.streams
                revenue_total += outcome.revenue

            release.status = ReleaseStatus.RELEASED
            self.storage.save_release(release)
            ctx.released.append((release, self.storage.get_release_songs(release.id)))

            boost_note = f" (lead single boost x{boost:.2f})" if boost != 1.0 else ""
            ctx.summary.record(
                "release",
                f"{release.title} released: {streams_total:,} streams, "
                f"{format_currency(revenue_total)}{boost_note}",
                amount=revenue_total,
                release_id=release.id,
            )

    # Step 5

    def _apply_decay(self, ctx: TurnContext) -> None:
        ongoing_total = 0
        earning = 0
        by_release: dict[str, list[Song]] = defaultdict(list)

        for song in self.storage.list_songs(ctx.game.id, released=True):
            if song.release_id:
                by_release[song.release_id].append(song)
            months = song.months_since_release(ctx.turn)
            if months <= 0:
                continue

            revenue = decay_revenue(
                self.config,
                song.initial_streams,
                months,
                ctx.game.reputation,
                ctx.game.playlist_access,
            )
            if revenue > 0:
                streams = decay_streams(
                    self.config,
                    song.initial_streams,
                    months,
                    ctx.game.reputation,
                    ctx.game.playlist_access,
                )
                song.total_streams += round(streams)
                song.total_revenue += revenue
                song.last_month_revenue = revenue
                ongoing_total += revenue
                earning += 1
                self.storage.save_song(song)
            elif song.last_month_revenue:
                song.last_month_revenue = 0
                self.storage.save_song(song)

        if ongoing_total:
            ctx.summary.add_revenue("ongoing", ongoing_total)
            ctx.summary.record(
                "revenue",
                f"Ongoing streams from {earning} songs: {format_currency(ongoing_total)}",
                amount=ongoing_total,
            )

        max_months = self.config.streaming.ongoing.max_decay_months
        for release in self.storage.list_releases(ctx.game.id):
            if release.status != ReleaseStatus.RELEASED:
                continue
            songs = by_release.get(release.id, [])
            if songs and all(s.months_since_release(ctx.turn) > max_months for s in songs):
                release.status = ReleaseStatus.CATALOG
                self.storage.save_release(release)
                ctx.summary.record(
                    "release",
                    f"{release.title} moved to the catalog",
                    release_id=release.id,
                )

    # Step 6

    def _charge_operating_burn(self, ctx: TurnContext) -> None:
        payroll = None
        if ctx.turn % self.config.progression.payroll_interval_turns == 0:
            payroll = calculate_executive_salaries(self.storage, self.config, ctx.game.id)

        burn = calculate_operating_burn(
            self.config, ctx.rng, list(ctx.artists.values()), payroll
        )
        ctx.summary.add_expense("operations", burn.operations)
        ctx.summary.add_expense("artist_salaries", burn.artist_salaries)
        ctx.summary.add_expense("executive_salaries", burn.executive_salaries)

        ctx.summary.record("expense", "Monthly operations", amount=-burn.operations)
        if burn.artist_salaries:
            ctx.summary.record(
                "expense",
                f"Artist fees ({len(ctx.artists)} artists)",
                amount=-burn.artist_salaries,
            )
        if burn.executive_salaries:
            roles = ", ".join(entry.role for entry in burn.payroll.breakdown if entry.salary)
            ctx.summary.record(
                "expense",
                f"Executive salaries ({roles})",
                amount=-burn.executive_salaries,
            )

    # Step 7

    def _apply_press(self, ctx: TurnContext) -> None:
        for release, songs in ctx.released:
            spend = release.total_marketing_budget
            if spend <= 0 or not songs:
                continue
            average_quality = sum(s.quality for s in songs) / len(songs)
            outcome = press_outcome(
                self.config,
                ctx.rng,
                ctx.game.press_access,
                spend,
                ctx.game.reputation,
                average_quality,
                release.has_story_bonus,
                ctx.summary.clamps,
            )
            if outcome.pickups == 0:
                continue

            reputation = round(
                clamp(
                    "reputation",
                    ctx.game.reputation + outcome.reputation_gain,
                    0,
                    100,
                    ctx.summary.clamps,
                )
            )
            gain = reputation - ctx.game.reputation
            ctx.game.reputation = reputation
            ctx.summary.reputation_change += gain
            ctx.summary.record(
                "reputation",
                f"Press coverage for {release.title}: {outcome.pickups} pickups "
                f"(+{gain} reputation)",
                amount=gain,
                release_id=release.id,
            )

    # Step 9

    def _commit(self, ctx: TurnContext) -> None:
        game = ctx.game
        summary = ctx.summary
        progression = self.config.progression

        game.money += summary.revenue - summary.expenses
        game.current_turn = ctx.turn

        if (
            game.reputation >= progression.focus_slot_unlock_reputation
            and game.focus_slots < progression.max_focus_slots
        ):
            game.focus_slots = progression.max_focus_slots
            summary.record("unlock", f"Focus slot unlocked: {game.focus_slots} actions per turn")

        if ctx.turn >= progression.campaign_length_turns:
            game.campaign_completed = True
            summary.campaign_completed = True
            summary.record(
                "campaign",
                f"Campaign completed with {format_currency(game.money)} "
                f"and {game.reputation} reputation",
            )

        summary.ending_money = game.money
        self.storage.save_game(game)
