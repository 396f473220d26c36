"""Game entities persisted through the Storage collaborator.

These models hold the state the engine reads and mutates. Derived values
(total investment, ROI) are properties so they can never disagree with the
fields they are computed from.
"""

from enum import StrEnum

from pydantic import BaseModel, Field


class ProjectType(StrEnum):
    SINGLE = "single"
    EP = "ep"
    TOUR = "tour"


RECORDING_PROJECT_TYPES = frozenset({ProjectType.SINGLE, ProjectType.EP})


class ProjectStage(StrEnum):
    PLANNING = "planning"
    PRODUCTION = "production"
    MARKETING = "marketing"
    RECORDED = "recorded"


class ReleaseType(StrEnum):
    SINGLE = "single"
    EP = "ep"
    ALBUM = "album"


class ReleaseStatus(StrEnum):
    PLANNED = "planned"
    RELEASED = "released"
    CATALOG = "catalog"


class AllocationState(StrEnum):
    """Two-state tag guarding one marketing allocation phase of a release."""

    UNALLOCATED = "unallocated"
    ALLOCATED = "allocated"


class AllocationPhase(StrEnum):
    BASE = "base"
    LEAD = "lead"


class GameState(BaseModel):
    """Label-wide state for one game."""

    id: str
    current_turn: int = Field(default=0, ge=0)
    money: int = 0
    reputation: int = Field(default=0, ge=0, le=100)
    creative_capital: int = Field(default=0, ge=0)
    focus_slots: int = Field(default=3, ge=1)
    used_focus_slots: int = Field(default=0, ge=0)
    playlist_access: str = "none"
    press_access: str = "none"
    venue_access: str = "none"
    tier_unlock_history: dict[str, dict[str, int]] = Field(default_factory=dict)
    campaign_completed: bool = False
    rng_seed: str

    def access_tier(self, kind: str) -> str:
        """Current tier name for playlist, press or venue access."""
        return getattr(self, f"{kind}_access")

    def set_access_tier(self, kind: str, tier: str) -> None:
        setattr(self, f"{kind}_access", tier)


class Artist(BaseModel):
    id: str
    game_id: str
    name: str
    talent: int = Field(default=50, ge=0, le=100)
    work_ethic: int = Field(default=50, ge=0, le=100)
    popularity: int = Field(default=0, ge=0, le=100)
    mood: int = Field(default=50, ge=0, le=100)
    loyalty: int = Field(default=50, ge=0, le=100)
    monthly_fee: int | None = Field(default=None, ge=0)


class Project(BaseModel):
    """A recording project (single, EP) or a tour."""

    id: str
    game_id: str
    artist_id: str
    title: str
    type: ProjectType
    stage: ProjectStage = ProjectStage.PLANNING
    producer_tier: str = "local"
    time_investment: str = "standard"
    song_count: int = Field(default=1, ge=0)
    songs_created: int = Field(default=0, ge=0)
    total_cost: int = Field(default=0, ge=0)
    created_turn: int = Field(default=0, ge=0)
    production_start_turn: int | None = None
    stage_entered_turn: int | None = None
    # Tour fields
    cities: int = Field(default=0, ge=0)
    cities_played: int = Field(default=0, ge=0)
    venue_tier: str = "none"
    tour_marketing_budget: int = Field(default=0, ge=0)
    tour_revenue: int = Field(default=0, ge=0)

    @property
    def is_recording(self) -> bool:
        return self.type in RECORDING_PROJECT_TYPES

    def turns_in_production(self, turn: int) -> int:
        if self.production_start_turn is None:
            return 0
        return turn - self.production_start_turn


class Song(BaseModel):
    """A recorded song and its investment/revenue counters."""

    id: str
    game_id: str
    artist_id: str
    project_id: str | None = None
    title: str
    mood: str | None = None
    quality: int = Field(ge=20, le=100)
    producer_tier: str = "local"
    time_investment: str = "standard"
    production_budget: int = Field(default=0, ge=0)
    marketing_allocation: int = Field(default=0, ge=0)
    initial_streams: int = Field(default=0, ge=0)
    total_streams: int = Field(default=0, ge=0)
    total_revenue: int = Field(default=0, ge=0)
    last_month_revenue: int = Field(default=0, ge=0)
    is_recorded: bool = True
    is_released: bool = False
    release_id: str | None = None
    release_turn: int | None = None
    created_turn: int = Field(default=0, ge=0)

    @property
    def total_investment(self) -> int:
        return self.production_budget + self.marketing_allocation

    @property
    def roi_percentage(self) -> float | None:
        """Return on investment in percent, None when nothing was invested."""
        investment = self.total_investment
        if investment == 0:
            return None
        return (self.total_revenue - investment) / investment * 100

    def months_since_release(self, turn: int) -> int:
        if self.release_turn is None:
            return 0
        return turn - self.release_turn


class ReleaseTrack(BaseModel):
    song_id: str
    track_number: int = Field(ge=1)


class LeadSingleStrategy(BaseModel):
    """Early release of one song ahead of the main release."""

    song_id: str
    release_turn: int = Field(ge=0)
    budget: dict[str, int] = Field(default_factory=dict)

    @property
    def total_budget(self) -> int:
        return sum(self.budget.values())


class Release(BaseModel):
    id: str
    game_id: str
    artist_id: str
    title: str
    type: ReleaseType
    status: ReleaseStatus = ReleaseStatus.PLANNED
    release_turn: int = Field(ge=0)
    marketing_budget: int = Field(default=0, ge=0)
    marketing_breakdown: dict[str, int] = Field(default_factory=dict)
    tracks: list[ReleaseTrack] = Field(default_factory=list)
    lead_single: LeadSingleStrategy | None = None
    has_story_bonus: bool = False
    base_allocation: AllocationState = AllocationState.UNALLOCATED
    lead_allocation: AllocationState = AllocationState.UNALLOCATED

    @property
    def total_marketing_budget(self) -> int:
        """Main-release marketing total (explicit total or channel sum)."""
        if self.marketing_budget > 0:
            return self.marketing_budget
        return sum(self.marketing_breakdown.values())

    def allocation_state(self, phase: AllocationPhase) -> AllocationState:
        if phase == AllocationPhase.BASE:
            return self.base_allocation
        return self.lead_allocation

    def mark_allocated(self, phase: AllocationPhase) -> None:
        """Transition an allocation phase to ALLOCATED.

        Raises:
            ValueError: If the phase was already allocated.
        """
        if self.allocation_state(phase) == AllocationState.ALLOCATED:
            raise ValueError(f"Release {self.id} {phase} allocation already recorded")
        if phase == AllocationPhase.BASE:
            self.base_allocation = AllocationState.ALLOCATED
        else:
            self.lead_allocation = AllocationState.ALLOCATED


class Executive(BaseModel):
    id: str
    game_id: str
    role: str
    name: str | None = None
    mood: int = Field(default=50, ge=0, le=100)
    loyalty: int = Field(default=50, ge=0, le=100)
    last_active_turn: int | None = None
