"""Domain models for label_sim engine results.

These models represent the structured outputs of engine operations. They are
independent of both the storage format and the MCP presentation format.
"""

from typing import Any

from pydantic import BaseModel, Field


def _round_roi(value: float | None) -> float | None:
    return None if value is None else round(value, 2)


class ClampRecord(BaseModel):
    """A value that was forced back inside its valid bounds."""

    name: str
    original: float
    clamped: float
    lower: float | None = None
    upper: float | None = None


class ChangeEvent(BaseModel):
    """One human-readable entry in a turn's change log."""

    type: str
    description: str
    amount: int | None = None
    project_id: str | None = None
    release_id: str | None = None
    song_id: str | None = None

    def to_output_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ExpenseBreakdown(BaseModel):
    operations: int = 0
    artist_salaries: int = 0
    executive_salaries: int = 0
    project_costs: int = 0
    marketing_costs: int = 0

    @property
    def total(self) -> int:
        return (
            self.operations
            + self.artist_salaries
            + self.executive_salaries
            + self.project_costs
            + self.marketing_costs
        )


class RevenueBreakdown(BaseModel):
    streaming: int = 0
    ongoing: int = 0
    tour: int = 0

    @property
    def total(self) -> int:
        return self.streaming + self.ongoing + self.tour


class PayrollEntry(BaseModel):
    executive_id: str
    role: str
    name: str | None = None
    salary: int
    resolved: bool = True


class PayrollResult(BaseModel):
    """Executive salaries for one pay period."""

    total: int = 0
    breakdown: list[PayrollEntry] = Field(default_factory=list)


class OperatingBurn(BaseModel):
    operations: int
    artist_salaries: int
    executive_salaries: int
    payroll: PayrollResult = Field(default_factory=PayrollResult)

    @property
    def total(self) -> int:
        return self.operations + self.artist_salaries + self.executive_salaries


class TurnSummary(BaseModel):
    """Everything that happened during one turn."""

    game_id: str
    turn: int
    starting_money: int
    ending_money: int = 0
    revenue: int = 0
    expenses: int = 0
    reputation_change: int = 0
    expense_breakdown: ExpenseBreakdown = Field(default_factory=ExpenseBreakdown)
    revenue_breakdown: RevenueBreakdown = Field(default_factory=RevenueBreakdown)
    changes: list[ChangeEvent] = Field(default_factory=list)
    clamps: list[ClampRecord] = Field(default_factory=list)
    campaign_completed: bool = False

    def add_revenue(self, category: str, amount: int) -> None:
        setattr(
            self.revenue_breakdown,
            category,
            getattr(self.revenue_breakdown, category) + amount,
        )
        self.revenue += amount

    def add_expense(self, category: str, amount: int) -> None:
        setattr(
            self.expense_breakdown,
            category,
            getattr(self.expense_breakdown, category) + amount,
        )
        self.expenses += amount

    def record(self, event_type: str, description: str, **kwargs: Any) -> None:
        self.changes.append(ChangeEvent(type=event_type, description=description, **kwargs))

    @property
    def net(self) -> int:
        return self.revenue - self.expenses

    def to_output_dict(self) -> dict[str, Any]:
        """Convert to dictionary format suitable for TOON encoding."""
        result: dict[str, Any] = {
            "game_id": self.game_id,
            "turn": self.turn,
            "starting_money": self.starting_money,
            "ending_money": self.ending_money,
            "revenue": self.revenue,
            "expenses": self.expenses,
            "net": self.net,
            "reputation_change": self.reputation_change,
            "revenue_breakdown": self.revenue_breakdown.model_dump(),
            "expense_breakdown": self.expense_breakdown.model_dump(),
            "changes": [change.to_output_dict() for change in self.changes],
        }
        if self.clamps:
            result["clamps"] = [clamp.model_dump(exclude_none=True) for clamp in self.clamps]
        if self.campaign_completed:
            result["campaign_completed"] = True
        return result


# Ledger results


class SongAllocation(BaseModel):
    song_id: str
    track_number: int | None = None
    amount: int
    marketing_allocation: int


class AllocationResult(BaseModel):
    """Outcome of one marketing allocation call."""

    release_id: str
    phase: str
    skipped: bool = False
    reason: str | None = None
    allocations: list[SongAllocation] = Field(default_factory=list)

    @property
    def total_allocated(self) -> int:
        return sum(a.amount for a in self.allocations)


class SongPerformance(BaseModel):
    song_id: str
    title: str
    investment: int
    revenue: int
    roi: float | None = None
    is_lead_single: bool = False


class ArtistInvestmentMetrics(BaseModel):
    artist_id: str
    artist_name: str
    total_production_investment: int = 0
    total_marketing_investment: int = 0
    total_investment: int = 0
    total_revenue: int = 0
    total_streams: int = 0
    overall_roi: float | None = None
    song_count: int = 0
    released_song_count: int = 0
    average_quality: float = 0.0
    best_performing_song: SongPerformance | None = None

    def to_output_dict(self) -> dict[str, Any]:
        result = self.model_dump(exclude={"best_performing_song"})
        result["overall_roi"] = _round_roi(self.overall_roi)
        result["average_quality"] = round(self.average_quality, 1)
        if self.best_performing_song:
            best = self.best_performing_song.model_dump()
            best["roi"] = _round_roi(best["roi"])
            result["best_performing_song"] = best
        return result


class ProjectInvestmentMetrics(BaseModel):
    project_id: str
    project_title: str
    project_type: str
    project_stage: str
    total_investment: int = 0
    total_revenue: int = 0
    roi: float | None = None
    average_song_roi: float | None = None
    song_count: int = 0
    songs: list[SongPerformance] = Field(default_factory=list)

    def to_output_dict(self) -> dict[str, Any]:
        result = self.model_dump(exclude={"songs"})
        result["roi"] = _round_roi(self.roi)
        result["average_song_roi"] = _round_roi(self.average_song_roi)
        result["songs"] = [
            {**song.model_dump(), "roi": _round_roi(song.roi)} for song in self.songs
        ]
        return result


class MarketingEffectiveness(BaseModel):
    revenue_per_marketing_dollar: float
    rating: str


class ReleaseInvestmentMetrics(BaseModel):
    release_id: str
    release_title: str
    release_type: str
    release_status: str
    total_production_investment: int = 0
    total_marketing_investment: int = 0
    total_investment: int = 0
    total_revenue: int = 0
    roi: float | None = None
    marketing_effectiveness: MarketingEffectiveness | None = None
    songs: list[SongPerformance] = Field(default_factory=list)

    def to_output_dict(self) -> dict[str, Any]:
        result = self.model_dump(exclude={"songs", "marketing_effectiveness"})
        result["roi"] = _round_roi(self.roi)
        if self.marketing_effectiveness:
            result["marketing_effectiveness"] = {
                "revenue_per_marketing_dollar": round(
                    self.marketing_effectiveness.revenue_per_marketing_dollar, 2
                ),
                "rating": self.marketing_effectiveness.rating,
            }
        result["songs"] = [
            {**song.model_dump(), "roi": _round_roi(song.roi)} for song in self.songs
        ]
        return result


class PortfolioMetrics(BaseModel):
    game_id: str
    total_songs: int = 0
    released_songs: int = 0
    total_investment: int = 0
    total_revenue: int = 0
    overall_roi: float | None = None
    average_roi: float | None = None
    profitable_songs: int = 0
    success_rate: float = 0.0
    best_roi: float | None = None
    worst_roi: float | None = None

    def to_output_dict(self) -> dict[str, Any]:
        result = self.model_dump()
        for key in ("overall_roi", "average_roi", "best_roi", "worst_roi"):
            result[key] = _round_roi(result[key])
        result["success_rate"] = round(self.success_rate, 1)
        return result


# Calculator results


class BudgetQualityResult(BaseModel):
    """Budget-to-quality multiplier and how it was derived."""

    budget_per_song: float
    minimum_viable_cost: int
    raw_ratio: float
    efficiency_ratio: float
    multiplier: float
    rating: str

    def to_output_dict(self) -> dict[str, Any]:
        return {
            "budget_per_song": round(self.budget_per_song),
            "minimum_viable_cost": self.minimum_viable_cost,
            "efficiency_ratio": round(self.efficiency_ratio, 3),
            "multiplier": self.multiplier,
            "rating": self.rating,
        }


class ProjectCostResult(BaseModel):
    base_cost: float
    producer_multiplier: float
    time_multiplier: float
    total_cost: int
    per_song_cost: int


class SongQualityResult(BaseModel):
    quality: int
    raw_quality: float
    factors: dict[str, float] = Field(default_factory=dict)
    outlier: str | None = None


class SellThroughBreakdown(BaseModel):
    base: float
    reputation_bonus: float
    popularity_bonus: float
    marketing_bonus: float = 0.0
    rate: float


class TourRevenueResult(BaseModel):
    venue_tier: str
    capacity: int
    sell_through: SellThroughBreakdown
    ticket_price: float
    ticket_revenue: float
    merch_revenue: float
    cities: int
    total_revenue: int

    @property
    def tickets_sold(self) -> int:
        return round(self.capacity * self.sell_through.rate)

    def to_output_dict(self) -> dict[str, Any]:
        return {
            "venue_tier": self.venue_tier,
            "capacity": self.capacity,
            "sell_through": round(self.sell_through.rate, 3),
            "tickets_sold": self.tickets_sold,
            "ticket_price": round(self.ticket_price, 2),
            "ticket_revenue_per_city": round(self.ticket_revenue),
            "merch_revenue_per_city": round(self.merch_revenue),
            "cities": self.cities,
            "total_revenue": self.total_revenue,
        }


class TourCostBreakdown(BaseModel):
    venue_tier: str
    cities: int
    capacity: int
    venue_fee_per_city: int
    production_fee_per_city: int
    marketing_cost: int
    total_costs: int


class PressOutcome(BaseModel):
    pickups: int
    chance: float
    reputation_gain: int = 0


class ReleaseSongOutcome(BaseModel):
    song_id: str
    streams: int
    revenue: int


class MarketingMixResult(BaseModel):
    """Stream multiplier earned by how a marketing budget is spread across channels."""

    channels: dict[str, int] = Field(default_factory=dict)
    weighted_effectiveness: float = 0.0
    base_multiplier: float = 1.0
    diversity_bonus: float = 1.0
    synergy_bonus: float = 1.0
    synergies: list[str] = Field(default_factory=list)
    multiplier: float = 1.0

    def to_output_dict(self) -> dict[str, Any]:
        return {
            "channels": self.channels,
            "weighted_effectiveness": round(self.weighted_effectiveness, 3),
            "base_multiplier": round(self.base_multiplier, 3),
            "diversity_bonus": round(self.diversity_bonus, 3),
            "synergy_bonus": round(self.synergy_bonus, 3),
            "synergies": self.synergies,
            "multiplier": round(self.multiplier, 3),
        }


class ReleaseMarketingPreview(BaseModel):
    release_turn: int
    season: str
    budget: int
    seasonal_cost_multiplier: float
    marketing_cost: int
    seasonal_revenue_multiplier: float
    mix: MarketingMixResult

    def to_output_dict(self) -> dict[str, Any]:
        return {
            "release_turn": self.release_turn,
            "season": self.season,
            "budget": self.budget,
            "seasonal_cost_multiplier": self.seasonal_cost_multiplier,
            "marketing_cost": self.marketing_cost,
            "seasonal_revenue_multiplier": self.seasonal_revenue_multiplier,
            "marketing_mix": self.mix.to_output_dict(),
        }
