"""Pydantic models for game entities and engine results."""

from label_sim.models.domain import (
    AllocationResult,
    ArtistInvestmentMetrics,
    BudgetQualityResult,
    ChangeEvent,
    ClampRecord,
    ExpenseBreakdown,
    MarketingEffectiveness,
    MarketingMixResult,
    OperatingBurn,
    PayrollEntry,
    PayrollResult,
    PortfolioMetrics,
    PressOutcome,
    ProjectCostResult,
    ProjectInvestmentMetrics,
    ReleaseInvestmentMetrics,
    ReleaseMarketingPreview,
    ReleaseSongOutcome,
    RevenueBreakdown,
    SellThroughBreakdown,
    SongAllocation,
    SongPerformance,
    SongQualityResult,
    TourCostBreakdown,
    TourRevenueResult,
    TurnSummary,
)
from label_sim.models.game import (
    RECORDING_PROJECT_TYPES,
    AllocationPhase,
    AllocationState,
    Artist,
    Executive,
    GameState,
    LeadSingleStrategy,
    Project,
    ProjectStage,
    ProjectType,
    Release,
    ReleaseStatus,
    ReleaseTrack,
    ReleaseType,
    Song,
)

__all__ = [
    # Entities
    "RECORDING_PROJECT_TYPES",
    "AllocationPhase",
    "AllocationState",
    "Artist",
    "Executive",
    "GameState",
    "LeadSingleStrategy",
    "Project",
    "ProjectStage",
    "ProjectType",
    "Release",
    "ReleaseStatus",
    "ReleaseTrack",
    "ReleaseType",
    "Song",
    # Turn results
    "ChangeEvent",
    "ClampRecord",
    "ExpenseBreakdown",
    "OperatingBurn",
    "PayrollEntry",
    "PayrollResult",
    "RevenueBreakdown",
    "TurnSummary",
    # Ledger results
    "AllocationResult",
    "ArtistInvestmentMetrics",
    "MarketingEffectiveness",
    "PortfolioMetrics",
    "ProjectInvestmentMetrics",
    "ReleaseInvestmentMetrics",
    "SongAllocation",
    "SongPerformance",
    # Calculator results
    "BudgetQualityResult",
    "MarketingMixResult",
    "PressOutcome",
    "ProjectCostResult",
    "ReleaseMarketingPreview",
    "ReleaseSongOutcome",
    "SellThroughBreakdown",
    "SongQualityResult",
    "TourCostBreakdown",
    "TourRevenueResult",
]
