"""Music label simulation engine.

Game logic independent of the MCP presentation layer. Calculators are pure
functions over the configuration service and an explicit random source; the
ledger and turn controller work through the Storage protocol.
"""

from label_sim.engine.access import resolve_access_tier, update_access_tiers
from label_sim.engine.bounds import clamp
from label_sim.engine.decay import decay_revenue, decay_streams, in_decay_window
from label_sim.engine.exceptions import CampaignCompletedError, InvalidTourParametersError
from label_sim.engine.finance import (
    EXPENSE_LABELS,
    artist_fee,
    calculate_operating_burn,
    format_financial_breakdown,
)
from label_sim.engine.ledger import (
    InvestmentLedger,
    compute_roi,
    marketing_effectiveness_rating,
    split_evenly,
)
from label_sim.engine.new_game import new_game_state, starting_executives
from label_sim.engine.payroll import RoleSalaryResolver, calculate_executive_salaries
from label_sim.engine.quality import (
    EFFICIENCY_RATINGS,
    budget_efficiency_rating,
    budget_quality_breakdown,
    budget_quality_multiplier,
    calculate_per_song_project_cost,
    calculate_project_cost,
    calculate_song_quality,
    economies_of_scale_factor,
    minimum_viable_cost,
    piecewise_budget_multiplier,
    song_count_quality_impact,
    validate_project_plan,
)
from label_sim.engine.revenue import (
    calculate_tour_costs,
    lead_single_boost,
    marketing_cost,
    marketing_mix,
    press_outcome,
    press_pickup_chance,
    press_pickups,
    preview_release_marketing,
    release_song_outcome,
    season_for_turn,
    streaming_outcome,
    streaming_outcome_bounds,
    tour_revenue,
    tour_revenue_breakdown,
)
from label_sim.engine.turn import TurnContext, TurnController, turn_rng

__all__ = [
    # Access tiers
    "resolve_access_tier",
    "update_access_tiers",
    # Bounds
    "clamp",
    # Decay
    "decay_revenue",
    "decay_streams",
    "in_decay_window",
    # Exceptions
    "CampaignCompletedError",
    "InvalidTourParametersError",
    # Finance
    "EXPENSE_LABELS",
    "artist_fee",
    "calculate_operating_burn",
    "format_financial_breakdown",
    # Ledger
    "InvestmentLedger",
    "compute_roi",
    "marketing_effectiveness_rating",
    "split_evenly",
    # New game
    "new_game_state",
    "starting_executives",
    # Payroll
    "RoleSalaryResolver",
    "calculate_executive_salaries",
    # Quality and cost
    "EFFICIENCY_RATINGS",
    "budget_efficiency_rating",
    "budget_quality_breakdown",
    "budget_quality_multiplier",
    "calculate_per_song_project_cost",
    "calculate_project_cost",
    "calculate_song_quality",
    "economies_of_scale_factor",
    "minimum_viable_cost",
    "piecewise_budget_multiplier",
    "song_count_quality_impact",
    "validate_project_plan",
    # Revenue
    "calculate_tour_costs",
    "lead_single_boost",
    "marketing_cost",
    "marketing_mix",
    "press_outcome",
    "press_pickup_chance",
    "press_pickups",
    "preview_release_marketing",
    "release_song_outcome",
    "season_for_turn",
    "streaming_outcome",
    "streaming_outcome_bounds",
    "tour_revenue",
    "tour_revenue_breakdown",
    # Turn controller
    "TurnContext",
    "TurnController",
    "turn_rng",
]
