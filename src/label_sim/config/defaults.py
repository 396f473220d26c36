"""Default balance table.

Monetary values are in whole dollars, rates are per turn (one simulated
month) unless noted otherwise.
"""

from typing import Any

DEFAULT_BALANCE: dict[str, Any] = {
    "version": "2025.1",
    "economy": {
        "starting_money": 75000,
        "starting_reputation": 5,
        "starting_creative_capital": 10,
        "monthly_burn": {"min": 3000, "max": 6000},
        "default_artist_fee": 1200,
        "project_costs": {
            "single": {"min": 3000, "max": 12000, "default_song_count": 1},
            "ep": {"min": 15000, "max": 35000, "default_song_count": 4},
            "tour": {"min": 5000, "max": 25000, "default_song_count": 1},
        },
        "song_count_cost_system": {
            "enabled": True,
            "base_per_song_cost": {"single": 3500, "ep": 4000},
            "default_per_song_cost": 3500,
            "economies_of_scale": {
                "enabled": True,
                "thresholds": {
                    "small_project": 3,
                    "medium_project": 5,
                    "large_project": 8,
                },
                "breakpoints": {
                    "single_song": 1.0,
                    "small": 0.95,
                    "medium": 0.9,
                    "large": 0.85,
                },
            },
        },
        "recording_baseline_factor": 1.5,
    },
    "producer_tiers": {
        "local": {"cost_multiplier": 1.0, "skill": 40, "unlock_reputation": 0},
        "regional": {"cost_multiplier": 1.8, "skill": 55, "unlock_reputation": 15},
        "national": {"cost_multiplier": 3.2, "skill": 75, "unlock_reputation": 35},
        "legendary": {"cost_multiplier": 5.5, "skill": 95, "unlock_reputation": 60},
    },
    "time_investment": {
        "rushed": {"cost_multiplier": 0.7, "quality_multiplier": 0.7},
        "standard": {"cost_multiplier": 1.0, "quality_multiplier": 1.0},
        "extended": {"cost_multiplier": 1.4, "quality_multiplier": 1.1},
        "perfectionist": {"cost_multiplier": 2.1, "quality_multiplier": 1.2},
    },
    "streaming": {
        "quality_weight": 0.35,
        "playlist_weight": 0.25,
        "reputation_weight": 0.2,
        "marketing_weight": 0.2,
        "popularity_weight": 0.1,
        "playlist_component_scale": 100,
        "marketing_scale_divisor": 1000,
        "marketing_scale_multiplier": 50,
        "variance": {"min": 0.9, "max": 1.1},
        "first_release_multiplier": 2.5,
        "base_streams_per_point": 1000,
        "revenue_per_stream": 0.05,
        "ongoing": {
            "monthly_decay_rate": 0.8,
            "max_decay_months": 24,
            "revenue_per_stream": 0.05,
            "ongoing_factor": 0.5,
            "reputation_bonus_factor": 0.002,
            "access_tier_bonus_factor": 0.25,
            "minimum_revenue_threshold": 25,
            "reputation_baseline": 50,
        },
        "star_power_amplification": {"enabled": True, "max_multiplier": 0.3},
    },
    "tour": {
        "sell_through_base": 0.15,
        "reputation_modifier": 0.05,
        "local_popularity_weight": 0.6,
        "marketing_sell_through_factor": 0.0165,
        "merch_percentage": 0.15,
        "ticket_price_base": 25,
        "ticket_price_per_capacity": 0.003,
        "venue_fee_per_capacity": 4,
        "production_fee_per_capacity": 2.7,
        "max_cities": 10,
    },
    "press": {
        "base_chance": 0.05,
        "pr_spend_modifier": 0.00001,
        "reputation_modifier": 0.002,
        "story_flag_bonus": 0.1,
        "max_pickups_per_release": 3,
        "reputation_gain_multiplier": 2,
    },
    "access_tiers": {
        "playlist": {
            "none": {"threshold": 0, "multiplier": 0.1},
            "niche": {"threshold": 10, "multiplier": 0.4},
            "mid": {"threshold": 30, "multiplier": 0.8},
            "flagship": {"threshold": 60, "multiplier": 1.5},
        },
        "press": {
            "none": {"threshold": 0, "pickup_chance": 0.0},
            "blogs": {"threshold": 8, "pickup_chance": 0.15},
            "mid_tier": {"threshold": 25, "pickup_chance": 0.35},
            "national": {"threshold": 50, "pickup_chance": 0.6},
        },
        "venue": {
            "none": {"threshold": 0, "capacity": {"min": 50, "max": 150}},
            "clubs": {"threshold": 5, "capacity": {"min": 200, "max": 500}},
            "theaters": {"threshold": 20, "capacity": {"min": 800, "max": 2000}},
            "arenas": {"threshold": 45, "capacity": {"min": 5000, "max": 15000}},
        },
    },
    "quality": {
        "budget": {
            "enabled": True,
            "neutral_multiplier": 1.0,
            "min_multiplier": 0.65,
            "max_multiplier": 1.35,
            "breakpoints": {
                "penalty_threshold": 0.5,
                "minimum_viable": 1.0,
                "optimal_efficiency": 1.5,
                "luxury_threshold": 2.25,
                "diminishing_threshold": 3.0,
            },
            "segment_multipliers": {
                "penalty_threshold": 0.65,
                "minimum_viable": 1.0,
                "optimal_efficiency": 1.1,
                "luxury_threshold": 1.2,
                "diminishing_threshold": 1.3,
            },
            "diminishing_factor": 0.5,
            "dampening_factor": None,
        },
        "song_count": {
            "enabled": True,
            "base_quality_per_song": 0.98,
            "min_quality_multiplier": 0.85,
        },
        "generation": {
            "talent_weight": 0.65,
            "skill_weight": 0.35,
            "work_ethic_bonus": 0.3,
            "popularity_base": 0.95,
            "popularity_span": 0.1,
            "mood_base": 0.9,
            "mood_span": 0.2,
            "variance_max_percent": 35,
            "variance_skill_reduction": 30,
            "breakout": {"chance": 0.05, "base": 1.5, "skill_span": 0.5},
            "failure": {"chance": 0.05, "base": 0.5, "skill_span": 0.2},
            "quality_floor": 25,
            "quality_ceiling": 98,
            "songs_per_turn": {"single": 2, "ep": 3},
            "title_pool": [
                "Midnight Drive",
                "Paper Hearts",
                "Neon Tide",
                "Golden Hour",
                "Static Bloom",
                "Low Light",
                "Glass Houses",
                "Satellite",
                "Afterglow",
                "Wildfire",
                "Echo Park",
                "Slow Burn",
                "Northern Lines",
                "Velvet Room",
                "Daydreamer",
                "Undertow",
                "Copper Sky",
                "First Light",
                "Lost Signal",
                "Sugar Rush",
            ],
            "moods": ["upbeat", "melancholic", "aggressive", "chill"],
        },
    },
    "releases": {
        "type_multipliers": {"single": 1.0, "ep": 1.15, "album": 1.25},
        "lead_single": {
            "optimal_timing_turns_before": [1, 2],
            "good_timing_turns_before": [3],
            "optimal_timing_bonus": 1.25,
            "good_timing_bonus": 1.15,
            "default_bonus": 1.05,
            "budget_scaling_factor": 1000,
            "marketing_effectiveness_factor": 0.05,
        },
        "marketing_channels": {
            "radio": {"effectiveness": 0.85, "description": "High reach, mainstream appeal"},
            "digital": {"effectiveness": 0.92, "description": "Targeted, cost-effective"},
            "pr": {"effectiveness": 0.78, "description": "Industry credibility, slower build"},
            "influencer": {
                "effectiveness": 0.88,
                "description": "Social engagement, younger demographics",
            },
        },
        "channel_budget_scale": 5000,
        "channel_marketing_weight": 0.6,
        "diversity_bonus": {"base": 1.0, "per_additional_channel": 0.08, "maximum": 1.4},
        "channel_synergies": [
            {"channels": ["radio", "digital"], "bonus": 0.15},
            {"channels": ["pr", "influencer"], "bonus": 0.12},
        ],
        "full_spectrum_bonus": 0.1,
        "seasonal_revenue_multipliers": {"q1": 0.85, "q2": 0.95, "q3": 1.1, "q4": 1.4},
        "seasonal_cost_multipliers": {"q1": 0.85, "q2": 0.95, "q3": 1.1, "q4": 1.4},
    },
    "progression": {
        "campaign_length_turns": 36,
        "min_production_turns": 2,
        "max_production_turns": 4,
        "base_focus_slots": 3,
        "max_focus_slots": 4,
        "focus_slot_unlock_reputation": 50,
        "payroll_interval_turns": 1,
    },
    "executives": {
        "roles": {
            "ceo": {"base_salary": 0, "title": "Chief Executive Officer"},
            "head_ar": {"base_salary": 5000, "title": "Head of A&R"},
            "cmo": {"base_salary": 5500, "title": "Chief Marketing Officer"},
            "cco": {"base_salary": 6000, "title": "Chief Creative Officer"},
            "head_distribution": {
                "base_salary": 4500,
                "title": "Head of Distribution",
            },
        },
    },
}
