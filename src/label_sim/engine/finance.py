"""Operating burn and financial summaries."""

import random

from label_sim.config import ConfigurationService
from label_sim.models import Artist, OperatingBurn, PayrollResult, TurnSummary
from label_sim.utils import format_currency

EXPENSE_LABELS = {
    "operations": "operations",
    "artist_salaries": "artist fees",
    "executive_salaries": "executive salaries",
    "project_costs": "project costs",
    "marketing_costs": "marketing",
}


def artist_fee(config: ConfigurationService, artist: Artist) -> int:
    """Monthly fee of an artist, falling back to the configured default."""
    if artist.monthly_fee is None:
        return config.economy.default_artist_fee
    return artist.monthly_fee


def calculate_operating_burn(
    config: ConfigurationService,
    rng: random.Random,
    artists: list[Artist],
    payroll: PayrollResult | None = None,
) -> OperatingBurn:
    """Operating costs for one turn.

    Args:
        config: Configuration service.
        rng: Seeded random source.
        artists: Signed artists whose fees are due.
        payroll: Executive payroll due this turn, if any.

    Returns:
        OperatingBurn with base operations, artist fees and executive salaries.
    """
    burn_range = config.economy.monthly_burn
    payroll = payroll or PayrollResult()
    return OperatingBurn(
        operations=round(rng.uniform(burn_range.min, burn_range.max)),
        artist_salaries=sum(artist_fee(config, artist) for artist in artists),
        executive_salaries=payroll.total,
        payroll=payroll,
    )


def format_financial_breakdown(summary: TurnSummary) -> str:
    """Render a turn's money movement as one line.

    Example: "$75,000 - $4,200 (operations) + $12,000 (revenue) = $82,800".
    """
    parts = [format_currency(summary.starting_money)]
    breakdown = summary.expense_breakdown.model_dump()
    for key, label in EXPENSE_LABELS.items():
        amount = breakdown[key]
        if amount:
            parts.append(f"- {format_currency(amount)} ({label})")
    if summary.revenue:
        parts.append(f"+ {format_currency(summary.revenue)} (revenue)")
    parts.append(f"= {format_currency(summary.ending_money)}")
    return " ".join(parts)
