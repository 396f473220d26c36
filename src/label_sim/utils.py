"""Utility functions for label_sim."""

import uuid


def format_currency(amount: float) -> str:
    """Format a dollar amount as "$12,345" (negative as "-$12,345")."""
    rounded = round(amount)
    if rounded < 0:
        return f"-${-rounded:,}"
    return f"${rounded:,}"


def new_id(prefix: str) -> str:
    """Generate a short random identifier such as "game-1a2b3c4d"."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"
