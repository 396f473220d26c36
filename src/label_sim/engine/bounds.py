"""Clamping helpers that keep a record of every out-of-bounds value."""

import logging

from label_sim.models import ClampRecord

logger = logging.getLogger(__name__)


def clamp(
    name: str,
    value: float,
    lower: float | None = None,
    upper: float | None = None,
    clamps: list[ClampRecord] | None = None,
) -> float:
    """Clamp a value to [lower, upper], recording any adjustment.

    Args:
        name: Name of the quantity, used in logs and the record.
        value: Computed value.
        lower: Inclusive lower bound, or None for unbounded.
        upper: Inclusive upper bound, or None for unbounded.
        clamps: Optional list that receives a ClampRecord when the value moves.

    Returns:
        The value, moved to the nearest bound if it was outside them.
    """
    result = value
    if lower is not None and value < lower:
        result = lower
    elif upper is not None and value > upper:
        result = upper

    if result != value:
        logger.warning("Clamped %s from %.4f to %.4f", name, value, result)
        if clamps is not None:
            clamps.append(
                ClampRecord(
                    name=name,
                    original=value,
                    clamped=result,
                    lower=lower,
                    upper=upper,
                )
            )
    return result
