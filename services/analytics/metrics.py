"""Rounding and ratio helpers shared by every aggregator."""
import math
from typing import Optional


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded toward positive infinity."""
    return math.floor(value + 0.5)


def pct(part: float, total: float) -> int:
    """Rounded percentage; 0 when ``total`` is 0."""
    if not total:
        return 0
    return round_half_up(part / total * 100)


def pct_delta(current: float, prior: float) -> Optional[int]:
    """Month-over-month change in percent.

    Returns None when the prior value is 0: there is no meaningful trend
    to report, which is different from a 0% change.
    """
    if prior == 0:
        return None
    return round_half_up((current - prior) / prior * 100)


def cents_to_units(cents: int | None) -> int:
    """Whole currency units from integer cents."""
    return round_half_up((cents or 0) / 100)


def safe_div_round(numerator: float, denominator: float) -> int:
    if not denominator:
        return 0
    return round_half_up(numerator / denominator)


def full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    parts = [p for p in (first_name, last_name) if p]
    return " ".join(parts) or "Unknown"
