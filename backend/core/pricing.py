from __future__ import annotations

import math
import re
from functools import lru_cache

from backend.core.models import FilterSpecification


EMI_DOWN_PAYMENT_SHARE = 0.2
EMI_ANNUAL_RATE = 0.085
EMI_TENURE_MONTHS = 20 * 12

CRORE = 10_000_000
LAKH = 100_000

_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


@lru_cache(maxsize=1024)
def parse_int_text(value: str | None) -> int | None:
    """
    Browser-style parseInt: leading integer of the text, or None when absent.
    """
    if not value:
        return None
    match = _LEADING_INT_RE.match(value)
    if not match:
        return None
    return int(match.group(1))


def calculate_emi(price: float) -> float:
    """
    Monthly instalment with 20% down, 8.5% annual rate over 20 years.
    """
    principal = price * (1 - EMI_DOWN_PAYMENT_SHARE)
    rate = EMI_ANNUAL_RATE / 12
    growth = (1 + rate) ** EMI_TENURE_MONTHS
    return principal * rate * growth / (growth - 1)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def active_area(spec: FilterSpecification) -> int:
    for text in (spec.min_super_area, spec.min_built_up_area, spec.min_carpet_area):
        parsed = parse_int_text(text)
        if parsed:
            return parsed
    return 0


def active_area_basis(spec: FilterSpecification) -> str | None:
    if not active_area(spec):
        return None
    # Label follows which input is filled in, matching the estimator caption.
    if spec.min_super_area:
        return "Super Area"
    if spec.min_built_up_area:
        return "Built-up"
    return "Carpet Area"


def price_per_area_range(spec: FilterSpecification) -> tuple[int | None, int | None]:
    area = active_area(spec)
    if area == 0:
        return None, None
    return _rate(spec.min_price, area), _rate(spec.max_price, area)


def format_price(price: float) -> str:
    if price >= CRORE:
        return f"₹ {price / CRORE:.2f} Cr"
    if price >= LAKH:
        return f"₹ {price / LAKH:.2f} L"
    if float(price).is_integer():
        return f"₹ {int(price):,}"
    return f"₹ {price:,.2f}"


def _rate(bound_text: str, area: int) -> int | None:
    bound = parse_int_text(bound_text)
    if bound is None or bound <= 0:
        return None
    return round_half_up(bound / area)
