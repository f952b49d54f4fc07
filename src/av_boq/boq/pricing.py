"""
Display/export-time pricing: margin and tax on top of stored base prices.
Why: margin is a view concern; the BOQ keeps currency-agnostic base prices.
"""

from typing import Iterable

from av_boq.core.schemas import BoqItem

GST_RATE = 0.18  # SGST 9% + CGST 9%


def effective_margin(item: BoqItem, default_margin: float) -> float:
    return item.margin if item.margin is not None else max(default_margin, 0.0)


def sell_total(item: BoqItem, default_margin: float, rate: float = 1.0) -> float:
    return item.total_price * rate * (1 + effective_margin(item, default_margin) / 100)


def room_total(
    boq: Iterable[BoqItem], default_margin: float, rate: float = 1.0, tax_rate: float = GST_RATE
) -> float:
    """Room total including tax, in the target currency."""
    return sum(sell_total(item, default_margin, rate) * (1 + tax_rate) for item in boq)
