# costing.py - boxquote ver1.0
#
# Computes sheet size, area and sale price for one box spec.
# Values are rounded here, once, so stored and printed figures match.

import math
from typing import Optional

from models import BoardGrade, BoxSpec, PriceBreakdown, PriceTable


# -------------------------------------------------------------
# Constants
# -------------------------------------------------------------

TRIM_ALLOWANCE_CM = 8.0     # 4 cm glue flap + 4 cm trim (refil)
SIDE_ALLOWANCE_CM = 0.5
INK_SURCHARGE_RATE = 0.03   # per ink
SALE_MARGIN = 1.30
MAX_INKS = 4


# -------------------------------------------------------------
# Helpers
# -------------------------------------------------------------

def round_half_away(value: float, decimals: int = 2) -> float:
    """
    Round on the scaled value with ties going away from zero:
        round_half_away(0.125) -> 0.13, round_half_away(-0.125) -> -0.13
    """
    factor = 10 ** decimals
    scaled = math.floor(abs(value) * factor + 0.5)
    return math.copysign(scaled / factor, value) if scaled else 0.0


def price_for(grade: BoardGrade, prices: PriceTable) -> Optional[float]:
    """Configured price per m2 for a grade, or None when the table has no entry."""
    key = grade.value if isinstance(grade, BoardGrade) else str(grade)
    return prices.get(key)


# -------------------------------------------------------------
# Main computation
# -------------------------------------------------------------

def compute_breakdown(box: BoxSpec, prices: PriceTable) -> PriceBreakdown:
    """
    sheet_length = 2L + 2W + 8
    sheet_width  = H + W + 0.5
    base         = area * price/m2          (missing grade -> price 0)
    ink          = base * inks * 3%
    unit price   = (base + ink) * 1.30
    total        = unit price * quantity
    Every field is rounded from the unrounded intermediates.
    """
    assert box.length > 0 and box.width > 0 and box.height > 0, (
        f"box dimensions must be positive, got {box.length}x{box.width}x{box.height}"
    )
    assert box.quantity > 0, f"quantity must be positive, got {box.quantity}"

    sheet_length = 2 * box.length + 2 * box.width + TRIM_ALLOWANCE_CM
    sheet_width = box.height + box.width + SIDE_ALLOWANCE_CM
    area_m2 = sheet_length * sheet_width / 10000

    price_m2 = price_for(box.board_grade, prices) or 0.0

    base_cost = area_m2 * price_m2
    ink_surcharge = base_cost * (box.ink_count * INK_SURCHARGE_RATE)
    unit_sale_price = (base_cost + ink_surcharge) * SALE_MARGIN
    total = unit_sale_price * box.quantity

    return PriceBreakdown(
        sheet_length=round_half_away(sheet_length, 2),
        sheet_width=round_half_away(sheet_width, 2),
        area_m2=round_half_away(area_m2, 4),
        base_cost=round_half_away(base_cost, 2),
        ink_surcharge=round_half_away(ink_surcharge, 2),
        unit_sale_price=round_half_away(unit_sale_price, 2),
        total=round_half_away(total, 2),
    )
