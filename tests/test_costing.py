"""Unit tests for the pricing engine."""

import pytest

from costing import (
    INK_SURCHARGE_RATE, SALE_MARGIN, compute_breakdown, price_for, round_half_away
)
from models import BoardGrade, BoxSpec


def _box(**changes):
    base = dict(length=30, width=20, height=15, board_grade=BoardGrade.G2,
                ink_count=0, quantity=100)
    base.update(changes)
    return BoxSpec(**base)


# ── Rounding ─────────────────────────────────────────────────────────────────


class TestRoundHalfAway:

    def test_tie_goes_up_for_positive(self):
        assert round_half_away(0.125) == 0.13

    def test_tie_goes_down_for_negative(self):
        assert round_half_away(-0.125) == -0.13

    def test_integer_ties(self):
        assert round_half_away(2.5, 0) == 3.0
        assert round_half_away(-2.5, 0) == -3.0

    def test_four_decimals(self):
        assert round_half_away(0.38345, 4) in (0.3834, 0.3835)
        assert round_half_away(0.12344, 4) == 0.1234

    def test_zero_is_not_negative(self):
        assert str(round_half_away(-0.001)) == "0.0"


# ── Reference scenario ───────────────────────────────────────────────────────


class TestReferenceBox:

    def test_sheet_size(self, box, prices):
        b = compute_breakdown(box, prices)
        assert b.sheet_length == 108.0      # 2*30 + 2*20 + 8
        assert b.sheet_width == 35.5        # 15 + 20 + 0.5

    def test_area(self, box, prices):
        assert compute_breakdown(box, prices).area_m2 == 0.3834

    def test_money(self, box, prices):
        b = compute_breakdown(box, prices)
        assert b.base_cost == 4.14
        assert b.ink_surcharge == 0.0
        assert b.unit_sale_price == 5.38
        assert b.total == 537.8

    def test_fields_rounded_from_unrounded_values(self, box, prices):
        b = compute_breakdown(box, prices)
        # 5.38 * 100 would be 538.00; the total comes from 5.3779518 * 100
        assert b.total != round(b.unit_sale_price * box.quantity, 2)


# ── Invariants ───────────────────────────────────────────────────────────────


class TestBreakdownInvariants:

    @pytest.mark.parametrize("dims", [(30, 20, 15), (12.5, 7.3, 40), (100, 80, 60)])
    @pytest.mark.parametrize("inks", [0, 1, 3])
    def test_unit_price_uses_unrounded_costs(self, dims, inks, prices):
        L, W, H = dims
        box = _box(length=L, width=W, height=H, ink_count=inks, quantity=250)
        b = compute_breakdown(box, prices)

        area = (2 * L + 2 * W + 8) * (H + W + 0.5) / 10000
        base = area * prices[BoardGrade.G2.value]
        ink = base * (inks * INK_SURCHARGE_RATE)
        unit = (base + ink) * SALE_MARGIN

        assert b.unit_sale_price == round_half_away(unit, 2)
        assert b.total == round_half_away(unit * 250, 2)

    def test_total_tracks_unit_price_times_quantity(self, prices):
        b = compute_breakdown(_box(quantity=1000), prices)
        assert b.total == pytest.approx(b.unit_sale_price * 1000, abs=0.005 * 1000)

    def test_higher_price_never_lowers_total(self):
        box = _box(ink_count=2)
        totals = [
            compute_breakdown(box, {BoardGrade.G2.value: p}).total
            for p in (0.0, 5.0, 9.8, 10.79, 12.2, 30.0)
        ]
        assert totals == sorted(totals)

    def test_more_inks_never_lowers_total(self, prices):
        totals = [compute_breakdown(_box(ink_count=n), prices).total for n in range(5)]
        assert totals == sorted(totals)

    def test_ink_surcharge_is_linear(self, prices):
        two = compute_breakdown(_box(ink_count=2), prices).ink_surcharge
        four = compute_breakdown(_box(ink_count=4), prices).ink_surcharge
        assert four == pytest.approx(2 * two, abs=0.01)

    def test_ink_count_is_not_clamped(self, prices):
        four = compute_breakdown(_box(ink_count=4), prices)
        five = compute_breakdown(_box(ink_count=5), prices)
        assert five.ink_surcharge > four.ink_surcharge

    def test_sheet_size_does_not_depend_on_price(self):
        a = compute_breakdown(_box(), {})
        b = compute_breakdown(_box(), {BoardGrade.G2.value: 50.0})
        assert (a.sheet_length, a.sheet_width, a.area_m2) == (
            b.sheet_length, b.sheet_width, b.area_m2)

    def test_same_input_same_output(self, box, prices):
        assert compute_breakdown(box, prices) == compute_breakdown(box, prices)


# ── Price lookup ─────────────────────────────────────────────────────────────


class TestPriceLookup:

    def test_missing_grade_prices_at_zero(self, box):
        b = compute_breakdown(box, {BoardGrade.G1.value: 9.8})
        assert b.base_cost == 0.0
        assert b.unit_sale_price == 0.0
        assert b.total == 0.0
        assert b.sheet_length == 108.0

    def test_price_for_reports_missing_grade(self):
        assert price_for(BoardGrade.G3, {BoardGrade.G1.value: 9.8}) is None

    def test_price_for_accepts_plain_string(self, prices):
        assert price_for("40EST", prices) == 12.2

    def test_grade_selects_price(self, prices):
        cheap = compute_breakdown(_box(board_grade=BoardGrade.G1), prices)
        strong = compute_breakdown(_box(board_grade=BoardGrade.G3), prices)
        assert cheap.total < strong.total


# ── Preconditions ────────────────────────────────────────────────────────────


class TestPreconditions:

    @pytest.mark.parametrize("changes", [
        {"length": 0}, {"width": -1}, {"height": 0}, {"quantity": 0},
    ])
    def test_non_positive_input_is_a_contract_violation(self, changes, prices):
        with pytest.raises(AssertionError):
            compute_breakdown(_box(**changes), prices)
