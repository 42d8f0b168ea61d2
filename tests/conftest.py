"""Shared fixtures: a reference box, the default price table, quote factory."""

from datetime import datetime

import pytest

from costing import compute_breakdown
from models import DEFAULT_PRICES, BoardGrade, BoxSpec, ClientInfo, Quote


@pytest.fixture
def box():
    # 30 x 20 x 15 cm, 32EST, no inks, 100 pieces
    return BoxSpec(
        length=30, width=20, height=15,
        board_grade=BoardGrade.G2, ink_count=0, quantity=100,
    )


@pytest.fixture
def prices():
    return dict(DEFAULT_PRICES)


@pytest.fixture
def make_quote(box, prices):
    def _make(folio="COT-0001", quote_id=None, notes="", **box_changes):
        b = BoxSpec(**{**box.__dict__, **box_changes})
        return Quote(
            id=quote_id or folio.lower(),
            folio=folio,
            created_at=datetime(2026, 10, 19, 9, 30).isoformat(timespec="seconds"),
            client=ClientInfo(name="Abarrotes López", company="López SA",
                              phone="555-1234", email="compras@lopez.mx"),
            box=b,
            breakdown=compute_breakdown(b, prices),
            notes=notes,
        )
    return _make
