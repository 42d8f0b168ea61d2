# models.py - boxquote ver1.0
# Data structures for boxes, price breakdowns, quotes and settings.

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


# ------------------------------
# Box input
# ------------------------------

class BoardGrade(str, Enum):
    """Corrugated board strength (resistencia)."""
    G1 = "29EST"
    G2 = "32EST"
    G3 = "40EST"


# grade value -> price per m2 (MXN)
PriceTable = Dict[str, float]


@dataclass(frozen=True)
class BoxSpec:
    length: float        # L, cm
    width: float         # W, cm
    height: float        # H, cm
    board_grade: BoardGrade
    ink_count: int
    quantity: int


@dataclass(frozen=True)
class PriceBreakdown:
    sheet_length: float     # cm
    sheet_width: float      # cm
    area_m2: float
    base_cost: float        # MXN
    ink_surcharge: float    # MXN
    unit_sale_price: float  # MXN per piece
    total: float            # MXN


# ------------------------------
# Records
# ------------------------------

@dataclass
class ClientInfo:
    name: str
    company: str = ""
    phone: str = ""
    email: str = ""


@dataclass
class CompanyInfo:
    name: str = "Cajas CRR"
    address: str = ""
    phone: str = ""
    email: str = ""
    rfc: str = ""


@dataclass
class Quote:
    id: str
    folio: str
    created_at: str      # ISO-8601
    client: ClientInfo
    box: BoxSpec
    breakdown: PriceBreakdown
    notes: str = ""


DEFAULT_PRICES: PriceTable = {
    BoardGrade.G1.value: 9.8,
    BoardGrade.G2.value: 10.79,
    BoardGrade.G3.value: 12.2,
}


@dataclass
class Settings:
    company: CompanyInfo = field(default_factory=CompanyInfo)
    prices: PriceTable = field(default_factory=lambda: dict(DEFAULT_PRICES))
