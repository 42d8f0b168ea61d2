# io_utils.py - boxquote ver1.0
# Parsing config, validating box input, formatting numbers and dates (es-MX).

import math
from datetime import datetime
from typing import Dict

from models import BoardGrade, BoxSpec


# ------------------------------
# Config parser (strict one key per line)
# ------------------------------

def parse_properties(path: str) -> Dict[str, str]:
    """
    Conservative parser:
    - One key=value per line
    - Lines without '=' are ignored
    - '#' at start of line = comment
    """
    props: Dict[str, str] = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, val = line.split("=", 1)
            props[key.strip()] = val.strip()
    return props


# ------------------------------
# Box input
# ------------------------------

def parse_grade(val: str) -> BoardGrade:
    """Accepts the grade value ('32EST') or member name ('G2'), case-insensitive."""
    v = (val or "").strip().upper()
    for g in BoardGrade:
        if v in (g.value, g.name):
            return g
    known = ", ".join(g.value for g in BoardGrade)
    raise ValueError(f"Unknown board grade '{val}' (expected one of: {known})")


def validate_box_input(
    length: float,
    width: float,
    height: float,
    grade: str,
    ink_count: int,
    quantity: int,
    max_inks: int = 4
) -> BoxSpec:
    """
    Checks raw user input and builds a BoxSpec.
    Raises ValueError listing every problem found.
    """
    problems = []
    for label, v in (("length", length), ("width", width), ("height", height)):
        if v is None or not math.isfinite(v) or v <= 0:
            problems.append(f"{label} must be greater than 0 cm, got {v}")
    if quantity is None or not math.isfinite(quantity) or quantity <= 0:
        problems.append(f"quantity must be at least 1, got {quantity}")
    if ink_count is None or not (0 <= ink_count <= max_inks):
        problems.append(f"ink count must be between 0 and {max_inks}, got {ink_count}")

    board_grade = None
    try:
        board_grade = parse_grade(grade)
    except ValueError as ve:
        problems.append(str(ve))

    if problems:
        msg = "Invalid box specification:\n"
        msg += "\n".join(f"- {p}" for p in problems)
        raise ValueError(msg)

    return BoxSpec(
        length=float(length),
        width=float(width),
        height=float(height),
        board_grade=board_grade,
        ink_count=int(ink_count),
        quantity=int(quantity),
    )


def validate_price(grade: str, price: float) -> float:
    """Price per m2 must be a finite, non-negative number."""
    if not isinstance(price, (int, float)) or not math.isfinite(price) or price < 0:
        raise ValueError(
            f"Price per m² for {grade} must be a finite number of 0 or more, got {price}"
        )
    return float(price)


# ------------------------------
# Formatting
# ------------------------------

MONTHS_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


def fmt_num(n: float) -> str:
    """30.0 -> '30', 7.5 -> '7.5', 35.25 -> '35.25'"""
    if float(n).is_integer():
        return str(int(n))
    return f"{n:.4f}".rstrip("0").rstrip(".")


def format_mxn(amount: float) -> str:
    """1234.5 -> '$1,234.50'"""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_int(n: int) -> str:
    return f"{n:,}"


def format_date(iso: str) -> str:
    return datetime.fromisoformat(iso).strftime("%d/%m/%Y")


def format_date_long(iso: str) -> str:
    d = datetime.fromisoformat(iso)
    return f"{d.day:02d} de {MONTHS_ES[d.month - 1]} de {d.year}"
