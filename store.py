# store.py - boxquote ver1.0
#
# JSON-file persistence for quotes and the settings singleton.
# Single user, no locking: the last write wins.

import json
import re
from pathlib import Path
from typing import List, Optional

from io_utils import validate_price
from models import (
    BoardGrade, BoxSpec, ClientInfo, CompanyInfo, PriceBreakdown,
    Quote, Settings
)

FOLIO_PREFIX = "COT-"
_FOLIO_RE = re.compile(r"^" + re.escape(FOLIO_PREFIX) + r"(\d+)$")


# -------------------------------------------------------------
# Quotes
# -------------------------------------------------------------

class JsonQuoteStore:
    """Quotes kept as a JSON list, newest first."""

    def __init__(self, file_path: Path):
        self._file_path = Path(file_path)

    def list_all(self) -> List[Quote]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def get(self, quote_id: str) -> Optional[Quote]:
        for raw in self._load_raw():
            if raw["id"] == quote_id:
                return self._to_domain(raw)
        return None

    def get_by_folio(self, folio: str) -> Optional[Quote]:
        for raw in self._load_raw():
            if raw["folio"].upper() == folio.strip().upper():
                return self._to_domain(raw)
        return None

    def find(self, ref: str) -> Optional[Quote]:
        """Look up by id first, then by folio."""
        return self.get(ref) or self.get_by_folio(ref)

    def save(self, quote: Quote) -> None:
        """Replace the record with the same id, or insert it at the front."""
        quotes = self._load_raw()
        for i, raw in enumerate(quotes):
            if raw["id"] == quote.id:
                quotes[i] = self._to_raw(quote)
                break
        else:
            quotes.insert(0, self._to_raw(quote))
        self._persist_raw(quotes)

    def delete(self, quote_id: str) -> bool:
        quotes = self._load_raw()
        kept = [q for q in quotes if q["id"] != quote_id]
        if len(kept) == len(quotes):
            return False
        self._persist_raw(kept)
        return True

    def next_folio(self) -> str:
        """COT-0001, COT-0002, ... from the highest numeric folio on file."""
        highest = 0
        for raw in self._load_raw():
            m = _FOLIO_RE.match(raw.get("folio", ""))
            if m:
                highest = max(highest, int(m.group(1)))
        return f"{FOLIO_PREFIX}{highest + 1:04d}"

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(quote: Quote) -> dict:
        b, p, c = quote.box, quote.breakdown, quote.client
        return {
            "id": quote.id,
            "folio": quote.folio,
            "created_at": quote.created_at,
            "client": {
                "name": c.name,
                "company": c.company,
                "phone": c.phone,
                "email": c.email,
            },
            "box": {
                "length": b.length,
                "width": b.width,
                "height": b.height,
                "board_grade": b.board_grade.value,
                "ink_count": b.ink_count,
                "quantity": b.quantity,
            },
            "breakdown": {
                "sheet_length": p.sheet_length,
                "sheet_width": p.sheet_width,
                "area_m2": p.area_m2,
                "base_cost": p.base_cost,
                "ink_surcharge": p.ink_surcharge,
                "unit_sale_price": p.unit_sale_price,
                "total": p.total,
            },
            "notes": quote.notes,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Quote:
        b = raw["box"]
        return Quote(
            id=raw["id"],
            folio=raw["folio"],
            created_at=raw["created_at"],
            client=ClientInfo(**raw["client"]),
            box=BoxSpec(
                length=b["length"],
                width=b["width"],
                height=b["height"],
                board_grade=BoardGrade(b["board_grade"]),
                ink_count=b["ink_count"],
                quantity=b["quantity"],
            ),
            breakdown=PriceBreakdown(**raw["breakdown"]),
            notes=raw.get("notes", ""),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> List[dict]:
        # No file yet means no quotes; it is created on the first save.
        if not self._file_path.exists():
            return []
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, quotes: List[dict]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps(quotes, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )


# -------------------------------------------------------------
# Settings
# -------------------------------------------------------------

class JsonSettingsStore:
    """Company data and price table. Defaults until the first save."""

    def __init__(self, file_path: Path):
        self._file_path = Path(file_path)

    def load(self) -> Settings:
        if not self._file_path.exists():
            return Settings()
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        prices = {}
        for grade, value in raw.get("prices", {}).items():
            try:
                prices[grade] = validate_price(grade, value)
            except ValueError as ve:
                raise ValueError(f"{self._file_path}: {ve}") from ve
        return Settings(
            company=CompanyInfo(**raw.get("company", {})),
            prices=prices,
        )

    def save(self, settings: Settings) -> None:
        c = settings.company
        raw = {
            "company": {
                "name": c.name,
                "address": c.address,
                "phone": c.phone,
                "email": c.email,
                "rfc": c.rfc,
            },
            "prices": dict(settings.prices),
        }
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps(raw, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
