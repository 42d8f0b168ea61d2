"""Tests for the JSON-file quote and settings stores."""

import json

import pytest

from models import DEFAULT_PRICES, CompanyInfo, Settings
from store import JsonQuoteStore, JsonSettingsStore


# ── Quotes ───────────────────────────────────────────────────────────────────


class TestJsonQuoteStore:

    def test_file_is_created_on_first_save(self, tmp_path, make_quote):
        path = tmp_path / "data" / "quotes.json"
        store = JsonQuoteStore(path)
        assert store.list_all() == []
        assert store.next_folio() == "COT-0001"
        assert not path.parent.exists()

        store.save(make_quote())
        assert len(json.loads(path.read_text(encoding="utf-8"))) == 1

    def test_round_trip(self, tmp_path, make_quote):
        store = JsonQuoteStore(tmp_path / "quotes.json")
        quote = make_quote(notes="Entrega en planta")
        store.save(quote)
        assert store.get(quote.id) == quote

    def test_newest_first(self, tmp_path, make_quote):
        store = JsonQuoteStore(tmp_path / "quotes.json")
        store.save(make_quote("COT-0001"))
        store.save(make_quote("COT-0002"))
        assert [q.folio for q in store.list_all()] == ["COT-0002", "COT-0001"]

    def test_save_replaces_in_place(self, tmp_path, make_quote):
        store = JsonQuoteStore(tmp_path / "quotes.json")
        store.save(make_quote("COT-0001"))
        store.save(make_quote("COT-0002"))
        store.save(make_quote("COT-0001", notes="revisada"))
        quotes = store.list_all()
        assert [q.folio for q in quotes] == ["COT-0002", "COT-0001"]
        assert quotes[1].notes == "revisada"

    def test_breakdown_is_stored_not_recomputed(self, tmp_path, make_quote):
        path = tmp_path / "quotes.json"
        store = JsonQuoteStore(path)
        quote = make_quote()
        store.save(quote)

        raw = json.loads(path.read_text(encoding="utf-8"))
        raw[0]["breakdown"]["total"] = 999.99
        path.write_text(json.dumps(raw), encoding="utf-8")

        assert store.get(quote.id).breakdown.total == 999.99

    def test_get_missing(self, tmp_path):
        store = JsonQuoteStore(tmp_path / "quotes.json")
        assert store.get("nope") is None
        assert store.find("COT-9999") is None

    def test_find_by_id_or_folio(self, tmp_path, make_quote):
        store = JsonQuoteStore(tmp_path / "quotes.json")
        quote = make_quote("COT-0007", quote_id="abc123")
        store.save(quote)
        assert store.find("abc123") == quote
        assert store.find("cot-0007") == quote

    def test_delete(self, tmp_path, make_quote):
        store = JsonQuoteStore(tmp_path / "quotes.json")
        store.save(make_quote("COT-0001"))
        assert store.delete("cot-0001") is True
        assert store.delete("cot-0001") is False
        assert store.list_all() == []


class TestNextFolio:

    def test_first_folio(self, tmp_path):
        assert JsonQuoteStore(tmp_path / "q.json").next_folio() == "COT-0001"

    def test_follows_highest(self, tmp_path, make_quote):
        store = JsonQuoteStore(tmp_path / "q.json")
        store.save(make_quote("COT-0003"))
        store.save(make_quote("COT-0001"))
        assert store.next_folio() == "COT-0004"

    def test_ignores_foreign_folios(self, tmp_path, make_quote):
        store = JsonQuoteStore(tmp_path / "q.json")
        store.save(make_quote("COT-0002"))
        store.save(make_quote("MANUAL-77"))
        assert store.next_folio() == "COT-0003"

    def test_grows_past_four_digits(self, tmp_path, make_quote):
        store = JsonQuoteStore(tmp_path / "q.json")
        store.save(make_quote("COT-9999"))
        assert store.next_folio() == "COT-10000"


# ── Settings ─────────────────────────────────────────────────────────────────


class TestJsonSettingsStore:

    def test_defaults_without_file(self, tmp_path):
        settings = JsonSettingsStore(tmp_path / "settings.json").load()
        assert settings.company.name == "Cajas CRR"
        assert settings.prices == DEFAULT_PRICES

    def test_default_prices_are_a_copy(self, tmp_path):
        settings = JsonSettingsStore(tmp_path / "settings.json").load()
        settings.prices["29EST"] = 1.0
        assert DEFAULT_PRICES["29EST"] == 9.8

    def test_round_trip(self, tmp_path):
        store = JsonSettingsStore(tmp_path / "nested" / "settings.json")
        settings = Settings(
            company=CompanyInfo(name="Empaques del Norte", rfc="ENO010101AAA"),
            prices={"29EST": 10.5, "40EST": 13.0},
        )
        store.save(settings)
        assert store.load() == settings

    def test_removed_grade_stays_removed(self, tmp_path):
        store = JsonSettingsStore(tmp_path / "settings.json")
        store.save(Settings(prices={"29EST": 9.8}))
        assert "32EST" not in store.load().prices

    @pytest.mark.parametrize("bad", ["NaN", "Infinity", "-2.5"])
    def test_rejects_bad_price_on_file(self, tmp_path, bad):
        path = tmp_path / "settings.json"
        path.write_text('{"prices": {"29EST": 9.8, "32EST": %s}}' % bad, encoding="utf-8")
        with pytest.raises(ValueError, match="settings.json: Price per m² for 32EST"):
            JsonSettingsStore(path).load()
