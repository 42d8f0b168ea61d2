# boxquote ver1.0 - main entry
# - Quotes, settings and PDFs from the command line
# - Shared static PIN (config key 'pin')
# - Clean error reporting (no traceback)

import argparse
import getpass
import os
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from costing import MAX_INKS, compute_breakdown, price_for
from io_utils import (
    fmt_num, format_date, format_int, format_mxn, parse_grade,
    parse_properties, validate_box_input, validate_price
)
from models import BoxSpec, ClientInfo, PriceBreakdown, Quote, Settings
from pdf_export import generate_drawing_pdf, generate_quote_pdf
from store import JsonQuoteStore, JsonSettingsStore

DEFAULT_PIN = "0956"
DEFAULT_CONFIG = "config.properties"


@dataclass
class Context:
    cfg: dict
    quotes: JsonQuoteStore
    settings: JsonSettingsStore


# ------------------------------
# Helpers
# ------------------------------

def load_config(path: Optional[str]) -> dict:
    """Explicit --config must exist; the default file is optional."""
    if path:
        if not os.path.isfile(path):
            raise ValueError(f"Config file not found: {path}")
        return parse_properties(path)
    if os.path.isfile(DEFAULT_CONFIG):
        return parse_properties(DEFAULT_CONFIG)
    return {}


def check_pin(entered: Optional[str], cfg: dict) -> bool:
    expected = cfg.get("pin", DEFAULT_PIN)
    if entered is None:
        entered = getpass.getpass("PIN: ")
    return entered.strip() == expected


def box_from_args(args) -> BoxSpec:
    return validate_box_input(
        length=args.length,
        width=args.width,
        height=args.height,
        grade=args.grade,
        ink_count=args.inks,
        quantity=args.qty,
        max_inks=MAX_INKS,
    )


def warn_missing_price(box: BoxSpec, settings: Settings) -> None:
    if price_for(box.board_grade, settings.prices) is None:
        print(f"[WARNING] No price configured for grade {box.board_grade.value}; "
              f"costs below are $0.00. Set one with: settings price "
              f"{box.board_grade.value} <price>")


def print_breakdown(box: BoxSpec, breakdown: PriceBreakdown) -> None:
    b = breakdown
    print(f"Caja:            {fmt_num(box.length)} x {fmt_num(box.width)} x "
          f"{fmt_num(box.height)} cm, {box.board_grade.value}, "
          f"{box.ink_count} tinta(s), {format_int(box.quantity)} pzas")
    print(f"Pliego:          {fmt_num(b.sheet_length)} x {fmt_num(b.sheet_width)} cm "
          f"({fmt_num(b.area_m2)} m²)")
    print(f"Costo base:      {format_mxn(b.base_cost)}")
    print(f"Recargo tintas:  {format_mxn(b.ink_surcharge)}")
    print(f"Precio unitario: {format_mxn(b.unit_sale_price)}")
    print(f"TOTAL:           {format_mxn(b.total)}")


def build_quote(
    quotes: JsonQuoteStore,
    client: ClientInfo,
    box: BoxSpec,
    settings: Settings,
    notes: str = "",
    now: Optional[datetime] = None
) -> Quote:
    """Prices the box against the current settings and assigns the next folio."""
    return Quote(
        id=uuid.uuid4().hex,
        folio=quotes.next_folio(),
        created_at=(now or datetime.now()).isoformat(timespec="seconds"),
        client=client,
        box=box,
        breakdown=compute_breakdown(box, settings.prices),
        notes=notes,
    )


def require_quote(ctx: Context, ref: str) -> Quote:
    quote = ctx.quotes.find(ref)
    if quote is None:
        raise ValueError(f"Quote not found: {ref}")
    return quote


# ------------------------------
# Commands
# ------------------------------

def cmd_calc(args, ctx: Context) -> int:
    box = box_from_args(args)
    settings = ctx.settings.load()
    warn_missing_price(box, settings)
    print_breakdown(box, compute_breakdown(box, settings.prices))
    return 0


def cmd_new(args, ctx: Context) -> int:
    box = box_from_args(args)
    if not args.client.strip():
        raise ValueError("Client name is required (--client).")

    settings = ctx.settings.load()
    warn_missing_price(box, settings)

    client = ClientInfo(
        name=args.client.strip(),
        company=args.company,
        phone=args.phone,
        email=args.email,
    )
    quote = build_quote(ctx.quotes, client, box, settings, notes=args.notes)
    ctx.quotes.save(quote)

    print(f"Quote {quote.folio} saved (id {quote.id})")
    print_breakdown(quote.box, quote.breakdown)
    return 0


def cmd_list(args, ctx: Context) -> int:
    quotes = ctx.quotes.list_all()
    if not quotes:
        print("No quotes yet.")
        return 0
    for q in quotes:
        b = q.box
        print(f"{q.folio}  {format_date(q.created_at)}  {q.client.name:<24}  "
              f"{fmt_num(b.length)}x{fmt_num(b.width)}x{fmt_num(b.height)} "
              f"{b.board_grade.value}  {format_mxn(q.breakdown.total):>14}")
    return 0


def cmd_show(args, ctx: Context) -> int:
    q = require_quote(ctx, args.ref)
    print(f"{q.folio}  ({q.id})  {format_date(q.created_at)}")
    print(f"Cliente: {q.client.name}"
          + (f" / {q.client.company}" if q.client.company else ""))
    if q.client.phone:
        print(f"Teléfono: {q.client.phone}")
    if q.client.email:
        print(f"Email: {q.client.email}")
    print_breakdown(q.box, q.breakdown)
    if q.notes:
        print(f"Notas: {q.notes}")
    return 0


def cmd_delete(args, ctx: Context) -> int:
    q = require_quote(ctx, args.ref)
    ctx.quotes.delete(q.id)
    print(f"Quote {q.folio} deleted.")
    return 0


def cmd_pdf(args, ctx: Context) -> int:
    q = require_quote(ctx, args.ref)
    generate_quote_pdf(args.output, q, ctx.settings.load().company, ctx.cfg)
    print(f"Success! PDF saved to {args.output}")
    return 0


def cmd_drawing(args, ctx: Context) -> int:
    q = require_quote(ctx, args.ref)
    generate_drawing_pdf(args.output, q, ctx.cfg)
    print(f"Success! Drawing saved to {args.output}")
    return 0


def cmd_settings_show(args, ctx: Context) -> int:
    s = ctx.settings.load()
    c = s.company
    print(f"Empresa:   {c.name}")
    print(f"Dirección: {c.address}")
    print(f"Teléfono:  {c.phone}")
    print(f"Email:     {c.email}")
    print(f"RFC:       {c.rfc}")
    print("Precios por m²:")
    for grade, price in sorted(s.prices.items()):
        print(f"  {grade}: {format_mxn(price)}")
    return 0


def cmd_settings_price(args, ctx: Context) -> int:
    grade = parse_grade(args.grade)
    price = validate_price(grade.value, args.price)
    s = ctx.settings.load()
    s.prices[grade.value] = price
    ctx.settings.save(s)
    print(f"Price for {grade.value} set to {format_mxn(price)}/m²")
    return 0


def cmd_settings_company(args, ctx: Context) -> int:
    s = ctx.settings.load()
    for field_name in ("name", "address", "phone", "email", "rfc"):
        value = getattr(args, field_name)
        if value is not None:
            setattr(s.company, field_name, value)
    ctx.settings.save(s)
    print("Company data saved.")
    return 0


# ------------------------------
# Parser
# ------------------------------

def add_box_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("length", type=float, help="L (cm)")
    p.add_argument("width", type=float, help="W (cm)")
    p.add_argument("height", type=float, help="H (cm)")
    p.add_argument("--grade", required=True, help="board grade: 29EST, 32EST, 40EST")
    p.add_argument("--inks", type=int, default=0, help=f"ink count 0-{MAX_INKS}")
    p.add_argument("--qty", type=int, default=1, help="pieces")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boxquote",
                                     description="Corrugated box quoting (Cotizador CRR)")
    parser.add_argument("--config", help="config.properties path")
    parser.add_argument("--pin", help="access PIN (prompted when omitted)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("calc", help="price a box without saving")
    add_box_args(p)
    p.set_defaults(func=cmd_calc)

    p = sub.add_parser("new", help="create and save a quote")
    add_box_args(p)
    p.add_argument("--client", required=True)
    p.add_argument("--company", default="")
    p.add_argument("--phone", default="")
    p.add_argument("--email", default="")
    p.add_argument("--notes", default="")
    p.set_defaults(func=cmd_new)

    p = sub.add_parser("list", help="list quotes, newest first")
    p.set_defaults(func=cmd_list)

    for name, func, text in (("show", cmd_show, "show one quote"),
                             ("delete", cmd_delete, "delete a quote")):
        p = sub.add_parser(name, help=text)
        p.add_argument("ref", help="quote id or folio")
        p.set_defaults(func=func)

    for name, func, text in (("pdf", cmd_pdf, "quote PDF"),
                             ("drawing", cmd_drawing, "technical unfold drawing PDF")):
        p = sub.add_parser(name, help=text)
        p.add_argument("ref", help="quote id or folio")
        p.add_argument("output", help="output PDF path")
        p.set_defaults(func=func)

    ps = sub.add_parser("settings", help="company data and prices")
    ssub = ps.add_subparsers(dest="settings_command", required=True)

    p = ssub.add_parser("show")
    p.set_defaults(func=cmd_settings_show)

    p = ssub.add_parser("price", help="set price per m² for a grade")
    p.add_argument("grade")
    p.add_argument("price", type=float)
    p.set_defaults(func=cmd_settings_price)

    p = ssub.add_parser("company", help="update company data")
    for field_name in ("name", "address", "phone", "email", "rfc"):
        p.add_argument(f"--{field_name}")
    p.set_defaults(func=cmd_settings_company)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ValueError as ve:
        print(f"\n[ERROR] {ve}\n")
        return 1

    if not check_pin(args.pin, cfg):
        print("\n[ERROR] Invalid PIN.\n")
        return 1

    data_dir = Path(cfg.get("data-dir", "data"))
    ctx = Context(
        cfg=cfg,
        quotes=JsonQuoteStore(data_dir / "quotes.json"),
        settings=JsonSettingsStore(data_dir / "settings.json"),
    )

    try:
        return args.func(args, ctx)
    except ValueError as ve:
        print(f"\n[ERROR] {str(ve).strip()}\n")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
