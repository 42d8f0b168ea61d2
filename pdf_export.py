# pdf_export.py - boxquote ver1.0
#
# All PDF output:
# - Quote document (A4 portrait): company header, client, box specs,
#   price breakdown table with TOTAL footer, notes
# - Technical drawing (A4 landscape): the unfold layout from unfold.py
# - Lucida Sans Unicode if installed, Helvetica otherwise
#
# Layout positions are given in mm from the top-left corner of the page,
# the way unfold.py emits them; reportlab wants points from the bottom-left,
# so everything goes through mm_to_pt() and a y flip.

from typing import Dict, List, Optional, Tuple

from reportlab.lib.colors import Color, black, white
from reportlab.lib.pagesizes import A4, landscape, portrait
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError
from reportlab.pdfgen import canvas

from costing import INK_SURCHARGE_RATE, SALE_MARGIN
from io_utils import fmt_num, format_date_long, format_int, format_mxn
from models import CompanyInfo, Quote
from unfold import CanvasSize, Label, Rect, Segment, layout_unfold

import os


# ------------------------------------------------------------
# mm → pt
# ------------------------------------------------------------
def mm_to_pt(mm: float) -> float:
    return mm * 72.0 / 25.4


def pt_to_mm(pt: float) -> float:
    return pt * 25.4 / 72.0


# ------------------------------------------------------------
# Parse hex RGB like "F00", "FF0000"
# ------------------------------------------------------------
def parse_rgb(hex_str: str) -> Color:
    s = hex_str.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        return black
    try:
        r = int(s[0:2], 16) / 255
        g = int(s[2:4], 16) / 255
        b = int(s[4:6], 16) / 255
    except ValueError:
        return black
    return Color(r, g, b)


def gray(level: int) -> Color:
    return Color(level / 255, level / 255, level / 255)


HEADER_FILL = Color(41 / 255, 41 / 255, 41 / 255)
STRIPE_FILL = gray(245)
BODY_FILL = gray(245)
FLAP_FILL = gray(252)
TEXT_MUTED = gray(100)
FOOTER_TEXT = gray(150)


# ------------------------------------------------------------
# FONT LOADING (Lucida Sans Unicode)
# ------------------------------------------------------------
# Lucida Sans Unicode has no bold face; when it is used, bold text falls
# back to the same font.

LUCIDA_NAME = "LucidaSansUnicode_1_0"
BOLD_NAME = "LucidaSansUnicode_1_0"


def register_fonts():
    """
    Try to register Lucida Sans Unicode. If the TTF is not available
    (or cannot be read), fall back to Helvetica / Helvetica-Bold.
    """
    global LUCIDA_NAME, BOLD_NAME

    possible = [
        "/usr/share/fonts/truetype/lucida/LucidaSansUnicode.ttf",
        "/usr/share/fonts/truetype/LucidaSansUnicode.ttf",
        "/Library/Fonts/LucidaSansUnicode.ttf",
        "C:/Windows/Fonts/l_10646.ttf",
        "C:/Windows/Fonts/LSANS.TTF",
    ]

    lucida_path = next((p for p in possible if os.path.isfile(p)), None)

    if lucida_path:
        try:
            pdfmetrics.registerFont(TTFont("LucidaSansUnicode_1_0", lucida_path))
            LUCIDA_NAME = BOLD_NAME = "LucidaSansUnicode_1_0"
            return
        except TTFError:
            pass

    LUCIDA_NAME = "Helvetica"
    BOLD_NAME = "Helvetica-Bold"


def font_for(bold: bool) -> str:
    return BOLD_NAME if bold else LUCIDA_NAME


# ------------------------------------------------------------
# TABLE DRAWING ENGINE (FULL-WIDTH)
# ------------------------------------------------------------

def draw_table(
    c: canvas.Canvas,
    x0_pt: float, y0_pt: float,
    col_widths: List[float],
    row_height_pt: float,
    data: List[List[str]],
    header_rows: int = 1,
    footer_rows: int = 0,
    font_size: float = 9,
    numeric_cols: Optional[List[int]] = None
) -> float:
    """
    Draws a striped table:
      - dark header / footer rows with white bold text
      - alternating light body rows
      - numeric columns right-aligned
    x0_pt, y0_pt = top-left corner of table.
    Returns the y of the table's bottom edge.
    """

    if numeric_cols is None:
        numeric_cols = []

    n_rows = len(data)
    total_w = sum(col_widths)

    for r in range(n_rows):
        y_top = y0_pt - r * row_height_pt
        y_bottom = y_top - row_height_pt
        is_dark = r < header_rows or r >= n_rows - footer_rows
        body_index = r - header_rows

        # Row background
        if is_dark:
            c.setFillColor(HEADER_FILL)
            c.rect(x0_pt, y_bottom, total_w, row_height_pt, stroke=0, fill=1)
        elif body_index % 2 == 1:
            c.setFillColor(STRIPE_FILL)
            c.rect(x0_pt, y_bottom, total_w, row_height_pt, stroke=0, fill=1)

        font_name = font_for(is_dark)
        c.setFont(font_name, font_size)
        c.setFillColor(white if is_dark else black)

        x_left = x0_pt
        for c_idx, w in enumerate(col_widths):
            text = data[r][c_idx] or ""
            ty = y_bottom + row_height_pt * 0.33

            if c_idx in numeric_cols:
                tw = pdfmetrics.stringWidth(text, font_name, font_size)
                c.drawString(x_left + w - tw - 4, ty, text)
            else:
                c.drawString(x_left + 4, ty, text)
            x_left += w

    return y0_pt - n_rows * row_height_pt


# ------------------------------------------------------------
# QUOTE PAGE
# ------------------------------------------------------------

def inks_text(n: int) -> str:
    if n == 0:
        return "Sin tintas"
    return f"{n} tinta{'s' if n != 1 else ''}"


def draw_quote_page(
    c: canvas.Canvas,
    page_w_pt: float,
    page_h_pt: float,
    margin_mm: float,
    quote: Quote,
    company: CompanyInfo
):
    """
    Draws:
      Company header (left) + folio and date (right)
      Client block
      Table 1: box specification
      Table 2: price breakdown with TOTAL
      Notes
      Footer
    """
    box, calc, client = quote.box, quote.breakdown, quote.client

    margin_pt = mm_to_pt(margin_mm)
    right_pt = page_w_pt - margin_pt
    table_width = page_w_pt - 2 * margin_pt
    row_h = mm_to_pt(7)

    def top(y_mm: float) -> float:
        return page_h_pt - mm_to_pt(y_mm)

    # --- Company header ---
    c.setFillColor(black)
    c.setFont(BOLD_NAME, 18)
    c.drawString(margin_pt, top(20), company.name or "Cajas CRR")

    c.setFont(LUCIDA_NAME, 9)
    c.setFillColor(TEXT_MUTED)
    header_y = 26.0
    for line in (
        company.address,
        f"Tel: {company.phone}" if company.phone else "",
        company.email,
        f"RFC: {company.rfc}" if company.rfc else "",
    ):
        if line:
            c.drawString(margin_pt, top(header_y), line)
            header_y += 4

    # Folio and date on the right
    c.setFillColor(black)
    c.setFont(BOLD_NAME, 12)
    c.drawRightString(right_pt, top(20), quote.folio)
    c.setFont(LUCIDA_NAME, 9)
    c.setFillColor(TEXT_MUTED)
    c.drawRightString(right_pt, top(26), format_date_long(quote.created_at))

    # Separator
    line_y = max(header_y + 4, 40.0)
    c.setStrokeColor(gray(200))
    c.setLineWidth(mm_to_pt(0.5))
    c.line(margin_pt, top(line_y), right_pt, top(line_y))

    # --- Client ---
    y = line_y + 10
    c.setFillColor(black)
    c.setFont(BOLD_NAME, 11)
    c.drawString(margin_pt, top(y), "DATOS DEL CLIENTE")
    y += 7

    c.setFont(LUCIDA_NAME, 9)
    client_lines = [
        f"Nombre: {client.name}",
        f"Empresa: {client.company}" if client.company else "",
        f"Teléfono: {client.phone}" if client.phone else "",
        f"Email: {client.email}" if client.email else "",
    ]
    for line in filter(None, client_lines):
        c.drawString(margin_pt, top(y), line)
        y += 5
    y += 5

    # --- Table 1: specification ---
    c.setFont(BOLD_NAME, 11)
    c.drawString(margin_pt, top(y), "ESPECIFICACIONES DE LA CAJA")
    y += 3

    spec_data = [
        ["Concepto", "Valor"],
        ["Dimensiones interiores (L × W × H)",
         f"{fmt_num(box.length)} × {fmt_num(box.width)} × {fmt_num(box.height)} cm"],
        ["Resistencia", box.board_grade.value],
        ["Tintas", inks_text(box.ink_count)],
        ["Cantidad", f"{format_int(box.quantity)} piezas"],
        ["Largo pliego", f"{fmt_num(calc.sheet_length)} cm"],
        ["Ancho pliego", f"{fmt_num(calc.sheet_width)} cm"],
        ["Área del pliego", f"{fmt_num(calc.area_m2)} m²"],
    ]
    half = [table_width * 0.6, table_width * 0.4]
    bottom_pt = draw_table(c, margin_pt, top(y), half, row_h, spec_data)

    # --- Table 2: price breakdown ---
    y = pt_to_mm(page_h_pt - bottom_pt) + 10
    c.setFillColor(black)
    c.setFont(BOLD_NAME, 11)
    c.drawString(margin_pt, top(y), "DESGLOSE DE PRECIO")
    y += 3

    price_data = [
        ["Concepto", "Monto"],
        ["Costo base (área × precio/m²)", format_mxn(calc.base_cost)],
    ]
    if calc.ink_surcharge > 0:
        price_data.append([
            f"Recargo tintas ({box.ink_count} × {fmt_num(INK_SURCHARGE_RATE * 100)}%)",
            format_mxn(calc.ink_surcharge),
        ])
    margin_pct = fmt_num(round((SALE_MARGIN - 1) * 100, 2))
    price_data += [
        [f"Precio unitario de venta (margen {margin_pct}%)", format_mxn(calc.unit_sale_price)],
        [f"Cantidad: {format_int(box.quantity)} piezas", ""],
        ["TOTAL", format_mxn(calc.total)],
    ]
    bottom_pt = draw_table(c, margin_pt, top(y), half, row_h, price_data,
                           footer_rows=1, numeric_cols=[1])

    # --- Notes ---
    if quote.notes:
        y = pt_to_mm(page_h_pt - bottom_pt) + 10
        c.setFillColor(black)
        c.setFont(BOLD_NAME, 11)
        c.drawString(margin_pt, top(y), "NOTAS")
        y += 6
        c.setFont(LUCIDA_NAME, 9)
        for line in simpleSplit(quote.notes, LUCIDA_NAME, 9, table_width):
            c.drawString(margin_pt, top(y), line)
            y += 4.5

    # --- Footer ---
    c.setFont(LUCIDA_NAME, 8)
    c.setFillColor(FOOTER_TEXT)
    c.drawCentredString(page_w_pt / 2, mm_to_pt(10), "Cotización generada por Cotizador CRR")


# ------------------------------------------------------------
# TECHNICAL DRAWING PAGE
# ------------------------------------------------------------

def draw_technical_page(
    c: canvas.Canvas,
    page_w_pt: float,
    page_h_pt: float,
    quote: Quote,
    outline_color: Color,
    divider_color: Color,
    dimension_color: Color
):
    box, calc = quote.box, quote.breakdown
    drawing = layout_unfold(box, calc, CanvasSize(pt_to_mm(page_w_pt), pt_to_mm(page_h_pt)))

    def pt(x_mm: float, y_mm: float) -> Tuple[float, float]:
        return mm_to_pt(x_mm), page_h_pt - mm_to_pt(y_mm)

    def rect(r: Rect, stroke: int, fill: int):
        x_pt, y_pt = pt(r.x, r.y + r.height)
        c.rect(x_pt, y_pt, mm_to_pt(r.width), mm_to_pt(r.height), stroke=stroke, fill=fill)

    def segment(s: Segment):
        x1, y1 = pt(s.x1, s.y1)
        x2, y2 = pt(s.x2, s.y2)
        c.line(x1, y1, x2, y2)

    def label(lb: Label):
        x_pt, y_pt = pt(lb.x, lb.y)
        c.setFont(font_for(lb.bold), lb.font_size)
        if lb.angle:
            c.saveState()
            c.translate(x_pt, y_pt)
            c.rotate(lb.angle)
            c.drawCentredString(0, 0, lb.text)
            c.restoreState()
        else:
            c.drawCentredString(x_pt, y_pt, lb.text)

    # --- Header ---
    c.setFillColor(black)
    c.setFont(BOLD_NAME, 14)
    c.drawString(mm_to_pt(14), page_h_pt - mm_to_pt(15), "PLANO TÉCNICO - CAJA CRR DESPLEGADA")
    c.setFont(LUCIDA_NAME, 9)
    c.drawString(mm_to_pt(14), page_h_pt - mm_to_pt(22),
                 f"{quote.folio} | {box.board_grade.value} | {box.ink_count} "
                 f"tinta{'s' if box.ink_count != 1 else ''}")
    c.drawString(mm_to_pt(14), page_h_pt - mm_to_pt(27),
                 f"Dimensiones: {fmt_num(box.length)} × {fmt_num(box.width)} × "
                 f"{fmt_num(box.height)} cm | Pliego: {fmt_num(calc.sheet_length)} × "
                 f"{fmt_num(calc.sheet_width)} cm | Área: {fmt_num(calc.area_m2)} m²")

    # --- Body strip ---
    c.setStrokeColor(outline_color)
    c.setLineWidth(mm_to_pt(0.4))
    c.setFillColor(BODY_FILL)
    rect(drawing.body, stroke=1, fill=1)

    # Panel dividers (dashed)
    c.setDash(mm_to_pt(2), mm_to_pt(2))
    c.setStrokeColor(divider_color)
    for d in drawing.dividers:
        segment(d)

    # Solid outline
    c.setDash()
    c.setStrokeColor(outline_color)
    c.setLineWidth(mm_to_pt(0.6))
    rect(drawing.outline, stroke=1, fill=0)

    # Flaps
    c.setLineWidth(mm_to_pt(0.4))
    c.setFillColor(FLAP_FILL)
    for f in drawing.flaps:
        rect(f.rect, stroke=1, fill=1)

    # --- Labels ---
    c.setFillColor(gray(80))
    for shape in drawing.panels + drawing.flaps:
        for lb in shape.labels:
            label(lb)

    # --- Dimension lines ---
    c.setStrokeColor(dimension_color)
    c.setFillColor(dimension_color)
    c.setLineWidth(mm_to_pt(0.3))
    for dim in drawing.dimensions:
        for s in dim.segments():
            segment(s)
        label(dim.label)

    # --- Footer ---
    c.setFillColor(FOOTER_TEXT)
    c.setFont(LUCIDA_NAME, 8)
    c.drawCentredString(page_w_pt / 2, mm_to_pt(8),
                        "Plano técnico generado por Cotizador CRR - No a escala real")


# ------------------------------------------------------------
# FINAL PDF GENERATORS
# ------------------------------------------------------------

def generate_quote_pdf(
    output_path: str,
    quote: Quote,
    company: CompanyInfo,
    cfg: Optional[Dict[str, str]] = None
):
    cfg = cfg or {}
    register_fonts()

    margin_mm = float(cfg.get("margin", "14"))
    page_w_pt, page_h_pt = portrait(A4)

    c = canvas.Canvas(output_path, pagesize=portrait(A4))
    c.setTitle(f"Cotización {quote.folio}")
    draw_quote_page(c, page_w_pt, page_h_pt, margin_mm, quote, company)
    c.showPage()
    c.save()


def generate_drawing_pdf(
    output_path: str,
    quote: Quote,
    cfg: Optional[Dict[str, str]] = None
):
    cfg = cfg or {}
    register_fonts()

    outline_color = parse_rgb(cfg.get("outline-color", "000"))
    divider_color = parse_rgb(cfg.get("divider-color", "969696"))
    dimension_color = parse_rgb(cfg.get("dimension-color", "C83232"))

    page_w_pt, page_h_pt = landscape(A4)

    c = canvas.Canvas(output_path, pagesize=landscape(A4))
    c.setTitle(f"Plano {quote.folio}")
    draw_technical_page(c, page_w_pt, page_h_pt, quote,
                        outline_color, divider_color, dimension_color)
    c.showPage()
    c.save()
