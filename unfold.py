# unfold.py - boxquote ver1.0
#
# Builds the unfolded (plano desplegado) drawing of a CRR box:
# a strip of L, W, L, W panels plus the glue flap, with top and bottom
# flaps on the four walls and three dimension lines.
#
# Geometry is in box cm; everything emitted is in canvas mm with a
# top-left origin (y grows downward). Conversion to PDF points and the
# y flip are done in pdf_export.py.

from dataclasses import dataclass, field
from typing import List

from io_utils import fmt_num
from models import BoxSpec, PriceBreakdown


# -------------------------------------------------------------
# Constants
# -------------------------------------------------------------

GLUE_FLAP_CM = 4.0
LAYOUT_PAD_CM = 20.0          # extra model units around the strip when scaling

DRAW_AREA_LEFT_MM = 30.0
DRAW_AREA_RIGHT_MM = 30.0
DRAW_AREA_TOP_MM = 35.0
DRAW_AREA_BOTTOM_MM = 20.0

DIM_OFFSET_MM = 12.0          # dimension baseline distance from the drawing
DIM_TICK_GAP_MM = 5.0         # tick end distance from the drawing
DIM_RIGHT_OFFSET_MM = 8.0     # H dimension on the right side
ARROW_SIZE_MM = 2.0
LABEL_GAP_MM = 3.0            # horizontal dimension text above its baseline
VERTICAL_LABEL_GAP_MM = 5.0   # rotated dimension text left of its baseline
SIZE_LABEL_DROP_MM = 4.0      # size text below a panel/flap name

PANEL_LABEL_SIZE = 8
SIZE_LABEL_SIZE = 7


# -------------------------------------------------------------
# Drawing primitives (canvas mm)
# -------------------------------------------------------------

@dataclass(frozen=True)
class CanvasSize:
    width: float
    height: float


A4_LANDSCAPE_MM = CanvasSize(297.0, 210.0)


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float
    role: str            # 'body', 'outline', 'panel', 'flap'


@dataclass
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float
    role: str            # 'divider', 'dimension'


@dataclass
class Label:
    text: str
    x: float
    y: float
    font_size: float
    bold: bool = False
    angle: float = 0.0   # degrees, counter-clockwise
    role: str = "panel"  # 'panel', 'size', 'flap', 'dimension'


@dataclass
class PanelShape:
    name: str            # 'L', 'W', 'Solapa', 'Flap'
    x_cm: float          # model position along the strip
    width_cm: float
    height_cm: float
    rect: Rect
    labels: List[Label] = field(default_factory=list)


@dataclass
class DimensionLine:
    baseline: Segment
    ticks: List[Segment]
    arrows: List[Segment]
    label: Label

    def segments(self) -> List[Segment]:
        return [self.baseline] + self.ticks + self.arrows


@dataclass
class UnfoldDrawing:
    total_width: float    # cm
    total_height: float   # cm
    flap_depth: float     # cm
    scale: float          # mm per cm
    offset_x: float
    offset_y: float
    body: Rect
    outline: Rect
    dividers: List[Segment]
    panels: List[PanelShape]
    flaps: List[PanelShape]
    dimensions: List[DimensionLine]


# -------------------------------------------------------------
# Dimension line helpers
# -------------------------------------------------------------

def horizontal_dimension(x1: float, x2: float, y: float, tick_y: float,
                         text: str) -> DimensionLine:
    """
    Baseline at y from x1 to x2, ticks running from tick_y to the baseline,
    open arrowheads pointing outward at both ends, text centred above.
    """
    a = ARROW_SIZE_MM
    return DimensionLine(
        baseline=Segment(x1, y, x2, y, "dimension"),
        ticks=[
            Segment(x1, tick_y, x1, y, "dimension"),
            Segment(x2, tick_y, x2, y, "dimension"),
        ],
        arrows=[
            Segment(x1, y, x1 + a, y - a, "dimension"),
            Segment(x1, y, x1 + a, y + a, "dimension"),
            Segment(x2, y, x2 - a, y - a, "dimension"),
            Segment(x2, y, x2 - a, y + a, "dimension"),
        ],
        label=Label(text, (x1 + x2) / 2, y - LABEL_GAP_MM, PANEL_LABEL_SIZE,
                    bold=True, role="dimension"),
    )


def vertical_dimension(x: float, y1: float, y2: float, tick_x: float,
                       text: str) -> DimensionLine:
    """Same as horizontal_dimension, turned 90 degrees; text is rotated."""
    a = ARROW_SIZE_MM
    return DimensionLine(
        baseline=Segment(x, y1, x, y2, "dimension"),
        ticks=[
            Segment(tick_x, y1, x, y1, "dimension"),
            Segment(tick_x, y2, x, y2, "dimension"),
        ],
        arrows=[
            Segment(x, y1, x - a, y1 + a, "dimension"),
            Segment(x, y1, x + a, y1 + a, "dimension"),
            Segment(x, y2, x - a, y2 - a, "dimension"),
            Segment(x, y2, x + a, y2 - a, "dimension"),
        ],
        label=Label(text, x - VERTICAL_LABEL_GAP_MM, (y1 + y2) / 2,
                    PANEL_LABEL_SIZE, bold=True, angle=90.0, role="dimension"),
    )


# -------------------------------------------------------------
# Layout
# -------------------------------------------------------------

def layout_unfold(box: BoxSpec, breakdown: PriceBreakdown,
                  canvas: CanvasSize = A4_LANDSCAPE_MM) -> UnfoldDrawing:
    assert box.length > 0 and box.width > 0 and box.height > 0, (
        f"box dimensions must be positive, got {box.length}x{box.width}x{box.height}"
    )

    L, W, H = box.length, box.width, box.height

    draw_left = DRAW_AREA_LEFT_MM
    draw_top = DRAW_AREA_TOP_MM
    draw_w = canvas.width - DRAW_AREA_LEFT_MM - DRAW_AREA_RIGHT_MM
    draw_h = canvas.height - DRAW_AREA_TOP_MM - DRAW_AREA_BOTTOM_MM
    assert draw_w > 0 and draw_h > 0, f"canvas {canvas} leaves no drawable area"

    flap_depth = W / 2
    total_width = L + W + L + W + GLUE_FLAP_CM
    total_height = flap_depth + H + flap_depth

    # uniform scale, the tighter axis wins
    scale = min(draw_w / (total_width + LAYOUT_PAD_CM),
                draw_h / (total_height + LAYOUT_PAD_CM))

    offset_x = draw_left + (draw_w - total_width * scale) / 2
    offset_y = draw_top + (draw_h - total_height * scale) / 2

    def px(x: float) -> float:
        return offset_x + x * scale

    def py(y: float) -> float:
        return offset_y + y * scale

    body_top = flap_depth
    body_bottom = flap_depth + H

    # --- panels along the strip ---
    strip = [("L", L), ("W", W), ("L", L), ("W", W), ("Solapa", GLUE_FLAP_CM)]
    panels: List[PanelShape] = []
    x = 0.0
    for name, w in strip:
        rect = Rect(px(x), py(body_top), w * scale, H * scale, "panel")
        cx = px(x + w / 2)
        cy = py(body_top + H / 2)
        panels.append(PanelShape(
            name=name, x_cm=x, width_cm=w, height_cm=H, rect=rect,
            labels=[
                Label(name, cx, cy, PANEL_LABEL_SIZE, bold=True, role="panel"),
                Label(f"{fmt_num(w)} cm", cx, cy + SIZE_LABEL_DROP_MM,
                      SIZE_LABEL_SIZE, role="size"),
            ],
        ))
        x += w

    body = Rect(px(0), py(body_top), total_width * scale, H * scale, "body")
    outline = Rect(px(0), py(body_top), total_width * scale, H * scale, "outline")

    # dividers on inner boundaries only
    dividers = [
        Segment(px(p.x_cm), py(body_top), px(p.x_cm), py(body_bottom), "divider")
        for p in panels[1:]
    ]

    # --- flaps: top and bottom of the four walls, not the glue flap ---
    flaps: List[PanelShape] = []
    for y0 in (0.0, body_bottom):
        for p in panels[:4]:
            cx = px(p.x_cm + p.width_cm / 2)
            cy = py(y0 + flap_depth / 2)
            flaps.append(PanelShape(
                name="Flap", x_cm=p.x_cm, width_cm=p.width_cm, height_cm=flap_depth,
                rect=Rect(px(p.x_cm), py(y0), p.width_cm * scale,
                          flap_depth * scale, "flap"),
                labels=[
                    Label("Flap", cx, cy, SIZE_LABEL_SIZE, role="flap"),
                    Label(f"{fmt_num(flap_depth)} cm", cx, cy + SIZE_LABEL_DROP_MM,
                          SIZE_LABEL_SIZE, role="size"),
                ],
            ))

    # --- dimension lines ---
    dim_y = py(0) - DIM_OFFSET_MM
    dim_x = px(0) - DIM_OFFSET_MM
    dim_xr = px(total_width) + DIM_RIGHT_OFFSET_MM
    dimensions = [
        horizontal_dimension(px(0), px(total_width), dim_y, py(0) - DIM_TICK_GAP_MM,
                             f"{fmt_num(breakdown.sheet_length)} cm"),
        vertical_dimension(dim_x, py(0), py(total_height), px(0) - DIM_TICK_GAP_MM,
                           f"{fmt_num(breakdown.sheet_width)} cm"),
        vertical_dimension(dim_xr, py(body_top), py(body_bottom),
                           px(total_width) + DIM_TICK_GAP_MM,
                           f"H={fmt_num(H)}"),
    ]

    return UnfoldDrawing(
        total_width=total_width,
        total_height=total_height,
        flap_depth=flap_depth,
        scale=scale,
        offset_x=offset_x,
        offset_y=offset_y,
        body=body,
        outline=outline,
        dividers=dividers,
        panels=panels,
        flaps=flaps,
        dimensions=dimensions,
    )
