"""
Page layout state and drawing primitives for the intervention report.

Primitives take the canvas and a position and return the next position;
none of them keep a cursor of their own.
"""

from dataclasses import dataclass, replace
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from .text_layout import MeasureFunc

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
LINE_HEIGHT = 20

SECTION_HEADER_HEIGHT = 40
SECTION_TITLE_INSET = 12
LABEL_COLUMN = 80

# Footer sits in a fixed band just above the bottom margin
FOOTER_TEXT_Y = MARGIN
FOOTER_RULE_Y = MARGIN + 15
FOOTER_HEIGHT = 45
FOOTER_LOGO_SCALE = 0.3
# Lowest y body text may use
BODY_BOTTOM = MARGIN + FOOTER_HEIGHT + 15

# Brand colors (pool blue)
BRAND_COLOR = colors.HexColor("#0284c7")
BRAND_LIGHT = colors.HexColor("#e0f2fe")
DARK_GRAY = colors.HexColor("#1e293b")
MUTED_GRAY = colors.HexColor("#64748b")
BORDER_GRAY = colors.HexColor("#cbd5e1")
HIGHLIGHT_BG = colors.HexColor("#fef3c7")


@dataclass(frozen=True)
class FontSet:
    """Font handles used by a render pass"""

    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"

    def measure(self, font_name: str) -> MeasureFunc:
        return lambda text, size: stringWidth(text, font_name, size)


def load_fonts() -> FontSet:
    """Resolve the fonts for one render (standard PDF Type 1 fonts)"""
    fonts = FontSet()
    # stringWidth raises KeyError for an unknown face, fail before drawing anything
    for name in (fonts.regular, fonts.bold, fonts.italic):
        stringWidth("", name, 10)
    return fonts


@dataclass(frozen=True)
class RenderState:
    """Current page and vertical cursor, replaced rather than mutated"""

    page_number: int = 1
    y: float = PAGE_HEIGHT - MARGIN

    def moved(self, dy: float) -> "RenderState":
        """Move the cursor down by dy points"""
        return replace(self, y=self.y - dy)

    def at(self, y: float) -> "RenderState":
        return replace(self, y=y)

    def next_page(self) -> "RenderState":
        return RenderState(page_number=self.page_number + 1, y=PAGE_HEIGHT - MARGIN)

    def fits(self, height: float) -> bool:
        """Whether height points of body content fit above the footer band"""
        return self.y - height >= BODY_BOTTOM


def draw_box(c: Canvas, x: float, y: float, width: float, height: float) -> None:
    """Bordered frame with its top-left corner at (x, y), extending downward"""
    c.saveState()
    c.setStrokeColor(BORDER_GRAY)
    c.setFillColor(colors.white)
    c.setLineWidth(1)
    c.rect(x, y - height, width, height, stroke=1, fill=1)
    c.restoreState()


def draw_section_header(
    c: Canvas, fonts: FontSet, title: str, x: float, start_y: float, width: float
) -> float:
    """
    Draw a titled band with a separator rule under it.

    Returns:
        The y coordinate where the section body starts
    """
    band_bottom = start_y - SECTION_HEADER_HEIGHT

    c.saveState()
    c.setFillColor(BRAND_LIGHT)
    c.setStrokeColor(BORDER_GRAY)
    c.setLineWidth(1)
    c.rect(x, band_bottom, width, SECTION_HEADER_HEIGHT, stroke=1, fill=1)

    c.setFillColor(BRAND_COLOR)
    c.setFont(fonts.bold, 14)
    c.drawString(x + SECTION_TITLE_INSET, band_bottom + 15, title)

    c.setStrokeColor(BRAND_COLOR)
    c.setLineWidth(1.5)
    c.line(x, band_bottom - 2, x + width, band_bottom - 2)
    c.restoreState()

    return band_bottom - 2 - LINE_HEIGHT


def draw_info_field(c: Canvas, fonts: FontSet, label: str, value: str, x: float, y: float) -> float:
    """Bold label with its value in the label column, returns the next row's y"""
    c.saveState()
    c.setFillColor(DARK_GRAY)
    c.setFont(fonts.bold, 11)
    c.drawString(x, y, label)
    c.setFont(fonts.regular, 11)
    c.drawString(x + LABEL_COLUMN, y, value)
    c.restoreState()
    return y - LINE_HEIGHT


def draw_text_lines(
    c: Canvas, font_name: str, size: float, lines: list[str], x: float, y: float, color=DARK_GRAY
) -> float:
    """Draw pre-wrapped lines top to bottom, returns the y below the last one"""
    c.saveState()
    c.setFillColor(color)
    c.setFont(font_name, size)
    for line in lines:
        c.drawString(x, y, line)
        y -= LINE_HEIGHT
    c.restoreState()
    return y


def draw_footer(
    c: Canvas,
    fonts: FontSet,
    copyright_text: str,
    notice: str,
    logo: Optional[ImageReader] = None,
) -> None:
    """Rule, copyright on the left, notice on the right, optional centered logo"""
    c.saveState()
    c.setStrokeColor(BORDER_GRAY)
    c.setLineWidth(0.5)
    c.line(MARGIN, FOOTER_RULE_Y, PAGE_WIDTH - MARGIN, FOOTER_RULE_Y)

    c.setFillColor(MUTED_GRAY)
    c.setFont(fonts.regular, 8)
    c.drawString(MARGIN, FOOTER_TEXT_Y, copyright_text)
    c.drawRightString(PAGE_WIDTH - MARGIN, FOOTER_TEXT_Y, notice)

    if logo is not None:
        iw, ih = logo.getSize()
        w, h = iw * FOOTER_LOGO_SCALE, ih * FOOTER_LOGO_SCALE
        # Keep the logo inside the footer band whatever its natural size
        max_h = FOOTER_HEIGHT - 15
        if h > max_h:
            w, h = w * max_h / h, max_h
        c.drawImage(
            logo,
            (PAGE_WIDTH - w) / 2,
            FOOTER_RULE_Y + 5,
            width=w,
            height=h,
            mask="auto",
        )
    c.restoreState()
