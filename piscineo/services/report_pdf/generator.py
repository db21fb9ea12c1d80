"""
Intervention Report PDF Generator
Renders a maintenance intervention as a branded, multi-page PDF:
main page, optional photos page, optional signature page.
"""

import io
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from ...config import COMPANY_NAME, REPORT_LOGO_PATH
from ...domain.interventions.schemas import ReportRecord
from ...utils.formatting import format_date, format_phone_number, short_reference
from .drawing import (
    BODY_BOTTOM,
    BORDER_GRAY,
    BRAND_COLOR,
    CONTENT_WIDTH,
    DARK_GRAY,
    HIGHLIGHT_BG,
    LINE_HEIGHT,
    MARGIN,
    MUTED_GRAY,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    SECTION_HEADER_HEIGHT,
    SECTION_TITLE_INSET,
    FontSet,
    RenderState,
    draw_box,
    draw_footer,
    draw_info_field,
    draw_section_header,
    draw_text_lines,
    load_fonts,
)
from .images import ImagePayload, load_image
from .text_layout import wrap_text

logger = logging.getLogger(__name__)

MAX_PHOTOS = 4
PHOTO_GUTTER = 20
PHOTO_CAPTION_SPACE = 40
SIGNATURE_SCALE = 0.5

HEADER_BAND_HEIGHT = 90
SECTION_PADDING = 15
SECTION_GAP = 25
PARAGRAPH_GAP = 10
BODY_FONT_SIZE = 11


class ReportRenderError(Exception):
    """Raised when a report could not be rendered"""

    pass


@dataclass(frozen=True)
class _Row:
    """One line of section body content"""

    text: str
    font: str
    color: object = DARK_GRAY
    label: Optional[str] = None
    gap_before: float = 0
    highlight: bool = False


def read_logo(path: Optional[str] = REPORT_LOGO_PATH) -> Optional[bytes]:
    """Read the configured footer logo, None when unset or unreadable"""
    if not path:
        return None
    try:
        return Path(path).read_bytes()
    except OSError as e:
        logger.warning(f"⚠️ Could not read report logo {path}: {e}")
        return None


class InterventionReportGenerator:
    """Generate the PDF report for one intervention"""

    def __init__(
        self,
        record: ReportRecord,
        logo: Optional[ImagePayload] = None,
        company_name: str = COMPANY_NAME,
        generated_at: Optional[datetime] = None,
    ):
        self.record = record
        self.logo_payload = logo
        self.company_name = company_name
        self.generated_at = generated_at or datetime.now()

        self.reference = short_reference(record.id)
        self.date_label = format_date(record.date)

        # Set per render
        self.fonts: FontSet = FontSet()
        self.logo = None

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        logger.info(f"📄 Generating intervention report {self.reference}")

        buffer = io.BytesIO()
        c = Canvas(buffer, pagesize=A4)
        c.setTitle(f"Rapport d'intervention {self.reference}")
        c.setAuthor(self.company_name)
        c.setSubject(f"Intervention du {self.date_label}")

        self.fonts = load_fonts()
        self.logo = load_image(self.logo_payload, label="footer logo", formats=("PNG",))

        state = self._draw_main_page(c, RenderState())

        photos = self.record.photos[:MAX_PHOTOS]
        if len(self.record.photos) > MAX_PHOTOS:
            logger.info(
                f"Report {self.reference} has {len(self.record.photos)} photos, keeping the first {MAX_PHOTOS}"
            )
        if photos:
            state = self._draw_photos_page(c, self._new_page(c, state), photos)

        if self.record.signature:
            state = self._draw_signature_page(c, self._new_page(c, state))

        self._finish_page(c)
        c.save()

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(
            f"✅ Generated intervention report {self.reference} "
            f"({state.page_number} pages, {len(pdf_bytes)} bytes)"
        )
        return pdf_bytes

    # Page lifecycle

    def _finish_page(self, c: Canvas) -> None:
        draw_footer(
            c,
            self.fonts,
            copyright_text=f"© {self.generated_at.year} {self.company_name} - Tous droits réservés",
            notice=f"Document généré automatiquement par {self.company_name}",
            logo=self.logo,
        )
        c.showPage()

    def _new_page(self, c: Canvas, state: RenderState) -> RenderState:
        self._finish_page(c)
        return state.next_page()

    # Main page

    def _draw_main_page(self, c: Canvas, state: RenderState) -> RenderState:
        state = self._draw_header_band(c, state)

        client = self.record.client
        state = self._draw_section(
            c,
            state,
            "Informations client",
            [
                _Row(client.full_name or "-", self.fonts.regular, label="Nom :"),
                _Row(client.address or "-", self.fonts.regular, label="Adresse :"),
                _Row(
                    format_phone_number(client.phone) if client.phone else "-",
                    self.fonts.regular,
                    label="Téléphone :",
                ),
                _Row(client.email or "-", self.fonts.regular, label="Email :"),
            ],
        )

        state = self._draw_section(c, state, "Détails de l'intervention", self._detail_rows())

        if self.record.photos:
            if not state.fits(LINE_HEIGHT):
                state = self._new_page(c, state)
            draw_text_lines(
                c,
                self.fonts.italic,
                10,
                ["Les photos de l'intervention figurent en page suivante."],
                MARGIN,
                state.y,
                color=MUTED_GRAY,
            )
            state = state.moved(LINE_HEIGHT)

        return state

    def _draw_header_band(self, c: Canvas, state: RenderState) -> RenderState:
        c.saveState()
        c.setFillColor(BRAND_COLOR)
        c.rect(0, PAGE_HEIGHT - HEADER_BAND_HEIGHT, PAGE_WIDTH, HEADER_BAND_HEIGHT, stroke=0, fill=1)

        c.setFillColor(colors.white)
        c.setFont(self.fonts.bold, 20)
        c.drawString(MARGIN, PAGE_HEIGHT - 45, "RAPPORT D'INTERVENTION")
        c.setFont(self.fonts.regular, 11)
        c.drawString(MARGIN, PAGE_HEIGHT - 68, f"Intervention du {self.date_label}")

        c.setFont(self.fonts.bold, 11)
        c.drawRightString(PAGE_WIDTH - MARGIN, PAGE_HEIGHT - 45, f"Réf. : {self.reference}")
        c.setFont(self.fonts.regular, 10)
        c.drawRightString(PAGE_WIDTH - MARGIN, PAGE_HEIGHT - 68, self.company_name)
        c.restoreState()

        return state.at(PAGE_HEIGHT - HEADER_BAND_HEIGHT - SECTION_GAP)

    def _detail_rows(self) -> list[_Row]:
        text_width = CONTENT_WIDTH - 2 * SECTION_TITLE_INSET
        fonts = self.fonts

        rows = [
            _Row(line, fonts.regular)
            for line in wrap_text(
                self.record.description, fonts.measure(fonts.regular), BODY_FONT_SIZE, text_width
            )
        ]

        if self.record.notes:
            rows.append(_Row("Notes :", fonts.bold, gap_before=PARAGRAPH_GAP))
            rows.extend(
                _Row(line, fonts.italic, color=MUTED_GRAY)
                for line in wrap_text(
                    self.record.notes, fonts.measure(fonts.italic), BODY_FONT_SIZE, text_width
                )
            )

        if self.record.nextVisit:
            rows.append(
                _Row(
                    f"Prochaine visite : {format_date(self.record.nextVisit)}",
                    fonts.bold,
                    color=BRAND_COLOR,
                    gap_before=PARAGRAPH_GAP,
                    highlight=True,
                )
            )

        return rows

    def _draw_section(
        self, c: Canvas, state: RenderState, title: str, rows: list[_Row]
    ) -> RenderState:
        """
        Draw a framed section, continuing on new pages when the rows would
        run into the footer band.
        """
        header_space = SECTION_HEADER_HEIGHT + 2 + LINE_HEIGHT
        x = MARGIN + SECTION_TITLE_INSET
        remaining = list(rows)
        heading = title

        while True:
            if not state.fits(header_space + SECTION_PADDING):
                state = self._new_page(c, state)

            top = state.y
            body_y = top - header_space

            # Rows fitting above the footer band, always at least one
            fitting: list[_Row] = []
            y = body_y
            for row in remaining:
                row_y = y - row.gap_before
                if fitting and row_y - SECTION_PADDING < BODY_BOTTOM:
                    break
                fitting.append(row)
                y = row_y - LINE_HEIGHT
            last_baseline = y + LINE_HEIGHT

            draw_box(c, MARGIN, top, CONTENT_WIDTH, top - (last_baseline - SECTION_PADDING))
            y = draw_section_header(c, self.fonts, heading, MARGIN, top, CONTENT_WIDTH)
            for row in fitting:
                y -= row.gap_before
                y = self._draw_row(c, row, x, y)

            state = state.at(y + LINE_HEIGHT - SECTION_PADDING - SECTION_GAP)
            remaining = remaining[len(fitting) :]
            if not remaining:
                return state

            state = self._new_page(c, state)
            heading = f"{title} (suite)"

    def _draw_row(self, c: Canvas, row: _Row, x: float, y: float) -> float:
        if row.label is not None:
            return draw_info_field(c, self.fonts, row.label, row.text, x, y)

        if row.highlight:
            width = self.fonts.measure(row.font)(row.text, BODY_FONT_SIZE)
            c.saveState()
            c.setFillColor(HIGHLIGHT_BG)
            c.rect(x - 4, y - 5, width + 8, BODY_FONT_SIZE + 6, stroke=0, fill=1)
            c.restoreState()

        return draw_text_lines(c, row.font, BODY_FONT_SIZE, [row.text], x, y, color=row.color)

    # Photos page

    def _draw_photos_page(self, c: Canvas, state: RenderState, photos: list[str]) -> RenderState:
        c.saveState()
        c.setFillColor(BRAND_COLOR)
        c.setFont(self.fonts.bold, 18)
        c.drawString(MARGIN, state.y - 18, "Photos de l'intervention")
        c.setFillColor(MUTED_GRAY)
        c.setFont(self.fonts.regular, 11)
        c.drawString(
            MARGIN, state.y - 40, f"{self.record.client.full_name} - {self.date_label}"
        )
        c.setStrokeColor(BORDER_GRAY)
        c.setLineWidth(0.5)
        c.line(MARGIN, state.y - 52, PAGE_WIDTH - MARGIN, state.y - 52)
        c.restoreState()

        grid_top = state.y - 70
        photo_w = (CONTENT_WIDTH - PHOTO_GUTTER) / 2
        photo_h = photo_w * 3 / 4

        placed = 0
        for index, payload in enumerate(photos, start=1):
            image = load_image(payload, label=f"photo {index}")
            if image is None:
                continue

            col, row = placed % 2, placed // 2
            x = MARGIN + col * (photo_w + PHOTO_GUTTER)
            top = grid_top - row * (photo_h + PHOTO_CAPTION_SPACE)
            try:
                c.drawImage(
                    image,
                    x,
                    top - photo_h,
                    width=photo_w,
                    height=photo_h,
                    preserveAspectRatio=True,
                    anchor="c",
                    mask="auto",
                )
            except Exception as e:
                logger.warning(f"⚠️ Failed to embed photo {index} in report {self.reference}: {e}")
                continue

            placed += 1
            c.saveState()
            c.setStrokeColor(BORDER_GRAY)
            c.setLineWidth(0.5)
            c.rect(x, top - photo_h, photo_w, photo_h, stroke=1, fill=0)
            c.setFillColor(DARK_GRAY)
            c.setFont(self.fonts.regular, 10)
            c.drawCentredString(x + photo_w / 2, top - photo_h - 15, f"Photo {placed}")
            c.restoreState()

        if placed == 0:
            draw_text_lines(
                c,
                self.fonts.italic,
                10,
                ["Aucune photo exploitable."],
                MARGIN,
                grid_top - 10,
                color=MUTED_GRAY,
            )

        rows_used = max(1, (placed + 1) // 2)
        return state.at(grid_top - rows_used * (photo_h + PHOTO_CAPTION_SPACE))

    # Signature page

    def _draw_signature_page(self, c: Canvas, state: RenderState) -> RenderState:
        y = draw_section_header(c, self.fonts, "Signature", MARGIN, state.y, CONTENT_WIDTH)

        image = load_image(self.record.signature, label="signature")
        if image is not None:
            iw, ih = image.getSize()
            w, h = iw * SIGNATURE_SCALE, ih * SIGNATURE_SCALE
            if w > CONTENT_WIDTH:
                w, h = CONTENT_WIDTH, h * CONTENT_WIDTH / w
            max_h = y - BODY_BOTTOM - 2 * LINE_HEIGHT
            if h > max_h:
                w, h = w * max_h / h, max_h
            try:
                c.drawImage(image, (PAGE_WIDTH - w) / 2, y - h, width=w, height=h, mask="auto")
                y -= h
            except Exception as e:
                logger.warning(f"⚠️ Failed to embed signature in report {self.reference}: {e}")

        y -= LINE_HEIGHT
        c.saveState()
        c.setFillColor(DARK_GRAY)
        c.setFont(self.fonts.italic, 11)
        c.drawCentredString(PAGE_WIDTH / 2, y, f"Signé le {self.date_label}")
        c.restoreState()

        return state.at(y - LINE_HEIGHT)


def generate_intervention_pdf(
    record: ReportRecord,
    logo: Optional[ImagePayload] = None,
    company_name: str = COMPANY_NAME,
) -> bytes:
    """
    Render an intervention report to PDF bytes.

    Undecodable images are skipped; any other failure is raised as
    ReportRenderError.
    """
    try:
        return InterventionReportGenerator(record, logo=logo, company_name=company_name).generate()
    except ReportRenderError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to render intervention report {record.id}: {e}")
        raise ReportRenderError(f"Failed to render intervention report: {e}") from e
