"""
Timesheet PDF renderer.

Rendering happens in two passes: layout_timesheet() decides which page every
row lands on and at which height, render_timesheet_pdf() draws that plan
with reportlab. Positions are millimetres measured from the top edge of an
A4 page, converted to reportlab's bottom-left origin only while drawing.
"""
import datetime
import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .report_service import DaySummary, TimesheetReport, format_hours, format_money
from .settings_service import ThemeSettings, hex_to_rgb

logger = logging.getLogger(__name__)

APP_NAME = "TIMELY"
PAGE_WIDTH, PAGE_HEIGHT = A4

LEFT = 20
TABLE_WIDTH = 170
COLUMNS = (
    ("Date", 22),
    ("Clock In", 55),
    ("Clock Out", 85),
    ("Hours", 120),
    ("Earnings", 150),
)

HEADER_BAND_TOP = 80          # column header band under the title block on page 1
HEADER_BAND_TOP_CONTINUED = 20
HEADER_BAND_HEIGHT = 8
FIRST_ROW_BASELINE = 95
CONTINUED_ROW_BASELINE = 35
ROW_PITCH = 10
ROW_LIMIT = 270               # lowest baseline a row may use
TOTALS_GAP = 5
TOTALS_HEIGHT = 12
FOOTER_HEIGHT = 28
PAGE_BOTTOM = 285
CONTINUED_TOTALS_TOP = 30

HEADER_FILL = (240 / 255.0, 240 / 255.0, 240 / 255.0)
ROW_TINT = (250 / 255.0, 250 / 255.0, 250 / 255.0)
MUTED_TEXT = (128 / 255.0, 128 / 255.0, 128 / 255.0)


@dataclass
class PlacedRow:
    index: int
    row: DaySummary
    baseline: float
    tinted: bool


@dataclass
class PageLayout:
    number: int
    header_band_top: Optional[float]
    rows: List[PlacedRow] = field(default_factory=list)


@dataclass
class TimesheetLayout:
    pages: List[PageLayout]
    totals_page: int
    totals_top: float

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def placed_rows(self) -> List[PlacedRow]:
        return [placed for page in self.pages for placed in page.rows]


def layout_timesheet(rows: List[DaySummary]) -> TimesheetLayout:
    """
    Assign every row to a page.

    A row whose baseline would pass ROW_LIMIT goes to a fresh page that
    starts with its own column header band. The totals band follows the last
    row, on a new page when it and the footer would not fit.
    """
    page = PageLayout(number=1, header_band_top=HEADER_BAND_TOP)
    pages = [page]
    cursor = FIRST_ROW_BASELINE

    for index, row in enumerate(rows):
        if cursor > ROW_LIMIT:
            page = PageLayout(number=len(pages) + 1, header_band_top=HEADER_BAND_TOP_CONTINUED)
            pages.append(page)
            cursor = CONTINUED_ROW_BASELINE
        page.rows.append(PlacedRow(index=index, row=row, baseline=cursor, tinted=index % 2 == 0))
        cursor += ROW_PITCH

    totals_top = cursor + TOTALS_GAP - 4
    if totals_top + TOTALS_HEIGHT + FOOTER_HEIGHT > PAGE_BOTTOM:
        page = PageLayout(number=len(pages) + 1, header_band_top=None)
        pages.append(page)
        totals_top = CONTINUED_TOTALS_TOP

    return TimesheetLayout(pages=pages, totals_page=page.number, totals_top=totals_top)


def _y(top_mm: float) -> float:
    return PAGE_HEIGHT - top_mm * mm


def _fill_band(c, top: float, height: float, color):
    c.setFillColorRGB(*color)
    c.rect(LEFT * mm, _y(top + height), TABLE_WIDTH * mm, height * mm, stroke=0, fill=1)


def _draw_title_block(c, report: TimesheetReport, accent, date_format: str):
    c.setFont("Helvetica-Bold", 24)
    c.setFillColorRGB(*accent)
    c.drawString(LEFT * mm, _y(25), APP_NAME)

    c.setFont("Helvetica", 16)
    c.setFillColorRGB(0, 0, 0)
    c.drawString(LEFT * mm, _y(35), "Timesheet Report")

    c.setFont("Helvetica", 12)
    c.drawString(LEFT * mm, _y(50), f"Client: {report.client.name}")
    c.drawString(
        LEFT * mm, _y(60),
        f"Period: {report.start_date.strftime(date_format)} to {report.end_date.strftime(date_format)}"
    )
    c.drawString(LEFT * mm, _y(70), f"Hourly Rate: {format_money(report.client.hourly_rate)}")


def _draw_column_header(c, band_top: float):
    _fill_band(c, band_top, HEADER_BAND_HEIGHT, HEADER_FILL)
    c.setFillColorRGB(0, 0, 0)
    c.setFont("Helvetica-Bold", 10)
    for title, x in COLUMNS:
        c.drawString(x * mm, _y(band_top + 6), title)


def _draw_row(c, placed: PlacedRow, date_format: str):
    row = placed.row
    if placed.tinted:
        _fill_band(c, placed.baseline - 4, 8, ROW_TINT)

    if row.has_activity:
        c.setFillColorRGB(0, 0, 0)
    else:
        c.setFillColorRGB(*MUTED_TEXT)
    c.setFont("Helvetica", 10)
    values = (
        row.date.strftime(date_format),
        row.clock_in_text(),
        row.clock_out_text(),
        format_hours(row.hours),
        format_money(row.earnings),
    )
    for (_, x), value in zip(COLUMNS, values):
        c.drawString(x * mm, _y(placed.baseline), value)


def _draw_totals(c, report: TimesheetReport, top: float, accent, generated_at: datetime.datetime):
    _fill_band(c, top, TOTALS_HEIGHT, accent)
    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 12)
    baseline = top + 8
    c.drawString(22 * mm, _y(baseline), "TOTALS:")
    c.drawString(120 * mm, _y(baseline), f"{format_hours(report.total_hours)} hours")
    c.drawString(150 * mm, _y(baseline), format_money(report.total_earnings))

    footer = baseline + 16
    c.setFont("Helvetica", 8)
    c.setFillColorRGB(*MUTED_TEXT)
    c.drawString(LEFT * mm, _y(footer), f"Generated on {generated_at:%Y-%m-%d} at {generated_at:%H:%M:%S}")
    c.drawString(LEFT * mm, _y(footer + 8), f"Powered by {APP_NAME} Time Tracking")


def render_timesheet_pdf(report: TimesheetReport, theme: Optional[ThemeSettings] = None,
                         date_format: str = "%Y-%m-%d",
                         generated_at: Optional[datetime.datetime] = None) -> bytes:
    """
    Draw a generated report as a PDF document.

    Args:
        report: TimesheetReport whose rows are already generated
        theme: Accent colour source; the light-theme accent is used since the page is white
        date_format: strftime format for the period line and the date column
        generated_at: Timestamp printed in the footer (defaults to now)

    Returns:
        The PDF document as bytes
    """
    theme = theme or ThemeSettings()
    accent = hex_to_rgb(theme.accent_colors['light'])
    generated_at = generated_at or datetime.datetime.now()
    layout = layout_timesheet(report.rows)

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"{APP_NAME} Timesheet - {report.client.name}")
    c.setAuthor(APP_NAME)

    for page in layout.pages:
        if page.number == 1:
            _draw_title_block(c, report, accent, date_format)
        if page.header_band_top is not None:
            _draw_column_header(c, page.header_band_top)
        for placed in page.rows:
            _draw_row(c, placed, date_format)
        if page.number == layout.totals_page:
            _draw_totals(c, report, layout.totals_top, accent, generated_at)
        c.showPage()

    c.save()
    logger.info(
        f"Rendered timesheet for {report.client.name}: {len(report.rows)} days on {layout.page_count} page(s)"
    )
    return buffer.getvalue()
