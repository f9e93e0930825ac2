"""
PDF report rendering.

Draws the daily activity report and the inventory/shipment analysis reports
straight onto a reportlab canvas. Every page gets a footer with
"Page i of N", which needs the page count before anything is written out,
so pages are buffered by NumberedCanvas and stamped on save.
"""

from collections import Counter
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..exceptions import ReportExportError
from ..models import ActivityEntry, AnalysisReport, ReportType, StockAction
from ..services.report_service import daily_report_filename, report_filename
from ..services.shipment_calculator import format_currency
from ..utils import get_logger

# ─── PAGE GEOMETRY ───
W, H = A4
MARGIN = 40
CONTENT_W = W - 2 * MARGIN
FOOTER_H = 40

# ─── COLOR PALETTE ───
BLUE = HexColor('#3B82F6')
BLUE_DARK = HexColor('#1E40AF')
BLUE_PALE = HexColor('#EFF6FF')
CHARCOAL = HexColor('#1F2937')
SLATE = HexColor('#64748B')
SLATE_PALE = HexColor('#F1F5F9')
BORDER = HexColor('#E2E8F0')
GREEN = HexColor('#16A34A')
RED = HexColor('#DC2626')
AMBER = HexColor('#D97706')
WHITE = HexColor('#FFFFFF')

FONT = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'

LEVEL_COLORS = {"High": GREEN, "Medium": AMBER, "Low": RED}

# (header, width) pairs, widths sum to CONTENT_W
DAILY_COLUMNS = [
    ("Time", 45), ("Product", 100), ("Action", 70), ("Qty", 35),
    ("Stock Change", 65), ("User", 70), ("Notes", CONTENT_W - 385),
]
SHIPMENT_COLUMNS = [
    ("Product", 120), ("Category", 85), ("Qty", 35), ("Unit Price", 70),
    ("Shipping", 65), ("GST", 60), ("Total", CONTENT_W - 435),
]
SHIPMENT_CATEGORY_COLUMNS = [
    ("Category", 140), ("Quantity", 70), ("Value", 110), ("GST", 100), ("% of Total", CONTENT_W - 420),
]
CATEGORY_COLUMNS = [
    ("Category", 170), ("Units", 80), ("Value", 140), ("% of Total", CONTENT_W - 390),
]
STOCK_LEVEL_COLUMNS = [
    ("Product", 250), ("Stock", 120), ("Level", CONTENT_W - 370),
]
ACTIVITY_COLUMNS = [
    ("Date", 90), ("Product", 150), ("Action", 70), ("Change", 90), ("User", CONTENT_W - 400),
]


def pdf_text(value) -> str:
    """Text the built-in Type 1 fonts can draw."""
    return str(value).replace("→", "->")


def percentage_of(value: float, total: float) -> str:
    return f"{(value / total * 100 if total else 0):.1f}%"


def action_label(action: str) -> str:
    return action.replace("_", " ").title()


class NumberedCanvas(canvas.Canvas):
    """Canvas that stamps a footer with "Page i of N" on every page."""

    def __init__(self, *args, footer_left: str = "", footer_center: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self.footer_left = footer_left
        self.footer_center = footer_center
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_footer(total)
            super().showPage()
        super().save()

    def draw_footer(self, page_count: int) -> None:
        self.saveState()
        self.setStrokeColor(BORDER)
        self.setLineWidth(0.5)
        self.line(MARGIN, FOOTER_H - 8, W - MARGIN, FOOTER_H - 8)
        self.setFont(FONT, 8)
        self.setFillColor(SLATE)
        self.drawString(MARGIN, FOOTER_H - 22, self.footer_left)
        if self.footer_center:
            self.drawCentredString(W / 2, FOOTER_H - 22, self.footer_center)
        self.drawRightString(W - MARGIN, FOOTER_H - 22, f"Page {self._pageNumber} of {page_count}")
        self.restoreState()


class ReportDocument:
    """Cursor-based drawing helpers over a NumberedCanvas."""

    def __init__(self, path: Path, title: str, footer_left: str, footer_center: str = ""):
        self.c = NumberedCanvas(
            str(path), pagesize=A4, footer_left=footer_left, footer_center=footer_center
        )
        self.c.setTitle(title)
        self.c.setAuthor("InventoryPro")
        self.y = H - MARGIN

    # ─── DRAWING PRIMITIVES ───

    def draw_rect(self, x, y, w, h, fill=None, stroke=None, stroke_w=0.5):
        self.c.saveState()
        if fill:
            self.c.setFillColor(fill)
        if stroke:
            self.c.setStrokeColor(stroke)
            self.c.setLineWidth(stroke_w)
        self.c.rect(x, y, w, h, fill=1 if fill else 0, stroke=1 if stroke else 0)
        self.c.restoreState()

    def draw_text(self, text, x, y, font=FONT, size=10, color=CHARCOAL, align='left', max_width=None):
        text = pdf_text(text)
        self.c.saveState()
        self.c.setFont(font, size)
        self.c.setFillColor(color)
        if max_width:
            while self.c.stringWidth(text, font, size) > max_width and len(text) > 3:
                text = text[:-4] + '...'
        if align == 'center':
            self.c.drawCentredString(x, y, text)
        elif align == 'right':
            self.c.drawRightString(x, y, text)
        else:
            self.c.drawString(x, y, text)
        self.c.restoreState()

    def wrap_lines(self, text: str, max_width: float, font=FONT, size=10) -> List[str]:
        lines: List[str] = []
        current = ""
        for word in pdf_text(text).split():
            candidate = current + (" " if current else "") + word
            if self.c.stringWidth(candidate, font, size) <= max_width:
                current = candidate
            else:
                if current:
                    lines.append(current)
                current = word
        if current:
            lines.append(current)
        return lines

    def draw_wrapped_text(self, text, x, max_width, font=FONT, size=10, color=CHARCOAL, leading=14):
        """Draw text with word wrapping from the cursor, moving it down."""
        for line in self.wrap_lines(text, max_width, font, size):
            self.ensure_space(leading)
            self.draw_text(line, x, self.y, font, size, color)
            self.y -= leading

    # ─── PAGE INFRASTRUCTURE ───

    def new_page(self) -> None:
        self.c.showPage()
        self.y = H - MARGIN

    def ensure_space(self, needed: float) -> bool:
        """Start a new page when the cursor is too low; True if it did."""
        if self.y - needed < FOOTER_H + 10:
            self.new_page()
            return True
        return False

    def save(self) -> None:
        self.c.showPage()
        self.c.save()

    # ─── BLOCKS ───

    def draw_banner(self, title: str, subtitle: str) -> None:
        band_h = 70
        self.draw_rect(0, H - band_h, W, band_h, fill=BLUE)
        self.draw_text("InventoryPro", MARGIN, H - 32, FONT_BOLD, 20, WHITE)
        self.draw_text(subtitle, MARGIN, H - 52, FONT, 11, WHITE)
        self.draw_text(title, W - MARGIN, H - 32, FONT_BOLD, 14, WHITE, align='right')
        self.y = H - band_h - 25

    def draw_field(self, label: str, value: str) -> None:
        self.draw_text(f"{label}:", MARGIN, self.y, FONT_BOLD, 10)
        self.draw_text(value, MARGIN + 90, self.y, FONT, 10)
        self.y -= 15

    def draw_section(self, title: str) -> None:
        self.ensure_space(50)
        self.y -= 10
        self.draw_text(title, MARGIN, self.y, FONT_BOLD, 14, BLUE_DARK)
        self.y -= 6
        self.c.saveState()
        self.c.setStrokeColor(BLUE)
        self.c.setLineWidth(1)
        self.c.line(MARGIN, self.y, MARGIN + 140, self.y)
        self.c.restoreState()
        self.y -= 16

    def draw_stat_boxes(self, stats: Sequence[Tuple[str, str]], per_row: int = 3) -> None:
        gap = 10
        box_w = (CONTENT_W - gap * (per_row - 1)) / per_row
        box_h = 48
        for start in range(0, len(stats), per_row):
            self.ensure_space(box_h + gap)
            for i, (label, value) in enumerate(stats[start:start + per_row]):
                x = MARGIN + i * (box_w + gap)
                self.draw_rect(x, self.y - box_h, box_w, box_h, fill=BLUE_PALE, stroke=BORDER)
                self.draw_text(label, x + 10, self.y - 16, FONT, 8, SLATE, max_width=box_w - 20)
                self.draw_text(value, x + 10, self.y - 36, FONT_BOLD, 14, CHARCOAL, max_width=box_w - 20)
            self.y -= box_h + gap

    def draw_table_header(self, cols) -> None:
        h = 20
        self.draw_rect(MARGIN, self.y - h, CONTENT_W, h, fill=BLUE_DARK)
        cx = MARGIN + 6
        for text, w in cols:
            self.draw_text(text, cx, self.y - 14, FONT_BOLD, 8, WHITE, max_width=w - 8)
            cx += w
        self.y -= h

    def draw_table_row(self, values, cols, alt=False, colors=None) -> None:
        h = 18
        if alt:
            self.draw_rect(MARGIN, self.y - h, CONTENT_W, h, fill=SLATE_PALE)
        cx = MARGIN + 6
        for i, (val, (_, w)) in enumerate(zip(values, cols)):
            color = (colors or {}).get(i, CHARCOAL)
            self.draw_text(val, cx, self.y - 12, FONT, 8, color, max_width=w - 8)
            cx += w
        self.y -= h

    def draw_table(self, cols, rows: Iterable[Sequence], row_colors=None) -> None:
        """Table with the header repeated on every page it spans."""
        self.ensure_space(20 + 18)
        self.draw_table_header(cols)
        for index, row in enumerate(rows):
            if self.ensure_space(18):
                self.draw_table_header(cols)
            colors = row_colors(row) if row_colors else None
            self.draw_table_row(row, cols, alt=index % 2 == 1, colors=colors)
        self.y -= 12

    def draw_bullets(self, items: Iterable[str]) -> None:
        for item in items:
            lines = self.wrap_lines(item, CONTENT_W - 20, FONT, 10)
            for i, line in enumerate(lines):
                self.ensure_space(15)
                if i == 0:
                    self.draw_text("•", MARGIN + 4, self.y, FONT_BOLD, 10, BLUE)
                self.draw_text(line, MARGIN + 16, self.y, FONT, 10)
                self.y -= 15

    def draw_note(self, text: str) -> None:
        self.ensure_space(20)
        self.draw_text(text, MARGIN, self.y, FONT, 10, SLATE)
        self.y -= 20


class PDFService:
    """Renders daily and analysis reports to PDF files."""

    def __init__(self, currency_prefix: str = "RS:"):
        """
        Initialize PDF service.

        Args:
            currency_prefix: Prefix for money amounts
        """
        self.currency_prefix = currency_prefix
        self.logger = get_logger("pdf_service")

    def _money(self, amount: float) -> str:
        return format_currency(amount, self.currency_prefix)

    def generate_daily_report(
        self,
        entries: List[ActivityEntry],
        output_dir: Path,
        today: Optional[date] = None,
    ) -> Path:
        """
        Render today's combined inventory and shipment activity.

        Args:
            entries: Activity rows, newest first
            output_dir: Directory for the PDF
            today: Report date

        Returns:
            Path of the written PDF

        Raises:
            ReportExportError: PDF could not be written
        """
        today = today or date.today()
        path = Path(output_dir) / daily_report_filename(today)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            doc = ReportDocument(
                path,
                title=f"Daily Activity Report {today.isoformat()}",
                footer_left="InventoryPro - Inventory Management System",
            )
            self._draw_daily(doc, entries, today)
            doc.save()
        except Exception as e:
            self.logger.error(f"Failed to generate daily report: {e}")
            raise ReportExportError(path=str(path), reason=str(e)) from e

        self.logger.info(f"Daily report written to {path} ({len(entries)} activities)")
        return path

    def _draw_daily(self, doc: ReportDocument, entries: List[ActivityEntry], today: date) -> None:
        doc.draw_banner("Daily Report", "Daily Activity Report")
        doc.draw_field("Report Date", today.strftime("%A, %B %d, %Y"))
        doc.draw_field("Generated", datetime.now().strftime("%Y-%m-%d %H:%M:%S"))

        actions = Counter(entry.action for entry in entries)
        doc.draw_section("Daily Summary")
        doc.draw_stat_boxes([
            ("Total Activities", str(len(entries))),
            ("Stock Additions", str(actions[StockAction.ADD.value])),
            ("Stock Removals", str(actions[StockAction.REMOVE.value])),
            ("Stock Adjustments", str(actions[StockAction.SET.value])),
            ("Price Updates", str(sum(1 for e in entries if e.price_changed))),
            ("Supplier Changes", str(sum(1 for e in entries if e.supplier_changed))),
        ])

        doc.draw_section("Activity Log")
        if not entries:
            doc.draw_note("No activities recorded today.")
            return

        rows = []
        for entry in entries:
            stock_change = (
                f"{entry.previous_stock} -> {entry.new_stock}" if entry.source == "inventory" else "-"
            )
            rows.append([
                entry.timestamp.strftime("%H:%M"),
                entry.product_name,
                action_label(entry.action),
                entry.quantity,
                stock_change,
                entry.user,
                entry.notes or "-",
            ])
        doc.draw_table(DAILY_COLUMNS, rows)

    def generate_report(self, report: AnalysisReport, output_dir: Path) -> Path:
        """
        Render an inventory or shipment analysis report.

        Args:
            report: Report built by ReportService
            output_dir: Directory for the PDF

        Returns:
            Path of the written PDF

        Raises:
            ReportExportError: PDF could not be written
        """
        path = Path(output_dir) / report_filename(
            report.report_type, report.time_range, report.generated_at.date()
        )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            title = f"{report.report_type.value.title()} Analysis Report"
            doc = ReportDocument(
                path,
                title=title,
                footer_left="InventoryPro - Comprehensive Analysis Report",
                footer_center="Confidential - Internal Use Only",
            )
            doc.draw_banner(title, "Comprehensive Analysis Report")
            doc.draw_field("Period", report.time_range.label)
            doc.draw_field("Generated", report.generated_at.strftime("%Y-%m-%d %H:%M:%S"))

            if report.report_type == ReportType.SHIPMENT:
                self._draw_shipment_sections(doc, report)
            else:
                self._draw_inventory_sections(doc, report)

            self._draw_activity(doc, report)

            doc.draw_section("Recommendations")
            doc.draw_bullets(report.recommendations)
            doc.save()
        except Exception as e:
            self.logger.error(f"Failed to generate {report.report_type.value} report: {e}")
            raise ReportExportError(path=str(path), reason=str(e)) from e

        self.logger.info(f"{report.report_type.value.title()} report written to {path}")
        return path

    def _draw_inventory_sections(self, doc: ReportDocument, report: AnalysisReport) -> None:
        summary = report.inventory_summary
        if summary is not None:
            doc.draw_section("Executive Summary")
            doc.draw_stat_boxes([
                ("Total Products", str(summary.total_products)),
                ("Total Inventory Value", self._money(summary.total_value)),
                ("Low Stock Items", str(summary.low_stock_items)),
                ("Activities in Period", str(summary.activities)),
                ("Average Stock Level", str(summary.average_stock)),
            ])

        doc.draw_section("Category Analysis")
        if report.category_data:
            total = sum(c.value for c in report.category_data)
            doc.draw_table(CATEGORY_COLUMNS, [
                [c.name, c.stock, self._money(c.value), percentage_of(c.value, total)]
                for c in report.category_data
            ])
        else:
            doc.draw_note("No products in inventory.")

        doc.draw_section("Top Products by Stock Level")
        if report.stock_levels:
            doc.draw_table(
                STOCK_LEVEL_COLUMNS,
                [[entry.name, entry.value, entry.level] for entry in report.stock_levels],
                row_colors=lambda row: {2: LEVEL_COLORS.get(row[2], CHARCOAL)},
            )
        else:
            doc.draw_note("No products in inventory.")

    def _draw_shipment_sections(self, doc: ReportDocument, report: AnalysisReport) -> None:
        summary = report.shipment_summary
        if summary is not None:
            doc.draw_section("Executive Summary")
            doc.draw_stat_boxes([
                ("Total Shipments", str(summary.total_shipments)),
                ("Units Shipped", str(summary.total_quantity)),
                ("Total Shipment Value", self._money(summary.total_value)),
                ("GST Collected", self._money(summary.gst_collected)),
                ("Shipping Revenue", self._money(summary.shipping_revenue)),
            ])

        doc.draw_section("Shipment Analysis")
        if not report.shipments:
            doc.draw_note("No shipments recorded.")
            return

        top = sorted(report.shipments, key=lambda s: s.total_value, reverse=True)[:10]
        doc.draw_table(SHIPMENT_COLUMNS, [
            [
                s.product_name,
                s.category,
                s.quantity,
                self._money(s.price_per_unit),
                self._money(s.total_shipping_fee()),
                self._money(s.total_gst()),
                self._money(s.total_value),
            ]
            for s in top
        ])

        doc.draw_section("Shipments by Category")
        total = sum(c.value for c in report.shipment_category_data)
        doc.draw_table(SHIPMENT_CATEGORY_COLUMNS, [
            [c.name, c.quantity, self._money(c.value), self._money(c.gst_amount), percentage_of(c.value, total)]
            for c in report.shipment_category_data
        ])

    def _draw_activity(self, doc: ReportDocument, report: AnalysisReport) -> None:
        logs = report.filtered_logs
        doc.draw_section("Activity Summary")
        actions = Counter(log.action for log in logs)
        doc.draw_stat_boxes([
            ("Total Activities", str(len(logs))),
            ("Stock Additions", str(actions[StockAction.ADD])),
            ("Stock Removals", str(actions[StockAction.REMOVE])),
        ])

        doc.ensure_space(60)
        doc.draw_text("Recent Activities", MARGIN, doc.y, FONT_BOLD, 11)
        doc.y -= 14
        recent = sorted(logs, key=lambda log: log.timestamp, reverse=True)[:5]
        if not recent:
            doc.draw_note("No activity in this period.")
            return

        doc.draw_table(ACTIVITY_COLUMNS, [
            [
                log.timestamp.strftime("%Y-%m-%d"),
                log.product_name,
                action_label(log.action.value),
                log.stock_change_label(),
                log.user,
            ]
            for log in recent
        ])
