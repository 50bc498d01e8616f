"""
Registration table export (A4 portrait).

One row per registration: serial, photo, name, cluster, unit, designations and
a blank signature cell. The title and column header are repeated on every page
and a row is never split across pages.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, List, Optional, Tuple

from reportlab.lib import colors
from reportlab.pdfgen import canvas

from assets import AssetResolver, ImageAsset
from layout import (
    DEFAULT_TABLE_LAYOUT,
    TableLayout,
    TablePager,
    baseline,
    fit_within,
    flip_y,
    wrap_text,
)
from records import RegistrationRecord
from utils import step_logger


@dataclass(frozen=True)
class RowPlacement:
    serial: int
    page: int
    top: float
    photo_found: bool


@dataclass(frozen=True)
class TableRender:
    pages: int
    rows: Tuple[RowPlacement, ...]


class RegistrationTableRenderer:
    """Draws the registration table onto a reportlab canvas."""

    def __init__(self, resolver: AssetResolver, layout: TableLayout = DEFAULT_TABLE_LAYOUT):
        self.resolver = resolver
        self.layout = layout
        self._log = step_logger("table")

    def render(self, records: Iterable[RegistrationRecord]) -> bytes:
        """Build the whole document in memory and return the PDF bytes."""
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=self.layout.page_size)
        c.setTitle("Registrations")
        self.draw(c, records)
        c.save()
        return buf.getvalue()

    def draw(self, c: canvas.Canvas, records: Iterable[RegistrationRecord]) -> TableRender:
        lay = self.layout
        pager = TablePager(
            lay,
            on_page_break=c.showPage,
            on_header=lambda: self._draw_title_and_header(c),
        )
        pager.start()

        placements: List[RowPlacement] = []
        for serial, record in enumerate(records, 1):
            pager.ensure_room_for(lay.row_height)
            top = pager.cursor
            found = self._draw_row(c, top, serial, record)
            placements.append(RowPlacement(serial=serial, page=pager.page, top=top, photo_found=found))
            pager.advance(lay.row_height)

        c.showPage()
        missing = sum(1 for p in placements if not p.photo_found)
        self._log(f"rendered {len(placements)} row(s) on {pager.page} page(s), {missing} photo placeholder(s)")
        return TableRender(pages=pager.page, rows=tuple(placements))

    def _y(self, top: float) -> float:
        return flip_y(self.layout.page_height, top)

    def _rule(self, c: canvas.Canvas, top: float) -> None:
        lay = self.layout
        c.saveState()
        c.setStrokeColor(colors.HexColor(lay.rule_color))
        c.setLineWidth(lay.rule_width)
        c.line(lay.start_x, self._y(top), lay.start_x + lay.total_width, self._y(top))
        c.restoreState()

    def _draw_title_and_header(self, c: canvas.Canvas) -> None:
        lay = self.layout
        c.setFillColor(colors.black)
        top = lay.margin
        for line in lay.title_lines:
            c.setFont(lay.font_name, line.font_size)
            c.drawCentredString(lay.page_width / 2, self._y(baseline(top, lay.font_name, line.font_size)), line.text)
            top += line.font_size * lay.line_spacing + line.space_after

        self._rule(c, lay.header_top)
        c.setFont(lay.font_name, lay.font_size)
        x = lay.start_x
        text_y = self._y(baseline(lay.header_top + 5, lay.font_name, lay.font_size))
        for col in lay.columns:
            c.drawCentredString(x + col.width / 2, text_y, col.label)
            x += col.width
        self._rule(c, lay.body_top)

    def _draw_text_cell(self, c: canvas.Canvas, key: str, top: float, text: str) -> None:
        lay = self.layout
        x = lay.column_x(key)
        leading = lay.font_size * lay.line_spacing
        max_lines = int((lay.row_height - lay.text_inset) // leading)
        lines = wrap_text(text, lay.font_name, lay.font_size, lay.column_width(key), max_lines)
        c.setFont(lay.font_name, lay.font_size)
        c.setFillColor(colors.black)
        for i, line in enumerate(lines):
            c.drawString(x, self._y(baseline(top + lay.text_inset + i * leading, lay.font_name, lay.font_size)), line)

    def _draw_photo(self, c: canvas.Canvas, top: float, asset: ImageAsset) -> None:
        lay = self.layout
        x = lay.column_x("photo")
        width = lay.column_width("photo")
        pad = lay.photo_padding
        if asset.found:
            w, h = fit_within(asset.width, asset.height, width - pad * 2, lay.photo_max_height)
            c.drawImage(asset.reader, x + pad, self._y(top + pad + h), width=w, height=h)
            return
        self._draw_placeholder(c, x, top, width)

    def _draw_placeholder(self, c: canvas.Canvas, x: float, top: float, width: float) -> None:
        """Gray "N/A" in the photo cell (missing path, missing file, or undecodable image)."""
        lay = self.layout
        c.setFont(lay.font_name, lay.placeholder_font_size)
        c.setFillColor(colors.gray)
        c.drawCentredString(
            x + width / 2,
            self._y(baseline(top + 20, lay.font_name, lay.placeholder_font_size)),
            lay.placeholder_text,
        )
        c.setFillColor(colors.black)

    def _draw_row(self, c: canvas.Canvas, top: float, serial: int, record: RegistrationRecord) -> bool:
        lay = self.layout
        c.setFont(lay.font_name, lay.font_size)
        c.setFillColor(colors.black)
        sn_x = lay.column_x("sn")
        c.drawCentredString(
            sn_x + lay.column_width("sn") / 2,
            self._y(baseline(top + lay.text_inset, lay.font_name, lay.font_size)),
            str(serial),
        )

        asset = self.resolver.resolve(record.photo_path)
        self._draw_photo(c, top, asset)

        self._draw_text_cell(c, "name", top, record.name)
        self._draw_text_cell(c, "cluster", top, record.cluster)
        self._draw_text_cell(c, "unit", top, record.unit)
        self._draw_text_cell(c, "designations", top, record.designations_text)
        # Signature cell is left blank.

        self._rule(c, top + lay.row_height)
        return asset.found


def render_registration_table(
    records: Iterable[RegistrationRecord],
    resolver: AssetResolver,
    layout: Optional[TableLayout] = None,
) -> bytes:
    return RegistrationTableRenderer(resolver, layout or DEFAULT_TABLE_LAYOUT).render(records)
