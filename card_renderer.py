"""
Bulk ID card export (A3 portrait, 5 x 5 cards per page).

Each card is drawn in a fixed order: background fill, template image (if
present), photo slot, name, "<cluster> – <unit>", designations.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, List, Optional, Tuple

from reportlab.lib import colors
from reportlab.pdfgen import canvas

from assets import AssetResolver, ImageAsset
from layout import (
    DEFAULT_CARD_LAYOUT,
    CardLayout,
    baseline,
    cover_within,
    fit_within,
    flip_y,
    wrap_text,
)
from records import RegistrationRecord
from utils import step_logger


@dataclass(frozen=True)
class CardPlacement:
    index: int
    page: int
    column: int
    row: int
    x: float
    y: float
    photo_found: bool


@dataclass(frozen=True)
class CardRender:
    pages: int
    cards: Tuple[CardPlacement, ...]


class IDCardGridRenderer:
    """Tiles one ID card per registration onto A3 pages."""

    def __init__(self, resolver: AssetResolver, layout: CardLayout = DEFAULT_CARD_LAYOUT):
        self.resolver = resolver
        self.layout = layout
        self._log = step_logger("cards")

    def render(self, records: Iterable[RegistrationRecord]) -> bytes:
        """Build the whole document in memory and return the PDF bytes."""
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=self.layout.page_size)
        c.setTitle("ID Cards")
        self.draw(c, records)
        c.save()
        return buf.getvalue()

    def draw(self, c: canvas.Canvas, records: Iterable[RegistrationRecord]) -> CardRender:
        lay = self.layout
        template = self.resolver.resolve(lay.template_path)
        if not template.found:
            self._log(f"template {lay.template_path} unavailable ({template.status.value}); using plain background")

        page = 1
        placements: List[CardPlacement] = []
        for index, record in enumerate(records):
            # New page only when a 26th, 51st, ... card actually exists.
            if index and index % lay.cards_per_page == 0:
                c.showPage()
                page += 1
            col, row = lay.cell(index)
            x, y = lay.card_origin(index)
            found = self.draw_card(c, x, y, record, template)
            placements.append(CardPlacement(index, page, col, row, x, y, found))

        c.showPage()
        missing = sum(1 for p in placements if not p.photo_found)
        self._log(f"rendered {len(placements)} card(s) on {page} page(s), {missing} photo placeholder(s)")
        return CardRender(pages=page, cards=tuple(placements))

    def _y(self, top: float) -> float:
        return flip_y(self.layout.page_height, top)

    def draw_card(self, c: canvas.Canvas, x: float, y: float, record: RegistrationRecord, template: ImageAsset) -> bool:
        """Draw one card with its top-left corner at (x, y), top-down. Returns True if the photo was drawn."""
        lay = self.layout
        w, h = lay.card_width, lay.card_height

        c.setFillColor(colors.HexColor(lay.background))
        c.rect(x, self._y(y + h), w, h, stroke=0, fill=1)
        if template.found:
            c.drawImage(template.reader, x, self._y(y + h), width=w, height=h)

        diameter = lay.units(lay.photo_diameter_cm)
        photo_top = y + lay.units(lay.photo_top_cm)
        photo_left = x + (w - diameter) / 2
        asset = self.resolver.resolve(record.photo_path)
        if asset.found:
            self._draw_photo(c, photo_left, photo_top, diameter, asset)
        else:
            self._draw_placeholder(c, photo_left, photo_top, diameter)

        text_x = x + lay.text_inset
        text_w = w - lay.text_inset * 2
        detail_y = photo_top + diameter + lay.units(lay.name_gap_cm)
        name_gap = lay.units(lay.affiliation_gap_cm)
        self._draw_centered(c, record.name, lay.bold_font_name, lay.units(lay.name_font_cm), text_x, text_w, detail_y, name_gap)

        detail_y += name_gap
        affiliation_gap = lay.units(lay.designations_gap_cm)
        self._draw_centered(c, record.affiliation_text, lay.font_name, lay.units(lay.detail_font_cm), text_x, text_w, detail_y, affiliation_gap)

        detail_y += affiliation_gap
        remaining = y + h - lay.text_inset - detail_y
        self._draw_centered(c, record.designations_text, lay.bold_font_name, lay.units(lay.detail_font_cm), text_x, text_w, detail_y, remaining)
        return asset.found

    def _draw_photo(self, c: canvas.Canvas, left: float, top: float, diameter: float, asset: ImageAsset) -> None:
        lay = self.layout
        if lay.photo_shape == "circle":
            # Fill the circle, cropping whatever falls outside it.
            pw, ph = cover_within(asset.width, asset.height, diameter, diameter)
            c.saveState()
            path = c.beginPath()
            path.circle(left + diameter / 2, self._y(top + diameter / 2), diameter / 2)
            c.clipPath(path, stroke=0, fill=0)
        else:
            pw, ph = fit_within(asset.width, asset.height, diameter, diameter)
            c.saveState()
        img_left = left + (diameter - pw) / 2
        img_top = top + (diameter - ph) / 2
        c.drawImage(asset.reader, img_left, self._y(img_top + ph), width=pw, height=ph)
        c.restoreState()

    def _draw_placeholder(self, c: canvas.Canvas, left: float, top: float, diameter: float) -> None:
        """Gray "No Photo" centred in the photo slot."""
        lay = self.layout
        size = lay.units(lay.placeholder_font_cm)
        text_top = top + diameter / 2 - lay.units(0.15)
        c.setFont(lay.font_name, size)
        c.setFillColor(colors.gray)
        c.drawCentredString(left + diameter / 2, self._y(baseline(text_top, lay.font_name, size)), lay.placeholder_text)

    def _draw_centered(
        self,
        c: canvas.Canvas,
        text: str,
        font_name: str,
        font_size: float,
        x: float,
        width: float,
        top: float,
        max_height: float,
    ) -> None:
        leading = font_size * 1.2
        lines = wrap_text(text, font_name, font_size, width, max(1, int(max_height // leading)))
        c.setFont(font_name, font_size)
        c.setFillColor(colors.black)
        for i, line in enumerate(lines):
            c.drawCentredString(x + width / 2, self._y(baseline(top + i * leading, font_name, font_size)), line)


def render_id_cards(
    records: Iterable[RegistrationRecord],
    resolver: AssetResolver,
    layout: Optional[CardLayout] = None,
) -> bytes:
    return IDCardGridRenderer(resolver, layout or DEFAULT_CARD_LAYOUT).render(records)
