"""
Layout constants and geometry for both PDF exports.

All positions here are top-down (y grows towards the bottom of the page, the
way the page is read). Renderers flip to PDF coordinates with `flip_y` at draw
time so the arithmetic below stays easy to test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

from reportlab.lib.pagesizes import A3, A4, portrait
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import getAscent

from config import (
    CARD_BACKGROUND,
    CARD_COLUMNS,
    CARD_DPI,
    CARD_HEIGHT_CM,
    CARD_MARGIN,
    CARD_ROWS,
    CARD_TEMPLATE,
    CARD_WIDTH_CM,
    EVENT_NAME,
    ORGANIZATION_NAME,
    SECTION_LABEL,
    TABLE_COLUMNS,
    TABLE_HEADER_HEIGHT,
    TABLE_MARGIN,
    TABLE_ROW_HEIGHT,
    TABLE_RULE_COLOR,
)

CM_PER_INCH = 2.54


def cm_to_units(cm: float, dpi: float) -> int:
    """Convert centimetres to whole page units at `dpi` units per inch."""
    return int(round(cm * dpi / CM_PER_INCH))


def cm_to_exact_units(cm: float, dpi: float) -> float:
    return cm / CM_PER_INCH * dpi


def flip_y(page_height: float, top: float) -> float:
    """Top-down y -> PDF (bottom-up) y."""
    return page_height - top


def table_start_x(page_width: float, total_width: float) -> float:
    return (page_width - total_width) / 2


def grid_gutter(available: float, count: int, size: float) -> float:
    """Even spacing so that count*size + (count+1)*gutter == available."""
    return (available - count * size) / (count + 1)


def fit_within(width: float, height: float, box_width: float, box_height: float) -> Tuple[float, float]:
    """Scale (width, height) down or up to fit the box, preserving aspect ratio."""
    if width <= 0 or height <= 0:
        return 0.0, 0.0
    scale = min(box_width / width, box_height / height)
    return width * scale, height * scale


def cover_within(width: float, height: float, box_width: float, box_height: float) -> Tuple[float, float]:
    """Scale (width, height) so the box is fully covered, preserving aspect ratio."""
    if width <= 0 or height <= 0:
        return 0.0, 0.0
    scale = max(box_width / width, box_height / height)
    return width * scale, height * scale


@dataclass(frozen=True)
class TitleLine:
    text: str
    font_size: float
    space_after: float = 0.0


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    width: float


@dataclass(frozen=True)
class TableLayout:
    page_size: Tuple[float, float] = portrait(A4)
    margin: float = TABLE_MARGIN
    columns: Tuple[Column, ...] = tuple(Column(k, label, w) for k, label, w in TABLE_COLUMNS)
    title_lines: Tuple[TitleLine, ...] = (
        TitleLine(ORGANIZATION_NAME, 16),
        TitleLine(EVENT_NAME, 14, space_after=14),
        TitleLine(SECTION_LABEL, 12, space_after=6),
    )
    line_spacing: float = 1.2
    header_height: float = TABLE_HEADER_HEIGHT
    row_height: float = TABLE_ROW_HEIGHT
    font_name: str = "Helvetica"
    font_size: float = 10
    placeholder_font_size: float = 8
    placeholder_text: str = "N/A"
    text_inset: float = 10
    photo_padding: float = 5
    photo_max_height: float = 50
    rule_color: str = TABLE_RULE_COLOR
    rule_width: float = 0.5

    @property
    def page_width(self) -> float:
        return self.page_size[0]

    @property
    def page_height(self) -> float:
        return self.page_size[1]

    @property
    def total_width(self) -> float:
        return sum(c.width for c in self.columns)

    @property
    def start_x(self) -> float:
        return table_start_x(self.page_width, self.total_width)

    @property
    def bottom_limit(self) -> float:
        """Lowest top-down y a row may reach."""
        return self.page_height - self.margin

    @property
    def title_height(self) -> float:
        return sum(t.font_size * self.line_spacing + t.space_after for t in self.title_lines)

    @property
    def header_top(self) -> float:
        return self.margin + self.title_height

    @property
    def body_top(self) -> float:
        return self.header_top + self.header_height

    @property
    def rows_per_page(self) -> int:
        return max(0, int((self.bottom_limit - self.body_top) // self.row_height))

    def column_x(self, key: str) -> float:
        x = self.start_x
        for c in self.columns:
            if c.key == key:
                return x
            x += c.width
        raise KeyError(key)

    def column_width(self, key: str) -> float:
        for c in self.columns:
            if c.key == key:
                return c.width
        raise KeyError(key)


@dataclass(frozen=True)
class CardLayout:
    page_size: Tuple[float, float] = portrait(A3)
    margin: float = CARD_MARGIN
    columns: int = CARD_COLUMNS
    rows: int = CARD_ROWS
    card_width_cm: float = CARD_WIDTH_CM
    card_height_cm: float = CARD_HEIGHT_CM
    dpi: float = CARD_DPI
    background: str = CARD_BACKGROUND
    template_path: str = CARD_TEMPLATE
    photo_diameter_cm: float = 2.5
    photo_top_cm: float = 1.9
    photo_shape: str = "circle"  # or "square"
    name_gap_cm: float = 0.2
    affiliation_gap_cm: float = 1.2
    designations_gap_cm: float = 1.0
    name_font_cm: float = 0.35
    detail_font_cm: float = 0.28
    placeholder_font_cm: float = 0.3
    placeholder_text: str = "No Photo"
    text_inset: float = 5
    font_name: str = "Helvetica"
    bold_font_name: str = "Helvetica-Bold"

    def units(self, cm: float) -> int:
        return cm_to_units(cm, self.dpi)

    @property
    def page_width(self) -> float:
        return self.page_size[0]

    @property
    def page_height(self) -> float:
        return self.page_size[1]

    @property
    def cards_per_page(self) -> int:
        return self.columns * self.rows

    @property
    def card_width(self) -> float:
        return cm_to_exact_units(self.card_width_cm, self.dpi)

    @property
    def card_height(self) -> float:
        return cm_to_exact_units(self.card_height_cm, self.dpi)

    @property
    def gutter_x(self) -> float:
        return grid_gutter(self.page_width - self.margin * 2, self.columns, self.card_width)

    @property
    def gutter_y(self) -> float:
        return grid_gutter(self.page_height - self.margin * 2, self.rows, self.card_height)

    def cell(self, index: int) -> Tuple[int, int]:
        """(column, row) of the index-th card on its page."""
        pos = index % self.cards_per_page
        return pos % self.columns, pos // self.columns

    def card_origin(self, index: int) -> Tuple[float, float]:
        """Top-left corner (top-down) of the index-th card on its page."""
        col, row = self.cell(index)
        x = self.margin + self.gutter_x + col * (self.card_width + self.gutter_x)
        y = self.margin + self.gutter_y + row * (self.card_height + self.gutter_y)
        return x, y


DEFAULT_TABLE_LAYOUT = TableLayout()
DEFAULT_CARD_LAYOUT = CardLayout()


class TablePager:
    """
    Vertical cursor for the registration table.

    `start()` emits the first title+header block. Before each row the renderer
    calls `ensure_room_for(row_height)`; if the row would cross the bottom
    margin the pager calls `on_page_break()` (new page + title + header) and
    resets the cursor to the body top. Rows are therefore never split.
    """

    def __init__(self, layout: TableLayout, on_page_break: Callable[[], None], on_header: Callable[[], None]):
        self.layout = layout
        self._on_page_break = on_page_break
        self._on_header = on_header
        self.page = 0
        self.cursor = layout.body_top

    def start(self) -> None:
        self.page = 1
        self._on_header()
        self.cursor = self.layout.body_top

    def has_room_for(self, height: float) -> bool:
        return self.cursor + height <= self.layout.bottom_limit

    def ensure_room_for(self, height: float) -> bool:
        """Break the page if `height` does not fit. Returns True if a break happened."""
        if self.page == 0:
            self.start()
        if self.has_room_for(height):
            return False
        self._on_page_break()
        self.page += 1
        self._on_header()
        self.cursor = self.layout.body_top
        return True

    def advance(self, height: float) -> None:
        self.cursor += height


def wrap_text(text: str, font_name: str, font_size: float, width: float, max_lines: int) -> List[str]:
    """Word-wrap `text` to `width`; lines beyond `max_lines` are dropped."""
    if not text or max_lines <= 0:
        return []
    return simpleSplit(text, font_name, font_size, width)[:max_lines]


def baseline(top: float, font_name: str, font_size: float) -> float:
    """Top-down baseline for a line whose glyph box starts at `top`."""
    return top + getAscent(font_name, font_size)
