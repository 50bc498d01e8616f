"""
PDF export operations.

Each export reads the full record snapshot once, renders the whole document
into memory and only then hands back the bytes, so a failure never produces a
half-written PDF.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from assets import AssetResolver
from card_renderer import IDCardGridRenderer
from config import ASSET_ROOT, IDCARDS_PDF_NAME, REGISTRATIONS_PDF_NAME
from layout import DEFAULT_CARD_LAYOUT, DEFAULT_TABLE_LAYOUT, CardLayout, TableLayout
from records import RegistrationRecord
from table_renderer import RegistrationTableRenderer
from utils import step_logger

PDF_MIMETYPE = "application/pdf"

RecordSource = Callable[[], Iterable[RegistrationRecord]]

_log = step_logger("export")


class ExportError(RuntimeError):
    """An export could not be completed; no document was produced."""


@dataclass(frozen=True)
class ExportResult:
    content: bytes
    filename: str
    mimetype: str = PDF_MIMETYPE
    record_count: int = 0


def _snapshot(load_records: RecordSource) -> list:
    try:
        return list(load_records())
    except Exception as e:
        raise ExportError(f"Could not read registrations: {e}") from e


def _resolver(asset_root: Optional[Union[str, Path]]) -> AssetResolver:
    return AssetResolver(asset_root if asset_root is not None else ASSET_ROOT)


def export_registrations_pdf(
    load_records: RecordSource,
    asset_root: Optional[Union[str, Path]] = None,
    layout: TableLayout = DEFAULT_TABLE_LAYOUT,
) -> ExportResult:
    """Registration table (A4) for every stored registration."""
    records = _snapshot(load_records)
    renderer = RegistrationTableRenderer(_resolver(asset_root), layout)
    try:
        content = renderer.render(records)
    except Exception as e:
        _log(f"registration table failed: {type(e).__name__}: {e}")
        raise ExportError(f"Error generating PDF: {e}") from e
    return ExportResult(content=content, filename=REGISTRATIONS_PDF_NAME, record_count=len(records))


def export_idcards_pdf(
    load_records: RecordSource,
    asset_root: Optional[Union[str, Path]] = None,
    layout: CardLayout = DEFAULT_CARD_LAYOUT,
) -> ExportResult:
    """ID cards (A3, 25 per page) for every stored registration."""
    records = _snapshot(load_records)
    renderer = IDCardGridRenderer(_resolver(asset_root), layout)
    try:
        content = renderer.render(records)
    except Exception as e:
        _log(f"ID cards failed: {type(e).__name__}: {e}")
        raise ExportError(f"Error generating PDF: {e}") from e
    return ExportResult(content=content, filename=IDCARDS_PDF_NAME, record_count=len(records))
