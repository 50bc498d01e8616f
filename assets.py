"""
Asset resolution for stored images (participant photos, card template).

`AssetResolver.resolve` never raises for a missing or broken file: it returns an
`ImageAsset` tagged FOUND / NOT_FOUND / DECODE_ERROR, and renderers treat every
non-FOUND status the same way (placeholder).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from PIL import Image
from reportlab.lib.utils import ImageReader

from utils import step_logger

_log = step_logger("assets")


class AssetStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    DECODE_ERROR = "decode_error"


@dataclass(frozen=True)
class ImageAsset:
    status: AssetStatus
    path: Optional[str] = None
    reader: Optional[Any] = None
    width: int = 0
    height: int = 0

    @property
    def found(self) -> bool:
        return self.status is AssetStatus.FOUND


NOT_FOUND = ImageAsset(AssetStatus.NOT_FOUND)


class AssetResolver:
    """Maps stored relative paths (e.g. "uploads/photo-123.jpg") to decoded images."""

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir).resolve()

    def locate(self, relative_path: Optional[str]) -> Optional[Path]:
        """Absolute path for an existing file under base_dir, else None."""
        rel = (relative_path or "").strip()
        if not rel:
            return None
        try:
            candidate = (self.base_dir / rel).resolve()
            # Stored paths must stay inside the asset root.
            if self.base_dir not in candidate.parents:
                return None
            if not candidate.is_file():
                return None
        except (OSError, ValueError):
            # Over-long names, embedded NUL bytes and similar unusable paths.
            return None
        return candidate

    def resolve(self, relative_path: Optional[str]) -> ImageAsset:
        path = self.locate(relative_path)
        if path is None:
            return ImageAsset(AssetStatus.NOT_FOUND, path=relative_path or None)
        try:
            with Image.open(path) as img:
                img.load()
                rgb = img.convert("RGB") if img.mode != "RGB" else img.copy()
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            _log(f"could not decode {relative_path}: {type(e).__name__}: {e}")
            return ImageAsset(AssetStatus.DECODE_ERROR, path=relative_path)
        return ImageAsset(
            AssetStatus.FOUND,
            path=relative_path,
            reader=ImageReader(rgb),
            width=rgb.width,
            height=rgb.height,
        )
