"""
Registration store: a CSV file of registrations plus an uploads folder for photos.

Rows are kept in insertion order, which is the order used for serial numbers
and card placement in the exports.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from config import UPLOAD_DIR_NAME
from data_loaders import COLUMNS, load_registrations_dataframe, records_from_dataframe
from records import RegistrationRecord, build_record, parse_designations
from utils import step_logger, upload_filename

_log = step_logger("registry")

_EDITABLE = ("name", "cluster", "unit", "designations", "photo_path")


def _row(record: RegistrationRecord) -> dict:
    return {
        "id": record.id or "",
        "name": record.name,
        "cluster": record.cluster,
        "unit": record.unit,
        "designations": record.designations_text,
        "photo_path": record.photo_path or "",
        "created_at": record.created_at.isoformat(),
    }


class RegistrationStore:
    """
    CSV-backed registration store.

    Args:
        csv_path: Registrations file (created on first write)
        asset_root: Directory stored photo paths are relative to
        upload_dir_name: Folder under asset_root for uploaded photos
    """

    def __init__(self, csv_path: Union[str, Path], asset_root: Union[str, Path], upload_dir_name: str = UPLOAD_DIR_NAME):
        self.csv_path = Path(csv_path)
        self.asset_root = Path(asset_root)
        self.upload_dir_name = upload_dir_name

    @property
    def upload_dir(self) -> Path:
        return self.asset_root / self.upload_dir_name

    def list_records(self) -> List[RegistrationRecord]:
        """Full snapshot in stored order."""
        if not self.csv_path.exists():
            return []
        return records_from_dataframe(load_registrations_dataframe(str(self.csv_path)))

    def get(self, record_id: str) -> Optional[RegistrationRecord]:
        return next((r for r in self.list_records() if r.id == record_id), None)

    def _write(self, records: Iterable[RegistrationRecord]) -> None:
        import pandas as pd

        self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        df = pd.DataFrame([_row(r) for r in records], columns=COLUMNS)
        tmp = self.csv_path.with_suffix(self.csv_path.suffix + ".tmp")
        df.to_csv(tmp, index=False)
        tmp.replace(self.csv_path)

    def save_photo(self, data: bytes, original_name: Optional[str]) -> str:
        """Store an uploaded photo; returns its path relative to asset_root."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        now_ms = int(time.time() * 1000)
        filename = upload_filename(original_name, now_ms=now_ms)
        while (self.upload_dir / filename).exists():
            now_ms += 1
            filename = upload_filename(original_name, now_ms=now_ms)
        target = self.upload_dir / filename
        target.write_bytes(data)
        return f"{self.upload_dir_name}/{filename}"

    def register(
        self,
        name: Any,
        cluster: Any,
        unit: Any,
        designations: Any,
        photo_bytes: Optional[bytes] = None,
        photo_filename: Optional[str] = None,
    ) -> RegistrationRecord:
        """
        Validate and store a new registration.
        Raises ValueError("Missing required fields.") if name/cluster/unit/designations are missing.
        """
        # Validate before touching the uploads folder.
        build_record(name, cluster, unit, designations)
        photo_path = self.save_photo(photo_bytes, photo_filename) if photo_bytes else None
        record = build_record(
            name,
            cluster,
            unit,
            designations,
            photo_path=photo_path,
            id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
        )
        records = self.list_records()
        records.append(record)
        self._write(records)
        _log(f"registered {record.name} ({record.id})")
        return record

    def add_many(self, records: Iterable[RegistrationRecord]) -> int:
        """Append already-built records (bulk import). Missing ids are assigned."""
        existing = self.list_records()
        added = [r if r.id else r.with_changes(id=uuid.uuid4().hex) for r in records]
        self._write(existing + added)
        _log(f"imported {len(added)} registration(s)")
        return len(added)

    def update(self, record_id: str, **changes) -> Optional[RegistrationRecord]:
        """Update editable fields; returns the updated record or None if not found."""
        unknown = set(changes) - set(_EDITABLE)
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if "designations" in changes:
            changes["designations"] = parse_designations(changes["designations"])
        for key in ("name", "cluster", "unit"):
            if key in changes and not str(changes[key] or "").strip():
                raise ValueError("Missing required fields.")
        records = self.list_records()
        for i, r in enumerate(records):
            if r.id == record_id:
                records[i] = r.with_changes(**changes)
                self._write(records)
                _log(f"updated {record_id}")
                return records[i]
        return None

    def delete(self, record_id: str) -> Optional[RegistrationRecord]:
        """Remove a registration; returns the deleted record or None if not found."""
        records = self.list_records()
        for i, r in enumerate(records):
            if r.id == record_id:
                deleted = records.pop(i)
                self._write(records)
                _log(f"deleted {record_id}")
                return deleted
        return None
