"""
Registration record model shared by the store, the loaders and both renderers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Tuple


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_designations(value: Any) -> Tuple[str, ...]:
    """
    Normalize designations into a tuple of strings.
    - "Secretary, Treasurer" -> ("Secretary", "Treasurer")
    - lists/tuples are taken as-is (items stripped, blanks dropped)
    - None / NaN -> ()
    """
    if value is None or (isinstance(value, float) and str(value) == "nan"):
        return ()
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        items = [value]
    return tuple(s for s in (str(i).strip() for i in items) if s)


@dataclass(frozen=True)
class RegistrationRecord:
    """One participant registration. Read-only input to rendering."""

    name: str
    cluster: str
    unit: str
    designations: Tuple[str, ...] = ()
    photo_path: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    id: Optional[str] = None

    def __post_init__(self):
        if not (self.name or "").strip():
            raise ValueError("Registration name must not be empty.")
        # Accept lists/strings from callers; store an immutable tuple.
        object.__setattr__(self, "designations", parse_designations(self.designations))
        if not self.photo_path:
            object.__setattr__(self, "photo_path", None)

    @property
    def designations_text(self) -> str:
        return ", ".join(self.designations)

    @property
    def affiliation_text(self) -> str:
        return f"{self.cluster} – {self.unit}"

    def with_changes(self, **changes) -> "RegistrationRecord":
        return replace(self, **changes)


def build_record(
    name: Any,
    cluster: Any,
    unit: Any,
    designations: Any,
    photo_path: Optional[str] = None,
    **extra,
) -> RegistrationRecord:
    """
    Validate raw registration input and build a record.
    Raises ValueError("Missing required fields.") when any required field is blank.
    """
    name = str(name or "").strip()
    cluster = str(cluster or "").strip()
    unit = str(unit or "").strip()
    if not name or not cluster or not unit or designations is None or designations == "":
        raise ValueError("Missing required fields.")
    return RegistrationRecord(
        name=name,
        cluster=cluster,
        unit=unit,
        designations=parse_designations(designations),
        photo_path=photo_path or None,
        **extra,
    )
