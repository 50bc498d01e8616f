"""
Lightweight data loading helpers.

Important: Keep imports light at module import time (Streamlit Cloud startup).
We import pandas only inside functions.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from records import RegistrationRecord, parse_designations

COLUMNS = ["id", "name", "cluster", "unit", "designations", "photo_path", "created_at"]


def _find_column(df: Any, exact: Optional[str], *subs) -> Optional[str]:
    """Find column by exact name or by substrings (all must match, case-insensitive)."""
    df_cols = [str(c).strip() for c in df.columns]
    if exact and exact in df_cols:
        return exact
    low = exact.lower() if exact else ""
    for c in df.columns:
        cs = str(c).strip()
        if exact and cs.lower() == low:
            return c
        if subs and all(s.lower() in cs.lower() for s in subs):
            return c
    return None


def _clean(v: Any) -> str:
    if v is None or (isinstance(v, float) and str(v) == "nan"):
        return ""
    return str(v).strip()


def _read_table(path: str, sheet: str) -> Any:
    import pandas as pd

    suf = Path(path).suffix.lower()
    if suf in (".xlsx", ".xls"):
        try:
            return pd.read_excel(path, sheet_name=sheet, dtype=str)
        except ImportError as e:
            if "openpyxl" in str(e).lower():
                raise ImportError(
                    "Reading Excel requires openpyxl. Install it with:\n  pip install openpyxl\n"
                    "Or: pip install -e ."
                ) from e
            raise
    if suf == ".csv":
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    raise ValueError(f"Unsupported file type '{suf}'. Use .csv or .xlsx.")


def load_registrations_dataframe(path: str, sheet: str = "Sheet1") -> Any:
    """
    Load registrations from Excel or CSV into a DataFrame with columns:
    id, name, cluster, unit, designations, photo_path, created_at.

    Column headers are matched loosely ("Full Name", "Cluster Name", "Photo URL", ...).
    Rows missing name, cluster or unit are skipped and counted in
    df.attrs["load_stats"].
    """
    import pandas as pd

    df = _read_table(path, sheet)
    df.columns = [str(c).strip() for c in df.columns]

    name_col = (
        _find_column(df, "name")
        or _find_column(df, "Full Name")
        or _find_column(df, None, "name")
    )
    cluster_col = _find_column(df, "cluster") or _find_column(df, None, "cluster")
    unit_col = _find_column(df, "unit") or _find_column(df, None, "unit")
    if not name_col or not cluster_col or not unit_col:
        raise ValueError(
            "Could not find name, cluster and unit columns. "
            f"Columns: {list(df.columns)}"
        )
    designations_col = _find_column(df, "designations") or _find_column(df, None, "designation")
    photo_col = (
        _find_column(df, "photo_path")
        or _find_column(df, "photoUrl")
        or _find_column(df, None, "photo")
    )
    created_col = _find_column(df, "created_at") or _find_column(df, "createdAt") or _find_column(df, None, "created")
    id_col = _find_column(df, "id") or _find_column(df, "_id")

    total_rows = len(df)
    skipped_missing_fields = 0
    rows = []
    for _, r in df.iterrows():
        name = _clean(r.get(name_col))
        cluster = _clean(r.get(cluster_col))
        unit = _clean(r.get(unit_col))
        if not name or not cluster or not unit:
            skipped_missing_fields += 1
            continue
        rows.append(
            {
                "id": _clean(r.get(id_col)) if id_col else "",
                "name": name,
                "cluster": cluster,
                "unit": unit,
                "designations": ", ".join(parse_designations(_clean(r.get(designations_col)) if designations_col else "")),
                "photo_path": _clean(r.get(photo_col)) if photo_col else "",
                "created_at": _clean(r.get(created_col)) if created_col else "",
            }
        )

    out = pd.DataFrame(rows, columns=COLUMNS)
    out.attrs["load_stats"] = {
        "source_rows": total_rows,
        "loaded_rows": len(out),
        "skipped_missing_fields": skipped_missing_fields,
    }
    return out


def _parse_created(value: str) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(timezone.utc)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def records_from_dataframe(df: Any) -> List[RegistrationRecord]:
    """DataFrame (canonical columns) -> records, preserving row order."""
    records = []
    for r in df.to_dict(orient="records"):
        records.append(
            RegistrationRecord(
                name=_clean(r.get("name")),
                cluster=_clean(r.get("cluster")),
                unit=_clean(r.get("unit")),
                designations=parse_designations(_clean(r.get("designations"))),
                photo_path=_clean(r.get("photo_path")) or None,
                created_at=_parse_created(_clean(r.get("created_at"))),
                id=_clean(r.get("id")) or None,
            )
        )
    return records


def load_registrations(path: str, sheet: str = "Sheet1") -> List[RegistrationRecord]:
    return records_from_dataframe(load_registrations_dataframe(path, sheet=sheet))
