import re
import time
from pathlib import Path
from typing import Callable, Optional


def upload_filename(original_name: Optional[str], field: str = "photo", now_ms: Optional[int] = None) -> str:
    """'<field>-<epoch ms><ext>', keeping only the extension of the uploaded name."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = Path(original_name or "").suffix.lower()
    if not re.fullmatch(r"\.[a-z0-9]{1,5}", ext):
        ext = ""
    return f"{field}-{now_ms}{ext}"


def step_logger(scope: str) -> Callable[[str], None]:
    """
    Timestamped stdout logger (Streamlit Cloud and CLI both capture stdout).
    Usage: _log = step_logger("cards"); _log("rendered page 1")
    """
    t0 = time.perf_counter()

    def _log(msg: str) -> None:
        print(f"[{scope}] +{time.perf_counter() - t0:.3f}s {msg}", flush=True)

    return _log
