"""
Central configuration for the registration backend.

Keep runtime-safe (no secrets). Layout values are fixed so every printed
report and ID card batch looks the same.
"""

import os
from pathlib import Path

_APP_DIR = Path(__file__).resolve().parent

# Storage (env overrides for deployments)
ASSET_ROOT = Path(os.environ.get("REGISTRATION_ASSET_ROOT", str(_APP_DIR)))
DATA_DIR = Path(os.environ.get("REGISTRATION_DATA_DIR", str(ASSET_ROOT / "data")))
UPLOAD_DIR_NAME = "uploads"
UPLOAD_DIR = Path(os.environ.get("REGISTRATION_UPLOAD_DIR", str(ASSET_ROOT / UPLOAD_DIR_NAME)))
REGISTRATIONS_CSV = DATA_DIR / "registrations.csv"
ALLOWED_PHOTO_TYPES = ["png", "jpg", "jpeg"]

# Export filenames
REGISTRATIONS_PDF_NAME = "registrations.pdf"
IDCARDS_PDF_NAME = "idcards.pdf"

# Registration table (A4 portrait)
ORGANIZATION_NAME = "SKSSF Kadaba Zone"
EVENT_NAME = "Annual Cabinet-Meet 2025"
SECTION_LABEL = "Registration Data"
TABLE_MARGIN = 50
TABLE_COLUMNS = (
    ("sn", "S/N", 30),
    ("photo", "Photo", 50),
    ("name", "Name", 90),
    ("cluster", "Cluster", 60),
    ("unit", "Unit", 60),
    ("designations", "Designations", 120),
    ("signature", "Signature", 60),
)
TABLE_HEADER_HEIGHT = 20
TABLE_ROW_HEIGHT = 60
TABLE_RULE_COLOR = "#999999"

# ID cards (A3 portrait, 5 x 5)
CARD_MARGIN = 20
CARD_COLUMNS = 5
CARD_ROWS = 5
CARD_WIDTH_CM = 5.9
CARD_HEIGHT_CM = 8.4
CARD_DPI = 66  # page units per inch; 5 x 5 cards of 5.9 x 8.4 cm must fit on A3
CARD_BACKGROUND = "#ECFAE5"
CARD_TEMPLATE = "public/idcard-template.png"
