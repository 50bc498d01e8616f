from datetime import datetime, timezone

import pytest
from PIL import Image

from records import RegistrationRecord


@pytest.fixture
def asset_root(tmp_path):
    root = tmp_path / "assets"
    (root / "uploads").mkdir(parents=True)
    return root


@pytest.fixture
def make_photo(asset_root):
    def _make(name="photo-1.png", size=(120, 160), color=(200, 30, 30)):
        path = asset_root / "uploads" / name
        Image.new("RGB", size, color).save(path)
        return f"uploads/{name}"

    return _make


@pytest.fixture
def corrupt_photo(asset_root):
    path = asset_root / "uploads" / "broken.jpg"
    path.write_bytes(b"definitely not a jpeg")
    return "uploads/broken.jpg"


def make_record(i=1, **kwargs):
    fields = {
        "name": f"Participant {i}",
        "cluster": "Kadaba",
        "unit": f"Unit {i}",
        "designations": ("President",),
        "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(kwargs)
    return RegistrationRecord(**fields)


def make_records(n, **kwargs):
    return [make_record(i, **kwargs) for i in range(1, n + 1)]
