import io

import pytest
from PIL import Image

from registry import RegistrationStore


def _png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (20, 20), (0, 0, 255)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def store(tmp_path, asset_root):
    return RegistrationStore(tmp_path / "data" / "registrations.csv", asset_root)


def test_empty_store(store):
    assert store.list_records() == []


def test_register_without_photo(store):
    record = store.register("Ali", "Kadaba", "Alankar", "President, Secretary")
    assert record.id
    assert record.photo_path is None
    assert record.designations == ("President", "Secretary")
    assert store.list_records() == [record]


def test_register_with_photo_saves_upload(store, asset_root):
    record = store.register("Ali", "Kadaba", "Alankar", ["President"], photo_bytes=_png_bytes(), photo_filename="me.PNG")
    assert record.photo_path.startswith("uploads/photo-")
    assert record.photo_path.endswith(".png")
    assert (asset_root / record.photo_path).read_bytes() == _png_bytes()


def test_register_missing_fields_writes_nothing(store, asset_root):
    with pytest.raises(ValueError, match="Missing required fields."):
        store.register("Ali", "", "Alankar", "President", photo_bytes=_png_bytes(), photo_filename="me.png")
    assert list((asset_root / "uploads").iterdir()) == []
    assert not store.csv_path.exists()


def test_records_keep_insertion_order(store):
    names = ["C", "A", "B"]
    for n in names:
        store.register(n, "Cluster", "Unit", "Member")
    assert [r.name for r in store.list_records()] == names


def test_empty_designations_round_trip(store):
    record = store.register("Ali", "Kadaba", "Alankar", [])
    assert store.get(record.id).designations == ()


def test_update(store):
    record = store.register("Ali", "Kadaba", "Alankar", "President")
    updated = store.update(record.id, unit="Kalenjimale", designations="Treasurer, Member")
    assert updated.unit == "Kalenjimale"
    assert updated.designations == ("Treasurer", "Member")
    assert updated.created_at == record.created_at
    assert store.get(record.id) == updated


def test_update_rejects_blank_and_unknown_fields(store):
    record = store.register("Ali", "Kadaba", "Alankar", "President")
    with pytest.raises(ValueError):
        store.update(record.id, name=" ")
    with pytest.raises(ValueError):
        store.update(record.id, created_at="yesterday")


def test_update_and_delete_missing_id(store):
    assert store.update("nope", name="X") is None
    assert store.delete("nope") is None


def test_delete(store):
    keep = store.register("Keep", "C", "U", "M")
    gone = store.register("Gone", "C", "U", "M")
    assert store.delete(gone.id) == gone
    assert store.list_records() == [keep]


def test_unique_upload_names(store):
    first = store.save_photo(b"a", "a.jpg")
    second = store.save_photo(b"b", "b.jpg")
    assert first != second


def test_literal_none_and_nan_values_round_trip(store):
    record = store.register("Ali", "Kadaba", "None", "NaN")
    records = store.list_records()
    assert len(records) == 1
    assert records[0].id == record.id
    assert records[0].unit == "None"
    assert records[0].designations == ("NaN",)
