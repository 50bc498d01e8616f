import pytest

import exports
from conftest import make_record, make_records
from exports import ExportError, export_idcards_pdf, export_registrations_pdf


def test_registrations_export(asset_root):
    result = export_registrations_pdf(lambda: make_records(3), asset_root=asset_root)
    assert result.filename == "registrations.pdf"
    assert result.mimetype == "application/pdf"
    assert result.record_count == 3
    assert result.content.startswith(b"%PDF")


def test_idcards_export(asset_root):
    result = export_idcards_pdf(lambda: make_records(26), asset_root=asset_root)
    assert result.filename == "idcards.pdf"
    assert result.record_count == 26
    assert result.content.startswith(b"%PDF")


def test_empty_snapshot_still_produces_documents(asset_root):
    assert export_registrations_pdf(list, asset_root=asset_root).content.startswith(b"%PDF")
    assert export_idcards_pdf(list, asset_root=asset_root).content.startswith(b"%PDF")


def test_snapshot_read_failure_is_fatal(asset_root):
    def broken():
        raise OSError("store unavailable")

    with pytest.raises(ExportError, match="Could not read registrations") as exc:
        export_registrations_pdf(broken, asset_root=asset_root)
    assert isinstance(exc.value.__cause__, OSError)


def test_render_failure_is_fatal(asset_root, monkeypatch):
    def explode(self, records):
        raise IOError("disk full")

    monkeypatch.setattr(exports.IDCardGridRenderer, "render", explode)
    with pytest.raises(ExportError, match="Error generating PDF"):
        export_idcards_pdf(lambda: make_records(1), asset_root=asset_root)


def test_snapshot_is_read_once(asset_root):
    calls = []

    def source():
        calls.append(1)
        return iter(make_records(2))

    result = export_registrations_pdf(source, asset_root=asset_root)
    assert calls == [1]
    assert result.record_count == 2


def test_overlong_photo_path_renders_placeholder(asset_root):
    long_path = "uploads/" + "a" * 300 + ".jpg"
    result = export_registrations_pdf(lambda: [make_record(1, photo_path=long_path)], asset_root=asset_root)
    assert result.record_count == 1
    assert result.content.startswith(b"%PDF")
    cards = export_idcards_pdf(lambda: [make_record(1, photo_path=long_path)], asset_root=asset_root)
    assert cards.content.startswith(b"%PDF")
