import re
from io import BytesIO

from reportlab.pdfgen import canvas

from assets import AssetResolver
from conftest import make_record, make_records
from layout import DEFAULT_TABLE_LAYOUT
from table_renderer import RegistrationTableRenderer, render_registration_table


def _page_count(pdf: bytes) -> int:
    return len(re.findall(rb"/Type /Page\b", pdf))


def _draw(asset_root, records, invariant=False):
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=DEFAULT_TABLE_LAYOUT.page_size, invariant=int(invariant))
    result = RegistrationTableRenderer(AssetResolver(asset_root)).draw(c, records)
    c.save()
    return result, buf.getvalue()


def test_empty_input_renders_title_and_header_only(asset_root):
    result, pdf = _draw(asset_root, [])
    assert result.pages == 1
    assert result.rows == ()
    assert pdf.startswith(b"%PDF")
    assert _page_count(pdf) == 1


def test_rows_fill_first_page_before_breaking(asset_root):
    per_page = DEFAULT_TABLE_LAYOUT.rows_per_page
    result, pdf = _draw(asset_root, make_records(per_page))
    assert result.pages == 1

    result, pdf = _draw(asset_root, make_records(per_page + 1))
    assert result.pages == 2
    assert _page_count(pdf) == 2
    assert [r.page for r in result.rows] == [1] * per_page + [2]


def test_no_row_is_split_across_pages(asset_root):
    lay = DEFAULT_TABLE_LAYOUT
    result, _ = _draw(asset_root, make_records(37))
    for row in result.rows:
        assert row.top >= lay.body_top
        assert row.top + lay.row_height <= lay.bottom_limit
    # Each new page starts right under the repeated header.
    firsts = [r for prev, r in zip(result.rows, result.rows[1:]) if r.page != prev.page]
    assert firsts
    assert all(r.top == lay.body_top for r in firsts)


def test_serials_are_continuous_across_pages(asset_root):
    result, _ = _draw(asset_root, make_records(25))
    assert [r.serial for r in result.rows] == list(range(1, 26))
    assert result.pages == 3


def test_photo_is_used_when_present(asset_root, make_photo):
    records = [make_record(1, photo_path=make_photo()), make_record(2)]
    result, _ = _draw(asset_root, records)
    assert [r.photo_found for r in result.rows] == [True, False]


def test_missing_and_unreadable_photos_render_identically(asset_root, corrupt_photo):
    _, missing_path = _draw(asset_root, [make_record(1, photo_path=None)], invariant=True)
    _, missing_file = _draw(asset_root, [make_record(1, photo_path="uploads/gone.jpg")], invariant=True)
    _, unreadable = _draw(asset_root, [make_record(1, photo_path=corrupt_photo)], invariant=True)
    assert missing_path == missing_file == unreadable


def test_placeholder_drawn_for_each_missing_photo(asset_root, corrupt_photo, monkeypatch):
    calls = []
    monkeypatch.setattr(
        RegistrationTableRenderer,
        "_draw_placeholder",
        lambda self, c, x, top, width: calls.append((x, width)),
    )
    records = [make_record(1), make_record(2, photo_path=corrupt_photo), make_record(3, photo_path="uploads/x.png")]
    _draw(asset_root, records)
    lay = DEFAULT_TABLE_LAYOUT
    assert calls == [(lay.column_x("photo"), lay.column_width("photo"))] * 3


def test_empty_designations_render(asset_root):
    result, pdf = _draw(asset_root, [make_record(1, designations=())])
    assert result.pages == 1
    assert pdf.startswith(b"%PDF")


def test_long_text_is_wrapped_inside_the_row(asset_root):
    record = make_record(1, name="A Very Long Participant Name " * 6, designations=("President",) * 12)
    result, _ = _draw(asset_root, [record])
    assert len(result.rows) == 1


def test_render_returns_pdf_bytes(asset_root):
    pdf = render_registration_table(make_records(3), AssetResolver(asset_root))
    assert pdf.startswith(b"%PDF")
    assert pdf.rstrip().endswith(b"%%EOF")
