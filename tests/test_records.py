import pytest

from records import RegistrationRecord, build_record, parse_designations


def test_parse_designations_from_string():
    assert parse_designations(" President, Secretary ,, ") == ("President", "Secretary")


def test_parse_designations_from_list_and_empty():
    assert parse_designations(["Treasurer", " "]) == ("Treasurer",)
    assert parse_designations(None) == ()
    assert parse_designations(float("nan")) == ()


def test_empty_designations_render_as_empty_string():
    record = RegistrationRecord(name="A", cluster="C", unit="U", designations=[])
    assert record.designations == ()
    assert record.designations_text == ""


def test_affiliation_text():
    record = RegistrationRecord(name="A", cluster="Kadaba", unit="Uppinangady")
    assert record.affiliation_text == "Kadaba – Uppinangady"


def test_blank_photo_path_is_none():
    assert RegistrationRecord(name="A", cluster="C", unit="U", photo_path="").photo_path is None


def test_name_required():
    with pytest.raises(ValueError):
        RegistrationRecord(name="  ", cluster="C", unit="U")


@pytest.mark.parametrize(
    "name, cluster, unit, designations",
    [
        ("", "C", "U", "President"),
        ("A", "", "U", "President"),
        ("A", "C", None, "President"),
        ("A", "C", "U", None),
        ("A", "C", "U", ""),
    ],
)
def test_build_record_missing_fields(name, cluster, unit, designations):
    with pytest.raises(ValueError, match="Missing required fields."):
        build_record(name, cluster, unit, designations)


def test_build_record_accepts_empty_list_of_designations():
    record = build_record("A", "C", "U", [])
    assert record.designations == ()


def test_literal_nan_text_is_a_designation():
    assert parse_designations("nan, None") == ("nan", "None")
