import pytest

from app.utils.nested_document import base_field, get_path, set_path


@pytest.mark.parametrize(
    "path",
    ["foodAllergies", "foodMenu.day1", "foodMenu.day1.starter"],
)
def test_set_then_get_creates_missing_levels(path):
    document = {}
    set_path(document, path, "Humar")
    assert get_path(document, path) == "Humar"


def test_set_keeps_sibling_leaves():
    document = {"foodMenu": {"day1": "Lamb"}}
    set_path(document, "foodMenu.day2", "Fiskur")
    assert document == {"foodMenu": {"day1": "Lamb", "day2": "Fiskur"}}


def test_set_replaces_non_mapping_intermediate():
    document = {"foodMenu": "Lamb", "drinks": []}
    set_path(document, "foodMenu.day1", "Fiskur")
    set_path(document, "drinks.wine", "Rautt")
    assert document == {"foodMenu": {"day1": "Fiskur"}, "drinks": {"wine": "Rautt"}}


def test_set_returns_same_document():
    document = {}
    assert set_path(document, "a", 1) is document


def test_get_missing_or_non_mapping_intermediate_is_none():
    document = {"foodMenu": "Lamb", "guests": None}
    assert get_path(document, "nothing.here") is None
    assert get_path(document, "foodMenu.day1") is None
    assert get_path(document, "guests.count") is None
    assert get_path(None, "foodMenu") is None


def test_get_does_not_mutate():
    document = {"a": {}}
    get_path(document, "a.b.c")
    assert document == {"a": {}}


def test_base_field():
    assert base_field("foodMenu.day1.starter") == "foodMenu"
    assert base_field("foodAllergies") == "foodAllergies"


def test_numeric_segment_indexes_lists():
    document = {"guests": [{"name": "Jón"}, {"name": "Anna"}]}

    assert get_path(document, "guests.1.name") == "Anna"
    set_path(document, "guests.0.name", "Sigga")
    set_path(document, "guests.1", {"name": "Óli"})

    assert document == {"guests": [{"name": "Sigga"}, {"name": "Óli"}]}


def test_list_write_past_end_pads_with_none():
    document = {"rooms": ["A"]}
    set_path(document, "rooms.2", "C")
    assert document == {"rooms": ["A", None, "C"]}


def test_list_read_out_of_range_or_by_name_is_none():
    document = {"rooms": ["A"]}
    assert get_path(document, "rooms.5") is None
    assert get_path(document, "rooms.first") is None
    assert get_path(document, "rooms.-1") is None
