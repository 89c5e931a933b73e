"""GNACOPS ID formatting: category tiers, region codes, serial padding."""

import json
import logging

import pytest
from django.core.exceptions import ImproperlyConfigured

from memberships.exceptions import UnknownCategory
from memberships.utils import (
    format_gnacops_id,
    get_category_code,
    get_id_tables,
    get_region_code,
    is_prime_membership,
    parse_gnacops_id,
)


def test_institutional_membership_in_greater_accra():
    assert format_gnacops_id("Institutional Membership", "Greater Accra", 7) == "GNC/PM/01/0007"


def test_same_inputs_give_same_id():
    first = format_gnacops_id("Institutional Membership", "Greater Accra", 7)
    second = format_gnacops_id("Institutional Membership", "Greater Accra", 7)
    assert first == second == "GNC/PM/01/0007"


def test_associate_tier_uses_am_code():
    assert format_gnacops_id("Teacher Council", "Ashanti", 23) == "GNC/AM/02/0023"


def test_unknown_region_falls_back_to_00():
    assert format_gnacops_id("Proprietor", "Atlantis", 1) == "GNC/PM/00/0001"


def test_unknown_region_is_logged(caplog, monkeypatch):
    # The app logger does not propagate to root, where caplog listens
    monkeypatch.setattr(logging.getLogger("memberships"), "propagate", True)
    with caplog.at_level(logging.WARNING, logger="memberships.utils"):
        get_region_code("Atlantis")
    assert "Atlantis" in caplog.text


def test_unknown_category_raises():
    with pytest.raises(UnknownCategory) as excinfo:
        format_gnacops_id("Not A Category", "Volta", 1)
    assert excinfo.value.category_name == "Not A Category"


def test_wide_serial_is_not_truncated():
    assert format_gnacops_id("Parent Council", "Central", 10234) == "GNC/AM/05/10234"


def test_serial_zero_pads_to_four_digits():
    assert format_gnacops_id("Service Provider", "Western North", 0) == "GNC/AM/16/0000"


@pytest.mark.parametrize("bad_serial", [-1, "7", 7.0, None, True])
def test_invalid_serial_rejected(bad_serial):
    with pytest.raises(ValueError):
        format_gnacops_id("Proprietor", "Volta", bad_serial)


@pytest.mark.parametrize("name,code", [
    ("Institutional Membership", "PM"),
    ("Proprietor", "PM"),
    ("Teacher Council", "AM"),
    ("Parent Council", "AM"),
    ("Service Provider", "AM"),
    ("Non-Teaching Staff", "AM"),
])
def test_category_codes(name, code):
    assert get_category_code(name) == code


def test_sixteen_regions_with_distinct_codes():
    regions = get_id_tables().regions
    assert len(regions) == 16
    assert sorted(regions.values()) == [f"{n:02d}" for n in range(1, 17)]


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        get_id_tables().regions["Atlantis"] = "17"


def test_is_prime_membership_never_raises():
    assert is_prime_membership("Proprietor")
    assert not is_prime_membership("Teacher Council")
    assert not is_prime_membership("Not A Category")


def test_parse_gnacops_id():
    parts = parse_gnacops_id("GNC/AM/05/10234")
    assert parts.category_code == "AM"
    assert parts.region_code == "05"
    assert parts.serial == 10234


@pytest.mark.parametrize("value", ["", None, "GNC/XX/01/0001", "GNC/PM/1/0001", "GNC/PM/01/7", "GNC/PM/01"])
def test_parse_rejects_malformed_ids(value):
    assert parse_gnacops_id(value) is None


def test_tables_can_be_replaced_from_file(tmp_path, settings):
    tables = tmp_path / "tables.json"
    tables.write_text(json.dumps({
        "categories": {"School Owner": "prime"},
        "regions": {"Greater Accra": "01", "Oti": "15"},
    }))
    settings.GNACOPS_ID_TABLES_FILE = str(tables)
    get_id_tables.cache_clear()

    assert format_gnacops_id("School Owner", "Oti", 3) == "GNC/PM/15/0003"
    with pytest.raises(UnknownCategory):
        get_category_code("Proprietor")


def test_bad_tables_file_is_a_configuration_error(tmp_path, settings):
    tables = tmp_path / "tables.json"
    tables.write_text(json.dumps({"regions": {"Volta": "9"}}))
    settings.GNACOPS_ID_TABLES_FILE = str(tables)
    get_id_tables.cache_clear()

    with pytest.raises(ImproperlyConfigured):
        get_id_tables()
