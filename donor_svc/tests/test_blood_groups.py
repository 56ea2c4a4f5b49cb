"""
Tests for the blood group registry.
"""
import pytest

from core.blood_groups import (
    get_blood_group,
    get_compatible_donors,
    get_marker_color,
    is_valid_blood_group,
    list_blood_groups,
    normalize_blood_group,
)


def _names():
    return [group.name for group in list_blood_groups()]


def test_registry_has_eight_groups():
    assert len(list_blood_groups()) == 8
    assert len(set(_names())) == 8


@pytest.mark.parametrize("raw,expected", [
    ("ab+", "AB+"),
    (" o- ", "O-"),
    ("B +", "B+"),
    ("", ""),
    (None, ""),
])
def test_normalize_blood_group(raw, expected):
    assert normalize_blood_group(raw) == expected


def test_is_valid_blood_group():
    assert is_valid_blood_group("A+")
    assert is_valid_blood_group("a-")
    assert not is_valid_blood_group("C+")
    assert not is_valid_blood_group("Any")
    assert not is_valid_blood_group(None)


def test_universal_donor_and_recipient():
    assert set(get_blood_group("O-").can_donate_to) == set(_names())
    assert set(get_compatible_donors("AB+")) == set(_names())
    assert get_compatible_donors("O-") == ("O-",)


def test_compatible_donors_for_a_positive():
    assert set(get_compatible_donors("A+")) == {"O-", "O+", "A-", "A+"}


def test_unknown_group():
    assert get_blood_group("X") is None
    assert get_compatible_donors("X") == ()
    assert get_marker_color("X") == "#546E7A"
    assert get_marker_color("O+").startswith("#")
