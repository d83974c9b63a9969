"""Tests for core.criteria_interpreter."""

import pytest

from core.criteria_interpreter import CriteriaInterpreter, inspection_type, interpret
from core.models import to_criteria

LOCATIONS = {"7": "Downtown Depot"}
USERS = {"3": "Jo Smith—jo@acme.com"}


def run(criteria):
    return interpret(criteria, LOCATIONS, USERS)


@pytest.mark.parametrize("value, expected", [
    (False, "Inspection Type: Checkout"),
    (True, "Inspection Type: Return"),
    (None, "Update"),
    ("yes", "Inspection Type: Unhandled"),
    (0, "Inspection Type: Unhandled"),
    ({"$eq": True}, "Inspection Type: Unhandled"),
])
def test_check_in(value, expected):
    assert run({"check_in": value}) == [expected]


def test_inspection_type_labels():
    assert inspection_type(False) == "Checkout"
    assert inspection_type(True) == "Return"
    assert inspection_type(None) == "Update"
    assert inspection_type(1) == "Unhandled"


def test_or_check_in():
    result = run({"$or": [{"check_in": False}, {"check_in": True}]})
    assert result == ["Inspection Type: Checkout, Return"]


def test_or_includes_update_and_unhandled():
    result = run({"$or": [{"check_in": None}, {"check_in": "x"}]})
    assert result == ["Inspection Type: Update, Unhandled"]


def test_or_ignores_other_keys():
    result = run({"$or": [{"make": "Ford"}, {"check_in": True}, "junk", {}]})
    assert result == ["Inspection Type: Return"]


def test_or_without_list_uses_default():
    assert run({"$or": "oops"}) == ["$or: oops"]


def test_user_found():
    assert run({"user_id": "3"}) == ["User: Jo Smith—jo@acme.com"]


def test_user_numeric_id_found():
    assert run({"user_id": 3}) == ["User: Jo Smith—jo@acme.com"]


def test_user_missing():
    assert run({"user_id": "X"}) == ["User: ID X (INACTIVE USER ACCOUNT)"]


def test_location_found():
    assert run({"location_id": 7}) == ["Location: Downtown Depot"]


def test_location_missing():
    assert run({"location_id": 12}) == ["Location: ID 12"]


def test_location_operator_map_resolves_operand():
    assert run({"location_id": {"$eq": "7"}}) == ["Location: Downtown Depot"]


def test_notations_prefix_stripped():
    assert run({"notations.damage": {"$eq": "yes"}}) == ["damage: yes"]


def test_default_scalar_and_operator():
    result = run({"make": "Ford", "year": {"$gte": 2020}})
    assert result == ["make: Ford", "year: 2020"]


def test_default_stringification():
    result = run({"flag": True, "missing": None, "miles": 10.0, "tags": ["a", "b"], "empty": {}})
    assert result == ["flag: true", "missing: null", "miles: 10", "tags: a,b", "empty: {}"]


def test_order_preserved():
    result = run({"location_id": 7, "check_in": False, "user_id": "3"})
    assert result == [
        "Location: Downtown Depot",
        "Inspection Type: Checkout",
        "User: Jo Smith—jo@acme.com",
    ]


def test_accepts_decoded_criteria():
    interpreter = CriteriaInterpreter(LOCATIONS, USERS)
    assert interpreter.interpret(to_criteria({"check_in": True})) == ["Inspection Type: Return"]


def test_empty_criteria():
    assert run({}) == []


def test_without_lookup_tables():
    interpreter = CriteriaInterpreter()
    assert interpreter.interpret({"user_id": 1, "location_id": 2}) == [
        "User: ID 1 (INACTIVE USER ACCOUNT)",
        "Location: ID 2",
    ]


def test_missing_user_debug_warning(capsys):
    CriteriaInterpreter(debug=True).interpret({"user_id": "9"})
    assert "user ID 9 not found" in capsys.readouterr().out
