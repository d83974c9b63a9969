"""Tests for core.row_projector."""

import pytest

from core.row_projector import (
    NO_RECIPIENT,
    NO_SUBJECT,
    CompanyTriggerRow,
    LocationTriggerRow,
    RowProjector,
    company_screen_item,
    company_sheet_row,
    location_screen_sections,
    location_sheet_row,
)
from core.workflow_resolver import WorkflowModuleResolver


@pytest.fixture
def projector(entities):
    return RowProjector(entities["location_index"], entities["user_index"])


@pytest.fixture
def company_rows(projector, entities):
    return projector.company_rows(entities["triggers"])


@pytest.fixture
def location_rows(projector, entities):
    reportable = [loc for loc in entities["locations"] if loc.is_reportable]
    resolved = WorkflowModuleResolver().resolve_locations(reportable)
    return projector.location_rows(resolved)


def test_one_row_per_trigger_in_order(company_rows):
    assert [row.index for row in company_rows] == [1, 2, 3, 4]


def test_company_row_content(company_rows):
    first = company_rows[0]
    assert first.criteria == ["Location: Downtown Depot", "Inspection Type: Checkout"]
    assert first.recipients == ["ops@acme.com", "fleet@acme.com"]
    assert first.subject == "Checkout complete"
    assert first.is_error is False


def test_company_row_special_keys(company_rows):
    assert company_rows[2].criteria == [
        "User: Jo Smith—jo@acme.com",
        "Inspection Type: Checkout, Return",
        "damage: yes",
    ]
    assert company_rows[3].criteria == ["User: ID 99 (INACTIVE USER ACCOUNT)", "Update"]


def test_unparseable_trigger_keeps_its_row(company_rows):
    error_row = company_rows[1]
    assert error_row.is_error
    assert error_row.criteria == ["Error parsing trigger data."]
    assert not company_rows[2].is_error


def test_company_sheet_row_joins():
    row = CompanyTriggerRow(1, ["a: 1", "b: 2"], ["x@y.com", "z@y.com"], "Hi")
    assert company_sheet_row(row) == {
        "Trigger ID": 1,
        "Criteria": "a: 1; b: 2",
        "Email To": "x@y.com, z@y.com",
        "Email Subject": "Hi",
    }


def test_company_sheet_row_placeholders():
    row = CompanyTriggerRow(2, [], [], None)
    sheet = company_sheet_row(row)
    assert sheet["Criteria"] == ""
    assert sheet["Email To"] == NO_RECIPIENT
    assert sheet["Email Subject"] == NO_SUBJECT


def test_company_sheet_row_error():
    row = CompanyTriggerRow(3, ["Error parsing trigger data."], is_error=True)
    assert company_sheet_row(row) == {
        "Trigger ID": 3,
        "Criteria": "Error parsing trigger data.",
        "Email To": "",
        "Email Subject": "",
    }


def test_company_screen_item_placeholders():
    item = company_screen_item(CompanyTriggerRow(2, ["a: 1"], [], None))
    assert item["title"] == "Trigger 2"
    assert item["recipients"] == [NO_RECIPIENT]
    assert item["subject"] == NO_SUBJECT
    assert item["error"] is None


def test_company_screen_item_error():
    item = company_screen_item(CompanyTriggerRow(3, ["Error parsing trigger data."], is_error=True))
    assert item["error"] == "Error parsing trigger data."
    assert item["criteria"] == []


def test_screen_and_sheet_carry_same_values(company_rows):
    for row in company_rows:
        if row.is_error:
            continue
        screen = company_screen_item(row)
        sheet = company_sheet_row(row)
        assert "; ".join(screen["criteria"]) == sheet["Criteria"]
        assert ", ".join(screen["recipients"]) == sheet["Email To"]
        assert screen["subject"] == sheet["Email Subject"]


def test_location_rows(location_rows):
    assert [(row.location_name, row.module_key) for row in location_rows] == [
        ("Downtown Depot", "E1"),
        ("Harbor", "E3"),
    ]


def test_location_sheet_row():
    row = LocationTriggerRow("7", "Depot", "E1", ["a@x.com", "b@x.com"], ["Damage", "Fuel"])
    assert location_sheet_row(row) == {
        "Location": "Depot",
        "Module Key": "E1",
        "Emails": "a@x.com, b@x.com",
        "Associated Workflows": "Damage, Fuel",
    }


def test_location_screen_sections_group_by_location():
    rows = [
        LocationTriggerRow("7", "Depot", "E1", ["a@x.com"], ["A"]),
        LocationTriggerRow("9", "Harbor", "E3", ["h@x.com"], ["B"]),
        LocationTriggerRow("7", "Depot", "E2", ["c@x.com"], ["C", "D"]),
    ]
    sections = location_screen_sections(rows)
    assert [s["location"] for s in sections] == ["Depot", "Harbor"]
    assert [r["module_key"] for r in sections[0]["rows"]] == ["E1", "E2"]
    assert sections[0]["rows"][1]["workflow_labels"] == ["C", "D"]


def test_location_screen_and_sheet_carry_same_values(location_rows):
    sections = location_screen_sections(location_rows)
    screen_entries = [
        (section["location"], entry)
        for section in sections
        for entry in section["rows"]
    ]
    for (location_name, entry), row in zip(screen_entries, location_rows):
        sheet = location_sheet_row(row)
        assert sheet["Location"] == location_name
        assert sheet["Module Key"] == entry["module_key"]
        assert sheet["Emails"] == ", ".join(entry["recipients"])
        assert sheet["Associated Workflows"] == ", ".join(entry["workflow_labels"])
