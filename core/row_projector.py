"""
Row Projector — Flattens interpreted triggers and resolved modules into rows.

The same rows feed two destinations:

  - the console report (ConsoleReport), which shows criteria, recipients and
    workflow labels as discrete list items, and
  - the spreadsheet export (ExportSerializer), which joins them into single
    cells: criteria with "; ", recipients and labels with ", ".

Both presentations are derived from the same CompanyTriggerRow /
LocationTriggerRow objects, so they can only differ in delimiters and markup,
never in content.

Pipeline context:
    Used in Steps 4-5 of the orchestrator pipeline. Input is EntityExtractor
    output plus WorkflowModuleResolver results; output feeds ConsoleReport
    (Step 6) and ExportSerializer (Step 7).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .criteria_interpreter import CriteriaInterpreter
from .models import Trigger
from .workflow_resolver import LocationTriggers

NO_RECIPIENT = "No recipient specified"
NO_SUBJECT = "No subject specified"
NO_CRITERIA = "No criteria specified."

CRITERIA_DELIMITER = "; "
LIST_DELIMITER = ", "

COMPANY_SHEET_COLUMNS = ("Trigger ID", "Criteria", "Email To", "Email Subject")
LOCATION_SHEET_COLUMNS = ("Location", "Module Key", "Emails", "Associated Workflows")


@dataclass
class CompanyTriggerRow:
    index: int
    criteria: List[str] = field(default_factory=list)
    recipients: List[str] = field(default_factory=list)
    subject: Optional[str] = None
    is_error: bool = False


@dataclass
class LocationTriggerRow:
    location_id: str
    location_name: str
    module_key: str
    recipients: List[str] = field(default_factory=list)
    workflow_labels: List[str] = field(default_factory=list)


class RowProjector:
    """Builds report rows from extracted entities.

    Attributes:
        interpreter: Renders trigger criteria against the company's lookups.
        debug: If True, prints row counts.
    """

    def __init__(
        self,
        location_index: Mapping[str, str] = None,
        user_index: Mapping[str, str] = None,
        debug: bool = False,
    ):
        self.interpreter = CriteriaInterpreter(location_index, user_index, debug)
        self.debug = debug

    def company_rows(self, triggers: Sequence[Trigger]) -> List[CompanyTriggerRow]:
        """One row per trigger, in original order. Unparseable triggers keep their slot."""
        rows = []
        for trigger in triggers:
            if trigger.is_error:
                rows.append(CompanyTriggerRow(
                    index=trigger.index,
                    criteria=[trigger.error],
                    is_error=True,
                ))
                continue

            rows.append(CompanyTriggerRow(
                index=trigger.index,
                criteria=self.interpreter.interpret(trigger.criteria),
                recipients=list(trigger.recipients),
                subject=trigger.subject,
            ))

        if self.debug:
            print(f"  Projected {len(rows)} company trigger rows")
        return rows

    def location_rows(self, resolved: Sequence[LocationTriggers]) -> List[LocationTriggerRow]:
        """One row per qualifying email module, grouped by location in input order."""
        rows = []
        for entry in resolved:
            for pairing in entry.pairings:
                rows.append(LocationTriggerRow(
                    location_id=entry.location.id,
                    location_name=entry.location.name,
                    module_key=pairing.module_key,
                    recipients=list(pairing.recipients),
                    workflow_labels=list(pairing.workflow_labels),
                ))

        if self.debug:
            print(f"  Projected {len(rows)} location trigger rows")
        return rows


def company_sheet_row(row: CompanyTriggerRow) -> Dict[str, Any]:
    """Spreadsheet rendition of a company trigger row."""
    if row.is_error:
        return {
            "Trigger ID": row.index,
            "Criteria": CRITERIA_DELIMITER.join(row.criteria),
            "Email To": "",
            "Email Subject": "",
        }
    return {
        "Trigger ID": row.index,
        "Criteria": CRITERIA_DELIMITER.join(row.criteria),
        "Email To": LIST_DELIMITER.join(row.recipients) or NO_RECIPIENT,
        "Email Subject": row.subject or NO_SUBJECT,
    }


def location_sheet_row(row: LocationTriggerRow) -> Dict[str, Any]:
    """Spreadsheet rendition of a location trigger row."""
    return {
        "Location": row.location_name,
        "Module Key": row.module_key,
        "Emails": LIST_DELIMITER.join(row.recipients),
        "Associated Workflows": LIST_DELIMITER.join(row.workflow_labels),
    }


def company_screen_item(row: CompanyTriggerRow) -> Dict[str, Any]:
    """Console rendition of a company trigger row, with list items kept apart."""
    return {
        "title": f"Trigger {row.index}",
        "error": row.criteria[0] if row.is_error else None,
        "criteria": [] if row.is_error else list(row.criteria),
        "recipients": list(row.recipients) or [NO_RECIPIENT],
        "subject": row.subject or NO_SUBJECT,
    }


def location_screen_sections(rows: Sequence[LocationTriggerRow]) -> List[Dict[str, Any]]:
    """Group location rows into one console section per location."""
    sections = []
    by_location = {}
    for row in rows:
        section = by_location.get(row.location_id)
        if section is None:
            section = {"location": row.location_name, "rows": []}
            by_location[row.location_id] = section
            sections.append(section)
        section["rows"].append({
            "module_key": row.module_key,
            "recipients": list(row.recipients),
            "workflow_labels": list(row.workflow_labels),
        })
    return sections
