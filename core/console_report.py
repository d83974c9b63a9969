"""
Console Report — Prints the company and location trigger tables.

Company-level triggers are printed as one block per trigger:

    Trigger 1
      Criteria:
        - Location: Depot
        - Inspection Type: Checkout
      To: ops@acme.com, fleet@acme.com
      Subject: Checkout complete

Location-level triggers are printed as one table per location with the
columns Module Key | Emails | Associated Workflows. Workflow labels are
stacked one per line inside their cell.
"""

from typing import List, Sequence

from .row_projector import (
    CompanyTriggerRow,
    LocationTriggerRow,
    NO_CRITERIA,
    company_screen_item,
    location_screen_sections,
)

LOCATION_TABLE_HEADERS = ("Module Key", "Emails", "Associated Workflows")


def format_table(headers: Sequence[str], rows: Sequence[Sequence[List[str]]]) -> List[str]:
    """Lay out a text table whose cells may span several lines.

    Args:
        headers: Column titles.
        rows: Each row is a sequence of cells; each cell is a list of lines.

    Returns:
        The table as a list of text lines.
    """
    widths = [len(header) for header in headers]
    for row in rows:
        for col, cell in enumerate(row):
            for line in cell:
                widths[col] = max(widths[col], len(line))

    def render(cells):
        return "| " + " | ".join(text.ljust(widths[col]) for col, text in enumerate(cells)) + " |"

    separator = "+-" + "-+-".join("-" * width for width in widths) + "-+"
    lines = [separator, render(headers), separator]
    for row in rows:
        height = max([len(cell) for cell in row] + [1])
        for offset in range(height):
            lines.append(render([cell[offset] if offset < len(cell) else "" for cell in row]))
        lines.append(separator)
    return lines


class ConsoleReport:
    """Renders report rows to stdout."""

    def print_report(
        self,
        company_name: str,
        company_rows: Sequence[CompanyTriggerRow],
        location_rows: Sequence[LocationTriggerRow],
    ):
        print(f"\nCompany: {company_name}")
        self.print_company_triggers(company_rows)
        self.print_location_triggers(location_rows)

    def print_company_triggers(self, rows: Sequence[CompanyTriggerRow]):
        print("\nCompany-Level Triggers")
        print("-" * 22)
        if not rows:
            print("No company-level triggers found.")
            return

        for row in rows:
            item = company_screen_item(row)
            print(f"\n{item['title']}")
            if item["error"]:
                print(f"  {item['error']}")
                continue

            print("  Criteria:")
            if item["criteria"]:
                for criterion in item["criteria"]:
                    print(f"    - {criterion}")
            else:
                print(f"    {NO_CRITERIA}")
            print(f"  To: {', '.join(item['recipients'])}")
            print(f"  Subject: {item['subject']}")

    def print_location_triggers(self, rows: Sequence[LocationTriggerRow]):
        print("\nLocation-Level Triggers")
        print("-" * 23)
        sections = location_screen_sections(rows)
        if not sections:
            print("No active locations with triggers found.")
            return

        for section in sections:
            print(f"\nLocation: {section['location']}")
            table_rows = [
                (
                    [entry["module_key"]],
                    [", ".join(entry["recipients"])],
                    list(entry["workflow_labels"]),
                )
                for entry in section["rows"]
            ]
            for line in format_table(LOCATION_TABLE_HEADERS, table_rows):
                print(line)
