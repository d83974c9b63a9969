"""
Trigger Report Orchestrator — Pipeline coordination for the email trigger report.

This module ties together all other modules (Record360Client, EntityExtractor,
WorkflowModuleResolver, RowProjector, ConsoleReport, ExportSerializer) into a
sequential 7-step workflow:

  Step 1: AUTHENTICATION
      Logs in with RECORD360_USERNAME / RECORD360_PASSWORD, unless a token is
      already configured through RECORD360_API_TOKEN.

  Step 2: GRAPHQL EXTRACTION
      Fetches the company by name with its triggers, and walks the locations
      and users connections until every page is collected.

  Step 3: ENTITY EXTRACTION
      EntityExtractor normalizes the company node into typed triggers,
      locations and users plus the id -> label lookup tables.

  Step 4: COMPANY TRIGGERS
      Every trigger's criteria are interpreted into readable lines and
      projected into one row per trigger. Unparseable triggers keep a row.

  Step 5: LOCATION TRIGGERS
      Each reportable location's workflow template is resolved into email
      module pairings (module, recipients, workflow labels).

  Step 6: REPORT
      Prints both tables to the console.

  Step 7: SAVE OUTPUT
      Writes "{Company}_Email_Triggers.xlsx" (and optionally .json) into a
      timestamped output directory.

Configuration:
    All settings are loaded from environment variables (typically via .env file).
    Required: COMPANY_NAME, and RECORD360_API_TOKEN or RECORD360_USERNAME +
    RECORD360_PASSWORD. See config/settings.py for defaults.

Typical usage:
    orchestrator = TriggerReportOrchestrator(env_file="./.env")
    if orchestrator.validate_config():
        results = orchestrator.run()
        orchestrator.print_summary(results)
"""

import os
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List

from dotenv import load_dotenv

from .record360_client import Record360Client, Session
from .entity_extractor import EntityExtractor
from .workflow_resolver import WorkflowModuleResolver
from .row_projector import RowProjector
from .console_report import ConsoleReport
from .export_serializer import ExportSerializer, export_filename
from .output_manager import OutputManager

from config import DEFAULT_SETTINGS


def _env_flag(name: str) -> bool:
    return os.getenv(name, str(DEFAULT_SETTINGS[name])).lower() == "true"


class TriggerReportOrchestrator:
    """Orchestrates the email trigger report pipeline.

    Attributes:
        api_url: Record360 GraphQL endpoint.
        auth_url: Record360 login endpoint.
        username: Operator login name.
        password: Operator password.
        api_token: Pre-issued bearer token; when set, login is skipped.
        company_name: The company to report on.
        page_size: Page size for the locations/users connections.
        include_inactive_locations: Report demo and inactive locations too.
        save_xlsx: Whether to write the spreadsheet export (default: True).
        save_json: Whether to write the sheets as JSON (default: False).
        debug: Whether to enable verbose output (default: False).
        output_manager: Handles timestamped output directories and retention cleanup.
    """

    def __init__(self, env_file: str = "./.env"):
        """Initialize the orchestrator by loading configuration from environment.

        Args:
            env_file: Path to a .env file. If the file exists, it is loaded via
                      python-dotenv. Otherwise, falls back to system environment.
        """
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            print(f"Loaded configuration from: {env_file}")
        else:
            print(f"Warning: {env_file} not found, using defaults/environment")

        # Record360 endpoints and credentials
        self.api_url = os.getenv("RECORD360_API_URL", DEFAULT_SETTINGS["RECORD360_API_URL"])
        self.auth_url = os.getenv("RECORD360_AUTH_URL", DEFAULT_SETTINGS["RECORD360_AUTH_URL"])
        self.username = os.getenv("RECORD360_USERNAME", "")
        self.password = os.getenv("RECORD360_PASSWORD", "")
        self.api_token = os.getenv("RECORD360_API_TOKEN", "")

        self.company_name = os.getenv("COMPANY_NAME", "")
        self.page_size = int(os.getenv("PAGE_SIZE", str(DEFAULT_SETTINGS["PAGE_SIZE"])))

        # Output directory and how many days to keep old runs
        output_dir = os.getenv("OUTPUT_DIR", DEFAULT_SETTINGS["OUTPUT_DIR"])
        retention_days = int(os.getenv("OUTPUT_RETENTION_DAYS", str(DEFAULT_SETTINGS["OUTPUT_RETENTION_DAYS"])))

        # Processing options
        self.save_xlsx = _env_flag("SAVE_XLSX")
        self.save_json = _env_flag("SAVE_JSON")
        self.include_inactive_locations = _env_flag("INCLUDE_INACTIVE_LOCATIONS")
        self.debug = _env_flag("DEBUG")

        self.output_manager = OutputManager(output_dir, self.company_name, retention_days)

    def validate_config(self, require_company: bool = True) -> bool:
        """Validate that all required configuration values are present.

        Checks:
            - RECORD360_API_URL is set
            - RECORD360_API_TOKEN, or both RECORD360_USERNAME and RECORD360_PASSWORD
            - COMPANY_NAME (unless require_company is False, e.g. for --search)

        Returns:
            True if all required values are present, False otherwise.
            Prints specific error messages for each missing value.
        """
        errors = []
        if not self.api_url:
            errors.append("RECORD360_API_URL is required")
        if not self.api_token:
            if not self.username:
                errors.append("RECORD360_USERNAME is required (or set RECORD360_API_TOKEN)")
            if not self.password:
                errors.append("RECORD360_PASSWORD is required (or set RECORD360_API_TOKEN)")
        if require_company and not self.company_name:
            errors.append("COMPANY_NAME is required (or pass --company)")

        if errors:
            print("\nConfiguration Errors:")
            for err in errors:
                print(f"  - {err}")
            return False
        return True

    def create_client(self) -> Record360Client:
        """Build a client whose session already holds the configured token, if any."""
        session = Session(token=self.api_token or None)
        return Record360Client(self.api_url, self.auth_url, session, self.debug)

    def login(self, client: Record360Client):
        if client.session.is_authenticated:
            print("  Using configured API token")
            return
        client.authenticate(self.username, self.password)
        print("  Authentication successful")

    def search_companies(self, text: str) -> List[str]:
        """Log in and return up to 20 company names matching `text`."""
        client = self.create_client()
        self.login(client)
        return client.search_companies(text)

    def run(self) -> Dict[str, Any]:
        """Execute the full 7-step report pipeline.

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - report: "email-triggers"
                - config: API URL, company name and location filter
                - success: True if all steps completed without error
                - summary: Row counts (triggers, unparseable, locations, modules)
                - xlsx_path / json_path: Export paths (when written)
                - error: Error message (if success=False)
        """
        results = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "report": "email-triggers",
            "config": {
                "api_url": self.api_url,
                "company_name": self.company_name,
                "include_inactive_locations": self.include_inactive_locations,
            },
            "success": False,
        }

        try:
            # Step 1: Authenticate with Record360
            print(f"\n{'='*60}")
            print("STEP 1: AUTHENTICATION")
            print("="*60)
            client = self.create_client()
            self.login(client)

            # Step 2: Fetch the company with every page of locations and users
            print(f"\n{'='*60}")
            print("STEP 2: GRAPHQL EXTRACTION")
            print("="*60)
            company_data = client.fetch_company(self.company_name, self.page_size)
            print("  Company data fetched successfully")

            # Step 3: Normalize the company node into typed entities
            print(f"\n{'='*60}")
            print("STEP 3: ENTITY EXTRACTION")
            print("="*60)
            extractor = EntityExtractor(self.debug)
            entities = extractor.extract(company_data)
            company_name = entities["company"]["name"] or self.company_name
            print(f"  Company: {company_name}")
            print(f"  Triggers: {len(entities['triggers'])}")
            print(f"  Locations: {len(entities['locations'])}")
            print(f"  Users: {len(entities['users'])}")

            # Step 4: Interpret and project company-level triggers
            print(f"\n{'='*60}")
            print("STEP 4: COMPANY TRIGGERS")
            print("="*60)
            projector = RowProjector(entities["location_index"], entities["user_index"], self.debug)
            company_rows = projector.company_rows(entities["triggers"])
            unparseable = sum(1 for row in company_rows if row.is_error)
            print(f"  Trigger rows: {len(company_rows)} ({unparseable} unparseable)")

            # Step 5: Resolve location workflow templates into email module rows
            print(f"\n{'='*60}")
            print("STEP 5: LOCATION TRIGGERS")
            print("="*60)
            locations = entities["locations"]
            if not self.include_inactive_locations:
                locations = [loc for loc in locations if loc.is_reportable]
            print(f"  Reportable locations: {len(locations)} of {len(entities['locations'])}")
            resolver = WorkflowModuleResolver(self.debug)
            resolved = resolver.resolve_locations(locations)
            location_rows = projector.location_rows(resolved)
            print(f"  Locations with email triggers: {len(resolved)}")
            print(f"  Email module rows: {len(location_rows)}")

            # Step 6: Print the on-screen tables
            print(f"\n{'='*60}")
            print("STEP 6: REPORT")
            print("="*60)
            ConsoleReport().print_report(company_name, company_rows, location_rows)

            # Step 7: Save the export to a timestamped directory
            print(f"\n{'='*60}")
            print("STEP 7: SAVE OUTPUT")
            print("="*60)
            if self.save_xlsx or self.save_json:
                self.output_manager.create_timestamped_dir(company_name)
                serializer = ExportSerializer(self.debug)
                sheets = serializer.build_sheets(company_rows, location_rows)

                if self.save_xlsx:
                    xlsx_path = self.output_manager.get_output_path(export_filename(company_name, "xlsx"))
                    results["xlsx_path"] = serializer.write_xlsx(sheets, xlsx_path)
                    print(f"  Saved workbook: {xlsx_path}")

                if self.save_json:
                    json_path = self.output_manager.get_output_path(export_filename(company_name, "json"))
                    results["json_path"] = serializer.write_json(sheets, json_path)
                    print(f"  Saved JSON sheets: {json_path}")
            else:
                print("  Export disabled")

            results["success"] = True
            results["summary"] = {
                "company": company_name,
                "triggers": len(company_rows),
                "unparseable_triggers": unparseable,
                "locations": len(resolved),
                "email_modules": len(location_rows),
            }

        except Exception as e:
            results["error"] = str(e)
            print(f"\n  ERROR: {e}")
            if self.debug:
                import traceback
                traceback.print_exc()

        results["completed_at"] = datetime.now(timezone.utc).isoformat()

        # Save run metadata alongside the export
        if self.output_manager.current_dir:
            results_path = self.output_manager.get_output_path("report_results.json")
            with open(results_path, "w") as f:
                json.dump(results, f, indent=2, default=str)
            print(f"\n  Results saved to: {results_path}")

        return results

    def print_summary(self, results: Dict):
        """Print a human-readable execution summary.

        Args:
            results: The dict returned by run().
        """
        print(f"\n{'='*60}")
        print("REPORT COMPLETE")
        print("="*60)
        print(f"Status: {'SUCCESS' if results.get('success') else 'FAILED'}")

        summary = results.get("summary", {})
        if summary:
            print(f"Company: {summary.get('company', 'N/A')}")
            print(f"Company triggers: {summary.get('triggers', 0)} "
                  f"({summary.get('unparseable_triggers', 0)} unparseable)")
            print(f"Locations with triggers: {summary.get('locations', 0)}")
            print(f"Email modules: {summary.get('email_modules', 0)}")

        if results.get("xlsx_path"):
            print(f"Workbook: {results['xlsx_path']}")

        if results.get("error"):
            print(f"Error: {results['error']}")
