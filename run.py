#!/usr/bin/env python3
"""
Record360 Email Trigger Report — Entry Point.

This is the main script that operators run to review a company's email
triggers. It reads configuration from a .env file, fetches the company from
the Record360 GraphQL API, prints the company-level and location-level
trigger tables, and saves a spreadsheet export.

The pipeline (managed by TriggerReportOrchestrator) performs 7 steps:
  1. Log in (or use the configured API token)
  2. Fetch the company, its triggers, and every page of locations and users
  3. Normalize the company node into typed entities
  4. Interpret company trigger criteria into rows
  5. Resolve location workflow templates into email module rows
  6. Print both tables
  7. Save {Company}_Email_Triggers.xlsx to a timestamped folder

Usage:
    python run.py                         # Report on COMPANY_NAME from .env
    python run.py --company "Acme"        # Report on another company
    python run.py --search "Acm"          # List matching company names
    python run.py --no-export             # Print only, write nothing
    python run.py --json                  # Also write the sheets as JSON
    python run.py --debug                 # Verbose output
    python run.py --version               # Show version
    python run.py --env /path             # Use alternate .env file
"""

import sys
import argparse
import logging
from pathlib import Path

from core import TriggerReportOrchestrator

# Read version from the repo-root VERSION file (e.g., "0.1.0").
VERSION_FILE = Path(__file__).resolve().parent / "VERSION"
VERSION = VERSION_FILE.read_text().strip() if VERSION_FILE.exists() else "unknown"


def main():
    """Parse CLI arguments and run the report pipeline."""
    parser = argparse.ArgumentParser(
        description="Record360 Email Trigger Report - Review and export a company's email triggers"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--company", "-c", help="Company name (overrides COMPANY_NAME)")
    parser.add_argument("--search", "-s", metavar="TEXT", help="List company names matching TEXT and exit")
    parser.add_argument("--no-export", action="store_true", help="Print the report without writing files")
    parser.add_argument("--json", action="store_true", help="Also write the sheets as JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    args = parser.parse_args()

    if args.version:
        print(f"record360-trigger-report {VERSION}")
        sys.exit(0)

    # Enable HTTP wire logging if --debug flag is set
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s'
        )
        logging.getLogger('urllib3').setLevel(logging.DEBUG)

    # Initialize the orchestrator (loads .env and builds internal config)
    orchestrator = TriggerReportOrchestrator(env_file=args.env)

    # Apply CLI overrides on top of .env values
    if args.company:
        orchestrator.company_name = args.company
    if args.debug:
        orchestrator.debug = True
    if args.no_export:
        orchestrator.save_xlsx = False
        orchestrator.save_json = False
    elif args.json:
        orchestrator.save_json = True

    if args.search is not None:
        if not orchestrator.validate_config(require_company=False):
            sys.exit(1)
        names = orchestrator.search_companies(args.search)
        if not names:
            print("No matching companies.")
        for name in names:
            print(name)
        return

    # Print header
    print(f"\n{'='*60}")
    print(f"RECORD360 EMAIL TRIGGER REPORT v{VERSION}")
    print("="*60)
    print(f"API: {orchestrator.api_url}")
    print(f"Company: {orchestrator.company_name or '(not set)'}")
    print(f"Locations: {'All' if orchestrator.include_inactive_locations else 'Active, non-demo only'}")

    # Validate required configuration before proceeding
    if not orchestrator.validate_config():
        sys.exit(1)

    # Cleanup old output folders based on retention policy
    if orchestrator.output_manager.retention_days > 0:
        deleted = orchestrator.output_manager.cleanup_old_folders(orchestrator.debug)
        if deleted > 0:
            print(f"Cleaned up {deleted} old output folder(s)")

    # Run the 7-step report pipeline
    results = orchestrator.run()

    # Print final summary
    orchestrator.print_summary(results)

    # Exit with error code if the run failed
    if not results.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
