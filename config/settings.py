"""
Settings — Default configuration values for the Record360 email trigger report.

This module provides the DEFAULT_SETTINGS dict that the orchestrator uses as
fallback values when environment variables are not set. The actual configuration
is loaded from .env at runtime; these defaults ensure the report works out of
the box against the production Record360 API.

Configuration precedence (highest to lowest):
  1. CLI flags (--company, --debug, --no-export, --json)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  RECORD360_API_URL          GraphQL endpoint
  RECORD360_AUTH_URL         Login endpoint that exchanges credentials for a token
  PAGE_SIZE                  Page size used when walking locations/users connections
  OUTPUT_DIR                 Where to write exports (default: ./output)
  OUTPUT_RETENTION_DAYS      How many days to keep old run folders (0 = keep forever)
  SAVE_XLSX                  Write the spreadsheet export (default: True)
  SAVE_JSON                  Also write the sheets as JSON (default: False)
  INCLUDE_INACTIVE_LOCATIONS Report demo and inactive locations too (default: False)
  DEBUG                      Whether to print verbose output (default: False)
"""

REPORT_NAME = "Email_Triggers"

DEFAULT_SETTINGS = {
    "RECORD360_API_URL": "https://api.record360.com/v2",
    "RECORD360_AUTH_URL": "https://api.record360.com/api/users/authenticate",
    "PAGE_SIZE": 100,
    "OUTPUT_DIR": "./output",
    "OUTPUT_RETENTION_DAYS": 30,
    "SAVE_XLSX": True,
    "SAVE_JSON": False,
    "INCLUDE_INACTIVE_LOCATIONS": False,
    "DEBUG": False,
}
