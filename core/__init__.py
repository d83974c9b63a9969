"""
Core package — The email trigger report pipeline modules.

This package contains all the modules that implement the 7-step report
pipeline. Each module handles one concern:

  orchestrator.py         Pipeline coordination (Steps 1-7)
  record360_client.py     HTTP communication with Record360 (Steps 1-2)
  graphql_queries.py      GraphQL query definitions (Step 2)
  entity_extractor.py     Parse the company node into typed entities (Step 3)
  models.py               Trigger / Location / User and criteria variants
  criteria_interpreter.py Render trigger criteria as readable lines (Step 4)
  workflow_resolver.py    Pair email modules with workflow labels (Step 5)
  row_projector.py        Flatten both into report rows (Steps 4-5)
  console_report.py       Print the tables (Step 6)
  export_serializer.py    Write the spreadsheet export (Step 7)
  output_manager.py       Timestamped output folders and retention (Step 7)
"""

from .orchestrator import TriggerReportOrchestrator
from .record360_client import (
    AuthenticationError,
    CompanyNotFoundError,
    Record360Client,
    Session,
)
from .entity_extractor import EntityExtractor
from .criteria_interpreter import CriteriaInterpreter, interpret
from .workflow_resolver import WorkflowModuleResolver, resolve
from .row_projector import RowProjector
from .console_report import ConsoleReport
from .export_serializer import ExportSerializer, export_filename
from .output_manager import OutputManager
