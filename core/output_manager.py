"""
Output Manager — Timestamped export directories and retention cleanup.

Each report run creates a folder under the base output directory with the
format: YYYYMMDD_HHMM_{company} (e.g., "20261019_1430_Acme_Rentals").

Inside each folder, the orchestrator saves:
  - {Company}_Email_Triggers.xlsx: The spreadsheet export
  - {Company}_Email_Triggers.json: The same sheets as JSON (optional)
  - report_results.json:           Run metadata, row counts, errors

The retention policy deletes folders older than OUTPUT_RETENTION_DAYS at the
start of each run (before creating a new folder). Set retention_days=0 to
keep all output indefinitely.
"""

import os
import re
import shutil
from datetime import datetime, timedelta
from typing import Optional

FOLDER_PATTERN = re.compile(r'^(\d{8})_(\d{4})_.*$')


class OutputManager:
    """Manages output directories with timestamping and retention policies.

    Attributes:
        base_dir: Root output directory (default: ./output).
        label: Used in folder naming (sanitized to alphanumeric + hyphens).
        retention_days: Delete folders older than this many days (0 = keep forever).
        current_dir: Path to the current run's output directory (None until created).
    """

    def __init__(self, base_dir: str, label: str = "", retention_days: int = 30):
        self.base_dir = base_dir
        self.label = label
        self.retention_days = retention_days
        self.current_dir: Optional[str] = None
        self._run_timestamp = datetime.now()

    def create_timestamped_dir(self, label: Optional[str] = None) -> str:
        """Create a timestamped output directory for the current run.

        Format: {base_dir}/YYYYMMDD_HHMM_{sanitized_label}

        Args:
            label: Overrides the label given at construction (usually the
                   company name, which is only known after the fetch).

        Returns:
            The full path to the created directory.
        """
        if label is not None:
            self.label = label
        timestamp = self._run_timestamp.strftime("%Y%m%d_%H%M")
        safe_label = "".join(
            c if c.isalnum() or c in '-_' else '_'
            for c in self.label
        ) or "report"
        folder_name = f"{timestamp}_{safe_label}"
        self.current_dir = os.path.join(self.base_dir, folder_name)
        os.makedirs(self.current_dir, exist_ok=True)
        return self.current_dir

    def cleanup_old_folders(self, debug: bool = False) -> int:
        """Remove output folders older than retention_days.

        Scans the base directory for folders matching the YYYYMMDD_HHMM_* pattern,
        parses the timestamp, and deletes folders that are older than the cutoff.

        Returns:
            The number of folders deleted.
        """
        if self.retention_days <= 0:
            return 0

        if not os.path.exists(self.base_dir):
            return 0

        deleted_count = 0
        cutoff_date = datetime.now() - timedelta(days=self.retention_days)

        for folder_name in os.listdir(self.base_dir):
            folder_path = os.path.join(self.base_dir, folder_name)

            if not os.path.isdir(folder_path):
                continue

            match = FOLDER_PATTERN.match(folder_name)
            if not match:
                continue

            try:
                folder_datetime = datetime.strptime(
                    f"{match.group(1)}_{match.group(2)}", "%Y%m%d_%H%M"
                )
                if folder_datetime < cutoff_date:
                    shutil.rmtree(folder_path)
                    deleted_count += 1
                    if debug:
                        print(f"  Deleted old output folder: {folder_name}")

            except (ValueError, OSError) as e:
                if debug:
                    print(f"  Warning: Could not process folder {folder_name}: {e}")
                continue

        return deleted_count

    def get_output_path(self, filename: str) -> str:
        """Get the full path for a file in the current output directory.

        Raises:
            RuntimeError: If create_timestamped_dir() has not been called yet.
        """
        if not self.current_dir:
            raise RuntimeError("Output directory not created. Call create_timestamped_dir() first.")
        return os.path.join(self.current_dir, filename)
