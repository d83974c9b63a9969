"""
Config module - Default settings for the email trigger report.
"""

from .settings import DEFAULT_SETTINGS, REPORT_NAME

__all__ = [
    'DEFAULT_SETTINGS',
    'REPORT_NAME',
]
