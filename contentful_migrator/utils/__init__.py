"""
Utility helpers used by the migration tool.

This subpackage exposes CSV parsing, HTTP rate limiting/retries and
structured event logging.
"""

from .csv_parser import parse_csv
from .errors import ERRORS, report_error, report_ok
from .http import RateLimiter, with_retries

__all__ = ["parse_csv", "ERRORS", "report_error", "report_ok", "RateLimiter", "with_retries"]
