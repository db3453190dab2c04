"""
Structured logging helpers for extraction errors and successes.

The :mod:`contentful_migrator.utils.errors` module centralizes the writing
of log entries for both failed and successful operations during a
migration run.  Each entry is appended to a JSON Lines file under
``reports/migration`` so that the information can be reviewed or parsed
after a run.

Two public functions are provided:

``report_error``
    Record an error that occurred for an entry (a table, TOC or post).
    An optional exception can be supplied and will be serialized to the log.

``report_ok``
    Record a successful step for an entry.  Additional key/value
    information can be attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

ERRORS: Dict[str, str] = {
    "SOURCE_MISSING": "Table entry has no data source",
    "SOURCE_UNKNOWN": "Table source has an unsupported content type",
    "CSV_DOWNLOAD": "Failed to download spreadsheet CSV",
    "CONTENTFUL_NETWORK": "Network error communicating with Contentful",
    "TABLE_EXTRACT": "Failed to extract table",
    "TOC_EXTRACT": "Failed to extract table of contents",
    "WP_POST_NOT_FOUND": "WordPress post not found",
    "WP_UPDATE": "Failed to update WordPress post",
    "TABLE_EXTRACTED": "Table extracted successfully",
    "TOC_EXTRACTED": "Table of contents extracted successfully",
    "TABLES_INSTALLED": "Table artifacts installed",
    "WP_UPDATED": "WordPress post updated successfully",
}

_REPORT_DIR = os.path.join("reports", "migration")
_ERROR_LOG = os.path.join(_REPORT_DIR, "errors.jsonl")
_OK_LOG = os.path.join(_REPORT_DIR, "success.jsonl")


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def _entry(code: str, item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "code": code,
        "message": ERRORS.get(code, code),
        "id": item.get("id"),
        "title": item.get("title"),
    }


def report_error(code: str, item: Dict[str, Any], exc: Optional[Exception] = None, *, path: str = _ERROR_LOG) -> None:
    """Log an error event for ``item``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    item:
        Dictionary describing the entry.  Only the ``id`` and ``title``
        keys are referenced if present.
    exc:
        Optional exception instance that triggered the error.
    """
    entry = _entry(code, item)
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {entry['message']} - {item.get('id', '')}")
    _write_jsonl(path, entry)


def report_ok(code: str, item: Dict[str, Any], extra: Optional[Dict[str, Any]] = None, *, path: str = _OK_LOG) -> None:
    """Log a successful event for ``item``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    item:
        Dictionary describing the entry.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    """
    entry = _entry(code, item)
    if extra:
        entry.update(extra)
    print(f"[OK] {entry['message']} - {item.get('id', '')}")
    _write_jsonl(path, entry)
