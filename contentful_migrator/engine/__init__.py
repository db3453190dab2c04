"""
Filter and projection engine shared by table extraction and rendering.

The engine is pure: nothing here performs I/O or mutates its inputs.
"""

from .key_resolver import resolve_key_from_heading, slugify_heading
from .projector import project_table, project_with_filters
from .row_filter import erase_column, filter_rows_by_key, render_view

__all__ = [
    "resolve_key_from_heading",
    "slugify_heading",
    "project_table",
    "project_with_filters",
    "filter_rows_by_key",
    "erase_column",
    "render_view",
]
