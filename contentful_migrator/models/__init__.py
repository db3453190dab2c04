"""
Pydantic models for table configuration, persisted table artifacts and
rendered views.
"""

from .table import (
    ColumnSpec,
    InlineTable,
    ProjectedTable,
    RawTable,
    RenderedView,
    SpreadsheetReference,
    TableArtifact,
    TableFilters,
    TableSource,
    UnknownSource,
)

__all__ = [
    "ColumnSpec",
    "InlineTable",
    "ProjectedTable",
    "RawTable",
    "RenderedView",
    "SpreadsheetReference",
    "TableArtifact",
    "TableFilters",
    "TableSource",
    "UnknownSource",
]
