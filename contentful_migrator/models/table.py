from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def normalize_rows(rows: Any) -> list[list[str]]:
    """Coerce a loosely-typed grid into a list of string rows.

    Non-list rows are dropped and ``None`` cells become empty strings.
    """
    if not isinstance(rows, list):
        return []
    out: list[list[str]] = []
    for row in rows:
        if isinstance(row, (list, tuple)):
            out.append([_to_cell(c) for c in row])
    return out


class ColumnSpec(BaseModel):
    """One entry of a ``selectedColumns`` / ``selectedKey`` list.

    Contentful stores these as ``{"id": 3, "name": "key"}`` where ``id`` is
    the zero-based column position.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    index: Optional[int] = Field(None, alias="id")

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_text(cls, v: Any) -> str:
        return _to_cell(v)

    @field_validator("index", mode="before")
    @classmethod
    def _index_as_int(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    def resolve(self, header: list[str]) -> int:
        """Return the column position in ``header``, or -1.

        An explicit index wins when it points inside the header; otherwise
        the name is looked up (case-sensitive).
        """
        if self.index is not None and 0 <= self.index < len(header):
            return self.index
        if self.name and self.name in header:
            return header.index(self.name)
        return -1


class TableFilters(BaseModel):
    """The ``filters`` object attached to a Contentful table entry."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    selected_columns: list[ColumnSpec] = Field(default_factory=list, alias="selectedColumns")
    selected_key: list[ColumnSpec] = Field(default_factory=list, alias="selectedKey")

    @field_validator("selected_columns", "selected_key", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any):
        return v or []

    @property
    def key_spec(self) -> Optional[ColumnSpec]:
        return self.selected_key[0] if self.selected_key else None


class RawTable(BaseModel):
    """Header row plus data rows, as fetched from Contentful or a CSV file."""

    model_config = ConfigDict(frozen=True)

    rows: list[list[str]] = Field(default_factory=list)

    @field_validator("rows", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> list[list[str]]:
        return normalize_rows(v)

    @property
    def header(self) -> list[str]:
        return list(self.rows[0]) if self.rows else []

    @property
    def data_rows(self) -> list[list[str]]:
        """Data rows padded to the header width."""
        width = len(self.header)
        return [row + [""] * (width - len(row)) for row in self.rows[1:]]


class ProjectedTable(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_rows: list[list[str]] = Field(default_factory=list, alias="rawData")
    key_column: Optional[str] = Field(None, alias="keyColumn")
    key_column_index: int = Field(-1, alias="keyColumnIndex")
    key_values: list[str] = Field(default_factory=list, alias="keyValues")

    @field_validator("display_rows", mode="before")
    @classmethod
    def _rows(cls, v: Any) -> list[list[str]]:
        return normalize_rows(v)

    @field_validator("key_column_index", mode="before")
    @classmethod
    def _index(cls, v: Any) -> int:
        try:
            return int(v)
        except (TypeError, ValueError):
            return -1

    @field_validator("key_values", mode="before")
    @classmethod
    def _values(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [_to_cell(x) for x in v]


class TableArtifact(ProjectedTable):
    """The JSON document written per table entry and read by the renderer.

    Unknown fields are preserved so that TOC entries and legacy
    ``headers``/``rows`` documents round-trip through the same model.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str = "Plain"
    title: str = ""
    style: str = "Equal Width"
    theme: str = "Standard"
    full_width: bool = Field(True, alias="fullWidth")
    filters: Optional[dict[str, Any]] = None
    html: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return _to_cell(v)

    def projected(self) -> ProjectedTable:
        return ProjectedTable(
            display_rows=self.display_rows,
            key_column=self.key_column,
            key_column_index=self.key_column_index,
            key_values=self.key_values,
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=False)


class RenderedView(BaseModel):
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)


###############################################################################
# Table sources
###############################################################################


class InlineTable(BaseModel):
    kind: Literal["inline"] = "inline"
    rows: list[list[str]] = Field(default_factory=list)

    @field_validator("rows", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> list[list[str]]:
        return normalize_rows(v)


class SpreadsheetReference(BaseModel):
    kind: Literal["spreadsheet"] = "spreadsheet"
    asset_id: Optional[str] = None
    url: Optional[str] = None


class UnknownSource(BaseModel):
    kind: Literal["unknown"] = "unknown"
    content_type: Optional[str] = None


TableSource = Union[InlineTable, SpreadsheetReference, UnknownSource]
