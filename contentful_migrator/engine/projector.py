"""
Column projection for extracted tables.

A single wide source table is often embedded in several page sections,
each showing a subset of its rows.  :func:`project_table` reduces the
table to the configured display columns while keeping the key column, so
that the renderer can still filter rows at display time.  All indices are
resolved against the original header before any column is dropped.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from contentful_migrator.models.table import (
    ColumnSpec,
    ProjectedTable,
    RawTable,
    TableFilters,
)


def collect_key_values(data_rows: Sequence[Sequence[str]], key_index: int) -> List[str]:
    """Distinct, trimmed, non-empty values of one column in first-seen order."""
    seen = set()
    values: List[str] = []
    for row in data_rows:
        cell = row[key_index] if key_index < len(row) else ""
        value = (cell or "").strip()
        if value and value not in seen:
            seen.add(value)
            values.append(value)
    return values


def project_table(
    raw: Union[RawTable, Sequence[Sequence[Any]]],
    display_columns: Sequence[ColumnSpec] = (),
    key_spec: Optional[ColumnSpec] = None,
) -> ProjectedTable:
    """Project ``raw`` onto the display columns plus the key column.

    :param raw: The source grid; ``rows[0]`` is the header.
    :param display_columns: Columns to show, in display order.  Entries
        that resolve to no column are dropped.
    :param key_spec: Column holding the categorical filter keys, if any.
    :return: The projected table.  ``key_column_index`` is the key
        column's position inside ``display_rows``.
    """
    if not isinstance(raw, RawTable):
        raw = RawTable(rows=raw)
    if not raw.rows:
        return ProjectedTable()

    header = raw.header
    data_rows = raw.data_rows

    key_index = key_spec.resolve(header) if key_spec is not None else -1
    key_values = collect_key_values(data_rows, key_index) if key_index >= 0 else []

    display_indices = [i for i in (spec.resolve(header) for spec in display_columns) if i >= 0]

    if display_indices:
        kept = list(display_indices)
        if key_index >= 0 and key_index not in kept:
            kept.append(key_index)
    else:
        # Nothing to show: keep the whole table rather than a key-only one.
        kept = list(range(len(header)))

    display_rows = [[row[i] if i < len(row) else "" for i in kept] for row in [header] + data_rows]

    return ProjectedTable(
        display_rows=display_rows,
        key_column=header[key_index] if key_index >= 0 else None,
        key_column_index=kept.index(key_index) if key_index >= 0 else -1,
        key_values=key_values,
    )


def project_with_filters(
    rows: Sequence[Sequence[Any]],
    filters: Optional[Union[TableFilters, Dict[str, Any]]],
) -> ProjectedTable:
    """Apply a Contentful ``filters`` object to ``rows``.

    Without filters the rows pass through untouched and no key column is
    recorded.  A filters object that does not validate is treated the same
    way.
    """
    if filters is not None and not isinstance(filters, TableFilters):
        try:
            filters = TableFilters.model_validate(filters)
        except ValidationError:
            filters = None
    if filters is None:
        return ProjectedTable(display_rows=RawTable(rows=rows).rows)
    return project_table(rows, filters.selected_columns, filters.key_spec)
