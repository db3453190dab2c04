"""
Render-time row filtering and key column removal.

These functions run inline while a page is being rendered, so none of
them raise on malformed input: an unknown filter keeps every row, and a
key column index outside the table is treated as "no key column".
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set

from contentful_migrator.engine.key_resolver import resolve_key_from_heading
from contentful_migrator.models.table import ProjectedTable, RenderedView


def split_filter_expression(filter_expr: Optional[str]) -> List[str]:
    """Split a comma-separated filter attribute into trimmed tokens."""
    if not filter_expr:
        return []
    return [token.strip() for token in filter_expr.split(",") if token.strip()]


def match_filter_keys(filter_expr: Optional[str], key_values: Iterable[str] = ()) -> Set[str]:
    """Resolve every token of ``filter_expr`` to a lower-cased key value.

    A token equal (case-insensitively) to a known key is taken as is;
    anything else goes through :func:`resolve_key_from_heading`.  Tokens
    that resolve to nothing are ignored.
    """
    known = list(key_values or [])
    lowered = {(k or "").strip().lower() for k in known}
    matched: Set[str] = set()
    for token in split_filter_expression(filter_expr):
        value = token.lower()
        if value in lowered:
            matched.add(value)
            continue
        resolved = resolve_key_from_heading(value, known)
        if resolved is not None:
            matched.add(resolved)
    return matched


def filter_rows_by_key(
    rows: Sequence[Sequence[str]],
    key_column_index: int,
    filter_expr: Optional[str],
    key_values: Iterable[str] = (),
) -> List[List[str]]:
    """Keep the data rows whose key cell matches ``filter_expr``.

    ``rows`` are data rows only (no header).  When the expression is empty,
    the index is negative, or no token resolves to a key, every row is
    returned.
    """
    if not filter_expr or key_column_index < 0:
        return [list(r) for r in rows]

    matched = match_filter_keys(filter_expr, key_values)
    if not matched:
        return [list(r) for r in rows]

    kept: List[List[str]] = []
    for row in rows:
        cell = row[key_column_index] if key_column_index < len(row) else ""
        if (cell or "").strip().lower() in matched:
            kept.append(list(row))
    return kept


def erase_column(rows: Sequence[Sequence[str]], index: int) -> List[List[str]]:
    """Remove column ``index`` from every row wide enough to have it."""
    out: List[List[str]] = []
    for row in rows:
        row = list(row)
        if 0 <= index < len(row):
            del row[index]
        out.append(row)
    return out


def render_view(
    table: ProjectedTable,
    filter_expr: Optional[str] = None,
    *,
    erase_when_unfiltered: bool = True,
) -> RenderedView:
    """Filter ``table`` and strip its key column for display.

    :param table: A projected table artifact.  It is never modified.
    :param filter_expr: Comma-separated key values or heading slugs.
    :param erase_when_unfiltered: When ``False``, the key column is kept
        visible if no filter expression was supplied.  By default it is
        removed whenever the table has one.
    :return: Display headers and rows with the key column removed.
    """
    if not table.display_rows:
        return RenderedView()

    header = list(table.display_rows[0])
    width = len(header)
    data_rows = [list(r) + [""] * (width - len(r)) for r in table.display_rows[1:]]

    key_index = table.key_column_index
    if not 0 <= key_index < width:
        key_index = -1

    rows = filter_rows_by_key(data_rows, key_index, filter_expr, table.key_values)

    filtered = bool(split_filter_expression(filter_expr))
    if key_index >= 0 and (filtered or erase_when_unfiltered):
        header = erase_column([header], key_index)[0]
        rows = erase_column(rows, key_index)

    return RenderedView(headers=header, rows=rows)
