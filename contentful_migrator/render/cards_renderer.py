"""
Card grid rendering for ``[contentful_cards]``.

A card grid shows the same artifact rows as a table, one card per row,
each non-empty cell labelled with its formatted header.  Rows go through
:func:`render_view`, so key filtering and key column removal behave as
they do for tables.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

from contentful_migrator.engine.row_filter import render_view
from contentful_migrator.models.table import TableArtifact
from contentful_migrator.render.labels import format_header_label
from contentful_migrator.render.table_renderer import _as_artifact, _esc, sanitize_cell

HIDDEN_CARD_COLUMNS = {"key", "slug"}
_PLACEHOLDER = '<p class="cards-placeholder">[Provider listings]</p>'


def _with_key_header(artifact: TableArtifact) -> TableArtifact:
    # Artifacts without key metadata still filter on a column named "key".
    if artifact.key_column_index >= 0 or not artifact.display_rows:
        return artifact
    lowered = [h.strip().lower() for h in artifact.display_rows[0]]
    if "key" not in lowered:
        return artifact
    return artifact.model_copy(update={"key_column_index": lowered.index("key")})


def _has_selected_columns(artifact: TableArtifact) -> bool:
    filters = artifact.filters or {}
    return bool(isinstance(filters, dict) and filters.get("selectedColumns"))


def render_card_grid(artifact: TableArtifact, key_filter: str = "") -> str:
    if not artifact.display_rows:
        return _PLACEHOLDER

    view = render_view(_with_key_header(artifact).projected(), key_filter or None)
    columns: List[int] = list(range(len(view.headers)))
    if not _has_selected_columns(artifact):
        columns = [i for i in columns if view.headers[i].strip().lower() not in HIDDEN_CARD_COLUMNS]

    if not view.rows:
        return '<p class="cards-placeholder">No listings found.</p>'

    html = '<div class="cards-grid">'
    for row in view.rows:
        html += '<div class="contentful-card">'
        for i in columns:
            cell = row[i] if i < len(row) else ""
            if not cell:
                continue
            html += '<div class="card-field">'
            if view.headers[i]:
                html += f'<span class="card-label">{_esc(format_header_label(view.headers[i]))}:</span> '
            html += f'<span class="card-value">{sanitize_cell(cell)}</span></div>'
        html += "</div>"
    html += "</div>"
    return html


def render_cards_html(
    table_data: Union[TableArtifact, Dict[str, Any], None],
    card_id: str,
    key_filter: str = "",
    *,
    title: str = "",
    css_class: str = "",
) -> str:
    """Render a card grid; ``table_data=None`` gives the placeholder grid.

    :param title: Already-resolved title; empty means no heading.
    """
    classes = f"contentful-cards {css_class}".strip()
    html = f'<div class="{_esc(classes)}" id="contentful-cards-{_esc(card_id)}">'
    if title:
        html += f'<h3 class="cards-title">{_esc(title)}</h3>'
    if table_data is None:
        html += _PLACEHOLDER
    else:
        html += render_card_grid(_as_artifact(table_data), key_filter)
    html += "</div>"
    return html
