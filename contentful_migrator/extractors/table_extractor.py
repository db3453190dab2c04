"""
Table extraction from Contentful entries.

A ``dataVisualizationTables`` entry points at a source entry that is
either an inline table (``dataSourceTable``) or a spreadsheet asset
(``dataSourceSpreadsheet``).  The source kind is resolved once into a
:data:`TableSource` variant; everything downstream works on the variant.
The rows are then projected with the entry's ``filters`` and written as
one JSON artifact per entry.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Optional

from contentful_migrator.engine.projector import project_with_filters
from contentful_migrator.extractors.contentful_extractor import (
    ContentfulClient,
    asset_url,
    content_type_of,
    link_id,
    localized,
)
from contentful_migrator.models.table import (
    InlineTable,
    SpreadsheetReference,
    TableArtifact,
    TableSource,
    UnknownSource,
)
from contentful_migrator.render.table_renderer import render_preview_html
from contentful_migrator.utils.csv_parser import parse_csv

TABLE_CONTENT_TYPE = "dataVisualizationTables"
TOC_CONTENT_TYPE = "tableOfContents"
INLINE_SOURCE_TYPE = "dataSourceTable"
SPREADSHEET_SOURCE_TYPE = "dataSourceSpreadsheet"


def resolve_table_source(source_entry: Optional[Dict[str, Any]]) -> TableSource:
    """Classify a source entry as inline data, a spreadsheet or unknown."""
    if not source_entry:
        return UnknownSource()
    ct = content_type_of(source_entry)
    fields = source_entry.get("fields") or {}
    if ct == INLINE_SOURCE_TYPE:
        data_table = localized(fields, "dataTable", {}) or {}
        table_data = data_table.get("tableData") if isinstance(data_table, dict) else None
        return InlineTable(rows=table_data if isinstance(table_data, list) else [])
    if ct == SPREADSHEET_SOURCE_TYPE:
        return SpreadsheetReference(asset_id=link_id(localized(fields, "source")))
    return UnknownSource(content_type=ct)


def load_source_rows(source: TableSource, client: ContentfulClient) -> Optional[List[List[str]]]:
    """Fetch the grid behind ``source``; ``None`` when there is none."""
    if isinstance(source, InlineTable):
        return source.rows or None
    if isinstance(source, SpreadsheetReference):
        url = source.url
        if not url and source.asset_id:
            url = asset_url(client.get_asset(source.asset_id))
        if not url:
            return None
        return parse_csv(client.download_text(url)) or None
    return None


def build_table_artifact(fields: Dict[str, Any], rows: Optional[List[List[str]]]) -> TableArtifact:
    """Assemble the persisted artifact for one table entry."""
    filters = localized(fields, "filters")
    if not isinstance(filters, dict):
        filters = None

    if rows and filters:
        projected = project_with_filters(rows, filters)
    else:
        projected = project_with_filters(rows or [], None)

    artifact = TableArtifact(
        type=localized(fields, "type", "Plain"),
        title=localized(fields, "title", ""),
        style=localized(fields, "style", "Equal Width"),
        theme=localized(fields, "theme", "Standard"),
        full_width=localized(fields, "fullWidth", True),
        filters=filters,
        display_rows=projected.display_rows,
        key_column=projected.key_column,
        key_column_index=projected.key_column_index,
        key_values=projected.key_values,
    )
    artifact.html = render_preview_html(artifact)
    return artifact


def build_toc_artifact(fields: Dict[str, Any]) -> TableArtifact:
    return TableArtifact.model_validate(
        {
            "type": TOC_CONTENT_TYPE,
            "title": localized(fields, "title", ""),
            "style": localized(fields, "style", "List"),
            "headerTags": localized(fields, "headerTags") or localized(fields, "includedHeaderTags") or ["H2"],
            "isSticky": bool(localized(fields, "isSticky") or localized(fields, "stickyOnScroll")),
        }
    )


def extract_table(entry: Dict[str, Any], client: ContentfulClient) -> tuple[TableArtifact, TableSource]:
    """Resolve, fetch and project one ``dataVisualizationTables`` entry."""
    fields = entry.get("fields") or {}
    source_id = link_id(localized(fields, "source"))
    source: TableSource = resolve_table_source(client.get_entry(source_id)) if source_id else UnknownSource()
    rows = load_source_rows(source, client)
    return build_table_artifact(fields, rows), source


def write_artifact(artifact: TableArtifact, entry_id: str, out_dirs: Iterable[str]) -> List[str]:
    """Write ``<entry_id>.json`` into every directory of ``out_dirs``."""
    payload = json.dumps(artifact.to_json_dict(), indent=2, ensure_ascii=False)
    written: List[str] = []
    for out_dir in out_dirs:
        if not out_dir:
            continue
        os.makedirs(out_dir, exist_ok=True)
        path = os.path.join(out_dir, f"{entry_id}.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload)
        written.append(path)
    return written
