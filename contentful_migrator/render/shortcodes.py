"""
Shortcode expansion for migrated content.

Migrated post bodies reference tables through shortcodes such as
``[contentful_table id="6OGCWSrHDT4MJviE31iLsa" key="area-agency-on-aging"]``.
:class:`ShortcodeRenderer` expands them against the JSON artifacts in a
tables directory, the same way the WordPress plugin does at page render
time.  This is used to preview pages locally and to check that every
referenced table exists before pushing content.
"""

from __future__ import annotations

import json
import os
import re
from html import escape
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from contentful_migrator.engine.projector import collect_key_values
from contentful_migrator.models.table import TableArtifact
from contentful_migrator.render.cards_renderer import render_cards_html
from contentful_migrator.render.labels import resolve_title_placeholders
from contentful_migrator.render.table_renderer import render_table_html, render_toc_html
from contentful_migrator.utils.csv_parser import parse_csv

TABLE_SHORTCODES = ("contentful_table", "contentful-table")
TOC_SHORTCODES = ("contentful_toc", "contentful-toc")
CARDS_SHORTCODES = ("contentful_cards", "contentful-cards")

_SHORTCODE_RE = re.compile(
    r"\[(?P<tag>contentful[_-](?:table|toc|cards))(?P<atts>(?:\s+[^\]]*)?)\s*/?\]",
    re.IGNORECASE,
)
_ATTR_RE = re.compile(
    r"""([\w-]+)\s*=\s*"([^"]*)"|([\w-]+)\s*=\s*'([^']*)'|([\w-]+)\s*=\s*([^\s'"]+)""",
)


def parse_shortcode_attrs(text: str) -> Dict[str, str]:
    """Parse ``name="value"`` pairs (double, single or unquoted values)."""
    attrs: Dict[str, str] = {}
    for m in _ATTR_RE.finditer(text or ""):
        if m.group(1):
            attrs[m.group(1).lower()] = m.group(2)
        elif m.group(3):
            attrs[m.group(3).lower()] = m.group(4)
        elif m.group(5):
            attrs[m.group(5).lower()] = m.group(6)
    return attrs


def _error(message: str) -> str:
    return f'<div class="contentful-error">{message}</div>'


def artifact_from_csv(rows: List[List[str]]) -> TableArtifact:
    """Build an unprojected artifact from CSV rows.

    A header named ``key`` (any case) becomes the key column.
    """
    header = rows[0] if rows else []
    lowered = [h.lower() for h in header]
    key_index = lowered.index("key") if "key" in lowered else -1
    return TableArtifact(
        display_rows=rows,
        key_column=header[key_index] if key_index >= 0 else None,
        key_column_index=key_index,
        key_values=collect_key_values(rows[1:], key_index) if key_index >= 0 else [],
    )


class TableDataLoader:
    """Loads table artifacts from a tables directory.

    ``<id>.json`` files are artifacts as written by the extractor;
    ``<id>.csv`` files are parsed into plain artifacts.  When both exist for
    the same ID the JSON file wins.
    """

    def __init__(self, tables_dir: str) -> None:
        self.tables_dir = tables_dir
        self._tables: Optional[Dict[str, TableArtifact]] = None
        self.load_errors: Dict[str, str] = {}

    def _files(self, extension: str) -> List[str]:
        return [name for name in sorted(os.listdir(self.tables_dir)) if name.endswith(extension)]

    def load_all(self) -> Dict[str, TableArtifact]:
        tables: Dict[str, TableArtifact] = {}
        self.load_errors = {}
        if not os.path.isdir(self.tables_dir):
            self._tables = tables
            return tables

        for name in self._files(".json"):
            table_id = name[: -len(".json")]
            path = os.path.join(self.tables_dir, name)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    tables[table_id] = TableArtifact.model_validate(json.load(f))
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                self.load_errors[table_id] = str(e)

        for name in self._files(".csv"):
            table_id = name[: -len(".csv")]
            if table_id in tables:
                continue
            path = os.path.join(self.tables_dir, name)
            try:
                with open(path, "r", encoding="utf-8", newline="") as f:
                    rows = parse_csv(f.read())
            except (OSError, UnicodeDecodeError) as e:
                self.load_errors[table_id] = str(e)
                continue
            if rows:
                tables[table_id] = artifact_from_csv(rows)

        self._tables = tables
        return tables

    @property
    def tables(self) -> Dict[str, TableArtifact]:
        if self._tables is None:
            self.load_all()
        return self._tables or {}

    def get_table(self, table_id: str) -> Optional[TableArtifact]:
        return self.tables.get(table_id)


class ShortcodeRenderer:
    """Expands table, TOC and cards shortcodes using a :class:`TableDataLoader`.

    ``post_slug`` is the slug of the page being rendered.  It fills
    ``[city-state]`` title placeholders and is the automatic key filter of
    card grids.  It can be overridden per call.
    """

    def __init__(self, loader: TableDataLoader, *, erase_when_unfiltered: bool = True, post_slug: str = "") -> None:
        self.loader = loader
        self.erase_when_unfiltered = erase_when_unfiltered
        self.post_slug = post_slug

    def _slug(self, post_slug: Optional[str]) -> str:
        return self.post_slug if post_slug is None else post_slug

    def _lookup(self, table_id: str, label: str) -> tuple[Optional[TableArtifact], Optional[str]]:
        artifact = self.loader.get_table(table_id)
        if artifact is None:
            available = ", ".join(self.loader.tables.keys())
            return None, _error(f'Error: {label} "{escape(table_id)}" not found. Available tables: {escape(available)}')
        return artifact, None

    def _title(self, artifact: TableArtifact, atts: Dict[str, Any], post_slug: Optional[str]) -> str:
        title = str(atts.get("title") or "").strip() or artifact.title
        return resolve_title_placeholders(title, self._slug(post_slug))

    def render_table(self, atts: Dict[str, Any], post_slug: Optional[str] = None) -> str:
        table_id = str(atts.get("id") or "").strip()
        if not table_id:
            return _error('Error: No table ID specified. Usage: [contentful_table id="your-table-id"]')

        artifact, error = self._lookup(table_id, "Table")
        if artifact is None:
            return error or ""

        title = self._title(artifact, atts, post_slug)
        if title != artifact.title:
            artifact = artifact.model_copy(update={"title": title})

        # "filters" supersedes the older "key" attribute.
        key_filter = str(atts.get("filters") or "").strip() or str(atts.get("key") or "").strip()
        css_class = str(atts.get("class") or "").strip()

        if artifact.type == "tableOfContents":
            return render_toc_html(artifact, table_id, css_class)
        return render_table_html(
            artifact,
            table_id,
            key_filter,
            erase_when_unfiltered=self.erase_when_unfiltered,
            css_class=css_class,
        )

    def render_toc(self, atts: Dict[str, Any], post_slug: Optional[str] = None) -> str:
        table_id = str(atts.get("id") or "").strip()
        if not table_id:
            return _error('Error: No TOC ID specified. Usage: [contentful_toc id="your-toc-id"]')

        artifact, error = self._lookup(table_id, "TOC")
        if artifact is None:
            return error or ""

        title = self._title(artifact, atts, post_slug)
        if title != artifact.title:
            artifact = artifact.model_copy(update={"title": title})
        return render_toc_html(artifact, table_id, str(atts.get("class") or "").strip())

    def render_cards(self, atts: Dict[str, Any], post_slug: Optional[str] = None) -> str:
        """Card grid for ``[contentful_cards id="..." filters="..."]``.

        Without a ``filters`` attribute, cards whose artifact defines a
        ``selectedKey`` are filtered by the post slug (``filters="auto"``
        does the same explicitly).
        """
        card_id = str(atts.get("id") or "").strip()
        if not card_id:
            return "<!-- Cards: No ID specified -->"

        artifact = self.loader.get_table(card_id)
        key_filter = str(atts.get("filters") or "").strip()
        filters = (artifact.filters if artifact is not None else None) or {}
        if not key_filter and isinstance(filters, dict) and filters.get("selectedKey"):
            key_filter = "auto"
        if key_filter == "auto":
            key_filter = self._slug(post_slug)

        title = str(atts.get("title") or "").strip() or (artifact.title if artifact is not None else "")
        return render_cards_html(
            artifact,
            card_id,
            key_filter,
            title=resolve_title_placeholders(title, self._slug(post_slug)),
            css_class=str(atts.get("class") or "").strip(),
        )

    def do_shortcodes(self, content: str, post_slug: Optional[str] = None) -> str:
        """Replace every table, TOC and cards shortcode in ``content``."""

        def replace(m: re.Match) -> str:
            tag = m.group("tag").lower()
            atts = parse_shortcode_attrs(m.group("atts"))
            if tag in TOC_SHORTCODES:
                return self.render_toc(atts, post_slug)
            if tag in CARDS_SHORTCODES:
                return self.render_cards(atts, post_slug)
            return self.render_table(atts, post_slug)

        return _SHORTCODE_RE.sub(replace, content or "")

    def referenced_ids(self, content: str) -> List[str]:
        """IDs of every shortcode in ``content``, in order."""
        ids: List[str] = []
        for m in _SHORTCODE_RE.finditer(content or ""):
            table_id = parse_shortcode_attrs(m.group("atts")).get("id")
            if table_id:
                ids.append(table_id)
        return ids
