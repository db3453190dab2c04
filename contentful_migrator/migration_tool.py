"""
High-level orchestration of the Contentful → WordPress table migration.

This module defines a :class:`TableMigrationTool` class that ties together
the extractors, the projection engine, the renderers and the WordPress
helpers into a complete pipeline: fetch every table and TOC entry from
Contentful, write one JSON artifact per entry, install the artifacts for
the WordPress plugin, and push converted page bodies.

Configuration is supplied via a JSON file path or directly as a
dictionary.  The ``contentful`` section holds ``space_id``,
``environment_id`` and ``access_token``; ``wordpress`` holds ``base_url``,
``username`` and ``application_password``.  Missing values fall back to the
environment variables used by the original scripts.  Run settings live
under ``migration``.
"""

from __future__ import annotations

import datetime
import json
import os
from typing import Any, Dict, List, Optional

import requests

from contentful_migrator.extractors.contentful_extractor import ContentfulClient, localized
from contentful_migrator.extractors.table_extractor import (
    TABLE_CONTENT_TYPE,
    TOC_CONTENT_TYPE,
    build_toc_artifact,
    extract_table,
    write_artifact,
)
from contentful_migrator.migrators.wordpress_migrator import (
    get_post_by_slug,
    install_tables,
    update_post_content,
)
from contentful_migrator.models.table import InlineTable, SpreadsheetReference
from contentful_migrator.parsers.rich_text import RichTextConverter
from contentful_migrator.render.shortcodes import ShortcodeRenderer, TableDataLoader
from contentful_migrator.utils.errors import report_error, report_ok

_LOG_FILE = os.path.join("reports", "migration", "migration.log")


class TableMigrationTool:
    """
    Encapsulates the state and behavior required to migrate Contentful
    tables into WordPress.  Detailed success and failure information is
    recorded using the :mod:`contentful_migrator.utils.errors` module.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        config.setdefault("contentful", {})
        config["contentful"].setdefault("space_id", os.getenv("CONTENTFUL_SPACE_ID", ""))
        config["contentful"].setdefault("environment_id", os.getenv("CONTENTFUL_ENVIRONMENT_ID", "master"))
        config["contentful"].setdefault("access_token", os.getenv("CONTENTFUL_MANAGEMENT_TOKEN", ""))
        config["contentful"].setdefault("base_url", "https://api.contentful.com")

        config.setdefault("wordpress", {})
        config["wordpress"].setdefault("base_url", os.getenv("WP_BASE_URL", ""))
        config["wordpress"].setdefault("username", os.getenv("WP_USERNAME", ""))
        config["wordpress"].setdefault("application_password", os.getenv("WP_APPLICATION_PASSWORD", ""))

        config.setdefault("migration", {})
        config["migration"].setdefault("dry_run", False)
        config["migration"].setdefault("limit", None)
        config["migration"].setdefault("out_dir", os.path.join("out", "tables"))
        config["migration"].setdefault("wp_tables_dir", "")
        config["migration"].setdefault("erase_key_when_unfiltered", True)

        self.config = config
        self._client: Optional[ContentfulClient] = None

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        os.makedirs(os.path.dirname(_LOG_FILE), exist_ok=True)
        with open(_LOG_FILE, "a", encoding="utf-8") as f:
            f.write(f"{datetime.datetime.now().isoformat(timespec='seconds')} {level}: {message}\n")

    @property
    def client(self) -> ContentfulClient:
        if self._client is None:
            cf = self.config["contentful"]
            self._client = ContentfulClient(
                cf["space_id"],
                cf["access_token"],
                cf["environment_id"],
                base_url=cf["base_url"],
            )
        return self._client

    @property
    def out_dirs(self) -> List[str]:
        mig = self.config["migration"]
        return [d for d in (mig.get("out_dir"), mig.get("wp_tables_dir")) if d]

    def extract_tables(self) -> Dict[str, int]:
        """
        Fetch every table entry, project it and write its artifact.

        A failure on one table is logged and the run continues.

        :return: Counters for the run summary.
        """
        stats = {"total": 0, "success": 0, "inline": 0, "spreadsheet": 0, "failed": 0}
        limit: Optional[int] = self.config["migration"].get("limit")
        dry_run: bool = self.config["migration"].get("dry_run", False)

        self.log_message(f"Fetching {TABLE_CONTENT_TYPE} entries...")
        entries = self.client.get_entries(TABLE_CONTENT_TYPE)
        if limit is not None:
            entries = entries[:limit]
        stats["total"] = len(entries)
        self.log_message(f"Found {len(entries)} table entries")

        for entry in entries:
            entry_id = (entry.get("sys") or {}).get("id") or ""
            title = localized(entry.get("fields"), "title", "")
            item = {"id": entry_id, "title": title}
            try:
                artifact, source = extract_table(entry, self.client)
            except requests.RequestException as e:
                stats["failed"] += 1
                report_error("CONTENTFUL_NETWORK", item, e)
                self.log_message(f"Table {entry_id} ({title}): {e}", "WARNING")
                continue
            except Exception as e:
                stats["failed"] += 1
                report_error("TABLE_EXTRACT", item, e)
                self.log_message(f"Table {entry_id} ({title}) could not be extracted: {e}", "ERROR")
                continue

            if not artifact.display_rows:
                self.log_message(f"Table {entry_id} ({title}) has no data ({source.kind} source)", "WARNING")

            if dry_run:
                self.log_message(f"Dry-run: would write {entry_id}.json")
            else:
                try:
                    write_artifact(artifact, entry_id, self.out_dirs)
                except OSError as e:
                    stats["failed"] += 1
                    report_error("TABLE_EXTRACT", item, e)
                    continue

            stats["success"] += 1
            if isinstance(source, InlineTable):
                stats["inline"] += 1
            elif isinstance(source, SpreadsheetReference):
                stats["spreadsheet"] += 1
            report_ok(
                "TABLE_EXTRACTED",
                item,
                {"source": source.kind, "rows": max(len(artifact.display_rows) - 1, 0), "keyValues": artifact.key_values},
            )

        self.log_message(
            f"Tables: {stats['success']}/{stats['total']} "
            f"(inline {stats['inline']}, spreadsheet {stats['spreadsheet']}, failed {stats['failed']})"
        )
        return stats

    def extract_tocs(self) -> int:
        """Write an artifact for every table-of-contents entry."""
        count = 0
        dry_run: bool = self.config["migration"].get("dry_run", False)
        for entry in self.client.get_entries(TOC_CONTENT_TYPE):
            entry_id = (entry.get("sys") or {}).get("id") or ""
            item = {"id": entry_id, "title": localized(entry.get("fields"), "title", "")}
            artifact = build_toc_artifact(entry.get("fields") or {})
            if not dry_run:
                try:
                    write_artifact(artifact, entry_id, self.out_dirs)
                except OSError as e:
                    report_error("TOC_EXTRACT", item, e)
                    continue
            report_ok("TOC_EXTRACTED", item)
            count += 1
        self.log_message(f"TOC entries: {count}")
        return count

    def install(self, dest_dir: Optional[str] = None) -> List[str]:
        """Copy artifacts from ``out_dir`` into the plugin tables directory."""
        src = self.config["migration"]["out_dir"]
        dest = dest_dir or self.config["migration"].get("wp_tables_dir")
        if not dest:
            self.log_message("No wp_tables_dir configured; skipping install.", "WARNING")
            return []
        if os.path.realpath(src) == os.path.realpath(dest):
            self.log_message(f"Artifacts are already written to {dest}; skipping install.")
            return []
        copied = install_tables(src, dest)
        report_ok("TABLES_INSTALLED", {"id": dest}, {"count": len(copied)})
        return copied

    def shortcode_renderer(self, post_slug: str = "") -> ShortcodeRenderer:
        return ShortcodeRenderer(
            TableDataLoader(self.config["migration"]["out_dir"]),
            erase_when_unfiltered=bool(self.config["migration"].get("erase_key_when_unfiltered", True)),
            post_slug=post_slug,
        )

    def convert_page(self, slug: str, content_type: str = "page") -> Optional[str]:
        """Convert the rich text body of a Contentful page to WordPress HTML."""
        page = self.client.find_page(slug, content_type)
        if page is None:
            self.log_message(f"Contentful page '{slug}' not found", "WARNING")
            return None
        body = localized(page.get("fields"), "body")

        entries: Dict[str, Dict[str, Any]] = {}
        for node in _embedded_nodes(body):
            entry_id = ((node.get("data") or {}).get("target") or {}).get("sys", {}).get("id")
            if not entry_id or entry_id in entries:
                continue
            try:
                linked = self.client.get_entry(entry_id)
            except requests.HTTPError as e:
                self.log_message(f"Embedded entry {entry_id} could not be fetched: {e}", "WARNING")
                continue
            entries[entry_id] = {
                "contentType": ((linked.get("sys") or {}).get("contentType") or {}).get("sys", {}).get("id"),
                "fields": linked.get("fields") or {},
                "slug": localized(linked.get("fields"), "slug"),
            }
        return RichTextConverter(entries).convert(body)

    def push_page(self, slug: str, *, post_type: str = "posts") -> bool:
        """Convert a Contentful page and replace the matching WordPress post body."""
        item = {"id": slug, "title": slug}
        html = self.convert_page(slug)
        if html is None:
            return False

        renderer = self.shortcode_renderer(slug)
        missing = [i for i in renderer.referenced_ids(html) if renderer.loader.get_table(i) is None]
        if missing:
            self.log_message(f"Page '{slug}' references tables with no artifact: {', '.join(missing)}", "WARNING")

        if self.config["migration"].get("dry_run", False):
            self.log_message(f"Dry-run: would update '{slug}' ({len(html)} chars)")
            return True

        wp = self.config["wordpress"]
        try:
            post = get_post_by_slug(wp, slug, post_type)
            if post is None:
                report_error("WP_POST_NOT_FOUND", item)
                return False
            update_post_content(wp, post["id"], html, post_type)
        except requests.RequestException as e:
            error_details = e.response.text if getattr(e, "response", None) is not None else str(e)
            report_error("WP_UPDATE", item, e)
            self.log_message(f"Failed to update '{slug}': {error_details}", "ERROR")
            return False

        report_ok("WP_UPDATED", item, {"post_id": post["id"]})
        return True


def _embedded_nodes(node: Any) -> List[Dict[str, Any]]:
    found: List[Dict[str, Any]] = []
    if isinstance(node, dict):
        if node.get("nodeType") == "embedded-entry-block":
            found.append(node)
        for child in node.get("content") or []:
            found.extend(_embedded_nodes(child))
    return found
