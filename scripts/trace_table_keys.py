#!/usr/bin/env python3
"""
Trace how a keyed table is split across the sections of a Contentful page.

For every embedded reference to TABLE_ID in the page body, prints the
nearest preceding heading, the heading slug that ends up in the shortcode
``key`` attribute, the key value it resolves to, and how many rows the
rendered section will show.

Usage:
    python scripts/trace_table_keys.py birmingham-al-facilities 6OGCWSrHDT4MJviE31iLsa
"""

import argparse
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from contentful_migrator.engine.key_resolver import resolve_key_from_heading, slugify_heading
from contentful_migrator.engine.row_filter import render_view
from contentful_migrator.extractors.contentful_extractor import localized
from contentful_migrator.extractors.table_extractor import extract_table
from contentful_migrator.migration_tool import TableMigrationTool
from contentful_migrator.parsers.rich_text import plain_text


def nearest_heading(siblings, index):
    for sibling in reversed(siblings[:index]):
        node_type = sibling.get("nodeType") or ""
        if node_type.startswith("heading-"):
            return plain_text(sibling)
        if node_type == "embedded-entry-block":
            break
    return ""


def main():
    parser = argparse.ArgumentParser(description="Trace heading-derived table keys on a page")
    parser.add_argument("slug", help="Contentful page slug")
    parser.add_argument("table_id", help="Table entry ID")
    parser.add_argument("--config", default=os.path.join(PROJECT_ROOT, "config", "migration_config.json"))
    args = parser.parse_args()

    tool = TableMigrationTool(config_file=args.config)
    client = tool.client

    page = client.find_page(args.slug)
    if page is None:
        print(f"Page '{args.slug}' not found")
        return 1

    table_entry = client.get_entry(args.table_id)
    artifact, source = extract_table(table_entry, client)
    print(f"Table: {artifact.title} ({source.kind} source)")
    print(f"  key column: {artifact.key_column} (index {artifact.key_column_index})")
    print(f"  key values: {', '.join(artifact.key_values) or '-'}")
    print(f"  data rows:  {max(len(artifact.display_rows) - 1, 0)}")
    print()

    body = localized(page.get("fields"), "body") or {}
    content = body.get("content") or []
    count = 0
    for i, node in enumerate(content):
        if node.get("nodeType") != "embedded-entry-block":
            continue
        target = ((node.get("data") or {}).get("target") or {}).get("sys", {}).get("id")
        if target != args.table_id:
            continue
        count += 1
        heading = nearest_heading(content, i)
        slug = slugify_heading(heading)
        resolved = resolve_key_from_heading(slug, artifact.key_values) if slug else None
        view = render_view(artifact.projected(), slug or None)
        print(f"#{count} heading: {heading!r}")
        print(f"    slug: {slug or '-'}  -> key: {resolved or '(no match, all rows)'}  rows: {len(view.rows)}")

    print(f"\nTotal references: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
