#!/usr/bin/env python3
"""
Render table shortcodes against local artifacts.

Reads content containing table, TOC and cards shortcodes (from a
file or stdin) and prints the HTML the WordPress plugin would produce,
using the JSON artifacts in ``out/tables``.

Usage:
    echo '[contentful_table id="abc" key="food"]' | python scripts/render_table_preview.py
    python scripts/render_table_preview.py page.html --tables-dir out/tables --keep-key-column
    python scripts/render_table_preview.py page.html --post-slug birmingham-al
"""

import argparse
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from contentful_migrator.render.shortcodes import ShortcodeRenderer, TableDataLoader


def main():
    parser = argparse.ArgumentParser(description="Expand contentful table shortcodes locally")
    parser.add_argument("input", nargs="?", help="File with shortcodes (default: stdin)")
    parser.add_argument("--tables-dir", default=os.path.join("out", "tables"))
    parser.add_argument(
        "--keep-key-column",
        action="store_true",
        help="Show the key column when a shortcode has no filter",
    )
    parser.add_argument("--post-slug", default="", help="Slug of the page being previewed (for [city-state] titles and card filters)")
    args = parser.parse_args()

    if args.input:
        with open(args.input, "r", encoding="utf-8") as f:
            content = f.read()
    else:
        content = sys.stdin.read()

    loader = TableDataLoader(args.tables_dir)
    loader.load_all()
    for table_id, error in loader.load_errors.items():
        print(f"Warning: could not load {table_id}: {error}", file=sys.stderr)

    renderer = ShortcodeRenderer(loader, erase_when_unfiltered=not args.keep_key_column, post_slug=args.post_slug)
    print(renderer.do_shortcodes(content))
    return 0


if __name__ == "__main__":
    sys.exit(main())
