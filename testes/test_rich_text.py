import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("requests")

from contentful_migrator.parsers.rich_text import (
    RichTextConverter,
    detect_table_key,
    heading_anchor,
    rich_text_to_html,
)

KEYED_TABLE = {
    "contentType": "dataVisualizationTables",
    "fields": {"filters": {"en-US": {"selectedKey": [{"id": 4, "name": "key"}]}}},
}
PLAIN_TABLE = {"contentType": "dataVisualizationTables", "fields": {}}


def text(value, marks=()):
    return {"nodeType": "text", "value": value, "marks": [{"type": m} for m in marks]}


def heading(level, value):
    return {"nodeType": f"heading-{level}", "content": [text(value)]}


def paragraph(*children):
    return {"nodeType": "paragraph", "content": list(children)}


def embed(entry_id):
    return {"nodeType": "embedded-entry-block", "data": {"target": {"sys": {"id": entry_id, "type": "Link"}}}}


def doc(*nodes):
    return {"nodeType": "document", "content": list(nodes)}


def test_keyed_table_gets_preceding_heading_slug():
    html = rich_text_to_html(
        doc(
            heading(2, "Resources"),
            heading(3, "Area Agency on Aging"),
            paragraph(text("Help for seniors.")),
            embed("tbl1"),
            heading(3, "Food Assistance!"),
            embed("tbl1"),
        ),
        {"tbl1": KEYED_TABLE},
    )
    assert '[contentful_table id="tbl1" key="area-agency-on-aging"]' in html
    assert '[contentful_table id="tbl1" key="food-assistance"]' in html


def test_table_without_selected_key_has_no_key():
    html = rich_text_to_html(doc(heading(3, "Food"), embed("t2")), {"t2": PLAIN_TABLE})
    assert '[contentful_table id="t2"]' in html


def test_previous_embed_stops_heading_search():
    siblings = [heading(3, "Food"), embed("a"), embed("b")]
    assert detect_table_key(KEYED_TABLE, siblings, 2) is None
    assert detect_table_key(KEYED_TABLE, siblings, 1) == "food"


def test_toc_and_unresolved_entries():
    html = rich_text_to_html(doc(embed("toc"), embed("missing")), {"toc": {"contentType": "tableOfContents"}})
    assert '[contentful_toc id="toc"]' in html
    assert "<!-- Embedded entry: missing (not resolved) -->" in html


def test_custom_embedded_entry_renderer_wins():
    converter = RichTextConverter({"tbl1": KEYED_TABLE}, render_embedded_entry=lambda eid, entry: f"<custom {eid}>")
    assert converter.convert(doc(embed("tbl1"))) == "<custom tbl1>"


def test_text_marks_headings_and_lists():
    html = rich_text_to_html(
        doc(
            heading(2, "Getting Help"),
            paragraph(text("a < b", ["bold"])),
            {"nodeType": "unordered-list", "content": [{"nodeType": "list-item", "content": [paragraph(text("one"))]}]},
            paragraph(text("   ")),
        )
    )
    assert '<h2 id="getting-help">Getting Help</h2>' in html
    assert "<p><strong>a &lt; b</strong></p>" in html
    assert "<ul><li>one</li></ul>" in html
    assert "<p>   </p>" not in html


def test_hyperlinks_and_assets():
    converter = RichTextConverter(
        {"page1": {"contentType": "page", "slug": "about"}},
        {"img1": {"url": "https://images/x.png", "title": "X"}},
    )
    html = converter.convert(
        doc(
            paragraph(
                {"nodeType": "hyperlink", "data": {"uri": "https://e.org"}, "content": [text("site")]},
                {"nodeType": "entry-hyperlink", "data": {"target": {"sys": {"id": "page1"}}}, "content": [text("about")]},
            ),
            {"nodeType": "embedded-asset-block", "data": {"target": {"sys": {"id": "img1"}}}},
        )
    )
    assert '<a href="https://e.org">site</a>' in html
    assert '<a href="/about">about</a>' in html
    assert '<img src="https://images/x.png" alt="X" />' in html


def test_non_document_input():
    assert rich_text_to_html(None) == ""
    assert rich_text_to_html({"nodeType": "paragraph"}) == ""


def test_heading_anchor():
    assert heading_anchor("  Food -- Assistance: Programs ") == "food-assistance-programs"
