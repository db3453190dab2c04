import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from contentful_migrator.render.table_renderer import (
    linkify,
    render_table_html,
    render_toc_html,
    sanitize_cell,
)

ARTIFACT = {
    "type": "Plain",
    "title": "Local Resources",
    "rawData": [
        ["program-name", "phone-number", "key"],
        ["Agency A", "555-1111", "agency"],
        ["Food Bank B", "555-2222", "food"],
    ],
    "keyColumn": "key",
    "keyColumnIndex": 2,
    "keyValues": ["agency", "food"],
}


def test_filtered_table_hides_title_and_key_column():
    html = render_table_html(ARTIFACT, "t1", "food")
    assert html.startswith('<div class="contentful-data-table" id="contentful-table-t1">')
    assert "<h3>" not in html
    assert "<th>key</th>" not in html
    assert "Food Bank B" in html
    assert "Agency A" not in html
    assert ">food<" not in html


def test_unfiltered_table_shows_title_and_all_rows():
    html = render_table_html(ARTIFACT, "t1")
    assert "<h3>Local Resources</h3>" in html
    assert "Agency A" in html and "Food Bank B" in html
    assert "<th>key</th>" not in html


def test_unfiltered_table_can_keep_key_column():
    html = render_table_html(ARTIFACT, "t1", erase_when_unfiltered=False)
    assert "<th>key</th>" in html


def test_legacy_headers_rows_format():
    html = render_table_html({"headers": ["A", "B"], "rows": [["1", "2"]]}, "old")
    assert "<th>A</th><th>B</th>" in html
    assert "<td>1</td><td>2</td>" in html


def test_no_data():
    assert "<p>No table data available.</p>" in render_table_html({"title": "Empty"}, "e")


def test_headers_are_escaped():
    html = render_table_html({"rawData": [["<b>x</b>"], ["y"]]}, "t")
    assert "<th>&lt;b&gt;x&lt;/b&gt;</th>" in html


def test_sanitize_cell_removes_scripts_and_handlers():
    out = sanitize_cell('<a href="http://x" onclick="evil()">x</a><script>alert(1)</script>')
    assert "onclick" not in out
    assert "<script" not in out
    assert 'href="http://x"' in out


def test_linkify_plain_urls():
    out = linkify("Visit https://example.com/help now & then")
    assert '<a href="https://example.com/help" target="_blank" rel="noopener">https://example.com/help</a>' in out
    assert "&amp; then" in out


def test_toc_container():
    html = render_toc_html({"type": "tableOfContents", "title": "Contents", "style": "List", "headerTags": ["H2", "H3"], "isSticky": True}, "toc1", "wide")
    assert 'class="contentful-table-of-contents toc-sticky toc-style-list wide"' in html
    assert 'data-headers="H2,H3"' in html


def test_sanitize_cell_keeps_only_allowed_markup():
    out = sanitize_cell('<base href="http://evil"><meta http-equiv="refresh"><link rel="stylesheet" href="x.css"><b>bold</b>')
    assert out == "<b>bold</b>"


def test_sanitize_cell_unwraps_unknown_tags_and_drops_unsafe_urls():
    out = sanitize_cell('<font color="red">text</font> <a href="data:text/html;base64,xx" style="x">d</a> <img src=" javascript:alert(1)" alt="i">')
    assert "<font" not in out and "text" in out
    assert "data:" not in out
    assert "style" not in out
    assert "javascript" not in out
    assert 'alt="i"' in out


def test_sanitize_cell_allows_relative_and_mailto_links():
    out = sanitize_cell('<a href="/help" class="x">h</a> <a href="mailto:a@b.org">m</a>')
    assert 'href="/help"' in out
    assert 'class="x"' in out
    assert 'href="mailto:a@b.org"' in out
