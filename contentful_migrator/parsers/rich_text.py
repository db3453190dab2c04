"""
Contentful rich text to WordPress HTML.

Page bodies are rich text documents.  Block and inline nodes map to plain
HTML; embedded table and TOC entries become plugin shortcodes.  Keyed
tables take the slug of the nearest preceding heading as their ``key``
attribute, which the renderer later resolves to one of the table's key
values.
"""

from __future__ import annotations

import re
from html import escape
from typing import Any, Callable, Dict, List, Optional

from contentful_migrator.engine.key_resolver import slugify_heading
from contentful_migrator.extractors.contentful_extractor import link_id

Node = Dict[str, Any]

HEADING_TYPES = {f"heading-{i}": f"h{i}" for i in range(1, 7)}
MARK_TAGS = {
    "bold": "strong",
    "italic": "em",
    "underline": "u",
    "code": "code",
    "superscript": "sup",
    "subscript": "sub",
    "strikethrough": "s",
}


def _attr(text: str) -> str:
    return escape(text or "", quote=True)


def plain_text(node: Optional[Node]) -> str:
    """Concatenated text of ``node`` and its descendants."""
    if not node:
        return ""
    if node.get("value"):
        return str(node["value"])
    return "".join(plain_text(c) for c in node.get("content") or [])


def heading_anchor(text: str) -> str:
    slug = (text or "").lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug).strip("-")


def detect_table_key(entry: Dict[str, Any], siblings: Optional[List[Node]], index: int) -> Optional[str]:
    """Heading slug to use as the ``key`` of an embedded keyed table.

    Walks back from the embedded block to the nearest heading; an earlier
    embedded block ends the search.  Only tables whose ``filters`` define a
    ``selectedKey`` get a key.
    """
    filters = ((entry.get("fields") or {}).get("filters") or {})
    if isinstance(filters, dict) and "en-US" in filters:
        filters = filters.get("en-US") or {}
    if not isinstance(filters, dict) or not filters.get("selectedKey"):
        return None
    if siblings is None or index < 0:
        return None

    for sibling in reversed(siblings[:index]):
        node_type = sibling.get("nodeType") or ""
        if node_type in HEADING_TYPES:
            slug = slugify_heading(plain_text(sibling))
            if slug:
                return slug
        if node_type == "embedded-entry-block":
            break
    return None


class RichTextConverter:
    """Converts a Contentful rich text document to WordPress HTML.

    ``entries`` maps entry IDs to ``{"contentType": ..., "fields": ...,
    "slug": ...}``; ``assets`` maps asset IDs to ``{"url": ..., "title": ...}``.
    Embedded tables and TOCs become plugin shortcodes.
    """

    def __init__(
        self,
        entries: Optional[Dict[str, Dict[str, Any]]] = None,
        assets: Optional[Dict[str, Dict[str, Any]]] = None,
        *,
        render_embedded_entry: Optional[Callable[[str, Optional[Dict[str, Any]]], Optional[str]]] = None,
    ) -> None:
        self.entries = entries or {}
        self.assets = assets or {}
        self.render_embedded_entry = render_embedded_entry

    def convert(self, document: Optional[Node]) -> str:
        if not document or document.get("nodeType") != "document":
            return ""
        content = document.get("content") or []
        parts = [self.render_node(node, content, i) for i, node in enumerate(content)]
        return "\n\n".join(p for p in parts if p)

    def render_children(self, node: Node) -> str:
        return "".join(self.render_node(child) for child in node.get("content") or [])

    def render_node(self, node: Node, siblings: Optional[List[Node]] = None, index: int = -1) -> str:
        node_type = node.get("nodeType") or ""

        if node_type == "text":
            return self.render_text(node)
        if node_type == "paragraph":
            inner = self.render_children(node)
            return f"<p>{inner}</p>" if inner.strip() else ""
        if node_type in HEADING_TYPES:
            tag = HEADING_TYPES[node_type]
            anchor = heading_anchor(plain_text(node))
            return f'<{tag} id="{_attr(anchor)}">{self.render_children(node)}</{tag}>'
        if node_type == "unordered-list":
            return f"<ul>{self.render_children(node)}</ul>"
        if node_type == "ordered-list":
            return f"<ol>{self.render_children(node)}</ol>"
        if node_type == "list-item":
            # List items wrap their text in paragraphs; unwrap them.
            inner = "".join(
                self.render_children(c) if c.get("nodeType") == "paragraph" else self.render_node(c)
                for c in node.get("content") or []
            )
            return f"<li>{inner}</li>"
        if node_type == "blockquote":
            return f"<blockquote>{self.render_children(node)}</blockquote>"
        if node_type == "hr":
            return "<hr />"
        if node_type == "hyperlink":
            uri = (node.get("data") or {}).get("uri") or ""
            return f'<a href="{_attr(uri)}">{self.render_children(node)}</a>'
        if node_type == "entry-hyperlink":
            return self.render_entry_hyperlink(node)
        if node_type == "asset-hyperlink":
            asset = self.assets.get(link_id((node.get("data") or {}).get("target")) or "") or {}
            return f'<a href="{_attr(asset.get("url", ""))}">{self.render_children(node)}</a>'
        if node_type == "embedded-entry-block":
            return self.render_embedded_entry_block(node, siblings, index)
        if node_type == "embedded-asset-block":
            return self.render_embedded_asset(node)
        if node_type == "table":
            rows = "\n".join(self.render_node(c) for c in node.get("content") or [])
            return f'<table class="wp-block-table">\n<tbody>\n{rows}\n</tbody>\n</table>'
        if node_type == "table-row":
            return f"<tr>{self.render_children(node)}</tr>"
        if node_type in ("table-cell", "table-header-cell"):
            tag = "th" if node_type == "table-header-cell" else "td"
            inner = "".join(
                self.render_children(c) if c.get("nodeType") == "paragraph" else self.render_node(c)
                for c in node.get("content") or []
            )
            return f"<{tag}>{inner}</{tag}>"
        return self.render_children(node)

    def render_text(self, node: Node) -> str:
        text = escape(str(node.get("value") or ""), quote=False).replace("\n", "<br />")
        for mark in node.get("marks") or []:
            tag = MARK_TAGS.get(mark.get("type"))
            if tag:
                text = f"<{tag}>{text}</{tag}>"
        return text

    def render_entry_hyperlink(self, node: Node) -> str:
        entry = self.entries.get(link_id((node.get("data") or {}).get("target")) or "") or {}
        content = self.render_children(node)
        if entry.get("slug"):
            return f'<a href="/{_attr(entry["slug"])}">{content}</a>'
        return content

    def render_embedded_asset(self, node: Node) -> str:
        asset_id = link_id((node.get("data") or {}).get("target")) or ""
        asset = self.assets.get(asset_id)
        if not asset or not asset.get("url"):
            return f"<!-- Embedded asset: {escape(asset_id)} (not resolved) -->"
        title = asset.get("title") or ""
        return f'<figure class="wp-block-image"><img src="{_attr(asset["url"])}" alt="{_attr(title)}" /></figure>'

    def render_embedded_entry_block(self, node: Node, siblings: Optional[List[Node]], index: int) -> str:
        entry_id = link_id((node.get("data") or {}).get("target"))
        if not entry_id:
            return "<!-- Embedded entry: missing ID -->"

        entry = self.entries.get(entry_id)
        if self.render_embedded_entry:
            custom = self.render_embedded_entry(entry_id, entry)
            if custom:
                return custom
        if not entry:
            return f"<!-- Embedded entry: {escape(entry_id)} (not resolved) -->"

        content_type = entry.get("contentType")
        if content_type == "tableOfContents":
            return f'[contentful_toc id="{_attr(entry_id)}"]'
        if content_type == "dataVisualizationTables":
            key = detect_table_key(entry, siblings, index)
            if key:
                return f'[contentful_table id="{_attr(entry_id)}" key="{_attr(key)}"]'
            return f'[contentful_table id="{_attr(entry_id)}"]'
        return f"<!-- Embedded entry: {escape(entry_id)} ({escape(str(content_type))}) -->"


def rich_text_to_html(document: Optional[Node], entries: Optional[Dict[str, Dict[str, Any]]] = None, assets: Optional[Dict[str, Dict[str, Any]]] = None) -> str:
    """Convert a rich text ``document`` to HTML with table shortcodes."""
    return RichTextConverter(entries, assets).convert(document)
