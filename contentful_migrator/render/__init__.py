"""
Rendering of table artifacts to HTML and expansion of table shortcodes.
"""

from .cards_renderer import render_cards_html
from .labels import format_header_label, resolve_title_placeholders
from .shortcodes import ShortcodeRenderer, TableDataLoader, parse_shortcode_attrs
from .table_renderer import render_preview_html, render_table_html, render_toc_html

__all__ = [
    "ShortcodeRenderer",
    "TableDataLoader",
    "format_header_label",
    "parse_shortcode_attrs",
    "render_cards_html",
    "render_preview_html",
    "render_table_html",
    "render_toc_html",
    "resolve_title_placeholders",
]
