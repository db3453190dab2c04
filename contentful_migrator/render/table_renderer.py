"""
HTML rendering of table artifacts.

:func:`render_table_html` produces the fragment emitted for a
``[contentful_table]`` shortcode: the rows are filtered by the optional
key filter and the key column never appears in the markup.
:func:`render_preview_html` produces the unfiltered preview stored in the
artifact's ``html`` field at extraction time.
"""

from __future__ import annotations

import re
from html import escape
from typing import Any, Dict, List, Optional, Union

from bs4 import BeautifulSoup, Tag

from contentful_migrator.engine.row_filter import render_view
from contentful_migrator.models.table import TableArtifact, normalize_rows

_URL_RE = re.compile(r"(https?://[^\s<\"']+)")
_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*):")

# Removed together with their content.
_DROPPED_TAGS = ["script", "style", "iframe", "object", "embed", "noscript", "template", "svg", "math", "head"]
# Roughly the inline and block set allowed in post content.
ALLOWED_TAGS = {
    "a", "abbr", "b", "blockquote", "br", "cite", "code", "del", "div", "em",
    "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins", "li", "mark",
    "ol", "p", "pre", "q", "s", "small", "span", "strong", "sub", "sup",
    "table", "tbody", "td", "tfoot", "th", "thead", "tr", "u", "ul",
}
ALLOWED_ATTRS = {
    "*": {"class", "id", "title"},
    "a": {"href", "target", "rel"},
    "img": {"src", "alt", "width", "height"},
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan", "scope"},
}
_URL_ATTRS = {"href", "src"}
ALLOWED_SCHEMES = {"http", "https", "mailto", "tel"}


def _esc(value: Any) -> str:
    return escape("" if value is None else str(value), quote=True)


def _css_token(value: str) -> str:
    return re.sub(r"\s+", "-", (value or "").strip().lower())


def linkify(text: str) -> str:
    """Escape plain text and turn bare URLs into links."""
    parts = _URL_RE.split(text or "")
    out: List[str] = []
    for i, part in enumerate(parts):
        if i % 2:
            url = _esc(part)
            out.append(f'<a href="{url}" target="_blank" rel="noopener">{url}</a>')
        else:
            out.append(_esc(part))
    return "".join(out)


def _safe_url(value: str) -> bool:
    compact = re.sub(r"[\s\x00-\x1f]+", "", value).lower()
    m = _SCHEME_RE.match(compact)
    return m is None or m.group(1) in ALLOWED_SCHEMES


def sanitize_cell(cell: Any) -> str:
    """Render a cell value as safe HTML.

    Plain text is escaped and linkified.  Cells that already contain markup
    keep only :data:`ALLOWED_TAGS` and :data:`ALLOWED_ATTRS`; other tags are
    unwrapped, scripts and embeds are removed with their content, and
    ``href``/``src`` values must be relative or use one of
    :data:`ALLOWED_SCHEMES`.
    """
    text = "" if cell is None else str(cell)
    if "<" not in text:
        return linkify(text)

    soup = BeautifulSoup(text, "html.parser")
    for bad in soup.find_all(_DROPPED_TAGS):
        bad.decompose()
    for el in soup.find_all(True):
        if not isinstance(el, Tag):
            continue
        name = el.name.lower()
        if name not in ALLOWED_TAGS:
            el.unwrap()
            continue
        allowed = ALLOWED_ATTRS["*"] | ALLOWED_ATTRS.get(name, set())
        for attr in list(el.attrs):
            value = el.attrs[attr]
            value = " ".join(value) if isinstance(value, list) else str(value)
            if attr.lower() not in allowed or (attr.lower() in _URL_ATTRS and not _safe_url(value)):
                del el.attrs[attr]
    return str(soup)


def _table_markup(headers: List[str], rows: List[List[str]], *, indent: bool = False) -> str:
    nl = "\n" if indent else ""
    html = f'<div class="table-responsive">{nl}<table class="contentful-table">{nl}'
    html += "<thead><tr>" + "".join(f"<th>{_esc(h)}</th>" for h in headers) + f"</tr></thead>{nl}"
    html += "<tbody>"
    for row in rows:
        if row:
            html += nl + "<tr>" + "".join(f"<td>{sanitize_cell(c)}</td>" for c in row) + "</tr>"
    html += f"{nl}</tbody></table>{nl}</div>"
    return html


def _as_artifact(table_data: Union[TableArtifact, Dict[str, Any]]) -> TableArtifact:
    if isinstance(table_data, TableArtifact):
        return table_data
    return TableArtifact.model_validate(table_data or {})


def render_table_html(
    table_data: Union[TableArtifact, Dict[str, Any]],
    table_id: str,
    key_filter: str = "",
    *,
    erase_when_unfiltered: bool = True,
    css_class: str = "",
) -> str:
    """Render a data table artifact for one shortcode occurrence.

    :param table_data: The artifact (model or raw JSON dict).
    :param table_id: Contentful entry ID, used for the wrapper element ID.
    :param key_filter: Comma-separated key values or heading slugs.
    :param erase_when_unfiltered: Forwarded to :func:`render_view`.
    :param css_class: Extra classes for the wrapper element.
    """
    artifact = _as_artifact(table_data)
    extra = artifact.model_extra or {}

    classes = f"contentful-data-table {css_class}".strip()
    html = f'<div class="{_esc(classes)}" id="contentful-table-{_esc(table_id)}">'
    if artifact.title and not key_filter:
        html += f"<h3>{_esc(artifact.title)}</h3>"

    if artifact.display_rows:
        view = render_view(artifact.projected(), key_filter, erase_when_unfiltered=erase_when_unfiltered)
        html += _table_markup(view.headers, view.rows)
    elif isinstance(extra.get("headers"), list) and isinstance(extra.get("rows"), list):
        html += _table_markup([str(h) for h in extra["headers"]], normalize_rows(extra["rows"]))
    else:
        html += "<p>No table data available.</p>"

    html += "</div>"
    return html


def render_preview_html(artifact: TableArtifact) -> str:
    """Unfiltered preview with style, theme and width classes.

    The key column is removed as it would be at render time.
    """
    if not artifact.display_rows:
        return ""
    style = _css_token(artifact.style or "Equal Width")
    theme = _css_token(artifact.theme or "Standard")
    full_width = " table-full-width" if artifact.full_width is not False else ""

    html = f'<div class="contentful-data-table{full_width} style-{_esc(style)} theme-{_esc(theme)}">\n'
    if artifact.title:
        html += f'<h3 class="table-title">{_esc(artifact.title)}</h3>\n'
    view = render_view(artifact.projected(), None)
    html += _table_markup(view.headers, view.rows, indent=True)
    html += "\n</div>\n"
    return html


def render_toc_html(table_data: Union[TableArtifact, Dict[str, Any]], table_id: str, css_class: str = "") -> str:
    """Container for a client-side table of contents."""
    artifact = _as_artifact(table_data)
    extra = artifact.model_extra or {}
    header_tags: Optional[List[str]] = extra.get("headerTags") or ["H2"]
    classes = "contentful-table-of-contents"
    if extra.get("isSticky"):
        classes += " toc-sticky"
    classes += f" toc-style-{_css_token(artifact.style or 'List')}"
    if css_class:
        classes += f" {css_class}"

    html = f'<div class="{_esc(classes)}" id="contentful-toc-{_esc(table_id)}">'
    if artifact.title:
        html += f'<h3 class="toc-title">{_esc(artifact.title)}</h3>'
    tags = ",".join(str(t) for t in header_tags)
    html += f'<div class="toc-container" data-headers="{_esc(tags)}"></div></div>'
    return html
