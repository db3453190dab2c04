"""
Contentful Management API access.

This module implements the low-level reads needed by the table
extraction pass: paginated entry listing by content type, single entry
and asset lookups, and downloading the CSV file behind a spreadsheet
asset.  All calls share a module level :class:`RateLimiter` and go through
:func:`with_retries`.

Usage example::

    client = ContentfulClient(space_id="abc123", access_token="CFPAT-...")
    for entry in client.get_entries("dataVisualizationTables"):
        title = localized(entry["fields"], "title", "")
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import requests

from contentful_migrator.utils.http import RateLimiter, with_retries

DEFAULT_BASE_URL = "https://api.contentful.com"
DEFAULT_LOCALE = "en-US"
PAGE_SIZE = 100

_limiter = RateLimiter(300)


def localized(fields: Optional[Dict[str, Any]], name: str, default: Any = None, locale: str = DEFAULT_LOCALE) -> Any:
    """Return ``fields[name][locale]`` or ``default``.

    Management API entries store every field as a ``{locale: value}`` map.
    """
    if not fields:
        return default
    value = fields.get(name)
    if not isinstance(value, dict):
        return default
    result = value.get(locale)
    return default if result is None else result


def link_id(link: Any) -> Optional[str]:
    """Extract ``sys.id`` from a Contentful link object."""
    if isinstance(link, dict):
        sys_ = link.get("sys") or {}
        return sys_.get("id")
    return None


def content_type_of(entry: Dict[str, Any]) -> Optional[str]:
    return link_id((entry.get("sys") or {}).get("contentType"))


class ContentfulClient:
    """Thin wrapper around the Contentful Management REST API."""

    def __init__(
        self,
        space_id: str,
        access_token: str,
        environment_id: str = "master",
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.space_id = space_id
        self.environment_id = environment_id
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def environment_url(self) -> str:
        return f"{self.base_url}/spaces/{self.space_id}/environments/{self.environment_id}"

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        def do_request() -> requests.Response:
            _limiter.wait()
            return self.session.get(url, headers=self.headers(), params=params, timeout=self.timeout)

        return with_retries(do_request)

    def iter_entries(self, content_type: str, **query: Any) -> Iterator[Dict[str, Any]]:
        """Yield every entry of ``content_type``, fetching 100 per page."""
        skip = 0
        while True:
            params = {"content_type": content_type, "limit": PAGE_SIZE, "skip": skip, **query}
            data = self._get(f"{self.environment_url}/entries", params=params).json()
            items = data.get("items") or []
            yield from items
            skip += len(items)
            if not items or skip >= int(data.get("total") or 0):
                break

    def get_entries(self, content_type: str, **query: Any) -> List[Dict[str, Any]]:
        return list(self.iter_entries(content_type, **query))

    def get_entry(self, entry_id: str) -> Dict[str, Any]:
        return self._get(f"{self.environment_url}/entries/{entry_id}").json()

    def get_asset(self, asset_id: str) -> Dict[str, Any]:
        return self._get(f"{self.environment_url}/assets/{asset_id}").json()

    def find_page(self, slug: str, content_type: str = "page") -> Optional[Dict[str, Any]]:
        """Return the first entry of ``content_type`` whose ``slug`` field matches."""
        params = {"content_type": content_type, "fields.slug": slug, "limit": 1}
        items = self._get(f"{self.environment_url}/entries", params=params).json().get("items") or []
        return items[0] if items else None

    def download_text(self, url: str) -> str:
        """Download a public asset file (no authorization header)."""

        def do_request() -> requests.Response:
            _limiter.wait()
            return self.session.get(url, timeout=self.timeout)

        resp = with_retries(do_request)
        resp.encoding = resp.encoding or "utf-8"
        return resp.text


def asset_url(asset: Dict[str, Any], locale: str = DEFAULT_LOCALE) -> str:
    """Absolute download URL of an asset's file, or ``""``."""
    file_info = localized(asset.get("fields"), "file", {}, locale) or {}
    url = file_info.get("url") or ""
    if url.startswith("//"):
        url = f"https:{url}"
    return url
