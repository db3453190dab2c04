"""
WordPress helper functions for the Contentful → WordPress migration.

This module implements the WordPress REST API calls used after table
extraction: looking up a post by slug and replacing its content with the
converted HTML (which carries the table shortcodes).  Requests are
authenticated with an application password and share a rate limiter and
the retry wrapper from :mod:`contentful_migrator.utils.http`.

It also installs table artifacts into the directory the WordPress plugin
reads them from.
"""

from __future__ import annotations

import os
import shutil
from typing import Any, Dict, List, Optional, Tuple

import requests

from contentful_migrator.utils.http import RateLimiter, with_retries

_limiter = RateLimiter(120)


def wp_auth(cfg: Dict[str, str]) -> Tuple[str, str]:
    """Basic auth tuple built from ``username`` and ``application_password``."""
    return (cfg.get("username") or "", cfg.get("application_password") or "")


def wp_api_url(cfg: Dict[str, str], path: str) -> str:
    return f"{(cfg.get('base_url') or '').rstrip('/')}/wp-json/wp/v2/{path.lstrip('/')}"


def get_post_by_slug(cfg: Dict[str, str], slug: str, post_type: str = "posts") -> Optional[Dict[str, Any]]:
    """
    Find a post (or page, with ``post_type="pages"``) by slug.

    :param cfg: WordPress configuration with ``base_url``, ``username`` and
        ``application_password``.
    :param slug: Post slug.
    :return: The first matching post object, or ``None``.
    :raises requests.HTTPError: on failure after retries.
    """

    def do_request() -> requests.Response:
        _limiter.wait()
        return requests.get(
            wp_api_url(cfg, post_type),
            params={"slug": slug, "status": "any", "context": "edit"},
            auth=wp_auth(cfg),
            timeout=30,
        )

    posts = with_retries(do_request).json()
    if isinstance(posts, list) and posts:
        return posts[0]
    return None


def update_post_content(cfg: Dict[str, str], post_id: int, content: str, post_type: str = "posts") -> Dict[str, Any]:
    """
    Replace the content of a post.

    :param cfg: WordPress configuration.
    :param post_id: The numeric post ID.
    :param content: New post HTML.
    :return: The updated post object.
    :raises requests.HTTPError: on failure.
    """

    def do_request() -> requests.Response:
        _limiter.wait()
        return requests.post(
            wp_api_url(cfg, f"{post_type}/{post_id}"),
            json={"content": content},
            auth=wp_auth(cfg),
            timeout=60,
        )

    return with_retries(do_request).json()


def install_tables(src_dir: str, dest_dir: str) -> List[str]:
    """Copy every ``*.json`` artifact from ``src_dir`` into ``dest_dir``.

    :return: The destination paths written.
    """
    if not os.path.isdir(src_dir) or os.path.realpath(src_dir) == os.path.realpath(dest_dir):
        return []
    os.makedirs(dest_dir, exist_ok=True)
    copied: List[str] = []
    for name in sorted(os.listdir(src_dir)):
        if not name.endswith(".json"):
            continue
        target = os.path.join(dest_dir, name)
        shutil.copyfile(os.path.join(src_dir, name), target)
        copied.append(target)
    return copied
