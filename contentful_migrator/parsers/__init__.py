"""
Parsers and converters used by the migration pipeline.

Currently this subpackage exposes ``rich_text_to_html`` and
``RichTextConverter`` from :mod:`contentful_migrator.parsers.rich_text`.
"""

from .rich_text import RichTextConverter, rich_text_to_html

__all__ = ["RichTextConverter", "rich_text_to_html"]
