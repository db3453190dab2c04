"""
Top-level package for the Contentful → WordPress table migration toolkit.

This package bundles the components required to pull table entries out of
Contentful, project them into display-ready JSON artifacts, and render
those artifacts as filtered HTML tables for WordPress pages.  Modules are
split into subpackages:

* :mod:`contentful_migrator.engine` – key resolution, projection and row filtering
* :mod:`contentful_migrator.models` – pydantic models for the persisted artifacts
* :mod:`contentful_migrator.extractors` – Contentful API access and table extraction
* :mod:`contentful_migrator.parsers` – rich text to HTML conversion
* :mod:`contentful_migrator.render` – shortcode and HTML table rendering
* :mod:`contentful_migrator.migrators` – WordPress REST interactions
* :mod:`contentful_migrator.utils` – CSV parsing, HTTP helpers and event logging

The engine has no knowledge of configuration or network access;
orchestration is handled in :mod:`contentful_migrator.migration_tool`.
"""
