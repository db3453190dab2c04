"""
Extractors for Contentful content.

This subpackage provides the Management API client and the functions that
turn table entries into the JSON artifacts read by the renderer.
"""
