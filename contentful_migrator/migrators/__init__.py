"""
WordPress migrators and helpers.

This subpackage provides functions to interact with the WordPress REST
API for locating and updating posts, and to install extracted table
artifacts where the WordPress plugin loads them.
"""
