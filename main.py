"""
Entry point for the Contentful to WordPress table migration tool.
"""

import sys

from contentful_migrator.migration_tool import TableMigrationTool

CONFIG_FILE = "config/migration_config.json"


def main():
    """
    Extract every Contentful table and TOC entry into JSON artifacts,
    install them for the WordPress plugin and, when page slugs are given
    on the command line, push the converted page bodies.
    """
    tool = TableMigrationTool(config_file=CONFIG_FILE)
    tool.log_message("Starting Contentful table extraction.")

    if not tool.config["contentful"]["access_token"]:
        tool.log_message(
            "No Contentful access token configured (contentful.access_token or CONTENTFUL_MANAGEMENT_TOKEN).",
            level="ERROR",
        )
        return 1

    stats = tool.extract_tables()
    tool.extract_tocs()

    if tool.config["migration"].get("wp_tables_dir") and not tool.config["migration"].get("dry_run"):
        copied = tool.install()
        tool.log_message(f"Installed {len(copied)} table files")

    for slug in sys.argv[1:]:
        tool.push_page(slug)

    tool.log_message("Extraction complete.")
    return 0 if stats["failed"] == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
