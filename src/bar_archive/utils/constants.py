"""
Constants for the Bar Archive application.

This module defines system-wide constants including:
- Application metadata
- Archive layout (folder and file names)
- Export defaults
"""

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Bar Archive"
APP_VERSION = "0.1.0"
DATABASE_FILENAME = "bar_archive.db"

# ============================================================================
# Archive Layout
# ============================================================================

COCKTAILS_DIR = "cocktails"
INGREDIENTS_DIR = "ingredients"
IMAGES_SUBDIR = "images"
MANIFEST_FILENAME = "_meta.json"

# ============================================================================
# Export Defaults
# ============================================================================

DEFAULT_EXPORT_FORMAT = "yaml"
BACKUP_FILENAME_PATTERN = "{timestamp}_recipes.zip"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M"

# Serialized layout
YAML_INDENT = 4
YAML_LINE_WIDTH = 4096
JSON_INDENT = 2

# Fixed timestamp for generated archive entries (earliest ZIP date)
ZIP_ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
