"""
Bar Archive - portable recipe archive export for bars.

Snapshots a bar's cocktails, ingredients, base taxonomy tables and attached
images into a single versioned ZIP container.
"""

from bar_archive.utils.constants import APP_VERSION

__version__ = APP_VERSION
