"""Utility helpers: configuration, constants, slugs and timestamps."""
