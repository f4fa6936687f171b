"""Shared helpers: error messages, style catalog, image references."""
