"""Bundled charset catalog and conversion tables."""
