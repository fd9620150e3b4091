"""Catalog sources: CSV tables and icon bitmaps on disk."""
