"""Metadata to tag field mapping."""

from core.mapping.tags import apply_fields, map_tags

__all__ = ["apply_fields", "map_tags"]
