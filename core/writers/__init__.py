"""Format-specific tag containers."""

from core.writers.container import Picture, TagContainer, TagFields, open_container

__all__ = ["Picture", "TagContainer", "TagFields", "open_container"]
