"""Media file writer: embed resolved metadata into media files and rename them."""

__version__ = "0.1.0"
