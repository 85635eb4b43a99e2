"""Exceptions raised inside the write pipeline.

None of these escape ``core.file_writer.write_file``; they are caught at the
stage boundary and turned into status messages.
"""

from __future__ import annotations

from typing import Iterable


class TagContainerError(RuntimeError):
    """Raised when a tag container cannot be opened, mutated or saved."""

    def __init__(self, message: str, corruption_reasons: Iterable[str] | None = None) -> None:
        super().__init__(message)
        self.corruption_reasons = [str(reason) for reason in (corruption_reasons or []) if str(reason).strip()]


class UnsupportedContainerError(TagContainerError):
    """Raised when no tag container handles the file's format."""


class RenameCollisionError(FileExistsError):
    """Raised when the rename destination is already occupied."""
