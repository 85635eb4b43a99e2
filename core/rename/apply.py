"""Applying a computed file name to a file on disk."""

from __future__ import annotations

import shutil
from pathlib import Path

from core.errors import RenameCollisionError
from core.status import MessageType, PathCallback, StatusCallback


def target_path(file_path: Path, new_name: str) -> Path:
    """Keep the directory and extension, swap the base name."""
    return file_path.parent / f"{new_name}{file_path.suffix}"


def move_file(file_path: Path, new_path: Path) -> None:
    """Move a file, refusing to replace an existing destination.

    Raises:
        RenameCollisionError: If ``new_path`` already exists.
        OSError: If the move itself fails.
    """
    if new_path.exists():
        raise RenameCollisionError(f"Destination exists: {new_path}")
    shutil.move(str(file_path), str(new_path))


def rename_file(
    file_path: Path,
    new_name: str,
    set_path: PathCallback,
    set_status: StatusCallback,
    verbose: bool,
) -> bool:
    """Rename a file to a new base name in place.

    Args:
        file_path: Current file location.
        new_name: Sanitized base name without extension.
        set_path: Receives the new path after a successful move.
        set_status: Receives success and failure messages.
        verbose: Include exception details in failure messages.

    Returns:
        True when the file ends up at the requested name.
    """
    new_path = target_path(file_path, new_name)
    if str(new_path) == str(file_path):
        return True

    try:
        move_file(file_path, new_path)
    except RenameCollisionError:
        set_status("Error: Could not rename - file already exists", MessageType.ERROR)
        return False
    except Exception as exc:
        if verbose:
            set_status(f"Error: Failed to rename file ({type(exc).__name__}: {exc})", MessageType.ERROR)
        else:
            set_status("Error: Failed to rename file", MessageType.ERROR)
        return False

    set_path(str(new_path))
    set_status(f"Successfully renamed file to '{new_path.name}'", MessageType.INFORMATION)
    return True
