"""Filename sanitizing for computed rename targets."""

from __future__ import annotations

import os
from typing import AbstractSet, FrozenSet

from core.status import MessageType, StatusCallback


# Characters Windows refuses in a file name, plus the ASCII control range.
_WINDOWS_RESERVED = frozenset('"<>|:*?\\/') | frozenset(chr(code) for code in range(32))
_POSIX_RESERVED = frozenset({"\0", "/"})
NTFS_CHARS = frozenset('<>:"/\\|?*')

SANITIZE_WARNING = "Warning: Invalid characters in file name, automatically removing"


def invalid_filename_chars(windows_safe: bool, platform_name: str | None = None) -> FrozenSet[str]:
    """Return the characters that must not appear in a file name.

    Args:
        windows_safe: Also strip characters NTFS rejects, even on POSIX hosts.
        platform_name: ``os.name`` override for tests.

    Returns:
        Frozen set of single-character strings.
    """
    name = platform_name or os.name
    chars = _WINDOWS_RESERVED if name == "nt" else _POSIX_RESERVED
    if windows_safe:
        chars = chars | NTFS_CHARS
    return frozenset(chars)


def strip_invalid_chars(name: str, invalid_chars: AbstractSet[str]) -> str:
    return "".join(ch for ch in name if ch not in invalid_chars)


def sanitize_filename(
    candidate: str,
    current_name: str,
    invalid_chars: AbstractSet[str],
    set_status: StatusCallback,
) -> str:
    """Remove invalid characters from a computed file name.

    A warning is reported only when characters were actually removed and the
    cleaned name is not simply the file's existing name.

    Args:
        candidate: File name (without extension) produced by the rename pattern.
        current_name: The file's current base name, without extension.
        invalid_chars: Characters to remove.
        set_status: Status callback for the warning.

    Returns:
        The cleaned file name.
    """
    result = strip_invalid_chars(candidate, invalid_chars)
    if result != current_name and len(result) != len(candidate):
        set_status(SANITIZE_WARNING, MessageType.WARNING)
    return result
