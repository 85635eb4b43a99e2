from core.rename.sanitizer import (
    NTFS_CHARS,
    SANITIZE_WARNING,
    invalid_filename_chars,
    sanitize_filename,
    strip_invalid_chars,
)
from core.status import MessageType


def test_windows_set_includes_reserved_and_control_chars() -> None:
    chars = invalid_filename_chars(False, platform_name="nt")
    for ch in '"<>|:*?\\/':
        assert ch in chars
    assert "\x00" in chars
    assert "\x1f" in chars
    assert " " not in chars


def test_posix_set_is_minimal() -> None:
    assert invalid_filename_chars(False, platform_name="posix") == frozenset({"\0", "/"})


def test_windows_safe_adds_ntfs_chars_on_posix() -> None:
    chars = invalid_filename_chars(True, platform_name="posix")
    assert NTFS_CHARS <= chars
    assert "\0" in chars


def test_strip_invalid_chars() -> None:
    assert strip_invalid_chars("a/b\0c", {"/", "\0"}) == "abc"


def test_removal_reports_a_single_warning() -> None:
    messages = []

    result = sanitize_filename(
        "Who/What/Why", "old name", {"/"}, lambda m, t: messages.append((m, t))
    )

    assert result == "WhoWhatWhy"
    assert messages == [(SANITIZE_WARNING, MessageType.WARNING)]


def test_no_warning_when_result_is_current_name() -> None:
    messages = []

    result = sanitize_filename("Show: Pilot", "Show Pilot", {":"}, lambda m, t: messages.append(m))

    assert result == "Show Pilot"
    assert messages == []


def test_no_warning_when_nothing_removed() -> None:
    messages = []

    result = sanitize_filename("Film (1999)", "film", {"/"}, lambda m, t: messages.append(m))

    assert result == "Film (1999)"
    assert messages == []
