"""Rename pattern compiler.

Patterns are plain text with numbered placeholders::

    %1 - %2x%3:00 - %4

``%<n>`` is replaced by the n-th value for the active mode. A numeric value may
carry a custom format after a colon, built from ``0`` (always printed digit)
and ``#`` (digit printed only when significant), so ``%2:000`` renders season
7 as ``007``. Placeholders with an unknown index stay in the output verbatim.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional, Tuple, Union

from core.metadata import MetadataRecord

_TOKEN_RE = re.compile(r"%(?P<index>\d+)(?::(?P<format>[0#]+))?")

Value = Union[str, int, None]


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Placeholder:
    index: int
    number_format: Optional[str]
    raw: str


Segment = Union[Literal, Placeholder]


def format_number(value: int, number_format: Optional[str]) -> str:
    """Render an integer using a ``0``/``#`` digit pattern.

    Args:
        value: Integer to render.
        number_format: Digit pattern, or None for plain decimal.

    Returns:
        Formatted number.
    """
    if not number_format:
        return str(value)
    width = len(number_format) - number_format.index("0") if "0" in number_format else 0
    digits = str(abs(value))
    if value == 0 and width == 0:
        digits = ""
    digits = digits.zfill(width)
    return f"-{digits}" if value < 0 else digits


@dataclass(frozen=True)
class RenamePattern:
    """A rename pattern tokenized into literal and placeholder segments."""

    source: str
    segments: Tuple[Segment, ...]

    @classmethod
    def parse(cls, text: str) -> "RenamePattern":
        segments: list[Segment] = []
        pos = 0
        for match in _TOKEN_RE.finditer(text):
            if match.start() > pos:
                segments.append(Literal(text[pos : match.start()]))
            segments.append(
                Placeholder(
                    index=int(match.group("index")),
                    number_format=match.group("format"),
                    raw=match.group(0),
                )
            )
            pos = match.end()
        if pos < len(text):
            segments.append(Literal(text[pos:]))
        return cls(source=text, segments=tuple(segments))

    def render(self, values: Mapping[int, Value]) -> str:
        """Substitute placeholder values.

        Args:
            values: Placeholder index to value. Integers honour the segment's
                number format; text is inserted as-is; None inserts nothing.

        Returns:
            Rendered file name.
        """
        parts: list[str] = []
        for seg in self.segments:
            if isinstance(seg, Literal):
                parts.append(seg.text)
            elif seg.index not in values:
                parts.append(seg.raw)
            else:
                value = values[seg.index]
                if value is None:
                    continue
                if isinstance(value, int):
                    parts.append(format_number(value, seg.number_format))
                else:
                    parts.append(str(value))
        return "".join(parts)


@lru_cache(maxsize=32)
def compile_pattern(text: str) -> RenamePattern:
    """Parse a pattern once per distinct pattern string."""
    return RenamePattern.parse(text)


def tv_file_name(pattern: str, series: Optional[str], season: int, episode: int, title: Optional[str]) -> str:
    return compile_pattern(pattern).render({1: series, 2: season, 3: episode, 4: title})


def movie_file_name(pattern: str, title: Optional[str], year: Optional[int]) -> str:
    return compile_pattern(pattern).render({1: title, 2: year})


def file_name_for(record: MetadataRecord, tv_mode: bool, tv_pattern: str, movie_pattern: str) -> str:
    """Build the pattern-driven file name (without extension) for a record."""
    if tv_mode:
        return tv_file_name(tv_pattern, record.series_name, record.season, record.episode, record.title)
    return movie_file_name(movie_pattern, record.title, record.year)
