"""Configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet


class RenameMode(str, Enum):
    """Which rename pattern applies to a run."""

    TV = "tv"
    MOVIE = "movie"


@dataclass
class TagConfig:
    """Tag writing settings."""

    enabled: bool = True
    extended: bool = False
    cover_art: bool = True


@dataclass
class RenameConfig:
    """Pattern-driven rename settings."""

    enabled: bool = True
    mode: RenameMode = RenameMode.TV
    tv_pattern: str = "%1 - %2x%3:00 - %4"
    movie_pattern: str = "%1 (%2)"
    windows_safe: bool = False


@dataclass
class CoverArtConfig:
    """Cover art download settings."""

    timeout_seconds: float = 20.0
    user_agent: str = "media-file-writer"


@dataclass
class ToolsConfig:
    """External mkvtoolnix binaries used for Matroska files."""

    mkvmerge_path: str = "mkvmerge"
    mkvextract_path: str = "mkvextract"
    mkvpropedit_path: str = "mkvpropedit"


@dataclass
class RunConfig:
    """Batch run settings."""

    verbose: bool = False
    workers: int = 4
    log_dir: str = "runs"
    write_manifest: bool = True
    max_logs: int = 10


@dataclass
class Config:
    """Top-level configuration container.

    ``invalid_filename_chars`` is derived from ``rename.windows_safe`` when the
    config is built and is shared read-only by every file in the run.
    """

    tag: TagConfig = field(default_factory=TagConfig)
    rename: RenameConfig = field(default_factory=RenameConfig)
    cover_art: CoverArtConfig = field(default_factory=CoverArtConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    run: RunConfig = field(default_factory=RunConfig)
    invalid_filename_chars: FrozenSet[str] = frozenset({"\0", "/"})

    @property
    def verbose(self) -> bool:
        return self.run.verbose
