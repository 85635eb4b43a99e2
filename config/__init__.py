"""Config package facade."""

from config.loader import config_from_dict, load_config
from config.models import (
    Config,
    CoverArtConfig,
    RenameConfig,
    RenameMode,
    RunConfig,
    TagConfig,
    ToolsConfig,
)

__all__ = [
    "Config",
    "CoverArtConfig",
    "RenameConfig",
    "RenameMode",
    "RunConfig",
    "TagConfig",
    "ToolsConfig",
    "config_from_dict",
    "load_config",
]
