"""Status and path reporting callbacks used by the write pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Callable


class MessageType(str, Enum):
    """Severity attached to a status message."""

    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"


StatusCallback = Callable[[str, MessageType], None]
PathCallback = Callable[[str], None]
