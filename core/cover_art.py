"""Run-scoped cover art download cache."""

from __future__ import annotations

import threading
from typing import Dict

import requests

from core.status import MessageType, StatusCallback
from logger import get_logger

log = get_logger()


class CoverArtCache:
    """Downloads each distinct cover image once per run.

    Entries are keyed by cover filename and never evicted; a filename is
    assumed to resolve to the same bytes for the whole run. Only complete,
    successful downloads are stored. Two workers missing the same key at the
    same time may both download it; the second insert replaces the first with
    identical content.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = 20.0,
        user_agent: str | None = None,
    ) -> None:
        self._session = session or requests.Session()
        if user_agent:
            self._session.headers["User-Agent"] = user_agent
        self._timeout = timeout
        self._images: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def __contains__(self, cover_filename: object) -> bool:
        with self._lock:
            return cover_filename in self._images

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)

    def get(self, cover_filename: str) -> bytes | None:
        with self._lock:
            return self._images.get(cover_filename)

    def fetch(
        self,
        cover_filename: str,
        cover_url: str | None,
        set_status: StatusCallback,
        verbose: bool = False,
    ) -> bytes | None:
        """Return cover bytes, downloading them on first use.

        Args:
            cover_filename: Cache key for the image.
            cover_url: Location to download from on a cache miss.
            set_status: Receives an error message when the download fails.
            verbose: Include HTTP status and URL in error messages.

        Returns:
            Image bytes, or None if the download failed.
        """
        cached = self.get(cover_filename)
        if cached is not None:
            log.debug(f"  Cover art cache hit: {cover_filename}")
            return cached

        try:
            resp = self._session.get(str(cover_url or ""), timeout=self._timeout)
        except requests.RequestException as exc:
            if verbose:
                set_status(
                    f"Error: failed to download cover art ({type(exc).__name__}: {exc})",
                    MessageType.ERROR,
                )
            else:
                set_status("Error: failed to download cover art", MessageType.ERROR)
            return None

        if not resp.ok:
            if verbose:
                set_status(
                    f"Error: failed to download cover art ({resp.status_code}:{cover_url})",
                    MessageType.ERROR,
                )
            else:
                set_status("Error: failed to download cover art", MessageType.ERROR)
            return None

        data = resp.content
        with self._lock:
            self._images[cover_filename] = data
        log.debug(f"  Cover art downloaded: {cover_filename} ({len(data)} bytes)")
        return data
