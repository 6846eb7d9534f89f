# ========================
# crash_dashboard/pipeline/fetching.py
# ========================

"""
Feed Fetching Module

Retrieves the raw incident report feeds, either over HTTP from the static
file server or from the local filesystem, and decodes them to text.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urljoin

import requests

from .exceptions import DecodeError, FetchError
from .models import FeedText

logger = logging.getLogger(__name__)


class FeedFetcher:
    """
    Fetches feed sources and returns their decoded text.
    A source is an http(s) URL, a server path joined to ``base_url``, or a
    local file path when no ``base_url`` is configured.
    """

    def __init__(self,
                 base_url: Optional[str] = None,
                 encoding: str = 'utf-8',
                 timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the fetcher.

        Args:
            base_url (str): Server root for relative sources
            encoding (str): Text encoding of the feeds
            timeout (float): Per-request timeout in seconds, None waits indefinitely
            session (requests.Session): HTTP session to reuse
        """
        self.base_url = base_url
        self.encoding = encoding
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve(self, source: str) -> str:
        """Return the URL or filesystem path a source refers to."""
        if _is_url(source):
            return source
        if self.base_url:
            return urljoin(self.base_url.rstrip('/') + '/', source.lstrip('/'))
        return source

    def fetch_text(self, source: str) -> FeedText:
        """
        Fetch one source and decode it.

        Raises:
            FetchError: Network failure, non-2xx status or unreadable file
            DecodeError: Body is not valid text in the configured encoding
        """
        location = self.resolve(source)
        if _is_url(location):
            body, status_code = self._fetch_url(location)
        else:
            body, status_code = self._read_file(location), None

        try:
            text = body.decode(self.encoding)
        except (UnicodeDecodeError, LookupError) as e:
            logger.error(f"Could not decode {location}: {e}")
            raise DecodeError(location, self.encoding) from e

        logger.info(f"Fetched {location} ({len(body):,} bytes)")
        return FeedText(source=location, text=text, status_code=status_code)

    def fetch_all(self, sources: Sequence[str]) -> List[FeedText]:
        """
        Fetch all sources concurrently and wait for every one of them.

        Returns:
            list[FeedText]: Decoded feeds, in the order of ``sources``

        Raises:
            FetchError, DecodeError: If any source fails; no partial result is returned
        """
        if not sources:
            return []

        with ThreadPoolExecutor(max_workers=len(sources)) as executor:
            futures = [executor.submit(self.fetch_text, source) for source in sources]
            # Leaving the block waits for every fetch before errors surface
        return [future.result() for future in futures]

    def _fetch_url(self, url: str):
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise FetchError(url, str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Request to {url} returned HTTP {response.status_code}")
            raise FetchError(url, response.reason or '', response.status_code)

        return response.content, response.status_code

    def _read_file(self, path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            logger.error(f"Could not read {path}: {e}")
            raise FetchError(path, e.strerror or str(e)) from e


def _is_url(source: str) -> bool:
    return source.lower().startswith(('http://', 'https://'))
