"""GTFS-Realtime feed fetcher and decoder."""

import logging
import time
from typing import Optional

import requests
from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from .exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
CHUNK_SIZE = 64 * 1024


class FeedClient:
    """Fetches and decodes a single GTFS-Realtime feed."""

    def __init__(
        self,
        feed_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the feed client.

        Args:
            feed_url: Full URL to the protobuf feed.
            timeout: Seconds allowed for the whole download.
            session: Optional session to issue requests with.
        """
        self.feed_url = feed_url
        self.timeout = timeout
        self._session = session

    def fetch(self) -> gtfs_realtime_pb2.FeedMessage:
        """
        Fetch the feed once and decode it.

        Returns:
            Decoded FeedMessage.

        Raises:
            FetchError: On network failure, non-success status, or an undecodable body.
        """
        data = self._fetch_bytes()
        return self._decode(data)

    def _fetch_bytes(self) -> bytes:
        logger.debug(f"Fetching {self.feed_url}")
        # requests applies timeout per socket operation, so the whole download
        # is also held to the same deadline
        deadline = time.monotonic() + self.timeout
        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(self.feed_url, timeout=self.timeout, stream=True)
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch {self.feed_url}: {e}")
            raise FetchError(f"Request to {self.feed_url} failed: {e}", cause="network") from e

        try:
            if not 200 <= response.status_code < 300:
                logger.warning(f"Feed {self.feed_url} returned HTTP {response.status_code}")
                raise FetchError(
                    f"Feed {self.feed_url} returned HTTP {response.status_code}", cause="status"
                )
            return self._read_body(response, deadline)
        finally:
            response.close()

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    logger.warning(f"Feed {self.feed_url} did not finish within {self.timeout}s")
                    raise FetchError(
                        f"Feed {self.feed_url} did not finish within {self.timeout}s",
                        cause="network",
                    )
                chunks.append(chunk)
        except requests.RequestException as e:
            logger.warning(f"Failed to read {self.feed_url}: {e}")
            raise FetchError(f"Reading {self.feed_url} failed: {e}", cause="network") from e
        return b"".join(chunks)

    def _decode(self, data: bytes) -> gtfs_realtime_pb2.FeedMessage:
        feed = gtfs_realtime_pb2.FeedMessage()
        try:
            feed.ParseFromString(data)
        except DecodeError as e:
            logger.warning(f"Failed to decode feed from {self.feed_url}: {e}")
            raise FetchError(f"Malformed feed payload: {e}", cause="decode") from e

        logger.debug(f"Decoded {len(feed.entity)} entities")
        return feed
