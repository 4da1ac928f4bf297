"""Main gate crossing tracker class."""

import logging
import time
from typing import Optional

from google.transit import gtfs_realtime_pb2

from .arrival_selector import select_arrivals
from .config import GateConfig
from .exceptions import FetchError
from .feed_client import FeedClient
from .gate_estimator import estimate_gate_time
from .models import DisplayText
from .presenter import present

logger = logging.getLogger(__name__)


class GateCrossingTracker:
    """
    Predicts when a rail crossing gate will next close.

    This class provides methods to:
    - Predict the gate closing time from a feed snapshot
    - Fetch the live feed and predict from it
    - Produce the display text for the current moment
    """

    def __init__(self, config: Optional[GateConfig] = None, feed_client: Optional[FeedClient] = None):
        """
        Initialize the tracker.

        Args:
            config: Route, stops and offsets to use. Defaults to GateConfig().
            feed_client: Client to fetch the feed with. Built from config if None.
        """
        self.config = config or GateConfig()
        self.feed_client = feed_client or FeedClient(
            self.config.feed_url, timeout=self.config.fetch_timeout
        )

    def predict_from_feed(self, feed: gtfs_realtime_pb2.FeedMessage, now: int) -> Optional[int]:
        """
        Predict the gate closing time from an already decoded feed.

        Args:
            feed: Decoded FeedMessage.
            now: Evaluation time as a Unix timestamp.

        Returns:
            Gate closing Unix timestamp, or None if nothing is coming.
        """
        arrivals = select_arrivals(
            feed,
            self.config.route_id,
            self.config.stop_id_south,
            self.config.stop_id_north,
            now,
        )
        return estimate_gate_time(
            arrivals.south,
            arrivals.north,
            self.config.south_offset,
            self.config.north_offset,
            now,
        )

    def get_prediction(self, now: Optional[int] = None) -> Optional[int]:
        """
        Fetch the live feed and predict the gate closing time.

        Raises:
            FetchError: If the feed is unavailable.
        """
        if now is None:
            now = int(time.time())
        feed = self.feed_client.fetch()
        return self.predict_from_feed(feed, now)

    def get_display(self, now: Optional[int] = None) -> DisplayText:
        """
        Get the display text for a refresh.

        Feed failures are rendered as the error text rather than raised.

        Args:
            now: Evaluation time. Defaults to the current time.

        Returns:
            DisplayText with the current time and predicted gate time.
        """
        if now is None:
            now = int(time.time())

        try:
            gate_time = self.get_prediction(now)
        except FetchError as e:
            logger.warning(f"Feed unavailable ({e.cause}): {e}")
            return self._present(now, None, fetch_succeeded=False)

        logger.debug(f"Predicted gate time {gate_time} at {now}")
        return self._present(now, gate_time, fetch_succeeded=True)

    def _present(self, now: int, gate_time: Optional[int], fetch_succeeded: bool) -> DisplayText:
        return present(
            now,
            gate_time,
            fetch_succeeded=fetch_succeeded,
            utc_offset=self.config.utc_offset,
            tz=self.config.tzinfo,
        )
