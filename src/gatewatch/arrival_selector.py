"""Select the next upcoming arrival at each crossing stop."""

import logging
from typing import Optional

from google.transit import gtfs_realtime_pb2

from .models import DirectionArrivals

logger = logging.getLogger(__name__)


def _earlier_future(candidate: int, current: Optional[int], now: int) -> Optional[int]:
    """Return candidate if it is upcoming and earlier than current, else current."""
    if candidate > now and (current is None or candidate < current):
        return candidate
    return current


def select_arrivals(
    feed: gtfs_realtime_pb2.FeedMessage,
    route_id: str,
    stop_id_south: str,
    stop_id_north: str,
    now: int,
) -> DirectionArrivals:
    """
    Find the earliest future arrival on a route at the two crossing stops.

    Every entity and stop time update is visited; a later entity can still
    carry an earlier arrival for the same stop.

    Args:
        feed: Decoded GTFS-Realtime feed.
        route_id: Route to consider (e.g., "301").
        stop_id_south: Stop reached by southbound trains.
        stop_id_north: Stop reached by northbound trains.
        now: Evaluation time as a Unix timestamp.

    Returns:
        DirectionArrivals with None for directions without an upcoming arrival.
    """
    south: Optional[int] = None
    north: Optional[int] = None

    for entity in feed.entity:
        if not entity.HasField("trip_update"):
            continue

        trip_update = entity.trip_update
        if trip_update.trip.route_id != route_id:
            continue

        for stop_time_update in trip_update.stop_time_update:
            if not stop_time_update.HasField("arrival"):
                continue
            if not stop_time_update.arrival.HasField("time"):
                continue

            arrival_time = stop_time_update.arrival.time
            if stop_time_update.stop_id == stop_id_south:
                south = _earlier_future(arrival_time, south, now)
            if stop_time_update.stop_id == stop_id_north:
                north = _earlier_future(arrival_time, north, now)

    logger.debug(f"Route {route_id}: next south arrival {south}, next north arrival {north}")
    return DirectionArrivals(south=south, north=north)
