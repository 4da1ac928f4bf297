"""Gatewatch - Rail grade crossing gate closing predictor."""

__version__ = "0.1.0"

from .models import (
    ComplicationRequest,
    ComplicationType,
    Direction,
    DirectionArrivals,
    DirectionState,
    DisplayText,
)
from .exceptions import ConfigError, FetchError, GatewatchError
from .config import GateConfig, load_config
from .feed_client import FeedClient
from .arrival_selector import select_arrivals
from .gate_estimator import estimate_gate_time
from .presenter import present, preview_text
from .gate_tracker import GateCrossingTracker
from .provider import DataProvider, GateCrossingProvider

__all__ = [
    "GateCrossingTracker",
    "GateCrossingProvider",
    "DataProvider",
    "FeedClient",
    "GateConfig",
    "load_config",
    "select_arrivals",
    "estimate_gate_time",
    "present",
    "preview_text",
    "ComplicationRequest",
    "ComplicationType",
    "Direction",
    "DirectionArrivals",
    "DirectionState",
    "DisplayText",
    "GatewatchError",
    "FetchError",
    "ConfigError",
]
