"""Data models for the gate crossing tracker."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional


class Direction(Enum):
    """Travel direction past the crossing."""
    SOUTH = "south"
    NORTH = "north"


@dataclass
class DirectionState:
    """Per-direction working state for a single prediction request."""
    direction: Direction
    offset: int  # Seconds between gate closing and train arrival
    next_arrival_time: Optional[int] = None  # Unix timestamp, None means no arrival
    gate_crossing_time: Optional[int] = None  # Unix timestamp, None means no prediction


@dataclass(frozen=True)
class DirectionArrivals:
    """Earliest upcoming arrival at each of the two crossing stops."""
    south: Optional[int] = None  # Unix timestamp
    north: Optional[int] = None  # Unix timestamp


class DisplayText(NamedTuple):
    """Text pair handed back to the host."""
    primary_text: str
    accessibility_text: str


class ComplicationType(Enum):
    """Display capabilities a host can request."""
    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"
    RANGED_VALUE = "ranged_value"
    ICON = "icon"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class ComplicationRequest:
    """A refresh trigger from the host."""
    instance_id: int
    complication_type: ComplicationType
