"""Convert upcoming arrivals into a predicted gate closing time."""

import logging
from typing import List, Optional

from .models import Direction, DirectionState

logger = logging.getLogger(__name__)


def direction_states(
    south_arrival: Optional[int],
    north_arrival: Optional[int],
    south_offset: int,
    north_offset: int,
    now: int,
) -> List[DirectionState]:
    """
    Build the per-direction state for one request.

    A direction gets a gate_crossing_time only while arrival - offset is
    still after now.

    Returns:
        [south_state, north_state]
    """
    states = [
        DirectionState(Direction.SOUTH, south_offset, next_arrival_time=south_arrival),
        DirectionState(Direction.NORTH, north_offset, next_arrival_time=north_arrival),
    ]
    for state in states:
        if state.next_arrival_time is None:
            continue
        candidate = state.next_arrival_time - state.offset
        if candidate > now:
            state.gate_crossing_time = candidate
        else:
            logger.debug(
                f"{state.direction.value}: gate already closing for arrival at {state.next_arrival_time}"
            )
    return states


def estimate_gate_time(
    south_arrival: Optional[int],
    north_arrival: Optional[int],
    south_offset: int,
    north_offset: int,
    now: int,
) -> Optional[int]:
    """
    Predict when the gate will next start closing.

    Args:
        south_arrival: Next southbound arrival (Unix timestamp) or None.
        north_arrival: Next northbound arrival (Unix timestamp) or None.
        south_offset: Seconds the gate closes ahead of a southbound train.
        north_offset: Seconds the gate closes ahead of a northbound train.
        now: Evaluation time as a Unix timestamp.

    Returns:
        Earliest gate closing time still in the future, or None.
    """
    gate_time: Optional[int] = None
    # South is evaluated first so it keeps ties
    for state in direction_states(south_arrival, north_arrival, south_offset, north_offset, now):
        if state.gate_crossing_time is None:
            continue
        if gate_time is None or state.gate_crossing_time < gate_time:
            gate_time = state.gate_crossing_time
    return gate_time
