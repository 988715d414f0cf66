"""
Dispatch event records published through the MessageBroker.

Event types:
- POSITION_UPDATE: a car reached a new floor while moving
- PICKUP: a car arrived at a request's origin
- DROPOFF: a car arrived at a request's destination
- STATE_CHANGED: a car changed state (detail holds old/new state)
- REQUEST_SUBMITTED: the dispatcher accepted a request into the queue
- REQUEST_CLAIMED: a car claimed a request from the queue
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .request import Request


POSITION_UPDATE = "POSITION_UPDATE"
PICKUP = "PICKUP"
DROPOFF = "DROPOFF"
STATE_CHANGED = "STATE_CHANGED"
REQUEST_SUBMITTED = "REQUEST_SUBMITTED"
REQUEST_CLAIMED = "REQUEST_CLAIMED"

MOVEMENT_EVENTS = (POSITION_UPDATE, PICKUP, DROPOFF)


@dataclass(frozen=True)
class DispatchEvent:
    """
    A single state change, emitted in simulation time order.

    Attributes:
        type: One of the event type constants above
        timestamp: Simulation time of the change
        car_id: Car that caused the event (None for queue-only events)
        floor: Floor the event refers to
        request: Request involved, if any
        detail: Extra fields (e.g. old_state/new_state)
    """
    type: str
    timestamp: float
    car_id: Optional[int] = None
    floor: Optional[int] = None
    request: Optional[Request] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary"""
        return {
            'type': self.type,
            'time': self.timestamp,
            'car_id': self.car_id,
            'floor': self.floor,
            'request': self.request.to_dict() if self.request is not None else None,
            'detail': dict(self.detail),
        }
