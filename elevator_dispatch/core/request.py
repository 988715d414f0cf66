"""
Request - One floor-to-floor transport need

A Request is a plain immutable value. It knows nothing about the
building it belongs to; range checks happen where it is submitted.
"""

import itertools
from dataclasses import dataclass, field
from typing import Optional


# Request ID counter shared across the process
_request_id_counter = itertools.count(1)


@dataclass(frozen=True)
class Request:
    """
    A transport request from an origin floor to a destination floor.

    Attributes:
        origin: Floor where the passenger is picked up
        destination: Floor where the passenger is dropped off
        request_id: Unique ID, keeps two requests for the same floors apart
    """
    origin: int
    destination: int
    request_id: int = field(default_factory=lambda: next(_request_id_counter))

    def __post_init__(self):
        if self.origin == self.destination:
            raise ValueError(f"origin and destination must differ, got {self.origin} for both")

    @classmethod
    def create(cls, origin: int, destination: int) -> Optional['Request']:
        """
        Create a request, or nothing if it would not move anybody.

        A request whose origin equals its destination is silently
        dropped: the caller gets None and should treat it as a no-op.

        Args:
            origin: Pickup floor
            destination: Drop-off floor

        Returns:
            New Request, or None when origin == destination
        """
        if origin == destination:
            return None
        return cls(origin, destination)

    @property
    def direction(self) -> str:
        """Travel direction once picked up ("UP" or "DOWN")"""
        return "UP" if self.destination > self.origin else "DOWN"

    @property
    def distance(self) -> int:
        """Number of floors between origin and destination"""
        return abs(self.destination - self.origin)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'request_id': self.request_id,
            'origin': self.origin,
            'destination': self.destination,
        }

    def __str__(self):
        return f"Request #{self.request_id} ({self.origin} -> {self.destination})"
