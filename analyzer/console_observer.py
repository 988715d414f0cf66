import sys

from elevator_dispatch.core.events import (
    POSITION_UPDATE, PICKUP, DROPOFF, STATE_CHANGED,
    REQUEST_SUBMITTED, REQUEST_CLAIMED,
)
from elevator_dispatch.interfaces.observer import IObserver


class ConsoleObserver(IObserver):
    """
    Prints dispatch events as log lines, e.g.

        12.50 [Car 2] At floor 5
        13.00 [Car 2] Picked up passenger at floor 5 (Request #7 (5 -> 2))
        20.00 [Dispatcher] New request: from floor 3 to floor 9

    State changes and claims are only printed when verbose is set.
    """

    def __init__(self, verbose: bool = False, stream=None):
        self.verbose = verbose
        self.stream = stream

    def notify(self, topic, event):
        line = self.format(event)
        if line is not None:
            print(line, file=self.stream if self.stream is not None else sys.stdout)

    def format(self, event):
        prefix = f"{event.timestamp:.2f}"
        if event.type == POSITION_UPDATE:
            return f"{prefix} [Car {event.car_id}] At floor {event.floor}"
        if event.type == PICKUP:
            return f"{prefix} [Car {event.car_id}] Picked up passenger at floor {event.floor} ({event.request})"
        if event.type == DROPOFF:
            return f"{prefix} [Car {event.car_id}] Dropped off passenger at floor {event.floor} ({event.request})"
        if event.type == REQUEST_SUBMITTED:
            return (f"{prefix} [Dispatcher] New request: from floor {event.request.origin} "
                    f"to floor {event.request.destination}")
        if not self.verbose:
            return None
        if event.type == REQUEST_CLAIMED:
            return f"{prefix} [Dispatcher] {event.request} claimed by Car {event.car_id}"
        if event.type == STATE_CHANGED:
            return (f"{prefix} [Car {event.car_id}] State: "
                    f"{event.detail.get('old_state')} -> {event.detail.get('new_state')}")
        return None
