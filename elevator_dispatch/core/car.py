import simpy
from simpy.events import Interrupt
from typing import List, Optional, Tuple

from .entity import Entity, EntityStopped
from .building import Building
from .request import Request
from .events import (
    DispatchEvent, POSITION_UPDATE, PICKUP, DROPOFF, STATE_CHANGED,
)
from ..infrastructure.message_broker import MessageBroker


# Car states
IDLE = "IDLE"
EN_ROUTE_TO_PICKUP = "EN_ROUTE_TO_PICKUP"
EN_ROUTE_TO_DROPOFF = "EN_ROUTE_TO_DROPOFF"
STOPPED = "STOPPED"


class Car(Entity):
    """
    Elevator car that serves its own task list.

    The car runs as an independent SimPy process. Whenever it has no
    tasks it claims the head of the dispatcher's pending queue; there is
    no fleet-wide optimisation, the first idle car to look wins. With
    tasks in hand it always serves the one whose pickup floor is nearest
    to where it is now, so claim order is not service order.

    State cycle: IDLE -> EN_ROUTE_TO_PICKUP -> EN_ROUTE_TO_DROPOFF -> ... -> IDLE
    """

    def __init__(self, env: simpy.Environment, car_id: int, dispatcher, broker: MessageBroker,
                 building: Building, home_floor: int = 1, floor_travel_time: float = 0.5,
                 idle_poll_interval: float = 1.0):
        building.validate_floor(home_floor)
        if floor_travel_time <= 0:
            raise ValueError("floor_travel_time must be positive")
        if idle_poll_interval <= 0:
            raise ValueError("idle_poll_interval must be positive")

        self.car_id = car_id
        super().__init__(env, f"Car_{car_id}")
        self.dispatcher = dispatcher
        self.broker = broker
        self.building = building
        self.home_floor = home_floor
        self.floor_travel_time = floor_travel_time
        self.idle_poll_interval = idle_poll_interval

        self.current_floor = home_floor
        self._tasks: List[Request] = []  # Insertion (claim) order
        self.current_task: Optional[Request] = None
        self.completed: List[Request] = []
        self.idle_polls = 0

        self.set_state(IDLE)

    # --- Task list (written by the dispatcher, read by anyone) ---

    def accept(self, request: Request):
        """
        Append a request to this car's task list.

        Only the Dispatcher calls this; once a request is here no other
        component reorders or removes it.
        """
        self._tasks.append(request)

    @property
    def pending_tasks(self) -> Tuple[Request, ...]:
        """Tasks not started yet, in the order they were handed over"""
        return tuple(self._tasks)

    @property
    def is_idle(self) -> bool:
        return self.state == IDLE

    def _select_next_task(self) -> Request:
        # sorted() is stable, so equal distances keep claim order
        ordered = sorted(self._tasks, key=lambda r: abs(r.origin - self.current_floor))
        task = ordered[0]
        self._tasks.remove(task)
        return task

    # --- Main loop ---

    def run(self):
        while not self._stop_requested:
            if not self._tasks:
                self.dispatcher.claim_for(self)

            if self._tasks:
                task = self._select_next_task()
                yield from self._serve(task)
            else:
                self.set_state(IDLE)
                yield from self._idle_wait()

    def _serve(self, task: Request):
        self.current_task = task

        self.set_state(EN_ROUTE_TO_PICKUP)
        yield from self.move_to(task.origin)
        self._publish(PICKUP, "pickup", task.origin, task)

        self.set_state(EN_ROUTE_TO_DROPOFF)
        yield from self.move_to(task.destination)
        self._publish(DROPOFF, "dropoff", task.destination, task)

        self.completed.append(task)
        self.current_task = None

    def _idle_wait(self):
        """Sleep for one poll interval, or less if a request arrives."""
        self.idle_polls += 1
        try:
            yield self.env.timeout(self.idle_poll_interval) | self.dispatcher.request_arrived
        except Interrupt:
            if self._stop_requested:
                raise EntityStopped()

    def move_to(self, floor: int):
        """
        Move one floor per floor_travel_time until the target is reached.

        A POSITION_UPDATE is published on arrival at every floor passed,
        so no floor is ever skipped. Moving to the current floor takes no
        time and publishes nothing.
        """
        self.building.validate_floor(floor)
        while self.current_floor != floor:
            step = 1 if floor > self.current_floor else -1
            yield from self._travel_wait(self.floor_travel_time)
            self.current_floor += step
            self._publish(POSITION_UPDATE, "position", self.current_floor)

    def _travel_wait(self, duration: float):
        """
        Wait for duration. An interrupt without a stop request resumes the
        remaining wait; with a stop request the car stops where it is.
        """
        deadline = self.env.now + duration
        while self.env.now < deadline:
            try:
                yield self.env.timeout(deadline - self.env.now)
            except Interrupt:
                if self._stop_requested:
                    raise EntityStopped()

    # --- Reporting ---

    def _on_state_changed(self, old_state: str, new_state: str):
        self._publish(STATE_CHANGED, "state", self.current_floor,
                      self.current_task, old_state=old_state, new_state=new_state)

    def _on_stopped(self):
        self.set_state(STOPPED)

    def _publish(self, event_type: str, topic_suffix: str, floor: int,
                 request: Optional[Request] = None, **detail):
        event = DispatchEvent(
            type=event_type,
            timestamp=self.env.now,
            car_id=self.car_id,
            floor=floor,
            request=request,
            detail=detail,
        )
        self.broker.publish(f"car/{self.car_id}/{topic_suffix}", event)

    def status(self) -> dict:
        """Read-only view used by the dispatcher snapshot"""
        return {
            "timestamp": self.env.now,
            "car_id": self.car_id,
            "current_floor": self.current_floor,
            "state": self.state,
            "pending_tasks": len(self._tasks),
            "current_task": self.current_task.to_dict() if self.current_task else None,
            "completed": len(self.completed),
        }

    def __repr__(self):
        return f"Car(id={self.car_id}, floor={self.current_floor}, state={self.state})"
