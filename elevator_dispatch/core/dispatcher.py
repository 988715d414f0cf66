"""
Dispatcher - Owns the pending queue and the fleet

Requests enter through submit(). Cars serve themselves: each idle car
calls claim_for() and receives the head of the queue if there is one.
The dispatcher never compares cars against each other, so when several
cars are idle at once the first one to ask wins, however far it is from
the request's origin.
"""

import threading

import simpy
from typing import Dict, List, Optional, Set

from .building import Building
from .car import Car
from .events import DispatchEvent, REQUEST_SUBMITTED, REQUEST_CLAIMED
from .pending_queue import PendingQueue
from .request import Request
from ..infrastructure.message_broker import MessageBroker


SAME_FLOOR = "SAME_FLOOR"
FLOOR_OUT_OF_RANGE = "FLOOR_OUT_OF_RANGE"
DUPLICATE = "DUPLICATE"


class InvalidRequestError(ValueError):
    """
    Raised when a submission violates the request policy.

    Attributes:
        reason: SAME_FLOOR, FLOOR_OUT_OF_RANGE or DUPLICATE
        origin, destination: The rejected floors
    """

    def __init__(self, reason: str, origin: int, destination: int, message: str):
        super().__init__(message)
        self.reason = reason
        self.origin = origin
        self.destination = destination


class Dispatcher:
    """
    Accepts requests and coordinates the fleet's access to them.

    The fleet is built here, has a fixed size and lives as long as the
    dispatcher. Car IDs run from 1 to num_cars.
    """

    def __init__(self, env: simpy.Environment, broker: MessageBroker, building: Building,
                 num_cars: int = 3, home_floor: int = 1, floor_travel_time: float = 0.5,
                 idle_poll_interval: float = 1.0):
        """
        Args:
            env: SimPy environment shared by all cars
            broker: MessageBroker that receives every event
            building: Floor range served by the fleet
            num_cars: Fleet size
            home_floor: Floor where every car starts
            floor_travel_time: Time to travel one floor
            idle_poll_interval: How often an idle car re-checks the queue
        """
        if num_cars < 1:
            raise ValueError("num_cars must be at least 1")

        self.env = env
        self.broker = broker
        self.building = building
        self.pending = PendingQueue()

        # Every request_id ever queued or assigned; a Request is served at most once
        self._accepted_ids: Set[int] = set()
        self._accepted_lock = threading.Lock()

        # Triggered on every new request so idle cars re-check the queue early
        self.request_arrived = self.env.event()

        self._cars: Dict[int, Car] = {}
        for car_id in range(1, num_cars + 1):
            self._cars[car_id] = Car(
                env, car_id, self, broker, building,
                home_floor=home_floor,
                floor_travel_time=floor_travel_time,
                idle_poll_interval=idle_poll_interval,
            )

    # --- Inbound boundary ---

    def submit(self, origin: int, destination: int) -> Request:
        """
        Validate a request and put it at the tail of the pending queue.

        Never blocks; the queue is unbounded.

        Returns:
            The enqueued Request

        Raises:
            InvalidRequestError: origin == destination, or a floor is not a
                whole floor number inside the building. Nothing is enqueued
                and no event is published.
        """
        self._validate(origin, destination)
        return self._enqueue(Request(origin, destination))

    def submit_request(self, request: Request) -> Request:
        """
        Same as submit(), for a request that was already created.

        A Request that was submitted or assigned before is rejected with
        reason DUPLICATE, whether it is still waiting, being served or
        already delivered.
        """
        self._validate(request.origin, request.destination)
        return self._enqueue(request)

    def _validate(self, origin: int, destination: int):
        if origin == destination:
            raise InvalidRequestError(
                SAME_FLOOR, origin, destination,
                f"Request rejected: origin and destination are both floor {origin}")
        for floor in (origin, destination):
            if not self.building.is_valid_floor(floor):
                raise InvalidRequestError(
                    FLOOR_OUT_OF_RANGE, origin, destination,
                    f"Request rejected: floor {floor!r} is outside "
                    f"{self.building.min_floor}..{self.building.max_floor}")

    def _register(self, request: Request):
        with self._accepted_lock:
            if request.request_id in self._accepted_ids:
                raise InvalidRequestError(
                    DUPLICATE, request.origin, request.destination,
                    f"Request rejected: {request} was already accepted")
            self._accepted_ids.add(request.request_id)

    def _enqueue(self, request: Request) -> Request:
        self._register(request)
        self.pending.submit(request)
        self._publish(REQUEST_SUBMITTED, "dispatcher/submitted", request.origin, request)
        self._notify_arrival()
        return request

    def _notify_arrival(self):
        if not self.request_arrived.triggered:
            self.request_arrived.succeed()
            self.request_arrived = self.env.event()

    # --- Handoff to cars ---

    def claim_for(self, car: Car) -> Optional[Request]:
        """
        Atomically take the head of the pending queue for one car.

        Returns:
            The claimed Request (already in the car's task list), or None
        """
        request = self.pending.try_claim()
        if request is None:
            return None
        car.accept(request)
        self._publish(REQUEST_CLAIMED, "dispatcher/claimed", car.current_floor,
                      request, car_id=car.car_id)
        return request

    def assign(self, car_id: int, request: Request) -> Request:
        """
        Hand a request straight to one car, bypassing the pending queue.

        Raises:
            KeyError: Unknown car_id
            InvalidRequestError: The request is outside the building, or was
                already submitted or assigned
        """
        car = self._cars[car_id]
        self._validate(request.origin, request.destination)
        self._register(request)
        car.accept(request)
        self._publish(REQUEST_CLAIMED, "dispatcher/claimed", car.current_floor,
                      request, car_id=car_id)
        self._notify_arrival()
        return request

    # --- Fleet access ---

    @property
    def cars(self) -> List[Car]:
        return list(self._cars.values())

    def get_car(self, car_id: int) -> Car:
        return self._cars[car_id]

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    def snapshot(self) -> dict:
        """Read-only view of the queue and every car"""
        return {
            "timestamp": self.env.now,
            "pending": [r.to_dict() for r in self.pending.snapshot()],
            "cars": [car.status() for car in self._cars.values()],
        }

    def stop(self):
        """Cooperatively stop every car loop"""
        for car in self._cars.values():
            car.stop()

    def _publish(self, event_type: str, topic: str, floor: int, request: Request,
                 car_id: Optional[int] = None):
        event = DispatchEvent(
            type=event_type,
            timestamp=self.env.now,
            car_id=car_id,
            floor=floor,
            request=request,
        )
        self.broker.publish(topic, event)
