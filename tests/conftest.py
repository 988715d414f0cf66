"""
Shared fixtures for the dispatch tests

Every test runs on a plain simpy.Environment, so simulated travel and
idle time cost no wall-clock time.
"""

import os
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Trajectory plots are written to files only
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest
import simpy

from elevator_dispatch.core.building import Building
from elevator_dispatch.core.dispatcher import Dispatcher
from elevator_dispatch.core.events import MOVEMENT_EVENTS
from elevator_dispatch.infrastructure.message_broker import MessageBroker
from elevator_dispatch.interfaces.observer import IObserver


class EventRecorder(IObserver):
    """Keeps every published event in order"""

    def __init__(self):
        self.events = []

    def notify(self, topic, event):
        self.events.append(event)

    def of_type(self, *types, car_id=None):
        return [
            e for e in self.events
            if e.type in types and (car_id is None or e.car_id == car_id)
        ]

    def movement(self, car_id=None):
        """(type, floor) pairs for position/pickup/dropoff events"""
        return [(e.type, e.floor) for e in self.of_type(*MOVEMENT_EVENTS, car_id=car_id)]


class Fleet:
    """Environment, broker, dispatcher and recorder wired together"""

    def __init__(self, num_cars=1, num_floors=10, home_floor=1,
                 floor_travel_time=0.5, idle_poll_interval=1.0):
        self.env = simpy.Environment()
        self.broker = MessageBroker(self.env)
        self.recorder = EventRecorder()
        self.broker.subscribe(self.recorder)
        self.building = Building(num_floors)
        self.dispatcher = Dispatcher(
            self.env, self.broker, self.building,
            num_cars=num_cars,
            home_floor=home_floor,
            floor_travel_time=floor_travel_time,
            idle_poll_interval=idle_poll_interval,
        )

    def car(self, car_id=1):
        return self.dispatcher.get_car(car_id)

    def at(self, time, callback):
        """Run callback() at the given simulation time"""
        def _proc():
            yield self.env.timeout(time - self.env.now)
            callback()
        return self.env.process(_proc())


@pytest.fixture
def make_fleet():
    return Fleet
