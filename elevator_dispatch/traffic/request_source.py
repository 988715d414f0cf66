"""
Request sources

A request source is a SimPy process that hands (origin, destination)
pairs to Dispatcher.submit at its own cadence. The core does not care
where requests come from; these two cover simulation runs and scripted
scenarios.
"""

import random
import simpy
from simpy.events import Interrupt
from typing import Iterable, List, Optional, Tuple

from ..core.building import Building
from ..core.dispatcher import Dispatcher, InvalidRequestError
from ..core.entity import Entity
from ..core.request import Request


class RandomRequestSource(Entity):
    """
    Emits one uniformly random request every `interval` seconds.

    Origin and destination are drawn independently over the whole
    building. Draws where both floors are equal are skipped rather than
    redrawn, so on average slightly fewer than one request per interval
    reaches the dispatcher.
    """

    def __init__(self, env: simpy.Environment, dispatcher: Dispatcher, building: Building,
                 interval: float = 2.0, rng: Optional[random.Random] = None):
        if interval <= 0:
            raise ValueError("interval must be positive")
        super().__init__(env, "RequestSource")
        self.dispatcher = dispatcher
        self.building = building
        self.interval = interval
        self.rng = rng if rng is not None else random.Random()
        self.submitted: List[Request] = []
        self.skipped = 0

    def run(self):
        self.set_state("GENERATING")
        while not self._stop_requested:
            origin = self.rng.randint(self.building.min_floor, self.building.max_floor)
            destination = self.rng.randint(self.building.min_floor, self.building.max_floor)
            request = Request.create(origin, destination)
            if request is None:
                self.skipped += 1
            else:
                self.submitted.append(self.dispatcher.submit_request(request))

            # An interrupt without a stop request resumes the remaining interval
            deadline = self.env.now + self.interval
            while self.env.now < deadline:
                try:
                    yield self.env.timeout(deadline - self.env.now)
                except Interrupt:
                    if self._stop_requested:
                        return

    def _on_stopped(self):
        self.set_state("STOPPED")


class ScriptedRequestSource(Entity):
    """
    Replays a fixed list of (time, origin, destination) entries.

    Entries are sorted by time. Degenerate pairs are skipped; pairs the
    dispatcher rejects are kept in `rejected` with the error.
    """

    def __init__(self, env: simpy.Environment, dispatcher: Dispatcher,
                 schedule: Iterable[Tuple[float, int, int]]):
        super().__init__(env, "ScriptedRequestSource")
        self.dispatcher = dispatcher
        self.schedule = sorted(schedule, key=lambda entry: entry[0])
        self.submitted: List[Request] = []
        self.rejected: List[Tuple[float, int, int, InvalidRequestError]] = []
        self.skipped = 0

    def run(self):
        for at_time, origin, destination in self.schedule:
            while at_time > self.env.now:
                try:
                    yield self.env.timeout(at_time - self.env.now)
                except Interrupt:
                    pass
                if self._stop_requested:
                    return
            if self._stop_requested:
                return

            request = Request.create(origin, destination)
            if request is None:
                self.skipped += 1
                continue
            try:
                self.submitted.append(self.dispatcher.submit_request(request))
            except InvalidRequestError as e:
                self.rejected.append((at_time, origin, destination, e))
