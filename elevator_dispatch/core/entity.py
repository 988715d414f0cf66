import simpy
from abc import ABC, abstractmethod
import itertools  # Helper for entity ID counter
from typing import Optional


class EntityStopped(Exception):
    """Raised inside run() to unwind the process after stop() was requested."""


class Entity(ABC):
    """
    Abstract base class for entities in SimPy simulation.

    This class defines common attributes and behaviors for entities that operate
    as SimPy processes: a unique ID, a name, a string state and the process
    object that runs the entity's main loop.
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    def __init__(self, env: simpy.Environment, name: Optional[str] = None):
        """
        Initialize the entity and register its run() generator as a process.

        Args:
            env: The SimPy simulation environment this entity belongs to.
            name: Entity name. Optional. If not specified, auto-generated from class name and ID.
        """
        self.env = env
        self.entity_id: int = next(self._entity_id_counter)
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"

        # Concrete classes define their own state values ('IDLE', 'MOVING', ...)
        self.state: str = "initial_state"

        self._stop_requested = False
        self._started = False

        # The process does not execute until the environment runs, so
        # subclasses may finish their own initialization after this call
        self._process = self.env.process(self._lifecycle())

    def _lifecycle(self):
        self._started = True
        try:
            yield from self.run()
        except EntityStopped:
            pass
        self._on_stopped()

    @abstractmethod
    def run(self):
        """
        Generator method that serves as the main SimPy process body for the entity.

        Within this method, use yield to wait for event completion and
        advance simulation time. Typically structured as an infinite loop
        that dispatches on state. Raise EntityStopped (or return) once
        stop_requested is set.
        """
        pass

    # --- Common utility methods ---

    def set_state(self, new_state: str):
        """
        Transition the entity's state.

        Args:
            new_state: String representing the target state for transition.
        """
        if self.state != new_state:
            old_state = self.state
            self.state = new_state
            self._on_state_changed(old_state, new_state)

    def get_state(self) -> str:
        """Get the current state of the entity."""
        return self.state

    def _on_state_changed(self, old_state: str, new_state: str):
        """
        Hook method called after every state transition.
        Subclasses override it to report the change.
        """
        pass

    def _on_stopped(self):
        """Hook method called once run() has ended."""
        pass

    def stop(self):
        """
        Ask the entity to finish its run loop (cooperative stop).

        A running process is interrupted and sees the stop flag. A process
        that has not started yet sees the flag on its first loop check.
        """
        if self._stop_requested:
            return
        self._stop_requested = True
        if (self._started and self._process.is_alive
                and self.env.active_process is not self._process):
            self._process.interrupt("stop")

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    @property
    def process(self) -> simpy.Process:
        """
        Get the SimPy process object for this entity.
        Can be used for operations like interrupting the process.
        """
        return self._process
