"""
Observer Interface

Defines how external components receive dispatch events.
"""

from abc import ABC, abstractmethod


class IObserver(ABC):
    """
    Interface for event sinks (console output, statistics, UI bridges)

    The core never renders anything itself. Every position change,
    pickup, drop-off, state change and queue change is handed to the
    subscribed observers as a DispatchEvent.

    Consumption is fire-and-forget: there is no acknowledgment and no
    backpressure. Implementations must not block; they run inside the
    publishing car's process.
    """

    @abstractmethod
    def notify(self, topic: str, event) -> None:
        """
        Receive one event

        Args:
            topic: Broker topic (e.g. 'car/1/position', 'dispatcher/submitted')
            event: DispatchEvent describing the change
        """
        pass
