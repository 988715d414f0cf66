import simpy
from typing import Dict, List, Optional

from ..core.events import DispatchEvent
from ..interfaces.observer import IObserver


class MessageBroker:
    """
    Mediates communication between the dispatch core and its observers.
    Implements a topic-based publish-subscribe model.

    Delivery is fire-and-forget: publishing never waits for an observer,
    and an observer that raises does not affect the publisher.
    """
    def __init__(self, env: simpy.Environment):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
        """
        self.env = env
        self.topics: Dict[str, simpy.Store] = {}  # Store per topic, created on first get_pipe()
        self.observers: List[IObserver] = []
        self.observer_errors: List[tuple] = []  # (observer, exception) for failed deliveries
        self.broadcast_pipe: Optional[simpy.Store] = None

    def subscribe(self, observer: IObserver):
        """Register an observer that receives every published event"""
        if observer not in self.observers:
            self.observers.append(observer)

    def unsubscribe(self, observer: IObserver):
        if observer in self.observers:
            self.observers.remove(observer)

    def get_pipe(self, topic: str) -> simpy.Store:
        """
        Get or create a communication pipe (Store) for the specified topic
        """
        if topic not in self.topics:
            self.topics[topic] = simpy.Store(self.env)
        return self.topics[topic]

    def publish(self, topic: str, event: DispatchEvent):
        """
        Publish an event to the specified topic.

        Subscribed observers are notified immediately. Topic pipes and the
        broadcast pipe only receive the event once someone asked for them.
        """
        for observer in list(self.observers):
            try:
                observer.notify(topic, event)
            except Exception as e:
                self.observer_errors.append((observer, e))

        if self.broadcast_pipe is not None:
            self.broadcast_pipe.put({'topic': topic, 'message': event})
        if topic in self.topics:
            self.topics[topic].put(event)

    def get(self, topic: str):
        """
        Wait to receive (get) an event from the specified topic
        """
        pipe = self.get_pipe(topic)
        return pipe.get()

    def get_broadcast_pipe(self) -> simpy.Store:
        """
        Returns the global broadcast pipe, creating it on first use.
        Used by the statistics recorder.
        """
        if self.broadcast_pipe is None:
            self.broadcast_pipe = simpy.Store(self.env)
        return self.broadcast_pipe
