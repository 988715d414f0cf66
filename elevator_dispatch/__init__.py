"""
Elevator Dispatch - Core dispatch scheduler

This package provides the request queue, the self-serving cars and
the dispatcher that coordinates them on a SimPy clock.
"""

__version__ = "0.1.0"

from .core.request import Request
from .core.building import Building
from .core.car import Car
from .core.dispatcher import Dispatcher, InvalidRequestError
from .core.pending_queue import PendingQueue
from .core.events import DispatchEvent

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeEnvironment

from .interfaces.observer import IObserver

from .traffic.request_source import RandomRequestSource, ScriptedRequestSource

__all__ = [
    'Request',
    'Building',
    'Car',
    'Dispatcher',
    'InvalidRequestError',
    'PendingQueue',
    'DispatchEvent',
    'MessageBroker',
    'RealtimeEnvironment',
    'IObserver',
    'RandomRequestSource',
    'ScriptedRequestSource',
]
