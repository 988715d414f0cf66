"""Core dispatch entities"""

from .entity import Entity
from .request import Request
from .building import Building
from .events import DispatchEvent
from .pending_queue import PendingQueue
from .car import Car
from .dispatcher import Dispatcher, InvalidRequestError

__all__ = [
    'Entity',
    'Request',
    'Building',
    'DispatchEvent',
    'PendingQueue',
    'Car',
    'Dispatcher',
    'InvalidRequestError',
]
