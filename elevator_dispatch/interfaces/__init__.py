"""
Interfaces for collaborators outside the dispatch core
"""

from .observer import IObserver

__all__ = [
    'IObserver',
]
