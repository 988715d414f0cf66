"""
Analyzer - Observers that consume dispatch events

- ConsoleObserver: prints events as log lines
- DispatchStatistics: records timings, trajectories and the event log
"""

from .console_observer import ConsoleObserver
from .statistics import DispatchStatistics

__all__ = [
    'ConsoleObserver',
    'DispatchStatistics',
]
