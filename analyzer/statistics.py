import json
from datetime import datetime
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from elevator_dispatch.core.events import (
    DispatchEvent, POSITION_UPDATE, PICKUP, DROPOFF, STATE_CHANGED,
    REQUEST_SUBMITTED, REQUEST_CLAIMED,
)
from elevator_dispatch.core.request import Request


class DispatchStatistics:
    """
    Receives every event from the broker's broadcast pipe and
    records what is needed to judge the dispatcher afterwards:
    car trajectories, per-request timings and a JSON Lines event log.

    Wait time is measured from submission to pickup, ride time from
    pickup to drop-off, journey time from submission to drop-off.
    """
    def __init__(self, env, broadcast_pipe):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.car_trajectories: Dict[int, List[tuple]] = {}  # car_id -> [(time, floor)]
        self.pickups: Dict[int, List[tuple]] = {}  # car_id -> [(time, floor)]
        self.dropoffs: Dict[int, List[tuple]] = {}
        self.request_times: Dict[int, dict] = {}  # request_id -> timing record
        self.completed: List[Request] = []

        # JSON Lines event log for offline playback
        self.event_log: List[dict] = []
        self.simulation_metadata: dict = {}

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Run configuration (num_floors, num_cars, etc.)
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def start_listening(self):
        """
        Main process to start intercepting global broadcasts.
        """
        while True:
            data = yield self.broadcast_pipe.get()
            self.record(data['message'])

    def record(self, event: DispatchEvent):
        """Record one event. Safe to call directly without the pipe."""
        self.event_log.append(event.to_dict())

        if event.car_id is not None and event.type in (POSITION_UPDATE, STATE_CHANGED):
            trajectory = self.car_trajectories.setdefault(event.car_id, [])
            point = (event.timestamp, event.floor)
            if not trajectory or trajectory[-1] != point:
                trajectory.append(point)

        request = event.request
        if request is None:
            return
        timing = self.request_times.setdefault(request.request_id, {
            'origin': request.origin,
            'destination': request.destination,
            'submitted': None,
            'claimed': None,
            'picked_up': None,
            'dropped_off': None,
            'car_id': None,
        })

        if event.type == REQUEST_SUBMITTED:
            timing['submitted'] = event.timestamp
        elif event.type == REQUEST_CLAIMED:
            timing['claimed'] = event.timestamp
            timing['car_id'] = event.car_id
        elif event.type == PICKUP:
            timing['picked_up'] = event.timestamp
            self.pickups.setdefault(event.car_id, []).append((event.timestamp, event.floor))
        elif event.type == DROPOFF:
            timing['dropped_off'] = event.timestamp
            self.dropoffs.setdefault(event.car_id, []).append((event.timestamp, event.floor))
            self.completed.append(request)

    # --- Metrics ---

    def _durations(self, start_key: str, end_key: str) -> np.ndarray:
        values = [
            t[end_key] - t[start_key]
            for t in self.request_times.values()
            if t[start_key] is not None and t[end_key] is not None
        ]
        return np.array(values, dtype=float)

    @staticmethod
    def _describe(values: np.ndarray) -> dict:
        if values.size == 0:
            return {'count': 0, 'mean': 0.0, 'p95': 0.0, 'max': 0.0}
        return {
            'count': int(values.size),
            'mean': float(np.mean(values)),
            'p95': float(np.percentile(values, 95)),
            'max': float(np.max(values)),
        }

    def summary(self) -> dict:
        """Aggregate wait/ride/journey times over all recorded requests"""
        submitted = sum(1 for t in self.request_times.values() if t['submitted'] is not None)
        return {
            'submitted': submitted,
            'completed': len(self.completed),
            'wait_time': self._describe(self._durations('submitted', 'picked_up')),
            'ride_time': self._describe(self._durations('picked_up', 'dropped_off')),
            'journey_time': self._describe(self._durations('submitted', 'dropped_off')),
        }

    def completed_by_car(self) -> Dict[int, int]:
        """Number of delivered requests per car"""
        counts: Dict[int, int] = {}
        for timing in self.request_times.values():
            if timing['dropped_off'] is not None:
                counts[timing['car_id']] = counts.get(timing['car_id'], 0) + 1
        return counts

    def print_summary(self):
        summary = self.summary()
        print("\n" + "=" * 60)
        print("   DISPATCH SUMMARY")
        print("=" * 60)
        print(f"  Submitted: {summary['submitted']:>6} requests")
        print(f"  Completed: {summary['completed']:>6} requests")
        for label, key in (("Wait Time (Submit to Pickup)", 'wait_time'),
                           ("Ride Time (Pickup to Drop-off)", 'ride_time'),
                           ("Journey Time (Submit to Drop-off)", 'journey_time')):
            stats = summary[key]
            if not stats['count']:
                continue
            print(f"\n{label}:")
            print(f"  Count:   {stats['count']:>6}")
            print(f"  Average: {stats['mean']:>6.2f} seconds")
            print(f"  P95:     {stats['p95']:>6.2f} seconds")
            print(f"  Max:     {stats['max']:>6.2f} seconds")
        print("=" * 60)

    # --- Output files ---

    def plot_trajectory_diagram(self, output_filename='dispatch_trajectory_diagram.png', show=False):
        """
        Draw a travel diagram: one step line per car, pickups as ^ and
        drop-offs as v markers.
        """
        fig, ax = plt.subplots(figsize=(14, 8))
        car_colors = ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd', '#8c564b']

        for idx, car_id in enumerate(sorted(self.car_trajectories)):
            trajectory = self.car_trajectories[car_id]
            if not trajectory:
                continue
            times, floors = zip(*sorted(trajectory, key=lambda x: x[0]))
            color = car_colors[idx % len(car_colors)]
            ax.step(times, floors, where='post', label=f"Car {car_id}", linewidth=2.5, color=color, alpha=0.8)

            if self.pickups.get(car_id):
                p_times, p_floors = zip(*self.pickups[car_id])
                ax.scatter(p_times, p_floors, marker='^', s=80, color=color, edgecolors='black', zorder=3)
            if self.dropoffs.get(car_id):
                d_times, d_floors = zip(*self.dropoffs[car_id])
                ax.scatter(d_times, d_floors, marker='v', s=80, color=color, edgecolors='black', zorder=3)

        ax.set_title("Car Trajectory Diagram")
        ax.set_xlabel("Time (s)")
        ax.set_ylabel("Floor")
        ax.grid(True, which='both', linestyle='--', alpha=0.7)

        all_floors = [floor for trajectory in self.car_trajectories.values() for _, floor in trajectory]
        if all_floors:
            ax.set_yticks(range(int(min(all_floors)), int(max(all_floors)) + 1))
        if self.car_trajectories:
            ax.legend(loc='upper right', fontsize=10)

        fig.savefig(output_filename, dpi=150, bbox_inches='tight')
        if show:
            plt.show()
        plt.close(fig)
        return output_filename

    def save_event_log(self, filename='dispatch_log.jsonl'):
        """
        Save the event log to a JSON Lines file.

        Args:
            filename (str): Name of the output file
        """
        with open(filename, 'w', encoding='utf-8') as f:
            if self.simulation_metadata:
                f.write(json.dumps({
                    "type": "metadata",
                    "data": self.simulation_metadata
                }) + '\n')

            for event in self.event_log:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')

        return filename

    def get_request_timing(self, request_id: int) -> Optional[dict]:
        return self.request_times.get(request_id)
