"""
RealtimeEnvironment

A custom SimPy environment that paces simulation time against wall-clock time.
Cars travel at the configured per-floor duration in real seconds when
speed_factor is 1.0, which is how the fleet behaves outside of tests.
"""

import simpy
import time


class RealtimeEnvironment(simpy.Environment):
    """
    Custom SimPy environment with real-time synchronization.

    Extends simpy.Environment to add real-time speed control.
    All timeout() calls are automatically synchronized with real time
    based on the speed_factor.

    Args:
        speed_factor (float): Speed multiplier for simulation
            - 1.0 = real-time (1 sim second = 1 real second)
            - 0.5 = half speed (1 sim second = 2 real seconds)
            - 2.0 = double speed (1 sim second = 0.5 real seconds)
            - 0.0 = no delay (fastest possible, default SimPy behavior)

    Example:
        >>> env = RealtimeEnvironment(speed_factor=2.0)  # Double speed
    """

    def __init__(self, speed_factor=1.0, initial_time=0):
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        super().__init__(initial_time=initial_time)
        self.speed_factor = speed_factor
        self.real_start_time = time.monotonic()
        self.sim_start_time = self.now

    def step(self):
        """
        Execute one simulation step and synchronize with real time.

        After each step the required real-time delay is computed and
        slept if the simulation is ahead of the wall clock.
        """
        result = super().step()

        if self.speed_factor > 0:
            sim_elapsed = self.now - self.sim_start_time
            target_real_time = self.real_start_time + (sim_elapsed / self.speed_factor)
            sleep_time = target_real_time - time.monotonic()
            if sleep_time > 0:
                time.sleep(sleep_time)

        return result

    def set_speed(self, speed_factor):
        """
        Dynamically change simulation speed during runtime.

        Timing references are reset so the new speed applies from now on.

        Args:
            speed_factor (float): New speed multiplier (0.0 = fastest)
        """
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        self.speed_factor = speed_factor
        self.real_start_time = time.monotonic()
        self.sim_start_time = self.now

    def get_speed(self):
        """Get current simulation speed factor."""
        return self.speed_factor
