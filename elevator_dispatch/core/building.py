"""
Building - Defines the floor range served by the fleet

This module provides the Building class which manages:
- The contiguous range of control floor numbers
- Range checks used when validating requests and car positions
"""

import numbers
from typing import List


class Building:
    """
    Represents a building with a fixed, contiguous range of floors.

    The range is configured at startup and never changes while the
    simulation runs.
    """

    def __init__(self, num_floors: int, lowest_floor: int = 1):
        """
        Initialize building.

        Args:
            num_floors: Number of floors served
            lowest_floor: Control number of the lowest floor (default: 1)
        """
        if num_floors < 2:
            raise ValueError(f"Building must have at least two floors, got {num_floors}")

        self.num_floors = num_floors
        self.min_floor = lowest_floor
        self.max_floor = lowest_floor + num_floors - 1
        self.all_floors: List[int] = list(range(self.min_floor, self.max_floor + 1))

    def is_valid_floor(self, floor: int) -> bool:
        """
        Check if a floor number exists in this building.

        Args:
            floor: Control floor number to check

        Returns:
            True if floor is a whole number and min_floor <= floor <= max_floor
        """
        if isinstance(floor, bool) or not isinstance(floor, numbers.Integral):
            return False
        return self.min_floor <= floor <= self.max_floor

    def validate_floor(self, floor: int):
        """
        Raise ValueError if the floor is outside the building.

        Args:
            floor: Control floor number to check
        """
        if not self.is_valid_floor(floor):
            raise ValueError(
                f"Floor {floor!r} is out of range. Must be a whole number "
                f"between {self.min_floor} and {self.max_floor}."
            )

    def __repr__(self):
        return f"Building(floors={self.min_floor}..{self.max_floor})"
