"""
Simulation Configuration

Fleet, building and traffic settings for a dispatch run.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class BuildingConfig:
    """Building specifications"""
    num_floors: int = 10
    lowest_floor: int = 1

    def __post_init__(self):
        if self.num_floors < 2:
            raise ValueError("num_floors must be at least 2")

    @property
    def highest_floor(self) -> int:
        return self.lowest_floor + self.num_floors - 1


@dataclass
class FleetConfig:
    """Car fleet specifications"""
    num_cars: int = 3
    home_floor: int = 1
    floor_travel_time: float = 0.5  # seconds per floor
    idle_poll_interval: float = 1.0  # seconds between queue checks when idle

    def __post_init__(self):
        if self.num_cars < 1:
            raise ValueError("num_cars must be at least 1")
        if self.floor_travel_time <= 0:
            raise ValueError("floor_travel_time must be positive")
        if self.idle_poll_interval <= 0:
            raise ValueError("idle_poll_interval must be positive")


@dataclass
class TrafficConfig:
    """Request generation settings (owned by the request source, not the core)"""
    request_interval: float = 2.0  # seconds between generated requests
    simulation_duration: float = 60.0  # seconds

    def __post_init__(self):
        if self.request_interval <= 0:
            raise ValueError("request_interval must be positive")
        if self.simulation_duration <= 0:
            raise ValueError("simulation_duration must be positive")


@dataclass
class SimulationConfig:
    """
    Complete dispatch run configuration

    Combines building, fleet and traffic settings.
    """
    building: BuildingConfig = field(default_factory=BuildingConfig)
    fleet: FleetConfig = field(default_factory=FleetConfig)
    traffic: TrafficConfig = field(default_factory=TrafficConfig)

    # Simulation control
    random_seed: Optional[int] = None
    realtime_factor: float = 0.0  # 1.0 = realtime, 0.0 = as fast as possible

    def __post_init__(self):
        if self.realtime_factor < 0:
            raise ValueError("realtime_factor cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        sim_data = (data or {}).get('simulation', data or {})

        building_data = sim_data.get('building', {})
        building = BuildingConfig(
            num_floors=building_data.get('num_floors', 10),
            lowest_floor=building_data.get('lowest_floor', 1)
        )

        fleet_data = sim_data.get('fleet', {})
        fleet = FleetConfig(
            num_cars=fleet_data.get('num_cars', 3),
            home_floor=fleet_data.get('home_floor', 1),
            floor_travel_time=fleet_data.get('floor_travel_time', 0.5),
            idle_poll_interval=fleet_data.get('idle_poll_interval', 1.0)
        )

        traffic_data = sim_data.get('traffic', {})
        traffic = TrafficConfig(
            request_interval=traffic_data.get('request_interval', 2.0),
            simulation_duration=traffic_data.get('simulation_duration', 60.0)
        )

        return cls(
            building=building,
            fleet=fleet,
            traffic=traffic,
            random_seed=sim_data.get('random_seed'),
            realtime_factor=sim_data.get('realtime_factor', 0.0)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'simulation': {
                'building': {
                    'num_floors': self.building.num_floors,
                    'lowest_floor': self.building.lowest_floor
                },
                'fleet': {
                    'num_cars': self.fleet.num_cars,
                    'home_floor': self.fleet.home_floor,
                    'floor_travel_time': self.fleet.floor_travel_time,
                    'idle_poll_interval': self.fleet.idle_poll_interval
                },
                'traffic': {
                    'request_interval': self.traffic.request_interval,
                    'simulation_duration': self.traffic.simulation_duration
                },
                'realtime_factor': self.realtime_factor
            }
        }

        if self.random_seed is not None:
            result['simulation']['random_seed'] = self.random_seed

        return result

    def validate(self):
        """Validate configuration consistency"""
        if not (self.building.lowest_floor <= self.fleet.home_floor <= self.building.highest_floor):
            raise ValueError(
                f"fleet.home_floor ({self.fleet.home_floor}) must be between "
                f"{self.building.lowest_floor} and {self.building.highest_floor}")
