"""
Configuration management package

Provides configuration classes for dispatch runs.
"""

from .simulation import (
    SimulationConfig,
    BuildingConfig,
    FleetConfig,
    TrafficConfig
)

from .config_loader import (
    ConfigLoader,
    load_simulation_config,
    save_simulation_config
)

__all__ = [
    # Simulation
    'SimulationConfig',
    'BuildingConfig',
    'FleetConfig',
    'TrafficConfig',

    # Loader
    'ConfigLoader',
    'load_simulation_config',
    'save_simulation_config',
]
