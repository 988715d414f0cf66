from pathlib import Path

import pytest
import yaml

from config import (
    BuildingConfig, FleetConfig, SimulationConfig, TrafficConfig,
    load_simulation_config, save_simulation_config,
)

SCENARIO_DIR = Path(__file__).parent.parent.parent / "scenarios"


def test_defaults_match_reference_fleet():
    config = SimulationConfig()
    assert config.fleet.num_cars == 3
    assert config.building.num_floors == 10
    assert config.building.lowest_floor == 1
    assert config.building.highest_floor == 10
    assert config.fleet.home_floor == 1
    assert config.fleet.floor_travel_time == 0.5
    assert config.fleet.idle_poll_interval == 1.0
    assert config.traffic.request_interval == 2.0
    config.validate()


def test_load_bundled_scenario():
    config = load_simulation_config(SCENARIO_DIR / "default.yaml")
    assert config.fleet.num_cars == 3
    assert config.random_seed == 42
    assert config.realtime_factor == 0.0


def test_save_and_load(tmp_path):
    config = SimulationConfig(
        building=BuildingConfig(num_floors=20, lowest_floor=0),
        fleet=FleetConfig(num_cars=5, home_floor=0, floor_travel_time=0.25),
        traffic=TrafficConfig(request_interval=1.5, simulation_duration=120.0),
        random_seed=9,
    )
    path = tmp_path / "nested" / "sim.yaml"
    save_simulation_config(config, path)

    loaded = load_simulation_config(path)
    assert loaded == config


def test_partial_file_uses_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text(yaml.dump({'simulation': {'fleet': {'num_cars': 1}}}), encoding='utf-8')

    config = load_simulation_config(path)
    assert config.fleet.num_cars == 1
    assert config.building.num_floors == 10
    assert config.random_seed is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_simulation_config(tmp_path / "nope.yaml")


def test_home_floor_outside_building_fails_validation(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.dump({'simulation': {
        'building': {'num_floors': 5},
        'fleet': {'home_floor': 8},
    }}), encoding='utf-8')

    with pytest.raises(ValueError, match="home_floor"):
        load_simulation_config(path)


@pytest.mark.parametrize("factory", [
    lambda: BuildingConfig(num_floors=1),
    lambda: FleetConfig(num_cars=0),
    lambda: FleetConfig(floor_travel_time=0),
    lambda: FleetConfig(idle_poll_interval=-1),
    lambda: TrafficConfig(request_interval=0),
    lambda: TrafficConfig(simulation_duration=0),
    lambda: SimulationConfig(realtime_factor=-0.5),
])
def test_invalid_values_raise(factory):
    with pytest.raises(ValueError):
        factory()
