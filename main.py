import random
import sys

import simpy

# Configuration
from config import SimulationConfig, load_simulation_config

# Dispatch core
from elevator_dispatch.core.building import Building
from elevator_dispatch.core.dispatcher import Dispatcher
from elevator_dispatch.infrastructure.message_broker import MessageBroker
from elevator_dispatch.infrastructure.realtime_env import RealtimeEnvironment
from elevator_dispatch.traffic.request_source import RandomRequestSource

# Analyzer
from analyzer.console_observer import ConsoleObserver
from analyzer.statistics import DispatchStatistics


def build_environment(sim_config: SimulationConfig) -> simpy.Environment:
    """Virtual clock, or a wall-clock paced one when realtime_factor > 0"""
    if sim_config.realtime_factor > 0:
        return RealtimeEnvironment(speed_factor=sim_config.realtime_factor)
    return simpy.Environment()


def run_simulation(sim_config_path=None, event_log_path=None, plot_path=None, verbose=False):
    """
    Set up and run a dispatch simulation

    Args:
        sim_config_path: Path to simulation configuration YAML file (None = defaults)
        event_log_path: Optional JSON Lines output file
        plot_path: Optional trajectory diagram output file
        verbose: Also print state changes and claims

    Returns:
        DispatchStatistics of the finished run. Every car ends in state STOPPED.
    """
    print("--- Loading Configuration ---")
    if sim_config_path is not None:
        sim_config = load_simulation_config(sim_config_path)
        print(f"Simulation Config: {sim_config_path}")
    else:
        sim_config = SimulationConfig()
        sim_config.validate()
        print("Simulation Config: built-in defaults")

    if sim_config.random_seed is not None:
        print(f"Random seed fixed to {sim_config.random_seed} for reproducible results")
    else:
        print("Random seed not set - results will vary")
    rng = random.Random(sim_config.random_seed)

    print("\n--- Simulation Setup ---")
    env = build_environment(sim_config)
    broker = MessageBroker(env)

    # Statistics must hold the broadcast pipe before the fleet publishes anything
    statistics = DispatchStatistics(env, broker.get_broadcast_pipe())
    statistics.set_simulation_metadata(sim_config.to_dict()['simulation'])
    env.process(statistics.start_listening())
    broker.subscribe(ConsoleObserver(verbose=verbose))

    building = Building(sim_config.building.num_floors, sim_config.building.lowest_floor)
    dispatcher = Dispatcher(
        env, broker, building,
        num_cars=sim_config.fleet.num_cars,
        home_floor=sim_config.fleet.home_floor,
        floor_travel_time=sim_config.fleet.floor_travel_time,
        idle_poll_interval=sim_config.fleet.idle_poll_interval,
    )
    print(f"{building} with {sim_config.fleet.num_cars} cars at floor {sim_config.fleet.home_floor}")

    source = RandomRequestSource(env, dispatcher, building,
                                 interval=sim_config.traffic.request_interval, rng=rng)

    def shutdown():
        yield env.timeout(sim_config.traffic.simulation_duration)
        source.stop()
        dispatcher.stop()
        # Zero-length step so the stop interrupts and the events they publish are processed
        yield env.timeout(0)

    print("\n--- Simulation Start ---")
    env.run(until=env.process(shutdown()))
    print("\n--- Simulation End ---")
    print(f"Requests still waiting in queue: {dispatcher.pending_count}")

    statistics.print_summary()
    if event_log_path:
        statistics.save_event_log(event_log_path)
        print(f"Event log saved to: {event_log_path}")
    if plot_path:
        statistics.plot_trajectory_diagram(plot_path)
        print(f"Trajectory diagram saved to: {plot_path}")
    return statistics


def main():
    # Positional arguments: [config.yaml] [event_log.jsonl] [diagram.png]
    args = [a for a in sys.argv[1:] if a not in ("-v", "--verbose")]
    verbose = len(args) != len(sys.argv) - 1
    run_simulation(
        sim_config_path=args[0] if len(args) > 0 else None,
        event_log_path=args[1] if len(args) > 1 else None,
        plot_path=args[2] if len(args) > 2 else None,
        verbose=verbose,
    )


if __name__ == '__main__':
    main()
