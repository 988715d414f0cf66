import json

import pytest

from analyzer.console_observer import ConsoleObserver
from analyzer.statistics import DispatchStatistics
from elevator_dispatch.core.building import Building
from elevator_dispatch.core.dispatcher import Dispatcher
from elevator_dispatch.infrastructure.message_broker import MessageBroker

import simpy


def build_recorded_fleet(num_cars=1):
    env = simpy.Environment()
    broker = MessageBroker(env)
    statistics = DispatchStatistics(env, broker.get_broadcast_pipe())
    env.process(statistics.start_listening())
    dispatcher = Dispatcher(env, broker, Building(10), num_cars=num_cars)
    return env, broker, dispatcher, statistics


def test_scenario_timings():
    env, _, dispatcher, statistics = build_recorded_fleet()
    request = dispatcher.submit(5, 2)
    env.run(until=20)

    timing = statistics.get_request_timing(request.request_id)
    assert timing['submitted'] == 0
    assert timing['claimed'] == 0
    assert timing['picked_up'] == 2.0
    assert timing['dropped_off'] == 3.5
    assert timing['car_id'] == 1

    summary = statistics.summary()
    assert summary['submitted'] == 1
    assert summary['completed'] == 1
    assert summary['wait_time']['mean'] == pytest.approx(2.0)
    assert summary['ride_time']['mean'] == pytest.approx(1.5)
    assert summary['journey_time']['max'] == pytest.approx(3.5)
    assert statistics.completed == [request]


def test_trajectory_starts_at_home_floor():
    env, _, dispatcher, statistics = build_recorded_fleet()
    dispatcher.submit(3, 1)
    env.run(until=20)

    floors = [floor for _, floor in statistics.car_trajectories[1]]
    assert floors[0] == 1
    assert floors[-1] == 1
    assert 3 in floors


def test_empty_summary():
    env, _, _, statistics = build_recorded_fleet()
    env.run(until=5)

    summary = statistics.summary()
    assert summary['completed'] == 0
    assert summary['wait_time'] == {'count': 0, 'mean': 0.0, 'p95': 0.0, 'max': 0.0}


def test_completed_by_car():
    env, _, dispatcher, statistics = build_recorded_fleet(num_cars=2)
    dispatcher.submit(2, 5)
    dispatcher.submit(6, 1)
    env.run(until=50)

    assert statistics.completed_by_car() == {1: 1, 2: 1}


def test_save_event_log(tmp_path):
    env, _, dispatcher, statistics = build_recorded_fleet()
    statistics.set_simulation_metadata({'num_cars': 1})
    dispatcher.submit(1, 3)
    env.run(until=10)

    path = statistics.save_event_log(str(tmp_path / "events.jsonl"))
    lines = [json.loads(line) for line in open(path, encoding='utf-8')]

    assert lines[0]['type'] == 'metadata'
    assert lines[0]['data']['config'] == {'num_cars': 1}
    types = [line['type'] for line in lines[1:]]
    assert types.count('POSITION_UPDATE') == 2
    assert 'PICKUP' in types and 'DROPOFF' in types
    dropoff = next(line for line in lines[1:] if line['type'] == 'DROPOFF')
    assert dropoff['floor'] == 3
    assert dropoff['request']['origin'] == 1


def test_plot_trajectory_diagram(tmp_path):
    env, _, dispatcher, statistics = build_recorded_fleet(num_cars=2)
    dispatcher.submit(1, 6)
    dispatcher.submit(4, 2)
    env.run(until=30)

    output = statistics.plot_trajectory_diagram(str(tmp_path / "diagram.png"))
    assert (tmp_path / "diagram.png").stat().st_size > 0
    assert output.endswith("diagram.png")


def test_print_summary(capsys):
    env, _, dispatcher, statistics = build_recorded_fleet()
    dispatcher.submit(2, 4)
    env.run(until=10)

    statistics.print_summary()
    out = capsys.readouterr().out
    assert "DISPATCH SUMMARY" in out
    assert "Completed:      1 requests" in out


def test_console_observer_lines(capsys):
    env, broker, dispatcher, _ = build_recorded_fleet()
    broker.subscribe(ConsoleObserver())
    dispatcher.submit(3, 2)
    env.run(until=10)

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == "0.00 [Dispatcher] New request: from floor 3 to floor 2"
    assert lines[1] == "0.50 [Car 1] At floor 2"
    assert lines[2] == "1.00 [Car 1] At floor 3"
    assert lines[3].startswith("1.00 [Car 1] Picked up passenger at floor 3")
    assert lines[4] == "1.50 [Car 1] At floor 2"
    assert lines[5].startswith("1.50 [Car 1] Dropped off passenger at floor 2")
    assert len(lines) == 6


def test_console_observer_verbose(capsys):
    env, broker, dispatcher, _ = build_recorded_fleet()
    broker.subscribe(ConsoleObserver(verbose=True))
    dispatcher.submit(1, 2)
    env.run(until=5)

    out = capsys.readouterr().out
    assert "claimed by Car 1" in out
    assert "State: IDLE -> EN_ROUTE_TO_PICKUP" in out
