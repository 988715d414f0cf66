import yaml

import main


def test_run_simulation_writes_outputs(tmp_path, capsys):
    config_path = tmp_path / "sim.yaml"
    config_path.write_text(yaml.dump({'simulation': {
        'fleet': {'num_cars': 2},
        'traffic': {'request_interval': 2.0, 'simulation_duration': 30.0},
        'random_seed': 5,
    }}), encoding='utf-8')
    log_path = tmp_path / "events.jsonl"
    plot_path = tmp_path / "diagram.png"

    statistics = main.run_simulation(str(config_path), str(log_path), str(plot_path))

    out = capsys.readouterr().out
    assert "--- Simulation Start ---" in out
    assert "[Dispatcher] New request" in out
    assert "DISPATCH SUMMARY" in out
    assert log_path.exists()
    assert plot_path.exists()
    assert statistics.summary()['submitted'] > 0
    assert statistics.completed_by_car().keys() <= {1, 2}


def test_run_simulation_with_defaults(capsys):
    statistics = main.run_simulation()

    out = capsys.readouterr().out
    assert "built-in defaults" in out
    assert statistics.summary()['submitted'] > 0


def test_run_simulation_stops_every_car(tmp_path, capsys):
    config_path = tmp_path / "sim.yaml"
    config_path.write_text(yaml.dump({'simulation': {
        'fleet': {'num_cars': 2},
        'traffic': {'request_interval': 2.0, 'simulation_duration': 20.0},
        'random_seed': 11,
    }}), encoding='utf-8')

    statistics = main.run_simulation(str(config_path), verbose=True)

    out = capsys.readouterr().out
    body, _ = out.split("--- Simulation End ---")
    for car_id in (1, 2):
        assert any(f"[Car {car_id}] State: " in line and line.endswith("-> STOPPED")
                   for line in body.splitlines())

    stopped = {
        entry['car_id'] for entry in statistics.event_log
        if entry['type'] == 'STATE_CHANGED' and entry['detail'].get('new_state') == 'STOPPED'
    }
    assert stopped == {1, 2}
