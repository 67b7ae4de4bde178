"""
Tests for the circuit-safety command line script.
"""

import json

import numpy as np
import pandas as pd
import pytest
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from circuit_safety.catalog.appliances import consumer_from_appliance
from circuit_safety.catalog.breakers import get_breaker_spec
from circuit_safety.catalog.wires import get_wire_spec
from circuit_safety.scripts.simulate_circuit import EXIT_INVALID, EXIT_SAFE, EXIT_UNSAFE, main
from circuit_safety.simulation.driver import points_frame, run
from circuit_safety.simulation.load_model import Consumer
from circuit_safety.utils.config import CircuitConfig, ScenarioConfig
from circuit_safety.utils.logging_config import setup_logging


FRIDGE = "Refrigerator|Normal (1.5A)|Normal"
KETTLE = "Electric Kettle|High (13A)|Normal Boil"


class TestExitCodes:

    def test_safe(self):
        assert main(["--appliance", FRIDGE]) == EXIT_SAFE

    def test_unsafe(self):
        assert main(["--appliance", KETTLE, "--appliance", KETTLE]) == EXIT_UNSAFE

    def test_unknown_breaker(self):
        assert main(["--breaker-type", "Type Z", "--appliance", FRIDGE]) == EXIT_INVALID

    def test_unknown_appliance(self):
        assert main(["--appliance", "Toaster|Normal (8A)|Toast"]) == EXIT_INVALID

    def test_malformed_appliance(self):
        assert main(["--appliance", "Refrigerator"]) == EXIT_INVALID

    def test_zero_horizon(self):
        assert main(["--horizon", "0", "--appliance", FRIDGE]) == EXIT_INVALID

    def test_missing_scenario_file(self, tmp_path):
        assert main(["--scenario", str(tmp_path / "absent.yaml")]) == EXIT_INVALID

    @pytest.mark.parametrize("text", [
        "consumers:\n  - rated_current_a: 10\n",
        "consumers:\n  - name: Heater\n    rated_current_a: lots\n",
        "consumers: Heater\n",
        "- just\n- a list\n",
        "circuit: {rated_a: 16\n",
    ])
    def test_malformed_scenario_file(self, tmp_path, text):
        path = tmp_path / "scenario.yaml"
        path.write_text(text, encoding="utf-8")
        assert main(["--scenario", str(path)]) == EXIT_INVALID

    def test_non_standard_rating_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            main(["--rating", "17"])


class TestOutputs:

    def test_json_summary(self, capsys):
        assert main(["--json", "--horizon", "30", "--appliance", FRIDGE]) == EXIT_SAFE
        summary = json.loads(capsys.readouterr().out)
        assert summary["ok"] is True
        assert summary["assessment"]["safe"] is True
        assert summary["metrics"]["horizon_min"] == 30

    def test_csv_export(self, tmp_path):
        path = tmp_path / "series.csv"
        main(["--horizon", "25", "--appliance", FRIDGE, "--csv", str(path)])
        frame = pd.read_csv(path)
        assert len(frame) == 25
        assert frame.loc[0, "events"] == "Refrigerator startup (Normal (1.5A))"
        assert frame.loc[0, "startups"] == 1
        fridge = consumer_from_appliance("Refrigerator", "Normal (1.5A)", "Normal")
        expected = points_frame(run([fridge], get_breaker_spec("Type C"), 16, get_wire_spec("2.5"), 25))
        assert list(frame.columns) == list(expected.columns)
        np.testing.assert_allclose(frame["thermal_current_a"], expected["thermal_current_a"])

    def test_scenario_file(self, tmp_path):
        path = tmp_path / "scenario.yaml"
        ScenarioConfig(
            circuit=CircuitConfig(rated_a=10, breaker_type="Type B", horizon_min=20),
            consumers=[Consumer("Heater", 40.0)],
        ).save(path)
        assert main(["--scenario", str(path)]) == EXIT_UNSAFE

    def test_save_scenario(self, tmp_path):
        path = tmp_path / "saved.yaml"
        main(["--rating", "20", "--appliance", FRIDGE, "--save-scenario", str(path)])
        saved = ScenarioConfig.load(path)
        assert saved.circuit.rated_a == 20
        assert [c.name for c in saved.consumers] == ["Refrigerator"]

    def test_list_appliances(self, capsys):
        assert main(["--list-appliances"]) == EXIT_SAFE
        assert "Washing Machine" in capsys.readouterr().out

    def test_log_dir(self, tmp_path):
        try:
            main(["--appliance", KETTLE, "--appliance", KETTLE, "--verbose", "--log-dir", str(tmp_path)])
            logs = list(tmp_path.glob("command-line_*.log"))
            assert len(logs) == 1
            assert "Breaker trip (thermal)" in logs[0].read_text(encoding="utf-8")
        finally:
            setup_logging(console=False, file=False)
