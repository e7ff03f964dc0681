"""Tests for the scenario replay CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from conftest import ALICE, BOB, FOUNDER, OWNER, TREASURY
from nodearmy.cli import ScenarioRunner, demo_scenario, main
from nodearmy.registry import RegistryEngine

if TYPE_CHECKING:
    from _pytest.capture import CaptureFixture
    from pytest_mock.plugin import MockerFixture


def _scenario() -> dict:
    return {
        "accounts": {"owner": OWNER, "alice": ALICE, "bob": BOB},
        "owner": "owner",
        "treasury": TREASURY,
        "founder": FOUNDER,
        "params": {"register_fee": 100, "upgrade_fee": 200, "action_fee": 10, "boost_fee": 50, "treasury_bps": 6000},
        "start_time": 1_000,
        "calls": [
            {"sender": "alice", "operation": "register", "value": 100},
            {"sender": "bob", "operation": "register", "value": 100, "timestamp": 2_000},
            {"sender": "alice", "operation": "buyBoost", "args": [2], "value": 50},
            {"sender": "alice", "operation": "action", "args": [100], "value": 10},
            {"sender": "bob", "operation": "upgrade", "value": 1},
            {"sender": "bob", "operation": "setParams", "args": [1, 1, 1, 1, 1]},
            {"sender": "owner", "operation": "adjustMerit", "args": ["alice", -500]},
            {"sender": "alice", "operation": "mint", "value": 3},
        ],
    }


def test_runner_replays_calls() -> None:
    """Accepted and rejected calls are recorded in order."""
    report = ScenarioRunner(_scenario()).run()

    outcomes = [(r["operation"], r["ok"], r.get("error")) for r in report["results"]]
    assert outcomes == [
        ("register", True, None),
        ("register", True, None),
        ("buyBoost", True, None),
        ("action", True, None),
        ("upgrade", False, "FeeMismatch"),
        ("setParams", False, "Unauthorized"),
        ("adjustMerit", True, None),
        ("mint", False, "DirectPaymentRejected"),
    ]
    assert report["results"][3]["result"] == 110
    assert report["results"][6]["result"] == 0

    state = report["state"]
    assert state["total_nodes"] == 2
    assert state["nodes"][ALICE]["joined_at"] == 1_000
    assert state["nodes"][BOB]["joined_at"] == 2_000
    assert state["nodes"][ALICE]["merit"] == 0

    # 100 + 100 + 50 + 10 paid, 60% to treasury
    assert report["balances"] == {TREASURY: 156, FOUNDER: 104}
    assert report["events"][0] == {"event": "Registered", "args": {"node": ALICE, "tier": 1, "fee": 100}}


def test_runner_rejecting_recipient() -> None:
    """Recipients listed under "rejecting" make paid calls fail."""
    scenario = _scenario()
    scenario["rejecting"] = ["alice"]
    scenario["founder"] = "alice"
    report = ScenarioRunner(scenario).run()

    assert report["results"][0]["error"] == "TransferFailed"
    assert report["state"]["total_nodes"] == 0


def test_main_writes_report(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    """--scenario/--out replay a file and write the JSON report."""
    scenario_path = tmp_path / "scenario.json"
    scenario_path.write_text(json.dumps(_scenario()), encoding="utf-8")
    out_path = tmp_path / "out" / "report.json"

    assert main(["--scenario", str(scenario_path), "--out", str(out_path)]) == 0

    report = json.loads(out_path.read_text(encoding="utf-8"))
    assert report["state"]["total_nodes"] == 2
    printed = capsys.readouterr().out
    assert "rejected: FeeMismatch" in printed
    assert "Total nodes: 2" in printed


def test_demo_scenario_runs(mocker: MockerFixture, capsys: CaptureFixture[str]) -> None:
    """The built-in demo replays every call through the dispatcher."""
    spy = mocker.spy(RegistryEngine, "call")
    assert main(["--demo"]) == 0
    assert spy.call_count == len(demo_scenario()["calls"])
    assert "Total nodes: 2" in capsys.readouterr().out


def test_demo_outcomes() -> None:
    """The demo exercises boosts, a wrong fee and a bare transfer."""
    report = ScenarioRunner(demo_scenario()).run()
    results = report["results"]

    assert results[4]["result"] == 120
    assert results[6]["error"] == "FeeMismatch"
    assert results[7]["result"] == 0
    assert results[8]["error"] == "DirectPaymentRejected"
    assert sum(report["balances"].values()) == 5_100


def test_scenario_and_demo_are_exclusive() -> None:
    """Exactly one input source is required."""
    with pytest.raises(SystemExit):
        main([])
