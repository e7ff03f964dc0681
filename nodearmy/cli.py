from __future__ import annotations

"""CLI for replaying call scenarios against an in-memory registry.

Usage example:
    python -m nodearmy.cli --scenario ./scenario.json --out ./results/state.json
    python -m nodearmy.cli --demo

A scenario is a JSON document::

    {
      "accounts": {"alice": "0x...", "owner": "0x...", ...},
      "owner": "owner", "treasury": "0x...", "founder": "0x...",
      "params": {"register_fee": 100, "upgrade_fee": 200, "action_fee": 10,
                 "boost_fee": 50, "treasury_bps": 7000},
      "start_time": 1700000000,
      "calls": [{"sender": "alice", "operation": "register", "value": 100}, ...]
    }

Account aliases may be used wherever an address is expected. Rejected calls are
recorded with their error name and the replay carries on.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import argparse
import json
import logging
import time

from eth_account import Account

from .errors import RegistryError
from .json import JSONable
from .registry import RegistryEngine
from .transfer import InMemoryLedger
from .types import RegistryParams


class ScenarioClock:
    """Clock advanced explicitly by the scenario runner."""

    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


class ScenarioRunner(JSONable):
    """Replay the calls of a scenario document and collect the outcome."""

    def __init__(self, scenario: Dict[str, Any]) -> None:
        self.scenario = scenario
        self.accounts: Dict[str, str] = dict(scenario.get("accounts", {}))
        self.clock = ScenarioClock(float(scenario.get("start_time", time.time())))
        self.ledger = InMemoryLedger()
        self.engine = RegistryEngine(
            owner=self.resolve(scenario["owner"]),
            treasury=self.resolve(scenario["treasury"]),
            founder=self.resolve(scenario["founder"]),
            params=RegistryParams(**scenario.get("params", {})),
            transfer=self.ledger,
            clock=self.clock,
        )
        for address in scenario.get("rejecting", []):
            self.ledger.reject(self.resolve(address))

    def resolve(self, value: Any) -> Any:  # noqa: ANN401
        """Replace an account alias by its address; other values pass through."""
        if isinstance(value, str) and value in self.accounts:
            return self.accounts[value]
        return value

    def run(self) -> Dict[str, Any]:
        """Execute every call and return the JSON-safe report."""
        results: List[Dict[str, Any]] = []
        for index, call in enumerate(self.scenario.get("calls", [])):
            if "timestamp" in call:
                self.clock.now = float(call["timestamp"])
            sender = self.resolve(call["sender"])
            operation = call.get("operation")
            args = [self.resolve(arg) for arg in call.get("args", [])]
            entry: Dict[str, Any] = {"index": index, "sender": sender, "operation": operation}
            try:
                result = self.engine.call(sender, operation, *args, value=int(call.get("value", 0)))
            except RegistryError as exc:
                entry.update(ok=False, error=exc.name, message=str(exc))
            else:
                entry.update(ok=True, result=self._to_jsonable(result))
            results.append(entry)

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "results": results,
            "events": [event.to_payload() for event in self.engine.events],
            "state": self.engine.export_state(),
            "balances": self.ledger.balances(),
        }


def demo_scenario() -> Dict[str, Any]:
    """Build a small scenario over freshly generated accounts."""
    names = ("owner", "treasury", "founder", "alice", "bob")
    accounts = {name: Account.create().address for name in names}
    params = {"register_fee": 1_000, "upgrade_fee": 2_000, "action_fee": 100, "boost_fee": 500, "treasury_bps": 7000}
    return {
        "accounts": accounts,
        "owner": "owner",
        "treasury": "treasury",
        "founder": "founder",
        "params": params,
        "calls": [
            {"sender": "alice", "operation": "register", "value": 1_000},
            {"sender": "bob", "operation": "register", "value": 1_000},
            {"sender": "alice", "operation": "buyBoost", "args": [1], "value": 500},
            {"sender": "alice", "operation": "buyBoost", "args": [1], "value": 500},
            {"sender": "alice", "operation": "action", "args": [100], "value": 100},
            {"sender": "bob", "operation": "upgrade", "value": 2_000},
            {"sender": "bob", "operation": "action", "args": [50], "value": 99},
            {"sender": "owner", "operation": "adjustMerit", "args": ["bob", -10]},
            {"sender": "alice", "operation": None, "value": 1},
        ],
    }


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Returns:
        Parsed arguments as a namespace.
    """
    parser = argparse.ArgumentParser(description="Replay call scenarios against a NodeArmy registry.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--scenario", dest="scenario", type=Path, help="Scenario JSON file to replay")
    source.add_argument("--demo", dest="demo", action="store_true", help="Replay the built-in demo scenario")
    parser.add_argument("--out", dest="output", type=Path, default=None,
                        help="Write the report (results, events, state, balances) to this JSON file")
    parser.add_argument("--log-level", dest="log_level", default="WARNING",
                        help="Log level for registry output (default: WARNING)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entrypoint for the CLI script.

    Replays the scenario, prints a short summary and optionally writes the
    full report.
    """
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(message)s")

    if args.demo:
        scenario = demo_scenario()
    else:
        with args.scenario.open("r", encoding="utf-8") as f:
            scenario = json.load(f)

    report = ScenarioRunner(scenario).run()

    for entry in report["results"]:
        status = "ok" if entry["ok"] else f"rejected: {entry['error']}"
        print(f"[{entry['index']:>3}] {entry['operation'] or '<transfer>'} from {entry['sender']}: {status}")
    print(f"Total nodes: {report['state']['total_nodes']}, events: {len(report['events'])}")

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with args.output.open("w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)
        print(f"Saved report: {args.output}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
