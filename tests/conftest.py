"""Conformance fixture loader for waypoint.

Loads YAML fixtures from tests/fixtures/ and converts them to routes and
request cases for parametrized testing. Each YAML document holds one route
config (the ``parse_route_config`` shape) and the cases run against it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
import yaml

from waypoint import Route, parse_route_config
from waypoint.testing import make_environ

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class RouteCase:
    """A single request case from a conformance fixture."""

    fixture_name: str
    case_name: str
    route: Route
    path: str
    environ: dict[str, Any]
    expect: dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return f"{self.fixture_name}::{self.case_name}"


# ─── Fixture loading ────────────────────────────────────────────────────────


def load_route_fixtures() -> list[RouteCase]:
    """Load every conformance fixture file, in file order."""
    cases: list[RouteCase] = []
    for yaml_file in sorted(FIXTURES_DIR.glob("*.yaml")):
        cases.extend(_load_file(yaml_file))
    return cases


def _load_file(path: Path) -> list[RouteCase]:
    """Load a single fixture YAML file (may contain multiple documents)."""
    cases: list[RouteCase] = []
    with path.open() as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            fixture_name = doc["name"]
            route = parse_route_config(doc["route"])
            for case in doc["cases"]:
                environ = case.get("environ")
                if environ is None:
                    environ = make_environ()
                cases.append(
                    RouteCase(
                        fixture_name=fixture_name,
                        case_name=case["name"],
                        route=route,
                        path=str(case["path"]),
                        environ=dict(environ),
                        expect=case["expect"],
                    )
                )
    return cases


# ─── Shared fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def environ() -> dict[str, Any]:
    """A plain GET request over http."""
    return make_environ("GET", port=80)


@pytest.fixture
def secure_environ() -> dict[str, Any]:
    return make_environ("GET", https=True)
