# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""Shared test fixtures for qops tests."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Callable

import pytest
from click.testing import CliRunner
from qops.cli import cli
from qops.config import reset_config


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolate_config() -> Iterator[None]:
    """Drop any cached config before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment with every QOPS_* variable removed."""
    for name in ("QOPS_ERROR_POLICY", "QOPS_GATE_FALLBACK"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# =============================================================================
# Record Fixtures
# =============================================================================

IDENTITY_2X2 = [[1, 0], [0, 1]]
PAULI_X = [[0, 1], [1, 0]]


@pytest.fixture
def sub_register_record() -> Callable[..., dict[str, Any]]:
    """
    Factory for ``obs_mat``/``obs_dmat``/``obs_vec`` records.

    Payloads default to one per subset, shaped for the kind.
    """

    def _create(
        name: str = "obs_mat",
        qubits: list[int] | None = None,
        sub_qubits: list[list[int]] | None = None,
        sub_params: list[Any] | None = None,
    ) -> dict[str, Any]:
        qubits = [0, 1, 2, 3] if qubits is None else qubits
        sub_qubits = [[0, 1], [2, 3]] if sub_qubits is None else sub_qubits
        if sub_params is None:
            if name == "obs_mat":
                sub_params = [IDENTITY_2X2 for _ in sub_qubits]
            else:
                sub_params = [[1, 0] for _ in sub_qubits]
        return {
            "name": name,
            "qubits": qubits,
            "sub_qubits": sub_qubits,
            "sub_params": sub_params,
        }

    return _create


@pytest.fixture
def circuit_records() -> list[dict[str, Any]]:
    """A small, valid instruction list covering several kinds."""
    return [
        {"name": "h", "qubits": [0]},
        {"name": "cx", "qubits": [0, 1]},
        {"name": "u3", "qubits": [1], "params": [0.1, 0.2, 0.3]},
        {"name": "obs_pauli", "qubits": [1, 0], "params": ["ZX"], "coeffs": [1]},
        {"name": "snapshot", "params": ["final"]},
        {"name": "measure", "qubits": [0, 1], "memory": [0, 1]},
    ]


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def write_records(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a JSON document to a temporary file and return its path."""
    counter = [0]

    def _write(data: Any) -> Path:
        counter[0] += 1
        path = tmp_path / f"circuit_{counter[0]}.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def invoke(cli_runner: CliRunner) -> Callable[..., Any]:
    """
    Invoke CLI commands.

    Usage:
        result = invoke("check", str(path))
        result = invoke("check", str(path), "--format", "json")
    """

    def _invoke(*args: str):
        return cli_runner.invoke(cli, list(args))

    return _invoke
