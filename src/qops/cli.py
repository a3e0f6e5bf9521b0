# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Command-line interface.

Registered as the ``qops`` console script.

Examples
--------
    qops check circuit.json
    qops check circuit.json --policy collect --format json
    qops check circuit.json --strict
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

import click

from qops.config import ErrorPolicy, get_config
from qops.errors import QopsError
from qops.hashing import operation_digest
from qops.loader import LoadResult, load_ops


def echo(msg: str, *, err: bool = False) -> None:
    """Print message to stdout or stderr."""
    click.echo(msg, err=err)


def print_json(obj: Any) -> None:
    """Print object as formatted JSON."""
    click.echo(json.dumps(obj, indent=2, default=str))


def print_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> None:
    """
    Print formatted ASCII table.

    Parameters
    ----------
    headers : sequence of str
        Column headers.
    rows : sequence of sequence
        Table rows, each the same length as ``headers``.
    """
    if not rows:
        echo("(empty)")
        return

    widths = [len(str(h)) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(widths):
                widths[i] = max(widths[i], len(str(cell)))

    fmt = "  ".join(f"{{:<{w}}}" for w in widths)
    echo(fmt.format(*headers))
    echo(fmt.format(*["-" * w for w in widths]))
    for row in rows:
        echo(fmt.format(*[str(c) for c in row]))


def _read_records(path: Path) -> list[Any]:
    """Read instruction records from a JSON list or ``{"instructions": [...]}``."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{path} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("instructions")
    if not isinstance(data, list):
        raise click.ClickException(
            f"{path} must contain a list of instructions "
            'or an object with an "instructions" list'
        )
    return data


def _result_to_dict(result: LoadResult) -> dict[str, Any]:
    return {
        "ok": bool(result),
        "loaded": len(result),
        "skipped": result.skipped,
        "operations": [
            {**op.to_dict(), "digest": operation_digest(op)} for op in result
        ],
        "errors": [issue.to_dict() for issue in result.errors],
    }


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Validate quantum circuit instruction records."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command("check")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--policy",
    type=click.Choice([p.value for p in ErrorPolicy]),
    default=None,
    help="Error policy (default: QOPS_ERROR_POLICY or raise).",
)
@click.option("--format", "fmt", type=click.Choice(["table", "json"]), default="table")
@click.option(
    "--strict",
    is_flag=True,
    help="Reject instruction names without a dedicated loader.",
)
def check(path: Path, policy: str | None, fmt: str, strict: bool) -> None:
    """Load and validate the instructions in a JSON file."""
    config = get_config()
    if strict:
        config = replace(config, gate_fallback=False)

    records = _read_records(path)
    try:
        result = load_ops(records, policy=policy, config=config)
    except QopsError as e:
        raise click.ClickException(str(e)) from e

    if fmt == "json":
        print_json(_result_to_dict(result))
    else:
        rows = []
        for i, op in enumerate(result):
            qubits = ",".join(str(q) for q in getattr(op, "qubits", ()))
            rows.append((i, op.name, qubits or "-", operation_digest(op)[7:19]))
        print_table(["#", "Name", "Qubits", "Digest"], rows)
        for issue in result.errors:
            echo(f"record {issue.index}: {issue.error}", err=True)
        echo(f"\n{len(result)} loaded, {result.skipped} failed")

    if not result:
        raise SystemExit(1)


def main() -> None:
    """Run the ``qops`` CLI."""
    cli()


if __name__ == "__main__":
    main()
