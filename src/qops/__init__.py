# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
qops: validated loading of quantum circuit instruction records.

Quick Start
-----------
>>> from qops import load_op
>>> op = load_op({"name": "obs_pauli", "qubits": [2, 0, 1],
...               "params": ["XYZ"], "coeffs": [1.0]})
>>> op.qubits, op.labels
((0, 1, 2), ('YZX',))

Batches
-------
>>> from qops import load_ops
>>> result = load_ops(records, policy="collect")
>>> if not result:
...     for issue in result.errors:
...         print(issue.index, issue.error)

Submodules
----------
- qops.loader: Dispatcher, per-kind constructors and batch loading
- qops.operations: Validated instruction types
- qops.validation: Qubit-set, partition and label checks
- qops.record: Typed field access for raw records
- qops.hashing: Canonical instruction digests
- qops.config: Configuration management
- qops.errors: Public exception types
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any


__all__ = [
    # Version
    "__version__",
    # Loading
    "load_op",
    "load_ops",
    "load_observable",
    "LoadResult",
    # Types
    "Operation",
    "with_condition",
    # Hashing
    "operation_digest",
    # Errors
    "QopsError",
    "OperationError",
    # Config
    "Config",
    "get_config",
    "set_config",
]


try:
    __version__ = version("qops")
except PackageNotFoundError:
    __version__ = "0.0.0"


if TYPE_CHECKING:
    from qops.config import Config, get_config, set_config
    from qops.errors import OperationError, QopsError
    from qops.hashing import operation_digest
    from qops.loader import LoadResult, load_observable, load_op, load_ops
    from qops.operations import Operation, with_condition


_LAZY_IMPORTS = {
    # Loading
    "load_op": ("qops.loader", "load_op"),
    "load_ops": ("qops.loader", "load_ops"),
    "load_observable": ("qops.loader", "load_observable"),
    "LoadResult": ("qops.loader", "LoadResult"),
    # Types
    "Operation": ("qops.operations", "Operation"),
    "with_condition": ("qops.operations", "with_condition"),
    # Hashing
    "operation_digest": ("qops.hashing", "operation_digest"),
    # Errors
    "QopsError": ("qops.errors", "QopsError"),
    "OperationError": ("qops.errors", "OperationError"),
    # Config
    "Config": ("qops.config", "Config"),
    "get_config": ("qops.config", "get_config"),
    "set_config": ("qops.config", "set_config"),
}


def __getattr__(name: str) -> Any:
    """Lazy-import handler."""
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = __import__(module_path, fromlist=[attr_name])
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    """List available public attributes."""
    return sorted(set(__all__) | set(_LAZY_IMPORTS.keys()))
