# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Canonical digests for validated instructions.

Digests are computed over the canonical JSON form of
:meth:`to_dict`, with sorted keys and compact separators, so equal
instructions always hash equally. Pauli observables are canonicalized
at load time (qubits ascending), which makes the digest usable as a
cache key for observables written with differently ordered qubits.

>>> from qops import load_op
>>> a = load_op({"name": "obs_pauli", "qubits": [1, 0], "params": ["XZ"],
...              "coeffs": [1]})
>>> b = load_op({"name": "obs_pauli", "qubits": [0, 1], "params": ["ZX"],
...              "coeffs": [1]})
>>> operation_digest(a) == operation_digest(b)
True
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from qops.operations import Operation


def sha256_digest(obj: Any) -> str:
    """
    Compute SHA-256 digest of a JSON-serializable Python object.

    Parameters
    ----------
    obj : Any
        Object to hash.

    Returns
    -------
    str
        Digest in format ``sha256:<64-hex-chars>``.
    """
    canonical_json = json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return f"sha256:{hashlib.sha256(canonical_json.encode('utf-8')).hexdigest()}"


def operation_digest(op: Operation) -> str:
    """Return the canonical digest of a validated instruction."""
    return sha256_digest(op.to_dict())
