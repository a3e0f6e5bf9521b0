# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Instruction record loading.

This module turns loosely-typed instruction records into validated
:mod:`qops.operations` values. :func:`load_op` reads the ``name``
discriminator and dispatches to one constructor per instruction kind;
names without a dedicated constructor are loaded as generic gates.

Usage
-----
>>> from qops.loader import load_op, load_ops
>>> load_op({"name": "cx", "qubits": [0, 1]})
Gate(name='cx', conditional=False, conditional_reg=None, qubits=(0, 1), params=())
>>> result = load_ops(records, policy="collect")
>>> for issue in result.errors:
...     print(issue.index, issue.error)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from qops.config import Config, ErrorPolicy, get_config
from qops.errors import (
    CoeffCountMismatchError,
    EmptyParamsError,
    EmptyQubitsError,
    LabelLengthMismatchError,
    LengthMismatchError,
    MissingNameError,
    OperationError,
    QopsError,
    UnknownNameError,
)
from qops.operations import (
    DiagonalGate,
    DiagonalObservable,
    Gate,
    Kraus,
    MatrixGate,
    MatrixObservable,
    Measure,
    Operation,
    PauliObservable,
    Probabilities,
    Reset,
    Snapshot,
    VectorObservable,
)
from qops.record import FieldType, get_value
from qops.validation import canonicalize_labels, check_partition, check_qubits


logger = logging.getLogger(__name__)

Record = Mapping[str, Any]

#: Names reserved for instructions that have no constructor yet.
RESERVED_NAMES: frozenset[str] = frozenset({"bfunc", "roerror"})


def _read_name(record: Record) -> str:
    name = get_value(record, "name", FieldType.STRING)
    if not name:
        raise MissingNameError()
    return name


def _read_qubits(record: Record, op_name: str) -> tuple[int, ...]:
    qubits = get_value(record, "qubits", FieldType.REG)
    if not qubits:
        raise EmptyQubitsError(op_name)
    return qubits


# =============================================================================
# Gates, measurement and reset
# =============================================================================


def load_gate(record: Record) -> Gate:
    """
    Load a generic gate.

    Qubits must be non-empty but are not checked for uniqueness.
    ``params`` is an optional list of reals.
    """
    name = _read_name(record)
    qubits = _read_qubits(record, name)
    params = get_value(record, "params", FieldType.REAL_LIST)
    return Gate(name=name, qubits=qubits, params=params)


def load_measure(record: Record) -> Measure:
    """
    Load a measurement.

    ``memory`` and ``register`` are optional; if present they must have
    one entry per qubit.
    """
    qubits = _read_qubits(record, "measure")
    memory = get_value(record, "memory", FieldType.REG)
    if memory and len(memory) != len(qubits):
        raise LengthMismatchError(
            "measure", "memory", len(memory), "qubits", len(qubits)
        )
    registers = get_value(record, "register", FieldType.REG)
    if registers and len(registers) != len(qubits):
        raise LengthMismatchError(
            "measure", "register", len(registers), "qubits", len(qubits)
        )
    return Measure(qubits=qubits, memory=memory, registers=registers)


def load_reset(record: Record) -> Reset:
    """
    Load a reset.

    ``params`` gives the target state per qubit and defaults to all
    zeros when absent or empty.
    """
    qubits = _read_qubits(record, "reset")
    params = get_value(record, "params", FieldType.REAL_LIST)
    if not params:
        params = (0.0,) * len(qubits)
    if len(params) != len(qubits):
        raise LengthMismatchError("reset", "params", len(params), "qubits", len(qubits))
    return Reset(qubits=qubits, params=params)


def load_snapshot(record: Record) -> Snapshot:
    """Load a snapshot, typing a bare label as ``"default"``."""
    labels = get_value(record, "params", FieldType.STRING_LIST)
    if len(labels) == 1:
        labels = (*labels, "default")
    return Snapshot(labels=labels)


# =============================================================================
# Matrix gates and channels
# =============================================================================


def load_mat(record: Record) -> MatrixGate:
    """Load a dense matrix gate. Matrix dimensions are not checked."""
    qubits = _read_qubits(record, "mat")
    matrix = get_value(record, "params", FieldType.CMATRIX)
    return MatrixGate(qubits=qubits, matrix=matrix)


def load_dmat(record: Record) -> DiagonalGate:
    """Load a diagonal matrix gate. Vector length is not checked."""
    qubits = _read_qubits(record, "dmat")
    diagonal = get_value(record, "params", FieldType.CVECTOR)
    return DiagonalGate(qubits=qubits, diagonal=diagonal)


def load_kraus(record: Record) -> Kraus:
    """Load a Kraus channel. Operator dimensions are not checked."""
    qubits = _read_qubits(record, "kraus")
    matrices = get_value(record, "params", FieldType.CMATRIX_LIST)
    return Kraus(qubits=qubits, matrices=matrices)


# =============================================================================
# Observables
# =============================================================================


def load_probs(record: Record) -> Probabilities:
    """Load a measurement-probabilities request."""
    return Probabilities(qubits=_read_qubits(record, "probs"))


def load_obs_pauli(record: Record) -> PauliObservable:
    """
    Load a Pauli observable.

    Validates the labels against the qubits and coefficients, then
    sorts the qubits ascending and permutes every label to match, so
    observables differing only in qubit order load identically.

    Raises
    ------
    EmptyQubitsError
        If ``qubits`` is empty.
    EmptyParamsError
        If there are no Pauli labels.
    LabelLengthMismatchError
        If a label's length differs from the qubit count.
    CoeffCountMismatchError
        If the number of ``coeffs`` differs from the number of labels.
    """
    qubits = get_value(record, "qubits", FieldType.REG)
    labels = get_value(record, "params", FieldType.STRING_LIST)
    coeffs = get_value(record, "coeffs", FieldType.COMPLEX_LIST)

    if not qubits:
        raise EmptyQubitsError("obs_pauli")
    if not labels:
        raise EmptyParamsError("obs_pauli")
    for label in labels:
        if len(label) != len(qubits):
            raise LabelLengthMismatchError("obs_pauli", label, len(qubits))
    if len(coeffs) != len(labels):
        raise CoeffCountMismatchError("obs_pauli", len(coeffs), len(labels))

    qubits, labels = canonicalize_labels(qubits, labels)
    return PauliObservable(qubits=qubits, labels=labels, coeffs=coeffs)


def _load_sub_register(record: Record, op_name: str, payload_type: FieldType):
    qubits = get_value(record, "qubits", FieldType.REG)
    sub_qubits = get_value(record, "sub_qubits", FieldType.REG_LIST)
    sub_params = get_value(record, "sub_params", payload_type)

    check_qubits(qubits, op_name)
    check_partition(qubits, sub_qubits, len(sub_params), op_name)
    # Payload dimensions are left to the execution engine.
    return {"qubits": qubits, "sub_qubits": sub_qubits, "sub_params": sub_params}


def load_obs_mat(record: Record) -> MatrixObservable:
    """Load a matrix observable over a partition of its qubits."""
    return MatrixObservable(
        **_load_sub_register(record, "obs_mat", FieldType.CMATRIX_LIST)
    )


def load_obs_dmat(record: Record) -> DiagonalObservable:
    """Load a diagonal-matrix observable over a partition of its qubits."""
    return DiagonalObservable(
        **_load_sub_register(record, "obs_dmat", FieldType.CVECTOR_LIST)
    )


def load_obs_vec(record: Record) -> VectorObservable:
    """Load a vector observable over a partition of its qubits."""
    return VectorObservable(
        **_load_sub_register(record, "obs_vec", FieldType.CVECTOR_LIST)
    )


# =============================================================================
# Dispatch
# =============================================================================


_OBSERVABLE_LOADERS: dict[str, Callable[[Record], Operation]] = {
    "obs_pauli": load_obs_pauli,
    "obs_mat": load_obs_mat,
    "obs_dmat": load_obs_dmat,
    "obs_vec": load_obs_vec,
}

_LOADERS: dict[str, Callable[[Record], Operation]] = {
    "measure": load_measure,
    "reset": load_reset,
    "mat": load_mat,
    "dmat": load_dmat,
    "probs": load_probs,
    **_OBSERVABLE_LOADERS,
    "snapshot": load_snapshot,
    "kraus": load_kraus,
}


def load_op(record: Record, *, config: Config | None = None) -> Operation:
    """
    Load and validate one instruction record.

    Parameters
    ----------
    record : Mapping
        Instruction record with at least a ``name`` field.
    config : Config, optional
        Loader configuration. Defaults to :func:`get_config`.

    Returns
    -------
    Operation
        Validated, immutable instruction.

    Raises
    ------
    MissingNameError
        If ``name`` is absent or empty.
    UnknownNameError
        If ``name`` is reserved, or unrecognized while gate fallback
        is disabled.
    OperationError
        If the record fails validation for its kind.
    RecordFieldError
        If a field has the wrong type.
    """
    name = _read_name(record)
    loader = _LOADERS.get(name)
    if loader is not None:
        logger.debug("Loading %s instruction", name)
        return loader(record)

    if name in RESERVED_NAMES:
        raise UnknownNameError(name, "is reserved but not supported yet")

    cfg = config or get_config()
    if not cfg.gate_fallback:
        raise UnknownNameError(name)
    logger.debug("No dedicated loader for %r, loading as gate", name)
    return load_gate(record)


def load_observable(record: Record) -> Operation:
    """
    Load an observable instruction (``obs_*`` kinds only).

    Raises
    ------
    MissingNameError
        If ``name`` is absent or empty.
    UnknownNameError
        If ``name`` is not an observable kind.
    """
    name = _read_name(record)
    loader = _OBSERVABLE_LOADERS.get(name)
    if loader is None:
        raise UnknownNameError(name, "is not an observable")
    return loader(record)


# =============================================================================
# Batch loading
# =============================================================================


@dataclass(frozen=True)
class LoadIssue:
    """
    A record that failed to load.

    Attributes
    ----------
    index : int
        Position of the record in the input sequence.
    name : str
        Record name, if it could be read.
    error : QopsError
        Failure raised while loading.
    """

    index: int
    name: str
    error: QopsError

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "index": self.index,
            "name": self.name,
            "error": type(self.error).__name__,
            "message": str(self.error),
        }
        if isinstance(self.error, OperationError):
            d["kind"] = self.error.kind.value
            d["field"] = self.error.field
        return d


@dataclass
class LoadResult:
    """
    Result of loading a batch of instruction records.

    Attributes
    ----------
    operations : list
        Successfully loaded instructions, in input order.
    errors : list of LoadIssue
        Failures collected under the ``collect`` policy.
    skipped : int
        Number of records dropped under ``skip`` or ``collect``.
    """

    operations: list[Operation] = field(default_factory=list)
    errors: list[LoadIssue] = field(default_factory=list)
    skipped: int = 0

    def __bool__(self) -> bool:
        """Return True if no record failed."""
        return self.skipped == 0

    def __len__(self) -> int:
        """Return number of loaded instructions."""
        return len(self.operations)

    def __iter__(self):
        """Iterate over loaded instructions."""
        return iter(self.operations)


def _record_name(record: Any) -> str:
    if isinstance(record, Mapping):
        name = record.get("name")
        if isinstance(name, str):
            return name
    return ""


def load_ops(
    records: Iterable[Record],
    *,
    policy: ErrorPolicy | str | None = None,
    config: Config | None = None,
) -> LoadResult:
    """
    Load a sequence of instruction records.

    Each record is loaded independently with :func:`load_op`.

    Parameters
    ----------
    records : iterable of Mapping
        Instruction records.
    policy : ErrorPolicy or str, optional
        Failure handling: ``raise`` propagates the first error, ``skip``
        drops failing records, ``collect`` drops them and reports them
        in :attr:`LoadResult.errors`. Defaults to the configured policy.
    config : Config, optional
        Loader configuration. Defaults to :func:`get_config`.

    Returns
    -------
    LoadResult
        Loaded instructions and collected failures.
    """
    cfg = config or get_config()
    policy = ErrorPolicy(policy) if policy is not None else cfg.error_policy

    result = LoadResult()
    for index, record in enumerate(records):
        try:
            result.operations.append(load_op(record, config=cfg))
        except QopsError as exc:
            if policy is ErrorPolicy.RAISE:
                raise
            result.skipped += 1
            if policy is ErrorPolicy.COLLECT:
                result.errors.append(LoadIssue(index, _record_name(record), exc))
            else:
                logger.warning("Skipping instruction %d: %s", index, exc)

    logger.debug(
        "Loaded %d instruction(s), %d failed", len(result.operations), result.skipped
    )
    return result
