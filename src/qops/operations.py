# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Validated instruction types.

Each instruction kind is a frozen dataclass carrying only the fields
that kind needs; :data:`Operation` is the union of all of them. Values
are produced by :mod:`qops.loader` and are immutable afterwards:
sequences are tuples and numeric payloads are read-only ``complex128``
arrays.

Kinds
-----
=============  ======================
name           class
=============  ======================
``measure``    :class:`Measure`
``reset``      :class:`Reset`
``snapshot``   :class:`Snapshot`
``mat``        :class:`MatrixGate`
``dmat``       :class:`DiagonalGate`
``kraus``      :class:`Kraus`
``probs``      :class:`Probabilities`
``obs_pauli``  :class:`PauliObservable`
``obs_mat``    :class:`MatrixObservable`
``obs_dmat``   :class:`DiagonalObservable`
``obs_vec``    :class:`VectorObservable`
(other)        :class:`Gate`
=============  ======================

Classes holding arrays compare by identity; compare their
:meth:`to_dict` output (or :func:`qops.hashing.operation_digest`) to
test them for equality.

:meth:`to_dict` records reload through :func:`qops.loader.load_op`
without their condition; reapply it with :func:`with_condition`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

import numpy as np
from numpy.typing import NDArray

from qops.record import array_to_json, complex_to_json


class OpKind(str, Enum):
    """Instruction kinds with a dedicated constructor."""

    GATE = "gate"
    MEASURE = "measure"
    RESET = "reset"
    SNAPSHOT = "snapshot"
    MAT = "mat"
    DMAT = "dmat"
    KRAUS = "kraus"
    PROBS = "probs"
    OBS_PAULI = "obs_pauli"
    OBS_MAT = "obs_mat"
    OBS_DMAT = "obs_dmat"
    OBS_VEC = "obs_vec"

    @property
    def is_observable(self) -> bool:
        """Check if kind is an observable (``obs_*``)."""
        return self.value.startswith("obs_")


CMatrix = NDArray[np.complex128]
CVector = NDArray[np.complex128]


@dataclass(frozen=True, kw_only=True, eq=False)
class _Op:
    """
    Fields shared by every instruction.

    Attributes
    ----------
    conditional : bool
        Whether execution is conditioned on a classical register.
    conditional_reg : int, optional
        Register index looked up when ``conditional`` is set. Never
        populated by the loader; see :func:`with_condition`.
    """

    kind: ClassVar[OpKind]
    name: ClassVar[str]

    conditional: bool = False
    conditional_reg: int | None = None

    def _base_dict(self) -> dict[str, Any]:
        """
        Start a ``to_dict`` record with the name and condition.

        The ``conditional`` and ``conditional_reg`` keys are written for
        digests and display only. Loaders ignore them, so reloading a
        conditioned record yields the unconditioned instruction.
        """
        d: dict[str, Any] = {"name": self.name}
        if self.conditional:
            d["conditional"] = True
            d["conditional_reg"] = self.conditional_reg
        return d


@dataclass(frozen=True, kw_only=True)
class Gate(_Op):
    """
    Generic gate with optional real parameters.

    Any instruction name without a dedicated constructor loads as a
    gate. Qubits are checked for emptiness only.
    """

    kind: ClassVar[OpKind] = OpKind.GATE

    name: str
    qubits: tuple[int, ...]
    params: tuple[float, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        if self.params:
            d["params"] = list(self.params)
        return d


@dataclass(frozen=True, kw_only=True)
class Measure(_Op):
    """Measurement into optional memory slots and registers."""

    kind: ClassVar[OpKind] = OpKind.MEASURE
    name: ClassVar[str] = "measure"

    qubits: tuple[int, ...]
    memory: tuple[int, ...] = ()
    registers: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        if self.memory:
            d["memory"] = list(self.memory)
        if self.registers:
            d["register"] = list(self.registers)
        return d


@dataclass(frozen=True, kw_only=True)
class Reset(_Op):
    """Reset of each qubit to the target state given in ``params``."""

    kind: ClassVar[OpKind] = OpKind.RESET
    name: ClassVar[str] = "reset"

    qubits: tuple[int, ...]
    params: tuple[float, ...]

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        d["params"] = list(self.params)
        return d


@dataclass(frozen=True, kw_only=True)
class Snapshot(_Op):
    """Snapshot request; ``labels`` holds the snapshot label and type."""

    kind: ClassVar[OpKind] = OpKind.SNAPSHOT
    name: ClassVar[str] = "snapshot"

    labels: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["params"] = list(self.labels)
        return d


@dataclass(frozen=True, kw_only=True, eq=False)
class MatrixGate(_Op):
    """Arbitrary dense matrix gate."""

    kind: ClassVar[OpKind] = OpKind.MAT
    name: ClassVar[str] = "mat"

    qubits: tuple[int, ...]
    matrix: CMatrix

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        d["params"] = array_to_json(self.matrix)
        return d


@dataclass(frozen=True, kw_only=True, eq=False)
class DiagonalGate(_Op):
    """Diagonal matrix gate given by its diagonal."""

    kind: ClassVar[OpKind] = OpKind.DMAT
    name: ClassVar[str] = "dmat"

    qubits: tuple[int, ...]
    diagonal: CVector

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        d["params"] = array_to_json(self.diagonal)
        return d


@dataclass(frozen=True, kw_only=True, eq=False)
class Kraus(_Op):
    """Non-unitary channel described by a list of Kraus operators."""

    kind: ClassVar[OpKind] = OpKind.KRAUS
    name: ClassVar[str] = "kraus"

    qubits: tuple[int, ...]
    matrices: tuple[CMatrix, ...]

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        d["params"] = [array_to_json(m) for m in self.matrices]
        return d


@dataclass(frozen=True, kw_only=True)
class Probabilities(_Op):
    """Request for measurement probabilities of ``qubits``."""

    kind: ClassVar[OpKind] = OpKind.PROBS
    name: ClassVar[str] = "probs"

    qubits: tuple[int, ...]

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        return d


@dataclass(frozen=True, kw_only=True)
class PauliObservable(_Op):
    """
    Weighted sum of Pauli strings.

    ``qubits`` is sorted ascending and character ``j`` of every label
    acts on ``qubits[j]``.
    """

    kind: ClassVar[OpKind] = OpKind.OBS_PAULI
    name: ClassVar[str] = "obs_pauli"

    qubits: tuple[int, ...]
    labels: tuple[str, ...]
    coeffs: tuple[complex, ...]

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        d["params"] = list(self.labels)
        d["coeffs"] = [complex_to_json(c) for c in self.coeffs]
        return d


@dataclass(frozen=True, kw_only=True, eq=False)
class _SubRegisterObservable(_Op):
    """Observable given as one payload per sub-register of ``qubits``."""

    qubits: tuple[int, ...]
    sub_qubits: tuple[tuple[int, ...], ...]
    sub_params: tuple[NDArray[np.complex128], ...]

    def to_dict(self) -> dict[str, Any]:
        d = self._base_dict()
        d["qubits"] = list(self.qubits)
        d["sub_qubits"] = [list(s) for s in self.sub_qubits]
        d["sub_params"] = [array_to_json(p) for p in self.sub_params]
        return d


@dataclass(frozen=True, kw_only=True, eq=False)
class MatrixObservable(_SubRegisterObservable):
    """Tensor product of dense matrices on disjoint sub-registers."""

    kind: ClassVar[OpKind] = OpKind.OBS_MAT
    name: ClassVar[str] = "obs_mat"


@dataclass(frozen=True, kw_only=True, eq=False)
class DiagonalObservable(_SubRegisterObservable):
    """Tensor product of diagonal matrices on disjoint sub-registers."""

    kind: ClassVar[OpKind] = OpKind.OBS_DMAT
    name: ClassVar[str] = "obs_dmat"


@dataclass(frozen=True, kw_only=True, eq=False)
class VectorObservable(_SubRegisterObservable):
    """Projector built from state vectors on disjoint sub-registers."""

    kind: ClassVar[OpKind] = OpKind.OBS_VEC
    name: ClassVar[str] = "obs_vec"


Operation = Union[
    Gate,
    Measure,
    Reset,
    Snapshot,
    MatrixGate,
    DiagonalGate,
    Kraus,
    Probabilities,
    PauliObservable,
    MatrixObservable,
    DiagonalObservable,
    VectorObservable,
]


def with_condition(op: Operation, register: int) -> Operation:
    """
    Return a copy of ``op`` conditioned on a classical register.

    Parameters
    ----------
    op : Operation
        Validated instruction.
    register : int
        Register index to look up at execution time.

    Returns
    -------
    Operation
        New instruction with ``conditional=True``.

    Raises
    ------
    ValueError
        If ``register`` is not a non-negative integer.
    """
    if isinstance(register, bool) or not isinstance(register, int) or register < 0:
        raise ValueError(f"Invalid conditional register: {register!r}")
    return dataclasses.replace(op, conditional=True, conditional_reg=register)
