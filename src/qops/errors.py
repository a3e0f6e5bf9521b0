# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Exception hierarchy for qops.

All public exceptions raised by qops inherit from :class:`QopsError`,
enabling catch-all error handling at the package boundary. Validation
failures for a single instruction record are raised as subclasses of
:class:`OperationError`, each tagged with an :class:`ErrorKind`.

Hierarchy
---------
::

    QopsError
    ├── RecordFieldError
    └── OperationError
        ├── MissingNameError
        ├── UnknownNameError
        ├── EmptyQubitsError
        ├── DuplicateQubitsError
        ├── LengthMismatchError
        ├── EmptyParamsError
        ├── LabelLengthMismatchError
        ├── CoeffCountMismatchError
        ├── BadPartitionError
        └── PayloadCountMismatchError

Examples
--------
>>> from qops import load_op
>>> from qops.errors import OperationError, ErrorKind
>>> try:
...     load_op({"name": "measure", "qubits": []})
... except OperationError as exc:
...     assert exc.kind is ErrorKind.EMPTY_QUBITS
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Validation failure categories for instruction records."""

    MISSING_NAME = "MissingName"
    UNKNOWN_NAME = "UnknownName"
    EMPTY_QUBITS = "EmptyQubits"
    DUPLICATE_QUBITS = "DuplicateQubits"
    LENGTH_MISMATCH = "LengthMismatch"
    EMPTY_PARAMS = "EmptyParams"
    LABEL_LENGTH_MISMATCH = "LabelLengthMismatch"
    COEFF_COUNT_MISMATCH = "CoeffCountMismatch"
    BAD_PARTITION = "BadPartition"
    PAYLOAD_COUNT_MISMATCH = "PayloadCountMismatch"


class QopsError(Exception):
    """
    Base exception for all qops operations.

    ``except QopsError`` is guaranteed to intercept any error
    originating from the package.
    """


class RecordFieldError(QopsError):
    """
    Raised when a record field cannot be read as the requested type.

    Parameters
    ----------
    key : str
        Field key that failed to convert.
    expected : str
        Human-readable name of the expected type.
    value : Any
        Offending value.
    """

    def __init__(self, key: str, expected: str, value: Any) -> None:
        self.key = key
        self.expected = expected
        self.value = value
        super().__init__(
            f"Invalid field {key!r}: expected {expected}, "
            f"got {type(value).__name__} ({value!r:.80})"
        )


class OperationError(QopsError, ValueError):
    """
    Base exception for invalid instruction records.

    Parameters
    ----------
    op_name : str
        Instruction name the failure relates to (may be empty when the
        name itself is missing).
    field : str
        Record field that triggered the failure.
    detail : str
        Human-readable description of the problem.
    """

    kind: ErrorKind

    def __init__(self, op_name: str, field: str, detail: str) -> None:
        self.op_name = op_name
        self.field = field
        self.detail = detail
        label = f"{op_name} operation" if op_name else "operation"
        super().__init__(f"Invalid {label}: {detail}")


class MissingNameError(OperationError):
    """Raised when the ``name`` discriminator is absent or empty."""

    kind = ErrorKind.MISSING_NAME

    def __init__(self, op_name: str = "") -> None:
        super().__init__(op_name, "name", '"name" is empty.')


class UnknownNameError(OperationError):
    """
    Raised when an instruction name cannot be dispatched.

    Used for reserved kinds that have no constructor yet and for names
    rejected by a restricted dispatcher.
    """

    kind = ErrorKind.UNKNOWN_NAME

    def __init__(
        self, op_name: str, reason: str = "is not a supported instruction"
    ) -> None:
        super().__init__(op_name, "name", f'"name" {op_name!r} {reason}.')


class EmptyQubitsError(OperationError):
    """Raised when a required qubit list is absent or empty."""

    kind = ErrorKind.EMPTY_QUBITS

    def __init__(self, op_name: str, field: str = "qubits") -> None:
        super().__init__(op_name, field, f'"{field}" are empty.')


class DuplicateQubitsError(OperationError):
    """
    Raised when a qubit list repeats an index where uniqueness is required.

    Parameters
    ----------
    op_name : str
        Instruction name.
    duplicates : list of int
        Qubit indices occurring more than once.
    """

    kind = ErrorKind.DUPLICATE_QUBITS

    def __init__(
        self, op_name: str, duplicates: list[int], field: str = "qubits"
    ) -> None:
        self.duplicates = duplicates
        super().__init__(
            op_name, field, f'"{field}" are not unique (repeated: {duplicates}).'
        )


class LengthMismatchError(OperationError):
    """Raised when two fields that must have equal length differ."""

    kind = ErrorKind.LENGTH_MISMATCH

    def __init__(
        self, op_name: str, field: str, length: int, other: str, other_length: int
    ) -> None:
        self.length = length
        self.other = other
        self.other_length = other_length
        super().__init__(
            op_name,
            field,
            f'"{field}" and "{other}" are different lengths '
            f"({length} != {other_length}).",
        )


class EmptyParamsError(OperationError):
    """Raised when a required label or parameter list is empty."""

    kind = ErrorKind.EMPTY_PARAMS

    def __init__(self, op_name: str, field: str = "params") -> None:
        super().__init__(op_name, field, f'"{field}" are empty.')


class LabelLengthMismatchError(OperationError):
    """Raised when a Pauli label length disagrees with the qubit count."""

    kind = ErrorKind.LABEL_LENGTH_MISMATCH

    def __init__(self, op_name: str, label: str, num_qubits: int) -> None:
        self.label = label
        self.num_qubits = num_qubits
        super().__init__(
            op_name,
            "params",
            f'"params" string {label!r} has length {len(label)}, '
            f"expected {num_qubits} for qubit number.",
        )


class CoeffCountMismatchError(OperationError):
    """Raised when the coefficient count disagrees with the label count."""

    kind = ErrorKind.COEFF_COUNT_MISMATCH

    def __init__(self, op_name: str, num_coeffs: int, num_labels: int) -> None:
        self.num_coeffs = num_coeffs
        self.num_labels = num_labels
        super().__init__(
            op_name,
            "coeffs",
            f'length "coeffs" != length "params" ({num_coeffs} != {num_labels}).',
        )


class BadPartitionError(OperationError):
    """Raised when sub-qubit lists do not exactly partition the qubit set."""

    kind = ErrorKind.BAD_PARTITION

    def __init__(self, op_name: str, reason: str) -> None:
        self.reason = reason
        super().__init__(
            op_name,
            "sub_qubits",
            f'"sub_qubits" do not partition "qubits" ({reason}).',
        )


class PayloadCountMismatchError(OperationError):
    """Raised when the number of sub-qubit lists differs from the payload count."""

    kind = ErrorKind.PAYLOAD_COUNT_MISMATCH

    def __init__(self, op_name: str, num_subsets: int, num_payloads: int) -> None:
        self.num_subsets = num_subsets
        self.num_payloads = num_payloads
        super().__init__(
            op_name,
            "sub_params",
            f'"sub_qubits" do not match "sub_params" '
            f"({num_subsets} != {num_payloads}).",
        )
