# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Typed field access for loosely-typed instruction records.

Instruction records are plain mappings, typically decoded from JSON.
:func:`get_value` reads one field and coerces it to a semantic type,
raising :class:`~qops.errors.RecordFieldError` if the value has the
wrong shape. Absent fields (or ``None``) yield the type's empty value,
so callers decide whether emptiness is an error.

Complex numbers are accepted either as Python numbers or as
``[real, imag]`` pairs, matching the usual JSON encoding.

Examples
--------
>>> get_value({"qubits": [0, 2]}, "qubits", FieldType.REG)
(0, 2)
>>> get_value({}, "memory", FieldType.REG)
()
>>> get_value({"coeffs": [[0, 1]]}, "coeffs", FieldType.COMPLEX_LIST)
(1j,)
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from numbers import Integral, Number, Real
from typing import Any

import numpy as np
from numpy.typing import NDArray

from qops.errors import RecordFieldError


class FieldType(Enum):
    """Semantic types understood by :func:`get_value`."""

    STRING = "string"
    BOOL = "bool"
    REAL_LIST = "list of reals"
    STRING_LIST = "list of strings"
    REG = "list of qubit indices"
    REG_LIST = "list of qubit-index lists"
    COMPLEX_LIST = "list of complex numbers"
    CVECTOR = "complex vector"
    CVECTOR_LIST = "list of complex vectors"
    CMATRIX = "complex matrix"
    CMATRIX_LIST = "list of complex matrices"


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _to_index(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 0:
        raise RecordFieldError(key, "non-negative integer index", value)
    return int(value)


def _to_real(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise RecordFieldError(key, "real number", value)
    return float(value)


def _to_complex(key: str, value: Any) -> complex:
    if _is_sequence(value) and len(value) == 2:
        return complex(_to_real(key, value[0]), _to_real(key, value[1]))
    if isinstance(value, bool) or not isinstance(value, Number):
        raise RecordFieldError(key, "complex number or [real, imag] pair", value)
    return complex(value)


def _frozen(array: NDArray[np.complex128]) -> NDArray[np.complex128]:
    array.setflags(write=False)
    return array


def _from_ndarray(
    key: str, value: NDArray[Any], field_type: FieldType, ndim: int
) -> NDArray[np.complex128]:
    # Numeric dtypes only; bool, str and object arrays are rejected.
    if value.ndim != ndim or value.dtype.kind not in "iufc":
        raise RecordFieldError(key, field_type.value, value)
    try:
        return _frozen(value.astype(np.complex128))
    except (TypeError, ValueError) as e:
        raise RecordFieldError(key, field_type.value, value) from e


def _to_cvector(key: str, value: Any) -> NDArray[np.complex128]:
    if isinstance(value, np.ndarray):
        return _from_ndarray(key, value, FieldType.CVECTOR, 1)
    if not _is_sequence(value):
        raise RecordFieldError(key, FieldType.CVECTOR.value, value)
    return _frozen(
        np.array([_to_complex(key, v) for v in value], dtype=np.complex128)
    )


def _to_cmatrix(key: str, value: Any) -> NDArray[np.complex128]:
    if isinstance(value, np.ndarray):
        return _from_ndarray(key, value, FieldType.CMATRIX, 2)
    if not _is_sequence(value):
        raise RecordFieldError(key, FieldType.CMATRIX.value, value)
    if not value:
        return _frozen(np.zeros((0, 0), dtype=np.complex128))

    rows = [_to_cvector(key, row) for row in value]
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise RecordFieldError(key, "rectangular complex matrix", value)
    return _frozen(np.array(rows, dtype=np.complex128))


def _list_of(key: str, value: Any, expected: FieldType, convert) -> tuple:
    if not _is_sequence(value):
        raise RecordFieldError(key, expected.value, value)
    return tuple(convert(key, item) for item in value)


def _to_string(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise RecordFieldError(key, "string", value)
    return value


def _to_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise RecordFieldError(key, "boolean", value)
    return value


def _to_reg(key: str, value: Any) -> tuple[int, ...]:
    return _list_of(key, value, FieldType.REG, _to_index)


def _empty(field_type: FieldType) -> Any:
    if field_type is FieldType.STRING:
        return ""
    if field_type is FieldType.BOOL:
        return False
    if field_type is FieldType.CVECTOR:
        return _frozen(np.zeros(0, dtype=np.complex128))
    if field_type is FieldType.CMATRIX:
        return _frozen(np.zeros((0, 0), dtype=np.complex128))
    return ()


def get_value(record: Mapping[str, Any], key: str, field_type: FieldType) -> Any:
    """
    Read a field from an instruction record as a semantic type.

    Parameters
    ----------
    record : Mapping
        Instruction record (string-keyed).
    key : str
        Field to read.
    field_type : FieldType
        Target semantic type.

    Returns
    -------
    Any
        Converted value. Lists are returned as tuples; vectors and
        matrices as read-only ``complex128`` arrays. An absent field
        returns the empty value for the type (``""``, ``False``,
        ``()`` or an empty array).

    Raises
    ------
    RecordFieldError
        If ``record`` is not a mapping or the value cannot be converted.
    """
    if not isinstance(record, Mapping):
        raise RecordFieldError(key, "record mapping", record)

    value = record.get(key)
    if value is None:
        return _empty(field_type)

    match field_type:
        case FieldType.STRING:
            return _to_string(key, value)
        case FieldType.BOOL:
            return _to_bool(key, value)
        case FieldType.REAL_LIST:
            return _list_of(key, value, field_type, _to_real)
        case FieldType.STRING_LIST:
            return _list_of(key, value, field_type, _to_string)
        case FieldType.REG:
            return _to_reg(key, value)
        case FieldType.REG_LIST:
            return _list_of(key, value, field_type, _to_reg)
        case FieldType.COMPLEX_LIST:
            return _list_of(key, value, field_type, _to_complex)
        case FieldType.CVECTOR:
            return _to_cvector(key, value)
        case FieldType.CVECTOR_LIST:
            return _list_of(key, value, field_type, _to_cvector)
        case FieldType.CMATRIX:
            return _to_cmatrix(key, value)
        case FieldType.CMATRIX_LIST:
            return _list_of(key, value, field_type, _to_cmatrix)
    raise ValueError(f"Unsupported field type: {field_type!r}")


def complex_to_json(value: complex) -> list[float]:
    """Encode a complex number as a ``[real, imag]`` pair."""
    return [float(value.real), float(value.imag)]


def array_to_json(array: NDArray[np.complex128]) -> list:
    """Encode a complex vector or matrix as nested ``[real, imag]`` pairs."""
    if array.ndim == 1:
        return [complex_to_json(v) for v in array]
    return [array_to_json(row) for row in array]
