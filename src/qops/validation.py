# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Structural validators for instruction records.

These helpers enforce the invariants shared by several instruction
kinds: well-formed qubit sets, exact sub-register partitions and the
canonical ordering of Pauli labels. They are pure functions; failures
are reported by raising an :class:`~qops.errors.OperationError`.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from qops.errors import (
    BadPartitionError,
    DuplicateQubitsError,
    EmptyQubitsError,
    PayloadCountMismatchError,
)


def check_qubits(qubits: Sequence[int], op_name: str = "") -> None:
    """
    Check that a qubit list is non-empty and duplicate-free.

    Parameters
    ----------
    qubits : sequence of int
        Qubit indices.
    op_name : str, optional
        Instruction name, used in error messages.

    Raises
    ------
    EmptyQubitsError
        If ``qubits`` is empty.
    DuplicateQubitsError
        If an index occurs more than once.
    """
    if not qubits:
        raise EmptyQubitsError(op_name)
    counts = Counter(qubits)
    duplicates = sorted(q for q, n in counts.items() if n > 1)
    if duplicates:
        raise DuplicateQubitsError(op_name, duplicates)


def check_partition(
    qubits: Sequence[int],
    sub_qubits: Sequence[Sequence[int]],
    num_payloads: int,
    op_name: str = "",
) -> None:
    """
    Check that ``sub_qubits`` exactly partitions ``qubits``.

    The subsets must be pairwise disjoint and cover every parent qubit
    and nothing else. Overlap shows up as a total element count larger
    than the union; omission leaves the union smaller than the parent.

    Parameters
    ----------
    qubits : sequence of int
        Parent qubit set (assumed already checked by :func:`check_qubits`).
    sub_qubits : sequence of sequence of int
        Candidate partition of ``qubits``.
    num_payloads : int
        Number of payloads paired with the subsets.
    op_name : str, optional
        Instruction name, used in error messages.

    Raises
    ------
    BadPartitionError
        If the subsets overlap, miss a parent qubit, or contain a qubit
        outside the parent set.
    PayloadCountMismatchError
        If the number of subsets differs from ``num_payloads``.
    """
    parent = set(qubits)
    union: set[int] = set()
    total = 0
    for subset in sub_qubits:
        total += len(subset)
        union.update(subset)

    if total != len(union):
        raise BadPartitionError(op_name, "sub-qubit lists overlap")
    if union != parent:
        missing = sorted(parent - union)
        extra = sorted(union - parent)
        parts = []
        if missing:
            parts.append(f"missing qubits {missing}")
        if extra:
            parts.append(f"unknown qubits {extra}")
        raise BadPartitionError(op_name, ", ".join(parts))

    if len(sub_qubits) != num_payloads:
        raise PayloadCountMismatchError(op_name, len(sub_qubits), num_payloads)


def sorting_permutation(qubits: Sequence[int]) -> list[int]:
    """
    Return the positions of ``qubits`` in ascending qubit order.

    The sort is stable, so equal indices keep their relative order.

    Examples
    --------
    >>> sorting_permutation([2, 0, 1])
    [1, 2, 0]
    """
    return sorted(range(len(qubits)), key=qubits.__getitem__)


def canonicalize_labels(
    qubits: Sequence[int],
    labels: Sequence[str],
) -> tuple[tuple[int, ...], tuple[str, ...]]:
    """
    Sort qubits ascending and permute positional labels to match.

    Character ``i`` of each input label refers to ``qubits[i]``. The
    permutation that sorts ``qubits`` is computed once and applied to
    every label, so character ``j`` of each output label refers to
    ``sorted_qubits[j]``.

    Parameters
    ----------
    qubits : sequence of int
        Unsorted qubit indices.
    labels : sequence of str
        Labels whose length equals ``len(qubits)``.

    Returns
    -------
    tuple
        ``(sorted_qubits, permuted_labels)``.

    Examples
    --------
    >>> canonicalize_labels([2, 0, 1], ["XYZ"])
    ((0, 1, 2), ('YZX',))
    """
    perm = sorting_permutation(qubits)
    sorted_qubits = tuple(qubits[p] for p in perm)
    permuted = tuple("".join(label[p] for p in perm) for label in labels)
    return sorted_qubits, permuted
