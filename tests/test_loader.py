# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2026 qops

"""
Tests for qops.loader.

Tests dispatch, the per-kind constructors and batch loading.
"""

from __future__ import annotations

import logging

import numpy as np
import pytest
from qops.config import Config, ErrorPolicy, set_config
from qops.errors import (
    BadPartitionError,
    CoeffCountMismatchError,
    DuplicateQubitsError,
    EmptyParamsError,
    EmptyQubitsError,
    ErrorKind,
    LabelLengthMismatchError,
    LengthMismatchError,
    MissingNameError,
    OperationError,
    PayloadCountMismatchError,
    RecordFieldError,
    UnknownNameError,
)
from qops.loader import (
    load_gate,
    load_measure,
    load_observable,
    load_op,
    load_ops,
)
from qops.operations import (
    DiagonalGate,
    DiagonalObservable,
    Gate,
    Kraus,
    MatrixGate,
    MatrixObservable,
    Measure,
    PauliObservable,
    Probabilities,
    Reset,
    Snapshot,
    VectorObservable,
)


class TestDispatch:
    """Routing on the ``name`` discriminator."""

    @pytest.mark.parametrize(
        "record,expected_type",
        [
            ({"name": "measure", "qubits": [0]}, Measure),
            ({"name": "reset", "qubits": [0]}, Reset),
            ({"name": "mat", "qubits": [0], "params": [[1, 0], [0, 1]]}, MatrixGate),
            ({"name": "dmat", "qubits": [0], "params": [1, -1]}, DiagonalGate),
            ({"name": "probs", "qubits": [0, 1]}, Probabilities),
            (
                {"name": "obs_pauli", "qubits": [0], "params": ["Z"], "coeffs": [1]},
                PauliObservable,
            ),
            ({"name": "snapshot", "params": ["s"]}, Snapshot),
            ({"name": "kraus", "qubits": [0], "params": [[[1, 0], [0, 1]]]}, Kraus),
            ({"name": "x", "qubits": [0]}, Gate),
        ],
    )
    def test_routes_to_constructor(self, record, expected_type):
        op = load_op(record)
        assert type(op) is expected_type
        assert op.name == record["name"]

    @pytest.mark.parametrize(
        "name,expected_type",
        [
            ("obs_mat", MatrixObservable),
            ("obs_dmat", DiagonalObservable),
            ("obs_vec", VectorObservable),
        ],
    )
    def test_routes_sub_register_observables(
        self, sub_register_record, name, expected_type
    ):
        op = load_op(sub_register_record(name=name))
        assert type(op) is expected_type
        assert op.name == name

    @pytest.mark.parametrize("record", [{}, {"name": ""}, {"qubits": [0]}])
    def test_missing_name(self, record):
        with pytest.raises(MissingNameError) as exc_info:
            load_op(record)
        assert exc_info.value.kind is ErrorKind.MISSING_NAME
        assert exc_info.value.field == "name"

    def test_non_string_name_is_field_error(self):
        with pytest.raises(RecordFieldError):
            load_op({"name": 7, "qubits": [0]})

    def test_unknown_name_loads_as_gate(self):
        """Unrecognized names with qubits and numeric params are gates."""
        op = load_op({"name": "my_custom_gate", "qubits": [2, 3], "params": [0.5, 1]})
        assert isinstance(op, Gate)
        assert op.name == "my_custom_gate"
        assert op.qubits == (2, 3)
        assert op.params == (0.5, 1.0)

    def test_matching_is_case_sensitive(self):
        op = load_op({"name": "Measure", "qubits": [0]})
        assert isinstance(op, Gate)
        assert op.name == "Measure"

    @pytest.mark.parametrize("name", ["bfunc", "roerror"])
    def test_reserved_names_rejected(self, name):
        with pytest.raises(UnknownNameError) as exc_info:
            load_op({"name": name, "qubits": [0]})
        assert exc_info.value.kind is ErrorKind.UNKNOWN_NAME
        assert "reserved" in str(exc_info.value)

    def test_gate_fallback_disabled(self):
        strict = Config(gate_fallback=False)
        with pytest.raises(UnknownNameError):
            load_op({"name": "cx", "qubits": [0, 1]}, config=strict)

    def test_gate_fallback_disabled_still_loads_known_kinds(self):
        strict = Config(gate_fallback=False)
        op = load_op({"name": "measure", "qubits": [0]}, config=strict)
        assert isinstance(op, Measure)

    def test_global_config_used_by_default(self):
        set_config(Config(gate_fallback=False))
        with pytest.raises(UnknownNameError):
            load_op({"name": "h", "qubits": [0]})

    def test_fallback_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="qops.loader"):
            load_op({"name": "h", "qubits": [0]})
        assert "loading as gate" in caplog.text


class TestGate:
    def test_params_default_empty(self):
        assert load_gate({"name": "h", "qubits": [0]}).params == ()

    def test_empty_qubits(self):
        with pytest.raises(EmptyQubitsError) as exc_info:
            load_op({"name": "h", "qubits": []})
        assert exc_info.value.op_name == "h"

    def test_missing_qubits(self):
        with pytest.raises(EmptyQubitsError):
            load_op({"name": "h"})

    def test_duplicate_qubits_allowed(self):
        """Gates only require non-empty qubits."""
        op = load_op({"name": "cx", "qubits": [1, 1]})
        assert op.qubits == (1, 1)

    def test_gate_constructor_rechecks_name(self):
        with pytest.raises(MissingNameError):
            load_gate({"name": "", "qubits": [0]})

    def test_non_numeric_params_rejected(self):
        with pytest.raises(RecordFieldError) as exc_info:
            load_op({"name": "rz", "qubits": [0], "params": ["theta"]})
        assert exc_info.value.key == "params"

    def test_negative_qubit_rejected(self):
        with pytest.raises(RecordFieldError):
            load_op({"name": "h", "qubits": [-1]})


class TestMeasure:
    def test_memory_and_register_optional(self):
        op = load_measure({"name": "measure", "qubits": [0, 1]})
        assert op.memory == ()
        assert op.registers == ()

    def test_memory_and_register_loaded(self):
        op = load_op(
            {"name": "measure", "qubits": [0, 1], "memory": [1, 0], "register": [3, 4]}
        )
        assert op.qubits == (0, 1)
        assert op.memory == (1, 0)
        assert op.registers == (3, 4)

    def test_only_register(self):
        op = load_op({"name": "measure", "qubits": [2], "register": [0]})
        assert op.memory == ()
        assert op.registers == (0,)

    def test_memory_length_mismatch(self):
        with pytest.raises(LengthMismatchError) as exc_info:
            load_op({"name": "measure", "qubits": [0, 1], "memory": [0]})
        err = exc_info.value
        assert err.field == "memory"
        assert err.length == 1
        assert err.other_length == 2
        assert '"memory" and "qubits" are different lengths' in str(err)

    def test_register_length_mismatch(self):
        with pytest.raises(LengthMismatchError) as exc_info:
            load_op({"name": "measure", "qubits": [0], "register": [0, 1]})
        assert exc_info.value.field == "register"

    def test_empty_memory_treated_as_absent(self):
        op = load_op({"name": "measure", "qubits": [0, 1], "memory": []})
        assert op.memory == ()

    def test_empty_qubits(self):
        with pytest.raises(EmptyQubitsError):
            load_op({"name": "measure", "qubits": [], "memory": []})


class TestReset:
    def test_default_params_are_zeros(self):
        op = load_op({"name": "reset", "qubits": [4, 2, 7]})
        assert op.params == (0.0, 0.0, 0.0)
        assert len(op.params) == len(op.qubits)

    def test_explicit_params(self):
        op = load_op({"name": "reset", "qubits": [0, 1], "params": [1, 0]})
        assert op.params == (1.0, 0.0)

    def test_params_length_mismatch(self):
        with pytest.raises(LengthMismatchError) as exc_info:
            load_op({"name": "reset", "qubits": [0, 1], "params": [1]})
        assert exc_info.value.field == "params"

    def test_empty_qubits(self):
        with pytest.raises(EmptyQubitsError):
            load_op({"name": "reset", "qubits": []})


class TestSnapshot:
    def test_single_label_gets_default_type(self):
        op = load_op({"name": "snapshot", "params": ["final_state"]})
        assert op.labels == ("final_state", "default")

    def test_explicit_type_kept(self):
        op = load_op({"name": "snapshot", "params": ["s0", "statevector"]})
        assert op.labels == ("s0", "statevector")

    def test_no_labels(self):
        assert load_op({"name": "snapshot"}).labels == ()

    def test_qubits_ignored(self):
        op = load_op({"name": "snapshot", "params": ["s"], "qubits": [0]})
        assert not hasattr(op, "qubits")


class TestMatrixGates:
    def test_mat_payload(self):
        op = load_op({"name": "mat", "qubits": [0], "params": [[0, 1], [1, 0]]})
        np.testing.assert_array_equal(op.matrix, np.array([[0, 1], [1, 0]]))
        assert op.matrix.dtype == np.complex128

    def test_mat_complex_pairs(self):
        op = load_op(
            {
                "name": "mat",
                "qubits": [0],
                "params": [[[0, 0], [0, -1]], [[0, 1], [0, 0]]],
            }
        )
        np.testing.assert_array_equal(op.matrix, np.array([[0, -1j], [1j, 0]]))

    def test_mat_dimensions_not_checked(self):
        op = load_op({"name": "mat", "qubits": [0, 1], "params": [[1, 0], [0, 1]]})
        assert op.matrix.shape == (2, 2)

    def test_mat_payload_read_only(self):
        op = load_op({"name": "mat", "qubits": [0], "params": [[1, 0], [0, 1]]})
        with pytest.raises(ValueError):
            op.matrix[0, 0] = 5

    def test_dmat_payload(self):
        op = load_op({"name": "dmat", "qubits": [0], "params": [1, [0, 1]]})
        np.testing.assert_array_equal(op.diagonal, np.array([1, 1j]))

    def test_kraus_payload(self):
        k0 = [[1, 0], [0, 0]]
        k1 = [[0, 0], [0, 1]]
        op = load_op({"name": "kraus", "qubits": [3], "params": [k0, k1]})
        assert len(op.matrices) == 2
        np.testing.assert_array_equal(op.matrices[1], np.array(k1))

    @pytest.mark.parametrize("name", ["mat", "dmat", "kraus"])
    def test_empty_qubits(self, name):
        with pytest.raises(EmptyQubitsError) as exc_info:
            load_op({"name": name, "qubits": [], "params": []})
        assert exc_info.value.op_name == name

    def test_ragged_matrix_rejected(self):
        with pytest.raises(RecordFieldError):
            load_op({"name": "mat", "qubits": [0], "params": [[1, 0], [0]]})


class TestProbs:
    def test_qubits_loaded(self):
        assert load_op({"name": "probs", "qubits": [3, 1]}).qubits == (3, 1)

    def test_empty_qubits(self):
        with pytest.raises(EmptyQubitsError):
            load_op({"name": "probs"})


class TestPauliObservable:
    def test_canonicalized(self):
        op = load_op(
            {"name": "obs_pauli", "qubits": [2, 0, 1], "params": ["XYZ"], "coeffs": [1]}
        )
        assert op.qubits == (0, 1, 2)
        assert op.labels == ("YZX",)

    def test_coefficients_loaded(self):
        op = load_op(
            {
                "name": "obs_pauli",
                "qubits": [0, 1],
                "params": ["XY", "ZZ"],
                "coeffs": [0.5, [0, -0.25]],
            }
        )
        assert op.coeffs == (0.5 + 0j, -0.25j)

    def test_coeff_count_mismatch(self):
        with pytest.raises(CoeffCountMismatchError) as exc_info:
            load_op(
                {
                    "name": "obs_pauli",
                    "qubits": [0, 1],
                    "params": ["XY", "ZZ"],
                    "coeffs": [1],
                }
            )
        assert exc_info.value.kind is ErrorKind.COEFF_COUNT_MISMATCH
        assert exc_info.value.num_coeffs == 1
        assert exc_info.value.num_labels == 2

    def test_empty_qubits(self):
        with pytest.raises(EmptyQubitsError):
            load_op({"name": "obs_pauli", "qubits": [], "params": [], "coeffs": []})

    def test_empty_labels(self):
        with pytest.raises(EmptyParamsError) as exc_info:
            load_op({"name": "obs_pauli", "qubits": [0], "params": [], "coeffs": []})
        assert exc_info.value.field == "params"

    def test_label_length_mismatch(self):
        with pytest.raises(LabelLengthMismatchError) as exc_info:
            load_op(
                {"name": "obs_pauli", "qubits": [0, 1], "params": ["X"], "coeffs": [1]}
            )
        assert exc_info.value.label == "X"
        assert exc_info.value.num_qubits == 2

    def test_label_checked_before_coeffs(self):
        with pytest.raises(LabelLengthMismatchError):
            load_op({"name": "obs_pauli", "qubits": [0, 1], "params": ["XYZ"]})

    def test_qubit_order_does_not_matter(self):
        a = load_op(
            {"name": "obs_pauli", "qubits": [1, 0], "params": ["XZ"], "coeffs": [2]}
        )
        b = load_op(
            {"name": "obs_pauli", "qubits": [0, 1], "params": ["ZX"], "coeffs": [2]}
        )
        assert a == b


class TestSubRegisterObservables:
    @pytest.mark.parametrize("name", ["obs_mat", "obs_dmat", "obs_vec"])
    def test_valid_partition(self, sub_register_record, name):
        op = load_op(sub_register_record(name=name))
        assert op.qubits == (0, 1, 2, 3)
        assert op.sub_qubits == ((0, 1), (2, 3))
        assert len(op.sub_params) == 2

    def test_matrix_payloads(self, sub_register_record):
        op = load_op(sub_register_record(name="obs_mat"))
        assert all(p.shape == (2, 2) for p in op.sub_params)

    def test_vector_payloads(self, sub_register_record):
        op = load_op(sub_register_record(name="obs_vec"))
        assert all(p.shape == (2,) for p in op.sub_params)

    @pytest.mark.parametrize("name", ["obs_mat", "obs_dmat", "obs_vec"])
    def test_overlap(self, sub_register_record, name):
        record = sub_register_record(name=name, sub_qubits=[[0, 1], [1, 2, 3]])
        with pytest.raises(BadPartitionError) as exc_info:
            load_op(record)
        assert exc_info.value.op_name == name

    def test_omission(self, sub_register_record):
        with pytest.raises(BadPartitionError):
            load_op(sub_register_record(sub_qubits=[[0, 1]]))

    def test_payload_count_mismatch(self, sub_register_record):
        record = sub_register_record(sub_params=[[[1, 0], [0, 1]]])
        with pytest.raises(PayloadCountMismatchError):
            load_op(record)

    def test_empty_parent(self, sub_register_record):
        with pytest.raises(EmptyQubitsError):
            load_op(sub_register_record(qubits=[], sub_qubits=[]))

    def test_duplicate_parent(self, sub_register_record):
        with pytest.raises(DuplicateQubitsError):
            load_op(sub_register_record(qubits=[0, 1, 1], sub_qubits=[[0, 1]]))

    def test_payload_dimensions_not_checked(self, sub_register_record):
        record = sub_register_record(
            name="obs_dmat", sub_qubits=[[0], [1, 2, 3]], sub_params=[[1], [1, 2]]
        )
        op = load_op(record)
        assert [len(p) for p in op.sub_params] == [1, 2]


class TestLoadObservable:
    def test_accepts_observables(self, sub_register_record):
        op = load_observable(sub_register_record(name="obs_vec"))
        assert isinstance(op, VectorObservable)

    def test_accepts_pauli(self):
        op = load_observable(
            {"name": "obs_pauli", "qubits": [0], "params": ["X"], "coeffs": [1]}
        )
        assert isinstance(op, PauliObservable)

    @pytest.mark.parametrize("name", ["probs", "measure", "h"])
    def test_rejects_other_kinds(self, name):
        with pytest.raises(UnknownNameError) as exc_info:
            load_observable({"name": name, "qubits": [0]})
        assert "not an observable" in str(exc_info.value)

    def test_missing_name(self):
        with pytest.raises(MissingNameError):
            load_observable({"qubits": [0]})


class TestLoadOps:
    """Batch loading under each error policy."""

    def test_all_valid(self, circuit_records):
        result = load_ops(circuit_records)
        assert result
        assert len(result) == len(circuit_records)
        assert [op.name for op in result] == [r["name"] for r in circuit_records]

    def test_raise_policy_propagates(self, circuit_records):
        records = [*circuit_records, {"name": "measure", "qubits": []}]
        with pytest.raises(EmptyQubitsError):
            load_ops(records, policy=ErrorPolicy.RAISE)

    def test_skip_policy(self, circuit_records, caplog):
        records = [{"name": "reset", "qubits": [0], "params": [1, 1]}, *circuit_records]
        with caplog.at_level(logging.WARNING, logger="qops.loader"):
            result = load_ops(records, policy="skip")
        assert not result
        assert result.skipped == 1
        assert result.errors == []
        assert len(result) == len(circuit_records)
        assert "Skipping instruction 0" in caplog.text

    def test_collect_reports_non_numeric_array(self):
        records = [
            {"name": "dmat", "qubits": [0], "params": np.array(["a", "b"])},
            {"name": "h", "qubits": [0]},
        ]
        result = load_ops(records, policy="collect")
        assert len(result) == 1
        assert result.skipped == 1
        (issue,) = result.errors
        assert issue.index == 0
        assert issue.name == "dmat"
        assert isinstance(issue.error, RecordFieldError)
        assert issue.to_dict()["error"] == "RecordFieldError"

    def test_collect_policy(self, circuit_records):
        records = [
            circuit_records[0],
            {
                "name": "obs_pauli",
                "qubits": [0, 1],
                "params": ["XY", "ZZ"],
                "coeffs": [1],
            },
            "not a record",
            {"qubits": [0]},
        ]
        result = load_ops(records, policy="collect")
        assert len(result) == 1
        assert result.skipped == 3
        assert [issue.index for issue in result.errors] == [1, 2, 3]
        assert isinstance(result.errors[0].error, CoeffCountMismatchError)
        assert result.errors[0].name == "obs_pauli"
        assert isinstance(result.errors[1].error, RecordFieldError)
        assert isinstance(result.errors[2].error, MissingNameError)

    def test_issue_to_dict(self):
        result = load_ops([{"name": "probs"}], policy="collect")
        d = result.errors[0].to_dict()
        assert d["index"] == 0
        assert d["name"] == "probs"
        assert d["kind"] == "EmptyQubits"
        assert d["field"] == "qubits"
        assert d["error"] == "EmptyQubitsError"

    def test_policy_from_config(self):
        set_config(Config(error_policy=ErrorPolicy.COLLECT))
        result = load_ops([{"name": "probs"}])
        assert len(result.errors) == 1

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            load_ops([], policy="ignore")

    def test_operation_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            load_op({"name": "probs"})
        assert issubclass(OperationError, ValueError)
