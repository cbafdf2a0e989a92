import logging

import pytest

from qcanvas.circuit.linearizer import expand_items, linearize, resolve_gate
from qcanvas.core.ir import CustomGateDefinition, PlacedCustomGate, PlacedGate
from qcanvas.exceptions import CyclicGateDefinition
from qcanvas.operation.gate_operation import GateType
from qcanvas.qcanvas import Config


def _summary(ops):
    return [(op.gate, op.target_qubit, op.control_qubit) for op in ops]


def test_ops_are_sorted_by_left():
    items = [
        PlacedGate("x", 1, left=80),
        PlacedGate("h", 0, left=20),
        PlacedGate("cnot", 1, left=50, control_qubit=0),
    ]
    ops = linearize(items, num_qubits=2)
    assert _summary(ops) == [
        (GateType.H, 0, None),
        (GateType.CNOT, 1, 0),
        (GateType.X, 1, None),
    ]


def test_equal_left_keeps_placement_order():
    items = [
        PlacedGate("z", 0, left=10),
        PlacedGate("x", 0, left=10),
        PlacedGate("y", 0, left=10),
    ]
    ops = linearize(items, num_qubits=1)
    assert [op.gate for op in ops] == [GateType.Z, GateType.X, GateType.Y]


def test_dict_items_are_accepted():
    items = [
        {"gateId": "h", "qubit": 0, "left": 20},
        {"gateId": "cnot", "qubit": 1, "controlQubit": 0, "left": 50},
    ]
    assert _summary(linearize(items, num_qubits=2)) == [
        (GateType.H, 0, None),
        (GateType.CNOT, 1, 0),
    ]


def test_custom_gate_is_remapped_to_anchor():
    bell = CustomGateDefinition(
        "bell",
        (PlacedGate("h", 0, left=3), PlacedGate("cnot", 1, left=9, control_qubit=0)),
    )
    ops = linearize([PlacedCustomGate("bell", 1, left=40)], [bell], num_qubits=3)
    assert _summary(ops) == [(GateType.H, 1, None), (GateType.CNOT, 2, 1)]
    # every expanded gate inherits the instance position
    assert [op.order for op in ops] == [40.0, 40.0]


def test_nested_custom_gates_accumulate_offsets():
    inner = CustomGateDefinition("inner", (PlacedGate("x", 1),))
    outer = CustomGateDefinition(
        "outer", (PlacedGate("h", 0), PlacedCustomGate("inner", 1))
    )
    ops = linearize([PlacedCustomGate("outer", 1, left=5)], [outer, inner], num_qubits=4)
    assert _summary(ops) == [(GateType.H, 1, None), (GateType.X, 3, None)]


def test_custom_gate_interleaves_with_primitives():
    definition = CustomGateDefinition("xx", (PlacedGate("x", 0), PlacedGate("x", 1)))
    items = [
        PlacedGate("h", 0, left=60),
        PlacedCustomGate("xx", 0, left=30),
        PlacedGate("z", 1, left=10),
    ]
    ops = linearize(items, [definition], num_qubits=2)
    assert [op.gate for op in ops] == [GateType.Z, GateType.X, GateType.X, GateType.H]


def test_self_reference_raises():
    loop = CustomGateDefinition("loop", (PlacedCustomGate("loop", 0),))
    with pytest.raises(CyclicGateDefinition) as excinfo:
        linearize([PlacedCustomGate("loop", 0)], [loop], num_qubits=1)
    assert excinfo.value.chain == ("loop", "loop")


def test_indirect_cycle_raises():
    a = CustomGateDefinition("a", (PlacedCustomGate("b", 0),))
    b = CustomGateDefinition("b", (PlacedGate("x", 0), PlacedCustomGate("a", 0)))
    with pytest.raises(CyclicGateDefinition) as excinfo:
        linearize([PlacedCustomGate("a", 0)], [a, b], num_qubits=1)
    assert "a -> b -> a" in str(excinfo.value)


def test_depth_bound_raises():
    Config().set_max_custom_gate_depth(3)
    chain = [
        CustomGateDefinition(f"g{i}", (PlacedCustomGate(f"g{i + 1}", 0),))
        for i in range(4)
    ] + [CustomGateDefinition("g4", (PlacedGate("x", 0),))]
    with pytest.raises(CyclicGateDefinition):
        linearize([PlacedCustomGate("g0", 0)], chain, num_qubits=1)


def test_depth_within_bound_expands():
    Config().set_max_custom_gate_depth(3)
    chain = [
        CustomGateDefinition("g0", (PlacedCustomGate("g1", 0),)),
        CustomGateDefinition("g1", (PlacedCustomGate("g2", 0),)),
        CustomGateDefinition("g2", (PlacedGate("x", 0),)),
    ]
    ops = linearize([PlacedCustomGate("g0", 0)], chain, num_qubits=1)
    assert [op.gate for op in ops] == [GateType.X]


def test_out_of_range_qubit_is_discarded(caplog):
    items = [PlacedGate("h", 0, left=1), PlacedGate("x", 5, left=2)]
    with caplog.at_level(logging.WARNING, logger="qcanvas.circuit.linearizer"):
        ops = linearize(items, num_qubits=2)
    assert _summary(ops) == [(GateType.H, 0, None)]
    assert any(
        getattr(r, "event", None) == "DiscardedInvalidGate" for r in caplog.records
    )


@pytest.mark.parametrize(
    "gate",
    [
        PlacedGate("cnot", 1),
        PlacedGate("cnot", 1, control_qubit=1),
        PlacedGate("swap", 0, control_qubit=7),
        PlacedGate("h", -1),
    ],
)
def test_invalid_qubits_yield_no_op(gate):
    assert resolve_gate(gate, num_qubits=2) is None


def test_unknown_gate_id_is_skipped(caplog):
    with caplog.at_level(logging.WARNING, logger="qcanvas.circuit.linearizer"):
        ops = linearize([PlacedGate("toffoli", 0), PlacedGate("x", 0)], num_qubits=1)
    assert [op.gate for op in ops] == [GateType.X]
    assert any(getattr(r, "event", None) == "UnknownGateKind" for r in caplog.records)


def test_invalid_angle_is_skipped(caplog):
    with caplog.at_level(logging.WARNING, logger="qcanvas.circuit.linearizer"):
        ops = linearize(
            [PlacedGate("rx", 0, params={"theta": "sin(pi)"})], num_qubits=1
        )
    assert ops == []
    assert any(
        getattr(r, "event", None) == "InvalidAngleExpression" for r in caplog.records
    )


def test_unknown_custom_gate_is_skipped(caplog):
    with caplog.at_level(logging.WARNING, logger="qcanvas.circuit.linearizer"):
        ops = linearize(
            [PlacedCustomGate("missing", 0), PlacedGate("x", 0)], num_qubits=1
        )
    assert [op.gate for op in ops] == [GateType.X]
    assert any(getattr(r, "event", None) == "UnknownCustomGate" for r in caplog.records)


def test_angles_are_resolved():
    (op,) = linearize([PlacedGate("rz", 0, params={"theta": "pi/2"})], num_qubits=1)
    assert op.params["theta"].pi_multiple == 0.5


def test_out_of_range_control_on_single_qubit_gate_is_discarded(caplog):
    items = [{"gateId": "x", "qubit": 0, "controlQubit": 7, "left": 0}]
    with caplog.at_level(logging.WARNING, logger="qcanvas.circuit.linearizer"):
        ops = linearize(items, num_qubits=2)
    assert ops == []
    assert any(
        getattr(r, "event", None) == "DiscardedInvalidGate" and r.qubit == 7
        for r in caplog.records
    )


def test_in_range_control_on_single_qubit_gate_is_kept_as_touched_qubit():
    op = resolve_gate(PlacedGate("h", 0, control_qubit=1), num_qubits=2)
    assert op is not None
    assert op.gate is GateType.H
    assert op.qubits == (0, 1)


def test_expand_items_yields_absolute_positions():
    definition = CustomGateDefinition("cz2", (PlacedGate("cz", 1, control_qubit=0),))
    (gate,) = expand_items([PlacedCustomGate("cz2", 2, left=12)], {"cz2": definition})
    assert gate == PlacedGate("cz", 3, left=12, control_qubit=2)
