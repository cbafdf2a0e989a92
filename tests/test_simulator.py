import logging

import pytest

from qcanvas.core.ir import CustomGateDefinition, NoiseModel, PlacedCustomGate, PlacedGate
from qcanvas.exceptions import CyclicGateDefinition
from qcanvas.qcanvas import Config
from qcanvas.simulator import SimulationResult, simulate, trivial_result, truncate

BELL = [PlacedGate("h", 0, left=20), PlacedGate("cnot", 1, left=50, control_qubit=0)]


def _probs(result: SimulationResult):
    return {p.state: p.value for p in result.probabilities}


def _coords(qubit_state):
    c = qubit_state.bloch_sphere_coords
    return (c.x, c.y, c.z)


def _assert_universal_invariants(result: SimulationResult):
    assert sum(p.value for p in result.probabilities) == pytest.approx(1.0, abs=1e-6)
    for q in result.qubit_states:
        assert q.bloch_sphere_coords.length_squared == pytest.approx(
            2 * q.purity - 1, abs=1e-6
        )
        assert 0.5 - 1e-6 <= q.purity <= 1 + 1e-6


def test_empty_circuit():
    result = simulate([], 2, [], {"depolarizing": 0, "phaseDamping": 0})
    assert _probs(result) == {"|00⟩": 1.0}
    for q in result.qubit_states:
        assert q.purity == 1.0
        assert _coords(q) == (0, 0, 1)
    assert result == trivial_result(2)


def test_hadamard():
    result = simulate([PlacedGate("h", 0)], 1)
    assert _probs(result) == pytest.approx({"|0⟩": 0.5, "|1⟩": 0.5})
    (q,) = result.qubit_states
    assert q.purity == pytest.approx(1.0)
    assert _coords(q) == pytest.approx((1, 0, 0), abs=1e-12)


def test_bell_state():
    result = simulate(BELL, 2)
    assert _probs(result) == pytest.approx({"|00⟩": 0.5, "|11⟩": 0.5})
    assert result.trace == pytest.approx(1.0)
    for q in result.qubit_states:
        assert q.purity == pytest.approx(0.5)
        assert _coords(q) == pytest.approx((0, 0, 0), abs=1e-12)


@pytest.mark.parametrize("qubit", [0, 1, 2])
def test_x_is_an_involution(qubit):
    prep = [PlacedGate("ry", 0, left=1, params={"theta": 0.9}), PlacedGate("h", 2, left=1)]
    twice = prep + [PlacedGate("x", qubit, left=5), PlacedGate("x", qubit, left=6)]
    before = simulate(prep, 3)
    after = simulate(twice, 3)
    assert [p.state for p in before.probabilities] == [p.state for p in after.probabilities]
    for a, b in zip(before.probabilities, after.probabilities):
        assert a.value == pytest.approx(b.value, abs=1e-9)


@pytest.mark.parametrize(
    "gate",
    [
        PlacedGate("h", 0),
        PlacedGate("x", 0),
        PlacedGate("ry", 0, params={"theta": "pi/3"}),
        PlacedGate("t", 0),
    ],
)
def test_depolarizing_saturation(gate):
    result = simulate([gate], 1, noise_model=NoiseModel(depolarizing=1.0))
    assert _probs(result) == pytest.approx({"|0⟩": 0.5, "|1⟩": 0.5})
    assert result.qubit_states[0].purity == pytest.approx(0.5)


@pytest.mark.parametrize(
    "items, n, noise",
    [
        (BELL, 2, None),
        (BELL, 2, {"depolarizing": 0.05, "phaseDamping": 0.1}),
        (
            [
                PlacedGate("rx", 0, left=1, params={"theta": "pi/5"}),
                PlacedGate("ry", 1, left=2, params={"theta": "3pi/7"}),
                PlacedGate("cz", 2, left=3, control_qubit=0),
                PlacedGate("swap", 1, left=4, control_qubit=2),
                PlacedGate("sdg", 2, left=5),
                PlacedGate("cnot", 0, left=6, control_qubit=1),
                PlacedGate("measure", 1, left=7),
            ],
            3,
            {"depolarizing": 0.2, "phaseDamping": 0.3},
        ),
    ],
)
def test_universal_invariants(items, n, noise):
    _assert_universal_invariants(simulate(items, n, noise_model=noise))


def test_invalid_qubit_is_dropped():
    result = simulate(BELL + [PlacedGate("x", 7, left=30)], 2)
    assert _probs(result) == pytest.approx({"|00⟩": 0.5, "|11⟩": 0.5})
    assert simulate([PlacedGate("x", 2)], 2) == simulate([], 2)


def test_out_of_range_control_on_single_qubit_gate_matches_empty_circuit():
    items = [{"gateId": "x", "qubit": 0, "controlQubit": 7, "left": 0}]
    noise = {"depolarizing": 0, "phaseDamping": 0}
    assert simulate(items, 2, [], noise) == simulate([], 2)


def test_overflowing_angle_is_discarded(caplog):
    items = [
        PlacedGate("h", 0, left=10),
        PlacedGate("rx", 0, left=20, params={"theta": "1e999"}),
    ]
    with caplog.at_level(logging.WARNING, logger="qcanvas.circuit.linearizer"):
        result = simulate(items, 1)
    assert _probs(result) == pytest.approx({"|0⟩": 0.5, "|1⟩": 0.5})
    assert any(
        getattr(r, "event", None) == "InvalidAngleExpression" for r in caplog.records
    )


def test_step_truncation():
    items = BELL + [PlacedGate("x", 1, left=70)]
    full = simulate(items, 2)
    partial = [simulate(items, 2, step_limit=k) for k in range(len(items) + 1)]
    assert partial[0] == trivial_result(2)
    assert _probs(partial[1]) == pytest.approx({"|00⟩": 0.5, "|10⟩": 0.5})
    assert partial[len(items)] == full
    assert simulate(items, 2, step_limit=100) == full


def test_negative_step_limit_is_empty():
    assert simulate(BELL, 2, step_limit=-3) == trivial_result(2)


def test_truncate():
    assert truncate([1, 2, 3], None) == [1, 2, 3]
    assert truncate([1, 2, 3], 2) == [1, 2]
    assert truncate([1, 2, 3], -1) == []


def test_zero_qubits():
    result = simulate([PlacedGate("h", 0)], 0)
    assert _probs(result) == {"|⟩": 1.0}
    assert result.qubit_states == ()


def test_negative_qubits_raise():
    with pytest.raises(ValueError):
        simulate([], -1)


def test_measure_does_not_change_result():
    noise = NoiseModel(depolarizing=0.1)
    with_measure = simulate(BELL + [PlacedGate("measure", 0, left=90)], 2, noise_model=noise)
    without = simulate(BELL, 2, noise_model=noise)
    for a, b in zip(with_measure.probabilities, without.probabilities):
        assert a.state == b.state
        assert a.value == pytest.approx(b.value, abs=1e-12)


def test_custom_gates_and_dicts():
    definitions = [
        {
            "id": "bell",
            "name": "Bell",
            "gates": [
                {"gateId": "h", "qubit": 0, "left": 0},
                {"gateId": "cnot", "qubit": 1, "controlQubit": 0, "left": 1},
            ],
        }
    ]
    items = [{"kind": "customGate", "customGateId": "bell", "qubit": 1, "left": 10}]
    result = simulate(items, 3, definitions)
    assert _probs(result) == pytest.approx({"|000⟩": 0.5, "|011⟩": 0.5})


def test_cyclic_definition_propagates():
    loop = CustomGateDefinition("loop", (PlacedCustomGate("loop", 0),))
    with pytest.raises(CyclicGateDefinition):
        simulate([PlacedCustomGate("loop", 0)], 1, [loop])


def test_dense_simulation_warning(caplog):
    Config().set_dense_warning_qubits(1)
    with caplog.at_level(logging.WARNING, logger="qcanvas.simulator"):
        simulate(BELL, 2, noise_model=NoiseModel(phase_damping=0.1))
    assert any(getattr(r, "event", None) == "DenseSimulation" for r in caplog.records)


def test_to_dict():
    data = simulate(BELL, 2).to_dict()
    assert set(data) == {"probabilities", "qubitStates", "trace"}
    assert [p["state"] for p in data["probabilities"]] == ["|00⟩", "|11⟩"]
    assert set(data["qubitStates"][0]) == {"blochSphereCoords", "purity"}


def test_operations_are_reported():
    result = simulate(BELL, 2)
    assert [op.gate.gate_id for op in result.operations] == ["h", "cnot"]
