"""
Simulation entry point

`simulate` linearizes the placed items, folds the operations through the
state engine and reports the outcome probabilities together with the
reduced state of every qubit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from qcanvas.circuit.linearizer import DefinitionLike, ItemLike, linearize
from qcanvas.core.ir import NoiseModel, PrimitiveOp, noise_model_from_dict
from qcanvas.qcanvas import Config
from qcanvas.state.engine import apply_operation, check_trace
from qcanvas.state.quantum_state import QuantumState, initial_state
from qcanvas.state.utils.measurements import Probability, basis_label, probabilities
from qcanvas.state.utils.trace_out import QubitState, reduce_all

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    probabilities: Tuple[Probability, ...] = ()
    qubit_states: Tuple[QubitState, ...] = ()
    trace: float = 1.0
    operations: Tuple[PrimitiveOp, ...] = field(default=(), repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "probabilities": [p.to_dict() for p in self.probabilities],
            "qubitStates": [q.to_dict() for q in self.qubit_states],
            "trace": self.trace,
        }


def trivial_result(num_qubits: int) -> SimulationResult:
    """
    Result of a register left in |0...0>
    """
    return SimulationResult(
        probabilities=(Probability(basis_label(0, num_qubits), 1.0),),
        qubit_states=tuple(QubitState() for _ in range(num_qubits)),
        trace=1.0,
    )


def truncate(ops: List[PrimitiveOp], step_limit: Optional[int]) -> List[PrimitiveOp]:
    if step_limit is None:
        return ops
    return ops[: max(int(step_limit), 0)]


def run(
    ops: Iterable[PrimitiveOp], num_qubits: int, noise_model: NoiseModel
) -> QuantumState:
    """
    Folds the operations over the initial state |0...0>
    """
    state: QuantumState = initial_state(num_qubits)
    for op in ops:
        state = apply_operation(state, op, noise_model)
    return state


def simulate(
    items: Iterable[ItemLike],
    num_qubits: int,
    custom_defs: Iterable[DefinitionLike] = (),
    noise_model: Union[NoiseModel, Mapping[str, Any], None] = None,
    step_limit: Optional[int] = None,
) -> SimulationResult:
    """
    Simulates a circuit drawn on the canvas

    Parameters
    ----------
    items: Iterable[ItemLike]
        Placed gates and custom gate instances
    num_qubits: int
        Number of qubits of the register
    custom_defs: Iterable[DefinitionLike]
        Custom gate catalogue
    noise_model: Union[NoiseModel, Mapping[str, Any], None]
        Depolarizing and phase damping probabilities applied to every
        qubit touched by an operation
    step_limit: Optional[int]
        Only the first `step_limit` operations (in execution order) are
        applied, used for step-through replay

    Returns
    -------
    SimulationResult
        Probabilities, per-qubit Bloch coordinates and purities, trace

    Raises
    ------
    CyclicGateDefinition
        If the custom gate catalogue contains a cycle
    NumericDriftExceeded
        If an invariant (trace, purity) drifted beyond tolerance
    """
    if num_qubits < 0:
        raise ValueError(f"Number of qubits must be non-negative, got {num_qubits}")
    noise = noise_model_from_dict(noise_model)
    cfg = Config()

    ops = truncate(linearize(items, custom_defs, num_qubits), step_limit)
    if num_qubits == 0 or not ops:
        return trivial_result(num_qubits)

    if noise.is_noisy and num_qubits > cfg.dense_warning_qubits:
        logger.warning(
            "Density matrix simulation of %d qubits with noise may be slow",
            num_qubits,
            extra={"event": "DenseSimulation", "num_qubits": num_qubits},
        )

    logger.debug(
        "Simulating %d operations on %d qubits", len(ops), num_qubits
    )
    state = run(ops, num_qubits, noise)
    trace = check_trace(state) if cfg.check_invariants else state.trace()

    return SimulationResult(
        probabilities=tuple(probabilities(state)),
        qubit_states=tuple(reduce_all(state)),
        trace=trace,
        operations=tuple(ops),
    )
