"""
State engine

`apply_operation` folds one `PrimitiveOp` into a register state and, when
the noise model is active, applies the depolarizing and phase damping
channels to every qubit the operation touched. The function is pure: the
input state is never modified.
"""

from __future__ import annotations

import logging
from types import ModuleType

import jax.numpy as jnp

from qcanvas._math.ops import (
    depolarizing_kraus,
    kraus_identity_check,
    phase_damping_kraus,
)
from qcanvas.core import jitted, kernels
from qcanvas.core.ir import NoiseModel, PrimitiveOp
from qcanvas.core.meta import make_meta, qubit_mask
from qcanvas.exceptions import InvalidQubitIndex, NumericDriftExceeded
from qcanvas.operation.gate_operation import GateType
from qcanvas.qcanvas import Config
from qcanvas.state.quantum_state import MixedState, PureState, QuantumState

logger = logging.getLogger(__name__)

_NO_NOISE = NoiseModel()


def _kernels() -> ModuleType:
    return jitted if Config().use_jit else kernels


def validate_operation(op: PrimitiveOp, num_qubits: int) -> None:
    """
    Checks the qubit indices of an operation against the register size

    Raises
    ------
    InvalidQubitIndex
        If a qubit is out of range, a two qubit gate lacks its control
        qubit or the control and target of a two qubit gate coincide
    """
    if not 0 <= op.target_qubit < num_qubits:
        raise InvalidQubitIndex(op.target_qubit, num_qubits, "target")
    if op.control_qubit is not None and not 0 <= op.control_qubit < num_qubits:
        raise InvalidQubitIndex(op.control_qubit, num_qubits, "control")
    if op.gate.is_two_qubit:
        if op.control_qubit is None:
            raise InvalidQubitIndex(None, num_qubits, "control")
        if op.control_qubit == op.target_qubit:
            raise InvalidQubitIndex(op.control_qubit, num_qubits, "control")


def apply_unitary(state: QuantumState, op: PrimitiveOp) -> QuantumState:
    """
    Applies the unitary part of `op`. Pure states are updated on the
    amplitude vector, mixed states on both row and column indices.
    """
    validate_operation(op, state.num_qubits)
    k = _kernels()
    n = state.num_qubits

    if op.gate.is_measurement:
        return state

    if not op.gate.is_two_qubit:
        meta = make_meta(n, op.target_qubit)
        operator = op.gate.compute_operator(op.params)
        match state:
            case PureState():
                return PureState(n, k.apply_op_vector(meta, state.vector, operator))
            case MixedState():
                return MixedState(n, k.apply_op_matrix(meta, state.matrix, operator))
        raise TypeError(f"Unsupported state type {type(state).__name__}")

    target_mask = qubit_mask(n, op.target_qubit)
    control_mask = qubit_mask(n, op.control_qubit)
    match op.gate:
        case GateType.CNOT:
            permutation = k.cnot_permutation(n, control_mask, target_mask)
        case GateType.SWAP:
            permutation = k.swap_permutation(n, control_mask, target_mask)
        case GateType.CZ:
            phases = jnp.asarray(k.cz_phases(n, control_mask, target_mask))
            match state:
                case PureState():
                    return PureState(n, k.phase_vector(state.vector, phases))
                case MixedState():
                    return MixedState(n, k.phase_matrix(state.matrix, phases))
    permutation = jnp.asarray(permutation)
    match state:
        case PureState():
            return PureState(n, k.permute_vector(state.vector, permutation))
        case MixedState():
            return MixedState(n, k.permute_matrix(state.matrix, permutation))
    raise TypeError(f"Unsupported state type {type(state).__name__}")


def apply_noise(
    state: QuantumState, qubits: tuple[int, ...], noise_model: NoiseModel
) -> QuantumState:
    """
    Applies the depolarizing and then the phase damping channel to each
    of the given qubits. The state is expanded to a density matrix when
    any channel is active.
    """
    if not noise_model.is_noisy:
        return state
    k = _kernels()
    if isinstance(state, PureState):
        logger.debug(
            "Expanding %d-qubit register to a density matrix", state.num_qubits
        )
    mixed = state.expand()
    matrix = mixed.matrix
    channels = []
    if noise_model.depolarizing > 0:
        channels.append(
            depolarizing_kraus(
                noise_model.depolarizing, Config().depolarizing_convention
            )
        )
    if noise_model.phase_damping > 0:
        channels.append(phase_damping_kraus(noise_model.phase_damping))
    if Config().check_invariants:
        for operators in channels:
            if not kraus_identity_check(operators, tol=Config().drift_tolerance):
                raise ValueError("Invalid Kraus Channel")
    for qubit in qubits:
        meta = make_meta(mixed.num_qubits, qubit)
        for operators in channels:
            matrix = k.apply_kraus_matrix(meta, matrix, operators)
    return MixedState(mixed.num_qubits, matrix)


def check_trace(state: QuantumState) -> float:
    """
    Returns the trace (norm) of the state, raising if it drifted from one
    """
    value = state.trace()
    tolerance = Config().drift_tolerance
    if not abs(value - 1.0) <= tolerance:
        raise NumericDriftExceeded("trace", value, 1.0, tolerance)
    return value


def apply_operation(
    state: QuantumState, op: PrimitiveOp, noise_model: NoiseModel = _NO_NOISE
) -> QuantumState:
    """
    Applies one primitive operation followed by the noise channels

    Parameters
    ----------
    state: QuantumState
        Register state, left untouched
    op: PrimitiveOp
        Operation to apply
    noise_model: NoiseModel
        Noise applied to the qubits touched by `op`; `measure` operations
        leave the state, and therefore the noise, untouched

    Returns
    -------
    QuantumState
        The new state

    Raises
    ------
    InvalidQubitIndex
        If the operation does not fit the register
    NumericDriftExceeded
        If invariant checks are enabled and the trace drifted
    """
    new_state = apply_unitary(state, op)
    if not op.gate.is_measurement:
        new_state = apply_noise(new_state, op.qubits, noise_model)
    if Config().check_invariants:
        check_trace(new_state)
    return new_state
