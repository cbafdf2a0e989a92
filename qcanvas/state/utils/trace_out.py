"""
Reduced single qubit states

`reduce` traces out every qubit but one and derives the Bloch sphere
coordinates and the purity of the remaining 2x2 density matrix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import jax.numpy as jnp

from qcanvas.core import jitted, kernels
from qcanvas.core.meta import make_meta
from qcanvas.exceptions import NumericDriftExceeded
from qcanvas.qcanvas import Config
from qcanvas.state.quantum_state import MixedState, PureState, QuantumState


@dataclass(frozen=True)
class BlochCoordinates:
    x: float = 0.0
    y: float = 0.0
    z: float = 1.0

    @property
    def length_squared(self) -> float:
        return self.x**2 + self.y**2 + self.z**2

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class QubitState:
    bloch_sphere_coords: BlochCoordinates = BlochCoordinates()
    purity: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blochSphereCoords": self.bloch_sphere_coords.to_dict(),
            "purity": self.purity,
        }


def trace_out(state: QuantumState, qubit: int) -> jnp.ndarray:
    """
    Trace out everything but `qubit`.

    Parameters
    ----------
    state: QuantumState
        Register state
    qubit: int
        Qubit to keep

    Returns
    -------
    jnp.ndarray
        Reduced 2x2 density matrix
    """
    k = jitted if Config().use_jit else kernels
    meta = make_meta(state.num_qubits, qubit)
    match state:
        case PureState():
            return k.reduce_vector(meta, state.vector)
        case MixedState():
            return k.reduce_matrix(meta, state.matrix)
    raise TypeError(f"Unsupported state type {type(state).__name__}")


def bloch_coordinates(reduced: jnp.ndarray) -> BlochCoordinates:
    """
    Expectation values of X, Y and Z for a 2x2 density matrix,
    x = 2 Re(rho_01), y = -2 Im(rho_01), z = rho_00 - rho_11
    """
    off_diagonal = complex(reduced[0, 1])
    return BlochCoordinates(
        x=2 * off_diagonal.real,
        y=-2 * off_diagonal.imag,
        z=float(jnp.real(reduced[0, 0] - reduced[1, 1])),
    )


def purity(reduced: jnp.ndarray) -> float:
    """
    Tr(rho^2)
    """
    return float(jnp.real(jnp.trace(reduced @ reduced)))


def check_qubit_invariants(qubit_state: QubitState, tolerance: float) -> None:
    value = qubit_state.purity
    if not 0.5 - tolerance <= value <= 1.0 + tolerance:
        raise NumericDriftExceeded("purity", value, bounds=(0.5, 1.0))
    expected = 2 * value - 1
    length = qubit_state.bloch_sphere_coords.length_squared
    if not abs(length - expected) <= tolerance:
        raise NumericDriftExceeded("Bloch vector length", length, expected, tolerance)


def reduce(state: QuantumState, qubit: int) -> QubitState:
    """
    Reduced state of a single qubit

    Parameters
    ----------
    state: QuantumState
        Register state
    qubit: int
        Qubit index, 0 is the leftmost qubit of the basis labels

    Returns
    -------
    QubitState
        Bloch sphere coordinates and purity of the qubit

    Raises
    ------
    NumericDriftExceeded
        If invariant checks are enabled and the purity falls outside
        [0.5, 1] or disagrees with the Bloch vector length
    """
    reduced = trace_out(state, qubit)
    qubit_state = QubitState(
        bloch_sphere_coords=bloch_coordinates(reduced),
        purity=purity(reduced),
    )
    cfg = Config()
    if cfg.check_invariants:
        check_qubit_invariants(qubit_state, cfg.drift_tolerance)
    return qubit_state


def reduce_all(state: QuantumState) -> List[QubitState]:
    return [reduce(state, qubit) for qubit in range(state.num_qubits)]
