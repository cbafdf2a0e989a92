"""
Outcome probabilities of a computational basis measurement of the whole
register. The state is not collapsed; measurement in this engine is
read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import jax.numpy as jnp
import numpy as np

from qcanvas.core import jitted, kernels
from qcanvas.qcanvas import Config
from qcanvas.state.quantum_state import MixedState, PureState, QuantumState


@dataclass(frozen=True)
class Probability:
    state: str
    value: float

    def to_dict(self) -> Dict[str, object]:
        return {"state": self.state, "value": self.value}


def basis_label(index: int, num_qubits: int) -> str:
    """
    Ket label of a basis index with qubit 0 as the leftmost character,
    e.g. ``basis_label(1, 2) == "|01⟩"``
    """
    bits = format(index, f"0{num_qubits}b") if num_qubits > 0 else ""
    return f"|{bits}⟩"


def outcome_probabilities(state: QuantumState) -> jnp.ndarray:
    """
    Diagonal of the state in the computational basis, |amp_i|^2 for a
    pure state and Re(rho_ii) for a mixed one
    """
    k = jitted if Config().use_jit else kernels
    match state:
        case PureState():
            return k.diagonal_probabilities_vector(state.vector)
        case MixedState():
            return k.diagonal_probabilities_matrix(state.matrix)
    raise TypeError(f"Unsupported state type {type(state).__name__}")


def probabilities(
    state: QuantumState, threshold: Optional[float] = None
) -> List[Probability]:
    """
    Labelled outcome probabilities above `threshold`, ordered by basis index

    Parameters
    ----------
    state: QuantumState
        Register state
    threshold: Optional[float]
        Cut-off, defaults to `Config().probability_threshold`
    """
    if threshold is None:
        threshold = Config().probability_threshold
    values = np.asarray(outcome_probabilities(state))
    return [
        Probability(basis_label(int(index), state.num_qubits), float(values[index]))
        for index in np.flatnonzero(values > threshold)
    ]
