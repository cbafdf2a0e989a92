"""
Register state

The state of an n-qubit register is either a `PureState` holding the
2**n amplitudes or a `MixedState` holding the 2**n x 2**n density matrix.
Both are immutable; operations produce new instances. A pure state is
expanded into a mixed one the first time noise is applied and is never
contracted back during a simulation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import jax.numpy as jnp

from qcanvas.state.expansion_levels import ExpansionLevel
from qcanvas.state.utils.representation import (
    representation_matrix,
    representation_vector,
)


class QuantumState(ABC):
    num_qubits: int

    @property
    def dimensions(self) -> int:
        return 1 << self.num_qubits

    @property
    @abstractmethod
    def expansion_level(self) -> ExpansionLevel:
        pass

    @abstractmethod
    def expand(self) -> "MixedState":
        pass

    @abstractmethod
    def trace(self) -> float:
        """
        Returns the norm squared of a state vector or the trace of a
        density matrix, nominally 1
        """
        pass


@dataclass(frozen=True, eq=False)
class PureState(QuantumState):
    num_qubits: int
    vector: jnp.ndarray

    def __post_init__(self) -> None:
        assert self.vector.shape == (self.dimensions,), (
            f"Expected a state vector of shape ({self.dimensions},), "
            f"got {self.vector.shape}"
        )

    @property
    def expansion_level(self) -> ExpansionLevel:
        return ExpansionLevel.Vector

    def expand(self) -> "MixedState":
        """
        Expands the state vector into the density matrix |psi><psi|
        """
        matrix = jnp.outer(self.vector, jnp.conj(self.vector))
        return MixedState(self.num_qubits, matrix)

    def trace(self) -> float:
        return float(jnp.sum(jnp.abs(self.vector) ** 2))

    def __repr__(self) -> str:
        return representation_vector(self.vector)


@dataclass(frozen=True, eq=False)
class MixedState(QuantumState):
    num_qubits: int
    matrix: jnp.ndarray

    def __post_init__(self) -> None:
        assert self.matrix.shape == (self.dimensions, self.dimensions), (
            f"Expected a density matrix of shape ({self.dimensions}, {self.dimensions}), "
            f"got {self.matrix.shape}"
        )

    @property
    def expansion_level(self) -> ExpansionLevel:
        return ExpansionLevel.Matrix

    def expand(self) -> "MixedState":
        return self

    def trace(self) -> float:
        return float(jnp.real(jnp.trace(self.matrix)))

    def __repr__(self) -> str:
        return representation_matrix(self.matrix)


def initial_state(num_qubits: int) -> PureState:
    """
    Returns the computational basis state |0...0> of `num_qubits` qubits
    """
    if num_qubits < 0:
        raise ValueError(f"Number of qubits must be non-negative, got {num_qubits}")
    vector = jnp.zeros(1 << num_qubits, dtype=jnp.complex128)
    return PureState(num_qubits, vector.at[0].set(1.0))
