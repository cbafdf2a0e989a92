"""
Metadata helpers for JIT-friendly core calls.

`QubitMeta` describes where a single qubit sits in an n-qubit register so
that kernels can view the flat state as ``(left, 2, right)`` without
recomputing the split every call. It is hashable and can be passed as a
static argument to jitted entry points.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from qcanvas.exceptions import InvalidQubitIndex


@dataclass(frozen=True)
class QubitMeta:
    num_qubits: int
    qubit: int
    left: int
    right: int

    @property
    def dim(self) -> int:
        return self.left * 2 * self.right

    @property
    def mask(self) -> int:
        # qubit 0 is the most significant bit
        return self.right


@lru_cache(None)
def make_meta(num_qubits: int, qubit: int) -> QubitMeta:
    if not 0 <= qubit < num_qubits:
        raise InvalidQubitIndex(qubit, num_qubits)
    return QubitMeta(
        num_qubits=num_qubits,
        qubit=qubit,
        left=1 << qubit,
        right=1 << (num_qubits - qubit - 1),
    )


def qubit_mask(num_qubits: int, qubit: int) -> int:
    return make_meta(num_qubits, qubit).mask
