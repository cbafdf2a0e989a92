"""
Jitted entry points for the core kernels.

The qubit layout (`QubitMeta`) is a static argument, so each distinct
(num_qubits, qubit) pair compiles once and is reused afterwards. The
signatures match `qcanvas.core.kernels` so the two modules are
interchangeable.
"""

from __future__ import annotations

import jax

from qcanvas.core import kernels

apply_op_vector = jax.jit(kernels.apply_op_vector, static_argnames=("meta",))
apply_op_matrix = jax.jit(kernels.apply_op_matrix, static_argnames=("meta",))
apply_kraus_matrix = jax.jit(kernels.apply_kraus_matrix, static_argnames=("meta",))
reduce_vector = jax.jit(kernels.reduce_vector, static_argnames=("meta",))
reduce_matrix = jax.jit(kernels.reduce_matrix, static_argnames=("meta",))
permute_vector = jax.jit(kernels.permute_vector)
permute_matrix = jax.jit(kernels.permute_matrix)
phase_vector = jax.jit(kernels.phase_vector)
phase_matrix = jax.jit(kernels.phase_matrix)

# index tables are host-side numpy and shared with the eager path
cnot_permutation = kernels.cnot_permutation
swap_permutation = kernels.swap_permutation
cz_phases = kernels.cz_phases
diagonal_probabilities_vector = jax.jit(kernels.diagonal_probabilities_vector)
diagonal_probabilities_matrix = jax.jit(kernels.diagonal_probabilities_matrix)
