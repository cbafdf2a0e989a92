"""
Stateless tensor kernels intended for JAX JIT.

Design notes
------------
- Kernels operate purely on arrays plus a `QubitMeta` describing the qubit
  being acted on; they never see circuit or state objects.
- A flat register of ``n`` qubits is viewed as ``(left, 2, right)`` where
  the middle axis is the addressed qubit (qubit 0 is the most significant
  bit). Density matrices are viewed as ``(left, 2, right, left, 2, right)``.
- Two qubit gates are basis index transformations: a permutation of the
  computational basis (CNOT, SWAP) or a diagonal phase (CZ). The index
  tables are built once on the host with numpy and cached.
- Every kernel returns a new array; inputs are never modified.
"""

from __future__ import annotations

from functools import lru_cache

import jax.numpy as jnp
import numpy as np
import opt_einsum as oe

from qcanvas.core.meta import QubitMeta


def apply_op_vector(
    meta: QubitMeta,
    product_state: jnp.ndarray,
    operator: jnp.ndarray,
) -> jnp.ndarray:
    """
    Apply a single qubit operator to a state vector.

    Parameters
    ----------
    meta : QubitMeta
        Layout of the target qubit.
    product_state : jnp.ndarray
        State vector shaped (2**n,).
    operator : jnp.ndarray
        Operator shaped (2, 2).

    Returns
    -------
    jnp.ndarray
        Updated state vector shaped (2**n,).
    """
    ps = product_state.reshape((meta.left, 2, meta.right))
    ps = oe.contract("ab,lbr->lar", operator, ps, backend="jax")
    return ps.reshape((meta.dim,))


def apply_op_matrix(
    meta: QubitMeta,
    product_state: jnp.ndarray,
    operator: jnp.ndarray,
) -> jnp.ndarray:
    """
    Apply a single qubit operator to a density matrix, U rho U^dagger.

    Parameters
    ----------
    meta : QubitMeta
        Layout of the target qubit.
    product_state : jnp.ndarray
        Density matrix shaped (2**n, 2**n).
    operator : jnp.ndarray
        Operator shaped (2, 2).

    Returns
    -------
    jnp.ndarray
        Updated density matrix shaped (2**n, 2**n).
    """
    ps = product_state.reshape(
        (meta.left, 2, meta.right, meta.left, 2, meta.right)
    )
    ps = oe.contract(
        "ab,lbrmcs,dc->larmds", operator, ps, jnp.conj(operator), backend="jax"
    )
    return ps.reshape((meta.dim, meta.dim))


def apply_kraus_matrix(
    meta: QubitMeta,
    product_state: jnp.ndarray,
    operators: jnp.ndarray,
) -> jnp.ndarray:
    """
    Apply stacked single qubit Kraus operators (shape [k, 2, 2]),
    rho -> sum_k K_k rho K_k^dagger.

    Examples
    --------
    >>> import jax.numpy as jnp
    >>> from qcanvas.core.meta import make_meta
    >>> rho = jnp.eye(4, dtype=jnp.complex128) / 4  # 2-qubit maximally mixed
    >>> k = jnp.array([[0, 1], [0, 0]], dtype=jnp.complex128)
    >>> out = apply_kraus_matrix(make_meta(2, 0), rho, jnp.stack([k]))
    >>> jnp.diag(out).real
    Array([0.25, 0.25, 0.  , 0.  ], dtype=float64)
    """
    ps = product_state.reshape(
        (meta.left, 2, meta.right, meta.left, 2, meta.right)
    )
    ps = oe.contract(
        "kab,lbrmcs,kdc->larmds",
        operators,
        ps,
        jnp.conj(operators),
        backend="jax",
    )
    return ps.reshape((meta.dim, meta.dim))


def permute_vector(product_state: jnp.ndarray, permutation: jnp.ndarray) -> jnp.ndarray:
    return product_state[permutation]


def permute_matrix(product_state: jnp.ndarray, permutation: jnp.ndarray) -> jnp.ndarray:
    return product_state[permutation][:, permutation]


def phase_vector(product_state: jnp.ndarray, phases: jnp.ndarray) -> jnp.ndarray:
    return phases * product_state


def phase_matrix(product_state: jnp.ndarray, phases: jnp.ndarray) -> jnp.ndarray:
    return phases[:, jnp.newaxis] * product_state * jnp.conj(phases)[jnp.newaxis, :]


def reduce_vector(meta: QubitMeta, product_state: jnp.ndarray) -> jnp.ndarray:
    """
    Reduced density matrix of one qubit of a pure state,
    tracing out every other qubit.
    """
    ps = product_state.reshape((meta.left, 2, meta.right))
    return oe.contract("lar,lbr->ab", ps, jnp.conj(ps), backend="jax")


def reduce_matrix(meta: QubitMeta, product_state: jnp.ndarray) -> jnp.ndarray:
    """
    Reduced density matrix of one qubit of a mixed state,
    summing the diagonal blocks of the traced out qubits.
    """
    ps = product_state.reshape(
        (meta.left, 2, meta.right, meta.left, 2, meta.right)
    )
    return oe.contract("larlbr->ab", ps, backend="jax")


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@lru_cache(None)
def cnot_permutation(num_qubits: int, control_mask: int, target_mask: int) -> np.ndarray:
    """
    Basis permutation of CNOT: indices with the control bit set are
    exchanged with the index whose target bit is flipped.
    """
    indices = np.arange(1 << num_qubits)
    flipped = np.where(indices & control_mask, indices ^ target_mask, indices)
    return _frozen(flipped)


@lru_cache(None)
def swap_permutation(num_qubits: int, mask_a: int, mask_b: int) -> np.ndarray:
    """
    Basis permutation of SWAP: indices whose two bits differ are
    exchanged with the index with both bits flipped.
    """
    indices = np.arange(1 << num_qubits)
    differ = ((indices & mask_a) != 0) != ((indices & mask_b) != 0)
    swapped = np.where(differ, indices ^ mask_a ^ mask_b, indices)
    return _frozen(swapped)


@lru_cache(None)
def cz_phases(num_qubits: int, control_mask: int, target_mask: int) -> np.ndarray:
    """
    Diagonal of CZ: -1 where both bits are set, 1 elsewhere.
    """
    indices = np.arange(1 << num_qubits)
    both = ((indices & control_mask) != 0) & ((indices & target_mask) != 0)
    return _frozen(np.where(both, -1.0, 1.0).astype(np.complex128))


def diagonal_probabilities_vector(product_state: jnp.ndarray) -> jnp.ndarray:
    return jnp.abs(product_state) ** 2


def diagonal_probabilities_matrix(product_state: jnp.ndarray) -> jnp.ndarray:
    return jnp.real(jnp.diag(product_state))
