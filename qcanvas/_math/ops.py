from typing import List, Union

import jax
import jax.numpy as jnp
import numpy as np

jax.config.update("jax_enable_x64", True)


def identity_operator() -> jnp.ndarray:
    return jnp.eye(2, dtype=jnp.complex128)


def x_operator() -> jnp.ndarray:
    return jnp.array([[0, 1], [1, 0]], dtype=jnp.complex128)


def y_operator() -> jnp.ndarray:
    return jnp.array([[0, -1j], [1j, 0]], dtype=jnp.complex128)


def z_operator() -> jnp.ndarray:
    return jnp.array([[1, 0], [0, -1]], dtype=jnp.complex128)


def hadamard_operator() -> jnp.ndarray:
    return (1 / jnp.sqrt(2)) * jnp.array([[1, 1], [1, -1]], dtype=jnp.complex128)


def s_operator() -> jnp.ndarray:
    return jnp.array([[1, 0], [0, 1j]], dtype=jnp.complex128)


def sdg_operator() -> jnp.ndarray:
    return jnp.array([[1, 0], [0, -1j]], dtype=jnp.complex128)


def t_operator() -> jnp.ndarray:
    return jnp.array(
        [[1, 0], [0, jnp.exp(1j * jnp.pi / 4)]], dtype=jnp.complex128
    )


def tdg_operator() -> jnp.ndarray:
    return jnp.array(
        [[1, 0], [0, jnp.exp(-1j * jnp.pi / 4)]], dtype=jnp.complex128
    )


def _rotation(pauli: jnp.ndarray, theta: float) -> jnp.ndarray:
    return (
        jnp.cos(theta / 2) * identity_operator()
        - 1j * jnp.sin(theta / 2) * pauli
    )


def rx_operator(theta: float) -> jnp.ndarray:
    """
    Rotation about the X axis of the Bloch sphere

    .. math::
        R_x(\\theta) = \\cos(\\theta/2) I - i \\sin(\\theta/2) X

    Parameters
    ----------
    theta: float
        Rotation angle in radians

    Returns
    -------
    jnp.ndarray
        2x2 rotation operator
    """
    return _rotation(x_operator(), theta)


def ry_operator(theta: float) -> jnp.ndarray:
    return _rotation(y_operator(), theta)


def rz_operator(theta: float) -> jnp.ndarray:
    return _rotation(z_operator(), theta)


def pauli_operators() -> jnp.ndarray:
    """
    Returns the stacked Pauli operators X, Y, Z with shape (3, 2, 2)
    """
    return jnp.stack([x_operator(), y_operator(), z_operator()])


def depolarizing_kraus(probability: float, convention: str = "mixing") -> jnp.ndarray:
    """
    Kraus operators of the single qubit depolarizing channel

    Parameters
    ----------
    probability: float
        Depolarizing probability p in [0, 1]
    convention: str
        "mixing": rho -> (1-p) rho + p I/2, which expressed as a
        Pauli sum gives weight (1 - 3p/4) to the identity and p/4
        to each of X, Y, Z.
        "pauli": rho -> (1-p) rho + p/3 (X rho X + Y rho Y + Z rho Z)

    Returns
    -------
    jnp.ndarray
        Stacked Kraus operators with shape (4, 2, 2)
    """
    if convention == "mixing":
        identity_weight = 1 - 3 * probability / 4
        pauli_weight = probability / 4
    elif convention == "pauli":
        identity_weight = 1 - probability
        pauli_weight = probability / 3
    else:
        raise ValueError(f"Unknown depolarizing convention '{convention}'")
    return jnp.concatenate(
        [
            jnp.sqrt(identity_weight) * identity_operator()[jnp.newaxis],
            jnp.sqrt(pauli_weight) * pauli_operators(),
        ]
    )


def phase_damping_kraus(gamma: float) -> jnp.ndarray:
    """
    Kraus operators of the phase damping channel,
    K0 = diag(1, sqrt(1-gamma)) and K1 = diag(0, sqrt(gamma))

    Returns
    -------
    jnp.ndarray
        Stacked Kraus operators with shape (2, 2, 2)
    """
    k0 = jnp.array(
        [[1, 0], [0, jnp.sqrt(1 - gamma)]], dtype=jnp.complex128
    )
    k1 = jnp.array([[0, 0], [0, jnp.sqrt(gamma)]], dtype=jnp.complex128)
    return jnp.stack([k0, k1])


def kraus_identity_check(
    operators: Union[List[jnp.ndarray], jnp.ndarray], tol: float = 1e-6
) -> bool:
    """
    Check if Kraus operators sum to the identity matrix.

    Parameters
    ----------
    operators: Union[List[jnp.ndarray], jnp.ndarray]
        List (or stack) of the operators
    tol: float
        Tolerance for the floating-point comparisons

    Returns
    -------
    bool
        True if the Kraus operators sum to identity within the tolerance
    """
    dim = operators[0].shape[0]
    identity_matrix = jnp.eye(dim)
    sum_kraus = sum(jnp.matmul(jnp.conjugate(K.T), K) for K in operators)
    return bool(jnp.allclose(sum_kraus, identity_matrix, atol=tol))


def is_unitary(operator: Union[np.ndarray, jnp.ndarray], tol: float = 1e-9) -> bool:
    dim = operator.shape[0]
    product = jnp.matmul(jnp.conjugate(operator.T), operator)
    return bool(jnp.allclose(product, jnp.eye(dim), atol=tol))
