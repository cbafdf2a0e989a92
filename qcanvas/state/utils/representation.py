from typing import List

import jax.numpy as jnp


def _format_number(num: complex) -> str:
    return f"{num.real:+.2f} {'+' if num.imag >= 0 else '-'} {abs(num.imag):.2f}j"


def _bracket(rows: List[str]) -> str:
    if len(rows) == 1:
        return "[ " + rows[0] + " ]"
    lines = ["⎢ " + row + " ⎥" for row in rows]
    lines[0] = "⎡" + lines[0][1:-1] + "⎤"
    lines[-1] = "⎣" + lines[-1][1:-1] + "⎦"
    return "\n".join(lines)


def representation_vector(state: jnp.ndarray) -> str:
    """
    Pretty prints a state vector as a column
    """
    return _bracket([_format_number(complex(num)) for num in state.reshape(-1)])


def representation_matrix(state: jnp.ndarray) -> str:
    """
    Pretty prints a density matrix
    """
    return _bracket(
        ["   ".join(_format_number(complex(num)) for num in row) for row in state]
    )
