import jax.numpy as jnp
import pytest

from qcanvas.state.expansion_levels import ExpansionLevel
from qcanvas.state.quantum_state import MixedState, PureState, initial_state


def test_initial_state():
    state = initial_state(3)
    assert isinstance(state, PureState)
    assert state.dimensions == 8
    assert state.vector[0] == 1
    assert jnp.sum(jnp.abs(state.vector)) == 1
    assert state.expansion_level is ExpansionLevel.Vector


def test_initial_states_do_not_share_amplitudes():
    a = initial_state(1)
    b = initial_state(1)
    assert a.vector is not b.vector


def test_initial_state_rejects_negative_size():
    with pytest.raises(ValueError):
        initial_state(-1)


def test_zero_qubit_register():
    state = initial_state(0)
    assert state.vector.shape == (1,)
    assert state.trace() == pytest.approx(1.0)


def test_expand_builds_outer_product():
    psi = jnp.array([0.6, 0.8j], dtype=jnp.complex128)
    mixed = PureState(1, psi).expand()
    assert isinstance(mixed, MixedState)
    assert mixed.expansion_level is ExpansionLevel.Matrix
    assert jnp.allclose(mixed.matrix, jnp.array([[0.36, -0.48j], [0.48j, 0.64]]))
    assert mixed.expand() is mixed
    assert mixed.trace() == pytest.approx(1.0)


def test_shape_is_checked():
    with pytest.raises(AssertionError):
        PureState(2, jnp.zeros(3, dtype=jnp.complex128))
    with pytest.raises(AssertionError):
        MixedState(1, jnp.zeros((4, 4), dtype=jnp.complex128))


def test_repr_renders_amplitudes():
    text = repr(initial_state(1))
    assert text.splitlines() == ["⎡ +1.00 + 0.00j ⎤", "⎣ +0.00 + 0.00j ⎦"]


def test_repr_renders_density_matrix():
    text = repr(initial_state(1).expand())
    lines = text.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("⎡ +1.00")
    assert lines[1].endswith("0.00j ⎦")
