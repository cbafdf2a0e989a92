"""
An example, showing how depolarizing noise washes out a GHZ state
"""

import os

os.environ.setdefault("JAX_PLATFORMS", "cpu")

import jax.numpy as jnp
import matplotlib.pyplot as plt

from qcanvas.core.ir import NoiseModel
from qcanvas.data.templates import get_template
from qcanvas.logging.logging import setup_logging


def ghz_fidelity_proxies(depolarizing: float):
    template = get_template("ghz_state")
    result = template.simulate(NoiseModel(depolarizing=depolarizing))
    probs = {p.state: p.value for p in result.probabilities}
    # weight left on the two GHZ branches
    branches = probs.get("|000⟩", 0.0) + probs.get("|111⟩", 0.0)
    purity = sum(q.purity for q in result.qubit_states) / len(result.qubit_states)
    return branches, purity


if __name__ == "__main__":
    setup_logging()
    strengths = jnp.linspace(0, 1, 21)
    branches, purities = zip(*(ghz_fidelity_proxies(float(p)) for p in strengths))

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(strengths, branches, label="P(|000⟩) + P(|111⟩)")
    ax.plot(strengths, purities, label="mean single-qubit purity")
    ax.set_xlabel("depolarizing probability")
    ax.set_ylim(0, 1.05)
    ax.legend()
    ax.set_title("GHZ state under depolarizing noise")
    fig.tight_layout()
    plt.savefig("noisy_ghz_state.png", dpi=150)
    plt.show()
