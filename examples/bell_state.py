"""
Bell state built from placed gates, stepped through one operation at a time
"""

import os

os.environ.setdefault("JAX_PLATFORMS", "cpu")

from qcanvas import PlacedGate, simulate

if __name__ == "__main__":
    items = [
        PlacedGate("h", 0, left=20),
        PlacedGate("cnot", 1, left=50, control_qubit=0),
    ]
    for step in range(len(items) + 1):
        result = simulate(items, 2, step_limit=step)
        print(f"Step {step}")
        for p in result.probabilities:
            print(f"  {p.state}: {p.value:.3f}")
        for qubit, q in enumerate(result.qubit_states):
            c = q.bloch_sphere_coords
            print(
                f"  q{qubit}: bloch=({c.x:+.2f}, {c.y:+.2f}, {c.z:+.2f}) "
                f"purity={q.purity:.2f}"
            )
