"""
Benchmarks: eager kernels vs jitted kernels.

Scenarios:
1) Layered random circuit (RY on every qubit followed by a CNOT ladder),
   pure state vector path.
2) The same circuit with depolarizing and phase damping noise, density
   matrix path.

For each scenario and register size we run both paths (use_jit=False and
use_jit=True), average over RUNS runs after a warm-up, and plot the timings.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Dict, List, Optional

os.environ.setdefault("JAX_PLATFORMS", "cpu")

import matplotlib.pyplot as plt
import numpy as np

# Ensure we import the in-repo version
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from qcanvas.core.ir import NoiseModel, PlacedGate
from qcanvas.qcanvas import Session
from qcanvas.simulator import simulate

RUNS = 5
LAYERS = 4
SAVE_DIR = Path("benchmarks")


def layered_circuit(num_qubits: int, seed: int = 0) -> List[PlacedGate]:
    rng = np.random.default_rng(seed)
    items: List[PlacedGate] = []
    left = 0
    for _ in range(LAYERS):
        for q in range(num_qubits):
            items.append(
                PlacedGate("ry", q, left=left, params={"theta": float(rng.uniform(0, np.pi))})
            )
        left += 1
        for q in range(num_qubits - 1):
            items.append(PlacedGate("cnot", q + 1, left=left, control_qubit=q))
            left += 1
    return items


def time_simulation(
    num_qubits: int, use_jit: bool, noise: Optional[NoiseModel] = None
) -> float:
    items = layered_circuit(num_qubits)
    with Session(use_jit=use_jit, dense_warning_qubits=64):
        simulate(items, num_qubits, noise_model=noise)  # warm-up / compile
        start = time.perf_counter()
        for _ in range(RUNS):
            simulate(items, num_qubits, noise_model=noise)
        return (time.perf_counter() - start) / RUNS


def run(sizes: List[int], noise: Optional[NoiseModel]) -> Dict[str, List[float]]:
    timings: Dict[str, List[float]] = {"eager": [], "jit": []}
    for n in sizes:
        timings["eager"].append(time_simulation(n, False, noise))
        timings["jit"].append(time_simulation(n, True, noise))
        print(
            f"n={n:2d} noise={'yes' if noise else 'no '} "
            f"eager={timings['eager'][-1]:.4f}s jit={timings['jit'][-1]:.4f}s"
        )
    return timings


if __name__ == "__main__":
    SAVE_DIR.mkdir(exist_ok=True)
    pure_sizes = [2, 4, 6, 8, 10, 12]
    mixed_sizes = [2, 3, 4, 5, 6, 7]
    pure = run(pure_sizes, None)
    mixed = run(mixed_sizes, NoiseModel(depolarizing=0.01, phase_damping=0.02))

    fig, axes = plt.subplots(1, 2, figsize=(10, 4))
    for ax, sizes, timings, title in (
        (axes[0], pure_sizes, pure, "State vector"),
        (axes[1], mixed_sizes, mixed, "Density matrix"),
    ):
        ax.semilogy(sizes, timings["eager"], "o-", label="eager")
        ax.semilogy(sizes, timings["jit"], "s-", label="jit")
        ax.set_xlabel("qubits")
        ax.set_ylabel("seconds per simulation")
        ax.set_title(title)
        ax.legend()
    fig.tight_layout()
    plt.savefig(SAVE_DIR / "eager_vs_jitted.png", dpi=150)
