"""
Predefined circuits offered by the canvas
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from qcanvas.core.ir import NoiseModel, PlacedGate, placed_item_to_dict
from qcanvas.simulator import SimulationResult, simulate


@dataclass(frozen=True)
class CircuitTemplate:
    id: str
    name: str
    description: str
    num_qubits: int
    gates: Tuple[PlacedGate, ...]

    def simulate(self, noise_model: Optional[NoiseModel] = None) -> SimulationResult:
        return simulate(self.gates, self.num_qubits, noise_model=noise_model)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "numQubits": self.num_qubits,
            "gates": [placed_item_to_dict(g) for g in self.gates],
        }


BELL_STATE = CircuitTemplate(
    id="bell_state",
    name="Bell State",
    description="Creates a simple entangled state between two qubits.",
    num_qubits=2,
    gates=(
        PlacedGate("h", 0, left=20),
        PlacedGate("cnot", 1, left=50, control_qubit=0),
    ),
)

GHZ_STATE = CircuitTemplate(
    id="ghz_state",
    name="GHZ State",
    description="Creates a 3-qubit entangled state (Greenberger-Horne-Zeilinger).",
    num_qubits=3,
    gates=(
        PlacedGate("h", 0, left=20),
        PlacedGate("cnot", 1, left=50, control_qubit=0),
        PlacedGate("cnot", 2, left=80, control_qubit=0),
    ),
)

# Pre-measurement part of the protocol: Bell pair on q1/q2, then q0 is
# entangled with q1 and rotated into the Bell basis.
QUANTUM_TELEPORTATION = CircuitTemplate(
    id="quantum_teleportation",
    name="Quantum Teleportation",
    description=(
        "The core quantum circuit for the teleportation protocol "
        "(pre-measurement). Requires 3 qubits."
    ),
    num_qubits=3,
    gates=(
        PlacedGate("h", 1, left=10),
        PlacedGate("cnot", 2, left=30, control_qubit=1),
        PlacedGate("cnot", 1, left=50, control_qubit=0),
        PlacedGate("h", 0, left=70),
    ),
)

TEMPLATES: Mapping[str, CircuitTemplate] = {
    t.id: t for t in (BELL_STATE, GHZ_STATE, QUANTUM_TELEPORTATION)
}


def get_template(template_id: str) -> CircuitTemplate:
    """
    Raises
    ------
    KeyError
        If no template has the given id
    """
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise KeyError(f"Unknown circuit template '{template_id}'") from None
