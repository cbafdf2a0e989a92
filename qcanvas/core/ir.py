"""
Lightweight, serializable circuit specs consumed by the simulator.

These dataclasses are pure data: placed items as they come from the canvas,
custom gate definitions, the noise model and the flattened primitive
operations the state engine consumes. The ``*_from_dict`` helpers accept
the camelCase JSON payloads exchanged with the UI layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from qcanvas.extra.angle_expression import Angle
from qcanvas.operation.gate_operation import GateType


@dataclass(frozen=True)
class PlacedGate:
    """
    A primitive gate placed on the canvas.

    Attributes
    ----------
    gate_id : str
        Canvas id of the gate, e.g. ``"h"`` or ``"cnot"``.
    qubit : int
        Target qubit (for SWAP one of the two swapped qubits).
    left : float
        Horizontal position; the sole determinant of execution order.
    control_qubit : int | None
        Control qubit of two qubit gates (second qubit of SWAP).
    params : Mapping[str, Any]
        Gate parameters, angle expressions keyed by name (``theta``).
    """

    gate_id: str
    qubit: int
    left: float = 0.0
    control_qubit: Optional[int] = None
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PlacedCustomGate:
    """
    A reference to a custom gate definition anchored at `qubit`.
    """

    custom_gate_id: str
    qubit: int
    left: float = 0.0


PlacedItem = Union[PlacedGate, PlacedCustomGate]


@dataclass(frozen=True)
class CustomGateDefinition:
    """
    User-defined composite gate. `gates` use qubit indices relative to the
    anchor qubit of the placement and may reference other custom gates.
    """

    id: str
    gates: Tuple[PlacedItem, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "gates", tuple(self.gates))


@dataclass(frozen=True)
class NoiseModel:
    """
    Per-qubit, per-operation noise probabilities.
    """

    depolarizing: float = 0.0
    phase_damping: float = 0.0

    def __post_init__(self) -> None:
        for name in ("depolarizing", "phase_damping"):
            value = float(getattr(self, name))
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} probability must be in [0, 1], got {value}")
            object.__setattr__(self, name, value)

    @property
    def is_noisy(self) -> bool:
        return self.depolarizing > 0 or self.phase_damping > 0


@dataclass(frozen=True)
class PrimitiveOp:
    """
    Atomic operation consumed by the state engine.

    Attributes
    ----------
    gate : GateType
        Gate to apply.
    target_qubit : int
        Absolute target qubit.
    control_qubit : int | None
        Absolute control qubit; on single qubit gates it only receives noise.
    params : Mapping[str, Angle]
        Resolved angle parameters.
    order : float
        Horizontal position the operation is sorted by.
    sequence : int
        Expansion index, breaks ties between equal `order` values.
    """

    gate: GateType
    target_qubit: int
    control_qubit: Optional[int] = None
    params: Mapping[str, Angle] = field(default_factory=dict)
    order: float = 0.0
    sequence: int = 0

    @property
    def qubits(self) -> Tuple[int, ...]:
        """Touched qubits, target first."""
        if self.control_qubit is None or self.control_qubit == self.target_qubit:
            return (self.target_qubit,)
        return (self.target_qubit, self.control_qubit)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def placed_item_from_dict(data: Union[Mapping[str, Any], PlacedItem]) -> PlacedItem:
    """
    Builds a placed item from its JSON form

    ``{"kind": "gate", "gateId", "qubit", "controlQubit"?, "left", "params"?}``
    or ``{"kind": "customGate", "customGateId", "qubit", "left"}``; the
    ``kind`` tag is optional and inferred from the id key when missing.
    """
    if isinstance(data, (PlacedGate, PlacedCustomGate)):
        return data
    kind = data.get("kind")
    if kind == "customGate" or (kind is None and "customGateId" in data):
        return PlacedCustomGate(
            custom_gate_id=str(data["customGateId"]),
            qubit=int(data["qubit"]),
            left=float(data.get("left", 0.0)),
        )
    if kind not in (None, "gate"):
        raise ValueError(f"Unknown placed item kind '{kind}'")
    return PlacedGate(
        gate_id=str(data["gateId"]),
        qubit=int(data["qubit"]),
        left=float(data.get("left", 0.0)),
        control_qubit=_optional_int(data.get("controlQubit")),
        params=dict(data.get("params") or {}),
    )


def custom_gate_from_dict(
    data: Union[Mapping[str, Any], CustomGateDefinition],
) -> CustomGateDefinition:
    if isinstance(data, CustomGateDefinition):
        return data
    return CustomGateDefinition(
        id=str(data["id"]),
        gates=tuple(placed_item_from_dict(g) for g in data.get("gates", ())),
        name=str(data.get("name", "")),
    )


def noise_model_from_dict(
    data: Union[Mapping[str, Any], NoiseModel, None],
) -> NoiseModel:
    if data is None:
        return NoiseModel()
    if isinstance(data, NoiseModel):
        return data
    return NoiseModel(
        depolarizing=float(data.get("depolarizing", 0.0)),
        phase_damping=float(data.get("phaseDamping", data.get("phase_damping", 0.0))),
    )


def placed_item_to_dict(item: PlacedItem) -> Dict[str, Any]:
    if isinstance(item, PlacedCustomGate):
        return {
            "kind": "customGate",
            "customGateId": item.custom_gate_id,
            "qubit": item.qubit,
            "left": item.left,
        }
    data: Dict[str, Any] = {
        "kind": "gate",
        "gateId": item.gate_id,
        "qubit": item.qubit,
        "left": item.left,
    }
    if item.control_qubit is not None:
        data["controlQubit"] = item.control_qubit
    if item.params:
        data["params"] = dict(item.params)
    return data
