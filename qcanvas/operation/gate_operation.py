from enum import Enum
from typing import Any, List, Mapping, Optional

import jax.numpy as jnp

from qcanvas._math.ops import (
    hadamard_operator,
    rx_operator,
    ry_operator,
    rz_operator,
    s_operator,
    sdg_operator,
    t_operator,
    tdg_operator,
    x_operator,
    y_operator,
    z_operator,
)
from qcanvas.exceptions import UnknownGateKind
from qcanvas.extra.angle_expression import parse_angle


class GateKind(Enum):
    Single = "single"
    Control = "control"


class GateType(Enum):
    """
    GateType

    Catalogue of the gates that can be placed on the canvas. Single qubit
    gates provide their 2x2 operator through `compute_operator`; the two
    qubit gates are applied as basis index transformations by the state
    engine and have no operator here.
    """

    H = ("h", GateKind.Single, 1, [], "Hadamard", "Creates a superposition of |0> and |1> states.")
    X = ("x", GateKind.Single, 1, [], "Pauli-X", "Performs a bit-flip on the qubit.")
    Y = ("y", GateKind.Single, 1, [], "Pauli-Y", "Bit and phase flip.")
    Z = ("z", GateKind.Single, 1, [], "Pauli-Z", "Performs a phase-flip on the qubit.")
    S = ("s", GateKind.Single, 1, [], "S", "Quarter turn phase gate.")
    SDG = ("sdg", GateKind.Single, 1, [], "S†", "Inverse of the S gate.")
    T = ("t", GateKind.Single, 1, [], "T", "Eighth turn phase gate.")
    TDG = ("tdg", GateKind.Single, 1, [], "T†", "Inverse of the T gate.")
    RX = ("rx", GateKind.Single, 1, ["theta"], "RX", "Rotation about the X axis.")
    RY = ("ry", GateKind.Single, 1, ["theta"], "RY", "Rotation about the Y axis.")
    RZ = ("rz", GateKind.Single, 1, ["theta"], "RZ", "Rotation about the Z axis.")
    CNOT = ("cnot", GateKind.Control, 2, [], "CNOT", "Controlled-NOT. Flips target if control is |1>.")
    CZ = ("cz", GateKind.Control, 2, [], "CZ", "Controlled-Z. Flips the phase of |11>.")
    SWAP = ("swap", GateKind.Control, 2, [], "SWAP", "Exchanges the states of two qubits.")
    MEASURE = ("measure", GateKind.Single, 1, [], "Measure", "Measures the qubit state in the Z-basis.")

    def __init__(
        self,
        gate_id: str,
        kind: GateKind,
        arity: int,
        required_params: List[str],
        label: str,
        description: str,
    ) -> None:
        self.gate_id = gate_id
        self.kind = kind
        self.arity = arity
        self.required_params = required_params
        self.label = label
        self.description = description

    @classmethod
    def from_id(cls, gate_id: Any) -> "GateType":
        """
        Looks up the gate by its canvas id (case-insensitive)

        Raises
        ------
        UnknownGateKind
            If no gate with the given id exists
        """
        if isinstance(gate_id, GateType):
            return gate_id
        if isinstance(gate_id, str):
            member = _GATES_BY_ID.get(gate_id.strip().lower())
            if member is not None:
                return member
        raise UnknownGateKind(gate_id)

    @property
    def is_measurement(self) -> bool:
        return self is GateType.MEASURE

    @property
    def is_two_qubit(self) -> bool:
        return self.arity == 2

    def compute_operator(self, params: Optional[Mapping[str, Any]] = None) -> jnp.ndarray:
        """
        Computes the 2x2 operator of a single qubit gate

        Parameters
        ----------
        params: Optional[Mapping[str, Any]]
            Gate parameters; angles may be `Angle` instances, numbers or
            expressions of the angle grammar. A missing `theta` is
            treated as zero.

        Returns
        -------
        jnp.ndarray
            Operator matrix

        Raises
        ------
        UnknownGateKind
            If the gate is not a single qubit unitary
        InvalidAngleExpression
            If an angle parameter can not be resolved
        """
        params = params or {}
        match self:
            case GateType.H:
                return hadamard_operator()
            case GateType.X:
                return x_operator()
            case GateType.Y:
                return y_operator()
            case GateType.Z:
                return z_operator()
            case GateType.S:
                return s_operator()
            case GateType.SDG:
                return sdg_operator()
            case GateType.T:
                return t_operator()
            case GateType.TDG:
                return tdg_operator()
            case GateType.RX:
                return rx_operator(parse_angle(params.get("theta")).radians)
            case GateType.RY:
                return ry_operator(parse_angle(params.get("theta")).radians)
            case GateType.RZ:
                return rz_operator(parse_angle(params.get("theta")).radians)
        raise UnknownGateKind(self.gate_id, "not a single-qubit unitary")


_GATES_BY_ID = {member.gate_id: member for member in GateType}


def matrix_for(gate_id: Any, params: Optional[Mapping[str, Any]] = None) -> jnp.ndarray:
    """
    Returns the 2x2 matrix of the single qubit gate `gate_id`
    """
    return GateType.from_id(gate_id).compute_operator(params)
