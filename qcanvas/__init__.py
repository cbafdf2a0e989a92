"""Top-level qcanvas helpers."""

# Amplitudes are complex128; x64 must be enabled before any array is built.

import jax

jax.config.update("jax_enable_x64", True)

from qcanvas import core, operation  # noqa: E402
from qcanvas.circuit.linearizer import linearize  # noqa: E402
from qcanvas.core.ir import (  # noqa: E402
    CustomGateDefinition,
    NoiseModel,
    PlacedCustomGate,
    PlacedGate,
    PrimitiveOp,
)
from qcanvas.data.templates import TEMPLATES, get_template  # noqa: E402
from qcanvas.exceptions import (  # noqa: E402
    CyclicGateDefinition,
    InvalidAngleExpression,
    InvalidQubitIndex,
    NumericDriftExceeded,
    QCanvasError,
    UnknownGateKind,
)
from qcanvas.extra.angle_expression import Angle, parse_angle  # noqa: E402
from qcanvas.operation.gate_operation import GateType, matrix_for  # noqa: E402
from qcanvas.qcanvas import Config, Session  # noqa: E402
from qcanvas.simulator import SimulationResult, simulate  # noqa: E402
from qcanvas.state.engine import apply_operation  # noqa: E402
from qcanvas.state.quantum_state import (  # noqa: E402
    MixedState,
    PureState,
    initial_state,
)
from qcanvas.state.utils.trace_out import QubitState, reduce  # noqa: E402
from qcanvas.worker import (  # noqa: E402
    SimulationRequest,
    SimulationResponse,
    SimulationWorker,
    handle_request,
)

__all__ = [
    "core",
    "operation",
    "Angle",
    "Config",
    "CustomGateDefinition",
    "CyclicGateDefinition",
    "GateType",
    "InvalidAngleExpression",
    "InvalidQubitIndex",
    "MixedState",
    "NoiseModel",
    "NumericDriftExceeded",
    "PlacedCustomGate",
    "PlacedGate",
    "PrimitiveOp",
    "PureState",
    "QCanvasError",
    "QubitState",
    "Session",
    "SimulationRequest",
    "SimulationResponse",
    "SimulationResult",
    "SimulationWorker",
    "TEMPLATES",
    "UnknownGateKind",
    "apply_operation",
    "get_template",
    "handle_request",
    "initial_state",
    "linearize",
    "matrix_for",
    "parse_angle",
    "reduce",
    "simulate",
]
