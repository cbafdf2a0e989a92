"""
Exceptions raised by the simulation engine.

Unknown gates, invalid angles and invalid qubit indices are recovered
locally by the circuit linearizer (the offending operation is skipped and
logged). Cyclic custom gate definitions and numeric drift abort the
simulation.
"""


class QCanvasError(Exception):
    pass


class UnknownGateKind(QCanvasError):
    def __init__(self, gate_id: object, reason: str = "unknown gate") -> None:
        self.gate_id = gate_id
        super().__init__(f"Gate '{gate_id}': {reason}")


class InvalidAngleExpression(QCanvasError):
    def __init__(self, expression: object) -> None:
        self.expression = expression
        super().__init__(f"Invalid angle expression: {expression!r}")


class InvalidQubitIndex(QCanvasError):
    def __init__(self, qubit: object, num_qubits: int, role: str = "target") -> None:
        self.qubit = qubit
        self.num_qubits = num_qubits
        self.role = role
        super().__init__(
            f"Invalid {role} qubit {qubit!r} for a {num_qubits}-qubit circuit"
        )


class CyclicGateDefinition(QCanvasError):
    def __init__(self, chain: tuple[str, ...], reason: str = "cycle") -> None:
        self.chain = tuple(chain)
        super().__init__(
            f"Custom gate expansion failed ({reason}): {' -> '.join(self.chain)}"
        )


class NumericDriftExceeded(QCanvasError):
    def __init__(
        self,
        quantity: str,
        value: float,
        expected: float | None = None,
        tolerance: float | None = None,
        *,
        bounds: tuple[float, float] | None = None,
    ) -> None:
        self.quantity = quantity
        self.value = value
        self.expected = expected
        self.tolerance = tolerance
        self.bounds = bounds
        if bounds is not None:
            low, high = bounds
            detail = f"expected within [{low:g}, {high:g}]"
        else:
            detail = f"expected {expected!r} ± {tolerance!r}"
        super().__init__(f"{quantity} drifted to {value!r} ({detail})")
