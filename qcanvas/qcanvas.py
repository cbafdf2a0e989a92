from typing import Any

DEPOLARIZING_CONVENTIONS = ("mixing", "pauli")


class Config:
    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "Config":
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, "_initialized"):
            self._initialized = True  # Prevents reinitialization
            self._probability_threshold = 1e-9
            self._drift_tolerance = 1e-6
            self._max_custom_gate_depth = 32
            self._dense_warning_qubits = 9
            self._depolarizing_convention = "mixing"
            self._check_invariants = True
            self._use_jit = False

    @property
    def probability_threshold(self) -> float:
        """
        Outcome probabilities at or below this value are left out of
        simulation results
        """
        return self._probability_threshold

    def set_probability_threshold(self, threshold: float) -> None:
        if threshold < 0:
            raise ValueError("Probability threshold must be non-negative")
        self._probability_threshold = float(threshold)

    @property
    def drift_tolerance(self) -> float:
        """
        Maximal allowed deviation of the trace (or norm) from one before
        the simulation is aborted
        """
        return self._drift_tolerance

    def set_drift_tolerance(self, tolerance: float) -> None:
        if tolerance <= 0:
            raise ValueError("Drift tolerance must be positive")
        self._drift_tolerance = float(tolerance)

    @property
    def max_custom_gate_depth(self) -> int:
        return self._max_custom_gate_depth

    def set_max_custom_gate_depth(self, depth: int) -> None:
        if depth < 1:
            raise ValueError("Custom gate depth must be at least 1")
        self._max_custom_gate_depth = int(depth)

    @property
    def dense_warning_qubits(self) -> int:
        return self._dense_warning_qubits

    def set_dense_warning_qubits(self, num_qubits: int) -> None:
        self._dense_warning_qubits = int(num_qubits)

    @property
    def depolarizing_convention(self) -> str:
        """
        Parametrization of the depolarizing channel

        "mixing": rho -> (1-p) rho + p I/2
        "pauli": rho -> (1-p) rho + p/3 (X rho X + Y rho Y + Z rho Z)
        """
        return self._depolarizing_convention

    def set_depolarizing_convention(self, convention: str) -> None:
        if convention not in DEPOLARIZING_CONVENTIONS:
            raise ValueError(
                f"Unknown depolarizing convention '{convention}', "
                f"expected one of {DEPOLARIZING_CONVENTIONS}"
            )
        self._depolarizing_convention = convention

    @property
    def check_invariants(self) -> bool:
        return self._check_invariants

    def set_check_invariants(self, check: bool) -> None:
        self._check_invariants = bool(check)

    @property
    def use_jit(self) -> bool:
        return self._use_jit

    def set_use_jit(self, use_jit: bool) -> None:
        self._use_jit = bool(use_jit)


class Session:
    """
    Lightweight context manager to scope Config settings per run.

    Example:
        with Session(use_jit=True, depolarizing_convention="pauli"):
            ...
    Restores previous Config values on exit so tests/runs stay isolated.
    """

    _FIELDS = (
        "probability_threshold",
        "drift_tolerance",
        "max_custom_gate_depth",
        "dense_warning_qubits",
        "depolarizing_convention",
        "check_invariants",
        "use_jit",
    )

    def __init__(
        self,
        *,
        probability_threshold: float | None = None,
        drift_tolerance: float | None = None,
        max_custom_gate_depth: int | None = None,
        dense_warning_qubits: int | None = None,
        depolarizing_convention: str | None = None,
        check_invariants: bool | None = None,
        use_jit: bool | None = None,
    ) -> None:
        cfg = Config()
        self._cfg = cfg
        self._prev = {name: getattr(cfg, name) for name in self._FIELDS}
        self._overrides = {
            "probability_threshold": probability_threshold,
            "drift_tolerance": drift_tolerance,
            "max_custom_gate_depth": max_custom_gate_depth,
            "dense_warning_qubits": dense_warning_qubits,
            "depolarizing_convention": depolarizing_convention,
            "check_invariants": check_invariants,
            "use_jit": use_jit,
        }

    def __enter__(self) -> "Config":
        for name, value in self._overrides.items():
            if value is not None:
                getattr(self._cfg, f"set_{name}")(value)
        return self._cfg

    def __exit__(self, exc_type, exc, tb) -> None:
        for name, value in self._prev.items():
            getattr(self._cfg, f"set_{name}")(value)
