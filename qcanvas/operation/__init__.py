# flake8: noqa

from .gate_operation import GateKind, GateType, matrix_for  # noqa: F401
