"""Circuit IR for annealing circuits."""

from .core import (
    PARITY_GATE,
    SUPPORTED_GATES,
    GateOp,
    QuantumCircuit,
    apply_op,
    expand_op,
    validate_op,
)

__all__ = [
    "GateOp",
    "QuantumCircuit",
    "PARITY_GATE",
    "SUPPORTED_GATES",
    "apply_op",
    "expand_op",
    "validate_op",
]
