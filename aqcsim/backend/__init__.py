"""Statevector backend operations."""

from .statevector import (
    apply_gate,
    apply_two_qubit_gate,
    collapse_qubit,
    measure_probs,
    qubit_probabilities,
    zero_state,
)

__all__ = [
    "zero_state",
    "apply_gate",
    "apply_two_qubit_gate",
    "measure_probs",
    "qubit_probabilities",
    "collapse_qubit",
]
