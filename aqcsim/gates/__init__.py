"""Quantum gate matrices."""

from .standard import CNOT, RX, RZ, H, I, X, Z, is_unitary

__all__ = ["I", "X", "Z", "H", "CNOT", "RX", "RZ", "is_unitary"]
