"""Pauli-sum operators."""

from .pauli import PauliSum, PauliTerm

__all__ = ["PauliTerm", "PauliSum"]
