"""Pauli operator primitives for the driver and penalty Hamiltonians."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

import torch

from ..errors import InvalidParameterError
from ..gates.standard import I, X, Z

_VALID_PAULI_LABELS = ("I", "X", "Z")
_MAX_DENSE_QUBITS = 10


@dataclass(frozen=True)
class PauliTerm:
    """
    A real coefficient times a tensor product of Pauli operators.

    ``paulis[i]`` acts on qubit i (qubit 0 = LSB of the basis index).

    Example:
        >>> term = PauliTerm(1.0, ("I", "Z", "Z"))  # Z_1 Z_2 on 3 qubits
        >>> term.support()
        (1, 2)
    """

    coeff: float
    paulis: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "coeff", float(self.coeff))
        if not isinstance(self.paulis, tuple):
            object.__setattr__(self, "paulis", tuple(self.paulis))

        if len(self.paulis) < 1:
            raise InvalidParameterError(
                f"paulis must have length >= 1, got {len(self.paulis)}"
            )
        invalid_labels = [p for p in self.paulis if p not in _VALID_PAULI_LABELS]
        if invalid_labels:
            raise InvalidParameterError(
                f"Invalid Pauli labels: {invalid_labels}. "
                f"All labels must be in {_VALID_PAULI_LABELS}"
            )

    def n_qubits(self) -> int:
        return len(self.paulis)

    def support(self) -> Tuple[int, ...]:
        """Qubits on which the term acts non-trivially."""
        return tuple(i for i, p in enumerate(self.paulis) if p != "I")

    def is_identity(self) -> bool:
        return all(p == "I" for p in self.paulis)


@dataclass
class PauliSum:
    """
    A Hamiltonian H = sum_i c_i P_i of :class:`PauliTerm` objects.

    All terms must act on the same number of qubits.
    """

    terms: List[PauliTerm] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.terms:
            n_qubits = self.terms[0].n_qubits()
            for i, term in enumerate(self.terms):
                if term.n_qubits() != n_qubits:
                    raise InvalidParameterError(
                        f"All terms must have the same n_qubits. "
                        f"Term 0 has {n_qubits} qubits, but term {i} has {term.n_qubits()} qubits."
                    )

    def n_qubits(self) -> int:
        """Number of qubits, or 0 if there are no terms."""
        if not self.terms:
            return 0
        return self.terms[0].n_qubits()

    def __len__(self) -> int:
        return len(self.terms)

    @classmethod
    def from_terms(cls, terms: Iterable[PauliTerm]) -> "PauliSum":
        return cls(terms=list(terms))

    def simplify(self, tol: float = 1e-12) -> "PauliSum":
        """
        Combine terms with identical Pauli strings and drop those whose
        coefficient falls below ``tol``.
        """
        coeff_map: dict[Tuple[str, ...], float] = {}
        for term in self.terms:
            coeff_map[term.paulis] = coeff_map.get(term.paulis, 0.0) + term.coeff

        return PauliSum(
            terms=[
                PauliTerm(coeff=coeff, paulis=paulis)
                for paulis, coeff in coeff_map.items()
                if abs(coeff) >= tol
            ]
        )

    def to_matrix(
        self, dtype: torch.dtype = torch.complex128, device: torch.device | None = None
    ) -> torch.Tensor:
        """
        Dense 2^n x 2^n matrix of this Hamiltonian.

        Only meant for small systems and verification.

        Raises:
            InvalidParameterError: If there are no terms or n_qubits > 10.
        """
        if device is None:
            device = torch.device("cpu")

        n_qubits = self.n_qubits()
        if n_qubits == 0:
            raise InvalidParameterError("Cannot compute matrix for empty PauliSum")
        if n_qubits > _MAX_DENSE_QUBITS:
            raise InvalidParameterError(
                f"to_matrix() is only intended for n <= {_MAX_DENSE_QUBITS}, got {n_qubits}."
            )

        pauli_matrices = {
            "I": I(dtype=dtype, device=device),
            "X": X(dtype=dtype, device=device),
            "Z": Z(dtype=dtype, device=device),
        }

        dim = 2**n_qubits
        matrix = torch.zeros((dim, dim), dtype=dtype, device=device)

        # Little-endian: the Kronecker product runs P_{n-1} ⊗ ... ⊗ P_0
        for term in self.terms:
            term_matrix = pauli_matrices[term.paulis[n_qubits - 1]]
            for i in range(n_qubits - 2, -1, -1):
                term_matrix = torch.kron(term_matrix, pauli_matrices[term.paulis[i]])
            matrix = matrix + term.coeff * term_matrix

        return matrix

    def diagonal(self) -> torch.Tensor:
        """
        Energies of the computational basis states for a Z-only Hamiltonian.

        Raises:
            InvalidParameterError: If any term contains an X.
        """
        n_qubits = self.n_qubits()
        if n_qubits == 0:
            raise InvalidParameterError("Cannot compute diagonal for empty PauliSum")

        indices = torch.arange(2**n_qubits, dtype=torch.int64)
        energies = torch.zeros(2**n_qubits, dtype=torch.float64)
        for term in self.terms:
            if "X" in term.paulis:
                raise InvalidParameterError("diagonal() requires a Z-only Hamiltonian.")
            sign = torch.ones_like(energies)
            for q in term.support():
                sign = sign * (1.0 - 2.0 * ((indices >> q) & 1).to(torch.float64))
            energies = energies + term.coeff * sign
        return energies
