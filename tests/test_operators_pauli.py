"""Tests for PauliTerm and PauliSum."""

import pytest
import torch

from aqcsim.errors import InvalidParameterError
from aqcsim.operators import PauliSum, PauliTerm


def test_pauli_term_support():
    term = PauliTerm(1.0, ["I", "Z", "Z"])
    assert term.paulis == ("I", "Z", "Z")
    assert term.support() == (1, 2)
    assert not term.is_identity()
    assert PauliTerm(2.0, ("I", "I")).is_identity()


def test_pauli_term_validation():
    with pytest.raises(InvalidParameterError):
        PauliTerm(1.0, ("Y",))
    with pytest.raises(InvalidParameterError):
        PauliTerm(1.0, ())


def test_pauli_sum_validation():
    with pytest.raises(InvalidParameterError):
        PauliSum([PauliTerm(1.0, ("Z",)), PauliTerm(1.0, ("Z", "Z"))])
    assert PauliSum().n_qubits() == 0
    with pytest.raises(InvalidParameterError):
        PauliSum().to_matrix()
    with pytest.raises(InvalidParameterError):
        PauliSum([PauliTerm(1.0, ("I",) * 11)]).to_matrix()


def test_simplify_merges_and_drops():
    hamiltonian = PauliSum.from_terms(
        [
            PauliTerm(1.0, ("Z", "I")),
            PauliTerm(-1.0, ("Z", "I")),
            PauliTerm(0.5, ("I", "Z")),
            PauliTerm(0.25, ("I", "Z")),
        ]
    ).simplify()
    assert len(hamiltonian) == 1
    assert hamiltonian.terms[0].paulis == ("I", "Z")
    assert hamiltonian.terms[0].coeff == pytest.approx(0.75)


def test_to_matrix_little_endian():
    # Z on qubit 0 flips sign on odd basis indices
    matrix = PauliSum([PauliTerm(1.0, ("Z", "I"))]).to_matrix()
    assert torch.allclose(
        torch.diagonal(matrix).real, torch.tensor([1.0, -1.0, 1.0, -1.0], dtype=torch.float64)
    )

    x_on_1 = PauliSum([PauliTerm(1.0, ("I", "X"))]).to_matrix()
    assert x_on_1[2, 0] == 1.0
    assert x_on_1[0, 2] == 1.0


def test_diagonal_matches_matrix():
    hamiltonian = PauliSum(
        [PauliTerm(0.5, ("Z", "Z", "I")), PauliTerm(-1.5, ("I", "Z", "Z")), PauliTerm(2.0, ("I", "I", "I"))]
    )
    matrix_diag = torch.diagonal(hamiltonian.to_matrix()).real
    assert torch.allclose(hamiltonian.diagonal(), matrix_diag)
