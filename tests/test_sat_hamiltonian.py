"""Tests for the penalty and driver Hamiltonian encodings."""

import itertools

import pytest
import torch

from aqcsim.adiabatic import build_preparation_circuit
from aqcsim.errors import InvalidParameterError
from aqcsim.sat import (
    ANCILLA,
    Clause,
    CNFProblem,
    driver_hamiltonian,
    ising_terms,
    penalty_hamiltonian,
    problem_qubits,
    register_size,
    variable_qubit,
)


def _index(bits) -> int:
    """Basis index with x_v on qubit v and the ancilla in |0>."""
    return sum(bit << variable_qubit(v) for v, bit in enumerate(bits, start=1))


def test_register_layout(reference):
    assert ANCILLA == 0
    assert register_size(reference) == 4
    assert problem_qubits(reference) == (1, 2, 3)


def test_reference_ising_terms(reference):
    terms = ising_terms(reference)
    assert terms == {(1, 2): -1.0, (2, 3): 1.0, (1, 3): 1.0}
    assert list(terms) == [(1, 2), (2, 3), (1, 3)]


def test_ising_terms_keep_single_z():
    problem = CNFProblem(num_variables=2, clauses=(Clause.of(1, 2),))
    assert ising_terms(problem) == {(1,): 1.0, (2,): 1.0, (1, 2): 1.0}

    negated = CNFProblem(num_variables=2, clauses=(Clause.of(-1, 2),))
    assert ising_terms(negated) == {(1,): -1.0, (2,): 1.0, (1, 2): -1.0}


def test_penalty_energy_counts_violations(reference):
    energies = penalty_hamiltonian(reference).diagonal()
    for bits in itertools.product((0, 1), repeat=3):
        expected = 4.0 * len(reference.violated_clauses(bits))
        index = _index(bits)
        assert energies[index].item() == pytest.approx(expected)
        # Ancilla acts as identity
        assert energies[index | 1].item() == pytest.approx(expected)


def test_penalty_ground_states_are_satisfying(reference):
    energies = penalty_hamiltonian(reference).diagonal()
    zeros = {i for i in range(16) if abs(energies[i].item()) < 1e-12 and not i & 1}
    assert zeros == {_index(bits) for bits in reference.satisfying_assignments()}
    assert zeros == {8, 6}


def test_penalty_without_constant(reference):
    energies = penalty_hamiltonian(reference, include_constant=False).diagonal()
    assert energies.min().item() == pytest.approx(-3.0)


def test_penalty_matrix_is_diagonal(reference):
    hamiltonian = penalty_hamiltonian(reference)
    matrix = hamiltonian.to_matrix()
    assert torch.allclose(matrix, torch.diag(hamiltonian.diagonal().to(matrix.dtype)))


def test_driver_ground_state(reference):
    driver = driver_hamiltonian(reference)
    assert len(driver) == 3
    with pytest.raises(InvalidParameterError):
        driver.diagonal()

    minus = build_preparation_circuit(reference).simulate_state()
    assert torch.allclose(driver.to_matrix() @ minus, -3.0 * minus, atol=1e-12)
