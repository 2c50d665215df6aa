"""SAT problem description and Hamiltonian encoding."""

from .cnf import Assignment, Clause, CNFProblem, Literal, reference_problem
from .hamiltonian import (
    ANCILLA,
    IsingTerms,
    driver_hamiltonian,
    ising_terms,
    penalty_hamiltonian,
    problem_qubits,
    register_size,
    variable_qubit,
)

__all__ = [
    "Assignment",
    "Literal",
    "Clause",
    "CNFProblem",
    "reference_problem",
    "ANCILLA",
    "IsingTerms",
    "variable_qubit",
    "register_size",
    "problem_qubits",
    "ising_terms",
    "penalty_hamiltonian",
    "driver_hamiltonian",
]
