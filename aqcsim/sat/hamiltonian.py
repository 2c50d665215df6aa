"""Encoding of a CNF problem as driver and penalty Hamiltonians.

Register layout: qubit 0 is the ancilla used by the parity-phase gates,
variable v lives on qubit v.

A literal with sign σ (+1 for x, -1 for ¬x) is false exactly when the Z
eigenvalue of its qubit equals σ, since Z|0> = +|0> and x = 0 is false.
The operator Π_i (1 + σ_i Z_i) is therefore 2^k on the one assignment
that violates a k-literal clause and 0 on every other assignment.
Expanding the product gives Σ_S (Π_{i∈S} σ_i) Z_S over subsets S of the
clause's variables; the penalty Hamiltonian is the sum over clauses.
For a 2-literal clause the Z_a Z_b coefficient is σ_a σ_b = ±1.
"""

from __future__ import annotations

import itertools
from typing import Dict, Tuple

from aqcsim.operators import PauliSum, PauliTerm

from .cnf import CNFProblem

ANCILLA = 0

IsingTerms = Dict[Tuple[int, ...], float]


def variable_qubit(variable: int) -> int:
    """Register qubit holding ``variable``."""
    return variable


def register_size(problem: CNFProblem) -> int:
    """Ancilla plus one qubit per variable."""
    return problem.num_variables + 1


def problem_qubits(problem: CNFProblem) -> Tuple[int, ...]:
    return tuple(variable_qubit(v) for v in range(1, problem.num_variables + 1))


def ising_terms(problem: CNFProblem, tol: float = 1e-12) -> IsingTerms:
    """
    Non-constant Z-product terms of the penalty Hamiltonian.

    Returns
    -------
    IsingTerms
        Mapping from a tuple of variables (in the order they first appear
        in a clause) to the coefficient of the product of their Z
        operators. Terms are ordered by first appearance; subsets shared
        by several clauses are merged and terms that cancel are dropped.
    """
    order: Dict[frozenset, Tuple[int, ...]] = {}
    coeffs: Dict[frozenset, float] = {}

    for clause in problem.clauses:
        for size in range(1, len(clause) + 1):
            for subset in itertools.combinations(clause.literals, size):
                key = frozenset(lit.variable for lit in subset)
                sign = 1
                for lit in subset:
                    sign *= lit.sign
                if key not in order:
                    order[key] = tuple(lit.variable for lit in subset)
                    coeffs[key] = 0.0
                coeffs[key] += float(sign)

    return {order[key]: coeff for key, coeff in coeffs.items() if abs(coeff) > tol}


def penalty_hamiltonian(problem: CNFProblem, include_constant: bool = True) -> PauliSum:
    """
    Penalty Hamiltonian over the full register (ancilla acts as identity).

    With ``include_constant`` the identity term is kept, so the energy of a
    basis state equals Σ 2^k over the clauses it violates.
    """
    n = register_size(problem)
    terms = []
    if include_constant and problem.clauses:
        terms.append(PauliTerm(coeff=float(len(problem.clauses)), paulis=("I",) * n))
    for variables, coeff in ising_terms(problem).items():
        paulis = ["I"] * n
        for var in variables:
            paulis[variable_qubit(var)] = "Z"
        terms.append(PauliTerm(coeff=coeff, paulis=tuple(paulis)))
    return PauliSum(terms=terms)


def driver_hamiltonian(problem: CNFProblem) -> PauliSum:
    """
    Transverse-field driver Σ_v X_v over the problem qubits.

    Its ground state is |->^⊗n on the problem qubits.
    """
    n = register_size(problem)
    terms = []
    for q in problem_qubits(problem):
        paulis = ["I"] * n
        paulis[q] = "X"
        terms.append(PauliTerm(coeff=1.0, paulis=tuple(paulis)))
    return PauliSum(terms=terms)
