"""Tests for CNF problem description and DIMACS parsing."""

import pytest

from aqcsim.errors import InvalidParameterError
from aqcsim.sat import Clause, CNFProblem, Literal, reference_problem

REFERENCE_DIMACS = """\
c (¬x1 ∨ x2) ∧ (¬x2 ∨ ¬x3) ∧ (x1 ∨ x3)
p cnf 3 3
-1 2 0
-2 -3 0
1 3 0
"""


def test_literal_from_int():
    assert Literal.from_int(3) == Literal(3, True)
    assert Literal.from_int(-2) == Literal(2, False)
    assert Literal.from_int(-2).sign == -1
    assert str(Literal.from_int(-2)) == "¬x2"
    with pytest.raises(InvalidParameterError):
        Literal.from_int(0)
    with pytest.raises(InvalidParameterError):
        Literal(0)


def test_literal_evaluate():
    assert Literal(1, True).evaluate(1)
    assert not Literal(1, True).evaluate(0)
    assert Literal(1, False).evaluate(0)


def test_clause_validation():
    assert Clause.of(-1, 2).variables == (1, 2)
    with pytest.raises(InvalidParameterError):
        Clause.of(1, -1)
    with pytest.raises(InvalidParameterError):
        Clause(())


def test_problem_validation():
    with pytest.raises(InvalidParameterError):
        CNFProblem(num_variables=2, clauses=(Clause.of(1, 3),))
    with pytest.raises(InvalidParameterError):
        CNFProblem(num_variables=0, clauses=())


def test_reference_problem_text():
    assert str(reference_problem()) == "(¬x1 ∨ x2) ∧ (¬x2 ∨ ¬x3) ∧ (x1 ∨ x3)"


def test_from_pairs_matches_reference():
    problem = CNFProblem.from_pairs(
        3, [(1, False, 2, True), (2, False, 3, False), (1, True, 3, True)]
    )
    assert problem == reference_problem()


def test_reference_satisfying_assignments(reference):
    assert reference.satisfying_assignments() == [(0, 0, 1), (1, 1, 0)]


def test_violated_clauses(reference):
    assert reference.violated_clauses((0, 0, 0)) == [Clause.of(1, 3)]
    assert reference.violated_clauses({1: 0, 2: 1, 3: 1}) == [Clause.of(-2, -3)]
    assert reference.is_satisfied({1: 1, 2: 1, 3: 0})


def test_assignment_validation(reference):
    with pytest.raises(InvalidParameterError):
        reference.is_satisfied((0, 1))
    with pytest.raises(InvalidParameterError):
        reference.is_satisfied({1: 0, 2: 1})


def test_from_dimacs_reference():
    assert CNFProblem.from_dimacs(REFERENCE_DIMACS) == reference_problem()


def test_from_dimacs_multiline_clause_and_terminator():
    text = "p cnf 2 2\n1\n-2 0 2 0\n%\n0\n"
    problem = CNFProblem.from_dimacs(text)
    assert problem.clauses == (Clause.of(1, -2), Clause.of(2))


def test_from_dimacs_unterminated_last_clause():
    problem = CNFProblem.from_dimacs("p cnf 2 1\n1 2\n")
    assert problem.clauses == (Clause.of(1, 2),)


@pytest.mark.parametrize(
    "text",
    [
        "1 2 0\n",
        "p dnf 2 1\n1 2 0\n",
        "p cnf 2 1\n1 x 0\n",
        "p cnf 2 1\n1 3 0\n",
        "c only a comment\n",
    ],
)
def test_from_dimacs_errors(text):
    with pytest.raises(InvalidParameterError):
        CNFProblem.from_dimacs(text)
