"""CNF problem description.

Variables are numbered from 1, as in DIMACS. An assignment maps each
variable to a bit (1 = true).
"""

from __future__ import annotations

import itertools
from collections import abc
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from aqcsim.errors import InvalidParameterError
from aqcsim.logging import get_logger

logger = get_logger(__name__)

Assignment = Union[Mapping[int, int], Sequence[int]]


@dataclass(frozen=True)
class Literal:
    """A variable or its negation."""

    variable: int
    positive: bool = True

    def __post_init__(self) -> None:
        if int(self.variable) < 1:
            raise InvalidParameterError(
                f"Literal variables are 1-based, got {self.variable}."
            )
        object.__setattr__(self, "variable", int(self.variable))
        object.__setattr__(self, "positive", bool(self.positive))

    @classmethod
    def from_int(cls, value: int) -> "Literal":
        """DIMACS-style literal: ``3`` is x3, ``-3`` is ¬x3."""
        if value == 0:
            raise InvalidParameterError("0 is not a valid literal.")
        return cls(variable=abs(value), positive=value > 0)

    @property
    def sign(self) -> int:
        """+1 for x, -1 for ¬x."""
        return 1 if self.positive else -1

    def evaluate(self, bit: int) -> bool:
        return bool(bit) == self.positive

    def __str__(self) -> str:
        return f"x{self.variable}" if self.positive else f"¬x{self.variable}"


@dataclass(frozen=True)
class Clause:
    """A disjunction of literals over distinct variables."""

    literals: Tuple[Literal, ...]

    def __post_init__(self) -> None:
        literals = tuple(self.literals)
        if not literals:
            raise InvalidParameterError("A clause needs at least one literal.")
        variables = [lit.variable for lit in literals]
        if len(set(variables)) != len(variables):
            raise InvalidParameterError(
                f"Clause repeats a variable: {' ∨ '.join(str(lit) for lit in literals)}"
            )
        object.__setattr__(self, "literals", literals)

    @classmethod
    def of(cls, *values: int) -> "Clause":
        """Build a clause from DIMACS-style integers, e.g. ``Clause.of(-1, 2)``."""
        return cls(tuple(Literal.from_int(v) for v in values))

    @property
    def variables(self) -> Tuple[int, ...]:
        return tuple(lit.variable for lit in self.literals)

    def is_satisfied(self, assignment: Mapping[int, int]) -> bool:
        return any(lit.evaluate(assignment[lit.variable]) for lit in self.literals)

    def __len__(self) -> int:
        return len(self.literals)

    def __str__(self) -> str:
        return "(" + " ∨ ".join(str(lit) for lit in self.literals) + ")"


@dataclass(frozen=True)
class CNFProblem:
    """
    A CNF formula over ``num_variables`` variables.

    Parameters
    ----------
    num_variables:
        Number of boolean variables (>= 1), numbered 1..num_variables.
    clauses:
        Clauses of the conjunction.
    """

    num_variables: int
    clauses: Tuple[Clause, ...]

    def __post_init__(self) -> None:
        if int(self.num_variables) < 1:
            raise InvalidParameterError(
                f"num_variables must be >= 1, got {self.num_variables}."
            )
        object.__setattr__(self, "num_variables", int(self.num_variables))
        object.__setattr__(self, "clauses", tuple(self.clauses))

        for clause in self.clauses:
            for var in clause.variables:
                if var > self.num_variables:
                    raise InvalidParameterError(
                        f"Clause {clause} uses x{var} but num_variables={self.num_variables}."
                    )

    @classmethod
    def from_pairs(
        cls,
        num_variables: int,
        pairs: Iterable[Tuple[int, bool, int, bool]],
    ) -> "CNFProblem":
        """
        Build a 2-SAT problem from ``(var_a, positive_a, var_b, positive_b)``
        tuples.
        """
        clauses = [
            Clause((Literal(var_a, pos_a), Literal(var_b, pos_b)))
            for var_a, pos_a, var_b, pos_b in pairs
        ]
        return cls(num_variables=num_variables, clauses=tuple(clauses))

    @classmethod
    def from_dimacs(cls, text: str) -> "CNFProblem":
        """
        Parse a DIMACS CNF document.

        Comment lines start with ``c``; the header is ``p cnf <vars> <clauses>``;
        each clause is a run of non-zero integers terminated by ``0`` and may
        span lines. A line holding ``%`` ends the clause section.
        """
        num_variables = None
        declared_clauses = None
        clauses: List[Clause] = []
        current: List[int] = []

        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("c"):
                continue
            if line.startswith("%"):
                break
            if line.startswith("p"):
                fields = line.split()
                if len(fields) != 4 or fields[1] != "cnf":
                    raise InvalidParameterError(f"line {lineno}: bad problem line {line!r}")
                num_variables = int(fields[2])
                declared_clauses = int(fields[3])
                continue
            if num_variables is None:
                raise InvalidParameterError(f"line {lineno}: clause before 'p cnf' header")
            try:
                values = [int(tok) for tok in line.split()]
            except ValueError as exc:
                raise InvalidParameterError(f"line {lineno}: {exc}") from exc
            for value in values:
                if value == 0:
                    clauses.append(Clause.of(*current))
                    current = []
                else:
                    current.append(value)

        if num_variables is None:
            raise InvalidParameterError("DIMACS input has no 'p cnf' header.")
        if current:
            clauses.append(Clause.of(*current))
        if declared_clauses is not None and declared_clauses != len(clauses):
            logger.warning(
                "DIMACS header declares %d clauses, found %d", declared_clauses, len(clauses)
            )

        return cls(num_variables=num_variables, clauses=tuple(clauses))

    def _as_mapping(self, assignment: Assignment) -> Dict[int, int]:
        if isinstance(assignment, abc.Mapping):
            mapping = {int(k): int(v) for k, v in assignment.items()}
        else:
            values = list(assignment)
            if len(values) != self.num_variables:
                raise InvalidParameterError(
                    f"Expected {self.num_variables} bits, got {len(values)}."
                )
            mapping = {i + 1: int(v) for i, v in enumerate(values)}

        missing = [v for v in range(1, self.num_variables + 1) if v not in mapping]
        if missing:
            raise InvalidParameterError(f"Assignment is missing variables {missing}.")
        return mapping

    def violated_clauses(self, assignment: Assignment) -> List[Clause]:
        mapping = self._as_mapping(assignment)
        return [c for c in self.clauses if not c.is_satisfied(mapping)]

    def is_satisfied(self, assignment: Assignment) -> bool:
        return not self.violated_clauses(assignment)

    def satisfying_assignments(self) -> List[Tuple[int, ...]]:
        """
        All satisfying assignments as bit tuples (x1, ..., xn), found by
        exhaustive search. Only practical for small n.
        """
        return [
            bits
            for bits in itertools.product((0, 1), repeat=self.num_variables)
            if self.is_satisfied(bits)
        ]

    def __str__(self) -> str:
        return " ∧ ".join(str(c) for c in self.clauses)


def reference_problem() -> CNFProblem:
    """(¬x1 ∨ x2) ∧ (¬x2 ∨ ¬x3) ∧ (x1 ∨ x3), satisfied by 001 and 110."""
    return CNFProblem(
        num_variables=3,
        clauses=(Clause.of(-1, 2), Clause.of(-2, -3), Clause.of(1, 3)),
    )
