"""Exception types raised by the simulator.

Value-type errors also derive from :class:`ValueError` so that code written
against plain ``ValueError`` keeps working.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for all simulator errors."""


class InvalidIndexError(SimulationError, ValueError):
    """A qubit index is out of range or repeated within one gate."""


class InvalidParameterError(SimulationError, ValueError):
    """A gate name, angle, or configuration value is not supported."""


class NumericalInstabilityError(SimulationError, ArithmeticError):
    """The state has drifted away from unit norm.

    Recoverable by renormalising the register.
    """


class RegisterStateError(SimulationError, RuntimeError):
    """The register was used after release or measured after finalisation."""


__all__ = [
    "SimulationError",
    "InvalidIndexError",
    "InvalidParameterError",
    "NumericalInstabilityError",
    "RegisterStateError",
]
