"""aqcsim - PyTorch statevector simulation of adiabatic SAT solving."""

__version__ = "0.1.0"

# Adiabatic evolution
from .adiabatic import (
    AnnealConfig,
    AnnealResult,
    adiabatic_evolve,
    build_adiabatic_circuit,
    build_evolution_step,
    build_preparation_circuit,
    num_steps_for,
    outcome_distribution,
    prepare_minus_state,
    run_adiabatic,
    sample_assignments,
    step_schedule,
)

# Backend operations
from .backend import (
    apply_gate,
    apply_two_qubit_gate,
    collapse_qubit,
    measure_probs,
    qubit_probabilities,
    zero_state,
)

# Circuit IR
from .circuit import GateOp, QuantumCircuit
from .core import Device, default_device, device

# Diagnostics
from .diagnostics import (
    assert_normalized,
    debug_context,
    fidelity,
    is_debug_enabled,
    set_debug_enabled,
    state_norm,
)
from .errors import (
    InvalidIndexError,
    InvalidParameterError,
    NumericalInstabilityError,
    RegisterStateError,
    SimulationError,
)

# Gates
from .gates import CNOT, RX, RZ, H, I, X, Z, is_unitary
from .logging import configure_logging, get_logger, set_log_level
from .operators import PauliSum, PauliTerm
from .register import QuantumRegister

# Problem description
from .sat import (
    Clause,
    CNFProblem,
    Literal,
    driver_hamiltonian,
    ising_terms,
    penalty_hamiltonian,
    reference_problem,
)

__all__ = [
    "__version__",
    "AnnealConfig",
    "AnnealResult",
    "adiabatic_evolve",
    "build_adiabatic_circuit",
    "build_evolution_step",
    "build_preparation_circuit",
    "num_steps_for",
    "outcome_distribution",
    "prepare_minus_state",
    "run_adiabatic",
    "sample_assignments",
    "step_schedule",
    "apply_gate",
    "apply_two_qubit_gate",
    "collapse_qubit",
    "measure_probs",
    "qubit_probabilities",
    "zero_state",
    "GateOp",
    "QuantumCircuit",
    "Device",
    "default_device",
    "device",
    "assert_normalized",
    "debug_context",
    "fidelity",
    "is_debug_enabled",
    "set_debug_enabled",
    "state_norm",
    "SimulationError",
    "InvalidIndexError",
    "InvalidParameterError",
    "NumericalInstabilityError",
    "RegisterStateError",
    "I",
    "X",
    "Z",
    "H",
    "CNOT",
    "RX",
    "RZ",
    "is_unitary",
    "configure_logging",
    "get_logger",
    "set_log_level",
    "PauliTerm",
    "PauliSum",
    "QuantumRegister",
    "Literal",
    "Clause",
    "CNFProblem",
    "reference_problem",
    "ising_terms",
    "penalty_hamiltonian",
    "driver_hamiltonian",
]
