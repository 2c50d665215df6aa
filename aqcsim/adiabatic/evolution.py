"""Adiabatic evolution of a CNF penalty Hamiltonian.

The register is prepared in |->^⊗n on the problem qubits, the ground state
of the driver Σ X_v, and evolved under

    H(s) = s H_P + (1 - s) H_D,   s: 0 -> 1,

with one first-order Trotter step per value of s:

    U(s) ≈ Π_v exp(-i (1-s) dt X_v) · Π_S exp(-i s dt c_S Z_S)
         = Π_v RX_v(2(1-s)dt) · Π_S PARITY_RZ_S(2 s dt c_S).

If dt is small compared with the spectral gap along the path, the final
state concentrates on the ground states of H_P, i.e. the satisfying
assignments. That condition is not checked at runtime.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Tuple

import torch

from aqcsim.circuit import QuantumCircuit
from aqcsim.core.device import Device
from aqcsim.errors import InvalidParameterError
from aqcsim.logging import get_logger
from aqcsim.register import QuantumRegister
from aqcsim.sampling import bits_to_str, marginalize_probs, probs_to_dict
from aqcsim.sat import (
    ANCILLA,
    CNFProblem,
    IsingTerms,
    ising_terms,
    problem_qubits,
    register_size,
    variable_qubit,
)

from .schedules import num_steps_for, step_schedule

logger = get_logger(__name__)

StepCallback = Callable[[int, float, QuantumRegister], None]


@dataclass(frozen=True)
class AnnealConfig:
    """
    Time discretisation of the anneal.

    Attributes
    ----------
    dt:
        Duration of one Trotter step.
    step_size:
        Increment of s per step. The number of steps is ceil(1/step_size),
        with the last increment shortened so the anneal ends at s = 1, or 0
        when step_size >= 1.
    """

    dt: float = 0.05
    step_size: float = 0.0005

    def __post_init__(self) -> None:
        if not math.isfinite(self.dt) or self.dt <= 0:
            raise InvalidParameterError(f"dt must be finite and positive, got {self.dt}.")
        # Validates step_size as a side effect.
        num_steps_for(self.step_size)

    @property
    def num_steps(self) -> int:
        return num_steps_for(self.step_size)

    @property
    def total_time(self) -> float:
        return self.num_steps * self.dt


@dataclass(frozen=True)
class AnnealResult:
    """Outcome of one simulation run."""

    assignment: Dict[int, int]
    final_s: float
    num_steps: int
    qubits: Tuple[int, ...] = field(default=())

    # Compared by value; the assignment dict makes instances unhashable.
    __hash__ = None  # type: ignore[assignment]

    @property
    def bits(self) -> Tuple[int, ...]:
        """Measured bits in qubit order (x1, ..., xn)."""
        qubits = self.qubits or tuple(sorted(self.assignment))
        return tuple(self.assignment[q] for q in qubits)

    @property
    def bitstring(self) -> str:
        return bits_to_str(self.bits)

    def report_lines(self) -> list[str]:
        """Plain-text report: a header then one ``q<index> = <bit>`` line per qubit."""
        qubits = self.qubits or tuple(sorted(self.assignment))
        return ["Measurement results:"] + [f"q{q} = {self.assignment[q]}" for q in qubits]


def build_preparation_circuit(problem: CNFProblem) -> QuantumCircuit:
    """X then H on every problem qubit, giving |-> on each."""
    circuit = QuantumCircuit(register_size(problem))
    for q in problem_qubits(problem):
        circuit.x(q)
        circuit.h(q)
    return circuit


def prepare_minus_state(register: QuantumRegister, qubits: Sequence[int]) -> None:
    """Put each of ``qubits`` into |-> = (|0> - |1>)/sqrt(2), in place."""
    for q in qubits:
        register.apply_gate("X", q)
        register.apply_gate("H", q)


def build_evolution_step(
    problem: CNFProblem,
    s: float,
    dt: float,
    terms: Optional[IsingTerms] = None,
) -> QuantumCircuit:
    """
    One Trotter step at schedule value ``s``.

    The driver part is RX(2(1-s)dt) on every problem qubit. Each penalty
    term c·Z_S follows: RZ(2·s·dt·c) on the qubit itself when S has one
    variable, a PARITY_RZ through the ancilla otherwise.
    """
    if terms is None:
        terms = ising_terms(problem)

    circuit = QuantumCircuit(register_size(problem))
    driver_angle = 2.0 * (1.0 - s) * dt
    for q in problem_qubits(problem):
        circuit.rx(q, driver_angle)

    for variables, coeff in terms.items():
        angle = 2.0 * s * dt * coeff
        qubits = [variable_qubit(v) for v in variables]
        if len(qubits) == 1:
            circuit.rz(qubits[0], angle)
        else:
            circuit.parity_rz(qubits, ANCILLA, angle)
    return circuit


def build_adiabatic_circuit(problem: CNFProblem, config: AnnealConfig) -> QuantumCircuit:
    """
    Full circuit: preparation followed by every evolution step.

    Useful for inspection (gate counts, depth); simulation applies the
    steps one at a time instead.
    """
    circuit = build_preparation_circuit(problem)
    terms = ising_terms(problem)
    for s in step_schedule(config.step_size).tolist():
        circuit.extend(build_evolution_step(problem, s, config.dt, terms))
    return circuit


def adiabatic_evolve(
    register: QuantumRegister,
    problem: CNFProblem,
    config: AnnealConfig,
    callback: Optional[StepCallback] = None,
) -> float:
    """
    Run the Trotterised anneal on ``register`` in place.

    Parameters
    ----------
    register:
        Allocated register of ``register_size(problem)`` qubits, normally
        prepared with :func:`prepare_minus_state`.
    problem:
        CNF problem defining the penalty Hamiltonian.
    config:
        Step duration and schedule increment.
    callback:
        Called as ``callback(step, s, register)`` after each step, with
        ``step`` counting from 1.

    Returns
    -------
    float
        The final value of s (0.0 when there are no steps).
    """
    expected = register_size(problem)
    if register.n_qubits != expected:
        raise InvalidParameterError(
            f"Problem needs a {expected}-qubit register, got {register.n_qubits}."
        )

    schedule = step_schedule(config.step_size).tolist()
    terms = ising_terms(problem)
    n_steps = len(schedule)
    report_every = max(1, n_steps // 10)

    logger.info(
        "Annealing %d variables, %d clauses: %d steps, dt=%g, %d coupling terms",
        problem.num_variables,
        len(problem.clauses),
        n_steps,
        config.dt,
        len(terms),
    )

    s = 0.0
    for step, s in enumerate(schedule, start=1):
        register.run(build_evolution_step(problem, s, config.dt, terms))
        if callback is not None:
            callback(step, s, register)
        if step % report_every == 0:
            logger.debug("step %d/%d s=%.4f norm=%.12f", step, n_steps, s, register.norm())

    logger.info("Anneal finished at s=%.6f", s)
    return s


def _evolved_register(
    problem: CNFProblem,
    config: AnnealConfig,
    device: Device | torch.device | str | None,
) -> Tuple[QuantumRegister, float]:
    register = QuantumRegister(register_size(problem), device=device).allocate()
    try:
        prepare_minus_state(register, problem_qubits(problem))
        final_s = adiabatic_evolve(register, problem, config)
    except Exception:
        register.release()
        raise
    return register, final_s


def _generator(seed: Optional[int]) -> Optional[torch.Generator]:
    if seed is None:
        return None
    generator = torch.Generator()
    generator.manual_seed(int(seed))
    return generator


def run_adiabatic(
    problem: CNFProblem,
    config: Optional[AnnealConfig] = None,
    seed: Optional[int] = None,
    device: Device | torch.device | str | None = None,
) -> AnnealResult:
    """
    Init, prepare, evolve, and measure the problem qubits once.

    The register is released before returning. With a fixed ``seed`` the
    result is reproducible.
    """
    if config is None:
        config = AnnealConfig()

    register, final_s = _evolved_register(problem, config, device)
    try:
        qubits = problem_qubits(problem)
        assignment = register.measure_all(qubits, generator=_generator(seed))
    finally:
        register.release()

    result = AnnealResult(
        assignment=assignment, final_s=final_s, num_steps=config.num_steps, qubits=qubits
    )
    logger.info("Measured %s", result.bitstring)
    return result


def outcome_distribution(
    problem: CNFProblem,
    config: Optional[AnnealConfig] = None,
    device: Device | torch.device | str | None = None,
    tol: float = 0.0,
) -> Dict[str, float]:
    """
    Exact distribution of the problem-qubit readout after the anneal.

    Keys are bitstrings x1...xn; entries with probability <= ``tol`` are
    omitted.
    """
    if config is None:
        config = AnnealConfig()

    register, _ = _evolved_register(problem, config, device)
    try:
        qubits = problem_qubits(problem)
        marg = marginalize_probs(register.probabilities(), register.n_qubits, qubits)
    finally:
        register.release()
    return probs_to_dict(marg, len(qubits), tol=tol)


def sample_assignments(
    problem: CNFProblem,
    config: Optional[AnnealConfig] = None,
    n_runs: int = 100,
    seed: Optional[int] = None,
    device: Device | torch.device | str | None = None,
) -> Dict[str, int]:
    """
    Counts of measured bitstrings x1...xn over ``n_runs`` runs.

    The evolution is deterministic, so it is carried out once; each run
    then measures its own copy of the evolved register.
    """
    if n_runs <= 0:
        raise InvalidParameterError(f"n_runs must be positive, got {n_runs}.")
    if config is None:
        config = AnnealConfig()

    generator = _generator(seed)
    qubits = problem_qubits(problem)
    counts: Dict[str, int] = {}

    register, _ = _evolved_register(problem, config, device)
    try:
        for _ in range(n_runs):
            run = register.copy()
            try:
                outcome = run.measure_all(qubits, generator=generator)
            finally:
                run.release()
            key = bits_to_str(outcome[q] for q in qubits)
            counts[key] = counts.get(key, 0) + 1
    finally:
        register.release()

    logger.info("Sampled %d runs: %s", n_runs, counts)
    return counts
