"""Adiabatic evolution for CNF penalty Hamiltonians."""

from .evolution import (
    AnnealConfig,
    AnnealResult,
    StepCallback,
    adiabatic_evolve,
    build_adiabatic_circuit,
    build_evolution_step,
    build_preparation_circuit,
    outcome_distribution,
    prepare_minus_state,
    run_adiabatic,
    sample_assignments,
)
from .schedules import num_steps_for, step_schedule

__all__ = [
    "num_steps_for",
    "step_schedule",
    "AnnealConfig",
    "AnnealResult",
    "StepCallback",
    "build_preparation_circuit",
    "prepare_minus_state",
    "build_evolution_step",
    "build_adiabatic_circuit",
    "adiabatic_evolve",
    "run_adiabatic",
    "outcome_distribution",
    "sample_assignments",
]
