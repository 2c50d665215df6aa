"""Pytest configuration and shared fixtures.

This module provides:
- A deterministic torch RNG fixture and global numpy/torch seeding
- The reference 2-SAT problem and its annealed outcome distribution
"""

import os

import numpy as np
import pytest
import torch

from aqcsim.adiabatic import AnnealConfig, outcome_distribution
from aqcsim.sat import CNFProblem, reference_problem


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Deterministic CPU torch RNG seeded from TEST_RNG_SEED (default: 0)."""
    generator = torch.Generator()
    generator.manual_seed(_seed())
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed the global numpy and torch RNGs before every test."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(_seed())


@pytest.fixture(scope="session")
def reference() -> CNFProblem:
    return reference_problem()


@pytest.fixture(scope="session")
def reference_distribution(reference: CNFProblem) -> dict:
    """Exact readout distribution of the full 2000-step reference anneal."""
    return outcome_distribution(reference, AnnealConfig(dt=0.05, step_size=0.0005))
