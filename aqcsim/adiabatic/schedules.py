"""Discrete schedules for the annealing parameter s."""

from __future__ import annotations

import math

import torch

from aqcsim.core.device import default_device
from aqcsim.errors import InvalidParameterError

# Slack for 1/step_size landing just above an integer, e.g. 1/0.0005.
_STEP_COUNT_SLACK = 1e-9


def num_steps_for(step_size: float) -> int:
    """
    Number of evolution steps for a given increment of s.

    ``ceil(1 / step_size)`` for ``step_size < 1``, so the schedule always
    reaches s = 1; a step size of 1 or more gives zero steps, so the
    evolution loop is skipped entirely.

    Raises
    ------
    InvalidParameterError
        If step_size is not a finite positive number.
    """
    step_size = float(step_size)
    if not math.isfinite(step_size) or step_size <= 0.0:
        raise InvalidParameterError(
            f"step_size must be finite and positive, got {step_size}."
        )
    if step_size >= 1.0:
        return 0
    return int(math.ceil(1.0 / step_size - _STEP_COUNT_SLACK))


def step_schedule(step_size: float, device: torch.device | None = None) -> torch.Tensor:
    """
    Values taken by s over the evolution: s_k = min(k * step_size, 1), k = 1..N.

    s starts at 0 and is incremented before each step, so the first step
    already uses s_1 = step_size and the last uses s_N = 1 exactly. When
    1/step_size is not an integer the final increment is shortened.

    Returns
    -------
    torch.Tensor
        1D float64 tensor of shape (N,), strictly increasing. Empty when
        N = 0.
    """
    n_steps = num_steps_for(step_size)
    if device is None:
        device = default_device().as_torch_device()

    k = torch.arange(1, n_steps + 1, dtype=torch.float64, device=device)
    schedule = torch.clamp(k * float(step_size), max=1.0)
    if n_steps:
        schedule[-1] = 1.0
    return schedule
