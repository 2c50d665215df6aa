"""Tests for the discrete s schedule."""

import pytest
import torch

from aqcsim.adiabatic import num_steps_for, step_schedule
from aqcsim.errors import InvalidParameterError


@pytest.mark.parametrize(
    "step_size, expected",
    [
        (0.0005, 2000),
        (0.1, 10),
        (0.3, 4),
        (0.5, 2),
        (0.999, 2),
        (1.0, 0),
        (2.5, 0),
    ],
)
def test_num_steps_for(step_size, expected):
    assert num_steps_for(step_size) == expected


@pytest.mark.parametrize("bad", [0.0, -0.1, float("nan"), float("inf")])
def test_num_steps_rejects_bad_step_size(bad):
    with pytest.raises(InvalidParameterError):
        num_steps_for(bad)


def test_schedule_values():
    schedule = step_schedule(0.25)
    assert schedule.dtype == torch.float64
    assert torch.allclose(schedule, torch.tensor([0.25, 0.5, 0.75, 1.0], dtype=torch.float64))


def test_schedule_clamps_last_step_to_one():
    schedule = step_schedule(0.3)
    assert torch.allclose(schedule, torch.tensor([0.3, 0.6, 0.9, 1.0], dtype=torch.float64))
    assert schedule[-1].item() == 1.0


def test_reference_schedule_ends_at_one():
    schedule = step_schedule(0.0005)
    assert schedule.shape == (2000,)
    assert schedule[0].item() == pytest.approx(0.0005)
    assert schedule[-1].item() == pytest.approx(1.0)
    assert torch.all(schedule[1:] > schedule[:-1])


def test_empty_schedule():
    assert step_schedule(1.0).numel() == 0
