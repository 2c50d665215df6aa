"""Tests for diagnostics, debug mode, devices, and the error hierarchy."""

import pytest
import torch

import aqcsim as aq
from aqcsim.core import Device, resolve_device
from aqcsim.errors import (
    InvalidIndexError,
    InvalidParameterError,
    NumericalInstabilityError,
    RegisterStateError,
    SimulationError,
)


def test_state_norm_batched():
    states = torch.tensor([[1.0, 0.0], [3.0, 4.0]], dtype=torch.complex128)
    assert torch.allclose(aq.state_norm(states), torch.tensor([1.0, 5.0], dtype=torch.float64))


def test_assert_normalized():
    aq.assert_normalized(aq.zero_state(2))
    with pytest.raises(NumericalInstabilityError):
        aq.assert_normalized(2.0 * aq.zero_state(2))
    with pytest.raises(NumericalInstabilityError):
        aq.assert_normalized(torch.tensor([float("nan"), 0.0], dtype=torch.complex128))
    # Within tolerance
    aq.assert_normalized((1.0 + 1e-8) * aq.zero_state(1))


def test_fidelity():
    zero = aq.zero_state(1)
    plus = aq.apply_gate(zero, aq.H(), qubit=0)
    assert aq.fidelity(zero, zero).item() == pytest.approx(1.0)
    assert aq.fidelity(zero, plus).item() == pytest.approx(0.5)
    with pytest.raises(ValueError):
        aq.fidelity(zero, aq.zero_state(2))


def test_debug_toggles():
    initial = aq.is_debug_enabled()
    try:
        aq.set_debug_enabled(True)
        assert aq.is_debug_enabled()
        with aq.debug_context(False):
            assert not aq.is_debug_enabled()
        assert aq.is_debug_enabled()
    finally:
        aq.set_debug_enabled(initial)


def test_devices():
    cpu = aq.device("sv_cpu")
    assert isinstance(cpu, Device)
    assert cpu.complex_dtype == torch.complex128
    assert cpu.as_torch_device() == torch.device("cpu")
    assert aq.default_device().name == "sv_cpu"
    assert resolve_device(None).name == "sv_cpu"
    assert resolve_device("sv_cpu").name == "sv_cpu"
    assert resolve_device(torch.device("cpu")).name == "sv_cpu"
    assert resolve_device(cpu) is cpu

    with pytest.raises(ValueError):
        aq.device("tpu")
    with pytest.raises(TypeError):
        resolve_device(3)


@pytest.mark.skipif(torch.cuda.is_available(), reason="CUDA is available")
def test_cuda_device_unavailable():
    with pytest.raises(RuntimeError):
        aq.device("sv_cuda")


def test_error_hierarchy():
    for error in (
        InvalidIndexError,
        InvalidParameterError,
        NumericalInstabilityError,
        RegisterStateError,
    ):
        assert issubclass(error, SimulationError)
    assert issubclass(InvalidIndexError, ValueError)
    assert issubclass(InvalidParameterError, ValueError)
    assert issubclass(NumericalInstabilityError, ArithmeticError)
    assert issubclass(RegisterStateError, RuntimeError)
