"""Standard gate matrices used by the annealing circuits."""

from __future__ import annotations

import cmath
import math

import torch

from aqcsim.errors import InvalidParameterError


def _defaults(
    dtype: torch.dtype | None, device: torch.device | None
) -> tuple[torch.dtype, torch.device]:
    if dtype is None:
        dtype = torch.complex128
    if device is None:
        device = torch.device("cpu")
    return dtype, device


def _angle(theta: float) -> float:
    value = float(theta)
    if not math.isfinite(value):
        raise InvalidParameterError(f"Rotation angle must be finite, got {theta!r}.")
    return value


def I(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Identity gate (single-qubit)."""
    dtype, device = _defaults(dtype, device)
    return torch.eye(2, dtype=dtype, device=device)


def X(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-X gate (bit-flip, NOT gate)."""
    dtype, device = _defaults(dtype, device)
    return torch.tensor([[0.0, 1.0], [1.0, 0.0]], dtype=dtype, device=device)


def Z(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Z gate (phase-flip)."""
    dtype, device = _defaults(dtype, device)
    return torch.tensor([[1.0, 0.0], [0.0, -1.0]], dtype=dtype, device=device)


def H(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """
    Hadamard gate.

    Applied after X it maps |0> to |-> = (|0> - |1>)/sqrt(2), the ground
    state of the transverse-field driver.
    """
    dtype, device = _defaults(dtype, device)
    sqrt2_inv = 1.0 / math.sqrt(2.0)
    return torch.tensor(
        [[sqrt2_inv, sqrt2_inv], [sqrt2_inv, -sqrt2_inv]], dtype=dtype, device=device
    )


def CNOT(
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
    control_first: bool = True,
) -> torch.Tensor:
    """
    CNOT gate (controlled-NOT, controlled-X).

    The matrix is ordered |00>, |01>, |10>, |11> where the first qubit of the
    pair is the control when ``control_first`` is True, and the target
    otherwise.

    Args:
        dtype: Complex dtype for the gate matrix. Defaults to torch.complex128.
        device: PyTorch device. Defaults to torch.device("cpu").
        control_first: Whether the first qubit of the pair is the control.

    Returns:
        A (4, 4) complex tensor representing the CNOT gate.
    """
    dtype, device = _defaults(dtype, device)

    if control_first:
        # |10> <-> |11>
        matrix = [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
            [0.0, 0.0, 1.0, 0.0],
        ]
    else:
        # |01> <-> |11>
        matrix = [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
        ]
    return torch.tensor(matrix, dtype=dtype, device=device)


def RX(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Rotation gate around the X-axis: RX(θ) = exp(-iθX/2).

    Matrix form:
        [[cos(θ/2), -i sin(θ/2)],
         [-i sin(θ/2), cos(θ/2)]]

    One driver term of a Trotter step, exp(-i (1-s) dt X), is RX(2(1-s)dt).

    Args:
        theta: Rotation angle in radians.
        dtype: Complex dtype for the gate matrix. Defaults to torch.complex128.
        device: PyTorch device. Defaults to torch.device("cpu").

    Raises:
        InvalidParameterError: If theta is not finite.
    """
    dtype, device = _defaults(dtype, device)
    half_theta = _angle(theta) / 2.0
    cos_half = math.cos(half_theta)
    sin_half = math.sin(half_theta)
    return torch.tensor(
        [[cos_half, -1.0j * sin_half], [-1.0j * sin_half, cos_half]],
        dtype=dtype,
        device=device,
    )


def RZ(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Rotation gate around the Z-axis: RZ(θ) = exp(-iθZ/2).

    Matrix form:
        [[exp(-iθ/2), 0],
         [0, exp(iθ/2)]]

    Raises:
        InvalidParameterError: If theta is not finite.
    """
    dtype, device = _defaults(dtype, device)
    half_theta = _angle(theta) / 2.0
    return torch.tensor(
        [[cmath.exp(-1.0j * half_theta), 0.0], [0.0, cmath.exp(1.0j * half_theta)]],
        dtype=dtype,
        device=device,
    )


def is_unitary(matrix: torch.Tensor, atol: float = 1e-6) -> bool:
    """
    Check if a matrix is unitary within a given tolerance (U†U = I).

    Args:
        matrix: Tensor of shape (..., n, n).
        atol: Absolute tolerance for the check.
    """
    if matrix.shape[-1] != matrix.shape[-2]:
        return False

    product = torch.matmul(matrix.conj().transpose(-1, -2), matrix)
    identity = torch.eye(matrix.shape[-1], dtype=matrix.dtype, device=matrix.device)
    if product.ndim > 2:
        identity = identity.expand(product.shape)

    return bool(torch.all(torch.abs(product - identity) < atol).item())
