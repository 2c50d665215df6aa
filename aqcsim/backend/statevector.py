"""Statevector backend for pure quantum states.

Convention: qubit 0 is the least significant bit (LSB) of the
computational-basis index. In a 4-qubit register the basis state
|q3 q2 q1 q0> has index 8*q3 + 4*q2 + 2*q1 + q0.

Gates are applied by reshaping the amplitude vector so that the target
qubit(s) get their own tensor axis and contracting with the gate matrix,
which avoids ever building a 2**n x 2**n operator.
"""

from __future__ import annotations

import math

import torch

from ..core.device import Device, resolve_device
from ..diagnostics import assert_normalized, is_debug_enabled
from ..errors import InvalidIndexError, InvalidParameterError


def zero_state(
    n_qubits: int,
    batch_shape: tuple[int, ...] | None = None,
    device: Device | torch.device | str | None = None,
    dtype: torch.dtype | None = None,
) -> torch.Tensor:
    """
    Create the all-zero state |0...0> for n_qubits.

    The statevector has shape (*batch_shape, 2**n_qubits). The amplitude at
    index 0 is 1+0j, all others are 0.

    Args:
        n_qubits: Number of qubits. Must be >= 1.
        batch_shape: Optional batch dimensions. If None, no batch dimension.
        device: Device specification. Can be Device, str, torch.device, or None.
        dtype: Complex dtype. Defaults to the device's complex dtype.

    Returns:
        A complex tensor of shape (*batch_shape, 2**n_qubits).

    Raises:
        InvalidParameterError: If n_qubits < 1.
    """
    if n_qubits < 1:
        raise InvalidParameterError(f"n_qubits must be >= 1, got {n_qubits}")

    qdevice = resolve_device(device)
    if dtype is None:
        dtype = qdevice.complex_dtype
    if batch_shape is None:
        batch_shape = ()

    dim = 2**n_qubits
    state = torch.zeros((*batch_shape, dim), dtype=dtype, device=qdevice.as_torch_device())
    state[..., 0] = 1.0 + 0.0j
    return state


def _resolve_n_qubits(state: torch.Tensor, n_qubits: int | None) -> int:
    if not torch.is_complex(state):
        raise InvalidParameterError(f"state must be complex dtype, got {state.dtype}")

    dim = state.shape[-1]
    if n_qubits is None:
        n_qubits = int(math.log2(dim))
        if 2**n_qubits != dim:
            raise InvalidParameterError(
                f"state dimension {dim} is not a power of 2. "
                "Please specify n_qubits explicitly."
            )
    elif 2**n_qubits != dim:
        raise InvalidParameterError(
            f"state dimension {dim} does not match 2**n_qubits = {2**n_qubits}"
        )
    return n_qubits


def _check_qubit(qubit: int, n_qubits: int, label: str = "qubit") -> None:
    if qubit < 0 or qubit >= n_qubits:
        raise InvalidIndexError(f"{label} index {qubit} out of range [0, {n_qubits})")


def apply_gate(
    state: torch.Tensor,
    gate: torch.Tensor,
    qubit: int,
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Apply a single-qubit gate to one qubit of the statevector.

    Args:
        state: Statevector tensor of shape (..., 2**n_qubits) with complex dtype.
        gate: Single-qubit gate matrix of shape (2, 2).
        qubit: Index of the qubit to apply the gate to (0 = LSB).
        n_qubits: Number of qubits. If None, inferred from state.shape[-1].

    Returns:
        A new statevector tensor with the gate applied.

    Raises:
        InvalidParameterError: If the gate shape is not (2, 2) or the state
            dimension is not a power of 2.
        InvalidIndexError: If the qubit index is out of range.
    """
    if gate.shape != (2, 2):
        raise InvalidParameterError(f"gate must have shape (2, 2), got {tuple(gate.shape)}")

    n_qubits = _resolve_n_qubits(state, n_qubits)
    _check_qubit(qubit, n_qubits)

    dim = state.shape[-1]
    batch_shape = state.shape[:-1]
    batch_size = math.prod(batch_shape) if batch_shape else 1

    # (batch, left, 2, right) isolates the target bit
    left_size = 2 ** (n_qubits - 1 - qubit)
    right_size = 2**qubit
    state_view = state.reshape(batch_size, left_size, 2, right_size)

    transformed = torch.einsum("oq,blqr->blor", gate.to(state.dtype), state_view)
    new_state = transformed.reshape(*batch_shape, dim)

    if is_debug_enabled():
        assert_normalized(new_state)

    return new_state


def _swap_gate_qubit_order(gate: torch.Tensor) -> torch.Tensor:
    """Swap qubit order in a two-qubit gate matrix."""
    return gate.reshape(2, 2, 2, 2).permute(1, 0, 3, 2).reshape(4, 4).contiguous()


def apply_two_qubit_gate(
    state: torch.Tensor,
    gate: torch.Tensor,
    qubit1: int,
    qubit2: int,
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Apply a two-qubit gate to qubit1 and qubit2 in the statevector.

    The gate matrix is indexed as |q1 q2> where q1 = qubit1 and q2 = qubit2,
    i.e. index = 2*b_q1 + b_q2. For CNOT(control_first=True), qubit1 is the
    control and qubit2 the target, whatever their relative order.

    Raises:
        InvalidParameterError: If the gate shape is not (4, 4).
        InvalidIndexError: If either index is out of range or they coincide.
    """
    if gate.shape != (4, 4):
        raise InvalidParameterError(f"gate must have shape (4, 4), got {tuple(gate.shape)}")

    n_qubits = _resolve_n_qubits(state, n_qubits)
    if qubit1 == qubit2:
        raise InvalidIndexError(
            f"qubit1 and qubit2 must be distinct, got {qubit1} and {qubit2}"
        )
    _check_qubit(qubit1, n_qubits, "qubit1")
    _check_qubit(qubit2, n_qubits, "qubit2")

    dim = state.shape[-1]
    batch_shape = state.shape[:-1]
    batch_size = math.prod(batch_shape) if batch_shape else 1

    q_hi, q_lo = (qubit1, qubit2) if qubit1 > qubit2 else (qubit2, qubit1)
    gate_matrix = gate if qubit1 > qubit2 else _swap_gate_qubit_order(gate)
    gate_matrix = gate_matrix.to(state.dtype)

    left_size = 2 ** (n_qubits - q_hi - 1)
    mid_size = 2 ** (q_hi - q_lo - 1)
    right_size = 2**q_lo

    if mid_size == 1:
        state_view = state.reshape(batch_size, left_size, 4, right_size)
        transformed = torch.einsum("oq,blqr->blor", gate_matrix, state_view)
    else:
        state_view = state.reshape(batch_size, left_size, 2, mid_size, 2, right_size)
        transformed = torch.einsum(
            "opij,blimjr->blompr", gate_matrix.reshape(2, 2, 2, 2), state_view
        )

    new_state = transformed.reshape(*batch_shape, dim)

    if is_debug_enabled():
        assert_normalized(new_state)

    return new_state


def measure_probs(
    state: torch.Tensor,
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Compute the probability distribution over computational basis states.

    The probability of basis state |i> is |<i|psi>|^2 = |state[i]|^2,
    normalised along the last dimension.
    """
    _resolve_n_qubits(state, n_qubits)

    probs = torch.abs(state) ** 2
    probs_sum = probs.sum(dim=-1, keepdim=True)
    return probs / torch.clamp(probs_sum, min=1e-12)


def qubit_probabilities(
    state: torch.Tensor,
    qubit: int,
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Marginal probabilities (P(0), P(1)) of one qubit of an unbatched state.

    Returns:
        Real tensor of shape (2,).
    """
    n_qubits = _resolve_n_qubits(state, n_qubits)
    _check_qubit(qubit, n_qubits)

    probs = measure_probs(state, n_qubits).reshape(2 ** (n_qubits - 1 - qubit), 2, 2**qubit)
    return probs.sum(dim=(0, 2))


def collapse_qubit(
    state: torch.Tensor,
    qubit: int,
    outcome: int,
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Project an unbatched state onto ``qubit == outcome`` and renormalise.

    Raises:
        InvalidParameterError: If outcome is not 0 or 1, or the outcome has
            zero probability.
        InvalidIndexError: If the qubit index is out of range.
    """
    if outcome not in (0, 1):
        raise InvalidParameterError(f"outcome must be 0 or 1, got {outcome!r}")

    n_qubits = _resolve_n_qubits(state, n_qubits)
    _check_qubit(qubit, n_qubits)

    dim = state.shape[-1]
    view = state.reshape(2 ** (n_qubits - 1 - qubit), 2, 2**qubit).clone()
    view[:, 1 - outcome, :] = 0.0

    collapsed = view.reshape(dim)
    norm = torch.linalg.vector_norm(collapsed)
    if norm.item() == 0.0:
        raise InvalidParameterError(
            f"outcome {outcome} on qubit {qubit} has zero probability"
        )
    return collapsed / norm


__all__ = [
    "zero_state",
    "apply_gate",
    "apply_two_qubit_gate",
    "measure_probs",
    "qubit_probabilities",
    "collapse_qubit",
]
