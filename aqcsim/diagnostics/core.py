"""Norm and overlap checks for statevectors."""

from __future__ import annotations

import torch

from aqcsim.errors import NumericalInstabilityError


def state_norm(state: torch.Tensor) -> torch.Tensor:
    """
    Compute the L2 norm of a statevector.

    The last dimension is taken to be the Hilbert-space index.

    Parameters
    ----------
    state:
        Complex tensor with shape (..., dim).

    Returns
    -------
    torch.Tensor
        Real tensor with shape (...) giving the norm for each batch
        element.
    """
    if state.dim() < 1:
        raise ValueError("state_norm expects a tensor with at least 1 dimension.")

    norm_sq = (state.conj() * state).sum(dim=-1).real
    return torch.sqrt(norm_sq)


def assert_normalized(
    state: torch.Tensor,
    atol: float = 1e-6,
) -> None:
    """
    Check that a statevector has unit norm within ``atol``.

    Raises
    ------
    NumericalInstabilityError
        If the norm is non-finite or differs from one by more than ``atol``.
    """
    norms = state_norm(state)
    if not torch.all(torch.isfinite(norms)):
        raise NumericalInstabilityError("State norm contains non-finite values.")

    if not torch.allclose(norms, torch.ones_like(norms), atol=atol, rtol=0.0):
        raise NumericalInstabilityError(
            f"State is not normalized within tolerance {atol}. "
            f"Norms found: {norms.detach().cpu().tolist()}"
        )


def fidelity(state_a: torch.Tensor, state_b: torch.Tensor) -> torch.Tensor:
    """Pure-state fidelity ``|<a|b>|^2`` along the last dimension."""
    if state_a.shape != state_b.shape:
        raise ValueError("fidelity expects tensors with the same shape.")
    inner = (state_a.conj() * state_b).sum(dim=-1)
    return inner.abs() ** 2
