"""Bitstring sampling from computational-basis distributions."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import torch

from aqcsim.errors import InvalidIndexError, InvalidParameterError


def indices_to_bitstrings(
    indices: torch.Tensor,
    n_qubits: int,
    qubits: Optional[Sequence[int]] = None,
) -> torch.Tensor:
    """
    Convert integer outcome indices into bit arrays.

    Parameters
    ----------
    indices:
        Integer tensor of shape (..., n_shots) with values in [0, 2**n_qubits).
    n_qubits:
        Total number of qubits in the underlying system.
    qubits:
        Qubits to keep, in output order. If None, all qubits
        [0, ..., n_qubits-1] are kept.

    Returns
    -------
    torch.Tensor
        Integer tensor of shape (..., n_shots, len(qubits)) with bits
        in {0, 1}; column k holds bit ``qubits[k]`` of the index.
    """
    if qubits is None:
        qubits_tuple: Tuple[int, ...] = tuple(range(n_qubits))
    else:
        qubits_tuple = tuple(int(q) for q in qubits)
    if not qubits_tuple:
        raise InvalidParameterError("qubits must be non-empty if provided.")

    indices = indices.to(torch.int64)
    result = torch.empty(indices.shape + (len(qubits_tuple),), dtype=torch.int64, device=indices.device)

    for k, q in enumerate(qubits_tuple):
        if q < 0 or q >= n_qubits:
            raise InvalidIndexError(
                f"Requested qubit index {q} is out of bounds for n_qubits={n_qubits}."
            )
        result[..., k] = (indices >> q) & 1

    return result


def sample_from_probs(
    probs: torch.Tensor,
    n_qubits: int,
    n_shots: int,
    qubits: Optional[Sequence[int]] = None,
    generator: Optional[torch.Generator] = None,
) -> torch.Tensor:
    """
    Sample bitstrings from a probability distribution over basis states.

    Parameters
    ----------
    probs:
        Tensor of shape (..., 2**n_qubits) of non-negative weights.
    n_qubits:
        Total number of qubits for this distribution.
    n_shots:
        Number of shots per batch element.
    qubits:
        Qubits to report, in output order. If None, all qubits.
    generator:
        Optional CPU torch.Generator for reproducible sampling.

    Returns
    -------
    torch.Tensor
        Integer tensor of shape (..., n_shots, len(qubits)).
    """
    if probs.dim() < 1:
        raise InvalidParameterError("probs must have at least one dimension.")
    dim = probs.shape[-1]
    if dim != 2**n_qubits:
        raise InvalidParameterError(
            f"probs last dimension {dim} does not match 2**n_qubits={2**n_qubits}."
        )
    if n_shots <= 0:
        raise InvalidParameterError("n_shots must be a positive integer.")

    probs_flat = probs.reshape(-1, dim).to(torch.float64).cpu()
    sums = probs_flat.sum(dim=-1, keepdim=True)
    if not torch.all(sums > 0):
        raise InvalidParameterError("Probability distribution has zero total mass.")

    indices_flat = torch.multinomial(
        probs_flat / sums,
        num_samples=n_shots,
        replacement=True,
        generator=generator,
    )
    indices = indices_flat.reshape(probs.shape[:-1] + (n_shots,))
    return indices_to_bitstrings(indices, n_qubits=n_qubits, qubits=qubits)
