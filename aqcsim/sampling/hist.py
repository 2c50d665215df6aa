"""Histogram utilities for measurement outcomes."""

from __future__ import annotations

from typing import Dict, Mapping, Sequence

import torch

from aqcsim.errors import InvalidIndexError, InvalidParameterError


def bits_to_str(bits: Sequence[int] | torch.Tensor) -> str:
    """Render bits as a string, first bit first: ``[0, 0, 1] -> '001'``."""
    if isinstance(bits, torch.Tensor):
        if bits.dim() != 1:
            raise InvalidParameterError("bits_to_str expects a 1D tensor of bits.")
        bits = bits.to(torch.int64).detach().cpu().tolist()
    return "".join(str(int(b)) for b in bits)


def bitstring_counts(samples: torch.Tensor) -> Dict[str, int]:
    """
    Count each distinct bitstring in ``samples``.

    Parameters
    ----------
    samples:
        Integer tensor of shape (..., n_shots, n_bits); batch dimensions
        are pooled.
    """
    if samples.dim() < 2:
        raise InvalidParameterError("samples must have at least 2 dimensions (shots, bits).")
    flat = samples.reshape(-1, samples.shape[-1])

    counts: Dict[str, int] = {}
    for row in flat:
        key = bits_to_str(row)
        counts[key] = counts.get(key, 0) + 1
    return counts


def counts_to_probs(counts: Mapping[str, int]) -> Dict[str, float]:
    """Normalise integer counts into a probability distribution."""
    total = sum(counts.values())
    if total <= 0:
        raise InvalidParameterError("Total count must be positive.")
    return {k: v / float(total) for k, v in counts.items()}


def marginalize_probs(
    probs: torch.Tensor,
    n_qubits: int,
    qubits_to_keep: Sequence[int],
) -> torch.Tensor:
    """
    Marginal distribution over a subset of qubits.

    Returns
    -------
    torch.Tensor
        Tensor of shape (..., 2**len(qubits_to_keep)). Bit ``k`` of the
        reduced index is the value of ``qubits_to_keep[k]``.
    """
    if probs.dim() < 1:
        raise InvalidParameterError("probs must have at least one dimension.")
    dim = probs.shape[-1]
    if dim != 2**n_qubits:
        raise InvalidParameterError(
            f"probs last dimension {dim} does not match 2**n_qubits={2**n_qubits}."
        )

    keep = tuple(int(q) for q in qubits_to_keep)
    if not keep:
        raise InvalidParameterError("qubits_to_keep must be non-empty.")
    for q in keep:
        if q < 0 or q >= n_qubits:
            raise InvalidIndexError(
                f"Qubit index {q} in qubits_to_keep is out of bounds for n_qubits={n_qubits}."
            )

    indices = torch.arange(dim, device=probs.device)
    reduced = torch.zeros_like(indices)
    for bit_pos, q in enumerate(keep):
        reduced |= ((indices >> q) & 1) << bit_pos

    marg = probs.new_zeros(probs.shape[:-1] + (2 ** len(keep),))
    return marg.index_add(probs.dim() - 1, reduced, probs)


def probs_to_dict(probs: torch.Tensor, n_bits: int, tol: float = 0.0) -> Dict[str, float]:
    """
    Map a marginal distribution (as returned by :func:`marginalize_probs`)
    to ``{bitstring: probability}``, bit 0 of the reduced index first.
    Entries at or below ``tol`` are omitted.
    """
    if probs.dim() != 1 or probs.shape[0] != 2**n_bits:
        raise InvalidParameterError(
            f"Expected a 1D tensor of length {2**n_bits}, got shape {tuple(probs.shape)}."
        )
    result: Dict[str, float] = {}
    for j, p in enumerate(probs.detach().cpu().tolist()):
        if p > tol:
            result[bits_to_str([(j >> b) & 1 for b in range(n_bits)])] = p
    return result
