"""Tests for bitstring sampling and histogram utilities."""

from __future__ import annotations

import pytest
import torch

from aqcsim.errors import InvalidIndexError, InvalidParameterError
from aqcsim.sampling import (
    bits_to_str,
    bitstring_counts,
    counts_to_probs,
    indices_to_bitstrings,
    marginalize_probs,
    probs_to_dict,
    sample_from_probs,
)


def test_indices_to_bitstrings() -> None:
    indices = torch.tensor([0, 5])
    bits = indices_to_bitstrings(indices, n_qubits=3)
    assert bits.tolist() == [[0, 0, 0], [1, 0, 1]]

    subset = indices_to_bitstrings(indices, n_qubits=3, qubits=[2, 0])
    assert subset.tolist() == [[0, 0], [1, 1]]

    with pytest.raises(InvalidIndexError):
        indices_to_bitstrings(indices, n_qubits=3, qubits=[3])


def test_sample_from_probs_deterministic(torch_rng) -> None:
    probs = torch.zeros(8, dtype=torch.float64)
    probs[6] = 1.0
    samples = sample_from_probs(probs, n_qubits=3, n_shots=10, generator=torch_rng)
    assert samples.shape == (10, 3)
    assert torch.all(samples == torch.tensor([0, 1, 1]))


def test_sample_from_probs_batched(torch_rng) -> None:
    probs = torch.tensor([[1.0, 0.0, 0.0, 0.0], [0.0, 0.0, 0.0, 2.0]], dtype=torch.float64)
    samples = sample_from_probs(probs, n_qubits=2, n_shots=5, generator=torch_rng)
    assert samples.shape == (2, 5, 2)
    assert torch.all(samples[0] == 0)
    assert torch.all(samples[1] == 1)


def test_sample_from_probs_errors() -> None:
    with pytest.raises(InvalidParameterError):
        sample_from_probs(torch.zeros(4), n_qubits=2, n_shots=3)
    with pytest.raises(InvalidParameterError):
        sample_from_probs(torch.ones(4), n_qubits=3, n_shots=3)
    with pytest.raises(InvalidParameterError):
        sample_from_probs(torch.ones(4), n_qubits=2, n_shots=0)


def test_bits_to_str() -> None:
    assert bits_to_str([0, 0, 1]) == "001"
    assert bits_to_str(torch.tensor([1, 1, 0])) == "110"
    with pytest.raises(InvalidParameterError):
        bits_to_str(torch.zeros(2, 2))


def test_bitstring_counts_and_probs() -> None:
    samples = torch.tensor(
        [
            [0, 0, 1],
            [1, 1, 0],
            [0, 0, 1],
            [0, 0, 1],
        ],
        dtype=torch.int64,
    )
    counts = bitstring_counts(samples)
    assert counts == {"001": 3, "110": 1}

    probs = counts_to_probs(counts)
    assert probs["001"] == pytest.approx(0.75)
    assert probs["110"] == pytest.approx(0.25)

    with pytest.raises(InvalidParameterError):
        counts_to_probs({})


def test_marginalize_probs() -> None:
    probs = torch.tensor([0.1, 0.2, 0.3, 0.4], dtype=torch.float64)

    marg = marginalize_probs(probs, n_qubits=2, qubits_to_keep=[1])
    assert torch.allclose(marg, torch.tensor([0.3, 0.7], dtype=torch.float64))

    # Bit k of the reduced index is qubits_to_keep[k]
    swapped = marginalize_probs(probs, n_qubits=2, qubits_to_keep=[1, 0])
    assert torch.allclose(swapped, torch.tensor([0.1, 0.3, 0.2, 0.4], dtype=torch.float64))

    batched = marginalize_probs(torch.stack([probs, probs.flip(0)]), n_qubits=2, qubits_to_keep=[0])
    assert batched.shape == (2, 2)
    assert torch.allclose(batched[1], torch.tensor([0.6, 0.4], dtype=torch.float64))

    with pytest.raises(InvalidIndexError):
        marginalize_probs(probs, n_qubits=2, qubits_to_keep=[2])


def test_probs_to_dict() -> None:
    probs = torch.tensor([0.1, 0.3, 0.2, 0.4], dtype=torch.float64)
    assert probs_to_dict(probs, n_bits=2) == pytest.approx(
        {"00": 0.1, "10": 0.3, "01": 0.2, "11": 0.4}
    )
    assert set(probs_to_dict(probs, n_bits=2, tol=0.25)) == {"10", "11"}

    with pytest.raises(InvalidParameterError):
        probs_to_dict(probs, n_bits=3)
