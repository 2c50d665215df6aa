"""Sampling and histogram utilities."""

from .bitstrings import indices_to_bitstrings, sample_from_probs
from .hist import (
    bits_to_str,
    bitstring_counts,
    counts_to_probs,
    marginalize_probs,
    probs_to_dict,
)

__all__ = [
    "indices_to_bitstrings",
    "sample_from_probs",
    "bits_to_str",
    "bitstring_counts",
    "counts_to_probs",
    "marginalize_probs",
    "probs_to_dict",
]
