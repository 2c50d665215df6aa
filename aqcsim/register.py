"""Simulated quantum register.

A :class:`QuantumRegister` owns one amplitude vector for the lifetime of a
simulation run. The vector is allocated by :meth:`QuantumRegister.allocate`
(or on entering the register as a context manager) and dropped by
:meth:`QuantumRegister.release`. Gates mutate the register in place.
Measurement samples from the Born distribution and collapses the state;
reading out the register with :meth:`QuantumRegister.measure_all`
finalises it, after which it can no longer be measured.
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import torch

from aqcsim.backend.statevector import (
    collapse_qubit,
    measure_probs,
    qubit_probabilities,
    zero_state,
)
from aqcsim.circuit import GateOp, QuantumCircuit, apply_op
from aqcsim.core.device import Device, resolve_device
from aqcsim.diagnostics import assert_normalized, state_norm
from aqcsim.errors import InvalidIndexError, InvalidParameterError, RegisterStateError
from aqcsim.logging import get_logger

logger = get_logger(__name__)


class QuantumRegister:
    """
    A register of ``n_qubits`` qubits backed by a dense statevector.

    Parameters
    ----------
    n_qubits:
        Number of qubits (>= 1).
    device:
        Device specification; defaults to the CPU statevector device.
    dtype:
        Complex dtype of the amplitudes; defaults to the device's complex
        dtype (complex128).

    Example
    -------
    >>> with QuantumRegister(2) as reg:
    ...     reg.apply_gate("H", 0)
    ...     reg.apply_gate("CNOT", 1, control=0)
    ...     bits = reg.measure_all([0, 1])
    """

    def __init__(
        self,
        n_qubits: int,
        device: Device | torch.device | str | None = None,
        dtype: Optional[torch.dtype] = None,
    ) -> None:
        if n_qubits < 1:
            raise InvalidParameterError(f"n_qubits must be >= 1, got {n_qubits}")
        self._n_qubits = int(n_qubits)
        self._device = resolve_device(device)
        self._dtype = dtype or self._device.complex_dtype
        self._state: Optional[torch.Tensor] = None
        self._finalized = False

    @property
    def n_qubits(self) -> int:
        return self._n_qubits

    @property
    def allocated(self) -> bool:
        return self._state is not None

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def state(self) -> torch.Tensor:
        """The current amplitude vector, shape (2**n_qubits,)."""
        if self._state is None:
            raise RegisterStateError("Register is not allocated.")
        return self._state

    def allocate(self) -> "QuantumRegister":
        """Allocate the amplitude vector in |0...0>."""
        if self._state is not None:
            raise RegisterStateError("Register is already allocated.")
        self._state = zero_state(self._n_qubits, device=self._device, dtype=self._dtype)
        self._finalized = False
        logger.debug("Allocated %d-qubit register on %s", self._n_qubits, self._device.name)
        return self

    def release(self) -> None:
        """Drop the amplitude vector. Releasing twice is a no-op."""
        if self._state is not None:
            logger.debug("Released %d-qubit register", self._n_qubits)
        self._state = None

    def __enter__(self) -> "QuantumRegister":
        return self.allocate()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def copy(self) -> "QuantumRegister":
        """Return an independent register holding a copy of the current state."""
        new = QuantumRegister(self._n_qubits, device=self._device, dtype=self._dtype)
        new._state = self.state.clone()
        new._finalized = self._finalized
        return new

    def _check_qubit(self, qubit: int) -> None:
        if qubit < 0 or qubit >= self._n_qubits:
            raise InvalidIndexError(
                f"qubit index {qubit} out of range [0, {self._n_qubits})"
            )

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def apply(self, op: GateOp) -> None:
        """Apply one gate operation in place."""
        self._state = apply_op(self.state, op, self._n_qubits)

    def apply_gate(
        self,
        name: str,
        target: int,
        control: Optional[int] = None,
        angle: Optional[float] = None,
    ) -> None:
        """
        Apply a named gate to ``target``.

        ``control`` is required for CNOT and ``angle`` for RX/RZ.
        """
        qubits = (target,) if control is None else (control, target)
        params = None if angle is None else (float(angle),)
        self.apply(GateOp(name=name.upper(), qubits=qubits, params=params))

    def run(self, circuit: QuantumCircuit) -> None:
        """Apply every operation of ``circuit`` in order."""
        if circuit.n_qubits != self._n_qubits:
            raise InvalidParameterError(
                f"Circuit acts on {circuit.n_qubits} qubits, register has {self._n_qubits}."
            )
        state = self.state
        for op in circuit.ops:
            state = apply_op(state, op, self._n_qubits)
        self._state = state

    # ------------------------------------------------------------------
    # Norm checks
    # ------------------------------------------------------------------

    def norm(self) -> float:
        return float(state_norm(self.state).item())

    def check_normalized(self, atol: float = 1e-6) -> None:
        """Raise NumericalInstabilityError if the norm has drifted past ``atol``."""
        assert_normalized(self.state, atol=atol)

    def renormalize(self) -> float:
        """Rescale the state to unit norm and return the norm it had before."""
        norm = self.norm()
        if norm == 0.0:
            raise InvalidParameterError("Cannot renormalize a zero state.")
        if abs(norm - 1.0) > 1e-6:
            logger.warning("Renormalizing register with norm %.12f", norm)
        self._state = self.state / norm
        return norm

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------

    def probabilities(self) -> torch.Tensor:
        """Born-rule probabilities over all 2**n_qubits basis states."""
        return measure_probs(self.state, self._n_qubits)

    def measure(self, qubit: int, generator: Optional[torch.Generator] = None) -> int:
        """
        Measure one qubit in the computational basis and collapse the state.

        Raises
        ------
        RegisterStateError
            If the register has already been finalised.
        """
        if self._finalized:
            raise RegisterStateError("Register has already been measured out.")
        self._check_qubit(qubit)

        p = qubit_probabilities(self.state, qubit, self._n_qubits).to(torch.float64).cpu()
        outcome = int(torch.multinomial(p, num_samples=1, generator=generator).item())
        self._state = collapse_qubit(self.state, qubit, outcome, self._n_qubits)
        return outcome

    def measure_all(
        self,
        qubits: Optional[Sequence[int]] = None,
        generator: Optional[torch.Generator] = None,
    ) -> Dict[int, int]:
        """
        Measure ``qubits`` (default: all) in order and finalise the register.

        Returns
        -------
        Dict[int, int]
            Mapping from qubit index to the observed bit.
        """
        if self._finalized:
            raise RegisterStateError("Register has already been measured out.")
        if qubits is None:
            qubits = range(self._n_qubits)
        qubits = [int(q) for q in qubits]
        # Reject bad indices before any qubit is collapsed.
        for q in qubits:
            self._check_qubit(q)
        results = {q: self.measure(q, generator=generator) for q in qubits}
        self._finalized = True
        return results
