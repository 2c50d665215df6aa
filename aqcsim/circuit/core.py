"""Gate operations, circuit IR, and application of operations to states."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

import torch

from aqcsim.backend.statevector import apply_gate, apply_two_qubit_gate, zero_state
from aqcsim.core.device import Device, resolve_device
from aqcsim.errors import InvalidIndexError, InvalidParameterError
from aqcsim.gates import standard as stdgates

SINGLE_QUBIT_GATES = ("I", "X", "Z", "H")
ROTATION_GATES = ("RX", "RZ")
PARITY_GATE = "PARITY_RZ"
SUPPORTED_GATES = SINGLE_QUBIT_GATES + ROTATION_GATES + ("CNOT", PARITY_GATE)


@dataclass(frozen=True)
class GateOp:
    """
    A single gate application.

    Attributes
    ----------
    name:
        Gate name: one of "I", "X", "Z", "H", "RX", "RZ", "CNOT",
        "PARITY_RZ".
    qubits:
        Qubit indices (0-based). For CNOT this is (control, target). For
        PARITY_RZ it is (q_1, ..., q_m, ancilla).
    params:
        Optional tuple of float parameters. Rotations and PARITY_RZ carry
        exactly one angle.
    """

    name: str
    qubits: Tuple[int, ...]
    params: Optional[Tuple[float, ...]] = None

    @property
    def target(self) -> int:
        """Qubit the operation acts on (the ancilla for PARITY_RZ)."""
        return self.qubits[-1]

    @property
    def control(self) -> Optional[int]:
        """Control qubit of a CNOT, None otherwise."""
        if self.name == "CNOT":
            return self.qubits[0]
        return None

    @property
    def angle(self) -> Optional[float]:
        if self.params:
            return self.params[0]
        return None


def validate_op(op: GateOp, n_qubits: int) -> None:
    """
    Check that ``op`` is a well-formed operation on ``n_qubits`` qubits.

    Raises
    ------
    InvalidParameterError
        For unknown gate names, wrong arity, or a missing or non-finite angle.
    InvalidIndexError
        For out-of-range or repeated qubit indices.
    """
    name = op.name
    if name not in SUPPORTED_GATES:
        raise InvalidParameterError(
            f"Unsupported gate name {op.name!r}. Supported gates: {', '.join(SUPPORTED_GATES)}."
        )

    if not op.qubits:
        raise InvalidParameterError("GateOp must act on at least one qubit.")
    for q in op.qubits:
        if q < 0 or q >= n_qubits:
            raise InvalidIndexError(
                f"Qubit index {q} is out of range for this circuit (n_qubits={n_qubits})."
            )
    if len(set(op.qubits)) != len(op.qubits):
        raise InvalidIndexError(f"Gate {name} acts on repeated qubits {op.qubits}.")

    if name in SINGLE_QUBIT_GATES + ROTATION_GATES and len(op.qubits) != 1:
        raise InvalidParameterError(f"Gate {name} acts on exactly one qubit, got {op.qubits}.")
    if name == "CNOT" and len(op.qubits) != 2:
        raise InvalidParameterError(f"CNOT needs (control, target), got {op.qubits}.")
    if name == PARITY_GATE and len(op.qubits) < 2:
        raise InvalidParameterError(
            f"{PARITY_GATE} needs at least one source qubit and an ancilla, got {op.qubits}."
        )

    if name in ROTATION_GATES or name == PARITY_GATE:
        if not op.params or len(op.params) != 1:
            raise InvalidParameterError(f"Gate {name} requires exactly one parameter.")
        if not math.isfinite(op.params[0]):
            raise InvalidParameterError(f"Gate {name} angle must be finite, got {op.params[0]}.")
    elif op.params:
        raise InvalidParameterError(f"Gate {name} takes no parameters, got {op.params}.")


def expand_op(op: GateOp) -> List[GateOp]:
    """
    Lower PARITY_RZ into CNOT fan-in, RZ on the ancilla, and CNOT fan-out.

    With the ancilla in |0>, the fan-in leaves it holding the parity of the
    source qubits, so RZ(θ) on it multiplies each basis state by
    exp(-iθ/2 * (-1)^parity), i.e. applies exp(-iθ/2 * Z_1...Z_m). The
    fan-out in reverse order returns the ancilla to |0>. Other operations
    are returned unchanged.
    """
    if op.name != PARITY_GATE:
        return [op]

    *sources, ancilla = op.qubits
    fan_in = [GateOp("CNOT", (q, ancilla)) for q in sources]
    fan_out = [GateOp("CNOT", (q, ancilla)) for q in reversed(sources)]
    return fan_in + [GateOp("RZ", (ancilla,), op.params)] + fan_out


@lru_cache(maxsize=None)
def _fixed_gate(name: str, dtype: torch.dtype, device: torch.device) -> torch.Tensor:
    if name == "CNOT":
        return stdgates.CNOT(dtype=dtype, device=device, control_first=True)
    return getattr(stdgates, name)(dtype=dtype, device=device)


def _primitive_matrix(op: GateOp, dtype: torch.dtype, device: torch.device) -> torch.Tensor:
    if op.name == "RX":
        return stdgates.RX(op.params[0], dtype=dtype, device=device)
    if op.name == "RZ":
        return stdgates.RZ(op.params[0], dtype=dtype, device=device)
    return _fixed_gate(op.name, dtype, device)


def apply_op(state: torch.Tensor, op: GateOp, n_qubits: int) -> torch.Tensor:
    """Apply one operation (expanding PARITY_RZ) to an unbatched state."""
    validate_op(op, n_qubits)
    for prim in expand_op(op):
        matrix = _primitive_matrix(prim, state.dtype, state.device)
        if prim.name == "CNOT":
            control, target = prim.qubits
            state = apply_two_qubit_gate(
                state, matrix, qubit1=control, qubit2=target, n_qubits=n_qubits
            )
        else:
            state = apply_gate(state, matrix, qubit=prim.qubits[0], n_qubits=n_qubits)
    return state


class QuantumCircuit:
    """
    An ordered list of gate applications on n_qubits.

    The circuit only records operations; nothing is simulated until
    :meth:`simulate_state` is called or the circuit is run on a register.
    """

    def __init__(self, n_qubits: int) -> None:
        if n_qubits <= 0:
            raise InvalidParameterError("QuantumCircuit requires n_qubits >= 1.")

        self._n_qubits = int(n_qubits)
        self._ops: List[GateOp] = []

    @property
    def n_qubits(self) -> int:
        return self._n_qubits

    @property
    def ops(self) -> Tuple[GateOp, ...]:
        """Return a read-only tuple of all gate operations."""
        return tuple(self._ops)

    def add_gate(
        self,
        name: str,
        qubits: Sequence[int],
        params: Optional[Sequence[float]] = None,
    ) -> None:
        """
        Append a gate application to the circuit.

        Parameters
        ----------
        name:
            Gate name (case-insensitive), see :data:`SUPPORTED_GATES`.
        qubits:
            Qubit indices (0-based).
        params:
            Optional numeric parameters (rotation angle).
        """
        p_tuple: Optional[Tuple[float, ...]]
        if params is None:
            p_tuple = None
        else:
            p_tuple = tuple(float(p) for p in params)

        op = GateOp(name=name.upper(), qubits=tuple(int(q) for q in qubits), params=p_tuple)
        validate_op(op, self._n_qubits)
        self._ops.append(op)

    def x(self, qubit: int) -> None:
        self.add_gate("X", [qubit])

    def h(self, qubit: int) -> None:
        self.add_gate("H", [qubit])

    def rx(self, qubit: int, theta: float) -> None:
        self.add_gate("RX", [qubit], [theta])

    def rz(self, qubit: int, theta: float) -> None:
        self.add_gate("RZ", [qubit], [theta])

    def cnot(self, control: int, target: int) -> None:
        self.add_gate("CNOT", [control, target])

    def parity_rz(self, qubits: Sequence[int], ancilla: int, theta: float) -> None:
        """Append exp(-iθ/2 Z_{q_1}...Z_{q_m}) mediated by ``ancilla``."""
        self.add_gate(PARITY_GATE, [*qubits, ancilla], [theta])

    def extend(self, other: "QuantumCircuit") -> None:
        """Append all operations of ``other`` (which must fit this circuit)."""
        if other.n_qubits > self._n_qubits:
            raise InvalidIndexError(
                f"Cannot append a {other.n_qubits}-qubit circuit to a "
                f"{self._n_qubits}-qubit circuit."
            )
        self._ops.extend(other.ops)

    def expanded(self) -> "QuantumCircuit":
        """Return a copy with every PARITY_RZ lowered to CNOT/RZ primitives."""
        new = QuantumCircuit(self._n_qubits)
        for op in self._ops:
            new._ops.extend(expand_op(op))
        return new

    def __len__(self) -> int:
        return len(self._ops)

    def gate_counts(self) -> Dict[str, int]:
        """Return a dictionary mapping gate names to their counts."""
        counts: Dict[str, int] = {}
        for op in self._ops:
            counts[op.name] = counts.get(op.name, 0) + 1
        return counts

    def depth(self) -> int:
        """
        Number of sequential layers of the expanded circuit when gates on
        disjoint qubits run in parallel.
        """
        qubit_layer = [0] * self._n_qubits
        max_layer = 0

        for op in self.expanded().ops:
            layer = max(qubit_layer[q] for q in op.qubits) + 1
            for q in op.qubits:
                qubit_layer[q] = layer
            max_layer = max(max_layer, layer)

        return max_layer

    def simulate_state(
        self,
        device: Optional[Device] = None,
        dtype: Optional[torch.dtype] = None,
        initial_state: Optional[torch.Tensor] = None,
    ) -> torch.Tensor:
        """
        Simulate this circuit, starting from ``initial_state`` or |0...0>.

        Returns
        -------
        state:
            Complex tensor of shape (2**n_qubits,).
        """
        dev = resolve_device(device)
        if initial_state is None:
            state = zero_state(self._n_qubits, device=dev, dtype=dtype)
        else:
            state = initial_state.to(device=dev.as_torch_device(), dtype=dtype or initial_state.dtype)

        for op in self._ops:
            state = apply_op(state, op, self._n_qubits)
        return state

    def to_text_diagram(self) -> str:
        """
        Return a simple ASCII diagram of the circuit.

        Each qubit is a horizontal line and each operation one column.
        CNOT uses '●' for control and '⊕' for target; PARITY_RZ marks its
        source qubits with '●' and the ancilla with 'P'.
        """
        wire_segments: List[List[str]] = [[] for _ in range(self._n_qubits)]

        for op in self._ops:
            for q in range(self._n_qubits):
                wire_segments[q].append("───")

            if op.name == "CNOT":
                control, target = op.qubits
                wire_segments[control][-1] = "─●─"
                wire_segments[target][-1] = "─⊕─"
            elif op.name == PARITY_GATE:
                for q in op.qubits[:-1]:
                    wire_segments[q][-1] = "─●─"
                wire_segments[op.qubits[-1]][-1] = "─P─"
            else:
                label = _DIAGRAM_LABELS.get(op.name, op.name[0])
                wire_segments[op.qubits[0]][-1] = f"─{label}─"

        return "\n".join(
            f"q{q}: " + "".join(wire_segments[q]) for q in range(self._n_qubits)
        )


_DIAGRAM_LABELS = {"RX": "x", "RZ": "z"}
