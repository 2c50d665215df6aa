"""Adiabatic 2-SAT example.

Encodes (¬x1 ∨ x2) ∧ (¬x2 ∨ ¬x3) ∧ (x1 ∨ x3) as a penalty Hamiltonian,
anneals from the transverse-field driver with dt = 0.05 over 2000 steps,
and prints one measured assignment. Repeated runs should print either
q1..q3 = 0, 0, 1 or 1, 1, 0.
"""

from __future__ import annotations

from aqcsim.demo import main

if __name__ == "__main__":
    main()
