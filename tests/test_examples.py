"""Smoke tests for example scripts.

These tests run the example scripts in a subprocess and check their
printed output.
"""

from __future__ import annotations

import io
import os
import re
import subprocess
import sys
from pathlib import Path

import pytest

from aqcsim import demo
from aqcsim.errors import InvalidParameterError

# Determine the repo root
ROOT = Path(__file__).resolve().parents[1]


def test_two_sat_adiabatic_example_runs() -> None:
    """Test that examples/two_sat_adiabatic.py prints one measured assignment."""
    script = ROOT / "examples" / "two_sat_adiabatic.py"
    assert script.exists(), f"Example script not found: {script}"

    env = dict(os.environ, AQCSIM_SEED="11")
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    result = subprocess.run(
        [sys.executable, str(script)],
        capture_output=True,
        text=True,
        check=False,
        timeout=300,  # 2000 Trotter steps
        env=env,
    )

    assert result.returncode == 0, (
        f"Example script failed with return code {result.returncode}.\n"
        f"STDOUT:\n{result.stdout}\n"
        f"STDERR:\n{result.stderr}"
    )

    lines = result.stdout.strip().splitlines()
    assert lines[0] == "Measurement results:"
    assert len(lines) == 4
    for index, line in enumerate(lines[1:], start=1):
        assert re.fullmatch(rf"q{index} = [01]", line), line


def test_demo_main_writes_to_stream(monkeypatch) -> None:
    """Test that demo.main writes its report to the given stream."""
    monkeypatch.setenv("AQCSIM_SEED", "4")
    stream = io.StringIO()
    demo.main(stream=stream)

    lines = stream.getvalue().splitlines()
    assert lines[0] == "Measurement results:"
    assert [line.split(" = ")[0] for line in lines[1:]] == ["q1", "q2", "q3"]


def test_demo_rejects_non_integer_seed(monkeypatch) -> None:
    """Test that a malformed AQCSIM_SEED is reported by name."""
    monkeypatch.setenv("AQCSIM_SEED", "abc")
    with pytest.raises(InvalidParameterError, match="AQCSIM_SEED"):
        demo.main(stream=io.StringIO())
