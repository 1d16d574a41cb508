"""
MachineHost — high-level interface to the LS-8 machine.

Provides program loading (text or file → fresh Machine), evaluation with
captured PRN output, and result reporting.
"""

from __future__ import annotations

from pathlib import Path

from .chips import OutputBuffer
from .errors import LS8Error
from .isa import format_listing
from .loader import load_file, load_program
from .machine import Machine, State


class MachineHost:
    """Owns one Machine at a time and collects everything it prints.

    Args:
        strict: Use the strict loader (no comments, whole-line literals).
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.output = OutputBuffer()
        self.machine: Machine | None = None

    # -------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------

    def load(self, program: str | bytes) -> Machine:
        """
        Build a fresh machine from program text or a raw byte image.

        A halted machine cannot be restarted, so every load replaces it.
        """
        if isinstance(program, str):
            code = load_program(program, strict=self.strict)
        else:
            code = bytes(program)
        self.output.drain()
        self.machine = Machine(code, output=self.output)
        return self.machine

    def load_file(self, path: str | Path) -> Machine:
        return self.load(load_file(path, strict=self.strict))

    # -------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------

    def run(self) -> dict:
        """
        Run the loaded machine to completion.

        Returns dict with ok flag, printed values, final registers, error and stats.
        Machine faults are reported in the dict rather than raised.
        """
        if self.machine is None:
            raise RuntimeError("No program loaded")

        error = None
        try:
            self.machine.run()
        except LS8Error as e:
            error = e

        return {
            "ok": error is None and self.machine.state == State.HALTED,
            "output": self.output.drain(),
            "registers": self.machine.registers.values(),
            "error": error,
            "stats": self.machine.stats(),
        }

    def eval(self, program: str | bytes) -> dict:
        """Load and run in one call."""
        self.load(program)
        return self.run()

    def listing(self) -> list[str]:
        if self.machine is None:
            return []
        return format_listing(self.machine.code)
