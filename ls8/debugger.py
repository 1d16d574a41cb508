"""
Textual TUI debugger for the LS-8 machine.

Instruction-stepping debugger that loads .ls8 programs, runs them on the
machine, and displays registers, stack and output at every step.

Usage:
    python -m ls8.debugger asm/call.ls8
    python -m ls8.debugger --run asm/mult.ls8
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.widgets import Static, RichLog, Footer
from textual import work

from ls8.chips import OutputBuffer
from ls8.errors import LS8Error
from ls8.isa import disassemble
from ls8.machine import Machine


def _esc(text: str) -> str:
    """Escape Rich markup characters in text."""
    return text.replace("[", "\\[")


# ---------------------------------------------------------------------------
# CSS
# ---------------------------------------------------------------------------

DEBUGGER_CSS = """
Screen {
    layout: grid;
    grid-size: 2 3;
    grid-columns: 1fr 1fr;
    grid-rows: 1fr 1fr auto;
}

.panel {
    border: solid $accent;
    border-title-align: left;
    overflow-y: auto;
    height: 100%;
}

#code-panel { row-span: 2; }

Footer {
    column-span: 2;
}
"""


# ---------------------------------------------------------------------------
# Panel widgets
# ---------------------------------------------------------------------------

class CodePanel(ScrollableContainer):
    """Disassembly with the current instruction highlighted."""
    BORDER_TITLE = "Code"

    def compose(self) -> ComposeResult:
        yield Static("", id="code-content")


class StatePanel(ScrollableContainer):
    """Machine state: registers, ip, stack, counters."""
    BORDER_TITLE = "Machine State"

    def compose(self) -> ComposeResult:
        yield Static("", id="state-content")


class OutputPanel(ScrollableContainer):
    """Accumulated PRN output."""
    BORDER_TITLE = "Output"

    def compose(self) -> ComposeResult:
        yield RichLog(id="output-log", markup=True, wrap=True)


# ---------------------------------------------------------------------------
# Main debugger app
# ---------------------------------------------------------------------------

class LS8Debugger(App):
    """Textual TUI debugger for the LS-8 machine."""

    CSS = DEBUGGER_CSS
    TITLE = "LS-8 Debugger"

    BINDINGS = [
        Binding("s", "step_1", "Step"),
        Binding("space", "step_1", "Step", show=False),
        Binding("n", "step_10", "x10"),
        Binding("f", "step_100", "x100"),
        Binding("r", "run_to_end", "Run"),
        Binding("b", "toggle_breakpoint", "Break"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, code: bytes, auto_run: bool = False):
        super().__init__()
        self.output = OutputBuffer()
        self.machine = Machine(code, output=self.output)
        self.listing = list(disassemble(self.machine.code))
        self.auto_run = auto_run
        self.breakpoints: set[int] = set()
        self.output_lines: list[str] = []
        # Set while the run worker owns the machine; step keys are ignored then.
        self.run_active = False

    def compose(self) -> ComposeResult:
        yield CodePanel(id="code-panel", classes="panel")
        yield StatePanel(id="state-panel", classes="panel")
        yield OutputPanel(id="output-panel", classes="panel")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_panels()
        if self.auto_run:
            self.action_run_to_end()

    # -------------------------------------------------------------------
    # Panel refresh
    # -------------------------------------------------------------------

    def refresh_panels(self) -> None:
        self._refresh_code()
        self._refresh_state()
        self._refresh_output()

    def _refresh_code(self) -> None:
        ip = self.machine.ip
        lines = []
        for address, inst, raw in self.listing:
            prefix = "●" if address in self.breakpoints else " "
            marker = "▸" if address == ip else " "
            hex_bytes = " ".join(f"{b:02X}" for b in raw)
            text = str(inst) if inst is not None else f"DB 0x{raw[0]:02X}"
            line = f"{prefix}{marker} {address:3d}│ {hex_bytes:<8s} {text}"
            if address == ip:
                line = f"[bold reverse]{line}[/bold reverse]"
            lines.append(line)

        content = self.query_one("#code-content", Static)
        content.update("\n".join(lines) if lines else "(no program loaded)")

    def _refresh_state(self) -> None:
        m = self.machine
        regs = "\n".join(
            f"  R{i}: {val:<20d} 0x{val:016X}" for i, val in enumerate(m.registers)
        )
        stack = " ".join(f"{b:02X}" for b in reversed(m.stack.buffer)) or "(empty)"
        text = (
            f"[bold]State:[/bold] {m.state.name}    [bold]Cycle:[/bold] {m.cycles}\n"
            f"[bold]IP:[/bold] {m.ip} / {len(m.code)}\n"
            f"[bold]Registers:[/bold]\n{regs}\n"
            f"[bold]Stack[/bold] (top first, peak {m.stack.peak}): {stack}"
        )
        content = self.query_one("#state-content", Static)
        content.update(text)

    def _refresh_output(self) -> None:
        log = self.query_one("#output-log", RichLog)
        for value in self.output.drain():
            self.output_lines.append(str(value))
            log.write(str(value))

    # -------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------

    def _report_error(self, err: Exception) -> None:
        """Show a machine fault in the output panel."""
        log = self.query_one("#output-log", RichLog)
        message = f"[ERROR] {err}"
        self.output_lines.append(message)
        log.write(_esc(message))
        self.refresh_panels()

    def _do_steps(self, count: int) -> None:
        if self.run_active:
            return
        try:
            for _ in range(count):
                if not self.machine.tick():
                    break
        except LS8Error as e:
            self._report_error(e)
            return
        self.refresh_panels()

    def action_step_1(self) -> None:
        self._do_steps(1)

    def action_step_10(self) -> None:
        self._do_steps(10)

    def action_step_100(self) -> None:
        self._do_steps(100)

    def action_toggle_breakpoint(self) -> None:
        ip = self.machine.ip
        if ip in self.breakpoints:
            self.breakpoints.discard(ip)
        else:
            self.breakpoints.add(ip)
        self._refresh_code()

    def action_run_to_end(self) -> None:
        if self.run_active:
            return
        self.run_active = True
        self._run_worker()

    @work(thread=True)
    def _run_worker(self) -> None:
        """Run to HLT, end of code or the next breakpoint in a background thread."""
        try:
            cycle = 0
            while self.machine.tick():
                cycle += 1
                if self.machine.ip in self.breakpoints:
                    break
                if cycle % 500 == 0:
                    self.call_from_thread(self.refresh_panels)
        except LS8Error as e:
            self.call_from_thread(self._report_error, e)
            return
        finally:
            self.run_active = False
        self.call_from_thread(self.refresh_panels)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(
        description="LS-8 machine TUI debugger",
        prog="python -m ls8.debugger",
    )
    parser.add_argument("file", help="Path to .ls8 program file")
    parser.add_argument("--run", action="store_true",
                        help="Run to completion immediately (auto-run mode)")
    parser.add_argument("--strict", action="store_true",
                        help="Use the strict loader (no comments, whole-line literals)")
    args = parser.parse_args()

    path = Path(args.file)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)

    try:
        code = Machine.from_file(path, strict=args.strict).code
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    app = LS8Debugger(code, auto_run=args.run)
    app.run()


if __name__ == "__main__":
    main()
