"""
Debugger tests driven through textual's headless pilot.
"""

from __future__ import annotations

import asyncio

from ls8.debugger import LS8Debugger
from ls8.machine import State

CALL_PROGRAM = bytes([
    130, 1, 10,     # LDI R1,10
    130, 0, 6,      # LDI R0,6
    80, 1,          # CALL R1
    71, 0,          # PRN R0
    1,              # HLT
    162, 0, 0,      # MUL R0,R0
    17,             # RET
])


def test_step_key_runs_one_instruction():
    async def scenario():
        app = LS8Debugger(CALL_PROGRAM)
        async with app.run_test() as pilot:
            await pilot.press("s")
            assert app.machine.ip == 3
            assert app.machine.registers[1] == 10
            await pilot.press("s", "s")
            assert app.machine.ip == 11
            assert app.machine.stack.buffer == [7]

    asyncio.run(scenario())


def test_run_to_end_collects_output():
    async def scenario():
        app = LS8Debugger(CALL_PROGRAM)
        async with app.run_test() as pilot:
            await pilot.press("r")
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.machine.state == State.HALTED
            assert app.output_lines == ["36"]

    asyncio.run(scenario())


def test_breakpoint_stops_run():
    async def scenario():
        app = LS8Debugger(CALL_PROGRAM)
        async with app.run_test() as pilot:
            app.breakpoints.add(8)
            await pilot.press("r")
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.machine.ip == 8
            assert app.machine.state == State.RUNNING
            assert app.output_lines == []

    asyncio.run(scenario())


def test_fault_is_reported():
    async def scenario():
        app = LS8Debugger(bytes([70, 0]))  # POP R0 on an empty stack
        async with app.run_test() as pilot:
            await pilot.press("s")
            assert app.machine.state == State.HALTED
            assert app.output_lines == ["[ERROR] stack underflow at address 0"]

    asyncio.run(scenario())


def test_step_ignored_during_run():
    async def scenario():
        app = LS8Debugger(CALL_PROGRAM)
        async with app.run_test() as pilot:
            app.run_active = True
            await pilot.press("s", "n")
            assert app.machine.ip == 0
            assert app.machine.state == State.IDLE
            app.run_active = False
            await pilot.press("s")
            assert app.machine.ip == 3

    asyncio.run(scenario())
