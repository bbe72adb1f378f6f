"""
Testbench for the three pipeline adapters around the FIFO controller.

Verifies, for ClassicFIFOWithExtraReg, ShowAheadFIFOFromClassic and
ShowAheadFIFOWithExtraReg:
  1. Reset state: empty=1, full=0, used=0, q at its reset value.
  2. Write-to-visible latency of a single entry.
  3. With rd=0 the staging slots fill up and stop draining the wrapped
     controller, so used settles at writes minus staged entries.
  4. Backpressure: holding wr against a full FIFO loses nothing, and a
     complete drain returns every accepted entry in order.
  5. Synchronous clear empties the staging slots and the wrapped controller.
  6. Domain reset returns q to reset_value.
"""

import sys, os

# Add src/ to the path so we can import the module
sys.path.insert(
    0,
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "src"),
)

import pytest
from amaranth import *
from amaranth.sim import Simulator

from hwfifo.modules.classic_extra_reg import ClassicFIFOWithExtraReg
from hwfifo.modules.showahead_from_classic import ShowAheadFIFOFromClassic
from hwfifo.modules.showahead_extra_reg import ShowAheadFIFOWithExtraReg


CAPACITY = 8

# adapter class, show-ahead read timing, staging slots, extra write latency
ADAPTERS = [
    pytest.param(ClassicFIFOWithExtraReg,   False, 2, 1, id="classic-extra-reg"),
    pytest.param(ShowAheadFIFOFromClassic,  True,  1, 1, id="show-ahead-from-classic"),
    pytest.param(ShowAheadFIFOWithExtraReg, True,  3, 2, id="show-ahead-extra-reg"),
]


async def write(ctx, dut, value):
    ctx.set(dut.wr, 1)
    ctx.set(dut.d, value)
    await ctx.tick()
    ctx.set(dut.wr, 0)


async def pop(ctx, dut, show_ahead):
    """Consume the next entry; the caller checks empty first."""
    value = ctx.get(dut.q)
    ctx.set(dut.rd, 1)
    await ctx.tick()
    ctx.set(dut.rd, 0)
    if not show_ahead:
        value = ctx.get(dut.q)
    return value


async def drain(ctx, dut, show_ahead, count, max_cycles=200):
    values = []
    for _ in range(max_cycles):
        if len(values) == count:
            break
        if ctx.get(dut.empty):
            await ctx.tick()
        else:
            values.append(await pop(ctx, dut, show_ahead))
    return values


@pytest.mark.parametrize("adapter,show_ahead,staged,latency", ADAPTERS)
def test_adapter(adapter, show_ahead, staged, latency):
    dut = adapter(width=8, capacity=CAPACITY, clear=True)
    sim = Simulator(dut)
    sim.add_clock(1e-8)  # 100 MHz

    async def testbench(ctx):
        # ---- Test 1: Reset state ----
        assert ctx.get(dut.empty) == 1, "Test 1 FAIL: empty should be 1"
        assert ctx.get(dut.full) == 0, "Test 1 FAIL: full should be 0"
        assert ctx.get(dut.used) == 0, "Test 1 FAIL: used should be 0"
        assert ctx.get(dut.q) == 0, "Test 1 FAIL: q should be 0"
        print("Test 1 PASSED: Reset state.")

        # ---- Test 2: Write-to-visible latency ----
        await write(ctx, dut, 0x42)
        for cycle in range(latency):
            assert ctx.get(dut.empty) == 1, (
                f"Test 2 FAIL: entry visible after {cycle} cycles, "
                f"expected {latency}")
            await ctx.tick()
        assert ctx.get(dut.empty) == 0, (
            f"Test 2 FAIL: entry not visible after {latency} cycles")
        if show_ahead:
            assert ctx.get(dut.q) == 0x42, "Test 2 FAIL: entry not on q"
        assert (await pop(ctx, dut, show_ahead)) == 0x42, "Test 2 FAIL: wrong entry"
        for _ in range(3):
            await ctx.tick()
        assert ctx.get(dut.empty) == 1, "Test 2 FAIL: empty should be 1 again"
        print(f"Test 2 PASSED: Entry visible {latency} cycle(s) after the write.")

        # ---- Test 3: Staging slots with rd=0 ----
        written = [0x10 + i for i in range(6)]
        for value in written:
            await write(ctx, dut, value)
        for _ in range(6):
            await ctx.tick()
        got = ctx.get(dut.used)
        assert got == len(written) - staged, (
            f"Test 3 FAIL: used expected {len(written) - staged}, got {got}")
        assert ctx.get(dut.empty) == 0, "Test 3 FAIL: empty should be 0"
        if show_ahead:
            assert ctx.get(dut.q) == written[0], "Test 3 FAIL: head not on q"

        values = await drain(ctx, dut, show_ahead, len(written))
        assert values == written, f"Test 3 FAIL: drained {values}, expected {written}"
        print(f"Test 3 PASSED: {staged} entries staged, drained in order.")

        # ---- Test 4: Backpressure ----
        accepted = []
        saw_full = False
        for i in range(CAPACITY + 8):
            full = ctx.get(dut.full)
            saw_full |= bool(full)
            ctx.set(dut.wr, 1)
            ctx.set(dut.d, 0x80 + i)
            if not full:
                accepted.append(0x80 + i)
            await ctx.tick()
        ctx.set(dut.wr, 0)
        assert saw_full, "Test 4 FAIL: full never asserted"
        assert len(accepted) >= CAPACITY, (
            f"Test 4 FAIL: only {len(accepted)} writes accepted")

        values = await drain(ctx, dut, show_ahead, len(accepted))
        assert values == accepted, f"Test 4 FAIL: drained {values}, expected {accepted}"
        for _ in range(3):
            await ctx.tick()
        assert ctx.get(dut.empty) == 1, "Test 4 FAIL: empty should be 1 after drain"
        assert ctx.get(dut.used) == 0, "Test 4 FAIL: used should be 0 after drain"
        print(f"Test 4 PASSED: {len(accepted)} entries accepted and drained in order.")

        # ---- Test 5: Clear ----
        for value in written:
            await write(ctx, dut, value)
        for _ in range(6):
            await ctx.tick()
        ctx.set(dut.clear, 1)
        await ctx.tick()
        ctx.set(dut.clear, 0)
        assert ctx.get(dut.empty) == 1, "Test 5 FAIL: empty should be 1"
        assert ctx.get(dut.used) == 0, "Test 5 FAIL: used should be 0"

        await write(ctx, dut, 0x99)
        values = await drain(ctx, dut, show_ahead, 1)
        assert values == [0x99], f"Test 5 FAIL: drained {values} after clear"
        print("Test 5 PASSED: Clear empties the staging slots.")

        print("\nAll tests PASSED.")

    sim.add_testbench(testbench)
    sim.run()


class ResetTestFixture(Elaboratable):
    """Owns the sync domain so the testbench can drive its reset."""

    def __init__(self, adapter, **params):
        self.cd_sync = ClockDomain("sync")
        self.fifo = adapter(reset=True, **params)

    def elaborate(self, platform):
        m = Module()
        m.domains += self.cd_sync
        m.submodules.fifo = self.fifo
        return m


@pytest.mark.parametrize("adapter,show_ahead", [
    (ClassicFIFOWithExtraReg, False),
    (ShowAheadFIFOFromClassic, True),
    (ShowAheadFIFOWithExtraReg, True),
])
def test_reset_value(adapter, show_ahead):
    dut = ResetTestFixture(adapter, width=8, capacity=4, reset_value=0x3C)
    fifo = dut.fifo
    sim = Simulator(dut)
    sim.add_clock(1e-8)

    async def testbench(ctx):
        # ---- Test 6: Domain reset ----
        assert ctx.get(fifo.q) == 0x3C, "Test 6 FAIL: q should start at reset_value"

        for value in [0x01, 0x02, 0x03]:
            await write(ctx, fifo, value)
        values = await drain(ctx, fifo, show_ahead, 1)
        assert values == [0x01], f"Test 6 FAIL: drained {values}"

        ctx.set(dut.cd_sync.rst, 1)
        await ctx.tick()
        ctx.set(dut.cd_sync.rst, 0)
        assert ctx.get(fifo.q) == 0x3C, "Test 6 FAIL: q should return to reset_value"
        assert ctx.get(fifo.empty) == 1, "Test 6 FAIL: empty should be 1"
        assert ctx.get(fifo.used) == 0, "Test 6 FAIL: used should be 0"
        print("Test 6 PASSED: Domain reset restores reset_value on q.")

    sim.add_testbench(testbench)
    sim.run()
