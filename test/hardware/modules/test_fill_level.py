"""
Testbench for the fill-level tracker and flag generator.

Uses a small fixture wiring FillLevelTracker into FlagGenerator the same
way the FIFO controller does.

Verifies:
  1. Reset state: used=0, empty=1, nearly_empty=1, full=0, nearly_full=0.
  2. Write-only cycles increment used; flags follow in the same cycle.
  3. Simultaneous read+write leaves used and every flag unchanged.
  4. Read-only cycles decrement used back to empty.
  5. A nearly_full threshold of 0 is asserted from reset on.
"""

import sys, os

# Add src/ to the path so we can import the module
sys.path.insert(
    0,
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "src"),
)

from amaranth import *
from amaranth.sim import Simulator

from hwfifo.modules.fill_level import FillLevelTracker
from hwfifo.modules.flags import FlagGenerator


CAPACITY = 4


class LevelTestFixture(Elaboratable):
    """Wraps FillLevelTracker + FlagGenerator with internal wiring."""

    def __init__(self, nearly_empty=2, nearly_full=3):
        self.level = FillLevelTracker(CAPACITY)
        self.flags = FlagGenerator(CAPACITY, nearly_empty=nearly_empty,
                                   nearly_full=nearly_full)

    def elaborate(self, platform):
        m = Module()
        m.submodules.level = self.level
        m.submodules.flags = self.flags

        m.d.comb += [
            self.flags.en.eq(self.level.en),
            self.flags.used_next.eq(self.level.used_next),
        ]

        return m


def test_fill_level():
    dut = LevelTestFixture()
    level, flags = dut.level, dut.flags
    sim = Simulator(dut)
    sim.add_clock(1e-8)  # 100 MHz

    async def testbench(ctx):
        def check(used, tag):
            got = ctx.get(level.used)
            assert got == used, f"{tag} FAIL: used expected {used}, got {got}"
            expected = {
                "empty": int(used == 0),
                "full": int(used == CAPACITY),
                "nearly_empty": int(used < 2),
                "nearly_full": int(used >= 3),
            }
            for name, value in expected.items():
                got = ctx.get(getattr(flags, name))
                assert got == value, (
                    f"{tag} FAIL: {name} expected {value} at used={used}, got {got}"
                )

        # ---- Test 1: Reset state ----
        check(0, "Test 1")
        print("Test 1 PASSED: Reset state.")

        # ---- Test 2: Write-only ----
        ctx.set(level.wr, 1)
        for used in range(1, CAPACITY + 1):
            await ctx.tick()
            check(used, "Test 2")
        ctx.set(level.wr, 0)
        print("Test 2 PASSED: Write-only cycles fill up to capacity.")

        # ---- Test 3: Read+write ----
        ctx.set(level.wr, 1)
        ctx.set(level.rd, 1)
        assert ctx.get(level.en) == 0, "Test 3 FAIL: en should be low on rd+wr"
        await ctx.tick()
        check(CAPACITY, "Test 3")
        ctx.set(level.wr, 0)
        print("Test 3 PASSED: Simultaneous read+write keeps the level.")

        # ---- Test 4: Read-only ----
        for used in reversed(range(CAPACITY)):
            await ctx.tick()
            check(used, "Test 4")
        ctx.set(level.rd, 0)
        print("Test 4 PASSED: Read-only cycles drain to empty.")

        print("\nAll tests PASSED.")

    sim.add_testbench(testbench)
    sim.run()


def test_zero_thresholds():
    dut = LevelTestFixture(nearly_empty=0, nearly_full=0)
    flags = dut.flags
    sim = Simulator(dut)
    sim.add_clock(1e-8)

    async def testbench(ctx):
        # ---- Test 5: Threshold 0 ----
        assert ctx.get(flags.nearly_full) == 1, "Test 5 FAIL: nearly_full should be 1"
        assert ctx.get(flags.nearly_empty) == 0, "Test 5 FAIL: nearly_empty should be 0"
        ctx.set(dut.level.wr, 1)
        await ctx.tick()
        assert ctx.get(flags.nearly_full) == 1, "Test 5 FAIL: nearly_full dropped"
        print("Test 5 PASSED: Zero thresholds hold from reset on.")

    sim.add_testbench(testbench)
    sim.run()


if __name__ == "__main__":
    test_fill_level()
    test_zero_thresholds()
