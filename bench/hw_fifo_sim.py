"""
Hardware FIFO simulation bridge.

Drives any FIFO variant with a list of (wr, d, rd) cycles inside an Amaranth
testbench and records what a consumer would observe: the per-cycle status
trace, the entries accepted on the write side, and the entries delivered on
the read side (honouring standard or show-ahead read timing).
"""

import sys
import os
from dataclasses import dataclass, field

# Add hardware source to path
_src_dir = os.path.join(os.path.dirname(__file__), "..", "src")
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from amaranth.sim import Simulator

from .fifo_model import FIFOSample


@dataclass
class SimResult:
    trace: list = field(default_factory=list)      # FIFOSample per cycle
    written: list = field(default_factory=list)    # accepted writes, in order
    consumed: list = field(default_factory=list)   # delivered reads, in order
    cycles: int = 0


class HWFIFOSimulator:
    """Run a stimulus through one FIFO variant in simulation."""

    def __init__(self, fifo, *, show_ahead, vcd_path=None):
        self.fifo = fifo
        self.show_ahead = show_ahead
        self.vcd_path = vcd_path
        self.result = SimResult()

    @staticmethod
    def _sample(ctx, fifo):
        return FIFOSample(
            used=ctx.get(fifo.used),
            empty=ctx.get(fifo.empty),
            full=ctx.get(fifo.full),
            nearly_empty=ctx.get(fifo.nearly_empty),
            nearly_full=ctx.get(fifo.nearly_full),
            q=ctx.get(fifo.q),
        )

    async def _drive(self, ctx, stimulus):
        fifo = self.fifo
        result = self.result
        read_in_flight = False

        for wr, d, rd in stimulus:
            ctx.set(fifo.wr, wr)
            ctx.set(fifo.d, d)
            ctx.set(fifo.rd, rd)

            sample = self._sample(ctx, fifo)
            result.trace.append(sample)

            # Standard timing: the previous read's data is on q now
            if read_in_flight:
                result.consumed.append(sample.q)

            if wr and not sample.full:
                result.written.append(d)

            reading = bool(rd) and not sample.empty
            if reading and self.show_ahead:
                result.consumed.append(sample.q)
            read_in_flight = reading and not self.show_ahead

            await ctx.tick()
            result.cycles += 1

        ctx.set(fifo.wr, 0)
        ctx.set(fifo.rd, 0)
        sample = self._sample(ctx, fifo)
        result.trace.append(sample)
        if read_in_flight:
            result.consumed.append(sample.q)

    def run(self, stimulus):
        """Run the stimulus. Returns a SimResult."""
        self.result = SimResult()
        sim = Simulator(self.fifo)
        sim.add_clock(1e-8)  # 100 MHz

        async def testbench(ctx):
            await self._drive(ctx, stimulus)

        sim.add_testbench(testbench)

        if self.vcd_path:
            with sim.write_vcd(self.vcd_path):
                sim.run()
        else:
            sim.run()

        return self.result
