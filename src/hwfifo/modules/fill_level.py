"""
Fill-Level Tracker.

Counts buffered entries. The level only moves on a cycle that is purely a
read or purely a write; a simultaneous read and write leaves it unchanged.
"""

from amaranth import *


class FillLevelTracker(Elaboratable):
    """
    Fill-level counter.

    Parameters
    ----------
    capacity : int
        Largest level the counter has to represent.

    Ports
    -----
    rd : Signal(), in
        Effective (already gated) read strobe.
    wr : Signal(), in
        Effective (already gated) write strobe.
    en : Signal(), out
        ``rd ^ wr``: the level changes on the next edge.
    used_next : Signal(range(capacity + 1)), out
        Level after the next edge.
    used : Signal(range(capacity + 1)), out
        Current level.
    """

    def __init__(self, capacity, domain="sync"):
        self.capacity = capacity
        self._domain = domain

        self.rd = Signal()
        self.wr = Signal()

        self.en = Signal()
        self.used_next = Signal(range(capacity + 1))
        self.used = Signal(range(capacity + 1))

    def elaborate(self, platform):
        m = Module()

        m.d.comb += self.en.eq(self.rd ^ self.wr)

        with m.If(self.en & self.rd):
            m.d.comb += self.used_next.eq(self.used - 1)
        with m.Elif(self.en):
            m.d.comb += self.used_next.eq(self.used + 1)
        with m.Else():
            m.d.comb += self.used_next.eq(self.used)

        with m.If(self.en):
            m.d[self._domain] += self.used.eq(self.used_next)

        return m
