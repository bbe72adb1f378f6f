"""
Address Counter.

Wrapping read/write pointer for a memory of arbitrary (not necessarily
power-of-two) depth.
"""

from amaranth import *


class AddressCounter(Elaboratable):
    """
    Modulo-``depth`` address counter.

    Ports
    -----
    en : Signal(), in
        Advance the counter on the next edge.
    addr : Signal(range(depth)), out
        Current address.
    addr_next : Signal(range(depth)), out
        ``addr + 1`` wrapped to ``depth``, regardless of ``en``.
    """

    def __init__(self, depth, domain="sync"):
        self.depth = depth
        self._domain = domain

        self.en = Signal()
        self.addr = Signal(range(depth))
        self.addr_next = Signal(range(depth))

    def elaborate(self, platform):
        m = Module()

        with m.If(self.addr == self.depth - 1):
            m.d.comb += self.addr_next.eq(0)
        with m.Else():
            m.d.comb += self.addr_next.eq(self.addr + 1)

        with m.If(self.en):
            m.d[self._domain] += self.addr.eq(self.addr_next)

        return m
