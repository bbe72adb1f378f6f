"""
Flag Generator.

Registers empty/full and the nearly-empty/nearly-full watermarks from the
next fill level, so the flags are valid in the same cycle as ``used``.
"""

from amaranth import *


class FlagGenerator(Elaboratable):
    """
    Status flags derived from the fill level.

    Parameters
    ----------
    capacity : int
        Level at which ``full`` is asserted.
    nearly_empty : int
        ``nearly_empty`` is asserted while the level is below this threshold.
    nearly_full : int
        ``nearly_full`` is asserted while the level is at or above this threshold.

    Ports
    -----
    en : Signal(), in
        Level update strobe from the fill-level tracker.
    used_next : Signal(range(capacity + 1)), in
        Level after the next edge.
    empty, full, nearly_empty, nearly_full : Signal(), out
        Registered flags. Their reset values match an empty FIFO.
    """

    def __init__(self, capacity, *, nearly_empty, nearly_full, domain="sync"):
        self.capacity = capacity
        self.nearly_empty_level = nearly_empty
        self.nearly_full_level = nearly_full
        self._domain = domain

        self.en = Signal()
        self.used_next = Signal(range(capacity + 1))

        self.empty = Signal(init=1)
        self.full = Signal()
        self.nearly_empty = Signal(init=int(0 < nearly_empty))
        self.nearly_full = Signal(init=int(0 >= nearly_full))

    def elaborate(self, platform):
        m = Module()

        with m.If(self.en):
            m.d[self._domain] += [
                self.empty.eq(self.used_next == 0),
                self.full.eq(self.used_next == self.capacity),
                self.nearly_empty.eq(self.used_next < self.nearly_empty_level),
                self.nearly_full.eq(self.used_next >= self.nearly_full_level),
            ]

        return m
