"""
Cycle-level software reference model of the synchronous FIFO controller.

Mirrors the observable behaviour of SyncFIFOController with both overflow
and underflow checks enabled: strobe gating, fill level, the four flags and
the value presented on ``q``.
"""

from collections import deque
from dataclasses import dataclass
from typing import Optional


@dataclass
class FIFOSample:
    used: int
    empty: int
    full: int
    nearly_empty: int
    nearly_full: int
    q: Optional[int] = None   # None where q is not defined


class FIFOModel:
    """Reference model of one FIFO, advanced one clock edge at a time."""

    def __init__(self, capacity, *, show_ahead=False, nearly_empty=1, nearly_full=None):
        self.capacity = capacity
        self.show_ahead = show_ahead
        self.effective_capacity = capacity + 1 if show_ahead else capacity
        self.nearly_empty_level = nearly_empty
        self.nearly_full_level = (self.effective_capacity - 1
                                  if nearly_full is None else nearly_full)

        self.entries = deque()
        self._q = None

    @property
    def used(self):
        return len(self.entries)

    @property
    def empty(self):
        return self.used == 0

    @property
    def full(self):
        return self.used == self.effective_capacity

    @property
    def q(self):
        if self.show_ahead:
            return self.entries[0] if self.entries else None
        return self._q

    def sample(self):
        """State visible before the next clock edge."""
        return FIFOSample(
            used=self.used,
            empty=int(self.empty),
            full=int(self.full),
            nearly_empty=int(self.used < self.nearly_empty_level),
            nearly_full=int(self.used >= self.nearly_full_level),
            q=self.q,
        )

    def step(self, wr, d, rd):
        """Apply one clock edge. Returns (did_write, did_read)."""
        do_read = bool(rd) and not self.empty
        do_write = bool(wr) and not self.full

        # The read is resolved first: a simultaneous write lands behind it
        if do_read:
            value = self.entries.popleft()
            if not self.show_ahead:
                self._q = value
        if do_write:
            self.entries.append(d)

        return do_write, do_read

    def run(self, stimulus):
        """Run a list of (wr, d, rd) cycles. Returns the per-cycle samples."""
        trace = []
        for wr, d, rd in stimulus:
            trace.append(self.sample())
            self.step(wr, d, rd)
        trace.append(self.sample())
        return trace
