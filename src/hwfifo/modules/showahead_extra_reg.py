"""
Show-Ahead FIFO with an Extra Output Register.

Combines the show-ahead-from-classic scheme with the extra output register of
the classic variant: show-ahead read timing, with ``q`` driven by a plain
register instead of the memory read port.

Staging slots, from upstream to downstream:
  - fifo_valid:   the wrapped controller's ``q`` holds an unconsumed entry
  - middle_valid: the middle register holds an unconsumed entry
  - dout_valid:   the output register holds the entry presented on ``q``
The wrapped controller is only read while at least one slot is free, so a
stalled consumer stops draining it once all three are occupied.
"""

from amaranth import *

from .interface import FIFOInterface
from .sync_fifo import SyncFIFOController


class ShowAheadFIFOWithExtraReg(Elaboratable, FIFOInterface):
    __doc__ = FIFOInterface._doc_template.format(
    description="""
    Show-ahead FIFO whose ``q`` is driven by an extra output register.
    """.strip(),
    parameters="",
    rd_doc="Consumes the entry on ``q``.",
    q_doc="Oldest entry, valid while ``empty`` is low.",
    empty_doc="``q`` holds no valid entry.",
    used_doc=" in the wrapped controller, excluding the staging slots")

    def __init__(self, *, domain="sync", **params):
        self.fifo = SyncFIFOController(show_ahead=False, domain=domain, **params)
        self.config = self.fifo.config
        self._domain = domain

        # Passed through from the wrapped controller
        self.wr = self.fifo.wr
        self.d = self.fifo.d
        self.full = self.fifo.full
        self.nearly_full = self.fifo.nearly_full
        self.nearly_empty = self.fifo.nearly_empty
        self.used = self.fifo.used
        self.clear = self.fifo.clear

        self.rd = Signal()
        self.q = Signal(self.config.width, init=self.config.q_init)
        self.empty = Signal()

    def elaborate(self, platform):
        m = Module()
        m.submodules.fifo = fifo = self.fifo
        m.submodules.staging = self._elaborate_staging(fifo)
        return m

    def _elaborate_staging(self, fifo):
        m = Module()

        fifo_valid = Signal()
        middle_valid = Signal()
        dout_valid = Signal()
        middle_dout = Signal(self.config.width)

        will_update_dout = Signal()
        will_update_middle = Signal()
        m.d.comb += [
            will_update_dout.eq((middle_valid | fifo_valid) & (self.rd | ~dout_valid)),
            will_update_middle.eq(fifo_valid & (middle_valid == will_update_dout)),
            fifo.rd.eq(~fifo.empty & ~(middle_valid & dout_valid & fifo_valid)),
            self.empty.eq(~dout_valid),
        ]

        with m.If(will_update_middle):
            m.d[self._domain] += middle_dout.eq(fifo.q)

        with m.If(will_update_dout):
            m.d[self._domain] += self.q.eq(Mux(middle_valid, middle_dout, fifo.q))

        with m.If(fifo.rd | will_update_middle | will_update_dout):
            m.d[self._domain] += fifo_valid.eq(fifo.rd)

        with m.If(will_update_middle | will_update_dout):
            m.d[self._domain] += middle_valid.eq(will_update_middle)

        with m.If(will_update_dout | self.rd):
            m.d[self._domain] += dout_valid.eq(will_update_dout)

        # The wrapped controller already applies clear to itself
        if self.clear is not None:
            return ResetInserter({self._domain: self.clear})(m)
        return m
