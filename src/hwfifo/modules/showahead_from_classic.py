"""
Show-Ahead FIFO built from a Classic FIFO.

Gets show-ahead read timing out of a standard-mode controller with a single
extra flag: the wrapped controller is read as soon as it has data and its
``q`` does not already hold an unconsumed entry. The one-cycle memory latency
of the wrapped controller then provides the lookahead word, so no data
register is added.
"""

from amaranth import *

from .interface import FIFOInterface
from .sync_fifo import SyncFIFOController


class ShowAheadFIFOFromClassic(Elaboratable, FIFOInterface):
    __doc__ = FIFOInterface._doc_template.format(
    description="""
    Show-ahead FIFO wrapping a standard-mode controller.
    """.strip(),
    parameters="",
    rd_doc="Consumes the entry on ``q``.",
    q_doc="Oldest entry, valid while ``empty`` is low; ``reset_value`` until the "
          "first entry arrives after reset.",
    empty_doc="``q`` holds no valid entry.",
    used_doc=" in the wrapped controller, excluding the entry on ``q``")

    def __init__(self, *, domain="sync", **params):
        self.fifo = SyncFIFOController(show_ahead=False, domain=domain, **params)
        self.config = self.fifo.config
        self._domain = domain

        # Passed through from the wrapped controller
        self.wr = self.fifo.wr
        self.d = self.fifo.d
        self.q = self.fifo.q
        self.full = self.fifo.full
        self.nearly_full = self.fifo.nearly_full
        self.nearly_empty = self.fifo.nearly_empty
        self.used = self.fifo.used
        self.clear = self.fifo.clear

        self.rd = Signal()
        self.empty = Signal()

    def elaborate(self, platform):
        m = Module()
        m.submodules.fifo = fifo = self.fifo
        m.submodules.staging = self._elaborate_staging(fifo)
        return m

    def _elaborate_staging(self, fifo):
        m = Module()

        dout_valid = Signal()
        m.d.comb += [
            fifo.rd.eq(~fifo.empty & (~dout_valid | self.rd)),
            self.empty.eq(~dout_valid),
        ]

        with m.If(fifo.rd | self.rd):
            m.d[self._domain] += dout_valid.eq(fifo.rd)

        # The wrapped controller already applies clear to itself
        if self.clear is not None:
            return ResetInserter({self._domain: self.clear})(m)
        return m
