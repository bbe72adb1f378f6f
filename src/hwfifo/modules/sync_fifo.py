"""
Synchronous FIFO Controller.

Composes the fill-level tracker, the flag generator, two address counters and
the write-before-read safe memory into a complete single-clock FIFO.

Two read modes are available:
  - standard:   ``rd`` makes the oldest entry appear on ``q`` one cycle later.
  - show-ahead: the oldest entry is already on ``q`` while ``empty`` is low,
                and ``rd`` advances to the next one. A lookahead register holds
                the front entry outside the memory, so the effective capacity
                is one more than the memory depth.
"""

from amaranth import *

from ..config import FIFOConfig
from ..memory.wbr_memory import WBRSafeMemory
from .address_counter import AddressCounter
from .fill_level import FillLevelTracker
from .flags import FlagGenerator
from .interface import FIFOInterface


class SyncFIFOController(Elaboratable, FIFOInterface):
    __doc__ = FIFOInterface._doc_template.format(
    description="""
    Synchronous FIFO controller with standard or show-ahead read timing.
    """.strip(),
    parameters="""
    show_ahead : bool
        Use show-ahead (first-word fall-through) read timing (default False).
    """.strip(),
    rd_doc="Ignored while ``empty`` if ``underflow_check`` is set.",
    q_doc="Standard mode: entry read by the previous ``rd``, or ``reset_value`` "
          "before the first read. "
          "Show-ahead mode: oldest entry, valid while ``empty`` is low.",
    empty_doc="No entry is buffered.",
    used_doc="")

    def __init__(self, *, width, capacity, nearly_empty=1, nearly_full=None,
                 overflow_check=True, underflow_check=True, show_ahead=False,
                 clear=False, reset=False, reset_value=None, ram_attrs=None,
                 domain="sync"):
        # Validation raises before any state is created
        self.config = FIFOConfig(
            width=width,
            capacity=capacity,
            nearly_empty=nearly_empty,
            nearly_full=nearly_full,
            overflow_check=overflow_check,
            underflow_check=underflow_check,
            show_ahead=show_ahead,
            clear=clear,
            reset=reset,
            reset_value=reset_value,
            ram_attrs=ram_attrs,
        )
        self._domain = domain

        cfg = self.config

        # Write side
        self.wr = Signal()
        self.d = Signal(cfg.width)

        # Read side
        self.rd = Signal()
        self.q = Signal(cfg.width)

        # Status
        self.full = Signal()
        self.empty = Signal()
        self.nearly_full = Signal()
        self.nearly_empty = Signal()
        self.used = Signal(range(cfg.effective_capacity + 1))

        self.clear = Signal(name="clear") if cfg.clear else None

    @property
    def width(self):
        return self.config.width

    @property
    def capacity(self):
        return self.config.capacity

    def elaborate(self, platform):
        m = Module()

        cfg = self.config

        m.submodules.level = level = FillLevelTracker(
            cfg.effective_capacity, domain=self._domain)
        m.submodules.flags = flags = FlagGenerator(
            cfg.effective_capacity,
            nearly_empty=cfg.nearly_empty,
            nearly_full=cfg.nearly_full_level,
            domain=self._domain,
        )
        m.submodules.mem = mem = WBRSafeMemory(
            width=cfg.width, depth=cfg.capacity, attrs=cfg.memory_attrs,
            domain=self._domain,
        )
        m.submodules.rd_addr = rd_addr = AddressCounter(
            cfg.capacity, domain=self._domain)
        m.submodules.wr_addr = wr_addr = AddressCounter(
            cfg.capacity, domain=self._domain)

        # Strobes gated so the queue can neither overflow nor underflow
        do_read = Signal()
        do_write = Signal()
        if cfg.underflow_check:
            m.d.comb += do_read.eq(self.rd & ~self.empty)
        else:
            m.d.comb += do_read.eq(self.rd)
        if cfg.overflow_check:
            m.d.comb += do_write.eq(self.wr & ~self.full)
        else:
            m.d.comb += do_write.eq(self.wr)

        m.d.comb += [
            level.rd.eq(do_read),
            level.wr.eq(do_write),
            flags.en.eq(level.en),
            flags.used_next.eq(level.used_next),

            self.used.eq(level.used),
            self.empty.eq(flags.empty),
            self.full.eq(flags.full),
            self.nearly_empty.eq(flags.nearly_empty),
            self.nearly_full.eq(flags.nearly_full),

            mem.w_addr.eq(wr_addr.addr),
            mem.w_data.eq(self.d),
        ]

        if cfg.show_ahead:
            self._elaborate_show_ahead(m, level, mem, rd_addr, wr_addr,
                                       do_read, do_write)
        else:
            m.d.comb += [
                rd_addr.en.eq(do_read),
                wr_addr.en.eq(do_write),
                mem.w_en.eq(do_write),
                mem.r_en.eq(do_read),
                mem.r_addr.eq(rd_addr.addr),
            ]
            if cfg.reset_value is None:
                m.d.comb += self.q.eq(mem.r_data)
            else:
                # The read port has no reset; q shows reset_value until the
                # first read after reset
                read_once = Signal()
                with m.If(do_read):
                    m.d[self._domain] += read_once.eq(1)
                m.d.comb += self.q.eq(Mux(read_once, mem.r_data, cfg.reset_value))

        if self.clear is not None:
            return ResetInserter({self._domain: self.clear})(m)
        return m

    def _elaborate_show_ahead(self, m, level, mem, rd_addr, wr_addr,
                              do_read, do_write):
        cfg = self.config

        # Occupancy of the memory behind the lookahead register
        used_is_one = Signal()
        used_gt_one = Signal()
        with m.If(level.en):
            m.d[self._domain] += [
                used_is_one.eq(level.used_next == 1),
                used_gt_one.eq(level.used_next > 1),
            ]

        # The memory is only touched while it holds entries beyond the front one
        mem_write = Signal()
        mem_read = Signal()
        m.d.comb += [
            mem_write.eq(do_write & (used_gt_one | (used_is_one & ~do_read))),
            mem_read.eq(do_read & used_gt_one),
            wr_addr.en.eq(mem_write),
            rd_addr.en.eq(mem_read),
            mem.w_en.eq(mem_write),
            mem.r_en.eq(1),
        ]

        # Prefetch the entry after the one being read
        with m.If(mem_read):
            m.d.comb += mem.r_addr.eq(rd_addr.addr_next)
        with m.Else():
            m.d.comb += mem.r_addr.eq(rd_addr.addr)

        # Incoming data goes straight to the lookahead register when the
        # memory has nothing older to offer
        bypass = Signal()
        m.d.comb += bypass.eq((self.empty & do_write) |
                              (used_is_one & do_write & do_read))

        lookahead = Signal(cfg.width, init=cfg.q_init)
        with m.If(bypass):
            m.d[self._domain] += lookahead.eq(self.d)
        with m.Elif(do_read):
            m.d[self._domain] += lookahead.eq(mem.r_data)

        m.d.comb += self.q.eq(lookahead)
