"""
Write-Before-Read Safe Memory.

Simple dual-port memory with a synchronous read port whose same-address
collision behaviour is made explicit. Block RAM primitives do not reliably
honour a "write first" mode, so the memory is instantiated read-before-write
and collisions are detected one edge ahead: if the write and the read fire on
the same edge at the same address, the write data is registered and forwarded
to ``r_data`` in place of the stale memory word.
"""

from amaranth import *
from amaranth.lib.memory import Memory


class WBRSafeMemory(Elaboratable):
    """
    Dual-port memory with deterministic write-before-read visibility.

    Parameters
    ----------
    width : int
        Bit width of a memory word.
    depth : int
        Number of memory words.
    attrs : dict or None
        Synthesis attributes passed to the memory, e.g. ``{"ram_style": "block"}``.
    domain : str
        Clock domain of both ports.

    Ports
    -----
    w_en : Signal(), in
        Write enable.
    w_addr : Signal(range(depth)), in
        Write address.
    w_data : Signal(width), in
        Write data.
    r_en : Signal(), in
        Read enable. ``r_data`` holds its value while deasserted.
    r_addr : Signal(range(depth)), in
        Read address.
    r_data : Signal(width), out
        Word at ``r_addr``, one cycle after ``r_en``. Includes a write to the
        same address on the same edge.
    """

    def __init__(self, *, width, depth, attrs=None, domain="sync"):
        self.width = width
        self.depth = depth
        self.attrs = attrs
        self._domain = domain

        # Write port
        self.w_en = Signal()
        self.w_addr = Signal(range(depth))
        self.w_data = Signal(width)

        # Read port
        self.r_en = Signal(init=1)
        self.r_addr = Signal(range(depth))
        self.r_data = Signal(width)

    def elaborate(self, platform):
        m = Module()

        m.submodules.mem = mem = Memory(
            shape=self.width, depth=self.depth, init=[], attrs=self.attrs
        )

        wr_port = mem.write_port(domain=self._domain)
        m.d.comb += [
            wr_port.addr.eq(self.w_addr),
            wr_port.data.eq(self.w_data),
            wr_port.en.eq(self.w_en),
        ]

        # Not transparent: a same-address read returns the old word
        rd_port = mem.read_port(domain=self._domain)
        m.d.comb += [
            rd_port.addr.eq(self.r_addr),
            rd_port.en.eq(self.r_en),
        ]

        collision = Signal()
        forward_data = Signal(self.width)
        with m.If(self.r_en):
            m.d[self._domain] += [
                collision.eq(self.w_en & (self.w_addr == self.r_addr)),
                forward_data.eq(self.w_data),
            ]

        m.d.comb += self.r_data.eq(Mux(collision, forward_data, rd_port.data))

        return m
