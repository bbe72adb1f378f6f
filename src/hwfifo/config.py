"""
FIFO Controller Configuration.

All parameters of a FIFO controller are collected in one frozen dataclass and
validated once, when the controller is constructed. Nothing is checked at
runtime in hardware: an invalid configuration never produces a netlist.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional


# Memory implementation directive used when none is given
DEFAULT_RAM_ATTRS = {"ram_style": "block"}


class FIFOConfigError(ValueError):
    """Raised when a FIFO controller is constructed with invalid parameters."""


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class FIFOConfig:
    """
    Static FIFO configuration.

    Parameters
    ----------
    width : int
        Bit width of a data entry.
    capacity : int
        Number of entries held by the memory.
    nearly_empty : int
        ``nearly_empty`` is asserted while fewer than this many entries are
        buffered (default 1).
    nearly_full : int or None
        ``nearly_full`` is asserted while at least this many entries are
        buffered (default ``effective_capacity - 1``).
    overflow_check : bool
        Ignore writes while full (default True).
    underflow_check : bool
        Ignore reads while empty (default True).
    show_ahead : bool
        Present the oldest entry on ``q`` before it is read (default False).
    clear : bool
        Use a synchronous ``clear`` input as the reset discipline.
    reset : bool
        Use the clock domain reset as the reset discipline.
    reset_value : int or None
        Value of the registered ``q`` output after reset (reset discipline only).
    ram_attrs : mapping or None
        Synthesis attributes for the memory (default ``ram_style = "block"``).
    """

    width: int
    capacity: int
    nearly_empty: int = 1
    nearly_full: Optional[int] = None
    overflow_check: bool = True
    underflow_check: bool = True
    show_ahead: bool = False
    clear: bool = False
    reset: bool = False
    reset_value: Optional[int] = None
    ram_attrs: Optional[Mapping] = None

    def __post_init__(self):
        # Capacity first: every width below is derived from it
        if not _is_int(self.capacity) or self.capacity <= 0:
            raise FIFOConfigError(
                f"FIFO capacity must be a positive integer, not {self.capacity!r}")
        if not _is_int(self.width) or self.width <= 0:
            raise FIFOConfigError(
                f"FIFO width must be a positive integer, not {self.width!r}")

        if not self.clear and not self.reset:
            raise FIFOConfigError(
                "FIFO requires either a synchronous clear or a reset")
        if self.clear and self.reset:
            raise FIFOConfigError(
                "FIFO accepts only one reset discipline; choose either clear or reset")

        if self.reset_value is not None:
            if not self.reset:
                raise FIFOConfigError(
                    "reset_value can only be used with the reset discipline")
            if not _is_int(self.reset_value) or not 0 <= self.reset_value < 2 ** self.width:
                raise FIFOConfigError(
                    f"reset_value {self.reset_value!r} does not fit in "
                    f"{self.width} bits")

        for name in ("nearly_empty", "nearly_full"):
            level = getattr(self, name)
            if level is None:
                continue
            if not _is_int(level) or not 0 <= level <= self.effective_capacity:
                raise FIFOConfigError(
                    f"{name} threshold must be an integer between 0 and "
                    f"{self.effective_capacity}, not {level!r}")

        if self.ram_attrs is not None and not isinstance(self.ram_attrs, Mapping):
            raise FIFOConfigError(
                f"ram_attrs must be a mapping, not {self.ram_attrs!r}")

    @property
    def effective_capacity(self):
        # The show-ahead lookahead register holds one entry outside the memory
        if self.show_ahead:
            return self.capacity + 1
        return self.capacity

    @property
    def nearly_full_level(self):
        if self.nearly_full is None:
            return self.effective_capacity - 1
        return self.nearly_full

    @property
    def memory_attrs(self):
        if self.ram_attrs is None:
            return dict(DEFAULT_RAM_ATTRS)
        return dict(self.ram_attrs)

    @property
    def q_init(self):
        return 0 if self.reset_value is None else self.reset_value
