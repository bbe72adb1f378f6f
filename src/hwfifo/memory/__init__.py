"""Memory subsystem modules for the FIFO controllers."""

from .wbr_memory import WBRSafeMemory
