"""Parameterised synchronous FIFO controllers."""

from .config import FIFOConfig, FIFOConfigError
from .memory import WBRSafeMemory
from .modules import (
    SyncFIFOController, ClassicFIFOWithExtraReg, ShowAheadFIFOFromClassic,
    ShowAheadFIFOWithExtraReg,
)
