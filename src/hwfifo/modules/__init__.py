"""FIFO controller building blocks and pipeline-extension adapters."""

from .address_counter import AddressCounter
from .fill_level import FillLevelTracker
from .flags import FlagGenerator
from .sync_fifo import SyncFIFOController
from .classic_extra_reg import ClassicFIFOWithExtraReg
from .showahead_from_classic import ShowAheadFIFOFromClassic
from .showahead_extra_reg import ShowAheadFIFOWithExtraReg
