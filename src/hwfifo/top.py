"""
FIFO Netlist Generator.

Builds one of the FIFO variants from command-line parameters and emits it as
Verilog or RTLIL for downstream synthesis:

    standard                 SyncFIFOController, standard read timing
    show-ahead               SyncFIFOController, show-ahead read timing
    classic-extra-reg        ClassicFIFOWithExtraReg
    show-ahead-from-classic  ShowAheadFIFOFromClassic
    show-ahead-extra-reg     ShowAheadFIFOWithExtraReg

Usage:
  python -m hwfifo.top --variant show-ahead --width 32 --capacity 512 --clear -o fifo.v
  python -m hwfifo.top --variant standard --width 8 --capacity 16 --reset --format rtlil
"""

import argparse
import functools
import sys

from amaranth.back import rtlil, verilog

from .config import FIFOConfigError
from .modules.sync_fifo import SyncFIFOController
from .modules.classic_extra_reg import ClassicFIFOWithExtraReg
from .modules.showahead_from_classic import ShowAheadFIFOFromClassic
from .modules.showahead_extra_reg import ShowAheadFIFOWithExtraReg


FIFO_VARIANTS = {
    "standard":                functools.partial(SyncFIFOController, show_ahead=False),
    "show-ahead":              functools.partial(SyncFIFOController, show_ahead=True),
    "classic-extra-reg":       ClassicFIFOWithExtraReg,
    "show-ahead-from-classic": ShowAheadFIFOFromClassic,
    "show-ahead-extra-reg":    ShowAheadFIFOWithExtraReg,
}

OUTPUT_FORMATS = ("verilog", "rtlil")


def build_fifo(variant, **params):
    """Construct a FIFO variant by name."""
    try:
        factory = FIFO_VARIANTS[variant]
    except KeyError:
        raise FIFOConfigError(
            f"Unknown FIFO variant {variant!r}; "
            f"choose one of {', '.join(FIFO_VARIANTS)}") from None
    return factory(**params)


def emit(fifo, fmt="verilog", name="fifo"):
    """Convert a FIFO to Verilog or RTLIL text."""
    if fmt == "verilog":
        return verilog.convert(fifo, name=name, ports=fifo.ports())
    if fmt == "rtlil":
        return rtlil.convert(fifo, name=name, ports=fifo.ports())
    raise FIFOConfigError(
        f"Unknown output format {fmt!r}; choose one of {', '.join(OUTPUT_FORMATS)}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a synchronous FIFO controller netlist")
    parser.add_argument("--variant", choices=list(FIFO_VARIANTS), default="standard")
    parser.add_argument("--width", type=int, required=True,
                        help="Bit width of a data entry")
    parser.add_argument("--capacity", type=int, required=True,
                        help="Number of entries held by the memory")
    parser.add_argument("--nearly-empty", type=int, default=1,
                        help="nearly_empty is asserted below this level (default 1)")
    parser.add_argument("--nearly-full", type=int, default=None,
                        help="nearly_full is asserted at or above this level "
                             "(default capacity-1)")
    parser.add_argument("--no-overflow-check", action="store_true",
                        help="Do not ignore writes while full")
    parser.add_argument("--no-underflow-check", action="store_true",
                        help="Do not ignore reads while empty")
    parser.add_argument("--clear", action="store_true",
                        help="Add a synchronous clear input")
    parser.add_argument("--reset", action="store_true",
                        help="Follow the clock domain reset")
    parser.add_argument("--reset-value", type=int, default=None,
                        help="Value of q after reset (with --reset)")
    parser.add_argument("--ram-style", default="block",
                        help="ram_style attribute of the memory (default block)")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="verilog")
    parser.add_argument("--name", default="fifo", help="Top-level module name")
    parser.add_argument("-o", "--output", default=None,
                        help="Output file (default stdout)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    try:
        fifo = build_fifo(
            args.variant,
            width=args.width,
            capacity=args.capacity,
            nearly_empty=args.nearly_empty,
            nearly_full=args.nearly_full,
            overflow_check=not args.no_overflow_check,
            underflow_check=not args.no_underflow_check,
            clear=args.clear,
            reset=args.reset,
            reset_value=args.reset_value,
            ram_attrs={"ram_style": args.ram_style},
        )
    except FIFOConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    text = emit(fifo, args.format, args.name)

    if args.output is None:
        sys.stdout.write(text)
    else:
        with open(args.output, "w") as f:
            f.write(text)
        print(f"Wrote {args.variant} FIFO ({args.width}x{args.capacity}, "
              f"{args.format}) to {args.output}")


if __name__ == "__main__":
    main()
