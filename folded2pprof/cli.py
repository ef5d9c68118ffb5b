from __future__ import annotations

import argparse
import io
import os
import sys
from typing import List, Optional, Sequence

from .config import DEFAULT_FREQUENCY_HZ, DEFAULT_OUTPUT, ConvertConfig
from .errors import ConversionError
from .folded import Frame, read_frames
from .profile import convert, write_profile


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Convert folded callstack cycle samples into a pprof profile",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input lines look like:
  lib.c:main; foo; bar 1234

Examples:
  # Read stdin, write output.pprof in the current directory
  %(prog)s < callstack_folded_cycle.txt

  # Emulated core running at 100 MHz, gzip the result
  %(prog)s callstack_folded_cycle.txt -f 100000000 -z -o cycle.pb.gz

  # Also print the top 20 functions by self cycles and plot them
  %(prog)s callstack_folded_cycle.txt --summary -p 20 --plot top.png

View the result with:
  go tool pprof -http=: output.pprof
        """
    )

    parser.add_argument(
        "input", nargs="?", default="-",
        help="Folded callstack file (default: stdin)"
    )
    parser.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT,
        help=f"Output pprof file (default: {DEFAULT_OUTPUT})"
    )
    parser.add_argument(
        "-f", "--frequency-hz", type=int, default=DEFAULT_FREQUENCY_HZ,
        help="Clock frequency used to turn cycles into nanoseconds "
             f"(default: {DEFAULT_FREQUENCY_HZ})"
    )
    parser.add_argument(
        "-z", "--gzip", action="store_true",
        help="Gzip the output profile"
    )
    parser.add_argument(
        "--skip-invalid", action="store_true",
        help="Warn about and skip malformed lines instead of aborting"
    )

    # Flat summary
    parser.add_argument(
        "--summary", action="store_true",
        help="Print a flat profile of self/total cycles per function"
    )
    parser.add_argument(
        "-p", "--top", type=int, default=None,
        help="Keep only the top N functions by self cycles in the summary"
    )
    parser.add_argument(
        "--thr", type=float, default=None,
        help="Keep only summary rows with self%% >= thr (in percent, e.g. 1.0)"
    )
    parser.add_argument(
        "--plot", default=None, metavar="PNG",
        help="Save the summary as a bar chart PNG (requires matplotlib)"
    )

    return parser.parse_args(argv)


def read_input(path: str, skip_invalid: bool) -> List[Frame]:
    if path == "-":
        stdin = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8")
        return read_frames(stdin, skip_invalid=skip_invalid)
    with open(path, "r", encoding="utf-8") as f:
        return read_frames(f, skip_invalid=skip_invalid)


def report_summary(frames: List[Frame], args: argparse.Namespace,
                   frequency_hz: int) -> None:
    # pandas and matplotlib come with the summary extra
    try:
        from .summary import filter_rows, flat_profile, maybe_plot, print_flat
    except ImportError as e:
        raise RuntimeError(
            f"{e.name or e} not available; install folded2pprof[summary] "
            "or skip --summary/--plot"
        ) from e

    df, meta = flat_profile(frames, frequency_hz)
    df = filter_rows(df, top=args.top, thr_percent=args.thr)

    title = f"Profile - cycles @ {frequency_hz} Hz"
    if args.summary:
        print(title)
        print_flat(df, meta)
    if args.plot:
        maybe_plot(df, args.plot, title=title)
        print(f"plot saved: {args.plot}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config = ConvertConfig()
    config.frequency_hz = args.frequency_hz
    config.output = args.output
    config.compress = args.gzip
    config.skip_invalid = args.skip_invalid

    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.input != "-" and not os.path.isfile(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 2

    try:
        frames = read_input(args.input, config.skip_invalid)
        print(f"Converting {len(frames)} stack(s) from "
              f"{'stdin' if args.input == '-' else args.input}")
        profile = convert(frames, config)
        size = write_profile(profile, config.output, compress=config.compress)
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"✓ Wrote {config.output} ({len(profile.function)} functions, "
          f"{len(profile.sample)} samples, {size:,} bytes)")

    if args.summary or args.plot:
        try:
            report_summary(frames, args, config.frequency_hz)
        except ValueError as e:
            print(f"Warning: no summary: {e}", file=sys.stderr)
        except RuntimeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
