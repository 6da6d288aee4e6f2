"""Entry point for fizzterm."""

import argparse
import sys
import traceback
from importlib.metadata import version

from fizzterm.app import main


def get_version() -> str:
    """Get the installed package version.

    Returns:
        The version string, or "unknown" if it cannot be determined.
    """
    try:
        return version("fizzterm")
    except Exception:
        return "unknown"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse (defaults to sys.argv[1:]).

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="fizzterm",
        description="Render Fizzy card markup in the terminal using the terminal's own colors.",
    )
    parser.add_argument("source", nargs="?", default="-", help="Markup file, or - for stdin (default)")
    parser.add_argument("--dump", action="store_true", help="Print styled output and exit instead of opening the TUI")
    parser.add_argument("--no-detect", action="store_true", help="Skip terminal palette detection")
    parser.add_argument("--timeout", type=int, default=None, metavar="MS", help="Palette detection timeout")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {get_version()}")
    return parser.parse_args(argv)


def run() -> None:
    """Run the app with standard Python tracebacks."""
    args = parse_args()
    try:
        main(args.source, dump_only=args.dump, detect=not args.no_detect, timeout_ms=args.timeout)
    except FileNotFoundError as exc:
        print(f"fizzterm: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception:
        # Print standard Python traceback instead of Rich's fancy one
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    run()
