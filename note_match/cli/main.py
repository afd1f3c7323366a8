"""Main entry point for the note_match CLI."""

import sys
import argparse
from typing import List, Optional

from ..core.config import ConfigManager
from ..logger import get_logger
from ..logging_config import setup_logging
from ..scale_note import ScaleNote
from ..services.tuner import TunerService

logger = get_logger(__name__)


def _note_argument(value: str) -> ScaleNote:
    try:
        return ScaleNote.from_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    # Options accepted both before and after the subcommand. SUPPRESS keeps a
    # subcommand from resetting a value given at the top level.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Enable debug logging",
    )
    common.add_argument(
        "--config-dir",
        default=argparse.SUPPRESS,
        help="Directory holding tuner.json",
    )

    # Unset means "use the stored configuration"
    display = argparse.ArgumentParser(add_help=False)
    display.add_argument(
        "--flats",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use flat note names (--no-flats forces sharps)",
    )

    parser = argparse.ArgumentParser(
        prog="note-match",
        description="Match frequencies to equal-tempered notes",
        parents=[common],
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    match_parser = subparsers.add_parser(
        "match",
        parents=[common, display],
        help="Print the closest note for each frequency",
    )
    match_parser.add_argument("frequencies", nargs="+", help="Frequencies in Hz")
    match_parser.add_argument(
        "--transposition",
        type=_note_argument,
        default=None,
        help="Written transposition, e.g. Bb for a B-flat instrument",
    )

    subparsers.add_parser(
        "notes",
        parents=[common, display],
        help="Print the octave-0 reference frequencies",
    )

    return parser


def _use_flats(args: argparse.Namespace, config: dict) -> bool:
    if args.flats is not None:
        return args.flats
    return bool(config.get("use_flats", False))


def run_match(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    config = config_manager.get_config("tuner")
    # Command line options override the stored configuration
    if args.transposition is not None:
        config["transposition"] = args.transposition.name_sharp
    config["use_flats"] = _use_flats(args, config)

    try:
        service = TunerService.from_config(config)
    except ValueError as e:
        logger.error(f"Invalid tuner configuration: {e}")
        return 1

    rejected = 0
    for raw in args.frequencies:
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"Skipping non-numeric frequency: {raw!r}")
            rejected += 1
            continue

        match = service.match(value)
        if match is None:
            logger.warning(f"Skipping unusable frequency: {raw}")
            rejected += 1
            continue
        print(f"{value:.2f} Hz: {service.describe(match)}")

    return 1 if rejected == len(args.frequencies) else 0


def run_notes(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    use_flats = _use_flats(args, config_manager.get_config("tuner"))
    for note in ScaleNote.all_notes():
        print(f"{note.label(use_flats):<3} {note.frequency.hz:9.5f} Hz")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging("DEBUG" if getattr(parsed_args, "debug", False) else None)
    config_dir = getattr(parsed_args, "config_dir", None)

    if parsed_args.command == "match":
        return run_match(parsed_args, ConfigManager(config_dir))
    elif parsed_args.command == "notes":
        return run_notes(parsed_args, ConfigManager(config_dir))

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
