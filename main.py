#!/usr/bin/env python
"""
MapConfig - map configuration loader and exporter.

Main entry point for the command line.

Usage
-----
    python main.py load maps/demo.map.json
    python main.py load maps/demo.map.json --output out/demo.map.json
    python main.py new "survey 2024" --output maps/survey.map.json
"""

import argparse
import json
import sys


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mapconfig")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages")
    sub = parser.add_subparsers(dest="command", required=True)

    load = sub.add_parser("load", help="Normalize a map configuration file")
    load.add_argument("file", help="Map configuration to load")
    load.add_argument("--output", help="Export the normalized map to this file")
    load.add_argument(
        "--force-type",
        action="store_true",
        help='Set type to "map" when the file declares another type',
    )
    load.add_argument(
        "--keep-base-path",
        action="store_true",
        help="Keep a stored base path instead of the file's directory",
    )

    new = sub.add_parser("new", help="Create an empty map")
    new.add_argument("name", help="Map name")
    new.add_argument("--output", required=True, help="File to write")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the MapConfig command line.

    Returns
    -------
    int
        Exit code (0 for success, non-zero for error).
    """
    from loguru import logger

    from mapconfig.core.errors import MapConfigError
    from mapconfig.core.map_io import (
        TypeMismatchChoice,
        create_map,
        export_configuration,
        load_map,
    )

    args = _build_parser().parse_args(argv)

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | "
               "<level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
               "<level>{message}</level>",
        level="DEBUG" if args.verbose else "INFO"
    )

    try:
        if args.command == "new":
            export_configuration(create_map(args.name), args.output)
            return 0

        type_choice = (
            TypeMismatchChoice.FORCE if args.force_type else TypeMismatchChoice.ADD_ANYWAY
        )
        loaded = load_map(
            args.file,
            confirm_type=lambda _type: type_choice,
            confirm_base_path=lambda _current, _loaded: not args.keep_base_path,
        )
    except MapConfigError as exc:
        logger.error(str(exc))
        return 1

    if loaded is None:
        return 1
    if args.output:
        try:
            export_configuration(loaded.configuration, args.output)
        except MapConfigError as exc:
            logger.error(str(exc))
            return 1
    else:
        print(json.dumps(loaded.configuration, indent=2, ensure_ascii=False))
    return 2 if loaded.issues else 0


if __name__ == "__main__":
    sys.exit(main())
