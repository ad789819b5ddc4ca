"""CLI entrypoint for waymarks."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from waymarks.config import Settings, get_settings
from waymarks.errors import WaymarksError
from waymarks.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="waymarks", description="Curate a local gazetteer from GeoNames.")
    parser.add_argument("--docs-dir", type=Path, help="Directory holding the gazetteer JSON files")
    parser.add_argument("--download-dir", type=Path, help="Directory for downloaded GeoNames dumps")
    sub = parser.add_subparsers(dest="command", required=True)

    add_parser = sub.add_parser("add-cities", aliases=["ac"], help="Add cities of a country")
    add_parser.add_argument("country", help="Country name or ISO alpha-2 code, e.g. 'Germany' or 'DE'")
    add_parser.add_argument("names", nargs="+", help="City names")

    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.docs_dir is not None:
        settings = dataclasses.replace(settings, docs=dataclasses.replace(settings.docs, dir=args.docs_dir))
    if args.download_dir is not None:
        settings = dataclasses.replace(
            settings, geonames=dataclasses.replace(settings.geonames, download_dir=args.download_dir)
        )
    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = _apply_overrides(get_settings(), args)
    setup_logging(settings)

    start = time.monotonic()
    try:
        if args.command in ("add-cities", "ac"):
            asyncio.run(_add_cities(settings, args.country, args.names))
    except WaymarksError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Command finished in {time.monotonic() - start:.2f}s")
    return 0


async def _add_cities(settings: Settings, country: str, names: list[str]) -> None:
    from waymarks.commands import add_cities

    report = await add_cities(settings, country, names)
    logger.info("%s: %d of %d cities added", report.country, report.cities_added, len(report.cities))


if __name__ == "__main__":
    sys.exit(main())
