"""
nearsky command-line application.

Main entry point. Resolves the observer location, fetches nearby
aircraft (through the cache) and prints a console report or writes an
HTML report.

Usage:
    python -m nearsky.app [--radius 0.1] [--html] [--lat 48.85 --lon 2.35]

Or, once installed:
    nearsky --html
"""

import argparse
import logging
import sys
import webbrowser
from pathlib import Path
from typing import List, Optional

from nearsky.cache import ResponseCache
from nearsky.config import AppConfig, config
from nearsky.ingestion import IngestionPipeline, OpenSkyClient, degrees_to_km
from nearsky.presentation import console, html
from nearsky.services import GeoResolver, ResolutionError

logger = logging.getLogger(__name__)


def _ranged(kind, low, high):
    """argparse type accepting kind values within [low, high]."""
    def parse(value: str):
        try:
            number = kind(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f'invalid {kind.__name__} value: {value!r}')
        if not low <= number <= high:
            raise argparse.ArgumentTypeError(f'{number} is outside [{low}, {high}]')
        return number
    return parse


def build_parser(cfg: Optional[AppConfig] = None) -> argparse.ArgumentParser:
    cfg = cfg or config
    search = cfg.search
    parser = argparse.ArgumentParser(
        prog='nearsky',
        description='Show aircraft currently flying near you, using OpenSky Network data.',
    )
    # Defaults are strings so argparse range-checks env-provided values too
    parser.add_argument(
        '-r', '--radius',
        type=_ranged(float, search.min_radius_degrees, search.max_radius_degrees),
        default=str(search.radius_degrees),
        help='search radius in degrees (default: %(default)s, about 111 km per degree)',
    )
    parser.add_argument('--html', action='store_true', help='write an HTML report instead of printing')
    parser.add_argument('--lat', type=_ranged(float, -90.0, 90.0), help='manual latitude')
    parser.add_argument('--lon', type=_ranged(float, -180.0, 180.0), help='manual longitude')
    parser.add_argument('--no-cache', action='store_true', help='ignore and do not update the response cache')
    parser.add_argument(
        '--cache-minutes',
        type=_ranged(int, search.min_cache_minutes, search.max_cache_minutes),
        default=str(cfg.cache.ttl_minutes),
        help='minutes a cached response stays valid (default: %(default)s)',
    )
    parser.add_argument(
        '-o', '--output',
        default=cfg.output.html_file,
        help='HTML report file name (default: %(default)s)',
    )
    parser.add_argument('--no-browser', action='store_true', help='do not open the HTML report')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose or config.debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def create_pipeline(args: argparse.Namespace, cfg: Optional[AppConfig] = None) -> IngestionPipeline:
    """Build the pipeline for this run from config and CLI overrides."""
    cfg = cfg or config
    cache = ResponseCache(
        path=cfg.cache.path,
        ttl_minutes=args.cache_minutes,
        enabled=cfg.cache.enabled and not args.no_cache,
    )
    return IngestionPipeline(
        client=OpenSkyClient.from_config(),
        cache=cache,
        radius_km=degrees_to_km(args.radius),
    )


def write_html_report(content: str, filename: str, open_browser: bool = True) -> Path:
    path = Path(filename)
    path.write_text(content, encoding='utf-8')
    logger.info(f'HTML report written to {path.resolve()}')
    if open_browser:
        webbrowser.open(path.resolve().as_uri())
    return path


def main(argv: Optional[List[str]] = None) -> int:
    """Run one lookup; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.lat is None) != (args.lon is None):
        parser.error('--lat and --lon must be given together')

    configure_logging(args.verbose)

    try:
        location = GeoResolver.from_config().resolve(args.lat, args.lon)
    except ResolutionError as e:
        logger.error(str(e))
        return 1

    pipeline = create_pipeline(args)
    snapshot = pipeline.run(location)

    if args.html:
        report = html.render(snapshot, location, radius_km=pipeline.radius_km)
        try:
            write_html_report(report, args.output, open_browser=not args.no_browser)
        except OSError as e:
            logger.error(f'Could not write HTML report: {e}')
            print(console.render(snapshot, location, radius_km=pipeline.radius_km))
    else:
        print(console.render(
            snapshot,
            location,
            radius_km=pipeline.radius_km,
            color=sys.stdout.isatty(),
        ))

    return 0


if __name__ == '__main__':
    sys.exit(main())
