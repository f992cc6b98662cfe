"""
TripLog - command line entry point.

Subcommands work on a trip JSON document:
- stats: per-day mileage table and totals
- recompute: refresh every day's distanceKm
- render: write an HTML map for one provider (osm, amap, baidu)
- merge: build a trip document from per-day JSON files
- import-gpx: replace one day's route with a GPX track
- save / list: keep documents in the configured storage (S3 or local)
"""

import argparse
import sys

import pandas as pd

from triplog.config.config import get_config
from triplog.config.logging_config import setup_logging, log_error, log_execution_time
from triplog.exceptions import TripLogError
from triplog.map import render_trip_map
from triplog.processing import apply_gpx_to_day, distance_dataframe, distance_summary, merge_to_trip
from triplog.storage import export_trip_data, get_storage_manager, import_trip_data, update_day
from triplog.utils import UnitConverter

logger = None


def _read_trip(path):
    with open(path, 'r', encoding='utf-8') as f:
        return import_trip_data(f.read())


def _write_text(path, text):
    if path in (None, '-'):
        sys.stdout.write(text + '\n')
        return
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    logger.info(f"Wrote {path}")


def cmd_stats(args):
    trip = _read_trip(args.file)
    df = distance_dataframe(trip.days)
    summary = distance_summary(trip.days)

    with pd.option_context('display.max_rows', None, 'display.width', 120):
        print(df.to_string(index=False))

    print()
    print(f"Title: {trip.meta.title}")
    print(f"Total distance: {UnitConverter.format_distance(summary['total_distance_km'], args.imperial)}")
    print(f"Days with distance: {summary['days_with_distance']} / {summary['total_days']}")
    print(f"Average per day: {UnitConverter.format_distance(summary['average_distance_km'], args.imperial)}")
    return 0


def cmd_recompute(args):
    trip = _read_trip(args.file)
    _write_text(args.output or args.file, export_trip_data(trip))
    return 0


@log_execution_time()
def cmd_render(args):
    trip = _read_trip(args.file)
    adapter = render_trip_map(trip, map_type=args.provider, day_index=args.day)
    try:
        path = adapter.save(args.output)
    finally:
        adapter.destroy()
    print(path)
    return 0


def cmd_merge(args):
    trip = merge_to_trip(args.days_dir, args.clue_dir)
    _write_text(args.output, export_trip_data(trip))
    return 0


def cmd_import_gpx(args):
    trip = _read_trip(args.file)
    if not 0 <= args.day_index < len(trip.days):
        logger.error(f"Day index {args.day_index} out of range for {len(trip.days)} day(s)")
        return 1

    with open(args.gpx, 'r', encoding='utf-8') as f:
        day = apply_gpx_to_day(trip.days[args.day_index], f.read(), use_waypoints=args.waypoints)

    trip = update_day(trip, args.day_index, day, strict=True)
    _write_text(args.output or args.file, export_trip_data(trip))
    return 0


def cmd_save(args):
    trip = _read_trip(args.file)
    storage = get_storage_manager()
    if not storage.save_trip(trip, args.name):
        return 1
    print(f"Saved {args.name} ({storage.get_preferred_backend()})")
    return 0


def cmd_list(args):
    trips = get_storage_manager().list_trips()
    if not trips:
        print("No saved trips")
        return 0
    print(pd.DataFrame(trips).to_string(index=False))
    return 0


def build_parser():
    config = get_config()
    parser = argparse.ArgumentParser(prog='triplog', description='Multi-day cycling trip log tools')
    parser.add_argument('--log-level', default=config.app.log_level,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('stats', help='Per-day mileage and totals')
    p.add_argument('file')
    p.add_argument('--imperial', action='store_true', help='Show miles instead of km')
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser('recompute', help="Refresh every day's distanceKm")
    p.add_argument('file')
    p.add_argument('-o', '--output', help='Output file (default: overwrite input, "-" for stdout)')
    p.set_defaults(func=cmd_recompute)

    p = sub.add_parser('render', help='Write an HTML map')
    p.add_argument('file')
    p.add_argument('--provider', default=config.map.default_provider, choices=['osm', 'amap', 'baidu'])
    p.add_argument('--day', type=int, default=None, help='Draw only this day index')
    p.add_argument('-o', '--output', default='trip-map.html')
    p.set_defaults(func=cmd_render)

    p = sub.add_parser('merge', help='Merge per-day JSON files into one trip document')
    p.add_argument('days_dir')
    p.add_argument('--clue-dir', default=None)
    p.add_argument('-o', '--output', default='-')
    p.set_defaults(func=cmd_merge)

    p = sub.add_parser('import-gpx', help="Replace one day's route with a GPX track")
    p.add_argument('file')
    p.add_argument('gpx')
    p.add_argument('--day-index', type=int, required=True)
    p.add_argument('--waypoints', action='store_true', help="Use GPX waypoints as the day's points")
    p.add_argument('-o', '--output', help='Output file (default: overwrite input)')
    p.set_defaults(func=cmd_import_gpx)

    p = sub.add_parser('save', help='Save a trip document to storage')
    p.add_argument('file')
    p.add_argument('name')
    p.set_defaults(func=cmd_save)

    p = sub.add_parser('list', help='List saved trip documents')
    p.set_defaults(func=cmd_list)

    return parser


def main(argv=None):
    """Main application entry point."""
    global logger

    config = get_config()
    args = build_parser().parse_args(argv)
    logger = setup_logging(log_level=args.log_level, log_to_file=config.app.log_to_file)
    logger.info(f"TripLog command: {args.command}")

    try:
        return args.func(args)
    except (TripLogError, OSError, ValueError, IndexError) as e:
        log_error(logger, e, f"Command {args.command} failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
