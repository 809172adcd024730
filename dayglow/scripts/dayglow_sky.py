"""
Script that prints the daily progression of solar events for a date
and location, and optionally the daylight gradient colors of the date.

Usage:

    dayglow_sky [--date YYYY-MM-DD] [--latitude LAT] [--longitude LON]
                [--time-zone ZONE] [--gradient SAMPLE_COUNT]
                [--log-file PATH] [--verbose]

The location defaults to the one of the Dayglow application settings.
Events that do not occur on the date, for example during polar night,
are printed as "N/A".
"""


import argparse
import datetime
import logging
import sys

from dayglow.app_settings import load_settings
from dayglow.ephem.daily_progression import (
    format_event_time, get_daily_progression, get_progression_rows)
from dayglow.ephem.daylight_color_model import Color, DaylightColorModel
from dayglow.ephem.geo_coordinate import GeoCoordinate
from dayglow.ephem.solar_calculator import SolarCalculator
import dayglow.util.logging_utils as logging_utils


def _main(args=None):

    args = _parse_args(args)

    try:
        settings = load_settings()
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    level = logging.DEBUG if args.verbose else settings.logging.level
    logging_utils.configure_root_logger(level, args.log_file)

    try:
        coordinate = _get_coordinate(args, settings.location)
    except (TypeError, ValueError) as e:
        print(f'Bad location: {str(e)}', file=sys.stderr)
        return 1

    date = args.date
    calculator = SolarCalculator(coordinate)

    print(
        f'Daily progression for {date.isoformat()} at latitude '
        f'{coordinate.latitude}, longitude {coordinate.longitude} '
        f'({coordinate.time_zone}):')

    progression = get_daily_progression(calculator, date)

    if progression is None:
        _print_polar_events(calculator, date)
    else:
        for label, value in get_progression_rows(progression):
            print(f'    {label:<28}{value}')

    if args.gradient is not None:
        _print_gradient(coordinate, date, args.gradient)

    return 0


def _parse_args(args):

    parser = argparse.ArgumentParser(
        description=(
            'Prints the solar events and daylight colors of a date.'))

    parser.add_argument(
        '--date', type=_parse_date, default=datetime.date.today(),
        help='the date, in YYYY-MM-DD format (default: today)')

    parser.add_argument(
        '--latitude', type=float, default=None,
        help='the latitude in degrees')

    parser.add_argument(
        '--longitude', type=float, default=None,
        help='the longitude in degrees')

    parser.add_argument(
        '--time-zone', default=None,
        help='the IANA time zone name, for example "US/Eastern"')

    parser.add_argument(
        '--gradient', type=_parse_sample_count, default=None,
        metavar='SAMPLE_COUNT',
        help='print the daylight colors of SAMPLE_COUNT evenly spaced '
             'hours of the date')

    parser.add_argument(
        '--log-file', default=None, metavar='PATH',
        help='also write log messages to the file at PATH')

    parser.add_argument(
        '--verbose', action='store_true',
        help='log debug messages, overriding the logging level of the '
             'application settings')

    return parser.parse_args(args)


def _parse_date(s):
    try:
        return datetime.date.fromisoformat(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f'Bad date "{s}".')


def _parse_sample_count(s):

    try:
        count = int(s)
    except ValueError:
        count = 0

    if count < 1:
        raise argparse.ArgumentTypeError(
            f'Bad sample count "{s}": it must be a positive integer.')

    return count


def _get_coordinate(args, location):

    latitude = _get(args.latitude, location.latitude)
    longitude = _get(args.longitude, location.longitude)
    time_zone = _get(args.time_zone, location.time_zone)

    return GeoCoordinate(latitude, longitude, time_zone)


def _get(value, default):
    return default if value is None else value


def _print_polar_events(calculator, date):

    print('    The sun does not both rise and set on this date.')

    for event, time in calculator.get_events(date).items():
        value = format_event_time(time)
        print(f'    {event.display_name:<28}{value}')


def _print_gradient(coordinate, date, sample_count):

    model = DaylightColorModel()
    colors = model.get_gradient(date, coordinate, sample_count)

    print('Daylight gradient:')

    for i, row in enumerate(colors):
        hours = 24 * i / sample_count
        h, m = divmod(int(round(hours * 60)), 60)
        period = model.get_period(hours, date, coordinate)
        color = Color(*row).hex
        print(f'    {h:02d}:{m:02d}  {color}  {period.phase.value}')


if __name__ == '__main__':
    sys.exit(_main())
