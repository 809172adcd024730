"""Module containing class `GeoCoordinate`."""


import datetime

import pytz


class GeoCoordinate:

    """
    Geographic coordinate, with an optional local time zone.

    The `latitude` and `longitude` initializer arguments have units of
    degrees, and must be in [-90, 90] and [-180, 180], respectively.

    The `time_zone` initializer argument can be either a string IANA
    time zone name (e.g. "US/Eastern") or an instance of a
    `datetime.tzinfo` subclass, including a `pytz` time zone. It
    defaults to UTC. Solar event times computed for a coordinate are
    expressed in its time zone.

    Coordinates are immutable. Two coordinates are equal if their
    latitudes, longitudes, and time zones are equal.
    """


    __slots__ = ('_latitude', '_longitude', '_time_zone')


    def __init__(self, latitude, longitude, time_zone=None):

        _check_range('latitude', latitude, 90)
        _check_range('longitude', longitude, 180)

        object.__setattr__(self, '_latitude', float(latitude))
        object.__setattr__(self, '_longitude', float(longitude))
        object.__setattr__(self, '_time_zone', _get_time_zone(time_zone))


    def __setattr__(self, name, value):
        raise AttributeError(
            f'Cannot set attribute "{name}" of immutable GeoCoordinate.')


    @property
    def latitude(self):
        return self._latitude


    @property
    def longitude(self):
        return self._longitude


    @property
    def time_zone(self):
        return self._time_zone


    def __eq__(self, other):
        if not isinstance(other, GeoCoordinate):
            return NotImplemented
        return self._key == other._key


    def __hash__(self):
        return hash(self._key)


    @property
    def _key(self):
        return (self.latitude, self.longitude, str(self.time_zone))


    def __repr__(self):
        return (
            f'GeoCoordinate({self.latitude}, {self.longitude}, '
            f'{str(self.time_zone)!r})')


def _check_range(name, value, limit):
    if not -limit <= value <= limit:
        raise ValueError(
            f'Coordinate {name} {value} is outside of the range '
            f'[{-limit}, {limit}].')


def _get_time_zone(time_zone):

    if time_zone is None:
        return pytz.utc

    elif isinstance(time_zone, str):
        try:
            return pytz.timezone(time_zone)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f'Unrecognized time zone "{time_zone}".')

    elif isinstance(time_zone, datetime.tzinfo):
        return time_zone

    else:
        raise TypeError(
            f'Unrecognized time zone type '
            f'"{time_zone.__class__.__name__}". Time zone must be '
            f'string, tzinfo, or None.')


DEFAULT_COORDINATE = GeoCoordinate(40.7128, -74.0060, 'US/Eastern')
"""New York City, the default location of daylight computations."""
