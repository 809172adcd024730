"""
Module containing solar event calculation functions and class
`SolarCalculator`.

The functions of this module compute the times at which the sun reaches
specified elevations, for example the times of sunrise and sunset and
of the boundaries of civil, nautical, and astronomical twilight. They
use a simple model of the sun's apparent motion (a sinusoidal solar
declination and a three-term equation of time) that is accurate to
within a few minutes at low and middle latitudes. That is more than
adequate for calendar display purposes.

There are two calculation paths:

    * The *precise* path (`hour_angle_for_elevation`,
      `time_for_elevation`, and `event_time`) computes event times for
      a particular coordinate, and yields `None` for events that do not
      occur on a given date because the sun never reaches the required
      elevation (polar day or night).

    * The *approximate* path (`approximate_sunrise_hour` and
      `approximate_sunset_hour`) is a cheaper calculation whose result
      is clamped to a plausible range and is never `None`. It is used
      only to partition a day into daylight periods for visualization
      (see the `daylight_color_model` module).

All functions of this module are pure.
"""


from collections import namedtuple
from enum import Enum
import datetime
import math

from dayglow.ephem.geo_coordinate import DEFAULT_COORDINATE


SUNRISE_SUNSET_ELEVATION = -.83
"""
Solar elevation in degrees at sunrise and sunset.

The elevation is below zero to account for atmospheric refraction and
the apparent radius of the solar disk.
"""

CIVIL_TWILIGHT_ELEVATION = -6.
NAUTICAL_TWILIGHT_ELEVATION = -12.
ASTRONOMICAL_TWILIGHT_ELEVATION = -18.

APPROXIMATE_SUNRISE_HOUR_MIN = 5.
APPROXIMATE_SUNRISE_HOUR_MAX = 9.

_MAX_DECLINATION = 23.45
"""Maximum solar declination in degrees, i.e. the earth's axial tilt."""

_VERNAL_EQUINOX_DAY = 81
_YEAR_LENGTH = 365.

_POLE_TOLERANCE = 1e-12


class SolarEvent(Enum):

    """
    Solar event defined by the sun crossing an elevation.

    Each event has a display `name`, the `elevation` in degrees that
    the sun crosses at the event, and a `rising` flag that is `True`
    for morning events, when the sun's elevation increases, and `False`
    for evening events.
    """

    ASTRONOMICAL_TWILIGHT_START = (
        'Astronomical Twilight Start', ASTRONOMICAL_TWILIGHT_ELEVATION, True)
    NAUTICAL_TWILIGHT_START = (
        'Nautical Twilight Start', NAUTICAL_TWILIGHT_ELEVATION, True)
    CIVIL_TWILIGHT_START = (
        'Civil Twilight Start', CIVIL_TWILIGHT_ELEVATION, True)
    SUNRISE = ('Sunrise', SUNRISE_SUNSET_ELEVATION, True)
    SUNSET = ('Sunset', SUNRISE_SUNSET_ELEVATION, False)
    CIVIL_TWILIGHT_END = (
        'Civil Twilight End', CIVIL_TWILIGHT_ELEVATION, False)
    NAUTICAL_TWILIGHT_END = (
        'Nautical Twilight End', NAUTICAL_TWILIGHT_ELEVATION, False)
    ASTRONOMICAL_TWILIGHT_END = (
        'Astronomical Twilight End', ASTRONOMICAL_TWILIGHT_ELEVATION, False)

    def __init__(self, display_name, elevation, rising):
        self.display_name = display_name
        self.elevation = elevation
        self.rising = rising


class CalculationProfile(Enum):

    """
    Solar calculation profile.

    `APPROXIMATE` selects the clamped fast path used for daylight
    visualization, and `PRECISE` the per-coordinate path used for
    displayed event times.
    """

    APPROXIMATE = 'approximate'
    PRECISE = 'precise'


Event = namedtuple('Event', ('time', 'event'))
"""
Solar event occurrence.

An `Event` is a `namedtuple` with two attributes: `time` and `event`.
The time is a time-zone-aware Python `datetime` and the event is a
`SolarEvent`.
"""


def day_of_year(date):
    """Gets the one-based ordinal of a date within its year."""
    return date.timetuple().tm_yday


def solar_declination(day_of_year):

    """
    Gets the solar declination in radians for the specified day of year.

    The day of year is one-based, in [1, 366].
    """

    day_angle = _get_day_angle(day_of_year)
    return math.radians(_MAX_DECLINATION * math.sin(day_angle))


def _get_day_angle(day_of_year):
    return 2 * math.pi * (day_of_year - _VERNAL_EQUINOX_DAY) / _YEAR_LENGTH


def equation_of_time_minutes(day_of_year):

    """
    Gets the equation of time in minutes for the specified day of year.

    The equation of time is the difference between apparent solar time
    and mean solar time.
    """

    b = _get_day_angle(day_of_year)
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def hour_angle_for_elevation(latitude, declination, elevation):

    """
    Gets the hour angle at which the sun reaches an elevation.

    Parameters
    ----------
    latitude : float
        observer latitude in degrees.

    declination : float
        solar declination in radians.

    elevation : float
        target solar elevation in degrees.

    Returns
    -------
    float or None
        the nonnegative hour angle in degrees, or `None` if the sun
        does not reach the specified elevation on the day of the
        specified declination at the specified latitude.
    """

    lat = math.radians(latitude)
    elev = math.radians(elevation)

    denominator = math.cos(lat) * math.cos(declination)

    if abs(denominator) < _POLE_TOLERANCE:
        # observer is at a pole
        return None

    cos_hour_angle = \
        (math.sin(elev) - math.sin(lat) * math.sin(declination)) / \
        denominator

    if cos_hour_angle < -1 or cos_hour_angle > 1:
        return None

    return math.degrees(math.acos(cos_hour_angle))


def time_for_elevation(latitude, declination, elevation, rising):

    """
    Gets the local solar time at which the sun reaches an elevation.

    Returns
    -------
    float or None
        the local solar time in hours after local solar midnight, or
        `None` if the sun does not reach the specified elevation.
    """

    hour_angle = hour_angle_for_elevation(latitude, declination, elevation)

    if hour_angle is None:
        return None

    delta = hour_angle / 15

    return 12 - delta if rising else 12 + delta


def event_time(date, coordinate, elevation, rising):

    """
    Gets the time at which the sun reaches an elevation on a date.

    Parameters
    ----------
    date : datetime.date
        the date of the event.

    coordinate : GeoCoordinate
        the location of the observer.

    elevation : float
        target solar elevation in degrees.

    rising : bool
        `True` for the morning crossing of the elevation and `False`
        for the evening crossing.

    Returns
    -------
    datetime.datetime or None
        the event time, in the time zone of `coordinate`, or `None` if
        the sun does not reach the specified elevation on `date`.
    """

    n = day_of_year(date)
    declination = solar_declination(n)

    solar_hour = time_for_elevation(
        coordinate.latitude, declination, elevation, rising)

    if solar_hour is None:
        return None

    return _solar_hour_to_datetime(date, coordinate, solar_hour, n)


def _solar_hour_to_datetime(date, coordinate, solar_hour, day_of_year):

    # Convert local solar time to UTC by correcting for the observer's
    # longitude and the equation of time.
    utc_hour = \
        solar_hour - coordinate.longitude / 15 - \
        equation_of_time_minutes(day_of_year) / 60

    midnight = datetime.datetime(
        date.year, date.month, date.day, tzinfo=datetime.timezone.utc)

    time = midnight + datetime.timedelta(hours=utc_hour)

    return time.astimezone(coordinate.time_zone)


def approximate_sunrise_hour(latitude, declination):

    """
    Gets an approximate sunrise hour, clamped to [5, 9].

    This is the cheap calculation used for daylight visualization. It
    ignores refraction, longitude, and the equation of time, and it
    never returns `None`: at latitudes and dates without a sunrise the
    result is simply clamped.

    Parameters
    ----------
    latitude : float
        observer latitude in degrees.

    declination : float
        solar declination in radians.
    """

    lat = math.radians(latitude)

    cos_hour_angle = -math.tan(lat) * math.tan(declination)
    cos_hour_angle = max(-1., min(1., cos_hour_angle))

    hour_angle = math.degrees(math.acos(cos_hour_angle))

    sunrise_hour = 12 - hour_angle / 15

    return max(
        APPROXIMATE_SUNRISE_HOUR_MIN,
        min(APPROXIMATE_SUNRISE_HOUR_MAX, sunrise_hour))


def approximate_sunset_hour(latitude, declination):
    return 24 - approximate_sunrise_hour(latitude, declination)


class SolarCalculator:


    """
    Solar event calculator for a single location.

    A `SolarCalculator` computes the times of solar events like sunrise,
    sunset, and the boundaries of civil, nautical, and astronomical
    twilight for the location specified by its `coordinate` initializer
    argument. Event times are time-zone-aware `datetime` objects in the
    time zone of the coordinate.

    A calculator holds no mutable state, so it can be shared freely
    among threads.
    """


    def __init__(self, coordinate=DEFAULT_COORDINATE):
        self._coordinate = coordinate


    @property
    def coordinate(self):
        return self._coordinate


    def get_event_time(self, date, event):

        """
        Gets the time of the specified solar event on the specified date.

        The `event` argument can be a `SolarEvent` or the display name
        of one, for example "Civil Twilight Start".

        Returns `None` if the event does not occur on the date.
        """

        event = get_solar_event(event)

        return event_time(
            date, self._coordinate, event.elevation, event.rising)


    def get_events(self, date):

        """
        Gets the times of all solar events on the specified date.

        Returns a dictionary that maps each `SolarEvent` to its time
        on the date, or to `None` if the event does not occur on it.
        The dictionary is ordered by solar event.
        """

        return dict((e, self.get_event_time(date, e)) for e in SolarEvent)


    def get_event_list(self, date):

        """
        Gets the solar events that occur on the specified date, as a
        list of `Event` named tuples in order of increasing time.
        """

        events = [
            Event(time, event)
            for event, time in self.get_events(date).items()
            if time is not None]

        events.sort(key=lambda e: e.time)

        return events


    def get_solar_noon(self, date):
        n = day_of_year(date)
        return _solar_hour_to_datetime(date, self._coordinate, 12, n)


    def get_sunrise_hour(
            self, date, profile=CalculationProfile.PRECISE):

        """
        Gets the sunrise hour of the specified date.

        With the `PRECISE` profile, the result is in local solar time
        and is `None` if the sun does not rise on the date. With the
        `APPROXIMATE` profile it is the clamped visualization
        approximation, which is never `None`.
        """

        return self._get_sun_hour(date, profile, True)


    def get_sunset_hour(
            self, date, profile=CalculationProfile.PRECISE):

        """
        Gets the sunset hour of the specified date.

        See `get_sunrise_hour` for the meanings of the profiles.
        """

        return self._get_sun_hour(date, profile, False)


    def _get_sun_hour(self, date, profile, rising):

        profile = CalculationProfile(profile)
        declination = solar_declination(day_of_year(date))
        latitude = self._coordinate.latitude

        if profile is CalculationProfile.APPROXIMATE:

            if rising:
                return approximate_sunrise_hour(latitude, declination)
            else:
                return approximate_sunset_hour(latitude, declination)

        else:
            return time_for_elevation(
                latitude, declination, SUNRISE_SUNSET_ELEVATION, rising)


def get_solar_event(event):

    """
    Gets a `SolarEvent` from either a `SolarEvent` or a display name.

    Raises `ValueError` for unrecognized event names.
    """

    if isinstance(event, SolarEvent):
        return event

    for e in SolarEvent:
        if e.display_name == event:
            return e

    raise ValueError(f'Unrecognized solar event "{event}".')
