"""
Module containing function `get_daily_progression`.

The daily progression of a date is the sequence of solar events of the
date, from the start of astronomical twilight to its end, together
with the durations of daylight and of the following night. It is
computed with the precise solar calculation path, so any of its
twilight times can be absent at high latitudes. Absent times are
formatted as "N/A".
"""


from collections import namedtuple
import datetime

from dayglow.ephem.solar_calculator import SolarEvent


NOT_AVAILABLE = 'N/A'


DailyProgression = namedtuple('DailyProgression', (
    'date',
    'sunrise',
    'sunset',
    'civil_twilight_start',
    'civil_twilight_end',
    'nautical_twilight_start',
    'nautical_twilight_end',
    'astronomical_twilight_start',
    'astronomical_twilight_end',
    'daylight_hours',
    'night_hours'
))
"""
Daily progression of solar events.

The sunrise, sunset, and twilight attributes are time-zone-aware
`datetime` objects or `None`. The sunrise and sunset of a progression
are never `None`. The `daylight_hours` attribute is the duration in
hours from sunrise to sunset, and the `night_hours` attribute is the
duration in hours from sunset to the next day's sunrise.
"""


_ONE_DAY = datetime.timedelta(days=1)


def get_daily_progression(calculator, date):

    """
    Gets the daily progression of the specified date.

    Parameters
    ----------
    calculator : SolarCalculator
        the calculator for the location of the progression.

    date : datetime.date
        the date of the progression.

    Returns
    -------
    DailyProgression or None
        the daily progression, or `None` if the sun does not both rise
        and set on the date (polar day or night).
    """

    events = calculator.get_events(date)

    sunrise = events[SolarEvent.SUNRISE]
    sunset = events[SolarEvent.SUNSET]

    if sunrise is None or sunset is None:
        return None

    # When the sun does not rise the next day, the night is considered
    # to end at sunset.
    next_sunrise = \
        calculator.get_event_time(date + _ONE_DAY, SolarEvent.SUNRISE)
    if next_sunrise is None:
        next_sunrise = sunset

    return DailyProgression(
        date=date,
        sunrise=sunrise,
        sunset=sunset,
        civil_twilight_start=events[SolarEvent.CIVIL_TWILIGHT_START],
        civil_twilight_end=events[SolarEvent.CIVIL_TWILIGHT_END],
        nautical_twilight_start=events[SolarEvent.NAUTICAL_TWILIGHT_START],
        nautical_twilight_end=events[SolarEvent.NAUTICAL_TWILIGHT_END],
        astronomical_twilight_start=
            events[SolarEvent.ASTRONOMICAL_TWILIGHT_START],
        astronomical_twilight_end=
            events[SolarEvent.ASTRONOMICAL_TWILIGHT_END],
        daylight_hours=duration_in_hours(sunrise, sunset),
        night_hours=duration_in_hours(sunset, next_sunrise))


def duration_in_hours(start_time, end_time):
    return (end_time - start_time).total_seconds() / 3600


def format_duration(hours):

    """Formats a duration in hours as, for example, "9h 26m"."""

    total_minutes = int(round(max(hours, 0) * 60))
    h, m = divmod(total_minutes, 60)
    return f'{h}h {m}m'


def format_event_time(time, time_format='%H:%M'):

    """
    Formats an event time, or returns "N/A" if the time is `None`.
    """

    if time is None:
        return NOT_AVAILABLE
    else:
        return time.strftime(time_format)


def get_progression_rows(progression):

    """
    Gets (label, formatted time) pairs for the events of a daily
    progression, in chronological order.
    """

    p = progression

    return [
        ('Astronomical Twilight Start',
         format_event_time(p.astronomical_twilight_start)),
        ('Nautical Twilight Start',
         format_event_time(p.nautical_twilight_start)),
        ('Civil Twilight Start', format_event_time(p.civil_twilight_start)),
        ('Sunrise', format_event_time(p.sunrise)),
        ('Sunset', format_event_time(p.sunset)),
        ('Civil Twilight End', format_event_time(p.civil_twilight_end)),
        ('Nautical Twilight End',
         format_event_time(p.nautical_twilight_end)),
        ('Astronomical Twilight End',
         format_event_time(p.astronomical_twilight_end)),
        ('Daylight', format_duration(p.daylight_hours)),
        ('Night', format_duration(p.night_hours)),
    ]
