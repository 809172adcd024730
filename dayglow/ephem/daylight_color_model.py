"""
Module containing class `DaylightColorModel`.

A daylight color model partitions a day into named daylight periods,
each with a color, and maps hours of the day to smoothly blended
colors for gradient visualizations of daylight.

The partition is built from the approximate sunrise and sunset hours of
the `solar_calculator` module, with each twilight band a constant
offset from sunrise or sunset. It is a simplified, not an
astronomically precise, partition: displayed event times are computed
with the precise path of the `solar_calculator` module instead.
"""


from collections import namedtuple
from enum import Enum

import numpy as np

from dayglow.ephem.geo_coordinate import DEFAULT_COORDINATE
from dayglow.ephem.solar_calculator import CalculationProfile, SolarCalculator


class DaylightPhase(Enum):
    NIGHT = 'Night'
    ASTRONOMICAL_TWILIGHT = 'Astronomical Twilight'
    NAUTICAL_TWILIGHT = 'Nautical Twilight'
    CIVIL_TWILIGHT = 'Civil Twilight'
    SUNRISE = 'Sunrise'
    GOLDEN_HOUR = 'Golden Hour'
    DAYLIGHT = 'Daylight'
    SUNSET = 'Sunset'
    GOLDEN_HOUR_EVENING = 'Golden Hour Evening'
    CIVIL_TWILIGHT_EVENING = 'Civil Twilight Evening'
    NAUTICAL_TWILIGHT_EVENING = 'Nautical Twilight Evening'
    ASTRONOMICAL_TWILIGHT_EVENING = 'Astronomical Twilight Evening'


class Color(namedtuple('Color', ('red', 'green', 'blue', 'alpha'))):

    """
    RGBA color.

    The red, green, and blue components are in [0, 255] and the alpha
    component is in [0, 1].
    """

    __slots__ = ()


    @property
    def hex(self):
        r, g, b = (int(round(c)) for c in (self.red, self.green, self.blue))
        return f'#{r:02x}{g:02x}{b:02x}'


NIGHT_COLOR = Color(0, 0, 0, 1.)
ASTRONOMICAL_TWILIGHT_COLOR = Color(10, 0, 20, 1.)
NAUTICAL_TWILIGHT_COLOR = Color(20, 0, 40, 1.)
CIVIL_TWILIGHT_COLOR = Color(40, 20, 80, 1.)
SUNRISE_COLOR = Color(255, 100, 50, 1.)
GOLDEN_HOUR_COLOR = Color(255, 200, 100, 1.)
DAYLIGHT_RICH_COLOR = Color(25, 25, 112, 1.)
DAYLIGHT_LIGHT_COLOR = Color(100, 180, 255, 1.)


_DaylightPeriod = namedtuple(
    'DaylightPeriod', ('phase', 'start_hour', 'end_hour', 'color'))


class DaylightPeriod(_DaylightPeriod):

    """
    Daylight period of a day.

    A period includes its start hour but not its end hour.
    """

    __slots__ = ()


    @property
    def duration(self):
        return self.end_hour - self.start_hour


    def contains(self, hour):
        return self.start_hour <= hour < self.end_hour


_BLEND_FRACTION = .2
"""
Fraction of a non-daylight period at each of its ends throughout which
its color is blended with that of the adjacent period.
"""

_DAYLIGHT_PEAK_PROGRESS = .5
"""Progress through the daylight period at which the sky is lightest."""

_DEFAULT_GRADIENT_SAMPLE_COUNT = 96


def interpolate_color(start, end, factor):

    """
    Interpolates linearly between two colors.

    The factor is clamped to [0, 1], with zero yielding `start` and
    one yielding `end`.
    """

    factor = max(0., min(1., factor))

    return Color(*(s + (e - s) * factor for s, e in zip(start, end)))


class DaylightColorModel:


    """
    Maps hours of a day to daylight colors.

    The methods of a daylight color model are pure functions of their
    arguments: a model caches nothing, so its methods can be called at
    high frequency (for example, many times per day to draw a gradient)
    and from any thread.
    """


    def get_periods(self, date, coordinate=DEFAULT_COORDINATE):

        """
        Gets the daylight periods of the specified date.

        Returns a list of thirteen contiguous `DaylightPeriod` objects
        that together cover the hours [0, 24). The night phase occurs
        twice, once before dawn and once after dusk.
        """

        calculator = SolarCalculator(coordinate)
        profile = CalculationProfile.APPROXIMATE
        sr = calculator.get_sunrise_hour(date, profile)
        ss = calculator.get_sunset_hour(date, profile)

        p = DaylightPhase

        return [
            DaylightPeriod(p.NIGHT, 0., sr - 2.5, NIGHT_COLOR),
            DaylightPeriod(
                p.ASTRONOMICAL_TWILIGHT, sr - 2.5, sr - 2.,
                ASTRONOMICAL_TWILIGHT_COLOR),
            DaylightPeriod(
                p.NAUTICAL_TWILIGHT, sr - 2., sr - 1.5,
                NAUTICAL_TWILIGHT_COLOR),
            DaylightPeriod(
                p.CIVIL_TWILIGHT, sr - 1.5, sr - .5, CIVIL_TWILIGHT_COLOR),
            DaylightPeriod(p.SUNRISE, sr - .5, sr + .5, SUNRISE_COLOR),
            DaylightPeriod(
                p.GOLDEN_HOUR, sr + .5, sr + 1.5, GOLDEN_HOUR_COLOR),
            DaylightPeriod(
                p.DAYLIGHT, sr + 1.5, ss - 1.5, DAYLIGHT_RICH_COLOR),
            DaylightPeriod(
                p.GOLDEN_HOUR_EVENING, ss - 1.5, ss - .5, GOLDEN_HOUR_COLOR),
            DaylightPeriod(p.SUNSET, ss - .5, ss + .5, SUNRISE_COLOR),
            DaylightPeriod(
                p.CIVIL_TWILIGHT_EVENING, ss + .5, ss + 1.5,
                CIVIL_TWILIGHT_COLOR),
            DaylightPeriod(
                p.NAUTICAL_TWILIGHT_EVENING, ss + 1.5, ss + 2.,
                NAUTICAL_TWILIGHT_COLOR),
            DaylightPeriod(
                p.ASTRONOMICAL_TWILIGHT_EVENING, ss + 2., ss + 2.5,
                ASTRONOMICAL_TWILIGHT_COLOR),
            DaylightPeriod(p.NIGHT, ss + 2.5, 24., NIGHT_COLOR),
        ]


    def get_period(self, hour, date, coordinate=DEFAULT_COORDINATE):

        """
        Gets the daylight period that includes the specified hour, or
        `None` if the hour is outside of [0, 24).
        """

        for period in self.get_periods(date, coordinate):
            if period.contains(hour):
                return period

        return None


    def get_color(self, hour, date, coordinate=DEFAULT_COORDINATE):

        """
        Gets the daylight color for the specified hour of a day.

        Within the daylight period, the color brightens from a rich
        blue to a lighter blue at the middle of the period and back.
        Within other periods, the first and last fifths of the period
        cross-fade from and to the colors of the adjacent periods.
        Two adjacent periods meet at a boundary color halfway between
        their colors, or at the rich daylight color when one of them
        is the daylight period, so colors change continuously across
        period boundaries. Colors are not blended across the start or
        end of the day.

        Hours outside of [0, 24) are considered night.
        """

        periods = self.get_periods(date, coordinate)

        for i, period in enumerate(periods):

            if not period.contains(hour):
                continue

            progress = (hour - period.start_hour) / period.duration

            if period.phase is DaylightPhase.DAYLIGHT:
                return _get_daylight_color(progress)

            if progress < _BLEND_FRACTION and i > 0:
                start_color = _get_boundary_color(periods[i - 1], period)
                factor = progress / _BLEND_FRACTION
                return interpolate_color(start_color, period.color, factor)

            elif progress > 1 - _BLEND_FRACTION and i < len(periods) - 1:
                end_color = _get_boundary_color(period, periods[i + 1])
                factor = (progress - (1 - _BLEND_FRACTION)) / _BLEND_FRACTION
                return interpolate_color(period.color, end_color, factor)

            else:
                return period.color

        return NIGHT_COLOR


    def get_gradient(
            self, date, coordinate=DEFAULT_COORDINATE,
            sample_count=_DEFAULT_GRADIENT_SAMPLE_COUNT):

        """
        Gets daylight colors at evenly spaced hours of a day.

        Returns a NumPy array of shape `(sample_count, 4)` whose rows
        are the (red, green, blue, alpha) colors at the hours
        `24 * i / sample_count` for `i` in `range(sample_count)`.

        Raises `ValueError` if `sample_count` is not positive.
        """

        if sample_count < 1:
            raise ValueError(
                f'Bad gradient sample count {sample_count}: the count '
                f'must be positive.')

        hours = np.arange(sample_count) * (24. / sample_count)

        return np.array(
            [self.get_color(h, date, coordinate) for h in hours],
            dtype='float64').reshape((sample_count, 4))


def _get_daylight_color(progress):

    peak = _DAYLIGHT_PEAK_PROGRESS

    if progress < peak:
        return interpolate_color(
            DAYLIGHT_RICH_COLOR, DAYLIGHT_LIGHT_COLOR, progress / peak)

    else:
        return interpolate_color(
            DAYLIGHT_LIGHT_COLOR, DAYLIGHT_RICH_COLOR,
            (progress - peak) / peak)


def _get_boundary_color(earlier, later):

    # The daylight period is not cross-faded, so its neighbors blend
    # all the way to its edge color.
    if earlier.phase is DaylightPhase.DAYLIGHT:
        return earlier.color

    elif later.phase is DaylightPhase.DAYLIGHT:
        return later.color

    else:
        return interpolate_color(earlier.color, later.color, .5)
