import datetime
import math

import pytz

from dayglow.ephem.geo_coordinate import GeoCoordinate
from dayglow.ephem.solar_calculator import (
    CalculationProfile, SolarCalculator, SolarEvent)
from dayglow.tests.test_case import TestCase
import dayglow.ephem.solar_calculator as solar_calculator


# Ithaca, NY location and time zone.
TEST_LAT = 42.431964
TEST_LON = -76.501656
TEST_TIME_ZONE = pytz.timezone('US/Eastern')

EQUATOR = GeoCoordinate(0, 0)

# In a non-leap year, March 22 is day 81, the day of zero declination
# in the declination model, and December 21 is day 355.
EQUINOX = datetime.date(2026, 3, 22)
WINTER_SOLSTICE = datetime.date(2026, 12, 21)
SUMMER_SOLSTICE = datetime.date(2026, 6, 21)


class SolarCalculatorFunctionTests(TestCase):


    def test_day_of_year(self):

        cases = (
            (datetime.date(2026, 1, 1), 1),
            (EQUINOX, 81),
            (WINTER_SOLSTICE, 355),
            (datetime.date(2024, 12, 31), 366),
        )

        for date, expected in cases:
            self.assertEqual(solar_calculator.day_of_year(date), expected)


    def test_solar_declination(self):

        cases = (
            (81, 0),
            (81 + 365 / 4, 23.45),
            (81 + 3 * 365 / 4, -23.45),
        )

        for day, expected in cases:
            actual = math.degrees(solar_calculator.solar_declination(day))
            self.assertAlmostEqual(actual, expected, places=6)


    def test_equation_of_time(self):

        # At day 81 the day angle is zero, leaving only the cosine term.
        self.assertAlmostEqual(
            solar_calculator.equation_of_time_minutes(81), -7.53)

        # The equation of time stays within about 17 minutes of zero.
        for day in range(1, 367):
            minutes = solar_calculator.equation_of_time_minutes(day)
            self.assertLess(abs(minutes), 17)


    def test_hour_angle_for_elevation(self):

        # At the equator on the equinox the sun rises and sets about
        # six hours from solar noon.
        hour_angle = solar_calculator.hour_angle_for_elevation(
            0, 0, solar_calculator.SUNRISE_SUNSET_ELEVATION)
        self.assertAlmostEqual(hour_angle, 90.83, places=2)

        # Geometric horizon.
        self.assertAlmostEqual(
            solar_calculator.hour_angle_for_elevation(0, 0, 0), 90)


    def test_hour_angle_for_unreachable_elevation(self):

        winter = solar_calculator.solar_declination(355)
        summer = solar_calculator.solar_declination(172)

        cases = (

            # polar night
            (85, winter, solar_calculator.SUNRISE_SUNSET_ELEVATION),
            (-85, summer, solar_calculator.SUNRISE_SUNSET_ELEVATION),

            # midnight sun: sun never descends to twilight elevations
            (85, summer, solar_calculator.ASTRONOMICAL_TWILIGHT_ELEVATION),
            (60, summer, solar_calculator.ASTRONOMICAL_TWILIGHT_ELEVATION),

            # poles
            (90, 0, 0),
            (-90, 0, 0),
        )

        for latitude, declination, elevation in cases:
            self.assertIsNone(solar_calculator.hour_angle_for_elevation(
                latitude, declination, elevation))


    def test_time_for_elevation(self):

        elevation = solar_calculator.SUNRISE_SUNSET_ELEVATION

        rise = solar_calculator.time_for_elevation(0, 0, elevation, True)
        set_ = solar_calculator.time_for_elevation(0, 0, elevation, False)

        # Within a few minutes of 06:00 and 18:00 local solar time.
        self.assertLess(abs(rise - 6), 5 / 60)
        self.assertLess(abs(set_ - 18), 5 / 60)

        # Rising and setting times are symmetric about solar noon.
        self.assertAlmostEqual(rise + set_, 24)

        winter = solar_calculator.solar_declination(355)
        self.assertIsNone(
            solar_calculator.time_for_elevation(85, winter, elevation, True))


    def test_event_time_at_equator_on_equinox(self):

        time = solar_calculator.event_time(
            EQUINOX, EQUATOR, solar_calculator.SUNRISE_SUNSET_ELEVATION,
            True)

        expected = datetime.datetime(2026, 3, 22, 6, tzinfo=pytz.utc)

        self.assert_times_close(time, expected, 5 * 60)


    def test_event_time_during_polar_night(self):
        coordinate = GeoCoordinate(85, 0)
        time = solar_calculator.event_time(
            WINTER_SOLSTICE, coordinate,
            solar_calculator.SUNRISE_SUNSET_ELEVATION, True)
        self.assertIsNone(time)


    def test_event_time_longitude_correction(self):

        # The same solar event happens an hour later, in absolute time,
        # fifteen degrees farther west.
        elevation = solar_calculator.SUNRISE_SUNSET_ELEVATION
        east = solar_calculator.event_time(
            EQUINOX, GeoCoordinate(0, 0), elevation, True)
        west = solar_calculator.event_time(
            EQUINOX, GeoCoordinate(0, -15), elevation, True)

        self.assert_times_close(
            west - datetime.timedelta(hours=1), east, 1)


    def test_event_time_time_zone(self):

        coordinate = GeoCoordinate(TEST_LAT, TEST_LON, TEST_TIME_ZONE)

        time = solar_calculator.event_time(
            datetime.date(2026, 6, 21), coordinate,
            solar_calculator.SUNRISE_SUNSET_ELEVATION, True)

        self.assertEqual(time.tzinfo.zone, 'US/Eastern')

        # Ithaca sunrise on the summer solstice is at about 5:25 EDT.
        expected = TEST_TIME_ZONE.localize(
            datetime.datetime(2026, 6, 21, 5, 25))
        self.assert_times_close(time, expected, 10 * 60)


    def test_approximate_sunrise_hour(self):

        # With zero declination the approximation is exactly six.
        self.assertAlmostEqual(
            solar_calculator.approximate_sunrise_hour(40, 0), 6)

        # Summer sunrise at a northern latitude is earlier...
        summer = solar_calculator.solar_declination(172)
        sunrise = solar_calculator.approximate_sunrise_hour(40, summer)
        self.assertLess(sunrise, 6)
        self.assertGreaterEqual(sunrise, 5)

        # ...and is clamped at high latitudes.
        self.assertEqual(
            solar_calculator.approximate_sunrise_hour(70, summer), 5)

        winter = solar_calculator.solar_declination(355)
        self.assertEqual(
            solar_calculator.approximate_sunrise_hour(70, winter), 9)

        # The approximation is defined even where there is no sunrise.
        self.assertEqual(
            solar_calculator.approximate_sunrise_hour(89, winter), 9)


    def test_approximate_sunset_hour(self):
        declination = solar_calculator.solar_declination(100)
        sunrise = solar_calculator.approximate_sunrise_hour(30, declination)
        sunset = solar_calculator.approximate_sunset_hour(30, declination)
        self.assertAlmostEqual(sunrise + sunset, 24)


class SolarCalculatorTests(TestCase):


    def setUp(self):
        coordinate = GeoCoordinate(TEST_LAT, TEST_LON, TEST_TIME_ZONE)
        self.calculator = SolarCalculator(coordinate)


    def test_get_event_time(self):

        date = datetime.date(2026, 10, 1)

        for event in SolarEvent:
            time = self.calculator.get_event_time(date, event)
            expected = solar_calculator.event_time(
                date, self.calculator.coordinate, event.elevation,
                event.rising)
            self.assertEqual(time, expected)


    def test_get_event_time_by_name(self):
        date = datetime.date(2026, 10, 1)
        self.assertEqual(
            self.calculator.get_event_time(date, 'Civil Twilight Start'),
            self.calculator.get_event_time(
                date, SolarEvent.CIVIL_TWILIGHT_START))


    def test_get_event_time_with_unknown_name(self):
        self.assert_raises(
            ValueError, self.calculator.get_event_time,
            datetime.date(2026, 10, 1), 'Moonrise')


    def test_get_events_are_in_order(self):

        events = self.calculator.get_events(datetime.date(2026, 10, 1))

        self.assertEqual(list(events.keys()), list(SolarEvent))

        times = list(events.values())
        self.assertTrue(all(t is not None for t in times))
        self.assertEqual(times, sorted(times))


    def test_get_events_during_midnight_sun(self):

        calculator = SolarCalculator(GeoCoordinate(69.65, 18.96))
        events = calculator.get_events(SUMMER_SOLSTICE)

        for event in SolarEvent:
            self.assertIsNone(events[event])

        # The event list contains only events that occur.
        self.assertEqual(calculator.get_event_list(SUMMER_SOLSTICE), [])


    def test_get_event_list(self):

        date = datetime.date(2026, 10, 1)
        events = self.calculator.get_event_list(date)

        self.assertEqual(len(events), len(SolarEvent))
        self.assertEqual(events[3].event, SolarEvent.SUNRISE)
        self.assertEqual(
            events[3].time,
            self.calculator.get_event_time(date, SolarEvent.SUNRISE))


    def test_get_solar_noon(self):

        date = datetime.date(2026, 10, 1)
        noon = self.calculator.get_solar_noon(date)
        sunrise = self.calculator.get_event_time(date, SolarEvent.SUNRISE)
        sunset = self.calculator.get_event_time(date, SolarEvent.SUNSET)

        midpoint = sunrise + (sunset - sunrise) / 2
        self.assert_times_close(noon, midpoint, 1)


    def test_profiles(self):

        date = SUMMER_SOLSTICE

        approximate = self.calculator.get_sunrise_hour(
            date, CalculationProfile.APPROXIMATE)
        precise = self.calculator.get_sunrise_hour(
            date, CalculationProfile.PRECISE)

        # Both are a little before six local solar time, but they differ
        # since the approximation ignores refraction.
        self.assertLess(approximate, 6)
        self.assertLess(precise, approximate)

        # Profiles can be specified by value.
        self.assertEqual(
            self.calculator.get_sunset_hour(date, 'approximate'),
            24 - approximate)


    def test_precise_profile_during_polar_night(self):

        calculator = SolarCalculator(GeoCoordinate(85, 0))

        self.assertIsNone(calculator.get_sunrise_hour(WINTER_SOLSTICE))
        self.assertIsNone(calculator.get_sunset_hour(WINTER_SOLSTICE))

        self.assertEqual(
            calculator.get_sunrise_hour(
                WINTER_SOLSTICE, CalculationProfile.APPROXIMATE), 9)


    def test_bad_profile(self):
        self.assert_raises(
            ValueError, self.calculator.get_sunrise_hour,
            SUMMER_SOLSTICE, 'exact')
