import logging

from dayglow.tests.test_case import TestCase
import dayglow.util.logging_utils as logging_utils


class LoggingUtilsTests(TestCase):


    def test_create_formatter(self):

        formatter = logging_utils.create_formatter()

        record = logging.LogRecord(
            'dayglow.util.request_queue', logging.WARNING, __file__, 1,
            'Request "x" failed.', None, None)

        message = formatter.format(record)

        self.assertTrue(message.endswith(
            ' dayglow.util.request_queue WARNING  Request "x" failed.'))

        # The message starts with a date and a time with milliseconds.
        date, time = message.split()[:2]
        self.assertEqual(len(date), 10)
        self.assertEqual(len(time), 12)


    def test_append_stack_trace(self):

        try:
            raise ValueError('bad value')

        except ValueError:
            message = logging_utils.append_stack_trace('Fetch failed.')

        self.assertTrue(message.startswith(
            'Fetch failed. See stack trace below.\n'))
        self.assertIn('ValueError: bad value', message)
