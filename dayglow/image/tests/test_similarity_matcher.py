import datetime

from dayglow.image.image_record import create_image_record
from dayglow.image.similarity_matcher import (
    AUTO_ACCEPT_THRESHOLD, BROWSING, RESOLUTION, rank, score, split_title)
from dayglow.tests.test_case import TestCase


def _create_record(title_query=None, location_query=None, tags=()):
    return create_image_record(
        full_url='f', thumbnail_url='t', author='a',
        download_tracking_url='d', tags=tags,
        location_query=location_query, title_query=title_query,
        cached_at=datetime.datetime.now(datetime.timezone.utc))


class SimilarityMatcherTests(TestCase):


    def test_split_title(self):

        cases = (
            (None, []),
            ('', []),
            ('  Team   Meeting ', ['team', 'meeting']),
            ('Birthday Party', ['birthday', 'party']),
        )

        for title, expected in cases:
            self.assertEqual(split_title(title), expected)


    def test_resolution_score(self):

        words = split_title('Birthday Party')

        cases = (

            # exact title match plus location match
            (_create_record('birthday party', 'New York'), 'New York', 4),

            # exact title match is case insensitive
            (_create_record('BIRTHDAY PARTY'), None, 3),

            # title query contained in title
            (_create_record('party'), None, 2),

            # title contained in title query
            (_create_record('surprise birthday party'), None, 2),

            # one shared word
            (_create_record('pool party time'), None, .5),

            # no title query
            (_create_record(), None, 0),

            # location containment is case insensitive
            (_create_record(location_query='new york, ny'), 'New York', 1),
            (_create_record(location_query='Paris'), 'New York', 0),
            (_create_record(location_query='Paris'), None, 0),
        )

        for record, location, expected in cases:
            actual = score(record, words, location, RESOLUTION)
            self.assertAlmostEqual(actual, expected)

        record = _create_record('birthday party', 'New York')
        self.assertGreater(
            score(record, words, 'New York'), AUTO_ACCEPT_THRESHOLD)


    def test_tag_score(self):

        words = split_title('Birthday Party')

        cases = (
            ((), 0),
            (('birthday',), .3),
            (('Birthday', 'Party'), .6),

            # tags and words match by containment in either direction
            (('birthdays', 'art'), .6),

            # each tag counts once
            (('birthday party',), .3),

            (('cake', ''), 0),
        )

        for tags, expected in cases:
            record = _create_record(tags=tags)
            actual = score(record, words, None, RESOLUTION)
            self.assertAlmostEqual(actual, expected)


    def test_browsing_score(self):

        words = split_title('Team Meeting')

        cases = (
            (_create_record('team meeting'), None, 2),
            (_create_record('meeting'), None, 1),
            (_create_record('meetings'), None, 1),
            (_create_record('lunch'), None, 0),
            (_create_record(tags=('team',)), None, .5),
            (_create_record(location_query='Boston'), 'Boston', 2),
        )

        for record, location, expected in cases:
            actual = score(record, words, location, BROWSING)
            self.assertAlmostEqual(actual, expected)


    def test_rank(self):

        a = _create_record('lunch')
        b = _create_record('team meeting', 'Boston')
        c = _create_record('meeting')
        d = _create_record('dinner')

        ranked = rank([a, b, c, d], 'Team Meeting', 'Boston')

        self.assertEqual([r for r, _ in ranked], [b, c, a, d])
        self.assertEqual([s for _, s in ranked], [4, 1, 0, 0])


    def test_rank_limit(self):

        records = [_create_record(f'meeting {i}') for i in range(15)]

        ranked = rank(records, 'meeting')
        self.assertEqual(len(ranked), 10)
        self.assertEqual([r for r, _ in ranked], records[:10])

        ranked = rank(records, 'meeting', limit=None)
        self.assertEqual(len(ranked), 15)

        self.assertEqual(rank([], 'meeting'), [])
