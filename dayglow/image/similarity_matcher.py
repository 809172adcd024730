"""
Functions that score cached images against event titles and locations.

A score is the sum of independent contributions from three kinds of
match between an image record and an event:

    * a match between the record's title query and the event title,
    * matches between the record's tags and the words of the event
      title, and
    * a match between the record's location query and the event
      location.

Scores are computed with one of two named scoring profiles.
`RESOLUTION` is used to choose an image for an event automatically,
and `BROWSING` to order images in a list of images similar to an
event. The two profiles weight matches differently.
"""


from collections import namedtuple


ScoringProfile = namedtuple('ScoringProfile', (
    'name',
    'graded_title_match',
    'exact_title_weight',
    'partial_title_weight',
    'title_word_weight',
    'tag_weight',
    'location_weight'
))
"""
Similarity scoring profile.

If `graded_title_match` is `True`, a title query that equals the event
title scores `exact_title_weight`, one that contains or is contained in
the title scores `partial_title_weight`, and otherwise each title word
that is also a word of the title query scores `title_word_weight`. If
`graded_title_match` is `False`, each title word contained in the
title query scores `title_word_weight`.

Each tag that overlaps a title word scores `tag_weight`, and a location
match scores `location_weight`.
"""


RESOLUTION = ScoringProfile(
    name='Resolution',
    graded_title_match=True,
    exact_title_weight=3.,
    partial_title_weight=2.,
    title_word_weight=.5,
    tag_weight=.3,
    location_weight=1.)

BROWSING = ScoringProfile(
    name='Browsing',
    graded_title_match=False,
    exact_title_weight=0.,
    partial_title_weight=0.,
    title_word_weight=1.,
    tag_weight=.5,
    location_weight=2.)


AUTO_ACCEPT_THRESHOLD = 1.5
"""Minimum resolution score of an image that is used without question."""

GOOD_ENOUGH_THRESHOLD = .5
"""
Resolution score that an image must exceed to be used rather than
fetching a new image.
"""

SIMILAR_IMAGES_LIMIT = 10


def split_title(title):

    """
    Splits an event title into lowercase words.

    Words are separated by whitespace.
    """

    if title is None:
        return []
    else:
        return title.lower().split()


def score(record, title_words, location_query=None, profile=RESOLUTION):

    """
    Scores an image record against an event.

    Parameters
    ----------
    record : ImageRecord
        the record to score.

    title_words : list of str
        the lowercase words of the event title, as returned by
        `split_title`.

    location_query : str or None
        the event location.

    profile : ScoringProfile
        the scoring profile.

    Returns
    -------
    float
        the nonnegative score of the record.
    """

    return \
        _score_title(record, title_words, profile) + \
        _score_tags(record, title_words, profile) + \
        _score_location(record, location_query, profile)


def _score_title(record, title_words, profile):

    if not record.title_query:
        return 0.

    title_query = record.title_query.lower()

    if not profile.graded_title_match:
        count = sum(1 for w in title_words if w in title_query)
        return count * profile.title_word_weight

    title = ' '.join(title_words)

    if title_query == title:
        return profile.exact_title_weight

    elif title and (title_query in title or title in title_query):
        return profile.partial_title_weight

    else:
        query_words = set(title_query.split())
        count = sum(1 for w in title_words if w in query_words)
        return count * profile.title_word_weight


def _score_tags(record, title_words, profile):

    count = 0

    for tag in record.tags:

        tag = tag.lower()

        # An empty tag would be contained in every word.
        if not tag:
            continue

        if any(tag in w or w in tag for w in title_words):
            count += 1

    return count * profile.tag_weight


def _score_location(record, location_query, profile):

    if not location_query or not record.location_query:
        return 0.

    a = location_query.lower()
    b = record.location_query.lower()

    if a in b or b in a:
        return profile.location_weight
    else:
        return 0.


def rank(
        records, title, location_query=None, profile=BROWSING,
        limit=SIMILAR_IMAGES_LIMIT):

    """
    Ranks image records by decreasing similarity to an event.

    Records with equal scores retain their relative order. If `limit`
    is not `None`, at most `limit` records are returned.

    Returns
    -------
    list of (ImageRecord, float) pairs
        the ranked records with their scores.
    """

    title_words = split_title(title)

    scored = [
        (r, score(r, title_words, location_query, profile))
        for r in records]

    scored.sort(key=lambda p: p[1], reverse=True)

    if limit is not None:
        scored = scored[:limit]

    return scored
