"""Module containing class `ImageRecord`."""


from collections import namedtuple
import datetime
import uuid


IMAGE_TTL = datetime.timedelta(days=7)
"""Time for which a cached image remains valid."""


_ImageRecord = namedtuple('ImageRecord', (
    'id',
    'source_id',
    'full_url',
    'thumbnail_url',
    'author',
    'author_url',
    'download_tracking_url',
    'cached_at',
    'tags',
    'location_query',
    'title_query'
))


class ImageRecord(_ImageRecord):

    """
    Metadata of a cached stock photograph.

    Attributes
    ----------
    id : str
        the cache id of the image, a UUID string.

    source_id : str or None
        the image provider's id for the image.

    full_url, thumbnail_url : str
        URLs of the full-size and thumbnail versions of the image.

    author : str
        the name of the photographer.

    author_url : str or None
        the URL of the photographer's profile page.

    download_tracking_url : str
        the URL the image provider asks clients to request when they
        use the image.

    cached_at : datetime.datetime
        the time-zone-aware time at which the image was cached.

    tags : tuple of str
        the provider's tags for the image, in provider order.

    location_query, title_query : str or None
        the event location and title for which the image was fetched
        or searched.
    """

    __slots__ = ()


    @property
    def expires_at(self):
        return self.cached_at + IMAGE_TTL


    @property
    def is_expired(self):
        return self.is_expired_at(utc_now())


    def is_expired_at(self, time):
        return time > self.expires_at


    def to_dict(self):

        """Gets a JSON-serializable dictionary for this record."""

        d = self._asdict()
        d['cached_at'] = self.cached_at.isoformat()
        d['tags'] = list(self.tags)
        return d


    @staticmethod
    def from_dict(d):

        """
        Creates a record from a dictionary created by `to_dict`.

        Raises `KeyError`, `TypeError`, or `ValueError` for malformed
        dictionaries.
        """

        d = dict(d)

        cached_at = datetime.datetime.fromisoformat(d['cached_at'])
        if cached_at.tzinfo is None:
            cached_at = cached_at.replace(tzinfo=datetime.timezone.utc)
        d['cached_at'] = cached_at

        d['tags'] = tuple(d.get('tags', ()))

        for name in ('source_id', 'author_url', 'location_query',
                     'title_query'):
            d.setdefault(name, None)

        return ImageRecord(**d)


def create_image_record(
        full_url, thumbnail_url, author, download_tracking_url,
        source_id=None, author_url=None, tags=(), location_query=None,
        title_query=None, cached_at=None):

    """
    Creates an image record with a new id.

    The record's `cached_at` time defaults to the current time.
    """

    if cached_at is None:
        cached_at = utc_now()

    return ImageRecord(
        id=str(uuid.uuid4()).upper(),
        source_id=source_id,
        full_url=full_url,
        thumbnail_url=thumbnail_url,
        author=author,
        author_url=author_url,
        download_tracking_url=download_tracking_url,
        cached_at=cached_at,
        tags=tuple(tags),
        location_query=location_query,
        title_query=title_query)


def utc_now():
    return datetime.datetime.now(datetime.timezone.utc)


RECORD_SCHEMA = {
    'type': 'object',
    'properties': {
        'id': {'type': 'string', 'minLength': 1},
        'source_id': {'type': ['string', 'null']},
        'full_url': {'type': 'string'},
        'thumbnail_url': {'type': 'string'},
        'author': {'type': 'string'},
        'author_url': {'type': ['string', 'null']},
        'download_tracking_url': {'type': 'string'},
        'cached_at': {'type': 'string'},
        'tags': {'type': 'array', 'items': {'type': 'string'}},
        'location_query': {'type': ['string', 'null']},
        'title_query': {'type': ['string', 'null']},
    },
    'required': [
        'id', 'full_url', 'thumbnail_url', 'author',
        'download_tracking_url', 'cached_at', 'tags'],
    'additionalProperties': False
}
"""JSON schema of a serialized image record."""


METADATA_SCHEMA = {
    'type': 'object',
    'additionalProperties': RECORD_SCHEMA
}
"""JSON schema of an image metadata file, a mapping from id to record."""
