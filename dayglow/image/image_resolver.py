"""Module containing class `ImageResolver`."""


from collections import namedtuple
from concurrent.futures import Future
import logging
import re
import uuid

from dayglow.image.image_record import create_image_record
import dayglow.image.similarity_matcher as similarity_matcher


_logger = logging.getLogger(__name__)


_CalendarEvent = namedtuple(
    'CalendarEvent', ('id', 'title', 'location', 'assigned_image_id'),
    defaults=(None, None))


class CalendarEvent(_CalendarEvent):

    """
    Calendar event for which an image is resolved.

    A `CalendarEvent` is a `namedtuple` with four attributes: `id`,
    `title`, `location`, and `assigned_image_id`. The location and the
    assigned image id are optional. Events are immutable: an image
    resolver returns an updated copy of an event rather than modifying
    the event it was given.
    """

    __slots__ = ()


    def assign_image(self, image_id):
        return self._replace(assigned_image_id=image_id)


Resolution = namedtuple('Resolution', ('image_id', 'event'))
"""
Result of an image resolution.

The `image_id` is the id of the image resolved for the event, or
`None` if no image could be found or fetched. The `event` is the event,
with its `assigned_image_id` set to `image_id` if an image was found.
"""


SearchResult = namedtuple('SearchResult', ('record', 'thumbnail_bytes'))
"""
Image search result.

The `record` is an `ImageRecord` that has not been added to the image
cache, and `thumbnail_bytes` is the thumbnail image data of the record.
"""


_MAX_QUERY_TITLE_WORDS = 3
_MIN_QUERY_TITLE_WORD_LENGTH = 3
_MAX_QUERY_LOCATION_PARTS = 2

_CATEGORY_KEYWORDS = (
    (('meeting', 'conference'), 'business'),
    (('birthday', 'party'), 'celebration'),
    (('vacation', 'travel'), 'travel'),
    (('workout', 'exercise'), 'fitness'),
)
"""
Keywords added to image queries for events whose titles include certain
words, in order of precedence.
"""

_LOCATION_SEPARATOR_RE = re.compile(r'[, ]+')


class ImageResolver:


    """
    Resolves images for calendar events.

    An image resolver chooses an image for an event, preferring images
    that are already in its image cache and falling back to fetching a
    new image from its photo client. Resolution proceeds in the
    following steps, each of which runs only if the previous one did
    not resolve an image:

        1. If the event has an assigned image whose record and image
           data are both in the cache, resolve that image. Otherwise
           drop the assignment.

        2. Score every unexpired cached image against the event title
           and location with the `RESOLUTION` scoring profile.

        3. If the best score is at least `AUTO_ACCEPT_THRESHOLD`,
           resolve the best image.

        4. If a cached image was fetched for exactly the event's
           title and location, resolve it.

        5. If the best score exceeds `GOOD_ENOUGH_THRESHOLD`,
           resolve the best image.

        6. Queue a request to fetch a new image for the event. When
           the request completes, cache the new image and resolve it.

    Steps 1 through 5 complete synchronously, without network access.
    Fetch failures yield a resolution with an image id of `None`.

    The `photo_client` initializer argument must have the methods of
    an `UnsplashClient`.
    """


    def __init__(self, metadata_store, request_queue, photo_client):
        self._store = metadata_store
        self._queue = request_queue
        self._client = photo_client


    @property
    def metadata_store(self):
        return self._store


    @property
    def request_queue(self):
        return self._queue


    def resolve(self, event):

        """
        Resolves an image for an event.

        Returns
        -------
        concurrent.futures.Future
            future whose result is a `Resolution`. The future is
            already done if the image was resolved from the cache.
        """

        resolution = self.resolve_from_cache(event)

        if resolution is not None:
            return _completed_future(resolution)

        # step 6
        return self._fetch_new_image(_drop_missing_assignment(
            event, self._store))


    def resolve_from_cache(self, event):

        """
        Resolves an image for an event from the image cache only.

        Returns a `Resolution`, or `None` if no cached image is
        suitable for the event.
        """

        # step 1
        image_id = event.assigned_image_id
        if image_id is not None:
            if self._store.has_image(image_id):
                return Resolution(image_id, event)
            _logger.debug(
                f'Assigned image "{image_id}" of event "{event.id}" is '
                f'no longer cached or has no image data.')
            event = event.assign_image(None)

        # step 2
        title = event.title or ''
        location = event.location

        candidates = self._store.find_candidates(title, location)

        title_words = similarity_matcher.split_title(title)

        best_record = None
        best_score = None

        for record in candidates:
            score = similarity_matcher.score(
                record, title_words, location,
                similarity_matcher.RESOLUTION)
            if best_score is None or score > best_score:
                best_record = record
                best_score = score

        # step 3
        if best_score is not None and \
                best_score >= similarity_matcher.AUTO_ACCEPT_THRESHOLD:
            return self._assign(event, best_record, 'very good')

        # step 4
        for record in candidates:
            if _is_exact_match(record, title, location):
                return self._assign(event, record, 'exact')

        # step 5
        if best_score is not None and \
                best_score > similarity_matcher.GOOD_ENOUGH_THRESHOLD:
            return self._assign(event, best_record, 'good enough')

        return None


    def _assign(self, event, record, description):
        _logger.debug(
            f'Using {description} cached image "{record.id}" for event '
            f'"{event.id}".')
        return Resolution(record.id, event.assign_image(record.id))


    def _fetch_new_image(self, event):

        query = build_search_query(event)
        request_id = f'fetch_{event.id}_{uuid.uuid4()}'

        _logger.info(
            f'Queueing image fetch for event "{event.id}" with query '
            f'"{query}".')

        return self._queue.enqueue(
            request_id, lambda: self._fetch_image(event, query))


    def _fetch_image(self, event, query):

        photo = self._client.fetch_random_photo(query)

        if photo is None:
            _logger.warning(
                f'Could not fetch image for event "{event.id}" with '
                f'query "{query}".')
            return Resolution(None, event)

        image_bytes = self._client.download_bytes(photo.full_url)

        if image_bytes is None:
            _logger.warning(
                f'Could not download image "{photo.id}" for event '
                f'"{event.id}".')
            return Resolution(None, event)

        self._client.track_download(photo.id)

        record = create_image_record_for_photo(
            photo, title_query=event.title, location_query=event.location)

        try:
            self._store.put(record, image_bytes)

        except OSError as e:
            _logger.warning(
                f'Could not cache image "{photo.id}" for event '
                f'"{event.id}". Error message was: {str(e)}')
            return Resolution(None, event)

        _logger.info(f'Cached new image "{record.id}" for event "{event.id}".')

        return Resolution(record.id, event.assign_image(record.id))


    def select_image(self, event, record, image_bytes=None):

        """
        Caches an image that a user selected for an event and assigns
        it to the event, replacing any existing assignment.

        Returns a `Resolution`.
        """

        self._store.put(record, image_bytes)

        _logger.info(
            f'Assigned selected image "{record.id}" to event '
            f'"{event.id}".')

        return Resolution(record.id, event.assign_image(record.id))


    def find_similar_images(self, title, location=None):

        """
        Gets the cached images most similar to an event title and
        location, most similar first.

        Images are ranked with the `BROWSING` scoring profile.
        """

        candidates = self._store.find_candidates(title, location)

        ranked = similarity_matcher.rank(
            candidates, title, location, similarity_matcher.BROWSING)

        return [record for record, _ in ranked]


    def search_images(self, query):

        """
        Searches the photo provider for images matching a query.

        Identical concurrent searches share a single request.

        Returns
        -------
        concurrent.futures.Future
            future whose result is a list of `SearchResult` objects.
            The list is empty if the search failed.
        """

        request_id = f'search_{query.strip().lower()}'

        return self._queue.enqueue(request_id, lambda: self._search(query))


    def _search(self, query):

        photos = self._client.search_photos(query)

        if photos is None:
            _logger.warning(f'Image search for query "{query}" failed.')
            return []

        results = []

        for photo in photos:

            thumbnail_bytes = self._client.download_bytes(photo.thumbnail_url)

            if thumbnail_bytes is None:
                continue

            record = create_image_record_for_photo(photo, title_query=query)

            results.append(SearchResult(record, thumbnail_bytes))

        return results


    def get_record(self, image_id):
        return self._store.get(image_id)


    def get_image_bytes(self, image_id):
        return self._store.get_image_bytes(image_id)


    def get_random_record(self):
        return self._store.get_random_record()


    def get_queue_status(self):
        return self._queue.status()


    def purge_expired_images(self):
        return self._store.purge_expired_in_background()


def _completed_future(result):
    future = Future()
    future.set_result(result)
    return future


def _drop_missing_assignment(event, store):
    image_id = event.assigned_image_id
    if image_id is not None and not store.has_image(image_id):
        return event.assign_image(None)
    else:
        return event


def _is_exact_match(record, title, location):
    return record.title_query is not None and \
        record.title_query.lower() == title.lower() and \
        record.location_query == location


def create_image_record_for_photo(
        photo, title_query=None, location_query=None):

    """Creates a new image record for a provider photo."""

    return create_image_record(
        source_id=photo.id,
        full_url=photo.full_url,
        thumbnail_url=photo.thumbnail_url,
        author=photo.author_name,
        author_url=photo.author_url,
        download_tracking_url=photo.download_tracking_url,
        tags=photo.tags,
        location_query=location_query,
        title_query=title_query)


def build_search_query(event):

    """
    Builds a photo search query for an event.

    The query comprises up to three words of the event title that are
    at least three characters long, up to two parts of the event
    location, and a category keyword for some kinds of events, for
    example "business" for meetings. It is lowercase.
    """

    title = event.title or ''

    parts = [
        w for w in title.split()
        if len(w) >= _MIN_QUERY_TITLE_WORD_LENGTH
    ][:_MAX_QUERY_TITLE_WORDS]

    if event.location:
        location_parts = [
            p for p in _LOCATION_SEPARATOR_RE.split(event.location) if p]
        parts.extend(location_parts[:_MAX_QUERY_LOCATION_PARTS])

    lower_title = title.lower()

    for words, keyword in _CATEGORY_KEYWORDS:
        if any(w in lower_title for w in words):
            parts.append(keyword)
            break

    return ' '.join(parts).lower()
