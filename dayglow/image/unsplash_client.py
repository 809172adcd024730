"""
Module containing class `UnsplashClient`.

An `UnsplashClient` fetches stock photograph metadata and image data
from the Unsplash REST API (see https://unsplash.com/documentation).
All of its methods are synchronous, and are intended to be run on the
worker threads of a `RequestQueue`.

The methods of an `UnsplashClient` do not raise exceptions for network
or decoding failures. Instead they log such failures and return `None`,
which callers treat as "no image".
"""


from collections import namedtuple
import json
import logging
import urllib.error
import urllib.parse
import urllib.request


_logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://api.unsplash.com'

_DEFAULT_TIMEOUT = 30
"""Request timeout in seconds."""

_API_VERSION_HEADER = ('Accept-Version', 'v1')


PhotoMetadata = namedtuple('PhotoMetadata', (
    'id',
    'full_url',
    'thumbnail_url',
    'author_name',
    'author_url',
    'download_tracking_url',
    'tags'
))
"""
Metadata of a photo available from the image provider.

The `full_url` is the URL of the "regular" size of the photo, the
size displayed for events. The `tags` are the titles of the provider's
tags for the photo, as a tuple of strings.
"""


class UnsplashClient:


    def __init__(
            self, access_key, base_url=DEFAULT_BASE_URL,
            timeout=_DEFAULT_TIMEOUT):

        self._access_key = access_key
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout


    @property
    def base_url(self):
        return self._base_url


    def fetch_random_photo(self, query=None):

        """
        Fetches metadata for a random photo matching a query.

        Returns `None` if the request fails or its response cannot be
        decoded.
        """

        params = {}
        if query:
            params['query'] = query

        data = self._get_json('/photos/random', params)

        if data is None:
            return None

        return self._parse_photo_logging_errors(data)


    def search_photos(self, query, page=1, per_page=10):

        """
        Searches for photos matching a query.

        Returns a list of `PhotoMetadata`, or `None` if the request
        fails or its response cannot be decoded.
        """

        params = {'query': query, 'page': page, 'per_page': per_page}

        data = self._get_json('/search/photos', params)

        if data is None:
            return None

        try:
            results = data['results']
        except (KeyError, TypeError):
            _logger.warning(
                f'Unsplash search response for query "{query}" has no '
                f'results.')
            return None

        photos = [self._parse_photo_logging_errors(r) for r in results]

        return [p for p in photos if p is not None]


    def download_bytes(self, url):

        """
        Downloads the data at a URL.

        Returns `None` if the download fails.
        """

        try:
            with urllib.request.urlopen(
                    url, timeout=self._timeout) as response:
                return response.read()

        except (urllib.error.URLError, OSError, ValueError) as e:
            _logger.warning(
                f'Download of "{url}" failed with message: {str(e)}')
            return None


    def track_download(self, photo_id):

        """
        Notifies the provider that a photo was downloaded, as required
        by the Unsplash API guidelines.

        Tracking is best effort: failures are logged and ignored.
        """

        path = f'/photos/{urllib.parse.quote(photo_id)}/download'

        return self._get_json(path, {}) is not None


    def _get_json(self, path, params):

        params = dict(params)
        params['client_id'] = self._access_key

        url = f'{self._base_url}{path}?{urllib.parse.urlencode(params)}'

        request = urllib.request.Request(url)
        request.add_header(*_API_VERSION_HEADER)

        try:
            with urllib.request.urlopen(
                    request, timeout=self._timeout) as response:
                content = response.read()

        except (urllib.error.URLError, OSError, ValueError) as e:
            _logger.warning(
                f'Unsplash request "{path}" failed with message: {str(e)}')
            return None

        try:
            return json.loads(content)

        except ValueError as e:
            _logger.warning(
                f'Could not decode Unsplash response for request '
                f'"{path}". Error message was: {str(e)}')
            return None


    def _parse_photo_logging_errors(self, data):
        try:
            return parse_photo(data)
        except (AttributeError, KeyError, TypeError) as e:
            _logger.warning(
                f'Could not parse Unsplash photo. Missing or malformed '
                f'field {str(e)}.')
            return None


def parse_photo(data):

    """
    Creates a `PhotoMetadata` from an Unsplash API photo object.

    Raises `KeyError` or `TypeError` if a required field is missing.
    """

    tags = data.get('tags') or ()
    tag_titles = tuple(t['title'] for t in tags if t.get('title'))

    user = data['user']

    return PhotoMetadata(
        id=data['id'],
        full_url=data['urls']['regular'],
        thumbnail_url=data['urls']['thumb'],
        author_name=user['name'],
        author_url=(user.get('links') or {}).get('html'),
        download_tracking_url=data['links']['download_location'],
        tags=tag_titles)
