"""
Module containing class `Services`.

A `Services` object constructs and holds the long-lived objects of a
Dayglow application: the solar calculator and daylight color model for
the configured location, and the image metadata store, request queue,
photo client, and image resolver of the image cache. The objects are
constructed explicitly from application settings and passed to each
other. Any number of independent sets of them can coexist.
"""


import logging

from dayglow.ephem.daylight_color_model import DaylightColorModel
from dayglow.ephem.geo_coordinate import GeoCoordinate
from dayglow.ephem.solar_calculator import SolarCalculator
from dayglow.image.image_metadata_store import ImageMetadataStore
from dayglow.image.image_resolver import ImageResolver
from dayglow.image.unsplash_client import UnsplashClient
from dayglow.util.request_queue import RequestQueue


_logger = logging.getLogger(__name__)


class Services:


    def __init__(self, settings, photo_client=None):

        """
        Creates the services of a Dayglow application.

        Parameters
        ----------
        settings : Settings
            application settings, as returned by
            `app_settings.load_settings`.

        photo_client : object or None
            the photo client of the image resolver, or `None` to create
            an `UnsplashClient` from the settings.
        """

        self._settings = settings

        location = settings.location
        self._coordinate = GeoCoordinate(
            location.latitude, location.longitude, location.time_zone)

        self._solar_calculator = SolarCalculator(self._coordinate)
        self._daylight_color_model = DaylightColorModel()

        cache = settings.image_cache
        self._image_metadata_store = ImageMetadataStore(cache.dir_path)
        if cache.purge_on_startup:
            self._image_metadata_store.purge_expired_in_background()

        queue = settings.request_queue
        self._request_queue = RequestQueue(
            worker_count=queue.worker_count,
            min_request_interval=queue.min_request_interval,
            max_requests_per_minute=queue.max_requests_per_minute,
            name='Image Request Queue')

        if photo_client is None:
            photo_client = _create_unsplash_client(settings.unsplash)
        self._photo_client = photo_client

        self._image_resolver = ImageResolver(
            self._image_metadata_store, self._request_queue,
            self._photo_client)


    @property
    def settings(self):
        return self._settings


    @property
    def coordinate(self):
        return self._coordinate


    @property
    def solar_calculator(self):
        return self._solar_calculator


    @property
    def daylight_color_model(self):
        return self._daylight_color_model


    @property
    def image_metadata_store(self):
        return self._image_metadata_store


    @property
    def request_queue(self):
        return self._request_queue


    @property
    def photo_client(self):
        return self._photo_client


    @property
    def image_resolver(self):
        return self._image_resolver


    def shutdown(self, wait=True):
        self._request_queue.shutdown(wait)


def _create_unsplash_client(settings):

    if settings.access_key is None:
        _logger.warning(
            'No Unsplash access key is configured, so image fetches '
            'will fail. Set the DAYGLOW_UNSPLASH_ACCESS_KEY environment '
            'variable to configure one.')

    return UnsplashClient(
        settings.access_key or '', settings.base_url, settings.timeout)
