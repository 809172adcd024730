"""Module containing class `ImageMetadataStore`."""


from pathlib import Path
from threading import Lock, Thread
import json
import logging
import os
import random
import tempfile

import jsonschema

from dayglow.image.image_record import (
    ImageRecord, METADATA_SCHEMA, utc_now)


_logger = logging.getLogger(__name__)

METADATA_FILE_NAME = 'metadata.json'
IMAGE_FILE_NAME_EXTENSION = '.jpg'

_EMPTY_STORE_MESSAGE = 'Will start with an empty image cache.'


class ImageMetadataStore:


    """
    Persistent store of cached images and their metadata.

    An image metadata store keeps a set of `ImageRecord` objects, keyed
    by record id, together with the image data of the records. The
    records are stored in a single JSON metadata file in the store's
    cache directory, and the image data of each record (if any) in a
    file named `<id>.jpg` in the same directory.

    A store loads its metadata file when it is created, and rewrites it
    after every mutation. If the metadata file does not exist, cannot
    be read, or does not contain valid metadata, the store starts
    empty and logs a warning.

    The store exclusively owns its in-memory records and the files of
    its cache directory. All access to them goes through the methods
    of the store, which are thread-safe: a single lock guards the
    records and the metadata file, so a background purge of expired
    images cannot race with `get` or `put`.

    The `clock` initializer argument is a function of no arguments that
    returns the current time as a time-zone-aware `datetime`. It is
    used to determine which records have expired, and defaults to a
    function that returns the current UTC time.
    """


    def __init__(self, cache_dir_path, clock=utc_now):

        self._cache_dir_path = Path(cache_dir_path)
        self._metadata_file_path = self._cache_dir_path / METADATA_FILE_NAME
        self._clock = clock
        self._lock = Lock()

        self._cache_dir_path.mkdir(parents=True, exist_ok=True)

        self._records = self._load_metadata()


    @property
    def cache_dir_path(self):
        return self._cache_dir_path


    @property
    def metadata_file_path(self):
        return self._metadata_file_path


    def __len__(self):
        with self._lock:
            return len(self._records)


    def __contains__(self, record_id):
        with self._lock:
            return record_id in self._records


    def get(self, record_id):

        """Gets the record with the specified id, or `None` if none."""

        with self._lock:
            return self._records.get(record_id)


    def get_all(self):

        """Gets all records of this store, including expired ones."""

        with self._lock:
            return list(self._records.values())


    def put(self, record, image_bytes=None):

        """
        Adds a record to this store, replacing any record with the
        same id.

        If `image_bytes` is not `None`, it is written to the image file
        of the record.
        """

        with self._lock:

            if image_bytes is not None:
                _write_file_atomically(
                    self._get_image_file_path(record.id), image_bytes)

            self._records[record.id] = record
            self._save_metadata()

        _logger.debug(f'Cached image record "{record.id}".')


    def get_image_bytes(self, record_id):

        """
        Gets the image data of the specified record.

        Returns `None` if there is no such record or the record has
        no image file.
        """

        with self._lock:

            if record_id not in self._records:
                return None

            try:
                return self._get_image_file_path(record_id).read_bytes()

            except OSError:
                return None


    def has_image(self, record_id):

        """
        Tests whether this store has both a record and image data for
        the specified id.
        """

        with self._lock:
            return record_id in self._records and \
                self._get_image_file_path(record_id).exists()


    def find_candidates(self, title_query=None, location_query=None):

        """
        Gets the unexpired records that are candidates for an image
        query.

        Every unexpired record is a candidate: this method does not
        score records against the query. That is the job of the
        `similarity_matcher` module. The query arguments are accepted
        so that callers state the query they are finding candidates
        for, and are logged.

        Returns
        -------
        list of ImageRecord
            the unexpired records, in no particular order.
        """

        now = self._clock()

        with self._lock:
            candidates = [
                r for r in self._records.values()
                if not r.is_expired_at(now)]

        _logger.debug(
            f'Found {len(candidates)} candidate images for title '
            f'{title_query!r} and location {location_query!r}.')

        return candidates


    def get_random_record(self):

        """
        Gets an unexpired record chosen uniformly at random, or `None`
        if there are no unexpired records.
        """

        candidates = self.find_candidates()

        if len(candidates) == 0:
            return None
        else:
            return random.choice(candidates)


    def purge_expired(self):

        """
        Removes all expired records and their image files.

        Returns
        -------
        list of str
            the ids of the removed records.
        """

        now = self._clock()

        with self._lock:

            expired_ids = [
                r.id for r in self._records.values()
                if r.is_expired_at(now)]

            if len(expired_ids) == 0:
                return expired_ids

            for record_id in expired_ids:

                del self._records[record_id]

                try:
                    self._get_image_file_path(record_id).unlink()
                except FileNotFoundError:
                    pass

            self._save_metadata()

        _logger.info(f'Purged {len(expired_ids)} expired cached images.')

        return expired_ids


    def purge_expired_in_background(self):

        """
        Removes expired records and their image files on a background
        thread.

        Returns
        -------
        threading.Thread
            the started daemon thread that performs the purge.
        """

        thread = Thread(
            target=self._purge_expired_logging_errors,
            name='Image Cache Purge', daemon=True)

        thread.start()

        return thread


    def _purge_expired_logging_errors(self):
        try:
            self.purge_expired()
        except OSError as e:
            _logger.warning(
                f'Purge of expired cached images failed with message: '
                f'{str(e)}')


    def _get_image_file_path(self, record_id):
        file_name = f'{record_id}{IMAGE_FILE_NAME_EXTENSION}'
        return self._cache_dir_path / file_name


    def _load_metadata(self):

        path = self._metadata_file_path

        if not path.exists():
            _logger.info(
                f'Image metadata file "{path}" does not exist. '
                f'{_EMPTY_STORE_MESSAGE}')
            return {}

        try:
            with open(path, 'r') as file_:
                metadata = json.load(file_)

        except (OSError, ValueError) as e:
            _logger.warning(
                f'Read failed for image metadata file "{path}". '
                f'{_EMPTY_STORE_MESSAGE} Error message was: {str(e)}')
            return {}

        try:
            jsonschema.validate(metadata, METADATA_SCHEMA)
            records = dict(
                (record_id, ImageRecord.from_dict(d))
                for record_id, d in metadata.items())

        except (jsonschema.exceptions.ValidationError, KeyError,
                TypeError, ValueError) as e:
            _logger.warning(
                f'Image metadata file "{path}" contains invalid '
                f'metadata. {_EMPTY_STORE_MESSAGE} Error message was: '
                f'{str(e)}')
            return {}

        _logger.info(f'Loaded {len(records)} cached image records.')

        return records


    def _save_metadata(self):

        # Must be called with `self._lock` held.

        metadata = dict(
            (record_id, record.to_dict())
            for record_id, record in self._records.items())

        data = json.dumps(metadata, indent=2).encode('utf-8')

        _write_file_atomically(self._metadata_file_path, data)


def _write_file_atomically(path, data):

    # Write to a temporary file in the destination directory and then
    # replace the destination, so readers never see a partial file.
    fd, temp_path = tempfile.mkstemp(dir=path.parent, suffix='.tmp')

    try:
        with os.fdopen(fd, 'wb') as file_:
            file_.write(data)
        os.replace(temp_path, path)

    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
