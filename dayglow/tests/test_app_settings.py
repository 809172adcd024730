from pathlib import Path
from unittest.mock import patch
import os
import tempfile

from environs import Env, EnvError

from dayglow.app_paths import get_app_paths
from dayglow.app_settings import get_default_settings, load_settings
from dayglow.tests.test_case import TestCase


_ENV_VAR_NAMES = (
    'DAYGLOW_HOME',
    'DAYGLOW_CACHE_DIR',
    'DAYGLOW_UNSPLASH_ACCESS_KEY',
    'DAYGLOW_LATITUDE',
    'DAYGLOW_LONGITUDE',
    'DAYGLOW_TIME_ZONE',
)


def _clean_environ(**kwargs):
    environ = dict(
        (k, v) for k, v in os.environ.items() if k not in _ENV_VAR_NAMES)
    environ.update(kwargs)
    return environ


class AppPathsTests(TestCase):


    def test_explicit_app_dir_path(self):

        paths = get_app_paths('/tmp/Dayglow')

        dir_path = Path('/tmp/Dayglow')
        self.assertEqual(paths.app_dir_path, dir_path)
        self.assertEqual(
            paths.settings_file_path, dir_path / 'Dayglow Settings.yaml')
        self.assertEqual(
            paths.image_cache_dir_path, dir_path / 'Image Cache')


    def test_environment_app_dir_path(self):

        environ = _clean_environ(DAYGLOW_HOME='/tmp/Dayglow Home')

        with patch.dict(os.environ, environ, clear=True):
            paths = get_app_paths()

        self.assertEqual(paths.app_dir_path, Path('/tmp/Dayglow Home'))


    def test_default_app_dir_path(self):

        with patch.dict(os.environ, _clean_environ(), clear=True):
            paths = get_app_paths()

        self.assertEqual(paths.app_dir_path, Path.home() / '.dayglow')


class AppSettingsTests(TestCase):


    def setUp(self):
        self._temp_dir = tempfile.TemporaryDirectory()
        self.paths = get_app_paths(self._temp_dir.name)


    def tearDown(self):
        self._temp_dir.cleanup()


    def _load_settings(self, **environ):
        with patch.dict(os.environ, _clean_environ(**environ), clear=True):
            return load_settings(self.paths, Env())


    def _write_settings_file(self, contents):
        self.paths.settings_file_path.write_text(contents)


    def test_default_settings(self):

        s = get_default_settings()

        self.assertEqual(s.location.latitude, 40.7128)
        self.assertEqual(s.location.longitude, -74.006)
        self.assertEqual(s.location.time_zone, 'US/Eastern')
        self.assertIsNone(s.image_cache.dir_path)
        self.assertTrue(s.image_cache.purge_on_startup)
        self.assertIsNone(s.unsplash.access_key)
        self.assertEqual(s.unsplash.base_url, 'https://api.unsplash.com')
        self.assertEqual(s.request_queue.worker_count, 1)
        self.assertEqual(s.request_queue.min_request_interval, 5)
        self.assertEqual(s.request_queue.max_requests_per_minute, 3)
        self.assertEqual(s.logging.level, 'INFO')


    def test_load_without_settings_file(self):

        s = self._load_settings()

        self.assertEqual(s.location, get_default_settings().location)
        self.assertEqual(
            s.image_cache.dir_path, str(self.paths.image_cache_dir_path))


    def test_settings_file(self):

        self._write_settings_file('''
location:
    latitude: 59.9139
    time_zone: Europe/Oslo
request_queue:
    min_request_interval: 1
''')

        s = self._load_settings()

        self.assertEqual(s.location.latitude, 59.9139)
        self.assertEqual(s.location.time_zone, 'Europe/Oslo')

        # Unspecified settings keep their default values.
        self.assertEqual(s.location.longitude, -74.006)
        self.assertEqual(s.request_queue.min_request_interval, 1)
        self.assertEqual(s.request_queue.max_requests_per_minute, 3)


    def test_empty_settings_file(self):
        self._write_settings_file('# No settings yet.\n')
        s = self._load_settings()
        self.assertEqual(s.location, get_default_settings().location)


    def test_malformed_settings_file(self):

        for contents in ('location: [1, 2', '- 1\n- 2\n'):

            self._write_settings_file(contents)

            self.assert_raises(ValueError, self._load_settings)


    def test_environment_overrides(self):

        self._write_settings_file('''
location:
    latitude: 59.9139
unsplash:
    access_key: file key
''')

        s = self._load_settings(
            DAYGLOW_CACHE_DIR='/tmp/Dayglow Cache',
            DAYGLOW_UNSPLASH_ACCESS_KEY='environment key',
            DAYGLOW_LATITUDE='-33.8688',
            DAYGLOW_LONGITUDE='151.2093',
            DAYGLOW_TIME_ZONE='Australia/Sydney')

        self.assertEqual(s.image_cache.dir_path, '/tmp/Dayglow Cache')
        self.assertEqual(s.unsplash.access_key, 'environment key')
        self.assertEqual(s.location.latitude, -33.8688)
        self.assertEqual(s.location.longitude, 151.2093)
        self.assertEqual(s.location.time_zone, 'Australia/Sydney')

        # Other settings are unaffected.
        self.assertTrue(s.image_cache.purge_on_startup)


    def test_bad_environment_value(self):
        self.assert_raises(
            EnvError, self._load_settings, DAYGLOW_LATITUDE='north')
