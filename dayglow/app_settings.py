"""
Dayglow application settings.

The application settings are the composition of a set of default
settings (hard-coded in this module), settings (optionally) specified
in the file "Dayglow Settings.yaml" in the application directory, and
settings specified by environment variables, with later sources taking
precedence over earlier ones. The recognized environment variables are:

    DAYGLOW_CACHE_DIR               image cache directory path
    DAYGLOW_UNSPLASH_ACCESS_KEY     Unsplash API access key
    DAYGLOW_LATITUDE                default location latitude
    DAYGLOW_LONGITUDE               default location longitude
    DAYGLOW_TIME_ZONE               default location time zone

The image cache time-to-live is fixed at seven days and is not a
setting.
"""


import logging

from environs import Env

from dayglow.app_paths import get_app_paths
from dayglow.util.settings import Settings


_logger = logging.getLogger(__name__)


_DEFAULT_SETTINGS = Settings.create_from_yaml('''
location:
    latitude: 40.7128
    longitude: -74.0060
    time_zone: US/Eastern

image_cache:
    dir_path: null
    purge_on_startup: true

unsplash:
    access_key: null
    base_url: https://api.unsplash.com
    timeout: 30

request_queue:
    worker_count: 1
    min_request_interval: 5.0
    max_requests_per_minute: 3

logging:
    level: INFO
''')


def get_default_settings():
    return Settings(_DEFAULT_SETTINGS)


def load_settings(app_paths=None, env=None):

    """
    Loads the application settings.

    Parameters
    ----------
    app_paths : Settings or None
        the application paths, as returned by
        `app_paths.get_app_paths`, or `None` to get them from the
        environment.

    env : environs.Env or None
        the environment from which to read settings overrides, or
        `None` to read the process environment.

    Returns
    -------
    Settings
        the application settings. The `image_cache.dir_path` setting
        is always a non-`None` string.

    Raises
    ------
    ValueError
        if the settings file exists but cannot be parsed.
    """

    if env is None:
        env = Env()

    if app_paths is None:
        app_paths = get_app_paths(env=env)

    settings = Settings(
        _DEFAULT_SETTINGS,
        _load_settings_file(app_paths.settings_file_path),
        _get_environment_settings(env))

    if settings.image_cache.dir_path is None:
        settings = Settings(settings, Settings.create_from_dict({
            'image_cache': {
                'dir_path': str(app_paths.image_cache_dir_path)
            }
        }))

    return settings


def _load_settings_file(file_path):

    if not file_path.exists():
        _logger.debug(
            f'Settings file "{file_path}" does not exist. Will use '
            f'default settings.')
        return Settings()

    try:
        return Settings.create_from_yaml_file(file_path)

    except (OSError, ValueError, TypeError) as e:
        raise ValueError(
            f'Load failed for settings file "{file_path}". Error '
            f'message was: {str(e)}')


def _get_environment_settings(env):

    d = {}

    def set_(section, name, value):
        if value is not None:
            d.setdefault(section, {})[name] = value

    set_('image_cache', 'dir_path', env.str('DAYGLOW_CACHE_DIR', None))
    set_('unsplash', 'access_key',
         env.str('DAYGLOW_UNSPLASH_ACCESS_KEY', None))
    set_('location', 'latitude', env.float('DAYGLOW_LATITUDE', None))
    set_('location', 'longitude', env.float('DAYGLOW_LONGITUDE', None))
    set_('location', 'time_zone', env.str('DAYGLOW_TIME_ZONE', None))

    return Settings.create_from_dict(d)
