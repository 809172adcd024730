"""
Module containing Dayglow application directory and file paths.

The application directory holds the optional settings file and, by
default, the image cache directory. Its path is the value of the
`DAYGLOW_HOME` environment variable if that is set, or `~/.dayglow`
otherwise.
"""


from pathlib import Path

from environs import Env

from dayglow.util.settings import Settings


SETTINGS_FILE_NAME = 'Dayglow Settings.yaml'
IMAGE_CACHE_DIR_NAME = 'Image Cache'

_DEFAULT_APP_DIR_PATH = Path.home() / '.dayglow'


def get_app_paths(app_dir_path=None, env=None):

    """
    Gets the Dayglow application paths.

    Parameters
    ----------
    app_dir_path : str or Path or None
        the application directory path, or `None` to get it from the
        environment.

    env : environs.Env or None
        the environment from which to read `DAYGLOW_HOME`, or `None`
        to read the process environment.

    Returns
    -------
    Settings
        settings object with `app_dir_path`, `settings_file_path`, and
        `image_cache_dir_path` attributes, all `pathlib.Path` objects.
    """

    if app_dir_path is None:

        if env is None:
            env = Env()

        app_dir_path = env.path('DAYGLOW_HOME', _DEFAULT_APP_DIR_PATH)

    app_dir_path = Path(app_dir_path).expanduser()

    return Settings(
        app_dir_path=app_dir_path,
        settings_file_path=app_dir_path / SETTINGS_FILE_NAME,
        image_cache_dir_path=app_dir_path / IMAGE_CACHE_DIR_NAME)
