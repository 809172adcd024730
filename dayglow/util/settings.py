"""Module containing class `Settings`."""


from pathlib import Path

import dayglow.util.yaml_utils as yaml_utils


class Settings:

    """
    Collection of software configuration settings.

    A *setting* has a *name* and a *value*. The name must be a Python
    identifier. The value must be `None` or a boolean, integer, float,
    string, list, or `Settings` object. A setting contained in a
    `Settings` object is accessed as an attribute of the object.
    For example, a setting `x` of a settings object `s` is accessed
    as `s.x`.

    Positional initializer arguments are settings objects whose
    settings are merged, in order, into the new object. Later settings
    take precedence over earlier ones, and nested settings objects are
    merged recursively rather than replaced, so that a settings file
    that specifies only `image_cache.dir_path` does not discard the
    other `image_cache` defaults. Keyword arguments are merged last.
    """


    @staticmethod
    def create_from_dict(d):

        """Creates a settings object from a dictionary."""

        if not isinstance(d, dict):
            raise TypeError(
                f'Settings data must be a dictionary, not a '
                f'{d.__class__.__name__}.')

        d = dict(
            (k, Settings._create_from_dict_aux(v))
            for k, v in d.items())

        return Settings(**d)


    @staticmethod
    def _create_from_dict_aux(v):
        if isinstance(v, dict):
            return Settings.create_from_dict(v)
        elif isinstance(v, list):
            return [Settings._create_from_dict_aux(i) for i in v]
        else:
            return v


    @staticmethod
    def create_from_yaml(s):

        """Creates a settings object from a YAML string."""

        try:
            d = yaml_utils.load(s)

        except Exception as e:
            raise ValueError(
                f'YAML parse failed. Error message was:\n{str(e)}')

        if d is None:
            d = dict()

        elif not isinstance(d, dict):
            raise ValueError('Settings must be a YAML mapping.')

        return Settings.create_from_dict(d)


    @staticmethod
    def create_from_yaml_file(file_path):

        """Creates a settings object from a YAML file."""

        s = Path(file_path).read_text()
        return Settings.create_from_yaml(s)


    def __init__(self, *args, **kwargs):

        for arg in args:
            self._merge(arg.__dict__)

        self._merge(kwargs)


    def _merge(self, d):

        for name, value in d.items():

            current = self.__dict__.get(name)

            if isinstance(current, Settings) and \
                    isinstance(value, Settings):
                self.__dict__[name] = Settings(current, value)

            else:
                self.__dict__[name] = value


    def __eq__(self, other):
        if not isinstance(other, Settings):
            return False
        else:
            return self.__dict__ == other.__dict__


    def __len__(self):
        return len(self.__dict__)


    def __contains__(self, name):
        return name in self.__dict__


    def __iter__(self):
        return iter(self.__dict__)


    def __repr__(self):
        items = ', '.join(f'{k}={v!r}' for k, v in self.__dict__.items())
        return f'Settings({items})'


    def get(self, name, default=None):

        """
        Gets the value of the setting with the specified name.

        The name may be dotted, e.g. `'location.latitude'`, to get the
        value of a nested setting.
        """

        value = self

        for part in name.split('.'):

            if not isinstance(value, Settings) or part not in value:
                return default

            value = value.__dict__[part]

        return value


    def to_dict(self):
        return dict(
            (k, _to_dict_aux(v)) for k, v in self.__dict__.items())


def _to_dict_aux(v):
    if isinstance(v, Settings):
        return v.to_dict()
    elif isinstance(v, list):
        return [_to_dict_aux(i) for i in v]
    else:
        return v
