"""YAML utility functions."""


from io import StringIO

from ruamel.yaml import YAML


def load(source):

    """
    Loads YAML from a string or file.

    Mappings load as `dict` subclasses and sequences as `list`
    subclasses, so callers can test loaded values with `isinstance`.
    """

    yaml = _create_yaml()
    return yaml.load(source)


def _create_yaml():

    # We use the safe loader with the pure-Python implementation, which
    # is slower than the default C implementation but less quirky. See
    # https://yaml.readthedocs.io/en/latest for details.
    return YAML(typ='safe', pure=True)


def dump(obj, dest=None, default_flow_style=False):

    yaml = _create_yaml()
    yaml.default_flow_style = default_flow_style

    if dest is None:
        s = StringIO()
        yaml.dump(obj, s)
        return s.getvalue()

    else:
        yaml.dump(obj, dest)
        return None
