"""
Module containing Dayglow version.

`setup.py` loads this module from its file without importing the
`dayglow` package, so this module must not import any other Dayglow
module or third-party package.
"""


import re


__version__ = '0.2.0'


_VERSION_RE = re.compile(
    r'^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?P<suffix>.*)?$')


def parse_version(version):

    """
    Parses a version string into a (major, minor, patch, suffix) tuple.

    Raises `ValueError` if the string is not of the form
    `<major>.<minor>.<patch>[<suffix>]`.
    """

    match = _VERSION_RE.match(version)

    if match is None:
        raise ValueError(f'Invalid version string "{version}".')

    return (
        int(match.group('major')),
        int(match.group('minor')),
        int(match.group('patch')),
        match.group('suffix') or '')


major_number, minor_number, patch_number, suffix = \
    parse_version(__version__)

full_version = __version__
