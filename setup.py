"""
setup.py for Dayglow pip package.


Creating a Dayglow Development Environment
------------------------------------------

To create a Conda environment for Dayglow development, from the
directory containing this file:

    conda create -n dayglow-dev python=3.11
    conda activate dayglow-dev
    pip install -e .[test]


Running Dayglow Unit Tests
--------------------------

To run all unit tests, from the directory containing this file:

    conda activate dayglow-dev
    python -m unittest discover -s dayglow -t .

To run the unit tests for just one subpackage of the `dayglow` package:

    conda activate dayglow-dev
    python -m unittest discover -s dayglow/<subpackage> -t .

The tests can also be run with `pytest`, which collects the same
`unittest` test cases:

    pytest dayglow


Building the Dayglow Package
----------------------------

To build the Dayglow package:

    conda activate dayglow-dev
    python -m build

The build process will write package `.tar.gz` and `.whl` files to the
`dist` subdirectory of the directory containing this file.
"""


from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from setuptools import find_packages, setup


def load_version_module(package_name):

    # Load the version module from its file rather than importing it
    # from the package, since the package's dependencies may not be
    # installed yet.
    module_name = f'{package_name}.version'
    file_path = Path(__file__).parent / package_name / 'version.py'
    spec = spec_from_file_location(module_name, file_path)
    module = module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


version = load_version_module('dayglow')


setup(

    name='dayglow',
    version=version.full_version,
    description=(
        'Solar event calculations, daylight colors, and a cached stock '
        'image resolver for calendar applications.'),
    license='MIT',

    packages=find_packages(
        exclude=['tests', 'tests.*', '*.tests.*', '*.tests']
    ),

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],

    python_requires='>=3.8',

    install_requires=[
        'environs',
        'jsonschema',
        'numpy',
        'pytz',
        'ruamel.yaml',
    ],

    extras_require={
        'test': ['pytest'],
    },

    entry_points={
        'console_scripts': [
            'dayglow_sky=dayglow.scripts.dayglow_sky:_main',
        ]
    },

    include_package_data=True,
    zip_safe=False

)
