#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""Setup script for lcsystem."""

__author__ = 'Aaron Hosford'

import re
from codecs import open
from os import path

from setuptools import setup

here = path.abspath(path.dirname(__file__))


# The package imports numpy, so the version is read from the source rather
# than by importing it.
with open(path.join(here, 'lcsystem', '__init__.py'),
          encoding='utf-8') as init_file:
    __version__ = re.search(r"^__version__ = '([^']+)'",
                            init_file.read(), re.MULTILINE).group(1)


# Default long description
long_description = """

lcsystem
========

*Accuracy-based Learning Classifier Systems for Python 3*

An implementation of the XCS (Accuracy-based Classifier System) algorithm,
as described in "An Algorithmic Description of XCS," by Martin Butz and
Stewart Wilson, together with reference environments for experimenting
with it.

The package is available under the permissive Revised BSD License.

""".strip()


# Get the long description from the relevant file. First try README.rst,
# then fall back on the default string defined here in this file.
if path.isfile(path.join(here, 'README.rst')):
    with open(path.join(here, 'README.rst'),
              encoding='utf-8') as description_file:
        long_description = description_file.read()

# See https://setuptools.pypa.io/ for a full list of parameters and their
# meanings.
setup(
    name='lcsystem',
    version=__version__,
    author=__author__,
    author_email='hosford42@gmail.com',
    license='Revised BSD',
    platforms=['any'],
    description='XCS (Accuracy-based Learning Classifier System)',
    long_description=long_description,

    # See https://pypi.org/classifiers/
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
    ],

    keywords='xcs accuracy classifier lcs reinforcement machine learning',
    packages=['lcsystem'],
    python_requires='>=3.9',
    install_requires=['numpy'],
    extras_require={
        'test': ['pytest'],
    },

    test_suite="tests",
)
