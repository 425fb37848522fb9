#!/usr/bin/env python
from setuptools import setup, find_packages
import sys

long_description = ''

if 'sdist' in sys.argv:
    with open('README.rst') as f:
        long_description = f.read()


setup(
    name='osudecode',
    version='0.1.0',
    description='Decoder for osu! .osu beatmap files',
    packages=find_packages(),
    package_data={
        'osudecode.example_data.beatmaps': ['*.osu'],
    },
    long_description=long_description,
    license='LGPLv3+',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)',  # noqa
        'Natural Language :: English',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Games/Entertainment',
    ],
    python_requires='>=3.9',
    install_requires=[
        'click',
        'numpy',
    ],
    extras_require={
        'dev': [
            'flake8',
            'hypothesis',
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'osudecode = osudecode.__main__:main',
        ],
    },
)
