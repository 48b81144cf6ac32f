#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re
from pathlib import Path

from setuptools import find_packages, setup

# read the version without importing the package, which needs the dependencies below
version_file = Path(__file__).parent / 'binlayout' / 'version.py'
__version__ = re.search(r"^BASE_VERSION = '([^']+)'", version_file.read_text(), re.MULTILINE).group(1)

install_requires = [
    'structlog>=22.3.0',
    'pydantic>=2.0',
    'pyyaml>=6.0',
    'configargparse>=1.5.3',
    'colorama>=0.4.6',
    'typing_extensions>=4.8.0',
]

setup(
    name='binlayout',
    version=__version__,
    description='Native-layout binary serialization of Python values through bounded buffers and streams',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache License 2.0',
    entry_points={
        'console_scripts': ['binlayout-cli=binlayout.cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    python_requires='>=3.11',
    packages=find_packages(exclude=('binlayout_tests', 'binlayout_tests.*')),
    package_data={'binlayout.conf': ['*.yml']},
    install_requires=install_requires,
    extras_require={
        'test': ['pytest>=7.4', 'twisted>=22.10.0'],
    },
)
