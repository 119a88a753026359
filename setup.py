#!/usr/bin/env python
"""
hmscreds - Component credential store

Reads and writes per-component Redfish/SNMP credentials, keyed by xname,
in a secure key-value backend (HashiCorp Vault or a local encrypted vault).
"""

import os
from setuptools import setup, find_packages

# Read the README for long description
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Version
VERSION = '1.0.0'

setup(
    name='hmscreds',
    version=VERSION,
    description='Component credential store on top of secure key-value storage',
    long_description=long_description,
    long_description_content_type='text/markdown',

    license='MIT',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: System Administrators',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: System :: Networking',
        'Topic :: System :: Systems Administration',
    ],

    keywords='credentials vault redfish snmp xname',

    packages=find_packages(exclude=['tests', 'tests.*']),

    python_requires='>=3.10',

    install_requires=[
        'PyYAML>=6.0',
        'cryptography>=41.0',
        'requests>=2.30.0',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0',
        ],
    },
)
