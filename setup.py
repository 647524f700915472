#!/usr/bin/env python

import os
from setuptools import setup

def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


setup(
    name='graphwalk',
    version='0.1.0',
    description='Small GraphQL executor with per-field resolvers and partial failures',
    long_description=read("README.rst"),
    packages=['graphwalk', 'graphwalk.graphql', 'graphwalk.users'],
    keywords="graphql resolver executor",
    install_requires=[
        "graphql-core>=3.2,<3.3",
        "structlog",
    ],
    extras_require={
        "server": [
            "flask>=2.2",
            "httpx",
        ],
        "test": [
            "flask>=2.2",
            "httpx",
            "precisely",
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "graphwalk-users=graphwalk.users.server:main",
        ],
    },
    python_requires=">=3.8",
    license="BSD-2-Clause",
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
)
