#!/usr/bin/env python
# -*- coding: utf-8 -*-
from setuptools import find_packages, setup

# There are problems running setup.py on Windows if the encoding is not set
with open('README.md', encoding='utf8') as readme_file:
    readme = readme_file.read()


setup(
    name='flowlog',
    version='1.0.0',
    description="Client-side agent shipping transaction logs to a remote log service.",
    long_description=readme,
    long_description_content_type="text/markdown",
    author="Flowlog developers",
    packages=find_packages(include=['flowlog', 'flowlog.*']),
    include_package_data=True,
    install_requires=[
        'httpx>=0.27',
        'pydantic>=2.6',
    ],
    extras_require={
        'test': [
            'pytest>=7',
        ],
    },
    python_requires=">=3.9",
    license="MIT license",
    zip_safe=False,
    keywords='logging transactions agent',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ]
)
