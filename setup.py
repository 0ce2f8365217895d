"""Setup script for splicefs."""

import os

from setuptools import setup, find_packages

HERE = os.path.dirname(os.path.abspath(__file__))


def read_requirements(filename):
    with open(os.path.join(HERE, filename)) as f:
        requirements = f.read().splitlines()
    # Filter out comments and empty lines
    return [
        line.strip() for line in requirements
        if line.strip() and not line.startswith("#")
    ]


setup(
    name="splicefs",
    version="0.1.0",
    description="File handles with byte splicing, advisory locking and directory listings",
    author="splicefs Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=read_requirements("requirements.txt"),
    extras_require={
        "test": read_requirements("requirements-test.txt"),
    },
    entry_points={
        "console_scripts": [
            "splicefs=splicefs.cli.main:app",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
