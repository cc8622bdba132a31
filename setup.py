#!/usr/bin/env python3
"""
Setup script for zik - Create a database of your music library
"""

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()


def read_requirements(filename: str) -> list:
    with open(filename, "r", encoding="utf-8") as fh:
        return [line.strip() for line in fh if line.strip() and not line.startswith("#")]


setup(
    name="zik",
    version="1.0.0",
    author="Vincent Rischmann",
    author_email="vincent@rischmann.fr",
    description="Catalogue a local music library into an SQLite database",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["zik.tests", "zik.tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Multimedia :: Sound/Audio",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11",
    install_requires=read_requirements("requirements.txt"),
    extras_require={
        "dev": read_requirements("requirements-dev.txt"),
    },
    entry_points={
        "console_scripts": [
            "zik=zik.cli:main",
        ],
    },
    include_package_data=True,
)
