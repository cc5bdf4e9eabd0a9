#!/usr/bin/env python
from setuptools import setup, find_packages

setup(
    name="probdist",
    version="0.1.0",
    description="Probability distributions: densities, moments and reproducible sampling",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",

    # finds probdist/ and its subpackages, excludes tests, docs, notebooks
    packages=find_packages(exclude=["tests*", "docs*", "notebooks*"]),

    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.7",
        "pydantic-settings>=2.0",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
        "dev": [
            "pytest",
            "black",
            "flake8",
        ],
    },

    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],

    include_package_data=False,
)
