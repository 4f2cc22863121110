"""
Setup script for bbloom.
"""

from setuptools import setup, find_packages

setup(
    name="bbloom",
    version="0.1.0",
    packages=find_packages(include=["bbloom", "bbloom.*"]),
    package_data={"bbloom": ["py.typed"]},
    python_requires=">=3.8",
    extras_require={"test": ["pytest"]},
)
