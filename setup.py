"""Packaging for Boostly.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import find_packages, setup

setup(
    name="boostly",
    version="0.1.0",
    description="Deadline-based focus/break session timer",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "SQLAlchemy>=2.0",
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["boostly=boostly.__main__:main"],
    },
)
