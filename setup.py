"""
Automana setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="automana",
    version="1.0.0",
    description="Automana — periodic rule automation for Asana",
    packages=find_packages(include=["automana", "automana.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "automana=automana.cli:main",
        ],
    },
    install_requires=[
        "pydantic>=2.5",
        "pyyaml>=6.0",
        "httpx>=0.27",
        "beautifulsoup4>=4.12",
        "tzdata>=2024.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
