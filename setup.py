from __future__ import annotations

import os

from setuptools import find_packages, setup


def read_version() -> str:
    """Read the version, preferring the PKG_VERSION environment variable."""
    env_version = os.getenv("PKG_VERSION", "").strip()
    if env_version:
        return env_version.lstrip("v")
    return "1.0.0"


setup(
    name="mackerels",
    version=read_version(),
    description="Find words that share no letters with exactly one US state.",
    long_description="Find words that share no letters with exactly one US state.",
    long_description_content_type="text/plain",
    packages=find_packages(include=["mackerels", "mackerels.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pyahocorasick",
        "Levenshtein",
        "httpx",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["mackerels=mackerels.__main__:main"],
    },
)
