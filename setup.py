#!/usr/bin/env python3
"""
Setup configuration for restore-saved-albums
Rebuilds Spotify saved albums from the albums of the user's Liked Songs
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "spotipy>=2.23.0",
    "requests>=2.31.0",
    "click>=8.1.7",
    "rich-click>=1.7.0",
    "rich>=13.7.0",
    "tqdm>=4.66.1",
]

setup(
    name="restore-saved-albums",
    version="0.1.0",
    author="restore-saved-albums contributors",
    description="Save the albums of all Spotify Liked Songs, in the order the songs were liked",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "restore-saved-albums=restore_saved_albums.cli:main",
        ],
    },
    keywords="spotify saved albums liked songs library backup cli",
)
