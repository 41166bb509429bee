#!/usr/bin/env python3
"""
Setup configuration for ssdl
Spotify song downloader with a full-screen terminal UI
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "spotipy>=2.22.1",
    "ytmusicapi>=1.3.2",
    "yt-dlp>=2023.12.30",
    "mutagen>=1.47.0",
    "requests>=2.31.0",
    "Pillow>=10.0.0",
    "click>=8.1.7",
    "rich-click>=1.7.0",
    "rich>=13.0.0",
    "python-dotenv>=1.0.0",
    "blessed>=1.20.0",
]

setup(
    name="ssdl",
    version="1.0.0",
    author="ssdl contributors",
    description="Download Spotify tracks, albums and playlists from a terminal UI",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Environment :: Console :: Curses",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
        ],
    },
    entry_points={
        "console_scripts": [
            "ssdl=ssdl.cli:main",
        ],
    },
    keywords="spotify youtube music download tui terminal",
)
