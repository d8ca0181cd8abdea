"""
Setup script for Page Splitter.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

requirements = [
    line.strip()
    for line in (this_directory / "requirements.txt").read_text(encoding='utf-8').splitlines()
    if line.strip() and not line.startswith("#")
]

setup(
    name="page-splitter",
    version="1.0.0",
    description="Split a PDF into one standalone PDF per selected page",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Page Splitter Contributors",
    author_email="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "page-splitter=page_splitter.cli:cli",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf split splitter pages ranges extract",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
