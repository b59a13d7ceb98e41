#!/usr/bin/env python3
"""
Setup configuration for Asset Compression Pipeline.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

# Read requirements from requirements.txt
requirements = []
if (this_directory / "requirements.txt").exists():
    requirements = (this_directory / "requirements.txt").read_text().strip().split('\n')
    requirements = [req.strip() for req in requirements if req.strip() and not req.startswith('#')]

setup(
    name="asset-compression-pipeline",
    version="1.0.0",
    author="Project Think",
    author_email="",
    description="Post-build pipeline writing gzip and Brotli siblings for build output files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['pipeline*']),
    py_modules=[
        'asset_compression_pipeline',
        'base_classes',
        'compress',
        'config_discovery',
        'pipeline_configs',
        'pipeline_errors',
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Build Tools",
        "Topic :: System :: Archiving :: Compression",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov",
            "pytest-asyncio>=0.21",
            "black",
            "flake8",
            "mypy",
        ],
        "test": [
            "pytest>=7.0",
            "pytest-cov",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "compress-assets=compress:run",
        ],
    },
    keywords=[
        "gzip",
        "brotli",
        "zopfli",
        "precompression",
        "static-assets",
        "build-tools",
    ],
)
