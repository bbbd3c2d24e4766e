"""
setup.py configuration script for catalog_sync project.

Snapshot reconciliation for product catalogs: syncs a persistent product
store to a full-state catalog snapshot with batched upserts and deletes.
"""

import datetime
import sys

from setuptools import find_packages, setup

# Add src to path to import local module
sys.path.append("./src")

import catalog_sync  # noqa: E402

local_version = datetime.datetime.now(datetime.timezone.utc).strftime("%Y%m%d.%H%M%S")

setup(
    name="catalog_sync",
    version=catalog_sync.__version__ + "+" + local_version,
    description="Snapshot reconciliation engine for product catalogs",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(where="./src"),
    package_dir={"": "src"},
    entry_points={
        "console_scripts": [
            "catalog-sync=catalog_sync.main:main",
            "catalog-generate=catalog_sync.cli.generate_cli:main",
        ],
    },
    install_requires=[
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
        "pymongo>=4.0.0",
        "tenacity>=8.0.0",
        "structlog>=22.1.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
            "coverage>=7.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "coverage>=7.0.0",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
