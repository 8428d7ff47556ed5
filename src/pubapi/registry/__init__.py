"""Published versions from a package index."""

from pubapi.registry.errors import (
    DigestMismatchError,
    DownloadError,
    NoDistributionError,
    PackageNotFoundError,
    RegistryError,
    UnsafeArchiveError,
)
from pubapi.registry.pypi import fetch_published, normalize_name

__all__ = [
    "DigestMismatchError",
    "DownloadError",
    "NoDistributionError",
    "PackageNotFoundError",
    "RegistryError",
    "UnsafeArchiveError",
    "fetch_published",
    "normalize_name",
]
