"""Utility methods for package."""

import importlib.metadata
from urllib.parse import urlsplit


def get_package_version(package_name: str) -> str | None:
    """
    Returns the package version by `package_name` using the importlib.metadata module
    which is available in Python 3.8 and later.
    """
    try:
        return importlib.metadata.version(package_name)
    except importlib.metadata.PackageNotFoundError:
        return None


def is_valid_endpoint(url: str) -> bool:
    """True when `url` is an absolute http(s) URL with a host"""
    if not isinstance(url, str):
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in {"http", "https"} and bool(parts.hostname)
