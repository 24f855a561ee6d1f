"""Pytest configuration and shared fixtures."""

import pytest

from keeper_formats.formats.base import Metadata
from keeper_formats.formats.registry import get_registry

RPM_MAGIC = b"\xed\xab\xee\xdb"
RPM_LEAD_SIZE = 96


@pytest.fixture
def gzip_data():
    """Minimal gzip header (deflate) followed by padding."""
    return b"\x1f\x8b\x08\x00\x00\x00\x00\x00" + b"\x00" * 24


@pytest.fixture
def zip_data():
    """ZIP local file header magic followed by padding."""
    return b"PK\x03\x04" + b"\x00" * 28


@pytest.fixture
def rpm_data():
    """A full-size RPM lead with valid magic."""
    return RPM_MAGIC + b"\x00" * (RPM_LEAD_SIZE - len(RPM_MAGIC))


@pytest.fixture
def make_metadata():
    """Factory for Metadata records."""

    def _make(path, version=None, content_type="application/octet-stream", size_bytes=1024):
        return Metadata(
            path=path,
            version=version,
            content_type=content_type,
            size_bytes=size_bytes,
        )

    return _make


@pytest.fixture
def clean_registry():
    """Empty the global registry before and after a test."""
    registry = get_registry()
    registry.clear()
    yield registry
    registry.clear()


@pytest.fixture
def sample_config():
    """Sample configuration dictionary."""
    return {
        "formats": {
            "unity": {"enabled": True},
            "rpm": {"enabled": False},
            "pypi": {
                "compute_checksum": True,
                "options": {"simple_url": "/pypi/simple"},
            },
        },
        "logging": {
            "level": "DEBUG",
            "console_logging": False,
        },
    }
