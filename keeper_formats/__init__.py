"""Format handlers for Unity, RPM and PyPI artifacts."""

__version__ = "0.1.0"
