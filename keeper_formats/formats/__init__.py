"""Package format handlers for the repository host.

Each handler implements the same four operations (``format_key``,
``validate``, ``parse_metadata``, ``generate_index``) for one artifact
format: Unity packages, RPM packages, and Python wheels/sdists.
"""

from .base import FormatHandler, IndexFile, Metadata
from .errors import (
    BadMagic,
    EmptyInput,
    FormatError,
    IndexGenerationError,
    TooSmall,
    UnparseableFilename,
    WrongExtension,
)
from .pypi import PypiFormatHandler, normalize_package_name
from .registry import (
    FormatRegistry,
    auto_register_formats,
    create_handler,
    detect_format,
    get_format_handler,
    get_registry,
)
from .rpm import RpmFormatHandler, parse_rpm_filename
from .unity import UnityFormatHandler

__all__ = [
    "BadMagic",
    "EmptyInput",
    "FormatError",
    "FormatHandler",
    "FormatRegistry",
    "IndexFile",
    "IndexGenerationError",
    "Metadata",
    "PypiFormatHandler",
    "RpmFormatHandler",
    "TooSmall",
    "UnityFormatHandler",
    "UnparseableFilename",
    "WrongExtension",
    "auto_register_formats",
    "create_handler",
    "detect_format",
    "get_format_handler",
    "get_registry",
    "normalize_package_name",
    "parse_rpm_filename",
]
