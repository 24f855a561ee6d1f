"""Unity package format handler.

A ``.unitypackage`` is a gzip-compressed tarball of assets. It carries no
version field the handler could read cheaply, so the version is taken from
the storage path: either a directory named like a version
(``com/example/plugin/2.1.0/plugin.unitypackage``) or a ``-<version>``
suffix on the filename (``MyPlugin-3.0.0-beta.unitypackage``).
"""

from typing import List, Optional, Sequence

from ..common.logger import get_logger
from .base import FALLBACK_CONTENT_TYPE, FormatHandler, IndexFile, Metadata
from .errors import BadMagic, EmptyInput, TooSmall
from .magic import GZIP_DEFLATE, MAGIC_SIGNATURES, hex_prefix, is_gzip

logger = get_logger("format.unity")

UNITY_EXTENSION = ".unitypackage"
INDEX_FILENAME = "unity-index.json"


def is_version_like(value: str) -> bool:
    """Check if a path segment looks like a version (``1.0.0``, ``v2.1``)."""
    if value.startswith("v"):
        value = value[1:]
    if not value[:1].isdigit() or "." not in value:
        return False
    return all(c.isascii() and (c.isalnum() or c in ".-") for c in value)


def _strip_extension(filename: str) -> Optional[str]:
    if filename.lower().endswith(UNITY_EXTENSION):
        return filename[: -len(UNITY_EXTENSION)]
    if "." in filename:
        return filename.rsplit(".", 1)[0]
    return None


def extract_version_from_path(path: str) -> Optional[str]:
    """Find a version token in an artifact path.

    Whole segments are tried first, from the filename stem back towards the
    root. Failing that, every ``-`` suffix of the stem that starts with a
    digit is tried, longest first.

    Args:
        path: Artifact storage path

    Returns:
        Version string, or None if the path carries none
    """
    parts = path.split("/")
    stem = _strip_extension(parts[-1])

    candidates = list(reversed(parts[:-1]))
    if stem is not None:
        candidates.insert(0, stem)
    for part in candidates:
        if is_version_like(part):
            return part

    if stem is None:
        return None

    for i, char in enumerate(stem):
        if char != "-":
            continue
        candidate = stem[i + 1:]
        if candidate[:1].isdigit() and is_version_like(candidate):
            return candidate

    return None


class UnityFormatHandler(FormatHandler):
    """Handler for Unity asset packages (.unitypackage files)."""

    @property
    def format_key(self) -> str:
        """Return format identifier."""
        return "unity"

    @property
    def file_extensions(self) -> List[str]:
        """Return supported file extensions."""
        return [UNITY_EXTENSION]

    def _validate(self, path: str, data: bytes) -> None:
        self._check_not_empty(path, data, "Unity package")
        self._check_extension(path)

        if len(data) < 2:
            raise TooSmall(
                "File too small to be a valid gzip archive", size=len(data), minimum=2
            )

        if not is_gzip(data):
            raise BadMagic(
                f"Invalid gzip header: expected {hex_prefix(MAGIC_SIGNATURES['gzip'], 2)}, "
                f"got {hex_prefix(data, 2)}"
            )

        if len(data) >= 3 and data[2] != GZIP_DEFLATE:
            raise BadMagic(
                f"Unsupported gzip compression method: {data[2]:02x} (expected 08/deflate)"
            )

    def parse_metadata(self, path: str, data: bytes) -> Metadata:
        """Parse Unity package metadata.

        Args:
            path: Artifact storage path
            data: Raw package bytes

        Returns:
            Metadata with gzip content type when the payload is gzip

        Raises:
            EmptyInput: If data is empty
        """
        if not data:
            raise EmptyInput("Empty file")

        content_type = "application/gzip" if is_gzip(data) else FALLBACK_CONTENT_TYPE
        version = extract_version_from_path(path)
        if version is None:
            logger.debug(f"No version found in path: {path}")

        return self._build_metadata(path, data, content_type, version)

    def generate_index(self, artifacts: Sequence[Metadata]) -> Optional[List[IndexFile]]:
        """Build ``unity-index.json`` listing every artifact."""
        if not artifacts:
            return None

        packages = [artifact.to_dict() for artifact in artifacts]
        content = self._json_index(artifacts, packages)
        logger.debug(f"Generated Unity index for {len(artifacts)} packages")
        return [(INDEX_FILENAME, content)]

