"""Base classes for package format handlers.

Defines the four-operation contract every format handler implements
(``format_key``, ``validate``, ``parse_metadata``, ``generate_index``)
along with the metadata record handed back to the host.
"""

import hashlib
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..common.logger import get_logger
from .errors import EmptyInput, FormatError, IndexGenerationError, WrongExtension

logger = get_logger("format")

# (output filename, output content)
IndexFile = Tuple[str, bytes]

FALLBACK_CONTENT_TYPE = "application/octet-stream"


def filename_of(path: str) -> str:
    """Return the last ``/`` separated component of an artifact path."""
    return path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Metadata:
    """Metadata extracted from one uploaded artifact.

    Optional fields come last in the declaration, so the attribute order
    differs from the wire order. Always construct with keywords and
    serialize with :meth:`to_dict`, not ``dataclasses.asdict``.
    """

    path: str
    content_type: str
    size_bytes: int
    version: Optional[str] = None
    checksum_sha256: Optional[str] = None

    @property
    def filename(self) -> str:
        """Filename portion of the artifact path."""
        return filename_of(self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire form of this record.

        Key order is fixed: path, version, content_type, size_bytes,
        checksum_sha256. Missing optional values are kept as None.
        """
        return {
            "path": self.path,
            "version": self.version,
            "content_type": self.content_type,
            "size_bytes": self.size_bytes,
            "checksum_sha256": self.checksum_sha256,
        }


class FormatHandler(ABC):
    """Abstract base class for package format handlers.

    Handlers are stateless apart from options fixed at construction, so a
    single instance may serve any number of concurrent calls.
    """

    def __init__(self, compute_checksum: bool = False):
        self.compute_checksum = compute_checksum

    @property
    @abstractmethod
    def format_key(self) -> str:
        """Return the format identifier (e.g., 'unity', 'rpm', 'pypi')."""

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return accepted file extensions, lower case."""

    def validate(self, path: str, data: bytes) -> None:
        """Decide whether an upload is acceptable before the host stores it.

        Args:
            path: Artifact storage path or filename
            data: Raw artifact bytes

        Raises:
            FormatError: If the artifact is rejected
        """
        try:
            self._validate(path, data)
        except FormatError as e:
            logger.debug(
                f"[{self.format_key}] rejected {filename_of(path) or '<empty path>'}: {e}"
            )
            raise

    @abstractmethod
    def _validate(self, path: str, data: bytes) -> None:
        """Format-specific acceptance checks, raising FormatError subclasses."""

    @abstractmethod
    def parse_metadata(self, path: str, data: bytes) -> Metadata:
        """Extract a metadata record from an accepted artifact.

        Args:
            path: Artifact storage path or filename
            data: Raw artifact bytes

        Returns:
            Metadata for the artifact

        Raises:
            EmptyInput: If data is empty
        """

    @abstractmethod
    def generate_index(self, artifacts: Sequence[Metadata]) -> Optional[List[IndexFile]]:
        """Build the repository index documents for a set of artifacts.

        Args:
            artifacts: Metadata of every artifact currently in the repository

        Returns:
            List of (filename, content) pairs, or None when there is nothing
            to index

        Raises:
            IndexGenerationError: If the documents cannot be serialized
        """

    def matches_extension(self, path: str) -> bool:
        """Check path against the handler's extensions, ignoring case."""
        lower = filename_of(path).lower()
        return any(lower.endswith(ext) for ext in self.file_extensions)

    def _check_not_empty(self, path: str, data: bytes, label: str) -> None:
        if not data:
            raise EmptyInput(f"{label} cannot be empty")
        if not path:
            raise EmptyInput("Artifact path cannot be empty")

    def _check_extension(self, path: str) -> None:
        if not self.matches_extension(path):
            expected = ", ".join(self.file_extensions)
            raise WrongExtension(
                f"Expected {expected} extension, got: {filename_of(path)}"
            )

    def _build_metadata(
        self, path: str, data: bytes, content_type: str, version: Optional[str]
    ) -> Metadata:
        checksum = None
        if self.compute_checksum:
            checksum = hashlib.sha256(data).hexdigest()
        return Metadata(
            path=path,
            version=version,
            content_type=content_type,
            size_bytes=len(data),
            checksum_sha256=checksum,
        )

    def _json_index(
        self, artifacts: Sequence[Metadata], packages: List[Dict[str, Any]], **extra: Any
    ) -> bytes:
        """Serialize the standard JSON index envelope."""
        index = {
            "format": self.format_key,
            "total_count": len(artifacts),
            "total_size_bytes": sum(a.size_bytes for a in artifacts),
            "packages": packages,
        }
        index.update(extra)
        try:
            return json.dumps(index, indent=2).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise IndexGenerationError(f"Failed to serialize index: {e}") from e
