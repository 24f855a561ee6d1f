"""RPM package format handler.

RPM packages start with a 96-byte lead whose first four bytes are the
magic ``ed ab ee db``. Name, version, release and architecture are taken
from the conventional ``name-version-release.arch.rpm`` filename.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..common.logger import get_logger
from .base import FALLBACK_CONTENT_TYPE, FormatHandler, IndexFile, Metadata, filename_of
from .errors import BadMagic, EmptyInput, TooSmall
from .magic import MAGIC_SIGNATURES, hex_prefix, is_rpm

logger = get_logger("format.rpm")

RPM_EXTENSION = ".rpm"
RPM_LEAD_SIZE = 96
INDEX_FILENAME = "rpm-index.json"

# Architecture families recognized as the trailing ``.arch`` segment.
# Dist tags such as ``el9`` or ``fc38`` never match.
RPM_ARCH_PATTERN = re.compile(
    r"^(?:noarch|src|nosrc"
    r"|i[3-6]86|athlon|geode|pentium[34]|amd64|ia32e|x86_64(?:_v[2-4])?"
    r"|ia64|alpha\w*|sparc\w*|arm\w*|aarch64(?:_ilp32)?"
    r"|ppc\w*|s390x?|mips\w*|riscv\w*|loongarch\w*|sh[34]\w*|m68k|e2k\w*)$"
)


@dataclass(frozen=True)
class RpmFilename:
    """Components of an RPM filename; missing parts are None."""

    name: Optional[str]
    version: Optional[str] = None
    release: Optional[str] = None
    arch: Optional[str] = None

    @property
    def full_version(self) -> Optional[str]:
        """``version-release``, or the bare version when there is no release."""
        if self.version and self.release:
            return f"{self.version}-{self.release}"
        return self.version


def parse_rpm_filename(filename: str) -> RpmFilename:
    """Parse an RPM filename from the right.

    Package names may contain hyphens (``python3-numpy``), so release and
    version are split off the end rather than read from the start.

    Args:
        filename: Package filename (e.g., 'nginx-1.24.0-1.el9.x86_64.rpm')

    Returns:
        RpmFilename; only ``name`` is set when the filename has no
        ``.rpm`` extension or fewer than two trailing hyphen segments

    Raises:
        EmptyInput: If filename is empty
    """
    if not filename:
        raise EmptyInput("RPM filename cannot be empty")

    if not filename.lower().endswith(RPM_EXTENSION):
        return RpmFilename(name=filename)

    stem = filename[: -len(RPM_EXTENSION)]

    arch = None
    if "." in stem:
        before_arch, candidate = stem.rsplit(".", 1)
        if RPM_ARCH_PATTERN.match(candidate):
            stem, arch = before_arch, candidate

    parts = stem.rsplit("-", 2)
    if len(parts) < 3 or not all(parts):
        return RpmFilename(name=stem, arch=arch)

    name, version, release = parts
    return RpmFilename(name=name, version=version, release=release, arch=arch)


def extract_version_from_filename(path: str) -> Optional[str]:
    """Get ``version-release`` from an RPM path.

    Args:
        path: Artifact path (e.g., 'Packages/nginx-1.24.0-1.el9.x86_64.rpm')

    Returns:
        Version string or None
    """
    filename = filename_of(path)
    if not filename:
        return None
    return parse_rpm_filename(filename).full_version


class RpmFormatHandler(FormatHandler):
    """Handler for RPM package format (.rpm files).

    RPM packages contain:
    - Lead: magic, RPM version info
    - Signature: Package verification
    - Header: Metadata and scripts
    - Payload: cpio archive (usually gzip/xz/zstd compressed)

    Only the lead is inspected; the rest is the host's business.
    """

    @property
    def format_key(self) -> str:
        """Return format identifier."""
        return "rpm"

    @property
    def file_extensions(self) -> List[str]:
        """Return supported file extensions."""
        return [RPM_EXTENSION]

    def _validate(self, path: str, data: bytes) -> None:
        self._check_not_empty(path, data, "RPM package")
        self._check_extension(path)

        if len(data) < RPM_LEAD_SIZE:
            raise TooSmall(
                f"File too small for RPM lead: {len(data)} bytes (minimum {RPM_LEAD_SIZE})",
                size=len(data),
                minimum=RPM_LEAD_SIZE,
            )

        if not is_rpm(data):
            raise BadMagic(
                f"Invalid RPM magic: expected {hex_prefix(MAGIC_SIGNATURES['rpm'], 4)}, "
                f"got {hex_prefix(data, 4)}"
            )

    def parse_metadata(self, path: str, data: bytes) -> Metadata:
        """Parse RPM metadata from the lead and filename.

        Args:
            path: Artifact storage path
            data: Raw package bytes

        Returns:
            Metadata whose version is ``version-release``

        Raises:
            EmptyInput: If data is empty
        """
        if not data:
            raise EmptyInput("Empty file")

        content_type = "application/x-rpm" if is_rpm(data) else FALLBACK_CONTENT_TYPE
        if content_type == FALLBACK_CONTENT_TYPE:
            logger.warning(f"No RPM lead magic in {filename_of(path)}")

        version = extract_version_from_filename(path)
        return self._build_metadata(path, data, content_type, version)

    def generate_index(self, artifacts: Sequence[Metadata]) -> Optional[List[IndexFile]]:
        """Build ``rpm-index.json`` with name, arch and release per package."""
        if not artifacts:
            return None

        packages: List[Dict[str, Any]] = []
        for artifact in artifacts:
            entry = artifact.to_dict()
            info = (
                parse_rpm_filename(artifact.filename)
                if artifact.filename
                else RpmFilename(name=None)
            )
            entry["name"] = info.name
            entry["arch"] = info.arch
            entry["release"] = info.release
            packages.append(entry)

        content = self._json_index(artifacts, packages)
        logger.debug(f"Generated RPM index for {len(artifacts)} packages")
        return [(INDEX_FILENAME, content)]
