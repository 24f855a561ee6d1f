"""Python source distribution filename parsing.

Sdist filename format: ``{name}-{version}.tar.gz`` or ``{name}-{version}.zip``.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

# ``.tar.gz`` is checked before any single suffix so it is never read as ``.gz``
SDIST_EXTENSIONS: Tuple[str, ...] = (".tar.gz", ".zip")


@dataclass(frozen=True)
class SdistFilename:
    """Fields of a source distribution filename."""

    name: str
    version: str
    extension: str


def split_sdist_extension(filename: str) -> Optional[Tuple[str, str]]:
    """Split an sdist filename into (stem, extension).

    Args:
        filename: Package filename

    Returns:
        Tuple of (stem, lower-case extension), or None for other files
    """
    lower = filename.lower()
    for ext in SDIST_EXTENSIONS:
        if lower.endswith(ext):
            return filename[: -len(ext)], ext
    return None


def parse_sdist_filename(filename: str) -> Optional[SdistFilename]:
    """Parse name and version from an sdist filename.

    The version follows the last hyphen, which keeps hyphenated names
    intact ('my-cool-package-1.0.0.tar.gz' -> 'my-cool-package', '1.0.0').

    Args:
        filename: Package filename (e.g., 'requests-2.28.1.tar.gz')

    Returns:
        SdistFilename, or None when no version can be extracted
    """
    split = split_sdist_extension(filename)
    if split is None:
        return None

    stem, ext = split
    if "-" not in stem:
        return None

    name, version = stem.rsplit("-", 1)
    if not name or not version:
        return None

    return SdistFilename(name=name, version=version, extension=ext)
