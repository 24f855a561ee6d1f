"""Python wheel filename parsing (PEP 427).

Wheel filename format::

    {distribution}-{version}(-{build tag})?-{python tag}-{abi tag}-{platform tag}.whl

Distribution names in wheel filenames have their hyphens escaped to
underscores, so the name and version are always the first two fields.
"""

from dataclasses import dataclass
from typing import Optional

WHEEL_EXTENSION = ".whl"

# name, version, python tag, abi tag, platform tag
MIN_WHEEL_PARTS = 5


@dataclass(frozen=True)
class WheelFilename:
    """Fields of a wheel filename."""

    name: str
    version: str
    python_tag: str
    abi_tag: str
    platform_tag: str
    build_tag: Optional[str] = None


def wheel_stem(filename: str) -> Optional[str]:
    """Return the filename without ``.whl``, or None if it is not a wheel."""
    if filename.lower().endswith(WHEEL_EXTENSION):
        return filename[: -len(WHEEL_EXTENSION)]
    return None


def count_wheel_parts(filename: str) -> int:
    """Number of dash-separated fields in a wheel filename stem."""
    stem = wheel_stem(filename)
    if stem is None:
        return 0
    return len(stem.split("-"))


def parse_wheel_filename(filename: str) -> Optional[WheelFilename]:
    """Parse a wheel filename.

    A build tag is present when there is a sixth field and the third field
    starts with a digit; python tags never do.

    Args:
        filename: Wheel filename (e.g., 'requests-2.28.0-py3-none-any.whl')

    Returns:
        WheelFilename, or None if the name has fewer than five fields
    """
    stem = wheel_stem(filename)
    if stem is None:
        return None

    parts = stem.split("-")
    if len(parts) < MIN_WHEEL_PARTS:
        return None

    build_tag = None
    if len(parts) > MIN_WHEEL_PARTS and parts[2][:1].isdigit():
        build_tag = parts[2]

    python_tag, abi_tag, platform_tag = parts[-3:]
    return WheelFilename(
        name=parts[0],
        version=parts[1],
        python_tag=python_tag,
        abi_tag=abi_tag,
        platform_tag=platform_tag,
        build_tag=build_tag,
    )
