"""Python package (PyPI) format handler.

Handles wheels (``.whl``) and source distributions (``.tar.gz``, ``.zip``)
and renders a PEP 503 style simple index plus a JSON listing. Project
names are normalized before they are used as grouping keys or labels, so
``Foo_Bar`` and ``foo.bar`` end up on the same project entry.
"""

from collections import defaultdict
from html import escape
from typing import Any, Dict, List, Optional, Sequence

from packaging.utils import canonicalize_name

from ..common.logger import get_logger
from .base import FALLBACK_CONTENT_TYPE, FormatHandler, IndexFile, Metadata, filename_of
from .errors import EmptyInput, UnparseableFilename
from .sdist import SDIST_EXTENSIONS, parse_sdist_filename, split_sdist_extension
from .wheel import (
    MIN_WHEEL_PARTS,
    WHEEL_EXTENSION,
    count_wheel_parts,
    parse_wheel_filename,
    wheel_stem,
)

logger = get_logger("format.pypi")

HTML_INDEX_FILENAME = "simple/index.html"
JSON_INDEX_FILENAME = "pypi-index.json"

CONTENT_TYPES = {
    ".whl": "application/zip",
    ".zip": "application/zip",
    ".tar.gz": "application/gzip",
}


def normalize_package_name(name: str) -> str:
    """Normalize a project name per PEP 503.

    Lower-cases the name and collapses runs of ``-``, ``_`` and ``.`` into
    a single ``-``. Leading and trailing separators are dropped, which keeps
    the function idempotent.

    Args:
        name: Project name as written in a filename

    Returns:
        Normalized name (e.g., 'Foo__Bar..Baz' -> 'foo-bar-baz')
    """
    return canonicalize_name(name).strip("-")


def extract_package_name(filename: str) -> Optional[str]:
    """Get the raw (unnormalized) project name from a wheel or sdist filename."""
    stem = wheel_stem(filename)
    if stem is not None:
        return stem.split("-", 1)[0] or None

    sdist = parse_sdist_filename(filename)
    if sdist is not None:
        return sdist.name
    return None


def extract_version(filename: str) -> Optional[str]:
    """Get the version from a wheel or sdist filename."""
    wheel = parse_wheel_filename(filename)
    if wheel is not None:
        return wheel.version

    sdist = parse_sdist_filename(filename)
    if sdist is not None:
        return sdist.version
    return None


def _content_type(filename: str) -> str:
    lower = filename.lower()
    for ext, content_type in CONTENT_TYPES.items():
        if lower.endswith(ext):
            return content_type
    return FALLBACK_CONTENT_TYPE


class PypiFormatHandler(FormatHandler):
    """Handler for Python distributions (wheels and sdists).

    Args:
        compute_checksum: Fill ``checksum_sha256`` in parsed metadata
        simple_url: URL prefix of the per-project simple pages
        files_url: URL prefix prepended to artifact paths in links
    """

    def __init__(
        self,
        compute_checksum: bool = False,
        simple_url: str = "/simple/",
        files_url: str = "/",
    ):
        super().__init__(compute_checksum=compute_checksum)
        self.simple_url = simple_url if simple_url.endswith("/") else simple_url + "/"
        self.files_url = files_url if files_url.endswith("/") else files_url + "/"

    @property
    def format_key(self) -> str:
        """Return format identifier."""
        return "pypi"

    @property
    def file_extensions(self) -> List[str]:
        """Return supported file extensions."""
        return [WHEEL_EXTENSION, *SDIST_EXTENSIONS]

    def _validate(self, path: str, data: bytes) -> None:
        self._check_not_empty(path, data, "Python package")
        self._check_extension(path)

        filename = filename_of(path)

        if wheel_stem(filename) is not None:
            parts = count_wheel_parts(filename)
            if parts < MIN_WHEEL_PARTS:
                raise UnparseableFilename(
                    f"Invalid wheel filename: expected at least {MIN_WHEEL_PARTS} "
                    f"dash-separated parts (name-version-python-abi-platform), "
                    f"got {parts} in '{filename}'"
                )
            if not normalize_package_name(extract_package_name(filename) or ""):
                raise UnparseableFilename(
                    f"Invalid wheel filename: empty distribution name in '{filename}'"
                )
            return

        # sdists must carry a version, unlike RPM and Unity uploads
        if parse_sdist_filename(filename) is None:
            stem, _ = split_sdist_extension(filename)
            raise UnparseableFilename(
                f"Invalid source distribution filename: expected 'name-version' "
                f"format, got '{stem}'"
            )

    def parse_metadata(self, path: str, data: bytes) -> Metadata:
        """Parse wheel or sdist metadata from the filename.

        Args:
            path: Artifact storage path
            data: Raw distribution bytes

        Returns:
            Metadata with a content type chosen by extension

        Raises:
            EmptyInput: If data is empty
        """
        if not data:
            raise EmptyInput("Empty file")

        filename = filename_of(path)
        return self._build_metadata(
            path, data, _content_type(filename), extract_version(filename)
        )

    def generate_index(self, artifacts: Sequence[Metadata]) -> Optional[List[IndexFile]]:
        """Build ``simple/index.html`` and ``pypi-index.json``.

        Args:
            artifacts: Metadata of every distribution in the repository

        Returns:
            HTML and JSON index files, or None when there are no artifacts
        """
        if not artifacts:
            return None

        projects: Dict[str, List[Metadata]] = defaultdict(list)
        packages: List[Dict[str, Any]] = []

        for artifact in artifacts:
            raw_name = extract_package_name(artifact.filename)
            name = normalize_package_name(raw_name) if raw_name else None
            if not name:
                logger.warning(f"Cannot determine project name for {artifact.path}")
            else:
                projects[name].append(artifact)

            entry = artifact.to_dict()
            entry["name"] = name
            packages.append(entry)

        html = self._render_html(projects)
        json_bytes = self._json_index(
            artifacts,
            packages,
            projects={
                name: [a.filename for a in projects[name]] for name in sorted(projects)
            },
        )

        logger.debug(
            f"Generated PyPI index for {len(artifacts)} files in {len(projects)} projects"
        )
        return [
            (HTML_INDEX_FILENAME, html.encode("utf-8")),
            (JSON_INDEX_FILENAME, json_bytes),
        ]

    def _render_html(self, projects: Dict[str, List[Metadata]]) -> str:
        lines = [
            "<!DOCTYPE html>",
            "<html>",
            "<head><title>Simple Index</title></head>",
            "<body>",
        ]
        for name in sorted(projects):
            project_url = escape(f"{self.simple_url}{name}/")
            lines.append(f'  <h2><a href="{project_url}">{escape(name)}</a></h2>')
            for artifact in projects[name]:
                file_url = escape(self.files_url + artifact.path.lstrip("/"))
                lines.append(f'  <a href="{file_url}">{escape(artifact.filename)}</a><br/>')
        lines.extend(["</body>", "</html>", ""])
        return "\n".join(lines)
