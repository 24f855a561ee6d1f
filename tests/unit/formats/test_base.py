"""Tests for base format classes and data structures."""

import dataclasses
import hashlib
import json

import pytest

from keeper_formats.formats.base import FormatHandler, Metadata, filename_of
from keeper_formats.formats.errors import (
    EmptyInput,
    FormatError,
    IndexGenerationError,
    TooSmall,
    WrongExtension,
)


class StubHandler(FormatHandler):
    """Minimal handler used to exercise the shared helpers."""

    @property
    def format_key(self) -> str:
        return "stub"

    @property
    def file_extensions(self) -> list:
        return [".stub", ".tar.stub"]

    def _validate(self, path, data):
        self._check_not_empty(path, data, "Stub package")
        self._check_extension(path)

    def parse_metadata(self, path, data):
        return self._build_metadata(path, data, "application/x-stub", None)

    def generate_index(self, artifacts):
        if not artifacts:
            return None
        return [("stub.json", self._json_index(artifacts, [a.to_dict() for a in artifacts]))]


class TestMetadata:
    """Tests for Metadata record."""

    def test_wire_field_order(self):
        """Test to_dict keeps the contract key order."""
        meta = Metadata(path="a/b.rpm", content_type="application/x-rpm", size_bytes=3)
        assert list(meta.to_dict()) == [
            "path",
            "version",
            "content_type",
            "size_bytes",
            "checksum_sha256",
        ]

    def test_wire_order_differs_from_declaration(self):
        """Test to_dict reorders the declared fields without losing any."""
        meta = Metadata(
            path="a/b.rpm",
            content_type="application/x-rpm",
            size_bytes=3,
            version="1.0-1",
            checksum_sha256="ab",
        )
        assert meta.to_dict() == dataclasses.asdict(meta)
        assert list(dataclasses.asdict(meta)) != list(meta.to_dict())
        assert list(meta.to_dict())[:2] == ["path", "version"]

    def test_absent_values_are_null(self):
        """Test optional fields stay present as None."""
        meta = Metadata(path="x", content_type="application/gzip", size_bytes=1)
        data = meta.to_dict()
        assert data["version"] is None
        assert data["checksum_sha256"] is None

    def test_immutable(self):
        """Test records cannot be mutated."""
        meta = Metadata(path="x", content_type="application/gzip", size_bytes=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            meta.version = "1.0"

    def test_filename(self):
        """Test filename property strips directories."""
        meta = Metadata(path="packages/foo/foo-1.0.tar.gz", content_type="x", size_bytes=1)
        assert meta.filename == "foo-1.0.tar.gz"

    def test_filename_of_plain_name(self):
        """Test filename_of with no directory part."""
        assert filename_of("foo.rpm") == "foo.rpm"
        assert filename_of("") == ""


class TestErrors:
    """Tests for the error taxonomy."""

    @pytest.mark.parametrize("error_class", [EmptyInput, WrongExtension, IndexGenerationError])
    def test_subclasses_format_error(self, error_class):
        """Test every error is a FormatError."""
        assert issubclass(error_class, FormatError)

    def test_too_small_carries_sizes(self):
        """Test TooSmall exposes the observed and required sizes."""
        err = TooSmall("too small", size=4, minimum=96)
        assert err.size == 4
        assert err.minimum == 96
        assert str(err) == "too small"


class TestFormatHandlerHelpers:
    """Tests for shared FormatHandler behaviour."""

    @pytest.fixture
    def handler(self):
        return StubHandler()

    def test_validate_rejects_empty_data(self, handler):
        """Test empty data is rejected before the path is looked at."""
        with pytest.raises(EmptyInput, match="Stub package cannot be empty"):
            handler.validate("", b"")

    def test_validate_rejects_empty_path(self, handler):
        """Test empty path is rejected."""
        with pytest.raises(EmptyInput, match="path"):
            handler.validate("", b"\x00")

    def test_validate_rejects_wrong_extension(self, handler):
        """Test the error message names the accepted extensions."""
        with pytest.raises(WrongExtension, match=r"\.stub"):
            handler.validate("dir/file.txt", b"\x00")

    def test_extension_match_ignores_case(self, handler):
        """Test extension matching is case-insensitive."""
        assert handler.matches_extension("dir/FILE.STUB")
        assert handler.matches_extension("file.tar.stub")
        assert not handler.matches_extension("stub/file")

    def test_validate_accepts(self, handler):
        """Test a good artifact passes."""
        assert handler.validate("file.stub", b"\x00") is None

    def test_checksum_not_computed_by_default(self, handler):
        """Test checksum is passed through as None."""
        meta = handler.parse_metadata("file.stub", b"abc")
        assert meta.checksum_sha256 is None
        assert meta.size_bytes == 3

    def test_checksum_computed_when_enabled(self):
        """Test checksum option fills the SHA-256 digest."""
        handler = StubHandler(compute_checksum=True)
        meta = handler.parse_metadata("file.stub", b"abc")
        assert meta.checksum_sha256 == hashlib.sha256(b"abc").hexdigest()

    def test_json_index_envelope(self, handler):
        """Test the JSON index envelope totals."""
        artifacts = [
            Metadata(path="a.stub", content_type="x", size_bytes=10),
            Metadata(path="b.stub", content_type="x", size_bytes=20),
        ]
        (name, content), = handler.generate_index(artifacts)
        index = json.loads(content)

        assert name == "stub.json"
        assert index["format"] == "stub"
        assert index["total_count"] == 2
        assert index["total_size_bytes"] == 30
        assert [p["path"] for p in index["packages"]] == ["a.stub", "b.stub"]

    def test_json_index_serialization_failure(self, handler):
        """Test unserializable content raises IndexGenerationError."""
        artifacts = [Metadata(path="a.stub", content_type="x", size_bytes=1)]
        with pytest.raises(IndexGenerationError, match="Failed to serialize index"):
            handler._json_index(artifacts, [{"bad": object()}])
