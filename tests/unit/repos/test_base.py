"""Tests for repository and content data structures."""

import pytest

from repowatch.repos.base import (
    ChecksumPair,
    ContentIdentity,
    DebianTarget,
    RepositoryInfo,
    RepositoryKind,
    clean_path,
)


class TestRepositoryKind:
    """Tests for RepositoryKind."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("debian", RepositoryKind.DEBIAN),
            ("deb", RepositoryKind.DEBIAN),
            ("Debian", RepositoryKind.DEBIAN),
            ("rpm", RepositoryKind.RPM),
            ("maven", RepositoryKind.MAVEN),
            ("generic", RepositoryKind.GENERIC),
        ],
    )
    def test_parse(self, value, expected):
        """Test parsing service type names."""
        assert RepositoryKind.parse(value) is expected

    def test_parse_unknown(self):
        """Test unknown types are rejected."""
        with pytest.raises(ValueError):
            RepositoryKind.parse("cargo")

    def test_only_debian_and_rpm_are_indexed(self):
        """Test which kinds have an index."""
        indexed = {kind for kind in RepositoryKind if kind.is_indexed}

        assert indexed == {RepositoryKind.DEBIAN, RepositoryKind.RPM}


class TestRepositoryInfo:
    """Tests for RepositoryInfo.from_dict()."""

    def test_from_dict(self):
        """Test parsing a repository document, ignoring unused fields."""
        info = RepositoryInfo.from_dict(
            {
                "name": "rpms",
                "owner": "acme",
                "type": "rpm",
                "private": True,
                "labels": ["b", "a"],
                "desc": "RPM packages",
                "yum_metadata_depth": 2,
            }
        )

        assert info.owner == "acme"
        assert info.name == "rpms"
        assert info.kind is RepositoryKind.RPM
        assert info.yum_metadata_depth == 2

    def test_from_dict_minimal(self):
        """Test optional fields default sensibly."""
        info = RepositoryInfo.from_dict({"name": "files", "owner": "acme"})

        assert info.kind is RepositoryKind.GENERIC
        assert info.yum_metadata_depth is None
        assert info.default_debian_distribution is None

    def test_from_dict_unknown_type(self):
        """Test unknown repository types are rejected."""
        with pytest.raises(ValueError):
            RepositoryInfo.from_dict({"name": "x", "owner": "acme", "type": "conan"})

    def test_from_dict_deb_alias(self):
        """Test the "deb" alias maps to Debian."""
        info = RepositoryInfo.from_dict(
            {
                "name": "debs",
                "owner": "acme",
                "type": "deb",
                "default_debian_distribution": "stretch",
            }
        )

        assert info.kind is RepositoryKind.DEBIAN
        assert info.default_debian_distribution == "stretch"


class TestCleanPath:
    """Tests for clean_path()."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("a/b/c.deb", "a/b/c.deb"),
            ("/a/b", "a/b"),
            ("//a/b", "a/b"),
            ("./a/./b", "a/b"),
            ("../../a", "a"),
            ("C:\\dir\\file.rpm", "dir/file.rpm"),
            ("", ""),
        ],
    )
    def test_clean_path(self, path, expected):
        """Test leading noise is dropped."""
        assert clean_path(path) == expected


class TestContentIdentity:
    """Tests for ContentIdentity."""

    def test_path_is_cleaned(self):
        """Test the path is normalized on construction."""
        identity = ContentIdentity("acme", "debs", "foo", "1.0", "/pool/foo.deb")

        assert identity.path == "pool/foo.deb"

    def test_filename_and_directory(self, rpm_identity):
        """Test file name and directory components."""
        assert rpm_identity.filename == "foo-1.0-1.x86_64.rpm"
        assert rpm_identity.directory_parts == ("el7", "x86_64")

    def test_top_level_file_has_no_directory(self):
        """Test a file at the repository root."""
        identity = ContentIdentity("acme", "rpms", "foo", "1.0", "foo.rpm")

        assert identity.directory_parts == ()

    def test_str(self, deb_identity):
        """Test the display form."""
        assert str(deb_identity) == (
            "Content(acme:debs:foo:1.0:pool/main/f/foo/foo_1.0_amd64.deb)"
        )

    def test_hashable(self, deb_identity):
        """Test identities can be used as keys."""
        same = ContentIdentity(
            "acme", "debs", "foo", "1.0", "/pool/main/f/foo/foo_1.0_amd64.deb"
        )

        assert {deb_identity: 1}[same] == 1


class TestChecksumPair:
    """Tests for ChecksumPair."""

    def test_hex_accessors(self):
        """Test hex views of the digests."""
        pair = ChecksumPair(sha1=b"\xab\x01", sha256=None)

        assert pair.sha1_hex == "ab01"
        assert pair.sha256_hex is None


class TestDebianTarget:
    """Tests for DebianTarget."""

    def test_str(self):
        """Test the display form."""
        assert str(DebianTarget("stretch", "main", "amd64")) == "stretch/main/amd64"
