"""RPM repository metadata (repomd.xml / primary.xml) helpers.

A YUM repository publishes repodata/repomd.xml, a manifest listing the
metadata files of the repository. The one of type "primary" is a gzip
compressed XML catalog with one <package> element per RPM:

    <package type="rpm">
      <name>myapp</name>
      <arch>x86_64</arch>
      <version epoch="0" ver="1.0" rel="1"/>
      <checksum type="sha" pkgid="YES">...</checksum>
      ...
    </package>
"""

import io
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..common.logger import get_logger
from .base import IndexParseError, local_name, maybe_gunzip

logger = get_logger("format.rpm")

REPOMD_PATH = "repodata/repomd.xml"

# Checksum type name used by createrepo for SHA-1
SHA1_CHECKSUM_TYPE = "sha"


@dataclass
class RepomdEntry:
    """One <data> element of repomd.xml."""

    type: str
    href: str


@dataclass
class PrimaryPackage:
    """Identity and checksum of one package listed in primary.xml."""

    name: str
    arch: str
    epoch: str
    ver: str
    rel: str
    checksum_type: str
    checksum: str

    @property
    def filename(self) -> str:
        """Canonical file name of the package."""
        return package_filename(self.name, self.epoch, self.ver, self.rel, self.arch)


def package_filename(name: str, epoch: str, ver: str, rel: str, arch: str) -> str:
    """Rebuild an RPM file name from its NEVRA.

    Args:
        name: Package name
        epoch: Epoch, "0" when the package has none
        ver: Version
        rel: Release
        arch: Architecture

    Returns:
        "name-ver-rel.arch.rpm", prefixed with "epoch:" for non-zero epochs
    """
    if epoch == "0":
        return f"{name}-{ver}-{rel}.{arch}.rpm"
    return f"{epoch}:{name}-{ver}-{rel}.{arch}.rpm"


def parse_repomd(data: bytes) -> List[RepomdEntry]:
    """Parse a repomd.xml manifest.

    Args:
        data: Raw repomd.xml document

    Returns:
        List of entries, in document order

    Raises:
        IndexParseError: If the document is not well-formed XML
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise IndexParseError(f"Invalid repomd.xml: {e}") from e

    entries = []
    for element in root:
        if local_name(element.tag) != "data":
            continue
        href = None
        for child in element:
            if local_name(child.tag) == "location":
                href = child.get("href")
        if href:
            entries.append(RepomdEntry(type=element.get("type", ""), href=href))

    return entries


def find_primary_href(entries: Iterable[RepomdEntry]) -> Optional[str]:
    """Location of the primary catalog, or None if not listed."""
    for entry in entries:
        if entry.type == "primary":
            return entry.href
    return None


def _parse_package(element: ET.Element) -> Optional[PrimaryPackage]:
    fields = {}
    version = None
    checksum = None
    for child in element:
        tag = local_name(child.tag)
        if tag in ("name", "arch"):
            fields[tag] = (child.text or "").strip()
        elif tag == "version":
            version = child
        elif tag == "checksum":
            checksum = child

    if "name" not in fields or "arch" not in fields or version is None or checksum is None:
        logger.debug("Skipping incomplete <package> entry in primary.xml")
        return None

    return PrimaryPackage(
        name=fields["name"],
        arch=fields["arch"],
        epoch=version.get("epoch", "0"),
        ver=version.get("ver", ""),
        rel=version.get("rel", ""),
        checksum_type=checksum.get("type", ""),
        checksum=(checksum.text or "").strip(),
    )


def parse_primary(data: bytes) -> List[PrimaryPackage]:
    """Parse a primary.xml catalog, gzip compressed or not.

    Args:
        data: Raw (usually gzip compressed) primary.xml payload

    Returns:
        List of packages, in document order

    Raises:
        IndexParseError: If decompression or XML parsing fails
    """
    xml_data = maybe_gunzip(data)

    packages = []
    try:
        for _, element in ET.iterparse(io.BytesIO(xml_data), events=("end",)):
            if local_name(element.tag) != "package":
                continue
            package = _parse_package(element)
            if package is not None:
                packages.append(package)
            element.clear()
    except ET.ParseError as e:
        raise IndexParseError(f"Invalid primary.xml: {e}") from e

    return packages


def find_package(packages: Iterable[PrimaryPackage], filename: str) -> Optional[PrimaryPackage]:
    """First package whose canonical file name equals filename."""
    for package in packages:
        if package.filename == filename:
            return package
    return None
