"""Linux distribution identification."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class DistroType(str, Enum):
    DEBIAN = "debian"
    UBUNTU = "ubuntu"
    REDHAT = "redhat"
    CENTOS = "centos"
    FEDORA = "fedora"
    ALPINE = "alpine"
    BUSYBOX = "busybox"
    AMAZON_LINUX = "amazonlinux"
    ORACLE_LINUX = "oraclelinux"
    ARCH_LINUX = "archlinux"
    OPENSUSE_LEAP = "opensuseleap"
    SLES = "sles"
    PHOTON = "photon"
    WINDOWS = "windows"
    MARINER = "mariner"
    ROCKY_LINUX = "rockylinux"
    ALMA_LINUX = "almalinux"
    GENTOO = "gentoo"
    WOLFI = "wolfi"

    def __str__(self) -> str:
        return self.value


ID_MAPPING: dict[str, DistroType] = {
    "debian": DistroType.DEBIAN,
    "ubuntu": DistroType.UBUNTU,
    "rhel": DistroType.REDHAT,
    "centos": DistroType.CENTOS,
    "fedora": DistroType.FEDORA,
    "alpine": DistroType.ALPINE,
    "busybox": DistroType.BUSYBOX,
    "amzn": DistroType.AMAZON_LINUX,
    "ol": DistroType.ORACLE_LINUX,
    "arch": DistroType.ARCH_LINUX,
    "opensuse-leap": DistroType.OPENSUSE_LEAP,
    "sles": DistroType.SLES,
    "photon": DistroType.PHOTON,
    "windows": DistroType.WINDOWS,
    "mariner": DistroType.MARINER,
    "rocky": DistroType.ROCKY_LINUX,
    "almalinux": DistroType.ALMA_LINUX,
    "gentoo": DistroType.GENTOO,
    "wolfi": DistroType.WOLFI,
}


@dataclass(frozen=True)
class Release:
    """The os-release fields used to identify a distribution."""

    id: str = ""
    name: str = ""
    version: str = ""
    version_id: str = ""
    id_like: tuple[str, ...] = ()


def type_from_release(release: Release) -> DistroType | None:
    if release.id in ID_MAPPING:
        return ID_MAPPING[release.id]
    for like in release.id_like:
        if like in ID_MAPPING:
            return ID_MAPPING[like]
    return ID_MAPPING.get(release.name)


_VERSION_RE = re.compile(
    r"v?([0-9]+(?:\.[0-9]+)*?)"
    r"(?:-([0-9]+[0-9A-Za-z\-~]*(?:\.[0-9A-Za-z\-~]+)*)"
    r"|-?([A-Za-z\-~]+[0-9A-Za-z\-~]*(?:\.[0-9A-Za-z\-~]+)*))?"
    r"(?:\+([0-9A-Za-z\-~]+(?:\.[0-9A-Za-z\-~]+)*))?"
)


@dataclass(frozen=True)
class Version:
    """A loosely semantic version, padded to at least three segments."""

    parts: tuple[int, ...]
    prerelease: str = ""
    metadata: str = ""

    @classmethod
    def parse(cls, text: str) -> Version:
        found = _VERSION_RE.fullmatch(text)
        if found is None:
            raise ValueError(f"malformed version: {text}")
        parts = [int(p) for p in found.group(1).split(".")]
        parts += [0] * (3 - len(parts))
        return cls(tuple(parts), found.group(2) or found.group(3) or "", found.group(4) or "")

    def segments(self) -> list[int]:
        return list(self.parts)

    def __str__(self) -> str:
        text = ".".join(str(p) for p in self.parts)
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.metadata:
            text += f"+{self.metadata}"
        return text


@dataclass(frozen=True)
class Distro:
    type: DistroType
    version: Version | None
    raw_version: str
    id_like: tuple[str, ...] = field(default=())

    @classmethod
    def create(cls, distro_type: DistroType, version: str, *id_likes: str) -> Distro:
        parsed = None
        if version:
            try:
                parsed = Version.parse(version)
            except ValueError as exc:
                raise ValueError(f"unable to parse version: {exc}") from exc
        return cls(distro_type, parsed, version, tuple(id_likes))

    @classmethod
    def from_release(cls, release: Release) -> Distro:
        distro_type = type_from_release(release)
        if distro_type is None:
            raise ValueError("unable to determine distro type")
        selected = ""
        for candidate in (release.version_id, release.version):
            if not candidate:
                continue
            try:
                Version.parse(candidate)
            except ValueError:
                continue
            selected = candidate
            break
        return cls.create(distro_type, selected, *release.id_like)

    def name(self) -> str:
        return self.type.value

    def major_version(self) -> str:
        if self.version is None:
            return self.raw_version.split(".")[0]
        return str(self.version.segments()[0])

    def full_version(self) -> str:
        return self.raw_version

    def is_rolling(self) -> bool:
        return self.type in (DistroType.WOLFI, DistroType.ARCH_LINUX, DistroType.GENTOO)

    def __str__(self) -> str:
        return f"{self.type.value} {self.raw_version or '(version unknown)'}"