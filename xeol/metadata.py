"""Identifying metadata of a database flat file and the database status."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

log = logging.getLogger(__name__)

METADATA_FILE_NAME = "metadata.json"

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


class MetadataError(Exception):
    """Raised when database metadata cannot be read, parsed or written."""


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp (any fraction length) and return it in UTC."""
    found = _RFC3339_RE.fullmatch(text)
    if found is None:
        raise ValueError(f"invalid RFC 3339 time: {text!r}")
    year, month, day, hour, minute, second = (int(g) for g in found.groups()[:6])
    fraction = found.group(7) or ""
    microsecond = int((fraction + "000000")[:6])
    zone = found.group(8)
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    moment = datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    return moment.astimezone(timezone.utc)


def _zone_suffix(moment: datetime) -> str:
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_rfc3339(moment: datetime) -> str:
    """Format a moment as RFC 3339 to the second; naive moments are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
        f"{_zone_suffix(moment)}"
    )


def metadata_path(directory: str | os.PathLike[str]) -> str:
    return os.path.join(os.fspath(directory), METADATA_FILE_NAME)


def _load_json(data: str | bytes | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(data, Mapping):
        return data
    loaded = json.loads(data)
    if not isinstance(loaded, dict):
        raise ValueError("expected a JSON object")
    return loaded


@dataclass(frozen=True)
class Metadata:
    """Build time, schema version and checksum of a database flat file."""

    built: datetime
    version: int
    checksum: str

    @classmethod
    def from_json(cls, data: str | bytes | Mapping[str, Any]) -> Metadata:
        try:
            raw = _load_json(data)
        except ValueError as exc:
            raise MetadataError(f"invalid metadata JSON: {exc}") from exc
        built = raw.get("built", "")
        version = raw.get("version", 0)
        checksum = raw.get("checksum", "")
        if not isinstance(built, str) or not isinstance(checksum, str):
            raise MetadataError("metadata fields 'built' and 'checksum' must be strings")
        if isinstance(version, bool) or not isinstance(version, int):
            raise MetadataError("metadata field 'version' must be an integer")
        try:
            moment = parse_rfc3339(built)
        except ValueError as exc:
            raise MetadataError(f"cannot convert built time ({built}): {exc}") from exc
        return cls(built=moment, version=version, checksum=checksum)

    @classmethod
    def from_dir(cls, directory: str | os.PathLike[str]) -> Metadata | None:
        """Read the metadata file in a directory; None when there is no such file."""
        path = metadata_path(directory)
        try:
            os.stat(path)
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise MetadataError(f"unable to check if DB metadata path exists ({path}): {exc}") from exc
        try:
            with open(path, "rb") as handle:
                contents = handle.read()
        except OSError as exc:
            raise MetadataError(f"unable to open DB metadata path ({path}): {exc}") from exc
        try:
            return cls.from_json(contents)
        except MetadataError as exc:
            raise MetadataError(f"unable to parse DB metadata ({path}): {exc}") from exc

    def to_json(self) -> dict[str, Any]:
        return {
            "built": format_rfc3339(self._built_utc()),
            "version": self.version,
            "checksum": self.checksum,
        }

    def write(self, to_path: str | os.PathLike[str]) -> None:
        contents = json.dumps(self.to_json(), indent=1)
        try:
            fd = os.open(to_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(contents)
        except OSError as exc:
            raise MetadataError(f"failed to write metadata file: {exc}") from exc

    def _built_utc(self) -> datetime:
        built = self.built if self.built.tzinfo else self.built.replace(tzinfo=timezone.utc)
        return built.astimezone(timezone.utc)

    def __str__(self) -> str:
        return f"Metadata(built={self.built} version={self.version} checksum={self.checksum})"


def is_superseded_by(current: Metadata | None, entry: Any) -> bool:
    """Tell whether a listing entry is newer than the current metadata."""
    if current is None:
        log.debug("cannot find existing metadata, using update...")
        return True
    if entry.version > current.version:
        log.debug("update is a newer version than the current database, using update...")
        return True
    if entry.built > current.built:
        log.debug(
            "existing database (%s) is older than candidate update (%s), using update...",
            current.built,
            entry.built,
        )
        return True
    log.debug("existing database is already up to date")
    return False


@dataclass
class Status:
    built: datetime | None = None
    schema_version: int = 0
    location: str = ""
    checksum: str = ""
    err: Exception | None = None