"""The listing of downloadable database archives."""

from __future__ import annotations

import hashlib
import json
import os
import posixpath
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping
from urllib.parse import urlsplit, urlunsplit

from xeol.metadata import Metadata, format_rfc3339, parse_rfc3339

LISTING_FILE_NAME = "listing.json"


class ListingError(Exception):
    """Raised when a listing cannot be read, parsed or written."""


def _load_json(data: str | bytes | Mapping[str, Any]) -> Any:
    if isinstance(data, Mapping):
        return data
    return json.loads(data)


@dataclass(frozen=True)
class ListingEntry:
    """What an archive holds (built/version) and how to get and verify it (url/checksum)."""

    built: datetime
    version: int
    url: str
    checksum: str

    @classmethod
    def from_json(cls, data: str | bytes | Mapping[str, Any]) -> ListingEntry:
        try:
            raw = _load_json(data)
        except ValueError as exc:
            raise ListingError(f"invalid listing entry JSON: {exc}") from exc
        if not isinstance(raw, Mapping):
            raise ListingError("listing entry must be a JSON object")
        built = raw.get("built", "")
        version = raw.get("version", 0)
        url = raw.get("url", "")
        checksum = raw.get("checksum", "")
        if not all(isinstance(v, str) for v in (built, url, checksum)):
            raise ListingError("listing entry fields 'built', 'url' and 'checksum' must be strings")
        if isinstance(version, bool) or not isinstance(version, int):
            raise ListingError("listing entry field 'version' must be an integer")
        try:
            moment = parse_rfc3339(built)
        except ValueError as exc:
            raise ListingError(f"cannot convert built time ({built}): {exc}") from exc
        try:
            urlsplit(url)
        except ValueError as exc:
            raise ListingError(f"cannot parse url ({url}): {exc}") from exc
        return cls(built=moment, version=version, url=url, checksum=checksum)

    def to_json(self) -> dict[str, Any]:
        return {
            "built": format_rfc3339(self.built),
            "version": self.version,
            "url": self.url,
            "checksum": self.checksum,
        }

    @classmethod
    def from_archive(
        cls, metadata: Metadata, archive_path: str | os.PathLike[str], base_url: str
    ) -> ListingEntry:
        """Describe an archive file that will be served under base_url."""
        digest = hashlib.sha256()
        try:
            with open(archive_path, "rb") as handle:
                for chunk in iter(lambda: handle.read(65536), b""):
                    digest.update(chunk)
        except OSError as exc:
            raise ListingError(f"unable to find db archive checksum: {exc}") from exc

        name = os.path.basename(os.fspath(archive_path))
        parts = urlsplit(base_url)
        path = posixpath.normpath(posixpath.join(parts.path, name))
        if parts.netloc and not path.startswith("/"):
            path = "/" + path
        url = urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))
        return cls(
            built=metadata.built,
            version=metadata.version,
            url=url,
            checksum="sha256:" + digest.hexdigest(),
        )

    def __str__(self) -> str:
        return f"Listing(url={self.url})"


def _newest_first(entries: list[ListingEntry]) -> list[ListingEntry]:
    return sorted(entries, key=lambda e: e.built, reverse=True)


@dataclass
class Listing:
    """Available database archives, grouped by schema version, newest first."""

    available: dict[int, list[ListingEntry]] = field(default_factory=dict)

    @classmethod
    def from_entries(cls, *entries: ListingEntry) -> Listing:
        grouped: dict[int, list[ListingEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.version, []).append(entry)
        return cls({version: _newest_first(group) for version, group in grouped.items()})

    @classmethod
    def from_json(cls, data: str | bytes | Mapping[str, Any]) -> Listing:
        try:
            raw = _load_json(data)
        except ValueError as exc:
            raise ListingError(f"unable to parse DB listing: {exc}") from exc
        if not isinstance(raw, Mapping):
            raise ListingError("unable to parse DB listing: expected a JSON object")
        available = raw.get("available") or {}
        if not isinstance(available, Mapping):
            raise ListingError("unable to parse DB listing: 'available' must be an object")
        grouped: dict[int, list[ListingEntry]] = {}
        for key, entries in available.items():
            try:
                version = int(key)
            except ValueError as exc:
                raise ListingError(f"unable to parse DB listing: bad schema key {key!r}") from exc
            if not isinstance(entries, list):
                raise ListingError("unable to parse DB listing: entries must be a list")
            try:
                grouped[version] = _newest_first([ListingEntry.from_json(e) for e in entries])
            except ListingError as exc:
                raise ListingError(f"unable to parse DB listing: {exc}") from exc
        return cls(grouped)

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> Listing:
        try:
            with open(path, "rb") as handle:
                contents = handle.read()
        except OSError as exc:
            raise ListingError(f"unable to open DB listing path: {exc}") from exc
        return cls.from_json(contents)

    def to_json(self) -> dict[str, Any]:
        ordered = sorted(self.available.items(), key=lambda item: str(item[0]))
        return {
            "available": {str(version): [e.to_json() for e in entries] for version, entries in ordered}
        }

    def best_update(self, target_schema: int) -> ListingEntry | None:
        entries = self.available.get(target_schema)
        return entries[0] if entries else None

    def write(self, to_path: str | os.PathLike[str]) -> None:
        contents = json.dumps(self.to_json(), indent=1)
        try:
            fd = os.open(to_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(contents)
        except OSError as exc:
            raise ListingError(f"failed to write listing file: {exc}") from exc