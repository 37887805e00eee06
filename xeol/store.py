"""SQLite-backed end-of-life store."""

from __future__ import annotations

import contextlib
import logging
import os
import re
import sqlite3
from datetime import datetime, timezone
from typing import Any

from xeol.metadata import parse_rfc3339
from xeol.schema import CycleRecord, DatabaseID, Product

log = logging.getLogger(__name__)

ID_TABLE_NAME = "id"
PRODUCT_TABLE_NAME = "products"
CYCLE_TABLE_NAME = "cycles"

# Faster writes at the cost of losing data if a write is interrupted.
_WRITER_STATEMENTS = (
    "PRAGMA synchronous = OFF",
    "PRAGMA journal_mode = MEMORY",
)

_READ_OPTIONS = ("immutable=1", "cache=shared", "mode=ro")

_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})")
_ZERO_DATE = "0001-01-01"


class StoreError(Exception):
    """Raised when the database cannot be opened, read or written."""


def connection_string(path: str) -> str:
    if not path:
        raise StoreError("no db filepath given")
    return f"file:{path}?cache=shared"


def open_database(path: str | os.PathLike[str], write: bool) -> sqlite3.Connection:
    """Open an SQLite database; writing starts from an empty file, reading is read-only."""
    path = os.fspath(path)
    if write:
        with contextlib.suppress(OSError):
            os.remove(path)
    conn_str = connection_string(path)
    if not write:
        conn_str += "".join(f"&{option}" for option in _READ_OPTIONS)
    try:
        connection = sqlite3.connect(conn_str, uri=True)
    except sqlite3.Error as exc:
        raise StoreError(f"unable to connect to DB: {exc}") from exc
    if write:
        for statement in _WRITER_STATEMENTS:
            try:
                connection.execute(statement)
            except sqlite3.Error as exc:
                connection.close()
                raise StoreError(f"unable to execute ({statement}): {exc}") from exc
    return connection


def _format_rfc3339_nano(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    sign = "-" if offset.total_seconds() < 0 else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _date_text(value: Any) -> str:
    """Render a stored time column as YYYY-MM-DD; NULL becomes the zero date."""
    if value is None:
        return _ZERO_DATE
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d")
    if isinstance(value, bytes):
        value = value.decode(errors="replace")
    found = _DATE_RE.match(str(value))
    if found is None:
        raise StoreError(f"unable to parse date column: {value!r}")
    return found.group(1)


class Store:
    """Reads and writes the end-of-life database."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._db = connection

    @classmethod
    def open(cls, path: str | os.PathLike[str], overwrite: bool) -> Store:
        connection = open_database(path, overwrite)
        if overwrite:
            try:
                with connection:
                    connection.execute(
                        f"CREATE TABLE IF NOT EXISTS {ID_TABLE_NAME} "
                        "(build_timestamp text, schema_version integer)"
                    )
            except sqlite3.Error as exc:
                connection.close()
                raise StoreError(f"unable to migrate ID model: {exc}") from exc
        return cls(connection)

    def get_id(self) -> DatabaseID | None:
        """Return the schema version and build time, or None when unset."""
        try:
            rows = self._db.execute(
                f"SELECT build_timestamp, schema_version FROM {ID_TABLE_NAME}"
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        if len(rows) > 1:
            raise StoreError("found multiple DB IDs")
        if not rows:
            return None
        timestamp, schema_version = rows[0]
        try:
            built = parse_rfc3339(timestamp or "")
        except ValueError as exc:
            raise StoreError(f"unable to parse build timestamp ({timestamp}): {exc}") from exc
        return DatabaseID(build_timestamp=built, schema_version=schema_version)

    def set_id(self, db_id: DatabaseID) -> None:
        """Replace the stored ID with the given one."""
        try:
            with self._db:
                self._db.execute(f"DELETE FROM {ID_TABLE_NAME}")
                cursor = self._db.execute(
                    f"INSERT INTO {ID_TABLE_NAME} (build_timestamp, schema_version) VALUES (?, ?)",
                    (_format_rfc3339_nano(db_id.build_timestamp), db_id.schema_version),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"unable to add id: {exc}") from exc
        if cursor.rowcount != 1:
            raise StoreError(f"unable to add id ({cursor.rowcount} rows affected)")

    def get_all_products(self) -> list[Product]:
        try:
            rows = self._db.execute(f"SELECT id, name FROM {PRODUCT_TABLE_NAME}").fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return [Product(id=row[0], name=row[1] or "") for row in rows]

    def get_cycles_by_purl(self, purl: str) -> list[CycleRecord]:
        query = (
            "SELECT products.name, cycles.release_cycle, cycles.eol, cycles.eol_bool, "
            "cycles.latest_release, cycles.latest_release_date, cycles.release_date "
            "FROM cycles "
            "JOIN products ON cycles.product_id = products.id "
            "JOIN purls ON products.id = purls.product_id "
            "WHERE purls.purl = ?"
        )
        try:
            rows = self._db.execute(query, (purl,)).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return [
            CycleRecord(
                product_name=name or "",
                release_date=_date_text(release_date),
                release_cycle=release_cycle or "",
                latest_release_date=_date_text(latest_release_date),
                latest_release=latest_release or "",
                eol=_date_text(eol),
                eol_bool=bool(eol_bool),
            )
            for name, release_cycle, eol, eol_bool, latest_release, latest_release_date, release_date in rows
        ]

    def close(self) -> None:
        try:
            self._db.execute("VACUUM;")
        except sqlite3.Error as exc:
            log.warning("unable to vacuum database: %s", exc)
        self._db.close()

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()