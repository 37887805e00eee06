"""Records and reader interface of the end-of-life database schema."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

SCHEMA_VERSION = 1
EOL_STORE_FILE_NAME = "xeol.db"


@dataclass(frozen=True)
class Product:
    id: int
    name: str


@dataclass(frozen=True)
class CycleRecord:
    """A release cycle row as stored in the database."""

    product_name: str = ""
    release_date: str = ""
    release_cycle: str = ""
    latest_release_date: str = ""
    latest_release: str = ""
    eol: str = ""
    eol_bool: bool = False


@dataclass(frozen=True)
class Purl:
    purl: str


@dataclass(frozen=True)
class DatabaseID:
    """Identifies a database build: when it was built and its schema version."""

    build_timestamp: datetime
    schema_version: int


def new_id(age: datetime) -> DatabaseID:
    """Return an ID for the current schema with the timestamp in UTC."""
    if age.tzinfo is None:
        age = age.replace(tzinfo=timezone.utc)
    return DatabaseID(build_timestamp=age.astimezone(timezone.utc), schema_version=SCHEMA_VERSION)


@runtime_checkable
class EolStoreReader(Protocol):
    def get_cycles_by_purl(self, purl: str) -> list[CycleRecord]:
        """Return every cycle of the products known by this short purl."""
        ...

    def get_all_products(self) -> list[Product]:
        """Return every product in the store."""
        ...