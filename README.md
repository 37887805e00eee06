# xeol

Building blocks for working with a local database of end-of-life (EOL)
software: products, their release cycles and EOL dates, looked up by short
package URL (purl).

The package has no dependencies beyond the standard library.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `xeol.schema` — the records of the database schema: `Product`,
  `CycleRecord`, `Purl` and `DatabaseID`, with `new_id(age)` to make an ID for
  the current `SCHEMA_VERSION` (1). `EolStoreReader` is the protocol a reader
  satisfies (`get_cycles_by_purl`, `get_all_products`). The database file is
  named `EOL_STORE_FILE_NAME` (`xeol.db`).
- `xeol.store` — `Store`, an SQLite-backed reader and writer.
  `Store.open(path, overwrite)` opens a file read-only, or, with
  `overwrite=True`, deletes it and starts afresh with an empty `id` table.
  It offers `get_id`, `set_id`, `get_all_products` and `get_cycles_by_purl`,
  and is a context manager (`close` vacuums and closes the connection).
  `get_cycles_by_purl` reads the `cycles`, `products` and `purls` tables and
  returns dates as `YYYY-MM-DD`.
- `xeol.metadata` — `Metadata`, the `metadata.json` that sits beside a
  database file (built time, schema version, checksum), read with
  `Metadata.from_dir` (which returns `None` when there is no such file) and
  written with `Metadata.write`. `is_superseded_by(current, entry)` tells
  whether a listing entry is newer than the current metadata. `Status` holds
  the state of an installed database. `parse_rfc3339` and `format_rfc3339`
  handle the timestamps.
- `xeol.listing` — `Listing` and `ListingEntry`: the JSON listing of
  downloadable database archives, grouped by schema version and kept newest
  first. `Listing.best_update(target_schema)` returns the newest entry for a
  schema, or `None`. `ListingEntry.from_archive` describes an archive file by
  its SHA-256 checksum and the URL it will be served under.
- `xeol.distro` — `Distro`, `DistroType`, `Release` and `Version`: Linux
  distribution identification from os-release style fields, with
  `type_from_release` trying the ID, then ID_LIKE, then the name.
- `xeol.events` — `EventType`, `Event` and the payload parsers
  (`parse_app_update_available`, `parse_update_eol_database`, ...), which
  raise `BadPayloadError` on a wrong event type or payload.

## Examples

Writing and reading a database ID:

```python
from datetime import datetime, timezone
from xeol.schema import new_id
from xeol.store import Store

with Store.open("xeol.db", overwrite=True) as store:
    store.set_id(new_id(datetime.now(timezone.utc)))
    print(store.get_id())
```

Choosing an update from a listing:

```python
from xeol.listing import Listing
from xeol.metadata import Metadata, is_superseded_by
from xeol.schema import SCHEMA_VERSION

listing = Listing.from_file("listing.json")
candidate = listing.best_update(SCHEMA_VERSION)
current = Metadata.from_dir("/var/cache/xeol/1")
if candidate is not None and is_superseded_by(current, candidate):
    print("update available:", candidate)
```

Identifying a distribution:

```python
from xeol.distro import Distro, Release

distro = Distro.from_release(Release(id="centos", version_id="8"))
print(distro, distro.major_version())  # centos 8 8
```

Errors are raised as exceptions: `StoreError`, `ListingError`,
`MetadataError`, `BadPayloadError`, and `ValueError` for versions and
distributions that cannot be identified.

## What the package does not do

- It does not download, verify, install or age-check a database archive;
  it only reads and writes the listing and metadata files that describe one.
- It does not build the `products`, `cycles` and `purls` tables; `Store`
  reads them from a database file that already has them.
- It does not catalogue packages or match them against the database, and it
  has no command-line program.