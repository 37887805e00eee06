import sqlite3
from datetime import datetime, timezone

import pytest

from xeol.schema import CycleRecord, DatabaseID, Product
from xeol.store import Store, StoreError, connection_string, open_database


def _populate(path):
    connection = sqlite3.connect(path)
    with connection:
        connection.executescript(
            """
            CREATE TABLE products (id integer primary key, name text);
            CREATE TABLE purls (id integer primary key, purl text, product_id integer);
            CREATE TABLE cycles (
                id integer primary key, product_id integer, release_cycle text, eol datetime,
                eol_bool numeric, latest_release text, latest_release_date datetime,
                release_date datetime
            );
            INSERT INTO products VALUES (1, 'Python'), (2, 'Redis');
            INSERT INTO purls VALUES (1, 'pkg:generic/python', 1), (2, 'pkg:generic/redis', 2);
            INSERT INTO cycles VALUES
                (1, 1, '2.7', '2020-01-01 00:00:00+00:00', 1, '2.7.18', '2020-04-20', '2010-07-03'),
                (2, 2, '5.0', '2021-12-31', 0, '5.0.14', NULL, '2018-10-17');
            """
        )
    connection.close()


def test_get_id_set_id(tmp_path):
    path = tmp_path / "xeol-db-test-store"
    expected = DatabaseID(build_timestamp=datetime.now(timezone.utc), schema_version=2)
    with Store.open(path, True) as store:
        store.set_id(expected)
        assert store.get_id() == expected


def test_get_id_empty(tmp_path):
    with Store.open(tmp_path / "db", True) as store:
        assert store.get_id() is None


def test_set_id_replaces_previous(tmp_path):
    first = DatabaseID(datetime(2020, 1, 1, tzinfo=timezone.utc), 1)
    second = DatabaseID(datetime(2021, 2, 3, 4, 5, 6, 700000, tzinfo=timezone.utc), 1)
    with Store.open(tmp_path / "db", True) as store:
        store.set_id(first)
        store.set_id(second)
        assert store.get_id() == second


def test_multiple_ids_is_error(tmp_path):
    path = tmp_path / "db"
    Store.open(path, True).close()
    connection = sqlite3.connect(path)
    with connection:
        connection.execute("INSERT INTO id VALUES ('2020-01-01T00:00:00Z', 1)")
        connection.execute("INSERT INTO id VALUES ('2020-01-02T00:00:00Z', 1)")
    connection.close()
    with Store.open(path, False) as store:
        with pytest.raises(StoreError, match="found multiple DB IDs"):
            store.get_id()


def test_read_cycles_and_products(tmp_path):
    path = tmp_path / "xeol.db"
    _populate(path)
    with Store.open(path, False) as store:
        assert store.get_all_products() == [Product(1, "Python"), Product(2, "Redis")]
        assert store.get_cycles_by_purl("pkg:generic/python") == [
            CycleRecord(
                product_name="Python",
                release_date="2010-07-03",
                release_cycle="2.7",
                latest_release_date="2020-04-20",
                latest_release="2.7.18",
                eol="2020-01-01",
                eol_bool=True,
            )
        ]
        redis = store.get_cycles_by_purl("pkg:generic/redis")
        assert [(c.eol, c.eol_bool, c.latest_release_date) for c in redis] == [
            ("2021-12-31", False, "0001-01-01")
        ]
        assert store.get_cycles_by_purl("pkg:generic/unknown") == []


def test_open_overwrite_removes_existing(tmp_path):
    path = tmp_path / "xeol.db"
    _populate(path)
    with Store.open(path, True) as store:
        with pytest.raises(StoreError):
            store.get_all_products()


def test_open_missing_read_only_is_error(tmp_path):
    with pytest.raises(StoreError, match="unable to connect to DB"):
        open_database(tmp_path / "missing.db", False)


def test_connection_string():
    assert connection_string("/tmp/x.db") == "file:/tmp/x.db?cache=shared"
    with pytest.raises(StoreError, match="no db filepath given"):
        connection_string("")