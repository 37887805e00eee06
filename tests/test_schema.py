from datetime import datetime, timedelta, timezone

from xeol.schema import (
    EOL_STORE_FILE_NAME,
    SCHEMA_VERSION,
    CycleRecord,
    DatabaseID,
    EolStoreReader,
    new_id,
)


def test_new_id_uses_current_schema_and_utc():
    moment = datetime(2020, 6, 15, 10, 0, tzinfo=timezone(timedelta(hours=-4)))
    db_id = new_id(moment)
    assert db_id.schema_version == SCHEMA_VERSION == 1
    assert db_id.build_timestamp == moment
    assert db_id.build_timestamp.utcoffset() == timedelta(0)


def test_new_id_naive_treated_as_utc():
    moment = datetime(2021, 1, 2, 3, 4, 5)
    db_id = new_id(moment)
    assert db_id == DatabaseID(moment.replace(tzinfo=timezone.utc), 1)
    assert EOL_STORE_FILE_NAME == "xeol.db"


def test_reader_protocol():
    record = CycleRecord(product_name="pkg:generic/go")

    class Reader:
        def get_cycles_by_purl(self, purl):
            return [record] if purl == record.product_name else []

        def get_all_products(self):
            return []

    reader = Reader()
    assert record.product_name == "pkg:generic/go"
    assert isinstance(reader, EolStoreReader)
    assert reader.get_cycles_by_purl("pkg:generic/go") == [record]
    assert not isinstance(object(), EolStoreReader)