import json
import unittest
from unittest import mock

from sqlalchemy.exc import OperationalError

from spos import create_app
from spos.extensions import db
from spos.models import StorageEntry
from spos.services.storage_service import KeyValueStore, StorageError, next_record_id


class KeyValueStoreTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = create_app({
            "SECRET_KEY": "test",
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "TESTING": True,
        })
        cls.ctx = cls.app.app_context()
        cls.ctx.push()
        db.create_all()

    @classmethod
    def tearDownClass(cls):
        db.session.remove()
        db.drop_all()
        cls.ctx.pop()

    def setUp(self):
        db.session.query(StorageEntry).delete()
        db.session.commit()
        self.store = KeyValueStore(db.session, prefix="spos_")

    def test_missing_key_reads_as_none(self):
        self.assertIsNone(self.store.get_item("products"))
        self.assertEqual(self.store.read_collection("products"), [])
        self.assertEqual(self.store.read_json("current_user", default="absent"), "absent")

    def test_set_get_overwrite(self):
        self.store.set_item("products", "[]")
        self.store.set_item("products", "[1]")
        self.assertEqual(self.store.get_item("products"), "[1]")
        self.assertEqual(db.session.query(StorageEntry).count(), 1)

    def test_keys_are_prefixed(self):
        self.store.set_item("sales", "[]")
        entry = db.session.get(StorageEntry, "spos_sales")
        self.assertIsNotNone(entry)
        self.assertEqual(self.store.keys(), ["sales"])

    def test_prefixes_do_not_see_each_other(self):
        other = KeyValueStore(db.session, prefix="other_")
        other.set_item("products", "[]")
        self.assertIsNone(self.store.get_item("products"))
        self.assertEqual(self.store.keys(), [])

    def test_remove_item(self):
        self.store.write_json("current_user", {"id": 1})
        self.store.remove_item("current_user")
        self.store.remove_item("current_user")
        self.assertIsNone(self.store.get_item("current_user"))

    def test_remove_item_survives_locked_commit(self):
        self.store.write_json("current_user", {"id": 1})
        real_commit = db.session.commit
        calls = []

        def locked_once():
            calls.append(1)
            if len(calls) == 1:
                raise OperationalError("COMMIT", {}, Exception("database is locked"))
            return real_commit()

        with mock.patch.object(db.session, "commit", side_effect=locked_once):
            self.store.remove_item("current_user")

        self.assertEqual(len(calls), 2)
        self.assertIsNone(self.store.get_item("current_user"))

    def test_json_round_trip_keeps_numbers_exact(self):
        records = [
            {"id": 1760000000001, "price": 0.1, "quantity": 3},
            {"id": 1760000000002, "price": 19.99, "quantity": 0},
            {"id": 1760000000003, "price": 1234567.891, "quantity": 7},
        ]
        self.store.write_collection("products", records)
        self.assertEqual(self.store.read_collection("products"), records)

    def test_corrupt_entry_raises_storage_error(self):
        self.store.set_item("products", "{not json")
        with self.assertRaises(StorageError):
            self.store.read_collection("products")

    def test_non_list_collection_raises_storage_error(self):
        self.store.set_item("products", json.dumps({"id": 1}))
        with self.assertRaises(StorageError):
            self.store.read_collection("products")


class NextRecordIdTests(unittest.TestCase):
    def test_id_moves_past_existing_ids(self):
        far_future = 10 ** 15
        self.assertEqual(next_record_id([{"id": far_future}]), far_future + 1)

    def test_empty_collection_uses_clock(self):
        self.assertGreater(next_record_id([]), 1_600_000_000_000)
