import os
import tempfile
import unittest

from mackerels import SnapshotError, StorageManager, WordIndexBuilder


class TestStorageManager(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "nested", "data.bin")

    def tearDown(self):
        self.tmp.cleanup()

    def test_words_round_trip(self):
        StorageManager.save_words(self.path, ["mackerel", "Ohio", "ice cream"], source="https://example.test/w")
        self.assertEqual(
            StorageManager.load_words(self.path),
            ("https://example.test/w", ["mackerel", "Ohio", "ice cream"])
        )

    def test_empty_word_list(self):
        StorageManager.save_words(self.path, [])
        self.assertEqual(StorageManager.load_words(self.path), ("", []))

    def test_index_round_trip(self):
        index = WordIndexBuilder(["mackerel", "ohio"]).build_all_indices()
        StorageManager.save_index(self.path, index)
        loaded = StorageManager.load_index(self.path)
        self.assertEqual(loaded["words"], index["words"])
        self.assertEqual(loaded["stats"]["sha256"], index["stats"]["sha256"])

    def test_wrong_kind(self):
        StorageManager.save_words(self.path, ["mackerel"])
        with self.assertRaises(SnapshotError):
            StorageManager.load_index(self.path)

    def test_bad_magic(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "wb") as f:
            f.write(b"RIDX" + b"\x00" * 64)
        with self.assertRaises(SnapshotError):
            StorageManager.load_words(self.path)

    def test_truncated(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "wb") as f:
            f.write(b"MKRL")
        with self.assertRaises(SnapshotError):
            StorageManager.load_words(self.path)

    def test_checksum_mismatch(self):
        StorageManager.save_words(self.path, ["mackerel"] * 50)
        with open(self.path, "rb") as f:
            raw = bytearray(f.read())
        raw[StorageManager.HEADER.size + 2] ^= 0xFF
        with open(self.path, "wb") as f:
            f.write(raw)
        with self.assertRaises(SnapshotError):
            StorageManager.load_words(self.path)

    def test_snapshot_error_is_value_error(self):
        self.assertTrue(issubclass(SnapshotError, ValueError))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            StorageManager.load_words(self.path)


if __name__ == "__main__":
    unittest.main()
