import os
import tempfile
import unittest
from unittest import mock

import httpx

from mackerels import WordListSource, WordSourceError
from mackerels.sources import (
    DEFAULT_WORDS_URL,
    default_cache_dir,
    default_words_url,
    parse_word_list,
    read_word_file,
)


URL = "https://example.test/word.list"


class _Server:
    """Counts requests and serves a fixed response."""

    def __init__(self, status=200, body="Mackerel\nfish\n\n  the \n"):
        self.status = status
        self.body = body
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        return httpx.Response(self.status, text=self.body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


class TestParsing(unittest.TestCase):
    def test_parse_word_list(self):
        self.assertEqual(parse_word_list("a\nB\r\n\n  c  \n"), ["a", "B", "c"])
        self.assertEqual(parse_word_list(""), [])

    def test_one_word_per_line(self):
        self.assertEqual(parse_word_list("ice cream\nohio\n"), ["ice cream", "ohio"])
        self.assertEqual(parse_word_list("  new york  \r\n\t\n"), ["new york"])

    def test_read_word_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "words.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write("mackerel\nohio\n")
            self.assertEqual(read_word_file(path), ["mackerel", "ohio"])

    def test_environment_defaults(self):
        with mock.patch.dict(os.environ, {"MACKERELS_CACHE_DIR": "/tmp/mk", "MACKERELS_WORDS_URL": URL}):
            self.assertEqual(str(default_cache_dir()), "/tmp/mk")
            self.assertEqual(default_words_url(), URL)
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(str(default_cache_dir()), ".cache")
            self.assertEqual(default_words_url(), DEFAULT_WORDS_URL)


class TestWordListSource(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.cache_path = os.path.join(self.tmp.name, "words.bin")

    def tearDown(self):
        self.tmp.cleanup()

    def source(self, server, url=URL):
        return WordListSource(url, self.cache_path, client=server.client())

    def test_fetch_then_cache(self):
        server = _Server()
        with self.source(server) as source:
            self.assertEqual(source.load(), ["Mackerel", "fish", "the"])
        self.assertEqual(server.calls, 1)
        self.assertTrue(os.path.exists(self.cache_path))

        offline = _Server(status=503)
        with self.source(offline) as source:
            self.assertEqual(source.load(), ["Mackerel", "fish", "the"])
        self.assertEqual(offline.calls, 0)

    def test_refresh_refetches(self):
        server = _Server()
        with self.source(server) as source:
            source.load()
            server.body = "ohio\n"
            self.assertEqual(source.refresh(), ["ohio"])
            self.assertEqual(source.load(), ["ohio"])
        self.assertEqual(server.calls, 2)

    def test_snapshot_for_other_url_is_ignored(self):
        with self.source(_Server()) as source:
            source.load()
        server = _Server(body="texas\n")
        with self.source(server, url=URL + "?v=2") as source:
            self.assertEqual(source.load(), ["texas"])
        self.assertEqual(server.calls, 1)

    def test_corrupt_snapshot_is_refetched(self):
        with open(self.cache_path, "wb") as f:
            f.write(b"not a snapshot")
        server = _Server()
        with self.source(server) as source:
            self.assertEqual(source.load(), ["Mackerel", "fish", "the"])
        self.assertEqual(server.calls, 1)

    def test_http_error(self):
        with self.source(_Server(status=500)) as source:
            with self.assertRaises(WordSourceError):
                source.load()
        self.assertFalse(os.path.exists(self.cache_path))

    def test_empty_list_is_an_error(self):
        with self.source(_Server(body="\n\n")) as source:
            with self.assertRaises(WordSourceError):
                source.fetch()


if __name__ == "__main__":
    unittest.main()
