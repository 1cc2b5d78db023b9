import logging
import os
from pathlib import Path
from typing import List, Optional, Union

import httpx

from .storage import SnapshotError, StorageManager


logger = logging.getLogger(__name__)

DEFAULT_WORDS_URL = "https://norvig.com/ngrams/word.list"
DEFAULT_CACHE_DIR_ENV = "MACKERELS_CACHE_DIR"
WORDS_URL_ENV = "MACKERELS_WORDS_URL"
SNAPSHOT_NAME = "words.bin"


class WordSourceError(RuntimeError):
    """The word list could not be fetched."""


def parse_word_list(text: str) -> List[str]:
    """One word per line; blank lines and surrounding whitespace are dropped."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def read_word_file(filepath: Union[str, Path]) -> List[str]:
    with open(filepath, "r", encoding="utf-8") as f:
        return parse_word_list(f.read())


def default_cache_dir() -> Path:
    base = os.environ.get(DEFAULT_CACHE_DIR_ENV)
    if base:
        return Path(base)
    return Path(".cache")


def default_words_url() -> str:
    return os.environ.get(WORDS_URL_ENV) or DEFAULT_WORDS_URL


class WordListSource:
    """
    Word list fetched over HTTP once and kept as a local snapshot.

    The snapshot is written with StorageManager next to the other cached
    data; later loads read it instead of hitting the network.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        cache_path: Optional[Union[str, Path]] = None,
        *,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url or default_words_url()
        self.cache_path = Path(cache_path) if cache_path else default_cache_dir() / SNAPSHOT_NAME
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self._timeout, follow_redirects=True)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "WordListSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def load(self) -> List[str]:
        """Return the cached word list, fetching it first when there is no usable snapshot."""
        words = self._read_snapshot()
        if words is not None:
            logger.debug(f"Using cached word list {self.cache_path} ({len(words)} words)")
            return words
        return self.refresh()

    def refresh(self) -> List[str]:
        """Fetch the word list and overwrite the snapshot."""
        words = self.fetch()
        try:
            StorageManager.save_words(self.cache_path, words, source=self.url)
        except OSError as e:
            logger.warning(f"Could not write word list snapshot {self.cache_path}: {e}")
        return words

    def fetch(self) -> List[str]:
        logger.info(f"Fetching word list from {self.url}")
        try:
            resp = self._client.get(self.url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise WordSourceError(f"Failed to fetch word list from {self.url}: {e}") from e

        words = parse_word_list(resp.text)
        if not words:
            raise WordSourceError(f"Word list at {self.url} is empty")
        logger.info(f"Fetched {len(words)} words")
        return words

    def _read_snapshot(self) -> Optional[List[str]]:
        if not self.cache_path.exists():
            return None
        try:
            source, words = StorageManager.load_words(self.cache_path)
        except (OSError, SnapshotError) as e:
            logger.warning(f"Ignoring unreadable word list snapshot {self.cache_path}: {e}")
            return None
        if source != self.url:
            logger.debug(f"Snapshot {self.cache_path} does not match {self.url}")
            return None
        return words
