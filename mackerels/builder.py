import hashlib
import logging
import time
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from .base import Word
from .storage import StorageManager


logger = logging.getLogger(__name__)


class WordIndexBuilder:
    """Encodes a raw word list and indexes it by length."""

    def __init__(self, raw_words: Iterable[str]):
        """
        Initialize builder with raw word strings.

        Args:
            raw_words: Word strings in corpus order. Surrounding whitespace is
                       stripped, empty entries dropped and repeats collapsed
                       to their first occurrence.
        """
        self.raw_words = raw_words

        # Main index
        self.words: List[Word] = []

        # Inverted indices
        self.length_buckets = defaultdict(list)  # length -> [Word]

        self.stats = {
            "build_time": 0,
            "raw_count": 0,
            "sha256": "",
            "index_counts": {}
        }

    def build_all_indices(self) -> Dict[str, Any]:
        """Execute the full building pipeline."""
        start_time = time.time()

        self._build_words()
        self._build_length_buckets()
        self._build_digest()

        self.stats["build_time"] = time.time() - start_time
        self._calculate_stats()
        logger.debug(f"Indexed {len(self.words)} words in {self.stats['build_time']:.3f}s")

        return self._get_index_structure()

    def _build_words(self):
        seen = set()
        for raw in self.raw_words:
            self.stats["raw_count"] += 1
            text = raw.strip()
            if not text or text in seen:
                continue
            seen.add(text)
            self.words.append(Word.from_text(text))

    def _build_length_buckets(self):
        for word in self.words:
            self.length_buckets[word.length].append(word)

    def _build_digest(self):
        # identifies the corpus snapshot a report was computed from
        digest = hashlib.sha256()
        for word in self.words:
            digest.update(word.text.encode("utf-8") + b"\n")
        self.stats["sha256"] = digest.hexdigest()

    def _calculate_stats(self):
        self.stats["index_counts"] = {
            "words": len(self.words),
            "duplicates": self.stats["raw_count"] - len(self.words),
            "distinct_codes": len({word.code for word in self.words}),
            "lengths": len(self.length_buckets),
            "max_length": max(self.length_buckets, default=0)
        }

    def _get_index_structure(self) -> Dict[str, Any]:
        return {
            "words": self.words,
            "length_buckets": dict(self.length_buckets),
            "stats": self.stats
        }

    def save_to_file(self, filepath: Union[str, Path]):
        """Save the built index using StorageManager."""
        StorageManager.save_index(filepath, self._get_index_structure())
