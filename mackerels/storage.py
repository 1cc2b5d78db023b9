import hashlib
import logging
import pickle
import struct
import zlib
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple, Union


logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """A stored file is truncated, corrupt, or not the kind of snapshot asked for."""


class StorageManager:
    """
    Compressed, checksummed snapshots of the word list and of built word indices.

    Layout: header (magic, version, kind, payload length), zlib payload,
    SHA-256 of the payload. Word lists are stored as UTF-8 text with the
    source URL on the first line; indices are pickled.
    """
    MAGIC = b"MKRL"
    VERSION = 2
    KIND_WORDS = b"W"
    KIND_INDEX = b"I"
    HEADER = struct.Struct("<4sBcQ")

    @classmethod
    def save_words(cls, filepath: Union[str, Path], words: Sequence[str], source: str = ""):
        """Store a word list (one word per line) together with where it came from."""
        body = "\n".join([source, *words]).encode("utf-8")
        cls._write(filepath, cls.KIND_WORDS, body)
        logger.debug(f"Saved {len(words)} words from {source or 'unknown source'} to {filepath}")

    @classmethod
    def load_words(cls, filepath: Union[str, Path]) -> Tuple[str, List[str]]:
        """Return (source, words) from a word list snapshot."""
        body = cls._read(filepath, cls.KIND_WORDS)
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SnapshotError(f"Word list in {filepath} is not UTF-8: {e}") from e
        source, _, rest = text.partition("\n")
        return source, rest.split("\n") if rest else []

    @classmethod
    def save_index(cls, filepath: Union[str, Path], index: Dict[str, Any]):
        cls._write(filepath, cls.KIND_INDEX, pickle.dumps(index, protocol=pickle.HIGHEST_PROTOCOL))
        logger.debug(f"Saved word index ({len(index.get('words', []))} words) to {filepath}")

    @classmethod
    def load_index(cls, filepath: Union[str, Path]) -> Dict[str, Any]:
        body = cls._read(filepath, cls.KIND_INDEX)
        try:
            index = pickle.loads(body)
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError) as e:
            raise SnapshotError(f"Word index in {filepath} cannot be unpickled: {e}") from e
        if not isinstance(index, dict) or "words" not in index:
            raise SnapshotError(f"{filepath} does not hold a word index")
        return index

    @classmethod
    def _write(cls, filepath: Union[str, Path], kind: bytes, body: bytes):
        filepath = Path(filepath)
        payload = zlib.compress(body)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "wb") as f:
            f.write(cls.HEADER.pack(cls.MAGIC, cls.VERSION, kind, len(payload)))
            f.write(payload)
            f.write(hashlib.sha256(payload).digest())

    @classmethod
    def _read(cls, filepath: Union[str, Path], kind: bytes) -> bytes:
        with open(filepath, "rb") as f:
            header = f.read(cls.HEADER.size)
            if len(header) != cls.HEADER.size:
                raise SnapshotError(f"{filepath} is too short to be a snapshot")
            magic, version, found_kind, length = cls.HEADER.unpack(header)
            if magic != cls.MAGIC:
                raise SnapshotError(f"Invalid file format in {filepath}")
            if version != cls.VERSION:
                raise SnapshotError(f"Unsupported snapshot version {version} in {filepath}")
            if found_kind != kind:
                raise SnapshotError(f"{filepath} holds {found_kind!r} data, expected {kind!r}")
            payload = f.read(length)
            checksum = f.read(32)

        if len(payload) != length or hashlib.sha256(payload).digest() != checksum:
            raise SnapshotError(f"Checksum mismatch for {filepath}")
        try:
            return zlib.decompress(payload)
        except zlib.error as e:
            raise SnapshotError(f"Corrupt payload in {filepath}: {e}") from e
