from pathlib import Path
from typing import Iterable, Optional, Union

from .base import AnnotatedWord, MackerelReport, MackerelResult, State, StateTally, Word
from .builder import WordIndexBuilder
from .engine import MackerelSearchEngine, OverlapQueryEngine, query
from .sources import WordListSource, WordSourceError
from .states import StateNormalizer, load_states
from .storage import SnapshotError, StorageManager
from .utils import encode, letters_of


__all__ = [
    "MackerelSearchEngine",
    "OverlapQueryEngine",
    "WordIndexBuilder",
    "Word",
    "State",
    "MackerelResult",
    "AnnotatedWord",
    "StateTally",
    "MackerelReport",
    "StateNormalizer",
    "StorageManager",
    "SnapshotError",
    "WordListSource",
    "WordSourceError",
    "encode",
    "letters_of",
    "query",
    "load_states",
    "load_engine"
]

__version__ = "1.0.0"


def load_engine(words: Optional[Iterable[str]] = None,
                index_path: Optional[Union[str, Path]] = None,
                state_names: Optional[Iterable[str]] = None) -> MackerelSearchEngine:
    """
    Factory function to load a search engine over a word corpus.

    Args:
        words: Raw word strings. Takes precedence over `index_path`.
        index_path: Index file saved by WordIndexBuilder.save_to_file().
                    If neither is given, the cached public word list is used
                    (downloaded on first use).
        state_names: Raw state names; defaults to the 50 US states.
    """
    states = load_states(state_names)

    if words is not None:
        return MackerelSearchEngine.from_words(words, states)

    if index_path:
        return MackerelSearchEngine.from_index_file(index_path, states)

    with WordListSource() as source:
        return MackerelSearchEngine.from_words(source.load(), states)
