import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .base import AnnotatedWord, MackerelReport, MackerelResult, State, StateTally, Word
from .builder import WordIndexBuilder
from .storage import StorageManager
from .utils import encode


logger = logging.getLogger(__name__)


def query(code: int, states: Iterable[State]) -> MackerelResult:
    """Count the states sharing no letters with `code`; name the state when there is exactly one."""
    count = 0
    found = None
    for state in states:
        if not code & state.code:
            count += 1
            found = state.name
    return MackerelResult(state=found if count == 1 else None, non_sharing_count=count)


class OverlapQueryEngine:
    """Overlap predicate against a fixed state collection, with answers cached per letter set."""

    def __init__(self, states: Sequence[State], use_cache: bool = True):
        self.states = tuple(states)
        self.use_cache = use_cache
        self._cache: Dict[int, MackerelResult] = {}
        self._hits = 0
        self._misses = 0

    def query(self, code: int) -> MackerelResult:
        if not self.use_cache:
            return query(code, self.states)

        result = self._cache.get(code)
        if result is None:
            self._misses += 1
            result = self._cache[code] = query(code, self.states)
        else:
            self._hits += 1
        return result

    def query_text(self, text: str) -> MackerelResult:
        return self.query(encode(text))

    def non_sharing_states(self, code: int) -> List[str]:
        return [state.name for state in self.states if not code & state.code]

    def cache_info(self) -> Dict[str, int]:
        return {"hits": self._hits, "misses": self._misses, "size": len(self._cache)}

    def clear_cache(self):
        self._cache.clear()
        self._hits = 0
        self._misses = 0


class MackerelSearchEngine:
    """Answers the mackerel queries over an indexed word corpus."""

    def __init__(self, states: Sequence[State], index: Optional[Dict[str, Any]] = None,
                 config: Optional[Dict[str, Any]] = None):
        self.config = {
            "use_cache": True,
        }
        if config:
            self.config.update(config)

        self.states = list(states)
        self.overlap = OverlapQueryEngine(self.states, use_cache=self.config["use_cache"])
        self.index = None
        self._annotated: Optional[List[AnnotatedWord]] = None

        if index is not None:
            self.set_index(index)

    @classmethod
    def from_words(cls, raw_words: Iterable[str], states: Sequence[State], **kwargs) -> "MackerelSearchEngine":
        engine = cls(states, **kwargs)
        engine.load_words(raw_words)
        return engine

    @classmethod
    def from_index_file(cls, filepath: Union[str, Path], states: Sequence[State], **kwargs) -> "MackerelSearchEngine":
        engine = cls(states, **kwargs)
        engine.load_index(filepath)
        return engine

    def set_index(self, index: Dict[str, Any]):
        self.index = index
        self._annotated = None

    def load_words(self, raw_words: Iterable[str]):
        """Build the word index from raw strings."""
        self.set_index(WordIndexBuilder(raw_words).build_all_indices())

    def load_index(self, filepath: Union[str, Path]):
        """Load a word index saved by WordIndexBuilder.save_to_file()."""
        self.set_index(StorageManager.load_index(filepath))

    def _require_index(self) -> Dict[str, Any]:
        if self.index is None:
            raise RuntimeError("Word index not loaded. Use load_words() or load_index() first.")
        return self.index

    @property
    def word_count(self) -> int:
        return len(self._require_index()["words"])

    @property
    def corpus_sha256(self) -> str:
        """SHA-256 of the distinct words, one per line in corpus order."""
        return self._require_index()["stats"].get("sha256", "")

    def annotate(self) -> List[AnnotatedWord]:
        """Every distinct word with its M-number and mackerel state, in corpus order."""
        if self._annotated is None:
            self._annotated = [
                AnnotatedWord(word=word, result=self.overlap.query(word.code))
                for word in self._require_index()["words"]
            ]
        return list(self._annotated)

    def mackerels(self) -> List[AnnotatedWord]:
        return [entry for entry in self.annotate() if entry.result.is_mackerel]

    def longest_mackerels(self) -> List[AnnotatedWord]:
        """
        All mackerels of the greatest length that has any.

        Length buckets are scanned from the longest downward and the scan
        stops at the first bucket with a mackerel, returning the whole tie
        set in alphabetical order.
        """
        buckets = self._require_index()["length_buckets"]
        for length in sorted(buckets, reverse=True):
            found = []
            for word in buckets[length]:
                result = self.overlap.query(word.code)
                if result.is_mackerel:
                    found.append(AnnotatedWord(word=word, result=result))
            if found:
                logger.debug(f"Longest mackerel length is {length} ({len(found)} words)")
                return sorted(found, key=lambda x: x.word.text)
        return []

    def tally(self) -> List[StateTally]:
        """Mackerel count per state, highest first, ties broken alphabetically by state."""
        counts: Dict[str, int] = {}
        for entry in self.mackerels():
            counts[entry.state] = counts.get(entry.state, 0) + 1
        ranked = sorted(counts.items(), key=lambda x: (-x[1], x[0]))
        return [StateTally(state=state, count=count) for state, count in ranked]

    def zero_mackerel_states(self) -> List[str]:
        """States with no mackerel at all, in state collection order."""
        tallied = {entry.state for entry in self.tally()}
        return [state.name for state in self.states if state.name not in tallied]

    def m_histogram(self) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for entry in self.annotate():
            counts[entry.m] = counts.get(entry.m, 0) + 1
        return dict(sorted(counts.items()))

    def longest_by_state(self) -> Dict[str, List[str]]:
        best: Dict[str, List[str]] = {}
        best_len: Dict[str, int] = {}
        for entry in self.mackerels():
            length = entry.word.length
            if length > best_len.get(entry.state, 0):
                best_len[entry.state] = length
                best[entry.state] = [entry.text]
            elif length == best_len[entry.state]:
                best[entry.state].append(entry.text)
        return {state: sorted(best[state]) for state in sorted(best)}

    def explain(self, text: str) -> AnnotatedWord:
        """Annotate a single word, whether or not it is in the corpus."""
        return AnnotatedWord(word=Word.from_text(text), result=self.overlap.query_text(text))

    def run(self) -> MackerelReport:
        """Compute the full report."""
        report = MackerelReport(
            word_count=self.word_count,
            corpus_sha256=self.corpus_sha256,
            state_count=len(self.states),
            longest=self.longest_mackerels(),
            tally=self.tally(),
            zero_states=self.zero_mackerel_states(),
            m_histogram=self.m_histogram(),
            longest_by_state=self.longest_by_state()
        )
        logger.debug(f"Cache stats: {self.overlap.cache_info()}")
        return report
