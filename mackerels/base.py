from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .utils import encode, letters_of


@dataclass(frozen=True)
class Word:
    """A corpus word with its length and letter set."""
    text: str
    length: int
    code: int

    @classmethod
    def from_text(cls, text: str) -> "Word":
        return cls(text=text, length=len(text), code=encode(text))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "length": self.length,
            "code": self.code,
            "letters": letters_of(self.code)
        }


@dataclass(frozen=True)
class State:
    """A US state name with its letter set."""
    name: str
    code: int

    @classmethod
    def from_name(cls, name: str) -> "State":
        name = name.strip().lower()
        return cls(name=name, code=encode(name))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "code": self.code,
            "letters": letters_of(self.code)
        }


@dataclass(frozen=True)
class MackerelResult:
    """Outcome of an overlap query: how many states share no letters, and which one if unique."""
    state: Optional[str]
    non_sharing_count: int

    @property
    def is_mackerel(self) -> bool:
        return self.non_sharing_count == 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state,
            "non_sharing_count": self.non_sharing_count
        }


@dataclass(frozen=True)
class AnnotatedWord:
    """Word augmented with its M-number and mackerel state."""
    word: Word
    result: MackerelResult

    @property
    def text(self) -> str:
        return self.word.text

    @property
    def m(self) -> int:
        return self.result.non_sharing_count

    @property
    def state(self) -> Optional[str]:
        return self.result.state

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.word.text,
            "length": self.word.length,
            "m": self.m,
            "state": self.state
        }


@dataclass(frozen=True)
class StateTally:
    state: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state, "count": self.count}


@dataclass
class MackerelReport:
    """Container for everything the presentation layer renders."""
    word_count: int
    state_count: int
    corpus_sha256: str = ""
    longest: List[AnnotatedWord] = field(default_factory=list)
    tally: List[StateTally] = field(default_factory=list)
    zero_states: List[str] = field(default_factory=list)
    m_histogram: Dict[int, int] = field(default_factory=dict)
    longest_by_state: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def mackerel_count(self) -> int:
        return sum(entry.count for entry in self.tally)

    @property
    def longest_length(self) -> int:
        return self.longest[0].word.length if self.longest else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word_count": self.word_count,
            "state_count": self.state_count,
            "corpus_sha256": self.corpus_sha256,
            "mackerel_count": self.mackerel_count,
            "longest_length": self.longest_length,
            "longest": [w.to_dict() for w in self.longest],
            "tally": [t.to_dict() for t in self.tally],
            "zero_states": list(self.zero_states),
            "m_histogram": {str(k): v for k, v in self.m_histogram.items()},
            "longest_by_state": {k: list(v) for k, v in self.longest_by_state.items()}
        }
