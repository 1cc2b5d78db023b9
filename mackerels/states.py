import csv
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import ahocorasick
import Levenshtein

from .base import State


logger = logging.getLogger(__name__)

# (name, USPS code) for the 50 states, alphabetical by name
US_STATES: Tuple[Tuple[str, str], ...] = (
    ("alabama", "al"), ("alaska", "ak"), ("arizona", "az"), ("arkansas", "ar"),
    ("california", "ca"), ("colorado", "co"), ("connecticut", "ct"), ("delaware", "de"),
    ("florida", "fl"), ("georgia", "ga"), ("hawaii", "hi"), ("idaho", "id"),
    ("illinois", "il"), ("indiana", "in"), ("iowa", "ia"), ("kansas", "ks"),
    ("kentucky", "ky"), ("louisiana", "la"), ("maine", "me"), ("maryland", "md"),
    ("massachusetts", "ma"), ("michigan", "mi"), ("minnesota", "mn"), ("mississippi", "ms"),
    ("missouri", "mo"), ("montana", "mt"), ("nebraska", "ne"), ("nevada", "nv"),
    ("new hampshire", "nh"), ("new jersey", "nj"), ("new mexico", "nm"), ("new york", "ny"),
    ("north carolina", "nc"), ("north dakota", "nd"), ("ohio", "oh"), ("oklahoma", "ok"),
    ("oregon", "or"), ("pennsylvania", "pa"), ("rhode island", "ri"), ("south carolina", "sc"),
    ("south dakota", "sd"), ("tennessee", "tn"), ("texas", "tx"), ("utah", "ut"),
    ("vermont", "vt"), ("virginia", "va"), ("washington", "wa"), ("west virginia", "wv"),
    ("wisconsin", "wi"), ("wyoming", "wy"),
)

STATE_NAMES: Tuple[str, ...] = tuple(name for name, _ in US_STATES)

_SEPARATORS = re.compile(r"[\s\-_.,]+")


def _clean(text: str) -> str:
    return _SEPARATORS.sub(" ", str(text).lower()).strip()


class StateNormalizer:
    """Resolves raw state strings to canonical state names: exact match first, substring scan next, fuzzy last."""

    def __init__(self, states: Iterable[Tuple[str, str]] = US_STATES, similarity_threshold: float = 0.8):
        self.similarity_threshold = similarity_threshold
        self.names: List[str] = []
        self.automaton = ahocorasick.Automaton()

        variants: Dict[str, List[Tuple[str, str]]] = {}
        for name, usps in states:
            self.names.append(name)
            for key, kind in ((name, "name"), (name.replace(" ", ""), "name"), (usps, "usps")):
                entry = (name, kind)
                if entry not in variants.setdefault(key, []):
                    variants[key].append(entry)

        for key, entries in variants.items():
            self.automaton.add_word(key, entries)
        self.automaton.make_automaton()

    def normalize(self, query: str) -> List[Tuple[str, float]]:
        """Return (state name, score) candidates for a raw string, best first."""
        key = _clean(query)
        if not key:
            return []

        # 1. Whole-string match on a name or USPS code
        if key in self.automaton:
            return [(name, 1.0) for name, _ in self.automaton.get(key)]

        # 2. Longest state name contained in the string ("west virginia" over "virginia")
        best_len = 0
        matches: List[str] = []
        for end, entries in self.automaton.iter(key):
            for name, kind in entries:
                if kind != "name":
                    continue
                length = len(name)
                if length > best_len:
                    best_len, matches = length, [name]
                elif length == best_len and name not in matches:
                    matches.append(name)
        if matches:
            return [(name, 0.9) for name in matches]

        # 3. Fuzzy fallback
        results = []
        for name in self.names:
            sim = Levenshtein.ratio(key, name)
            if sim >= self.similarity_threshold:
                results.append((name, sim))
        return sorted(results, key=lambda x: x[1], reverse=True)

    def resolve(self, query: str) -> Optional[str]:
        candidates = self.normalize(query)
        if not candidates:
            logger.debug(f"No state matches {query!r}")
            return None
        return candidates[0][0]


def load_states(names: Optional[Iterable[str]] = None, normalize: bool = False,
                normalizer: Optional[StateNormalizer] = None) -> List[State]:
    """
    Build the state collection.

    Args:
        names: Raw state names; defaults to the canonical 50.
        normalize: Resolve each raw name to its canonical form first
                   (USPS codes, spacing, small typos).
        normalizer: Custom normalizer, created on demand when `normalize` is set.
    """
    if names is None:
        names = STATE_NAMES

    if normalize and normalizer is None:
        normalizer = StateNormalizer()

    states = []
    seen = set()
    for raw in names:
        name = str(raw).strip().lower()
        if not name:
            raise ValueError("State names must be non-empty")
        if normalize:
            resolved = normalizer.resolve(name)
            if resolved is None:
                raise ValueError(f"Unrecognised state name: {raw!r}")
            name = resolved
        if name in seen:
            raise ValueError(f"Duplicate state name: {name!r}")
        seen.add(name)
        states.append(State.from_name(name))

    logger.debug(f"Loaded {len(states)} states")
    return states


def read_state_csv(filepath: Union[str, Path], column: str = "name") -> List[str]:
    """Read raw state names from one column of a CSV file with a header row."""
    with open(filepath, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or column not in reader.fieldnames:
            raise ValueError(f"Column {column!r} not found in {filepath}")
        try:
            # short rows leave the column as None
            return [row[column] for row in reader if (row.get(column) or "").strip()]
        except csv.Error as e:
            raise ValueError(f"Malformed CSV in {filepath}: {e}") from e
