"""Document parameterisation: turning raw text into word counts.

The pipeline is a word extractor followed by an optional chain of reducers:

- ``WordExtractor`` splits text on characters outside a fixed alphabet and
  lowercases the tokens.
- ``StopWordFilter`` drops uninformative words.
- ``Stemmer`` strips configured endings, suffixes and prefixes.

``WordCounter`` composes these according to a ``FeatureSet`` and is stored
in every trained model, so the exact counting configuration used for
training is reused at classification time.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from .exceptions import ConfigurationError

# ---------------------------------------------------------------------------
# Word extraction
# ---------------------------------------------------------------------------

DEFAULT_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzáčďéěíňóřšťúůýž"


class WordExtractor:
    """Split text into lowercase word tokens.

    Any run of characters outside ``alphabet`` (or the uppercase forms of
    its letters) separates two tokens, which are then lowercased.

    Example::

        >>> WordExtractor().extract("Účet, DPH a 21 %!")
        ['účet', 'dph', 'a', '21']
    """

    def __init__(self, alphabet: str = DEFAULT_ALPHABET) -> None:
        if not alphabet:
            raise ConfigurationError("Word alphabet must not be empty")
        self.alphabet = alphabet
        letters = alphabet + alphabet.upper()
        self._separator_re = re.compile("[^" + re.escape(letters) + "]+")

    def extract(self, text: str) -> list[str]:
        return [token.lower() for token in self._separator_re.split(text) if token]


# ---------------------------------------------------------------------------
# Reducers
# ---------------------------------------------------------------------------


class Reducer(Protocol):
    """Maps a token to its reduced form, or ``None`` to drop it."""

    def reduce(self, token: str) -> Optional[str]: ...


def _normalize_entries(entries: Iterable[str]) -> tuple[str, ...]:
    """Strip and lowercase reference list entries, dropping blanks and duplicates."""
    seen: dict[str, None] = {}
    for entry in entries:
        value = entry.strip().lower()
        if value:
            seen[value] = None
    return tuple(seen)


class StopWordFilter:
    """Drop tokens listed in a stop-word set (case-insensitive)."""

    def __init__(self, words: Iterable[str]) -> None:
        self.words = _normalize_entries(words)
        self._lookup = frozenset(self.words)

    def reduce(self, token: str) -> Optional[str]:
        if token.lower() in self._lookup:
            return None
        return token


class Stemmer:
    """Affix-stripping stemmer driven by reference lists.

    Removal happens in three steps, each applied at most once: the longest
    matching ending, then the longest matching suffix, then the longest
    matching prefix. Candidates of equal length are tried alphabetically.

    Args:
        prefixes: Word prefixes.
        suffixes: Word suffixes.
        endings: Inflectional word endings.
    """

    def __init__(
        self,
        prefixes: Iterable[str] = (),
        suffixes: Iterable[str] = (),
        endings: Iterable[str] = (),
    ) -> None:
        self.prefixes = _normalize_entries(prefixes)
        self.suffixes = _normalize_entries(suffixes)
        self.endings = _normalize_entries(endings)
        self._prefixes = self._longest_first(self.prefixes)
        self._suffixes = self._longest_first(self.suffixes)
        self._endings = self._longest_first(self.endings)

    @staticmethod
    def _longest_first(entries: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(sorted(entries, key=lambda e: (-len(e), e)))

    def stem(self, word: str) -> str:
        """Return the stem of ``word``; may be empty."""
        for ending in self._endings:
            if word.endswith(ending):
                word = word[: -len(ending)]
                break

        for suffix in self._suffixes:
            if word.endswith(suffix):
                word = word[: -len(suffix)]
                break

        for prefix in self._prefixes:
            if word.startswith(prefix):
                word = word[len(prefix):]
                break

        return word

    def reduce(self, token: str) -> Optional[str]:
        stem = self.stem(token)
        return stem or None


# ---------------------------------------------------------------------------
# Feature sets
# ---------------------------------------------------------------------------


class FeatureSet(str, Enum):
    """Supported parameterisation configurations."""

    ONLY_COUNTING = "only-counting"
    STOP_WORDS = "stop-words"
    STEMMING = "stemming"

    @classmethod
    def parse(cls, value: str | FeatureSet) -> FeatureSet:
        """Parse a feature-set value or name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigurationError(f"Unknown feature set '{value}'. Choose one of: {choices}")

    @property
    def uses_stop_words(self) -> bool:
        return self in (FeatureSet.STOP_WORDS, FeatureSet.STEMMING)

    @property
    def uses_stemming(self) -> bool:
        return self is FeatureSet.STEMMING


@dataclass(frozen=True)
class ReferenceLists:
    """Externally supplied word lists consumed by the reducers."""

    stop_words: tuple[str, ...] = ()
    prefixes: tuple[str, ...] = ()
    suffixes: tuple[str, ...] = ()
    endings: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Word counter
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WordCounter:
    """Count reduced word tokens in a document text.

    Use ``WordCounter.create`` to build a counter for a ``FeatureSet``; the
    constructor takes already-built components.

    Example::

        counter = WordCounter.create(FeatureSet.STOP_WORDS, ReferenceLists(stop_words=("a",)))
        counter.count_words("Pes a kočka a pes")  # {"pes": 2, "kočka": 1}
    """

    feature_set: FeatureSet = FeatureSet.ONLY_COUNTING
    extractor: WordExtractor = field(default_factory=WordExtractor)
    stop_word_filter: Optional[StopWordFilter] = None
    stemmer: Optional[Stemmer] = None

    @classmethod
    def create(
        cls,
        feature_set: FeatureSet | str,
        reference_lists: Optional[ReferenceLists] = None,
        alphabet: str = DEFAULT_ALPHABET,
    ) -> WordCounter:
        """Build a counter for ``feature_set``.

        Raises:
            ConfigurationError: If the feature set is unknown or needs
                reference lists that were not supplied.
        """
        feature_set = FeatureSet.parse(feature_set)
        lists = reference_lists or ReferenceLists()

        stop_word_filter = None
        stemmer = None
        if feature_set.uses_stop_words:
            if reference_lists is None:
                raise ConfigurationError(
                    f"Feature set '{feature_set.value}' requires a stop-word list"
                )
            stop_word_filter = StopWordFilter(lists.stop_words)
        if feature_set.uses_stemming:
            stemmer = Stemmer(lists.prefixes, lists.suffixes, lists.endings)

        return cls(
            feature_set=feature_set,
            extractor=WordExtractor(alphabet),
            stop_word_filter=stop_word_filter,
            stemmer=stemmer,
        )

    @property
    def reducers(self) -> tuple[Reducer, ...]:
        chain: list[Reducer] = []
        if self.stop_word_filter is not None:
            chain.append(self.stop_word_filter)
        if self.stemmer is not None:
            chain.append(self.stemmer)
        return tuple(chain)

    def reduce(self, token: str) -> Optional[str]:
        """Run ``token`` through the reducer chain."""
        for reducer in self.reducers:
            token = reducer.reduce(token)
            if token is None:
                return None
        return token

    def count_words(self, text: str) -> dict[str, int]:
        """Return a ``{word: occurrences}`` table for ``text``."""
        counts: Counter[str] = Counter()
        for token in self.extractor.extract(text):
            word = self.reduce(token)
            if word is not None:
                counts[word] += 1
        return dict(counts)

    def to_dict(self) -> dict:
        """Serialize the counter configuration, including every reference list."""
        return {
            "feature_set": self.feature_set.value,
            "alphabet": self.extractor.alphabet,
            "stop_words": list(self.stop_word_filter.words) if self.stop_word_filter else None,
            "stemmer": {
                "prefixes": list(self.stemmer.prefixes),
                "suffixes": list(self.stemmer.suffixes),
                "endings": list(self.stemmer.endings),
            } if self.stemmer else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> WordCounter:
        """Deserialize a counter written by ``to_dict``."""
        feature_set = FeatureSet.parse(data["feature_set"])
        stop_words = data.get("stop_words")
        stemmer = data.get("stemmer")
        return cls(
            feature_set=feature_set,
            extractor=WordExtractor(data.get("alphabet", DEFAULT_ALPHABET)),
            stop_word_filter=StopWordFilter(stop_words) if stop_words is not None else None,
            stemmer=Stemmer(
                stemmer["prefixes"], stemmer["suffixes"], stemmer["endings"]
            ) if stemmer is not None else None,
        )
