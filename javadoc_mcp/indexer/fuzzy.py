"""
Weighted fuzzy matching over model fields.

Scores follow the Fuse.js model the search tools were tuned with:

- A field score is `errors / len(query) + location / distance`, where `errors`
  is the Levenshtein distance between the query and the best window of the
  field text and `location` is where that window starts. 0.0 is a perfect
  match at the start of the field.
- A field matches when its score is at most `threshold`.
- Matching fields combine multiplicatively:
  `score = prod(field_score ** (normalized_weight * field_norm))`,
  with a perfect field score replaced by machine epsilon and
  `field_norm = 1 / sqrt(number of words in the field)`.
- Items without any matching field are not returned.
"""

import math
import sys
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, Iterable, List, NamedTuple, Optional, Sequence, Tuple, TypeVar

import Levenshtein

T = TypeVar("T")

EPSILON = sys.float_info.epsilon


@dataclass(frozen=True)
class FuzzyMatch(Generic[T]):
    """One search hit; lower score is better."""
    item: T
    score: float
    index: int


def field_norm(text: str) -> float:
    """Length norm: fields with many words weigh less."""
    tokens = max(len(text.split()), 1)
    return round(1 / math.sqrt(tokens), 3)


class _Field(NamedTuple):
    text: str
    norm: float
    counts: Counter


def missing_characters(pattern_counts: Iterable[Tuple[str, int]], counts: Counter) -> int:
    """
    Pattern characters the text cannot supply, counted with multiplicity.

    A lower bound on the edit distance between the pattern and any window of
    the text.
    """
    return sum(count - counts[char] for char, count in pattern_counts if count > counts[char])


class FuzzyIndex(Generic[T]):
    """
    Immutable fuzzy index over a sequence of objects.

    Example:
        >>> index = FuzzyIndex(classes, {"simple_name": 2.0, "package": 0.5})
        >>> [m.item.simple_name for m in index.search("adaptaton", limit=3)]
    """

    def __init__(
        self,
        items: Sequence[T],
        keys: Dict[str, float],
        threshold: float = 0.4,
        min_match_char_length: int = 2,
        distance: int = 100,
    ):
        """
        Build the index.

        Args:
            items: Objects to search; key values are read with getattr
            keys: Attribute name -> weight
            threshold: Maximum field score counted as a match
            min_match_char_length: Shorter queries match nothing
            distance: Characters over which the match location costs a full point
        """
        if not keys:
            raise ValueError("At least one search key is required")

        total_weight = sum(keys.values())
        if total_weight <= 0:
            raise ValueError("Search key weights must sum to a positive value")

        self.threshold = threshold
        self.min_match_char_length = min_match_char_length
        self.distance = distance
        self._keys: List[Tuple[str, float]] = [(name, weight / total_weight) for name, weight in keys.items()]
        self._items: List[T] = list(items)
        self._fields: List[List[Optional[_Field]]] = [self._prepare(item) for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def _prepare(self, item: T) -> List[Optional[_Field]]:
        fields = []
        for name, _ in self._keys:
            value = getattr(item, name, None)
            if isinstance(value, Enum):
                value = value.value
            if value is None or value == "":
                fields.append(None)
                continue
            text = str(value).lower()
            fields.append(_Field(text, field_norm(text), Counter(text)))
        return fields

    def search(self, query: str, limit: Optional[int] = None) -> List[FuzzyMatch[T]]:
        """
        Rank items against a query.

        Args:
            query: Free-text query, case-insensitive
            limit: Maximum number of matches (all when None)

        Returns:
            Matches sorted by ascending score, ties in insertion order
        """
        pattern = query.strip().lower()
        if len(pattern) < self.min_match_char_length:
            return []

        max_errors = int(self.threshold * len(pattern))
        pattern_counts = list(Counter(pattern).items())

        matches: List[FuzzyMatch[T]] = []
        for index, fields in enumerate(self._fields):
            total = 1.0
            matched = False
            for (_, weight), field in zip(self._keys, fields):
                if field is None:
                    continue
                if missing_characters(pattern_counts, field.counts) > max_errors:
                    continue
                score = self.field_score(pattern, field.text)
                if score is None:
                    continue
                matched = True
                total *= (EPSILON if score == 0 else score) ** (weight * field.norm)
            if matched:
                matches.append(FuzzyMatch(item=self._items[index], score=total, index=index))

        matches.sort(key=lambda match: (match.score, match.index))
        return matches[:limit] if limit is not None else matches

    def field_score(self, pattern: str, text: str) -> Optional[float]:
        """
        Score of the best window of `text` against a lowercase pattern.

        Returns:
            Score in [0, threshold], or None when the field does not match
        """
        length = len(pattern)
        max_errors = int(self.threshold * length)
        # windows starting past this point cost more than the threshold
        max_start = min(int(self.threshold * self.distance), max(len(text) - length, 0))

        best: Optional[float] = None
        exact = text.find(pattern, 0, max_start + length)
        if exact != -1:
            best = exact / self.distance
            if exact == 0:
                return 0.0

        if max_errors:
            last_start = exact - 1 if exact != -1 else max_start
            for start in range(0, last_start + 1):
                # errors a window at this start may have and still beat the best so far
                limit = self.threshold if best is None else best
                allowed = min(max_errors, int((limit - start / self.distance) * length + 1e-9))
                if allowed < 0:
                    break
                errors = Levenshtein.distance(pattern, text[start:start + length], score_cutoff=allowed)
                if errors > allowed:
                    continue
                score = errors / length + start / self.distance
                if best is None or score < best:
                    best = score

        if best is None or best > self.threshold:
            return None
        return best
