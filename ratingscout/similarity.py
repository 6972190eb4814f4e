"""
String similarity scorers used to match a streaming title against
provider search results.

Three scorers feed one weighted composite:
- Levenshtein edit distance, normalized by the longer string
- Jaro similarity
- Cosine similarity over character n-gram counts

None of these raise on degenerate input (empty strings, strings shorter
than the n-gram size); each has a defined fallback value instead.
"""

import math
from collections import Counter
from typing import Dict

from .normalize import normalize_text
from .schema import SimilarityResult

# Composite weights. Tunable here; not read from Settings.
LEVENSHTEIN_WEIGHT = 0.4
JARO_WEIGHT = 0.3
COSINE_WEIGHT = 0.3

DEFAULT_NGRAM_SIZE = 3


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def levenshtein(a: str, b: str) -> int:
    """
    Minimum number of single-character insertions, deletions and
    substitutions turning `a` into `b`.

    Keeps two rows of the (len(b)+1) x (len(a)+1) table at a time.
    """
    previous = list(range(len(a) + 1))
    for i in range(1, len(b) + 1):
        current = [i] + [0] * len(a)
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(previous[j], current[j - 1], previous[j - 1])
        previous = current
    return previous[len(a)]


def levenshtein_score(a: str, b: str) -> float:
    """Edit distance mapped to [0, 1], where 1.0 means identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return _clamp(1 - levenshtein(a, b) / longest)


def jaro(s1: str, s2: str) -> float:
    """
    Jaro similarity in [0, 1].

    Characters match when equal and no further apart than the match
    window; transpositions are matched characters that appear in a
    different order in the two strings.
    """
    if s1 == s2:
        return 1.0

    len1, len2 = len(s1), len(s2)
    window = max(0, max(len1, len2) // 2 - 1)

    s1_matched = [False] * len1
    s2_matched = [False] * len2
    matches = 0

    for i in range(len1):
        lo = max(0, i - window)
        hi = min(len2, i + window + 1)
        if lo >= hi:
            continue
        for j in range(lo, hi):
            if s2_matched[j] or s1[i] != s2[j]:
                continue
            s1_matched[i] = True
            s2_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i in range(len1):
        if not s1_matched[i]:
            continue
        while not s2_matched[k]:
            k += 1
        if s1[i] != s2[k]:
            transpositions += 1
        k += 1

    half = transpositions / 2
    return (matches / len1 + matches / len2 + (matches - half) / matches) / 3


def ngram_counts(text: str, n: int = DEFAULT_NGRAM_SIZE) -> Dict[str, int]:
    """Count every contiguous substring of length n. Empty if text is shorter."""
    if n <= 0 or len(text) < n:
        return {}
    return dict(Counter(text[i:i + n] for i in range(len(text) - n + 1)))


def cosine_sim(str1: str, str2: str, n: int = DEFAULT_NGRAM_SIZE) -> float:
    """Cosine similarity of the character n-gram frequency vectors."""
    vec1 = ngram_counts(normalize_text(str1), n)
    vec2 = ngram_counts(normalize_text(str2), n)

    dot = sum(count * vec2.get(gram, 0) for gram, count in vec1.items())
    squares1 = sum(count * count for count in vec1.values())
    squares2 = sum(count * count for count in vec2.values())
    if squares1 == 0 or squares2 == 0:
        return 0.0

    return _clamp(dot / math.sqrt(squares1 * squares2))


def final_similarity(str1: str, str2: str) -> SimilarityResult:
    """Weighted composite of the three scorers, with the parts kept for diagnostics."""
    lev = levenshtein_score(str1, str2)
    jar = jaro(str1, str2)
    cos = cosine_sim(str1, str2)
    composite = LEVENSHTEIN_WEIGHT * lev + JARO_WEIGHT * jar + COSINE_WEIGHT * cos
    return SimilarityResult(
        levenshtein_score=lev,
        jaro_score=jar,
        cosine_score=cos,
        similarity_score=_clamp(composite),
    )
