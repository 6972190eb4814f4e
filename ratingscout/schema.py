from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

REQUIRED_STR_FIELDS = ["title"]
OPTIONAL_STR_FIELDS = [
    "reference_url",
    "image",
    "raw_score",
]


def has_title(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except Exception:
        return False


def validate_candidate(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for a raw search result.
    Empty list means the result can become a Candidate.
    """
    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not has_title(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in OPTIONAL_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    if isinstance(data.get("reference_url"), str) and data["reference_url"].strip():
        if not _valid_url(data["reference_url"]):
            errors.append("Field 'reference_url' must be a valid absolute URL (scheme + host)")

    return errors


@dataclass(frozen=True)
class Candidate:
    """One entry from a provider's search results."""

    title: str
    reference_url: str = ""
    image: Optional[str] = None
    raw_score: Optional[str] = None


@dataclass(frozen=True)
class SimilarityResult:
    levenshtein_score: float
    jaro_score: float
    cosine_score: float
    similarity_score: float


@dataclass(frozen=True)
class ScoredCandidate:
    """A Candidate with the similarity diagnostics it was ranked by."""

    candidate: Candidate
    similarity: SimilarityResult

    @property
    def title(self) -> str:
        return self.candidate.title

    @property
    def reference_url(self) -> str:
        return self.candidate.reference_url

    @property
    def image(self) -> Optional[str]:
        return self.candidate.image

    @property
    def raw_score(self) -> Optional[str]:
        return self.candidate.raw_score

    @property
    def similarity_score(self) -> float:
        return self.similarity.similarity_score

    def to_dict(self) -> Dict[str, Any]:
        return {**asdict(self.candidate), **asdict(self.similarity)}


@dataclass(frozen=True)
class Rating:
    value: Optional[float]
    best: Optional[float] = None
    worst: Optional[float] = None
    count: Optional[int] = None

    def display(self) -> str:
        if self.value is None:
            return "N/A"
        text = f"{self.value:g}"
        if self.best is not None:
            text += f"/{self.best:g}"
        if self.count is not None:
            text += f" ({self.count:,} ratings)"
        return text


@dataclass
class ProviderReport:
    """Outcome of looking a title up on one provider."""

    provider: str
    query: str
    match: Optional[ScoredCandidate] = None
    rating: Optional[Rating] = None
    error: Optional[str] = None

    def display_rating(self) -> str:
        if self.error or self.match is None or self.rating is None:
            return "N/A"
        return self.rating.display()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "query": self.query,
            "match": self.match.to_dict() if self.match else None,
            "rating": asdict(self.rating) if self.rating else None,
            "display": self.display_rating(),
            "error": self.error,
        }
