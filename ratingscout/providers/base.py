from abc import ABC, abstractmethod
from typing import List, Optional

from ..config import Settings
from ..logger import get_logger
from ..matcher import select_best_match
from ..retry import CircuitBreaker, CircuitOpenError
from ..schema import Candidate, ProviderReport, Rating, validate_candidate
from .common import ProviderError

logger = get_logger()


class ProviderAdapter(ABC):
    """A rating site we can search for a title and read a rating from."""

    name: str = ""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.breaker = CircuitBreaker(
            failure_threshold=3,
            recovery_timeout=120,
            expected_exception=ProviderError,
        )

    @abstractmethod
    def search(self, query: str) -> List[Candidate]:
        """
        Fetch the provider's search results for `query`.
        """
        pass

    @abstractmethod
    def get_rating(self, candidate: Candidate) -> Optional[Rating]:
        """
        Rating for a matched search result, or None if the site has none.
        """
        pass

    def make_candidates(self, rows: List[dict]) -> List[Candidate]:
        """Turn raw result dicts into Candidates, dropping invalid rows."""
        candidates = []
        for row in rows:
            errors = validate_candidate(row)
            if errors:
                logger.debug(f"Skipping {self.name} result", row=row, errors=errors)
                continue
            candidates.append(Candidate(
                title=row["title"].strip(),
                reference_url=row.get("reference_url") or "",
                image=row.get("image"),
                raw_score=row.get("raw_score"),
            ))
        return candidates

    def find(self, query: str) -> ProviderReport:
        """Search, pick the best match and look up its rating."""
        logger.record_search_attempt(self.name)
        try:
            candidates = self.breaker.call(self.search, query)
            match = select_best_match(query, candidates)
            logger.record_match(match is not None)
            rating = self.breaker.call(self.get_rating, match.candidate) if match else None
        except CircuitOpenError as e:
            logger.record_search_failure(self.name, "CircuitOpen")
            raise ProviderError(f"{self.name} skipped: {e}", error_type="CircuitOpen")
        except ProviderError as e:
            logger.record_search_failure(self.name, e.error_type)
            raise

        logger.record_search_success(self.name)
        logger.info(
            f"{self.name} lookup complete",
            query=query,
            candidates=len(candidates),
            match=match.title if match else None,
            rating=rating.display() if rating else None,
        )
        return ProviderReport(provider=self.name, query=query, match=match, rating=rating)
