"""
Best-match selection.

Given a query title and the candidates one provider returned, score every
candidate with the composite similarity and keep the highest. Pure: no
network I/O, candidates are supplied by the caller.
"""

from typing import Iterable, List, Optional

from .logger import get_logger
from .schema import Candidate, ScoredCandidate, has_title
from .similarity import final_similarity

logger = get_logger()


def score_candidates(query: str, candidates: Iterable[Candidate]) -> List[ScoredCandidate]:
    """Score candidates in input order, skipping those without a usable title."""
    scored = []
    for candidate in candidates:
        if not has_title(candidate.title):
            continue
        scored.append(ScoredCandidate(candidate, final_similarity(query, candidate.title)))
    return scored


def select_best_match(query: str, candidates: Iterable[Candidate]) -> Optional[ScoredCandidate]:
    """
    Return the candidate most similar to `query`, or None if no candidate
    has a title.

    Ties go to the candidate that came first.
    """
    best: Optional[ScoredCandidate] = None
    for scored in score_candidates(query, candidates):
        if best is None or scored.similarity_score > best.similarity_score:
            best = scored

    if best is None:
        logger.debug("No candidate to match", query=query)
    else:
        logger.debug("Best match selected", query=query, title=best.title, score=round(best.similarity_score, 4))
    return best
