from typing import Any, Dict, List, Optional
import json
import re

from bs4 import BeautifulSoup

from ..logger import get_logger
from ..schema import Candidate, Rating
from .base import ProviderAdapter
from .common import ProviderError, build_search_url, fetch_with_error_handling

logger = get_logger()

SEARCH_URL = "https://www.imdb.com/find/?q={query}&ref_=nv_sr_sm"
TITLE_URL = "https://www.imdb.com/title/{id}/"

AGGREGATE_RATING_RE = re.compile(
    r'"aggregateRating"\s*:\s*\{\s*"@type"\s*:\s*"AggregateRating"\s*,'
    r'\s*"ratingCount"\s*:\s*(\d+)\s*,'
    r'\s*"bestRating"\s*:\s*(\d+)\s*,'
    r'\s*"worstRating"\s*:\s*(\d+)\s*,'
    r'\s*"ratingValue"\s*:\s*([\d.]+)\s*\}'
)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_search_results(html: str) -> List[Dict[str, Any]]:
    """Read title results out of the search page's __NEXT_DATA__ JSON.

    Raises ProviderError when the page does not carry the data block.
    """
    soup = BeautifulSoup(html, "html.parser")
    script = soup.find("script", id="__NEXT_DATA__")
    if script is None or not script.string:
        raise ProviderError("Imdb search page has no __NEXT_DATA__ block", error_type="ParseError")
    try:
        data = json.loads(script.string)
    except json.JSONDecodeError as e:
        raise ProviderError(f"Imdb search data is not valid JSON: {e}", error_type="ParseError")

    if not isinstance(data, dict):
        raise ProviderError("Imdb search data is not a JSON object", error_type="ParseError")

    # Any level may be missing, null or of the wrong type
    page_props = _as_dict(_as_dict(data.get("props")).get("pageProps"))
    results = _as_dict(page_props.get("titleResults")).get("results") or []
    if not isinstance(results, list):
        raise ProviderError("Imdb search results are not a list", error_type="ParseError")

    rows = []
    for result in results:
        if not isinstance(result, dict):
            logger.debug("Skipping malformed IMDb result", result=result)
            continue
        title_id = result.get("id")
        rows.append({
            "title": result.get("titleNameText"),
            "reference_url": TITLE_URL.format(id=title_id) if title_id else None,
            "image": _as_dict(result.get("titlePosterImageModel")).get("url"),
            "raw_score": None,
        })
    return rows


def parse_rating(html: str) -> Optional[Rating]:
    """Rating from the title page's JSON-LD aggregateRating block."""
    match = AGGREGATE_RATING_RE.search(html)
    if not match:
        return None
    return Rating(
        value=float(match.group(4)),
        best=float(match.group(2)),
        worst=float(match.group(3)),
        count=int(match.group(1)),
    )


class ImdbProvider(ProviderAdapter):
    name = "imdb"

    def search(self, query: str) -> List[Candidate]:
        url = build_search_url(SEARCH_URL, query)
        logger.debug("Searching IMDb", query=query, url=url)
        resp = fetch_with_error_handling(url, self.name, self.settings)
        return self.make_candidates(parse_search_results(resp.text))

    def get_rating(self, candidate: Candidate) -> Optional[Rating]:
        if not candidate.reference_url:
            return None
        resp = fetch_with_error_handling(candidate.reference_url, self.name, self.settings)
        rating = parse_rating(resp.text)
        if rating is None:
            raise ProviderError(f"Rating data not found for {candidate.reference_url}", error_type="RatingMissing")
        return rating
