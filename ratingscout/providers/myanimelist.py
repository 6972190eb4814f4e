from typing import Any, Dict, List, Optional
import re

from bs4 import BeautifulSoup

from ..logger import get_logger
from ..schema import Candidate, Rating
from .base import ProviderAdapter
from .common import build_search_url, fetch_with_error_handling

logger = get_logger()

SEARCH_URL = "https://myanimelist.net/search/all?q={query}&cat=all"
SCORE_RE = re.compile(r"Scored (\d+\.\d+)")


def parse_search_results(html: str, limit: int = 10) -> List[Dict[str, Any]]:
    """Anime entries from the 'all' search page, at most `limit` of them."""
    soup = BeautifulSoup(html, "html.parser")
    rows = []
    for entry in soup.select("div.list.di-t.w100")[:limit]:
        link = entry.select_one(".title a")
        img = entry.select_one(".picSurround a img")
        info = entry.select_one(".pt8")

        score = None
        if info is not None:
            m = SCORE_RE.search(info.get_text(" ", strip=True))
            score = m.group(1) if m else None

        rows.append({
            "title": link.get_text(strip=True) if link else None,
            "reference_url": link.get("href") if link else None,
            "image": (img.get("data-src") or img.get("src")) if img else None,
            "raw_score": score,
        })
    return rows


class MyAnimeListProvider(ProviderAdapter):
    name = "myanimelist"

    def search(self, query: str) -> List[Candidate]:
        url = build_search_url(SEARCH_URL, query)
        logger.debug("Searching MyAnimeList", query=query, url=url)
        resp = fetch_with_error_handling(url, self.name, self.settings)
        return self.make_candidates(parse_search_results(resp.text, self.settings.max_results))

    def get_rating(self, candidate: Candidate) -> Optional[Rating]:
        # The search page already shows the score
        if not candidate.raw_score:
            return None
        try:
            return Rating(value=float(candidate.raw_score), best=10.0, worst=1.0)
        except ValueError:
            logger.warning("Unreadable MyAnimeList score", title=candidate.title, score=candidate.raw_score)
            return None
