from typing import Any, Dict, List, Optional
from urllib.parse import urljoin
import re

from bs4 import BeautifulSoup

from ..logger import get_logger
from ..schema import Candidate, Rating
from .base import ProviderAdapter
from .common import build_search_url, fetch_with_error_handling

logger = get_logger()

BASE_URL = "https://letterboxd.com"
SEARCH_URL = BASE_URL + "/search/films/{query}/"
AVERAGE_RE = re.compile(r"([\d.]+)\s+out of\s+([\d.]+)")


def parse_search_results(html: str, limit: int = 10) -> List[Dict[str, Any]]:
    """Film entries from the film search page."""
    soup = BeautifulSoup(html, "html.parser")
    rows = []
    for entry in soup.select("ul.results li")[:limit]:
        link = entry.select_one("h2 a") or entry.select_one(".film-title-wrapper a")
        if link is None:
            continue
        # The year sits in a nested <small>; keep only the name
        year = link.find("small")
        if year is not None:
            year.extract()
        img = entry.select_one("img")
        href = link.get("href")
        rows.append({
            "title": link.get_text(" ", strip=True),
            "reference_url": urljoin(BASE_URL, href) if href else None,
            "image": img.get("src") if img else None,
            "raw_score": None,
        })
    return rows


def parse_rating(html: str) -> Optional[Rating]:
    """Average rating from the film page's twitter:data2 meta tag."""
    soup = BeautifulSoup(html, "html.parser")
    meta = soup.find("meta", attrs={"name": "twitter:data2"})
    if meta is None:
        return None
    m = AVERAGE_RE.search(meta.get("content", ""))
    if not m:
        return None
    return Rating(value=float(m.group(1)), best=float(m.group(2)), worst=0.5)


class LetterboxdProvider(ProviderAdapter):
    name = "letterboxd"

    def search(self, query: str) -> List[Candidate]:
        url = build_search_url(SEARCH_URL, query, path_segment=True)
        logger.debug("Searching Letterboxd", query=query, url=url)
        resp = fetch_with_error_handling(url, self.name, self.settings)
        return self.make_candidates(parse_search_results(resp.text, self.settings.max_results))

    def get_rating(self, candidate: Candidate) -> Optional[Rating]:
        if not candidate.reference_url:
            return None
        resp = fetch_with_error_handling(candidate.reference_url, self.name, self.settings)
        # Films with too few ratings have no average yet
        return parse_rating(resp.text)
