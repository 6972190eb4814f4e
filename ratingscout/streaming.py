"""Detect the streaming site and title from the page the user is on."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .logger import get_logger
from .normalize import extract_domain, normalize_query, normalize_slug

logger = get_logger()

STREAMING_SITES = {
    "play.max.com": "HBO Max",
    "www.netflix.com": "Netflix",
    "www.crunchyroll.com": "Crunchyroll",
}


@dataclass(frozen=True)
class DetectedTitle:
    site: str
    title: Optional[str]
    url: str


def detect_site(url: Optional[str]) -> Optional[str]:
    return STREAMING_SITES.get(extract_domain(url) or "")


def title_from_crunchyroll_url(url: str) -> Optional[str]:
    """Series pages carry the title slug as the last path segment."""
    parts = [x for x in urlparse(url).path.split("/") if x]
    if "series" not in parts or parts[-1] == "series":
        return None
    return normalize_slug(parts[-1]) or None


def title_from_crunchyroll_watch_page(html: str) -> Optional[str]:
    """Watch pages show the parent series title above the player."""
    soup = BeautifulSoup(html, "html.parser")
    parent = soup.select_one("div.current-media-parent-ref")
    if parent is None:
        return None
    heading = parent.select_one("a.show-title-link h4")
    if heading is None:
        return None
    return normalize_query(heading.get_text()) or None


def detect_title(url: str, html: Optional[str] = None) -> Optional[DetectedTitle]:
    """
    Work out which site `url` belongs to and, where supported, the title.

    Returns None for sites we do not know. HBO Max and Netflix are
    recognised but their titles are not extracted. Crunchyroll watch pages
    need the page `html`.
    """
    site = detect_site(url)
    if site is None:
        logger.debug("Not a streaming site", url=url)
        return None

    title = None
    if site == "Crunchyroll":
        path = urlparse(url).path
        if "/series" in path:
            title = title_from_crunchyroll_url(url)
        elif "/watch" in path and html:
            title = title_from_crunchyroll_watch_page(html)

    logger.info("Detected streaming site", site=site, title=title)
    return DetectedTitle(site=site, title=title, url=url)
