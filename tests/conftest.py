"""
Pytest configuration and shared fixtures.
"""

import json
from typing import List, Optional
from unittest.mock import MagicMock

import pytest
import requests

from ratingscout.config import Settings
from ratingscout.providers.base import ProviderAdapter
from ratingscout.providers.common import ProviderError
from ratingscout.schema import Candidate, Rating


@pytest.fixture
def fast_settings(tmp_path) -> Settings:
    """Settings that never sleep between retries."""
    return Settings(
        timeout=1.0,
        max_retries=0,
        retry_delay=0.0,
        store_path=tmp_path / "current.json",
        log_dir=tmp_path / "logs",
    )


def make_response(text: str = "", status: int = 200) -> MagicMock:
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def sample_myanimelist_html() -> str:
    """MyAnimeList 'all' search page with three anime and one broken entry."""
    return """
    <html><body>
    <div class="list di-t w100">
        <div class="picSurround di-tc thumb">
            <a href="https://myanimelist.net/anime/38691/Dr_Stone">
                <img data-src="https://cdn.myanimelist.net/images/anime/1613/102576.jpg" />
            </a>
        </div>
        <div class="information di-tc va-t pt4 pl8">
            <div class="title"><a href="https://myanimelist.net/anime/38691/Dr_Stone">Dr. Stone</a></div>
            <div class="pt8 fs10 lh14 fn-grey4">TV (24 eps)<br />Scored 8.27<br />1,512,113 members</div>
        </div>
    </div>
    <div class="list di-t w100">
        <div class="picSurround di-tc thumb">
            <a href="https://myanimelist.net/anime/40852/Dr_Stone__Stone_Wars">
                <img data-src="https://cdn.myanimelist.net/images/anime/1711/110614.jpg" />
            </a>
        </div>
        <div class="information di-tc va-t pt4 pl8">
            <div class="title"><a href="https://myanimelist.net/anime/40852/Dr_Stone__Stone_Wars">Dr. Stone: Stone Wars</a></div>
            <div class="pt8 fs10 lh14 fn-grey4">TV (11 eps)<br />Scored 8.16<br />876,001 members</div>
        </div>
    </div>
    <div class="list di-t w100">
        <div class="information di-tc va-t pt4 pl8">
            <div class="pt8 fs10 lh14 fn-grey4">Scored 7.00</div>
        </div>
    </div>
    <div class="list di-t w100">
        <div class="information di-tc va-t pt4 pl8">
            <div class="title"><a href="https://myanimelist.net/anime/21/One_Piece">One Piece</a></div>
            <div class="pt8 fs10 lh14 fn-grey4">TV (? eps)<br />Scored 8.72</div>
        </div>
    </div>
    </body></html>
    """


@pytest.fixture
def imdb_search_data() -> dict:
    return {
        "props": {
            "pageProps": {
                "titleResults": {
                    "results": [
                        {
                            "id": "tt9679542",
                            "titleNameText": "Dr. Stone",
                            "titlePosterImageModel": {"url": "https://m.media-amazon.com/images/M/drstone.jpg"},
                        },
                        {
                            "id": "tt0388629",
                            "titleNameText": "One Piece",
                            "titlePosterImageModel": None,
                        },
                        {
                            "id": "tt0000001",
                            "titleNameText": "",
                        },
                    ]
                }
            }
        }
    }


@pytest.fixture
def sample_imdb_search_html(imdb_search_data) -> str:
    return (
        "<html><head></head><body>"
        '<script id="__NEXT_DATA__" type="application/json">'
        + json.dumps(imdb_search_data)
        + "</script></body></html>"
    )


@pytest.fixture
def sample_imdb_title_html() -> str:
    return """
    <html><head>
    <script type="application/ld+json">{"@context":"https://schema.org","@type":"TVSeries",
    "name":"Dr. Stone","aggregateRating":{"@type":"AggregateRating","ratingCount":45678,
    "bestRating":10,"worstRating":1,"ratingValue":8.2},"genre":["Animation"]}</script>
    </head><body></body></html>
    """


@pytest.fixture
def sample_letterboxd_search_html() -> str:
    return """
    <html><body>
    <ul class="results">
        <li class="film-detail">
            <div class="film-poster"><img src="https://a.ltrbxd.com/resized/matrix.jpg" alt="The Matrix" /></div>
            <h2 class="headline-2 prettify">
                <span class="film-title-wrapper"><a href="/film/the-matrix/">The Matrix <small class="metadata">1999</small></a></span>
            </h2>
        </li>
        <li class="film-detail">
            <div class="film-poster"><img src="https://a.ltrbxd.com/resized/reloaded.jpg" alt="" /></div>
            <h2 class="headline-2 prettify">
                <span class="film-title-wrapper"><a href="/film/the-matrix-reloaded/">The Matrix Reloaded <small class="metadata">2003</small></a></span>
            </h2>
        </li>
        <li class="list-entry"><p>No film here</p></li>
    </ul>
    </body></html>
    """


@pytest.fixture
def sample_letterboxd_film_html() -> str:
    return """
    <html><head>
    <meta name="twitter:data1" content="Lana Wachowski" />
    <meta name="twitter:data2" content="4.18 out of 5" />
    </head><body></body></html>
    """


@pytest.fixture
def sample_crunchyroll_watch_html() -> str:
    return """
    <html><body>
    <div class="erc-current-media-info">
        <div class="current-media-parent-ref">
            <a class="show-title-link" href="/series/GYEXQKJG6/dr-stone">
                <h4 class="text--gq6o-">  Dr. STONE  </h4>
            </a>
        </div>
        <h1 class="title">Episode 1 - Stone World</h1>
    </div>
    </body></html>
    """


class StaticProvider(ProviderAdapter):
    """Provider serving fixed candidates, for tests that must not touch the network."""

    def __init__(
        self,
        name: str,
        titles: List[str],
        rating: Optional[Rating] = None,
        error: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(settings)
        self.name = name
        self.titles = titles
        self.rating = rating
        self.error = error
        self.searched: List[str] = []

    def search(self, query: str) -> List[Candidate]:
        self.searched.append(query)
        if self.error:
            raise ProviderError(self.error)
        return [Candidate(title=t, reference_url=f"https://example.com/{i}") for i, t in enumerate(self.titles)]

    def get_rating(self, candidate: Candidate) -> Optional[Rating]:
        return self.rating


@pytest.fixture
def static_provider():
    """Factory for StaticProvider instances."""
    return StaticProvider
