"""
Tests for streaming site and title detection.
"""

from ratingscout.streaming import (
    detect_site,
    detect_title,
    title_from_crunchyroll_url,
    title_from_crunchyroll_watch_page,
)


class TestDetectSite:
    """Test site recognition from tab URLs."""

    def test_known_sites(self):
        assert detect_site("https://play.max.com/show/abc") == "HBO Max"
        assert detect_site("https://www.netflix.com/watch/81234567") == "Netflix"
        assert detect_site("https://www.crunchyroll.com/series/GYEXQKJG6/dr-stone") == "Crunchyroll"

    def test_unknown_sites(self):
        assert detect_site("https://www.youtube.com/watch?v=x") is None
        assert detect_site("chrome://newtab") is None
        assert detect_site(None) is None


class TestCrunchyroll:
    """Test Crunchyroll title extraction."""

    def test_series_url(self):
        assert title_from_crunchyroll_url("https://www.crunchyroll.com/series/GYEXQKJG6/dr-stone") == "Dr Stone"

    def test_series_url_trailing_slash(self):
        assert title_from_crunchyroll_url("https://www.crunchyroll.com/series/GY3VWX1MR/one-piece/") == "One Piece"

    def test_non_series_url(self):
        assert title_from_crunchyroll_url("https://www.crunchyroll.com/videos/popular") is None

    def test_watch_page(self, sample_crunchyroll_watch_html):
        assert title_from_crunchyroll_watch_page(sample_crunchyroll_watch_html) == "Dr. STONE"

    def test_watch_page_without_series_link(self):
        assert title_from_crunchyroll_watch_page("<html><body><h1>Loading</h1></body></html>") is None

    def test_watch_page_parent_without_heading(self):
        html = '<div class="current-media-parent-ref"><a class="show-title-link" href="/x"></a></div>'
        assert title_from_crunchyroll_watch_page(html) is None


class TestDetectTitle:
    """Test the dispatch over sites."""

    def test_crunchyroll_series(self):
        detected = detect_title("https://www.crunchyroll.com/series/GYEXQKJG6/dr-stone")
        assert detected.site == "Crunchyroll"
        assert detected.title == "Dr Stone"

    def test_crunchyroll_watch_with_html(self, sample_crunchyroll_watch_html):
        detected = detect_title("https://www.crunchyroll.com/watch/G8WUN158J/stone-world", sample_crunchyroll_watch_html)
        assert detected.title == "Dr. STONE"

    def test_crunchyroll_watch_without_html(self):
        detected = detect_title("https://www.crunchyroll.com/watch/G8WUN158J/stone-world")
        assert detected.site == "Crunchyroll"
        assert detected.title is None

    def test_netflix_has_no_title(self):
        detected = detect_title("https://www.netflix.com/watch/81234567")
        assert detected.site == "Netflix"
        assert detected.title is None

    def test_unknown_site(self):
        assert detect_title("https://example.com/") is None
