import re
from typing import Optional
from urllib.parse import urlparse


def normalize_text(s: str) -> str:
    """Lowercase and collapse whitespace runs to one space. Ends are not trimmed."""
    return re.sub(r"\s+", " ", s.lower())


def normalize_query(s: str) -> str:
    """Trim and collapse whitespace; case is kept because the scorers compare raw text."""
    return " ".join(s.split())


def normalize_slug(slug: str) -> str:
    """Turn a URL slug like 'dr-stone' into 'Dr Stone'."""
    text = slug.replace("-", " ")
    text = re.sub(r"\b\w", lambda m: m.group(0).upper(), text)
    return text.strip()


def extract_domain(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    if url.startswith("chrome://"):
        return "chrome"
    if "://" in url:
        domain = url.split("/")[2]
    else:
        domain = url.split("/")[0]
    # Drop the port
    return domain.split(":")[0]


def canonical_url(url: str) -> str:
    parsed = urlparse(url)
    path = parsed.path.rstrip("/")
    # Drop query and fragment to avoid source-specific tracking
    return f"{parsed.scheme}://{parsed.netloc}{path}" if parsed.scheme and parsed.netloc else path
