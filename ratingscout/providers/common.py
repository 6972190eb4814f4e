"""Shared utilities for all rating providers."""

from urllib.parse import quote, quote_plus

import requests

from ..config import Settings
from ..logger import get_logger
from ..retry import RetryError, TransientHTTPError, retry_call, should_retry_http_status

logger = get_logger()

RETRYABLE_EXCEPTIONS = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    TransientHTTPError,
)


class ProviderError(ValueError):
    """A provider could not be queried. The message is meant for the user.

    `error_type` is the key the failure is counted under in the lookup metrics.
    """

    def __init__(self, message: str, error_type: str = "ProviderError"):
        super().__init__(message)
        self.error_type = error_type


def _get(url: str, settings: Settings) -> requests.Response:
    logger.record_request()
    resp = requests.get(url, headers={"User-Agent": settings.user_agent}, timeout=settings.timeout)
    if should_retry_http_status(resp.status_code):
        raise TransientHTTPError(resp.status_code, url)
    return resp


def fetch_with_error_handling(url: str, provider: str, settings: Settings) -> requests.Response:
    """GET `url`, retrying timeouts, connection errors and retryable statuses.

    Every failure surfaces as a ProviderError with a message fit for the
    user and an `error_type` for the lookup metrics.
    """
    label = provider.capitalize()
    try:
        resp = retry_call(
            _get,
            url,
            settings,
            max_retries=settings.max_retries,
            base_delay=settings.retry_delay,
            exceptions=RETRYABLE_EXCEPTIONS,
            on_retry=lambda attempt, e, delay: logger.warning(
                f"{label} request failed, retrying", url=url, attempt=attempt, delay=delay, error=str(e)
            ),
        )
        resp.raise_for_status()
        return resp
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "HTTPError"
        if status == 404:
            logger.warning(f"{label} URL not found", url=url, status=404)
            raise ProviderError(f"{label} URL not found (404): {url}", error_type="HTTPError_404")
        logger.error(f"{label} request failed", url=url, status=status)
        raise ProviderError(f"{label} request failed ({status}): {url}", error_type=f"HTTPError_{status}")
    except RetryError as e:
        logger.warning(f"{label} request kept failing", url=url, error=str(e))
        raise ProviderError(f"{label} is not responding. Try again later.", error_type="RetryExhausted")
    except requests.exceptions.RequestException as e:
        logger.error(f"{label} request error", url=url, error=str(e))
        raise ProviderError(f"{label} request error: {e}", error_type="RequestException")


def build_search_url(template: str, query: str, path_segment: bool = False) -> str:
    """Fill `{query}` in a search URL template with the quoted query.

    Query-string templates get `+` for spaces; path templates get `%20`.
    """
    quoted = quote(query, safe="") if path_segment else quote_plus(query)
    return template.format(query=quoted)
