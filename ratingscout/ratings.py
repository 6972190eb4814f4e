"""
Aggregate ratings for one title across providers.

Each provider is searched on its own worker thread. Providers share no
state, so a slow or failing site only affects its own report.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

import requests

from .logger import get_logger
from .providers import ProviderAdapter
from .schema import ProviderReport

logger = get_logger()


def gather_ratings(
    query: str,
    providers: List[ProviderAdapter],
    max_workers: Optional[int] = None,
) -> List[ProviderReport]:
    """Look `query` up on every provider. Reports keep the providers' order."""
    if not providers:
        return []

    reports: List[Optional[ProviderReport]] = [None] * len(providers)
    with ThreadPoolExecutor(max_workers=max_workers or len(providers)) as executor:
        future_to_index = {
            executor.submit(provider.find, query): i for i, provider in enumerate(providers)
        }
        for future in as_completed(future_to_index):
            i = future_to_index[future]
            name = providers[i].name
            try:
                reports[i] = future.result()
            except (ValueError, requests.exceptions.RequestException) as e:
                logger.warning("Provider lookup failed", provider=name, query=query, error=str(e))
                reports[i] = ProviderReport(provider=name, query=query, error=str(e))
            except Exception as e:
                logger.error(
                    "Provider lookup crashed",
                    provider=name,
                    query=query,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                reports[i] = ProviderReport(
                    provider=name, query=query, error=f"{name} failed unexpectedly: {type(e).__name__}: {e}"
                )

    return [r for r in reports if r is not None]


def format_report(reports: List[ProviderReport]) -> str:
    lines = []
    for report in reports:
        if report.error:
            lines.append(f"{report.provider:<12} N/A  ({report.error})")
        elif report.match is None:
            lines.append(f"{report.provider:<12} N/A  (no match)")
        else:
            lines.append(
                f"{report.provider:<12} {report.display_rating()}  "
                f"{report.match.title} [similarity {report.match.similarity_score:.2f}]"
            )
    return "\n".join(lines)
