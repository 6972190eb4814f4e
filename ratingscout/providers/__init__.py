from typing import Dict, List, Optional, Type

from ..config import Settings
from .base import ProviderAdapter
from .common import ProviderError
from .imdb import ImdbProvider
from .letterboxd import LetterboxdProvider
from .myanimelist import MyAnimeListProvider

PROVIDERS: Dict[str, Type[ProviderAdapter]] = {
    ImdbProvider.name: ImdbProvider,
    MyAnimeListProvider.name: MyAnimeListProvider,
    LetterboxdProvider.name: LetterboxdProvider,
}


def get_provider(name: str, settings: Optional[Settings] = None) -> ProviderAdapter:
    key = name.strip().lower()
    if key not in PROVIDERS:
        raise ValueError(f"Unknown provider '{name}'. Use one of: {', '.join(PROVIDERS)}")
    return PROVIDERS[key](settings)


def get_providers(names: Optional[List[str]] = None, settings: Optional[Settings] = None) -> List[ProviderAdapter]:
    return [get_provider(n, settings) for n in (names or list(PROVIDERS))]


__all__ = [
    "PROVIDERS",
    "ProviderAdapter",
    "ProviderError",
    "ImdbProvider",
    "LetterboxdProvider",
    "MyAnimeListProvider",
    "get_provider",
    "get_providers",
]
