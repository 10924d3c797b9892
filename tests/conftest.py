"""
Fixtures pytest partagees pour les tests MovieDeck.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires
- TokenProvider et ApiClient avec une attente simulee (pas de vrai sleep)
- APICache dans un repertoire temporaire
"""

from pathlib import Path
from typing import Iterator
from unittest.mock import AsyncMock

import pytest
from loguru import logger

from src.adapters.api.api_client import ApiClient
from src.adapters.api.cache import APICache
from src.adapters.api.token_provider import TokenProvider
from src.config import Settings

TEST_TOKEN = "test-bearer-token"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler le cache et le fichier de log.
    """
    return Settings(
        tmdb_api_url="https://api.themoviedb.org/3",
        tmdb_language="fr-FR",
        tmdb_bearer_token=TEST_TOKEN,
        max_retries=3,
        initial_delay_ms=1000,
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def token_provider() -> TokenProvider:
    """TokenProvider avec un token statique de test."""
    return TokenProvider(bearer_token=TEST_TOKEN)


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """
    Remplace asyncio.sleep dans la boucle de retry.

    Les delais demandes sont lisibles via fake_sleep.await_args_list.
    """
    return AsyncMock(return_value=None)


@pytest.fixture
def api_client(token_provider: TokenProvider, fake_sleep: AsyncMock) -> ApiClient:
    """ApiClient avec les valeurs par defaut (3 tentatives, 1000 ms)."""
    return ApiClient(token_provider=token_provider, sleep=fake_sleep)


@pytest.fixture
def api_cache(tmp_path: Path) -> Iterator[APICache]:
    """Cree un cache avec un repertoire temporaire."""
    cache = APICache(cache_dir=str(tmp_path / "test_cache"))
    yield cache
    cache.close()


@pytest.fixture
def log_records() -> Iterator[list]:
    """Capture les records loguru emis pendant le test."""
    records: list = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
