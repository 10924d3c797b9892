"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web:
token, client HTTP, cache et facade TMDB sont partages (Singletons).
"""

from dependency_injector import containers, providers

from .adapters.api.api_client import ApiClient
from .adapters.api.cache import APICache
from .adapters.api.tmdb_client import TmdbApiService
from .adapters.api.token_provider import TokenProvider
from .config import Settings
from .services.exception_handler import ExceptionHandlerService
from .services.validation import ValidationService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        catalog = container.tmdb_service()
        genres = await catalog.get_genres()
        await close_resources(container)
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Token - la source est la valeur statique de la configuration
    token_provider = providers.Singleton(
        TokenProvider,
        bearer_token=config.provided.tmdb_bearer_token,
    )

    # Cache API - Singleton partage entre toutes les requetes
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.cache_dir,
    )

    # Client HTTP resilient - Singleton pour reutiliser les connexions
    api_client = providers.Singleton(
        ApiClient,
        token_provider=token_provider,
        timeout=config.provided.request_timeout,
        max_retries=config.provided.max_retries,
        initial_delay_ms=config.provided.initial_delay_ms,
    )

    # Facade TMDB
    tmdb_service = providers.Singleton(
        TmdbApiService,
        api_client=api_client,
        api_url=config.provided.tmdb_api_url,
        language=config.provided.tmdb_language,
        cache=api_cache,
        genres_ttl=config.provided.genres_cache_ttl,
        top_rated_ttl=config.provided.top_rated_cache_ttl,
    )

    # Services de presentation (stateless - Singletons)
    validation_service = providers.Singleton(ValidationService)
    exception_handler = providers.Singleton(ExceptionHandlerService)


async def close_resources(container: Container) -> None:
    """Ferme le client HTTP et le cache (supprime le repertoire temporaire)."""
    await container.api_client().close()
    container.api_cache().close()
