"""
Client de l'API TMDB (The Movie Database).

Ce module fournit:
- TokenProvider: Detenteur du bearer token (invalidation sur 401)
- ApiClient: Appels HTTP avec retry et backoff exponentiel
- APICache: Cache read-through avec TTL par entree
- TmdbApiService: Facade du catalogue de films

Les erreurs sont definies dans errors.py, la politique de retry dans retry.py.
"""

from src.adapters.api.api_client import ApiClient
from src.adapters.api.cache import APICache
from src.adapters.api.errors import (
    ApiRequestError,
    ApiUnavailableError,
    AuthConfigurationError,
    UpstreamFetchError,
)
from src.adapters.api.tmdb_client import TmdbApiService
from src.adapters.api.token_provider import TokenProvider

__all__ = [
    "APICache",
    "ApiClient",
    "ApiRequestError",
    "ApiUnavailableError",
    "AuthConfigurationError",
    "TmdbApiService",
    "TokenProvider",
    "UpstreamFetchError",
]
