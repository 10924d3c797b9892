"""
Interfaces ports pour l'acces a l'API de metadonnees films.

Interfaces abstraites (ports) definissant les contrats entre la couche web
et les adaptateurs concrets (token, cache, facade TMDB).
Les implementations vivent dans src/adapters/api/.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional


class ITokenProvider(ABC):
    """
    Source du bearer token utilise pour authentifier les appels sortants.
    """

    @abstractmethod
    def get_bearer_token(self) -> str:
        """
        Retourne le token courant, en le rechargeant si necessaire.

        Raises :
            AuthConfigurationError : si aucun token n'est disponible
        """
        ...

    @abstractmethod
    def invalidate_token(self) -> None:
        """Invalide le token courant (apres un 401)."""
        ...


class IResponseCache(ABC):
    """
    Cache read-through pour les reponses JSON decodees.
    """

    @abstractmethod
    async def get_or_compute(
        self,
        key: str,
        ttl: float,
        compute: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Retourne la valeur en cache ou la calcule et la stocke.

        Args :
            key : Cle unique de l'entree
            ttl : Duree de vie en secondes, fixee au moment du stockage
            compute : Coroutine appelee en cas d'absence

        Retourne :
            La valeur en cache ou fraichement calculee
        """
        ...


class IMovieCatalog(ABC):
    """
    Facade des operations films exposees a la couche de presentation.

    Toutes les methodes levent UpstreamFetchError en cas d'echec.
    """

    @abstractmethod
    async def get_genres(self) -> list[dict[str, Any]]:
        """Liste des genres de films."""
        ...

    @abstractmethod
    async def get_top_rated_movie_with_videos(self) -> dict[str, Any]:
        """Film le mieux note et ses videos, ou {} si aucun film."""
        ...

    @abstractmethod
    async def get_movies_by_genre(
        self, genre_id: Optional[int], page: int = 1
    ) -> list[dict[str, Any]]:
        """Films populaires, filtres par genre si genre_id est fourni."""
        ...

    @abstractmethod
    async def get_movie_details(self, movie_id: int) -> dict[str, Any]:
        """Fiche complete d'un film, videos incluses."""
        ...

    @abstractmethod
    async def search_movies(self, query: str) -> list[dict[str, Any]]:
        """Recherche de films par titre."""
        ...
