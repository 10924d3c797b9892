"""
Facade TMDB pour le catalogue de films.

Traduit les operations du catalogue en appels ApiClient:
- Injection systematique du parametre language
- Extraction du champ utile de la reponse ("genres", "results")
- Cache read-through pour les genres et les films les mieux notes
- Conversion de toutes les erreurs en UpstreamFetchError

Usage:
    service = TmdbApiService(
        api_client=client,
        api_url="https://api.themoviedb.org/3",
        language="fr-FR",
        cache=APICache(),
    )
    genres = await service.get_genres()
"""

from typing import Any, Optional

from loguru import logger

from src.adapters.api.api_client import ApiClient
from src.adapters.api.cache import APICache
from src.adapters.api.errors import UpstreamFetchError
from src.core.ports.api_clients import IMovieCatalog, IResponseCache


class TmdbApiService(IMovieCatalog):
    """
    Implementation TMDB du catalogue de films.

    Attributes:
        CACHE_GENRES_KEY: Cle de cache de la liste des genres
        CACHE_TOP_RATED_MOVIES_KEY_PREFIX: Prefixe des cles par page de top-rated

    Example:
        top = await service.get_top_rated_movie_with_videos()
        if top:
            print(top["movie"]["title"], len(top["videos"]))
    """

    CACHE_GENRES_KEY = "tmdb_genres"
    CACHE_TOP_RATED_MOVIES_KEY_PREFIX = "tmdb_top_rated_movies_page_"

    def __init__(
        self,
        api_client: ApiClient,
        api_url: str,
        language: str,
        cache: IResponseCache,
        genres_ttl: float = APICache.GENRES_TTL,
        top_rated_ttl: float = APICache.TOP_RATED_TTL,
    ) -> None:
        """
        Initialise la facade.

        Args:
            api_client: Client HTTP resilient
            api_url: URL de base de l'API (le / final est retire)
            language: Code langue injecte dans chaque requete (ex: fr-FR)
            cache: Cache read-through pour genres et top-rated
            genres_ttl: TTL de la liste des genres en secondes
            top_rated_ttl: TTL d'une page de top-rated en secondes
        """
        self._api_client = api_client
        self._api_url = api_url.rstrip("/")
        self._language = language
        self._cache = cache
        self._genres_ttl = genres_ttl
        self._top_rated_ttl = top_rated_ttl

    async def get_genres(self) -> list[dict[str, Any]]:
        """Liste des genres de films (cache 1h)."""
        try:
            genres = await self._cache.get_or_compute(
                self.CACHE_GENRES_KEY, self._genres_ttl, self._fetch_genres
            )
        except Exception as e:
            logger.error("Echec de recuperation des genres TMDB", exception=str(e))
            raise UpstreamFetchError("genres", "Impossible de recuperer les genres.") from e
        return genres or []

    async def _fetch_genres(self) -> list[dict[str, Any]]:
        genres = await self._make_api_call("/genre/movie/list", {}, "genres")
        logger.info("Genres recuperes", count=len(genres))
        return genres

    async def get_top_rated_movie_with_videos(self) -> dict[str, Any]:
        """
        Film le mieux note (page 1) accompagne de ses videos.

        Returns:
            {"movie": ..., "videos": [...]} ou {} si le classement est vide
        """
        try:
            top_rated_movies = await self._get_top_rated_movies()
            if not top_rated_movies:
                return {}

            top_movie = top_rated_movies[0]
            videos = await self._get_movie_videos(top_movie["id"])
            logger.info(
                "Videos du film le mieux note recuperees",
                movie_id=top_movie["id"],
                videos_count=len(videos),
            )
            return {"movie": top_movie, "videos": videos}
        except Exception as e:
            logger.error(
                "Echec de recuperation du film le mieux note ou de ses videos",
                exception=str(e),
            )
            raise UpstreamFetchError(
                "top_rated", "Impossible de recuperer les films les mieux notes."
            ) from e

    async def get_movies_by_genre(
        self, genre_id: Optional[int], page: int = 1
    ) -> list[dict[str, Any]]:
        """
        Films tries par popularite, filtres par genre si genre_id est fourni.

        Args:
            genre_id: ID TMDB du genre, None pour tous les genres
            page: Page de resultats (1-based)
        """
        params: dict[str, Any] = {
            "page": page,
            "sort_by": "popularity.desc",
            "include_adult": "false",
            "include_video": "false",
        }
        if genre_id is not None:
            params["with_genres"] = genre_id

        try:
            movies = await self._make_api_call("/discover/movie", params, "results")
            logger.info(
                "Films du genre recuperes", genre_id=genre_id, page=page, count=len(movies)
            )
        except Exception as e:
            logger.error(
                "Echec de recuperation des films du genre",
                genre_id=genre_id,
                page=page,
                exception=str(e),
            )
            raise UpstreamFetchError(
                "movies_by_genre", "Impossible de recuperer les films de ce genre."
            ) from e

        return movies

    async def get_movie_details(self, movie_id: int) -> dict[str, Any]:
        """Fiche complete d'un film, avec ses videos (append_to_response)."""
        try:
            details = await self._make_api_call(
                f"/movie/{movie_id}", {"append_to_response": "videos"}
            )
            logger.info("Fiche film recuperee", movie_id=movie_id, details_count=len(details))
        except Exception as e:
            logger.error(
                "Echec de recuperation de la fiche film", movie_id=movie_id, exception=str(e)
            )
            raise UpstreamFetchError(
                "movie_details", "Impossible de recuperer la fiche du film."
            ) from e

        return details

    async def search_movies(self, query: str) -> list[dict[str, Any]]:
        """Recherche de films par titre (contenu adulte exclu)."""
        params = {"query": query, "include_adult": "false"}

        try:
            results = await self._make_api_call("/search/movie", params, "results")
            logger.info("Recherche de films effectuee", query=query, count=len(results))
        except Exception as e:
            logger.error("Echec de la recherche de films", query=query, exception=str(e))
            raise UpstreamFetchError("search", "Impossible de rechercher des films.") from e

        return results

    async def _get_top_rated_movies(self, page: int = 1) -> list[dict[str, Any]]:
        """Page de films les mieux notes (cache 30 min par page)."""
        cache_key = f"{self.CACHE_TOP_RATED_MOVIES_KEY_PREFIX}{page}"

        async def fetch() -> list[dict[str, Any]]:
            return await self._make_api_call("/movie/top_rated", {"page": page}, "results")

        try:
            return await self._cache.get_or_compute(cache_key, self._top_rated_ttl, fetch)
        except Exception as e:
            logger.error(
                "Echec de recuperation des films les mieux notes", page=page, exception=str(e)
            )
            raise

    async def _get_movie_videos(self, movie_id: int) -> list[dict[str, Any]]:
        try:
            return await self._make_api_call(f"/movie/{movie_id}/videos", {}, "results")
        except Exception as e:
            logger.error(
                "Echec de recuperation des videos du film", movie_id=movie_id, exception=str(e)
            )
            raise

    async def _make_api_call(
        self,
        endpoint: str,
        params: dict[str, Any],
        key: Optional[str] = None,
    ) -> Any:
        """
        Appelle l'API et extrait le champ `key` de la reponse.

        Args:
            endpoint: Chemin relatif a l'URL de base (ex: /movie/550)
            params: Parametres de requete (language est ajoute)
            key: Champ a extraire; [] s'il est absent ou null; None pour tout retourner
        """
        query = {**params, "language": self._language}
        url = f"{self._api_url}{endpoint}"

        try:
            response = await self._api_client.make_request("GET", url, query)
        except Exception as e:
            logger.error(
                "Appel API TMDB en echec", endpoint=endpoint, params=query, exception=str(e)
            )
            raise

        if key is None:
            return response
        return response.get(key) or []
