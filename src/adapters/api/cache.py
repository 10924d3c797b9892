"""
Cache read-through pour les reponses de l'API TMDB, avec TTL par entree.

Le cache utilise diskcache. Sans repertoire explicite, il travaille dans un
repertoire temporaire propre au processus, supprime a la fermeture: le cache
n'est ni partage entre processus ni conserve entre redemarrages.

TTL des deux endpoints caches:
- GENRES_TTL: 1 heure - la liste des genres change rarement
- TOP_RATED_TTL: 30 minutes - le classement evolue plus souvent
"""

import asyncio
import shutil
import tempfile
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from diskcache import Cache
from loguru import logger

from src.core.ports.api_clients import IResponseCache

_MISSING = object()


class APICache(IResponseCache):
    """
    Cache asynchrone avec TTL pour les appels API.

    Utilise diskcache pour le stockage et run_in_executor pour
    les operations asynchrones non-bloquantes. Le remplissage d'une
    meme cle est serialise par un verrou asyncio par cle.

    Attributes:
        GENRES_TTL: Duree de vie de la liste des genres (1h)
        TOP_RATED_TTL: Duree de vie d'une page de films les mieux notes (30 min)

    Example:
        cache = APICache()
        genres = await cache.get_or_compute("tmdb_genres", 3600, fetch_genres)
        cache.close()
    """

    GENRES_TTL = 60 * 60  # 1 heure en secondes (3600)
    TOP_RATED_TTL = 30 * 60  # 30 minutes en secondes (1800)

    def __init__(self, cache_dir: Optional[str] = None) -> None:
        """
        Initialise le cache.

        Args:
            cache_dir: Repertoire de stockage; None pour un repertoire
                temporaire supprime par close()
        """
        self._owns_directory = cache_dir is None
        directory = tempfile.mkdtemp(prefix="moviedeck-cache-") if cache_dir is None else str(cache_dir)
        self._cache = Cache(directory)
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def directory(self) -> str:
        """Repertoire utilise par diskcache."""
        return self._cache.directory

    async def get(self, key: str) -> Optional[Any]:
        """
        Recupere une valeur du cache.

        Args:
            key: Cle unique identifiant la donnee

        Returns:
            La valeur stockee ou None si absente ou expiree
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: float) -> None:
        """
        Stocke une valeur dans le cache avec un TTL.

        Args:
            key: Cle unique identifiant la donnee
            value: Valeur a stocker (doit etre serializable)
            ttl: Duree de vie en secondes
        """
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def get_or_compute(
        self,
        key: str,
        ttl: float,
        compute: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Retourne la valeur en cache, ou la calcule puis la stocke.

        Les appels concurrents sur une meme cle absente attendent le premier
        remplissage au lieu de relancer compute(). Une exception de compute()
        remonte telle quelle et rien n'est stocke.

        Args:
            key: Cle unique identifiant la donnee
            ttl: Duree de vie en secondes, fixee au stockage
            compute: Coroutine produisant la valeur en cas d'absence

        Returns:
            La valeur en cache ou fraichement calculee
        """
        cached = await self._lookup(key)
        if cached is not _MISSING:
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = await self._lookup(key)
            if cached is not _MISSING:
                return cached

            logger.debug("Cache manquant, calcul de la valeur", key=key, ttl=ttl)
            value = await compute()
            await self.set(key, value, ttl)
            return value

    async def _lookup(self, key: str) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, partial(self._cache.get, key, default=_MISSING)
        )

    async def delete(self, key: str) -> None:
        """Supprime une entree du cache (sans erreur si absente)."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.delete, key)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()
        if self._owns_directory:
            shutil.rmtree(self._cache.directory, ignore_errors=True)
