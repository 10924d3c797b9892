"""
Routes JSON du catalogue de films.

Chaque route valide ses paramètres, appelle la facade TMDB et traduit une
UpstreamFetchError en réponse 500 avec un message générique. La page
d'accueil continue de répondre même si le film à la une est indisponible.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...adapters.api.errors import UpstreamFetchError
from ...core.ports.api_clients import IMovieCatalog
from ...services.exception_handler import ExceptionHandlerService
from ...services.validation import ValidationService
from ..deps import get_catalog, get_exception_handler, get_validator

router = APIRouter()

Catalog = Annotated[IMovieCatalog, Depends(get_catalog)]
Validator = Annotated[ValidationService, Depends(get_validator)]
Handler = Annotated[ExceptionHandlerService, Depends(get_exception_handler)]


def _parse_int(value: Optional[str]) -> Optional[int]:
    """
    Convertit un paramètre de requête numérique en entier, None sinon.

    Les valeurs décimales ou en notation exponentielle sont acceptées et
    tronquées ("2.5" donne 2, "1e2" donne 100).
    """
    if value is None:
        return None
    try:
        return int(float(value.strip()))
    except (ValueError, OverflowError):
        return None


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.get("/")
async def home(catalog: Catalog, handler: Handler):
    """Film le mieux noté et ses vidéos, pour la page d'accueil."""
    errors: list[str] = []
    try:
        top_movie_data = await catalog.get_top_rated_movie_with_videos()
    except UpstreamFetchError as e:
        errors.append(handler.handle_exception(e))
        top_movie_data = {}

    return {
        "top_movie": top_movie_data.get("movie"),
        "top_movie_videos": top_movie_data.get("videos", []),
        "errors": errors,
    }


@router.get("/api/movies")
async def movies_list(
    catalog: Catalog,
    handler: Handler,
    genre_id: Optional[str] = None,
    page: Optional[str] = None,
):
    """Films populaires, filtrés par genre (genre_id non numérique ignoré)."""
    parsed_genre_id = _parse_int(genre_id)
    parsed_page = _parse_int(page)
    if parsed_page is None:
        parsed_page = 1

    try:
        return await catalog.get_movies_by_genre(parsed_genre_id, parsed_page)
    except UpstreamFetchError as e:
        handler.handle_exception(e, {"genre_id": parsed_genre_id, "page": parsed_page})
        return _error("Une erreur est survenue lors de la récupération des films.", 500)


@router.get("/api/genres")
async def genre_list(catalog: Catalog, handler: Handler):
    """Liste des genres."""
    try:
        return await catalog.get_genres()
    except UpstreamFetchError as e:
        handler.handle_exception(e)
        return _error("Une erreur est survenue lors de la récupération des genres.", 500)


@router.get("/api/movie/{movie_id}")
async def movie_details(
    movie_id: int, catalog: Catalog, validator: Validator, handler: Handler
):
    """Fiche d'un film (400 si l'ID n'est pas strictement positif)."""
    if not validator.is_valid_id(movie_id, "movie"):
        return _error("ID de film invalide.", 400)

    try:
        return await catalog.get_movie_details(movie_id)
    except UpstreamFetchError as e:
        handler.handle_exception(e, {"movie_id": movie_id})
        return _error("Une erreur est survenue lors de la récupération du film.", 500)


@router.get("/api/search")
async def search_movies(
    catalog: Catalog, validator: Validator, handler: Handler, q: str = ""
):
    """Recherche par titre (400 si la requête est vide)."""
    query = q.strip()
    if not validator.is_valid_search_query(query):
        return _error("La requête de recherche ne peut pas être vide.", 400)

    try:
        return await catalog.search_movies(query)
    except UpstreamFetchError as e:
        handler.handle_exception(e, {"query": query})
        return _error("Une erreur est survenue lors de la recherche.", 500)
