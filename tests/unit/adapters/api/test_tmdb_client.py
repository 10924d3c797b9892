"""
Tests for TmdbApiService - TMDB movie catalog facade.

Uses respx to mock httpx calls and verifies:
- Endpoint, parameters and language injection for each operation
- Genres and top-rated pages are served from cache within their TTL
- Empty top-rated ranking yields {} without fetching videos
- Every failure is converted to UpstreamFetchError with its cause
"""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from src.adapters.api.api_client import ApiClient
from src.adapters.api.cache import APICache
from src.adapters.api.errors import (
    ApiUnavailableError,
    AuthConfigurationError,
    UpstreamFetchError,
)
from src.adapters.api.tmdb_client import TmdbApiService
from src.adapters.api.token_provider import TokenProvider
from src.core.ports.api_clients import IMovieCatalog
from tests.fixtures.tmdb_responses import (
    TMDB_BASE_URL,
    TMDB_DISCOVER_RESPONSE,
    TMDB_GENRES_RESPONSE,
    TMDB_MOVIE_DETAILS_RESPONSE,
    TMDB_MOVIE_VIDEOS_RESPONSE,
    TMDB_SEARCH_EMPTY_RESPONSE,
    TMDB_SEARCH_RESPONSE,
    TMDB_TOP_RATED_EMPTY_RESPONSE,
    TMDB_TOP_RATED_RESPONSE,
)

GENRES_URL = f"{TMDB_BASE_URL}/genre/movie/list"
TOP_RATED_URL = f"{TMDB_BASE_URL}/movie/top_rated"
DISCOVER_URL = f"{TMDB_BASE_URL}/discover/movie"
SEARCH_URL = f"{TMDB_BASE_URL}/search/movie"


@pytest.fixture
def tmdb_service(api_client: ApiClient, api_cache: APICache) -> TmdbApiService:
    """TmdbApiService avec un vrai cache et un client sans attente reelle."""
    return TmdbApiService(
        api_client=api_client,
        api_url=f"{TMDB_BASE_URL}/",
        language="fr-FR",
        cache=api_cache,
    )


def _params(route: respx.Route, index: int = -1) -> dict:
    return dict(route.calls[index].request.url.params)


class TestTmdbApiServiceInterface:
    """TmdbApiService implemente IMovieCatalog."""

    def test_implements_interface(self, tmdb_service: TmdbApiService):
        assert isinstance(tmdb_service, IMovieCatalog)

    def test_cache_keys(self):
        assert TmdbApiService.CACHE_GENRES_KEY == "tmdb_genres"
        assert TmdbApiService.CACHE_TOP_RATED_MOVIES_KEY_PREFIX == "tmdb_top_rated_movies_page_"


class TestGetGenres:
    """Tests for get_genres()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_genres_list(self, tmdb_service: TmdbApiService):
        route = respx.get(GENRES_URL).mock(
            return_value=httpx.Response(200, json=TMDB_GENRES_RESPONSE)
        )

        genres = await tmdb_service.get_genres()

        assert genres == TMDB_GENRES_RESPONSE["genres"]
        assert _params(route) == {"language": "fr-FR"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_second_call_is_served_from_cache(self, tmdb_service: TmdbApiService):
        route = respx.get(GENRES_URL).mock(
            return_value=httpx.Response(200, json=TMDB_GENRES_RESPONSE)
        )

        first = await tmdb_service.get_genres()
        second = await tmdb_service.get_genres()

        assert first == second
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_expired_genres_are_fetched_again(
        self, api_client: ApiClient, api_cache: APICache
    ):
        service = TmdbApiService(
            api_client=api_client,
            api_url=TMDB_BASE_URL,
            language="fr-FR",
            cache=api_cache,
            genres_ttl=0.05,
        )
        route = respx.get(GENRES_URL).mock(
            return_value=httpx.Response(200, json=TMDB_GENRES_RESPONSE)
        )

        await service.get_genres()
        await asyncio.sleep(0.15)
        await service.get_genres()

        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_genres_field_returns_empty_list(
        self, tmdb_service: TmdbApiService
    ):
        respx.get(GENRES_URL).mock(return_value=httpx.Response(200, json={}))

        assert await tmdb_service.get_genres() == []

    @pytest.mark.asyncio
    async def test_uses_genres_key_and_ttl(self, api_client: ApiClient):
        cache = AsyncMock()
        cache.get_or_compute.return_value = [{"id": 28, "name": "Action"}]
        service = TmdbApiService(
            api_client=api_client, api_url=TMDB_BASE_URL, language="fr-FR", cache=cache
        )

        await service.get_genres()

        key, ttl, _ = cache.get_or_compute.await_args.args
        assert key == "tmdb_genres"
        assert ttl == 3600

    @pytest.mark.asyncio
    @respx.mock
    async def test_failure_raises_upstream_error(
        self, tmdb_service: TmdbApiService, fake_sleep: AsyncMock
    ):
        route = respx.get(GENRES_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(UpstreamFetchError) as exc_info:
            await tmdb_service.get_genres()

        assert exc_info.value.operation == "genres"
        assert str(exc_info.value) == "Impossible de recuperer les genres."
        assert isinstance(exc_info.value.__cause__, ApiUnavailableError)
        assert route.call_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_failure_is_not_cached(self, tmdb_service: TmdbApiService):
        route = respx.get(GENRES_URL).mock(
            side_effect=[
                httpx.Response(500),
                httpx.Response(500),
                httpx.Response(500),
                httpx.Response(200, json=TMDB_GENRES_RESPONSE),
            ]
        )

        with pytest.raises(UpstreamFetchError):
            await tmdb_service.get_genres()
        genres = await tmdb_service.get_genres()

        assert len(genres) == 5
        assert route.call_count == 4


class TestGetTopRatedMovieWithVideos:
    """Tests for get_top_rated_movie_with_videos()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_first_movie_and_its_videos(self, tmdb_service: TmdbApiService):
        top_route = respx.get(TOP_RATED_URL).mock(
            return_value=httpx.Response(200, json=TMDB_TOP_RATED_RESPONSE)
        )
        videos_route = respx.get(f"{TMDB_BASE_URL}/movie/278/videos").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_VIDEOS_RESPONSE)
        )

        result = await tmdb_service.get_top_rated_movie_with_videos()

        assert result["movie"]["id"] == 278
        assert result["movie"]["title"] == "Les Évadés"
        assert result["videos"] == TMDB_MOVIE_VIDEOS_RESPONSE["results"]
        assert _params(top_route) == {"page": "1", "language": "fr-FR"}
        assert _params(videos_route) == {"language": "fr-FR"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_ranking_returns_empty_dict(self, tmdb_service: TmdbApiService):
        respx.get(TOP_RATED_URL).mock(
            return_value=httpx.Response(200, json=TMDB_TOP_RATED_EMPTY_RESPONSE)
        )
        videos_route = respx.get(url__regex=r".*/movie/\d+/videos").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_VIDEOS_RESPONSE)
        )

        assert await tmdb_service.get_top_rated_movie_with_videos() == {}
        assert videos_route.call_count == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_top_rated_page_is_cached_but_videos_are_not(
        self, tmdb_service: TmdbApiService
    ):
        top_route = respx.get(TOP_RATED_URL).mock(
            return_value=httpx.Response(200, json=TMDB_TOP_RATED_RESPONSE)
        )
        videos_route = respx.get(f"{TMDB_BASE_URL}/movie/278/videos").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_VIDEOS_RESPONSE)
        )

        await tmdb_service.get_top_rated_movie_with_videos()
        await tmdb_service.get_top_rated_movie_with_videos()

        assert top_route.call_count == 1
        assert videos_route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_videos_failure_raises_upstream_error(
        self, tmdb_service: TmdbApiService
    ):
        respx.get(TOP_RATED_URL).mock(
            return_value=httpx.Response(200, json=TMDB_TOP_RATED_RESPONSE)
        )
        respx.get(f"{TMDB_BASE_URL}/movie/278/videos").mock(
            return_value=httpx.Response(500)
        )

        with pytest.raises(UpstreamFetchError) as exc_info:
            await tmdb_service.get_top_rated_movie_with_videos()

        assert exc_info.value.operation == "top_rated"
        assert str(exc_info.value) == "Impossible de recuperer les films les mieux notes."


class TestTopRatedPages:
    """Tests for _get_top_rated_movies() page caching."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_each_page_has_its_own_cache_entry(
        self, tmdb_service: TmdbApiService, api_cache: APICache
    ):
        route = respx.get(TOP_RATED_URL).mock(
            return_value=httpx.Response(200, json=TMDB_TOP_RATED_RESPONSE)
        )

        await tmdb_service._get_top_rated_movies(page=1)
        await tmdb_service._get_top_rated_movies(page=2)
        await tmdb_service._get_top_rated_movies(page=2)

        assert route.call_count == 2
        assert _params(route, 1)["page"] == "2"
        assert await api_cache.get("tmdb_top_rated_movies_page_2") is not None


class TestGetMoviesByGenre:
    """Tests for get_movies_by_genre()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_filters_by_genre(self, tmdb_service: TmdbApiService):
        route = respx.get(DISCOVER_URL).mock(
            return_value=httpx.Response(200, json=TMDB_DISCOVER_RESPONSE)
        )

        movies = await tmdb_service.get_movies_by_genre(28, page=2)

        assert [m["id"] for m in movies] == [27205, 155]
        assert _params(route) == {
            "page": "2",
            "sort_by": "popularity.desc",
            "include_adult": "false",
            "include_video": "false",
            "with_genres": "28",
            "language": "fr-FR",
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_without_genre_omits_filter(self, tmdb_service: TmdbApiService):
        route = respx.get(DISCOVER_URL).mock(
            return_value=httpx.Response(200, json=TMDB_DISCOVER_RESPONSE)
        )

        await tmdb_service.get_movies_by_genre(None)

        params = _params(route)
        assert "with_genres" not in params
        assert params["page"] == "1"

    @pytest.mark.asyncio
    @respx.mock
    async def test_is_never_cached(self, tmdb_service: TmdbApiService):
        route = respx.get(DISCOVER_URL).mock(
            return_value=httpx.Response(200, json=TMDB_DISCOVER_RESPONSE)
        )

        await tmdb_service.get_movies_by_genre(28)
        await tmdb_service.get_movies_by_genre(28)

        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_failure_raises_upstream_error(self, tmdb_service: TmdbApiService):
        respx.get(DISCOVER_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(UpstreamFetchError) as exc_info:
            await tmdb_service.get_movies_by_genre(28)

        assert exc_info.value.operation == "movies_by_genre"


class TestGetMovieDetails:
    """Tests for get_movie_details()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_whole_payload_with_videos(self, tmdb_service: TmdbApiService):
        route = respx.get(f"{TMDB_BASE_URL}/movie/27205").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
        )

        details = await tmdb_service.get_movie_details(27205)

        assert details == TMDB_MOVIE_DETAILS_RESPONSE
        assert details["videos"]["results"][0]["key"] == "YoHD9XEInc0"
        assert _params(route) == {"append_to_response": "videos", "language": "fr-FR"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_failure_raises_upstream_error(self, tmdb_service: TmdbApiService):
        respx.get(f"{TMDB_BASE_URL}/movie/1").mock(return_value=httpx.Response(404))

        with pytest.raises(UpstreamFetchError) as exc_info:
            await tmdb_service.get_movie_details(1)

        assert exc_info.value.operation == "movie_details"
        assert str(exc_info.value) == "Impossible de recuperer la fiche du film."


class TestSearchMovies:
    """Tests for search_movies()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_results(self, tmdb_service: TmdbApiService):
        route = respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=TMDB_SEARCH_RESPONSE)
        )

        results = await tmdb_service.search_movies("Avatar")

        assert [r["id"] for r in results] == [19995, 76600]
        assert _params(route) == {
            "query": "Avatar",
            "include_adult": "false",
            "language": "fr-FR",
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_match_returns_empty_list(self, tmdb_service: TmdbApiService):
        respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=TMDB_SEARCH_EMPTY_RESPONSE)
        )

        assert await tmdb_service.search_movies("zzzzzz") == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_token_raises_upstream_error(self, api_cache: APICache):
        client = ApiClient(token_provider=TokenProvider(bearer_token=None))
        service = TmdbApiService(
            api_client=client, api_url=TMDB_BASE_URL, language="fr-FR", cache=api_cache
        )
        route = respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=TMDB_SEARCH_RESPONSE)
        )

        with pytest.raises(UpstreamFetchError) as exc_info:
            await service.search_movies("Avatar")

        assert exc_info.value.operation == "search"
        assert isinstance(exc_info.value.__cause__, AuthConfigurationError)
        assert route.call_count == 0


class TestNullPayloadFields:
    """Un champ present mais null est traite comme absent."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_null_search_results_return_empty_list(
        self, tmdb_service: TmdbApiService
    ):
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(200, json={"results": None}))

        assert await tmdb_service.search_movies("Avatar") == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_null_discover_results_return_empty_list(
        self, tmdb_service: TmdbApiService
    ):
        respx.get(DISCOVER_URL).mock(return_value=httpx.Response(200, json={"results": None}))

        assert await tmdb_service.get_movies_by_genre(28) == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_null_genres_return_empty_list(self, tmdb_service: TmdbApiService):
        respx.get(GENRES_URL).mock(return_value=httpx.Response(200, json={"genres": None}))

        assert await tmdb_service.get_genres() == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_null_details_body_raises_upstream_error(
        self, tmdb_service: TmdbApiService
    ):
        respx.get(f"{TMDB_BASE_URL}/movie/550").mock(
            return_value=httpx.Response(
                200, content=b"null", headers={"Content-Type": "application/json"}
            )
        )

        with pytest.raises(UpstreamFetchError) as exc_info:
            await tmdb_service.get_movie_details(550)

        assert exc_info.value.operation == "movie_details"
