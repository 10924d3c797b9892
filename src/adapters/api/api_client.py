"""
Client HTTP resilient pour les appels a l'API TMDB.

Execute un appel logique (methode, URL, parametres) avec:
- Authentification par bearer token (header Authorization)
- Invalidation et rechargement du token sur le premier 401, sans consommer
  de tentative
- Retry avec backoff exponentiel sur erreurs reseau et statuts != 200
- Echec immediat sur toute autre erreur

Usage:
    client = ApiClient(token_provider=TokenProvider(bearer_token="xxx"))
    data = await client.make_request(
        "GET", "https://api.themoviedb.org/3/genre/movie/list",
        params={"language": "fr-FR"},
    )
    await client.close()
"""

import asyncio
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx
from loguru import logger
from tenacity import RetryCallState, RetryError

from src.adapters.api.errors import (
    ApiRequestError,
    ApiUnavailableError,
    AuthConfigurationError,
    TransientTransportError,
)
from src.adapters.api.retry import (
    DEFAULT_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    AttemptOutcome,
    FatalFailure,
    RetryableFailure,
    RetryState,
    Success,
    build_retrying,
)
from src.core.ports.api_clients import ITokenProvider


class ApiClient:
    """
    Client API generique avec retry, backoff et rafraichissement du token.

    Attributes:
        DEFAULT_TIMEOUT: Timeout de transport par defaut (secondes)

    Example:
        client = ApiClient(token_provider=provider, max_retries=5)
        movie = await client.make_request("GET", f"{base}/movie/550")
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token_provider: ITokenProvider,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay_ms: int = DEFAULT_DELAY_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialise le client sans ouvrir de connexion.

        Args:
            token_provider: Source du bearer token
            timeout: Timeout de transport httpx en secondes
            max_retries: Nombre de tentatives par defaut de make_request
            initial_delay_ms: Delai initial par defaut entre deux tentatives
            sleep: Coroutine d'attente entre les tentatives
        """
        self._token_provider = token_provider
        self._timeout = timeout
        self._max_retries = max_retries
        self._initial_delay_ms = initial_delay_ms
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=False,
            )
        return self._client

    async def make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        max_retries: Optional[int] = None,
        initial_delay_ms: Optional[int] = None,
    ) -> Any:
        """
        Execute un appel logique et retourne le JSON decode.

        Args:
            method: Methode HTTP (GET, POST...)
            endpoint: URL complete de l'endpoint
            params: Parametres de la query string
            max_retries: Nombre maximum de tentatives (defaut du client si None)
            initial_delay_ms: Delai avant la 2e tentative (defaut du client si None)

        Returns:
            Corps JSON decode de la reponse 200

        Raises:
            ApiUnavailableError: Si toutes les tentatives ont echoue
            ApiRequestError: Sur erreur inattendue (non relancee)
            AuthConfigurationError: Si aucun bearer token n'est configure
        """
        query = dict(params or {})
        attempts = self._max_retries if max_retries is None else max_retries
        delay_ms = self._initial_delay_ms if initial_delay_ms is None else initial_delay_ms

        state = RetryState()
        outcome: Optional[AttemptOutcome] = None

        def log_backoff(retry_state: RetryCallState) -> None:
            sleep_ms = round(retry_state.next_action.sleep * 1000)
            logger.info(
                "Nouvelle tentative apres backoff",
                method=method,
                endpoint=endpoint,
                attempt=retry_state.attempt_number,
                delay_ms=sleep_ms,
            )
            state.delay_ms = sleep_ms

        retrying = build_retrying(
            max_attempts=attempts,
            initial_delay_ms=delay_ms,
            sleep=self._sleep,
            before_sleep=log_backoff,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    state.attempt = attempt.retry_state.attempt_number
                    outcome = await self._attempt(method, endpoint, query, state)
                if not attempt.retry_state.outcome.failed:
                    attempt.retry_state.set_result(outcome)
        except RetryError as exc:
            logger.critical(
                "Nombre maximum de tentatives atteint, abandon de la requete API",
                method=method,
                endpoint=endpoint,
                params=query,
                attempts=state.attempt,
            )
            last = exc.last_attempt.result()
            raise ApiUnavailableError("External API service is unavailable.") from last.error

        if isinstance(outcome, Success):
            return outcome.data

        raise ApiRequestError(
            "An unexpected error occurred during API communication."
        ) from outcome.error

    async def _attempt(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any],
        state: RetryState,
    ) -> AttemptOutcome:
        """
        Execute une tentative et classe son resultat.

        Le rafraichissement du token sur 401 se fait ici, dans la meme
        tentative: il ne consomme pas de tentative et n'avance pas le delai.
        """
        try:
            response = await self._send(method, endpoint, params, state)

            if response.status_code == 401 and not state.token_refreshed:
                logger.warning(
                    "401 Unauthorized recu, rechargement du bearer token",
                    endpoint=endpoint,
                    attempt=state.attempt,
                )
                self._token_provider.invalidate_token()
                state.token_refreshed = True
                response = await self._send(method, endpoint, params, state)

            if response.status_code == 200:
                data = response.json()
                self._log_successful_response(
                    response, data, method, endpoint, params, state.attempt
                )
                return Success(data)

            self._log_non_success_status(response, method, endpoint, params, state.attempt)
            return RetryableFailure(
                TransientTransportError(
                    f"API returned status code {response.status_code}.",
                    status_code=response.status_code,
                )
            )

        except AuthConfigurationError:
            raise
        except httpx.TransportError as e:
            self._log_exception(e, method, endpoint, params, state.attempt)
            return RetryableFailure(TransientTransportError(str(e) or type(e).__name__))
        except Exception as e:
            self._log_exception(e, method, endpoint, params, state.attempt)
            return FatalFailure(e)

    async def _send(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any],
        state: RetryState,
    ) -> httpx.Response:
        logger.info(
            "Tentative de requete API",
            method=method,
            endpoint=endpoint,
            params=params,
            attempt=state.attempt,
            delay_ms=state.delay_ms,
        )
        return await self._get_client().request(
            method,
            endpoint,
            params=params,
            headers=self._default_headers(),
        )

    def _default_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._token_provider.get_bearer_token()}",
        }

    @staticmethod
    def _log_successful_response(
        response: httpx.Response,
        data: Any,
        method: str,
        endpoint: str,
        params: dict[str, Any],
        attempt: int,
    ) -> None:
        keys = list(data.keys()) if isinstance(data, dict) else []
        logger.info(
            "Requete API reussie",
            status_code=response.status_code,
            response_data_keys=keys,
            method=method,
            endpoint=endpoint,
            params=params,
            attempt=attempt,
        )

    @staticmethod
    def _log_non_success_status(
        response: httpx.Response,
        method: str,
        endpoint: str,
        params: dict[str, Any],
        attempt: int,
    ) -> None:
        logger.warning(
            "L'API a retourne un statut different de 200",
            status_code=response.status_code,
            response_content=response.text[:500],
            method=method,
            endpoint=endpoint,
            params=params,
            attempt=attempt,
        )

    @staticmethod
    def _log_exception(
        error: Exception,
        method: str,
        endpoint: str,
        params: dict[str, Any],
        attempt: int,
    ) -> None:
        logger.error(
            "Erreur pendant la requete API",
            exception_message=str(error),
            exception_type=type(error).__name__,
            method=method,
            endpoint=endpoint,
            params=params,
            attempt=attempt,
        )

    async def close(self) -> None:
        """
        Ferme le client HTTP.

        Doit etre appele a la fin de l'utilisation pour liberer
        les ressources reseau.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
