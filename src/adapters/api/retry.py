"""
Politique de retry avec backoff exponentiel pour l'API TMDB.

Chaque tentative produit un resultat etiquete (Success, RetryableFailure,
FatalFailure). La boucle tenacity ne relance que sur RetryableFailure:
les exceptions ne pilotent pas la decision de retry.

Calendrier par defaut: 1000, 2000, 4000 ms entre les tentatives,
plafonne a MAX_BACKOFF_DELAY_MS.

Usage:
    retrying = build_retrying(max_attempts=3, initial_delay_ms=1000)
    async for attempt in retrying:
        with attempt:
            outcome = await do_attempt()
        if not attempt.retry_state.outcome.failed:
            attempt.retry_state.set_result(outcome)
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from src.adapters.api.errors import TransientTransportError

DEFAULT_MAX_RETRIES = 3
DEFAULT_DELAY_MS = 1000
MAX_BACKOFF_DELAY_MS = 8000


@dataclass
class RetryState:
    """
    Etat d'un appel logique, limite a une invocation de make_request.

    Attributes:
        attempt: Numero de la tentative courante (1-based)
        delay_ms: Delai applique avant la tentative courante (0 pour la premiere)
        token_refreshed: True si le token a deja ete invalide (au plus une fois)
    """

    attempt: int = 0
    delay_ms: int = 0
    token_refreshed: bool = False


@dataclass(frozen=True)
class Success:
    """Reponse 200 decodee."""

    data: Any


@dataclass(frozen=True)
class RetryableFailure:
    """Echec recuperable: erreur reseau ou statut different de 200."""

    error: TransientTransportError

    @property
    def status_code(self) -> Optional[int]:
        return self.error.status_code


@dataclass(frozen=True)
class FatalFailure:
    """Erreur inattendue, jamais relancee."""

    error: BaseException


AttemptOutcome = Union[Success, RetryableFailure, FatalFailure]


def is_retryable(outcome: AttemptOutcome) -> bool:
    """Predicat tenacity: seul un RetryableFailure declenche un retry."""
    return isinstance(outcome, RetryableFailure)


def build_retrying(
    max_attempts: int = DEFAULT_MAX_RETRIES,
    initial_delay_ms: int = DEFAULT_DELAY_MS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    before_sleep: Optional[Callable[[RetryCallState], None]] = None,
) -> AsyncRetrying:
    """
    Construit la boucle de retry pour un appel logique.

    wait_exponential donne initial, 2*initial, 4*initial... plafonne a
    MAX_BACKOFF_DELAY_MS. Sans reraise, l'epuisement leve tenacity.RetryError
    dont last_attempt porte le dernier RetryableFailure.

    Args:
        max_attempts: Nombre maximum de tentatives (>= 1)
        initial_delay_ms: Delai avant la 2e tentative, en millisecondes
        sleep: Coroutine d'attente (injectable pour les tests)
        before_sleep: Callback appele avant chaque attente

    Returns:
        AsyncRetrying a iterer avec `async for`

    Raises:
        ValueError: Si max_attempts < 1 ou initial_delay_ms < 0
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if initial_delay_ms < 0:
        raise ValueError(f"initial_delay_ms must be >= 0, got {initial_delay_ms}")

    kwargs = {}
    if before_sleep is not None:
        kwargs["before_sleep"] = before_sleep

    return AsyncRetrying(
        sleep=sleep,
        retry=retry_if_result(is_retryable),
        wait=wait_exponential(
            multiplier=initial_delay_ms / 1000,
            max=MAX_BACKOFF_DELAY_MS / 1000,
        ),
        stop=stop_after_attempt(max_attempts),
        **kwargs,
    )
