"""
Hierarchie des erreurs du client TMDB.

Chaque couche traduit les erreurs de la couche inferieure en une erreur plus
grossiere:
- TokenProvider leve AuthConfigurationError
- ApiClient leve ApiUnavailableError (tentatives epuisees) ou ApiRequestError
  (erreur inattendue, sans retry)
- TmdbApiService convertit tout en UpstreamFetchError, seule erreur affichable
"""

from typing import Optional


class TmdbError(Exception):
    """Erreur de base pour tous les appels a l'API TMDB."""


class AuthConfigurationError(TmdbError):
    """Le bearer token est absent ou vide au moment du chargement."""


class TransientTransportError(TmdbError):
    """
    Echec recuperable d'une tentative (reseau, redirection, 4xx/5xx).

    Ne sort jamais d'ApiClient: elle decrit la raison d'un RetryableFailure.

    Attributes:
        status_code: Code HTTP recu, ou None pour une erreur reseau
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ApiError(TmdbError):
    """
    Erreur levee par ApiClient.make_request.

    Attributes:
        status_code: Code HTTP equivalent expose a l'appelant
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ApiUnavailableError(ApiError):
    """Toutes les tentatives ont echoue: l'API externe est indisponible."""

    status_code = 503


class ApiRequestError(ApiError):
    """Erreur inattendue pendant une tentative, non relancee."""

    status_code = 500


class UpstreamFetchError(TmdbError):
    """
    Erreur de la facade TMDB, avec un message sans detail technique.

    La cause originale reste disponible via __cause__ pour les logs.

    Attributes:
        operation: Nom de l'operation en echec (ex: "genres", "search")
    """

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(message)
