"""
Detenteur du bearer token TMDB.

Le token est charge paresseusement au premier acces, invalide sur 401 puis
recharge au prochain acces. La source est fournie a la construction: par
defaut la valeur statique de la configuration, ou un loader pour suivre une
configuration rechargee a chaud.
"""

import threading
from typing import Callable, Optional

from loguru import logger

from src.adapters.api.errors import AuthConfigurationError
from src.core.ports.api_clients import ITokenProvider


class TokenProvider(ITokenProvider):
    """
    Fournit le bearer token courant aux requetes sortantes.

    Example:
        provider = TokenProvider(bearer_token="eyJhbGciOi...")
        headers = {"Authorization": f"Bearer {provider.get_bearer_token()}"}
        provider.invalidate_token()  # apres un 401
    """

    def __init__(
        self,
        bearer_token: Optional[str] = None,
        loader: Optional[Callable[[], Optional[str]]] = None,
    ) -> None:
        """
        Initialise le detenteur sans charger le token.

        Args:
            bearer_token: Token statique issu de la configuration
            loader: Source alternative appelee a chaque (re)chargement
        """
        self._configured_token = bearer_token
        self._loader = loader if loader is not None else self._static_token
        self._token: Optional[str] = None
        self._lock = threading.Lock()

    def get_bearer_token(self) -> str:
        """
        Retourne le token courant, le recharge s'il a ete invalide.

        Raises:
            AuthConfigurationError: Si la source ne fournit aucun token
        """
        with self._lock:
            if self._token is None:
                self._token = self._load_token()
            return self._token

    def invalidate_token(self) -> None:
        """Oublie le token courant, le prochain acces le rechargera."""
        with self._lock:
            self._token = None

    def _static_token(self) -> Optional[str]:
        return self._configured_token

    def _load_token(self) -> str:
        token = self._loader()
        if token is None or not token.strip():
            logger.error("Bearer token TMDB introuvable dans la configuration")
            raise AuthConfigurationError("Bearer token is not set.")
        return token.strip()
