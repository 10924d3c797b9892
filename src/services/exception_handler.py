"""
Traduction des exceptions en messages affichables.

Les erreurs de la facade TMDB (UpstreamFetchError) portent deja un message
sans detail technique: il est retourne tel quel. Toute autre exception est
journalisee en CRITICAL et remplacee par un message generique.
"""

from typing import Any, Optional

from loguru import logger

from src.adapters.api.errors import UpstreamFetchError

GENERIC_ERROR_MESSAGE = "Une erreur inattendue est survenue."


class ExceptionHandlerService:
    """
    Journalise une exception avec son contexte et retourne le message a afficher.

    Example:
        try:
            genres = await catalog.get_genres()
        except Exception as e:
            message = handler.handle_exception(e)
    """

    def handle_exception(
        self, exception: Exception, context: Optional[dict[str, Any]] = None
    ) -> str:
        """
        Args:
            exception: Exception capturee par la couche de presentation
            context: Informations de la requete (ex: {"movie_id": 550})

        Returns:
            Message sur pour l'utilisateur final
        """
        context = context or {}
        if isinstance(exception, UpstreamFetchError):
            logger.error(
                "Erreur de l'API TMDB",
                operation=exception.operation,
                exception=str(exception),
                **context,
            )
            return str(exception)

        logger.critical(
            "Erreur inattendue pendant un appel API",
            exception=str(exception),
            exception_type=type(exception).__name__,
            **context,
        )
        return GENERIC_ERROR_MESSAGE
