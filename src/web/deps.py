"""
Dépendances partagées de l'application web.

Fournit aux routes les services du Container DI stocké dans app.state
(initialisé par le lifespan de l'application).
"""

from fastapi import Request

from ..container import Container
from ..core.ports.api_clients import IMovieCatalog
from ..services.exception_handler import ExceptionHandlerService
from ..services.validation import ValidationService


def get_container(request: Request) -> Container:
    """Container DI de l'application courante."""
    return request.app.state.container


def get_catalog(request: Request) -> IMovieCatalog:
    """Facade TMDB partagée."""
    return get_container(request).tmdb_service()


def get_validator(request: Request) -> ValidationService:
    return get_container(request).validation_service()


def get_exception_handler(request: Request) -> ExceptionHandlerService:
    return get_container(request).exception_handler()
