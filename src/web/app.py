"""
Application FastAPI de MovieDeck.

Initialise l'application web avec le Container DI, monte les routes JSON
et libère le client HTTP et le cache à l'arrêt.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..container import Container, close_resources
from .routes.api import router as api_router


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Construit l'application.

    Args :
        container : Container DI à utiliser (un nouveau par défaut, surchargeable en test)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Attache le Container DI au démarrage et ferme ses ressources à l'arrêt."""
        app.state.container = container if container is not None else Container()
        yield
        await close_resources(app.state.container)

    app = FastAPI(title="MovieDeck", lifespan=lifespan)
    app.include_router(api_router)
    return app


app = create_app()
