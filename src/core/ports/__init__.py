"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports client API :
- ITokenProvider : Source du bearer token
- IResponseCache : Cache read-through avec TTL
- IMovieCatalog : Facade des opérations films
"""

from src.core.ports.api_clients import (
    IMovieCatalog,
    IResponseCache,
    ITokenProvider,
)

__all__ = [
    "IMovieCatalog",
    "IResponseCache",
    "ITokenProvider",
]
