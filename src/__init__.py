"""
MovieDeck - Catalogue de films adossé à l'API TMDB.

Ce package fournit un client HTTP résilient pour TMDB (bearer token,
retry avec backoff exponentiel, cache read-through) et une fine couche
web/CLI qui l'expose.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Ports (interfaces abstraites)
- services/ : Validation des entrées et traduction des erreurs
- adapters/ : Client TMDB (token, retry, cache, facade)
- web/ : API JSON FastAPI
"""
