"""
Couche domaine (core).

Contient les ports (interfaces abstraites) entre la couche web et les
adaptateurs de l'API TMDB. Cette couche n'a AUCUNE dépendance vers
l'infrastructure (httpx, diskcache, FastAPI).
"""
