"""
Services applicatifs utilises par les couches web et CLI.

- ValidationService : Verification des entrees avant tout appel TMDB
- ExceptionHandlerService : Traduction des erreurs en messages affichables

Les services dependent des ports de core/ et des erreurs de la facade TMDB,
jamais du client HTTP directement.
"""
