"""
Service de validation des entrees de l'utilisateur.

Predicats purs verifies avant tout appel a l'API:
- ID (film, genre...) strictement positif
- Requete de recherche non vide apres suppression des espaces

Les rejets sont journalises en WARNING.
"""

from loguru import logger


class ValidationService:
    """
    Validation des identifiants et requetes recus par la couche web.

    Example:
        validator = ValidationService()
        if not validator.is_valid_id(movie_id, "movie"):
            return {"error": "ID invalide"}
    """

    def is_valid_id(self, entity_id: int, entity_type: str) -> bool:
        """
        Verifie qu'un identifiant est strictement positif.

        Args:
            entity_id: Identifiant a verifier
            entity_type: Nature de l'identifiant (ex: "movie"), pour les logs

        Returns:
            True si entity_id > 0, False sinon
        """
        if entity_id <= 0:
            logger.warning(f"ID {entity_type} invalide recu", **{f"{entity_type}_id": entity_id})
            return False
        return True

    def is_valid_search_query(self, query: str) -> bool:
        """
        Verifie qu'une requete de recherche n'est pas vide.

        Args:
            query: Texte saisi par l'utilisateur

        Returns:
            True si la requete contient au moins un caractere non blanc
        """
        if not query.strip():
            logger.warning("Requete de recherche vide recue")
            return False
        return True
