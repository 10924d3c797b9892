"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe MOVIEDECK_,
et peut optionnellement être fournie via un fichier .env.

Le bearer token TMDB est optionnel au démarrage : son absence n'est détectée
qu'au premier appel API (AuthConfigurationError).
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe MOVIEDECK_.
    Exemple : MOVIEDECK_TMDB_LANGUAGE=en-US

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="MOVIEDECK_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # API TMDB
    tmdb_api_url: str = Field(default="https://api.themoviedb.org/3")
    tmdb_language: str = Field(default="fr-FR")
    tmdb_bearer_token: Optional[str] = Field(default=None)

    # Client HTTP (timeout en secondes, délais en millisecondes)
    request_timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=1)
    initial_delay_ms: int = Field(default=1000, ge=0)

    # Cache (TTL en secondes, répertoire temporaire si non défini)
    genres_cache_ttl: int = Field(default=3600, ge=1)
    top_rated_cache_ttl: int = Field(default=1800, ge=1)
    cache_dir: Optional[Path] = Field(default=None)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = Field(default=Path("logs/moviedeck.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path | None) -> Path | None:
        """Étend ~ vers le répertoire home dans les chemins."""
        if v is None or v == "":
            return None
        return Path(v).expanduser()

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si le bearer token TMDB est configuré."""
        return bool(self.tmdb_bearer_token and self.tmdb_bearer_token.strip())
