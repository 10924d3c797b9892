"""
Point d'entrée CLI de MovieDeck.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import asyncio
import json
from typing import Annotated, Any, Awaitable, Callable

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .adapters.api.errors import UpstreamFetchError
from .config import Settings
from .container import Container, close_resources
from .logging_config import configure_logging

app = typer.Typer(
    name="moviedeck",
    help="Catalogue de films adossé à l'API TMDB",
)
container = Container()
console = Console()

VERSION = "0.1.0"


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


def _run_catalog(call: Callable[[Any], Awaitable[Any]]) -> Any:
    """
    Exécute un appel de la facade TMDB puis libère les ressources.

    Une UpstreamFetchError est affichée et termine la commande avec le code 1.
    """

    async def runner() -> Any:
        try:
            return await call(container.tmdb_service())
        finally:
            await close_resources(container)

    try:
        return asyncio.run(runner())
    except UpstreamFetchError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration MovieDeck")
    typer.echo(f"API TMDB : {config.tmdb_api_url}")
    typer.echo(f"Langue : {config.tmdb_language}")
    typer.echo(f"Bearer token : {'configuré' if config.tmdb_enabled else 'absent'}")
    typer.echo(f"Tentatives max : {config.max_retries}")
    typer.echo(f"Délai initial : {config.initial_delay_ms} ms")
    typer.echo(f"Cache : {config.cache_dir or 'temporaire'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"MovieDeck v{VERSION}")


@app.command()
def genres() -> None:
    """Liste les genres de films."""
    result = _run_catalog(lambda catalog: catalog.get_genres())

    table = Table(title="Genres")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Nom")
    for genre in result:
        table.add_row(str(genre.get("id", "")), genre.get("name", ""))
    console.print(table)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Titre à rechercher")],
) -> None:
    """Recherche des films par titre."""
    if not container.validation_service().is_valid_search_query(query):
        console.print("[red]La requête de recherche ne peut pas être vide.[/red]")
        raise typer.Exit(code=2)

    results = _run_catalog(lambda catalog: catalog.search_movies(query.strip()))
    if not results:
        console.print("[yellow]Aucun résultat.[/yellow]")
        return

    table = Table(title=f"Résultats pour « {query.strip()} »")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Titre")
    table.add_column("Sortie")
    table.add_column("Note", justify="right")
    for movie in results:
        table.add_row(
            str(movie.get("id", "")),
            movie.get("title", ""),
            movie.get("release_date", "") or "",
            str(movie.get("vote_average", "")),
        )
    console.print(table)


@app.command()
def movie(
    movie_id: Annotated[int, typer.Argument(help="ID TMDB du film")],
) -> None:
    """Affiche la fiche JSON d'un film."""
    if not container.validation_service().is_valid_id(movie_id, "movie"):
        console.print("[red]ID de film invalide.[/red]")
        raise typer.Exit(code=2)

    details = _run_catalog(lambda catalog: catalog.get_movie_details(movie_id))
    console.print_json(json.dumps(details, ensure_ascii=False))


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur web MovieDeck."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("src.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.info("Démarrage de MovieDeck", version=VERSION)

    app()


if __name__ == "__main__":
    main()
