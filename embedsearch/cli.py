"""embedsearch CLI application with Typer."""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from embedsearch import __version__
from embedsearch.bootstrap import bootstrap_application
from embedsearch.config import get_settings, set_settings
from embedsearch.errors import VectorSearchError
from embedsearch.utils.deterministic import verify_determinism

app = typer.Typer(
    name="embedsearch",
    help="Nearest-neighbour document search over quantized text embeddings",
    add_completion=True,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"embedsearch version {__version__}")
        raise typer.Exit()


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    online: Annotated[
        bool,
        typer.Option("--online", help="Enable online features (remote embedders)"),
    ] = False,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Override data directory"),
    ] = None,
) -> None:
    """embedsearch - quantized embedding similarity search."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        raise _fail(f"Invalid configuration: {exc}") from exc

    # Update settings with CLI flags
    if online:
        settings.online = True
    if data_dir:
        settings.data_dir = data_dir
    set_settings(settings)


@app.command("seed")
def seed(
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Delete existing documents before seeding"),
    ] = False,
) -> None:
    """Store the sample documents (titles are embedded)."""
    try:
        with bootstrap_application() as container:
            if reset:
                container.document_store.clear()
            document_ids = container.document_search.seed()
            total = container.document_store.count()
    except (VectorSearchError, RuntimeError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    typer.secho(
        f"Seeded {len(document_ids)} documents ({total} stored)",
        fg=typer.colors.GREEN,
    )


@app.command("add")
def add(
    title: Annotated[str, typer.Argument(help="Document title (embedded for search)")],
    body: Annotated[
        str,
        typer.Option("--body", "-b", help="Document body text"),
    ] = "",
    owner: Annotated[
        int | None,
        typer.Option("--owner", help="Owner id (defaults to EMBEDSEARCH_DEFAULT_OWNER_ID)"),
    ] = None,
) -> None:
    """Embed and store a single document."""
    if not title.strip():
        raise _fail("Title cannot be empty")

    try:
        with bootstrap_application() as container:
            owner_id = owner if owner is not None else container.settings.default_owner_id
            document_id = container.document_search.add_document(
                owner_id=owner_id, title=title, body=body
            )
    except (VectorSearchError, RuntimeError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    typer.echo(f"Stored document {document_id} for owner {owner_id}")


@app.command("search")
def search(
    query: Annotated[
        str | None,
        typer.Argument(help="Search text (prompted for when omitted)"),
    ] = None,
    owner: Annotated[
        int | None,
        typer.Option("--owner", help="Owner whose documents are searched"),
    ] = None,
    all_owners: Annotated[
        bool,
        typer.Option("--all-owners", help="Search every owner's documents"),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Maximum results to return", min=1),
    ] = None,
    min_score: Annotated[
        int | None,
        typer.Option("--min-score", help="Ignore documents scoring below this value"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """Find the stored documents most similar to QUERY."""
    if query is None:
        query = typer.prompt("Enter search text", default="", show_default=False)

    try:
        with bootstrap_application() as container:
            settings = container.settings
            owner_id: int | None = None
            if not all_owners:
                owner_id = owner if owner is not None else settings.default_owner_id
            max_results = limit if limit is not None else settings.default_max_results
            matches = container.document_search.search(
                query,
                owner_id=owner_id,
                max_results=max_results,
                min_score=min_score,
            )
    except (VectorSearchError, RuntimeError, ValueError) as exc:
        raise _fail(str(exc)) from exc

    if json_output:
        from embedsearch.utils.cli_output import json_response

        typer.echo(
            json_response(
                "search_results",
                1,
                query=query,
                owner_id=owner_id,
                max_results=max_results,
                total_hits=len(matches),
                results=[match.model_dump(mode="json") for match in matches],
            )
        )
        return

    if not matches:
        typer.secho("No matching documents", fg=typer.colors.YELLOW)
        return

    typer.echo("\nMatching Documents:")
    for match in matches:
        typer.echo(f"- {match.title} (score: {match.score}, cosine: {match.cosine:.3f})")


@app.command("doctor")
def doctor() -> None:
    """Run health checks and report configuration status."""
    checks: list[tuple[bool, str]] = []

    settings = get_settings()
    try:
        data_dir = settings.get_data_dir()
        checks.append((data_dir.is_dir(), f"Data directory: {data_dir}"))
    except OSError as exc:
        checks.append((False, f"Failed to resolve data directory: {exc}"))

    try:
        with bootstrap_application(settings) as container:
            checks.append(
                (
                    True,
                    f"Embedder: {settings.embedder} ({container.embedder.dimension} dims, "
                    f"{settings.quantization} quantization)",
                )
            )
            sample = "embedsearch doctor sample"
            stable = verify_determinism(lambda: container.embedder.embed(sample))
            checks.append(
                (
                    stable,
                    "Embedder output is deterministic"
                    if stable
                    else "Embedder returned different vectors for the same text",
                )
            )
            checks.append(
                (
                    True,
                    f"Document store: {settings.get_database_path()} "
                    f"({container.document_store.count()} documents)",
                )
            )
    except (VectorSearchError, RuntimeError, ValueError) as exc:
        checks.append((False, f"Bootstrap failed: {exc}"))

    all_passed = all(passed for passed, _ in checks)
    for passed, message in checks:
        icon = "✓" if passed else "✗"
        color = typer.colors.GREEN if passed else typer.colors.RED
        typer.secho(f"  {icon} {message}", fg=color)

    if not all_passed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
