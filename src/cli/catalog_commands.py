"""Commands that run the catalog services and their one-shot jobs."""

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.bookstore.api.http.services import SERVICE_PROFILES, get_profile
from src.bookstore.core.errors import BookstoreError
from src.bookstore.runtime.context import get_config
from src.bookstore.runtime.seed import SEED_SERVICE, run_seed

console = Console()


def serve(
    service: str = typer.Argument(..., help="Service profile to run, e.g. books-get"),
    host: str | None = typer.Option(None, help="Host to bind; defaults to app.host"),
    port: int | None = typer.Option(
        None, help="Port to bind; defaults to the service's configured port"
    ),
) -> None:
    """
    🚀 Run one service profile with uvicorn.

    Startup blocks until the store answers or the service's startup policy
    gives up.
    """
    import uvicorn

    from src.bookstore.api.http.app import create_app

    try:
        get_profile(service)
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(2)

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.service(service).port

    console.print(
        Panel.fit(
            f"[bold green]Starting {service}[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Listening on:[/blue] http://{bind_host}:{bind_port}")

    uvicorn.run(
        create_app(service, config),
        host=bind_host,
        port=bind_port,
        access_log=False,  # Access logging happens in the request middleware
    )


def seed() -> None:
    """
    🌱 Populate the collection with the canonical books.

    Safe to run repeatedly: books that are already there are skipped.
    """
    from src.bookstore.api.utils.app_startup import configure_logging

    config = get_config()
    configure_logging(config)

    try:
        report = run_seed(config)
    except BookstoreError as e:
        console.print(f"[red]❌ Seeding failed: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Seed results")
    table.add_column("Book", style="cyan")
    table.add_column("Result")
    for external_id in report.inserted:
        table.add_row(external_id, "[green]inserted[/green]")
    for external_id in report.skipped:
        table.add_row(external_id, "[dim]already present[/dim]")

    console.print(table)
    console.print(
        f"[green]✅ {len(report.inserted)} inserted, "
        f"{len(report.skipped)} already present[/green]"
    )


def init_db_command() -> None:
    """🗄️  Create the books collection if it does not exist."""
    from src.bookstore.api.utils.app_startup import configure_logging
    from src.bookstore.runtime.init_db import init_db

    config = get_config()
    configure_logging(config)

    try:
        init_db(config)
    except BookstoreError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    console.print("[green]✅ Books collection ready[/green]")


def list_services() -> None:
    """📋 List the service profiles and their startup policies."""
    config = get_config()

    table = Table(title="Service profiles")
    table.add_column("Service", style="cyan")
    table.add_column("Capabilities")
    table.add_column("Port", justify="right")
    table.add_column("Startup")

    for name, profile in SERVICE_PROFILES.items():
        service_config = config.service(name)
        policy = service_config.startup
        table.add_row(
            name,
            ", ".join(sorted(profile.capabilities)),
            str(service_config.port),
            _describe_policy(policy.mode, policy.attempts, policy.delay_seconds)
            if profile.needs_storage
            else "[dim]no storage[/dim]",
        )

    seeder = config.service(SEED_SERVICE).startup
    table.add_row(
        SEED_SERVICE,
        "seed (job)",
        "-",
        _describe_policy(seeder.mode, seeder.attempts, seeder.delay_seconds),
    )
    console.print(table)


def _describe_policy(mode: str, attempts: int, delay_seconds: float) -> str:
    return f"{mode}, {attempts} attempts, {delay_seconds:g}s delay"
