"""Main CLI application module."""

import typer

from .catalog_commands import init_db_command, list_services, seed, serve

# Create the main CLI application
app = typer.Typer(
    help="📚 Bookstore CLI - run the catalog services and jobs",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="serve")(serve)
app.command(name="seed")(seed)
app.command(name="init-db")(init_db_command)
app.command(name="services")(list_services)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
