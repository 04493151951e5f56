"""Command-line entry point: run the server and manage persons."""

import typer
from loguru import logger

from caretrek.cli.person_commands import persons_app
from caretrek.cli.utils import console
from caretrek.core.services import DbManageService, DbSessionService
from caretrek.runtime.context import get_config

app = typer.Typer(
    name="caretrek",
    help="CareTrek backend - run the server and manage persons",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
app.add_typer(persons_app, name="persons")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address; defaults to app.host"),
    port: int | None = typer.Option(None, "--port", help="Port; defaults to app.port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """
    🚀 Start the application server.

    Runs until the process is stopped.
    """
    import uvicorn

    config = get_config()
    logger.info("Serving {} on {}:{}", config.app.name, host or config.app.host, port or config.app.port)
    uvicorn.run(
        "caretrek.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=reload,
        access_log=False,  # request logs come from our middleware
    )


@app.command("init-db")
def init_db(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables first"),
) -> None:
    """🗄️ Create the database tables."""
    db = DbSessionService()
    manager = DbManageService(db.engine)
    try:
        if drop:
            manager.drop_all()
        manager.create_all()
    finally:
        db.dispose()
    console.print("[green]✅ Database initialized[/green]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
