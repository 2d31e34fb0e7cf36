"""Command-line interface for Jixify.

This module provides the CLI commands for running and managing
the Jixify backend.
"""

import asyncio
from typing import NoReturn

import click

from jixify import __version__
from jixify.core.config import get_settings
from jixify.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="Jixify")
def cli() -> None:
    """Jixify - account registration with email verification and a chat proxy.

    Settings are read from JIXIFY_* environment variables and .env.
    """


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the Jixify server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.is_sqlite:
        click.echo(
            "Error: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting Jixify server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "jixify.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Create the database tables.

    Use this only in development. In production, run the alembic migrations.
    """
    from jixify.infrastructure.persistence.database import DatabaseManager

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        db = DatabaseManager(settings)
        try:
            db.ensure_sqlite_directory()
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
@click.argument("email")
def resend_verification(email: str) -> None:
    """Send a fresh verification link to EMAIL."""
    from jixify.domain.exceptions import JixifyError
    from jixify.domain.services import AccountLifecycleService
    from jixify.infrastructure.auth import Argon2CredentialHasher, JWTService
    from jixify.infrastructure.persistence.database import DatabaseManager
    from jixify.infrastructure.persistence.repositories import AccountRepository
    from jixify.infrastructure.services.email_service import EmailService

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    async def resend() -> None:
        db = DatabaseManager(settings)
        try:
            async with db.session() as session:
                lifecycle = AccountLifecycleService(
                    store=AccountRepository(session),
                    tokens=JWTService.from_settings(settings),
                    notifier=EmailService.from_settings(settings),
                    hasher=Argon2CredentialHasher(settings),
                    settings=settings,
                )
                await lifecycle.resend_verification(email)
        finally:
            await db.disconnect()

    try:
        asyncio.run(resend())
    except JixifyError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error("Resend verification failed", email=email, error=e.message)
        raise SystemExit(1)

    click.echo(f"Verification email sent to {email}.")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `jixify` command is run
    or when using `python -m jixify`.
    """
    cli()


if __name__ == "__main__":
    main()
