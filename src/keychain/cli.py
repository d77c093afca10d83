"""Command-line interface for the keychain service.

This module provides the CLI commands for running the server and
managing its database and signing key.
"""

import asyncio
import secrets
from typing import NoReturn

import click

from keychain.core.config import get_settings
from keychain.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="keychain")
def cli() -> None:
    """JWT Keychain - password and JWT authentication service.

    Settings are read from KEYCHAIN_* environment variables and .env.
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
    """Start the keychain server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting keychain server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "keychain.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command("init-db")
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Create the database tables.

    Intended for development. In production, use migrations instead.
    """
    from keychain.infrastructure.persistence.database import (
        DatabaseManager,
        close_database,
        init_database,
    )

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

    async def initialize():
        db = DatabaseManager(settings)
        try:
            await init_database(create_tables=True, db=db)
            click.echo("Database initialized successfully.")
        finally:
            await close_database(db)

    asyncio.run(initialize())


@cli.command("generate-secret")
@click.option(
    "--bytes",
    "num_bytes",
    type=click.IntRange(min=32),
    default=48,
    show_default=True,
    help="Number of random bytes in the key",
)
def generate_secret(num_bytes: int) -> None:
    """Print a random signing key suitable for KEYCHAIN_SECRET_KEY."""
    click.echo(secrets.token_urlsafe(num_bytes))


@cli.command()
def info() -> None:
    """Display keychain configuration."""
    settings = get_settings()

    click.echo(f"""
{settings.app_name} v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}

Security:
  Algorithm:    {settings.jwt_algorithm}
  Token TTL:    {settings.access_token_ttl_seconds} seconds
  Hash Cost:    {settings.password_hash_cost}
  Reveal Login: {settings.reveal_login_failure_reason}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
