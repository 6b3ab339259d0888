#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the to-do Mini App backend. All functionality is
accessible through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action init-db
    python run.py --action health --debug
    python run.py --action config
    python run.py --action test --test-type unit
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from todo_miniapp.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "init-db", "purge-sessions", "health", "config", "test", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--host",
    default=None,
    help="Server host (for server action).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Server port (for server action).",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (for server action).",
)
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run (for test action).",
)
@click.option(
    "--coverage",
    is_flag=True,
    help="Run tests with coverage (for test action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
    coverage: bool,
) -> None:
    """
    To-Do Mini App Entry Point.

    Run the API server, prepare the database, check health, view
    configuration, or run tests.

    Examples:

        # Create tables in the configured database
        python run.py --action init-db

        # Start development server
        python run.py --action server --reload --verbose

        # Run unit tests with coverage
        python run.py --action test --test-type unit --coverage
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "init-db":
        init_database(logger)
    elif action == "purge-sessions":
        purge_sessions(logger)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    elif action == "test":
        run_tests(logger, test_type, coverage)
    elif action == "info":
        show_info(logger)


def _open_database():
    from todo_miniapp.core.config import get_app_config, get_database_url
    from todo_miniapp.core.database import Database

    return Database.from_config(get_database_url(), get_app_config().database)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server with uvicorn."""
    from todo_miniapp.core.config import get_server_address

    default_host, default_port = get_server_address()
    server_host = host or default_host
    server_port = port or default_port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "todo_miniapp.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def init_database(logger) -> None:
    """Create the users, tasks and sessions tables if they are missing."""

    async def _create() -> None:
        database = _open_database()
        try:
            await database.create_all()
        finally:
            await database.dispose()

    try:
        asyncio.run(_create())
    except Exception as e:
        logger.error("Database initialization failed", extra={"error": str(e)})
        click.echo(click.style(f"Database initialization failed: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style("Database initialized successfully!", fg="green"))


def purge_sessions(logger) -> None:
    """Delete expired login sessions."""
    from todo_miniapp.services.session import SessionStore

    async def _purge() -> int:
        database = _open_database()
        try:
            async with database.session() as session:
                removed = await SessionStore(session).purge_expired()
                await session.commit()
                return removed
        finally:
            await database.dispose()

    try:
        removed = asyncio.run(_purge())
    except Exception as e:
        logger.error("Session purge failed", extra={"error": str(e)})
        click.echo(click.style(f"Session purge failed: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Removed {removed} expired session(s)")


def check_health(logger) -> None:
    """Check configuration, secrets and database connectivity."""
    click.echo("Checking application health...\n")

    checks = []

    try:
        from todo_miniapp.core.config import get_app_config
        app_config = get_app_config()
        checks.append(("YAML configuration", True, f"App: {app_config.application.name}"))
        logger.debug("Configuration loaded", extra={"app_name": app_config.application.name})
    except Exception as e:
        checks.append(("YAML configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    try:
        from todo_miniapp.core.config import get_settings
        has_token = bool(get_settings().telegram_bot_token)
        checks.append(("Telegram bot token", has_token, None if has_token else "TELEGRAM_BOT_TOKEN is empty"))
    except Exception as e:
        checks.append(("Telegram bot token", False, str(e)))
        logger.error("Settings failed", extra={"error": str(e)})

    async def _ping() -> None:
        database = _open_database()
        try:
            await database.ping()
        finally:
            await database.dispose()

    try:
        asyncio.run(_ping())
        checks.append(("Database", True, None))
    except Exception as e:
        checks.append(("Database", False, str(e)))
        logger.error("Database check failed", extra={"error": str(e)})

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        if not passed:
            all_passed = False

    click.echo("-" * 50)

    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        sys.exit(1)


def show_config(logger) -> None:
    """Display loaded configuration. Secrets are never printed."""
    click.echo("Application Configuration:\n")

    try:
        from todo_miniapp.core.config import get_app_config

        app_config = get_app_config()
        sections = {
            "Application": app_config.application,
            "Database": app_config.database,
            "Logging": app_config.logging,
            "Feature Flags": app_config.features,
            "Security": app_config.security,
        }

        for title, section in sections.items():
            click.echo(f"{title} Settings (from YAML):")
            click.echo("-" * 40)
            for key, value in section.model_dump().items():
                if isinstance(value, dict):
                    click.echo(f"  {key}:")
                    for k, v in value.items():
                        click.echo(f"    {k}: {v}")
                else:
                    click.echo(f"  {key}: {value}")
            click.echo()

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def run_tests(logger, test_type: str, coverage: bool) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})

    cmd = [sys.executable, "-m", "pytest"]

    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")

    cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=todo_miniapp", "--cov-report=term-missing"])

    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd)
        sys.exit(result.returncode)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)


def show_info(logger) -> None:
    """Display application information."""
    from todo_miniapp.core.config import get_app_config

    app_settings = get_app_config().application
    click.echo(app_settings.name)
    click.echo("=" * 40)
    click.echo(f"Version: {app_settings.version}")
    click.echo(f"Description: {app_settings.description}")
    click.echo(f"Environment: {app_settings.environment}")

    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server          Start the API server")
    click.echo("  --action init-db         Create database tables")
    click.echo("  --action purge-sessions  Delete expired sessions")
    click.echo("  --action health          Check configuration and database")
    click.echo("  --action config          Display configuration")
    click.echo("  --action test            Run test suite")
    click.echo("  --action info            Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
