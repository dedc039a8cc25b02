#!/usr/bin/env python3
"""
notelens command line.

    python run.py --action server --reload -v   serve the API with uvicorn
    python run.py --action health               import, config and store checks
    python run.py --action config               print every validated settings file
    python run.py --action info                 name, version and usage (default)

-v raises logging to INFO, -d to DEBUG; otherwise only warnings are shown.
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notelens.backend.core.logging import get_logger, setup_logging

ASGI_APP = "notelens.backend.main:app"
FALLBACK_HOST = "127.0.0.1"
FALLBACK_PORT = 8000

CONFIG_SECTIONS = (
    ("Application Settings", "application"),
    ("Logging Settings", "logging"),
    ("Feature Flags", "features"),
    ("AI Settings", "ai"),
    ("Upload Settings", "uploads"),
    ("Concurrency Settings", "concurrency"),
)


def validate_project_root() -> Path:
    """Exit with status 1 unless run.py sits next to the .project_root marker."""
    if (PROJECT_ROOT / ".project_root").exists():
        return PROJECT_ROOT
    click.secho("Error: .project_root not found. Run from project root.", fg="red", err=True)
    sys.exit(1)


def _log_level(verbose: bool, debug: bool) -> str:
    if debug:
        return "DEBUG"
    return "INFO" if verbose else "WARNING"


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "health", "config", "info"]),
    default="info",
    help="What to run.",
)
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Bind address (server only).")
@click.option("--port", default=None, type=int, help="Bind port (server only).")
@click.option("--reload", is_flag=True, help="Restart on code changes (server only).")
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """
    notelens Entry Point.

    Serve the API, check that the project loads, or print its configuration.

    Examples:

        python run.py --action server --reload --verbose

        python run.py --action health --debug
    """
    validate_project_root()

    level = _log_level(verbose, debug)
    setup_logging(level=level, format_type="console")
    logger = get_logger(__name__)
    logger.debug("Running action", extra={"action": action, "log_level": level})

    if action == "server":
        run_server(logger, host, port, reload)
    else:
        ACTIONS[action](logger)


def _bind_address(logger, host: str | None, port: int | None) -> tuple[str, int]:
    """CLI overrides first, then application.yaml, then localhost:8000."""
    from notelens.backend.core.config import get_app_config

    try:
        server = get_app_config().application.server
    except (FileNotFoundError, ValueError) as e:
        logger.warning("Server settings unavailable, using fallbacks", extra={"error": str(e)})
        return host or FALLBACK_HOST, port or FALLBACK_PORT
    return host or server.host, port or server.port


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Run uvicorn in a child process until it exits or Ctrl+C."""
    bind_host, bind_port = _bind_address(logger, host, port)

    cmd = [sys.executable, "-m", "uvicorn", ASGI_APP, "--host", bind_host, "--port", str(bind_port)]
    if reload:
        cmd.append("--reload")

    logger.info("Starting server", extra={"host": bind_host, "port": bind_port, "reload": reload})
    click.echo(f"Serving on http://{bind_host}:{bind_port} (Ctrl+C to stop)\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


# Health checks: each returns a short detail string or raises.


def _check_imports() -> str:
    import notelens.backend.core.config  # noqa: F401
    import notelens.backend.services  # noqa: F401

    return "config, services"


def _check_yaml() -> str:
    from notelens.backend.core.config import get_app_config

    return f"App: {get_app_config().application.name}"


def _check_ai_mode() -> str:
    from notelens.backend.core.config import get_settings

    if get_settings().has_gemini_key:
        return "live"
    return "guest (GEMINI_API_KEY not set)"


def _check_app() -> str:
    from notelens.backend.main import app

    return f"Title: {app.title}"


def _check_store() -> str:
    from notelens.backend.repositories.store import get_store

    return f"Backend: {get_store().backend_name}"


HEALTH_CHECKS: tuple[tuple[str, Callable[[], str]], ...] = (
    ("Core imports", _check_imports),
    ("YAML configuration", _check_yaml),
    ("AI analysis mode", _check_ai_mode),
    ("FastAPI application", _check_app),
    ("Entity store", _check_store),
)


def check_health(logger) -> None:
    """Run HEALTH_CHECKS, print a pass/fail table, exit 1 if any failed."""
    click.echo("Health Check Results:")
    click.echo("-" * 50)

    failures = 0
    for name, check in HEALTH_CHECKS:
        try:
            detail = check()
        except Exception as e:
            failures += 1
            logger.error("Health check failed", extra={"check": name, "error": str(e)})
            click.echo(f"  {click.style('FAIL', fg='red')}  {name} ({e})")
        else:
            logger.debug("Health check passed", extra={"check": name, "detail": detail})
            click.echo(f"  {click.style('PASS', fg='green')}  {name} ({detail})")

    click.echo("-" * 50)
    if failures:
        click.secho(f"\n{failures} check(s) failed.", fg="yellow")
        sys.exit(1)
    click.secho("\nAll checks passed!", fg="green")


def _echo_tree(values: dict[str, Any], depth: int = 1) -> None:
    pad = "  " * depth
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{pad}{key}:")
            _echo_tree(value, depth + 1)
        else:
            click.echo(f"{pad}{key}: {value}")


def show_config(logger) -> None:
    """Print each settings section as validated by its schema."""
    from notelens.backend.core.config import get_app_config

    try:
        app_config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.secho(f"Error loading configuration: {e}", fg="red")
        sys.exit(1)

    for title, attribute in CONFIG_SECTIONS:
        click.echo(f"\n{title}:")
        click.echo("-" * 40)
        _echo_tree(getattr(app_config, attribute).model_dump())
    logger.info("Configuration displayed")


def show_info(logger) -> None:
    """Print the application identity and the available actions."""
    from notelens.backend.core.config import get_app_config

    app = get_app_config().application
    click.echo(f"{app.name} {app.version}")
    click.echo(app.description)
    click.echo()
    click.echo("Available Actions:")
    for action, summary in (
        ("server", "Start the API server"),
        ("health", "Check application health"),
        ("config", "Display configuration"),
        ("info", "Show this information"),
    ):
        click.echo(f"  --action {action:<8} {summary}")
    click.echo()
    click.echo("Examples:")
    click.echo("  python run.py --action server --reload --verbose")
    click.echo("  python run.py --action health --debug")
    logger.debug("Info displayed")


ACTIONS: dict[str, Callable[[Any], None]] = {
    "health": check_health,
    "config": show_config,
    "info": show_info,
}


if __name__ == "__main__":
    main()
