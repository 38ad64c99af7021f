"""Invoke tasks for CardBox application management."""

import sys
from pathlib import Path

from invoke import task
from invoke.context import Context

from cardbox.config import settings


@task
def start(
    ctx: Context, host: str | None = None, port: int | None = None, reload: bool = False
) -> None:
    """Start the CardBox FastAPI server.

    Args:
        ctx: Invoke context
        host: Host to bind to (default: server.host from config)
        port: Port to bind to (default: server.port from config)
        reload: Enable auto-reload for development (single worker)
    """
    host = host or settings.host
    port = port or settings.port
    cmd = f"uv run uvicorn cardbox.main:app --host {host} --port {port}"
    if reload:
        cmd += " --reload"
    elif settings.workers > 1:
        cmd += f" --workers {settings.workers}"

    try:
        ctx.run(cmd, pty=True)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "uv run pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=cardbox --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task
def seed(ctx: Context, dry_run: bool = False) -> None:
    """Seed categories, statuses, grading companies and conditions.

    Args:
        ctx: Invoke context
        dry_run: Show what would be written without touching the database
    """
    cmd = "uv run python -m scripts.seed_reference_data"
    if dry_run:
        cmd += " --dry-run"
    ctx.run(cmd)


@task
def clean(ctx: Context, logs: bool = False) -> None:
    """Clean up temporary files.

    Args:
        ctx: Invoke context
        logs: Also remove server log files
    """
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    if logs:
        for log_file in Path("data").glob("*.log"):
            log_file.unlink()
            print(f"Removed {log_file}")

    print("Cleanup complete")
