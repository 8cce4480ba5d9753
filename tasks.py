import os

from invoke import Context, task

WINDOWS = os.name == "nt"
PROJECT_NAME = "nodule_texture"


@task
def dev(ctx: Context) -> None:
    """Install the package with test and dev dependencies."""
    ctx.run("pip install -e '.[test,dev]'", echo=True, pty=not WINDOWS)


@task
def ruff(ctx: Context, check_only: bool = False) -> None:
    """Run ruff linter and formatter.

    Args:
        check_only: Only check without modifying files (useful for CI)

    Examples:
        invoke ruff                 # Fix and format code
        invoke ruff --check-only    # Check only (CI mode)
    """
    if check_only:
        ctx.run("ruff check .", echo=True, pty=not WINDOWS)
        ctx.run("ruff format . --check", echo=True, pty=not WINDOWS)
    else:
        ctx.run("ruff check . --fix", echo=True, pty=not WINDOWS)
        ctx.run("ruff format .", echo=True, pty=not WINDOWS)


@task
def test(ctx: Context) -> None:
    """Run tests with coverage report."""
    ctx.run(f"coverage run --source={PROJECT_NAME} -m pytest tests/", echo=True, pty=not WINDOWS)
    ctx.run("coverage report -m -i", echo=True, pty=not WINDOWS)


@task
def test_fast(ctx: Context) -> None:
    """Run tests, skipping slow ones."""
    ctx.run("pytest tests/ -m 'not slow' -v", echo=True, pty=not WINDOWS)


@task(pre=[ruff])
def ci(ctx: Context) -> None:
    """Run lint, format check and tests, as CI does."""
    ctx.run("ruff check .", echo=True, pty=not WINDOWS)
    ctx.run("ruff format . --check", echo=True, pty=not WINDOWS)
    test(ctx)
