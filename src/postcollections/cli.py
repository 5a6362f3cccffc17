"""Command-line interface for postcollections.

This module provides CLI commands for inspecting configuration, preparing
the database, creating and showing collections and trying out filters.
"""

import json
import sys
from typing import NoReturn

import click

from postcollections.core.config import get_settings
from postcollections.core.filters import FilterExpressionEvaluator, FilterSyntaxError
from postcollections.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="postcollections")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides environment)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """postcollections - manual and automatic post collections."""
    settings = get_settings()
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level})
    ctx.obj = settings


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
@click.pass_obj
def init_db(settings, force: bool) -> None:
    """Create the collections tables.

    Use this only in development. In production, use migrations instead.
    """
    import asyncio

    from postcollections.infrastructure.persistence.database import (
        close_database,
        init_database,
    )

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
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await close_database()

    asyncio.run(initialize())


async def _with_service(settings, operation):
    """Run an async operation against a CollectionService in one transaction."""
    from postcollections.domain.services.collection_service import CollectionService
    from postcollections.infrastructure.persistence.database import DatabaseManager
    from postcollections.infrastructure.persistence.repositories import (
        CollectionRepository,
    )

    db = DatabaseManager(settings)
    try:
        async with db.session() as session:
            service = CollectionService(CollectionRepository(session), settings=settings)
            return await operation(service)
    finally:
        await db.disconnect()


@cli.command()
@click.argument("title")
@click.option("--slug", default=None, help="Slug (derived from the title if omitted)")
@click.option("--description", default=None, help="Collection description")
@click.option(
    "--filter",
    "filter_expression",
    default=None,
    help="Filter expression; makes the collection automatic",
)
@click.option("--protected", is_flag=True, help="Create a collection that cannot be deleted")
@click.pass_obj
def create(
    settings,
    title: str,
    slug: str | None,
    description: str | None,
    filter_expression: str | None,
    protected: bool,
) -> None:
    """Create a collection titled TITLE and print it as JSON."""
    import asyncio

    from postcollections.core.filters import FilterError
    from postcollections.domain.exceptions import CollectionError

    configure_logging(settings)

    data = {
        "title": title,
        "slug": slug,
        "description": description,
        "type": "automatic" if filter_expression else "manual",
        "filter": filter_expression,
        "deletable": not protected,
    }

    try:
        collection = asyncio.run(
            _with_service(settings, lambda service: service.create_collection(data))
        )
    except (CollectionError, FilterError) as e:
        click.echo(f"ERROR: {e}", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(collection.to_json(), indent=2))


@cli.command()
@click.argument("slug")
@click.pass_obj
def show(settings, slug: str) -> None:
    """Print the collection with SLUG as JSON."""
    import asyncio

    configure_logging(settings)

    collection = asyncio.run(
        _with_service(settings, lambda service: service.get_collection_by_slug(slug))
    )
    if collection is None:
        click.echo(f"ERROR: No collection with slug '{slug}'", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(collection.to_json(), indent=2))


@cli.command()
@click.argument("expression")
@click.argument("posts_file", type=click.File("r"), default="-")
@click.pass_obj
def check_filter(settings, expression: str, posts_file) -> None:
    """Print the IDs of posts matching a filter EXPRESSION.

    POSTS_FILE is a JSON array of post objects (stdin by default).
    """
    configure_logging(settings)
    logger = get_logger(__name__)
    evaluator = FilterExpressionEvaluator(cache_size=settings.filter_cache_size)

    try:
        evaluator.validate(expression)
    except FilterSyntaxError as e:
        click.echo(f"ERROR: {e}", err=True)
        raise SystemExit(1)

    try:
        posts = json.load(posts_file)
    except json.JSONDecodeError as e:
        click.echo(f"ERROR: Invalid JSON: {e}", err=True)
        raise SystemExit(1)

    if not isinstance(posts, list):
        click.echo("ERROR: Expected a JSON array of posts", err=True)
        raise SystemExit(1)

    matched = [post for post in posts if evaluator.matches(expression, post)]
    logger.debug("Filter checked", expression=expression, total=len(posts), matched=len(matched))

    for post in matched:
        click.echo(post.get("id", "<no id>") if isinstance(post, dict) else post)


@cli.command()
@click.pass_obj
def info(settings) -> None:
    """Display postcollections configuration."""
    click.echo(f"""
postcollections v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Database:
  URL:          {settings.database_url}
  Echo:         {settings.db_echo}

Collections:
  Slug check on create: {settings.check_slug_on_create}
  Slug fallback:        {settings.default_slug_fallback}
  Filter cache size:    {settings.filter_cache_size}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `postcollections` command is run
    or when using `python -m postcollections`.
    """
    cli()
    sys.exit(0)


if __name__ == "__main__":
    main()
