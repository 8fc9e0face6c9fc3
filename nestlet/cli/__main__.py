"""Nestlet CLI - Main Entry Point.

Commands:
    serve    - Bootstrap a root module and serve it with uvicorn
    routes   - Print the route table
    modules  - Print the module graph, ordered by distance
"""

import asyncio
import importlib
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__, __cli_name__
from ..application import NestletFactory
from ..config import ConfigLoader, ConfigError, configure_logging
from ..di.errors import DIError, token_name


def load_target(target: str) -> type:
    """Import ``package.module:RootModule``."""
    module_path, _, attr = target.partition(":")
    if not module_path or not attr:
        raise click.BadParameter(f"expected 'module:RootModule', got {target!r}", param_hint="TARGET")

    if str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_path!r}: {exc}", param_hint="TARGET")

    try:
        return getattr(module, attr)
    except AttributeError:
        raise click.BadParameter(f"{module_path!r} has no attribute {attr!r}", param_hint="TARGET")


def bootstrap(target: str, config=None):
    root = load_target(target)
    try:
        return asyncio.run(NestletFactory.create(root, config=config))
    except DIError as exc:
        raise click.ClickException(str(exc))


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
def cli():
    """Module-scoped dependency injection and request pipelines."""


@cli.command()
@click.argument("target")
@click.option("--host", type=str, default=None, help="Bind host (default from config)")
@click.option("--port", type=int, default=None, help="Bind port (default from config)")
@click.option("--log-level", type=click.Choice(["debug", "info", "warning", "error"]), default=None)
@click.option("--env-file", type=click.Path(dir_okay=False), default=None, help="Load settings from a .env file")
def serve(target: str, host: Optional[str], port: Optional[int], log_level: Optional[str], env_file: Optional[str]):
    """
    Serve TARGET (module:RootModule) with uvicorn.

    Examples:
      nestlet serve app.main:AppModule
      nestlet serve app.main:AppModule --port 8080 --log-level debug
    """
    try:
        config = ConfigLoader.load(
            env_file=env_file,
            overrides={"host": host, "port": port, "log_level": log_level},
        ).build()
    except ConfigError as exc:
        raise click.ClickException(str(exc))

    configure_logging(config.log_level)
    root = load_target(target)

    async def run():
        app = await NestletFactory.create(root, config=config)
        await app.listen()

    try:
        asyncio.run(run())
    except DIError as exc:
        raise click.ClickException(str(exc))


@cli.command()
@click.argument("target")
def routes(target: str):
    """Print the route table of TARGET."""
    app = bootstrap(target)
    if not app.routes:
        click.echo("No routes.")
        return
    for entry in app.routes:
        click.echo(f"{click.style(entry.method.ljust(7), fg='green')} {entry.path}  {entry.signature}")


@cli.command()
@click.argument("target")
def modules(target: str):
    """Print the module graph of TARGET, ordered by distance."""
    app = bootstrap(target)
    for module in app.registry.sorted_modules():
        flag = " (global)" if module.is_global else ""
        click.echo(click.style(f"{module.name}{flag}", bold=True) + f"  distance={module.distance}")
        if module.imports:
            click.echo(f"  imports:     {', '.join(m.name for m in module.imports)}")
        if module.providers:
            click.echo(f"  providers:   {', '.join(b.name for b in module.providers.values())}")
        if module.controllers:
            click.echo(f"  controllers: {', '.join(b.name for b in module.controllers.values())}")
        if module.exports:
            click.echo(f"  exports:     {', '.join(sorted(token_name(t) for t in module.exports))}")


def main():
    """Entry point for `nestlet` command."""
    cli()


if __name__ == "__main__":
    main()
