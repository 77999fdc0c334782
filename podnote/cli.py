"""CLI interface for PodNote."""

from __future__ import annotations

import asyncio
import json
import os
import sys

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

console = Console()
err_console = Console(stderr=True)


def _bootstrap(config_path: str):
    from podnote.config import load_config
    from podnote.utils import setup_logging

    cfg = load_config(config_path)
    setup_logging(cfg.logging.level, cfg.logging.format)
    return cfg


@click.group()
@click.version_option(version="0.1.0", prog_name="podnote")
def cli():
    """PodNote - Notion skills and podcast discovery for a personal assistant."""
    pass


@cli.command()
def init():
    """Generate default config.yaml."""
    from podnote.config import generate_default_config

    config_path = "config.yaml"

    if os.path.exists(config_path):
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            console.print("[yellow]Cancelled.[/]")
            return

    with open(config_path, "w") as f:
        f.write(generate_default_config())

    console.print(f"[green]Created {config_path}[/]")
    console.print("Edit the file and set your API keys and storage settings.")


@cli.command(name="exec")
@click.argument("command")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def exec_command(command: str, config: str):
    """Run one gateway command, e.g. podnote exec 'notion list'."""
    from podnote.factory import create_services

    cfg = _bootstrap(config)

    async def run():
        services = create_services(cfg)
        try:
            return await services.gateway.execute(command)
        finally:
            await services.aclose()

    result = asyncio.run(run())
    if result.success:
        click.echo(result.render())
    else:
        click.echo(result.render(), err=True)
        sys.exit(1)


@cli.command()
@click.argument("name")
@click.option("--args", "-a", "arguments", default="{}", help="Tool arguments as a JSON object")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def tool(name: str, arguments: str, config: str):
    """Call one agent tool, e.g. podnote tool search_datasource -a '{"query": "Books"}'."""
    from podnote.factory import create_services

    try:
        parsed = json.loads(arguments)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--args")
    if not isinstance(parsed, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    cfg = _bootstrap(config)

    async def run():
        services = create_services(cfg)
        try:
            return await services.tools.execute(name, parsed)
        finally:
            await services.aclose()

    result = asyncio.run(run())
    click.echo(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    if not result["success"]:
        sys.exit(1)


@cli.command()
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def instructions(config: str):
    """Print the agent system prompt."""
    from podnote.factory import create_services

    cfg = _bootstrap(config)

    async def run():
        services = create_services(cfg)
        try:
            return await services.instructions()
        finally:
            await services.aclose()

    click.echo(asyncio.run(run()))


@cli.command()
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def shell(config: str):
    """Interactive loop over gateway commands."""
    from podnote.factory import create_services

    cfg = _bootstrap(config)

    async def loop():
        services = create_services(cfg)
        console.print(Panel.fit(
            "[bold green]PodNote Shell[/]\n"
            f"Storage: {services.fs.backend_name}\n"
            "Try 'notion help' or 'podcast help'. Type 'exit' or 'quit' to end session"
        ))
        try:
            while True:
                try:
                    line = await asyncio.get_event_loop().run_in_executor(
                        None, lambda: console.input("[bold blue]podnote>[/] ")
                    )
                except (EOFError, KeyboardInterrupt):
                    break

                line = line.strip()
                if not line:
                    continue
                if line.lower() in ("exit", "quit"):
                    break

                result = await services.gateway.execute(line)
                if result.success:
                    console.print(Markdown(result.output))
                else:
                    err_console.print(f"[red]{result.render()}[/]")
        finally:
            await services.aclose()

    asyncio.run(loop())
    console.print("[dim]Goodbye.[/]")


@cli.command()
@click.option("--config", "-c", default="config.yaml", help="Config file path")
@click.option("--host", default=None, help="Host to bind (defaults to api.host)")
@click.option("--port", default=None, type=int, help="Port to bind (defaults to api.port)")
def serve(config: str, host: str | None, port: int | None):
    """Start the PodNote API server."""
    import uvicorn
    from podnote.api import create_app

    cfg = _bootstrap(config)
    host = host or cfg.api.host
    port = port or cfg.api.port

    console.print(Panel.fit(
        f"[bold green]Starting PodNote API[/]\n"
        f"Host: {host}:{port}\n"
        f"Docs: http://{host}:{port}/docs"
    ))

    uvicorn.run(create_app(cfg), host=host, port=port)


if __name__ == "__main__":
    cli()
