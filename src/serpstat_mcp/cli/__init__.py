"""Command line entry points for the Serpstat MCP server."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import signal
from importlib import metadata
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from serpstat_mcp.core import (
    ConfigurationError,
    SerpstatClient,
    SerpstatConfig,
    ToolRegistry,
    build_default_registry,
    configure_logging,
    load_config,
)
from serpstat_mcp.server import serve as serve_stdio

logger = logging.getLogger(__name__)

app = typer.Typer(invoke_without_command=True, help="Serpstat MCP server", no_args_is_help=False)

CLI_CONSOLE = Console()
ERR_CONSOLE = Console(stderr=True)

_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _load_config_or_exit() -> SerpstatConfig:
    try:
        config = load_config()
    except ConfigurationError as exc:
        configure_logging("error")
        ERR_CONSOLE.print(f"[bold red]Configuration error:[/] {exc}", markup=True, highlight=False)
        raise typer.Exit(code=2) from exc
    configure_logging(config.log_level)
    return config


def _build_client(config: SerpstatConfig) -> SerpstatClient:
    return SerpstatClient(config.upstream_settings())


async def _serve_until_stopped(registry: ToolRegistry, stop: asyncio.Event | None = None) -> None:
    """Serve over stdio until the client disconnects or a shutdown signal arrives."""

    loop = asyncio.get_running_loop()
    stop = stop or asyncio.Event()
    installed: list[signal.Signals] = []
    for sig in _SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handler for %s unavailable", sig.name)

    serve_task = asyncio.create_task(serve_stdio(registry))
    stop_task = asyncio.create_task(stop.wait())
    try:
        done, _ = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        if serve_task in done:
            serve_task.result()
        else:
            logger.info("Shutdown requested; stopping server")
            serve_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await serve_task
    finally:
        stop_task.cancel()
        for sig in installed:
            loop.remove_signal_handler(sig)
        if registry.client is not None:
            await registry.client.aclose()


def _run_server() -> None:
    config = _load_config_or_exit()
    registry = build_default_registry(_build_client(config))
    try:
        asyncio.run(_serve_until_stopped(registry))
    except KeyboardInterrupt:
        logger.info("Interrupted")


async def _call_once(config: SerpstatConfig, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    client = _build_client(config)
    try:
        registry = build_default_registry(client)
        envelope = await registry.invoke(name, arguments)
    finally:
        await client.aclose()
    return envelope.as_dict()


@app.callback()
def _default(ctx: typer.Context) -> None:
    """Serve MCP over stdio when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        _run_server()


@app.command()
def serve() -> None:
    """Serve the Serpstat tools over MCP stdio."""
    _run_server()


@app.command()
def tools(
    as_json: bool = typer.Option(False, "--json", help="Print the discovery documents as JSON"),  # noqa: B008
) -> None:
    """List the registered tools."""
    registry = build_default_registry()
    if as_json:
        typer.echo(json.dumps(registry.describe(), indent=2, ensure_ascii=False))
        return
    table = Table(title="Serpstat tools", header_style="bold #38BDF8")
    table.add_column("Tool", no_wrap=True)
    table.add_column("Required")
    table.add_column("Description")
    for entry in registry.describe():
        required = ", ".join(entry["inputSchema"].get("required", [])) or "-"
        description = entry["description"].split(". ")[0]
        table.add_row(entry["name"], required, description)
    CLI_CONSOLE.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name"),  # noqa: B008
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object"),  # noqa: B008
) -> None:
    """Invoke one tool and print its response envelope."""
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as exc:
        ERR_CONSOLE.print(f"Invalid --args JSON: {exc}", highlight=False)
        raise typer.Exit(code=2) from exc
    if not isinstance(arguments, dict):
        ERR_CONSOLE.print("--args must be a JSON object", highlight=False)
        raise typer.Exit(code=2)

    config = _load_config_or_exit()
    envelope = asyncio.run(_call_once(config, name, arguments))
    typer.echo(json.dumps(envelope, indent=2, ensure_ascii=False))
    if envelope.get("isError"):
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show server version."""
    try:
        pkg_version = metadata.version("serpstat-mcp")
    except metadata.PackageNotFoundError:
        pkg_version = "0.0.0"
    typer.echo(f"Serpstat MCP server version {pkg_version}")


def main() -> None:
    """Console script entrypoint."""
    app()


__all__ = ["app", "main"]
