"""CLI commands for prodsync-mcp."""

import asyncio
import json
import logging

import click

from prodsync_mcp.config import load_config, validate_config
from prodsync_mcp.exceptions import ConfigurationError, ToolError


def run_async(coro):
    """Run an async coroutine from sync CLI code."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop.run_until_complete(coro)


def config_option():
    """Decorator for --config option."""
    return click.option(
        "--config", "-c",
        default=None,
        type=click.Path(exists=False),
        help="Optional YAML config file (credentials default to DATADOG_API_KEY / DATADOG_APP_KEY)",
    )


def _load_or_exit(config: str | None):
    try:
        return load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@click.group()
def main():
    """ProdSync MCP server: Datadog log search for agents."""
    pass


@main.command()
@config_option()
@click.option("--transport", "-t", default="stdio", type=click.Choice(["stdio", "http"]), help="Transport type")
@click.option("--port", "-p", default=8000, type=int, help="Port for HTTP transport")
@click.option("--env-file", "-e", default=".env", type=click.Path(), help="Path to .env file (default: .env)")
@click.option("--debug", is_flag=True, help="Log call timing to stderr")
def serve(config: str | None, transport: str, port: int, env_file: str, debug: bool):  # pragma: no cover
    """Start the MCP server."""
    from dotenv import load_dotenv

    from prodsync_mcp.debug import configure_debug_logging, enable_debug, set_log_dir
    from prodsync_mcp.server import create_server_from_config

    load_dotenv(env_file)

    cfg = _load_or_exit(config)
    set_log_dir(cfg.log_dir)
    if debug or cfg.debug:
        enable_debug()
        configure_debug_logging(logging.DEBUG)

    server = create_server_from_config(cfg)
    if transport == "stdio":
        server.run(transport="stdio")
    else:
        server.run(transport="http", port=port)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def tools(as_json: bool):
    """List the tools this server exposes."""
    from prodsync_mcp.tools import TOOL_SCHEMAS

    if as_json:
        payload = [s.to_mcp_tool().model_dump(exclude_none=True) for s in TOOL_SCHEMAS]
        click.echo(json.dumps({"tools": payload}, indent=2))
        return

    for schema in TOOL_SCHEMAS:
        click.echo(f"{schema.name}: {schema.description}")
        required = set(schema.required_names)
        for param in schema.parameters:
            marker = " (required)" if param.name in required else ""
            choices = f" [{', '.join(param.enum)}]" if param.enum else ""
            click.echo(f"  {param.name}: {param.type}{choices}{marker}")


@main.command()
@click.argument("tool_name")
@config_option()
@click.option("--arg", "-a", multiple=True, help="Tool arguments as key=value")
def call(tool_name: str, config: str | None, arg: tuple[str, ...]):
    """Call a tool once and print its result."""
    from prodsync_mcp.debug import set_log_dir
    from prodsync_mcp.server import create_backend
    from prodsync_mcp.tools import build_registry

    cfg = _load_or_exit(config)
    set_log_dir(cfg.log_dir)

    # Parse arguments - try to parse numeric values
    args = {}
    for a in arg:
        if "=" in a:
            k, v = a.split("=", 1)
            try:
                args[k] = int(v)
            except ValueError:
                args[k] = v

    registry = build_registry(create_backend(cfg))
    try:
        response = run_async(registry.invoke(tool_name, args))
    except ToolError as e:
        click.echo(f"Error calling {tool_name}: {e}", err=True)
        raise SystemExit(1)

    click.echo(response.text)


@main.command()
@config_option()
def validate(config: str | None):
    """Validate configuration."""
    errors = validate_config(config)
    if errors:
        click.echo("Configuration errors:", err=True)
        for error in errors:
            click.echo(f"  - {error}", err=True)
        raise SystemExit(1)
    click.echo("Configuration is valid")


if __name__ == "__main__":
    main()
