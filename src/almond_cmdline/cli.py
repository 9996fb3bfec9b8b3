"""Command line entry point for almond-cmdline."""

from __future__ import annotations

import asyncio

import typer
from loguru import logger

from almond_cmdline.config import Settings, load_settings
from almond_cmdline.engine import Engine, maybe_await
from almond_cmdline.errors import AlmondCmdlineError
from almond_cmdline.identity import resolve_local_user
from almond_cmdline.logging_utils import LogProfile, configure_logging
from almond_cmdline.plugins import PluginHost
from almond_cmdline.render import Renderer
from almond_cmdline.shell import CommandLineShell

app = typer.Typer(
    name="almond-cmdline",
    help="Talk to Almond from the terminal. Type \\h at the prompt for commands.",
    add_completion=False,
)


async def build_shell(
    settings: Settings,
    *,
    extra_plugins: list[str] | None = None,
    renderer: Renderer | None = None,
) -> CommandLineShell:
    """Resolve the user, load plugins, open the engine and wire the shell."""

    user = resolve_local_user()
    host = PluginHost(settings)
    host.load_plugins(extra_plugins)
    engine = host.create_engine()
    open_engine = getattr(engine, "open", None)
    if callable(open_engine):
        await maybe_await(open_engine())

    try:
        return CommandLineShell(
            engine,
            user,
            renderer or Renderer(),
            host.create_conversation,
            settings.conversation_options(),
            on_error=host.notify_error,
        )
    except Exception:
        await _close_engine(engine)
        raise


async def _close_engine(engine: Engine) -> None:
    try:
        await maybe_await(engine.close())
    except Exception:
        logger.opt(exception=True).warning("cli.engine_close_failed")


async def _run(settings: Settings, extra_plugins: list[str] | None) -> None:
    shell = await build_shell(settings, extra_plugins=extra_plugins)
    await shell.interact()


@app.command()
def chat(
    sempre_url: str | None = typer.Option(None, "--sempre-url", help="Semantic parsing server URL"),
    plugin: list[str] | None = typer.Option(None, "--plugin", "-p", help="Plugin module to register"),  # noqa: B008
    debug: bool | None = typer.Option(None, "--debug/--no-debug", help="Conversation debugging output"),
    welcome: bool | None = typer.Option(None, "--welcome/--no-welcome", help="Show the welcome message"),
    log_profile: LogProfile | None = typer.Option(None, "--log-profile", help="Log format: chat or default"),
) -> None:
    """Start an interactive session."""

    settings = load_settings(sempre_url=sempre_url, debug=debug, show_welcome=welcome, log_profile=log_profile)
    configure_logging(profile=settings.log_profile, level=settings.log_level)
    try:
        asyncio.run(_run(settings, plugin))
    except AlmondCmdlineError as exc:
        logger.debug("cli.startup_failed error={}", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def main() -> None:
    app()
