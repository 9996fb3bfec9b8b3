"""Interactive shell: reads lines, runs escape commands, talks to the conversation."""

from __future__ import annotations

import asyncio
import signal
from collections.abc import Awaitable, Callable
from contextlib import suppress
from enum import Enum
from typing import Any, TypeAlias

from loguru import logger

from almond_cmdline.commands import (
    HELP_LINES,
    EscapeCommand,
    choice_payload,
    parse_choice,
    parse_escape_command,
    split_subcommand,
)
from almond_cmdline.delegate import CommandLineDelegate
from almond_cmdline.engine import (
    Conversation,
    ConversationOptions,
    Engine,
    app_summary,
    device_summary,
    maybe_await,
)
from almond_cmdline.errors import AlmondCmdlineError, CollaboratorError, MalformedEscapeArgument
from almond_cmdline.identity import LocalUser
from almond_cmdline.render import PROMPT, Renderer

CONVERSATION_ID = "local-cmdline"

ConversationFactory: TypeAlias = Callable[[Engine, str, LocalUser, CommandLineDelegate, ConversationOptions], Conversation]
ErrorObserver: TypeAlias = Callable[..., Awaitable[None]]
EscapeHandler: TypeAlias = Callable[[EscapeCommand], Awaitable[None]]


class ShellState(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    CLOSING = "closing"


class CommandLineShell:
    """Owns the input loop and the single conversation of a terminal session."""

    def __init__(
        self,
        engine: Engine,
        user: LocalUser,
        renderer: Renderer,
        conversation_factory: ConversationFactory,
        options: ConversationOptions,
        *,
        on_error: ErrorObserver | None = None,
    ) -> None:
        self._engine = engine
        self.user = user
        self._renderer = renderer
        self._on_error = on_error
        self.delegate = CommandLineDelegate(renderer)
        self._conversation = conversation_factory(engine, CONVERSATION_ID, user, self.delegate, options)
        self._state = ShellState.IDLE
        self._current: asyncio.Task[None] | None = None
        self._escape_handlers: dict[str, EscapeHandler] = {
            "q": self._quit_command,
            "?": self._help,
            "h": self._help,
            "r": self._parsed_command,
            "t": self._thingtalk,
            "c": self._choice,
            "a": self._app_command,
            "d": self._device_command,
        }

    @property
    def state(self) -> ShellState:
        return self._state

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    def get_conversation(self, conversation_id: str | None = None) -> Conversation:
        """There is one conversation per terminal, whatever id is asked for."""
        return self._conversation

    def notify_all(self, app_id: str, icon: str | None, output_type: str, output_value: Any) -> Any:
        return self._conversation.notify(app_id, icon, output_type, output_value)

    def notify_error_all(self, app_id: str, icon: str | None, error: Any) -> Any:
        return self._conversation.notify_error(app_id, icon, error)

    async def start(self) -> None:
        logger.info("shell.start conversation_id={} user={}", CONVERSATION_ID, self.user.account)
        await self._collaborate("conversation.start", self._conversation.start)

    async def interact(self) -> None:
        """Start the conversation and process lines until the shell closes."""

        try:
            await self.start()
        except Exception:
            logger.opt(exception=True).error("shell.start_failed")
            await self.quit()
            raise
        loop = asyncio.get_running_loop()
        with suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(signal.SIGINT, self._interrupt)
        try:
            await self._run_input_loop()
        finally:
            with suppress(NotImplementedError, RuntimeError):
                loop.remove_signal_handler(signal.SIGINT)

    async def _run_input_loop(self) -> None:
        while self._state is not ShellState.CLOSING:
            try:
                line = await self._renderer.read_line(PROMPT)
            except (KeyboardInterrupt, EOFError):
                await self.quit()
                break

            self._current = asyncio.create_task(self.handle_line(line))
            try:
                await asyncio.wait({self._current})
                if self._current.cancelled():
                    # only an interrupt cancels a line
                    await self.quit()
                    break
                self._current.result()
            finally:
                self._current = None

    def _interrupt(self) -> None:
        logger.info("shell.interrupt state={}", self._state.value)
        if self._current is not None and not self._current.done():
            self._current.cancel()
        else:
            self._renderer.close()

    async def handle_line(self, line: str) -> None:
        """Handle one input line; failures are reported, never raised."""

        if self._state is ShellState.CLOSING:
            return
        self._state = ShellState.PROCESSING
        try:
            await self._dispatch(line)
        except MalformedEscapeArgument as exc:
            logger.warning("shell.line.malformed line={} error={}", line, exc)
            self._renderer.error(str(exc))
            await self._report_error("escape", exc, line)
        except Exception as exc:
            logger.exception("shell.line.error line={}", line)
            self._renderer.error(str(exc))
            await self._report_error("line", exc, line)
        finally:
            if self._state is ShellState.PROCESSING:
                self._state = ShellState.IDLE

    async def quit(self) -> None:
        """Say goodbye, release input, close the engine and exit the platform."""

        if self._state is ShellState.CLOSING:
            return
        self._state = ShellState.CLOSING
        logger.info("shell.quit")
        self._renderer.info("Bye\n")
        self._renderer.close()
        try:
            await maybe_await(self._engine.close())
        except Exception:
            logger.exception("shell.quit.close_failed")
        finally:
            self._engine.platform.exit()

    async def _dispatch(self, line: str) -> None:
        if not line.strip():
            return
        command = parse_escape_command(line)
        if command is None:
            logger.debug("shell.line.utterance length={}", len(line))
            await self._collaborate("conversation.handle_command", self._conversation.handle_command, line)
            return
        logger.debug("shell.line.escape letter={} raw={}", command.letter, command.raw)
        handler = self._escape_handlers.get(command.letter, self._unknown)
        await handler(command)

    async def _quit_command(self, _command: EscapeCommand) -> None:
        await self.quit()

    async def _help(self, _command: EscapeCommand) -> None:
        for help_line in HELP_LINES:
            self._renderer.info(help_line)

    async def _parsed_command(self, command: EscapeCommand) -> None:
        await self._collaborate(
            "conversation.handle_parsed_command", self._conversation.handle_parsed_command, command.rest
        )

    async def _thingtalk(self, command: EscapeCommand) -> None:
        await self._collaborate("conversation.handle_thingtalk", self._conversation.handle_thingtalk, command.rest)

    async def _choice(self, command: EscapeCommand) -> None:
        payload = choice_payload(parse_choice(command.rest))
        await self._collaborate("conversation.handle_parsed_command", self._conversation.handle_parsed_command, payload)

    async def _app_command(self, command: EscapeCommand) -> None:
        sub = split_subcommand(command.rest)
        if sub.name == "list":
            apps = await self._collaborate("apps.get_all_apps", self._engine.apps.get_all_apps)
            for app in apps:
                summary = app_summary(app)
                self._renderer.info(f"- {summary.unique_id} {summary.name}: {summary.description}")
        elif sub.name == "stop":
            app = await self._collaborate("apps.get_app", self._engine.apps.get_app, sub.param)
            if app is None:
                self._renderer.info(f"No app with ID {sub.param}")
                return
            await self._collaborate("apps.remove_app", self._engine.apps.remove_app, app)

    async def _device_command(self, command: EscapeCommand) -> None:
        sub = split_subcommand(command.rest)
        if sub.name == "list":
            devices = await self._collaborate("devices.get_all_devices", self._engine.devices.get_all_devices)
            for device in devices:
                summary = device_summary(device)
                self._renderer.info(f"- {summary.unique_id} ({summary.kind}) {summary.name}: {summary.description}")

    async def _unknown(self, command: EscapeCommand) -> None:
        self._renderer.info(f"Unknown command {command.letter}")

    async def _collaborate(self, operation: str, call: Callable[..., Any], *args: Any) -> Any:
        try:
            return await maybe_await(call(*args))
        except AlmondCmdlineError:
            raise
        except Exception as exc:
            raise CollaboratorError(operation, exc) from exc

    async def _report_error(self, stage: str, error: Exception, line: str) -> None:
        if self._on_error is None:
            return
        try:
            await self._on_error(stage=stage, error=error, line=line)
        except Exception:
            logger.opt(exception=True).warning("shell.on_error_failed stage={}", stage)
