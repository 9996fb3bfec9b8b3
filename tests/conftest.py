from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import pytest
from fixtures_plugins.fake_engine import FakeConversation, FakeEngine
from fixtures_plugins.terminal import ScriptedRenderer

from almond_cmdline.engine import ConversationOptions
from almond_cmdline.identity import LocalUser
from almond_cmdline.shell import CommandLineShell


@pytest.fixture
def user() -> LocalUser:
    return LocalUser(id=1000, account="alice", name="Alice Example")


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_shell(engine: FakeEngine, user: LocalUser) -> Callable[..., tuple[CommandLineShell, ScriptedRenderer]]:
    def _make(lines: Iterable[Any] = (), **kwargs: Any) -> tuple[CommandLineShell, ScriptedRenderer]:
        renderer = ScriptedRenderer(lines)

        def _factory(engine_, conversation_id, user_, delegate, options):
            return FakeConversation(delegate=delegate, options=options)

        shell = CommandLineShell(
            engine,
            user,
            renderer,
            _factory,
            ConversationOptions(sempre_url="http://sempre.test", show_welcome=False),
            **kwargs,
        )
        return shell, renderer

    return _make
