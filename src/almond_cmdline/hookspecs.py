"""Pluggy hook namespace and plugin hook specifications."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from almond_cmdline.config import Settings
    from almond_cmdline.delegate import CommandLineDelegate
    from almond_cmdline.engine import Conversation, ConversationOptions, Engine
    from almond_cmdline.identity import LocalUser

ALMOND_HOOK_NAMESPACE = "almond_cmdline"
hookspec = pluggy.HookspecMarker(ALMOND_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(ALMOND_HOOK_NAMESPACE)


class AlmondHookSpecs:
    """Hook contract for engine and conversation providers."""

    @hookspec(firstresult=True)
    def provide_engine(self, settings: Settings) -> Engine | None:
        """Provide the application engine owning apps and devices."""

    @hookspec(firstresult=True)
    def provide_conversation(
        self,
        engine: Engine,
        conversation_id: str,
        user: LocalUser,
        delegate: CommandLineDelegate,
        options: ConversationOptions,
    ) -> Conversation | None:
        """Provide the conversation session rendering through ``delegate``."""

    @hookspec
    def on_error(self, stage: str, error: Exception, line: str | None) -> None:
        """Observe failures raised while handling a line."""
