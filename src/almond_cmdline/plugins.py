"""Plugin discovery and hook calls."""

from __future__ import annotations

import importlib
import inspect
from typing import Any

import pluggy
from loguru import logger

from almond_cmdline.config import Settings
from almond_cmdline.delegate import CommandLineDelegate
from almond_cmdline.engine import Conversation, ConversationOptions, Engine
from almond_cmdline.errors import ConfigurationError
from almond_cmdline.hookspecs import ALMOND_HOOK_NAMESPACE, AlmondHookSpecs
from almond_cmdline.identity import LocalUser


class PluginHost:
    """Owns the plugin manager and resolves collaborators from hooks."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._plugin_manager = pluggy.PluginManager(ALMOND_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(AlmondHookSpecs)

    @property
    def plugin_manager(self) -> pluggy.PluginManager:
        return self._plugin_manager

    def load_plugins(self, extra_modules: list[str] | None = None) -> None:
        """Register entry point plugins, then the configured plugin modules."""

        self._plugin_manager.load_setuptools_entrypoints(ALMOND_HOOK_NAMESPACE)
        for module_name in [*self.settings.plugin_modules(), *(extra_modules or [])]:
            if self._plugin_manager.has_plugin(module_name):
                continue
            try:
                module = importlib.import_module(module_name)
            except ImportError as exc:
                logger.opt(exception=True).warning("plugin.load_failed module={}", module_name)
                raise ConfigurationError(f"Cannot import plugin module {module_name!r}: {exc}") from exc
            self.register(module, name=module_name)

    def register(self, plugin: object, *, name: str | None = None) -> None:
        self._plugin_manager.register(plugin, name=name)
        logger.debug("plugin.registered name={}", self._plugin_manager.get_name(plugin))

    def create_engine(self) -> Engine:
        engine = self._plugin_manager.hook.provide_engine(settings=self.settings)
        if engine is None:
            raise ConfigurationError("No plugin provides an engine; set ALMOND_PLUGINS or pass --plugin")
        return engine

    def create_conversation(
        self,
        engine: Engine,
        conversation_id: str,
        user: LocalUser,
        delegate: CommandLineDelegate,
        options: ConversationOptions,
    ) -> Conversation:
        conversation = self._plugin_manager.hook.provide_conversation(
            engine=engine,
            conversation_id=conversation_id,
            user=user,
            delegate=delegate,
            options=options,
        )
        if conversation is None:
            raise ConfigurationError("No plugin provides a conversation; set ALMOND_PLUGINS or pass --plugin")
        return conversation

    async def notify_error(self, *, stage: str, error: Exception, line: str | None) -> None:
        """Call on_error hooks, swallowing observer failures."""

        kwargs = {"stage": stage, "error": error, "line": line}
        for impl in self._plugin_manager.hook.on_error.get_hookimpls():
            call_kwargs = {name: kwargs[name] for name in impl.argnames if name in kwargs}
            try:
                value: Any = impl.function(**call_kwargs)
                if inspect.isawaitable(value):
                    await value
            except Exception:
                logger.opt(exception=True).warning(
                    "hook.on_error_failed stage={} plugin={}",
                    stage,
                    impl.plugin_name,
                )
