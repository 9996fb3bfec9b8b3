"""Contracts for the application engine and the conversation session.

Neither collaborator is implemented here: plugins provide them (see
:mod:`almond_cmdline.hookspecs`). The shell only relies on the methods listed
in these protocols, and any of them may return an awaitable.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

_MISSING = object()


class AppDatabase(Protocol):
    def get_all_apps(self) -> Sequence[Any]: ...

    def get_app(self, unique_id: str) -> Any | None: ...

    def remove_app(self, app: Any) -> Awaitable[None] | None: ...


class DeviceDatabase(Protocol):
    def get_all_devices(self) -> Sequence[Any]: ...


class Platform(Protocol):
    def exit(self) -> None: ...


class Engine(Protocol):
    """Application engine owning apps, devices and the platform."""

    apps: AppDatabase
    devices: DeviceDatabase
    platform: Platform

    def close(self) -> Awaitable[None] | None: ...


class Conversation(Protocol):
    """Stateful dialogue handle accepting utterances and commands."""

    def start(self) -> Awaitable[None] | None: ...

    def handle_command(self, text: str) -> Awaitable[None] | None: ...

    def handle_parsed_command(self, raw: str) -> Awaitable[None] | None: ...

    def handle_thingtalk(self, code: str) -> Awaitable[None] | None: ...

    def notify(self, app_id: str, icon: str | None, output_type: str, output_value: Any) -> Awaitable[None] | None: ...

    def notify_error(self, app_id: str, icon: str | None, error: Any) -> Awaitable[None] | None: ...


@dataclass(frozen=True)
class ConversationOptions:
    """Options handed to the conversation when it is created."""

    sempre_url: str
    debug: bool = False
    show_welcome: bool = True


@dataclass(frozen=True)
class AppSummary:
    unique_id: str
    name: str
    description: str


@dataclass(frozen=True)
class DeviceSummary:
    unique_id: str
    kind: str
    name: str
    description: str


def field_of(record: Any, *keys: str, default: Any = None) -> Any:
    """Read the first present field from mapping-like or attribute-based records."""

    for key in keys:
        if isinstance(record, Mapping):
            value = record.get(key, _MISSING)
        else:
            value = getattr(record, key, _MISSING)
        if value is not _MISSING:
            return value
    return default


def app_summary(app: Any) -> AppSummary:
    return AppSummary(
        unique_id=str(field_of(app, "uniqueId", "unique_id")),
        name=str(field_of(app, "name")),
        description=str(field_of(app, "description")),
    )


def device_summary(device: Any) -> DeviceSummary:
    return DeviceSummary(
        unique_id=str(field_of(device, "uniqueId", "unique_id")),
        kind=str(field_of(device, "kind")),
        name=str(field_of(device, "name")),
        description=str(field_of(device, "description")),
    )


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value
