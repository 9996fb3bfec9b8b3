"""Output delegate rendering conversation outputs as terminal lines."""

from __future__ import annotations

import json
from typing import Any

from almond_cmdline.engine import field_of
from almond_cmdline.render import Renderer

OUTPUT_PREFIX = ">> "


class CommandLineDelegate:
    """Receives conversation outputs; one method per output kind."""

    def __init__(self, renderer: Renderer) -> None:
        self._renderer = renderer

    def send(self, text: str) -> None:
        self._emit(str(text))

    def send_picture(self, url: str) -> None:
        self._emit(f"picture: {url}")

    def send_rdl(self, rdl: Any) -> None:
        title = field_of(rdl, "displayTitle", "display_title")
        callback = field_of(rdl, "callback") or field_of(rdl, "webCallback", "web_callback")
        self._emit(f"rdl: {title} {callback}")

    def send_choice(self, idx: int, what: Any, title: str, text: str | None = None) -> None:
        self._emit(f"choice {idx}: {title}")

    def send_link(self, title: str, url: str) -> None:
        self._emit(f"link: {title} {url}")

    def send_button(self, title: str, payload: Any) -> None:
        self._emit(f"button: {title} {_serialize_payload(payload)}")

    def send_ask_special(self, what: str | None) -> None:
        self._emit(f"ask special {what}")

    def _emit(self, body: str) -> None:
        self._renderer.line(OUTPUT_PREFIX + body)


def _serialize_payload(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, ensure_ascii=False)
