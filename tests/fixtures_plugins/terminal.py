from __future__ import annotations

import io
from collections.abc import Iterable
from typing import Any

from rich.console import Console

from almond_cmdline.render import PROMPT, Renderer


class ScriptedRenderer(Renderer):
    """Renderer reading from a fixed script and writing into a buffer."""

    def __init__(self, lines: Iterable[Any] = ()) -> None:
        self.buffer = io.StringIO()
        super().__init__(console=Console(file=self.buffer, highlight=False, soft_wrap=True, width=200))
        self._script = list(lines)
        self.prompts: list[str] = []

    async def read_line(self, prompt: str = PROMPT) -> str:
        if self.closed:
            raise EOFError
        self.prompts.append(prompt)
        if not self._script:
            raise EOFError
        item = self._script.pop(0)
        if isinstance(item, BaseException) or (isinstance(item, type) and issubclass(item, BaseException)):
            raise item
        return item

    @property
    def remaining(self) -> list[Any]:
        return list(self._script)

    def output_lines(self) -> list[str]:
        return self.buffer.getvalue().splitlines()
