"""Terminal renderer and line reader for the shell."""

from __future__ import annotations

import threading

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.text import Text

PROMPT = "$ "


class Renderer:
    """Writes lines to the terminal and reads input lines."""

    def __init__(self, console: Console | None = None, prompt_session: PromptSession[str] | None = None) -> None:
        self.console: Console = console or Console(highlight=False, soft_wrap=True)
        self._prompt_session = prompt_session
        self._print_lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def line(self, message: str) -> None:
        """Render one line verbatim, tabs and control characters included."""
        self._write(message)

    def info(self, message: str) -> None:
        """Render an info message verbatim."""
        self._write(message)

    def error(self, message: str) -> None:
        """Render an error message."""
        text = Text("Error: ", style="bold red")
        text.append(message)
        with self._print_lock:
            self.console.print(text)

    async def read_line(self, prompt: str = PROMPT) -> str:
        """Show ``prompt`` and wait for one line.

        Raises EOFError once the input has been closed or is exhausted, and
        KeyboardInterrupt when the user presses Ctrl-C at the prompt.
        """
        if self._closed:
            raise EOFError
        if self._prompt_session is None:
            self._prompt_session = PromptSession()
        with patch_stdout(raw=True):
            return await self._prompt_session.prompt_async(prompt)

    def close(self) -> None:
        """Release the input side; later reads raise EOFError."""
        self._closed = True
        if self._prompt_session is not None and self._prompt_session.app.is_running:
            self._prompt_session.app.exit(exception=EOFError)

    def _write(self, message: str) -> None:
        # rich.Text expands tabs and drops control characters, so bypass it
        with self._print_lock:
            stream = self.console.file
            stream.write(message + "\n")
            stream.flush()
