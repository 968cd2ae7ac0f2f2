# src/devdesk/alerts/markdown.py

from __future__ import annotations

import io

from rich.console import Console
from rich.markdown import Markdown


class RichMarkdownRenderer:
    """Render task content (markdown) to plain terminal text."""

    def __init__(self, width: int = 72) -> None:
        self._width = int(width)

    def render(self, text: str) -> str:
        buf = io.StringIO()
        console = Console(file=buf, width=self._width, force_terminal=False, color_system=None)
        console.print(Markdown(text or ""))
        return buf.getvalue().rstrip()
