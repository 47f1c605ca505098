"""Header hint renderer."""

from __future__ import annotations

from rich.style import Style

from alias_panel.panels import FRAME_STYLE, emit_str
from alias_panel.surface import Surface

QUIT_HINT = "Press [Q]uit to exit"


def render(surface: Surface, viewport_width: int, style: Style = FRAME_STYLE) -> None:
    emit_str(surface, max(0, viewport_width - len(QUIT_HINT)), 0, QUIT_HINT, style)
