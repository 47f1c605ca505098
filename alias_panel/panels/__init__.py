"""Panel drawing helpers."""

from __future__ import annotations

from rich.cells import get_character_cell_size
from rich.style import Style

from alias_panel.formatting import required_height, truncate, wrap_to_box
from alias_panel.models import InvalidArgument, Section
from alias_panel.surface import Surface

FRAME_STYLE = Style(color="white")
ACCENT_STYLE = Style(color="red")

H_LINE = "─"
V_LINE = "│"
UL_CORNER = "┌"
UR_CORNER = "┐"
LL_CORNER = "└"
LR_CORNER = "┘"


def _check_non_negative(**values: int) -> None:
    bad = [f"{name}={value}" for name, value in values.items() if value < 0]
    if bad:
        raise InvalidArgument(f"cannot be negative: {', '.join(bad)}")


def emit_str(surface: Surface, x: int, y: int, text: str, style: Style) -> int:
    """Write ``text`` from (x, y) and return the column after the last cell."""
    for char in text:
        width = get_character_cell_size(char)
        if width == 0:
            # Combining marks ride on a blank cell of their own.
            surface.set_cell(x, y, " " + char, style)
            width = 1
        else:
            surface.set_cell(x, y, char, style)
        x += width
    return x


def draw_frame(surface: Surface, x: int, y: int, width: int, height: int, style: Style = FRAME_STYLE) -> None:
    _check_non_negative(x=x, y=y, width=width, height=height)
    if width == 0 or height == 0:
        return

    right = x + width - 1
    bottom = y + height - 1
    for col in range(x, right + 1):
        surface.set_cell(col, y, H_LINE, style)
        surface.set_cell(col, bottom, H_LINE, style)
    for row in range(y + 1, bottom):
        surface.set_cell(x, row, V_LINE, style)
        surface.set_cell(right, row, V_LINE, style)
    surface.set_cell(x, y, UL_CORNER, style)
    surface.set_cell(right, y, UR_CORNER, style)
    surface.set_cell(x, bottom, LL_CORNER, style)
    surface.set_cell(right, bottom, LR_CORNER, style)


def format_label(label: str, width: int) -> str:
    return f"[{truncate(label, width - 4)}]"


def draw_label(surface: Surface, x: int, y: int, width: int, label: str, style: Style = ACCENT_STYLE) -> None:
    text = format_label(label, width)
    padding = (width - len(text)) // 2
    emit_str(surface, x + padding, y, text, style)


def draw_section(
    surface: Surface,
    x: int,
    y: int,
    width: int,
    height: int,
    section: Section,
    frame_style: Style = FRAME_STYLE,
    accent_style: Style = ACCENT_STYLE,
) -> int:
    """Draw one boxed section and return how many aliases made it inside.

    Aliases are drawn in name order; the first one that would reach the
    bottom border ends the body, and everything after it is left out.
    """
    _check_non_negative(x=x, y=y, width=width, height=height)

    draw_frame(surface, x, y, width, height, frame_style)
    draw_label(surface, x, y, width, section.label, accent_style)

    body_x = x + 1
    body_y = y + 1
    body_width = width - 2
    shown = 0
    for alias in section.sorted_aliases():
        text = alias.text
        lines_needed = required_height(body_width, text)
        if body_y + lines_needed - y >= height:
            break
        for offset, line in enumerate(wrap_to_box(text, body_width, lines_needed)):
            emit_str(surface, body_x, body_y + offset, line, frame_style)
        body_y += lines_needed
        shown += 1
    return shown
