"""Terminal surfaces the panel renderer draws onto.

Two implementations share one small protocol:

- ``CursesSurface`` owns the real terminal for the interactive session.
- ``GridSurface`` keeps cells in memory; ``--once`` prints it through rich
  and the tests inspect it directly.
"""

from __future__ import annotations

import curses
import locale
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Protocol, Union

from loguru import logger
from rich.color import ColorSystem
from rich.style import Style
from rich.text import Text

from alias_panel.models import SurfaceInitFailure

CTRL_L = "\x0c"


@dataclass(frozen=True)
class KeyEvent:
    key: Union[str, int]


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = Union[KeyEvent, ResizeEvent]


class Surface(Protocol):
    def set_cell(self, x: int, y: int, glyph: str, style: Style) -> None: ...

    def size(self) -> tuple[int, int]: ...

    def present(self) -> None: ...

    def clear(self) -> None: ...

    def resync(self) -> None: ...

    def poll_event(self) -> Event: ...


class GridSurface:
    """In-memory cell grid with a scripted event queue."""

    def __init__(self, width: int, height: int, events: Iterable[Event] = ()):
        self.width = width
        self.height = height
        self.events: deque[Event] = deque(events)
        self.presented = 0
        self.resynced = 0
        self._cells: dict[tuple[int, int], tuple[str, Style]] = {}

    def set_cell(self, x: int, y: int, glyph: str, style: Style) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._cells[(x, y)] = (glyph, style)

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def present(self) -> None:
        self.presented += 1

    def clear(self) -> None:
        self._cells.clear()

    def resync(self) -> None:
        self.resynced += 1

    def poll_event(self) -> Event:
        if not self.events:
            # A drained script behaves like the user pressing quit.
            return KeyEvent("q")
        return self.events.popleft()

    def resize(self, width: int, height: int) -> ResizeEvent:
        self.width = width
        self.height = height
        self._cells = {
            (x, y): cell for (x, y), cell in self._cells.items() if x < width and y < height
        }
        return ResizeEvent(width, height)

    def cell(self, x: int, y: int) -> str:
        return self._cells.get((x, y), (" ", Style()))[0]

    def style_at(self, x: int, y: int) -> Style | None:
        entry = self._cells.get((x, y))
        return entry[1] if entry else None

    def is_blank(self) -> bool:
        return not self._cells

    def lines(self) -> list[str]:
        return ["".join(self.cell(x, y) for x in range(self.width)).rstrip() for y in range(self.height)]

    def to_text(self) -> Text:
        text = Text()
        for y in range(self.height):
            if y:
                text.append("\n")
            for x in range(self.width):
                glyph, style = self._cells.get((x, y), (" ", Style()))
                text.append(glyph, style=style)
        return text


def _curses_color(style: Style) -> tuple[int, bool]:
    """Map a rich style color onto a basic curses color and a bold flag."""
    if style.color is None or style.color.is_default:
        return -1, False
    number = style.color.downgrade(ColorSystem.STANDARD).number
    if number is None:
        return -1, False
    return number % 8, number >= 8


class CursesSurface:
    """The real terminal, driven through curses."""

    def __init__(self):
        self.stdscr = None
        self._pairs: dict[int, int] = {}

    def open(self) -> "CursesSurface":
        # Box drawing glyphs need the user's locale, not "C".
        try:
            locale.setlocale(locale.LC_ALL, "")
        except locale.Error as exc:
            logger.warning("Unable to apply user locale: {}", exc)

        try:
            self.stdscr = curses.initscr()
            curses.noecho()
            curses.cbreak()
            self.stdscr.keypad(True)
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            if curses.has_colors():
                curses.start_color()
                curses.use_default_colors()
        except curses.error as exc:
            self.close()
            raise SurfaceInitFailure(f"unable to initialise terminal: {exc}") from exc
        return self

    def close(self) -> None:
        if self.stdscr is None:
            return
        self.stdscr.keypad(False)
        curses.nocbreak()
        curses.echo()
        curses.endwin()
        self.stdscr = None

    def _attr(self, style: Style) -> int:
        color, bright = _curses_color(style)
        attr = curses.A_BOLD if (bright or style.bold) else curses.A_NORMAL
        if color < 0 or not curses.has_colors():
            return attr
        pair = self._pairs.get(color)
        if pair is None:
            pair = len(self._pairs) + 1
            curses.init_pair(pair, color, -1)
            self._pairs[color] = pair
        return attr | curses.color_pair(pair)

    def set_cell(self, x: int, y: int, glyph: str, style: Style) -> None:
        try:
            self.stdscr.addstr(y, x, glyph, self._attr(style))
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen.
            pass

    def size(self) -> tuple[int, int]:
        height, width = self.stdscr.getmaxyx()
        return width, height

    def present(self) -> None:
        self.stdscr.refresh()

    def clear(self) -> None:
        self.stdscr.erase()

    def resync(self) -> None:
        self.stdscr.clearok(True)
        self.stdscr.refresh()

    def poll_event(self) -> Event:
        key = self.stdscr.getch()
        if key == curses.KEY_RESIZE:
            curses.update_lines_cols()
            width, height = self.size()
            return ResizeEvent(width, height)
        if 0 <= key < 256:
            return KeyEvent(chr(key))
        return KeyEvent(key)
