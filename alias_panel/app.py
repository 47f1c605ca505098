"""Alias panel application entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
import threading
from enum import Enum

from loguru import logger
from rich.console import Console
from rich.style import Style

from alias_panel.collectors.aliases import collect as collect_aliases
from alias_panel.layout import build_blocks, pack
from alias_panel.models import InvalidArgument, PackResult, Section, SurfaceInitFailure, sorted_sections
from alias_panel.panels import draw_section
from alias_panel.panels.header import render as render_header
from alias_panel.profiles import DEFAULT_SETTINGS, resolve_settings
from alias_panel.surface import CTRL_L, CursesSurface, GridSurface, KeyEvent, ResizeEvent, Surface

DEFAULT_LOG_FILE = "aliaspanel.log"
QUIT_KEYS = ("q", "Q")


def configure_logging(debug: bool, log_path: str = DEFAULT_LOG_FILE) -> None:
    # Anything on stderr would scribble over the curses screen.
    logger.remove()
    if not debug:
        return
    try:
        logger.add(log_path, level="DEBUG", mode="w")
    except OSError:
        logger.add(sys.stderr, level="DEBUG")
        logger.info("Failed to log to {}, defaulting to stderr", log_path)


def render_frame(surface: Surface, sections: dict[str, Section], settings: dict | None = None) -> PackResult | None:
    """Lay out and draw every section onto ``surface`` from scratch.

    Returns the pack result, or ``None`` when the viewport is below the
    minimum size and nothing was drawn.
    """
    settings = settings or DEFAULT_SETTINGS
    width, height = surface.size()
    if width < settings["min_window_width"] or height < settings["min_window_height"]:
        logger.debug("render_frame: viewport {}x{} too small, skipping", width, height)
        return None

    frame_style = Style(color=settings["frame_color"])
    accent_style = Style(color=settings["accent_color"])
    margin = settings["margin"]

    render_header(surface, width, frame_style)

    result = pack(
        build_blocks(sections),
        width,
        height,
        margin,
        settings["min_panel_width"],
        settings["max_panel_width"],
    )
    for placement in result.placements:
        try:
            draw_section(
                surface,
                placement.x,
                placement.y,
                placement.width,
                placement.height,
                sections[placement.label],
                frame_style,
                accent_style,
            )
        except InvalidArgument as exc:
            logger.error("render_frame: unable to draw section <{}>: {}", placement.label, exc)
    surface.present()
    return result


class State(Enum):
    RUNNING = "running"
    DRAINING = "draining"


class DisplayController:
    """Runs the interactive session over one surface.

    The polling thread owns all drawing after the first frame; the caller's
    thread only waits for the quit signal and then tears down.
    """

    def __init__(self, surface: Surface, sections: dict[str, Section], settings: dict | None = None):
        self.surface = surface
        self.sections = sections
        self.settings = settings or DEFAULT_SETTINGS
        self.state = State.RUNNING
        self.quit = threading.Event()
        self._poller: threading.Thread | None = None

    def redraw(self) -> PackResult | None:
        self.surface.resync()
        self.surface.clear()
        return render_frame(self.surface, self.sections, self.settings)

    def handle_event(self, event) -> bool:
        """React to one surface event; returns False once the session is over."""
        if isinstance(event, ResizeEvent):
            logger.debug("resize to {}x{}", event.width, event.height)
            self.redraw()
            return True
        if isinstance(event, KeyEvent):
            if event.key in QUIT_KEYS:
                logger.debug("quit key pressed, draining")
                self.state = State.DRAINING
                self.quit.set()
                return False
            if event.key == CTRL_L:
                self.surface.resync()
        return True

    def poll(self) -> None:
        try:
            while self.handle_event(self.surface.poll_event()):
                pass
        except Exception:
            logger.exception("input polling stopped unexpectedly")
        finally:
            # The main thread must always get to teardown.
            self.state = State.DRAINING
            self.quit.set()

    def start(self) -> None:
        self.surface.clear()
        render_frame(self.surface, self.sections, self.settings)
        self._poller = threading.Thread(target=self.poll, name="alias-panel-input", daemon=True)
        self._poller.start()

    def wait(self) -> None:
        self.quit.wait()
        if self._poller is not None:
            self._poller.join()

    def run(self) -> None:
        self.start()
        self.wait()


def render_once(sections: dict[str, Section], settings: dict, console: Console) -> PackResult | None:
    grid = GridSurface(console.size.width, console.size.height)
    result = render_frame(grid, sections, settings)
    console.print(grid.to_text(), soft_wrap=True)
    return result


def _json_output(sections: dict[str, Section]) -> str:
    payload = {"sections": [section.to_dict() for section in sorted_sections(sections)]}
    return json.dumps(payload, indent=2)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show shell aliases as panels tiled across the terminal")
    parser.add_argument("-m", "--margin", type=int, help="Margin size in cells (default 2)")
    parser.add_argument("-d", "--debug", action="store_true", help=f"Log debug statements in {DEFAULT_LOG_FILE}")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="Debug log destination")
    parser.add_argument("--config", help="Optional JSON config file for display settings")
    parser.add_argument("--once", action="store_true", help="Print a single frame and exit")
    parser.add_argument("--json", action="store_true", help="Emit parsed sections as JSON")
    args = parser.parse_args(argv)

    configure_logging(args.debug, args.log_file)

    try:
        settings = resolve_settings(args.config, args.margin)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        sections = collect_aliases()
    except ValueError as exc:
        logger.error("Unable to find alias files: {}", exc)
        print(f"alias-panel: {exc}", file=sys.stderr)
        return 1
    logger.debug("Sections: {}", _json_output(sections))

    if args.json:
        print(_json_output(sections))
        return 0

    if args.once:
        render_once(sections, settings, Console())
        return 0

    surface = CursesSurface()
    try:
        surface.open()
    except SurfaceInitFailure as exc:
        logger.error(str(exc))
        print(f"alias-panel: {exc}", file=sys.stderr)
        return 1

    try:
        DisplayController(surface, sections, settings).run()
    except KeyboardInterrupt:
        return 0
    finally:
        surface.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
