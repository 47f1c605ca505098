from __future__ import annotations

import contextlib
import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock
import sys

from loguru import logger
from rich.console import Console

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from alias_panel.app import (  # noqa: E402
    DisplayController,
    State,
    configure_logging,
    main,
    render_frame,
    render_once,
)
from alias_panel.models import Alias, Section  # noqa: E402
from alias_panel.panels.header import QUIT_HINT  # noqa: E402
from alias_panel.profiles import DEFAULT_SETTINGS  # noqa: E402
from alias_panel.surface import CTRL_L, GridSurface, KeyEvent, ResizeEvent  # noqa: E402


def _sections() -> dict[str, Section]:
    return {
        "Git": Section("Git", {"gs": Alias("gs", "git status"), "ga": Alias("ga", "git add")}),
        "Docker": Section("Docker", {"dps": Alias("dps", "docker ps")}),
    }


class RenderFrameTests(unittest.TestCase):
    def test_draws_sections_in_label_order(self):
        grid = GridSurface(100, 30)
        result = render_frame(grid, _sections())
        self.assertEqual([p.label for p in result.placements], ["Docker", "Git"])
        lines = grid.lines()
        self.assertTrue(lines[0].endswith(QUIT_HINT))
        self.assertIn("[Docker]", lines[2])
        self.assertIn("[Git]", lines[5])
        self.assertIn("ga: git add", lines[6])
        self.assertEqual(grid.presented, 1)

    def test_map_key_may_differ_from_section_label(self):
        sections = {"git": Section("Git Tools", {"gs": Alias("gs", "git status")})}
        grid = GridSurface(100, 30)
        result = render_frame(grid, sections)
        self.assertEqual([p.label for p in result.placements], ["git"])
        self.assertIn("[Git Tools]", grid.lines()[2])

    def test_tiny_viewport_renders_nothing(self):
        grid = GridSurface(5, 30)
        self.assertIsNone(render_frame(grid, _sections()))
        self.assertTrue(grid.is_blank())

    def test_short_viewport_renders_nothing(self):
        grid = GridSurface(100, 9)
        self.assertIsNone(render_frame(grid, _sections()))
        self.assertTrue(grid.is_blank())

    def test_one_broken_block_does_not_blank_the_rest(self):
        # A 3-cell column leaves no room for a bracketed label.
        sections = {
            "A": Section("A", {"a": Alias("a", "b")}),
            "B": Section("B", {"c": Alias("c", "d")}),
        }
        grid = GridSurface(21, 30)
        result = render_frame(grid, sections, dict(DEFAULT_SETTINGS, margin=9))
        self.assertEqual([(p.label, p.width, p.y) for p in result.placements], [("A", 3, 9), ("B", 3, 15)])
        self.assertEqual(grid.cell(9, 9), "┌")
        self.assertEqual(grid.cell(9, 15), "┌")
        self.assertEqual(grid.presented, 1)


class _BrokenSurface(GridSurface):
    def poll_event(self):
        raise RuntimeError("terminal went away")


class DisplayControllerTests(unittest.TestCase):
    def test_resize_relayouts_from_scratch(self):
        grid = GridSurface(100, 30)
        controller = DisplayController(grid, _sections())
        render_frame(grid, controller.sections)

        self.assertTrue(controller.handle_event(grid.resize(5, 30)))
        self.assertTrue(grid.is_blank())
        self.assertEqual(grid.resynced, 1)

        self.assertTrue(controller.handle_event(grid.resize(100, 30)))
        self.assertIn("[Git]", "\n".join(grid.lines()))
        self.assertEqual(controller.state, State.RUNNING)

    def test_sync_key_resyncs_without_clearing(self):
        grid = GridSurface(100, 30)
        controller = DisplayController(grid, _sections())
        render_frame(grid, controller.sections)
        before = grid.lines()
        self.assertTrue(controller.handle_event(KeyEvent(CTRL_L)))
        self.assertEqual(grid.resynced, 1)
        self.assertEqual(grid.lines(), before)

    def test_other_keys_ignored(self):
        grid = GridSurface(100, 30)
        controller = DisplayController(grid, _sections())
        self.assertTrue(controller.handle_event(KeyEvent("x")))
        self.assertTrue(controller.handle_event(KeyEvent(260)))
        self.assertEqual(grid.resynced, 0)
        self.assertFalse(controller.quit.is_set())

    def test_quit_key_drains(self):
        for key in ("q", "Q"):
            controller = DisplayController(GridSurface(100, 30), _sections())
            self.assertFalse(controller.handle_event(KeyEvent(key)))
            self.assertEqual(controller.state, State.DRAINING)
            self.assertTrue(controller.quit.is_set())

    def test_run_until_quit(self):
        grid = GridSurface(100, 30, events=[KeyEvent("x"), ResizeEvent(100, 30), KeyEvent(CTRL_L), KeyEvent("q")])
        controller = DisplayController(grid, _sections())
        controller.run()
        self.assertEqual(controller.state, State.DRAINING)
        self.assertFalse(grid.events)
        self.assertEqual(grid.resynced, 2)
        self.assertIn("[Docker]", "\n".join(grid.lines()))

    def test_polling_failure_still_releases_main_thread(self):
        controller = DisplayController(_BrokenSurface(100, 30), _sections())
        controller.run()
        self.assertTrue(controller.quit.is_set())
        self.assertEqual(controller.state, State.DRAINING)


class CliTests(unittest.TestCase):
    def _alias_file(self, tmp: str) -> str:
        path = Path(tmp) / "test_aliases"
        path.write_text("# SECTION: Git\nalias gs='git status'\nalias ga='git add' # stage\n")
        return str(path)

    def test_json_output(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = io.StringIO()
            with mock.patch.dict(os.environ, {"ALIASFILES": self._alias_file(tmp)}):
                with contextlib.redirect_stdout(out):
                    code = main(["--json"])
            self.assertEqual(code, 0)
            payload = json.loads(out.getvalue())
            section = payload["sections"][0]
            self.assertEqual(section["label"], "Git")
            self.assertEqual([a["name"] for a in section["aliases"]], ["ga", "gs"])
            self.assertEqual(section["aliases"][0]["description"], "stage")

    def test_render_once_prints_frame(self):
        console = Console(file=io.StringIO(), width=100, height=30)
        result = render_once(_sections(), DEFAULT_SETTINGS, console)
        output = console.file.getvalue()
        self.assertIn("[Git]", output)
        self.assertIn(QUIT_HINT, output)
        self.assertEqual(result.dropped, [])

    def test_bad_config_is_usage_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.dict(os.environ, {"ALIASFILES": self._alias_file(tmp)}):
                with contextlib.redirect_stderr(io.StringIO()):
                    with self.assertRaises(SystemExit) as ctx:
                        main(["--json", "--margin", "-3"])
            self.assertEqual(ctx.exception.code, 2)

    def test_missing_home_fails(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            with contextlib.redirect_stderr(io.StringIO()):
                self.assertEqual(main(["--json"]), 1)


class LoggingTests(unittest.TestCase):
    def test_debug_writes_log_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "aliaspanel.log"
            configure_logging(True, str(log_path))
            logger.debug("hello {}", "panel")
            configure_logging(False)
            self.assertIn("hello panel", log_path.read_text())


if __name__ == "__main__":
    unittest.main()
