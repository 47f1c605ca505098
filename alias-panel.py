#!/usr/bin/env python3
"""Thin entrypoint for the alias panel TUI."""

from __future__ import annotations

from alias_panel.app import main


if __name__ == "__main__":
    raise SystemExit(main())
