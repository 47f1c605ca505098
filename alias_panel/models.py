"""Shared model contracts for alias ingestion and panel layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class InvalidArgument(ValueError):
    """Raised when a shaping or drawing primitive gets a negative size or position."""


class SurfaceInitFailure(RuntimeError):
    """Raised when the terminal surface cannot be acquired."""


@dataclass(frozen=True)
class Alias:
    name: str
    command: str
    description: str = ""

    @property
    def text(self) -> str:
        return f"{self.name}: {self.command}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "command": self.command,
            "description": self.description,
        }


@dataclass
class Section:
    label: str
    aliases: dict[str, Alias] = field(default_factory=dict)

    def sorted_aliases(self) -> list[Alias]:
        return [self.aliases[name] for name in sorted(self.aliases)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "aliases": [alias.to_dict() for alias in self.sorted_aliases()],
        }


def sorted_labels(sections: dict[str, Section]) -> list[str]:
    return sorted(sections)


def sorted_sections(sections: dict[str, Section]) -> list[Section]:
    return [sections[label] for label in sorted_labels(sections)]


@dataclass(frozen=True)
class Placement:
    label: str
    x: int
    y: int
    width: int
    height: int


@dataclass
class PackResult:
    column_count: int
    column_width: int
    placements: list[Placement] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)
