"""Shell alias collector."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Mapping

from loguru import logger

from alias_panel.collectors import find_files, read_lines
from alias_panel.models import Alias, Section

DEFAULT_SECTION = "Aliases"

SECTION_RE = re.compile(r"#\s*SECTION:\s*(?P<label>[a-zA-Z0-9 ]+[^\s])")
COMMENTED_ALIAS_RE = re.compile(
    r"""alias (?P<name>[_a-zA-Z0-9]+)=['"](?P<command>.+)['"][^#]*#(?P<comment>.+)$"""
)
ALIAS_RE = re.compile(r"""alias (?P<name>[_a-zA-Z0-9]+)=['"](?P<command>.+)['"]$""")


def parse_alias(line: str) -> Alias | None:
    match = COMMENTED_ALIAS_RE.search(line)
    if match:
        alias = Alias(match["name"], match["command"], match["comment"].strip())
        logger.debug("parse_alias: {}-{}-{}", alias.name, alias.command, alias.description)
        return alias

    match = ALIAS_RE.search(line)
    if match:
        alias = Alias(match["name"], match["command"])
        logger.debug("parse_alias: {}-{}", alias.name, alias.command)
        return alias

    logger.debug("parse_alias: skipping {!r}", line)
    return None


def parse_lines(lines: Iterable[str]) -> dict[str, Section]:
    sections: dict[str, Section] = {}
    current: Section | None = None

    for line in lines:
        match = SECTION_RE.search(line)
        if match:
            label = match["label"]
            if label in sections:
                logger.info("parse_lines: found existing section <{}>", label)
            else:
                logger.info("parse_lines: found new section <{}>", label)
                sections[label] = Section(label)
            current = sections[label]
            continue

        alias = parse_alias(line)
        if alias is None:
            continue
        if current is None:
            # Aliases above the first marker land in the default section.
            current = sections.setdefault(DEFAULT_SECTION, Section(DEFAULT_SECTION))
        current.aliases[alias.name] = alias

    return sections


def parse_file(path: Path) -> dict[str, Section]:
    lines = read_lines(path)
    if lines is None:
        return {}
    return parse_lines(lines)


def merge_sections(a: Section, b: Section) -> Section:
    """Union of two sections; ``b`` wins when an alias name appears in both."""
    merged = dict(a.aliases)
    for name, alias in b.aliases.items():
        if name in merged:
            logger.info("Redefined alias found: {}", name)
        merged[name] = alias
    return Section(a.label, merged)


def merge_section_maps(a: Mapping[str, Section], b: Mapping[str, Section]) -> dict[str, Section]:
    merged = dict(a)
    for label, section in b.items():
        if label in merged:
            merged[label] = merge_sections(merged[label], section)
        else:
            merged[label] = Section(section.label, dict(section.aliases))
    return merged


def parse_files(paths: Iterable[Path]) -> dict[str, Section]:
    sections: dict[str, Section] = {}
    for path in paths:
        sections = merge_section_maps(sections, parse_file(Path(path)))

    for label in [label for label, section in sections.items() if not section.aliases]:
        logger.info("Deleting empty section {}", label)
        del sections[label]
    return sections


def collect(environ: Mapping[str, str] | None = None) -> dict[str, Section]:
    return parse_files(find_files(environ))
