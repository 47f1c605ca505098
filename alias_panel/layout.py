"""Column count selection and greedy panel packing by terminal size."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from alias_panel.formatting import required_height
from alias_panel.models import PackResult, Placement, Section, sorted_labels

MIN_PANEL_WIDTH = 40
MAX_PANEL_WIDTH = 50
DEFAULT_MARGIN = 2

# Column count selection always reserves this much, whatever margin is drawn.
OUTER_MARGIN = 2
FRAME_ROWS = 2


@dataclass(frozen=True)
class ContentBlock:
    label: str
    lines: tuple[str, ...]

    def body_height(self, width: int) -> int:
        return sum(required_height(width, line) for line in self.lines)


def build_blocks(sections: dict[str, Section]) -> list[ContentBlock]:
    return [
        ContentBlock(label, tuple(alias.text for alias in sections[label].sorted_aliases()))
        for label in sorted_labels(sections)
    ]


def choose_column_count(viewport_width: int, min_col_width: int, max_col_width: int) -> int:
    available = viewport_width - OUTER_MARGIN
    low = available // (min_col_width + OUTER_MARGIN)
    high = available // (max_col_width + OUTER_MARGIN)
    # A single column may shrink below min_col_width on narrow terminals.
    return max(low, high, 1)


def column_width(viewport_width: int, column_count: int, margin: int) -> int:
    return (viewport_width - (column_count + 1) * margin) // column_count


def pack(
    blocks: list[ContentBlock],
    viewport_width: int,
    viewport_height: int,
    margin: int = DEFAULT_MARGIN,
    min_col_width: int = MIN_PANEL_WIDTH,
    max_col_width: int = MAX_PANEL_WIDTH,
) -> PackResult:
    """Fill columns top to bottom, left to right, in block order.

    A block that does not fit under the current column's cursor moves the
    cursor to the next column; it is never retried higher up, and a block
    that fits nowhere ends packing with it and everything after it dropped.
    """
    count = choose_column_count(viewport_width, min_col_width, max_col_width)
    width = column_width(viewport_width, count, margin)
    result = PackResult(column_count=count, column_width=width)

    body_width = width - FRAME_ROWS
    if body_width < 1:
        result.dropped = [block.label for block in blocks]
        logger.debug("pack: column width {} too narrow, nothing placed", width)
        return result

    limit = viewport_height - 2
    cursor = 0
    for column in range(count):
        if cursor >= len(blocks):
            break
        x = margin + (width + margin) * column
        y = margin
        while cursor < len(blocks):
            block = blocks[cursor]
            height = block.body_height(body_width) + FRAME_ROWS
            if y + height >= limit:
                break
            result.placements.append(Placement(block.label, x, y, width, height))
            y += height
            cursor += 1

    result.dropped = [block.label for block in blocks[cursor:]]
    logger.debug(
        "pack: {} columns of width {}, placed {}, dropped {}",
        count,
        width,
        len(result.placements),
        result.dropped,
    )
    return result
