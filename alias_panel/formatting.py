"""Text measuring, truncation and box wrapping helpers for panel bodies."""

from __future__ import annotations

from alias_panel.models import InvalidArgument

ELLIPSIS = "..."


def required_height(width: int, text: str) -> int:
    """Number of ``width``-wide lines needed to show ``text``.

    ``width`` must be at least 1.
    """
    lines, remainder = divmod(len(text), width)
    if remainder:
        lines += 1
    return lines


def truncate(text: str, max_width: int) -> str:
    if max_width < 0:
        raise InvalidArgument(f"max_width cannot be negative: {max_width}")

    if len(text) <= max_width:
        return text

    keep = max_width - len(ELLIPSIS)
    if keep < 0:
        # Too narrow for the marker; hand back the raw prefix instead.
        return text[:max_width]
    return text[:keep] + ELLIPSIS


def wrap_to_box(text: str, width: int, height: int) -> list[str]:
    """Chunk ``text`` into at most ``height`` lines of ``width`` characters.

    The text is truncated to the box area first, so an over-long run ends
    with the ellipsis marker on its last visible line. The final line may be
    shorter than ``width``; empty lines are never added.
    """
    if width < 0 or height < 0:
        raise InvalidArgument(f"width and height cannot be negative: {width}x{height}")
    if width == 0 or height == 0:
        return []

    fitted = truncate(text, width * height)
    return [fitted[start : start + width] for start in range(0, len(fitted), width)]
