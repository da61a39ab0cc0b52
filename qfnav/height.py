"""Auto-resize height policy for list surfaces."""

from __future__ import annotations

from .config import ListOptions


def compute_height(item_count: int, options: ListOptions) -> int:
    """Return surface height for ``item_count`` items.

    The count is clamped to ``[min_height, max_height]``. ``0`` means the list
    is empty and should be closed, never a zero-height surface.
    """
    if item_count <= 0:
        return 0
    return max(options.min_height, min(options.max_height, item_count))


__all__ = ["compute_height"]
