"""Canvas sizing and generation row labels."""

from dataclasses import dataclass
from typing import Iterable

from graph import TreeNode


@dataclass(frozen=True)
class GenerationLabel:
    y: float  # top of the row
    generation: int
    text: str


def generation_label(generation: int) -> str:
    if generation == 0:
        return ""
    if generation == -1:
        return "PARENTS"
    if generation == 1:
        return "CHILDREN"
    if generation == -2:
        return "GRANDPARENTS"
    if generation == 2:
        return "GRANDCHILDREN"
    if generation < -2:
        return "ANCESTORS"
    return "DESCENDANTS"


def canvas_size(
    nodes: Iterable[TreeNode], margin: float, min_width: float, min_height: float
) -> tuple[float, float]:
    """Bounding box of all positioned nodes plus margin, never below the minimum."""
    width, height = min_width, min_height
    for node in nodes:
        if node.x is None or node.y is None:
            continue
        width = max(width, node.x + node.width + margin)
        height = max(height, node.y + node.height + margin)
    return width, height


def generation_labels(nodes: Iterable[TreeNode]) -> list[GenerationLabel]:
    """
    One label per row of nodes sharing a y coordinate, top to bottom.

    The row's generation is taken from its first member in input order, so
    rows mixing generations (disconnected subtrees) show only one of them.
    """
    rows: dict[float, int] = {}
    for node in nodes:
        if node.y is None:
            continue
        rows.setdefault(node.y, node.person.generation)

    return [
        GenerationLabel(y, generation, generation_label(generation))
        for y, generation in sorted(rows.items())
    ]
