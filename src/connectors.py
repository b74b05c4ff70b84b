"""Connector lines between positioned family members."""

from dataclasses import dataclass
from typing import Iterable

from graph import Family

SPOUSE = "spouse"
PARENT_CHILD = "parent-child"


@dataclass(frozen=True)
class Connector:
    kind: str  # SPOUSE or PARENT_CHILD
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def style(self) -> str:
        return "dashed" if self.kind == SPOUSE else "solid"


def derive_connectors(families: Iterable[Family], vertical_spacing: float) -> list[Connector]:
    """
    Derive line segments for a positioned layout in a single pass over its
    family units.

    - One dashed spouse line per unordered pair, edge to edge at mid height.
    - For a family with children, an org-chart tee: a stem from the parent
      pair down to a bus row half way into the gap, a horizontal bus across
      the children when there is more than one, and a drop into each child.
    """
    connectors: list[Connector] = []
    drawn_pairs: set[tuple[str, str]] = set()

    for top in families:
        for family in top.walk():
            head, partner = family.head, family.partner

            if partner is not None:
                key = tuple(sorted((head.id, partner.id)))
                if key not in drawn_pairs:
                    drawn_pairs.add(key)
                    left, right = sorted((head, partner), key=lambda n: n.x)
                    mid_y = head.y + head.height / 2
                    connectors.append(
                        Connector(SPOUSE, left.x + left.width, mid_y, right.x, mid_y)
                    )

            if not family.children:
                continue

            if partner is not None:
                stem_x = (head.center_x + partner.center_x) / 2
                stem_top = head.y + head.height / 2
            else:
                stem_x = head.center_x
                stem_top = head.y + head.height
            bus_y = head.y + head.height + vertical_spacing / 2
            connectors.append(Connector(PARENT_CHILD, stem_x, stem_top, stem_x, bus_y))

            centers = [child.head.center_x for child in family.children]
            if len(centers) > 1:
                connectors.append(
                    Connector(PARENT_CHILD, min(centers), bus_y, max(centers), bus_y)
                )
            for child in family.children:
                connectors.append(
                    Connector(
                        PARENT_CHILD, child.head.center_x, bus_y, child.head.center_x, child.head.y
                    )
                )

    return connectors
