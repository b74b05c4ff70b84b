"""Position assignment for family trees and the full layout pipeline."""

from dataclasses import dataclass, field
from typing import Iterable

from canvas import GenerationLabel, canvas_size, generation_labels
from connectors import Connector, derive_connectors
from graph import Family, TreeNode, build_nodes, find_roots
from models import Person


@dataclass(frozen=True)
class LayoutConfig:
    node_width: float = 192
    node_height: float = 240
    horizontal_spacing: float = 32  # between sibling subtrees
    vertical_spacing: float = 80  # between generation rows
    spouse_spacing: float = 32
    margin: float = 48
    root_gap: float = 64  # between independent root subtrees
    min_width: float = 800
    min_height: float = 600

    def __post_init__(self):
        if self.node_width <= 0 or self.node_height <= 0:
            raise ValueError("Node width and height must be positive")
        for name in ("horizontal_spacing", "vertical_spacing", "spouse_spacing", "margin", "root_gap"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")


@dataclass
class TreeLayout:
    """Result of one layout pass. Pure derived data, rebuilt on every input change."""

    config: LayoutConfig
    nodes: dict[str, TreeNode] = field(default_factory=dict)
    roots: list[TreeNode] = field(default_factory=list)
    families: list[Family] = field(default_factory=list)
    connectors: list[Connector] = field(default_factory=list)
    labels: list[GenerationLabel] = field(default_factory=list)
    width: float = 0
    height: float = 0

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, person_id: str) -> TreeNode:
        return self.nodes[person_id]

    def positions(self) -> dict[str, tuple[float, float]]:
        return {pid: (n.x, n.y) for pid, n in self.nodes.items()}


def _family_children(node: TreeNode, partner: TreeNode | None) -> list[TreeNode]:
    children = list(node.children)
    if partner is not None:
        seen = {c.id for c in children}
        children.extend(c for c in partner.children if c.id not in seen)
    return children


def _new_family(node: TreeNode, positioned: set[str]) -> Family | None:
    if node.id in positioned:
        return None
    positioned.add(node.id)

    partner = node.spouse
    if partner is not None and partner.id in positioned:
        partner = None
    if partner is not None:
        positioned.add(partner.id)
    return Family(node, partner)


def _claim(node: TreeNode, positioned: set[str]) -> Family | None:
    """
    Build the family unit rooted at `node`, claiming every node it places.

    A node that is already claimed is skipped, which is what keeps a spouse
    from being placed again when it is reached as someone's child, and what
    stops parent cycles. Claims happen depth first, in child order.
    """
    root = _new_family(node, positioned)
    if root is None:
        return None

    stack = [(root, iter(_family_children(root.head, root.partner)))]
    while stack:
        family, pending = stack[-1]
        child = next(pending, None)
        if child is None:
            stack.pop()
            continue
        child_family = _new_family(child, positioned)
        if child_family is not None:
            family.children.append(child_family)
            stack.append(
                (child_family, iter(_family_children(child, child_family.partner)))
            )
    return root


def _unit_width(family: Family, config: LayoutConfig) -> float:
    if family.partner is None:
        return config.node_width
    return 2 * config.node_width + config.spouse_spacing


def _children_span(family: Family, config: LayoutConfig) -> float:
    if not family.children:
        return 0
    return sum(c.width for c in family.children) + config.horizontal_spacing * (
        len(family.children) - 1
    )


def _measure(root: Family, config: LayoutConfig) -> float:
    # Reversed pre-order visits every child before its parent
    for family in reversed(list(root.walk())):
        family.width = max(_unit_width(family, config), _children_span(family, config))
    return root.width


def _place(root: Family, left: float, y: float, config: LayoutConfig) -> float:
    """Position a measured family unit; returns the right-most x it occupies."""
    stack = [(root, left, y)]
    while stack:
        family, family_left, family_y = stack.pop()
        center = family_left + family.width / 2

        head = family.head
        head.x = center - _unit_width(family, config) / 2
        head.y = family_y
        if family.partner is not None:
            family.partner.x = head.x + config.node_width + config.spouse_spacing
            family.partner.y = family_y

        child_y = family_y + config.node_height + config.vertical_spacing
        child_left = center - _children_span(family, config) / 2
        for child in family.children:
            stack.append((child, child_left, child_y))
            child_left += child.width + config.horizontal_spacing

    return left + root.width


def position_family(
    node: TreeNode, x: float, y: float, positioned: set[str], config: LayoutConfig
) -> tuple[Family | None, float]:
    """
    Lay out the subtree of `node` with its left edge at `x` and its row at `y`.

    Returns the family unit (None if `node` was already positioned) and the
    right-most x extent consumed, which equals `x` for a no-op.
    """
    family = _claim(node, positioned)
    if family is None:
        return None, x
    _measure(family, config)
    return family, _place(family, x, y, config)


def assign_positions(roots: Iterable[TreeNode], config: LayoutConfig) -> list[Family]:
    """
    Position every root subtree left to right, separated by `root_gap`.

    The positioned set is local to this call.
    """
    positioned: set[str] = set()
    families = []
    cursor = config.margin
    for root in roots:
        family, right = position_family(root, cursor, config.margin, positioned, config)
        if family is not None:
            families.append(family)
            cursor = right + config.root_gap
    return families


def layout_tree(persons: Iterable[Person], config: LayoutConfig | None = None) -> TreeLayout:
    """
    Compute the full layout of a person list: nodes, positions, connectors,
    generation labels and canvas size.

    Never raises on inconsistent relationship data; dangling references,
    self references and cycles degrade to "no relationship".
    """
    config = config or LayoutConfig()
    nodes = build_nodes(persons, config.node_width, config.node_height)
    roots = find_roots(nodes)
    families = assign_positions(roots, config)

    # Anything the roots did not cover is laid out as an extra root
    positioned = {n.id for f in families for unit in f.walk() for n in unit.members()}
    if len(positioned) < len(nodes):
        cursor = config.margin
        if families:
            cursor = max(n.x + n.width for n in nodes.values() if n.id in positioned)
            cursor += config.root_gap
        for node in nodes.values():
            family, right = position_family(node, cursor, config.margin, positioned, config)
            if family is not None:
                roots.append(node)
                families.append(family)
                cursor = right + config.root_gap

    width, height = canvas_size(
        nodes.values(), config.margin, config.min_width, config.min_height
    )
    return TreeLayout(
        config=config,
        nodes=nodes,
        roots=roots,
        families=families,
        connectors=derive_connectors(families, config.vertical_spacing),
        labels=generation_labels(nodes.values()),
        width=width,
        height=height,
    )
