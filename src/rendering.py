"""Render-ready view of a family tree: themed nodes, connectors, labels and hooks."""

from dataclasses import dataclass, field
from typing import Callable, Iterable

from canvas import GenerationLabel
from connectors import Connector
from layout import LayoutConfig, TreeLayout, layout_tree
from models import DEFAULT_THEME, Person

EMPTY_MESSAGE = "Your family tree is empty"
EMPTY_HINT = "Click the + button to add your first person"
CONNECTOR_COLOR = "#94A3B8"

PersonCallback = Callable[[Person], None]


@dataclass(frozen=True)
class NodeStyle:
    background: str
    border: str
    accent: str


NEUTRAL_STYLE = NodeStyle(background="#FFFFFF", border="#D9D5CE", accent="#F5F3EF")

# Tailwind 50/200/100 shades
GENDER_STYLES = {
    "male": NodeStyle(background="#EFF6FF", border="#BFDBFE", accent="#DBEAFE"),
    "female": NodeStyle(background="#FDF2F8", border="#FBCFE8", accent="#FCE7F3"),
}
OTHER_STYLE = NodeStyle(background="#FAF5FF", border="#E9D5FF", accent="#F3E8FF")


def node_style(person: Person, theme: str) -> NodeStyle:
    """Colors for one card. Only the colorful theme depends on the person."""
    if theme == "colorful":
        return GENDER_STYLES.get(person.gender, OTHER_STYLE)
    return NEUTRAL_STYLE


@dataclass
class RenderedNode:
    person: Person
    x: float
    y: float
    width: float
    height: float
    style: NodeStyle


@dataclass
class RenderedTree:
    theme: str
    nodes: list[RenderedNode] = field(default_factory=list)
    connectors: list[Connector] = field(default_factory=list)
    labels: list[GenerationLabel] = field(default_factory=list)
    width: float = 0
    height: float = 0
    on_node_click: PersonCallback | None = None
    on_edit_person: PersonCallback | None = None
    layout: TreeLayout | None = None  # the layout pass this view was built from

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def empty_message(self) -> str | None:
        return EMPTY_MESSAGE if self.is_empty else None

    def find(self, person_id: str) -> RenderedNode:
        for node in self.nodes:
            if node.person.id == person_id:
                return node
        raise KeyError(person_id)

    def click(self, person_id: str):
        """Fire the node click hook with the originating person."""
        person = self.find(person_id).person
        if self.on_node_click is not None:
            self.on_node_click(person)

    def edit(self, person_id: str):
        """Fire the edit hook with the originating person."""
        person = self.find(person_id).person
        if self.on_edit_person is not None:
            self.on_edit_person(person)


def render_tree(
    persons: Iterable[Person],
    theme: str = DEFAULT_THEME,
    on_node_click: PersonCallback | None = None,
    on_edit_person: PersonCallback | None = None,
    config: LayoutConfig | None = None,
) -> RenderedTree:
    """Lay out the person list and attach theme styling and interaction hooks."""
    layout = layout_tree(persons, config)

    nodes = [
        RenderedNode(
            person=n.person,
            x=n.x,
            y=n.y,
            width=n.width,
            height=n.height,
            style=node_style(n.person, theme),
        )
        for n in layout.nodes.values()
    ]

    return RenderedTree(
        theme=theme,
        nodes=nodes,
        connectors=layout.connectors,
        labels=[label for label in layout.labels if label.text],
        width=layout.width,
        height=layout.height,
        on_node_click=on_node_click,
        on_edit_person=on_edit_person,
        layout=layout,
    )
