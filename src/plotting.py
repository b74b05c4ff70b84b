"""Visualization functions for laid-out family trees."""

import matplotlib.pyplot as plt
import pydot
from matplotlib.figure import Figure
from matplotlib.patches import FancyBboxPatch

from connectors import SPOUSE
from rendering import CONNECTOR_COLOR, EMPTY_HINT, EMPTY_MESSAGE, RenderedTree

NAME_COLOR = "#2C3E2A"
BADGE_COLOR = "#3D5A3A"
LABEL_COLOR = "#64748B"
DPI = 100


def draw_tree(rendered: RenderedTree, ax=None) -> Figure:
    """
    Draw a rendered tree with matplotlib.

    Cards are pickable: a click fires the tree's click hook and a double
    click fires its edit hook, both with the originating Person.

    Args:
        rendered: Output of render_tree
        ax: Axes to draw into. If None, a new figure sized to the canvas is created.

    Returns:
        The figure holding the drawing
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(rendered.width / DPI, rendered.height / DPI), dpi=DPI)
    else:
        fig = ax.figure

    ax.set_xlim(0, rendered.width)
    ax.set_ylim(rendered.height, 0)  # ancestors at top
    ax.set_aspect("equal")
    ax.axis("off")

    if rendered.is_empty:
        ax.text(
            rendered.width / 2, rendered.height / 3, EMPTY_MESSAGE,
            ha="center", va="center", fontsize=16, color=LABEL_COLOR,
        )
        ax.text(
            rendered.width / 2, rendered.height / 3 + 40, EMPTY_HINT,
            ha="center", va="center", fontsize=11, color=LABEL_COLOR,
        )
        return fig

    for c in rendered.connectors:
        ax.plot(
            [c.x1, c.x2],
            [c.y1, c.y2],
            color=CONNECTOR_COLOR,
            linestyle="--" if c.kind == SPOUSE else "-",
            linewidth=1.5 if c.kind == SPOUSE else 2,
            alpha=0.6 if c.kind == SPOUSE else 1.0,
            zorder=1,
        )

    for label in rendered.labels:
        ax.text(8, label.y - 12, label.text, fontsize=8, color=LABEL_COLOR, va="bottom")

    for node in rendered.nodes:
        patch = FancyBboxPatch(
            (node.x, node.y),
            node.width,
            node.height,
            boxstyle="round,pad=0,rounding_size=16",
            facecolor=node.style.background,
            edgecolor=node.style.border,
            linewidth=2,
            picker=True,
            zorder=2,
        )
        patch.set_gid(node.person.id)
        ax.add_patch(patch)

        # Photo placeholder
        ax.add_patch(
            plt.Circle(
                (node.x + node.width / 2, node.y + 60),
                40,
                facecolor=node.style.accent,
                edgecolor=node.style.border,
                zorder=3,
            )
        )
        ax.text(
            node.x + node.width / 2, node.y + 130, node.person.name,
            ha="center", va="center", fontsize=9, fontweight="bold", color=NAME_COLOR, zorder=4,
        )
        if node.person.relation:
            ax.text(
                node.x + node.width / 2, node.y + 160, node.person.relation,
                ha="center", va="center", fontsize=8, color=BADGE_COLOR, zorder=4,
                bbox={"boxstyle": "round", "facecolor": node.style.accent, "edgecolor": "none"},
            )
        years = "-".join(y for y in (node.person.birth_year, node.person.death_year) if y)
        if years:
            ax.text(
                node.x + node.width / 2, node.y + 190, years,
                ha="center", va="center", fontsize=8, color=LABEL_COLOR, zorder=4,
            )

    def on_pick(event):
        person_id = event.artist.get_gid()
        if person_id is None:
            return
        if event.mouseevent.dblclick:
            rendered.edit(person_id)
        else:
            rendered.click(person_id)

    fig.canvas.mpl_connect("pick_event", on_pick)
    return fig


def to_dot(rendered: RenderedTree) -> pydot.Dot:
    """
    Build a Graphviz graph with every card pinned at its computed position.

    Connector segments become edges between invisible junction points, so
    `neato -n2` reproduces the same drawing. Graphviz's y axis points up,
    so coordinates are flipped against the canvas height.
    """
    P = pydot.Dot(graph_type="graph")
    P.set("splines", "line")
    P.set("bb", f"0,0,{rendered.width:g},{rendered.height:g}")

    for node in rendered.nodes:
        cx = node.x + node.width / 2
        cy = rendered.height - (node.y + node.height / 2)
        P.add_node(
            pydot.Node(
                str(node.person.id),
                label=f"{node.person.name}\n{node.person.relation}".strip(),
                shape="box",
                style="rounded,filled",
                fillcolor=node.style.background,
                color=node.style.border,
                width=f"{node.width / 72:.3f}",
                height=f"{node.height / 72:.3f}",
                fixedsize="true",
                fontsize="10",
                pos=f"{cx:g},{cy:g}!",
            )
        )

    junctions: dict[tuple[float, float], str] = {}

    def junction(x: float, y: float) -> str:
        key = (x, y)
        if key not in junctions:
            name = f"junction_{len(junctions)}"
            junctions[key] = name
            P.add_node(
                pydot.Node(
                    name,
                    shape="point",
                    width="0.01",
                    height="0.01",
                    label="",
                    style="invis",
                    pos=f"{x:g},{rendered.height - y:g}!",
                )
            )
        return junctions[key]

    for c in rendered.connectors:
        P.add_edge(
            pydot.Edge(
                junction(c.x1, c.y1),
                junction(c.x2, c.y2),
                color=CONNECTOR_COLOR,
                style=c.style,
            )
        )

    return P
