"""Relationship graph construction: normalization, tree nodes, roots, NetworkX views."""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

import networkx as nx

from models import Person


@dataclass(eq=False)
class TreeNode:
    """A Person wrapped for one layout pass. Compared by identity."""

    person: Person
    width: float
    height: float
    children: list["TreeNode"] = field(default_factory=list)
    spouse: "TreeNode | None" = None
    x: float | None = None
    y: float | None = None

    @property
    def id(self) -> str:
        return self.person.id

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def __repr__(self) -> str:
        return f"TreeNode({self.id!r}, x={self.x}, y={self.y})"


@dataclass
class Adjacency:
    """Cleaned relationships of one person."""

    person_id: str
    parent_id: str | None = None
    spouse_id: str | None = None


def unique_people(persons: Iterable[Person]) -> list[Person]:
    """Drop records whose id was already seen; the first record wins."""
    seen: set[str] = set()
    result = []
    for p in persons:
        if p.id in seen:
            continue
        seen.add(p.id)
        result.append(p)
    return result


def normalize_relationships(persons: Iterable[Person]) -> dict[str, Adjacency]:
    """
    Clean parent and spouse references before any layout work.

    - Dangling or self-referential parent_id/spouse_id become None.
    - Spouse links are made symmetric. Persons are processed in order and the
      last assignment wins; a partner displaced by a later assignment loses
      its link, so A.spouse_id == B implies B.spouse_id == A afterwards.

    Returns a dict keyed by person id, in input order.
    """
    people = unique_people(persons)
    adjacency = {p.id: Adjacency(p.id) for p in people}

    for p in people:
        if p.parent_id in adjacency and p.parent_id != p.id:
            adjacency[p.id].parent_id = p.parent_id

    for p in people:
        other = p.spouse_id
        if other not in adjacency or other == p.id:
            continue
        _link(adjacency, p.id, other)

    return adjacency


def _link(adjacency: dict[str, Adjacency], a: str, b: str):
    for me, partner in ((a, b), (b, a)):
        previous = adjacency[me].spouse_id
        if previous is not None and previous != partner:
            adjacency[previous].spouse_id = None
        adjacency[me].spouse_id = partner


def build_nodes(
    persons: Iterable[Person], width: float, height: float
) -> dict[str, TreeNode]:
    """
    Create one TreeNode per person with children and spouse populated.

    Children keep the input order of the persons list.
    """
    people = unique_people(persons)
    adjacency = normalize_relationships(people)
    nodes = {p.id: TreeNode(p, width, height) for p in people}

    for node in nodes.values():
        adj = adjacency[node.id]
        if adj.parent_id is not None:
            nodes[adj.parent_id].children.append(node)
        if adj.spouse_id is not None:
            node.spouse = nodes[adj.spouse_id]

    return nodes


def _reachable(start: TreeNode, include_spouse: bool) -> set[str]:
    """Ids reachable from start (excluding start unless on a cycle)."""
    seen: set[str] = set()
    queue = deque([start])
    while queue:
        node = queue.popleft()
        nexts = list(node.children)
        if include_spouse and node.spouse is not None:
            nexts.append(node.spouse)
        for n in nexts:
            if n.id not in seen:
                seen.add(n.id)
                queue.append(n)
    return seen


def find_roots(nodes: dict[str, TreeNode]) -> list[TreeNode]:
    """
    Choose the entry points of the forest.

    Candidates are nodes without a resolved parent or with generation 0.
    A candidate that is a descendant of another candidate is dropped. Every
    node not reachable from the remaining roots (via children and spouses)
    then becomes an extra root, scanning in input order.
    """
    has_parent = {child.id for node in nodes.values() for child in node.children}
    candidates = [
        n for n in nodes.values() if n.id not in has_parent or n.person.generation == 0
    ]

    descendants = {c.id: _reachable(c, include_spouse=False) for c in candidates}
    roots = [
        c
        for c in candidates
        if not any(c.id in descendants[o.id] for o in candidates if o is not c)
    ]

    reached: set[str] = set()
    for root in roots:
        reached.add(root.id)
        reached |= _reachable(root, include_spouse=True)

    for node in nodes.values():
        if node.id not in reached:
            roots.append(node)
            reached.add(node.id)
            reached |= _reachable(node, include_spouse=True)

    return roots


def build_graph(persons: Iterable[Person]) -> nx.DiGraph:
    """Build a NetworkX directed graph from a person list."""
    people = unique_people(persons)
    adjacency = normalize_relationships(people)
    G = nx.DiGraph()

    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for p in people:
        G.add_node(
            p.id,
            person_name=p.name,
            gender=p.gender,
            generation=p.generation,
            relation=p.relation,
        )

    for adj in adjacency.values():
        if adj.parent_id is not None:
            G.add_edge(adj.parent_id, adj.person_id, relationship_type="PARENT_OF")
        if adj.spouse_id is not None:
            G.add_edge(adj.person_id, adj.spouse_id, relationship_type="SPOUSE_OF")

    return G


def get_ego_subgraph(G: nx.DiGraph, center_id: str, radius: int = 2) -> nx.DiGraph:
    """
    Relatives of one person up to `radius` steps away, counting a parent,
    child or spouse link as one step in either direction.

    Raises ValueError for an id that is not in the graph.
    """
    if center_id not in G:
        raise ValueError(f"Person ID {center_id} not found in graph")

    # Use undirected view so parents, children and spouses all count
    undirected = G.to_undirected(as_view=True)
    ego = nx.ego_graph(undirected, center_id, radius=radius)

    return G.subgraph(ego.nodes()).copy()


def get_descendant_subgraph(
    G: nx.DiGraph, person_id: str, include_spouses: bool = True
) -> nx.DiGraph:
    """
    Extract the branch below a person: all PARENT_OF descendants, plus the
    spouses of everyone in the branch when `include_spouses` is set.
    """
    if person_id not in G:
        raise ValueError(f"Person ID {person_id} not found in graph")

    parent_graph = nx.DiGraph()
    parent_graph.add_nodes_from(G)
    parent_graph.add_edges_from(
        (u, v) for u, v, d in G.edges(data=True) if d.get("relationship_type") == "PARENT_OF"
    )

    branch = {person_id} | nx.descendants(parent_graph, person_id)
    if include_spouses:
        for node in list(branch):
            for neighbor in G.successors(node):
                if G.edges[node, neighbor].get("relationship_type") == "SPOUSE_OF":
                    branch.add(neighbor)

    return G.subgraph(branch).copy()


@dataclass(eq=False)
class Family:
    """A positioned unit: a head node, its partner if any, and their children's units."""

    head: TreeNode
    partner: TreeNode | None = None
    children: list["Family"] = field(default_factory=list)
    width: float = 0.0  # horizontal extent of the whole subtree

    def members(self) -> list[TreeNode]:
        return [self.head] if self.partner is None else [self.head, self.partner]

    def walk(self):
        """Yield this unit and every unit below it, depth first."""
        stack = [self]
        while stack:
            family = stack.pop()
            yield family
            stack.extend(reversed(family.children))
