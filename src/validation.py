"""Data-quality checks for person lists."""

from collections import Counter
from typing import Iterable

import networkx as nx

from graph import build_graph
from models import Person


def validate_people(persons: Iterable[Person]) -> list[str]:
    """
    Check a person list for:
    - Duplicate ids
    - Dangling or self-referential parent/spouse references
    - Asymmetric or conflicting spouse links
    - Cycles in parent-child relationships
    - Generation values that disagree with the relationships
    - Persons whose generation 0 makes them a root despite having a parent

    Layout tolerates all of these; the warnings explain why a tree may come
    out differently than expected. Returns a list of warning messages.
    """
    persons = list(persons)
    warnings: list[str] = []

    counts = Counter(p.id for p in persons)
    for pid, count in counts.items():
        if count > 1:
            warnings.append(f"Duplicate id {pid!r} appears {count} times; only the first is used")

    by_id: dict[str, Person] = {}
    for p in persons:
        by_id.setdefault(p.id, p)

    for p in by_id.values():
        if p.parent_id is not None:
            if p.parent_id == p.id:
                warnings.append(f"{p.name} ({p.id}) is listed as their own parent")
            elif p.parent_id not in by_id:
                warnings.append(f"{p.name} ({p.id}) has unknown parent {p.parent_id!r}")
        if p.spouse_id is not None:
            if p.spouse_id == p.id:
                warnings.append(f"{p.name} ({p.id}) is listed as their own spouse")
            elif p.spouse_id not in by_id:
                warnings.append(f"{p.name} ({p.id}) has unknown spouse {p.spouse_id!r}")

    # Spouse consistency
    claims: dict[str, list[str]] = {}
    for p in by_id.values():
        if p.spouse_id in by_id and p.spouse_id != p.id:
            claims.setdefault(p.spouse_id, []).append(p.id)
    for target, claimants in claims.items():
        if len(claimants) > 1:
            warnings.append(
                f"{by_id[target].name} ({target}) is claimed as spouse by {sorted(claimants)}; "
                "only one spouse is shown"
            )
        for claimant in claimants:
            back = by_id[target].spouse_id
            if back is None:
                warnings.append(
                    f"Spouse link {claimant} -> {target} is one-directional; it will be mirrored"
                )
            elif back != claimant and back in by_id:
                warnings.append(
                    f"Conflicting spouse links: {claimant} -> {target} but {target} -> {back}"
                )

    # Relationship graph after cleanup: dangling and self references are gone
    G = build_graph(persons)

    # Create a subgraph with only PARENT_OF edges for cycle detection
    parent_edges = [
        (u, v) for u, v, d in G.edges(data=True) if d.get("relationship_type") == "PARENT_OF"
    ]
    parent_graph = nx.DiGraph()
    parent_graph.add_nodes_from(G)
    parent_graph.add_edges_from(parent_edges)

    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    for parent, child in parent_edges:
        parent_data, child_data = G.nodes[parent], G.nodes[child]
        if child_data["generation"] != parent_data["generation"] + 1:
            warnings.append(
                f"{child_data['person_name']} ({child}) has generation {child_data['generation']} "
                f"but parent {parent_data['person_name']} has generation {parent_data['generation']}"
            )

    # SPOUSE_OF edges run both ways; report each pair once
    seen_pairs: set[tuple[str, str]] = set()
    for u, v, d in G.edges(data=True):
        if d.get("relationship_type") != "SPOUSE_OF":
            continue
        pair = tuple(sorted((u, v)))
        if pair in seen_pairs:
            continue
        seen_pairs.add(pair)
        a, b = G.nodes[pair[0]], G.nodes[pair[1]]
        if a["generation"] != b["generation"]:
            warnings.append(
                f"Spouses {a['person_name']} ({a['generation']}) and {b['person_name']} "
                f"({b['generation']}) are on different generations"
            )

    # Root selection treats generation 0 as a root even when a parent exists
    for node, data in G.nodes(data=True):
        if parent_graph.in_degree(node) and data["generation"] == 0:
            warnings.append(
                f"{data['person_name']} ({node}) has a parent but generation 0; "
                "it may be drawn as a separate root"
            )

    return warnings
