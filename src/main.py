"""
1) Load a family tree (JSON person records, as exported by the web client).
2) Validate it for dangling references, cycles and generation mismatches.
3) Compute the layout: positions, spouse pairs, connectors, generation rows.
4) Optionally narrow it to one relative's neighbourhood or branch first.
5) Optionally store it in SQLite, write Graphviz DOT, or show it interactively.
"""

import argparse
import json
from pathlib import Path
import sys

from database import create_database, create_tree, store_people
from graph import build_graph, get_descendant_subgraph, get_ego_subgraph
from models import THEMES, DEFAULT_THEME, Person, person_from_dict
from plotting import draw_tree, to_dot
from rendering import render_tree
from validation import validate_people


def load_people_json(path: Path) -> list[Person]:
    """Read a JSON list of person records, or an object with a `familyTree` list."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("familyTree", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of persons")
    return [person_from_dict(record) for record in data]


def focus_people(persons: list[Person], person_id: str, radius: int, branch: bool) -> list[Person]:
    """Keep only the persons in one relative's neighbourhood or branch, in input order."""
    G = build_graph(persons)
    if branch:
        sub = get_descendant_subgraph(G, person_id)
    else:
        sub = get_ego_subgraph(G, person_id, radius=radius)
    return [p for p in persons if p.id in sub]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lay out a Parivaar family tree.")
    parser.add_argument("input", type=Path, help="JSON file with person records")
    parser.add_argument("--theme", choices=THEMES, default=DEFAULT_THEME)
    parser.add_argument("--name", help="Tree name when storing (default: input file stem)")
    parser.add_argument("--db", type=Path, help="SQLite database to store the tree in")
    parser.add_argument("--dot", type=Path, help="Write Graphviz DOT with pinned positions")
    parser.add_argument("--show", action="store_true", help="Open the interactive view")
    parser.add_argument("--focus", help="Lay out only the relatives around this person id")
    parser.add_argument(
        "--radius", type=int, default=2, help="Relationship steps kept around --focus (default 2)"
    )
    parser.add_argument(
        "--branch", action="store_true", help="With --focus, keep the person's descendants instead"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    print(f"Loading persons: {args.input}")
    try:
        persons = load_people_json(args.input)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"  Found {len(persons)} persons")

    print("Validating persons...")
    warnings = validate_people(persons)
    if warnings:
        print(f"  Found {len(warnings)} validation warnings:")
        for w in warnings[:10]:  # Show first 10 warnings
            print(f"    - {w}")
        if len(warnings) > 10:
            print(f"    ... and {len(warnings) - 10} more")
    else:
        print("  No validation issues found")

    if args.focus:
        try:
            persons = focus_people(persons, args.focus, args.radius, args.branch)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"  Focused on {args.focus}: {len(persons)} persons kept")

    print("Computing layout...")
    rendered = render_tree(
        persons,
        theme=args.theme,
        on_node_click=lambda p: print(f"Clicked {p.name} ({p.relation or p.id})"),
        on_edit_person=lambda p: print(f"Edit requested for {p.name} ({p.id})"),
    )
    layout = rendered.layout
    if layout.is_empty:
        print("  Tree is empty")
    else:
        print(f"  {len(layout.nodes)} nodes, {len(layout.roots)} roots, {len(layout.connectors)} connectors")
        print(f"  Canvas {layout.width:g} x {layout.height:g}, {len(layout.labels)} generation rows")

    if args.db:
        print(f"Storing tree in SQLite: {args.db}")
        conn = create_database(args.db)
        try:
            tree = create_tree(conn, args.name or args.input.stem, theme=args.theme)
            store_people(conn, tree.id, persons)
        finally:
            conn.close()
        print(f"  Stored as {tree.slug} ({tree.id})")

    if args.dot:
        to_dot(rendered).write(str(args.dot), format="raw")
        print(f"DOT saved to {args.dot}")

    if args.show:
        import matplotlib.pyplot as plt

        draw_tree(rendered)
        plt.show()

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
