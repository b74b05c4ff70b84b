import pytest

from layout import LayoutConfig, layout_tree
from models import Person

CONFIG = LayoutConfig()
W, H = CONFIG.node_width, CONFIG.node_height


def P(pid, parent=None, spouse=None, generation=0):
    return Person(id=pid, name=pid.upper(), generation=generation, parent_id=parent, spouse_id=spouse)


def assert_no_overlap(layout):
    rows = {}
    for node in layout.nodes.values():
        rows.setdefault(node.y, []).append(node)
    for row in rows.values():
        row.sort(key=lambda n: n.x)
        for left, right in zip(row, row[1:]):
            assert left.x + left.width <= right.x, (left, right)


def test_root_with_two_children():
    layout = layout_tree([P("r"), P("a", parent="r", generation=1), P("b", parent="r", generation=1)])
    r, a, b = layout.node("r"), layout.node("a"), layout.node("b")

    assert r.y == CONFIG.margin
    assert a.y == b.y == r.y + H + CONFIG.vertical_spacing
    assert r.center_x - a.center_x == pytest.approx(b.center_x - r.center_x)
    assert b.x - (a.x + W) == CONFIG.horizontal_spacing
    assert (r.x, a.x, b.x) == (160, 48, 272)


def test_spouse_pair_sits_side_by_side():
    layout = layout_tree([P("h", spouse="w"), P("w", spouse="h")])
    h, w = layout.node("h"), layout.node("w")

    assert h.y == w.y
    assert w.x - (h.x + W) == CONFIG.spouse_spacing
    assert len(layout.families) == 1


def test_dangling_parent_is_laid_out_as_root():
    layout = layout_tree([P("x", parent="missing", generation=1)])
    assert [n.id for n in layout.roots] == ["x"]
    assert layout.node("x").y == CONFIG.margin


def test_empty_input():
    layout = layout_tree([])
    assert layout.is_empty
    assert layout.connectors == []
    assert layout.labels == []
    assert (layout.width, layout.height) == (CONFIG.min_width, CONFIG.min_height)


def test_parent_cycle_terminates_without_overlap():
    layout = layout_tree([P("a", parent="b", generation=1), P("b", parent="a", generation=2)])
    a, b = layout.node("a"), layout.node("b")

    assert a.x is not None and b.x is not None
    assert (a.x, a.y) != (b.x, b.y)
    assert_no_overlap(layout)


def test_siblings_follow_input_order():
    persons = [P("r")] + [P(c, parent="r", generation=1) for c in ("c3", "c1", "c2")]
    layout = layout_tree(persons)
    xs = [layout.node(c).x for c in ("c3", "c1", "c2")]
    assert xs == sorted(xs)


def test_every_person_positioned_exactly_once():
    persons = [
        P("gp", spouse="gm", generation=-2),
        P("gm", generation=-2),
        P("u", parent="gp", generation=-1),
        P("a", spouse="u", generation=-1),
        P("f", parent="gp", generation=-1),
        P("m", spouse="f", generation=-1),
        P("c1", parent="u"),
        P("me", parent="f"),
        P("sis", parent="m"),
        P("lost", parent="ghost", generation=3),
        P("x", parent="y", generation=5),
        P("y", parent="x", generation=5),
        P("self", parent="self", spouse="self"),
    ]
    layout = layout_tree(persons)

    assert list(layout.nodes) == [p.id for p in persons]
    placed = [n.id for f in layout.families for unit in f.walk() for n in unit.members()]
    assert sorted(placed) == sorted(p.id for p in persons)
    assert all(n.x is not None and n.y is not None for n in layout.nodes.values())
    assert_no_overlap(layout)


def test_spouse_without_parent_is_placed_next_to_partner():
    layout = layout_tree(
        [P("gp", generation=-1), P("p", parent="gp"), P("s", spouse="p"), P("k", parent="s", generation=1)]
    )
    p, s, k = layout.node("p"), layout.node("s"), layout.node("k")

    assert s.y == p.y
    assert s.x == p.x + W + CONFIG.spouse_spacing
    # Children of either partner hang below the pair
    assert k.y == p.y + H + CONFIG.vertical_spacing
    assert k.center_x == pytest.approx((p.center_x + s.center_x) / 2)
    assert len(layout.families) == 1


def test_wide_subtrees_do_not_overlap():
    persons = [P("r"), P("a", parent="r", generation=1), P("b", parent="r", generation=1)]
    persons += [P(f"a{i}", parent="a", generation=2) for i in range(4)]
    persons += [P(f"b{i}", parent="b", generation=2) for i in range(3)]
    layout = layout_tree(persons)

    assert_no_overlap(layout)
    a, a_kids = layout.node("a"), [layout.node(f"a{i}") for i in range(4)]
    assert a.center_x == pytest.approx((a_kids[0].center_x + a_kids[-1].center_x) / 2)


def test_independent_roots_are_separated_by_gap():
    layout = layout_tree([P("one"), P("two")])
    one, two = layout.node("one"), layout.node("two")
    assert one.x == CONFIG.margin
    assert two.x == one.x + W + CONFIG.root_gap


def test_layout_is_idempotent():
    persons = [P("r", spouse="s"), P("s"), P("a", parent="r", generation=1), P("b", parent="s", generation=1)]
    first = layout_tree(persons)
    second = layout_tree(persons)

    assert first.positions() == second.positions()
    assert first.connectors == second.connectors
    assert (first.width, first.height) == (second.width, second.height)


def test_input_is_not_mutated():
    persons = [P("a", spouse="b"), P("b")]
    layout_tree(persons)
    assert persons[1].spouse_id is None


def test_custom_config():
    config = LayoutConfig(node_width=100, node_height=50, vertical_spacing=10, margin=0)
    layout = layout_tree([P("r"), P("c", parent="r", generation=1)], config)
    assert layout.node("c").y == 60
    assert layout.node("r").width == 100


@pytest.mark.parametrize(
    "kwargs", [{"node_width": 0}, {"node_height": -1}, {"vertical_spacing": -5}, {"root_gap": -1}]
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        LayoutConfig(**kwargs)


def test_long_parent_chain_lays_out():
    persons = [P(f"p{i}", parent=f"p{i - 1}" if i else None, generation=i) for i in range(2000)]
    layout = layout_tree(persons)

    assert len(layout.nodes) == 2000
    assert [r.id for r in layout.roots] == ["p0"]
    ys = [layout.node(p.id).y for p in persons]
    assert all(b - a == H + CONFIG.vertical_spacing for a, b in zip(ys, ys[1:]))
    assert {layout.node(p.id).x for p in persons} == {CONFIG.margin}
    assert layout.height == ys[-1] + H + CONFIG.margin
