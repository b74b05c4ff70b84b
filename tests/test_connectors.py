from connectors import PARENT_CHILD, SPOUSE, Connector
from layout import LayoutConfig, layout_tree
from models import Person

CONFIG = LayoutConfig()


def P(pid, parent=None, spouse=None, generation=0):
    return Person(id=pid, name=pid.upper(), generation=generation, parent_id=parent, spouse_id=spouse)


def of_kind(connectors, kind):
    return [c for c in connectors if c.kind == kind]


def horizontal(connectors):
    return [c for c in connectors if c.y1 == c.y2]


def test_two_children_get_a_single_bus():
    layout = layout_tree([P("r"), P("a", parent="r", generation=1), P("b", parent="r", generation=1)])
    lines = of_kind(layout.connectors, PARENT_CHILD)

    assert len(lines) == 4  # stem, bus, two drops
    bus = horizontal(lines)
    assert bus == [Connector(PARENT_CHILD, 144, 328, 368, 328)]
    assert Connector(PARENT_CHILD, 256, 288, 256, 328) in lines
    assert Connector(PARENT_CHILD, 144, 328, 144, 368) in lines
    assert Connector(PARENT_CHILD, 368, 328, 368, 368) in lines
    assert of_kind(layout.connectors, SPOUSE) == []


def test_single_child_has_no_bus():
    layout = layout_tree([P("r"), P("a", parent="r", generation=1)])
    lines = layout.connectors
    assert len(lines) == 2
    assert horizontal(lines) == []


def test_mutual_spouses_get_one_dashed_line():
    layout = layout_tree([P("h", spouse="w"), P("w", spouse="h")])

    assert layout.connectors == [Connector(SPOUSE, 240, 168, 272, 168)]
    assert layout.connectors[0].style == "dashed"


def test_couple_stem_starts_between_partners():
    layout = layout_tree([P("h", spouse="w"), P("w"), P("k", parent="w", generation=1)])
    h, w, k = layout.node("h"), layout.node("w"), layout.node("k")
    stem = [c for c in of_kind(layout.connectors, PARENT_CHILD) if c.y1 == h.y + h.height / 2]

    assert len(stem) == 1
    assert stem[0].x1 == (h.center_x + w.center_x) / 2 == k.center_x
    assert stem[0].style == "solid"


def test_cycle_does_not_duplicate_lines():
    layout = layout_tree(
        [P("a", parent="b", spouse="b", generation=1), P("b", parent="a", spouse="a", generation=1)]
    )
    assert len(of_kind(layout.connectors, SPOUSE)) == 1
    assert len(layout.connectors) == len(set(layout.connectors))


def test_connectors_are_not_repeated_for_larger_trees():
    persons = [
        P("gp", spouse="gm", generation=-1),
        P("gm", spouse="gp", generation=-1),
        P("f", parent="gp", spouse="m"),
        P("m", spouse="f"),
        P("u", parent="gm"),
        P("k1", parent="f", generation=1),
        P("k2", parent="m", generation=1),
    ]
    layout = layout_tree(persons)

    assert len(of_kind(layout.connectors, SPOUSE)) == 2
    assert len(layout.connectors) == len(set(layout.connectors))
    drops = [c for c in layout.connectors if c.x1 == c.x2 and c.y2 == layout.node("k2").y]
    assert len(drops) == 2
