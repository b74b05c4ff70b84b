import pytest

from models import Person
from rendering import EMPTY_MESSAGE, GENDER_STYLES, NEUTRAL_STYLE, OTHER_STYLE, node_style, render_tree


def family():
    return [
        Person(id="r", name="Ravi", relation="Father", gender="male", generation=-1),
        Person(id="b", name="Bharathi", relation="Mother", gender="female", generation=-1, spouse_id="r"),
        Person(id="k", name="Kiran", relation="Self", gender="other", generation=0, parent_id="r"),
    ]


def test_render_positions_every_person():
    rendered = render_tree(family())

    assert [n.person.id for n in rendered.nodes] == ["r", "b", "k"]
    assert not rendered.is_empty
    assert rendered.empty_message is None
    assert len([c for c in rendered.connectors if c.kind == "spouse"]) == 1
    # Blank label for generation 0 is not rendered
    assert [l.text for l in rendered.labels] == ["PARENTS"]


def test_empty_render_state():
    rendered = render_tree([])
    assert rendered.is_empty
    assert rendered.empty_message == EMPTY_MESSAGE
    assert rendered.nodes == []
    assert rendered.connectors == []


def test_theme_changes_style_not_geometry():
    modern = render_tree(family(), theme="modern")
    colorful = render_tree(family(), theme="colorful")

    assert [(n.x, n.y) for n in modern.nodes] == [(n.x, n.y) for n in colorful.nodes]
    assert [n.style for n in modern.nodes] == [NEUTRAL_STYLE] * 3
    assert [n.style for n in colorful.nodes] == [GENDER_STYLES["male"], GENDER_STYLES["female"], OTHER_STYLE]


def test_unknown_theme_uses_default_palette():
    assert node_style(family()[0], "sepia") == NEUTRAL_STYLE
    assert node_style(family()[0], "classic") == NEUTRAL_STYLE


def test_click_and_edit_hooks_receive_person():
    clicked, edited = [], []
    rendered = render_tree(family(), on_node_click=clicked.append, on_edit_person=edited.append)

    rendered.click("k")
    rendered.edit("b")

    assert [p.name for p in clicked] == ["Kiran"]
    assert [p.name for p in edited] == ["Bharathi"]


def test_hooks_are_optional_and_unknown_ids_raise():
    rendered = render_tree(family())
    rendered.click("r")
    with pytest.raises(KeyError):
        rendered.edit("nobody")


def test_rendered_tree_keeps_its_layout():
    rendered = render_tree(family())

    assert rendered.layout is not None
    assert len(rendered.layout.roots) == 1
    positions = rendered.layout.positions()
    assert {n.person.id: (n.x, n.y) for n in rendered.nodes} == positions
    assert rendered.connectors is rendered.layout.connectors
