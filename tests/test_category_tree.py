"""Tests for the in-memory category tree."""

import logging

from ledgerkit.domain.category_tree import CategoryTree, PATH_SEPARATOR
from ledgerkit.domain.entities import Category


def _cat(cat_id, name, parent_id=None, tenant_id=1):
    return Category(id=cat_id, tenant_id=tenant_id, name=name, parent_id=parent_id)


def _sample_tree():
    return CategoryTree(
        [
            _cat(1, "Food"),
            _cat(2, "Dairy", 1),
            _cat(3, "Cheese", 2),
            _cat(4, "Bakery", 1),
            _cat(5, "Household"),
        ]
    )


def test_compute_path_for_root_is_its_name():
    assert _sample_tree().compute_path(1) == "Food"


def test_compute_path_joins_ancestors():
    tree = _sample_tree()
    assert tree.compute_path(3) == "Food > Dairy > Cheese"
    assert PATH_SEPARATOR.join(["Food", "Bakery"]) == tree.compute_path(4)


def test_compute_path_unknown_id_is_empty():
    assert _sample_tree().compute_path(99) == ""


def test_path_depth_matches_ancestor_count():
    tree = _sample_tree()
    for cat_id in (1, 2, 3, 4, 5):
        depth = 0
        current = tree.get(cat_id)
        while current.parent_id is not None:
            depth += 1
            current = tree.get(current.parent_id)
        assert len(tree.compute_path(cat_id).split(PATH_SEPARATOR)) == depth + 1


def test_is_descendant():
    tree = _sample_tree()
    assert tree.is_descendant(1, 3)
    assert tree.is_descendant(2, 3)
    assert not tree.is_descendant(3, 1)
    assert not tree.is_descendant(5, 3)
    # A node is not its own strict ancestor
    assert not tree.is_descendant(3, 3)


def test_descendant_ids_are_depth_first():
    tree = _sample_tree()
    assert tree.descendant_ids(1) == [2, 3, 4]
    assert tree.descendant_ids(3) == []


def test_post_order_puts_children_before_parents():
    order = _sample_tree().post_order(1)
    assert order == [3, 2, 4, 1]
    for cat_id in order:
        parent_id = _sample_tree().get(cat_id).parent_id
        if parent_id in order:
            assert order.index(cat_id) < order.index(parent_id)


def test_build_tree_nests_children_and_omits_root_parent():
    roots = _sample_tree().build_tree()

    assert [node["id"] for node in roots] == [1, 5]
    food = roots[0]
    assert "parent_id" not in food
    assert [child["name"] for child in food["children"]] == ["Dairy", "Bakery"]
    dairy = food["children"][0]
    assert dairy["parent_id"] == 1
    assert dairy["children"][0]["name"] == "Cheese"
    assert dairy["children"][0]["children"] == []


def test_build_tree_contains_every_category_once():
    seen = []
    stack = list(_sample_tree().build_tree())
    while stack:
        node = stack.pop()
        seen.append(node["id"])
        stack.extend(node["children"])
    assert sorted(seen) == [1, 2, 3, 4, 5]


def test_roots_sorted_by_id_regardless_of_input_order():
    tree = CategoryTree([_cat(7, "B"), _cat(3, "A"), _cat(5, "C")])
    assert tree.root_ids() == [3, 5, 7]


def test_orphan_is_promoted_to_root(caplog):
    with caplog.at_level(logging.WARNING, logger="ledgerkit"):
        tree = CategoryTree([_cat(1, "Food"), _cat(2, "Lost", 42)])

    assert tree.root_ids() == [1, 2]
    assert tree.compute_path(2) == "Lost"
    assert "missing parent 42" in caplog.text


def test_cyclic_parent_chain_terminates():
    tree = CategoryTree([_cat(1, "A", 2), _cat(2, "B", 1)])
    # Both have parents present, so neither is a root; walks still stop
    assert tree.root_ids() == []
    assert tree.compute_path(1) == "B > A"
    assert tree.is_descendant(2, 1)


def test_select_items_sorted_by_label():
    items = _sample_tree().select_items()
    assert [item.label for item in items] == [
        "Food",
        "Food > Bakery",
        "Food > Dairy",
        "Food > Dairy > Cheese",
        "Household",
    ]
    assert items[0].to_dict() == {"id": 1, "label": "Food"}


def test_empty_tree():
    tree = CategoryTree([])
    assert len(tree) == 0
    assert tree.build_tree() == []
    assert tree.select_items() == []
    assert 1 not in tree


def test_path_independent_of_input_order():
    cats = [_cat(1, "A"), _cat(2, "B", 1), _cat(3, "C", 2)]
    forward = CategoryTree(cats)
    backward = CategoryTree(list(reversed(cats)))

    assert forward.compute_path(3) == backward.compute_path(3) == "A > B > C"
    assert forward.build_tree() == backward.build_tree()
