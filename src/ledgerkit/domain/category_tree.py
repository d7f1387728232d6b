"""In-memory view over one tenant's category forest.

The tree owns every category in an ``id -> Category`` map; child lists hold
ids only. All walks are iterative so arbitrarily deep (but finite) trees are
safe, and a corrupt parent chain that loops is cut at the first repeat.
"""

import logging
from typing import Any, Iterable, Iterator, Optional

from ledgerkit.domain.dto import SelectItem
from ledgerkit.domain.entities import Category

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "


class CategoryTree:
    """Adjacency-map view of a tenant's categories."""

    def __init__(self, categories: Iterable[Category]):
        """Index categories by id and by parent.

        Args:
            categories: Flat categories of one tenant. Child order within a
                parent follows this input order.
        """
        self._by_id: dict[int, Category] = {}
        self._children: dict[int, list[int]] = {}
        self._roots: list[int] = []

        ordered = list(categories)
        for cat in ordered:
            self._by_id[cat.id] = cat

        for cat in ordered:
            parent_id = cat.parent_id
            if parent_id is not None and parent_id in self._by_id:
                self._children.setdefault(parent_id, []).append(cat.id)
                continue
            if parent_id is not None:
                logger.warning(
                    "Category %s references missing parent %s; treating it as a root",
                    cat.id,
                    parent_id,
                )
            self._roots.append(cat.id)

        self._roots.sort()

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, category_id: int) -> Optional[Category]:
        return self._by_id.get(category_id)

    def children_of(self, category_id: int) -> list[int]:
        return list(self._children.get(category_id, ()))

    def root_ids(self) -> list[int]:
        return list(self._roots)

    def _ancestors(self, category_id: int) -> Iterator[Category]:
        """Yield the parent chain of a category, nearest first."""
        seen = {category_id}
        current = self._by_id.get(category_id)
        while current is not None and current.parent_id is not None:
            parent_id = current.parent_id
            if parent_id in seen:
                logger.warning("Category %s has a cyclic parent chain", category_id)
                return
            seen.add(parent_id)
            current = self._by_id.get(parent_id)
            if current is not None:
                yield current

    def compute_path(self, category_id: int) -> str:
        """Return the breadcrumb path of a category.

        Root categories return their own name and unknown ids return an empty
        string. A missing ancestor truncates the path at that point.

        Example: ``"Food > Dairy > Cheese"``.
        """
        cat = self._by_id.get(category_id)
        if cat is None:
            return ""

        path_parts = [cat.name]
        path_parts.extend(ancestor.name for ancestor in self._ancestors(category_id))
        return PATH_SEPARATOR.join(reversed(path_parts))

    def is_descendant(self, candidate_ancestor_id: int, node_id: int) -> bool:
        """Return True if ``candidate_ancestor_id`` is a strict ancestor of ``node_id``."""
        return any(
            ancestor.id == candidate_ancestor_id for ancestor in self._ancestors(node_id)
        )

    def descendant_ids(self, category_id: int) -> list[int]:
        """Return all descendants of a category in depth-first pre-order."""
        result: list[int] = []
        stack = list(reversed(self._children.get(category_id, ())))
        visited = {category_id}
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            result.append(current)
            stack.extend(reversed(self._children.get(current, ())))
        return result

    def post_order(self, category_id: int) -> list[int]:
        """Return the subtree of a category with children before parents.

        The category itself comes last, so deleting in this order never
        removes a parent while one of its children still exists.
        """
        result: list[int] = []
        stack: list[tuple[int, bool]] = [(category_id, False)]
        visited: set[int] = set()
        while stack:
            current, expanded = stack.pop()
            if expanded:
                result.append(current)
                continue
            if current in visited:
                continue
            visited.add(current)
            stack.append((current, True))
            for child_id in reversed(self._children.get(current, ())):
                stack.append((child_id, False))
        return result

    def build_tree(self) -> list[dict[str, Any]]:
        """Build the nested tree view.

        Returns:
            Root nodes in ascending id order. Each node is a dict with ``id``,
            ``name``, ``parent_id`` (omitted for roots) and ``children``.
        """
        nodes: dict[int, dict[str, Any]] = {}
        for cat in self._by_id.values():
            node: dict[str, Any] = {"id": cat.id, "name": cat.name, "children": []}
            if cat.parent_id is not None:
                node["parent_id"] = cat.parent_id
            nodes[cat.id] = node

        for parent_id, child_ids in self._children.items():
            nodes[parent_id]["children"].extend(nodes[child_id] for child_id in child_ids)

        return [nodes[root_id] for root_id in self._roots]

    def select_items(self) -> list[SelectItem]:
        """Return every category as a ``{id, label}`` item labelled by its path."""
        items = [
            SelectItem(id=cat_id, label=self.compute_path(cat_id)) for cat_id in self._by_id
        ]
        items.sort(key=lambda item: (item.label.lower(), item.id))
        return items
