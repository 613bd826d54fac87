"""
Tag Hierarchy

Builds the parent/child category tree from a flat list of tags whose parents
are referenced by id, and renders it as an indented pick list.

A tag whose parent id does not resolve to a known tag is shown as a root.
Cyclic parent chains are rejected when the hierarchy is built, so every
traversal below terminates.
"""

from typing import Iterable, NamedTuple, Optional

from budgetbook.models.transaction import Tag


INDENT = "  "


class MalformedHierarchyError(ValueError):
    """The tag parent chain is cyclic or a tag id is declared inconsistently."""
    pass


class TagNode(NamedTuple):
    """A tag together with its depth in the flattened listing."""
    tag: Tag
    depth: int

    @property
    def label(self) -> str:
        return INDENT * self.depth + self.tag.name


class TagHierarchy:
    """
    Read-only index over a set of tags.

    Children keep the order in which they appear in the input.
    """

    def __init__(self, tags: Iterable[Tag] = ()):
        self._tags: list[Tag] = []
        self._by_id: dict[int, Tag] = {}
        self._children: dict[int, list[Tag]] = {}

        for tag in tags:
            known = self._by_id.get(tag.id)
            if known is not None:
                if known.name != tag.name:
                    raise MalformedHierarchyError(
                        f"Tag id {tag.id} declared as both {known.name!r} and {tag.name!r}"
                    )
                continue  # Same tag listed twice
            self._by_id[tag.id] = tag
            self._tags.append(tag)

        for tag in self._tags:
            if tag.parent_id is not None and tag.parent_id in self._by_id:
                self._children.setdefault(tag.parent_id, []).append(tag)

        self._check_acyclic()

    def _check_acyclic(self) -> None:
        for tag in self._tags:
            visited = {tag.id}
            current = self.parent(tag)
            while current is not None:
                if current.id in visited:
                    raise MalformedHierarchyError(
                        f"Tag {tag.name!r} (id {tag.id}) is part of a parent cycle"
                    )
                visited.add(current.id)
                current = self.parent(current)

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self):
        return iter(self._tags)

    def __contains__(self, tag: object) -> bool:
        if not isinstance(tag, Tag):
            return False
        return self._by_id.get(tag.id) == tag

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags)

    def get(self, tag_id: int) -> Optional[Tag]:
        return self._by_id.get(tag_id)

    def parent(self, tag: Tag) -> Optional[Tag]:
        """The resolved parent of a tag, or None for a root."""
        node = self._by_id.get(tag.id, tag)
        if node.parent_id is None:
            return None
        return self._by_id.get(node.parent_id)

    def ancestors(self, tag: Tag) -> list[Tag]:
        """Parent chain of a tag, nearest first."""
        chain = []
        current = self.parent(tag)
        while current is not None:
            chain.append(current)
            current = self.parent(current)
        return chain

    def children(self, tag: Tag) -> list[Tag]:
        return list(self._children.get(tag.id, ()))

    def roots(self) -> list[Tag]:
        """Tags with no parent, or whose parent is unknown."""
        return [tag for tag in self._tags if self.parent(tag) is None]

    def children_map(self) -> dict[Tag, list[Tag]]:
        """Lookup from each parent tag to its ordered children."""
        return {
            self._by_id[parent_id]: list(children)
            for parent_id, children in self._children.items()
        }

    def flatten(self) -> list[TagNode]:
        """Depth-first listing starting from the roots."""
        nodes: list[TagNode] = []
        for root in self.roots():
            self._walk(root, 0, nodes)
        return nodes

    def _walk(self, tag: Tag, depth: int, nodes: list[TagNode]) -> None:
        nodes.append(TagNode(tag, depth))
        for child in self._children.get(tag.id, ()):
            self._walk(child, depth + 1, nodes)

    def formatted(self) -> list[str]:
        """Indented labels for a pick list, e.g. ["Food", "  Groceries"]."""
        return [node.label for node in self.flatten()]

    def find_by_name(self, label: str) -> Optional[Tag]:
        """Resolve a (possibly indented) pick-list label to the first tag with that name."""
        name = label.strip()
        for tag in self._tags:
            if tag.name == name:
                return tag
        return None
