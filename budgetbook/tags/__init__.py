"""Tag taxonomy package."""

from budgetbook.tags.hierarchy import MalformedHierarchyError, TagHierarchy, TagNode

__all__ = ["MalformedHierarchyError", "TagHierarchy", "TagNode"]
