"""Path-addressed document tree.

A document is stored as a tree of ``SubTree`` nodes. Every node knows its
absolute path, holds an optional primitive leaf value and an ordered list of
children. Paths are dot-separated segments, each a field name with an
optional ``[n]`` index, e.g. ``identifier[0].type.coding.code``.

Segments are literal: ``name`` and ``name[0]`` are two different nodes. Both
forms occur in documents produced by different writers, so readers which
must accept either representation check both.

The first segment of a resource fragment's absolute path is the entity uuid,
the second one is the resource key, e.g.
``3f1c...-...e2.KBV_PR_MIO_ULB_Organization``.
"""

import logging
import re
from typing import Any, Iterator, Optional

from pio_mapper.document.primitives import PrimitiveValue, parse_primitive
from pio_mapper.utils.exceptions import TreePathError

logger = logging.getLogger(__name__)

_SEGMENT_PATTERN = re.compile(r"^([^.\[\]\s]+)(?:\[(\d+)\])?$")


def split_path(path: str) -> list[str]:
    """Split a relative or absolute path into its segments.

    Args:
        path: Dot-separated path; the empty string addresses the node itself

    Returns:
        List of segments (empty for the empty path)

    Raises:
        TreePathError: If any segment is malformed
    """
    if path == "":
        return []
    segments = path.split(".")
    for segment in segments:
        if not _SEGMENT_PATTERN.match(segment):
            raise TreePathError(
                f"Invalid path segment {segment!r} in path {path!r}. "
                f"Segments must be a field name with an optional [n] index."
            )
    return segments


def field_name(segment: str) -> str:
    """Return the field name of a segment without its index."""
    match = _SEGMENT_PATTERN.match(segment)
    if not match:
        raise TreePathError(f"Invalid path segment: {segment!r}")
    return match.group(1)


def segment_index(segment: str) -> Optional[int]:
    """Return the index of a segment, or None for an unindexed segment."""
    match = _SEGMENT_PATTERN.match(segment)
    if not match:
        raise TreePathError(f"Invalid path segment: {segment!r}")
    return int(match.group(2)) if match.group(2) is not None else None


def join_path(base: str, relative: str) -> str:
    """Join two paths, either of which may be empty."""
    if not base:
        return relative
    if not relative:
        return base
    return f"{base}.{relative}"


def _repeat_order(node: "SubTree") -> int:
    # unindexed node sorts before index 0
    index = segment_index(node.last_path_element)
    return -1 if index is None else index


class SubTree:
    """One node of the document tree together with everything below it.

    Attributes:
        absolute_path: Full path of this node from the document root
        data: Primitive leaf value held by this node, if any
        children: Ordered direct children
    """

    def __init__(self, absolute_path: str, data: Optional[PrimitiveValue] = None) -> None:
        if absolute_path:
            split_path(absolute_path)
        self.absolute_path = absolute_path
        self.data = data
        self.children: list["SubTree"] = []

    def __repr__(self) -> str:
        return (
            f"SubTree({self.absolute_path!r}, data={self.data!r}, "
            f"children={len(self.children)})"
        )

    @property
    def last_path_element(self) -> str:
        """Final segment of the absolute path."""
        return self.absolute_path.rsplit(".", 1)[-1]

    @property
    def field(self) -> str:
        """Field name of the final segment, without index."""
        return field_name(self.last_path_element)

    @property
    def resource_id(self) -> str:
        """Entity key, i.e. the first segment of the absolute path."""
        return self.absolute_path.split(".", 1)[0]

    @property
    def resource_key(self) -> Optional[str]:
        """Resource key (second segment), if the path is deep enough."""
        segments = self.absolute_path.split(".")
        return segments[1] if len(segments) > 1 else None

    def is_empty(self) -> bool:
        return self.data is None and not self.children

    def _find_child(self, segment: str) -> Optional["SubTree"]:
        for child in self.children:
            if child.last_path_element == segment:
                return child
        return None

    def _find_node(self, path: str) -> Optional["SubTree"]:
        node: Optional[SubTree] = self
        for segment in split_path(path):
            node = node._find_child(segment)
            if node is None:
                return None
        return node

    def set_value(self, path: str, value: Optional[PrimitiveValue]) -> None:
        """Write a leaf value, creating intermediate nodes as needed.

        Args:
            path: Path relative to this node ("" writes this node's own value)
            value: Primitive value to store
        """
        node = self
        for segment in split_path(path):
            child = node._find_child(segment)
            if child is None:
                child = SubTree(join_path(node.absolute_path, segment))
                node.children.append(child)
            node = child
        node.data = value

    def get_sub_tree(self, path: str) -> "SubTree":
        """Return the node at ``path``.

        An absent path yields an empty, detached node carrying the requested
        absolute path; writing to it does not modify this tree.
        """
        node = self._find_node(path)
        if node is None:
            return SubTree(join_path(self.absolute_path, path))
        return node

    def has_path(self, path: str) -> bool:
        return self._find_node(path) is not None

    def get_value(self, path: str = "") -> Optional[PrimitiveValue]:
        node = self._find_node(path)
        return node.data if node is not None else None

    def get_value_as_string(self, path: str = "") -> Optional[str]:
        """Return the leaf value at ``path`` as text, or None if absent."""
        value = self.get_value(path)
        return value.to_string() if value is not None else None

    def get_repeated(self, path: str) -> list["SubTree"]:
        """Return all elements of a repeated field.

        The unindexed node (if present) comes first, followed by the indexed
        nodes in index order.

        Args:
            path: Path to the repeated field; the final segment must be unindexed
        """
        segments = split_path(path)
        if not segments:
            raise TreePathError("get_repeated needs a non-empty path")
        if segment_index(segments[-1]) is not None:
            raise TreePathError(
                f"get_repeated expects an unindexed field, got {segments[-1]!r}"
            )
        parent = self._find_node(".".join(segments[:-1]))
        if parent is None:
            return []
        wanted = segments[-1]
        matches = [child for child in parent.children if child.field == wanted]
        return sorted(matches, key=_repeat_order)

    def children_named(self, name: str) -> list["SubTree"]:
        """Direct children whose field name equals ``name``, in child order."""
        return [child for child in self.children if child.field == name]

    def add_child(self, fragment: "SubTree") -> None:
        """Graft a fragment whose absolute path is a direct child of this node.

        An existing child with the same final segment is replaced.

        Raises:
            TreePathError: If the fragment is not a direct child path
        """
        parent_path, _, segment = fragment.absolute_path.rpartition(".")
        if parent_path != self.absolute_path:
            raise TreePathError(
                f"Cannot attach {fragment.absolute_path!r} below {self.absolute_path!r}: "
                f"not a direct child path."
            )
        for position, child in enumerate(self.children):
            if child.last_path_element == segment:
                self.children[position] = fragment
                return
        self.children.append(fragment)

    def delete_sub_tree(self, path: str) -> bool:
        """Remove the node at ``path``.

        The empty path clears this node's value and children.

        Returns:
            True if something was removed
        """
        if path == "":
            removed = not self.is_empty()
            self.data = None
            self.children = []
            return removed
        segments = split_path(path)
        parent = self._find_node(".".join(segments[:-1]))
        if parent is None:
            return False
        child = parent._find_child(segments[-1])
        if child is None:
            return False
        parent.children.remove(child)
        return True

    def iter_leaves(self) -> Iterator[tuple[str, PrimitiveValue]]:
        """Yield ``(absolute_path, value)`` for every node holding a value, depth first."""
        if self.data is not None:
            yield self.absolute_path, self.data
        for child in self.children:
            yield from child.iter_leaves()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON form exchanged with the document backend."""
        return {
            "absolutePath": self.absolute_path,
            "data": (
                {"type": self.data.type_name, "value": self.data.to_string()}
                if self.data is not None
                else None
            ),
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SubTree":
        """Build a tree from its JSON form.

        Raises:
            TreePathError: If a child path does not extend its parent's path
            PrimitiveValueError: If a leaf value cannot be parsed
        """
        data = raw.get("data")
        node = cls(
            raw.get("absolutePath", ""),
            parse_primitive(data["type"], data["value"]) if data else None,
        )
        for child_raw in raw.get("children") or []:
            node.add_child(cls.from_dict(child_raw))
        return node

    def to_flat_dict(self) -> dict[str, str]:
        """Return ``{absolute_path: text}`` for every leaf value."""
        return {path: value.to_string() for path, value in self.iter_leaves()}
