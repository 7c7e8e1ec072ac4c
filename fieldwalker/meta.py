"""Metadata tree produced by a walk."""

from __future__ import annotations

import weakref
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class Kind(str, Enum):
    """Structural kind of a value, deciding how the walker descends into it."""

    REFERENCE = "reference"
    RECORD = "record"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    SCALAR = "scalar"


class FieldMeta(BaseModel):
    """One visited location in the object graph.

    Attributes:
        name: Member name, or the type name where no member name exists
            (the root, dereferenced targets, sequence and mapping entries)
        type: Runtime type of the value at this location
        kind: Structural kind of the value
        can_set: Whether the location can be assigned through its owner
        is_private: Whether the declaring member is private
        path: Unique path of this location within one walk
        tags: Tags of the declaring member
        children: Nodes directly nested under this one, in discovery order
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    type: Type[Any]
    kind: Kind = Kind.SCALAR
    can_set: bool = False
    is_private: bool = False
    path: str
    tags: Dict[Any, Any] = Field(default_factory=dict)
    children: List["FieldMeta"] = Field(default_factory=list, repr=False)

    # Non-owning link to the enclosing node
    _parent: Optional[weakref.ReferenceType] = PrivateAttr(default=None)

    @property
    def parent(self) -> Optional["FieldMeta"]:
        """Enclosing node, or None at the root."""
        if self._parent is None:
            return None
        return self._parent()

    def attach(self, child: "FieldMeta") -> None:
        """Append a child node and point its parent link here."""
        if any(existing is child for existing in self.children):
            return
        self.children.append(child)
        child._parent = weakref.ref(self)

    def snapshot(self) -> "FieldMeta":
        """Detached copy handed to callbacks; shares no mutable state."""
        return self.model_copy(
            update={"children": list(self.children), "tags": dict(self.tags)}
        )

    def __eq__(self, other: object) -> bool:
        # Structural equality; the parent link is not compared so the check
        # only ever recurses downwards.
        if not isinstance(other, FieldMeta):
            return NotImplemented
        return (
            self.path == other.path
            and self.name == other.name
            and self.type is other.type
            and self.kind == other.kind
            and self.can_set == other.can_set
            and self.is_private == other.is_private
            and self.tags == other.tags
            and self.children == other.children
        )

    @property
    def depth(self) -> int:
        """Number of ancestors between this node and the root."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def iter_tree(self) -> Iterator["FieldMeta"]:
        """Yield this node and all its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, path: str) -> Optional["FieldMeta"]:
        """Return the node under this subtree whose path equals ``path``."""
        for node in self.iter_tree():
            if node.path == path:
                return node
        return None
