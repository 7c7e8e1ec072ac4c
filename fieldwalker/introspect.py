"""Runtime introspection used by the walker.

Answers two questions about an arbitrary Python value: what structural kind
it is, and, for records, which members it declares together with their
tags, settability and privacy.
"""

from __future__ import annotations

import dataclasses
import inspect
import weakref
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from enum import Enum
from types import ModuleType
from typing import Any, Dict, Generic, Iterator, NamedTuple, Optional, TypeVar

from pydantic import BaseModel

from .meta import Kind
from .tags import PROTECTED_TAG, field_tags, get_protected_attrs

T = TypeVar("T")

# Sequences that behave like single values
_SCALAR_SEQUENCES = (str, bytes, bytearray, memoryview, range)


class _Invalid:
    """Marker for a member whose contents cannot be read."""

    def __repr__(self) -> str:
        return "<invalid>"


INVALID: Any = _Invalid()


class Ref(Generic[T]):
    """Mutable box holding a reference to another object.

    Walking a Ref yields a node for the box itself and, when the box is not
    empty, a child node for the referenced object under the ``.*`` path
    segment. Several Refs pointing at the same object share one visit.
    """

    __slots__ = ("value", "__weakref__")

    def __init__(self, value: Optional[T] = None):
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


class Member(NamedTuple):
    """One declared member of a record value."""

    name: str
    value: Any
    tags: Dict[str, Any]
    can_set: bool
    is_private: bool


def type_name(tp: type) -> str:
    """Declared name of a type, or its repr when it has none."""
    return getattr(tp, "__name__", "") or repr(tp)


def is_private_name(name: str) -> bool:
    return name.startswith("_")


def is_record(value: Any) -> bool:
    """Check if a value is a record: an object with named members."""
    if isinstance(value, BaseModel):
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return True
    if isinstance(value, (type, ModuleType, Enum)) or inspect.isroutine(value):
        return False
    if isinstance(value, (Mapping, Sequence)):
        return False
    return hasattr(value, "__dict__")


def classify(value: Any) -> Kind:
    """Return the structural kind of a value."""
    if isinstance(value, (Ref, weakref.ReferenceType)):
        return Kind.REFERENCE
    if is_record(value):
        return Kind.RECORD
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, Sequence) and not isinstance(value, _SCALAR_SEQUENCES):
        return Kind.SEQUENCE
    return Kind.SCALAR


def has_identity(value: Any, kind: Kind) -> bool:
    """Whether a value is tracked by identity for cycle detection.

    Scalars and plain tuples are value-like: equal instances may be shared
    freely (interned strings, the empty tuple) without forming a cycle.
    """
    if kind is Kind.SCALAR:
        return False
    if kind is Kind.SEQUENCE:
        return not isinstance(value, tuple)
    return True


def deref(value: Any) -> Any:
    """Target of a reference value, or None when the reference is empty."""
    if isinstance(value, Ref):
        return value.value
    return value()


def deref_settable(value: Any) -> bool:
    """Whether the target of a reference can be replaced through it."""
    return isinstance(value, Ref)


def element_settable(container: Any) -> bool:
    """Whether entries of a sequence or mapping can be replaced in place."""
    return isinstance(container, (MutableSequence, MutableMapping))


def iter_members(value: Any) -> Iterator[Member]:
    """Yield the declared members of a record in declaration order."""
    if isinstance(value, BaseModel):
        yield from _pydantic_members(value)
    elif dataclasses.is_dataclass(value):
        yield from _dataclass_members(value)
    elif isinstance(value, tuple):
        for name in type(value)._fields:
            yield Member(
                name, getattr(value, name, INVALID), {}, False, is_private_name(name)
            )
    else:
        for name, item in list(vars(value).items()):
            yield Member(name, item, {}, True, is_private_name(name))


def _pydantic_members(value: BaseModel) -> Iterator[Member]:
    cls = type(value)
    frozen = bool(cls.model_config.get("frozen", False))
    protected_attrs = get_protected_attrs(cls)

    for name, field_info in cls.model_fields.items():
        tags = field_tags(field_info, cls)
        can_set = not (
            frozen
            or field_info.frozen
            or name in protected_attrs
            or tags.get(PROTECTED_TAG, False)
        )
        yield Member(
            name, getattr(value, name, INVALID), tags, can_set, is_private_name(name)
        )

    for name, item in list((value.__pydantic_extra__ or {}).items()):
        yield Member(name, item, {}, not frozen, is_private_name(name))

    private_values = value.__pydantic_private__ or {}
    for name in cls.__private_attributes__:
        yield Member(name, private_values.get(name, INVALID), {}, True, True)


def _dataclass_members(value: Any) -> Iterator[Member]:
    frozen = value.__dataclass_params__.frozen
    for field in dataclasses.fields(value):
        yield Member(
            field.name,
            getattr(value, field.name, INVALID),
            dict(field.metadata),
            not frozen,
            is_private_name(field.name),
        )
