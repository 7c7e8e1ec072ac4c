"""Predicate constructors and combinators for walk filters."""

from typing import Any, Mapping

from .config import MetaFilter, TagFilter, TypeFilter
from .meta import FieldMeta


def tag_exists(key: str, *values: Any) -> TagFilter:
    """Accept members carrying tag ``key``, optionally with one of ``values``."""

    def check(tags: Mapping[str, Any]) -> bool:
        if key not in tags:
            return False
        if not values:
            return True
        return tags[key] in values

    return check


def ignore_tag(key: str, *values: Any) -> TagFilter:
    """Reject members carrying tag ``key``, optionally only with one of ``values``."""

    def check(tags: Mapping[str, Any]) -> bool:
        if key not in tags:
            return True
        if not values:
            return False
        return tags[key] not in values

    return check


def all_tag_filters(*filters: TagFilter) -> TagFilter:
    def check(tags: Mapping[str, Any]) -> bool:
        return all(f(tags) for f in filters)

    return check


def any_tag_filter(*filters: TagFilter) -> TagFilter:
    def check(tags: Mapping[str, Any]) -> bool:
        return any(f(tags) for f in filters)

    return check


def ignore_type(*types: type) -> TypeFilter:
    """Reject values whose type is exactly one of ``types``."""

    def check(tp: type) -> bool:
        return not any(tp is t for t in types)

    return check


def type_is_one_of(*types: type) -> TypeFilter:
    """Accept values whose type is exactly one of ``types``.

    Subclasses do not match: ``type_is_one_of(int)`` rejects ``True``.
    """

    def check(tp: type) -> bool:
        return any(tp is t for t in types)

    return check


def all_meta_filters(*filters: MetaFilter) -> MetaFilter:
    def check(meta: FieldMeta) -> bool:
        return all(f(meta) for f in filters)

    return check


def any_meta_filter(*filters: MetaFilter) -> MetaFilter:
    def check(meta: FieldMeta) -> bool:
        return any(f(meta) for f in filters)

    return check


__all__ = [
    "tag_exists",
    "ignore_tag",
    "all_tag_filters",
    "any_tag_filter",
    "ignore_type",
    "type_is_one_of",
    "all_meta_filters",
    "any_meta_filter",
]
