"""Option constructors for ``walk``.

Each constructor returns an ``Option``: a function that takes the settings
built so far and returns updated settings.

Example:
    >>> root, paths = walk(
    ...     config,
    ...     max_depth(3),
    ...     with_tag_filter(tag_exists("redact")),
    ...     with_user_func(redact),
    ... )
"""

from .config import MetaFilter, Option, TagFilter, TypeFilter, UserFunc, WalkSettings


def max_depth(depth: int) -> Option:
    """Override the depth ceiling. The root is at depth 0."""

    def apply(settings: WalkSettings) -> WalkSettings:
        return settings.model_copy(update={"max_depth": depth})

    return apply


def private_fields(enabled: bool = True) -> Option:
    """Include (or, with ``enabled=False``, exclude) private members."""

    def apply(settings: WalkSettings) -> WalkSettings:
        return settings.model_copy(update={"include_private": enabled})

    return apply


def only_settable() -> Option:
    """Skip record members that cannot be assigned."""

    def apply(settings: WalkSettings) -> WalkSettings:
        return settings.model_copy(update={"only_settable": True})

    return apply


def with_tag_filter(fn: TagFilter) -> Option:
    """Descend only into record members whose tags satisfy ``fn``."""

    def apply(settings: WalkSettings) -> WalkSettings:
        return settings.model_copy(update={"tag_filter": fn})

    return apply


def with_type_filter(fn: TypeFilter) -> Option:
    """Visit only locations whose value type satisfies ``fn``."""

    def apply(settings: WalkSettings) -> WalkSettings:
        return settings.model_copy(update={"type_filter": fn})

    return apply


def with_meta_filter(fn: MetaFilter) -> Option:
    """Visit only locations whose metadata satisfies ``fn``."""

    def apply(settings: WalkSettings) -> WalkSettings:
        return settings.model_copy(update={"meta_filter": fn})

    return apply


def with_user_func(fn: UserFunc) -> Option:
    """Register a callback; repeated use adds callbacks in order."""

    def apply(settings: WalkSettings) -> WalkSettings:
        return settings.model_copy(
            update={"user_funcs": settings.user_funcs + (fn,)}
        )

    return apply


__all__ = [
    "max_depth",
    "private_fields",
    "only_settable",
    "with_tag_filter",
    "with_type_filter",
    "with_meta_filter",
    "with_user_func",
]
