"""Traversal engine.

Walks an arbitrary object graph depth-first, invoking callbacks at every
visited location and building a tree of ``FieldMeta`` nodes plus a flat
mapping from path to node.

Paths:
    root            type name of the root value, e.g. ``Config``
    record member   ``Config.database``
    dereference     ``Config.owner.*``
    sequence entry  ``Config.hosts[0]``
    mapping entry   ``Config.labels[env]``

Pruning (no node, no error): depth exceeded, unreadable value, value already
visited, rejection by a filter, privacy or settability constraints.
Exceptions raised by a callback abort the walk and propagate unchanged.
"""

import logging
from typing import Any, Dict, MutableMapping, NamedTuple, Optional, Tuple

from .config import (
    Option,
    UserFunc,
    WalkSettings,
    default_settings,
    resolve_settings,
)
from .introspect import (
    INVALID,
    classify,
    deref,
    deref_settable,
    element_settable,
    has_identity,
    iter_members,
    type_name,
)
from .logging import TRACE_LEVEL_NUMBER as TRACE
from .meta import FieldMeta, Kind
from .options import with_user_func

logger = logging.getLogger(__name__)


class _Slot(NamedTuple):
    """Where a value sits in its owner."""

    name: Optional[str]
    tags: Dict[str, Any]
    can_set: bool
    is_private: bool
    is_root: bool = False


_ROOT = _Slot(None, {}, False, False, is_root=True)


class _WalkState:
    """Per-call state. Never shared between walks."""

    def __init__(self, out: MutableMapping[str, FieldMeta]):
        self.out = out
        self.nodes: Dict[str, FieldMeta] = {}
        # id -> object; holding the object keeps its id unique for the walk
        self.visited: Dict[int, Any] = {}

    def mark_visited(self, value: Any) -> bool:
        """Record a value's identity. Returns False if it was already seen."""
        key = id(value)
        if key in self.visited:
            return False
        self.visited[key] = value
        return True

    def record(self, meta: FieldMeta) -> None:
        self.nodes[meta.path] = meta
        self.out[meta.path] = meta


class FieldWalker:
    """Depth-bounded, cycle-safe object graph walker.

    A FieldWalker only holds settings; every call to ``walk`` starts with a
    fresh visited set and path table, so one instance can be reused.

    Example:
        >>> walker = FieldWalker(resolve_settings(max_depth(2)))
        >>> root, paths = walker.walk(config)
        >>> paths["Config.port"].type
        <class 'int'>
    """

    def __init__(self, settings: Optional[WalkSettings] = None):
        self.settings = settings if settings is not None else default_settings()

    def walk(
        self, root: Any, flat_map: Optional[MutableMapping[str, FieldMeta]] = None
    ) -> Tuple[Optional[FieldMeta], MutableMapping[str, FieldMeta]]:
        """Walk ``root`` and return its metadata tree and path table.

        Args:
            root: Value to walk
            flat_map: Mapping to record nodes into as they are visited.
                Defaults to a new dict. Entries recorded before a callback
                failure remain in it.

        Returns:
            Tuple of the root node (None if the root itself was pruned) and
            the path table
        """
        out: MutableMapping[str, FieldMeta] = flat_map if flat_map is not None else {}
        state = _WalkState(out)
        root_path = type_name(type(root))

        logger.debug(
            f"Walking {root_path} (max_depth={self.settings.max_depth}, "
            f"callbacks={len(self.settings.user_funcs)})"
        )
        meta = self._visit(root, 0, root_path, _ROOT, state)
        logger.debug(f"Walked {root_path}: {len(state.nodes)} locations recorded")

        return meta, out

    def _visit(
        self, value: Any, depth: int, path: str, slot: _Slot, state: _WalkState
    ) -> Optional[FieldMeta]:
        settings = self.settings

        if depth > settings.max_depth:
            logger.log(TRACE, f"Depth limit reached at {path}")
            return None

        if value is INVALID:
            logger.log(TRACE, f"Unreadable value at {path}")
            return None

        kind = classify(value)
        if has_identity(value, kind) and not state.mark_visited(value):
            logger.log(TRACE, f"Already visited, skipping {path}")
            return None

        value_type = type(value)
        if (
            not slot.is_root
            and settings.type_filter is not None
            and not settings.type_filter(value_type)
        ):
            logger.log(TRACE, f"Type filter rejected {path}")
            return None

        cached = state.nodes.get(path)
        if cached is not None:
            return cached

        meta = FieldMeta(
            name=slot.name or type_name(value_type),
            type=value_type,
            kind=kind,
            can_set=slot.can_set,
            is_private=slot.is_private,
            path=path,
            tags=dict(slot.tags),
        )

        if (
            not slot.is_root
            and settings.meta_filter is not None
            and not settings.meta_filter(meta)
        ):
            logger.log(TRACE, f"Meta filter rejected {path}")
            return None

        state.record(meta)
        logger.log(TRACE, f"Visiting {path}")

        for fn in settings.user_funcs:
            try:
                fn(value, meta.snapshot())
            except Exception as e:
                logger.debug(f"Callback failed at {path}, aborting walk: {e!r}")
                raise

        self._descend(meta, value, kind, depth, state)
        return meta

    def _descend(
        self, meta: FieldMeta, value: Any, kind: Kind, depth: int, state: _WalkState
    ) -> None:
        settings = self.settings

        if kind is Kind.REFERENCE:
            target = deref(value)
            if target is not None:
                slot = _Slot(None, {}, deref_settable(value), False)
                self._attach(
                    meta, self._visit(target, depth + 1, f"{meta.path}.*", slot, state)
                )

        elif kind is Kind.RECORD:
            for member in iter_members(value):
                if settings.tag_filter is not None and not settings.tag_filter(
                    member.tags
                ):
                    continue
                if not settings.include_private and member.is_private:
                    continue
                if settings.only_settable and not member.can_set:
                    continue

                slot = _Slot(member.name, member.tags, member.can_set, member.is_private)
                child_path = f"{meta.path}.{member.name}"
                self._attach(
                    meta, self._visit(member.value, depth + 1, child_path, slot, state)
                )

        elif kind is Kind.SEQUENCE:
            slot = _Slot(None, {}, element_settable(value), False)
            for index, item in enumerate(list(value)):
                child_path = f"{meta.path}[{index}]"
                self._attach(meta, self._visit(item, depth + 1, child_path, slot, state))

        elif kind is Kind.MAPPING:
            slot = _Slot(None, {}, element_settable(value), False)
            for key, item in list(value.items()):
                child_path = f"{meta.path}[{key!s}]"
                self._attach(meta, self._visit(item, depth + 1, child_path, slot, state))

    @staticmethod
    def _attach(meta: FieldMeta, child: Optional[FieldMeta]) -> None:
        if child is not None:
            meta.attach(child)


def walk(
    root: Any,
    *options: Option,
    flat_map: Optional[MutableMapping[str, FieldMeta]] = None,
) -> Tuple[Optional[FieldMeta], MutableMapping[str, FieldMeta]]:
    """Walk an object graph.

    Args:
        root: Value to walk
        *options: Option functions from ``fieldwalker.options``
        flat_map: Optional mapping to record visited nodes into

    Returns:
        Tuple of the root FieldMeta and the mapping of path to FieldMeta

    Raises:
        Exception: Whatever a callback raised, unchanged

    Example:
        >>> root, paths = walk(config, with_type_filter(type_is_one_of(str)))
        >>> sorted(paths)
        ['Config', 'Config.host', 'Config.name']
    """
    return FieldWalker(resolve_settings(*options)).walk(root, flat_map=flat_map)


def crawl(obj: Any, fn: UserFunc, *options: Option) -> Optional[FieldMeta]:
    """Walk ``obj`` with a single callback and return only the root node."""
    root, _ = walk(obj, with_user_func(fn), *options)
    return root
