"""
fieldwalker - Generic object graph traversal for Python.

fieldwalker walks any in-memory object graph (pydantic models, dataclasses,
named tuples, plain objects, lists, dicts and reference boxes), calls your
callbacks at every reachable location and returns a metadata tree plus a flat
table keyed by structural path. It is meant to be embedded by field
redaction, config binding, inspection and serialization tools.

Key Features:
- Depth-bounded, cycle-safe descent
- Filters on field tags, value types and node metadata
- Deterministic, unique paths such as ``Config.hosts[0].port``
- Callback exceptions abort the walk and propagate unchanged

Main Exports (Import from top level):
    Traversal:
        - walk: Walk a value, return (root_meta, flat_map)
        - crawl: Walk with one callback, return the root node
        - FieldWalker: Reusable walker bound to settings
        - FieldMeta: Metadata tree node
        - Kind: Structural kind of a value
        - Ref: Mutable reference box

    Options:
        - max_depth, private_fields, only_settable
        - with_tag_filter, with_type_filter, with_meta_filter, with_user_func

    Filters:
        - tag_exists, ignore_tag, all_tag_filters, any_tag_filter
        - ignore_type, type_is_one_of
        - all_meta_filters, any_meta_filter

    Tags:
        - tagged, protected, ProtectedAttributeMixin

Example:
    >>> from fieldwalker import walk, with_user_func
    >>>
    >>> def show(value, meta):
    ...     print(meta.path, type(value).__name__)
    >>>
    >>> root, paths = walk(config, with_user_func(show))
"""

__version__ = "0.1.0"

from .config import (
    MetaFilter,
    Option,
    TagFilter,
    TypeFilter,
    UserFunc,
    WalkSettings,
    default_settings,
    get_walk_config,
    resolve_settings,
)
from .filters import (
    all_meta_filters,
    all_tag_filters,
    any_meta_filter,
    any_tag_filter,
    ignore_tag,
    ignore_type,
    tag_exists,
    type_is_one_of,
)
from .introspect import Ref
from .meta import FieldMeta, Kind
from .options import (
    max_depth,
    only_settable,
    private_fields,
    with_meta_filter,
    with_tag_filter,
    with_type_filter,
    with_user_func,
)
from .tags import (
    AttributeProtectionError,
    ProtectedAttributeMixin,
    protected,
    tagged,
)
from .walker import FieldWalker, crawl, walk

__all__ = [
    # Version
    "__version__",
    # Traversal
    "walk",
    "crawl",
    "FieldWalker",
    "FieldMeta",
    "Kind",
    "Ref",
    # Settings
    "WalkSettings",
    "Option",
    "UserFunc",
    "TagFilter",
    "TypeFilter",
    "MetaFilter",
    "default_settings",
    "get_walk_config",
    "resolve_settings",
    # Options
    "max_depth",
    "private_fields",
    "only_settable",
    "with_tag_filter",
    "with_type_filter",
    "with_meta_filter",
    "with_user_func",
    # Filters
    "tag_exists",
    "ignore_tag",
    "all_tag_filters",
    "any_tag_filter",
    "ignore_type",
    "type_is_one_of",
    "all_meta_filters",
    "any_meta_filter",
    # Tags
    "tagged",
    "protected",
    "ProtectedAttributeMixin",
    "AttributeProtectionError",
]
