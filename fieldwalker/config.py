"""Walk settings and their resolution from options.

A walk is configured by a frozen ``WalkSettings`` record. Callers never build
it directly; they pass option functions (see ``fieldwalker.options``) which
``resolve_settings`` applies, in order, on top of the defaults.

Environment Variables:
    FIELDWALKER_MAX_DEPTH: Default depth ceiling (default: 10)
    FIELDWALKER_INCLUDE_PRIVATE: Include private members by default
        (default: "true")
"""

import logging
import os
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .meta import FieldMeta

logger = logging.getLogger(__name__)

UserFunc = Callable[[Any, FieldMeta], None]
TagFilter = Callable[[Mapping[str, Any]], bool]
TypeFilter = Callable[[type], bool]
MetaFilter = Callable[[FieldMeta], bool]

DEFAULT_MAX_DEPTH = 10

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


class WalkSettings(BaseModel):
    """Effective configuration of one walk.

    Attributes:
        max_depth: Deepest level visited; the root is level 0
        include_private: Visit private members
        only_settable: Visit only members that can be assigned
        tag_filter: Gate record members by their tags
        type_filter: Gate locations by the runtime type of their value
        meta_filter: Gate locations by their freshly built metadata
        user_funcs: Callbacks invoked at every visited location, in order
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    max_depth: int = DEFAULT_MAX_DEPTH
    include_private: bool = True
    only_settable: bool = False
    tag_filter: Optional[TagFilter] = None
    type_filter: Optional[TypeFilter] = None
    meta_filter: Optional[MetaFilter] = None
    user_funcs: Tuple[UserFunc, ...] = Field(default_factory=tuple)


Option = Callable[[WalkSettings], WalkSettings]


def _parse_bool(name: str, raw: str) -> Optional[bool]:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning(f"Invalid boolean for {name}: {raw!r}, ignoring")
    return None


def get_walk_config() -> Dict[str, Any]:
    """Get walk defaults overridden from environment variables.

    Returns:
        Dictionary of WalkSettings field overrides; empty when no variable
        is set
    """
    config: Dict[str, Any] = {}

    max_depth = os.getenv("FIELDWALKER_MAX_DEPTH")
    if max_depth is not None:
        try:
            config["max_depth"] = int(max_depth)
        except ValueError:
            logger.warning(f"Invalid FIELDWALKER_MAX_DEPTH: {max_depth!r}, ignoring")

    include_private = os.getenv("FIELDWALKER_INCLUDE_PRIVATE")
    if include_private is not None:
        parsed = _parse_bool("FIELDWALKER_INCLUDE_PRIVATE", include_private)
        if parsed is not None:
            config["include_private"] = parsed

    return config


def default_settings() -> WalkSettings:
    """Build the base settings every walk starts from."""
    return WalkSettings(**get_walk_config())


def resolve_settings(
    *options: Option, base: Optional[WalkSettings] = None
) -> WalkSettings:
    """Apply options in order on top of the base settings.

    Later options override earlier ones for scalar settings; callbacks
    accumulate.

    Args:
        *options: Option functions
        base: Starting settings, defaults to default_settings()

    Returns:
        The resolved, read-only settings
    """
    settings = base if base is not None else default_settings()
    for option in options:
        settings = option(settings)
    return settings
