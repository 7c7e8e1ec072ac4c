"""Walker tags and read-only markers for pydantic fields.

Tags are small key/value annotations on a declared field that tag filters can
inspect without touching the value. Pydantic fields keep them in
``json_schema_extra``, next to the ``protected`` marker. Dataclasses keep them
in ``dataclasses.field(metadata=...)`` and need nothing from this module.

Examples:
    class Account(ProtectedAttributeMixin, BaseModel):
        # Read-only after construction, skipped by only_settable()
        id: str = protected("", description="Unique identifier")

        # Selected by with_tag_filter(tag_exists("redact"))
        password: str = tagged(Field(default=""), redact="true")

        # Both
        api_key: str = protected(tagged("", redact="true"))
"""

import inspect
from copy import copy
from typing import Any, Dict, Optional, Set, Type

from pydantic import BaseModel, Field
from pydantic.fields import FieldInfo

PROTECTED_TAG = "protected"

# Stands in for "no argument" so that None stays a valid default
_UNSET: Any = object()

# Class -> names registered by ProtectedAttributeMixin
_PROTECTED_ATTRS: Dict[Type, Set[str]] = {}


def _schema_extra_dict(json_extra: Any, owner: Optional[Type] = None) -> Dict[str, Any]:
    """Resolve json_schema_extra, which may be a dict or a hook, to a new dict."""
    if not callable(json_extra):
        return dict(json_extra) if json_extra else {}
    schema: Dict[str, Any] = {}
    # pydantic hooks take (schema) or (schema, model)
    if len(inspect.signature(json_extra).parameters) >= 2:
        json_extra(schema, owner)
    else:
        json_extra(schema)
    return schema


class TaggedField:
    """Collects walker tags for one field, then builds the pydantic Field.

    An existing ``Field(...)`` is copied and re-tagged, so its constraints,
    aliases and other settings are kept.
    """

    def __init__(self, field_def: Any = _UNSET, **field_kwargs: Any):
        self.field_def = field_def
        self.field_kwargs = field_kwargs
        self.tags: Dict[str, Any] = {}

    def add_tags(self, **tags: Any) -> "TaggedField":
        self.tags.update(tags)
        return self

    def mark_protected(self) -> "TaggedField":
        self.tags[PROTECTED_TAG] = True
        return self

    def _retag(self, info: FieldInfo) -> FieldInfo:
        updates: Dict[str, Any] = {}
        # Explicit kwargs fill gaps only
        for key, value in self.field_kwargs.items():
            if not hasattr(info, key):
                raise TypeError(
                    f"Cannot add {key!r} to an existing Field; pass it to Field() instead"
                )
            if getattr(info, key) is None:
                updates[key] = value

        extra = {**_schema_extra_dict(info.json_schema_extra), **self.tags}
        if extra:
            updates["json_schema_extra"] = extra

        retagged = copy(info)
        retagged.metadata = list(info.metadata)
        for key, value in updates.items():
            setattr(retagged, key, value)

        # pydantic rebuilds merged fields (e.g. under Annotated) from this record
        attributes_set = getattr(info, "_attributes_set", None)
        if attributes_set is not None:
            retagged._attributes_set = {**attributes_set, **updates}
        return retagged

    def to_field(self) -> Any:
        if isinstance(self.field_def, FieldInfo):
            return self._retag(self.field_def)

        kwargs = dict(self.field_kwargs)
        if self.field_def is not _UNSET:
            kwargs["default"] = self.field_def
        extra = {**_schema_extra_dict(kwargs.get("json_schema_extra")), **self.tags}
        if extra:
            kwargs["json_schema_extra"] = extra
        return Field(**kwargs)


def tagged(field_def: Any = _UNSET, **tags: Any) -> Any:
    """Attach walker tags to a pydantic field.

    Args:
        field_def: Default value or Field(...); omit it for a required field
        **tags: Tag key/value pairs

    Examples:
        password: str = tagged("", redact="true")
        port: int = tagged(Field(default=80, gt=0), env="PORT")
    """
    return TaggedField(field_def).add_tags(**tags).to_field()


def protected(field_def: Any = _UNSET, **kwargs: Any) -> Any:
    """Mark a field read-only after construction.

    The walker reports protected fields with ``can_set=False``, so
    ``only_settable()`` skips them. ``ProtectedAttributeMixin`` also rejects
    writes at runtime.

    Args:
        field_def: Default value (None included) or Field(...); omit both
            arguments to get a decorator, ``protected()(Field(...))``
        **kwargs: Extra Field arguments such as description or alias
    """
    if field_def is _UNSET and not kwargs:
        return lambda actual: protected(actual)
    return TaggedField(field_def, **kwargs).mark_protected().to_field()


def field_tags(field_info: Any, owner: Optional[Type] = None) -> Dict[str, Any]:
    """Tags stored on a pydantic FieldInfo, as a new dict.

    Args:
        field_info: The pydantic FieldInfo
        owner: Model class handed to two-argument json_schema_extra hooks
    """
    return _schema_extra_dict(getattr(field_info, "json_schema_extra", None), owner)


def register_protected_attrs(cls: Type, attr_names: Set[str]) -> None:
    _PROTECTED_ATTRS.setdefault(cls, set()).update(attr_names)


def get_protected_attrs(cls: Type) -> Set[str]:
    """Protected field names of a class, including inherited ones.

    Covers names registered by the mixin and any pydantic field carrying the
    protected marker, with or without the mixin.
    """
    names: Set[str] = set()
    for klass in cls.__mro__:
        names.update(_PROTECTED_ATTRS.get(klass, ()))
        if isinstance(klass, type) and issubclass(klass, BaseModel):
            names.update(
                name
                for name, info in klass.model_fields.items()
                if field_tags(info, klass).get(PROTECTED_TAG, False)
            )
    return names


def is_protected(cls: Type, attr_name: str) -> bool:
    return attr_name in get_protected_attrs(cls)


class AttributeProtectionError(Exception):
    """Raised on a write to a protected field after construction."""

    def __init__(self, attr_name: str, cls_name: str):
        self.attr_name = attr_name
        self.cls_name = cls_name
        super().__init__(
            f"{cls_name}.{attr_name} is protected and cannot be modified after initialization"
        )


class ProtectedAttributeMixin:
    """Enforce ``protected`` fields on a pydantic model.

    Put it before BaseModel in the bases. Writes are free while ``__init__``
    runs and rejected for protected names afterwards.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        object.__setattr__(self, "_constructing", True)
        try:
            super().__init__(*args, **kwargs)
        finally:
            object.__setattr__(self, "_constructing", False)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        # Runs once pydantic has populated model_fields
        super().__pydantic_init_subclass__(**kwargs)  # type: ignore[misc]
        names = {
            name
            for name, info in cls.model_fields.items()  # type: ignore[attr-defined]
            if field_tags(info, cls).get(PROTECTED_TAG, False)
        }
        if names:
            register_protected_attrs(cls, names)

    def __setattr__(self, name: str, value: Any) -> None:
        if not getattr(self, "_constructing", True) and name in get_protected_attrs(
            type(self)
        ):
            raise AttributeProtectionError(name, type(self).__name__)
        super().__setattr__(name, value)
