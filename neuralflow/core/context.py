from __future__ import annotations
"""Shared context store and typed key access.

The context is one mutable mapping shared by reference across a whole
flow run.  The engine only needs ``MutableMapping`` behaviour, so plain
dicts work; :class:`Context` adds typed getters on top.

Typed access distinguishes a *missing* key from a value of the *wrong
kind*::

    n = require(ctx, "currentValue", int)          # raises ContextError
    n = get_as(ctx, "currentValue", int, -999)     # substitutes a default
"""
from typing import Any, Mapping, MutableMapping, Tuple, Type, TypeVar, Union

from .errors import MissingKeyError, WrongKindError

__all__ = ["Context", "SharedState", "require", "get_as", "is_kind"]

T = TypeVar("T")
Kind = Union[Type[Any], Tuple[Type[Any], ...]]

# what every lifecycle hook receives
SharedState = MutableMapping[str, Any]

_MISSING = object()


def is_kind(value: Any, kind: Kind) -> bool:
    """Return True when *value* is an instance of *kind*.

    ``bool`` is a subclass of ``int`` in Python; it is only accepted when
    ``bool`` itself is requested.
    """
    if isinstance(value, bool):
        kinds = kind if isinstance(kind, tuple) else (kind,)
        return bool in kinds or object in kinds
    return isinstance(value, kind)


def require(mapping: Mapping[str, Any], key: str, kind: Kind = object) -> Any:
    """Return ``mapping[key]`` or raise MissingKeyError / WrongKindError."""
    value = mapping.get(key, _MISSING)
    if value is _MISSING:
        raise MissingKeyError(key)
    if not is_kind(value, kind):
        raise WrongKindError(key, kind, value)
    return value


def get_as(mapping: Mapping[str, Any], key: str, kind: Kind, default: T) -> Union[Any, T]:
    """Return ``mapping[key]`` when present and of *kind*, else *default*."""
    value = mapping.get(key, _MISSING)
    if value is _MISSING or not is_kind(value, kind):
        return default
    return value


class Context(dict):  # noqa: D101 – plain dict with typed helpers
    def require(self, key: str, kind: Kind = object) -> Any:
        return require(self, key, kind)

    def get_as(self, key: str, kind: Kind, default: T) -> Union[Any, T]:
        return get_as(self, key, kind, default)

    def __repr__(self) -> str:
        return f"Context({dict.__repr__(self)})"
