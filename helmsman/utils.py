"""
Helmsman utilities

Shared helpers for the descriptor, command and registry layers.

- Unset: "not provided" sentinel, distinct from None and "".
- coalesce(): swaps Unset for a fallback.
- rename(): gives generated callables a stable name.
- mirror(): read-only property over a private "_name" field.
- derive(): binder name to fallback key ("set_threads" -> "threads").
- ordinal(): position labels for messages ("first", "11th").

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> def set_dry_run(value): ...
    >>> derive(set_dry_run)
    'dry-run'
"""
import functools
import re
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """Type of the Unset singleton; falsey and not subclassable."""

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """Return `default` when `object` is Unset, otherwise `object` (even if falsey)."""
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) sets __name__ and __qualname__ and returns the
    callable; rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")
        return lambda callable: rename(callable, name)
    if len(parameters) != 2:
        raise TypeError(f"rename() takes 1 or 2 arguments but {len(parameters)} were given")

    callable, name = parameters
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError(f"cannot rename {type(callable).__name__!r} object") from None
    return callable


def _detach(object):
    # Containers leave a descriptor as copies.
    if isinstance(object, Mapping):
        return {key: _detach(value) for key, value in object.items()}
    if isinstance(object, Sequence) and not isinstance(object, str):
        return [_detach(value) for value in object]
    if isinstance(object, Set):
        return {_detach(value) for value in object}
    return object


def mirror(name, /):
    """Read-only property exposing `self._<name>`; containers come back as copies."""
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, f"_{name}"))

    return property(getter)


def derive(callable, /):
    """
    Fallback key for a binder, taken from its name.

    A setter prefix ("set_" or "set" before a capital) is dropped, the rest
    is lower-cased with underscores turned into hyphens. Lambdas and names
    that end up empty give None.
    """
    name = getattr(callable, "__name__", "")
    if not isinstance(name, str) or not name.isidentifier():
        return None
    name = re.sub(r"^set(?=[_A-Z])_?", "", name)
    return name.strip("_").lower().replace("_", "-") or None


_SPELLED = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


def ordinal(number, /):
    """Ordinal label for a 1-based position: spelled out up to ten, then "11th", "22nd"..."""
    if 1 <= number <= len(_SPELLED):
        return _SPELLED[number - 1]
    if 10 < number % 100 < 20:
        return f"{number}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "derive",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
