r"""
Helmsman argument descriptors and decorators.

Overview
- Descriptors
  • Option: named parameter with a long (--count) and/or short (-c) name.
  • Positional: bare token parameter, either one token (Arity.SINGLE) or the
    whole remaining positional sequence (Arity.ALL).

- Decorators
  • @option(...): build an Option whose binder is the decorated callable.
  • @positional(...): build a Positional whose binder is the decorated callable.
  Calling a descriptor forwards the (already coerced) value to its binder.

- Introspection & representation
  • ArgumentType metaclass exposes the sanitized metadata listed in
    __introspectable__ as read-only properties and provides stable
    __repr__/__rich_repr__ implementations.

Metadata (sanitized on construction)
- Shared
  • type: ValueType (closed set; see helmsman.values).
  • default: Unset | str, the literal default; must coerce to `type`.
  • required: bool (cannot be combined with a default).
  • descr: Unset | str | Text (short help), non-empty when provided.
  • binder: Unset | Callable receiving the coerced value.
- Option only
  • names: at most one "--long" and one "-c"; when both are missing the
    binder's derived name ("set_threads" -> "threads") identifies the option.
  • multiple: keep every occurrence; the binder receives a list.
  • helper: the conventional "show help" option; implies a boolean presence
    flag that is neither required, hidden nor defaulted.
  • hidden: suppressed from help.
  • metavar / placeholder: value label and default text shown in help.
- Positional only
  • name: label used in usage lines and messages.
  • arity: Arity.SINGLE | Arity.ALL (binder receives a list).

Quick example:
    >>> from helmsman.arguments import option, positional
    >>> from helmsman.values import ValueType
    >>> @option("--count", "-c", type=ValueType.INTEGER, required=True)
    ... def set_count(count): ...
    ...
    >>> @positional("FILE", required=True)
    ... def set_file(file): ...
    ...

Public API
- Classes: Option, Positional, Arity
- Decorators: option, positional
"""
import functools
import operator
import re
from enum import Enum

from rich.text import Text

from .faults import TypeCoercionError
from .utils import *
from .values import ValueType


class Arity(Enum):
    """
    how many positional tokens a Positional consumes.
    """
    SINGLE = "single"
    ALL = "all"


class ArgumentType(type):
    """
    Metaclass that turns descriptors into introspectable, read-only records.

    Responsibilities
    - Expose every name in __introspectable__ as a read-only property backed
      by "_<name>" (see mirror()).
    - Provide compact __repr__/__rich_repr__ for diagnostics.
    - Derive __typename__ ("positional", "option") for messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                if name != "binder":
                    yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by Option and Positional.

    - type: must be a ValueType member.
    - descr: Unset | non-empty str | Text; Unset becomes None.
    - default: Unset | str that coerces to `type`; Unset becomes None.
    - required and default are mutually exclusive.
    - binder: Unset | callable.

    Mutates `metadata` in place.
    """
    if not isinstance(metadata["type"], ValueType):
        raise TypeError(f"{cls.__typename__} 'type' must be a value-type")

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not isinstance(default := metadata["default"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")
    if isinstance(default, str):
        if metadata["required"]:
            raise ValueError(f"required {cls.__typename__} cannot have a 'default'")
        try:
            metadata["type"].coerce(default)
        except TypeCoercionError:
            raise ValueError(
                f"{cls.__typename__} 'default' {default!r} is not a valid {metadata['type'].label}"
            ) from None
    metadata["default"] = coalesce(default)

    if not callable(metadata["binder"]) and metadata["binder"] is not Unset:
        raise TypeError(f"{cls.__typename__} 'binder' must be callable")


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate names and helper wiring of an Option.

    - names: each is "--long" (r"--[^\W\d_](-?[^\W_]+)*") or "-c" (a single
      letter or digit); at most one of each form.
    - a nameless option needs a binder with a derivable name.
    - helper: forces a boolean type and forbids required/hidden/default.
    - metavar/placeholder: Unset | non-empty str; Unset becomes None.
    """
    long = short = None
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if long is not None:
                raise ValueError(f"{cls.__typename__} can have only one long name")
            long = name[2:]
        elif re.fullmatch(r"-[^\W_]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} can have only one short name")
            short = name[1:]
        else:
            raise ValueError(f"{cls.__typename__} names must be '--long' or '-c' shaped (got {name!r})")

    metadata["long"] = long
    metadata["short"] = short
    metadata["fallback"] = derive(metadata["binder"]) if metadata["binder"] else None
    del metadata["names"]

    if long is None and short is None and metadata["fallback"] is None:
        raise TypeError(f"{cls.__typename__} must specify at least one name or a named binder")

    for name in ("metavar", "placeholder"):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)

    if metadata["helper"]:
        if metadata["type"] is not ValueType.BOOLEAN:
            raise TypeError(f"helper {cls.__typename__} must be boolean")
        if metadata["required"]:
            raise TypeError(f"helper {cls.__typename__} cannot be required")
        if metadata["hidden"]:
            raise TypeError(f"helper {cls.__typename__} cannot be hidden")
        if metadata["default"] is not None:
            raise TypeError(f"helper {cls.__typename__} cannot have a default")


class Option(metaclass=ArgumentType):
    """
    Named option descriptor.

    Highlights
    - Identified by short name, long name, then the binder-derived fallback,
      in that lookup order (see `keys`).
    - Boolean options are presence flags: the tokenizer never lets them
      consume the next token.
    - Calling the descriptor forwards the coerced value to the binder.
    """

    __introspectable__ = (
        "long",
        "short",
        "fallback",
        "type",
        "default",
        "required",
        "multiple",
        "helper",
        "hidden",
        "descr",
        "metavar",
        "placeholder",
        "binder",
    )

    def __init__(
            self,
            *names,
            type=ValueType.STRING,
            default=Unset,
            required=False,
            multiple=False,
            helper=False,
            hidden=False,
            descr=Unset,
            metavar=Unset,
            placeholder=Unset,
            binder=Unset
    ):
        """
        Construct an Option descriptor.

        Parameters
        - names: "--long" and/or "-c" (at most one of each).
        - type: ValueType used to coerce raw strings.
        - default: literal default string, coerced when the option is absent.
        - required: report a missing argument when absent.
        - multiple: collect every occurrence into a list.
        - helper: mark as the "show help and stop" option (boolean).
        - hidden: omit from help.
        - descr: short help text.
        - metavar: value label in help (e.g., "--count N").
        - placeholder: text displayed instead of the literal default in help.
        - binder: callable receiving the coerced value.
        """
        metadata = {
            "names": names,
            "type": ValueType.BOOLEAN if helper and type is ValueType.STRING else type,
            "default": default,
            "required": bool(required),
            "multiple": bool(multiple),
            "helper": bool(helper),
            "hidden": bool(hidden),
            "descr": descr,
            "metavar": metavar,
            "placeholder": placeholder,
            "binder": binder,
        }
        _sanitize_metadata(Option, metadata)
        _sanitize_named_metadata(Option, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))

    @property
    def boolean(self):
        """
        True when the option binds a naked flag (never consumes a value).
        """
        return self._type is ValueType.BOOLEAN

    @property
    def keys(self):
        """
        Lookup keys into a resolved binding, in resolution order
        (short name, long name, derived fallback), without duplicates.
        """
        return tuple(dict.fromkeys(key for key in (self._short, self._long, self._fallback) if key))

    @property
    def key(self):
        """
        Primary identifier used in messages and help (long, short, fallback).
        """
        return self._long or self._short or self._fallback

    @property
    def names(self):
        """
        Display forms ("-c", "--count"); the fallback renders as "--<fallback>".
        """
        names = []
        if self._short:
            names.append("-" + self._short)
        if self._long or not self._short:
            names.append("--" + (self._long or self._fallback))
        return tuple(names)

    def __call__(self, value, /):
        if self._binder is None:
            return
        return self._binder(value)

    def __option__(self):
        """
        Introspection hook: identify this descriptor as an Option.
        """
        return self


class Positional(metaclass=ArgumentType):
    """
    Positional argument descriptor.

    Highlights
    - Arity.SINGLE binds the next unconsumed positional token.
    - Arity.ALL binds every remaining positional token as a list; it must be
      the last positional of a command.
    - Each token is coerced with `type` before reaching the binder.
    """

    __introspectable__ = (
        "name",
        "type",
        "arity",
        "default",
        "required",
        "descr",
        "binder",
    )

    def __init__(
            self,
            name,
            /,
            type=ValueType.STRING,
            arity=Arity.SINGLE,
            default=Unset,
            required=False,
            descr=Unset,
            *,
            binder=Unset
    ):
        """
        Construct a Positional descriptor.

        Parameters
        - name: label used in the usage line (e.g., "FILE").
        - type: ValueType applied to each bound token.
        - arity: Arity.SINGLE or Arity.ALL.
        - default: literal default string used when no token is available.
        - required: report a missing argument when no token is available.
        - descr: short help text.
        - binder: callable receiving the coerced value (a list for Arity.ALL).
        """
        if not isinstance(name, str):
            raise TypeError("positional 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("positional 'name' cannot be empty")
        if not isinstance(arity, Arity):
            raise TypeError("positional 'arity' must be an arity")

        metadata = {
            "name": name,
            "type": type,
            "arity": arity,
            "default": default,
            "required": bool(required),
            "descr": descr,
            "binder": binder,
        }
        _sanitize_metadata(Positional, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))

    @property
    def key(self):
        return self._name

    def __call__(self, value, /):
        if self._binder is None:
            return
        return self._binder(value)

    def __positional__(self):
        """
        Introspection hook: identify this descriptor as a Positional.
        """
        return self


def option(*args, **kwargs):
    """
    Decorator for defining an option bound to the decorated callable.

    Usage
        @option("--threads", "-t", type=ValueType.INTEGER, default="1")
        def set_threads(threads): ...

        @option(type=ValueType.BOOLEAN)   # identified as "--verbose"
        def set_verbose(verbose): ...

    Returns
    - Option: the descriptor, whose binder is the decorated callable.
    """
    if "binder" in kwargs:
        raise TypeError("@option() binds the decorated callable; 'binder' is not accepted")

    @rename("option")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@option() must be applied to a callable")
        return Option(*args, **kwargs, binder=callback)

    return wrapper


def positional(*args, **kwargs):
    """
    Decorator for defining a positional argument bound to the decorated callable.

    Usage
        @positional("FILE", required=True)
        def set_file(file): ...

        @positional("INPUTS", arity=Arity.ALL)
        def set_inputs(inputs): ...

    Returns
    - Positional: the descriptor, whose binder is the decorated callable.
    """
    if "binder" in kwargs:
        raise TypeError("@positional() binds the decorated callable; 'binder' is not accepted")

    @rename("positional")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@positional() must be applied to a callable")
        return Positional(*args, **kwargs, binder=callback)

    return wrapper


__all__ = (
    # Classes (descriptors)
    "Arity",
    "Option",
    "Positional",

    # Decorators
    "option",
    "positional",
)

# Remove the internal metaclass from the module namespace (not public API).
del ArgumentType
