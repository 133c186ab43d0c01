"""
Helmsman command layer: describe one dispatchable command.

What this module provides
- Command: a passive, immutable record of one sub-command:
  • identity: name, category, descr, doc.
  • visibility: deprecated, experimental, hidden.
  • surface: ordered Option and Positional descriptors.
  • entry: the zero-argument callable run after every binder succeeded.
- command(...): create a Command, or a decorator producing one.

Core ideas
- Declarative: the option/positional list is explicit; nothing is discovered
  by inspecting the entry point's signature.
- Checked once: name collisions, a misplaced Arity.ALL positional, or a
  non-callable entry are rejected at construction time.
- Built-in help: a "-h/--help" helper option is added unless the command
  already declares a helper or uses those names.

Quick start
    from helmsman import command, option, positional, ValueType

    settings = {}

    @option("--count", "-c", type=ValueType.INTEGER, required=True)
    def set_count(count):
        settings["count"] = count

    @positional("FILE", required=True)
    def set_file(file):
        settings["file"] = file

    @command(name="run", options=[set_count], positionals=[set_file])
    def run():
        \"\"\"Process a file.\"\"\"
        ...
"""
import functools
import inspect
import operator
import re
from collections.abc import Iterable

from rich.text import Text

from .arguments import Arity, Option, Positional
from .utils import *


class CommandType(type):
    """
    Metaclass exposing Command metadata as read-only properties.

    - every name in __introspectable__ becomes a mirror() property;
    - __displayable__ narrows what __rich_repr__ shows;
    - __typename__ is derived from the class name.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_strings(cls, metadata):
    """
    Normalize scalar string/Text metadata (name, category, descr, doc).

    - each value must be str | Text | Unset; strings are trimmed and must be
      non-empty; Unset becomes None.
    - name must look like a command token: no whitespace, no leading '-'.
    """
    for name in ("name", "category", "descr", "doc"):
        if not isinstance(object := metadata[name], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)

    if not isinstance(metadata["name"], str) or not re.fullmatch(r"[^\s-]\S*", metadata["name"]):
        raise ValueError(f"{cls.__typename__} name {metadata['name']!r} is not a valid command token")


def _process_options(cls, metadata):
    """
    Resolve the option list and build the key index.

    - items must be Option descriptors (or expose __option__()).
    - every key (short, long, fallback) maps to exactly one option.
    """
    if not isinstance(metadata["options"], Iterable):
        raise TypeError(f"{cls.__typename__} 'options' must be an iterable of options")

    options = []
    index = {}
    for item in metadata["options"]:
        option = item.__option__() if callable(getattr(item, "__option__", None)) else item
        if not isinstance(option, Option):
            raise TypeError(f"{cls.__typename__} 'options' must be an iterable of options")
        for key in option.keys:
            if index.setdefault(key, option) is not option:
                raise ValueError(f"{cls.__typename__} {metadata['name']!r} option name {key!r} is already in use")
        options.append(option)

    metadata["options"] = options
    metadata["index"] = index


def _process_positionals(cls, metadata):
    """
    Resolve the positional list; Arity.ALL may only be the last entry and
    names must be unique.
    """
    if not isinstance(metadata["positionals"], Iterable):
        raise TypeError(f"{cls.__typename__} 'positionals' must be an iterable of positionals")

    positionals = []
    for item in metadata["positionals"]:
        positional = item.__positional__() if callable(getattr(item, "__positional__", None)) else item
        if not isinstance(positional, Positional):
            raise TypeError(f"{cls.__typename__} 'positionals' must be an iterable of positionals")
        if positionals and positionals[-1].arity is Arity.ALL:
            raise TypeError(
                f"{cls.__typename__} positional {positionals[-1].name!r} consumes all tokens, it must be the last one"
            )
        if any(positional.name == other.name for other in positionals):
            raise ValueError(f"{cls.__typename__} positional name {positional.name!r} is already in use")
        positionals.append(positional)

    metadata["positionals"] = positionals


def _ensure_helper(metadata):
    """
    Append the built-in "-h/--help" helper unless one is already declared or
    the names are taken.
    """
    if any(option.helper for option in metadata["options"]):
        return
    names = [name for name, key in (("-h", "h"), ("--help", "help")) if key not in metadata["index"]]
    if not names:
        return
    helper = Option(*names, helper=True, descr="show this help message and exit")
    metadata["options"].append(helper)
    metadata["index"].update(dict.fromkeys(helper.keys, helper))


class Command(metaclass=CommandType):
    """
    Immutable descriptor of one dispatchable command.

    Lifecycle
    - Built once (usually at import time) and registered into a Registry.
    - Read by the tokenizer (is a key boolean?) and the dispatcher (which
      binders to call, then the entry point).

    Notes
    - `category` is None when not given; the registry substitutes its default
      category when listing.
    - Calling a Command runs its entry point with no arguments.
    """

    __introspectable__ = (
        "name",
        "category",
        "descr",
        "doc",
        "deprecated",
        "experimental",
        "hidden",
        "options",
        "positionals",
        "entry",
    )

    __displayable__ = (
        "name",
        "category",
        "descr",
        "deprecated",
        "experimental",
        "hidden",
    )

    def __init__(
            self,
            entry,
            /,
            name=Unset,
            category=Unset,
            descr=Unset,
            doc=Unset,
            options=(),
            positionals=(),
            *,
            deprecated=False,
            experimental=False,
            hidden=False
    ):
        """
        Construct a Command around an entry callable.

        Parameters
        - entry: zero-argument callable; may raise CommandArgumentError.
        - name: command token; defaults to entry.__name__ with '_' -> '-'.
        - category: listing group; None lets the registry decide.
        - descr: one-line description; defaults to the docstring's first line.
        - doc: long documentation printed under the description in help.
        - options / positionals: ordered descriptors.
        - deprecated / experimental / hidden: listing visibility flags.

        Raises
        - TypeError/ValueError for invalid metadata or name collisions.
        """
        if not callable(entry):
            raise TypeError(f"{type(self).__typename__} 'entry' must be callable")

        docstring = inspect.getdoc(entry) or ""
        identifier = getattr(entry, "__name__", "")
        if not isinstance(identifier, str) or not identifier.isidentifier():
            identifier = ""
        metadata = {
            "name": coalesce(name, identifier.strip("_").replace("_", "-") or Unset),
            "category": category,
            "descr": coalesce(descr, docstring.partition("\n")[0] or Unset),
            "doc": doc,
            "deprecated": bool(deprecated),
            "experimental": bool(experimental),
            "hidden": bool(hidden),
            "options": options,
            "positionals": positionals,
            "entry": entry,
        }
        if metadata["name"] is Unset:
            raise TypeError(f"{type(self).__typename__} needs a 'name' when the entry is anonymous")

        _process_strings(type(self), metadata)
        _process_options(type(self), metadata)
        _process_positionals(type(self), metadata)
        _ensure_helper(metadata)

        self._index = metadata.pop("index")
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def helper(self):
        """
        The option flagged as "show help", if any.
        """
        return next((option for option in self._options if option.helper), None)

    def resolve(self, key, /):
        """
        Return the Option owning `key` (short, long or fallback), or None.
        """
        return self._index.get(key)

    def boolean(self, key, /):
        """
        True when `key` names a boolean option (a naked flag by definition).
        """
        return (option := self._index.get(key)) is not None and option.boolean

    def __call__(self):
        return self._entry()


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator that builds one.

    Invocation modes
    - Direct:    cmd = command(entry, name="run", options=[...])
    - Decorator: @command(name="run", options=[...])
                 def run(): ...
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "command",
)

# Remove the internal metaclass from the module namespace (not public API).
del CommandType
