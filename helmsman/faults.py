"""
Helmsman faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped
  by domain (routing, binding, execution, warnings).
- CommandException / CommandWarning: base types carrying a message plus
  immutable options (title, code, hint, context) that render themselves with
  rich in a short, lowercased, actionable way.
- CommandExit: exception group bundling the accumulated binding errors of one
  invocation (e.g., every missing argument at once).
- trigger(): surface any fault, either by raising/warning (library use) or by
  printing it and exiting (shell use).

Taxonomy
- UnknownCommandError: command name absent from the registry (fatal).
- MissingArgumentError: required option/positional without a value
  (accumulated, raised together inside a CommandExit).
- TypeCoercionError: value not parseable as the declared type (fatal).
- CommandArgumentError: raised by entry points for cross-field problems, and
  at binding time for a naked flag on a non-boolean option.
- DeprecatedCommandWarning / UnexpectedPositionalWarning: non-fatal notices.

Integration
- The dispatcher raises faults; Registry.run() merges runtime options with
  copy.replace() and hands them to trigger().
- Hosts may define __styles__ and __codes__ in __main__ to restyle output and
  relabel codes.
"""
import copy
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x): MISSING_COMMAND, UNKNOWN_COMMAND
    - binding (1112x/1113x): MISSING_ARGUMENT, NAKED_VALUE, TYPE_COERCION
    - execution (1114x): COMMAND_ARGUMENT
    - warnings (12xxx): DEPRECATED_COMMAND, UNEXPECTED_POSITIONAL

    spacing leaves room for additions without reshuffling existing codes.
    """
    # --- routing errors (11xxx) ---
    MISSING_COMMAND       = 11100
    UNKNOWN_COMMAND       = 11101

    # --- binding errors (11xxx) ---
    MISSING_ARGUMENT      = 11125
    NAKED_VALUE           = 11126
    TYPE_COERCION         = 11131

    # --- execution errors (11xxx) ---
    COMMAND_ARGUMENT      = 11141

    # --- warnings (12xxx) ---
    DEPRECATED_COMMAND    = 12112
    UNEXPECTED_POSITIONAL = 12121

    def normalize(self):
        """
        return a host-normalized string for this code.

        a __codes__ mapping in __main__ overrides numeric ids with labels;
        without one, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults, colorful):
    """
    Build (styler, text) helpers for a renderer.

    - styler(name) -> style string, honoring __main__.__styles__ overrides;
      empty when colorful is False.
    - text(fragment, style) -> Text, unstyled when colorful is False.
    """
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _prog(options):
    main = __import__("__main__")
    registry = options.get("registry")
    return getattr(main, "__prog__", getattr(registry, "prog", None) or "helmsman")


def _render(fault, kind, palette):
    """
    Render an error or warning as a "[ prog — code | Title ]" header followed
    by the message and an optional "→ hint" line; framed in a Panel when the
    fault carries fancy=True.
    """
    styler, text = _palette(palette, fault.options.get("colorful", False))

    code = fault.options.get("code")
    header = Text.assemble(
        "[ ",
        text(_prog(fault.options), styler("prog-name")),
        " — ",
        text(code.normalize() if code else kind, styler("code")),
        " | ",
        text(str(fault.options.get("title", kind)).title(), styler("title")),
        " ]"
    )
    renders = [text(fault.message, styler("message"))]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if not fault.options.get("fancy", False):
        return Group(header, *renders)
    # nested inside a CommandExit panel
    ratio = fault.options.get("ratio")
    width = int((console.width - 4) * ratio) if ratio else None
    return Panel(Group(*renders), title=header, title_align="left", width=width)


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        return _render(self, "error", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if not self.options.get("deferred", False):
            sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException): ...
class MissingArgumentError(CommandException): ...
class TypeCoercionError(CommandException): ...
class CommandArgumentError(CommandException): ...


class CommandWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, "warning", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=3)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedCommandWarning(CommandWarning): ...
class UnexpectedPositionalWarning(CommandWarning): ...


class CommandExit(ExceptionGroup[CommandException]):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styler, text = _palette({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Exit)
        }, self.options.get("colorful", False))

        header = Text.assemble(
            "[ ", text(_prog(self.options), styler("prog-name")), " — ", text(self.message.title(), styler("title")), " ]"
        )

        renders = [copy.replace(exception, **self.options, ratio=2/3) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if not self.options.get("deferred", False):
            sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})

    def derive(self, exceptions):
        return CommandExit(exceptions, **self.options)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see base classes).
    - options are merged into the fault via copy.replace(fault, **options).
    - shell mode prints through rich (and exits for errors); otherwise errors
      are raised and warnings go through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "UnknownCommandError",
    "MissingArgumentError",
    "TypeCoercionError",
    "CommandArgumentError",
    "CommandWarning",
    "DeprecatedCommandWarning",
    "UnexpectedPositionalWarning",
    "CommandExit",
    "trigger",
)
