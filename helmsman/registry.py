"""
Helmsman registry: the program-wide table of commands and its entry point.

Lifecycle
- Build one Registry at startup, register every Command (directly or with the
  @registry.command(...) decorator), then call run() once.
- Registration is last-write-wins by command name; the table is treated as
  read-only once dispatching starts.

Entry points
- dispatch(tokens): core contract. Looks the command up, tokenizes, binds and
  invokes; returns an Outcome or raises a fault.
- run(prompt): process wiring. Prints listings, help pages and faults through
  rich and exits with the proper status when shell=True; otherwise raises
  faults and returns the Outcome.

Host overrides (read from __main__)
- __prog__: program name shown in usage lines and fault headers.
- __styles__: palette overrides for every renderer.
- __codes__: relabel fault codes.
"""
import difflib
import os
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from rich.panel import Panel

from .dispatcher import Status, dispatch
from .commands import Command, command
from .faults import *
from .faults import _prog, console
from .rendering import render_help, render_listing
from .utils import *


class Listing:
    """
    Visible commands grouped by category (transient, built per request).

    - categories: category -> tuple of Commands, both sorted by name.
    - width: name column width; at least 4, widened by long names (an
      experimental entry counts one extra column for its "*").
    - experimental: True when any listed command is experimental.
    """
    __slots__ = ("_categories", "_width", "_experimental")

    def __init__(self, categories, width=4, experimental=False):
        self._categories = MappingProxyType({
            category: tuple(categories[category]) for category in sorted(categories)
        })
        self._width = width
        self._experimental = experimental

    @property
    def categories(self):
        return self._categories

    @property
    def width(self):
        return self._width

    @property
    def experimental(self):
        return self._experimental

    def __iter__(self):
        for entries in self._categories.values():
            yield from entries

    def __len__(self):
        return sum(map(len, self._categories.values()))

    def __rich_repr__(self):
        yield "categories", {category: [entry.name for entry in entries] for category, entries in self._categories.items()}
        yield "width", self._width
        yield "experimental", self._experimental

    def __repr__(self):
        return "listing(categories=%r, width=%d, experimental=%r)" % (
            {category: [entry.name for entry in entries] for category, entries in self._categories.items()},
            self._width,
            self._experimental,
        )


def _sanitize_prompt(prompt):
    """
    Normalize a run() prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string split with shlex.split().
    - Iterable[str]: items used as tokens (surrounding whitespace trimmed,
      blank items dropped).
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if not isinstance(prompt, Iterable):
        raise TypeError("run() argument must be a string or an iterable of strings")

    tokens = []
    for item in prompt:
        if not isinstance(item, str):
            raise TypeError("run() argument must be a string or an iterable of strings")
        if item := item.strip():
            tokens.append(item)
    return tokens


class Registry:
    """
    Mapping from command name to Command, plus program-level settings.

    Settings
    - prog: program name for usage lines (defaults to basename of argv[0]).
    - usage: free text printed above the command listing.
    - version: version line printed under listings and help pages.
    - category: category of commands that do not declare one ("General").
    - shell: print faults and exit (True) or raise them (False).
    - colorful / fancy: rich styling and panel framing of printed output.
    """

    prog = mirror("prog")
    usage = mirror("usage")
    version = mirror("version")
    category = mirror("category")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(
            self,
            prog=Unset,
            usage=Unset,
            version=Unset,
            category="General",
            *,
            shell=False,
            colorful=False,
            fancy=False
    ):
        for name, object in (("prog", prog), ("usage", usage), ("version", version), ("category", category)):
            if not isinstance(object, str | Unset):
                raise TypeError(f"registry {name!r} must be a string")
            elif isinstance(object, str) and not object.strip():
                raise ValueError(f"registry {name!r} cannot be empty")

        self._prog = coalesce(prog, os.path.basename(sys.argv[0]) or None)
        self._usage = coalesce(usage)
        self._version = coalesce(version)
        self._category = category.strip()
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._commands = {}

    @property
    def commands(self):
        """
        Read-only view of the registered commands, keyed by name.
        """
        return MappingProxyType(self._commands)

    def register(self, command, /):
        """
        Add `command` to the table; a command with the same name is replaced.
        """
        if not isinstance(command, Command):
            raise TypeError("register() argument must be a command")
        self._commands[command.name] = command
        return command

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Build a Command (see helmsman.command) and register it.

        Works directly (registry.command(entry, ...)) or as a decorator
        (@registry.command(name=...)).
        """
        @rename("command")
        def wrapper(source, /):
            return self.register(command(source, *args, **kwargs))

        return wrapper(source) if source is not Unset else wrapper

    def lookup(self, name, /):
        """
        Return the Command registered under `name`.

        raises
        - UnknownCommandError, with close matches among the visible commands
          as a hint.
        """
        try:
            return self._commands[name]
        except KeyError:
            pass

        matches = difflib.get_close_matches(name, [entry.name for entry in self.listing()], n=3)
        raise UnknownCommandError(
            "unknown command %r" % name,
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            hint=(
                "did you mean %s?" % " or ".join(map(repr, matches))
                if matches else
                "run '%s help' to list the available commands" % (self._prog or "help")
            ),
            input=name,
            suggestions=tuple(matches),
        )

    def listing(self, hidden=False):
        """
        Group the visible commands by category.

        Deprecated commands are never listed; hidden ones only when `hidden`
        is true.
        """
        categories = {}
        width = 4
        experimental = False
        for entry in sorted(self._commands.values(), key=lambda entry: entry.name):
            if entry.deprecated or (entry.hidden and not hidden):
                continue
            categories.setdefault(entry.category or self._category, []).append(entry)
            width = max(width, len(entry.name) + entry.experimental)
            experimental = experimental or entry.experimental
        return Listing(categories, width, experimental)

    def describe(self, name=Unset, /, *, hidden=False):
        """
        Renderable of the command listing, or of the help page of `name`.
        """
        if name is Unset:
            renderable = render_listing(
                self.listing(hidden), usage=self._usage, version=self._version, colorful=self._colorful
            )
        else:
            renderable = render_help(
                self.lookup(name), prog=_prog({"registry": self}), version=self._version, colorful=self._colorful
            )
        if self._fancy:
            return Panel(renderable, title=_prog({"registry": self}), title_align="left")
        return renderable

    def _options(self):
        return {"shell": self._shell, "colorful": self._colorful, "fancy": self._fancy, "registry": self}

    def dispatch(self, tokens, /):
        """
        Dispatch one invocation: `tokens` starts with the command name.

        returns
        - Outcome (see helmsman.dispatcher).

        raises
        - UnknownCommandError: empty `tokens` or unregistered command.
        - CommandExit / TypeCoercionError / CommandArgumentError: binding faults.
        """
        if isinstance(tokens, str):
            raise TypeError("dispatch() argument must be a sequence of strings, not a string")
        tokens = list(tokens)
        if not tokens:
            raise UnknownCommandError(
                "missing command",
                title="missing command",
                code=FaultCode.MISSING_COMMAND,
                hint="run '%s help' to list the available commands" % (self._prog or "help"),
            )

        command = self.lookup(tokens[0])
        if command.deprecated:
            trigger(DeprecatedCommandWarning(
                "command %r is deprecated" % command.name,
                title="deprecated command",
                code=FaultCode.DEPRECATED_COMMAND,
                hint="it may be removed in a future version",
                command=command,
            ), **self._options())
        return dispatch(command, tokens[1:], **self._options())

    def _reject(self, command, fault, options):
        # fault first, then the help page of the command it belongs to
        trigger(fault, **options, deferred=True)
        console.print(self.describe(command.name))
        sys.exit(1)

    def _help(self, tokens, options):
        if not tokens:
            console.print(self.describe())
        else:
            try:
                console.print(self.describe(tokens[0]))
            except UnknownCommandError as fault:
                if self._shell:
                    console.print(self.describe())
                trigger(fault, **options)
        if self._shell:
            sys.exit(0)

    def run(self, prompt=Unset, /):
        """
        Execute one invocation of the program.

        parameters
        - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of
          strings; the first token names the command. Tokens are stripped and
          blank ones dropped before dispatch, so "  a  " binds as "a" and an
          explicit "" value leaves its option naked. Use dispatch() to pass
          tokens through untouched.

        behavior (shell=True)
        - missing or unknown command: listing, then the fault; exit 1.
        - binding faults: every fault, then the command help; exit 1.
        - help requested: command help; exit 1.
        - entry point rejected its arguments: the error, then help; exit 1.
        - completed: exit with the entry point's integer result, or 0.
        - "help [command]" (unless a command named "help" is registered):
          listing or command help; exit 0.

        behavior (shell=False)
        - faults are raised; help pages are still printed; the Outcome (or
          None for "help") is returned.
        """
        tokens = _sanitize_prompt(prompt)
        options = self._options()

        if tokens[:1] == ["help"] and "help" not in self._commands:
            return self._help(tokens[1:], options)

        try:
            outcome = self.dispatch(tokens)
        except UnknownCommandError as fault:
            if self._shell:
                console.print(self.describe())
            return trigger(fault, **options)
        except (CommandExit, TypeCoercionError, CommandArgumentError) as fault:
            return self._reject(self._commands[tokens[0]], fault, options)

        match outcome.status:
            case Status.HELP:
                console.print(self.describe(outcome.command.name))
                if self._shell:
                    sys.exit(1)
            case Status.REJECTED:
                if self._shell:
                    self._reject(outcome.command, outcome.error, options)
            case Status.COMPLETED:
                if self._shell:
                    result = outcome.result
                    sys.exit(result if isinstance(result, int) and not isinstance(result, bool) else 0)
        return outcome

    def __contains__(self, name):
        return name in self._commands

    def __rich_repr__(self):
        yield "prog", self._prog
        yield "version", self._version, None
        yield "category", self._category
        yield "commands", sorted(self._commands)

    def __repr__(self):
        return "registry(prog=%r, version=%r, category=%r, commands=%r)" % (
            self._prog, self._version, self._category, sorted(self._commands)
        )


__all__ = (
    "Listing",
    "Registry",
)
