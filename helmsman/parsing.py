"""
Helmsman tokenizer: raw tokens -> Binding.

The scan is a single left-to-right pass without backtracking and never fails;
malformed input degrades into values the dispatcher later rejects (a naked
flag on a typed option, a missing required argument).

Token classes
- "--name"         long option; "--name=value" carries its value inline.
- "-abc"           short cluster: "a" and "b" are naked flags, "c" follows
                   the lookahead rule below.
- "--"             end of options; every following token is positional.
- bare token       (including a lone "-") switches to positional mode: it and
                   every following token are positionals, dashes included.

Lookahead rule (long options and the last letter of a short cluster)
- naked ("") when there is no next token, the next token starts with "-",
  or the command declares the key as a boolean option;
- otherwise the next token is consumed as the value.

Known quirk: a value that itself starts with "-" (e.g. "--offset -5") is
read as another flag and the option is left naked. This is the historical
behavior and is kept on purpose.
"""
from types import MappingProxyType


class Binding:
    """
    Resolved binding of one invocation (transient).

    - options: key -> raw value of the last occurrence ("" for a naked flag).
    - occurrences: key -> every raw value, in command-line order.
    - positionals: tuple of positional tokens, or None when none were seen.
    """
    __slots__ = ("_occurrences", "_positionals")

    def __init__(self, occurrences=None, positionals=None):
        self._occurrences = {key: tuple(values) for key, values in (occurrences or {}).items()}
        self._positionals = tuple(positionals) if positionals else None

    @property
    def options(self):
        return MappingProxyType({key: values[-1] for key, values in self._occurrences.items()})

    @property
    def occurrences(self):
        return MappingProxyType(self._occurrences)

    @property
    def positionals(self):
        return self._positionals

    def get(self, key, default=None, /):
        """
        Raw value of the last occurrence of `key`, or `default`.
        """
        try:
            return self._occurrences[key][-1]
        except KeyError:
            return default

    def __contains__(self, key):
        return key in self._occurrences

    def __eq__(self, other):
        if not isinstance(other, Binding):
            return NotImplemented
        return self._occurrences == other._occurrences and self._positionals == other._positionals

    def __rich_repr__(self):
        yield "options", dict(self.options)
        yield "positionals", self._positionals

    def __repr__(self):
        return "binding(options=%r, positionals=%r)" % (dict(self.options), self._positionals)


def tokenize(tokens, command=None, /):
    """
    Classify `tokens` (everything after the command name) into a Binding.

    parameters
    - tokens: sequence of str.
    - command: Command | None, consulted only to know whether a key is a
      boolean option (a boolean never consumes the next token).

    returns
    - Binding
    """
    if isinstance(tokens, str):
        raise TypeError("tokenize() argument must be a sequence of strings, not a string")
    tokens = list(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("tokenize() argument must be a sequence of strings")

    occurrences = {}
    positionals = None

    def boolean(key):
        return command is not None and command.boolean(key)

    def lookahead(key, index):
        # bind `key` per the lookahead rule; return how many tokens were used
        following = index + 1
        if following >= len(tokens) or tokens[following].startswith("-") or boolean(key):
            occurrences.setdefault(key, []).append("")
            return 1
        occurrences.setdefault(key, []).append(tokens[following])
        return 2

    index = 0
    while index < len(tokens):
        token = tokens[index]

        # positional mode is one-way: nothing is reinterpreted as an option
        if positionals is not None:
            positionals.append(token)
            index += 1
        elif token == "--":
            positionals = []
            index += 1
        elif token.startswith("--"):
            key, separator, value = token[2:].partition("=")
            if separator:
                occurrences.setdefault(key, []).append(value)
                index += 1
            else:
                index += lookahead(key, index)
        elif token.startswith("-") and len(token) > 1:
            for char in token[1:-1]:
                occurrences.setdefault(char, []).append("")
            index += lookahead(token[-1], index)
        else:
            positionals = [token]
            index += 1

    return Binding(occurrences, positionals)


__all__ = (
    "Binding",
    "tokenize",
)
