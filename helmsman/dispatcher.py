"""
Helmsman dispatcher: apply a Binding to a Command and run it.

phases
- help: when any of the command's helper options appears in the binding (naked or
  with any value), nothing is bound and the outcome is Status.HELP.
- options: for every Option, in declaration order, look the value up by short
  name, then long name, then the binder-derived fallback, then
  • naked ("")  -> True for boolean options, CommandArgumentError otherwise;
  • raw value   -> coerced with the option's ValueType (TypeCoercionError is
                   fatal and raised immediately);
  • absent      -> MissingArgumentError when required (accumulated), the
                   coerced literal default when declared, else left unset.
- positionals: Arity.SINGLE takes the next unconsumed token, Arity.ALL takes
  all remaining ones; absent values follow the same required/default policy.
  Tokens left over raise an UnexpectedPositionalWarning.
- invocation: only when no error was accumulated. A CommandArgumentError
  raised by the entry point is recovered into Status.REJECTED; every other
  exception propagates.

Accumulated MissingArgumentErrors are raised together as one CommandExit.
"""
import copy
from enum import Enum

from .arguments import Arity
from .faults import *
from .parsing import tokenize
from .utils import ordinal


class Status(Enum):
    """
    how a dispatch ended.

    - COMPLETED: the entry point ran; Outcome.result holds its return value.
    - HELP: the helper option was given; nothing was bound or run.
    - REJECTED: the entry point raised CommandArgumentError (Outcome.error).
    """
    COMPLETED = "completed"
    HELP = "help"
    REJECTED = "rejected"


class Outcome:
    """
    Structured result of one dispatch.
    """
    __slots__ = ("command", "status", "result", "error")

    def __init__(self, command, status, /, result=None, error=None):
        self.command = command
        self.status = status
        self.result = result
        self.error = error

    def __rich_repr__(self):
        yield "command", self.command.name
        yield "status", self.status
        yield "result", self.result, None
        yield "error", self.error, None

    def __repr__(self):
        return "outcome(command=%r, status=%s, result=%r, error=%r)" % (
            self.command.name, self.status.name, self.result, self.error
        )


def _missing(command, label):
    return MissingArgumentError(
        "missing argument: %s" % label,
        title="missing argument",
        code=FaultCode.MISSING_ARGUMENT,
        hint="provide %s; run '%s --help' to see the expected usage" % (label, command.name),
        input=label,
        command=command,
    )


def _coerce(argument, raw, label):
    try:
        return argument.type.coerce(raw, name=label)
    except TypeCoercionError as exception:
        # anchor the fault on the argument that failed
        raise exception.__replace__(argument=argument) from None


def _resolve(option, binding):
    for key in option.keys:
        if key in binding:
            return binding.occurrences[key]
    return None


def _convert(command, option, raw):
    label = option.names[-1]
    if raw:
        return _coerce(option, raw, label)
    if option.boolean:
        return True
    raise CommandArgumentError(
        "option %s requires a %s value" % (label, option.type.label),
        title="missing option value",
        code=FaultCode.NAKED_VALUE,
        hint="pass a value after the option (for example: %s <%s>)" % (label, option.metavar or option.type.label),
        input=label,
        argument=option,
        command=command,
    )


def _bind_options(command, binding, errors):
    for option in command.options:
        label = option.names[-1]
        values = _resolve(option, binding)

        if values is None:
            if option.required:
                errors.append(_missing(command, label))
            elif option.default is not None:
                value = _coerce(option, option.default, label)
                option([value] if option.multiple else value)
            continue

        if option.multiple:
            option([_convert(command, option, raw) for raw in values])
        else:
            option(_convert(command, option, values[-1]))


def _bind_positionals(command, binding, errors, options):
    remaining = list(binding.positionals or ())

    for positional in command.positionals:
        if remaining:
            if positional.arity is Arity.ALL:
                tokens, remaining = remaining, []
                positional([_coerce(positional, token, positional.name) for token in tokens])
            else:
                positional(_coerce(positional, remaining.pop(0), positional.name))
        elif positional.required:
            errors.append(_missing(command, positional.name))
        elif positional.default is not None:
            value = _coerce(positional, positional.default, positional.name)
            positional([value] if positional.arity is Arity.ALL else value)

    if remaining:
        position = len(binding.positionals) - len(remaining) + 1
        trigger(UnexpectedPositionalWarning(
            "unexpected %s positional argument %r" % (ordinal(position), remaining[0]),
            title="unexpected positional",
            code=FaultCode.UNEXPECTED_POSITIONAL,
            hint="remove the extra values or run '%s --help' to see the expected usage" % command.name,
            leftover=tuple(remaining),
            command=command,
        ), **options)


def bind(command, binding, /, **options):
    """
    Apply `binding` to the descriptors of `command`.

    parameters
    - command: Command
    - binding: Binding produced by tokenize()
    - options: runtime options forwarded to trigger() for warnings
      (shell, colorful, fancy, registry).

    returns
    - Status.HELP when any helper option was given (nothing bound), else None.

    raises
    - TypeCoercionError / CommandArgumentError: immediately.
    - CommandExit: every MissingArgumentError of the invocation at once.
    """
    if any(_resolve(option, binding) is not None for option in command.options if option.helper):
        return Status.HELP

    errors = []
    _bind_options(command, binding, errors)
    _bind_positionals(command, binding, errors, options)

    if errors:
        raise CommandExit(errors)


def dispatch(command, tokens, /, **options):
    """
    Tokenize `tokens` for `command`, bind them, and invoke the entry point.

    returns
    - Outcome (COMPLETED, HELP, or REJECTED).

    raises
    - the binding faults of bind(); any non-CommandArgumentError exception
      raised by the entry point.
    """
    if bind(command, tokenize(tokens, command), **options) is Status.HELP:
        return Outcome(command, Status.HELP)

    try:
        result = command()
    except CommandArgumentError as exception:
        if exception.code is None:
            exception = copy.replace(exception, code=FaultCode.COMMAND_ARGUMENT)
        return Outcome(command, Status.REJECTED, error=exception)
    return Outcome(command, Status.COMPLETED, result=result)


__all__ = (
    "Status",
    "Outcome",
    "bind",
    "dispatch",
)
