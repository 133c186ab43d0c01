"""
Helmsman value types and coercion.

Every bindable parameter declares one member of the closed ValueType enum.
Coercion turns a raw command-line string into a typed Python value, or raises
TypeCoercionError; nothing else is validated.

| member  | python | accepted input                                   |
|---------|--------|--------------------------------------------------|
| STRING  | str    | anything                                         |
| INTEGER | int    | [+-]digits within the signed 32-bit range        |
| LONG    | int    | [+-]digits within the signed 64-bit range        |
| FLOAT   | float  | float literal, rounded to single precision       |
| DOUBLE  | float  | float literal (nan and inf spellings included)   |
| BOOLEAN | bool   | "true" / "false", case-insensitive               |
"""
import re
import struct
from enum import Enum

from .faults import FaultCode, TypeCoercionError


def _integral(bits):
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    def coerce(raw):
        if not re.fullmatch(r"[+-]?[0-9]+", raw):
            raise ValueError("not an integral number")
        if not low <= (value := int(raw)) <= high:
            raise ValueError("out of range [%d, %d]" % (low, high))
        return value

    return coerce


def _double(raw):
    # float() also trims whitespace and accepts underscores; keep literals strict
    if raw != raw.strip() or "_" in raw:
        raise ValueError("not a floating point number")
    return float(raw)


def _single(raw):
    try:
        return struct.unpack("<f", struct.pack("<f", _double(raw)))[0]
    except OverflowError:
        raise ValueError("out of single precision range") from None


def _boolean(raw):
    match raw.lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError("expected 'true' or 'false'")


class ValueType(Enum):
    """
    closed set of types a descriptor can bind.

    each member carries a label (used in help and messages) and its converter;
    see coerce() for the error contract.
    """
    STRING = ("string", str)
    INTEGER = ("integer", _integral(32))
    LONG = ("long", _integral(64))
    FLOAT = ("float", _single)
    DOUBLE = ("double", _double)
    BOOLEAN = ("boolean", _boolean)

    def __init__(self, label, converter):
        self.label = label
        self._converter = converter

    def coerce(self, raw, /, *, name=None):
        """
        convert a raw string into this type.

        raises TypeCoercionError (code TYPE_COERCION) when the string is not
        parseable; `name` only flavors the message.
        """
        if not isinstance(raw, str):
            raise TypeError("coerce() argument must be a string")
        try:
            return self._converter(raw)
        except (ValueError, OverflowError) as exception:
            subject = "value %r for %r" % (raw, name) if name else "value %r" % raw
            raise TypeCoercionError(
                "%s cannot be converted to %s" % (subject, self.label),
                title="type coercion error",
                code=FaultCode.TYPE_COERCION,
                hint="use a valid %s (%s)" % (self.label, exception),
                input=name,
                value=raw,
                type=self,
            ) from None

    def __repr__(self):
        return "%s.%s" % (type(self).__name__, self.name)


__all__ = (
    "ValueType",
)
