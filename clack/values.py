"""
Clack values: the closed set of runtime types an argument can carry.

Overview
- ValueType: the variant tags (integer, float, string, boolean, array, object).
- Value: an immutable tagged union pairing a ValueType with its payload.
  • constructors per variant: Value.integer(), Value.float(), Value.string(),
    Value.boolean(), Value.array(), Value.object().
  • Value.parse(type, text) converts raw command-line text into a Value.
  • accessors (as_integer, as_float, as_string, as_boolean, items, get)
    return None when the active variant does not match.

Conversion rules (Value.parse)
- integer: base-10, optional sign, signed 64-bit range.
- float:   decimal/exponent notation (Python float grammar, no surrounding blanks).
- string:  verbatim, never fails.
- boolean: exactly "true" or "false" (case-sensitive).
- array/object: always fail, they cannot be read from the command line.

Quick example:
    >>> Value.parse(ValueType.INTEGER, "12")
    Value.integer(12)
    >>> Value.parse(ValueType.BOOLEAN, "true").as_boolean()
    True
"""
import builtins
import re
from collections.abc import Iterable, Mapping
from enum import StrEnum
from types import MappingProxyType

from .faults import (
    ParseArrayError,
    ParseBooleanError,
    ParseFloatError,
    ParseIntegerError,
    ParseObjectError,
)

_INT64_MIN = -2 ** 63
_INT64_MAX = 2 ** 63 - 1


class ValueType(StrEnum):
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


def _parse_integer(text):
    try:
        # int() alone would also accept blanks, underscores and non-ascii digits
        if not re.fullmatch(r"[+-]?[0-9]+", text):
            raise ValueError("invalid literal for a base-10 integer: %r" % text)
        if not _INT64_MIN <= (number := int(text, 10)) <= _INT64_MAX:
            raise OverflowError("integer %s does not fit in 64 bits" % text)
    except (ValueError, OverflowError) as error:
        raise ParseIntegerError(
            "cannot parse %r as integer" % text, type=ValueType.INTEGER, text=text
        ) from error
    return Value.integer(number)


def _parse_float(text):
    try:
        if text != text.strip() or "_" in text:
            raise ValueError("invalid literal for a float: %r" % text)
        number = float(text)
    except ValueError as error:
        raise ParseFloatError(
            "cannot parse %r as float" % text, type=ValueType.FLOAT, text=text
        ) from error
    return Value.float(number)


def _parse_boolean(text):
    match text:
        case "true":
            return Value.boolean(True)
        case "false":
            return Value.boolean(False)
    raise ParseBooleanError("cannot parse %r as boolean" % text, type=ValueType.BOOLEAN, text=text)


class Value:
    """
    Immutable tagged union holding one parsed argument value.

    Two values are equal when both the variant and the payload are equal, so
    Value.integer(1) != Value.float(1.0) and Value.integer(1) != Value.boolean(True).
    """
    __slots__ = ("_type", "_payload")

    def __init__(self, type, payload, /):
        if not isinstance(type, ValueType):
            raise TypeError("value 'type' must be a value-type")
        object.__setattr__(self, "_type", type)
        object.__setattr__(self, "_payload", payload)

    def __setattr__(self, name, value, /):
        raise AttributeError("value objects are immutable")

    def __delattr__(self, name, /):
        raise AttributeError("value objects are immutable")

    @property
    def type(self):
        return self._type

    @property
    def payload(self):
        return self._payload

    @classmethod
    def integer(cls, payload, /):
        if not isinstance(payload, builtins.int) or isinstance(payload, bool):
            raise TypeError("integer value must be an int")
        if not _INT64_MIN <= payload <= _INT64_MAX:
            raise OverflowError("integer value must fit in 64 bits")
        return cls(ValueType.INTEGER, payload)

    @classmethod
    def float(cls, payload, /):
        if not isinstance(payload, builtins.int | builtins.float) or isinstance(payload, bool):
            raise TypeError("float value must be a real number")
        return cls(ValueType.FLOAT, builtins.float(payload))

    @classmethod
    def string(cls, payload, /):
        if not isinstance(payload, str):
            raise TypeError("string value must be a str")
        return cls(ValueType.STRING, payload)

    @classmethod
    def boolean(cls, payload, /):
        if not isinstance(payload, bool):
            raise TypeError("boolean value must be a bool")
        return cls(ValueType.BOOLEAN, payload)

    @classmethod
    def array(cls, payload=(), /):
        if not isinstance(payload, Iterable) or isinstance(payload, str | Mapping):
            raise TypeError("array value must be an iterable of values")
        items = tuple(payload)
        if not all(isinstance(item, Value) for item in items):
            raise TypeError("array items must be values")
        return cls(ValueType.ARRAY, items)

    @classmethod
    def object(cls, payload=MappingProxyType({}), /):
        if not isinstance(payload, Mapping):
            raise TypeError("object value must be a mapping")
        for key, item in payload.items():
            if not isinstance(key, str):
                raise TypeError("object keys must be strings")
            if not isinstance(item, Value):
                raise TypeError("object members must be values")
        return cls(ValueType.OBJECT, MappingProxyType(dict(payload)))

    @classmethod
    def parse(cls, type, text, /):
        """
        Convert raw command-line text into a Value of the given type.

        Raises
        - ParseIntegerError / ParseFloatError (chained to the underlying reason),
          ParseBooleanError, ParseArrayError, ParseObjectError on failure.
        - TypeError when 'type' is not a ValueType or 'text' is not a string.
        """
        if not isinstance(text, str):
            raise TypeError("parse() second argument must be a string")
        match type:
            case ValueType.INTEGER:
                return _parse_integer(text)
            case ValueType.FLOAT:
                return _parse_float(text)
            case ValueType.STRING:
                return cls.string(text)
            case ValueType.BOOLEAN:
                return _parse_boolean(text)
            case ValueType.ARRAY:
                raise ParseArrayError("array values cannot be parsed from text", type=type, text=text)
            case ValueType.OBJECT:
                raise ParseObjectError("object values cannot be parsed from text", type=type, text=text)
        raise TypeError("parse() first argument must be a value-type")

    def as_integer(self):
        return self._payload if self._type is ValueType.INTEGER else None

    def as_float(self):
        return self._payload if self._type is ValueType.FLOAT else None

    def as_string(self):
        return self._payload if self._type is ValueType.STRING else None

    def as_boolean(self):
        return self._payload if self._type is ValueType.BOOLEAN else None

    def items(self):
        """
        Array elements as a tuple; None for any other variant.
        """
        return self._payload if self._type is ValueType.ARRAY else None

    def get(self, key, /):
        """
        Object member lookup; None for a missing key or any other variant.
        """
        if self._type is not ValueType.OBJECT:
            return None
        return self._payload.get(key)

    def __eq__(self, other, /):
        if not isinstance(other, Value):
            return NotImplemented
        if self._type is not other._type:
            return False
        if self._type is ValueType.OBJECT:
            return dict(self._payload) == dict(other._payload)
        return self._payload == other._payload

    def __hash__(self):
        if self._type is ValueType.OBJECT:
            return hash((self._type, frozenset(self._payload.items())))
        return hash((self._type, self._payload))

    def __repr__(self):
        if self._type is ValueType.OBJECT:
            return "Value.object(%r)" % dict(self._payload)
        if self._type is ValueType.ARRAY:
            return "Value.array(%r)" % list(self._payload)
        return "Value.%s(%r)" % (self._type.value, self._payload)

    def __rich_repr__(self):
        yield "type", self._type.value
        yield "payload", self._payload

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        if self._type is ValueType.OBJECT:
            return type(self).object, (dict(self._payload),)
        return type(self), (self._type, self._payload)


__all__ = (
    "ValueType",
    "Value",
)
