r"""
Clack argument specifications.

Overview
- Argument: immutable descriptor of one named, typed command parameter.
  • built with Argument(long, type) and refined through copy-returning setters:
    set_short(), set_description(), set_default(), set_required().
- Flag: construction sugar for a boolean Argument defaulting to false; its
  presence on the command line toggles the value.

Metadata (sanitized on construction and on every copy)
- long: str, required. Letters/digits/underscores/hyphens, not starting with
  '-' or '_' (the dashes belong to the command line, not to the name).
- type: ValueType of the value the argument carries.
- short: None | str, optional one-token alias following the same rule.
- description: None | str, non-empty after trimming.
- default: None | Value, whose variant must equal 'type' (asserted).
- required: bool.

Semantics worth knowing
- A boolean Argument that has a default behaves as a flag: it never consumes a
  following token and stores the negation of its default when present.
- required together with a default is not a supported combination: the
  required check runs first, so the default is never used for it.

Quick example:
    >>> from clack import Argument, Flag, Value, ValueType
    >>> count = Argument("count", ValueType.INTEGER).set_short("c").set_default(Value.integer(12))
    >>> count.default
    Value.integer(12)
    >>> Flag("enable").set_short("e").default
    Value.boolean(False)
"""
import copy
import functools
import operator
import re

from .utils import *
from .values import Value, ValueType


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
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
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize argument metadata in place.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when a name is empty or not a valid option name.
    """
    for field in ("long", "short"):
        if (name := metadata[field]) is None and field == "short":
            continue
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
        elif not re.fullmatch(r"[^\W_][\w-]*", name):
            raise ValueError(f"{cls.__typename__} {field!r} must be a valid option name without leading dashes")
        metadata[field] = name

    if not isinstance(metadata["type"], ValueType):
        raise TypeError(f"{cls.__typename__} 'type' must be a value-type")

    if (description := metadata["description"]) is not None:
        if not isinstance(description, str):
            raise TypeError(f"{cls.__typename__} 'description' must be a string")
        elif not (description := description.strip()):
            raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
        metadata["description"] = description

    if not isinstance(metadata["default"], Value | None):
        raise TypeError(f"{cls.__typename__} 'default' must be a value")

    metadata["required"] = bool(metadata["required"])


class Argument(metaclass=ArgumentType):
    """
    Named, typed parameter of a command.

    Instances are immutable: every setter returns a sanitized copy and leaves
    the receiver untouched, so partially configured arguments can be shared.
    """

    __introspectable__ = (
        "long",
        "type",
        "short",
        "description",
        "default",
        "required",
    )

    def __new__(cls, long, type, /):
        """
        Construct a minimal Argument: no alias, no description, no default,
        not required.
        """
        return cls._create({
            "long": long,
            "type": type,
            "short": None,
            "description": None,
            "default": None,
            "required": False,
        })

    @classmethod
    def _create(cls, metadata, /):
        _sanitize_metadata(cls, metadata)
        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __replace__(self, /, **changes):
        if unknown := changes.keys() - set(type(self).__introspectable__):
            raise TypeError(f"{type(self).__typename__} has no field {sorted(unknown)[0]!r}")
        return type(self)._create({name: getattr(self, name) for name in type(self).__introspectable__} | changes)

    def set_short(self, short, /):
        return copy.replace(self, short=short)

    def set_description(self, description, /):
        return copy.replace(self, description=description)

    def set_default(self, default, /):
        # a mismatching default is a programming error, not a user error
        assert isinstance(default, Value) and default.type is self.type, (
            "default of %r must be a %s value" % (self.long, self.type.value)
        )
        return copy.replace(self, default=default)

    def set_required(self, required=True, /):
        return copy.replace(self, required=required)

    @property
    def toggles(self):
        """
        True when the argument is a presence-toggled flag (boolean with a default).
        """
        return self.type is ValueType.BOOLEAN and self.default is not None

    def matches(self, key, /):
        """
        True when key names this argument by its long name or its short alias.
        """
        return key == self.long or (self.short is not None and key == self.short)

    def __eq__(self, other, /):
        if not isinstance(other, Argument):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    def __hash__(self):
        return hash(tuple(self.__rich_repr__()))


class Flag:
    """
    Construction sugar: Flag(long) is Argument(long, BOOLEAN) defaulting to false.

    The result is a plain Argument (there is no distinct flag type at runtime),
    so set_short()/set_description() are available on it directly.
    """

    def __new__(cls, long, /):
        return Argument(long, ValueType.BOOLEAN).set_default(Value.boolean(False))


__all__ = (
    "Argument",
    "Flag",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
