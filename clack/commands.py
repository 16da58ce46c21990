"""
Clack command layer: declare, assemble, and parse command trees.

What this module provides
- Command: a named node owning typed arguments, child commands and an
  optional handler. It is both the builder of the tree and the parser that
  matches an argument vector against it.

Building (deferred errors)
- Builder calls (set_description, set_handler, add_argument, add_flag,
  add_command) return the command itself so a whole tree reads as one chain.
- A failing call does not raise: the first failure is recorded and every later
  call becomes a no-op. build() raises that first failure, or returns the
  command when the chain was clean.

      >>> root = (
      ...     Command("tool")
      ...     .set_description("a tool")
      ...     .add_command(
      ...         Command("greet")
      ...         .add_argument(Argument("name", ValueType.STRING).set_short("n").set_required())
      ...         .add_flag(Flag("loud").set_short("l"))
      ...         .set_handler(print)
      ...     )
      ...     .build()
      ... )

Parsing
- parse(tokens, writer) descends into subcommands while the leading token does
  not start with '-', then reads "--long value", "-short value" and flag
  tokens for the reached command, checks required arguments, fills defaults,
  and calls the handler with a dict mapping long names to Values.
- The literal subcommand "help" prints the usage of the current command.
- Failures raise immediately (first violation wins) and always leave an
  "Error: ..." line followed by the usage text in the writer.

See also
- clack.arguments for argument descriptors.
- clack.faults for the error taxonomy.
- clack.usage for the help layout.
"""
import functools
import io
import logging
import operator
import re
from collections import deque
from collections.abc import Iterable

from . import console
from .arguments import Argument
from .faults import *
from .usage import HELP_COMMAND, render_usage, write_usage
from .utils import *
from .values import Value

logger = logging.getLogger(__name__)


class CommandType(type):
    """
    Metaclass for commands: read-only properties and stable representations.

    - every name in __introspectable__ becomes a mirror() property over "_name".
    - __rich_repr__ shows __displayable__ (or __introspectable__ when unset).
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


def _deferred(method):
    """
    Wrap a builder method with the deferred-error discipline.

    - once a build error is recorded, the call is skipped and the command is
      returned unchanged.
    - a TypeError/ValueError raised by the body is recorded instead of raised.
    - the command is always returned, so calls can be chained.
    """
    @functools.wraps(method)
    def wrapper(self, /, *args, **kwargs):
        if self._build_error is not None:
            return self
        try:
            method(self, *args, **kwargs)
        except (TypeError, ValueError) as error:
            logger.debug("command %r recorded a build error: %s", self._name, error)
            self._build_error = error
        return self

    return wrapper


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif name.startswith("-") or re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} 'name' cannot start with '-' or contain blanks")
    return name


class Command(metaclass=CommandType):
    """
    Named node of a command tree.

    Ownership
    - arguments: ordered, unique by long/short name within this command only.
    - commands: ordered mapping name -> child, unique among siblings.

    Introspection
    - the fields in __introspectable__ are read-only; sequences are exposed as
      tuples and mappings as read-only proxies.
    """

    __introspectable__ = (
        "name",
        "description",
        "handler",
        "arguments",
        "commands",
        "build_error",
    )

    __displayable__ = (
        "name",
        "description",
        "arguments",
        "commands",
    )

    def __init__(self, name, /):
        self._name = _sanitize_name(type(self), name)
        self._description = None
        self._handler = None
        self._arguments = []
        self._commands = {}
        self._build_error = None

    @_deferred
    def set_description(self, description, /):
        if not isinstance(description, str):
            raise TypeError(f"{type(self).__typename__} 'description' must be a string")
        elif not (description := description.strip()):
            raise ValueError(f"{type(self).__typename__} 'description' cannot be empty")
        self._description = description

    @_deferred
    def set_handler(self, handler, /):
        if not callable(handler):
            raise TypeError(f"{type(self).__typename__} 'handler' must be callable")
        self._handler = handler

    @_deferred
    def add_argument(self, argument, /):
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__typename__} arguments must be arguments")
        self._attach_argument(argument)

    @_deferred
    def add_flag(self, flag, /):
        if not isinstance(flag, Argument) or not flag.toggles:
            raise TypeError(f"{type(self).__typename__} flags must be boolean arguments with a default")
        self._attach_argument(flag)

    @_deferred
    def add_command(self, command, /):
        if not isinstance(command, Command):
            raise TypeError(f"{type(self).__typename__} subcommands must be commands")
        # a child that failed to build poisons the whole tree with its own error
        if command.build_error is not None:
            raise command.build_error
        if command.name == HELP_COMMAND:
            raise ValueError(f"{type(self).__typename__} name {HELP_COMMAND!r} is reserved")
        if self._commands.setdefault(command.name, command) is not command:
            raise ValueError(f"{type(self).__typename__} subcommand name {command.name!r} is already in use")

    def build(self):
        """
        Finalize the builder chain: raise the first recorded failure, if any.
        """
        if self._build_error is not None:
            raise self._build_error
        return self

    def _attach_argument(self, argument, /):
        for name in filter(None, (argument.long, argument.short)):
            if (existing := self.find(name)) is not None:
                raise ValueError(
                    f"{type(self).__typename__} {self._name!r} argument name {name!r} "
                    f"is already used by {existing.long!r}"
                )
        self._arguments.append(argument)

    def find(self, key, /):
        """
        Return the argument whose long name or short alias equals key, or None.
        """
        for argument in self._arguments:
            if argument.matches(key):
                return argument
        return None

    def required_argument_count(self):
        return sum(1 for argument in self._arguments if argument.required)

    def _fault(self, writer, exception, message, /, **options):
        """
        write the diagnostic (error line + usage) and return the exception to raise.
        """
        writer.write("Error: %s\n" % message)
        write_usage(self, writer)
        logger.debug("command %r failed: %s", self._name, message)
        return exception(message, command=self._name, **options)

    def parse(self, tokens, writer=None, /):
        """
        Match tokens (the argument vector without the program name) against
        this command and run the handler of the command that was reached.

        Parameters
        - tokens: Iterable[str]
        - writer: text sink with a write() method receiving the diagnostic on
          failure; a throwaway buffer is used when omitted.

        Raises
        - NotEnoughInputError, UnexpectedCommandError, UnknownArgumentError,
          ExpectedArgumentValueError, ParseArgumentValueError,
          RequiredArgumentError: structural failures.
        - HandlerError: the handler raised; the original is chained.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = deque(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")
        if writer is None:
            writer = io.StringIO()

        if not tokens and self.required_argument_count():
            raise self._fault(
                writer, NotEnoughInputError, "not enough arguments for command: `%s`." % self._name
            )

        if tokens and not tokens[0].startswith("-"):
            if (name := tokens.popleft()) == HELP_COMMAND:
                logger.debug("rendering help for command %r", self._name)
                console.print(render_usage(self))
                return
            try:
                command = self._commands[name]
            except KeyError:
                raise self._fault(
                    writer, UnexpectedCommandError, "unexpected command: `%s`." % name, token=name
                ) from None
            logger.debug("dispatching from %r to subcommand %r", self._name, name)
            return command.parse(tokens, writer)

        params = self._parseargs(tokens, writer)

        if self._handler is None:
            return

        logger.debug("invoking handler of %r with %s", self._name, sorted(params))
        try:
            self._handler(params)
        except Exception as exception:
            message = "handler failed for command: `%s`." % self._name
            writer.write("Error: %s\n" % message)
            logger.debug("handler of %r raised %r", self._name, exception)
            raise HandlerError(message, command=self._name, exception=exception) from exception

    def _parseargs(self, tokens, writer, /):
        """
        read option/value pairs and flags, then resolve required arguments and defaults.
        """
        params = {}

        while tokens:
            token = tokens.popleft()

            if token.startswith("--"):
                argument = self.find(token[2:])
            elif token.startswith("-"):
                argument = self.find(token[1:])
            else:
                # a bare token after the options is never an option name
                argument = None

            if argument is None:
                raise self._fault(
                    writer,
                    UnknownArgumentError,
                    "unknown argument `%s` for command: `%s`." % (token, self._name),
                    token=token,
                )

            if argument.toggles:
                params[argument.long] = Value.boolean(not argument.default.as_boolean())
                continue

            if not tokens:
                raise self._fault(
                    writer,
                    ExpectedArgumentValueError,
                    "expected value for argument: `%s`." % token,
                    token=token,
                    argument=argument,
                )

            try:
                params[argument.long] = Value.parse(argument.type, value := tokens.popleft())
            except ValueParseError as error:
                raise self._fault(
                    writer,
                    ParseArgumentValueError,
                    "parsing value for argument: `%s`." % token,
                    token=token,
                    value=value,
                    argument=argument,
                ) from error

        for argument in self._arguments:
            if argument.long in params:
                continue
            if argument.required:
                raise self._fault(
                    writer,
                    RequiredArgumentError,
                    "required argument: `%s`." % argument.long,
                    argument=argument,
                )
            if argument.default is not None:
                params[argument.long] = argument.default

        return params


__all__ = (
    "Command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
