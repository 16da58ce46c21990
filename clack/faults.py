"""
Clack faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- Value faults: scalar conversion failures raised by Value.parse(). They are
  ValueError subclasses, so plain ``except ValueError`` keeps working.
- Command exceptions: structural failures raised while matching an argument
  vector against a command tree, and the wrapper for failing user handlers.

Rendering
- Every fault knows how to render itself with rich (__rich__): a one-line
  header with the program label, normalized code and title, the message, and
  a single hint.
- The host application may define in __main__:
  • __prog__:   label shown in headers (defaults to the "prog" option or "clack").
  • __codes__:  mapping FaultCode -> custom label (see FaultCode.normalize()).
  • __styles__: palette overrides (keys listed in _STYLES).
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

_STYLES = {
    # header parts
    "prog-name": "bold #E6E6F0",  # near-white program name
    "code": "bold #00E5FF",  # neon cyan fault code
    "error-title": "bold #FF4DA6",  # friendly pinky title

    # body
    "error-message": "#C8C8D0",  # soft light gray message
    "hint-arrow": "#9CE19C dim",  # gentle green arrow
    "hint": "italic #9CE19C",  # gentle green hint text
}


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - application (1100x)
      • APP_NAME_MISMATCH, NOT_ENOUGH_INPUT
    - routing (1110x)
      • UNEXPECTED_COMMAND
    - arguments (1111x)
      • UNKNOWN_ARGUMENT, EXPECTED_ARGUMENT_VALUE, REQUIRED_ARGUMENT,
        PARSE_ARGUMENT_VALUE
    - delegated (1113x)
      • HANDLER_ERROR
    - value conversion (2110x)
      • PARSE_INTEGER, PARSE_FLOAT, PARSE_STRING, PARSE_BOOLEAN, PARSE_ARRAY,
        PARSE_OBJECT
    """
    # --- application errors (11xxx) ---
    APP_NAME_MISMATCH       = 11001
    NOT_ENOUGH_INPUT        = 11002

    # --- routing errors (11xxx) ---
    UNEXPECTED_COMMAND      = 11101

    # --- argument errors (11xxx) ---
    UNKNOWN_ARGUMENT        = 11111
    EXPECTED_ARGUMENT_VALUE = 11112
    REQUIRED_ARGUMENT       = 11113
    PARSE_ARGUMENT_VALUE    = 11114

    # --- delegated errors (11xxx) ---
    HANDLER_ERROR           = 11131

    # --- value conversion errors (21xxx) ---
    PARSE_INTEGER           = 21101
    PARSE_FLOAT             = 21102
    PARSE_STRING            = 21103
    PARSE_BOOLEAN           = 21104
    PARSE_ARRAY             = 21105
    PARSE_OBJECT            = 21106

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Fault:
    """
    mixin shared by every clack error: message, options and rich rendering.

    class attributes
    - code:  FaultCode identifying the failure.
    - title: short lowercase title shown in the header.
    - hint:  one actionable sentence (may be overridden per instance via options).
    """
    code = None
    title = "fault"
    hint = ""

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, _STYLES | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        prog = getattr(main, "__prog__", self.options.get("prog", "clack"))

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint", self.hint), "hint"))

        return Group(header, message, hint)


class ValueParseError(Fault, ValueError):
    """
    base class of scalar conversion failures (Value.parse()).

    options
    - type: the ValueType whose conversion was attempted.
    - text: the raw text that failed to convert.
    """
    title = "invalid value"


class ParseIntegerError(ValueParseError):
    code = FaultCode.PARSE_INTEGER
    title = "invalid integer"
    hint = "use a base-10 whole number such as 42 or -7"


class ParseFloatError(ValueParseError):
    code = FaultCode.PARSE_FLOAT
    title = "invalid float"
    hint = "use a decimal number such as 3.14 or 1e-3"


class ParseStringError(ValueParseError):
    # string conversion never fails; kept so the taxonomy stays complete
    code = FaultCode.PARSE_STRING
    title = "invalid string"


class ParseBooleanError(ValueParseError):
    code = FaultCode.PARSE_BOOLEAN
    title = "invalid boolean"
    hint = "use exactly 'true' or 'false'"


class ParseArrayError(ValueParseError):
    code = FaultCode.PARSE_ARRAY
    title = "unsupported array"
    hint = "array values cannot be read from the command line"


class ParseObjectError(ValueParseError):
    code = FaultCode.PARSE_OBJECT
    title = "unsupported object"
    hint = "object values cannot be read from the command line"


class CommandException(Fault, Exception):
    """
    base class of structural failures raised while running a command tree.

    the accompanying usage text is written to the parse writer, not stored
    on the exception; options carry the offending context (command, token,
    argument) for custom error handlers.
    """


class AppNameMismatchError(CommandException):
    code = FaultCode.APP_NAME_MISMATCH
    title = "app name mismatch"
    hint = "invoke the program through its declared name"


class NotEnoughInputError(CommandException):
    code = FaultCode.NOT_ENOUGH_INPUT
    title = "not enough input"
    hint = "provide a command and its required arguments, or run 'help'"


class UnexpectedCommandError(CommandException):
    code = FaultCode.UNEXPECTED_COMMAND
    title = "unexpected command"
    hint = "run 'help' to see the available subcommands"


class UnknownArgumentError(CommandException):
    code = FaultCode.UNKNOWN_ARGUMENT
    title = "unknown argument"
    hint = "run 'help' to see the accepted options"


class ExpectedArgumentValueError(CommandException):
    code = FaultCode.EXPECTED_ARGUMENT_VALUE
    title = "missing value"
    hint = "add a value right after the option"


class RequiredArgumentError(CommandException):
    code = FaultCode.REQUIRED_ARGUMENT
    title = "required argument"
    hint = "add the missing option and its value"


class ParseArgumentValueError(CommandException):
    """
    an option value could not be converted; the ValueParseError is chained
    as __cause__ and exposed through reason.
    """
    code = FaultCode.PARSE_ARGUMENT_VALUE
    title = "invalid argument value"
    hint = "check the value type expected by this option"

    @property
    def reason(self):
        return self.__cause__


class HandlerError(CommandException):
    """
    the user handler failed; the original exception is chained as __cause__.
    """
    code = FaultCode.HANDLER_ERROR
    title = "handler error"
    hint = "check additional logs for more details"


__all__ = (
    "FaultCode",
    "Fault",
    "ValueParseError",
    "ParseIntegerError",
    "ParseFloatError",
    "ParseStringError",
    "ParseBooleanError",
    "ParseArrayError",
    "ParseObjectError",
    "CommandException",
    "AppNameMismatchError",
    "NotEnoughInputError",
    "UnexpectedCommandError",
    "UnknownArgumentError",
    "ExpectedArgumentValueError",
    "RequiredArgumentError",
    "ParseArgumentValueError",
    "HandlerError",
)
