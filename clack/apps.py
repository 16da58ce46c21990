"""
Clack application entry point.

App wraps the root Command of a tree and runs it against a full argument
vector: it checks the program name, strips it, delegates the rest to the root,
and routes structural failures to an error handler together with the
diagnostic text written during parsing.

    >>> app = App("tool").add_command(Command("greet").set_handler(print)).build()
    >>> app.run(["tool", "greet"])
    {}

Error handler contract
- error_handler(error, message) receives the CommandException and the text of
  the diagnostic ("Error: ..." line plus usage).
- returning an exception makes run() raise it; returning None marks the error
  as handled and run() returns None.
- the default handler prints the message to stderr and returns the error.
"""
import io
import logging
import shlex
import sys
from collections.abc import Iterable

from . import console
from .commands import Command
from .faults import AppNameMismatchError, CommandException, NotEnoughInputError
from .usage import write_usage
from .utils import *

logger = logging.getLogger(__name__)


def default_error_handler(error, message, /):
    console.eprint(message)
    return error


class App:
    """
    Root wrapper owning the top-level command of a tree.

    Builder calls return the app itself; set_description() and add_command()
    defer their failures to build() exactly like Command does.
    """

    version = mirror("version")
    error_handler = mirror("error_handler")
    root = mirror("root")

    def __init__(self, name, /):
        self._root = Command(name)
        self._version = None
        self._error_handler = default_error_handler

    @property
    def name(self):
        return self._root.name

    def set_version(self, version, /):
        if not isinstance(version, str):
            raise TypeError("app 'version' must be a string")
        elif not (version := version.strip()):
            raise ValueError("app 'version' cannot be empty")
        self._version = version
        return self

    def set_description(self, description, /):
        self._root.set_description(description)
        return self

    def set_error_handler(self, error_handler, /):
        if not callable(error_handler):
            raise TypeError("app 'error_handler' must be callable")
        self._error_handler = error_handler
        return self

    def add_command(self, command, /):
        self._root.add_command(command)
        return self

    def build(self):
        self._root.build()
        return self

    def usage(self, writer, /):
        write_usage(self._root, writer)

    def __repr__(self):
        return "app(name=%r, version=%r, root=%r)" % (self.name, self._version, self._root)

    def run(self, args=None, /):
        """
        Run the tree against a full argument vector (program name included).

        Parameters
        - args: None (read sys.argv), a str (split with shlex), or an iterable
          of strings.

        Raises
        - TypeError/ValueError: the tree recorded a build error.
        - CommandException: whatever the error handler returned.
        """
        self.build()

        match args:
            case None:
                tokens = list(sys.argv)
            case str():
                tokens = shlex.split(args)
            case Iterable():
                tokens = list(args)
            case _:
                raise TypeError("run() argument must be a string or an iterable of strings")
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("run() argument must be a string or an iterable of strings")

        writer = io.StringIO()
        logger.debug("running app %r with %r", self.name, tokens)

        try:
            if len(tokens) < 2:
                raise self._fault(writer, NotEnoughInputError, "no command specified: `%s`." % self.name)
            if not tokens[0].endswith(self.name):
                raise self._fault(
                    writer, AppNameMismatchError, "app name doesn't match: `%s`." % self.name, token=tokens[0]
                )
            self._root.parse(tokens[1:], writer)
        except CommandException as error:
            logger.debug("app %r routes %s to its error handler", self.name, type(error).__name__)
            if (result := self._error_handler(error, writer.getvalue())) is error:
                raise
            elif result is not None:
                raise result

    def _fault(self, writer, exception, message, /, **options):
        writer.write("Error: %s\n" % message)
        write_usage(self._root, writer)
        return exception(message, command=self.name, **options)


__all__ = (
    "App",
    "default_error_handler",
)
