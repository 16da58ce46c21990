"""
Serialized console output and logging wiring.

Every piece of text the library prints (help screens, default error
diagnostics) goes through this module. Writes hold a single process-wide lock
so a handler printing from one thread and the library printing from another
never interleave partial lines.

Output is rendered by rich consoles bound lazily to sys.stdout / sys.stderr,
so redirecting those streams (e.g. contextlib.redirect_stdout) redirects the
library output too.

Logging
- modules log through logging.getLogger(__name__) under the "clack" namespace.
- the library never installs handlers on import; call configure_logging() to
  route the "clack" logger through a RichHandler on stderr.
"""
import logging
import threading

from rich.console import Console
from rich.logging import RichHandler

_lock = threading.Lock()

stdout = Console(highlight=False, soft_wrap=True)
stderr = Console(stderr=True, highlight=False, soft_wrap=True)


def print(*objects, stream=stdout, end=""):
    """
    write objects to a console without a trailing newline (serialized).

    strings are written verbatim (no rich markup or emoji codes); renderables such as
    Text keep their styles.
    """
    with _lock:
        stream.print(*objects, end=end, markup=False, emoji=False)


def println(*objects, stream=stdout):
    """
    same as print() but terminates the output with a newline.
    """
    print(*objects, stream=stream, end="\n")


def eprint(*objects, end=""):
    """
    print() bound to the stderr console.
    """
    print(*objects, stream=stderr, end=end)


def configure_logging(level=logging.WARNING, /):
    """
    attach a RichHandler (bound to the stderr console) to the "clack" logger.

    calling it again replaces the previously installed rich handler instead of
    stacking duplicates. returns the configured logger.
    """
    logger = logging.getLogger("clack")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    logger.addHandler(RichHandler(
        console=stderr,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    ))
    logger.setLevel(level)
    return logger


__all__ = (
    "stdout",
    "stderr",
    "print",
    "println",
    "eprint",
    "configure_logging",
)
