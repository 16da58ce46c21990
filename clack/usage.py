"""
Usage/help rendering for commands.

Two layouts, chosen by whether the command has subcommands:

    <description>

    Usage: NAME [SUBCOMMAND] [OPTIONS]

    Subcommands:
    - child: child description
    - help: prints the command help message

and, for a leaf command:

    Usage: NAME [SUBCOMMAND] [OPTIONS]

    Subcommands:
    - help: prints the command help message

    Options:
    -n, --name: argument description
        --count: argument description

Lines follow declaration order. The palette can be overridden by a __styles__
mapping defined in __main__ (same keys as _STYLES); styles are dropped when
colorful is False, and the plain text is always available via Text.plain.
"""
from collections import defaultdict

from rich.text import Text


HELP_COMMAND = "help"
HELP_DESCRIPTION = "prints the command help message"

_STYLES = {
    "description-section": "italic #A3A3A3",  # Neutral gray
    "usage-label": "bold #00E6FF",  # CYAN → signature info color
    "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
    "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
    "group-label": "bold #FFFFFF",  # Pure white headers
    "children": "bold #36C5F0",  # Sky-blue subcommands
    "children-description": "#9CA3AF",
    "option-name": "bold #00E6FF",  # CYAN for options
    "flag-name": "bold #22C55E",  # GREEN for flags
    "argument-description": "#9CA3AF",  # Muted gray
}


def render_usage(command, /, *, colorful=True):
    """
    Build the usage text of a command as a rich Text.
    """
    styles = defaultdict(str, _STYLES | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        return Text(str(fragment), styles[style] if colorful else "")

    def entry(name, description, style):
        line = Text.assemble("- ", text(name, style))
        if description:
            line.append(": ").append(text(description, "children-description"))
        return line.append("\n")

    renders = Text()

    if command.commands and command.description:
        renders.append(text(command.description, "description-section")).append("\n\n")

    renders.append(text("Usage", "usage-label")).append(": ")
    renders.append(text(command.name, "program-name")).append(" ")
    renders.append(text("[SUBCOMMAND] [OPTIONS]", "usage-section")).append("\n\n")

    renders.append(text("Subcommands", "group-label")).append(":\n")
    for name, child in command.commands.items():
        renders.append(entry(name, child.description, "children"))
    renders.append(entry(HELP_COMMAND, HELP_DESCRIPTION, "children"))

    if command.commands:
        return renders

    renders.append("\n")
    renders.append(text("Options", "group-label")).append(":\n")
    for argument in command.arguments:
        style = "flag-name" if argument.toggles else "option-name"
        if argument.short is not None:
            renders.append(text("-" + argument.short, style)).append(", ")
        else:
            renders.append("    ")
        renders.append(text("--" + argument.long, style))
        if argument.description:
            renders.append(": ").append(text(argument.description, "argument-description"))
        renders.append("\n")

    return renders


def write_usage(command, writer, /):
    """
    Write the plain usage text of a command to a text writer.
    """
    writer.write(render_usage(command, colorful=False).plain)


__all__ = (
    "HELP_COMMAND",
    "render_usage",
    "write_usage",
)
