"""
Help and usage rendering.

Builds rich renderables from a parser's registries (read-only):

    Usage: prog [options] <source> <target>

    Positional arguments:
      source            file to read
      target            file to write

    Options:
      -h, --help                  show this help message and exit
      -n, --count COUNT           number of copies

Palette keys
- usage-label, program-name, positional-name, option-name, flag-name, metavar,
  section-label, argument-description, panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the parser is not colorful, styling is suppressed.
"""
import io
import os.path
import sys
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .arguments import FLAG
from .utils import Unset

# name column widths, including the two-space margin
_POSITIONAL_COLUMN = 20
_OPTION_COLUMN = 30
_MARGIN = 2


def _palette(parser):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "positional-name": "bold #FFD600",
        "option-name": "bold #00E6FF",
        "flag-name": "bold #22C55E",
        "metavar": "bold #FFD600",
        "section-label": "bold #FFFFFF",
        "argument-description": "#9CA3AF",
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if parser.colorful else ""

    return styler


def program_name(parser):
    """
    Name shown in usage lines: the last parsed program, then __main__.__prog__,
    then the basename of sys.argv[0].
    """
    if parser.program is not Unset:
        return parser.program
    main = __import__("__main__")
    if hasattr(main, "__prog__"):
        return main.__prog__
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "prog"


def render_usage(parser):
    """
    Return the usage line as rich Text.
    """
    styler = _palette(parser)
    usage = Text()
    usage.append("Usage", styler("usage-label")).append(": ")
    usage.append(program_name(parser), styler("program-name"))
    if parser.optionals:
        usage.append(" [options]")
    for name in parser.positionals:
        usage.append(" <").append(name, styler("positional-name")).append(">")
    return usage


def _row(names, descr, column, styler):
    # names wider than the column push the description to the next line
    row = Text(" " * _MARGIN).append_text(names)
    if not descr:
        return row
    if len(row) >= column:
        row.append("\n").append(" " * column)
    else:
        row.append(" " * (column - len(row)))
    return row.append(descr, styler("argument-description"))


def render_help(parser):
    """
    Return the full help (usage, positional table, options table) as a rich Group.
    """
    styler = _palette(parser)
    renders = [render_usage(parser)]

    if parser.positionals:
        section = Text("\n").append("Positional arguments", styler("section-label")).append(":")
        for name, positional in parser.positionals.items():
            row = _row(Text(name, styler("positional-name")), positional.help, _POSITIONAL_COLUMN, styler)
            section.append("\n").append_text(row)
        renders.append(section)

    if parser.optionals:
        section = Text("\n").append("Options", styler("section-label")).append(":")
        for name, optional in parser.optionals.items():
            style = "flag-name" if optional.kind is FLAG else "option-name"
            names = Text()
            if optional.flag is not Unset:
                names.append("-" + optional.flag, styler(style)).append(", ")
            names.append("--" + name, styler(style))
            if optional.kind is not FLAG:
                names.append(" ").append(name.upper(), styler("metavar"))
            section.append("\n").append_text(_row(names, optional.help, _OPTION_COLUMN, styler))
        renders.append(section)

    renderable = Group(*renders)
    if parser.fancy:
        return Panel(
            renderable,
            title=Text.assemble("[ ", f"{program_name(parser)} HELP".upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )
    return renderable


def plain(renderable, /, width=100):
    """
    Render a rich renderable to plain text (no colors, no terminal codes).
    """
    console = Console(file=io.StringIO(), width=width, color_system=None, highlight=False)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


__all__ = (
    "program_name",
    "render_usage",
    "render_help",
    "plain",
)
