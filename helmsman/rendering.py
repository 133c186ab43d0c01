"""
Helmsman renderers: command listing and per-command help as rich Text.

Both renderers return a single Text built line by line, so callers can print
it with any Console or read its `.plain` form. Styling is applied only when
`colorful` is true; a __styles__ mapping in __main__ overrides any palette key.

Listing layout
    <usage>

    Available commands:

    [Category]
      name     - description
      beta*    - experimental description

    * = experimental command

    <version>

Help layout
    name - description
    <doc>
    Usage: <prog> name [options] POSITIONAL...

    Options:
      --count -c N : how many (default: 5)
      -v           : verbose

    (the value label "N" appears only when the option declares a metavar)

    <version>
"""
from rich.text import Text

from .arguments import Arity
from .faults import _palette

_STYLES = {
    # listing
    "usage-section": "bold #36C5F0",  # sky-blue usage blurb
    "section-label": "bold #FFFFFF",  # pure white headers
    "category": "bold #FF4D94",  # magenta-pink category labels
    "command-name": "bold #00E6FF",  # cyan command names
    "experimental-marker": "bold #FFD600",  # amber star
    "description": "#9CA3AF",  # muted gray
    "footnote": "italic #737373",  # dim footer gray
    "version": "bold #22C55E",  # green version line

    # help
    "usage-label": "bold #00E6FF",
    "program-name": "bold #FF4D94",
    "doc": "italic #A3A3A3",
    "option-name": "bold #00E6FF",
    "flag-name": "bold #22C55E",
    "metavar": "bold #FFD600",
    "positional": "bold #FFD600",
    "default": "#737373",
}


def _label(entry):
    return entry.name + ("*" if entry.experimental else "")


def render_listing(listing, /, *, usage=None, version=None, colorful=False):
    """
    Render a Listing (see Registry.listing) grouped by category.

    Entries are padded to `listing.width`; experimental entries carry a
    trailing "*" and a footnote is added when any is shown.
    """
    styler, text = _palette(_STYLES, colorful)
    lines = []

    if usage:
        lines += [text(usage, styler("usage-section")), Text("")]
    lines.append(text("Available commands:", styler("section-label")))

    for category, entries in listing.categories.items():
        lines += [Text(""), text("[%s]" % category, styler("category"))]
        for entry in entries:
            line = Text.assemble("  ", text(entry.name, styler("command-name")))
            if entry.experimental:
                line.append_text(text("*", styler("experimental-marker")))
            if entry.descr:
                line.append(" " * (listing.width - len(_label(entry))) + " - ")
                line.append_text(text(entry.descr, styler("description")))
            lines.append(line)

    if listing.experimental:
        lines += [Text(""), text("* = experimental command", styler("footnote"))]
    if version:
        lines += [Text(""), text(version, styler("version"))]

    return Text("\n").join(lines)


def _option_label(option):
    # long name first, then the short alias, as in "--count -c"
    label = " ".join(sorted(option.names, key=lambda name: not name.startswith("--")))
    if option.metavar and not option.boolean:
        label += " " + option.metavar
    return label


def _option_descr(option):
    descr = str(option.descr or "")
    if (default := option.placeholder or option.default) is not None:
        descr = (descr + " " if descr else "") + "(default: %s)" % default
    return descr


def _positional_label(positional):
    return positional.name + ("..." if positional.arity is Arity.ALL else "")


def render_help(command, /, *, prog=None, version=None, colorful=False):
    """
    Render the help page of one Command.

    - the usage line lists positional names in declaration order;
    - hidden options are omitted, the rest are sorted by name and aligned;
    - defaults display the literal declared string (or the placeholder).
    """
    styler, text = _palette(_STYLES, colorful)

    head = text(command.name, styler("command-name"))
    if command.descr:
        head = Text.assemble(head, " - ", text(command.descr, styler("description")))
    lines = [head]
    if command.doc:
        lines.append(text(command.doc, styler("doc")))

    usage = Text.assemble(text("Usage:", styler("usage-label")), " ")
    if prog:
        usage.append_text(Text.assemble(text(prog, styler("program-name")), " "))
    usage.append_text(Text.assemble(text(command.name, styler("command-name")), " [options]"))
    for positional in command.positionals:
        usage.append_text(Text.assemble(" ", text(_positional_label(positional), styler("positional"))))
    lines += [usage, Text(""), text("Options:", styler("section-label"))]

    rows = sorted(
        ((_option_label(option), _option_descr(option), option) for option in command.options if not option.hidden),
        key=lambda row: row[0].lstrip("-"),
    )
    width = max([4, *(len(label) for label, _, _ in rows)])
    for label, descr, option in rows:
        line = Text.assemble("  ", text(label, styler("flag-name" if option.boolean else "option-name")))
        line.append(" " * (width - len(label)) + " : ")
        line.append_text(text(descr, styler("description")))
        lines.append(line)

    if version:
        lines += [Text(""), text(version, styler("version"))]

    return Text("\n").join(lines)


__all__ = (
    "render_listing",
    "render_help",
)
