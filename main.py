from rich.pretty import pprint

from helmsman import *

__prog__ = "demo"

registry = Registry(usage="usage: demo <command> [options] [args]", version="demo 0.0.0", shell=True, colorful=True)
settings = {}


@option("--count", "-c", type=ValueType.INTEGER, default="1", descr="how many times")
def set_count(count):
    settings["count"] = count


@option("-v", type=ValueType.BOOLEAN, descr="print the settings first")
def set_verbose(verbose):
    settings["verbose"] = verbose


@positional("WORDS", arity=Arity.ALL, required=True)
def set_words(words):
    settings["words"] = words


@registry.command(options=[set_count, set_verbose], positionals=[set_words])
def echo():
    """Print words back."""
    if settings.get("verbose"):
        pprint(settings)
    if settings["count"] < 1:
        raise CommandArgumentError("--count must be positive", hint="use --count 1 or more")
    for _ in range(settings["count"]):
        print(" ".join(settings["words"]))


@registry.command(category="Maintenance", experimental=True)
def sweep():
    """Remove temporary files."""
    return 0


if __name__ == '__main__':
    registry.run()
