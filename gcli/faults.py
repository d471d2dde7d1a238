"""
GCLI faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every programmer or
  configuration fault (errors and warnings). Codes are grouped by domain.
- CommandException / CommandWarning: base types that carry message + options
  and know how to render themselves through rich.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

What is not a fault
- Parse outcomes never raise. A bad argument is an ERROR conversion, a partial
  one is INCOMPLETE, a stray word is an unassigned assignment. Faults are for
  broken setups: unknown types, malformed command specs, calling exec() with
  nothing to run.

Integration
- Registries and the requisition build a fault and hand it to the trigger
  callable they were constructed with (System.trigger by default), which adds
  the system's shell/fancy/colorful options.
- Outside shell mode, exceptions are raised and warnings go through the
  warnings module; in shell mode both are rendered on stderr via rich.
"""
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across gcli (stable identifiers).

    grouping (by high-level domain)
    - types (211xx)
      • UNKNOWN_TYPE, MALFORMED_TYPE_SPEC
    - canon (221xx)
      • UNNAMED_COMMAND, MALFORMED_PARAMETERS, UNNAMED_PARAMETER, UNKNOWN_COMMAND
    - requisition and execution (231xx)
      • MISSING_COMMAND, NON_ARRAY_ARGUMENT
    - warnings (29xxx)
      • MISSING_SUBTYPE, IGNORED_DEFAULT, DEFAULT_ROUND_TRIP, PARAMETER_ORDER

    normalize() lets a host remap codes to its own labels.
    """
    # --- type registry errors (21xxx) ---
    UNKNOWN_TYPE                = 21101
    MALFORMED_TYPE_SPEC         = 21102

    # --- canon errors (22xxx) ---
    UNNAMED_COMMAND             = 22101
    MALFORMED_PARAMETERS        = 22102
    UNNAMED_PARAMETER           = 22103
    UNKNOWN_COMMAND             = 22104

    # --- requisition errors (23xxx) ---
    MISSING_COMMAND             = 23101
    NON_ARRAY_ARGUMENT          = 23102

    # --- warnings (29xxx) ---
    MISSING_SUBTYPE             = 29101
    IGNORED_DEFAULT             = 29102
    DEFAULT_ROUND_TRIP          = 29103
    PARAMETER_ORDER             = 29104

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    rich renderable shared by errors and warnings.

    options read from the fault: prog, code, title, hint, colorful, fancy, ratio.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", options.get("prog", "gcli")), styler("prog-name"))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " | ",
        text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options.get("hint"), styler("hint")))

    if fancy:
        width = console.width - 4
        try:
            width = int(width * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    return Group(header, message, hint)


class CommandException(Exception):
    """
    base for gcli errors; carries a message and read-only options.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownTypeError(CommandException): ...
class TypeSpecError(CommandException): ...
class CommandSpecError(CommandException): ...
class ParameterSpecError(CommandException): ...
class UnknownCommandError(CommandException): ...
class MissingCommandError(CommandException): ...
class ArgumentMismatchError(CommandException): ...


class CommandWarning(ABC, Warning):
    """
    base for gcli warnings; rendered like errors, issued through warnings.warn.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingSubtypeWarning(CommandWarning): ...
class IgnoredDefaultWarning(CommandWarning): ...
class DefaultRoundTripWarning(CommandWarning): ...
class ParameterOrderWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are issued.

    typical options
    - prog, shell, fancy, colorful, title, code, hint, docs.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code from __main__.__docs__.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "UnknownTypeError",
    "TypeSpecError",
    "CommandSpecError",
    "ParameterSpecError",
    "UnknownCommandError",
    "MissingCommandError",
    "ArgumentMismatchError",
    "CommandWarning",
    "MissingSubtypeWarning",
    "IgnoredDefaultWarning",
    "DefaultRoundTripWarning",
    "ParameterOrderWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
