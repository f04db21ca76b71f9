"""
Jackfruit faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every schema-building
  issue (errors and warnings), grouped by domain.
- SchemaException / SchemaWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- SchemaExit: groups the faults of a strict build into one exception.
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).

Integration
- Schema-building code raises faults directly; build() collects them per handler
  so one malformed handler never aborts the others.
- In non-shell mode, exceptions are raised and warnings go through `warnings`;
  in shell mode, both are rendered on stderr via rich.
"""
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
    canonical fault codes used across the schema builder (stable identifiers).

    grouping (by high-level domain)
    - input errors (2110x)
      • INVALID_SCHEMA_INPUT, DUPLICATE_PARAMETER_NAME, MISSING_HANDLER_IDENTITY
    - warnings (2210x)
      • UNRECOGNIZED_MARKER
    """
    # --- input errors (21xxx) ---
    INVALID_SCHEMA_INPUT        = 21101
    DUPLICATE_PARAMETER_NAME    = 21102
    MISSING_HANDLER_IDENTITY    = 21103

    # --- warnings (22xxx) ---
    UNRECOGNIZED_MARKER         = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_defaults = {
    "shell": False,
    "fancy": False,
    "colorful": True,
    "deferred": False,
}


def _styler(options, styles):
    def styler(style):
        return styles[style] if options["colorful"] else ""
    return styler


def _text(options):
    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not options["colorful"]:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)
    return text


class _Fault:
    """
    shared construction, rendering and replacement for errors and warnings.

    subclasses declare the class-level defaults `code`, `title` and `hint`;
    instance options override them.
    """
    code = Unset
    title = Unset
    hint = Unset
    palette = {}

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(_defaults | {
            "code": type(self).code,
            "title": type(self).title,
            "hint": type(self).hint,
        } | options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")
        styles = defaultdict(str, type(self).palette | getattr(main, "__styles__", {}))
        styler = _styler(self.options, styles)
        text = _text(self.options)

        width = console.width - 4 * self.options["fancy"]

        prog = text(getattr(main, "__prog__", self.options.get("handler", "jackfruit")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize() if self.options["code"] else "", styler("code")),
            " | ",
            text(str(self.options["title"] or "").title(), styler("title")),
            " ]"
        )
        message = text(str(self), styler("message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint")))

        if self.options["fancy"]:
            try:
                width = int(width * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(message, hint), title=header, title_align="left", width=width)

        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SchemaException(_Fault, Exception):
    palette = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white handler name
        "code": "bold #00E5FF",  # neon cyan fault code
        "title": "bold #FF4DA6",  # friendly pinky title

        # body
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    }

    def __init__(self, message=Unset, /, **options):
        _Fault.__init__(self, message, **options)
        Exception.__init__(self, str(self))

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            raise self from None
        console.print(self)
        if self.options["deferred"]:
            return
        sys.exit(1)


class InvalidSchemaInputError(SchemaException):
    code = FaultCode.INVALID_SCHEMA_INPUT
    title = "invalid schema input"
    hint = "give every handler parameter a non-empty name"


class DuplicateParameterNameError(SchemaException):
    code = FaultCode.DUPLICATE_PARAMETER_NAME
    title = "duplicate parameter name"
    hint = "rename one of the parameters so their command-line names differ"


class MissingHandlerIdentityError(SchemaException):
    code = FaultCode.MISSING_HANDLER_IDENTITY
    title = "missing handler identity"
    hint = "use a named, module-level function or method as the handler"


class SchemaWarning(_Fault, ABC, Warning):
    palette = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white handler name
        "code": "bold #FFB400",  # amber fault code for warnings
        "title": "bold #FFC2E0",  # softer pinky title for warnings

        # body
        "message": "#D6D6DE",  # slightly lighter gray body
        "hint-arrow": "#B8EFAF dim",  # softer green arrow
        "hint": "italic #B8EFAF",  # softer green hint text
    }

    def __init__(self, message=Unset, /, **options):
        _Fault.__init__(self, message, **options)
        Warning.__init__(self, str(self))

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            return warnings.warn(self, stacklevel=4)
        console.print(self)


class UnrecognizedMarkerWarning(SchemaWarning):
    code = FaultCode.UNRECOGNIZED_MARKER
    title = "unrecognized marker"
    hint = "the marker was ignored; check its kind for typos"


class SchemaExit(ExceptionGroup[SchemaException]):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad schema", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad schema", tuple(exceptions))
        self.options = MappingProxyType(_defaults | options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Schema)
        } | getattr(main, "__styles__", {}))
        styler = _styler(self.options, styles)
        text = _text(self.options)

        prog = text(getattr(main, "__prog__", "jackfruit"), styler("prog-name"))

        header = Text.assemble("[ ", prog, " — ", text(self.message.title(), styler("title")), " ]")

        renders = []

        for exception in self.exceptions:
            renders.append(exception.__replace__(ratio=2/3, colorful=self.options["colorful"]))

        if self.options["fancy"]:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            raise self from None
        console.print(self)
        if self.options["deferred"]:
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are issued through the warnings module.

    typical options
    - handler, shell, fancy, colorful, deferred, title, code, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "SchemaException",
    "InvalidSchemaInputError",
    "DuplicateParameterNameError",
    "MissingHandlerIdentityError",
    "SchemaWarning",
    "UnrecognizedMarkerWarning",
    "SchemaExit",
    "FaultCode",
    "trigger",
)
