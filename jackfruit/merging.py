"""
Jackfruit merge engine: layer documentation and declarative markers onto details.

Sources
- Documentation: free text keyed by parameter name (apply_docs) and the handler's
  own summary (apply_summary). Text is trimmed; blank text never overwrites.
- Markers: declarative annotations (Marker(kind, values)) attached to a handler
  or to one of its parameters (apply_markers).

Recognized marker kinds (a trailing "Attribute" is accepted and ignored)
- Description          → description := values[0]
- Aliases              → aliases := values (zero values still overwrite)
- Argument             → kind := ARGUMENT (presence-only)
- OptionArgumentName   → arg_display_name := values[0]
- Required             → required := True (presence-only)

Unknown kinds are not errors: each emits an UnrecognizedMarkerWarning through
trigger() and is skipped. Hosts may register extra spellings through a
`__markers__` mapping in __main__, e.g. `__markers__ = {"Desc": "Description"}`.

All writes go through Detail.refine(), so the per-field rules hold whatever the
order of the sources. Within one handler the assembler applies documentation
first and markers second.
"""
from collections.abc import Mapping
from typing import NamedTuple

from .details import Detail, MemberKind
from .faults import UnrecognizedMarkerWarning, trigger


class Marker(NamedTuple):
    kind: str
    values: tuple = ()


def description(text, /):
    return Marker("Description", (text,))


def aliases(*names):
    return Marker("Aliases", names)


def argument():
    return Marker("Argument")


def metavar(name, /):
    return Marker("OptionArgumentName", (name,))


def required():
    return Marker("Required")


def _first(values):
    value = next(iter(values), None)
    return "" if value is None else str(value)


def _description(detail, values):
    detail.refine(description=_first(values))


def _aliases(detail, values):
    detail.refine(aliases=tuple("" if value is None else str(value) for value in values))


def _argument(detail, values):
    detail.refine(kind=MemberKind.ARGUMENT)


def _metavar(detail, values):
    detail.refine(arg_display_name=_first(values))


def _required(detail, values):
    detail.refine(required=True)


HANDLERS = {
    "Description": _description,
    "Aliases": _aliases,
    "Argument": _argument,
    "OptionArgumentName": _metavar,
    "Required": _required,
}


def resolve(kind, /):
    """
    Return the canonical marker kind for `kind`, or None when it is not recognized.

    Lookup order: host `__markers__` aliases, then the built-in kinds, each tried
    with and without a trailing "Attribute".
    """
    if not isinstance(kind, str):
        return None
    host = getattr(__import__("__main__"), "__markers__", {})
    for candidate in (kind, kind.removesuffix("Attribute")):
        candidate = host.get(candidate, candidate)
        if candidate in HANDLERS:
            return candidate
    return None


def apply_markers(detail, markers, /, **options):
    """
    Apply markers to one detail, in order.

    Parameters
    - detail: Detail to refine.
    - markers: Iterable[Marker] (any (kind, values) pair is accepted).
    - options: forwarded to trigger() for unrecognized markers (shell, colorful, ...).
    """
    if not isinstance(detail, Detail):
        raise TypeError("apply_markers() first argument must be a detail")
    for kind, values in markers:
        if (canonical := resolve(kind)) is None:
            trigger(
                UnrecognizedMarkerWarning(f"marker {kind!r} on {detail.name!r} is not recognized"),
                **{"handler": detail.id} | options,
            )
            continue
        if isinstance(values, str):
            values = (values,)
        HANDLERS[canonical](detail, tuple(values or ()))
    return detail


def apply_summary(detail, text, /):
    """
    Set the command description from the handler's own documentation.
    """
    if isinstance(text, str):
        detail.refine(description=text.strip())
    return detail


def apply_docs(details, docs, /):
    """
    Set member descriptions from documentation keyed by parameter name.

    Keys without a matching detail are ignored.
    """
    if not isinstance(docs, Mapping):
        raise TypeError("apply_docs() second argument must be a mapping")
    for name, text in docs.items():
        if (detail := details.get(name)) is not None and isinstance(text, str):
            detail.refine(description=text.strip())
    return details


__all__ = (
    "Marker",
    "description",
    "aliases",
    "argument",
    "metavar",
    "required",
    "resolve",
    "apply_markers",
    "apply_summary",
    "apply_docs",
)
