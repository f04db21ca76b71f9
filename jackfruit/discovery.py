"""
Jackfruit handler discovery: describe plain Python callables as Handlers.

The assembler only consumes plain Handler/Parameter records; this module is the
collaborator that produces them from live functions through `inspect`:

- identity   → "{module}.{qualname}" (None for lambdas and unnamed callables)
- name       → __name__
- namespace  → the defining module (or an explicit override)
- returns    → the return annotation's type name
- parameters → name, annotation type name, abstractness, and the markers found
               in `Annotated[...]` metadata
- docs       → summary and per-parameter text parsed from the docstring
- markers    → handler-level markers attached with @mark(...)

Quick example
    >>> from typing import Annotated
    >>> from jackfruit import mark, description, required
    >>> @mark(description("Build the project"))
    ... def build(configArg: str, retries: Annotated[int, required()] = 3): ...
    >>> schema = assemble(discover(build))
"""
import inspect
import re
import typing

from .assembly import COMMAND_KEY, Handler, Parameter, build
from .merging import Marker
from .utils import Unset, coalesce, rename

_SECTIONS = ("parameters", "params", "args", "arguments")
_ENDINGS = ("returns", "return", "raises", "yields", "examples", "example", "notes", "note")


def _typename(annotation):
    if annotation is inspect.Parameter.empty or annotation is inspect.Signature.empty:
        return None
    if annotation is None or annotation is type(None):
        return "None"
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type) and not typing.get_args(annotation):
        return annotation.__qualname__
    return repr(annotation).removeprefix("typing.")


def _abstract(annotation):
    if not isinstance(annotation, type):
        return False
    return inspect.isabstract(annotation) or getattr(annotation, "_is_protocol", False)


def _unwrap(annotation):
    """
    Split `Annotated[T, *metadata]` into (T, markers found in metadata).
    """
    if typing.get_origin(annotation) is typing.Annotated:
        origin, *metadata = typing.get_args(annotation)
        return origin, tuple(item for item in metadata if isinstance(item, Marker))
    return annotation, ()


def _identity(callback):
    module = getattr(callback, "__module__", None)
    qualname = getattr(callback, "__qualname__", None)
    if not isinstance(qualname, str) or not qualname or "<lambda>" in qualname:
        return None
    return f"{module}.{qualname}" if module else qualname


def parse_docstring(text, /):
    """
    Extract documentation from a docstring.

    Returns a dict with the summary (first paragraph) under COMMAND_KEY and one
    entry per documented parameter. Parameter sections are introduced by a
    "Parameters", "Params", "Args" or "Arguments" line (optionally followed by a
    colon or an underline) and list entries as either

        - name: text
        name (type): text

    Continuation lines are joined to the preceding entry; a blank line or a new
    section header ends the section.
    """
    if not text:
        return {}
    lines = inspect.cleandoc(text).splitlines()

    docs = {}
    summary = []
    for line in lines:
        if not line.strip():
            break
        summary.append(line.strip())
    if summary and summary[0].rstrip(":").lower() not in _SECTIONS:
        docs[COMMAND_KEY] = " ".join(summary)

    current = None
    inside = False
    for line in lines:
        stripped = line.strip()
        if stripped.rstrip(":").lower() in _SECTIONS:
            inside, current = True, None
            continue
        if not inside:
            continue
        if stripped.rstrip(":").lower() in _ENDINGS:
            inside, current = False, None
            continue
        if not stripped:
            if current is not None:
                inside, current = False, None
            continue
        if re.fullmatch(r"[-=~]{3,}", stripped):
            continue
        if match := re.fullmatch(r"(?:-\s*)?\*{0,2}([A-Za-z_]\w*)\*{0,2}(?:\s*\([^)]*\))?\s*:\s*(.*)", stripped):
            current = match.group(1)
            docs[current] = match.group(2).strip()
        elif current is not None:
            docs[current] = f"{docs[current]} {stripped}".strip()
        else:
            inside = False
    return docs


def mark(*markers):
    """
    Attach handler-level markers to a callable (applied after its documentation).

    Example
        @mark(description("Build the project"), aliases("b"))
        def build(...): ...
    """
    for marker in markers:
        if not isinstance(marker, Marker):
            raise TypeError("@mark() arguments must be markers")

    @rename("mark")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@mark() must be applied to a callable")
        callback.__markers__ = tuple(getattr(callback, "__markers__", ())) + markers
        return callback

    return wrapper


def discover(callback, /, *, namespace=Unset):
    """
    Describe a callable as a Handler ready for assemble().

    Parameters
    - callback: Callable whose signature declares the command.
    - namespace: overrides the containing namespace (defaults to the module).

    Raises
    - TypeError: when callback is not callable or has no inspectable signature.
    """
    if not callable(callback):
        raise TypeError("discover() argument must be callable")
    try:
        signature = inspect.signature(callback)
    except ValueError:
        raise TypeError("discover() argument must have an inspectable signature") from None

    try:
        hints = typing.get_type_hints(callback, include_extras=True)
    except (NameError, TypeError):
        hints = {}

    parameters = []
    for name, parameter in signature.parameters.items():
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        annotation, markers = _unwrap(hints.get(name, parameter.annotation))
        parameters.append(Parameter(name, _typename(annotation), _abstract(annotation), markers))

    returns, _ = _unwrap(hints.get("return", signature.return_annotation))

    return Handler(
        identity=_identity(callback),
        name=getattr(callback, "__name__", type(callback).__name__),
        namespace=coalesce(namespace, getattr(callback, "__module__", None) or ""),
        returns=_typename(returns),
        parameters=tuple(parameters),
        docs=parse_docstring(inspect.getdoc(callback)),
        markers=tuple(getattr(callback, "__markers__", ())),
        callback=callback,
    )


def collect(*callbacks, **options):
    """
    Discover and build a set of callables in one call; see build() for options.
    """
    namespace = options.pop("namespace", Unset)
    return build((discover(callback, namespace=namespace) for callback in callbacks), **options)


__all__ = (
    "parse_docstring",
    "mark",
    "discover",
    "collect",
)
