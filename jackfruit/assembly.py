"""
Jackfruit command assembler: turn handler descriptions into command schemas.

Input boundary
- Handler: fully-qualified identity, simple name, namespace, return type name,
  ordered parameters, documentation (keyed by parameter name, and by COMMAND_KEY
  for the handler itself), handler-level markers and an optional callback.
- Parameter: name, declared type name, abstract-type flag, parameter markers.

Pipeline (per handler)
1. resolve the handler identity (MissingHandlerIdentityError when absent);
2. seed the command detail from the simple name and return type name;
3. classify every parameter into an initial detail (see jackfruit.classification);
4. merge documentation, then markers (see jackfruit.merging);
5. reject duplicate parameter keys (DuplicateParameterNameError);
6. freeze everything into a CommandSchema.

build() runs the pipeline over many handlers. Each handler is independent: a
failing handler contributes one fault and no schema, the others are unaffected.

Quick example
    >>> schema = assemble(Handler(
    ...     "tools.build", "build", "tools", "None",
    ...     (Parameter("configArg", "str"), Parameter("retries", "int", markers=(required(),))),
    ... ))
    >>> [detail.name for detail in schema.member_details.values()]
    ['Config', 'Retries']
"""
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import NamedTuple

from .classification import seed
from .details import CommandSchema, Detail
from .faults import (
    SchemaException,
    InvalidSchemaInputError,
    DuplicateParameterNameError,
    MissingHandlerIdentityError,
    SchemaExit,
    trigger,
)
from .merging import apply_docs, apply_markers, apply_summary
from .utils import Unset, blank, coalesce

COMMAND_KEY = "__commandKey__"


class Parameter(NamedTuple):
    name: str
    type_name: str | None = None
    abstract: bool = False
    markers: tuple = ()


class Handler(NamedTuple):
    identity: str | None
    name: str
    namespace: str = ""
    returns: str | None = None
    parameters: tuple = ()
    docs: Mapping = MappingProxyType({})
    markers: tuple = ()
    callback: object = Unset


class Build(NamedTuple):
    schemas: tuple
    faults: tuple


def _identify(handler):
    if blank(identity := handler.identity) or not isinstance(identity, str):
        raise MissingHandlerIdentityError(
            f"handler {handler.name!r} cannot be resolved to a stable identifier",
        )
    return identity.strip()


def _check_duplicates(identity, details):
    seen = {}
    for name, detail in details.items():
        if (key := detail.name.casefold()) in seen:
            raise DuplicateParameterNameError(
                f"parameters {seen[key]!r} and {name!r} of {identity!r} both normalize to {detail.name!r}",
                handler=identity,
            )
        seen[key] = name


def _parameters(identity, handler):
    parameters = []
    for parameter in handler.parameters:
        if not isinstance(parameter, Parameter):
            try:
                if isinstance(parameter, str):
                    raise TypeError("parameter record cannot be a bare string")
                parameter = Parameter(*parameter)
            except TypeError:
                raise InvalidSchemaInputError(
                    f"parameter record {parameter!r} of {identity!r} is malformed",
                    handler=identity,
                    hint="describe parameters as (name, type name, abstract flag) tuples",
                ) from None
        if not isinstance(parameter.name, str):
            raise InvalidSchemaInputError(
                f"parameter name {parameter.name!r} of {identity!r} is not a string",
                handler=identity,
            )
        parameters.append(parameter)
    return parameters


def assemble(handler, /, **options):
    """
    Build the CommandSchema of one handler.

    Parameters
    - handler: Handler (or any object with the same fields); parameters may be
      Parameter records or plain (name, type name, abstract flag) tuples.
    - options: suffixes (classification) and fault options (shell, colorful, ...)
      forwarded to marker warnings.

    Raises
    - MissingHandlerIdentityError: the identity is missing or blank.
    - InvalidSchemaInputError: the handler name or a parameter name is not a
      string, is empty or only a suffix, or a parameter record is malformed.
    - DuplicateParameterNameError: two parameters share a key.
    """
    identity = _identify(handler)

    if not isinstance(handler.name, str):
        raise InvalidSchemaInputError(
            f"handler name {handler.name!r} of {identity!r} is not a string",
            handler=identity,
            hint="give every handler a non-empty name",
        )
    command = Detail(identity, handler.name, handler.returns)

    parameters = _parameters(identity, handler)

    details = {}
    for parameter in parameters:
        name = parameter.name
        if name in details:
            raise DuplicateParameterNameError(
                f"parameter {name!r} of {identity!r} is declared twice",
                handler=identity,
            )
        details[name] = seed(
            f"{identity}:{name}",
            name,
            parameter.type_name,
            parameter.abstract,
            **options,
        )

    docs = dict(handler.docs or {})
    apply_summary(command, docs.pop(COMMAND_KEY, None))
    apply_docs(details, docs)

    options = {"handler": identity} | options
    apply_markers(command, handler.markers, **options)
    for parameter in parameters:
        apply_markers(details[parameter.name], parameter.markers, **options)

    _check_duplicates(identity, details)

    return CommandSchema(
        str(coalesce(handler.namespace, "")),
        command,
        details,
        callback=coalesce(handler.callback),
    )


def _attempt(handler, options):
    try:
        return assemble(handler, **options), None
    except SchemaException as fault:
        return None, fault


def build(handlers, /, *, strict=False, workers=None, **options):
    """
    Assemble every handler, isolating failures per handler.

    Parameters
    - handlers: Iterable[Handler].
    - strict: when True and at least one handler failed, trigger SchemaExit with
      every fault (raised outside shell mode, rendered inside it).
    - workers: when set, assemble on a thread pool of that size; results keep the
      input order.
    - options: forwarded to assemble() and trigger().

    Returns
    - Build(schemas, faults): schemas of the handlers that succeeded, faults of
      the ones that did not, both in input order.
    """
    handlers = tuple(handlers)

    if workers:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda handler: _attempt(handler, options), handlers))
    else:
        results = [_attempt(handler, options) for handler in handlers]

    schemas = tuple(schema for schema, _ in results if schema is not None)
    faults = tuple(fault for _, fault in results if fault is not None)

    if strict and faults:
        trigger(SchemaExit(faults), **options)

    return Build(schemas, faults)


__all__ = (
    "COMMAND_KEY",
    "Parameter",
    "Handler",
    "Build",
    "assemble",
    "build",
)
