"""
Jackfruit detail records: the canonical metadata of commands and their members.

Overview
- MemberKind: how a handler parameter reaches the handler (Option, Argument, Service).
- Detail: metadata for one command or one parameter. Every field write goes
  through merge_field() with a per-field predicate (see RULES), so refinement is
  monotonic and independent of how the fields are stored:
  • description       → only non-blank text is written (last non-blank wins)
  • aliases           → always replaced wholesale (an explicit empty list overwrites)
  • kind              → only non-OPTION values are written (never demoted)
  • type_name         → only non-empty text is written
  • arg_display_name  → only non-empty text is written
  • required          → only True is written (never cleared)
- CommandSchema: one command; the command Detail plus the member Details keyed by
  parameter name, scoped to a namespace.

Lifecycle
- A Detail is created once per discovery pass, refined in place by successive
  metadata sources, then frozen when its CommandSchema is assembled. Frozen details
  reject refine() and renaming with AttributeError.

Quick example
    >>> detail = Detail("tools.build:retries", "retries", "int")
    >>> detail.refine(required=True, description="Number of attempts")
    >>> detail.refine(required=False, description="")
    >>> detail.name, detail.required, detail.description
    ('Retries', True, 'Number of attempts')
"""
import functools
import operator
import re
from enum import IntEnum
from types import MappingProxyType

from .faults import InvalidSchemaInputError
from .utils import *


class MemberKind(IntEnum):
    """
    classification of a handler parameter.

    - OPTION: named value parsed from the command line (default).
    - ARGUMENT: positional value parsed from the command line.
    - SERVICE: dependency supplied by the hosting environment, never parsed.
    """
    OPTION = 0
    ARGUMENT = 1
    SERVICE = 2


def capitalize(name, /):
    """
    Upper-case the first character of a user-facing name, leaving the rest untouched.

    Raises
    - InvalidSchemaInputError: when name is not a string or is empty.
    """
    if not isinstance(name, str):
        raise InvalidSchemaInputError(f"name {name!r} is not a string")
    if not name:
        raise InvalidSchemaInputError("name cannot be empty")
    return name[0].upper() + name[1:]


def merge_field(current, incoming, specific, /):
    """
    Return the value a field holds after an incoming write.

    The predicate `specific(incoming)` decides whether the incoming value is
    specific enough to replace the current one; when it is not, the current value
    is kept unchanged.
    """
    return incoming if specific(incoming) else current


def _filled(value):
    return not blank(value)


RULES = MappingProxyType({
    "description": _filled,
    "aliases": lambda value: True,
    "kind": lambda value: value != MemberKind.OPTION,
    "type_name": lambda value: value is not None and value != "",
    "arg_display_name": lambda value: value is not None and value != "",
    "required": lambda value: value is True,
})
"""
per-field merge predicates used by Detail.refine(); see merge_field().
"""


class SchemaType(type):
    """
    Metaclass giving schema records a stable, introspectable surface.

    Responsibilities
    - Expose the names listed in __introspectable__ as read-only properties using
      mirror() (unless the class defines the attribute itself).
    - Provide stable, readable __repr__/__rich_repr__ implementations.
    - Derive __typename__ from the class name (camel-case split with hyphens).
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ()) if name not in namespace
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - detail(id='tools.build:retries', name='Retries', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Detail(metaclass=SchemaType):
    """
    Metadata for one command or one of its parameters.

    Properties
    - id: stable identifier derived from the fully-qualified symbol identity (read-only).
    - name: user-facing name, first character upper-cased (read/write).
    - description, aliases, kind, type_name, arg_display_name, required: refined
      exclusively through refine().
    """

    __introspectable__ = (
        "id",
        "name",
        "description",
        "aliases",
        "kind",
        "type_name",
        "arg_display_name",
        "required",
    )

    def __init__(self, id, name, type_name=None, /):
        if not isinstance(id, str):
            raise TypeError("detail 'id' must be a string")
        self._frozen = False
        self._id = id
        self._name = capitalize(name)
        self._description = ""
        self._aliases = ()
        self._kind = MemberKind.OPTION
        self._type_name = None
        self._arg_display_name = None
        self._required = False
        self.refine(type_name=type_name)

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, value):
        if self._frozen:
            raise AttributeError("detail is frozen")
        self._name = capitalize(value)

    @property
    def frozen(self):
        return self._frozen

    def freeze(self):
        """
        Lock the detail once it is handed downstream. Idempotent.
        """
        self._frozen = True
        return self

    def refine(self, **fields):
        """
        Merge incoming field values into this detail, field by field.

        Each value is offered to merge_field() with the predicate registered for
        its field in RULES; values the predicate rejects leave the field unchanged.

        Raises
        - TypeError: for fields that do not exist or cannot be refined.
        - AttributeError: when the detail is frozen.
        """
        if self._frozen:
            raise AttributeError("detail is frozen")
        for field, incoming in fields.items():
            try:
                specific = RULES[field]
            except KeyError:
                raise TypeError(f"refine() got an unexpected field {field!r}") from None
            if field == "aliases":
                incoming = (incoming,) if isinstance(incoming, str) else tuple(incoming)
            elif field == "kind":
                incoming = MemberKind(incoming)
            setattr(self, "_" + field, merge_field(getattr(self, "_" + field), incoming, specific))


class CommandSchema(metaclass=SchemaType):
    """
    One command: its own Detail plus the Details of its parameters.

    Properties
    - namespace: logical grouping string (the handler's containing namespace).
    - command_detail: Detail of the command itself.
    - member_details: read-only mapping from parameter name to Detail.
    - options / arguments / services: member Details of one kind, declaration order.
    - callback: the original handler when known (dispatch binding), otherwise None.
    """

    __introspectable__ = (
        "namespace",
        "command_detail",
        "member_details",
    )

    def __init__(self, namespace, command_detail, member_details, /, callback=None):
        if not isinstance(namespace, str):
            raise TypeError("command-schema 'namespace' must be a string")
        if not isinstance(command_detail, Detail):
            raise TypeError("command-schema 'command_detail' must be a detail")
        for detail in member_details.values():
            if not isinstance(detail, Detail):
                raise TypeError("command-schema 'member_details' values must be details")
        self._namespace = namespace
        self._command_detail = command_detail.freeze()
        self._member_details = {name: detail.freeze() for name, detail in member_details.items()}
        self._callback = callback

    @property
    def name(self):
        return self._command_detail.name

    @property
    def callback(self):
        return self._callback

    def _members(self, kind):
        return tuple(detail for detail in self._member_details.values() if detail.kind is kind)

    @property
    def options(self):
        return self._members(MemberKind.OPTION)

    @property
    def arguments(self):
        return self._members(MemberKind.ARGUMENT)

    @property
    def services(self):
        return self._members(MemberKind.SERVICE)


__all__ = (
    "MemberKind",
    "Detail",
    "CommandSchema",
    "capitalize",
    "merge_field",
    "RULES",
)

# Remove the internal metaclass from the module namespace; not part of the public API.
del SchemaType
