"""
Jackfruit classification rules: Option, Argument or Service.

Given a parameter's declared name and type, classify() decides how the parameter
reaches the handler and which name the command line shows for it. The rules are
evaluated in order and the first match wins:

1. the name ends with an argument suffix ("Arg", or "_arg" for snake_case)
   → ARGUMENT, displayed without the suffix;
2. the declared type is abstract (an interface, protocol or abstract class)
   → SERVICE, supplied by the hosting environment;
3. anything else → OPTION.

So `configArg: AbstractConfig` is still an ARGUMENT. Explicit markers applied
later by the merge engine can still move an inferred SERVICE to ARGUMENT, since
kind refinement only refuses demotion back to OPTION.
"""
from .details import Detail, MemberKind, capitalize
from .faults import InvalidSchemaInputError

SUFFIXES = ("Arg", "_arg")


def classify(name, type_name=None, abstract=False, /, *, suffixes=SUFFIXES):
    """
    Return the initial (kind, display name) of a handler parameter.

    Raises
    - InvalidSchemaInputError: when name is not a string, is empty, or is
      nothing but a suffix.
    """
    if not isinstance(name, str):
        raise InvalidSchemaInputError(f"parameter name {name!r} is not a string")
    if not name:
        raise InvalidSchemaInputError("parameter name cannot be empty")

    for suffix in suffixes:
        if suffix and name.endswith(suffix):
            if not (stem := name[:-len(suffix)]):
                raise InvalidSchemaInputError(
                    f"parameter {name!r} is only an argument suffix",
                    hint=f"prefix {suffix!r} with the argument's name",
                )
            return MemberKind.ARGUMENT, capitalize(stem)

    if abstract:
        return MemberKind.SERVICE, capitalize(name)
    return MemberKind.OPTION, capitalize(name)


def seed(id, name, type_name=None, abstract=False, /, **options):
    """
    Build the initial Detail of one parameter from classify().
    """
    kind, display = classify(name, type_name, abstract, suffixes=options.get("suffixes", SUFFIXES))
    detail = Detail(id, name, type_name)
    detail.name = display
    detail.refine(kind=kind)
    return detail


__all__ = (
    "SUFFIXES",
    "classify",
    "seed",
)
