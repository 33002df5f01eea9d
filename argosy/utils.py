"""
Argosy utilities shared by options, resolver, and faults.

- Unset / UnsetType: marker for omitted constructor arguments (Option descr,
  Group name); coalesce() turns it into a fallback.
- rename(): names the methods generated for option types.
- mirror(): read-only property over a private "_<name>" field, returning
  frozen containers so definitions stay immutable.
- pluralize(): last-word pluralization for fault labels
  ("required option" → "required options").
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    type of the "argument omitted" marker used by option and group constructors
    (e.g. Option(descr=Unset), Group(name=Unset)).

    one instance per process, falsey, sealed.
    """

    def __or__(self, other, /):
        # lets validators write isinstance(descr, str | Unset)
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    the omitted-argument fallback: default when object is Unset, else object
    (None and other falsey values are kept).
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    name the methods the options metaclass and mirror() generate, so reprs and
    tracebacks show "__repr__" or "names" instead of "getter".

    rename(callable, name) updates in place; rename(name) is the decorator form.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")
        return rename(lambda callable: rename(callable, name), "rename")
    if len(parameters) != 2:
        raise TypeError("rename() takes 1 or 2 arguments (%d given)" % len(parameters))

    callable, name = parameters
    if not builtins.callable(callable) or not isinstance(name, str):
        raise TypeError("rename() expects a callable and a string name")
    try:
        callable.__qualname__ = callable.__name__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() cannot rename %r" % (callable,)) from None
    return callable


def _freeze(object):
    """
    Recursively turn containers into their read-only counterparts.

    - Sequence (non-string) → tuple
    - Mapping → MappingProxyType over a fresh dict
    - Set → frozenset
    - anything else is returned unchanged
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_freeze, object))
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(zip(object.keys(), map(_freeze, object.values()))))
    elif isinstance(object, Set):
        return frozenset(map(_freeze, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance and returns a
    frozen view for container types.

    Example
    - Given self._names, declare names = mirror("names") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Best-effort English pluralizer for internal messages and labels.

    Only the last word of a phrase is pluralized; preceding text and trailing
    whitespace are preserved, as is the basic casing of the pluralized word.

    Examples
    - pluralize("option")           -> "options"
    - pluralize("required option")  -> "required options"
    - pluralize("entry")            -> "entries"
    - pluralize("Switch")           -> "Switches"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    if not text:
        return text

    # Example: "required option  " → head="required ", last="option", trail="  "
    match = re.search(r'(\S+)(\s*)$', text)
    if not match:
        return text

    head = text[:match.start(1)]
    last = match.group(1)
    trail = match.group(2)

    lower = last.lower()

    uncountables = {"series", "species", "information", "equipment", "news"}
    irregulars = {
        "person": "people",
        "child": "children",
        "analysis": "analyses",
        "ellipsis": "ellipses",
        "criterion": "criteria",
    }
    if lower in uncountables:
        plural = lower
    elif lower in irregulars:
        plural = irregulars[lower]
    elif lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    elif lower.endswith("fe") and len(lower) > 2:
        plural = lower[:-2] + "ves"
    elif lower.endswith("f") and len(lower) > 1:
        plural = lower[:-1] + "ves"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
