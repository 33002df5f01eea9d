r"""
Argosy option definitions, groups, and the registry that owns them.

Overview
- Definitions (immutable once built)
  • Option: a named switch with one or more aliases (e.g., -f/--file), an arity and a
    required flag.
  • Flag: an Option that takes no value (presence-only), e.g., -v/--verbose.
  • Group: a set of mutually exclusive Options, optionally required.

- Run state (fresh for every resolution)
  • Binding: ordered value accumulator for one Option.
  • Selection: the member of one Group picked during the run.
  • RunState: all bindings and selections plus the outstanding requirements.

- Registry
  • Options: registration (uniqueness of spellings and keys is enforced here),
    exact lookup by spelling or key, group membership, required snapshots, and
    begin() to start a run.

Arity (nargs)
- 0: takes no value.
- 1: exactly one value (default for Option).
- "?": an optional single value.
- int n >= 2: up to n values, at least one.
- "+": unbounded, at least one value.
- "*": unbounded, value optional.

Names and keys
- Spellings must match r"--?[^\W\d_](-?[^\W_]+)*" ("-f", "-file", "--file-name").
- A key is a spelling without its leading dashes ("--file" → "file"). Results and
  fallback defaults address options by key or by spelling.

Quick example:
    >>> from argosy.options import Options, Option, Flag
    >>> options = Options(Option("-f", "--file", required=True), Flag("-v", "--verbose"))
    >>> options.lookup("--file").key
    'f'
    >>> options.lookup("verbose").name
    '-v'
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *

_SPELLING = r"--?[^\W\d_](-?[^\W_]+)*"


class SpecType(type):
    """
    Metaclass for definition types (Option, Flag, Group).

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_<name>" field (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Derive __typename__ from the class name for messages.
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
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(names=('-v', '--verbose'), nargs=0, required=False, descr=None)
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


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate option spellings.

    - at least one spelling is required (TypeError otherwise).
    - each spelling must be a non-empty string after trimming and match the
      shell-style pattern; duplicates are rejected (ValueError).
    - the order is preserved: the first spelling is the primary name.
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(_SPELLING, name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)


def _sanitize_nargs(cls, metadata, /):
    """
    Internal: validate the arity of an option.

    Accepted: int >= 0, "?", "+", "*". Booleans are rejected even though they
    are integers.
    """
    if isinstance(nargs := metadata["nargs"], bool) or not isinstance(nargs, str | int):
        raise TypeError(f"{cls.__typename__} 'nargs' must be a string or an integer")
    if isinstance(nargs, str) and nargs not in ("?", "+", "*"):
        raise ValueError(f"{cls.__typename__} 'nargs' must be one of '?', '+', or '*'")
    if isinstance(nargs, int) and nargs < 0:
        raise ValueError(f"{cls.__typename__} 'nargs' cannot be negative")


def _sanitize_descr(cls, metadata, /):
    """
    Internal: 'descr' is Unset (becomes None) or a non-empty string/Text.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Option(metaclass=SpecType):
    """
    Named option definition.

    An Option never changes after construction; the values bound during a
    resolution live in a Binding owned by that run.

    Properties
    - names: all spellings, primary first.
    - nargs: arity (see module docs).
    - required: whether the run fails when the option never appears.
    - descr: short description for callers that render help.
    """

    __introspectable__ = (
        "names",
        "nargs",
        "required",
        "descr",
    )

    def __new__(cls, *names, nargs=1, required=False, descr=Unset):
        """
        Construct an Option.

        Parameters
        - names: one or more spellings ("-f", "--file", "-file").
        - nargs: 0 | 1 | "?" | int >= 2 | "+" | "*" (defaults to 1).
        - required: bool.
        - descr: Unset | str | Text.
        """
        metadata = {
            "names": names,
            "nargs": nargs,
            "required": bool(required),
            "descr": descr,
        }
        _sanitize_names(cls, metadata)
        _sanitize_nargs(cls, metadata)
        _sanitize_descr(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def name(self):
        """
        The primary spelling (first name given).
        """
        return self._names[0]

    @property
    def keys(self):
        """
        Every spelling without its leading dashes, in declaration order.
        """
        return tuple(dict.fromkeys(name.lstrip("-") for name in self._names))

    @property
    def key(self):
        return self.keys[0]

    @property
    def takes(self):
        """
        Whether the arity allows at least one value.
        """
        return self._nargs != 0

    @property
    def optional(self):
        """
        Whether the option is satisfied without any value.
        """
        return self._nargs in (0, "?", "*")

    @property
    def limit(self):
        """
        Maximum number of values, or None when unbounded.
        """
        match self._nargs:
            case "?":
                return 1
            case "+" | "*":
                return None
            case count:
                return count


class Flag(Option):
    """
    Presence-only option: an Option with nargs=0.
    """

    def __new__(cls, *names, required=False, descr=Unset):
        return super().__new__(cls, *names, nargs=0, required=required, descr=descr)


class Group(metaclass=SpecType):
    """
    Set of mutually exclusive options.

    At most one member may be selected during a run; a required group must have
    exactly one member selected by the end of the run.
    """

    __introspectable__ = (
        "name",
        "options",
        "required",
    )

    def __new__(cls, *options, required=False, name=Unset):
        if not options:
            raise TypeError(f"{cls.__typename__} must contain at least one option")
        members = []
        for option in options:
            if not isinstance(option, Option):
                raise TypeError(f"{cls.__typename__} members must be options")
            if option in members:
                raise ValueError(f"{cls.__typename__} members cannot contain duplicates")
            members.append(option)

        if not isinstance(name, str | Unset):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

        self = super().__new__(cls)
        self._options = tuple(members)
        self._required = bool(required)
        self._name = coalesce(name, " | ".join(option.name for option in members))
        return self

    def __contains__(self, option):
        return option in self._options

    def __str__(self):
        return self._name


class Binding:
    """
    Ordered value accumulator for one option during one run.

    bind() is the only way values enter; it rejects a value when the option
    takes none or its arity is already satisfied.
    """
    __slots__ = ("option", "_values")

    def __init__(self, option, /):
        self.option = option
        self._values = []

    def __repr__(self):
        return f"binding({self.option.name!r}, {tuple(self._values)!r})"

    @property
    def values(self):
        return tuple(self._values)

    @property
    def count(self):
        return len(self._values)

    def accepts(self):
        """
        Whether another value can be bound without exceeding the arity.
        """
        if not self.option.takes:
            return False
        return self.option.limit is None or len(self._values) < self.option.limit

    def bind(self, raw, /):
        if not self.accepts():
            return False
        self._values.append(raw)
        return True

    def clear(self):
        self._values.clear()


class Selection:
    """
    The member of one group picked during one run.
    """
    __slots__ = ("group", "_selected")

    def __init__(self, group, /):
        self.group = group
        self._selected = None

    def __repr__(self):
        return f"selection({self.group.name!r}, {self._selected!r})"

    @property
    def selected(self):
        return self._selected

    def select(self, option, /):
        """
        Select a member; returns False (leaving the selection untouched) when a
        different member is already selected.
        """
        if option not in self.group:
            raise ValueError(f"option {option.name!r} is not a member of group {self.group.name!r}")
        if self._selected is not None and self._selected is not option:
            return False
        self._selected = option
        return True


class RunState:
    """
    Per-run mutable state derived from a registry.

    - bindings: one Binding per registered option.
    - selections: one Selection per registered group.
    - outstanding: required options and groups not yet satisfied, in
      registration order. This is a private copy; satisfying a requirement
      never touches the registry.
    """

    def __init__(self, options, /):
        self.bindings = {option: Binding(option) for option in options}
        self.selections = {group: Selection(group) for group in options.groups}
        self.outstanding = dict.fromkeys((*options.required_options(), *options.required_groups()))

    def binding(self, option, /):
        return self.bindings[option]

    def selection(self, group, /):
        return self.selections[group]

    def satisfy(self, requirement, /):
        self.outstanding.pop(requirement, None)


class Options:
    """
    Registry of option definitions and groups.

    The registry only holds immutable definitions. Everything a resolution
    mutates lives in the RunState returned by begin(), so one registry can
    serve any number of runs, including concurrent ones.
    """

    def __init__(self, *arguments):
        self._spellings = {}
        self._keys = {}
        self._options = []
        self._groups = {}
        for argument in arguments:
            self.add(argument)

    def __repr__(self):
        return "options(%s)" % ", ".join(option.name for option in self._options)

    def __rich_repr__(self):
        yield "options", tuple(self._options)
        yield "groups", self.groups

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __contains__(self, option):
        if isinstance(option, str):
            return self.lookup(option) is not None
        return option in self._options

    @property
    def groups(self):
        return tuple(dict.fromkeys(self._groups.values()))

    def add(self, argument, /):
        """
        Register an Option, or a Group together with its unregistered members.

        Raises
        - TypeError: argument is neither an Option nor a Group.
        - ValueError: a spelling or key is already taken by another option, the
          option is already registered, or it already belongs to a group.
        """
        if isinstance(argument, Group):
            pending = {}
            for option in argument.options:
                if option in self._groups:
                    raise ValueError(f"option {option.name!r} already belongs to a group")
                if option not in self._options:
                    self._check(option, pending)
                    pending.update(dict.fromkeys((*option.names, *option.keys), option))
            for option in argument.options:
                if option not in self._options:
                    self._register(option)
                self._groups[option] = argument
            return argument

        if not isinstance(argument, Option):
            raise TypeError("options can only register options and groups")
        if argument in self._options:
            raise ValueError(f"option {argument.name!r} is already registered")

        self._check(argument)
        return self._register(argument)

    def _check(self, option, pending=None, /):
        # pending: spellings/keys claimed by other members of a group being added
        pending = pending or {}
        for name in option.names:
            if name in self._spellings or name in pending:
                raise ValueError(f"option name {name!r} is already registered")
        for key in option.keys:
            if key in self._keys or key in pending:
                raise ValueError(f"option key {key!r} is already registered")

    def _register(self, option, /):
        self._spellings.update(dict.fromkeys(option.names, option))
        self._keys.update(dict.fromkeys(option.keys, option))
        self._options.append(option)
        return option

    def group(self, *options, required=False, name=Unset):
        """
        Build a Group from the given options and register it.
        """
        return self.add(Group(*options, required=required, name=name))

    def lookup(self, token, /):
        """
        Exact lookup: dashed tokens match spellings, bare tokens match keys.

        No prefix, abbreviation, or fuzzy matching. Returns None when absent.
        """
        if token.startswith("-"):
            return self._spellings.get(token)
        return self._keys.get(token)

    def group_of(self, option, /):
        return self._groups.get(option)

    def required_options(self):
        return tuple(option for option in self._options if option.required)

    def required_groups(self):
        return tuple(group for group in self.groups if group.required)

    def begin(self):
        """
        Start a run: a fresh RunState with empty bindings, no selections, and
        a private copy of the requirements.
        """
        return RunState(self)


__all__ = (
    "Option",
    "Flag",
    "Group",
    "Binding",
    "Selection",
    "RunState",
    "Options",
)

# Not part of the public API.
del SpecType
