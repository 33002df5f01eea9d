"""
Argosy resolver: turn a flat token sequence into a queryable command line.

What this module provides
- resolve(options, arguments, defaults=None, *, stop=False, flatten=basic, ...):
  one resolution run against a registry.
- Resolver: the same run bundled with its configuration (flattener, stop mode,
  surfacing options), reusable for any number of invocations.
- Resolution: the per-run state machine (cursor, run state, in-progress result).
- CommandLine / Occurrence: the immutable result.

Token policy (in order, from the cursor)
- '--': dropped; every later token is positional (literal '--' tokens skipped).
- '-': positional (the usual “read from standard input” convention).
- dashed token: looked up by exact spelling.
  • unknown: in stop mode it and every later token become positional;
    otherwise UnrecognizedOptionError.
  • known: satisfies its requirement, selects its group member, binds the
    following tokens as values until the input ends, the next token is a
    registered spelling, or the arity is satisfied; matching surrounding quotes
    are stripped. A value-taking option that bound nothing and whose arity is
    not optional fails with MissingArgumentValueError.
- plain token: positional; in stop mode the run ends there and the remaining
  tokens are kept as CommandLine.unconsumed.

After the tokens
- defaults (name → raw string) fill in options the tokens did not mention:
  value-taking options get the raw value, no-value options are recorded only
  for 'yes', 'true' or '1' (case-insensitive). Unknown names, rejected values,
  and conflicting group members are skipped, never failed. Defaults never
  satisfy a required option or group.
- outstanding required options/groups fail with MissingRequiredOptionsError.

Every fault aborts the run; no partial command line is returned.

Quick start
    from argosy import Options, Option, Flag, resolve

    options = Options(Option("-o", "--output", required=True), Flag("-v", "--verbose"))
    line = resolve(options, ["-v", "--output", "out.txt", "input.txt"])
    line.value("output")   # 'out.txt'
    line.has("verbose")    # True
    line.arguments         # ('input.txt',)
"""
import logging
import shlex
from collections.abc import Mapping
from typing import NamedTuple

from .faults import *
from .flatteners import basic
from .options import Option, Options
from .utils import pluralize

logger = logging.getLogger(__name__)

TERMINATOR = "--"
STDIN = "-"
TRUTHY = frozenset({"yes", "true", "1"})


class Occurrence(NamedTuple):
    """
    one recorded option: the definition and its values at that point of the run.
    """
    option: Option
    values: tuple[str, ...]


class CommandLine:
    """
    Immutable result of one resolution run.

    - occurrences: Occurrence records in encounter order (defaults last).
    - arguments: positional arguments in encounter order.
    - unconsumed: tokens left untouched when the run stopped at a positional
      in stop mode.

    Options are addressed by spelling ("--output"), key ("output"), or the
    Option itself.
    """

    def __init__(self, occurrences=(), arguments=(), unconsumed=(), /):
        self._occurrences = tuple(Occurrence(option, tuple(values)) for option, values in occurrences)
        self._arguments = tuple(arguments)
        self._unconsumed = tuple(unconsumed)

    @property
    def occurrences(self):
        return self._occurrences

    @property
    def arguments(self):
        return self._arguments

    @property
    def unconsumed(self):
        return self._unconsumed

    @property
    def options(self):
        """
        distinct options present, in first-encounter order.
        """
        return tuple(dict.fromkeys(occurrence.option for occurrence in self._occurrences))

    def _find(self, name):
        for occurrence in reversed(self._occurrences):
            option = occurrence.option
            if name is option or name in option.names or name in option.keys:
                return occurrence
        return None

    def has(self, name, /):
        return self._find(name) is not None

    def values(self, name, /):
        """
        every value bound to the option during the run (empty when absent).
        """
        if (occurrence := self._find(name)) is None:
            return ()
        return occurrence.values

    def value(self, name, /, default=None):
        """
        first value bound to the option, or default.
        """
        values = self.values(name)
        return values[0] if values else default

    def __contains__(self, name):
        return self.has(name)

    def __eq__(self, other):
        if not isinstance(other, CommandLine):
            return NotImplemented
        return (
            self._occurrences == other._occurrences and
            self._arguments == other._arguments and
            self._unconsumed == other._unconsumed
        )

    __hash__ = None

    def __repr__(self):
        return "command-line(occurrences=%r, arguments=%r, unconsumed=%r)" % (
            tuple((occurrence.option.name, occurrence.values) for occurrence in self._occurrences),
            self._arguments,
            self._unconsumed,
        )

    def __rich_repr__(self):
        yield "occurrences", self._occurrences
        yield "arguments", self._arguments
        yield "unconsumed", self._unconsumed


def _unquote(token):
    """
    strip one pair of matching surrounding quotes ('"x"' or "'x'").
    """
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "\"'":
        return token[1:-1]
    return token


class Resolution:
    """
    Per-run state machine (single use).

    state
    - tokens / cursor: the flat token sequence and an index into it; peek()
      looks ahead without consuming, so no token is ever pushed back.
    - state: the RunState from options.begin() (bindings, selections, and the
      outstanding requirements).
    - occurrences / arguments / unconsumed: the in-progress result, frozen
      into a CommandLine by run().
    """

    def __init__(self, options, tokens, /, *, stop=False, **surfacing):
        self.options = options
        self.tokens = tuple(tokens)
        self.stop = stop
        self._surfacing = surfacing
        self._cursor = 0
        self._state = options.begin()
        self._occurrences = []
        self._arguments = []
        self._unconsumed = []
        self._done = False

    def trigger(self, fault, /):
        # never returns: raises, or exits in shell mode
        trigger(fault, **self._surfacing)

    def peek(self):
        """
        the token under the cursor, or None at the end of input.
        """
        if self._cursor < len(self.tokens):
            return self.tokens[self._cursor]
        return None

    def _advance(self):
        token = self.tokens[self._cursor]
        self._cursor += 1
        return token

    def run(self, defaults=None):
        """
        resolve every token, merge defaults, check requirements, and return
        the frozen CommandLine.
        """
        if self._done:
            raise RuntimeError("a resolution can only run once")
        self._done = True

        self._consume()
        if defaults:
            self._merge(defaults)
        self._check()

        return CommandLine(self._occurrences, self._arguments, self._unconsumed)

    def _consume(self):
        eat = False

        while (token := self.peek()) is not None:
            self._advance()

            if token == TERMINATOR:
                eat = True
                break

            if token == STDIN:
                self._arguments.append(token)
                continue

            if token.startswith("-"):
                if (option := self.options.lookup(token)) is None:
                    if self.stop:
                        self._arguments.append(token)
                        eat = True
                        break
                    self.trigger(UnrecognizedOptionError(
                        "unrecognized option %r" % token,
                        title="unrecognized option",
                        code=FaultCode.UNRECOGNIZED_OPTION,
                        hint="check the spelling, or pass '--' before arguments that start with '-'",
                        token=token,
                    ))
                self._process(option)
                continue

            self._arguments.append(token)
            if self.stop:
                self._unconsumed.extend(self.tokens[self._cursor:])
                self._cursor = len(self.tokens)
                return

        if eat:
            # the rest is positional; literal terminators are not arguments
            self._arguments.extend(token for token in self.tokens[self._cursor:] if token != TERMINATOR)
            self._cursor = len(self.tokens)

    def _select(self, option):
        """
        select the option within its group.

        returns False when another member of the group is already selected.
        """
        group = self.options.group_of(option)
        return group is None or self._state.selection(group).select(option)

    def _satisfy(self, option):
        group = self.options.group_of(option)
        if option.required:
            self._state.satisfy(option)
        if group is not None and group.required:
            self._state.satisfy(group)

    def _process(self, option):
        if not self._select(option):
            group = self.options.group_of(option)
            selected = self._state.selection(group).selected
            self.trigger(ConflictingOptionsError(
                "option %r conflicts with %r (group %s)" % (option.name, selected.name, group.name),
                title="conflicting options",
                code=FaultCode.CONFLICTING_OPTIONS,
                hint="pass only one of %s" % group.name,
                option=option,
                selected=selected,
                group=group,
            ))
        self._satisfy(option)

        binding = self._state.binding(option)

        if option.takes:
            while (token := self.peek()) is not None:
                if token.startswith("-") and self.options.lookup(token) is not None:
                    break
                if not binding.accepts():
                    logger.debug("option %r is satisfied; %r is left for the next step", option.name, token)
                    break
                binding.bind(_unquote(token))
                self._advance()

            if not binding.count and not option.optional:
                self.trigger(MissingArgumentValueError(
                    "missing argument for option %r" % option.name,
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT_VALUE,
                    hint="pass a value after %s" % option.name,
                    option=option,
                ))

        self._occurrences.append(Occurrence(option, binding.values))

    def _merge(self, defaults):
        if not isinstance(defaults, Mapping):
            raise TypeError("defaults must be a mapping of option names to values")

        present = {occurrence.option for occurrence in self._occurrences}

        for name, value in defaults.items():
            if (option := self.options.lookup(name)) is None:
                logger.debug("default for unknown option %r skipped", name)
                continue
            if option in present:
                continue

            if not option.takes and str(value).lower() not in TRUTHY:
                logger.debug("default %r for flag %r is not truthy; skipped", value, option.name)
                continue

            if not self._select(option):
                logger.debug("default for %r conflicts with its group selection; skipped", option.name)
                continue

            # defaults never clear requirements; only tokens do
            binding = self._state.binding(option)
            if option.takes and not binding.count and not binding.bind(value):
                logger.debug("default %r rejected by option %r", value, option.name)

            present.add(option)
            self._occurrences.append(Occurrence(option, binding.values))

    def _check(self):
        if not (outstanding := self._state.outstanding):
            return

        names = tuple(str(requirement.name) for requirement in outstanding)
        label = "required option" if len(names) == 1 else pluralize("required option")
        self.trigger(MissingRequiredOptionsError(
            "missing %s: %s" % (label, ", ".join(names)),
            title="missing %s" % label,
            code=FaultCode.MISSING_REQUIRED_OPTIONS,
            hint="pass %s" % " and ".join(names),
            names=names,
        ))


def resolve(options, arguments, /, defaults=None, *, stop=False, flatten=basic, shell=False, colorful=True, fancy=False):
    """
    resolve arguments against a registry.

    parameters
    - options: Options
      the registry; it is only read, never mutated.
    - arguments: Iterable[str] | str | None
      raw tokens; a string is split shell-style, None means no tokens.
    - defaults: Mapping[str, str] | None
      fallback values by option name (key or spelling), in the mapping's order.
    - stop: bool
      stop treating tokens as options at the first positional.
    - flatten: (options, arguments, stop) -> list[str]
      flattening strategy (see argosy.flatteners).
    - shell, colorful, fancy: bool
      surfacing options: outside shell mode faults are raised; in shell mode
      they are printed to stderr and the process exits with status 1.

    returns
    - CommandLine

    raises
    - UnrecognizedOptionError, MissingArgumentValueError,
      MissingRequiredOptionsError, ConflictingOptionsError.
    """
    if not isinstance(options, Options):
        raise TypeError("resolve() first argument must be an options registry")

    if arguments is None:
        tokens = []
    else:
        if isinstance(arguments, str):
            arguments = shlex.split(arguments)
        tokens = flatten(options, list(arguments), stop)

    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("resolve() tokens must be strings")

    return Resolution(
        options,
        tokens,
        stop=stop,
        shell=shell,
        colorful=colorful,
        fancy=fancy,
    ).run(defaults)


class Resolver:
    """
    A registry bundled with its resolution settings.

    Example
        resolver = Resolver(options, flatten=posix, stop=True)
        line = resolver(["-vf", "out.txt", "input.txt"])
    """

    def __init__(self, options, /, *, flatten=basic, stop=False, shell=False, colorful=True, fancy=False):
        if not isinstance(options, Options):
            raise TypeError("Resolver() first argument must be an options registry")
        if not callable(flatten):
            raise TypeError("Resolver() 'flatten' must be callable")
        self.options = options
        self.flatten = flatten
        self.stop = bool(stop)
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)

    def __repr__(self):
        return "resolver(options=%r, flatten=%s, stop=%r)" % (self.options, self.flatten.__name__, self.stop)

    def __call__(self, arguments, /, defaults=None):
        return resolve(
            self.options,
            arguments,
            defaults,
            stop=self.stop,
            flatten=self.flatten,
            shell=self.shell,
            colorful=self.colorful,
            fancy=self.fancy,
        )


__all__ = (
    "Occurrence",
    "CommandLine",
    "Resolution",
    "Resolver",
    "resolve",
)
