"""
Argosy faults (resolution errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing failure
  of a resolution run.
- ResolutionError: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Failure kinds
- UnrecognizedOptionError: a dashed token that no registered option spells.
- MissingArgumentValueError: an option whose arity needs a value received none.
- MissingRequiredOptionsError: required options or groups left unsatisfied.
- ConflictingOptionsError: a second member of a mutually exclusive group.

Integration
- The resolver builds the fault and calls trigger(fault, **ctx).
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich
  on stderr and the process exits with status 1.
- Every fault aborts the run; there is no partial result.
"""
import copy
import os.path
import sys
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
    canonical fault codes used by the resolver (stable identifiers).

    grouping
    - tokens (1111x): UNRECOGNIZED_OPTION, MISSING_ARGUMENT_VALUE
    - requirements (1112x): MISSING_REQUIRED_OPTIONS, CONFLICTING_OPTIONS

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- token errors (1111x) ---
    UNRECOGNIZED_OPTION         = 11112
    MISSING_ARGUMENT_VALUE      = 11117

    # --- requirement errors (1112x) ---
    MISSING_REQUIRED_OPTIONS    = 11125
    CONFLICTING_OPTIONS         = 11126

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ResolutionError(Exception):
    """
    base type for every fault raised while resolving a command line.

    options
    - title, code, hint: presentation metadata used by __rich__.
    - shell, fancy, colorful, prog: surfacing options merged in by trigger().
    - any fault-specific context (token, option, names, group, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        prog = getattr(main, "__prog__", self.options.get("prog", os.path.basename(sys.argv[0]) or "argosy"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code.normalize() if code is not None else "?", "code"),
            " | ",
            text(self.options.get("title", "resolution error").title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint", ""), "hint"))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnrecognizedOptionError(ResolutionError): ...
class MissingArgumentValueError(ResolutionError): ...
class MissingRequiredOptionsError(ResolutionError): ...
class ConflictingOptionsError(ResolutionError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ResolutionError).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.

    typical options
    - shell, fancy, colorful, prog, title, code, hint, and any other context the
      reporter may want to show (token, option, names, group).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "ResolutionError",
    "UnrecognizedOptionError",
    "MissingArgumentValueError",
    "MissingRequiredOptionsError",
    "ConflictingOptionsError",
    "FaultCode",
    "trigger",
)
