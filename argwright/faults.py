"""
Argwright faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the engine
  raises. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ArgException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- DefinitionError: build/validate-time faults (fatal, never retried).
- ParseError and its subclasses: per-call faults raised while matching tokens.
- DelegatedActionError: a handler exception converted into a reported failure.
- report(): print any fault to stderr through a rich console.

Options carried by faults
- title, code, hint: always present for engine-raised faults.
- alias, argument, action, type, token, suggestions, exception: present when
  the fault concerns that element, so callers can name the offender.

Integration
- The engine raises faults. Under the "report" behavior policy it hands them to
  report() instead, with the behavior's fancy/colorful flags merged in.
"""
import copy
import logging
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

logger = logging.getLogger(__name__)

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - definition (211xx)
      • DUPLICATE_ALIAS, MISSING_ALIAS, MISSING_DELEGATE, UNREVIVABLE_TYPE,
        ENUM_SHORTCUT_COLLISION, MALFORMED_SCAFFOLD
    - action selection (221xx)
      • UNKNOWN_ACTION, MISSING_ACTION
    - argument matching (222xx)
      • UNKNOWN_ARGUMENT, DUPLICATE_ARGUMENT, MISSING_VALUE, UNEXPECTED_ARGUMENT
    - revival (223xx)
      • REVIVAL_FAILED
    - requirements (224xx)
      • MISSING_ARGUMENT
    - delegated (231xx)
      • DELEGATED_ERROR
    """
    # --- definition errors (21xxx) ---
    DUPLICATE_ALIAS             = 21101
    MISSING_ALIAS               = 21102
    MISSING_DELEGATE            = 21103
    UNREVIVABLE_TYPE            = 21104
    ENUM_SHORTCUT_COLLISION     = 21105
    MALFORMED_SCAFFOLD          = 21106

    # --- action selection errors (22xxx) ---
    UNKNOWN_ACTION              = 22101
    MISSING_ACTION              = 22102

    # --- argument matching errors (22xxx) ---
    UNKNOWN_ARGUMENT            = 22201
    DUPLICATE_ARGUMENT          = 22202
    MISSING_VALUE               = 22203
    UNEXPECTED_ARGUMENT         = 22204

    # --- revival errors (22xxx) ---
    REVIVAL_FAILED              = 22301

    # --- requirement errors (22xxx) ---
    MISSING_ARGUMENT            = 22401

    # --- delegated errors (23xxx) ---
    DELEGATED_ERROR             = 23101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgException(Exception):
    """
    base fault: a message plus a read-only mapping of options.

    str(fault) is the message; fault.options names the offending element
    (alias, argument, action, type, token) when there is one.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

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

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options.get("code")
        prog = text(getattr(main, "__prog__", self.options.get("prog", "argwright")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
            " | ",
            text(str(self.options.get("title", type(self).__name__)).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        replica.__traceback__ = self.__traceback__
        return replica


class DefinitionError(ArgException): ...


class ParseError(ArgException): ...


class UnknownActionError(ParseError): ...
class UnknownArgumentError(ParseError): ...
class DuplicateArgumentError(ParseError): ...
class MissingValueError(ParseError): ...
class UnexpectedArgumentError(ParseError): ...
class RevivalError(ParseError): ...
class MissingArgumentError(ParseError): ...


class DelegatedActionError(ArgException): ...


def report(fault, /, **options):
    """
    render a fault to stderr with the given runtime options.

    contract
    - fault must be an ArgException; options are merged into it via
      copy.replace() before printing (typically fancy/colorful/prog).
    - the fault is also logged at ERROR level; nothing is raised.

    returns
    - the merged fault, so callers can keep the rendered copy.
    """
    if not isinstance(fault, ArgException):
        raise TypeError("report() argument must be an argument exception")
    fault = copy.replace(fault, **options)
    logger.error("%s: %s", type(fault).__name__, fault.message or "")
    console.print(fault)
    return fault


__all__ = (
    "FaultCode",
    "ArgException",
    "DefinitionError",
    "ParseError",
    "UnknownActionError",
    "UnknownArgumentError",
    "DuplicateArgumentError",
    "MissingValueError",
    "UnexpectedArgumentError",
    "RevivalError",
    "MissingArgumentError",
    "DelegatedActionError",
    "report",
)
