"""
Argwright revivability registry.

Overview
- A reviver is a pure callable `(token, type) -> value` that turns one raw
  command-line token into a typed value.
- Registry maps types to revivers. Lookups follow, in order:
  • an exact registration for the type,
  • generic forms (T | None, list[T], tuple[T, ...], set[T], frozenset[T]),
  • enums (member name, `__shortcuts__` alias, or member value),
  • classes exposing a `__revive__(token)` hook,
  • a registration for one of the type's bases (nearest first).

- can_revive(type) answers without side effects and is what the validator uses.
- revive(token, type) is what the engine uses; malformed input raises
  RevivalError naming the type and, when given, the argument.

Custom rules
- Register before building any definition that references the type:
    >>> from argwright.revivers import register
    >>> @register(Point)
    ... def revive_point(token, type):
    ...     return type(*map(int, token.split(",")))
"""
import builtins
import datetime
import decimal
import enum
import fractions
import functools
import pathlib
import types
import typing
import uuid

from .faults import FaultCode, RevivalError
from .utils import Unset, casefold

_TRUTHS = frozenset({"true", "t", "yes", "y", "on", "1"})
_FALSEHOODS = frozenset({"false", "f", "no", "n", "off", "0"})


def _revive_bool(token, type, /):
    if (token := token.strip().casefold()) in _TRUTHS:
        return True
    if token in _FALSEHOODS:
        return False
    raise ValueError("not a boolean literal")


def _revive_str(token, type, /):
    return token


def _revive_constructor(token, type, /):
    return type(token)


def _revive_iso(token, type, /):
    return type.fromisoformat(token)


def is_boolean_literal(token, /):
    """
    Return whether a token spells a boolean (used to decide if a switch consumes it).
    """
    return isinstance(token, str) and token.strip().casefold() in _TRUTHS | _FALSEHOODS


def shortcuts(type, /):
    """
    Return the enum's label mapping {label: member}: member names plus any
    aliases declared in a `__shortcuts__` mapping on the enum class.
    """
    labels = [(name, member) for name, member in type.__members__.items()]
    declared = getattr(type, "__shortcuts__", {})
    for name, aliases in declared.items():
        member = type[name]
        for alias in ((aliases,) if isinstance(aliases, str) else aliases):
            labels.append((alias, member))
    return labels


def _revive_enum(token, type, /):
    labels = shortcuts(type)
    for label, member in labels:
        if label == token:
            return member
    folded = [member for label, member in labels if label.casefold() == token.casefold()]
    if len(set(folded)) == 1:
        return folded[0]
    try:
        return type(token)
    except ValueError:
        pass
    try:
        return type(int(token))
    except ValueError:
        raise ValueError("%r is not one of %s" % (token, ", ".join(map(repr, type.__members__)))) from None


def _revive_hook(token, type, /):
    return type.__revive__(token)


def _split(token, /):
    return [item.strip() for item in token.split(",")] if token.strip() else []


class Registry:
    """
    Type-keyed table of revivers.

    Methods
    - register(type, reviver) / @register(type): add or replace a rule.
    - resolve(type): the reviver callable for type, or None.
    - can_revive(type): bool, no side effects.
    - revive(token, type, *, argument=Unset): converted value or RevivalError.
    """

    def __init__(self):
        self._revivers = {}

    def register(self, type, reviver=Unset, /):
        if not isinstance(type, typing.Hashable):
            raise TypeError("register() first argument must be a hashable type")
        if reviver is Unset:
            def wrapper(reviver, /):
                self.register(type, reviver)
                return reviver
            return wrapper
        if not callable(reviver):
            raise TypeError("register() reviver must be callable")
        self._revivers[type] = reviver
        return reviver

    def unregister(self, type, /):
        return self._revivers.pop(type, None)

    def resolve(self, type, /):
        if type is None or type is typing.Any:
            return None

        try:
            return self._revivers[type]
        except (KeyError, TypeError):
            pass

        origin = typing.get_origin(type)
        arguments = typing.get_args(type)

        # T | None and Optional[T]
        if origin in (typing.Union, types.UnionType):
            members = [member for member in arguments if member is not types.NoneType]
            if len(members) != 1 or (inner := self.resolve(members[0])) is None:
                return None
            return functools.partial(_revive_inner, inner, members[0])

        # list[T], set[T], frozenset[T], tuple[T, ...]
        if origin in (list, set, frozenset) and len(arguments) == 1:
            if (inner := self.resolve(arguments[0])) is None:
                return None
            return functools.partial(_revive_collection, origin, inner, arguments[0])
        if origin is tuple and len(arguments) == 2 and arguments[1] is Ellipsis:
            if (inner := self.resolve(arguments[0])) is None:
                return None
            return functools.partial(_revive_collection, tuple, inner, arguments[0])

        if isinstance(type, builtins.type) and not isinstance(type, types.GenericAlias):
            if issubclass(type, enum.Enum):
                return _revive_enum
            if callable(getattr(type, "__revive__", None)):
                return _revive_hook
            for base in type.__mro__[1:]:
                if base is object:
                    break
                if (reviver := self._revivers.get(base)) is not None:
                    return reviver
        return None

    def can_revive(self, type, /):
        return self.resolve(type) is not None

    def revive(self, token, type, /, *, argument=Unset, reviver=Unset):
        if not isinstance(token, str):
            raise TypeError("revive() first argument must be a string")
        if reviver is Unset and (reviver := self.resolve(type)) is None:
            raise RevivalError(
                "there is no reviver for type %r" % getattr(type, "__name__", type),
                title="unrevivable type",
                code=FaultCode.UNREVIVABLE_TYPE,
                hint="register a reviver for the type before parsing",
                token=token,
                type=type,
                argument=argument,
            )
        try:
            return reviver(token, type)
        except RevivalError:
            raise
        except (ValueError, TypeError, ArithmeticError, KeyError) as exception:
            name = getattr(type, "__name__", str(type))
            if argument is not Unset:
                message = "cannot revive %r as %s for argument %r" % (token, name, argument.default_alias)
            else:
                message = "cannot revive %r as %s" % (token, name)
            raise RevivalError(
                message,
                title="revival failed",
                code=FaultCode.REVIVAL_FAILED,
                hint="pass a value that reads as %s" % name,
                token=token,
                type=type,
                argument=argument,
                exception=exception,
            ) from exception


def _revive_inner(reviver, inner, token, type, /):
    return reviver(token, inner)


def _revive_collection(factory, reviver, inner, token, type, /):
    return factory(reviver(item, inner) for item in _split(token))


def enum_collisions(type, ignore_case=True, /):
    """
    Return the labels of an enum that collide under the given case mode.

    A label collides when it spells (case-aware) the same text as another
    label bound to a different member.
    """
    seen = {}
    collisions = []
    for label, member in shortcuts(type):
        key = casefold(label, ignore_case)
        if key in seen and seen[key] is not member:
            collisions.append(label)
        seen.setdefault(key, member)
    return collisions


registry = Registry()

registry.register(str, _revive_str)
registry.register(bool, _revive_bool)
registry.register(int, _revive_constructor)
registry.register(float, _revive_constructor)
registry.register(complex, _revive_constructor)
registry.register(decimal.Decimal, _revive_constructor)
registry.register(fractions.Fraction, _revive_constructor)
registry.register(pathlib.Path, _revive_constructor)
registry.register(pathlib.PurePath, _revive_constructor)
registry.register(uuid.UUID, _revive_constructor)
registry.register(datetime.datetime, _revive_iso)
registry.register(datetime.date, _revive_iso)
registry.register(datetime.time, _revive_iso)

register = registry.register
unregister = registry.unregister
resolve = registry.resolve
can_revive = registry.can_revive
revive = registry.revive


__all__ = (
    "Registry",
    "registry",
    "register",
    "unregister",
    "resolve",
    "can_revive",
    "revive",
    "shortcuts",
    "enum_collisions",
    "is_boolean_literal",
)
