"""
Argwright scaffold reflector.

Overview
- reflect(cls) turns a scaffold class into an unvalidated Definition:
  global arguments from annotated members and settable properties, then
  actions from @action methods, from the deferred action type declared with
  @scaffold(actions=...), and from property-style "<alias>_args" members.
- Declaration order is preserved everywhere (annotations base classes first).

Aliases
- The default alias of an argument is its member (or parameter) name.
- Explicit shortcuts and member names are all registered as known aliases
  before any automatic shortcut is generated, so an explicit shortcut always
  wins over a generated one.
- The automatic shortcut is the shortest lower-cased prefix of the name that is
  not yet known. Action arguments start from a copy of the global known list.
"""
import inspect
import logging
import types
import typing

from .entities import Argument, Action, Definition
from .faults import FaultCode, DefinitionError
from .markers import Arg, Ignored, describe
from .revivers import registry
from .utils import *

logger = logging.getLogger(__name__)

_SUFFIXES = ("_args", "Args")


def _malformed(message, /, **options):
    return DefinitionError(
        message,
        title="malformed scaffold",
        code=FaultCode.MALFORMED_SCAFFOLD,
        hint="fix the scaffold declaration",
        **options
    )


def _hints(target, /):
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError, AttributeError) as exception:
        raise _malformed(
            "cannot resolve the annotations of %r" % getattr(target, "__qualname__", target),
            source=target,
            exception=exception,
        ) from exception


def _is_bundle(hint, /):
    """
    Return whether an annotation names a bundle class (a plain class with no reviver).
    """
    return (
        isinstance(hint, type)
        and not isinstance(hint, types.GenericAlias)
        and hint.__module__ != "builtins"
        and not registry.can_revive(hint)
    )


def _property_alias(name, /):
    for suffix in _SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[:-len(suffix)]
    return None


def _declared(klass, /):
    """
    Return the member names klass declares, in declaration order.

    Assigned members keep their assignment order. A bare annotation (no value)
    is placed before the next annotated member that has one.
    """
    annotated = list(inspect.get_annotations(klass))
    assigned = [name for name in vars(klass) if not name.startswith("__")]
    bare = set(annotated).difference(assigned)
    order, cursor = [], 0
    for name in assigned:
        if name in annotated and (index := annotated.index(name)) >= cursor:
            order.extend(member for member in annotated[cursor:index] if member in bare)
            cursor = index + 1
        order.append(name)
    order.extend(member for member in annotated[cursor:] if member in bare)
    return order


def _members(cls, /):
    """
    Return (members, properties): candidate argument members as (name, hint, marker)
    triples and property-style action members as (alias, name, bundle) triples.
    """
    members, properties, seen = [], [], set()
    hints = _hints(cls)

    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name in _declared(klass):
            if name in seen or name.startswith("_"):
                continue
            seen.add(name)
            attribute = inspect.getattr_static(cls, name, None)
            if name in hints:
                hint = hints[name]
                if typing.get_origin(hint) is typing.ClassVar:
                    continue
                if isinstance(attribute, Ignored) or inspect.isroutine(attribute):
                    continue
                if not isinstance(attribute, Arg) and (alias := _property_alias(name)) is not None and _is_bundle(hint):
                    properties.append((alias, name, hint))
                    continue
                members.append((name, hint, attribute if isinstance(attribute, Arg) else Unset))
            elif isinstance(attribute, Arg):
                members.append((name, str, attribute))
            elif isinstance(attribute, property) and attribute.fset is not None:
                members.append((name, _hints(attribute.fget).get("return", str), Unset))

    return members, properties


def _default(cls, name, marker, /):
    if marker is not Unset:
        return marker.default
    value = inspect.getattr_static(cls, name, None)
    return None if isinstance(value, property) else value


def _shortcut(name, known, ignore_case, /):
    """
    Return the shortest lower-cased prefix of name that is not a known alias, or None.
    """
    folded = {casefold(alias, ignore_case) for alias in known}
    for length in range(1, len(name) + 1):
        candidate = name[:length].lower()
        if casefold(candidate, ignore_case) not in folded:
            return candidate
    return None


def _descr(marker, /):
    if marker is Unset or marker.descr is None:
        return Unset
    return marker.descr


def _case(marker, ignore_case, /):
    if marker is Unset or marker.ignore_case is Unset:
        return ignore_case
    return marker.ignore_case


def _arguments(candidates, known, ignore_case, /, *, selectors=False):
    """
    Build arguments from (name, type, marker, default, position, source) candidates.

    An explicit shortcut replaces the automatic one. With selectors, a member
    named "action" selects the action.
    """
    for name, type, marker, default, position, source in candidates:
        known.extend((name, *(marker.shortcuts if marker is not Unset else ())))

    arguments = []
    for name, type, marker, default, position, source in candidates:
        case = _case(marker, ignore_case)
        aliases = [name, *(marker.shortcuts if marker is not Unset else ())]
        if len(aliases) == 1 and (marker is Unset or marker.shortcut):
            if (shortcut := _shortcut(name, known, case)) is not None:
                aliases.append(shortcut)
                known.append(shortcut)
        arguments.append(Argument(
            *aliases,
            type=type,
            required=marker.required if marker is not Unset else False,
            position=position,
            descr=_descr(marker),
            default=False if type is bool and default is None else default,
            reviver=marker.reviver if marker is not Unset and marker.reviver is not None else Unset,
            ignore_case=case,
            selector=selectors and ((marker is not Unset and marker.selector) or name == "action"),
            source=source,
        ))
    return arguments


def _member_candidates(cls, members, /):
    candidates = []
    for name, hint, marker in members:
        type = marker.type if marker is not Unset and marker.type is not Unset else hint
        position = marker.position if marker is not Unset and marker.position is not None else Unset
        candidates.append((name, type, marker, _default(cls, name, marker), position, name))
    return candidates


def _parameters(function, bound, /):
    """
    Return the positional parameters of a handler (the receiver excluded).
    """
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError) as exception:
        raise _malformed("cannot inspect the signature of %r" % function, exception=exception) from exception
    parameters = [
        parameter for parameter in signature.parameters.values()
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
    ]
    return parameters[1:] if bound else parameters


def _build_action(name, function, marker, kind, bound, known, ignore_case, /, *, bundle=Unset, member=Unset):
    case = ignore_case if marker is Unset or marker.ignore_case is Unset else marker.ignore_case
    known = list(known)

    if bundle is Unset and marker is not Unset and marker.bundle is not None:
        bundle = marker.bundle
    parameters = _parameters(function, bound) if function is not Unset else []
    hints = _hints(function) if function is not Unset else {}

    if bundle is Unset and len(parameters) == 1 and not isinstance(parameters[0].default, Arg):
        if _is_bundle(hint := hints.get(parameters[0].name)):
            bundle = hint

    if bundle is not Unset:
        members, _ = _members(bundle)
        arguments = _arguments(_member_candidates(bundle, members), known, case)
    else:
        candidates = []
        for ordinal, parameter in enumerate(parameters):
            default = parameter.default
            argument = default if isinstance(default, Arg) else Unset
            if argument is not Unset:
                type = coalesce(argument.type, hints.get(parameter.name, str))
                value = argument.default
                position = argument.position if argument.position is not None else ordinal
            else:
                type = hints.get(parameter.name, str)
                value = None if default is parameter.empty else default
                position = ordinal
            candidates.append((parameter.name, type, argument, value, position, parameter))
        arguments = _arguments(candidates, known, case)

    return Action(
        name,
        *(marker.shortcuts if marker is not Unset else ()),
        handler=function,
        kind=kind,
        bound=bound,
        arguments=arguments,
        bundle=bundle,
        member=member,
        descr=_descr(marker),
        ignore_case=case,
    )


def _routines(cls, /):
    """
    Return {name: raw class attribute} for every routine on cls, bases first.
    """
    routines = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, attribute in vars(klass).items():
            if inspect.isroutine(attribute) or isinstance(attribute, staticmethod | classmethod):
                routines[name] = attribute
    return routines


def _marker(attribute, /):
    return getattr(getattr(attribute, "__func__", attribute), "__action__", Unset)


def _handler(cls, name, attribute, /):
    """
    Return (handler, bound) for a raw class attribute.
    """
    if isinstance(attribute, staticmethod | classmethod):
        return getattr(cls, name), False
    return attribute, True


def reflect(cls, /):
    """
    Build an unvalidated Definition from a scaffold class.

    Raises
    - TypeError: cls is not a class.
    - DefinitionError: annotations or handler signatures cannot be resolved.
    """
    if not isinstance(cls, type):
        raise TypeError("reflect() argument must be a class")

    options = describe(cls)
    ignore_case = options["ignore_case"]
    deferred = options["actions"]
    definition = Definition(cls, metadata=options["metadata"], ignore_case=ignore_case)

    members, properties = _members(cls)
    known = []
    for argument in _arguments(_member_candidates(cls, members), known, ignore_case, selectors=True):
        definition.add_argument(argument)

    actions = []
    for name, attribute in _routines(cls).items():
        if (marker := _marker(attribute)) is Unset:
            continue
        handler, bound = _handler(cls, name, attribute)
        actions.append(_build_action(name, handler, marker, "instance" if bound else "static", bound, known, ignore_case))

    if deferred is not None:
        for name, attribute in _routines(deferred).items():
            if (marker := _marker(attribute)) is Unset:
                continue
            if any(casefold(action.default_alias, ignore_case) == casefold(name, ignore_case) for action in actions):
                logger.debug("deferred action %r is shadowed by a scaffold action", name)
                continue
            actions.append(_build_action(name, getattr(deferred, name), marker, "static", False, known, ignore_case))

    for alias, name, bundle in properties:
        if any(action.matches(alias) for action in actions):
            continue
        handler, bound = Unset, False
        for owner in (cls, deferred):
            if owner is None:
                continue
            if (attribute := _routines(owner).get(alias)) is not None:
                handler, bound = _handler(owner, alias, attribute)
                bound = bound and owner is cls
                break
        actions.append(_build_action(
            alias, handler, Unset, "property", bound, known, ignore_case, bundle=bundle, member=name
        ))

    for action in actions:
        definition.add_action(action)

    logger.debug("reflected %s", definition)
    return definition


__all__ = (
    "reflect",
)
