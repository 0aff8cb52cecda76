"""
Argwright definition validator.

validate(definition) checks the cross-cutting invariants of a Definition and
raises DefinitionError on the first violation. It never mutates the
definition and is run again every time a definition is reused.

Checks, in order
- aliases: unique among global arguments, among globals plus each action's own
  arguments, and among actions (under the owner's case mode).
- actions: every action has at least one alias and a resolved handler.
- types: every argument type has a reviver; enum labels do not collide under
  the argument's case mode.
"""
import enum
import logging

from .entities import Definition
from .faults import FaultCode, DefinitionError
from .revivers import registry, enum_collisions
from .utils import *

logger = logging.getLogger(__name__)


def _check_aliases(scope, arguments, /):
    seen = {}
    for argument in arguments:
        for alias in argument.aliases:
            key = casefold(alias, argument.ignore_case)
            if (other := seen.get(key)) is not None and other is not argument:
                raise DefinitionError(
                    "duplicate alias %r in %s (%r and %r)" % (
                        alias, scope, other.default_alias, argument.default_alias
                    ),
                    title="duplicate alias",
                    code=FaultCode.DUPLICATE_ALIAS,
                    hint="give one of the arguments a different name or shortcut",
                    alias=alias,
                    argument=argument,
                )
            seen[key] = argument


def _check_action_aliases(definition, /):
    seen = {}
    for action in definition.actions:
        for alias in action.aliases:
            key = casefold(alias, action.ignore_case)
            if (other := seen.get(key)) is not None and other is not action:
                raise DefinitionError(
                    "duplicate action alias %r (%r and %r)" % (alias, other.default_alias, action.default_alias),
                    title="duplicate alias",
                    code=FaultCode.DUPLICATE_ALIAS,
                    hint="give one of the actions a different name or shortcut",
                    alias=alias,
                    action=action,
                )
            seen[key] = action


def _check_actions(definition, /):
    for action in definition.actions:
        if not action.aliases:
            raise DefinitionError(
                "action has no alias",
                title="missing alias",
                code=FaultCode.MISSING_ALIAS,
                hint="name the action",
                action=action,
            )
        if action.handler is None:
            raise DefinitionError(
                "action %r has no handler" % action.default_alias,
                title="missing delegate",
                code=FaultCode.MISSING_DELEGATE,
                hint="define a function named %r on the scaffold or its action type" % action.default_alias,
                action=action,
                alias=action.default_alias,
            )


def _check_types(arguments, /):
    for argument in arguments:
        if argument.reviver is None and not registry.can_revive(argument.type):
            raise DefinitionError(
                "argument %r has type %s, which cannot be revived" % (
                    argument.default_alias, getattr(argument.type, "__name__", argument.type)
                ),
                title="unrevivable type",
                code=FaultCode.UNREVIVABLE_TYPE,
                hint="register a reviver for the type or give the argument an explicit reviver",
                argument=argument,
                type=argument.type,
            )
        if isinstance(argument.type, type) and issubclass(argument.type, enum.Enum):
            try:
                collisions = enum_collisions(argument.type, argument.ignore_case)
            except KeyError as exception:
                raise DefinitionError(
                    "enum %s declares a shortcut for an unknown member %s" % (argument.type.__name__, exception),
                    title="enum shortcut collision",
                    code=FaultCode.ENUM_SHORTCUT_COLLISION,
                    hint="only declare shortcuts for existing members",
                    argument=argument,
                    type=argument.type,
                ) from exception
            if collisions:
                raise DefinitionError(
                    "enum %s has colliding labels: %s" % (argument.type.__name__, ", ".join(map(repr, collisions))),
                    title="enum shortcut collision",
                    code=FaultCode.ENUM_SHORTCUT_COLLISION,
                    hint="rename the colliding members or shortcuts",
                    argument=argument,
                    type=argument.type,
                    alias=collisions[0],
                )


def validate(definition, /):
    """
    Check a definition; raise DefinitionError on the first broken invariant.

    Returns the definition unchanged so calls can be chained.
    """
    if not isinstance(definition, Definition):
        raise TypeError("validate() argument must be a definition")

    _check_aliases("global arguments", definition.arguments)
    for action in definition.actions:
        _check_aliases("action %r" % action.default_alias, definition.catalog(action))
    _check_action_aliases(definition)

    _check_actions(definition)

    _check_types(definition.arguments)
    for action in definition.actions:
        _check_types(action.arguments)

    logger.debug("validated %s", definition)
    return definition


__all__ = (
    "validate",
)
