"""
Argwright invocation engine.

Entry points
- parse(source, prompt=Unset): reflect (when given a class), validate, match the
  tokens, revive them and populate a fresh scaffold instance. No handler runs.
- invoke(source, prompt=Unset): parse, then dispatch the selected action.

Both return an Outcome:
- args: the populated scaffold instance (a SimpleNamespace for definitions
  built without a scaffold class).
- action: the specified Action, or None.
- action_args: the populated bundle instance, or None.
- action_parameters: positional values handed to the handler.
- definition: the Definition used.
- value: the handler's return value (invoke only).
- cancelled: True when a hook cancelled or a fault was reported.
- exception: the reported fault, or None.

Prompt contract (same as every invoke() in this family of tools)
- Unset: tokens are read from sys.argv[1:].
- str: split with shlex.split.
- Iterable[str]: each item is trimmed; empty items are dropped.

Token grammar
- Named: "-name", "--name", "/name", optionally with an inline "=value".
  "/name" is named only when name is a known alias; "/tmp" is a value.
- Bare: anything else. Leading bare tokens fill positional arguments in
  position order; a bare token after the first named token is unexpected.
- bool arguments are switches: they consume the next token only when it is a
  boolean literal, and default to True.

Hooks
- before_parse, after_populate, before_invoke, after_invoke, each called with a
  HookContext in declaration order. A hook may call context.cancel().

Faults
- Every ArgException raised by a parse clears the specified action.
- Behavior("throw") lets faults and handler exceptions propagate unmodified.
- Behavior("report") renders parse faults (and handler exceptions wrapped in
  DelegatedActionError) through faults.report() and returns a cancelled Outcome.
  DefinitionError always propagates.
"""
import collections
import difflib
import inspect
import logging
import re
import shlex
import sys
import types
from collections.abc import Iterable

from .context import publish, withdraw
from .entities import Definition, settle, specify
from .faults import *
from .reflector import reflect
from .revivers import is_boolean_literal
from .utils import *
from .validator import validate

logger = logging.getLogger(__name__)

_SWITCH = re.compile(r"(?:--?|/)(?P<name>[^\W\d][\w\-]*)(?:=(?P<value>.*))?", re.DOTALL)

Outcome = collections.namedtuple("Outcome", (
    "args",
    "action",
    "action_args",
    "action_parameters",
    "definition",
    "value",
    "cancelled",
    "exception",
))


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.
    """
    try:
        return ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")[number - 1]
    except IndexError:
        pass
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


class HookContext:
    """
    Mutable view of a parse in progress, handed to every hook stage.

    Attributes
    - definition, tokens (the remaining raw tokens), args, action, action_args,
      action_parameters, value.
    - cancelled: set by cancel(); the engine stops after the current stage.
    """

    def __init__(self, definition, tokens):
        self.definition = definition
        self.tokens = tokens
        self.args = None
        self.action = None
        self.action_args = None
        self.action_parameters = ()
        self.value = None
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def outcome(self, exception=None):
        return Outcome(
            self.args,
            self.action,
            self.action_args,
            self.action_parameters,
            self.definition,
            self.value,
            self.cancelled or exception is not None,
            exception,
        )

    def __repr__(self):
        return "hook-context(action=%r, cancelled=%r)" % (
            self.action.default_alias if self.action is not None else None, self.cancelled
        )


def _tokenize(prompt, /):
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = []
        for item in prompt:
            if not isinstance(item, str):
                raise TypeError("prompt must be a string or an iterable of strings")
            if item := item.strip():
                tokens.append(item)
        return tokens
    raise TypeError("prompt must be a string or an iterable of strings")


def _definition(source, /):
    if isinstance(source, Definition):
        return source
    if isinstance(source, type):
        return reflect(source)
    raise TypeError("source must be a scaffold class or a definition")


def _run(stage, context, /):
    for hook in context.definition.hooks:
        getattr(hook, stage)(context)
        if context.cancelled:
            logger.debug("%s hook %r cancelled the parse", stage, hook)
            return False
    return True


def _suggest(alias, candidates, /):
    suggestions = difflib.get_close_matches(alias, candidates, 5)
    if suggestions:
        return suggestions, "did you mean %r?" % suggestions[0]
    return suggestions, Unset


def _switch(token, catalog, /):
    """
    Return the switch match for token, or None when token is a value.

    A "/name" token is a switch only when name is an alias in catalog, so
    absolute paths such as "/tmp" pass through as values.
    """
    match = _SWITCH.fullmatch(token)
    if match is not None and token.startswith("/"):
        if not any(argument.matches(match["name"]) for argument in catalog):
            return None
    return match


def _select(definition, tokens, /):
    """
    Pick the action named by the selector argument or the first token.
    """
    selector = definition.selector
    token = Unset

    if selector is not None:
        for index, candidate in enumerate(tokens):
            if (match := _SWITCH.fullmatch(candidate)) and selector.matches(match["name"]):
                del tokens[index]
                if (token := match["value"]) is None:
                    if index >= len(tokens) or _switch(tokens[index], definition.arguments):
                        raise MissingValueError(
                            "missing value for %r" % candidate,
                            title="missing value",
                            code=FaultCode.MISSING_VALUE,
                            hint="name an action after %r" % candidate,
                            argument=selector,
                            token=candidate,
                        )
                    token = tokens.pop(index)
                break

    if token is Unset and tokens and _switch(tokens[0], definition.arguments) is None:
        token = tokens.pop(0)

    aliases = [alias for action in definition.actions for alias in action.aliases]
    if token is Unset:
        raise UnknownActionError(
            "no action was specified",
            title="missing action",
            code=FaultCode.MISSING_ACTION,
            hint="start with one of %s" % ", ".join(map(repr, aliases)),
            suggestions=aliases,
        )

    if (action := definition.find_action(token)) is None:
        suggestions, hint = _suggest(token, aliases)
        raise UnknownActionError(
            "unknown action %r" % token,
            title="unknown action",
            code=FaultCode.UNKNOWN_ACTION,
            hint=coalesce(hint, "use one of %s" % ", ".join(map(repr, aliases))),
            alias=token,
            suggestions=suggestions,
        )

    if selector is not None:
        settle(selector, selector.revive(token))
    specify(action)
    logger.debug("selected action %r", action.default_alias)
    return action


def _is_switch(argument, /):
    return argument.type is bool


def _match(definition, action, tokens, /):
    """
    Match the remaining tokens against the arguments in scope and revive them.
    """
    catalog = [
        argument for argument in definition.catalog(action) if action is None or not argument.selector
    ]
    positionals = collections.deque(sorted(
        (argument for argument in catalog if argument.position is not None),
        key=lambda argument: argument.position,
    ))
    tokens = collections.deque(tokens)
    index = 0

    while tokens and _switch(tokens[0], catalog) is None:
        token = tokens.popleft()
        index += 1
        if not positionals:
            raise UnexpectedArgumentError(
                "unexpected value %r at %s position" % (token, _ordinal(index)),
                title="unexpected argument",
                code=FaultCode.UNEXPECTED_ARGUMENT,
                hint="name the argument this value belongs to",
                token=token,
                index=index,
            )
        argument = positionals.popleft()
        settle(argument, argument.revive(token))

    while tokens:
        token = tokens.popleft()
        index += 1
        if (match := _switch(token, catalog)) is None:
            raise UnexpectedArgumentError(
                "unexpected value %r at %s position" % (token, _ordinal(index)),
                title="unexpected argument",
                code=FaultCode.UNEXPECTED_ARGUMENT,
                hint="positional values must come before named arguments",
                token=token,
                index=index,
            )

        name, value = match["name"], match["value"]
        argument = next((argument for argument in catalog if argument.matches(name)), None)
        if argument is None:
            suggestions, hint = _suggest(name, [alias for argument in catalog for alias in argument.aliases])
            raise UnknownArgumentError(
                "unknown argument %r at %s position" % (token, _ordinal(index)),
                title="unknown argument",
                code=FaultCode.UNKNOWN_ARGUMENT,
                hint=coalesce(hint, "remove it or check the spelling"),
                alias=name,
                token=token,
                index=index,
                suggestions=suggestions,
            )
        if argument.matched:
            raise DuplicateArgumentError(
                "argument %r was specified more than once" % argument.default_alias,
                title="duplicate argument",
                code=FaultCode.DUPLICATE_ARGUMENT,
                hint="keep a single %r" % token,
                alias=name,
                argument=argument,
                token=token,
                index=index,
            )

        if value is None and _is_switch(argument):
            value = tokens.popleft() if tokens and is_boolean_literal(tokens[0]) else "true"
        elif value is None:
            if not tokens or _switch(tokens[0], catalog):
                raise MissingValueError(
                    "missing value for argument %r" % argument.default_alias,
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="pass a value after %r" % token,
                    alias=name,
                    argument=argument,
                    token=token,
                )
            value = tokens.popleft()
            index += 1
        settle(argument, argument.revive(value))


def _require(arguments, /):
    for argument in arguments:
        if argument.required and not argument.matched:
            raise MissingArgumentError(
                "missing required argument %r" % argument.default_alias,
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                hint="pass -%s" % argument.default_alias,
                argument=argument,
                alias=argument.default_alias,
            )


def _populate(definition, action, context, /):
    source = definition.source
    instance = source() if source is not None else types.SimpleNamespace()
    for argument in definition.arguments:
        argument.bind(instance)
    _require(definition.catalog(action))
    context.args = instance

    if action is None:
        return
    context.action = action
    if action.bundle is not None:
        bundle = action.bundle()
        for argument in action.arguments:
            argument.bind(bundle)
        if action.member is not None:
            setattr(instance, action.member, bundle)
        context.action_args = bundle
        context.action_parameters = (bundle,)
    else:
        context.action_parameters = tuple(argument.value for argument in action.arguments)


def _call(action, context, /):
    """
    Call the handler: the receiver (when bound), the positional payload, and the
    scaffold instance for every keyword-only parameter.
    """
    handler = action.handler
    signature = inspect.signature(handler)
    parameters = list(signature.parameters.values())
    positional = [
        parameter for parameter in parameters
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
    ]
    arguments = list(context.action_parameters)
    if action.bound:
        positional = positional[1:]
        arguments.insert(0, context.args)
    if action.bundle is not None and not positional:
        del arguments[int(action.bound):]
    keywords = {
        parameter.name: context.args for parameter in parameters if parameter.kind is parameter.KEYWORD_ONLY
    }
    logger.debug("dispatching action %r", action.default_alias)
    return handler(*arguments, **keywords)


def _process(source, prompt, dispatch, /):
    tokens = _tokenize(prompt)
    definition = validate(_definition(source))
    definition.reset()
    if definition.source is not None:
        withdraw(definition.source)

    context = HookContext(definition, tokens)
    behavior = definition.behavior
    try:
        if not _run("before_parse", context):
            return context.outcome()
        action = _select(definition, tokens) if definition.actions else None
        _match(definition, action, tokens)
        _populate(definition, action, context)
        if definition.source is not None:
            publish(definition.source, context.args)
        if not _run("after_populate", context):
            return context.outcome()
    except DefinitionError:
        definition.reset()
        raise
    except ArgException as fault:
        definition.reset()
        if not behavior.reports:
            raise
        return context.outcome(report(fault, fancy=behavior.fancy, colorful=behavior.colorful))

    if not dispatch or context.action is None:
        return context.outcome()

    if not _run("before_invoke", context):
        return context.outcome()
    try:
        context.value = _call(context.action, context)
    except Exception as exception:
        if not behavior.reports:
            raise
        fault = DelegatedActionError(
            "action %r failed: %s" % (context.action.default_alias, exception),
            title="action failed",
            code=FaultCode.DELEGATED_ERROR,
            hint="see the error above",
            action=context.action,
            exception=exception,
        )
        fault.__cause__ = exception
        return context.outcome(report(fault, fancy=behavior.fancy, colorful=behavior.colorful))
    _run("after_invoke", context)
    return context.outcome()


def parse(source, prompt=Unset, /):
    """
    Parse a prompt against a scaffold class or definition without dispatching.

    Raises
    - TypeError: bad source or prompt types.
    - DefinitionError: the definition breaks an invariant.
    - ParseError subclasses: under the default "throw" behavior.
    """
    return _process(source, prompt, False)


def invoke(source, prompt=Unset, /):
    """
    Parse a prompt, then call the specified action's handler.

    The outcome's value is the handler's return value. Handler exceptions
    propagate under "throw" and are reported under "report".
    """
    return _process(source, prompt, True)


__all__ = (
    "Outcome",
    "HookContext",
    "parse",
    "invoke",
)
