"""
Argwright entity model: Argument, Action and Definition.

Overview
- Argument: one bindable value (global, or owned by an action). Carries its
  aliases, declared type, requirement/position metadata, the reviver used to
  convert tokens, the binding slot (member name or handler parameter) and the
  value revived by the most recent parse.
- Action: one invocable command. Owns its own Argument catalog and a delegate
  descriptor (handler + kind + calling convention).
- Definition: the root. Global arguments, actions, type-level metadata and the
  computed specified action.

Introspection & representation
- EntityType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields listed in __introspectable__ as read-only properties (see mirror()).
- Two definitions reflected from the same scaffold have equal reprs.

Mutation
- Definitions can be built by hand: Definition(), add_argument(), add_action(),
  add_metadata(). The engine is the only writer of Argument.revived and
  Action.specified (through reset() and the private slots).
"""
import functools
import operator
import re

from .markers import Hook, Example, Behavior, _sanitize_shortcuts, _sanitize_descr
from .revivers import registry
from .utils import *


class EntityType(type):
    """
    Metaclass that turns entities into introspectable, read-only records.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            - argument(aliases=('verbose', 'v'), type=<class 'bool'>, ...)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _matches(aliases, alias, ignore_case):
    alias = casefold(strip(alias), ignore_case)
    return any(casefold(candidate, ignore_case) == alias for candidate in aliases)


class Argument(metaclass=EntityType):
    """
    A bindable value.

    Properties
    - aliases: tuple of aliases, the first is the default alias.
    - type, required, position, descr, default, ignore_case, reviver, selector.
    - source: binding slot, a member name (str) or an inspect.Parameter.
    - owner: owning Definition or Action (None until attached).
    - revived: value matched in the current parse, or Unset.
    """

    __introspectable__ = (
        "aliases",
        "type",
        "required",
        "position",
        "descr",
        "default",
        "ignore_case",
        "reviver",
        "selector",
        "source",
    )

    __displayable__ = (
        "aliases",
        "type",
        "required",
        "position",
        "default",
        "ignore_case",
        "selector",
    )

    def __init__(
            self,
            *aliases,
            type=str,
            required=False,
            position=Unset,
            descr=Unset,
            default=None,
            reviver=Unset,
            ignore_case=True,
            selector=False,
            source=Unset
    ):
        typename = __class__.__typename__
        if not aliases:
            raise TypeError(f"{typename} must specify at least one alias")
        if type is None:
            raise TypeError(f"{typename} 'type' cannot be None")
        if not isinstance(position, int | Unset) or isinstance(position, bool):
            raise TypeError(f"{typename} 'position' must be an integer")
        if reviver is not Unset and not callable(reviver):
            raise TypeError(f"{typename} 'reviver' must be callable")

        self._aliases = _sanitize_shortcuts(typename, aliases)
        self._type = type
        self._required = bool(required)
        self._position = coalesce(position)
        self._descr = _sanitize_descr(typename, descr)
        self._default = default
        self._reviver = coalesce(reviver)
        self._ignore_case = bool(ignore_case)
        self._selector = bool(selector)
        self._source = coalesce(source, self._aliases[0])
        self._owner = None
        self._revived = Unset

    @property
    def default_alias(self):
        return self._aliases[0]

    @property
    def owner(self):
        return self._owner

    @property
    def revived(self):
        return self._revived

    @property
    def matched(self):
        return self._revived is not Unset

    @property
    def value(self):
        """
        The revived value when matched, otherwise the default.
        """
        return coalesce(self._revived, self._default)

    def matches(self, alias, /):
        return _matches(self._aliases, alias, self._ignore_case)

    def revive(self, token, /):
        """
        Convert a raw token with this argument's reviver (or the registry).
        """
        reviver = self._reviver if self._reviver is not None else Unset
        return registry.revive(token, self._type, argument=self, reviver=reviver)

    def bind(self, instance, /):
        """
        Write the revived value to its member on instance.

        Unmatched members are only filled with the default when the instance
        holds no value for them (a bare annotation, or a marker defaulting to None).
        """
        if not isinstance(self._source, str):
            return False
        if self.matched:
            setattr(instance, self._source, self._revived)
            return True
        if not hasattr(instance, self._source) or getattr(instance, self._source) is None:
            setattr(instance, self._source, self._default)
        return False

    def reset(self):
        self._revived = Unset


class Action(metaclass=EntityType):
    """
    An invocable command.

    Properties
    - aliases: tuple of aliases (an action without aliases fails validation).
    - arguments: the action's own Argument catalog.
    - handler: the delegate callable (Unset until resolved).
    - kind: "instance" (method on the scaffold), "static" (function on the
      deferred action type) or "property" (handler behind a <alias>_args member).
    - bound: whether the handler receives the scaffold instance first.
    - bundle: bundle class aggregating the arguments, or None.
    - member: scaffold member receiving the bundle (property kind), or None.
    - specified: whether this action was selected by the current parse.
    """

    __introspectable__ = (
        "aliases",
        "arguments",
        "handler",
        "kind",
        "bound",
        "bundle",
        "member",
        "descr",
        "ignore_case",
    )

    __displayable__ = (
        "aliases",
        "arguments",
        "handler",
        "kind",
        "bundle",
        "member",
    )

    KINDS = ("instance", "static", "property")

    def __init__(
            self,
            *aliases,
            handler=Unset,
            kind="static",
            bound=Unset,
            arguments=(),
            bundle=Unset,
            member=Unset,
            descr=Unset,
            ignore_case=True
    ):
        typename = __class__.__typename__
        if kind not in self.KINDS:
            raise ValueError(f"{typename} 'kind' must be one of {', '.join(map(repr, self.KINDS))}")
        if handler is not Unset and not callable(handler):
            raise TypeError(f"{typename} 'handler' must be callable")
        if not isinstance(bundle, type | Unset):
            raise TypeError(f"{typename} 'bundle' must be a class")

        self._aliases = _sanitize_shortcuts(typename, aliases)
        self._handler = coalesce(handler)
        self._kind = kind
        self._bound = bool(coalesce(bound, kind == "instance"))
        self._arguments = []
        self._bundle = coalesce(bundle)
        self._member = coalesce(member)
        self._descr = _sanitize_descr(typename, descr)
        self._ignore_case = bool(ignore_case)
        self._specified = False
        for argument in arguments:
            self.add_argument(argument)

    @property
    def default_alias(self):
        return self._aliases[0] if self._aliases else None

    @property
    def specified(self):
        return self._specified

    def matches(self, alias, /):
        return _matches(self._aliases, alias, self._ignore_case)

    def find_argument(self, alias, /):
        for argument in self._arguments:
            if argument.matches(alias):
                return argument
        return None

    def add_argument(self, argument, /):
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__typename__} arguments must be arguments")
        argument._owner = self
        self._arguments.append(argument)
        return argument

    def reset(self):
        self._specified = False
        for argument in self._arguments:
            argument.reset()


class Definition(metaclass=EntityType):
    """
    The root of a command line: global arguments, actions and metadata.

    Properties
    - source: scaffold class this definition was reflected from, or None.
    - arguments / actions / metadata: ordered lists (copies).
    - hooks / examples / behavior: filtered views over metadata.
    - ignore_case: definition-wide case mode.
    - specified_action: the action selected by the current parse, or None.
    - selector: the global argument that selects the action, or None.
    """

    __introspectable__ = (
        "source",
        "arguments",
        "actions",
        "metadata",
        "ignore_case",
    )

    def __init__(self, source=Unset, /, arguments=(), actions=(), metadata=(), *, ignore_case=True):
        if not isinstance(source, type | Unset):
            raise TypeError(f"{type(self).__typename__} 'source' must be a class")
        self._source = coalesce(source)
        self._arguments = []
        self._actions = []
        self._metadata = []
        self._ignore_case = bool(ignore_case)
        for argument in arguments:
            self.add_argument(argument)
        for action in actions:
            self.add_action(action)
        for object in metadata:
            self.add_metadata(object)

    @property
    def hooks(self):
        return tuple(object for object in self._metadata if isinstance(object, Hook))

    @property
    def examples(self):
        return tuple(object for object in self._metadata if isinstance(object, Example))

    @property
    def behavior(self):
        for object in self._metadata:
            if isinstance(object, Behavior):
                return object
        return Behavior()

    @property
    def specified_action(self):
        specified = [action for action in self._actions if action.specified]
        if len(specified) > 1:
            raise RuntimeError("more than one action is specified")
        return specified[0] if specified else None

    @property
    def selector(self):
        for argument in self._arguments:
            if argument.selector:
                return argument
        return None

    def find_argument(self, alias, /):
        for argument in self._arguments:
            if argument.matches(alias):
                return argument
        return None

    def find_action(self, alias, /):
        for action in self._actions:
            if action.matches(alias):
                return action
        return None

    def catalog(self, action=None, /):
        """
        Return the arguments in scope: globals, plus the action's own when given.
        """
        return [*self._arguments, *(action.arguments if action is not None else ())]

    def add_argument(self, argument, /):
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__typename__} arguments must be arguments")
        argument._owner = self
        self._arguments.append(argument)
        return argument

    def add_action(self, action, /):
        if not isinstance(action, Action):
            raise TypeError(f"{type(self).__typename__} actions must be actions")
        self._actions.append(action)
        return action

    def add_metadata(self, object, /):
        self._metadata.append(object)
        return object

    def reset(self):
        """
        Forget everything the previous parse left behind.
        """
        for argument in self._arguments:
            argument.reset()
        for action in self._actions:
            action.reset()

    def __str__(self):
        return "%s(arguments=%d)(actions=%d)(hooks=%d)" % (
            getattr(self._source, "__name__", ""), len(self._arguments), len(self._actions), len(self.hooks)
        )


def specify(action, /):
    """
    Internal: flag an action as the specified one (engine use only).
    """
    if not isinstance(action, Action):
        raise TypeError("specify() argument must be an action")
    action._specified = True


def settle(argument, value, /):
    """
    Internal: store a revived value on an argument (engine use only).
    """
    if not isinstance(argument, Argument):
        raise TypeError("settle() first argument must be an argument")
    argument._revived = value


__all__ = (
    "Argument",
    "Action",
    "Definition",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del EntityType
