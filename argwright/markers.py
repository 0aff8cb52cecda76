r"""
Argwright markers: the declarative surface of a scaffold class.

Overview
- Arg: argument marker. As a class attribute it is a settable data descriptor;
  as a handler-parameter default it configures that parameter's argument.
- ignore(): excludes an annotated member from discovery (still settable).
- @action: marks a method (or a static function on a deferred action type) as
  an invocable action.
- @scaffold: attaches type-level metadata (deferred action type, hooks,
  examples, exception behavior, case mode) to a scaffold class.
- Hook, Example, Behavior: type-level metadata objects.

Quick example:
    >>> from argwright import Arg, action, scaffold, Example
    >>> class CopyArgs:
    ...     source: str = Arg(required=True, position=1)
    ...     force: bool
    ...
    >>> @scaffold(examples=[Example("tool copy a.txt -force")])
    ... class Tool:
    ...     verbose: bool = Arg("-v", descr="chatty output")
    ...
    ...     @action
    ...     def copy(self, arguments: CopyArgs): ...

Metadata (sanitized on construction)
- shortcuts: strings matching r"[^\W\d][\w-]*" once the '-', '--' or '/'
  prefix is removed; duplicates rejected.
- descr: Unset | str, non-empty when provided.
- position: Unset | int (>= 0).
- reviver: Unset | callable (token, type) -> value.
"""
import re
from types import MappingProxyType

from .utils import *

_ALIAS = re.compile(r"[^\W\d][\w\-]*")


def _sanitize_shortcuts(typename, shortcuts, /):
    """
    Internal: validate alias spellings and strip their switch prefix.
    """
    names = []
    for shortcut in shortcuts:
        if not isinstance(shortcut, str):
            raise TypeError(f"{typename} shortcuts must be strings")
        elif not (shortcut := strip(shortcut.strip())):
            raise ValueError(f"{typename} shortcuts cannot be empty-strings")
        elif not _ALIAS.fullmatch(shortcut):
            raise ValueError(f"{typename} shortcut {shortcut!r} is not a valid alias (letters, digits, '_' and '-')")
        elif shortcut in names:
            raise ValueError(f"{typename} shortcuts cannot contain duplicates")
        names.append(shortcut)
    return tuple(names)


def _sanitize_descr(typename, descr, /):
    if not isinstance(descr, str | Unset):
        raise TypeError(f"{typename} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{typename} 'descr' cannot be empty")
    return coalesce(descr)


def _sanitize_case(typename, ignore_case, /):
    if not isinstance(ignore_case, bool | Unset):
        raise TypeError(f"{typename} 'ignore_case' must be a boolean")
    return ignore_case


class _Slot:
    """
    Internal descriptor base: a settable member backed by the instance __dict__.

    Reading from the class returns the marker itself; reading from an instance
    returns the assigned value, or the marker default when nothing was assigned.
    """
    default = None

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self.name, self.default)

    def __set__(self, instance, value):
        instance.__dict__[self.name] = value

    def __delete__(self, instance):
        instance.__dict__.pop(self.name, None)


class Arg(_Slot):
    """
    Argument marker.

    Parameters
    - shortcuts: extra aliases ("-s", "--src", "/s" or bare "s"); the member or
      parameter name is always the default alias.
    - type: declared value type; Unset falls back to the annotation, then str.
    - default: value an unmatched optional argument keeps.
    - required: when True, parsing fails with MissingArgumentError if unmatched.
    - position: positional slot (int >= 0) a leading bare token may fill.
    - descr: short description.
    - reviver: explicit reviver (token, type) -> value, bypassing the registry.
    - ignore_case: per-argument case mode; Unset inherits from the definition.
    - shortcut: when False, no short alias is generated automatically.
    - selector: marks the argument that selects the action.
    """

    __introspectable__ = (
        "shortcuts",
        "type",
        "default",
        "required",
        "position",
        "descr",
        "reviver",
        "ignore_case",
        "shortcut",
        "selector",
    )

    def __init__(
            self,
            *shortcuts,
            type=Unset,
            default=None,
            required=False,
            position=Unset,
            descr=Unset,
            reviver=Unset,
            ignore_case=Unset,
            shortcut=True,
            selector=False
    ):
        typename = "argument marker"
        if not isinstance(position, int | Unset) or isinstance(position, bool):
            raise TypeError(f"{typename} 'position' must be an integer")
        elif isinstance(position, int) and position < 0:
            raise ValueError(f"{typename} 'position' must be a non-negative integer")
        if reviver is not Unset and not callable(reviver):
            raise TypeError(f"{typename} 'reviver' must be callable")
        if type is None:
            raise TypeError(f"{typename} 'type' cannot be None")

        self.name = Unset
        self.shortcuts = _sanitize_shortcuts(typename, shortcuts)
        self.type = type
        self.default = default
        self.required = bool(required)
        self.position = coalesce(position)
        self.descr = _sanitize_descr(typename, descr)
        self.reviver = coalesce(reviver)
        self.ignore_case = _sanitize_case(typename, ignore_case)
        self.shortcut = bool(shortcut)
        self.selector = bool(selector)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "arg(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


class Ignored(_Slot):
    """
    Marker for annotated members that must not become arguments.
    """

    def __init__(self, default=None):
        self.name = Unset
        self.default = default

    def __repr__(self):
        return "ignored(default=%r)" % (self.default,)


def ignore(default=None, /):
    """
    Exclude an annotated scaffold member from argument discovery.

        fired: bool = ignore(False)
    """
    return Ignored(default)


class ActionMarker:
    """
    Metadata stored on an @action function under __action__.
    """
    __slots__ = ("shortcuts", "descr", "bundle", "ignore_case")

    def __init__(self, shortcuts, descr, bundle, ignore_case):
        self.shortcuts = shortcuts
        self.descr = descr
        self.bundle = bundle
        self.ignore_case = ignore_case

    def __repr__(self):
        return "action(shortcuts=%r, descr=%r, bundle=%r, ignore_case=%r)" % (
            self.shortcuts, self.descr, self.bundle, self.ignore_case
        )


def action(source=Unset, /, *shortcuts, descr=Unset, bundle=Unset, ignore_case=Unset):
    """
    Mark a function as an action handler.

    Usage
    - Bare:          @action
    - With metadata: @action("c1", descr="copy files", bundle=CopyArgs)

    The decorated object is returned unchanged apart from an __action__
    attribute; staticmethod/classmethod wrappers are accepted and the marker
    is attached to the wrapped function.
    """
    if isinstance(source, str):
        shortcuts = (source, *shortcuts)
        source = Unset

    typename = "action marker"
    if not isinstance(bundle, type | Unset):
        raise TypeError(f"{typename} 'bundle' must be a class")
    marker = ActionMarker(
        _sanitize_shortcuts(typename, shortcuts),
        _sanitize_descr(typename, descr),
        coalesce(bundle),
        _sanitize_case(typename, ignore_case),
    )

    @rename("action")
    def wrapper(function, /):
        target = getattr(function, "__func__", function)
        if not callable(target):
            raise TypeError("@action() must be applied to a callable")
        if hasattr(target, "__action__"):
            raise TypeError("@action() must be applied only once")
        target.__action__ = marker
        return function

    return wrapper(source) if source is not Unset else wrapper


class Hook:
    """
    Type-level hook. Subclass and override any of the stages; each receives the
    engine's HookContext.

    Stages (in order)
    - before_parse: tokens are known, nothing is matched yet.
    - after_populate: the scaffold instance is populated and published.
    - before_invoke: the handler is about to run (invoke only).
    - after_invoke: the handler returned (invoke only).
    """

    def before_parse(self, context):
        pass

    def after_populate(self, context):
        pass

    def before_invoke(self, context):
        pass

    def after_invoke(self, context):
        pass


class Example:
    """
    A usage example attached to a scaffold.
    """
    __slots__ = ("example", "descr")

    def __init__(self, example, /, descr=Unset):
        if not isinstance(example, str):
            raise TypeError("example must be a string")
        elif not (example := example.strip()):
            raise ValueError("example cannot be empty")
        self.example = example
        self.descr = _sanitize_descr("example", descr)

    def __repr__(self):
        return "example(%r, descr=%r)" % (self.example, self.descr)


class Behavior:
    """
    Exception behavior policy.

    - policy "throw" (default): faults and handler exceptions propagate.
    - policy "report": faults and handler exceptions are rendered to stderr
      and the engine returns a cancelled outcome.
    - fancy / colorful: rich rendering options used by "report".
    """
    __slots__ = ("policy", "fancy", "colorful")

    POLICIES = ("throw", "report")

    def __init__(self, policy="throw", /, *, fancy=False, colorful=False):
        if policy not in self.POLICIES:
            raise ValueError("behavior policy must be one of %s" % ", ".join(map(repr, self.POLICIES)))
        self.policy = policy
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

    @property
    def reports(self):
        return self.policy == "report"

    def __repr__(self):
        return "behavior(%r, fancy=%r, colorful=%r)" % (self.policy, self.fancy, self.colorful)


class ScaffoldMarker:
    """
    Metadata stored on a @scaffold class under __scaffold__.
    """
    __slots__ = ("actions", "metadata", "ignore_case")

    def __init__(self, actions, metadata, ignore_case):
        self.actions = actions
        self.metadata = metadata
        self.ignore_case = ignore_case


def scaffold(source=Unset, /, *, actions=Unset, hooks=(), examples=(), behavior=Unset, ignore_case=True, metadata=()):
    """
    Attach type-level metadata to a scaffold class.

    Parameters
    - actions: deferred action type whose @action static functions become actions.
    - hooks: Hook instances.
    - examples: Example instances or plain strings.
    - behavior: Behavior (defaults to Behavior("throw")).
    - ignore_case: definition-wide case mode.
    - metadata: any other objects to carry verbatim.
    """
    typename = "scaffold"
    if not isinstance(actions, type | Unset):
        raise TypeError(f"{typename} 'actions' must be a class")
    if not isinstance(behavior, Behavior | Unset):
        raise TypeError(f"{typename} 'behavior' must be a behavior")
    if not isinstance(ignore_case, bool):
        raise TypeError(f"{typename} 'ignore_case' must be a boolean")

    sanitized = []
    for hook in hooks:
        if not isinstance(hook, Hook):
            raise TypeError(f"{typename} 'hooks' must be an iterable of hooks")
        sanitized.append(hook)
    for example in examples:
        sanitized.append(Example(example) if isinstance(example, str) else example)
        if not isinstance(sanitized[-1], Example):
            raise TypeError(f"{typename} 'examples' must be an iterable of examples")
    sanitized.append(coalesce(behavior, Behavior()))
    sanitized.extend(metadata)

    marker = ScaffoldMarker(coalesce(actions), tuple(sanitized), ignore_case)

    @rename("scaffold")
    def wrapper(cls, /):
        if not isinstance(cls, type):
            raise TypeError("@scaffold() must be applied to a class")
        cls.__scaffold__ = marker
        return cls

    return wrapper(source) if source is not Unset else wrapper


def describe(cls, /):
    """
    Return the scaffold metadata of a class as a read-only mapping.
    """
    marker = getattr(cls, "__scaffold__", None)
    if marker is None:
        return MappingProxyType({"actions": None, "metadata": (Behavior(),), "ignore_case": True})
    return MappingProxyType({"actions": marker.actions, "metadata": marker.metadata, "ignore_case": marker.ignore_case})


__all__ = (
    "Arg",
    "Ignored",
    "ignore",
    "ActionMarker",
    "action",
    "Hook",
    "Example",
    "Behavior",
    "ScaffoldMarker",
    "scaffold",
    "describe",
)
