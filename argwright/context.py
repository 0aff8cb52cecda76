"""
Argwright ambient context.

A process-wide slot per scaffold class holding the most recently populated
instance. The engine withdraws the slot when a parse of the class starts and
publishes the fresh instance once it is populated, before any handler runs,
so a handler can reach global arguments without them being passed in.

The slot is not synchronized: concurrent parses of the same class race on it.
Handlers that need a race-free view declare a keyword-only parameter and
receive the instance explicitly.
"""
import logging

logger = logging.getLogger(__name__)

_slots = {}


def publish(cls, instance, /):
    """
    Make instance the current ambient instance of cls.
    """
    if not isinstance(cls, type):
        raise TypeError("publish() first argument must be a class")
    if not isinstance(instance, cls):
        raise TypeError("publish() second argument must be an instance of %s" % cls.__name__)
    _slots[cls] = instance
    logger.debug("published ambient %s", cls.__name__)


def ambient(cls, /):
    """
    Return the current ambient instance of cls, or None when nothing is published.
    """
    if not isinstance(cls, type):
        raise TypeError("ambient() argument must be a class")
    return _slots.get(cls)


def withdraw(cls, /):
    """
    Remove and return the ambient instance of cls (None when nothing is published).
    """
    if not isinstance(cls, type):
        raise TypeError("withdraw() argument must be a class")
    return _slots.pop(cls, None)


__all__ = (
    "publish",
    "ambient",
    "withdraw",
)
