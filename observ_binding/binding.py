"""
A binding presents one observable key/value object as a single reactive
unit: reads register a dependency for the running computation, changes
to the object (through the binding or elsewhere) invalidate it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Optional

from .observables import (
    NotObservableError,
    is_observable,
    subscribe,
    unsubscribe,
)
from .tracking import Tracker, current_tracker

logger = logging.getLogger(__name__)

__all__ = (
    "BindingClosedError",
    "InvalidArgumentCountError",
    "NoBoundObjectError",
    "NotObservableError",
    "ReactiveBinding",
)

_MISSING = object()


class InvalidArgumentCountError(TypeError):
    """
    Raised when `set` is called with a number of arguments other than 1 or 2.
    """

    pass


class NoBoundObjectError(RuntimeError):
    """
    Raised when writing a key while no object is bound.
    """

    pass


class BindingClosedError(RuntimeError):
    """
    Raised when modifying a binding that has been closed.
    """

    pass


class ReactiveBinding:
    """
    Reactive handle on zero or one observable key/value object.

    Reads register a dependency when a computation is running. Binding
    an object, writing or deleting a key through the binding, and any
    change reported by the bound object invalidate that dependency.

    The bound object stays subscribed until another object is bound or
    the binding is closed, so use it as a context manager when it should
    not outlive a scope.
    """

    __slots__ = (
        "__weakref__",
        "_closed",
        "_dependency",
        "_listener",
        "_muted",
        "_object",
        "_tracker",
    )

    def __init__(self, obj: Any = None, *, tracker: Optional[Tracker] = None):
        """
        obj: Observable object to bind, or None to start unbound
        tracker: Tracker to use, defaults to the current tracker
        """
        self._tracker = tracker if tracker is not None else current_tracker()
        self._dependency = self._tracker.dependency()
        self._object = None
        self._closed = False
        self._muted = False

        dependency = self._dependency

        # reads _muted through self, so a subscribed object keeps the
        # whole binding alive until it is rebound or closed
        def listener(*_):
            if not self._muted:
                dependency.changed()

        self._listener = listener

        if obj is not None:
            self.bind(obj)

    def __repr__(self) -> str:
        if self._closed:
            return "<ReactiveBinding closed>"
        if self._object is None:
            return "<ReactiveBinding unbound>"
        return f"<ReactiveBinding {self._object!r}>"

    def __enter__(self) -> ReactiveBinding:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _track(self) -> None:
        if self._tracker.active:
            self._dependency.depend()

    @contextmanager
    def _own_write(self):
        """
        Ignores change notifications caused by the binding itself, so
        that each write invalidates exactly once.
        """
        self._muted = True
        try:
            yield
        finally:
            self._muted = False

    def _contains(self, key: Any) -> bool:
        try:
            return key in self._object
        except TypeError:
            return False

    def _check_open(self) -> None:
        if self._closed:
            raise BindingClosedError("binding is closed")

    def get(self, key: Any = _MISSING, default: Any = None) -> Any:
        """
        Returns the bound object when no key is given, otherwise
        the value for the key (or default when missing or unbound).
        """
        self._track()
        if key is _MISSING:
            return self._object
        if self._object is None:
            return default
        try:
            return self._object.get(key, default)
        except TypeError:
            # unhashable keys can't be present
            return default

    def has(self, key: Any) -> bool:
        self._track()
        if self._object is None:
            return False
        return self._contains(key)

    def keys(self) -> list:
        self._track()
        if self._object is None:
            return []
        return list(self._object.keys())

    def values(self) -> list:
        self._track()
        if self._object is None:
            return []
        return list(self._object.values())

    def entries(self) -> list[tuple]:
        self._track()
        if self._object is None:
            return []
        return [(key, value) for key, value in self._object.items()]

    def bind(self, obj: Any) -> None:
        """
        Replaces the bound object. Binding always counts as a change,
        also when binding None or the same object again.
        """
        self._check_open()
        if obj is not None and not is_observable(obj):
            raise NotObservableError(
                f"given {type(obj).__name__!r} object is not observable"
            )

        if self._object is not None:
            unsubscribe(self._object, self._listener)
        self._object = obj
        if obj is not None:
            subscribe(obj, self._listener)
            logger.debug("Bound %r", obj)
        else:
            logger.debug("Unbound")

        self._dependency.changed()

    def set_property(self, key: Any, value: Any) -> None:
        """
        Assigns a value to a key of the bound object.
        """
        self._check_open()
        if self._object is None:
            raise NoBoundObjectError("no object bound")

        with self._own_write():
            self._object[key] = value
        self._dependency.changed()

    def set(self, *args: Any) -> None:
        """
        set(obj) binds a whole object, set(key, value) assigns a key
        """
        if len(args) == 1:
            self.bind(args[0])
        elif len(args) == 2:
            self.set_property(*args)
        else:
            raise InvalidArgumentCountError("1 or 2 arguments must be given")

    def delete(self, key: Any) -> None:
        """
        Removes the key from the bound object. Missing keys are ignored.
        """
        if self._object is None or not self._contains(key):
            return

        with self._own_write():
            del self._object[key]
        self._dependency.changed()

    def close(self) -> None:
        """
        Releases the bound object and makes the binding inert.
        """
        if self._closed:
            return

        # closed before invalidating, computations that run
        # synchronously on the change can't bind again
        self._closed = True
        obj, self._object = self._object, None
        if obj is not None:
            unsubscribe(obj, self._listener)
            self._dependency.changed()
        logger.debug("Closed binding")
