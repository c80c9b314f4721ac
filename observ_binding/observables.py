"""
Observables are key/value objects that report changes to listeners.

Two kinds of objects qualify: anything that implements the `Observable`
protocol (such as `ObservableDict`) and observ's reactive dict proxies,
for which a synchronous deep watcher is installed per listener.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from observ import watch
from observ.dict_proxy import DictProxyBase
from observ.watcher import Watcher

logger = logging.getLogger(__name__)

KT = TypeVar("KT")
VT = TypeVar("VT")

Listener = Callable[[], Any]


class NotObservableError(TypeError):
    """
    Raised when an object can't report its changes to listeners.
    """

    pass


@runtime_checkable
class Observable(Protocol):
    def subscribe(self, listener: Listener) -> None: ...

    def unsubscribe(self, listener: Listener) -> None: ...


class ObservableDict(MutableMapping[KT, VT]):
    """
    Dict that calls its listeners after every mutation.

    Only the abstract methods of MutableMapping are implemented, so
    update, pop, popitem, clear and setdefault all notify through
    __setitem__ and __delitem__.
    """

    __slots__ = ("_data", "_listeners")

    def __init__(self, data=None, **kwargs) -> None:
        self._data: dict[KT, VT] = {}
        self._listeners: list[Listener] = []
        if data is not None:
            self._data.update(data)
        self._data.update(kwargs)

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        # copy, listeners are allowed to unsubscribe while being notified
        for listener in list(self._listeners):
            listener()

    def __getitem__(self, key: KT) -> VT:
        return self._data[key]

    def __setitem__(self, key: KT, value: VT) -> None:
        self._data[key] = value
        self._notify()

    def __delitem__(self, key: KT) -> None:
        del self._data[key]
        self._notify()

    def __iter__(self) -> Iterator[KT]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"ObservableDict({self._data!r})"


# Subscriptions on observ proxies, keyed on the id of the proxy.
# Each watcher expression references its proxy, so an id can't be
# reused while the proxy still has subscriptions.
_proxy_watchers: dict[int, dict[Listener, Watcher]] = {}


def is_observable(obj: Any) -> bool:
    """
    Returns whether the given object can be bound: a mapping that
    reports its changes to listeners.
    """
    if isinstance(obj, DictProxyBase):
        return True
    return isinstance(obj, Mapping) and isinstance(obj, Observable)


def subscribe(obj: Any, listener: Listener) -> None:
    """
    Subscribes the listener to changes of the given object.
    Subscribing the same listener twice has no effect.
    """
    if isinstance(obj, DictProxyBase):
        watchers = _proxy_watchers.setdefault(id(obj), {})
        if listener in watchers:
            return
        watchers[listener] = watch(obj, lambda _new: listener(), sync=True, deep=True)
        logger.debug("Watching proxy %#x for %r", id(obj), listener)
    elif isinstance(obj, Observable):
        obj.subscribe(listener)
    else:
        raise NotObservableError(f"{type(obj).__name__!r} object is not observable")


def unsubscribe(obj: Any, listener: Listener) -> None:
    """
    Unsubscribes the listener from the given object. Unknown
    listeners are ignored.
    """
    if isinstance(obj, DictProxyBase):
        watchers = _proxy_watchers.get(id(obj))
        if not watchers or listener not in watchers:
            return
        watcher = watchers.pop(listener)
        # the deps only hold weak references to the watcher, but
        # make sure it stays silent in case someone else keeps it alive
        watcher.callback = None
        if not watchers:
            del _proxy_watchers[id(obj)]
        logger.debug("Stopped watching proxy %#x for %r", id(obj), listener)
    elif isinstance(obj, Observable):
        obj.unsubscribe(listener)
