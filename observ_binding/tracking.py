"""
Trackers connect bindings to a dependency-tracking runtime.

A tracker answers whether a computation is currently being evaluated
and hands out dependency handles. The default tracker is backed by
observ, so reads through a binding participate in observ's computed
expressions and watchers.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Protocol

from observ.dep import Dep


class Dependency(Protocol):
    def depend(self) -> None: ...

    def changed(self) -> None: ...


class Tracker(Protocol):
    @property
    def active(self) -> bool: ...

    def dependency(self) -> Dependency: ...


class ObservDependency:
    __slots__ = ("dep",)

    def __init__(self) -> None:
        self.dep = Dep()

    def depend(self) -> None:
        self.dep.depend()

    def changed(self) -> None:
        # lazy watchers are marked dirty, the others are
        # run (sync) or queued on the scheduler
        self.dep.notify()


class ObservTracker:
    """
    Tracker for observ's watchers: a computation is active whenever
    a watcher is evaluating its expression.
    """

    __slots__ = ()

    @property
    def active(self) -> bool:
        return bool(Dep.stack)

    def dependency(self) -> ObservDependency:
        return ObservDependency()


default_tracker = ObservTracker()

_current_tracker: ContextVar[Tracker] = ContextVar("current_tracker")


def current_tracker() -> Tracker:
    """
    Returns the tracker in effect for the current thread or task.
    """
    return _current_tracker.get(default_tracker)


@contextmanager
def use_tracker(tracker: Tracker) -> Iterator[Tracker]:
    """
    Makes the given tracker current for bindings created in this block.
    """
    token = _current_tracker.set(tracker)
    try:
        yield tracker
    finally:
        _current_tracker.reset(token)
