import gc

import pytest

from observ import scheduler
from observ.proxy import proxy_db

from observ_binding import observables


def noop():
    pass


class RecordingDependency:
    def __init__(self):
        self.depend_count = 0
        self.changed_count = 0

    def depend(self):
        self.depend_count += 1

    def changed(self):
        self.changed_count += 1


class RecordingTracker:
    """
    Tracker that records calls instead of tracking anything. Flip
    `active` to pretend a computation is running.
    """

    def __init__(self):
        self.active = False
        self.dependencies = []

    def dependency(self):
        dependency = RecordingDependency()
        self.dependencies.append(dependency)
        return dependency


@pytest.fixture
def tracker():
    return RecordingTracker()


@pytest.fixture
def noop_request_flush():
    old_callback = scheduler.request_flush
    scheduler.register_request_flush(noop)
    try:
        yield
    finally:
        scheduler.register_request_flush(old_callback)


@pytest.fixture(autouse=True)
def clear():
    try:
        yield
    finally:
        scheduler.clear()
        observables._proxy_watchers.clear()


@pytest.fixture(autouse=True)
def clear_proxy_db():
    # Running gc at the beginning should clear the proxy_db,
    # but failing tests may keep proxies alive, so reset it as well
    gc.collect()
    proxy_db.db = {}
