import asyncio
import os

import pytest

from observ import reactive, scheduler, watch

from observ_binding import ReactiveBinding

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PySide6 import QtAsyncio, QtWidgets
    import pytestqt  # noqa: F401

    has_qt = True
except ImportError:
    has_qt = False
qt_missing_reason = "Qt is not installed"


@pytest.fixture
def qtasyncio():
    old_policy = asyncio.get_event_loop_policy()
    qt_policy = QtAsyncio.QAsyncioEventLoopPolicy(quit_qapp=False)
    asyncio.set_event_loop_policy(qt_policy)
    old_callback = scheduler.request_flush
    scheduler.register_asyncio()
    try:
        yield
    finally:
        asyncio.set_event_loop_policy(old_policy)
        scheduler.register_request_flush(old_callback)


@pytest.mark.skipif(not has_qt, reason=qt_missing_reason)
def test_scheduler_pyside_asyncio(qtasyncio, qapp):
    """
    Test that changes through a binding are queued on the Qt event loop
    """
    binding = ReactiveBinding(reactive({"foo": 5}))
    calls = 0

    def cb(new, old):
        nonlocal calls
        calls += 1

    watcher = watch(lambda: binding.get("foo"), cb)  # noqa: F841

    binding.set_property("foo", 6)

    assert len(scheduler._queue) == 1
    assert calls == 0

    scheduler.flush()

    assert len(scheduler._queue) == 0
    assert calls == 1


@pytest.mark.skipif(not has_qt, reason=qt_missing_reason)
def test_qt_integration(qapp):
    class Label(QtWidgets.QLabel):
        def __init__(self, binding):
            super().__init__()
            self.binding = binding
            self.watcher = watch(self.display, self.setText, sync=True)
            self.setText(self.watcher.value)

        def display(self):
            if not self.binding.has("name"):
                return "Nobody"
            return f"Hello {self.binding.get('name')}"

    first = reactive({"name": "Ada"})
    second = reactive({"name": "Grace"})
    binding = ReactiveBinding(first)
    label = Label(binding)

    assert label.text() == "Hello Ada"

    first["name"] = "Ada Lovelace"
    assert label.text() == "Hello Ada Lovelace"

    binding.bind(second)
    assert label.text() == "Hello Grace"

    binding.delete("name")
    assert label.text() == "Nobody"

    binding.close()
