"""
PySide6 example that shows how to use a binding
in combination with Qt.

Two counters exist as reactive state. The display reads the
counter through a binding and updates its label whenever the
bound counter changes, or when the controls bind the other one.
"""

import asyncio

from PySide6 import QtAsyncio
from PySide6.QtWidgets import (
    QApplication,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from observ import reactive, scheduler, watch
from observ_binding import ReactiveBinding


class Display(QWidget):
    def __init__(self, binding, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.binding = binding

        self.label = QLabel()
        layout = QVBoxLayout()
        layout.addWidget(self.label)
        self.setLayout(layout)

        def label_text():
            if not binding.has("clicked"):
                return "Nothing bound"
            name = binding.get("name")
            if binding.get("clicked") == 0:
                return f"Please click the button below ({name})"
            return f"{name}: clicked {binding.get('clicked')} times!"

        self.watcher = watch(label_text, self.label.setText, immediate=True)


class Controls(QWidget):
    def __init__(self, binding, counters, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.binding = binding
        self.counters = counters

        self.button = QPushButton("Click")
        self.switch = QPushButton("Switch counter")
        self.reset = QPushButton("Reset")

        layout = QVBoxLayout()
        layout.addWidget(self.button)
        layout.addWidget(self.switch)
        layout.addWidget(self.reset)
        self.setLayout(layout)

        self.button.clicked.connect(self.on_button_clicked)
        self.switch.clicked.connect(self.on_switch_clicked)
        self.reset.clicked.connect(self.on_reset_clicked)

    def on_button_clicked(self):
        self.binding.set_property("clicked", self.binding.get("clicked") + 1)

    def on_switch_clicked(self):
        current = self.counters.index(self.binding.get())
        self.binding.bind(self.counters[(current + 1) % len(self.counters)])

    def on_reset_clicked(self):
        self.binding.set_property("clicked", 0)


if __name__ == "__main__":
    counters = [
        reactive({"name": "First", "clicked": 0}),
        reactive({"name": "Second", "clicked": 0}),
    ]
    binding = ReactiveBinding(counters[0])

    app = QApplication([])

    asyncio.set_event_loop_policy(QtAsyncio.QAsyncioEventLoopPolicy())
    scheduler.register_asyncio()

    layout = QVBoxLayout()
    layout.addWidget(Display(binding))
    layout.addWidget(Controls(binding, counters))

    widget = QWidget()
    widget.setLayout(layout)
    widget.show()
    widget.setWindowTitle("Clicked?")

    try:
        app.exec()
    finally:
        binding.close()
