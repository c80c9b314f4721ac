from importlib.metadata import version

__version__ = version("observ-binding")


from .binding import (
    BindingClosedError,
    InvalidArgumentCountError,
    NoBoundObjectError,
    NotObservableError,
    ReactiveBinding,
)
from .observables import (
    Observable,
    ObservableDict,
    is_observable,
    subscribe,
    unsubscribe,
)
from .tracking import (
    Dependency,
    ObservTracker,
    Tracker,
    current_tracker,
    default_tracker,
    use_tracker,
)
