"""Reusable dispatch handles returned by ``Dispatcher.handler_for_*``."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class DispatchHandle:
    """A callable bound to one dispatch strategy, plus an optional delegate.

    ``invoke`` (or calling the handle directly) runs the strategy. The
    ``delegate`` is the object registered under the handle's delegate key,
    for callers that need that object's other behaviour::

        handle = methods.handler_for_key(Computed(lambda r: r.method), delegate_key="GET")
        response = handle(request)
        handle.delegate.describe()
    """

    target: Callable[..., Any]
    delegate: Any = None

    def invoke(self, *args: Any) -> Any:
        return self.target(*args)

    def __call__(self, *args: Any) -> Any:
        return self.target(*args)
