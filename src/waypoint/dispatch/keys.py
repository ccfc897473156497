"""Key variants understood by the Dispatcher.

A key is any hashable value. Two wrappers make the special cases explicit:

- ``Computed(fn)`` — a key worked out at dispatch time by calling ``fn``
  with the dispatch arguments.
- ``AUTO`` — "give me the next anonymous slot" at registration time.

``DefaultPolicy`` replaces a magic sentinel for the Dispatcher's global
default key.
"""

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Computed:
    """A key computed from the dispatch arguments.

    ``fn`` receives the same positional arguments the dispatched handler
    will receive and returns the real key, or ``None`` for "no key".
    It may be impure: resolving the same ``Computed`` twice can give two
    different keys.
    """

    fn: Callable[..., Any]

    def __call__(self, *args: Any) -> Any:
        return self.fn(*args)


class _Auto:
    """Marker for the next anonymous registration slot."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "AUTO"


AUTO = _Auto()


class DefaultMode(Enum):
    NONE = "none"
    FIXED = "fixed"
    AUTO_FIRST = "auto_first"


@dataclass(frozen=True, slots=True)
class DefaultPolicy:
    """How a Dispatcher chooses its global default key.

    ``none()`` has no default, ``fixed(key)`` always uses ``key``, and
    ``auto_first()`` binds to whichever key is registered first.
    """

    mode: DefaultMode = DefaultMode.NONE
    key: Hashable = None

    @classmethod
    def none(cls) -> "DefaultPolicy":
        return cls()

    @classmethod
    def fixed(cls, key: Hashable) -> "DefaultPolicy":
        return cls(DefaultMode.FIXED, key)

    @classmethod
    def auto_first(cls) -> "DefaultPolicy":
        return cls(DefaultMode.AUTO_FIRST)
