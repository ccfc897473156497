"""Ordered key → handler registry with fallback-aware dispatch strategies.

Handlers are registered during a build phase and dispatched to during a
serve phase. The registry is not mutated while serving, so any number of
dispatch calls may run concurrently.

Every strategy shares the same fallback chain for a key that is not
registered: the explicit ``default_key`` argument first, then the
Dispatcher's global default key, then ``UndispatchableError``.
"""

import logging
from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from typing import Any

from waypoint.dispatch import resolution
from waypoint.dispatch.handle import DispatchHandle
from waypoint.dispatch.keys import AUTO, DefaultMode, DefaultPolicy
from waypoint.errors import UndispatchableError

logger = logging.getLogger("waypoint.dispatch")


class _AllKeys:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ALL"


# return_keys value meaning "the full key → result map"
ALL = _AllKeys()

_MISSING = object()


class Dispatcher:
    """Acts as a key → callable store and calls callables by key.

    Usage::

        methods = Dispatcher({"GET": show, "POST": create})
        methods.dispatch_to_key("GET", [request])

        formats = Dispatcher(default=DefaultPolicy.fixed("text/html"))
        formats.register("text/html", render_html)
        formats.register("application/json", render_json)
        formats.dispatch_to_first(request.accepted_content_types, [request])

    Keys are any hashable value except ``None``, which always means "no
    key". Insertion order is kept and decides which key is "first".
    """

    __slots__ = ("_default_key", "_map", "_policy")

    def __init__(
        self,
        mapping: Mapping[Hashable, Callable[..., Any]] | None = None,
        default: DefaultPolicy | None = None,
    ) -> None:
        self._map: dict[Hashable, Callable[..., Any]] = dict(mapping) if mapping else {}
        self._policy = default or DefaultPolicy.none()
        self._default_key: Hashable = None

        if self._policy.mode is DefaultMode.FIXED:
            self._default_key = self._policy.key
        elif self._policy.mode is DefaultMode.AUTO_FIRST and self._map:
            self._default_key = next(iter(self._map))

    # -- Registration --

    def register(self, key: Any, handler: Any = _MISSING) -> Hashable:
        """Register *handler* under *key* and return the key used.

        ``register(handler)``, ``register(None, handler)`` and
        ``register(AUTO, handler)`` all take the next anonymous integer
        slot. Registering an existing key replaces its handler but keeps
        its position.
        """
        if handler is _MISSING:
            key, handler = AUTO, key
        if key is None or key is AUTO:
            key = self._next_slot()

        if self._policy.mode is DefaultMode.AUTO_FIRST and not self._map:
            self._default_key = key

        self._map[key] = handler
        return key

    def _next_slot(self) -> int:
        slots = [k for k in self._map if isinstance(k, int) and not isinstance(k, bool)]
        return max(slots) + 1 if slots else 0

    # -- Introspection --

    @property
    def default_key(self) -> Hashable:
        """The global default key, or ``None`` if there is none (yet)."""
        return self._default_key

    @property
    def is_empty(self) -> bool:
        return not self._map

    def keys(self) -> list[Hashable]:
        """All registered keys, in registration order."""
        return list(self._map)

    def values(self, keys: Iterable[Hashable] | None = None) -> list[Callable[..., Any]]:
        """Registered callables, for all keys or just *keys*.

        Keys in *keys* that are not registered are ignored.
        """
        if keys is None:
            return list(self._map.values())
        return [self._map[key] for key in keys if self._registered(key)]

    def mapping(self, keys: Iterable[Hashable] | None = None) -> dict[Hashable, Callable[..., Any]]:
        """A copy of the key → callable map, for all keys or just *keys*."""
        if keys is None:
            return dict(self._map)
        return {key: self._map[key] for key in keys if self._registered(key)}

    def __contains__(self, key: object) -> bool:
        return self._registered(key)

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"Dispatcher(keys={self.keys()!r}, default_key={self._default_key!r})"

    # -- Key resolution --

    def resolve(self, key: Any, mutators: Sequence[resolution.Mutator] | resolution.Mutator | None) -> Any:
        """Return the real key (or keys) for *key* after applying *mutators*.

        The result may or may not be registered here. See
        ``waypoint.dispatch.resolution`` for the mutators themselves.
        """
        return resolution.resolve(key, mutators)

    def computed_key_mutator(self, args: Sequence[Any] = ()) -> resolution.Mutator:
        return resolution.call_if_computed(args)

    def registered_matching_mutator(self) -> resolution.Mutator:
        return resolution.registered_matching(self.keys)

    def matching_registered_mutator(self) -> resolution.Mutator:
        return resolution.matching_registered(self.keys)

    def first_or_default_mutator(self, default: Any) -> resolution.Mutator:
        return resolution.first_or_default(default)

    def _real_key(self, key: Any, args: Sequence[Any]) -> Any:
        return self.resolve(key, self.computed_key_mutator(args))

    def _registered(self, key: object) -> bool:
        if key is None:
            return False
        try:
            return key in self._map
        except TypeError:
            return False

    # -- Dispatch --

    def is_dispatchable(self, key: Any, args: Sequence[Any] = ()) -> bool:
        """Whether *key* (called with *args* if computed) is registered."""
        return self._registered(self._real_key(key, args))

    def _first_handler(
        self,
        keys: Iterable[Any],
        args: Sequence[Any],
        default_key: Any,
    ) -> Callable[..., Any]:
        for key in keys:
            real_key = self._real_key(key, args)
            if self._registered(real_key):
                return self._map[real_key]

        for fallback in (default_key, self._default_key):
            real_key = self._real_key(fallback, args)
            if self._registered(real_key):
                logger.debug("Falling back to default key %r", real_key)
                return self._map[real_key]

        msg = "No requested key is dispatchable, and neither default key is dispatchable"
        raise UndispatchableError(msg)

    def lookup(self, key: Any, args: Sequence[Any] = (), default_key: Any = None) -> Callable[..., Any]:
        """Return the callable ``dispatch_to_key`` would invoke, without invoking it.

        Raises ``UndispatchableError`` under the same conditions.
        """
        return self._first_handler([key], args, default_key)

    def lookup_first(
        self,
        keys: Iterable[Any] | None = None,
        args: Sequence[Any] = (),
        default_key: Any = None,
    ) -> Callable[..., Any]:
        """Return the callable ``dispatch_to_first`` would invoke, without invoking it."""
        if keys is None:
            keys = self.keys()
        return self._first_handler(keys, args, default_key)

    def dispatch_to_key(self, key: Any, args: Sequence[Any] = (), default_key: Any = None) -> Any:
        """Dispatch to *key* with *args* and return the handler's result.

        If *key* is a ``Computed`` it is called with *args* to get the real
        key. If the real key is not registered, *default_key* is tried,
        then the global default key.

        Raises ``UndispatchableError`` if none of them are dispatchable.
        """
        return self.dispatch_to_first([key], args, default_key)

    def dispatch_to_first(
        self,
        keys: Iterable[Any] | None = None,
        args: Sequence[Any] = (),
        default_key: Any = None,
    ) -> Any:
        """Dispatch to the first dispatchable key of *keys*.

        *keys* defaults to every registered key in registration order.
        Keys that resolve to ``None`` are skipped. Falls back to the
        defaults as ``dispatch_to_key`` does.
        """
        handler = self.lookup_first(keys, args, default_key)
        return handler(*args)

    def dispatch_to_all(
        self,
        keys: Iterable[Any] | None = None,
        args: Sequence[Any] = (),
        default_key: Any = None,
        return_keys: Any = ALL,
    ) -> Any:
        """Dispatch to every key of *keys* in turn and collect the results.

        Each key goes through the ``dispatch_to_key`` fallback chain, so a
        missing key only fails if both defaults fail too. *return_keys*
        selects what comes back:

        - ``ALL`` (default): the full ``{key: result}`` map.
        - a list, set or frozenset: the map narrowed to those keys.
        - any other value: that single key's result, or ``None`` if the key
          was not dispatched.
        """
        if keys is None:
            keys = self.keys()

        results: dict[Any, Any] = {}
        for key in keys:
            results[key] = self.dispatch_to_key(key, args, default_key)

        if return_keys is ALL:
            return results
        if isinstance(return_keys, list | set | frozenset):
            return {key: value for key, value in results.items() if key in return_keys}
        return results.get(return_keys)

    def dispatch_to_pipe(
        self,
        keys: Iterable[Any] | None = None,
        args: Sequence[Any] = (),
        default_key: Any = None,
    ) -> Any:
        """Dispatch to each key in turn, feeding each result to the next call.

        The first key gets *args*. A ``list`` result is spread as the next
        call's positional arguments; any other result (tuples included) is
        passed as the only argument. To pass a list through whole, return
        it wrapped in another list. Returns the last result, or ``None`` if
        there are no keys.
        """
        keys = self.keys() if keys is None else list(keys)
        if not keys:
            return None

        result = self.dispatch_to_key(keys[0], args, default_key)
        for key in keys[1:]:
            next_args = result if isinstance(result, list) else [result]
            result = self.dispatch_to_key(key, next_args, default_key)
        return result

    # -- Handle generators --

    def _delegate_for(self, delegate_key: Any) -> Any:
        real_key = self._real_key(delegate_key, ())
        if real_key is None:
            return None
        if not self._registered(real_key):
            msg = "Key of delegate object must exist in dispatcher"
            raise UndispatchableError(msg)
        return self._map[real_key]

    def handler_for_key(self, key: Any, default_key: Any = None, delegate_key: Any = None) -> DispatchHandle:
        """Return a handle that calls ``dispatch_to_key(key, args, default_key)``.

        If *delegate_key* is given, the object registered under it is
        exposed as ``handle.delegate``.

        Raises ``UndispatchableError`` if *delegate_key* is given but not
        dispatchable.
        """
        return DispatchHandle(
            lambda *args: self.dispatch_to_key(key, args, default_key),
            self._delegate_for(delegate_key),
        )

    def handler_for_first(
        self,
        keys: Iterable[Any] | None = None,
        default_key: Any = None,
        delegate_key: Any = None,
    ) -> DispatchHandle:
        """Return a handle that calls ``dispatch_to_first``. See ``handler_for_key``."""
        if keys is not None:
            keys = list(keys)
        return DispatchHandle(
            lambda *args: self.dispatch_to_first(keys, args, default_key),
            self._delegate_for(delegate_key),
        )

    def handler_for_all(
        self,
        keys: Iterable[Any] | None = None,
        default_key: Any = None,
        return_keys: Any = ALL,
        delegate_key: Any = None,
    ) -> DispatchHandle:
        """Return a handle that calls ``dispatch_to_all``. See ``handler_for_key``."""
        if keys is not None:
            keys = list(keys)
        return DispatchHandle(
            lambda *args: self.dispatch_to_all(keys, args, default_key, return_keys),
            self._delegate_for(delegate_key),
        )

    def handler_for_pipe(
        self,
        keys: Iterable[Any] | None = None,
        default_key: Any = None,
        delegate_key: Any = None,
    ) -> DispatchHandle:
        """Return a handle that calls ``dispatch_to_pipe``. See ``handler_for_key``."""
        if keys is not None:
            keys = list(keys)
        return DispatchHandle(
            lambda *args: self.dispatch_to_pipe(keys, args, default_key),
            self._delegate_for(delegate_key),
        )


def first_successful(*fns: Callable[..., Any]) -> Callable[..., Any]:
    """Combine *fns* into one callable that returns the first result not to raise.

    Raises ``UndispatchableError`` (chained to the last failure) if every
    function raises.
    """

    def call(*args: Any) -> Any:
        last_exc: Exception | None = None
        for fn in fns:
            try:
                return fn(*args)
            except Exception as exc:
                last_exc = exc
        msg = "No function in the list was successful"
        raise UndispatchableError(msg) from last_exc

    return call
