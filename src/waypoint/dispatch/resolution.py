"""Key resolution — composable key mutators.

A mutator takes a candidate key (or a list of keys) and returns the next
one. ``resolve`` folds a key through a list of mutators, left to right::

    resolve(Computed(lambda req: req.method), [call_if_computed([request])])
    resolve("/api/.*", [registered_matching(d.keys), first_or_default(None)])

Mutators are not required to be pure, so resolving the same nominal key
twice may yield two different real keys.
"""

import functools
import re
from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import Any

from waypoint.dispatch.keys import Computed

type Mutator = Callable[[Any], Any]
type KeySource = Callable[[], Iterable[Hashable]]


def resolve(key: Any, mutators: Sequence[Mutator] | Mutator | None) -> Any:
    """Fold *key* through each mutator in turn and return the last result."""
    if mutators is None:
        mutators = []
    elif callable(mutators):
        mutators = [mutators]
    return functools.reduce(lambda accum, mutator: mutator(accum), mutators, key)


@functools.lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def _full_match(pattern: Hashable, value: Hashable) -> bool:
    regex = _compile(str(pattern))
    return regex is not None and regex.fullmatch(str(value)) is not None


def call_if_computed(args: Sequence[Any] = ()) -> Mutator:
    """Replace a ``Computed`` key with the result of calling it with *args*.

    Any other key passes through unchanged.
    """

    def mutate(key: Any) -> Any:
        if isinstance(key, Computed):
            return key(*args)
        return key

    return mutate


def registered_matching(keys: KeySource) -> Mutator:
    """Treat the key as a regex and mutate to every registered key it matches.

    Registered keys are compared literally (as strings), never as patterns.
    """

    def mutate(pattern: Any) -> list[Hashable]:
        return [registered for registered in keys() if _full_match(pattern, registered)]

    return mutate


def matching_registered(keys: KeySource) -> Mutator:
    """Treat every registered key as a regex and keep those the key matches.

    The candidate key is compared literally, even if it is a valid regex.
    """

    def mutate(key: Any) -> list[Hashable]:
        return [registered for registered in keys() if _full_match(registered, key)]

    return mutate


def first_or_default(default: Any) -> Mutator:
    """Mutate a list of keys to its first element, or *default* if empty."""

    def mutate(keys: Sequence[Any]) -> Any:
        if len(keys) > 0:
            return keys[0]
        return default

    return mutate
