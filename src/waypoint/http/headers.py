"""Request headers, looked up case-insensitively."""

from collections.abc import Iterable, Mapping

from waypoint.http.multidict import MultiValueMapping


class Headers(MultiValueMapping):
    """Immutable request headers.

    Built from a dict or from name/value pairs; names are folded to lower
    case, so ``headers["Accept"]`` and ``headers["accept"]`` agree.
    """

    __slots__ = ()

    def __init__(self, raw: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        super().__init__(raw.items() if isinstance(raw, Mapping) else raw)

    @staticmethod
    def _fold(name: str) -> str:
        return name.lower()
