"""Url-encoded parameters from a query string or a form body."""

from collections.abc import Mapping
from urllib.parse import parse_qsl

from waypoint.http.multidict import MultiValueMapping


class QueryParams(MultiValueMapping):
    """Immutable url-encoded parameters, in the order they were sent.

    Blank values are kept (``?flag=`` gives ``{"flag": ""}``). Names are
    case-sensitive.
    """

    __slots__ = ()

    def __init__(self, encoded: str | bytes | Mapping[str, str] = "") -> None:
        if isinstance(encoded, Mapping):
            super().__init__(encoded.items())
            return
        if isinstance(encoded, bytes):
            encoded = encoded.decode("utf-8", errors="replace")
        super().__init__(parse_qsl(encoded, keep_blank_values=True))

    def get_int(self, name: str, default: int | None = None) -> int | None:
        """Value of *name* as an int, or *default* if missing or not numeric."""
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default
