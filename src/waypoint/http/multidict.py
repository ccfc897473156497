"""Read-only name → values mapping shared by headers and url-encoded params.

Both carry names that may repeat (``Set-Cookie``, ``?tag=a&tag=b``). The
mapping view returns the first value; ``get_list`` returns them all.
Subclasses decide how names compare by overriding ``_fold``.
"""

from collections.abc import Iterable, Iterator, Mapping


class MultiValueMapping(Mapping[str, str]):
    __slots__ = ("_values",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        grouped: dict[str, list[str]] = {}
        for name, value in pairs:
            grouped.setdefault(self._fold(str(name)), []).append(str(value))
        self._values = {name: tuple(values) for name, values in grouped.items()}

    @staticmethod
    def _fold(name: str) -> str:
        return name

    def __getitem__(self, name: str) -> str:
        if isinstance(name, str):
            values = self._values.get(self._fold(name))
            if values:
                return values[0]
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"

    def get_list(self, name: str) -> list[str]:
        """Every value given for *name*, in order. Empty if there are none."""
        return list(self._values.get(self._fold(name), ()))
