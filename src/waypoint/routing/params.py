"""Endpoint parameter parsing and type conversion.

Built-in converters for template segments like ``:id<int>``.
"""

import re

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]*", str),
    "string": (r"[^/]*", str),
    "int": (r"[+-]?[0-9]+", int),
    "integer": (r"[+-]?[0-9]+", int),
}

_COMPILED: dict[str, re.Pattern[str]] = {
    name: re.compile(pattern) for name, (pattern, _) in CONVERTERS.items()
}


def convert_param(value: str, param_type: str) -> str | int:
    """Convert a captured endpoint segment to the target type.

    Raises ``ValueError`` if the text is not valid for the type (for
    ``int``: anything but an optionally signed run of ASCII digits, so
    ``"4.2"`` and ``"abc"`` are both rejected).
    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    _, target_type = CONVERTERS[param_type]
    if _COMPILED[param_type].fullmatch(value) is None:
        msg = f"{value!r} is not a valid {param_type}"
        raise ValueError(msg)
    return target_type(value)
