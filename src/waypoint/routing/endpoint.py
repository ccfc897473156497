"""Endpoint templates — parsing, typed matching and candidate selection.

A template is a path whose segments are either literal or parameters::

    "/items"              -> [EndpointSegment("items")]
    "/items/:id"          -> [..., EndpointSegment(":id", is_param=True, param_name="id")]
    "/items/:id<int>"     -> [..., EndpointSegment(":id<int>", ..., param_type="int")]

Matching is two-step. ``find_candidate_template`` is a cheap regex
pre-filter that treats every parameter as "any one segment";
``match_endpoint`` then checks literals and converts typed parameters.
"""

import functools
import re
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import Any

from waypoint.dispatch.resolution import KeySource, Mutator, first_or_default
from waypoint.errors import ConfigurationError
from waypoint.routing.params import CONVERTERS, convert_param

_WILDCARD_SEGMENT = r"[^/]*"


@dataclass(frozen=True, slots=True)
class EndpointSegment:
    """A parsed segment of an endpoint template.

    Literal: ``items``       (is_param=False)
    Param:   ``:id``         (is_param=True, param_name="id")
    Typed:   ``:id<int>``    (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


def split_path(path: str) -> list[str]:
    """Split a template or literal path into segments, ignoring outer slashes."""
    return path.strip("/").split("/")


def _parse_param(part: str, template: str) -> EndpointSegment:
    inner = part[1:]
    param_type = "str"
    if inner.endswith(">"):
        if "<" not in inner:
            msg = f"Malformed parameter segment {part!r} in endpoint template {template!r}"
            raise ConfigurationError(msg)
        inner, param_type = inner[:-1].split("<", 1)
    if not inner or "<" in inner or ">" in inner:
        msg = (
            f"Malformed parameter segment {part!r} in endpoint template {template!r}. "
            "Use ':name' or ':name<type>'."
        )
        raise ConfigurationError(msg)
    if param_type not in CONVERTERS:
        known = ", ".join(CONVERTERS)
        msg = f"Unknown parameter type {param_type!r} in endpoint template {template!r} (known: {known})"
        raise ConfigurationError(msg)
    return EndpointSegment(value=part, is_param=True, param_name=inner, param_type=param_type)


@functools.lru_cache(maxsize=512)
def _parse(template: str) -> tuple[EndpointSegment, ...]:
    segments: list[EndpointSegment] = []
    for part in split_path(template):
        if part.startswith(":"):
            segments.append(_parse_param(part, template))
        else:
            segments.append(EndpointSegment(value=part))
    return tuple(segments)


def parse_endpoint(template: str) -> list[EndpointSegment]:
    """Parse an endpoint template into segments.

    Raises ``ConfigurationError`` for malformed parameter segments and
    unknown parameter types.
    """
    return list(_parse(template))


def match_endpoint(template: str, path: str) -> dict[str, Any] | None:
    """Match a literal *path* against *template*.

    Returns the extracted, type-converted parameters (possibly empty) on
    success, or ``None`` if the segment counts differ, a literal segment
    differs, or a typed segment fails conversion.
    """
    segments = _parse(template)
    parts = split_path(path)
    if len(parts) != len(segments):
        return None

    params: dict[str, Any] = {}
    for segment, part in zip(segments, parts, strict=True):
        if segment.is_param:
            try:
                params[segment.param_name or ""] = convert_param(part, segment.param_type)
            except ValueError:
                return None
        elif segment.value != part:
            return None
    return params


@functools.lru_cache(maxsize=512)
def template_pattern(template: str) -> re.Pattern[str]:
    """Regex that accepts any path *template* could match, ignoring types.

    Each parameter segment becomes a single-segment wildcard; literal
    segments are matched exactly.
    """
    parts = [
        _WILDCARD_SEGMENT if segment.is_param else re.escape(segment.value)
        for segment in _parse(template)
    ]
    return re.compile("/" + "/".join(parts))


def _candidate_matches(template: Hashable, path: str) -> bool:
    if not isinstance(template, str):
        return False
    return template_pattern(template).fullmatch("/" + path.strip("/")) is not None


def matching_templates(templates: KeySource) -> Mutator:
    """Mutator: a literal path → every template (in order) whose pattern it matches.

    Non-string keys (such as a catch-all key) are never candidates.
    """

    def mutate(path: str) -> list[Hashable]:
        return [template for template in templates() if _candidate_matches(template, path)]

    return mutate


def find_candidate_template(templates: Iterable[Hashable], path: str) -> str | None:
    """Return the first template whose pre-filter pattern matches *path*, or ``None``."""
    registered = list(templates)
    mutate = matching_templates(lambda: registered)
    return first_or_default(None)(mutate(path))
