"""Document filters used by table scans.

A filter is either an ExactMatch over top-level fields or a Predicate over
the whole decoded document. matches() is the one place both are evaluated.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from ..core.types import Document


@dataclass(frozen=True)
class ExactMatch:
    """Every listed field must be present and strictly equal."""

    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Predicate:
    """Arbitrary test over the decoded document."""

    fn: Callable[[Document], Any]


Filter = Union[ExactMatch, Predicate]
FilterLike = Union[ExactMatch, Predicate, Mapping[str, Any], Callable[[Document], Any]]

_MISSING = object()


def strict_equal(left: Any, right: Any) -> bool:
    """Equality that does not conflate booleans with numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def as_filter(filter_: FilterLike) -> Filter:
    """Normalize a mapping or callable into a Filter.

    Raises:
        TypeError: filter_ is neither a Filter, a mapping nor a callable
    """
    if isinstance(filter_, (ExactMatch, Predicate)):
        return filter_
    if isinstance(filter_, Mapping):
        return ExactMatch(dict(filter_))
    if callable(filter_):
        return Predicate(filter_)
    raise TypeError(f"Expected a mapping or a callable filter, got {type(filter_).__name__}")


def matches(filter_: Filter, document: Document) -> bool:
    """Return True if document satisfies filter_."""
    if isinstance(filter_, Predicate):
        return bool(filter_.fn(document))

    if not filter_.fields:
        return True
    if not isinstance(document, Mapping):
        return False
    for key, expected in filter_.fields.items():
        actual = document.get(key, _MISSING)
        if actual is _MISSING or not strict_equal(actual, expected):
            return False
    return True
