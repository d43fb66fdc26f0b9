"""
Explicit-value primitive.

A value is either authored by the user (explicit) or inferred by the
compiler (implicit). Merging always prefers explicit values; two explicit
values that disagree keep the first and raise a MergeConflictWarning.

Split is the per-view property bag that stores explicit and implicit
values side by side (used for layout sizes).
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Iterable, Optional, TypeVar

from chartcompile.log import MergeConflictWarning, merge_conflicting_property

T = TypeVar("T")


@dataclass(frozen=True)
class Explicit(Generic[T]):
    """
    A value tagged with whether it was explicitly specified.

    Properties:
        explicit: True if authored, False if defaulted or inferred
        value: The value itself (may be None for "unresolved")
    """

    explicit: bool
    value: Optional[T]


TieBreaker = Callable[[Explicit, Explicit, str, str], Explicit]


def default_tie_breaker(v1: Explicit, v2: Explicit, property: str, property_of: str) -> Explicit:
    """Keep the first value. Conflicting explicit values are reported."""
    if v1.explicit and v2.explicit:
        warnings.warn(
            merge_conflicting_property(property, property_of, v1.value, v2.value),
            MergeConflictWarning,
            stacklevel=3,
        )
    return v1


def merge_values_with_explicit(
    v1: Optional[Explicit[T]],
    v2: Explicit[T],
    property: str,
    property_of: str = "",
    tie_breaker: TieBreaker = default_tie_breaker,
) -> Explicit[T]:
    """
    Merge two explicit-tagged values.

    Rules, in order:
        - v1 missing or unresolved -> v2
        - explicit beats implicit, in either direction
        - equal values -> v1
        - otherwise the tie breaker decides (default: first wins)
    """
    if v1 is None or v1.value is None:
        return v2
    if v1.explicit and not v2.explicit:
        return v1
    if v2.explicit and not v1.explicit:
        return v2
    if v1.value == v2.value:
        return v1
    return tie_breaker(v1, v2, property, property_of)


def fold_explicit(
    values: Iterable[Explicit[T]],
    property: str,
    property_of: str = "",
    tie_breaker: TieBreaker = default_tie_breaker,
) -> Optional[Explicit[T]]:
    """Left-to-right merge of values in declaration order. None if empty."""
    merged: Optional[Explicit[T]] = None
    for value in values:
        if merged is None:
            merged = value
        else:
            merged = merge_values_with_explicit(merged, value, property, property_of, tie_breaker)
    return merged


class Split(Generic[T]):
    """
    Property bag holding explicit and implicit values separately.

    A key lives in exactly one of the two dicts; setting it again moves it.
    """

    def __init__(self, explicit: Optional[Dict[str, T]] = None, implicit: Optional[Dict[str, T]] = None):
        self.explicit: Dict[str, T] = dict(explicit or {})
        self.implicit: Dict[str, T] = dict(implicit or {})

    def combine(self) -> Dict[str, T]:
        """All values, explicit ones overriding implicit."""
        return {**self.implicit, **self.explicit}

    def get(self, key: str) -> Optional[T]:
        if key in self.explicit:
            return self.explicit[key]
        return self.implicit.get(key)

    def get_with_explicit(self, key: str) -> Explicit[T]:
        if key in self.explicit:
            return Explicit(True, self.explicit[key])
        if key in self.implicit:
            return Explicit(False, self.implicit[key])
        return Explicit(False, None)

    def set(self, key: str, value: Optional[T], explicit: bool) -> "Split[T]":
        self.explicit.pop(key, None)
        self.implicit.pop(key, None)
        if explicit:
            self.explicit[key] = value
        else:
            self.implicit[key] = value
        return self

    def set_with_explicit(self, key: str, value: Explicit[T]) -> "Split[T]":
        return self.set(key, value.value, value.explicit)

    def __contains__(self, key: str) -> bool:
        return key in self.explicit or key in self.implicit

    def __repr__(self) -> str:
        return f"Split(explicit={self.explicit!r}, implicit={self.implicit!r})"


__all__ = [
    "Explicit",
    "Split",
    "default_tie_breaker",
    "fold_explicit",
    "merge_values_with_explicit",
]
