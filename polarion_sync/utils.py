"""Small helpers shared across the package."""

from __future__ import annotations

from itertools import chain
from typing import Iterable, List, TypeVar

T = TypeVar("T")


def flat(items: Iterable[Iterable[T]]) -> List[T]:
    """Flatten one level of nesting."""
    return list(chain.from_iterable(items))
