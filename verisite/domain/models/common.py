"""Coercion helpers shared by the domain models."""

import logging
import math
from enum import Enum
from typing import Any, Callable, List, Optional, Type, TypeVar

from pydantic import ValidationError

E = TypeVar("E", bound=Enum)
T = TypeVar("T")

logger = logging.getLogger(__name__)


def coerce_confidence(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Coerce a confidence value into an integer percentage in [0, 100].

    Accepts ints, floats and numeric strings (a trailing ``%`` is ignored).
    Values in the 0-1 range given as floats are read as fractions. Missing,
    boolean or non-numeric values yield ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%").strip())
        except ValueError:
            return default
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        if 0.0 < value < 1.0:
            value = value * 100
        value = round(value)
    if not isinstance(value, int):
        return default
    return max(0, min(100, value))


def coerce_enum(enum_class: Type[E], value: Any, default: E) -> E:
    """Map a raw value onto an enum member, falling back to ``default``."""
    if isinstance(value, enum_class):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        for member in enum_class:
            if member.value == normalized:
                return member
    return default


def validate_items(value: Any, validate: Callable[[Any], T], label: str) -> List[T]:
    """Validate list entries one by one, dropping the ones that do not fit.

    A non-list value yields an empty list.
    """
    if not isinstance(value, list):
        return []
    items = []
    for raw in value:
        try:
            items.append(validate(raw))
        except ValidationError as e:
            logger.warning(f"⚠️ Dropping invalid {label}: {e.error_count()} errors")
    return items
