"""Argument checks shared by the producer factories and the facade."""

from typing import TypeVar

from .protocols import Characteristic, Spliterator

T = TypeVar("T")


def require_not_none(value: T | None, name: str) -> T:
    """Raise TypeError if a required argument is missing."""
    if value is None:
        raise TypeError(f"{name} must not be None")
    return value


def require_ordered(spliterator: Spliterator, operation: str) -> None:
    """Raise ValueError if ``spliterator`` does not report ORDERED."""
    if not spliterator.has_characteristics(Characteristic.ORDERED):
        raise ValueError(
            f"Cannot {operation} a source without the ORDERED characteristic"
        )
