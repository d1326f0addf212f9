"""Shared data models used across the shelterqueue package."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable


# Any configured category name; "dog" and "cat" are the defaults.
Category = str

CATEGORIES: tuple[str, ...] = ("dog", "cat")


class ShelterError(Exception):
    """Base class for errors raised at the shelter's text boundaries."""


class UnknownCategoryError(ShelterError, ValueError):
    def __init__(self, value: str, allowed: tuple[str, ...] | list[str] = CATEGORIES):
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unknown category '{value}' (expected one of: {', '.join(self.allowed)})"
        )


class CommandError(ShelterError):
    """A session command line could not be understood."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_category(
    value: str, allowed: tuple[str, ...] | list[str] = CATEGORIES
) -> str:
    """Normalise user input like 'Dog' or ' CAT ' to a known category."""
    normalised = value.strip().lower()
    if normalised not in allowed:
        raise UnknownCategoryError(value, allowed)
    return normalised


@dataclass(frozen=True)
class Animal:
    """An admitted animal. Immutable once it has an arrival time."""

    name: str
    category: Category
    arrival: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        # Naive arrivals are taken to be UTC so every key in a queue compares.
        if self.arrival.tzinfo is None:
            object.__setattr__(self, "arrival", self.arrival.replace(tzinfo=timezone.utc))

    @classmethod
    def arriving(
        cls,
        name: str,
        category: Category,
        clock: Callable[[], datetime] = utc_now,
    ) -> "Animal":
        return cls(name=name, category=category, arrival=clock())

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category,
            "arrival": self.arrival.isoformat(),
        }

    def __str__(self) -> str:
        return f"{self.name} ({self.category}, arrived {self.arrival.isoformat()})"
