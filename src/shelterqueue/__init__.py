"""shelterqueue: first-in-first-out adoption queue for an animal shelter."""

from shelterqueue.admission_queue import AdmissionQueue, arrival_key
from shelterqueue.models import (
    Animal,
    CATEGORIES,
    CommandError,
    ShelterError,
    UnknownCategoryError,
    parse_category,
)

__all__ = [
    "AdmissionQueue",
    "Animal",
    "CATEGORIES",
    "CommandError",
    "ShelterError",
    "UnknownCategoryError",
    "arrival_key",
    "parse_category",
]
