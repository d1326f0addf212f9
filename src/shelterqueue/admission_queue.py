"""Ordered admission queue: adopt the oldest animal, overall or by category.

The queue is a binary heap keyed on an ordering function supplied at
construction (arrival time by default). Entries are stored as
``(key, sequence, animal)`` so that animals with equal keys never have to be
compared with each other; the sequence number is the admission counter, which
makes ties come out in admission order. That tie-break is an implementation
detail and not part of the queue's contract.
"""

from __future__ import annotations

import heapq
import logging
import threading
from collections import Counter
from typing import Any, Callable, Iterator

from shelterqueue.models import Animal, Category

logger = logging.getLogger(__name__)


def arrival_key(animal: Animal) -> Any:
    return animal.arrival


class AdmissionQueue:
    def __init__(self, key: Callable[[Animal], Any] = arrival_key):
        self.key = key
        self._heap: list[tuple[Any, int, Animal]] = []
        self._counter = 0
        # Held for the whole of every public operation; the category scan
        # pops and restores several entries and must not interleave.
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Admission
    # ------------------------------------------------------------------ #

    def admit(self, animal: Animal) -> None:
        """Add an animal to the queue."""
        with self._lock:
            self._push(animal)
        logger.debug("Admitted %s", animal)

    # ------------------------------------------------------------------ #
    # Adoption
    # ------------------------------------------------------------------ #

    def adopt_oldest(self) -> Animal | None:
        """Remove and return the oldest animal, or None if the queue is empty."""
        with self._lock:
            animal = self._pop()
        if animal is not None:
            logger.debug("Adopted %s", animal)
        return animal

    def adopt_oldest_by_category(self, category: Category) -> Animal | None:
        """Remove and return the oldest animal of ``category``.

        Animals of other categories that are older than the match are popped
        into a holding list while searching and pushed back before returning,
        whether or not a match was found. Returns None when no animal of the
        category is held.
        """
        with self._lock:
            held: list[tuple[Any, int, Animal]] = []
            match: Animal | None = None
            while self._heap:
                entry = heapq.heappop(self._heap)
                if entry[2].category == category:
                    match = entry[2]
                    break
                held.append(entry)

            # Entries keep their original sequence numbers on the way back in.
            for entry in held:
                heapq.heappush(self._heap, entry)

        if held:
            logger.debug(
                "Restored %d animal(s) examined while looking for a %s",
                len(held),
                category,
            )
        if match is None:
            logger.debug("No %s available for adoption", category)
        else:
            logger.debug("Adopted %s", match)
        return match

    def adopt_oldest_dog(self) -> Animal | None:
        return self.adopt_oldest_by_category("dog")

    def adopt_oldest_cat(self) -> Animal | None:
        return self.adopt_oldest_by_category("cat")

    # ------------------------------------------------------------------ #
    # Inspection
    # ------------------------------------------------------------------ #

    def peek_oldest(self) -> Animal | None:
        """Return the animal adopt_oldest() would return, without removing it."""
        with self._lock:
            return self._heap[0][2] if self._heap else None

    def snapshot(self) -> list[Animal]:
        """All held animals, in the order they would be adopted."""
        with self._lock:
            return [entry[2] for entry in sorted(self._heap)]

    def count_by_category(self) -> dict[str, int]:
        with self._lock:
            return dict(Counter(entry[2].category for entry in self._heap))

    def __len__(self) -> int:
        with self._lock:
            return len(self._heap)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __iter__(self) -> Iterator[Animal]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"AdmissionQueue(size={len(self)})"

    # ------------------------------------------------------------------ #
    # Helpers (caller holds the lock)
    # ------------------------------------------------------------------ #

    def _push(self, animal: Animal) -> None:
        entry = (self.key(animal), self._counter, animal)
        self._counter += 1
        heapq.heappush(self._heap, entry)

    def _pop(self) -> Animal | None:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]
