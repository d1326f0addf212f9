"""Line-oriented command interpreter over a single AdmissionQueue."""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Iterator, Literal

from shelterqueue.admission_queue import AdmissionQueue
from shelterqueue.models import CATEGORIES, Animal, CommandError, parse_category, utc_now

logger = logging.getLogger(__name__)

CommandName = Literal["admit", "adopt", "peek", "list"]


# The shelter scenario: dogs and cats arrive interleaved, and adopters ask
# for the oldest animal overall or for the oldest of one species.
DEMO_SCRIPT = """\
# arrivals
admit dog Rex
admit cat Tom
admit dog Fido
admit cat Luna
list
# adopters
adopt cat
adopt
adopt dog
peek
adopt
adopt
adopt dog
"""


@dataclass
class Outcome:
    command: CommandName
    animal: Animal | None = None
    animals: list[Animal] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict:
        d: dict = {"command": self.command, "message": self.message}
        if self.command == "list":
            d["animals"] = [a.to_dict() for a in self.animals]
        else:
            d["animal"] = self.animal.to_dict() if self.animal else None
        return d


class ShelterSession:
    def __init__(
        self,
        queue: AdmissionQueue | None = None,
        categories: Iterable[str] = CATEGORIES,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.queue = queue if queue is not None else AdmissionQueue()
        self.categories = tuple(categories)
        self.clock = clock

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def admit(self, category: str, name: str) -> Outcome:
        animal = Animal.arriving(
            name, parse_category(category, self.categories), clock=self.clock
        )
        self.queue.admit(animal)
        return Outcome("admit", animal, message=f"Admitted {animal.name} ({animal.category})")

    def adopt(self, category: str | None = None) -> Outcome:
        if category is None:
            animal = self.queue.adopt_oldest()
            wanted = "animal"
        else:
            wanted = parse_category(category, self.categories)
            animal = self.queue.adopt_oldest_by_category(wanted)
        if animal is None:
            return Outcome("adopt", None, message=f"No {wanted} available for adoption")
        return Outcome("adopt", animal, message=f"Adopted {animal.name} ({animal.category})")

    def peek(self) -> Outcome:
        animal = self.queue.peek_oldest()
        if animal is None:
            return Outcome("peek", None, message="Shelter is empty")
        return Outcome("peek", animal, message=f"Next up: {animal.name} ({animal.category})")

    def list_animals(self) -> Outcome:
        animals = self.queue.snapshot()
        counts = self.queue.count_by_category()
        summary = ", ".join(f"{counts.get(c, 0)} {c}" for c in self.categories)
        return Outcome("list", animals=animals, message=f"{len(animals)} waiting ({summary})")

    # ------------------------------------------------------------------ #
    # Command lines
    # ------------------------------------------------------------------ #

    def execute(self, line: str) -> Outcome | None:
        """Run one command line. Blank lines and comments return None."""
        try:
            parts = shlex.split(line, comments=True)
        except ValueError as exc:
            raise CommandError(f"Cannot parse {line!r}: {exc}") from exc
        if not parts:
            return None

        verb, args = parts[0].lower(), parts[1:]
        logger.debug("Executing %s %s", verb, args)

        if verb == "admit":
            if len(args) != 2:
                raise CommandError("Usage: admit <category> <name>")
            return self.admit(args[0], args[1])
        if verb == "adopt":
            if len(args) > 1:
                raise CommandError("Usage: adopt [category]")
            return self.adopt(args[0] if args else None)
        if verb in ("peek", "list"):
            if args:
                raise CommandError(f"Usage: {verb}")
            return self.peek() if verb == "peek" else self.list_animals()

        raise CommandError(f"Unknown command: {verb}")

    def run(self, lines: Iterable[str]) -> Iterator[Outcome]:
        for line in lines:
            outcome = self.execute(line)
            if outcome is not None:
                yield outcome
