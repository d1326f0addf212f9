"""Tests for AdmissionQueue: ordering, category adoption, and restore behaviour."""

import random
import threading
from collections import Counter
from datetime import datetime, timedelta, timezone

import pytest

from shelterqueue.admission_queue import AdmissionQueue
from shelterqueue.models import Animal

T0 = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _animal(name, category, minutes):
    return Animal(name=name, category=category, arrival=T0 + timedelta(minutes=minutes))


@pytest.fixture
def queue():
    return AdmissionQueue()


@pytest.fixture
def mixed(queue):
    # Dog A at t1, Cat B at t2, Dog C at t3
    queue.admit(_animal("A", "dog", 1))
    queue.admit(_animal("B", "cat", 2))
    queue.admit(_animal("C", "dog", 3))
    return queue


def _multiset(queue):
    return Counter(queue.snapshot())


# --------------------------------------------------------------------------- #
# admit / adopt_oldest
# --------------------------------------------------------------------------- #


def test_admit_increases_size(queue):
    assert len(queue) == 0
    assert not queue
    queue.admit(_animal("A", "dog", 1))
    assert len(queue) == 1
    assert queue


def test_adopt_oldest_returns_arrival_order_regardless_of_admit_order(queue):
    queue.admit(_animal("late", "cat", 30))
    queue.admit(_animal("early", "dog", 10))
    queue.admit(_animal("middle", "cat", 20))

    names = [queue.adopt_oldest().name for _ in range(3)]
    assert names == ["early", "middle", "late"]


def test_repeated_adopt_oldest_is_non_decreasing():
    rng = random.Random(7)
    queue = AdmissionQueue()
    for i in range(200):
        queue.admit(_animal(f"a{i}", rng.choice(["dog", "cat"]), rng.randint(0, 50)))

    arrivals = []
    while queue:
        arrivals.append(queue.adopt_oldest().arrival)
    assert arrivals == sorted(arrivals)
    assert len(arrivals) == 200


def test_adopt_oldest_on_empty_queue_is_repeatable(queue):
    assert queue.adopt_oldest() is None
    assert queue.adopt_oldest() is None
    assert len(queue) == 0


def test_adopted_animal_is_removed(mixed):
    adopted = mixed.adopt_oldest()
    assert adopted.name == "A"
    assert adopted not in mixed.snapshot()
    assert len(mixed) == 2


# --------------------------------------------------------------------------- #
# adopt_oldest_by_category
# --------------------------------------------------------------------------- #


def test_by_category_skips_older_animals_and_restores_them(mixed):
    assert mixed.adopt_oldest_by_category("cat").name == "B"
    assert mixed.adopt_oldest().name == "A"
    assert mixed.adopt_oldest().name == "C"
    assert mixed.adopt_oldest() is None


def test_by_category_returns_oldest_of_category(mixed):
    assert mixed.adopt_oldest_by_category("dog").name == "A"
    assert mixed.adopt_oldest_by_category("dog").name == "C"
    assert mixed.adopt_oldest_by_category("dog") is None
    assert [a.name for a in mixed.snapshot()] == ["B"]


def test_by_category_on_empty_queue(queue):
    assert queue.adopt_oldest_by_category("dog") is None
    assert len(queue) == 0


def test_by_category_when_category_absent_keeps_everything(queue):
    queue.admit(_animal("X", "cat", 1))
    before = _multiset(queue)

    assert queue.adopt_oldest_by_category("dog") is None
    assert _multiset(queue) == before
    assert queue.adopt_oldest().name == "X"


def test_by_category_removes_exactly_the_returned_animal():
    rng = random.Random(11)
    queue = AdmissionQueue()
    for i in range(60):
        queue.admit(_animal(f"a{i}", rng.choice(["dog", "cat"]), rng.randint(0, 20)))

    for _ in range(80):
        category = rng.choice(["dog", "cat"])
        before = _multiset(queue)
        adopted = queue.adopt_oldest_by_category(category)
        after = _multiset(queue)
        if adopted is None:
            assert after == before
            assert all(a.category != category for a in after)
        else:
            assert adopted.category == category
            before[adopted] -= 1
            assert after == +before
            remaining = [a for a in after if a.category == category]
            assert all(a.arrival >= adopted.arrival for a in remaining)


def test_long_run_of_non_matching_animals_does_not_recurse(queue):
    for i in range(5000):
        queue.admit(_animal(f"dog{i}", "dog", i))
    queue.admit(_animal("last", "cat", 6000))

    assert queue.adopt_oldest_by_category("cat").name == "last"
    assert len(queue) == 5000
    assert queue.peek_oldest().name == "dog0"


def test_dog_and_cat_shortcuts(mixed):
    assert mixed.adopt_oldest_cat().name == "B"
    assert mixed.adopt_oldest_dog().name == "A"
    assert mixed.adopt_oldest_cat() is None


# --------------------------------------------------------------------------- #
# Inspection and ordering key
# --------------------------------------------------------------------------- #


def test_peek_does_not_remove(mixed):
    assert mixed.peek_oldest().name == "A"
    assert len(mixed) == 3
    assert AdmissionQueue().peek_oldest() is None


def test_snapshot_and_iter_are_in_adoption_order(mixed):
    assert [a.name for a in mixed.snapshot()] == ["A", "B", "C"]
    assert [a.name for a in mixed] == ["A", "B", "C"]
    assert len(mixed) == 3


def test_count_by_category(mixed):
    assert mixed.count_by_category() == {"dog": 2, "cat": 1}
    assert AdmissionQueue().count_by_category() == {}


def test_equal_arrivals_are_all_returned(queue):
    for name in ("p", "q", "r"):
        queue.admit(_animal(name, "dog", 5))

    adopted = {queue.adopt_oldest().name for _ in range(3)}
    assert adopted == {"p", "q", "r"}


def test_custom_key_changes_ordering():
    # Newest first
    queue = AdmissionQueue(key=lambda a: -a.arrival.timestamp())
    queue.admit(_animal("old", "dog", 1))
    queue.admit(_animal("new", "dog", 2))
    assert queue.adopt_oldest().name == "new"


def test_concurrent_category_adoptions_lose_nothing():
    queue = AdmissionQueue()
    for i in range(400):
        queue.admit(_animal(f"a{i}", "dog" if i % 3 else "cat", i))

    adopted = []
    lock = threading.Lock()

    def worker(category):
        while True:
            animal = queue.adopt_oldest_by_category(category)
            if animal is None:
                return
            with lock:
                adopted.append(animal)

    threads = [threading.Thread(target=worker, args=(c,)) for c in ("dog", "cat") * 3]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(queue) == 0
    assert len(adopted) == 400
    assert len({a.name for a in adopted}) == 400


def test_naive_and_aware_arrivals_share_a_queue(queue):
    queue.admit(Animal.arriving("A", "dog", clock=lambda: T0 + timedelta(minutes=5)))
    queue.admit(Animal("B", "cat", arrival=datetime(2024, 1, 1, 9, 1)))
    queue.admit(Animal("C", "cat", arrival=datetime(2024, 1, 1, 9, 1)))

    assert len(queue) == 3
    assert [a.name for a in queue.snapshot()] == ["B", "C", "A"]
    assert queue.adopt_oldest_by_category("dog").name == "A"
    assert queue.adopt_oldest().name == "B"


def test_len_bool_and_repr(mixed):
    assert len(mixed) == 3
    assert mixed
    assert repr(mixed) == "AdmissionQueue(size=3)"
    assert not AdmissionQueue()
