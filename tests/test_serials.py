"""Serial allocation: uniqueness, monotonicity, concurrency, failure atomicity."""

from concurrent.futures import ThreadPoolExecutor
from unittest import mock

import pytest
from django.db import OperationalError, connections, transaction
from django.db.models.query import QuerySet

from memberships.exceptions import AllocationFailed
from memberships.models import SerialCounter
from memberships.serials import (
    CounterStore,
    DatabaseCounterStore,
    LocalMemoryCounterStore,
    SerialAllocator,
    get_allocator,
    next_membership_serial,
)


class BrokenStore(CounterStore):
    def increment_and_get(self, key):
        raise AllocationFailed(key, message="Storage unavailable")


class BadValueStore(CounterStore):
    def increment_and_get(self, key):
        return 0


# --- In-memory store ---

def test_first_allocation_is_one():
    allocator = SerialAllocator(LocalMemoryCounterStore())
    assert allocator.allocate("cat-1") == 1


def test_sequential_allocations_increase_by_one():
    allocator = SerialAllocator(LocalMemoryCounterStore())
    serials = [allocator.allocate("cat-1") for _ in range(5)]
    assert serials == [1, 2, 3, 4, 5]


def test_categories_have_independent_counters():
    allocator = SerialAllocator(LocalMemoryCounterStore())
    allocator.allocate("cat-1")
    allocator.allocate("cat-1")
    assert allocator.allocate("cat-2") == 1
    assert allocator.allocate("cat-1") == 3


def test_concurrent_allocations_form_exact_contiguous_run():
    store = LocalMemoryCounterStore(initial={"cat-1": 40})
    allocator = SerialAllocator(store)

    with ThreadPoolExecutor(max_workers=16) as pool:
        serials = list(pool.map(lambda _: allocator.allocate("cat-1"), range(200)))

    assert len(serials) == len(set(serials))
    assert set(serials) == set(range(41, 241))
    assert store.current("cat-1") == 240


def test_store_failure_propagates():
    allocator = SerialAllocator(BrokenStore())
    with pytest.raises(AllocationFailed):
        allocator.allocate("cat-1")


def test_non_positive_serial_from_store_is_rejected():
    allocator = SerialAllocator(BadValueStore())
    with pytest.raises(AllocationFailed):
        allocator.allocate("cat-1")


# --- Database store ---

@pytest.mark.django_db
def test_database_counter_starts_at_one_and_persists():
    allocator = SerialAllocator(DatabaseCounterStore())
    assert allocator.allocate(7) == 1
    assert allocator.allocate(7) == 2
    assert SerialCounter.objects.get(key="7").value == 2


@pytest.mark.django_db
def test_database_allocations_are_unique_and_monotonic():
    allocator = SerialAllocator(DatabaseCounterStore())
    serials = [allocator.allocate(3) for _ in range(25)]
    assert serials == sorted(serials)
    assert len(set(serials)) == 25
    assert serials == list(range(1, 26))


@pytest.mark.django_db
def test_failed_increment_leaves_counter_unchanged():
    allocator = SerialAllocator(DatabaseCounterStore())
    assert allocator.allocate(5) == 1

    with mock.patch.object(QuerySet, "update", side_effect=OperationalError("connection lost")):
        with pytest.raises(AllocationFailed):
            allocator.allocate(5)

    assert SerialCounter.objects.get(key="5").value == 1
    assert allocator.allocate(5) == 2


@pytest.mark.django_db
def test_default_allocator_uses_configured_store(settings):
    settings.GNACOPS_COUNTER_STORE = "memberships.serials.DatabaseCounterStore"
    assert isinstance(get_allocator().store, DatabaseCounterStore)
    assert next_membership_serial(11) == 1
    assert next_membership_serial(11) == 2


@pytest.mark.django_db
def test_allocation_inside_outer_transaction_is_refused():
    allocator = SerialAllocator(DatabaseCounterStore())

    with transaction.atomic():
        with pytest.raises(AllocationFailed):
            allocator.allocate(4)

    assert not SerialCounter.objects.filter(key="4").exists()
    assert allocator.allocate(4) == 1


@pytest.mark.django_db(transaction=True)
def test_concurrent_database_allocations_form_exact_contiguous_run():
    SerialAllocator(DatabaseCounterStore()).allocate(9)

    def allocate(_):
        try:
            return SerialAllocator(DatabaseCounterStore()).allocate(9)
        finally:
            connections.close_all()

    with ThreadPoolExecutor(max_workers=8) as pool:
        serials = list(pool.map(allocate, range(40)))

    assert sorted(serials) == list(range(2, 42))
    assert SerialCounter.objects.get(key="9").value == 41
