"""
Serial number allocation for GNACOPS IDs.

Each membership category has its own counter. Allocation is a single atomic
increment in the counter store: the counter starts at 0, the first call
returns 1, and a serial is never handed out twice even if the registration
that took it fails later. Gaps are fine, duplicates are not.
"""
import logging
import threading

from django.conf import settings
from django.db import DatabaseError, connections, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.module_loading import import_string

from .exceptions import AllocationFailed

logger = logging.getLogger(__name__)


class CounterStore:
    """Storage interface: one atomic increment-and-return operation."""

    def increment_and_get(self, key):
        """
        Atomically add 1 to the counter for ``key`` and return the new value.
        Must raise AllocationFailed, leaving the counter unchanged, on failure.
        """
        raise NotImplementedError


class DatabaseCounterStore(CounterStore):
    """
    Counter rows in the SerialCounter table.

    The row is bumped with a single UPDATE using an F() expression before
    anything is read, so the write lock is held from the first statement
    (a row lock on PostgreSQL, the database write lock on SQLite, where the
    busy timeout then applies). The block is durable: it refuses to run
    inside a caller's transaction, since an outer rollback would give the
    serial back.
    """

    def __init__(self, using='default', lock_timeout_ms=None):
        self.using = using
        if lock_timeout_ms is None:
            lock_timeout_ms = getattr(settings, 'GNACOPS_SERIAL_LOCK_TIMEOUT_MS', 5000)
        self.lock_timeout_ms = lock_timeout_ms

    def _apply_lock_timeout(self):
        connection = connections[self.using]
        if connection.vendor == 'postgresql' and self.lock_timeout_ms:
            with connection.cursor() as cursor:
                cursor.execute("SET LOCAL lock_timeout = %s", [f"{int(self.lock_timeout_ms)}ms"])

    def _bump(self, counters, key):
        return counters.filter(key=key).update(value=F('value') + 1, updated_at=timezone.now())

    def increment_and_get(self, key):
        from .models import SerialCounter

        counters = SerialCounter.objects.using(self.using)
        try:
            with transaction.atomic(using=self.using, durable=True):
                self._apply_lock_timeout()
                if not self._bump(counters, key):
                    _, created = counters.get_or_create(key=key)
                    if created:
                        logger.info(f"Created serial counter for {key}")
                    self._bump(counters, key)
                return counters.values_list('value', flat=True).get(key=key)
        except RuntimeError as e:
            # Raised on entry when nested inside another atomic block
            logger.error(f"Serial increment refused for {key}: {str(e)}")
            raise AllocationFailed(key, message='Serial allocation cannot run inside another transaction') from e
        except DatabaseError as e:
            logger.error(f"Serial increment failed for {key}: {str(e)}")
            raise AllocationFailed(key) from e


class LocalMemoryCounterStore(CounterStore):
    """
    Counters held in process memory behind a lock.
    Not durable; for tests and single-process tooling.
    """

    def __init__(self, initial=None):
        self._values = dict(initial or {})
        self._lock = threading.Lock()

    def increment_and_get(self, key):
        with self._lock:
            value = self._values.get(key, 0) + 1
            self._values[key] = value
            return value

    def current(self, key):
        with self._lock:
            return self._values.get(key, 0)


class SerialAllocator:
    """
    Hands out strictly increasing serials per membership category.
    No retries here; AllocationFailed goes straight back to the caller.
    """

    def __init__(self, store):
        self.store = store

    def allocate(self, category_id):
        """
        Allocate the next serial for ``category_id``.

        Returns:
            int: a positive serial, larger than every serial previously
            allocated for the category.
        """
        key = str(category_id)
        serial = self.store.increment_and_get(key)
        if isinstance(serial, bool) or not isinstance(serial, int) or serial < 1:
            raise AllocationFailed(category_id, message=f"Counter store returned invalid serial {serial!r}")
        logger.info(f"Allocated serial {serial} for category {key}")
        return serial


def get_allocator():
    """Build the allocator for the store named by GNACOPS_COUNTER_STORE."""
    store_path = getattr(settings, 'GNACOPS_COUNTER_STORE', 'memberships.serials.DatabaseCounterStore')
    return SerialAllocator(import_string(store_path)())


def next_membership_serial(category_id):
    """Allocate the next serial for a category using the configured store."""
    return get_allocator().allocate(category_id)
