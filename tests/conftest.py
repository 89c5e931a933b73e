"""Root conftest: shared fixtures."""

import pytest


@pytest.fixture(autouse=True)
def fresh_id_tables():
    """Category/region tables are cached per process; reload them around each test."""
    from memberships.utils import get_id_tables

    get_id_tables.cache_clear()
    yield
    get_id_tables.cache_clear()


@pytest.fixture
def proprietor(db):
    from memberships.models import MembershipCategory
    return MembershipCategory.objects.create(name="Proprietor", price=300, position=2)


@pytest.fixture
def teacher_council(db):
    from memberships.models import MembershipCategory
    return MembershipCategory.objects.create(name="Teacher Council", price=100, position=3)
