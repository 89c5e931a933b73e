"""JSON API: registration, categories, and the recurring appointment job."""

import json
from datetime import date, time
from unittest import mock

import pytest
from django.db.models.query import QuerySet
from django.urls import reverse

from appointments.models import Appointment, RecurringAppointment
from memberships.exceptions import AllocationFailed
from memberships.models import Membership

pytestmark = pytest.mark.django_db


def _post_json(client, url, payload, **extra):
    return client.post(url, data=json.dumps(payload), content_type="application/json", **extra)


def _payload(category, **overrides):
    payload = {
        "fullName": "Ama Mensah",
        "email": "ama@example.com",
        "password": "s3cure-pass",
        "categoryId": category.pk,
        "formData": {"region": "Greater Accra", "phone": "0240000000"},
    }
    payload.update(overrides)
    return payload


def test_register_returns_gnacops_id(client, proprietor):
    response = _post_json(client, reverse("register_member"), _payload(proprietor))

    assert response.status_code == 201
    body = response.json()
    assert body == {"success": True, "gnacopsId": "GNC/PM/01/0001", "message": "Registration successful"}
    assert Membership.objects.get().gnacops_id == "GNC/PM/01/0001"


@pytest.mark.parametrize("overrides", [
    {"email": "not-an-email"},
    {"password": "short"},
    {"fullName": ""},
    {"categoryId": None},
])
def test_register_validation_errors(client, proprietor, overrides):
    response = _post_json(client, reverse("register_member"), _payload(proprietor, **overrides))

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert not Membership.objects.exists()


def test_register_duplicate_email(client, proprietor):
    _post_json(client, reverse("register_member"), _payload(proprietor))
    response = _post_json(client, reverse("register_member"), _payload(proprietor))

    assert response.status_code == 400
    assert response.json()["error"] == "Email already registered"


def test_register_allocation_failure_is_retryable(client, proprietor):
    with mock.patch("memberships.registration.get_allocator") as get_allocator:
        get_allocator.return_value.allocate.side_effect = AllocationFailed(proprietor.pk)
        response = _post_json(client, reverse("register_member"), _payload(proprietor))

    assert response.status_code == 503
    assert response.json()["success"] is False
    assert not Membership.objects.exists()


def test_register_rejects_get(client):
    response = client.get(reverse("register_member"))
    assert response.status_code == 405


def test_categories_lists_active_with_tier(client, proprietor, teacher_council):
    from memberships.models import MembershipCategory
    MembershipCategory.objects.create(name="Parent Council", is_active=False)

    response = client.get(reverse("membership_categories"))

    assert response.status_code == 200
    categories = response.json()["categories"]
    assert [(c["name"], c["tier_code"]) for c in categories] == [
        ("Proprietor", "PM"),
        ("Teacher Council", "AM"),
    ]


def test_generate_recurring_job(client, django_user_model):
    user = django_user_model.objects.create_user(username="kofi", email="kofi@example.com", password="x")
    RecurringAppointment.objects.create(
        user=user,
        appointment_type="consultation",
        purpose="Weekly check-in",
        start_date=date(2020, 1, 1),
        recurrence_pattern="daily",
        recurrence_interval=1,
        time_of_day=time(9, 0),
    )

    response = client.post(reverse("generate_recurring_appointments"))

    assert response.status_code == 200
    assert response.json()["count"] == 8
    assert Appointment.objects.count() == 8


def test_generate_recurring_job_checks_secret(client, settings):
    settings.RECURRING_JOB_SECRET = "s3cret"

    assert client.post(reverse("generate_recurring_appointments")).status_code == 403
    response = client.post(reverse("generate_recurring_appointments"), HTTP_X_JOB_SECRET="s3cret")
    assert response.status_code == 200
    assert response.json()["count"] == 0


def test_register_duplicate_email_race_is_a_400(client, proprietor, django_user_model):
    django_user_model.objects.create_user(username="ama@example.com", email="ama@example.com", password="x")

    with mock.patch.object(QuerySet, "exists", return_value=False):
        response = _post_json(client, reverse("register_member"), _payload(proprietor))

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Email already registered"}


@pytest.mark.parametrize("form_data", [
    {"region": 5},
    {"region": ["Ashanti"]},
    {"phone": 240000000},
])
def test_register_rejects_non_string_form_fields(client, proprietor, form_data):
    response = _post_json(client, reverse("register_member"), _payload(proprietor, formData=form_data))

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("formData:")
    assert not Membership.objects.exists()
