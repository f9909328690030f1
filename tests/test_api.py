"""
Tests for the HTTP surface, using FastAPI's TestClient against a runtime
wired with in-memory fakes.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from pawpalace_core.api import MANUAL_RUN_MESSAGE, create_app
from pawpalace_core.exceptions import ReminderPassException
from pawpalace_core.reminders.service import ReminderRunResult
from pawpalace_core.runtime import ReminderRuntime
from pawpalace_core.utils.config import AppSettings, ReminderSettings
from pawpalace_core.utils.datetime_utils import (
    add_days,
    format_calendar_date,
    get_current_utc,
    get_current_utc_date,
)


@pytest.fixture
def settings():
    return AppSettings(
        reminders=ReminderSettings(run_on_startup=False, vaccine_intervals={"Rabies": 365})
    )


@pytest.fixture
def runtime(settings, fake_store, fake_mail_sender):
    return ReminderRuntime.build(settings, fake_store, fake_mail_sender)


@pytest.fixture
def client(runtime, settings):
    with TestClient(create_app(runtime=runtime, settings=settings)) as test_client:
        yield test_client


@pytest.fixture
def pet_due_tomorrow(fake_store, pet_factory, adoption_factory):
    """A pet whose rabies booster is due tomorrow, adopted by adopter@example.com."""
    last_dose = add_days(get_current_utc_date(), -364)
    pet = pet_factory.build(
        name="Bella",
        vaccinations=[{"vaccineType": "Rabies", "date": format_calendar_date(last_dose)}],
    )
    request = adoption_factory.build(pet, adopter_email="adopter@example.com")
    request.accept()
    fake_store.pets.append(pet)
    fake_store.adoptions[pet.id] = request
    return pet


class TestSystemRoutes:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "PawPalace server running"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["scheduler_running"] is True
        assert data["pass_in_flight"] is False
        assert data["mail"] == {"submitted": 0, "sent": 0, "failed": 0}
        assert "database" not in data


class TestManualReminderRun:
    """Test cases for GET /test-send-vaccination-reminders."""

    def test_successful_run(self, runtime, settings, fake_mail_sender, pet_due_tomorrow):
        with TestClient(create_app(runtime=runtime, settings=settings)) as client:
            response = client.get("/test-send-vaccination-reminders")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == MANUAL_RUN_MESSAGE
        assert data["result"]["emails_queued"] == 1
        assert data["result"]["events"][0]["pet_name"] == "Bella"
        # the queue is drained when the app shuts down
        assert fake_mail_sender.recipients == ["adopter@example.com"]
        assert fake_mail_sender.sent[0]["subject"] == "Vaccination Reminder for Bella"

    def test_nothing_due(self, client):
        response = client.get("/test-send-vaccination-reminders")

        assert response.status_code == 200
        assert response.json()["result"]["events"] == []

    def test_failed_pass(self, client, fake_store):
        fake_store.fail_listing = RuntimeError("database is down")

        response = client.get("/test-send-vaccination-reminders")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert "database is down" in data["message"]

    def test_overlapping_run_is_rejected(self, client, runtime):
        now = get_current_utc()
        runtime.scheduler.trigger = AsyncMock(
            return_value=ReminderRunResult(
                as_of=now.date(),
                started_at=now,
                finished_at=now,
                success=False,
                skipped=True,
            )
        )

        response = client.get("/test-send-vaccination-reminders")

        assert response.status_code == 409
        assert response.json()["success"] is False
        assert response.json()["result"]["skipped"] is True

    def test_package_errors_are_rendered(self, client, runtime):
        runtime.scheduler.trigger = AsyncMock(
            side_effect=ReminderPassException("Pass aborted", as_of="2024-01-09")
        )

        response = client.get("/test-send-vaccination-reminders")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "REMINDER_PASS_ERROR"


class TestSendTestEmail:
    """Test cases for POST /send-test-email."""

    def test_send(self, client, fake_mail_sender):
        response = client.post(
            "/send-test-email",
            json={"to": "someone@example.com", "subject": "Hello", "message": "Test body"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Email sent successfully"}
        assert fake_mail_sender.sent == [
            {"to": "someone@example.com", "subject": "Hello", "body": "Test body"}
        ]

    def test_transport_failure(self, client, fake_mail_sender):
        fake_mail_sender.fail_for.add("blocked@example.com")

        response = client.post(
            "/send-test-email",
            json={"to": "blocked@example.com", "subject": "Hello", "message": "Body"},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "SMTP refused recipient"}

    def test_invalid_body(self, client):
        response = client.post("/send-test-email", json={"to": "nobody", "subject": "Hi"})
        assert response.status_code == 422
