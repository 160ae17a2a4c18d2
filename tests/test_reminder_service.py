"""
Tests for event reminders: every send is attempted, failures follow the configured policy.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from campus_events.errors import EmailDeliveryError, NotFoundError, ReminderDeliveryError, ValidationError
from campus_events.models.user_models import UserSummary
from campus_events.services.event_repository import EventRepository
from campus_events.services.registration_service import RegistrationService
from campus_events.services.reminder_service import ReminderPolicy, ReminderService, build_reminder

ALL_STUDENTS = ["student-a", "student-b", "student-c"]


@pytest.fixture
def registration_service(db_manager, clock):
    return RegistrationService(db_manager, EventRepository(db_manager, clock=clock), clock=clock)


@pytest.fixture
def email_manager():
    manager = MagicMock()
    manager.send_email = AsyncMock()
    return manager


def failing_for(*emails):
    async def _send(to_email, subject, html_content, text_content):
        if to_email in emails:
            raise EmailDeliveryError(f"Failed to send email to {to_email}: mailbox unavailable")

    return _send


def sent_addresses(email_manager):
    return [c.args[0] for c in email_manager.send_email.await_args_list]


@pytest.mark.asyncio
async def test_reminders_sent_to_every_registrant(registration_service, email_manager, collections, make_event):
    collections["events"].docs.append(make_event(registrations=ALL_STUDENTS))
    service = ReminderService(registration_service, email_manager, policy="all_or_nothing")

    report = await service.send_event_reminders("event-1")

    assert report.sent_to == 3
    assert report.failed == []
    assert report.policy == "all_or_nothing"
    assert sorted(sent_addresses(email_manager)) == ["asha@campus.edu", "ben@campus.edu", "chen@campus.edu"]
    subject = email_manager.send_email.await_args_list[0].args[1]
    assert subject == "Reminder: Intro to Machine Learning"


@pytest.mark.asyncio
async def test_all_or_nothing_raises_after_attempting_every_send(
    registration_service, email_manager, collections, make_event
):
    collections["events"].docs.append(make_event(registrations=ALL_STUDENTS))
    email_manager.send_email.side_effect = failing_for("ben@campus.edu")
    service = ReminderService(registration_service, email_manager, policy=ReminderPolicy.ALL_OR_NOTHING)

    with pytest.raises(ReminderDeliveryError) as exc_info:
        await service.send_event_reminders("event-1")

    assert email_manager.send_email.await_count == 3
    assert [f.email for f in exc_info.value.failed] == ["ben@campus.edu"]
    assert exc_info.value.status_code == 500
    # Delivery failures leave registrations untouched
    assert collections["events"].docs[0]["registrations"] == ALL_STUDENTS


@pytest.mark.asyncio
async def test_partial_policy_reports_failures(registration_service, email_manager, collections, make_event):
    collections["events"].docs.append(make_event(registrations=ALL_STUDENTS))
    email_manager.send_email.side_effect = failing_for("asha@campus.edu", "chen@campus.edu")
    service = ReminderService(registration_service, email_manager, policy="partial")

    report = await service.send_event_reminders("event-1")

    assert report.event_id == "event-1"
    assert report.sent_to == 1
    assert [f.email for f in report.failed] == ["asha@campus.edu", "chen@campus.edu"]
    assert "mailbox unavailable" in report.failed[0].error


@pytest.mark.asyncio
async def test_no_registrants(registration_service, email_manager, collections, make_event):
    collections["events"].docs.append(make_event())
    service = ReminderService(registration_service, email_manager, policy="partial")

    with pytest.raises(ValidationError) as exc_info:
        await service.send_event_reminders("event-1")

    assert exc_info.value.message == "Event has no registered attendees to remind"
    email_manager.send_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_event(registration_service, email_manager):
    service = ReminderService(registration_service, email_manager)

    with pytest.raises(NotFoundError):
        await service.send_event_reminders("nope")


@pytest.mark.asyncio
async def test_concurrency_is_bounded(registration_service, email_manager, collections, make_event):
    collections["events"].docs.append(make_event(registrations=ALL_STUDENTS))
    in_flight = 0
    peak = 0

    async def _send(*args):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0)
        in_flight -= 1

    email_manager.send_email.side_effect = _send
    service = ReminderService(registration_service, email_manager, policy="partial", max_concurrency=2)

    report = await service.send_event_reminders("event-1")

    assert report.sent_to == 3
    assert peak == 2


def test_invalid_policy_rejected(registration_service, email_manager):
    with pytest.raises(ValueError):
        ReminderService(registration_service, email_manager, policy="best_effort")


def test_build_reminder_mentions_event_details(make_event):
    recipient = UserSummary(user_id="student-a", name="Asha", email="asha@campus.edu")

    subject, html_body, text_body = build_reminder(make_event(), recipient)

    assert subject == "Reminder: Intro to Machine Learning"
    assert "Hi Asha" in text_body
    assert "Lab 3" in text_body
    assert "<strong>Intro to Machine Learning</strong>" in html_body


def test_build_reminder_escapes_markup_in_html_body(make_event):
    recipient = UserSummary(user_id="student-a", name="Asha <b>", email="asha@campus.edu")
    event = make_event(title="<script>alert(1)</script>", location="Hall & Annex")

    _, html_body, text_body = build_reminder(event, recipient)

    assert "<script>" not in html_body
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html_body
    assert "Hi Asha &lt;b&gt;," in html_body
    assert "Hall &amp; Annex" in html_body
    assert "<script>alert(1)</script>" in text_body
