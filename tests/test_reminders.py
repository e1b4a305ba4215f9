"""
Tests for the 7-day and 24-hour reminder scan
"""

from datetime import datetime, timedelta

import pytest

from app.config import Settings
from app.exceptions import BookingNotFoundError, ReminderError
from app.models import Booking, Customer, Event, SmsMessage
from app.services.reminder_service import (
    ReminderKind,
    process_reminders,
    reminder_already_sent,
    send_booking_reminder,
)
from app.services.sms_service import TwilioService

NOW = datetime(2026, 5, 1, 9, 0)


def _event(db, start_time, **kwargs):
    event = Event(title=kwargs.pop("title", "Quiz Night"), start_time=start_time, **kwargs)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def _booking(db, customer, event, seats=2):
    booking = Booking(customer_id=customer.id, event_id=event.id, seats=seats, send_notification=False)
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def _reminders(db, kind):
    return db.query(SmsMessage).filter(SmsMessage.message_type == kind.message_type).all()


@pytest.fixture
def week_out_booking(test_db_session, sample_customer):
    event = _event(test_db_session, NOW + timedelta(days=7, hours=10))
    return _booking(test_db_session, sample_customer, event)


@pytest.fixture
def tomorrow_booking(test_db_session, sample_customer):
    event = _event(test_db_session, NOW + timedelta(days=1, hours=10), title="Live Music")
    return _booking(test_db_session, sample_customer, event, seats=4)


class TestReminderKind:
    """Test reminder kinds"""

    def test_kinds(self):
        """Test reminder kind properties"""
        assert ReminderKind("7day").days_before == 7
        assert ReminderKind("24hr").days_before == 1
        assert ReminderKind.SEVEN_DAY.message_type == "reminder_7day"
        assert ReminderKind.TWENTY_FOUR_HOUR.message_type == "reminder_24hr"

    def test_unknown_kind(self):
        """Test unknown reminder kinds are rejected"""
        with pytest.raises(ValueError):
            ReminderKind("48hr")


class TestProcessReminders:
    """Test the reminder scan"""

    def test_seven_day_reminder_sent(self, test_db_session, simulated_service, week_out_booking):
        """Test a booking a week out gets the 7-day reminder"""
        result = process_reminders(test_db_session, now=NOW, service=simulated_service)

        assert result["7day"] == {"processed": 1, "sent": 1, "failed": 0, "skipped": 0}
        assert result["24hr"]["processed"] == 0
        records = _reminders(test_db_session, ReminderKind.SEVEN_DAY)
        assert len(records) == 1
        assert records[0].booking_id == week_out_booking.id
        assert "2 seat(s)" in records[0].content

    def test_twenty_four_hour_reminder_sent(self, test_db_session, simulated_service, tomorrow_booking):
        """Test a booking tomorrow gets the 24-hour reminder"""
        result = process_reminders(test_db_session, now=NOW, service=simulated_service)

        assert result["24hr"]["sent"] == 1
        assert result["7day"]["processed"] == 0
        record = _reminders(test_db_session, ReminderKind.TWENTY_FOUR_HOUR)[0]
        assert "tomorrow" in record.content

    def test_second_run_sends_nothing_new(self, test_db_session, simulated_service, week_out_booking, tomorrow_booking):
        """Test a second run sends no duplicates"""
        first = process_reminders(test_db_session, now=NOW, service=simulated_service)
        second = process_reminders(test_db_session, now=NOW, service=simulated_service)

        assert first["totals"]["sent"] == 2
        assert second["totals"]["sent"] == 0
        assert second["totals"]["skipped"] == 2
        assert len(_reminders(test_db_session, ReminderKind.SEVEN_DAY)) == 1
        assert len(_reminders(test_db_session, ReminderKind.TWENTY_FOUR_HOUR)) == 1

    def test_customer_without_mobile_is_skipped(self, test_db_session, production_service, customer_without_mobile):
        """Test customers without a mobile are skipped"""
        event = _event(test_db_session, NOW + timedelta(days=7, hours=2))
        _booking(test_db_session, customer_without_mobile, event)

        result = process_reminders(test_db_session, now=NOW, service=production_service)

        assert result["7day"] == {"processed": 1, "sent": 0, "failed": 0, "skipped": 1}
        production_service.client.messages.create.assert_not_called()
        assert test_db_session.query(SmsMessage).count() == 0

    def test_cancelled_events_are_ignored(self, test_db_session, simulated_service, sample_customer):
        """Test cancelled events are not scanned"""
        event = _event(test_db_session, NOW + timedelta(days=7, hours=2), is_canceled=True)
        _booking(test_db_session, sample_customer, event)

        result = process_reminders(test_db_session, now=NOW, service=simulated_service)
        assert result["totals"]["processed"] == 0

    def test_other_dates_are_ignored(self, test_db_session, simulated_service, sample_customer):
        """Test events on other dates are not scanned"""
        for days in (2, 6, 8):
            _booking(test_db_session, sample_customer, _event(test_db_session, NOW + timedelta(days=days)))

        result = process_reminders(test_db_session, now=NOW, service=simulated_service)
        assert result["totals"]["processed"] == 0

    def test_failed_send_is_counted_not_retried(self, test_db_session, production_service, week_out_booking):
        """Test a failed send is counted and not retried in the run"""
        production_service.client.messages.create.side_effect = ConnectionError("down")

        result = process_reminders(test_db_session, now=NOW, service=production_service)

        assert result["7day"] == {"processed": 1, "sent": 0, "failed": 1, "skipped": 0}
        assert production_service.client.messages.create.call_count == 1
        assert _reminders(test_db_session, ReminderKind.SEVEN_DAY)[0].status == "failed"
        assert not reminder_already_sent(test_db_session, week_out_booking.id, ReminderKind.SEVEN_DAY)

    def test_disabled_sms_is_skipped_not_failed(self, test_db_session, week_out_booking):
        """Test disabled SMS counts as skipped and writes nothing"""
        service = TwilioService(Settings(sms_enabled=False))

        for _ in range(3):
            result = process_reminders(test_db_session, now=NOW, service=service)

        assert result["7day"] == {"processed": 1, "sent": 0, "failed": 0, "skipped": 1}
        assert test_db_session.query(SmsMessage).count() == 0

    def test_one_failure_does_not_stop_the_run(self, test_db_session, production_service, sample_customer):
        """Test one failure does not stop the run"""
        other = Customer(first_name="Sam", mobile_number="+447700900111")
        test_db_session.add(other)
        test_db_session.commit()
        event = _event(test_db_session, NOW + timedelta(days=7, hours=2))
        _booking(test_db_session, sample_customer, event)
        _booking(test_db_session, other, event)

        production_service.client.messages.create.side_effect = [ConnectionError("down"), production_service.client.messages.create.return_value]
        result = process_reminders(test_db_session, now=NOW, service=production_service)

        assert result["7day"]["failed"] == 1
        assert result["7day"]["sent"] == 1

    def test_existing_reminder_marks_sent(self, test_db_session, week_out_booking):
        """Test a delivered record marks the reminder sent"""
        test_db_session.add(
            SmsMessage(
                booking_id=week_out_booking.id,
                message_type="reminder_7day",
                content="Reminder",
                status="delivered",
            )
        )
        test_db_session.commit()

        assert reminder_already_sent(test_db_session, week_out_booking.id, ReminderKind.SEVEN_DAY)
        assert not reminder_already_sent(test_db_session, week_out_booking.id, ReminderKind.TWENTY_FOUR_HOUR)


class TestSendBookingReminder:
    """Test on-demand reminders"""

    def test_send_on_demand(self, test_db_session, simulated_service, week_out_booking):
        """Test sending a reminder on demand"""
        result = send_booking_reminder(
            test_db_session, week_out_booking.id, ReminderKind.TWENTY_FOUR_HOUR, now=NOW, service=simulated_service
        )

        assert result.success is True
        assert len(_reminders(test_db_session, ReminderKind.TWENTY_FOUR_HOUR)) == 1

    def test_past_event(self, test_db_session, simulated_service, week_out_booking):
        """Test reminders for past events are rejected"""
        later = NOW + timedelta(days=30)
        with pytest.raises(ReminderError, match="past"):
            send_booking_reminder(test_db_session, week_out_booking.id, ReminderKind.SEVEN_DAY, now=later)

    def test_unknown_booking(self, test_db_session):
        """Test reminders for unknown bookings"""
        with pytest.raises(BookingNotFoundError):
            send_booking_reminder(test_db_session, 999, ReminderKind.SEVEN_DAY, now=NOW)

    def test_no_mobile(self, test_db_session, customer_without_mobile):
        """Test reminders for customers without a mobile"""
        event = _event(test_db_session, NOW + timedelta(days=3))
        booking = _booking(test_db_session, customer_without_mobile, event)

        with pytest.raises(ReminderError, match="mobile"):
            send_booking_reminder(test_db_session, booking.id, ReminderKind.SEVEN_DAY, now=NOW)
