"""
Tests for notification sinks.
"""

from datetime import date
from decimal import Decimal

from structlog.testing import capture_logs

from notifications import LoggingNotificationSink, NullNotificationSink, deliver


class TestLoggingNotificationSink:
    def test_checkout_message(self):
        with capture_logs() as logs:
            LoggingNotificationSink().notify_checkout("ada@example.com", "Clean Code", date(2025, 3, 29))

        assert logs[0]["recipient"] == "ada@example.com"
        assert logs[0]["subject"] == "Book checked out"
        assert logs[0]["body"] == "You have checked out Clean Code. Due date: 2025-03-29"

    def test_return_message_with_fee(self):
        with capture_logs() as logs:
            LoggingNotificationSink().notify_return("ada@example.com", "Clean Code", Decimal("2.5"))
        assert logs[0]["body"] == "You have returned Clean Code. Late fee: $2.50"

    def test_return_message_without_fee(self):
        with capture_logs() as logs:
            LoggingNotificationSink().notify_return("ada@example.com", "Clean Code", Decimal("0.00"))
        assert logs[0]["body"] == "You have returned Clean Code"

    def test_overdue_message(self):
        with capture_logs() as logs:
            LoggingNotificationSink().notify_overdue("ada@example.com", "Clean Code", date(2025, 3, 10))
        assert logs[0]["subject"] == "Book overdue"
        assert logs[0]["body"] == "Your book Clean Code was due on 2025-03-10 and is now overdue."

    def test_general_message(self):
        with capture_logs() as logs:
            LoggingNotificationSink().notify_general("ada@example.com", "Hours", "Closed Monday")
        assert logs == [
            {
                "event": "Sending notification",
                "log_level": "info",
                "recipient": "ada@example.com",
                "subject": "Hours",
                "body": "Closed Monday",
            }
        ]


class TestDeliver:
    def test_success(self):
        calls = []
        assert deliver(lambda *args: calls.append(args), "a", "b") is True
        assert calls == [("a", "b")]

    def test_failure_is_logged_not_raised(self):
        def broken(*args):
            raise ConnectionError("mail server down")

        with capture_logs() as logs:
            assert deliver(broken, "ada@example.com") is False

        assert logs[0]["event"] == "Notification delivery failed"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["method"] == "broken"

    def test_null_sink_accepts_everything(self):
        sink = NullNotificationSink()
        assert deliver(sink.notify_checkout, "a@example.com", "T", date(2025, 1, 1))
        assert deliver(sink.notify_general, "a@example.com", "S", "B")
