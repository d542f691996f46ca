from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Callable

import structlog

from fees import format_money

logger = structlog.get_logger(__name__)


class NotificationSink(ABC):
    """Abstract base class for member notifications.

    Delivery is fire-and-forget: no method returns anything the workflow
    depends on.
    """

    @abstractmethod
    def notify_checkout(self, member_email: str, book_title: str, due_date: date) -> None:
        pass

    @abstractmethod
    def notify_return(self, member_email: str, book_title: str, late_fee: Decimal) -> None:
        pass

    @abstractmethod
    def notify_overdue(self, member_email: str, book_title: str, due_date: date) -> None:
        pass

    @abstractmethod
    def notify_general(self, member_email: str, subject: str, body: str) -> None:
        pass


class LoggingNotificationSink(NotificationSink):
    """Renders the member message and writes it to the log instead of sending it."""

    def notify_checkout(self, member_email: str, book_title: str, due_date: date) -> None:
        self.notify_general(
            member_email,
            "Book checked out",
            f"You have checked out {book_title}. Due date: {due_date.isoformat()}",
        )

    def notify_return(self, member_email: str, book_title: str, late_fee: Decimal) -> None:
        body = f"You have returned {book_title}"
        if late_fee > 0:
            body += f". Late fee: ${format_money(late_fee)}"
        self.notify_general(member_email, "Book returned", body)

    def notify_overdue(self, member_email: str, book_title: str, due_date: date) -> None:
        self.notify_general(
            member_email,
            "Book overdue",
            f"Your book {book_title} was due on {due_date.isoformat()} and is now overdue.",
        )

    def notify_general(self, member_email: str, subject: str, body: str) -> None:
        logger.info("Sending notification", recipient=member_email, subject=subject, body=body)


class NullNotificationSink(NotificationSink):
    """Used when NOTIFICATIONS_ENABLED is off."""

    def notify_checkout(self, member_email, book_title, due_date):
        pass

    def notify_return(self, member_email, book_title, late_fee):
        pass

    def notify_overdue(self, member_email, book_title, due_date):
        pass

    def notify_general(self, member_email, subject, body):
        pass


def deliver(send: Callable[..., None], *args) -> bool:
    """Call a sink method, logging instead of raising on failure.

    Returns True when the sink accepted the notification.
    """
    try:
        send(*args)
        return True
    except Exception:
        logger.warning("Notification delivery failed", method=getattr(send, "__name__", "?"), exc_info=True)
        return False
