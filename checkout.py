"""
Checkout and return workflow.

A checkout or return touches two records: the book and the member. The book
is written first; if the member write then fails the book is written back to
its previous state before the error propagates, so the pair changes together
or not at all.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Optional

import structlog

from books import BookManagementService
from fees import ZERO_FEE, calculate_late_fee, days_late, format_money
from members import MemberService
from notifications import NotificationSink, deliver
from schemas import Book, BookStatus, LendingOutcome, Member

logger = structlog.get_logger(__name__)

BOOK_NOT_AVAILABLE = "Book is not available"
CHECKOUT_LIMIT_REACHED = "Member has reached checkout limit"
BOOK_NOT_CHECKED_OUT = "Book is not checked out"


class CheckoutService:
    def __init__(
        self,
        books: BookManagementService,
        members: MemberService,
        notifier: NotificationSink,
        today: Callable[[], date] = date.today,
    ):
        self.books = books
        self.members = members
        self.notifier = notifier
        self.today = today

    def checkout_book(self, isbn: str, member_email: str) -> LendingOutcome:
        """
        Check out a book for a member.

        Raises:
            NotFoundError: unknown ISBN or member email.
        """
        book = self.books.find_by_isbn_or_raise(isbn)
        member = self.members.find_by_email_or_raise(member_email)

        rejection = self.validate_checkout_eligibility(book, member)
        if rejection is not None:
            logger.info("Checkout rejected", isbn=isbn, email=member_email, reason=rejection)
            return LendingOutcome.rejected(rejection)

        due_date = self.today() + timedelta(days=member.membership_type.loan_period_days)

        previous = book.model_copy()
        self.books.checkout_book(book, member.email, due_date)
        self._update_member_or_restore(previous, self.members.increment_books_checked_out, member)

        deliver(self.notifier.notify_checkout, member.email, book.title, due_date)

        logger.info("Checkout successful", isbn=isbn, email=member.email, due_date=due_date.isoformat())
        return LendingOutcome.success(
            f"Book checked out successfully. Due date: {due_date.isoformat()}",
            due_date=due_date,
        )

    def return_book(self, isbn: str) -> LendingOutcome:
        """
        Return a checked out book and charge any late fee.

        Raises:
            NotFoundError: unknown ISBN, or the borrower recorded on the book
                no longer exists. In the latter case nothing is modified.
        """
        book = self.books.find_by_isbn_or_raise(isbn)

        if book.status != BookStatus.CHECKED_OUT:
            logger.info("Return rejected", isbn=isbn, reason=BOOK_NOT_CHECKED_OUT)
            return LendingOutcome.rejected(BOOK_NOT_CHECKED_OUT)

        member = self.members.find_by_email_or_raise(book.checked_out_by)

        late_fee = self.calculate_late_fee(book, member)

        previous = book.model_copy()
        self.books.return_book(book)
        self._update_member_or_restore(previous, self.members.decrement_books_checked_out, member)

        deliver(self.notifier.notify_return, member.email, book.title, late_fee)

        logger.info("Return successful", isbn=isbn, email=member.email, late_fee=str(late_fee))
        if late_fee > 0:
            return LendingOutcome.success(
                f"Book returned. Late fee: ${format_money(late_fee)}",
                late_fee=late_fee,
            )
        return LendingOutcome.success("Book returned successfully")

    def validate_checkout_eligibility(self, book: Book, member: Member) -> Optional[str]:
        """Return the rejection reason, or None when the checkout may proceed."""
        if book.status != BookStatus.AVAILABLE:
            return BOOK_NOT_AVAILABLE
        if member.books_checked_out >= member.membership_type.checkout_limit:
            return CHECKOUT_LIMIT_REACHED
        return None

    def calculate_late_fee(self, book: Book, member: Member) -> Decimal:
        if book.due_date is None:
            return ZERO_FEE
        return calculate_late_fee(member.membership_type, days_late(book.due_date, self.today()))

    def _update_member_or_restore(self, previous: Book, update: Callable[[Member], Member], member: Member) -> None:
        try:
            update(member)
        except Exception:
            logger.error("Member update failed, restoring book", isbn=previous.isbn, email=member.email)
            try:
                self.books.save(previous)
            except Exception:
                logger.error("Book restore failed", isbn=previous.isbn, exc_info=True)
            raise
