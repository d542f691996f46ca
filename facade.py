"""
Single entry point for callers.

LibraryFacade only delegates: checkout/return to CheckoutService, searches to
BookSearchService, reports to ReportService, plain lookups to the book and
member services.
"""

from datetime import date
from typing import Callable, List

import structlog

from books import BookManagementService
from checkout import CheckoutService
from exceptions import NotFoundError
from members import MemberService
from notifications import NotificationSink, deliver
from reports import ReportService
from schemas import Book, LendingOutcome
from search import BookSearchService

logger = structlog.get_logger(__name__)


class LibraryFacade:
    def __init__(
        self,
        books: BookManagementService,
        members: MemberService,
        checkout: CheckoutService,
        search: BookSearchService,
        reports: ReportService,
        notifier: NotificationSink,
        today: Callable[[], date] = date.today,
    ):
        self.books = books
        self.members = members
        self.checkout = checkout
        self.search = search
        self.reports = reports
        self.notifier = notifier
        self.today = today

    def checkout_book(self, isbn: str, member_email: str) -> LendingOutcome:
        return self.checkout.checkout_book(isbn, member_email)

    def return_book(self, isbn: str) -> LendingOutcome:
        return self.checkout.return_book(isbn)

    def search_books(self, search_term: str, search_type: str) -> List[Book]:
        return self.search.search_books(search_term, search_type)

    def generate_report(self, report_type: str) -> str:
        return self.reports.generate_report(report_type)

    def get_available_books(self) -> List[Book]:
        return self.books.find_available_books()

    def get_overdue_books(self) -> List[Book]:
        return self.books.find_overdue_books(self.today())

    def get_member_books(self, member_email: str) -> List[Book]:
        return self.books.find_books_by_member(member_email)

    def can_member_checkout_more_books(self, member_email: str) -> bool:
        # Unknown members are never eligible.
        try:
            member = self.members.find_by_email_or_raise(member_email)
        except NotFoundError:
            return False
        return member.can_checkout_more()

    def get_library_statistics(self) -> str:
        return self.reports.generate_library_summary_report()

    def send_overdue_notices(self) -> int:
        """Notify the borrower of every overdue book. Returns the number sent."""
        today = self.today()
        sent = 0
        for book in self.books.find_overdue_books(today):
            if book.checked_out_by is None or not book.is_overdue(today):
                continue
            if deliver(self.notifier.notify_overdue, book.checked_out_by, book.title, book.due_date):
                sent += 1
        logger.info("Overdue notices sent", count=sent)
        return sent
