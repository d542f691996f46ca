"""
Plain-text library reports.

Every report starts with an upper-case title and an "=" underline, followed
by one fact per line.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List

from books import BookManagementService
from exceptions import InvalidArgumentError
from members import MemberService
from schemas import BookStatus

RATE_Q = Decimal("0.1")


def _header(title: str, underline: int) -> List[str]:
    return [title, "=" * underline]


def _rate(part: int, whole: int) -> Decimal:
    """Percentage to one decimal place, ties rounded up."""
    if whole <= 0:
        return Decimal("0.0")
    return (Decimal(part) * 100 / Decimal(whole)).quantize(RATE_Q, rounding=ROUND_HALF_UP)


class ReportService:
    def __init__(
        self,
        books: BookManagementService,
        members: MemberService,
        today: Callable[[], date] = date.today,
    ):
        self.books = books
        self.members = members
        self.today = today

    def generate_overdue_books_report(self) -> str:
        overdue = self.books.find_overdue_books(self.today())
        lines = _header("OVERDUE BOOKS REPORT", 20)
        if not overdue:
            lines.append("No overdue books found.")
        for book in overdue:
            lines.append(
                f"{book.title} by {book.author} - Due: {book.due_date.isoformat()}"
                f" - Checked out by: {book.checked_out_by}"
            )
        lines.append("")
        lines.append(f"Total overdue books: {len(overdue)}")
        return "\n".join(lines) + "\n"

    def generate_available_books_report(self) -> str:
        available = self.books.count_by_status(BookStatus.AVAILABLE)
        total = len(self.books.find_all())
        lines = _header("AVAILABLE BOOKS REPORT", 21)
        lines.append(f"Available books: {available}")
        lines.append(f"Total books: {total}")
        lines.append(f"Checkout rate: {_rate(total - available, total)}%")
        return "\n".join(lines) + "\n"

    def generate_members_report(self) -> str:
        total = self.members.count()
        with_books = len(self.members.find_members_with_checked_out_books())
        lines = _header("MEMBERS REPORT", 14)
        lines.append(f"Total members: {total}")
        lines.append(f"Members with checked out books: {with_books}")
        lines.append(f"Active member rate: {_rate(with_books, total)}%")
        return "\n".join(lines) + "\n"

    def generate_library_summary_report(self) -> str:
        today = self.today()
        lines = _header("LIBRARY SUMMARY REPORT", 22)
        lines.append(f"Total books: {len(self.books.find_all())}")
        lines.append(f"Available books: {self.books.count_by_status(BookStatus.AVAILABLE)}")
        lines.append(f"Checked out books: {self.books.count_by_status(BookStatus.CHECKED_OUT)}")
        lines.append(f"Overdue books: {len(self.books.find_overdue_books(today))}")
        lines.append(f"Total members: {self.members.count()}")
        lines.append(f"Report generated on: {today.isoformat()}")
        return "\n".join(lines) + "\n"

    def generate_report(self, report_type: str) -> str:
        """
        Render a report by name: "overdue", "available", "members" or
        "summary" (case-insensitive).

        Raises:
            InvalidArgumentError: unknown report type.
        """
        reports = {
            "overdue": self.generate_overdue_books_report,
            "available": self.generate_available_books_report,
            "members": self.generate_members_report,
            "summary": self.generate_library_summary_report,
        }
        report = reports.get(report_type.lower())
        if report is None:
            raise InvalidArgumentError(f"Invalid report type: {report_type}")
        return report()
