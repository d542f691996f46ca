"""
Test configuration and fixtures
"""

from datetime import date, timedelta
from itertools import count

import pytest

from books import BookManagementService
from main import build_library
from members import MemberService
from notifications import NotificationSink
from schemas import Book, Member, MembershipType

TODAY = date(2025, 3, 15)


class InMemoryBookStore:
    """BookStore kept in a dict. Stores copies so callers must save to persist."""

    def __init__(self):
        self.books = {}
        self._ids = count(1)
        self.fail_on_save = False

    def _copies(self, predicate):
        return [b.model_copy() for b in sorted(self.books.values(), key=lambda b: b.title) if predicate(b)]

    def find_by_isbn(self, isbn):
        for b in self.books.values():
            if b.isbn == isbn:
                return b.model_copy()
        return None

    def find_by_status(self, status):
        return self._copies(lambda b: b.status == status)

    def find_by_due_date_before(self, day):
        return self._copies(lambda b: b.due_date is not None and b.due_date < day)

    def find_by_checked_out_by(self, email):
        return self._copies(lambda b: b.checked_out_by == email)

    def count_by_status(self, status):
        return len(self.find_by_status(status))

    def find_by_title_containing_ignore_case(self, text):
        return self._copies(lambda b: text.lower() in b.title.lower())

    def find_by_author(self, author):
        return self._copies(lambda b: b.author == author)

    def save(self, book):
        if self.fail_on_save:
            raise RuntimeError("book store unavailable")
        if book.id is None:
            book = book.model_copy(update={"id": str(next(self._ids))})
        self.books[book.id] = book.model_copy()
        return book

    def find_all(self):
        return self._copies(lambda b: True)

    def delete_by_id(self, book_id):
        self.books.pop(book_id, None)


class InMemoryMemberStore:
    def __init__(self):
        self.members = {}
        self._ids = count(1)
        self.fail_on_save = False

    def _copies(self, predicate):
        return [m.model_copy() for m in sorted(self.members.values(), key=lambda m: m.name) if predicate(m)]

    def find_by_email(self, email):
        for m in self.members.values():
            if m.email == email:
                return m.model_copy()
        return None

    def find_by_membership_type(self, membership_type):
        return self._copies(lambda m: m.membership_type == membership_type)

    def find_by_books_checked_out_greater_than(self, n):
        return self._copies(lambda m: m.books_checked_out > n)

    def save(self, member):
        if self.fail_on_save:
            raise RuntimeError("member store unavailable")
        if member.id is None:
            member = member.model_copy(update={"id": str(next(self._ids))})
        self.members[member.id] = member.model_copy()
        return member

    def find_all(self):
        return self._copies(lambda m: True)

    def count(self):
        return len(self.members)

    def delete_by_id(self, member_id):
        self.members.pop(member_id, None)


class RecordingNotificationSink(NotificationSink):
    def __init__(self):
        self.sent = []
        self.fail = False

    def _record(self, *args):
        if self.fail:
            raise ConnectionError("mail server down")
        self.sent.append(args)

    def notify_checkout(self, member_email, book_title, due_date):
        self._record("checkout", member_email, book_title, due_date)

    def notify_return(self, member_email, book_title, late_fee):
        self._record("return", member_email, book_title, late_fee)

    def notify_overdue(self, member_email, book_title, due_date):
        self._record("overdue", member_email, book_title, due_date)

    def notify_general(self, member_email, subject, body):
        self._record("general", member_email, subject, body)


@pytest.fixture
def book_store():
    store = InMemoryBookStore()
    store.save(Book(isbn="111", title="Clean Code", author="Robert C. Martin"))
    store.save(Book(isbn="222", title="Design Patterns", author="GoF"))
    store.save(Book(isbn="333", title="Effective Java", author="Joshua Bloch"))
    store.save(Book(isbn="444", title="Refactoring", author="Martin Fowler"))
    return store


@pytest.fixture
def member_store():
    store = InMemoryMemberStore()
    store.save(Member(name="Ada", email="ada@example.com"))
    store.save(Member(name="Grace", email="grace@example.com", membership_type=MembershipType.PREMIUM))
    store.save(Member(name="Linus", email="linus@example.com", membership_type=MembershipType.STUDENT))
    return store


@pytest.fixture
def notifier():
    return RecordingNotificationSink()


@pytest.fixture
def library(book_store, member_store, notifier):
    return build_library(book_store, member_store, notifier, today=lambda: TODAY)


@pytest.fixture
def book_service(book_store):
    return BookManagementService(book_store)


@pytest.fixture
def member_service(member_store):
    return MemberService(member_store)


def lend(book_store, member_store, isbn, email, due_date):
    """Put a book on loan directly in the stores, bypassing the workflow."""
    book = book_store.find_by_isbn(isbn)
    book.mark_checked_out(email, due_date)
    book_store.save(book)
    member = member_store.find_by_email(email)
    member.increment_checked_out()
    member_store.save(member)


@pytest.fixture
def overdue_loan(book_store, member_store):
    """Clean Code lent to Ada, five days overdue."""
    lend(book_store, member_store, "111", "ada@example.com", TODAY - timedelta(days=5))
    return book_store.find_by_isbn("111")
