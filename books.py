from datetime import date
from typing import List, Optional

import structlog

from exceptions import InvalidArgumentError, NotFoundError
from repositories import BookStore
from schemas import Book, BookStatus

logger = structlog.get_logger(__name__)


class BookManagementService:
    """Book lookups and the book side of checkout/return."""

    def __init__(self, store: BookStore):
        self.store = store

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        return self.store.find_by_isbn(isbn)

    def find_by_isbn_or_raise(self, isbn: str) -> Book:
        book = self.store.find_by_isbn(isbn)
        if book is None:
            logger.warning("Book not found", isbn=isbn)
            raise NotFoundError("Book", isbn)
        return book

    def find_by_status(self, status: BookStatus) -> List[Book]:
        return self.store.find_by_status(status)

    def find_available_books(self) -> List[Book]:
        return self.store.find_by_status(BookStatus.AVAILABLE)

    def find_checked_out_books(self) -> List[Book]:
        return self.store.find_by_status(BookStatus.CHECKED_OUT)

    def find_overdue_books(self, today: date) -> List[Book]:
        return self.store.find_by_due_date_before(today)

    def find_books_by_member(self, member_email: str) -> List[Book]:
        return self.store.find_by_checked_out_by(member_email)

    def count_by_status(self, status: BookStatus) -> int:
        return self.store.count_by_status(status)

    def find_all(self) -> List[Book]:
        return self.store.find_all()

    def save(self, book: Book) -> Book:
        return self.store.save(book)

    def add_book(self, book: Book) -> Book:
        if self.store.find_by_isbn(book.isbn) is not None:
            raise InvalidArgumentError(f"Book already exists: isbn={book.isbn}")
        saved = self.store.save(book)
        logger.info("Book added", isbn=book.isbn, title=book.title)
        return saved

    def is_book_available(self, isbn: str) -> bool:
        book = self.store.find_by_isbn(isbn)
        return book is not None and book.status == BookStatus.AVAILABLE

    def checkout_book(self, book: Book, member_email: str, due_date: date) -> Book:
        book.mark_checked_out(member_email, due_date)
        return self.store.save(book)

    def return_book(self, book: Book) -> Book:
        book.mark_available()
        return self.store.save(book)

    def delete_by_id(self, book_id: str) -> None:
        self.store.delete_by_id(book_id)
