from datetime import date
from typing import Callable, List

from exceptions import InvalidArgumentError
from repositories import BookStore
from schemas import Book, BookStatus


class BookSearchService:
    def __init__(self, store: BookStore, today: Callable[[], date] = date.today):
        self.store = store
        self.today = today

    def search_by_title(self, title: str) -> List[Book]:
        """Case-insensitive partial match on the title."""
        return self.store.find_by_title_containing_ignore_case(title)

    def search_by_author(self, author: str) -> List[Book]:
        return self.store.find_by_author(author)

    def search_by_isbn(self, isbn: str) -> List[Book]:
        book = self.store.find_by_isbn(isbn)
        return [book] if book is not None else []

    def get_available_books(self) -> List[Book]:
        return self.store.find_by_status(BookStatus.AVAILABLE)

    def get_checked_out_books(self) -> List[Book]:
        return self.store.find_by_status(BookStatus.CHECKED_OUT)

    def get_overdue_books(self) -> List[Book]:
        return self.store.find_by_due_date_before(self.today())

    def get_books_by_member(self, member_email: str) -> List[Book]:
        return self.store.find_by_checked_out_by(member_email)

    def search_books(self, search_term: str, search_type: str) -> List[Book]:
        """
        Dispatch to a search by type.

        search_type is one of "title", "author" or "isbn", matched
        case-insensitively.

        Raises:
            InvalidArgumentError: unknown search type.
        """
        searches = {
            "title": self.search_by_title,
            "author": self.search_by_author,
            "isbn": self.search_by_isbn,
        }
        search = searches.get(search_type.lower())
        if search is None:
            raise InvalidArgumentError(f"Invalid search type: {search_type}")
        return search(search_term)
