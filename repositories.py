"""
Book and member stores.

The services depend on the BookStore / MemberStore protocols; the Mongo
classes below are the production implementations.
"""

import re
from datetime import date, datetime, timezone
from typing import List, Optional, Protocol

import structlog
from pymongo import ASCENDING
from pymongo.database import Database

from database import create_document, serialize, to_document, to_object_id
from schemas import Book, BookStatus, Member, MembershipType

logger = structlog.get_logger(__name__)


class BookStore(Protocol):
    def find_by_isbn(self, isbn: str) -> Optional[Book]: ...

    def find_by_status(self, status: BookStatus) -> List[Book]: ...

    def find_by_due_date_before(self, day: date) -> List[Book]: ...

    def find_by_checked_out_by(self, email: str) -> List[Book]: ...

    def count_by_status(self, status: BookStatus) -> int: ...

    def find_by_title_containing_ignore_case(self, text: str) -> List[Book]: ...

    def find_by_author(self, author: str) -> List[Book]: ...

    def save(self, book: Book) -> Book: ...

    def find_all(self) -> List[Book]: ...

    def delete_by_id(self, book_id: str) -> None: ...


class MemberStore(Protocol):
    def find_by_email(self, email: str) -> Optional[Member]: ...

    def find_by_membership_type(self, membership_type: MembershipType) -> List[Member]: ...

    def find_by_books_checked_out_greater_than(self, n: int) -> List[Member]: ...

    def save(self, member: Member) -> Member: ...

    def find_all(self) -> List[Member]: ...

    def count(self) -> int: ...

    def delete_by_id(self, member_id: str) -> None: ...


class _MongoStore:
    collection_name: str
    sort_field: str

    def __init__(self, db: Database, collection_name: Optional[str] = None):
        self.db = db
        if collection_name:
            self.collection_name = collection_name
        self.collection = db[self.collection_name]

    def _find(self, filter_dict: dict) -> List[dict]:
        docs = self.collection.find(filter_dict).sort(self.sort_field, ASCENDING)
        return [serialize(d) for d in docs]

    def _save(self, model):
        if model.id is None:
            new_id = create_document(self.db, self.collection_name, model)
            logger.debug("Document inserted", collection=self.collection_name, id=new_id)
            return model.model_copy(update={"id": new_id})
        doc = to_document(model)
        doc["updated_at"] = datetime.now(timezone.utc)
        result = self.collection.update_one({"_id": to_object_id(model.id)}, {"$set": doc})
        if result.matched_count == 0:
            logger.warning("Save matched no document", collection=self.collection_name, id=model.id)
        return model

    def _delete(self, doc_id: str) -> None:
        result = self.collection.delete_one({"_id": to_object_id(doc_id)})
        if result.deleted_count == 0:
            logger.warning("Delete matched no document", collection=self.collection_name, id=doc_id)


class MongoBookStore(_MongoStore):
    collection_name = "book"
    sort_field = "title"

    def ensure_indexes(self) -> None:
        self.collection.create_index("isbn", unique=True)
        self.collection.create_index("status")
        self.collection.create_index("checked_out_by")

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        doc = self.collection.find_one({"isbn": isbn})
        return Book.model_validate(serialize(doc)) if doc else None

    def find_by_status(self, status: BookStatus) -> List[Book]:
        return [Book.model_validate(d) for d in self._find({"status": BookStatus(status).value})]

    def find_by_due_date_before(self, day: date) -> List[Book]:
        # ISO dates compare correctly as strings; null due dates never match $lt.
        return [Book.model_validate(d) for d in self._find({"due_date": {"$lt": day.isoformat()}})]

    def find_by_checked_out_by(self, email: str) -> List[Book]:
        return [Book.model_validate(d) for d in self._find({"checked_out_by": email})]

    def count_by_status(self, status: BookStatus) -> int:
        return self.collection.count_documents({"status": BookStatus(status).value})

    def find_by_title_containing_ignore_case(self, text: str) -> List[Book]:
        filter_dict = {"title": {"$regex": re.escape(text), "$options": "i"}}
        return [Book.model_validate(d) for d in self._find(filter_dict)]

    def find_by_author(self, author: str) -> List[Book]:
        return [Book.model_validate(d) for d in self._find({"author": author})]

    def save(self, book: Book) -> Book:
        return self._save(book)

    def find_all(self) -> List[Book]:
        return [Book.model_validate(d) for d in self._find({})]

    def delete_by_id(self, book_id: str) -> None:
        self._delete(book_id)


class MongoMemberStore(_MongoStore):
    collection_name = "member"
    sort_field = "name"

    def ensure_indexes(self) -> None:
        self.collection.create_index("email", unique=True)

    def find_by_email(self, email: str) -> Optional[Member]:
        doc = self.collection.find_one({"email": email})
        return Member.model_validate(serialize(doc)) if doc else None

    def find_by_membership_type(self, membership_type: MembershipType) -> List[Member]:
        filter_dict = {"membership_type": MembershipType(membership_type).value}
        return [Member.model_validate(d) for d in self._find(filter_dict)]

    def find_by_books_checked_out_greater_than(self, n: int) -> List[Member]:
        return [Member.model_validate(d) for d in self._find({"books_checked_out": {"$gt": n}})]

    def save(self, member: Member) -> Member:
        return self._save(member)

    def find_all(self) -> List[Member]:
        return [Member.model_validate(d) for d in self._find({})]

    def count(self) -> int:
        return self.collection.count_documents({})

    def delete_by_id(self, member_id: str) -> None:
        self._delete(member_id)
