"""
Domain Schemas for Library Lending

Each Pydantic model maps to a MongoDB collection.
Collection name is the lowercase of the class name:
- Book -> "book"
- Member -> "member"

LendingOutcome is not persisted; it is the result of a checkout or return.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BookStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    CHECKED_OUT = "CHECKED_OUT"


class MembershipType(str, Enum):
    """Membership tier. Drives checkout limit, loan period and late fee rate."""

    REGULAR = "REGULAR"
    PREMIUM = "PREMIUM"
    STUDENT = "STUDENT"

    @property
    def checkout_limit(self) -> int:
        return TIER_POLICY[self]["checkout_limit"]

    @property
    def loan_period_days(self) -> int:
        return TIER_POLICY[self]["loan_period_days"]


TIER_POLICY: Dict[MembershipType, Dict[str, int]] = {
    MembershipType.REGULAR: {"checkout_limit": 3, "loan_period_days": 14},
    MembershipType.PREMIUM: {"checkout_limit": 10, "loan_period_days": 30},
    MembershipType.STUDENT: {"checkout_limit": 5, "loan_period_days": 21},
}


class Book(BaseModel):
    id: Optional[str] = Field(None, description="Book ObjectId as string")
    isbn: str = Field(..., min_length=1, description="ISBN identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Author name")
    publication_date: Optional[date] = Field(None, description="Date of publication")
    status: BookStatus = Field(BookStatus.AVAILABLE, description="Lending status")
    checked_out_by: Optional[str] = Field(None, description="Borrower email while checked out")
    due_date: Optional[date] = Field(None, description="Date when the book is due")

    @model_validator(mode="after")
    def check_loan_fields(self) -> "Book":
        on_loan = self.status == BookStatus.CHECKED_OUT
        if on_loan and (self.checked_out_by is None or self.due_date is None):
            raise ValueError("checked out book requires checked_out_by and due_date")
        if not on_loan and (self.checked_out_by is not None or self.due_date is not None):
            raise ValueError("available book cannot carry checked_out_by or due_date")
        return self

    # The loan fields only change together, through these two methods.
    def mark_checked_out(self, member_email: str, due_date: date) -> None:
        if not member_email:
            raise ValueError("member_email cannot be empty")
        self.status = BookStatus.CHECKED_OUT
        self.checked_out_by = member_email
        self.due_date = due_date
        self.check_loan_fields()

    def mark_available(self) -> None:
        self.status = BookStatus.AVAILABLE
        self.checked_out_by = None
        self.due_date = None
        self.check_loan_fields()

    def is_overdue(self, today: date) -> bool:
        return self.due_date is not None and self.due_date < today


class Member(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: Optional[str] = Field(None, description="Member ObjectId as string")
    name: str = Field(..., description="Full name")
    email: str = Field(..., min_length=1, description="Email address")
    membership_type: MembershipType = Field(MembershipType.REGULAR, description="Membership tier")
    books_checked_out: int = Field(0, ge=0, description="Books currently checked out")

    def increment_checked_out(self) -> None:
        self.books_checked_out += 1

    def decrement_checked_out(self) -> None:
        if self.books_checked_out > 0:
            self.books_checked_out -= 1

    def can_checkout_more(self) -> bool:
        return self.books_checked_out < self.membership_type.checkout_limit


class OutcomeStatus(str, Enum):
    SUCCESS = "SUCCESS"
    REJECTED = "REJECTED"


class LendingOutcome(BaseModel):
    """Result of a checkout or return.

    A REJECTED outcome is a normal business answer (book unavailable, limit
    reached, book not on loan), not an error. Lookup failures raise instead.
    """

    status: OutcomeStatus
    message: str
    due_date: Optional[date] = None
    late_fee: Decimal = Decimal("0.00")

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @classmethod
    def success(cls, message: str, **kwargs) -> "LendingOutcome":
        return cls(status=OutcomeStatus.SUCCESS, message=message, **kwargs)

    @classmethod
    def rejected(cls, reason: str) -> "LendingOutcome":
        return cls(status=OutcomeStatus.REJECTED, message=reason)

    def __str__(self) -> str:
        return self.message
