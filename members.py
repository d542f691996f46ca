from typing import List, Optional

import structlog

from exceptions import InvalidArgumentError, NotFoundError
from repositories import MemberStore
from schemas import Member, MembershipType

logger = structlog.get_logger(__name__)


class MemberService:
    """Member lookups and the member side of checkout/return."""

    def __init__(self, store: MemberStore):
        self.store = store

    def find_by_email(self, email: str) -> Optional[Member]:
        return self.store.find_by_email(email)

    def find_by_email_or_raise(self, email: str) -> Member:
        member = self.store.find_by_email(email)
        if member is None:
            logger.warning("Member not found", email=email)
            raise NotFoundError("Member", email)
        return member

    def find_all(self) -> List[Member]:
        return self.store.find_all()

    def find_by_membership_type(self, membership_type: MembershipType) -> List[Member]:
        return self.store.find_by_membership_type(membership_type)

    def find_members_with_checked_out_books(self) -> List[Member]:
        return self.store.find_by_books_checked_out_greater_than(0)

    def save(self, member: Member) -> Member:
        return self.store.save(member)

    def create_member(
        self,
        name: str,
        email: str,
        membership_type: MembershipType = MembershipType.REGULAR,
    ) -> Member:
        if self.exists_by_email(email):
            raise InvalidArgumentError(f"Member already exists: email={email}")
        member = self.store.save(Member(name=name, email=email, membership_type=membership_type))
        logger.info("Member created", email=email, membership_type=member.membership_type.value)
        return member

    def update_books_checked_out(self, member: Member, new_count: int) -> Member:
        member.books_checked_out = new_count
        return self.store.save(member)

    def increment_books_checked_out(self, member: Member) -> Member:
        member.increment_checked_out()
        return self.store.save(member)

    def decrement_books_checked_out(self, member: Member) -> Member:
        member.decrement_checked_out()
        return self.store.save(member)

    def update_membership_type(self, member: Member, membership_type: MembershipType) -> Member:
        member.membership_type = membership_type
        return self.store.save(member)

    def delete_by_id(self, member_id: str) -> None:
        self.store.delete_by_id(member_id)

    def count(self) -> int:
        return self.store.count()

    def exists_by_email(self, email: str) -> bool:
        return self.store.find_by_email(email) is not None
